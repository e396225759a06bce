import base64
import json
import logging
from decimal import Decimal, InvalidOperation
from functools import lru_cache
from typing import Iterable, Tuple

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from finboard.config import settings
from finboard.domain import Kind, RawTransaction, Transaction
from finboard.errors import DecryptionFailure
from finboard.functional import pipe, validate_transaction

logger = logging.getLogger(__name__)

_FIELDS = ("date", "amount", "category", "kind")


@lru_cache(maxsize=32)
def _derive(owner_id: str, salt: str, iterations: int) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=salt.encode("utf-8"),
        iterations=iterations,
    )
    return base64.urlsafe_b64encode(kdf.derive(owner_id.encode("utf-8")))


def derive_key(owner_id: str) -> bytes:
    """Fernet key for an owner, derived from the owner identifier."""
    return _derive(owner_id, settings.KDF_SALT, settings.KDF_ITERATIONS)


def encrypt_transaction(t: Transaction, owner_id: str) -> RawTransaction:
    body = {
        "date": t.date,
        "amount": str(t.amount),
        "category": t.category,
        "kind": t.kind.value,
    }
    token = Fernet(derive_key(owner_id)).encrypt(json.dumps(body).encode("utf-8"))
    return RawTransaction(id=t.id, owner_id=owner_id, payload=token.decode("ascii"))


def _open(raw: RawTransaction, owner_id: str) -> bytes:
    if not isinstance(raw.payload, str):
        raise DecryptionFailure(f"Record {raw.id} has no readable payload", raw.id)
    try:
        return Fernet(derive_key(owner_id)).decrypt(raw.payload.encode("ascii"))
    except (InvalidToken, UnicodeEncodeError) as e:
        raise DecryptionFailure(
            f"Record {raw.id} does not decrypt under the owner's key", raw.id
        ) from e


def _parse(raw: RawTransaction, plaintext: bytes) -> dict:
    try:
        body = json.loads(plaintext.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DecryptionFailure(f"Record {raw.id} is not valid JSON", raw.id) from e
    if not isinstance(body, dict) or any(f not in body for f in _FIELDS):
        raise DecryptionFailure(f"Record {raw.id} is missing fields", raw.id)
    return body


def _build(raw: RawTransaction, body: dict) -> Transaction:
    try:
        amount = Decimal(str(body["amount"]))
        kind = Kind(body["kind"])
    except (InvalidOperation, ValueError) as e:
        raise DecryptionFailure(f"Record {raw.id} has a malformed amount or kind", raw.id) from e
    if not amount.is_finite():
        raise DecryptionFailure(f"Record {raw.id} has a non-finite amount", raw.id)
    return Transaction(
        id=raw.id,
        owner_id=raw.owner_id,
        date=str(body["date"]),
        amount=amount,
        category=str(body["category"]),
        kind=kind,
    )


def decrypt_transaction(raw: RawTransaction, owner_id: str) -> Transaction:
    if raw.owner_id != owner_id:
        raise DecryptionFailure(
            f"Record {raw.id} belongs to another owner", raw.id
        )
    result = pipe(
        raw,
        lambda r: _open(r, owner_id),
        lambda plain: _parse(raw, plain),
        lambda body: _build(raw, body),
        lambda t: validate_transaction(t, owner_id),
    )
    if result.is_left():
        raise DecryptionFailure(result.get_error()["message"], raw.id)
    return result.get_or_else(None)


def decrypt_transactions(
    raws: Iterable[RawTransaction], owner_id: str
) -> Tuple[Transaction, ...]:
    """Decrypt every record or none: the first bad record aborts the whole call."""
    try:
        return tuple(decrypt_transaction(r, owner_id) for r in raws)
    except DecryptionFailure as e:
        logger.error("Decryption aborted at record %s: %s", e.record_id, e)
        raise

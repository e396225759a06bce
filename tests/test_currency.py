from decimal import Decimal

import pytest

from finboard.currency import format_amount, resolve
from finboard.errors import ConfigurationFailure


def test_resolve_known_codes():
    assert resolve("eur") == "€"
    assert resolve("usd") == "$"


@pytest.mark.parametrize("code", ["gbp", "EUR", "", None])
def test_resolve_unknown_code_is_configuration_failure(code):
    with pytest.raises(ConfigurationFailure):
        resolve(code)


def test_format_rounds_only_at_display():
    assert format_amount(Decimal("1234.005"), "€") == "€1,234.01"
    assert format_amount(Decimal("-20"), "$") == "-$20.00"
    assert format_amount(Decimal("0.004"), "$") == "$0.00"

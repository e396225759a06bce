"""Dashboard configuration"""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Dashboard settings, overridable through FINBOARD_* environment variables"""

    # Demo store
    SEED_PATH: str = "data/seed.json"
    OWNER_ID: str = "demo-user"

    # Display
    DEFAULT_CURRENCY: str = "eur"
    DEFAULT_PERIOD: str = "month"
    LAST_TRANSACTIONS_LIMIT: int = 10

    # Key derivation for stored records
    KDF_SALT: str = "finboard-transactions-v1"
    KDF_ITERATIONS: int = 390_000

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="FINBOARD_",
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )


settings = Settings()

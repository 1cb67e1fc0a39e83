from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="BOOKER_")

    app_name: str = "Booker"
    debug: bool = False

    database_url: str = "sqlite:///booker.db"

    # Byte store keys, one for the collection and one for the credential
    collection_key: str = "booker.collection.v1"
    api_key_storage_key: str = "booker.api_key.v1"

    api_key_prefix: str = "booker_"
    api_key_bytes: int = 32

    default_sort_key: str = "number"


settings = Settings()


# =============================================================================
# EXPORT ENVELOPE
# =============================================================================

# Schema version written into every export file
EXPORT_VERSION = 1

# Export filename, date is YYYY-MM-DD (UTC)
EXPORT_FILENAME_TEMPLATE = "{app}-export-{date}.json"

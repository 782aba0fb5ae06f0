from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_ALLOWED_EXTENSIONS = [".ofx", ".qfx"]


def _normalize_extensions(value: Any) -> list[str]:
    """Accept comma-separated string or list-like and normalize to '.ext' lowercase."""
    if value is None or value == "":
        return []

    if isinstance(value, str):
        parts = [part.strip() for part in value.split(",")]
    elif isinstance(value, (list, tuple, set)):
        parts = [str(part).strip() for part in value]
    else:
        return []

    normalized = []
    for part in parts:
        if not part:
            continue
        part = part.lower()
        if not part.startswith("."):
            part = f".{part}"
        normalized.append(part)
    return normalized


class Settings(BaseSettings):
    """Application settings."""

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./ledgerdesk.db"

    # Application
    ENV: str = "development"
    APP_NAME: str = "Ledgerdesk"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    # Import uploads
    IMPORT_MAX_FILE_MB: int = 50
    IMPORT_ALLOWED_EXTENSIONS: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: DEFAULT_ALLOWED_EXTENSIONS.copy()
    )

    # Review workspace
    REVIEW_DEFAULT_PAGE_SIZE: int = 50
    REVIEW_MAX_PAGE_SIZE: int = 1000

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("IMPORT_ALLOWED_EXTENSIONS", mode="before")
    @classmethod
    def parse_allowed_extensions(cls, value: Any) -> list[str] | Any:
        """Support comma-separated IMPORT_ALLOWED_EXTENSIONS from environment."""
        return _normalize_extensions(value)


def _validate_settings() -> None:
    """Fail fast on limits that would make the import workflow unusable."""
    if settings.IMPORT_MAX_FILE_MB <= 0:
        raise ValueError("IMPORT_MAX_FILE_MB must be positive.")

    if settings.REVIEW_DEFAULT_PAGE_SIZE <= 0 or settings.REVIEW_MAX_PAGE_SIZE <= 0:
        raise ValueError("Review page sizes must be positive.")

    if settings.REVIEW_DEFAULT_PAGE_SIZE > settings.REVIEW_MAX_PAGE_SIZE:
        raise ValueError("REVIEW_DEFAULT_PAGE_SIZE cannot exceed REVIEW_MAX_PAGE_SIZE.")

    if settings.ENV.lower() == "production" and settings.DATABASE_URL.startswith("sqlite"):
        raise ValueError("Use PostgreSQL in production; sqlite is only for local/dev.")


settings = Settings()


_validate_settings()

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration for the myadm browser.

    Values are loaded from environment variables and `.env`.

    Notes:
    - CLI flags (-h/-u/-p/-P) override the MYADM_DB_* values.
    - EDITOR is read unprefixed, like every other terminal program does.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Server
    MYADM_DB_HOST: str = Field(default="localhost")
    MYADM_DB_PORT: int = Field(default=3306)
    MYADM_DB_USER: str = Field(default="root")
    MYADM_DB_PASS: str = Field(default="")

    # Rendering
    MYADM_FIELD_SEPARATOR: str = Field(default=" | ")
    MYADM_MAX_COLUMN_WIDTH: int = Field(default=19, ge=1)

    # Behaviour
    MYADM_CONFIRM_QUIT: bool = Field(default=True)
    EDITOR: str = Field(default="vi")

    # Diagnostic logging (the terminal belongs to the UI, so logs only go to file)
    MYADM_LOG_DIR: Path = Field(default=Path("_logs"))
    MYADM_LOG_LEVEL: str = Field(default="INFO")
    # Timed rotation retention count (days).
    MYADM_LOG_BACKUP_COUNT: int = Field(default=7)


def load_settings(**overrides) -> Settings:
    s = Settings()
    for key, value in overrides.items():
        # Unset CLI flags arrive as None and must not clobber .env values.
        if value is not None and hasattr(s, key):
            setattr(s, key, value)
    return s

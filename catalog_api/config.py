from __future__ import annotations

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

PRESIGN_EXPIRES_SECONDS = 3600


def normalize_db_url(url: Optional[str]) -> str:
    url = (url or "").strip()
    if not url:
        return ""

    # Heroku-style postgres://
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+psycopg2://", 1)

    # postgresql:// without a driver
    if url.startswith("postgresql://") and "+psycopg2" not in url:
        url = url.replace("postgresql://", "postgresql+psycopg2://", 1)

    return url


def split_csv(value: Optional[str]) -> list[str]:
    return [v.strip() for v in (value or "").split(",") if v.strip()]


class Settings(BaseSettings):
    DATABASE_URL: str = ""

    AWS_REGION: str = "ap-southeast-2"
    AWS_ACCESS_KEY: str = ""
    AWS_SECRET_ACCESS_KEY: str = ""
    S3_BUCKET_NAME: str = ""
    S3_ENDPOINT: str = ""

    ALLOWED_UPLOAD_EXTENSIONS: str = "jpg,jpeg,png,webp,gif"
    VERIFY_UPLOADS: bool = False

    ALLOWED_ORIGINS: str = "*"
    HOST: str = "0.0.0.0"
    PORT: int = 2000
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    def __init__(self, **values):
        super().__init__(**values)
        self.DATABASE_URL = normalize_db_url(self.DATABASE_URL)

    @property
    def upload_extensions(self) -> frozenset[str]:
        return frozenset(e.lower().lstrip(".") for e in split_csv(self.ALLOWED_UPLOAD_EXTENSIONS))

    @property
    def origins(self) -> list[str]:
        return split_csv(self.ALLOWED_ORIGINS) or ["*"]


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings

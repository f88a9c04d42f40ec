import os
import logging
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

logger = logging.getLogger("shared.config")

UPLOAD_BACKENDS = ("local", "cloudinary")


class Settings(BaseModel):
    """Runtime configuration, built once at startup and handed to the app factory."""

    model_config = ConfigDict(frozen=True)

    database_url: Optional[str] = None
    admin_secret: str = ""
    host: str = "0.0.0.0"
    port: int = 5000
    upload_backend: str = "local"
    upload_dir: str = "uploads"
    cloudinary_cloud_name: Optional[str] = None
    cloudinary_api_key: Optional[str] = None
    cloudinary_api_secret: Optional[str] = None
    cloudinary_folder: str = "incidents"
    log_level: str = "INFO"

    @field_validator("upload_backend")
    @classmethod
    def check_backend(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in UPLOAD_BACKENDS:
            raise ValueError(f"UPLOAD_BACKEND must be one of {', '.join(UPLOAD_BACKENDS)}, got '{value}'")
        return value

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        return value.strip().upper()

    @model_validator(mode="after")
    def check_cloudinary(self):
        if self.upload_backend == "cloudinary":
            missing = [
                name for name, val in (
                    ("CLOUDINARY_CLOUD_NAME", self.cloudinary_cloud_name),
                    ("CLOUDINARY_API_KEY", self.cloudinary_api_key),
                    ("CLOUDINARY_API_SECRET", self.cloudinary_api_secret),
                ) if not val
            ]
            if missing:
                raise ValueError(f"Cloudinary env vars missing: {', '.join(missing)}")
        return self

    @classmethod
    def from_env(cls) -> "Settings":
        """Read settings from the process environment (and a .env file if present)."""
        load_dotenv()
        values = {
            "database_url": os.getenv("DATABASE_URL"),
            "admin_secret": os.getenv("ADMIN_SECRET", ""),
            "host": os.getenv("HOST", "0.0.0.0"),
            "port": os.getenv("PORT", "5000"),
            "upload_backend": os.getenv("UPLOAD_BACKEND", "local"),
            "upload_dir": os.getenv("UPLOAD_DIR", "uploads"),
            "cloudinary_cloud_name": os.getenv("CLOUDINARY_CLOUD_NAME"),
            "cloudinary_api_key": os.getenv("CLOUDINARY_API_KEY"),
            "cloudinary_api_secret": os.getenv("CLOUDINARY_API_SECRET"),
            "cloudinary_folder": os.getenv("CLOUDINARY_FOLDER", "incidents"),
            "log_level": os.getenv("LOG_LEVEL", "INFO"),
        }
        settings = cls(**values)
        if not settings.admin_secret:
            logger.warning("ADMIN_SECRET is not set; administrative routes will refuse every request.")
        return settings

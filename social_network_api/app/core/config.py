"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
API starts without any configuration; override them via environment
variables in a real deployment.  Tests construct ``Settings`` directly
and pass the instance to ``create_app``.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Social Network API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")
    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    # Tokens live for a week unless overridden.
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7)))

    # Path to the SQLite database.  Relative paths are resolved against
    # the package root by ``core.db``.
    database_url: str = os.getenv("DATABASE_URL", "social_network.db")

    # Origin allowed by CORS; the SPA dev server by default.
    frontend_url: str = os.getenv("FRONTEND_URL", "http://localhost:8080")

    # Cloudinary credentials for post images.  When any of the three is
    # missing, uploads degrade to "no images" instead of failing.
    cloudinary_cloud_name: str = os.getenv("CLOUDINARY_CLOUD_NAME", "")
    cloudinary_api_key: str = os.getenv("CLOUDINARY_API_KEY", "")
    cloudinary_api_secret: str = os.getenv("CLOUDINARY_API_SECRET", "")
    cloudinary_folder: str = os.getenv("CLOUDINARY_FOLDER", "social-posts")
    upload_timeout: int = int(os.getenv("UPLOAD_TIMEOUT", "30"))

    @property
    def cloudinary_configured(self) -> bool:
        return bool(
            self.cloudinary_cloud_name and self.cloudinary_api_key and self.cloudinary_api_secret
        )


# Instantiate settings once so the default application can import it
# without repeatedly reading environment variables.
settings = Settings()

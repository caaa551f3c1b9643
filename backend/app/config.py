from __future__ import annotations
import os
from pydantic import BaseModel

class Settings(BaseModel):
    environment: str = os.getenv("ENVIRONMENT", "dev")
    app_name: str = os.getenv("APP_NAME", "huntly-moderation-api")
    app_display_name: str = os.getenv("APP_DISPLAY_NAME", "Huntly Photo Moderation")
    app_version: str = os.getenv("APP_VERSION", "0.1.0")
    git_sha: str = os.getenv("GIT_SHA", "dev")
    cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    database_url: str = os.getenv("DATABASE_URL", "postgresql+asyncpg://postgres:postgres@db:5432/huntly_dev")

    # Object storage holding uploaded photos
    s3_endpoint: str = os.getenv("S3_ENDPOINT", "http://minio:9000")
    s3_access_key: str = os.getenv("S3_ACCESS_KEY", "minioadmin")
    s3_secret_key: str = os.getenv("S3_SECRET_KEY", "minioadmin")
    photo_bucket: str = os.getenv("PHOTO_BUCKET", "user-activity-photos")

    # Denial notifications: remote endpoint when set, in-process sender otherwise
    photo_denied_webhook_url: str = os.getenv("PHOTO_DENIED_WEBHOOK_URL", "")
    photo_denied_webhook_token: str = os.getenv("PHOTO_DENIED_WEBHOOK_TOKEN", "")
    notify_timeout_seconds: float = float(os.getenv("NOTIFY_TIMEOUT_SECONDS", "10"))

    # Mailjet transactional email
    mailjet_api_key: str = os.getenv("MAILJET_API_KEY", "")
    mailjet_api_secret: str = os.getenv("MAILJET_API_SECRET", "")
    mailjet_from_email: str = os.getenv("MAILJET_FROM_EMAIL", "")
    mailjet_from_name: str = os.getenv("MAILJET_FROM_NAME", "Huntly Club")
    mailjet_reply_to: str = os.getenv("MAILJET_REPLY_TO", "")

settings = Settings()

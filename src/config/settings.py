from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import Optional

class CommonSettings(BaseSettings):
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

class AuthSettings(BaseSettings):
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    JWT_ISSUER: Optional[str] = None

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

class GCPSettings(BaseSettings):
    GCP_PROJECT_ID: Optional[str] = None
    GOOGLE_APPLICATION_CREDENTIALS: Optional[str] = None
    BUCKET_NAME: str = "video-ingest"
    # Service host of the public URL: https://<BUCKET_NAME>.<PUBLIC_HOST>/<key>
    PUBLIC_HOST: str = "storage.googleapis.com"
    # None waits for the upload indefinitely
    UPLOAD_TIMEOUT: Optional[float] = None

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

class DBSettings(BaseSettings):
    MONGO_URI: str
    DB_NAME: str = "video_ingest"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

class MediaSettings(BaseSettings):
    FFPROBE_BINARY: str = "ffprobe"
    FFMPEG_BINARY: str = "ffmpeg"
    PROBE_TIMEOUT: Optional[float] = None
    NORMALIZE_TIMEOUT: Optional[float] = None
    STAGING_DIR: Optional[str] = None
    MAX_VIDEO_UPLOAD_BYTES: int = 1 << 30
    MAX_THUMBNAIL_UPLOAD_BYTES: int = 10 << 20

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

class Settings(CommonSettings, AuthSettings, GCPSettings, DBSettings, MediaSettings):
    """
    Main settings class.
    """

@lru_cache
def get_settings() -> Settings:
    return Settings()

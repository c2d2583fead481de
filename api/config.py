"""
Environment-aware configuration.
Values come from the process environment, with a .env file loaded first if present.
Development and testing get throwaway token secrets; production has none, so a
missing secret stops the app at start-up.
"""
import os
import tempfile
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()  # Read .env if present


def _bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")  # Set a strong key in production
    DEBUG = False
    TESTING = False
    # CORS: in dev we usually allow '*', in prod supply a comma-separated list in env
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    APP_ENV = os.getenv("APP_ENV", "dev")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///video-platform.db")
    SQL_ECHO = _bool("SQL_ECHO", "false")

    # Tokens
    ACCESS_TOKEN_SECRET = os.getenv("ACCESS_TOKEN_SECRET")
    ACCESS_TOKEN_EXPIRES = timedelta(seconds=int(os.getenv("ACCESS_TOKEN_EXPIRES_SECONDS", "86400")))
    REFRESH_TOKEN_SECRET = os.getenv("REFRESH_TOKEN_SECRET")
    REFRESH_TOKEN_EXPIRES = timedelta(seconds=int(os.getenv("REFRESH_TOKEN_EXPIRES_SECONDS", "864000")))
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ISSUER = os.getenv("JWT_ISSUER", "video-platform-api")
    COOKIE_SECURE = _bool("COOKIE_SECURE", "true")
    COOKIE_SAMESITE = os.getenv("COOKIE_SAMESITE", "Lax")

    # Media
    MEDIA_BACKEND = os.getenv("MEDIA_BACKEND", "local")
    MEDIA_ROOT = os.getenv("MEDIA_ROOT", os.path.abspath("media"))
    MEDIA_BASE_URL = os.getenv("MEDIA_BASE_URL", "/media")
    UPLOAD_TEMP_DIR = os.getenv("UPLOAD_TEMP_DIR", os.path.join(tempfile.gettempdir(), "video-platform-uploads"))
    CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME")
    CLOUDINARY_API_KEY = os.getenv("CLOUDINARY_API_KEY")
    CLOUDINARY_API_SECRET = os.getenv("CLOUDINARY_API_SECRET")
    CLOUDINARY_FOLDER = os.getenv("CLOUDINARY_FOLDER")
    MAX_CONTENT_LENGTH = int(os.getenv("MAX_CONTENT_LENGTH", str(512 * 1024 * 1024)))


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    COOKIE_SECURE = _bool("COOKIE_SECURE", "false")
    ACCESS_TOKEN_SECRET = os.getenv("ACCESS_TOKEN_SECRET", "dev-access-secret-change-me")
    REFRESH_TOKEN_SECRET = os.getenv("REFRESH_TOKEN_SECRET", "dev-refresh-secret-change-me")


class TestingConfig(DevelopmentConfig):
    DEBUG = False
    TESTING = True
    DATABASE_URL = "sqlite://"
    MEDIA_BACKEND = "local"
    COOKIE_SECURE = False
    LOG_LEVEL = "WARNING"


class ProductionConfig(BaseConfig):
    DEBUG = False


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/test/prod).
    """
    env = (name or os.getenv("APP_ENV", "dev")).lower()
    if env in ["prod", "production"]:
        return ProductionConfig
    if env in ["test", "testing"]:
        return TestingConfig
    return DevelopmentConfig

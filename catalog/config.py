import os

BASE_DIR = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "catalog-dev-secret")

    SQLALCHEMY_DATABASE_URI = os.getenv(
        "SQLALCHEMY_DATABASE_URI",
        "sqlite:///" + os.path.join(BASE_DIR, "catalog.db"),
    )

    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "catalog_session")
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = os.getenv("SESSION_COOKIE_SAMESITE", "Lax")
    SESSION_COOKIE_SECURE = os.getenv("SESSION_COOKIE_SECURE", "0") == "1"

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Create missing tables on startup (use `flask db upgrade` in production)
    AUTO_CREATE_TABLES = os.getenv("AUTO_CREATE_TABLES", "1") == "1"

    # Images
    IMAGE_UPLOAD_DIR = os.getenv("IMAGE_UPLOAD_DIR", os.path.join(BASE_DIR, "images"))
    ALLOWED_IMAGE_EXTENSIONS = os.getenv("ALLOWED_IMAGE_EXTENSIONS", "jpg,jpeg,png")
    MAX_IMAGE_SIZE = int(os.getenv("MAX_IMAGE_SIZE", "5242880"))
    # Request body ceiling; kept above MAX_IMAGE_SIZE so oversize images reach the validator
    MAX_CONTENT_LENGTH = int(os.getenv("MAX_CONTENT_LENGTH", str(16 * 1024 * 1024)))

    # Orphan image sweep
    ORPHAN_SWEEP_ENABLED = os.getenv("ORPHAN_SWEEP_ENABLED", "0") == "1"
    ORPHAN_SWEEP_MINUTES = int(os.getenv("ORPHAN_SWEEP_MINUTES", "60"))
    ORPHAN_SWEEP_GRACE_SECONDS = int(os.getenv("ORPHAN_SWEEP_GRACE_SECONDS", "3600"))


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    AUTO_CREATE_TABLES = True
    ORPHAN_SWEEP_ENABLED = False
    LOG_LEVEL = "DEBUG"

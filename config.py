import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key")
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///claimflow.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    WTF_CSRF_ENABLED = False
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Identity is asserted by the upstream provider in trusted headers.
    IDENTITY_USER_ID_HEADER = os.environ.get("IDENTITY_USER_ID_HEADER", "X-Auth-User-Id")
    IDENTITY_EMAIL_HEADER = os.environ.get("IDENTITY_EMAIL_HEADER", "X-Auth-User-Email")
    IDENTITY_FIRST_NAME_HEADER = os.environ.get("IDENTITY_FIRST_NAME_HEADER", "X-Auth-User-First-Name")
    IDENTITY_LAST_NAME_HEADER = os.environ.get("IDENTITY_LAST_NAME_HEADER", "X-Auth-User-Last-Name")
    IDENTITY_IMAGE_HEADER = os.environ.get("IDENTITY_IMAGE_HEADER", "X-Auth-User-Image")

    RECEIPT_UPLOAD_BASE_URL = os.environ.get("RECEIPT_UPLOAD_BASE_URL", "https://storage.local/receipts")
    RECEIPT_UPLOAD_TTL_SECONDS = int(os.environ.get("RECEIPT_UPLOAD_TTL_SECONDS", 900))
    RECEIPT_MAX_BYTES = int(os.environ.get("RECEIPT_MAX_BYTES", 10 * 1024 * 1024))
    RECEIPT_ALLOWED_CONTENT_TYPES = tuple(
        item.strip()
        for item in os.environ.get(
            "RECEIPT_ALLOWED_CONTENT_TYPES", "image/png,image/jpeg,image/gif,image/webp,application/pdf"
        ).split(",")
        if item.strip()
    )


class DevelopmentConfig(Config):
    DEBUG = True
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "DEBUG")


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "testing-secret-key"
    SQLALCHEMY_DATABASE_URI = os.environ.get("TEST_DATABASE_URL", "sqlite://")
    LOG_LEVEL = "WARNING"


class ProductionConfig(Config):
    DEBUG = False


config_by_name = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}

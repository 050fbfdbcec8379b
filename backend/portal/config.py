"""Application settings and validation."""

import os
from pathlib import Path

BASE = Path(__file__).resolve().parent.parent


class Settings:
    ENV: str
    DATABASE_URL: str
    UPLOAD_DIR: str
    MAX_UPLOAD_BYTES: int
    ALLOW_DEV_CORS: bool
    HOST: str
    PORT: int
    LOG_LEVEL: str

    def __init__(self):
        self.ENV = os.getenv("ENV", "dev").lower()
        self.DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{BASE / 'portal.db'}")
        self.UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
        self.MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))  # 5 MB default
        # wide-open CORS is only on by default for local development
        default_cors = "true" if self.ENV == "dev" else "false"
        self.ALLOW_DEV_CORS = os.getenv("ALLOW_DEV_CORS", default_cors).lower() == "true"
        self.HOST = os.getenv("HOST", "0.0.0.0")
        self.PORT = int(os.getenv("PORT", "8081"))
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self._validate()

    def _validate(self):
        if self.MAX_UPLOAD_BYTES <= 0:
            raise RuntimeError("MAX_UPLOAD_BYTES must be a positive number of bytes")
        if not 0 < self.PORT < 65536:
            raise RuntimeError(f"PORT out of range: {self.PORT}")


settings = Settings()

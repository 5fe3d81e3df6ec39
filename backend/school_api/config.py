"""Application settings and validation."""

import os

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class Settings:
    ENV: str
    DATABASE_URL: str
    LOG_LEVEL: str
    ALLOW_DEV_CORS: bool
    EXPOSE_ERROR_DETAILS: bool

    def __init__(self):
        self.ENV = os.getenv("ENV", "dev").lower()
        # Empty means the local `school.db` file, see `database.DEFAULT_DB_URL`.
        self.DATABASE_URL = os.getenv("DATABASE_URL", "")
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.ALLOW_DEV_CORS = os.getenv("ALLOW_DEV_CORS", "true").lower() == "true"
        default_details = "true" if self.ENV == "dev" else "false"
        self.EXPOSE_ERROR_DETAILS = os.getenv("EXPOSE_ERROR_DETAILS", default_details).lower() == "true"
        self._validate()

    def _validate(self):
        if self.LOG_LEVEL not in _LOG_LEVELS:
            raise RuntimeError(f"LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}, got {self.LOG_LEVEL!r}")


settings = Settings()

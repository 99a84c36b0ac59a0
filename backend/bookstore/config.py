from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv
from sqlalchemy.engine import make_url

load_dotenv()

TEST_ENV = "test"
TEST_SUFFIX = "-test"


def _flag(value: str | None) -> bool:
    return (value or "").strip().lower() in ("true", "1", "yes")


def database_uri(url: str, env: str | None = None) -> str:
    """
    Effective store URL for the given environment.
    Under APP_ENV=test the database name gets a "-test" suffix so test runs never
    touch the development/production database. In-memory SQLite is left alone.
    """
    if (env or "").lower() != TEST_ENV:
        return url
    parsed = make_url(url)
    if not parsed.database or parsed.database == ":memory:":
        return url
    if parsed.database.endswith(TEST_SUFFIX):
        return url
    return parsed.set(database=f"{parsed.database}{TEST_SUFFIX}").render_as_string(hide_password=False)


@dataclass
class Settings:
    database_url: str | None = None
    app_env: str = "development"
    frontend_origin: str = "http://localhost:3000"
    log_level: str = "INFO"
    db_echo: bool = False

    @property
    def db_uri(self) -> str:
        if not self.database_url:
            raise RuntimeError("DATABASE_URL not set")
        return database_uri(self.database_url, self.app_env)


def load_settings() -> Settings:
    return Settings(
        database_url=os.getenv("DATABASE_URL"),
        app_env=os.getenv("APP_ENV", "development"),
        frontend_origin=os.getenv("FRONTEND_ORIGIN", "http://localhost:3000"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        db_echo=_flag(os.getenv("DB_ECHO")),
    )

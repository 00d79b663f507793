import os
from dataclasses import dataclass, field, replace

from dotenv import load_dotenv

load_dotenv()

IN_MEMORY_DATABASE_URL = "sqlite://"


def _env(name: str, default: str) -> str:
    return os.getenv(name) or default


@dataclass(frozen=True)
class Settings:
    database_url: str = field(
        default_factory=lambda: _env("DATABASE_URL", IN_MEMORY_DATABASE_URL)
    )
    connect_timeout: float = field(
        default_factory=lambda: float(_env("REQUEST_CONNECT_TIMEOUT", "5"))
    )
    read_timeout: float = field(
        default_factory=lambda: float(_env("REQUEST_READ_TIMEOUT", "5"))
    )
    log_level: str = field(
        default_factory=lambda: _env("LOG_LEVEL", "INFO").upper()
    )

    @property
    def uses_in_memory_db(self) -> bool:
        return self.database_url == IN_MEMORY_DATABASE_URL

    @property
    def sqlalchemy_url(self) -> str:
        # Heroku/Render style URLs carry the bare "postgres" scheme
        url = self.database_url
        for prefix in ("postgres://", "postgresql://"):
            if url.startswith(prefix):
                return "postgresql+psycopg2://" + url[len(prefix):]
        return url

    def with_overrides(self, overrides=None) -> "Settings":
        if not overrides:
            return self
        return replace(self, **overrides)


def load_settings(overrides=None) -> Settings:
    return Settings().with_overrides(overrides)

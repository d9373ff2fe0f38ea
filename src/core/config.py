"""
Application settings, read from environment variables.
A `.env` file in the working directory (or one of its parents) is loaded first; variables already set win.

| variable               | default                    |
|------------------------|----------------------------|
| CHESS_DATABASE_URL     | sqlite:///chess_games.db   |
| CHESS_SQL_ECHO         | false                      |
| CHESS_LOG_LEVEL        | WARNING                    |
| CHESS_DEFAULT_EVENT    | OTB                        |
| CHESS_DEFAULT_SITE     | Chess.com                  |
"""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

import dotenv

DEFAULT_DATABASE_URL = "sqlite:///chess_games.db"
_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    sql_echo: bool = False
    log_level: str = "WARNING"
    default_event: str = "OTB"
    default_site: str = "Chess.com"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            database_url=os.environ.get("CHESS_DATABASE_URL", "").strip()
            or DEFAULT_DATABASE_URL,
            sql_echo=os.environ.get("CHESS_SQL_ECHO", "").strip().lower() in _TRUTHY,
            log_level=os.environ.get("CHESS_LOG_LEVEL", "").strip().upper()
            or "WARNING",
            default_event=os.environ.get("CHESS_DEFAULT_EVENT", "OTB"),
            default_site=os.environ.get("CHESS_DEFAULT_SITE", "Chess.com"),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Settings are read once per process. Call `get_settings.cache_clear()` after changing the environment."""
    dotenv.load_dotenv(dotenv.find_dotenv(usecwd=True))
    return Settings.from_env()


def configure_logging(level: str | None = None) -> None:
    """
    Attach a stream handler to the `src` logger hierarchy.

    Library modules only create module level loggers; the hosting application decides if/where output goes.
    """
    level_name = (level or get_settings().log_level).upper()
    logger = logging.getLogger("src")
    logger.setLevel(level_name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(handler)

"""Environment driven settings for the flight reservation system."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_DB_URL = "sqlite+pysqlite:///flights.db"
DEFAULT_DB_TIMEOUT = 5.0


@dataclass(frozen=True)
class Settings:
    db_url: str = DEFAULT_DB_URL
    db_timeout: float = DEFAULT_DB_TIMEOUT
    sql_echo: bool = False
    max_attempts: int = 1


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build :class:`Settings` from ``FLIGHT_RESERVATIONS_*`` environment variables."""

    env = os.environ if environ is None else environ
    max_attempts = int(env.get("FLIGHT_RESERVATIONS_MAX_ATTEMPTS", "1"))
    if max_attempts < 1:
        raise ValueError("FLIGHT_RESERVATIONS_MAX_ATTEMPTS must be at least 1")
    return Settings(
        db_url=env.get("FLIGHT_RESERVATIONS_DB_URL", DEFAULT_DB_URL),
        db_timeout=float(env.get("FLIGHT_RESERVATIONS_DB_TIMEOUT", DEFAULT_DB_TIMEOUT)),
        sql_echo=_as_bool(env.get("FLIGHT_RESERVATIONS_SQL_ECHO", "false")),
        max_attempts=max_attempts,
    )

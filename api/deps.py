"""
api.deps
========

FastAPI dependency providers.

`get_book` returns a **DBPolicyBook** so every request talks to the
persistent SQLite store.  `get_today` captures the evaluation date once
per request; tests override it to pin the clock.
"""

from datetime import date
from functools import lru_cache

from polizas.db import create_all
from polizas.portfolio_db import DBPolicyBook
from polizas.settings import Settings, settings


@lru_cache
def get_book() -> DBPolicyBook:
    """Singleton DB‑backed policy book (persists across requests)."""
    create_all()
    return DBPolicyBook()


@lru_cache
def get_settings() -> Settings:
    """Return application settings."""
    return settings


def get_today() -> date:
    """The single 'now' every classification in a request is judged against."""
    return date.today()

"""
polizas.settings
================

Configuration settings for the policy classification engine.

This module provides centralized configuration options that can be used
across the application.  It includes default values that can be
overridden via environment variables (prefix ``POLIZAS_``) or a ``.env``
file.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# ---------------------------------------------------------------------------
# Base directories
# ---------------------------------------------------------------------------
# Base directory of the project
BASE_DIR = Path(__file__).resolve().parent.parent

# Database settings
# ---------------------------------------------------------------------------
DB_FILE = os.environ.get("POLIZAS_DB_FILE", str(BASE_DIR / "polizas.db"))
DB_URL = f"sqlite:///{DB_FILE}"
DB_ECHO = os.environ.get("POLIZAS_DB_ECHO", "False").lower() == "true"

# API settings
# ---------------------------------------------------------------------------
API_HOST = os.environ.get("POLIZAS_API_HOST", "127.0.0.1")
API_PORT = int(os.environ.get("POLIZAS_API_PORT", "8000"))
API_DEBUG = os.environ.get("POLIZAS_API_DEBUG", "False").lower() == "true"


# ---------------------------------------------------------------------------
# Pydantic settings model for the classification thresholds
# ---------------------------------------------------------------------------
class Settings(BaseSettings):
    """Pydantic model for engine settings, loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="POLIZAS_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Payment classification
    critical_threshold_days: int = Field(
        8, ge=1, description="Days past due at which a payment turns critical"
    )
    attention_window_days: int = Field(
        7, ge=0, description="Days before the due date at which a payment needs attention"
    )

    # Renewal classification
    renewal_window_days: int = Field(
        30, ge=0, description="Days before term end at which a renewal is due soon"
    )

    # Persistence / logging
    db_url: str = Field(DB_URL, description="SQLAlchemy URL of the policy store")
    db_echo: bool = Field(DB_ECHO, description="Echo SQL statements")
    log_level: str = Field("INFO", description="Root log level for the CLI and API")


# Initialize settings
settings = Settings()

"""Configuration for the lounge backend."""
from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Database
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"sqlite+aiosqlite:///{Path(__file__).parent / 'lounge.db'}",
)


def _parse_prefixes(value: str) -> set[str]:
    if not value:
        return {"/"}
    result = {x.strip() for x in value.split(",") if x.strip()}
    return result or {"/"}


def _parse_flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_port(value: str, default: int) -> int:
    try:
        return int(value)
    except ValueError:
        return default


# Characters that mark a line as a command (comma-separated, e.g. "/,!")
COMMAND_PREFIXES = _parse_prefixes(os.getenv("COMMAND_PREFIXES", "/"))

# Test-only commands (/add_karma, /setrank). Never enable in production.
ENABLE_DEBUG_COMMANDS = _parse_flag(os.getenv("ENABLE_DEBUG_COMMANDS", ""))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# HTTP API
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = _parse_port(os.getenv("API_PORT", ""), 3000)

# Auto-reload on code changes (development only)
API_RELOAD = _parse_flag(os.getenv("API_RELOAD", ""))

"""Runtime settings, read from the environment."""

from __future__ import annotations

import os
from datetime import date
from pathlib import Path

# Resolve the default data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"

_TRUTHY = {"1", "true", "yes", "on"}


class Settings:

    def __init__(self) -> None:
        self.data_dir = Path(os.getenv("POS_DATA_DIR", "").strip() or _DEFAULT_DATA_DIR)
        self.invoice_prefix = os.getenv("POS_INVOICE_PREFIX", "DB").strip() or "DB"
        self.invoice_year = _env_int("POS_INVOICE_YEAR", date.today().year)
        # Off by default: the till's own figures are stored as given.
        self.verify_totals = os.getenv("POS_VERIFY_TOTALS", "").strip().lower() in _TRUTHY
        self.staff_id = os.getenv("POS_STAFF_ID", "1").strip() or "1"
        self.log_level = os.getenv("POS_LOG_LEVEL", "WARNING").strip().upper() or "WARNING"

    @property
    def store_path(self) -> Path:
        return self.data_dir / "store.json"

    @property
    def invoice_tag(self) -> str:
        return f"{self.invoice_prefix}{self.invoice_year}"


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default

"""Shared plumbing for the JSON-file repositories.

Each repository keeps its rows as a JSON list in one file.  Every
read-modify-write goes through ``JsonFileStore.update()``, which holds a
per-file lock for the whole cycle, so concurrent writers in the same
process cannot interleave.
"""

from __future__ import annotations

import json
import threading
from collections.abc import Callable
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

from fgo.domain.model.value_objects import Money

_LOCKS: dict[Path, threading.RLock] = {}
_LOCKS_GUARD = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    with _LOCKS_GUARD:
        return _LOCKS.setdefault(path.resolve(), threading.RLock())


class JsonFileStore:

    def __init__(self, file_path: Path, empty: Any = None) -> None:
        self._file_path = file_path
        self._empty = [] if empty is None else empty
        self._lock = _lock_for(file_path)
        self._ensure_file()

    @property
    def path(self) -> Path:
        return self._file_path

    def load(self) -> Any:
        with self._lock:
            return json.loads(self._file_path.read_text(encoding="utf-8"))

    def persist(self, rows: Any) -> None:
        with self._lock:
            self._file_path.write_text(
                json.dumps(rows, indent=2) + "\n", encoding="utf-8"
            )

    def update(self, change: Callable[[Any], Any]) -> Any:
        """Load, apply ``change`` to the rows in place, persist.

        Returns whatever ``change`` returns.
        """
        with self._lock:
            rows = self.load()
            result = change(rows)
            self.persist(rows)
            return result

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text(json.dumps(self._empty), encoding="utf-8")


# --- Row helpers --------------------------------------------------------------

def upsert(rows: list[dict], raw: dict, key: str = "id") -> None:
    """Replace the row with the same key, otherwise append."""
    for i, existing in enumerate(rows):
        if existing[key] == raw[key]:
            rows[i] = raw
            return
    rows.append(raw)


def remove_where(rows: list[dict], predicate: Callable[[dict], bool]) -> int:
    """Drop matching rows in place; returns how many went."""
    keep = [row for row in rows if not predicate(row)]
    removed = len(rows) - len(keep)
    rows[:] = keep
    return removed


def dump_dt(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def load_dt(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def load_date(value: str) -> date:
    return date.fromisoformat(value)


def dump_money(value: Money) -> dict:
    return {"amount": str(value.amount), "currency": value.currency}


def load_money(raw: dict) -> Money:
    return Money(Decimal(raw["amount"]), raw.get("currency", "INR"))

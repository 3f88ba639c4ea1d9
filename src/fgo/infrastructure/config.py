"""Runtime settings, read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

from fgo.domain.exceptions import ValidationError

# When installed in editable mode the project root is the repo root.
DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


@dataclass(frozen=True)
class Settings:

    data_dir: Path = DEFAULT_DATA_DIR
    log_level: str = "WARNING"
    unlock_window_days: int = 7

    @property
    def unlock_window(self) -> timedelta:
        return timedelta(days=self.unlock_window_days)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        raw_days = env.get("FGO_UNLOCK_WINDOW_DAYS", "7")
        try:
            days = int(raw_days)
        except ValueError:
            raise ValidationError(
                f"FGO_UNLOCK_WINDOW_DAYS must be a whole number, got {raw_days!r}"
            ) from None
        if days < 0:
            raise ValidationError("FGO_UNLOCK_WINDOW_DAYS cannot be negative")
        return cls(
            data_dir=Path(env.get("FGO_DATA_DIR") or DEFAULT_DATA_DIR),
            log_level=env.get("FGO_LOG_LEVEL", "WARNING").upper(),
            unlock_window_days=days,
        )

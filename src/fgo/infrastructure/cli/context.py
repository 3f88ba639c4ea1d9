"""Helpers shared by the CLI command modules."""

from __future__ import annotations

from datetime import date, datetime

import click


def current_actor() -> str | None:
    """The acting user given to the root group (``--actor`` / ``FGO_ACTOR``)."""
    ctx = click.get_current_context(silent=True)
    if ctx is None:
        return None
    obj = ctx.find_root().obj or {}
    return obj.get("actor")


def as_date(value: datetime | None) -> date | None:
    return value.date() if value is not None else None


def fmt_dt(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d %H:%M UTC") if value is not None else "-"


DATE = click.DateTime(formats=["%Y-%m-%d"])

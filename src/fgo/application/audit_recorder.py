"""Application service: append lifecycle events to the audit log.

Auditing is a side effect of the operation being audited.  A failure to
write the audit trail is logged and otherwise ignored so that it never
undoes or blocks the primary change.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any

from fgo.domain.model.audit import AuditEvent, AuditEventType
from fgo.domain.model.value_objects import Money
from fgo.domain.repository.audit_repository import AuditRepository

logger = logging.getLogger(__name__)


class AuditRecorder:

    def __init__(
        self,
        audit_repo: AuditRepository,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._audit_repo = audit_repo
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def record(
        self,
        order_id: int | None,
        event_type: AuditEventType,
        actor: str | None,
        detail: str,
        at: datetime | None = None,
        **data: Any,
    ) -> AuditEvent | None:
        """Append one event; returns it, or None if it could not be written.

        ``at`` overrides the clock for events written after the fact.
        """
        try:
            event = AuditEvent(
                id=uuid.uuid4().hex,
                order_id=order_id,  # type: ignore[arg-type]
                event_type=event_type,
                actor=actor,
                timestamp=at or self._clock(),
                detail=detail,
                data={k: _plain(v) for k, v in data.items()},
            )
            self._audit_repo.append(event)
        except Exception:
            logger.exception(
                "Could not record %s audit event for order #%s",
                event_type.value, order_id,
            )
            return None
        return event


def _plain(value: Any) -> Any:
    """Reduce audit payload values to JSON-friendly primitives."""
    if isinstance(value, Money):
        return str(value.amount)
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value

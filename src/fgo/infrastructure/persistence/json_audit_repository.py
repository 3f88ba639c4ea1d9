"""JSON-file-backed implementation of AuditRepository. Append only."""

from __future__ import annotations

from pathlib import Path

from fgo.domain.model.audit import AuditEvent, AuditEventType
from fgo.domain.repository.audit_repository import AuditRepository
from fgo.infrastructure.persistence.json_store import JsonFileStore, dump_dt, load_dt


class JsonAuditRepository(AuditRepository):

    def __init__(self, file_path: Path) -> None:
        self._store = JsonFileStore(file_path)

    def append(self, event: AuditEvent) -> None:
        raw = {
            "id": event.id,
            "order_id": event.order_id,
            "event_type": event.event_type.value,
            "actor": event.actor,
            "timestamp": dump_dt(event.timestamp),
            "detail": event.detail,
            "data": event.data,
        }
        self._store.update(lambda rows: rows.append(raw))

    def list_for_order(self, order_id: int) -> list[AuditEvent]:
        return [
            AuditEvent(
                id=raw["id"],
                order_id=raw["order_id"],
                event_type=AuditEventType(raw["event_type"]),
                actor=raw.get("actor"),
                timestamp=load_dt(raw["timestamp"]),
                detail=raw["detail"],
                data=raw.get("data", {}),
            )
            for raw in self._store.load()
            if raw["order_id"] == order_id
        ]

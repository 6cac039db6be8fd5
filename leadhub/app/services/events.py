"""Activity events appended alongside client mutations."""

import json
from typing import Any, Optional

from leadhub.app.core.time import timestamp
from leadhub.app.db.gateway import Gateway


def encode_payload(payload: Optional[dict]) -> str:
    return json.dumps(payload or {}, ensure_ascii=False)


def decode_payload(raw: Optional[str]) -> dict:
    if not raw:
        return {}
    return json.loads(raw)


def log_event(gateway: Gateway, client_id: int, event_type: str, payload: Optional[dict[str, Any]] = None) -> int:
    result = gateway.exec_write(
        "INSERT INTO events (client_id, event_type, payload, created_at) "
        "VALUES (:client_id, :event_type, :payload, :created_at)",
        {
            "client_id": client_id,
            "event_type": event_type,
            "payload": encode_payload(payload),
            "created_at": timestamp(),
        },
    )
    return result.inserted_id


def list_events(gateway: Gateway, client_id: int) -> list[dict]:
    rows = gateway.exec_rows(
        "SELECT * FROM events WHERE client_id = :client_id ORDER BY created_at DESC, id DESC",
        {"client_id": client_id},
    )
    for row in rows:
        row["payload"] = decode_payload(row["payload"])
    return rows

"""Activity event schemas for the client timeline."""

from typing import Any, Dict, Optional

from pydantic import BaseModel


class EventRead(BaseModel):
    id: int
    client_id: int
    event_type: str
    payload: Dict[str, Any]
    created_at: Optional[str] = None

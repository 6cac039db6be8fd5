"""Client storage helpers: tag encoding, row shaping and business checks.

Tags are stored as a JSON-encoded string. Everything above this module sees a
plain list of strings.
"""

import json
from typing import Iterable, Optional

from leadhub.app.core.errors import NotFoundError, ValidationError
from leadhub.app.db.gateway import Gateway

CLIENT_SELECT = (
    "SELECT c.*, b.name AS business_name "
    "FROM clients c "
    "LEFT JOIN businesses b ON c.business_id = b.id"
)


def encode_tags(tags: Optional[Iterable[str]]) -> str:
    return json.dumps(list(tags or []), ensure_ascii=False)


def decode_tags(raw: Optional[str]) -> list[str]:
    if not raw:
        return []
    decoded = json.loads(raw)
    return list(decoded) if isinstance(decoded, list) else []


def shape_client(row: dict) -> dict:
    row["tags"] = decode_tags(row.get("tags"))
    return row


def get_client(gateway: Gateway, client_id: int) -> dict:
    row = gateway.exec_one(f"{CLIENT_SELECT} WHERE c.id = :client_id", {"client_id": client_id})
    if row is None:
        raise NotFoundError("Client not found")
    return shape_client(row)


def client_exists(gateway: Gateway, client_id: int) -> bool:
    return gateway.exec_one("SELECT id FROM clients WHERE id = :client_id", {"client_id": client_id}) is not None


def ensure_business_exists(gateway: Gateway, business_id: Optional[int]) -> None:
    if business_id is None:
        return
    row = gateway.exec_one("SELECT id FROM businesses WHERE id = :business_id", {"business_id": business_id})
    if row is None:
        raise ValidationError(
            "Invalid business_id",
            errors=[{"field": "business_id", "message": f"Business {business_id} does not exist"}],
        )


def resolve_default_business(gateway: Gateway, account_id: int) -> Optional[int]:
    """Pick a business for an API-key signup that named none.

    The account's explicit default wins. Without one, fall back to the first
    business any existing client belongs to.
    """
    account = gateway.exec_one(
        "SELECT default_business_id FROM accounts WHERE id = :account_id", {"account_id": account_id}
    )
    if account and account["default_business_id"] is not None:
        return account["default_business_id"]
    row = gateway.exec_one(
        "SELECT id FROM businesses "
        "WHERE id IN (SELECT business_id FROM clients WHERE business_id IS NOT NULL) "
        "ORDER BY id LIMIT 1"
    )
    return row["id"] if row else None

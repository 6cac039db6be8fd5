"""Client (lead) endpoints.

``POST /clients`` is the public lead-intake endpoint: website forms may call it
anonymously or with an API key. Every other route needs a session token.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from leadhub.app.core.errors import NotFoundError
from leadhub.app.core.time import timestamp
from leadhub.app.db.gateway import Gateway
from leadhub.app.db.query import UpdateBuilder, client_filters
from leadhub.app.db.session import get_gateway
from leadhub.app.dependencies.auth import Identity, optional_api_key, require_session
from leadhub.app.schemas.client import (
    ClientCreate,
    ClientCreateResponse,
    ClientListResponse,
    ClientRead,
    ClientStatus,
    ClientUpdate,
)
from leadhub.app.services.clients import (
    CLIENT_SELECT,
    client_exists,
    encode_tags,
    ensure_business_exists,
    get_client,
    resolve_default_business,
    shape_client,
)
from leadhub.app.services.events import log_event

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/clients", tags=["clients"])

UPDATABLE_COLUMNS = ("full_name", "email", "phone", "status", "source", "tags", "business_id")


@router.post("", response_model=ClientCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_client(
    client_in: ClientCreate,
    gateway: Gateway = Depends(get_gateway),
    api_key_account: Optional[Identity] = Depends(optional_api_key),
):
    with gateway.transaction():
        business_id = client_in.business_id
        if business_id is None and api_key_account is not None:
            business_id = resolve_default_business(gateway, api_key_account.id)
        ensure_business_exists(gateway, business_id)

        now = timestamp()
        result = gateway.exec_write(
            "INSERT INTO clients (full_name, email, phone, status, source, tags, business_id, created_at, updated_at) "
            "VALUES (:full_name, :email, :phone, :status, :source, :tags, :business_id, :now, :now)",
            {
                "full_name": client_in.full_name,
                "email": client_in.email,
                "phone": client_in.phone,
                "status": client_in.status,
                "source": client_in.source,
                "tags": encode_tags(client_in.tags),
                "business_id": business_id,
                "now": now,
            },
        )
        client_id = result.inserted_id
        log_event(
            gateway,
            client_id,
            "signup",
            {**client_in.tracking(), "api_key_used": api_key_account is not None},
        )

    client = get_client(gateway, client_id)
    logger.info(
        "Lead created: source=%s api_key=%s",
        client["source"],
        api_key_account is not None,
        extra={"client_id": client_id},
    )
    return {"success": True, "client": client, "message": "Lead created successfully"}


@router.get("", response_model=ClientListResponse)
async def list_clients(
    search: Optional[str] = None,
    status: Optional[ClientStatus] = None,
    source: Optional[str] = None,
    tag: Optional[str] = None,
    business_id: Optional[int] = None,
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    gateway: Gateway = Depends(get_gateway),
    identity: Identity = Depends(require_session),
):
    filters = client_filters(
        "c", search=search, status=status, source=source, tag=tag, business_id=business_id
    )
    where = filters.where_clause()
    rows = gateway.exec_rows(
        f"{CLIENT_SELECT} WHERE {where} ORDER BY c.created_at DESC, c.id DESC LIMIT :limit OFFSET :offset",
        {**filters.params, "limit": limit, "offset": offset},
    )
    count = gateway.exec_one(f"SELECT COUNT(*) AS total FROM clients c WHERE {where}", filters.params)
    return {
        "clients": [shape_client(row) for row in rows],
        "total": count["total"] if count else 0,
        "limit": limit,
        "offset": offset,
    }


@router.get("/{client_id}", response_model=ClientRead)
async def read_client(
    client_id: int,
    gateway: Gateway = Depends(get_gateway),
    identity: Identity = Depends(require_session),
):
    return get_client(gateway, client_id)


@router.put("/{client_id}", response_model=ClientRead)
async def update_client(
    client_id: int,
    client_in: ClientUpdate,
    gateway: Gateway = Depends(get_gateway),
    identity: Identity = Depends(require_session),
):
    changes = client_in.model_dump(exclude_unset=True)
    with gateway.transaction():
        if not client_exists(gateway, client_id):
            raise NotFoundError("Client not found")
        if "business_id" in changes:
            ensure_business_exists(gateway, changes["business_id"])
        if "tags" in changes:
            changes["tags"] = encode_tags(changes["tags"])

        builder = UpdateBuilder("clients", UPDATABLE_COLUMNS).set_many(changes)
        sql, params = builder.build(client_id)
        gateway.exec_write(sql, params)
        log_event(gateway, client_id, "updated", {"updated_fields": builder.columns})

    return get_client(gateway, client_id)


@router.delete("/{client_id}")
async def delete_client(
    client_id: int,
    gateway: Gateway = Depends(get_gateway),
    identity: Identity = Depends(require_session),
):
    result = gateway.exec_write("DELETE FROM clients WHERE id = :id", {"id": client_id})
    if result.affected_count == 0:
        raise NotFoundError("Client not found")
    logger.info("Client deleted", extra={"client_id": client_id, "account_id": identity.id})
    return {"message": "Client deleted successfully", "id": client_id}

"""Client notes endpoints."""

from fastapi import APIRouter, Depends, status

from leadhub.app.core.errors import AuthorizationError, NotFoundError
from leadhub.app.core.time import timestamp
from leadhub.app.db.gateway import Gateway
from leadhub.app.db.query import UpdateBuilder
from leadhub.app.db.session import get_gateway
from leadhub.app.dependencies.auth import Identity, require_session
from leadhub.app.schemas.note import NoteCreate, NoteRead, NoteUpdate
from leadhub.app.services.clients import client_exists
from leadhub.app.services.events import log_event

router = APIRouter(prefix="/notes", tags=["notes"])

NOTE_SELECT = (
    "SELECT n.*, a.email AS created_by_email "
    "FROM notes n "
    "LEFT JOIN accounts a ON n.created_by = a.id"
)


def _get_note(gateway: Gateway, note_id: int) -> dict:
    note = gateway.exec_one(f"{NOTE_SELECT} WHERE n.id = :id", {"id": note_id})
    if not note:
        raise NotFoundError("Note not found")
    return note


def _check_can_modify(note: dict, identity: Identity) -> None:
    # Only the author or an admin may change a note
    if note["created_by"] != identity.id and not identity.is_admin:
        raise AuthorizationError("Permission denied")


@router.get("/client/{client_id}", response_model=list[NoteRead])
async def list_notes(
    client_id: int,
    gateway: Gateway = Depends(get_gateway),
    identity: Identity = Depends(require_session),
):
    return gateway.exec_rows(
        f"{NOTE_SELECT} WHERE n.client_id = :client_id ORDER BY n.created_at DESC, n.id DESC",
        {"client_id": client_id},
    )


@router.post("", response_model=NoteRead, status_code=status.HTTP_201_CREATED)
async def create_note(
    note_in: NoteCreate,
    gateway: Gateway = Depends(get_gateway),
    identity: Identity = Depends(require_session),
):
    with gateway.transaction():
        if not client_exists(gateway, note_in.client_id):
            raise NotFoundError("Client not found")
        result = gateway.exec_write(
            "INSERT INTO notes (client_id, note_text, created_by, created_at) "
            "VALUES (:client_id, :note_text, :created_by, :created_at)",
            {
                "client_id": note_in.client_id,
                "note_text": note_in.note_text,
                "created_by": identity.id,
                "created_at": timestamp(),
            },
        )
        log_event(gateway, note_in.client_id, "note_added", {"note_id": result.inserted_id})
    return _get_note(gateway, result.inserted_id)


@router.put("/{note_id}", response_model=NoteRead)
async def update_note(
    note_id: int,
    note_in: NoteUpdate,
    gateway: Gateway = Depends(get_gateway),
    identity: Identity = Depends(require_session),
):
    note = _get_note(gateway, note_id)
    _check_can_modify(note, identity)
    sql, params = UpdateBuilder("notes", ("note_text",)).set("note_text", note_in.note_text).build(note_id)
    gateway.exec_write(sql, params)
    return _get_note(gateway, note_id)


@router.delete("/{note_id}")
async def delete_note(
    note_id: int,
    gateway: Gateway = Depends(get_gateway),
    identity: Identity = Depends(require_session),
):
    note = _get_note(gateway, note_id)
    _check_can_modify(note, identity)
    gateway.exec_write("DELETE FROM notes WHERE id = :id", {"id": note_id})
    return {"message": "Note deleted successfully", "id": note_id}

"""Note schemas for client notes."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class NoteCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    client_id: int
    note_text: str = Field(min_length=1)


class NoteUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    note_text: str = Field(min_length=1)


class NoteRead(BaseModel):
    id: int
    client_id: int
    note_text: str
    created_by: int
    created_by_email: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

"""Note schemas for request/response validation."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.models.note import NoteType


class NoteCreate(BaseModel):
    plan_id: int = Field(..., gt=0)
    type: NoteType
    content: dict[str, Any]


class NoteUpdate(BaseModel):
    """Partial content; merged into the stored content object."""

    content: dict[str, Any]


class NoteRead(BaseModel):
    id: int
    plan_id: int
    user_id: int
    type: NoteType
    content: dict[str, Any]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NoteList(BaseModel):
    data: list[NoteRead]

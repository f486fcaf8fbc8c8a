"""Plan schemas for request/response validation."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.models.membership import PlanRole


class PlanCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)


class PlanUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)


class PlanRead(BaseModel):
    """A plan as seen by one caller, carrying that caller's role."""

    id: int
    title: str
    description: str | None
    owner_id: int
    role: PlanRole
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PlanMemberRead(BaseModel):
    user_id: int
    email: str
    name: str | None
    role: PlanRole


class PlanNoteRead(BaseModel):
    id: int
    type: str
    content: dict[str, Any]
    user_id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PlanDetails(PlanRead):
    notes: list[PlanNoteRead]
    members: list[PlanMemberRead]


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class PlanList(BaseModel):
    data: list[PlanRead]
    pagination: Pagination

"""Pydantic schemas for API contracts."""

from __future__ import annotations

from datetime import date
from typing import Literal

from pydantic import BaseModel, Field, field_validator


class _NamePayload(BaseModel):
    name: str = Field(min_length=1, max_length=255)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value


class ListCreateRequest(_NamePayload):
    pass


class ListRenameRequest(_NamePayload):
    pass


class PersonAddRequest(_NamePayload):
    pass


class PersonMoveRequest(BaseModel):
    direction: Literal["up", "down"]


class ListSummaryResponse(BaseModel):
    id: str
    name: str


class ListResponse(BaseModel):
    id: str
    name: str
    last_rotation: date
    next_rotation: date
    people: list[str]
    current_person: str | None


class OperationResponse(BaseModel):
    ok: bool = True
    id: str | None = None

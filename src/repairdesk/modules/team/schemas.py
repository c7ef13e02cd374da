"""Pydantic schemas for team members."""

from datetime import datetime
from typing import Any

from pydantic import EmailStr, Field, field_validator

from repairdesk.core.constants import DEFAULT_MEMBER_ROLE, MAX_NAME_LENGTH, MAX_ROLE_LENGTH
from repairdesk.core.schemas import CamelModel, reject_null


class MemberCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    email: EmailStr
    role: str = Field(DEFAULT_MEMBER_ROLE, min_length=1, max_length=MAX_ROLE_LENGTH)


class MemberUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    email: EmailStr | None = None
    role: str | None = Field(None, min_length=1, max_length=MAX_ROLE_LENGTH)

    @field_validator("name", "email")
    @classmethod
    def check_not_null(cls, v: Any) -> Any:
        return reject_null(v)


class MemberResponse(CamelModel):
    id: str
    user_id: str
    name: str
    email: str
    role: str | None
    created_at: datetime | None
    updated_at: datetime | None


class DeletedMemberResponse(MemberResponse):
    deleted_at: datetime | None


class MemberListResponse(CamelModel):
    items: list[MemberResponse]
    total: int
    limit: int
    offset: int


class DeletedMemberListResponse(CamelModel):
    items: list[DeletedMemberResponse]
    total: int
    limit: int
    offset: int

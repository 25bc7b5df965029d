"""
Pydantic base schemas.

All request/response models use camelCase on the wire and accept snake_case
on input, so the admin UI and scripts can both talk to the API.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator


def _to_camel(s: str) -> str:
    """Convert snake_case to camelCase for JSON aliasing."""
    parts = s.split("_")
    return parts[0] + "".join(p.capitalize() or "_" for p in parts[1:])


class BaseSchema(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        alias_generator=_to_camel,
        str_strip_whitespace=True,
    )


class ReadSchema(BaseSchema):
    model_config = ConfigDict(from_attributes=True)


class UpdateSchema(BaseSchema):
    """
    Partial-update payload: only fields the client actually sent are applied.

    Subclasses list columns that may be omitted but never nulled in ``not_null``.
    """

    not_null: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def _reject_explicit_nulls(self) -> "UpdateSchema":
        for name in self.not_null:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{_to_camel(name)} cannot be null")
        return self

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class MediaSummary(ReadSchema):
    id: int
    url: str
    alt: Optional[str] = None
    caption: Optional[str] = None
    type: str
    thumbnail_url: Optional[str] = None


class CategorySummary(ReadSchema):
    id: int
    name: str
    slug: str


ResourceType = Literal["product", "post", "solution"]


class Timestamps(ReadSchema):
    created_at: datetime
    updated_at: datetime


Role = Literal["ADMIN", "EDITOR", "VIEWER"]


class UserOut(Timestamps):
    id: int
    email: str
    name: Optional[str] = None
    role: str
    verified: bool
    is_active: bool


class LoginIn(BaseSchema):
    email: EmailStr
    password: str


class RegisterIn(BaseSchema):
    email: EmailStr
    password: str = Field(min_length=6)
    role: Role = "EDITOR"
    name: Optional[str] = None


class UserUpdate(UpdateSchema):
    not_null: ClassVar[tuple[str, ...]] = ("email", "role", "verified", "is_active")

    name: Optional[str] = None
    email: Optional[EmailStr] = None
    role: Optional[Role] = None
    verified: Optional[bool] = None
    is_active: Optional[bool] = None
    password: Optional[str] = Field(default=None, min_length=6)


class RoleUpdate(BaseSchema):
    role: Role


class AuditLogOut(ReadSchema):
    id: int
    created_at: datetime
    request_id: Optional[str] = None
    actor_email: Optional[str] = None
    action: str
    entity: str
    entity_id: Optional[str] = None
    meta: Any = None
    client_ip: Optional[str] = None

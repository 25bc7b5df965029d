from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from app.imatrix.schemas import BaseSchema, ReadSchema


class ContactIn(BaseSchema):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    phone: Optional[str] = Field(default=None, max_length=64)
    company: Optional[str] = Field(default=None, max_length=255)
    message: str = Field(min_length=1)


class ContactMessageOut(ReadSchema):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    company: Optional[str] = None
    message: str
    created_at: datetime

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, Field, field_serializer

from portal.schemas.enums import FormType

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1, pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=1)


class EmployeeCreate(BaseModel):
    id: int = Field(..., ge=1, description="Numero de badge")
    name: str = Field(..., min_length=1)
    email: str = Field(..., pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=8)
    phone: str | None = None
    rank_id: int


class NoteCreate(BaseModel):
    note: str = Field(..., min_length=1)


class SanctionCreate(BaseModel):
    sanction_type: str = Field(..., min_length=1)
    reason: str = Field(..., min_length=1)


class AvatarUpload(BaseModel):
    image: str = Field(..., description="data URL, base64 JPEG")
    filename: str


class ContactSubmission(BaseModel):
    """Public contact form payload. ``form_data`` travels as a JSON string."""

    form_type: FormType
    nom: str = Field(..., min_length=1)
    email: str = Field(..., pattern=EMAIL_PATTERN)
    telephone: str | None = None
    form_data: dict[str, Any] = Field(default_factory=dict)

    @field_serializer("form_data")
    def _serialize_form_data(self, value: dict[str, Any]) -> str:
        return json.dumps(value)

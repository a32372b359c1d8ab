from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from portal.schemas.enums import SubmissionStatus


class UserRecord(BaseModel):
    """The authenticated staff member, as cached in the session store."""

    model_config = ConfigDict(extra="allow")

    id: int
    name: str
    email: str | None = None
    rank_name: str | None = None
    hierarchy: int | None = None
    avatar_url: str | None = None


class LoginResponse(BaseModel):
    success: bool = False
    token: str | None = None
    user: UserRecord | None = None
    redirect: str | None = None
    message: str | None = None


class RefreshResponse(BaseModel):
    success: bool = False
    token: str | None = None


class Rank(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    name: str
    hierarchy: int | None = None


class Employee(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    name: str
    email: str | None = None
    phone: str | None = None
    rank_id: int | None = None
    rank_name: str | None = None
    hierarchy: int | None = None
    hired_date: str | None = None
    last_login: str | None = None
    avatar_url: str | None = None


class EmployeeNote(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    note: str
    author_name: str | None = None
    created_at: str | None = None


class Sanction(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    sanction_type: str
    reason: str | None = None
    issuer_name: str | None = None
    issued_at: str | None = None


class Submission(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    form_type: str
    nom: str | None = None
    email: str | None = None
    telephone: str | None = None
    form_data: str | None = None
    status: str = SubmissionStatus.PENDING.value
    submitted_at: str | None = None
    processed_by: int | None = None
    processed_at: str | None = None
    handler_name: str | None = None
    notes: str | None = None

    @property
    def is_archived(self) -> bool:
        return self.status == SubmissionStatus.ARCHIVED.value


class SubmissionBuckets(BaseModel):
    active: list[Submission] = Field(default_factory=list)
    archived: list[Submission] = Field(default_factory=list)

    def visible_to(self, user_id: int) -> list[Submission]:
        """Active submissions not taken over by another handler."""
        return [s for s in self.active if s.processed_by is None or s.processed_by == user_id]

    def count(self, status: SubmissionStatus) -> int:
        return sum(1 for s in self.active if s.status == status.value)

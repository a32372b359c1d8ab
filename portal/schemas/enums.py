from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    UNAUTHENTICATED = "UNAUTHENTICATED"
    SESSION_EXPIRED = "SESSION_EXPIRED"
    LOGIN_FAILED = "LOGIN_FAILED"
    INVALID_INPUT = "INVALID_INPUT"
    API_ERROR = "API_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class SessionState(str, Enum):
    ANONYMOUS = "ANONYMOUS"
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"


class NotificationKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    NEUTRAL = "neutral"


class SubmissionStatus(str, Enum):
    PENDING = "pending"
    PROCESSED = "processed"
    ARCHIVED = "archived"


class FormType(str, Enum):
    RECRUTEMENT = "recrutement"
    PLAINTE = "plainte"
    RDV = "rdv"

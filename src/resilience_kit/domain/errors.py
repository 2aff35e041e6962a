"""
Error Value Objects.

Defines the classification axes (kind, severity) and the immutable
enriched error record produced by the error classifier.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, Field, field_validator


class ErrorKind(str, Enum):
    """Category of a failure, derived from its message text."""

    NETWORK = "network"
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    NOT_FOUND = "not-found"
    SERVER = "server"
    UNKNOWN = "unknown"


class Severity(str, Enum):
    """Triage severity. Used for reporting only, never for control flow."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# Kinds for which re-issuing the same operation may succeed
RETRYABLE_KINDS = frozenset({ErrorKind.NETWORK, ErrorKind.SERVER})


class ErrorOrigin(BaseModel):
    """Environment in which an error was observed (best effort)."""

    user_agent: Optional[str] = None
    url: Optional[str] = None

    model_config = {"frozen": True}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class EnrichedError(BaseModel):
    """
    Typed, severity-ranked, retry-aware error record.

    Instances are built by ``error_classifier.enrich`` which derives
    severity, recoverability and retryability from the kind and the
    caller-supplied context. The record is frozen after construction.
    """

    message: str
    kind: ErrorKind = ErrorKind.UNKNOWN
    severity: Severity = Severity.MEDIUM
    code: Optional[Union[int, str]] = None
    details: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)
    timestamp: datetime = Field(default_factory=_utc_now)
    origin: ErrorOrigin = Field(default_factory=ErrorOrigin)
    recoverable: bool = True
    retryable: bool = False

    model_config = {"frozen": True}

    @field_validator("details")
    @classmethod
    def freeze_details(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        """Store details as a read-only view over a private copy."""
        return MappingProxyType(dict(value))

    def to_dict(self) -> Dict[str, Any]:
        """Flatten into a plain dict suitable for logs and reporters."""
        data: Dict[str, Any] = {
            "message": self.message,
            "kind": self.kind.value,
            "severity": self.severity.value,
            "details": dict(self.details),
            "timestamp": self.timestamp.isoformat(),
            "recoverable": self.recoverable,
            "retryable": self.retryable,
        }
        if self.code is not None:
            data["code"] = self.code
        if self.origin.user_agent is not None:
            data["user_agent"] = self.origin.user_agent
        if self.origin.url is not None:
            data["url"] = self.origin.url
        return data

    def __str__(self) -> str:
        return f"[{self.kind.value}/{self.severity.value}] {self.message}"

"""
Loading State Value Objects.

A LoadingSnapshot is what subscribers of a LoadingStateMachine receive:
an immutable view of the session at the moment of a change.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field

from resilience_kit.domain.errors import EnrichedError


class LoadingState(str, Enum):
    """Externally observable state of a loading session."""

    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class LoadingSnapshot(BaseModel):
    """Point-in-time view of a loading session."""

    state: LoadingState = LoadingState.IDLE
    progress: Optional[float] = Field(default=None, ge=0, le=100)
    message: Optional[str] = None
    error: Optional[Union[EnrichedError, str]] = None
    started_at: Optional[datetime] = None
    duration: Optional[float] = Field(default=None, ge=0)

    model_config = {"frozen": True}

    @property
    def is_idle(self) -> bool:
        return self.state == LoadingState.IDLE

    @property
    def is_loading(self) -> bool:
        return self.state == LoadingState.LOADING

    @property
    def is_success(self) -> bool:
        return self.state == LoadingState.SUCCESS

    @property
    def is_error(self) -> bool:
        return self.state == LoadingState.ERROR

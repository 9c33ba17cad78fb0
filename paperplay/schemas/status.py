from datetime import datetime, timedelta
from typing import Optional, List

from pydantic import BaseModel

from paperplay.core.status import Availability, ContentKind, ViewerState
from .content import ContentPayload


class Countdown(BaseModel):
    days: int
    hours: int
    minutes: int

    def __str__(self) -> str:
        return f"{self.days}d {self.hours}h {self.minutes}m"


class GateResult(BaseModel):
    is_open: bool
    remaining: Optional[timedelta] = None
    countdown: Optional[Countdown] = None


class ViewerStatus(BaseModel):
    code: str
    state: ViewerState
    unlock_at: Optional[datetime] = None
    countdown: Optional[Countdown] = None
    remaining_seconds: Optional[int] = None
    content: Optional[ContentPayload] = None


class OperatorStatus(BaseModel):
    code: str
    found: bool = True
    batch_id: Optional[str] = None
    bound: bool = False
    availability: Optional[Availability] = None
    content_kind: Optional[ContentKind] = None
    visibility_flag: Optional[bool] = None
    unlock_at: Optional[datetime] = None
    is_open: Optional[bool] = None
    countdown: Optional[Countdown] = None
    created_at: Optional[datetime] = None
    bound_at: Optional[datetime] = None
    preview: Optional[ContentPayload] = None


class DeleteResult(BaseModel):
    deleted: int
    codes: List[str] = []


class ErrorResult(BaseModel):
    error_kind: str
    detail: str
    code: Optional[str] = None

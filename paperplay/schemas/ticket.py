from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, Field

from paperplay.core.config import settings
from paperplay.core.status import ContentKind


# Shared properties
class TicketBase(BaseModel):
    batch_id: Optional[str] = None


# Properties to receive on Ticket creation
class TicketCreate(TicketBase):
    code: Optional[str] = None


# Properties to receive on Ticket update
class TicketUpdate(TicketBase):
    unlock_at: Optional[datetime] = None
    visibility_flag: Optional[bool] = None


# Properties shared by models stored in DB
class TicketInDBBase(TicketBase):
    code: str
    content_kind: Optional[ContentKind] = None
    video_url: Optional[str] = None
    unlock_at: Optional[datetime] = None
    visibility_flag: bool = True
    created_at: datetime
    updated_at: datetime
    bound_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# Properties to return to client
class Ticket(TicketInDBBase):
    pass


# Properties stored in DB
class TicketInDB(TicketInDBBase):
    video_storage_key: Optional[str] = None


class IssuedTicket(BaseModel):
    code: str
    link: str
    batch_id: Optional[str] = None


class IssuedBatch(BaseModel):
    batch_id: str
    count: int
    tickets: List[IssuedTicket]


class BatchIssueRequest(BaseModel):
    count: int = Field(default_factory=lambda: settings.DEFAULT_BATCH_SIZE)
    id_prefix: Optional[str] = None

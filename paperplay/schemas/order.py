from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from paperplay.core.status import OrderStatus


# Shared properties
class LetterRequestBase(BaseModel):
    customer_name: str
    contact_link: str
    category: Optional[str] = None
    letter_type: Optional[str] = None


# Properties to receive on LetterRequest creation
class LetterRequestCreate(LetterRequestBase):
    ticket_code: str


# Properties to receive on LetterRequest update
class LetterRequestUpdate(BaseModel):
    status: OrderStatus


# Properties shared by models stored in DB
class LetterRequestInDBBase(LetterRequestBase):
    id: Optional[int] = None
    ticket_code: str
    status: OrderStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# Properties to return to client
class LetterRequest(LetterRequestInDBBase):
    pass


# Properties stored in DB
class LetterRequestInDB(LetterRequestInDBBase):
    pass


class OrderStatusView(BaseModel):
    order: LetterRequest
    link: str
    ticket_exists: bool
    ticket_bound: bool


class OrderResult(BaseModel):
    order: LetterRequest
    link: str
    video_attached: bool

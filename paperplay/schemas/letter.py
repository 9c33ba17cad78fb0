from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from paperplay.core.status import LetterTheme


# Shared properties
class LetterBase(BaseModel):
    sender_name: str
    message_body: str
    theme: LetterTheme = LetterTheme.CLASSIC

    @field_validator("sender_name", "message_body")
    def not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v


# Properties to receive on Letter creation
class LetterCreate(LetterBase):
    image_url: Optional[str] = None
    image_storage_key: Optional[str] = None


# Properties shared by models stored in DB
class LetterInDBBase(LetterBase):
    ticket_code: str
    image_url: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


# Properties to return to client
class Letter(LetterInDBBase):
    pass


# Properties stored in DB
class LetterInDB(LetterInDBBase):
    image_storage_key: Optional[str] = None

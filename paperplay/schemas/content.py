from datetime import datetime
from typing import Optional

from pydantic import BaseModel, model_validator

from paperplay.core.status import ContentKind
from .letter import Letter, LetterCreate


# Properties to receive when binding content that is already uploaded
class BindContentRequest(BaseModel):
    video_url: Optional[str] = None
    video_storage_key: Optional[str] = None
    letter: Optional[LetterCreate] = None
    unlock_at: Optional[datetime] = None
    visibility_flag: bool = True

    @model_validator(mode='after')
    def exactly_one_payload(self) -> 'BindContentRequest':
        if (self.video_url is None) == (self.letter is None):
            raise ValueError("exactly one of video_url or letter must be given")
        return self


# Bound content as delivered to a viewer
class ContentPayload(BaseModel):
    kind: ContentKind
    video_url: Optional[str] = None
    letter: Optional[Letter] = None

from datetime import datetime
from typing import Any, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from pydantic import ValidationError
from sqlalchemy.orm import Session

import paperplay.db.session as session
from paperplay import schemas
from paperplay.core.exceptions import InvalidPayloadError
from paperplay.core.status import LetterTheme
from paperplay.ticketing import letters

router = APIRouter()


@router.post("", response_model=schemas.IssuedTicket, response_model_exclude_none=True, status_code=201)
async def compose_letter(
        *,
        db: Session = Depends(session.get_db_session),
        sender_name: str = Form(...),
        message_body: str = Form(...),
        theme: str = Form(LetterTheme.CLASSIC.value),
        unlock_at: Optional[datetime] = Form(None),
        visibility_flag: bool = Form(True),
        image: Optional[UploadFile] = File(None),
) -> Any:
    """
    Write a digital letter. Returns the new code and the link to share with the receiver.
    """
    try:
        letter_in = schemas.LetterCreate(sender_name=sender_name, message_body=message_body, theme=theme)
    except ValidationError as e:
        raise InvalidPayloadError(f"Invalid letter: {e.errors()[0]['msg']}")
    return await letters.compose_letter(db, letter_in=letter_in,
                                        image=image,
                                        unlock_at=unlock_at,
                                        visibility_flag=visibility_flag)

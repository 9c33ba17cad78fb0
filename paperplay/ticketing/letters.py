import logging
from datetime import datetime
from typing import Optional

from fastapi import UploadFile
from sqlalchemy.orm import Session

from paperplay import crud, schemas
from paperplay.ticketing import binder
from paperplay.ticketing.issuer import share_link

logger = logging.getLogger(__name__)


async def compose_letter(
        db: Session, *,
        letter_in: schemas.LetterCreate,
        image: Optional[UploadFile] = None,
        unlock_at: Optional[datetime] = None,
        visibility_flag: bool = True
) -> schemas.IssuedTicket:
    """
    Write a digital letter: a fresh random code is created and the letter is bound to it.
    The code is only handed out once the letter is in place, so a failed compose deletes
    the ticket it created.
    """
    code = crud.ticket.create_ticket(db).code
    try:
        ticket = await binder.bind_uploaded_letter(db, code=code,
                                                   letter_in=letter_in,
                                                   image=image,
                                                   unlock_at=unlock_at,
                                                   visibility_flag=visibility_flag)
    except Exception:
        db.rollback()
        crud.ticket.remove_by_code(db, code=code)
        raise
    logger.info(f"Letter from {letter_in.sender_name} composed as {ticket.code}")
    return schemas.IssuedTicket(code=ticket.code, link=share_link(ticket.code))

from typing import Optional

from sqlalchemy.orm import Session

from paperplay import crud, models, schemas
from paperplay.core.status import LetterTheme
from paperplay.tests.utils.utils import random_code, random_lower_string, random_video_url


def create_random_ticket(db: Session, *, batch_id: Optional[str] = None) -> models.Ticket:
    return crud.ticket.create_ticket(db, code=random_code(), batch_id=batch_id)


def create_bound_ticket(db: Session, *, unlock_at=None, visibility_flag: bool = True) -> models.Ticket:
    ticket = create_random_ticket(db)
    return crud.ticket.bind_video(db, code=ticket.code,
                                  video_url=random_video_url(),
                                  unlock_at=unlock_at,
                                  visibility_flag=visibility_flag)


def random_letter(theme: LetterTheme = LetterTheme.CLASSIC) -> schemas.LetterCreate:
    return schemas.LetterCreate(sender_name=random_lower_string(8),
                                message_body=random_lower_string(64),
                                theme=theme)

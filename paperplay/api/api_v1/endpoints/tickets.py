from datetime import datetime
from typing import Any, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

import paperplay.db.session as session
from paperplay import crud, schemas
from paperplay.ticketing import binder, projector
from paperplay.utils.dates import utcnow

router = APIRouter()


@router.get("/{code}", response_model=schemas.ViewerStatus, response_model_exclude_none=True)
def read_ticket(
        *,
        db: Session = Depends(session.get_db_session),
        code: str,
) -> Any:
    """
    What a receiver sees for a code: empty, locked with a countdown, or the content.
    """
    ticket = crud.ticket.get_or_raise(db, code=code)
    return projector.project_for_viewer(ticket, utcnow())


@router.post("/{code}/video", response_model=schemas.ViewerStatus, response_model_exclude_none=True)
async def upload_video(
        *,
        db: Session = Depends(session.get_db_session),
        code: str,
        file: UploadFile = File(...),
        unlock_at: Optional[datetime] = Form(None),
        visibility_flag: bool = Form(True),
) -> Any:
    """
    Upload a video and bind it to an empty ticket.
    """
    ticket = await binder.bind_uploaded_video(db, code=code,
                                              upload=file,
                                              unlock_at=unlock_at,
                                              visibility_flag=visibility_flag)
    return projector.project_for_viewer(ticket, utcnow())


@router.post("/{code}/content", response_model=schemas.ViewerStatus, response_model_exclude_none=True)
def bind_content(
        *,
        db: Session = Depends(session.get_db_session),
        code: str,
        content_in: schemas.BindContentRequest,
) -> Any:
    """
    Bind an already uploaded video, or a letter, to an empty ticket.
    """
    ticket = binder.bind_content(db, code=code, obj_in=content_in)
    return projector.project_for_viewer(ticket, utcnow())

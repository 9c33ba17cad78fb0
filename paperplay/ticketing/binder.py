import logging
from datetime import datetime
from typing import Optional

from fastapi import UploadFile
from sqlalchemy.orm import Session

from paperplay import crud, models, schemas
from paperplay.celery_tasks.assets import schedule_removal
from paperplay.core.exceptions import AlreadyBoundError
from paperplay.utils import filestorage

logger = logging.getLogger(__name__)


def ensure_bindable(db: Session, *, code: str) -> models.Ticket:
    # early answer for the uploader, the bind itself re-checks atomically
    ticket = crud.ticket.get_or_raise(db, code=code)
    if ticket.is_bound:
        raise AlreadyBoundError(code)
    return ticket


def bind_content(db: Session, *, code: str, obj_in: schemas.BindContentRequest) -> models.Ticket:
    if obj_in.video_url is not None:
        return crud.ticket.bind_video(db, code=code,
                                      video_url=obj_in.video_url,
                                      storage_key=obj_in.video_storage_key,
                                      unlock_at=obj_in.unlock_at,
                                      visibility_flag=obj_in.visibility_flag)
    return crud.ticket.bind_letter(db, code=code,
                                   obj_in=obj_in.letter,
                                   unlock_at=obj_in.unlock_at,
                                   visibility_flag=obj_in.visibility_flag)


async def bind_uploaded_video(
        db: Session, *,
        code: str,
        upload: UploadFile,
        unlock_at: Optional[datetime] = None,
        visibility_flag: bool = True
) -> models.Ticket:
    """
    Upload first, bind second. The pointer is written only after the asset is fully
    stored, and an asset whose bind fails is queued for removal.
    """
    ensure_bindable(db, code=code)
    asset = await filestorage.store_upload(upload, code=code, media_type="video")
    try:
        return crud.ticket.bind_video(db, code=code,
                                      video_url=asset.url,
                                      storage_key=asset.key,
                                      unlock_at=unlock_at,
                                      visibility_flag=visibility_flag)
    except Exception as e:
        logger.warning(f"Bind of video {asset.key} to {code} failed ({type(e).__name__}), removing upload")
        db.rollback()
        schedule_removal([asset.key])
        raise


async def bind_uploaded_letter(
        db: Session, *,
        code: str,
        letter_in: schemas.LetterCreate,
        image: Optional[UploadFile] = None,
        unlock_at: Optional[datetime] = None,
        visibility_flag: bool = True
) -> models.Ticket:
    ensure_bindable(db, code=code)
    asset = None
    if image is not None:
        asset = await filestorage.store_upload(image, code=code, media_type="image")
        letter_in = letter_in.model_copy(update={"image_url": asset.url, "image_storage_key": asset.key})
    try:
        return crud.ticket.bind_letter(db, code=code,
                                       obj_in=letter_in,
                                       unlock_at=unlock_at,
                                       visibility_flag=visibility_flag)
    except Exception:
        db.rollback()
        if asset:
            schedule_removal([asset.key])
        raise


def clear_content(db: Session, *, code: str) -> models.Ticket:
    schedule_removal(crud.ticket.clear_content(db, code=code))
    return crud.ticket.get_or_raise(db, code=code)

from typing import Any, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

import paperplay.db.session as session
from paperplay import schemas
from paperplay.ticketing import orders

router = APIRouter()


@router.post("", response_model=schemas.OrderResult, status_code=201)
async def submit_request(
        *,
        db: Session = Depends(session.get_db_session),
        customer_name: str = Form(...),
        contact_link: str = Form(...),
        category: Optional[str] = Form(None),
        letter_type: Optional[str] = Form(None),
        video: Optional[UploadFile] = File(None),
) -> Any:
    """
    Order a printed letter, optionally with a video to put behind its code.
    """
    obj_in = schemas.LetterRequestBase(customer_name=customer_name,
                                       contact_link=contact_link,
                                       category=category,
                                       letter_type=letter_type)
    return await orders.submit_request(db, obj_in=obj_in, video=video)


@router.get("/{code}", response_model=schemas.OrderStatusView)
def read_order_status(
        *,
        db: Session = Depends(session.get_db_session),
        code: str,
) -> Any:
    """
    Where an order stands, and whether its code already carries content.
    """
    return orders.get_order_status(db, code=code)

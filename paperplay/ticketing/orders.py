import logging
import string
from typing import Optional

from fastapi import UploadFile
from sqlalchemy.orm import Session

from paperplay import crud, models, schemas
from paperplay.core.config import settings
from paperplay.core.exceptions import DuplicateCodeError, NotFoundError, TicketingException
from paperplay.core.status import OrderStatus
from paperplay.ticketing import binder
from paperplay.ticketing.issuer import share_link

logger = logging.getLogger(__name__)


def create_request_ticket(db: Session, *, obj_in: schemas.LetterRequestBase) -> models.LetterRequest:
    # orders outlive their tickets, so a fresh code can still clash with an old order
    for attempt in range(1, settings.CODE_GENERATION_MAX_RETRIES + 1):
        ticket = crud.ticket.create_ticket(db,
                                           prefix=settings.REQUEST_CODE_PREFIX,
                                           length=settings.REQUEST_CODE_LENGTH,
                                           alphabet=string.digits)
        try:
            return crud.letter_request.create_for_ticket(
                db, obj_in=schemas.LetterRequestCreate(**obj_in.model_dump(), ticket_code=ticket.code)
            )
        except DuplicateCodeError:
            logger.warning(f"Code {ticket.code} already used by an earlier order, attempt {attempt}")
            crud.ticket.remove_by_code(db, code=ticket.code)
    raise DuplicateCodeError()


async def submit_request(
        db: Session, *,
        obj_in: schemas.LetterRequestBase,
        video: Optional[UploadFile] = None
) -> schemas.OrderResult:
    """
    A customer orders a printed letter. The order gets its own REQ- ticket; an attached
    video is bound to it straight away. A video that fails to upload does not cancel the
    order, the ticket stays empty and the video can be added later by scanning the code.
    """
    order = create_request_ticket(db, obj_in=obj_in)
    video_attached = False
    if video is not None:
        try:
            await binder.bind_uploaded_video(db, code=order.ticket_code, upload=video)
            video_attached = True
        except TicketingException as e:
            logger.warning(f"Order {order.ticket_code} created without video: {e.message}")
    logger.info(f"Letter request {order.ticket_code} submitted by {order.customer_name}")
    return schemas.OrderResult(order=schemas.LetterRequest.model_validate(order),
                               link=share_link(order.ticket_code),
                               video_attached=video_attached)


def get_order(db: Session, *, code: str) -> models.LetterRequest:
    order = crud.letter_request.get_by_ticket_code(db, ticket_code=code)
    if not order:
        raise NotFoundError(code, what="Order")
    return order


def get_order_status(db: Session, *, code: str) -> schemas.OrderStatusView:
    order = get_order(db, code=code)
    return schemas.OrderStatusView(
        order=schemas.LetterRequest.model_validate(order),
        link=share_link(code),
        ticket_exists=crud.ticket.exists(db, code=code),
        ticket_bound=crud.ticket.is_bound(db, code=code),
    )


def update_order_status(db: Session, *, code: str, status: OrderStatus) -> models.LetterRequest:
    order = get_order(db, code=code)
    order = crud.letter_request.set_status(db, db_obj=order, status=status)
    logger.info(f"Order {code} is now {status.value}")
    return order

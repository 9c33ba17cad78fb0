import logging
import time
from typing import List, Optional

from sqlalchemy.orm import Session

from paperplay import crud, models, schemas
from paperplay.core.config import settings
from paperplay.core.exceptions import DuplicateCodeError, InvalidPayloadError

logger = logging.getLogger(__name__)


def share_link(code: str) -> str:
    return f"{settings.SHARE_BASE_URL.rstrip('/')}/{code}"


def issued(ticket: models.Ticket) -> schemas.IssuedTicket:
    return schemas.IssuedTicket(code=ticket.code, link=share_link(ticket.code), batch_id=ticket.batch_id)


def new_batch_id() -> str:
    # last digits of the epoch milliseconds, short enough to print under a QR code
    return str(int(time.time() * 1000))[-settings.BATCH_ID_LENGTH:]


def batch_codes(batch_id: str, count: int) -> List[str]:
    return [f"{batch_id}-{i}" for i in range(1, count + 1)]


def issue_batch(db: Session, *, count: int, id_prefix: Optional[str] = None) -> schemas.IssuedBatch:
    """
    Create `count` tickets `<batch>-1 .. <batch>-N` sharing one batch id.

    Fail-fast: the batch is written in a single transaction, so either every code is
    created or none is. With an explicit `id_prefix` a clash raises DuplicateCodeError.
    Without one the batch id comes from the clock and a clash is retried with a fresh id.
    """
    if count < 1 or count > settings.MAX_BATCH_SIZE:
        raise InvalidPayloadError(f"Batch size must be between 1 and {settings.MAX_BATCH_SIZE}, got {count}")

    if id_prefix is not None:
        tickets = crud.ticket.create_many(db, codes=batch_codes(id_prefix, count), batch_id=id_prefix)
        return make_issued_batch(id_prefix, tickets)

    last_error = None
    for attempt in range(1, settings.CODE_GENERATION_MAX_RETRIES + 1):
        batch_id = new_batch_id()
        try:
            tickets = crud.ticket.create_many(db, codes=batch_codes(batch_id, count), batch_id=batch_id)
            return make_issued_batch(batch_id, tickets)
        except DuplicateCodeError as e:
            logger.warning(f"Batch id {batch_id} clashes with existing codes, attempt {attempt}")
            last_error = e
            time.sleep(0.001)
    raise last_error


def make_issued_batch(batch_id: str, tickets: List[models.Ticket]) -> schemas.IssuedBatch:
    logger.info(f"Issued batch {batch_id} with {len(tickets)} tickets")
    return schemas.IssuedBatch(batch_id=batch_id, count=len(tickets), tickets=[issued(t) for t in tickets])


def issue_single(db: Session, *, code: Optional[str] = None, batch_id: Optional[str] = None) -> schemas.IssuedTicket:
    return issued(crud.ticket.create_ticket(db, code=code, batch_id=batch_id))

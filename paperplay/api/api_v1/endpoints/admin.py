import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import paperplay.db.session as session
from paperplay import crud, schemas
from paperplay.api import deps
from paperplay.core.status import DeletePredicate, OrderStatus
from paperplay.ticketing import binder, issuer, orders, projector, registry
from paperplay.utils.dates import utcnow

router = APIRouter()

logger = logging.getLogger(__name__)


@router.post("/tickets", response_model=schemas.IssuedTicket, response_model_exclude_none=True, status_code=201)
def issue_ticket(
        *,
        db: Session = Depends(session.get_db_session),
        ticket_in: schemas.TicketCreate,
        operator: schemas.TokenPayload = Depends(deps.OperatorAuth.get_current_operator),
) -> Any:
    """
    Issue one ticket, with the given code or a generated one.
    """
    return issuer.issue_single(db, code=ticket_in.code, batch_id=ticket_in.batch_id)


@router.post("/tickets/batch", response_model=schemas.IssuedBatch, status_code=201)
def issue_batch(
        *,
        db: Session = Depends(session.get_db_session),
        batch_in: schemas.BatchIssueRequest,
        operator: schemas.TokenPayload = Depends(deps.OperatorAuth.get_current_operator),
) -> Any:
    """
    Issue a batch of sticker codes `<batch>-1 .. <batch>-N`.
    """
    logger.info(f"Operator {operator.sub} issues a batch of {batch_in.count}")
    return issuer.issue_batch(db, count=batch_in.count, id_prefix=batch_in.id_prefix)


@router.get("/tickets", response_model=List[schemas.OperatorStatus], response_model_exclude_none=True)
def read_tickets(
        *,
        db: Session = Depends(session.get_db_session),
        predicate: DeletePredicate = DeletePredicate.ALL,
        batch_id: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
        operator: schemas.TokenPayload = Depends(deps.OperatorAuth.get_current_operator),
) -> Any:
    tickets = crud.ticket.get_multi_filtered(db, predicate=predicate, batch_id=batch_id, skip=skip, limit=limit)
    now = utcnow()
    return [projector.project_for_operator(t, now) for t in tickets]


@router.get("/tickets/{code}", response_model=schemas.OperatorStatus, response_model_exclude_none=True)
def read_ticket(
        *,
        db: Session = Depends(session.get_db_session),
        code: str,
        operator: schemas.TokenPayload = Depends(deps.OperatorAuth.get_current_operator),
) -> Any:
    ticket = crud.ticket.get_or_raise(db, code=code)
    return projector.project_for_operator(ticket, utcnow())


@router.delete("/tickets/{code}/content", response_model=schemas.OperatorStatus, response_model_exclude_none=True)
def clear_ticket_content(
        *,
        db: Session = Depends(session.get_db_session),
        code: str,
        operator: schemas.TokenPayload = Depends(deps.OperatorAuth.get_current_operator),
) -> Any:
    """
    Return a ticket to empty so new content can be bound to it.
    """
    logger.info(f"Operator {operator.sub} clears ticket {code}")
    ticket = binder.clear_content(db, code=code)
    return projector.project_for_operator(ticket, utcnow())


@router.delete("/tickets/{code}", response_model=schemas.DeleteResult)
def delete_ticket(
        *,
        db: Session = Depends(session.get_db_session),
        code: str,
        operator: schemas.TokenPayload = Depends(deps.OperatorAuth.get_current_operator),
) -> Any:
    logger.info(f"Operator {operator.sub} deletes ticket {code}")
    return registry.delete_ticket(db, code=code)


@router.delete("/tickets", response_model=schemas.DeleteResult)
def delete_tickets(
        *,
        db: Session = Depends(session.get_db_session),
        predicate: DeletePredicate,
        operator: schemas.TokenPayload = Depends(deps.OperatorAuth.get_current_operator),
) -> Any:
    """
    Bulk delete: `bound`, `unbound` or `all` tickets.
    """
    logger.info(f"Operator {operator.sub} deletes {predicate.value} tickets")
    return registry.delete_where(db, predicate=predicate)


@router.get("/orders", response_model=List[schemas.LetterRequest])
def read_orders(
        *,
        db: Session = Depends(session.get_db_session),
        status: Optional[OrderStatus] = None,
        skip: int = 0,
        limit: int = 100,
        operator: schemas.TokenPayload = Depends(deps.OperatorAuth.get_current_operator),
) -> Any:
    return crud.letter_request.get_multi_by_status(db, status=status, skip=skip, limit=limit)


@router.patch("/orders/{code}", response_model=schemas.LetterRequest)
def update_order(
        *,
        db: Session = Depends(session.get_db_session),
        code: str,
        order_in: schemas.LetterRequestUpdate,
        operator: schemas.TokenPayload = Depends(deps.OperatorAuth.get_current_operator),
) -> Any:
    return orders.update_order_status(db, code=code, status=order_in.status)

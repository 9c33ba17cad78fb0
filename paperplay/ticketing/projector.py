from datetime import datetime
from typing import Optional, Union

from paperplay import models, schemas
from paperplay.core.status import Availability, ContentKind, ViewerState
from paperplay.ticketing import timegate

# Read-only views of a ticket. Nothing here writes, the state of a ticket only
# changes through the registry and binder operations in crud.ticket.


def content_of(ticket: models.Ticket) -> schemas.ContentPayload:
    if ticket.content_kind == ContentKind.LETTER:
        return schemas.ContentPayload(
            kind=ContentKind.LETTER,
            letter=schemas.Letter.model_validate(ticket.letter) if ticket.letter else None,
        )
    return schemas.ContentPayload(kind=ContentKind.VIDEO, video_url=ticket.video_url)


def project_for_viewer(ticket: Optional[models.Ticket], now: datetime, code: str = None) -> schemas.ViewerStatus:
    if ticket is None:
        return schemas.ViewerStatus(code=code or "", state=ViewerState.NOT_FOUND)

    if not ticket.is_bound:
        return schemas.ViewerStatus(code=ticket.code, state=ViewerState.EMPTY)

    gate = timegate.evaluate(now, ticket.unlock_at)
    if not gate.is_open:
        return schemas.ViewerStatus(
            code=ticket.code,
            state=ViewerState.LOCKED,
            unlock_at=ticket.unlock_at,
            countdown=gate.countdown,
            remaining_seconds=int(gate.remaining.total_seconds()),
        )

    return schemas.ViewerStatus(
        code=ticket.code,
        state=ViewerState.READY,
        unlock_at=ticket.unlock_at,
        content=content_of(ticket),
    )


def project_for_operator(ticket: Optional[models.Ticket], now: datetime, code: str = None) -> schemas.OperatorStatus:
    if ticket is None:
        return schemas.OperatorStatus(code=code or "", found=False)

    status = schemas.OperatorStatus(
        code=ticket.code,
        batch_id=ticket.batch_id,
        bound=ticket.is_bound,
        availability=Availability.USED if ticket.is_bound else Availability.AVAILABLE,
        content_kind=ticket.content_kind,
        visibility_flag=ticket.visibility_flag,
        unlock_at=ticket.unlock_at,
        created_at=ticket.created_at,
        bound_at=ticket.bound_at,
    )
    if ticket.is_bound:
        gate = timegate.evaluate(now, ticket.unlock_at)
        status.is_open = gate.is_open
        status.countdown = gate.countdown
        # operators see content only where the creator allowed it, and never before unlock
        if ticket.visibility_flag and gate.is_open:
            status.preview = content_of(ticket)
    return status


def project(
        ticket: Optional[models.Ticket], now: datetime, as_operator: bool = False, code: str = None
) -> Union[schemas.ViewerStatus, schemas.OperatorStatus]:
    if as_operator:
        return project_for_operator(ticket, now, code)
    return project_for_viewer(ticket, now, code)

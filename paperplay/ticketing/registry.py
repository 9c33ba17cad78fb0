from sqlalchemy.orm import Session

from paperplay import crud, schemas
from paperplay.celery_tasks.assets import schedule_removal
from paperplay.core.status import DeletePredicate


def delete_ticket(db: Session, *, code: str) -> schemas.DeleteResult:
    """Idempotent: a missing ticket reports zero deletions and no error."""
    existed = crud.ticket.exists(db, code=code)
    schedule_removal(crud.ticket.remove_by_code(db, code=code))
    return schemas.DeleteResult(deleted=1 if existed else 0, codes=[code] if existed else [])


def delete_where(db: Session, *, predicate: DeletePredicate) -> schemas.DeleteResult:
    """
    Bulk delete by predicate. Best effort against binds running at the same time,
    see crud.ticket.remove_where.
    """
    deleted, codes, released = crud.ticket.remove_where(db, predicate=predicate)
    schedule_removal(released)
    return schemas.DeleteResult(deleted=deleted, codes=codes)

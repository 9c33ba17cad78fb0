from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from paperplay.core.exceptions import DuplicateCodeError
from paperplay.core.status import OrderStatus
from paperplay.crud.base import CRUDBase
from paperplay.models.order import LetterRequest
from paperplay.schemas.order import LetterRequestCreate, LetterRequestUpdate
from paperplay.utils.dates import utcnow


class CRUDLetterRequest(CRUDBase[LetterRequest, LetterRequestCreate, LetterRequestUpdate]):
    @staticmethod
    def create_for_ticket(db: Session, *, obj_in: LetterRequestCreate) -> LetterRequest:
        now = utcnow()
        # noinspection PyArgumentList
        db_obj = LetterRequest(
            ticket_code=obj_in.ticket_code,
            customer_name=obj_in.customer_name,
            contact_link=obj_in.contact_link,
            category=obj_in.category,
            letter_type=obj_in.letter_type,
            status=OrderStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
        db.add(db_obj)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise DuplicateCodeError(obj_in.ticket_code)
        db.refresh(db_obj)
        return db_obj

    def get_by_ticket_code(self, db: Session, *, ticket_code: str) -> Optional[LetterRequest]:
        return (
            db.query(self.model)
            .filter(LetterRequest.ticket_code == ticket_code)
            .first())

    def get_multi_by_status(
            self, db: Session, *, status: Optional[OrderStatus] = None, skip: int = 0, limit: int = 100
    ) -> List[LetterRequest]:
        query = db.query(self.model)
        if status:
            query = query.filter(LetterRequest.status == status)
        return (
            query
            .order_by(LetterRequest.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def set_status(self, db: Session, *, db_obj: LetterRequest, status: OrderStatus) -> LetterRequest:
        return super().update(db, db_obj=db_obj, obj_in={"status": status, "updated_at": utcnow()})


letter_request = CRUDLetterRequest(LetterRequest)

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from paperplay.core.config import settings
from paperplay.core.exceptions import AlreadyBoundError, DuplicateCodeError, InvalidPayloadError, NotFoundError
from paperplay.core.security import CODE_ALPHABET, get_random_string
from paperplay.core.status import ContentKind, DeletePredicate
from paperplay.crud.base import CRUDBase
from paperplay.models.letter import Letter
from paperplay.models.ticket import Ticket
from paperplay.schemas.letter import LetterCreate
from paperplay.schemas.ticket import TicketCreate, TicketUpdate
from paperplay.utils.dates import as_naive_utc, utcnow

logger = logging.getLogger(__name__)


def check_code(code: str) -> str:
    # codes travel as the last path segment of share links
    if not code or code != code.strip() or "/" in code or any(c.isspace() for c in code):
        raise InvalidPayloadError(f"Invalid ticket code {code!r}", code)
    return code


def predicate_filter(predicate: DeletePredicate):
    if predicate == DeletePredicate.BOUND:
        return Ticket.content_kind.isnot(None)
    if predicate == DeletePredicate.UNBOUND:
        return Ticket.content_kind.is_(None)
    return sa.true()


def sequence_of(code: str) -> Tuple[int, str]:
    _, _, suffix = code.rpartition("-")
    return (int(suffix), code) if suffix.isdigit() else (0, code)


class CRUDTicket(CRUDBase[Ticket, TicketCreate, TicketUpdate]):
    def get_by_code(self, db: Session, *, code: str) -> Optional[Ticket]:
        return db.query(self.model).filter(Ticket.code == code).first()

    def get_or_raise(self, db: Session, *, code: str) -> Ticket:
        db_obj = self.get_by_code(db, code=code)
        if not db_obj:
            raise NotFoundError(code)
        return db_obj

    def exists(self, db: Session, *, code: str) -> bool:
        return db.query(sa.exists().where(Ticket.code == code)).scalar()

    def is_bound(self, db: Session, *, code: str) -> bool:
        return db.query(
            sa.exists().where(sa.and_(Ticket.code == code, Ticket.content_kind.isnot(None)))
        ).scalar()

    def get_by_batch(self, db: Session, *, batch_id: str) -> List[Ticket]:
        tickets = db.query(self.model).filter(Ticket.batch_id == batch_id).all()
        return sorted(tickets, key=lambda t: sequence_of(t.code))

    def get_existing_codes(self, db: Session, *, codes: Sequence[str]) -> List[str]:
        return [row.code for row in db.query(Ticket.code).filter(Ticket.code.in_(list(codes))).all()]

    def get_multi_filtered(
            self, db: Session, *,
            predicate: DeletePredicate = DeletePredicate.ALL,
            batch_id: Optional[str] = None,
            skip: int = 0, limit: int = 100
    ) -> List[Ticket]:
        query = db.query(self.model).filter(predicate_filter(predicate))
        if batch_id:
            query = query.filter(Ticket.batch_id == batch_id)
        return (
            query
            .order_by(Ticket.created_at.desc(), Ticket.code)
            .offset(skip)
            .limit(limit)
            .all()
        )

    def create_with_code(self, db: Session, *, code: str, batch_id: str = None) -> Ticket:
        """
        Insert-if-absent on the primary key. The database decides who wins when
        two callers race for the same code, the loser gets DuplicateCodeError.
        """
        check_code(code)
        now = utcnow()
        try:
            db.execute(
                sa.insert(Ticket).values(code=code, batch_id=batch_id, visibility_flag=True,
                                         created_at=now, updated_at=now)
            )
            db.commit()
        except IntegrityError:
            db.rollback()
            raise DuplicateCodeError(code)
        logger.info(f"Ticket {code} created")
        return self.get_or_raise(db, code=code)

    def create_with_generated_code(
            self, db: Session, *, make_code: Callable[[], str], batch_id: str = None
    ) -> Ticket:
        code = None
        for attempt in range(1, settings.CODE_GENERATION_MAX_RETRIES + 1):
            code = make_code()
            try:
                return self.create_with_code(db, code=code, batch_id=batch_id)
            except DuplicateCodeError:
                logger.warning(f"Generated code {code} already taken, attempt {attempt}")
        raise DuplicateCodeError(code)

    def create_ticket(
            self, db: Session, *,
            code: Optional[str] = None,
            batch_id: Optional[str] = None,
            prefix: str = "",
            length: int = None,
            alphabet: str = None
    ) -> Ticket:
        if code is not None:
            return self.create_with_code(db, code=code, batch_id=batch_id)
        length = length or settings.LETTER_CODE_LENGTH
        alphabet = alphabet or CODE_ALPHABET

        def make_code() -> str:
            return f"{prefix}{get_random_string(length, alphabet)}"

        return self.create_with_generated_code(db, make_code=make_code, batch_id=batch_id)

    def create_many(self, db: Session, *, codes: Sequence[str], batch_id: str) -> List[Ticket]:
        """
        All codes are inserted in one transaction, a single clash rolls back the whole set.
        """
        for code in codes:
            check_code(code)
        if len(set(codes)) != len(codes):
            raise InvalidPayloadError("Batch contains repeated codes")
        now = utcnow()
        rows = [
            {"code": code, "batch_id": batch_id, "visibility_flag": True, "created_at": now, "updated_at": now}
            for code in codes
        ]
        try:
            db.execute(sa.insert(Ticket), rows)
            db.commit()
        except IntegrityError:
            db.rollback()
            raise DuplicateCodeError(codes=self.get_existing_codes(db, codes=codes))
        logger.info(f"Batch {batch_id}: {len(codes)} tickets created")
        tickets = db.query(self.model).filter(Ticket.code.in_(list(codes))).all()
        return sorted(tickets, key=lambda t: sequence_of(t.code))

    def _bind(self, db: Session, *, code: str, values: Dict[Any, Any]) -> None:
        # update-if-currently-unbound, never read-then-write
        rows = (
            db.query(self.model)
            .filter(Ticket.code == code)
            .filter(Ticket.content_kind.is_(None))
            .update(values, synchronize_session=False)
        )
        if rows == 1:
            return
        db.rollback()
        if not self.exists(db, code=code):
            raise NotFoundError(code)
        raise AlreadyBoundError(code)

    @staticmethod
    def _gate_values(unlock_at: Optional[datetime], visibility_flag: bool, now: datetime) -> Dict[Any, Any]:
        return {
            Ticket.unlock_at: as_naive_utc(unlock_at),
            Ticket.visibility_flag: visibility_flag,
            Ticket.bound_at: now,
            Ticket.updated_at: now,
        }

    def bind_video(
            self, db: Session, *,
            code: str,
            video_url: str,
            storage_key: Optional[str] = None,
            unlock_at: Optional[datetime] = None,
            visibility_flag: bool = True
    ) -> Ticket:
        if not video_url:
            raise InvalidPayloadError("Video reference is empty", code)
        values = {
            Ticket.content_kind: ContentKind.VIDEO,
            Ticket.video_url: video_url,
            Ticket.video_storage_key: storage_key,
        }
        values.update(self._gate_values(unlock_at, visibility_flag, utcnow()))
        self._bind(db, code=code, values=values)
        db.commit()
        logger.info(f"Video bound to ticket {code}")
        return self.get_or_raise(db, code=code)

    def bind_letter(
            self, db: Session, *,
            code: str,
            obj_in: LetterCreate,
            unlock_at: Optional[datetime] = None,
            visibility_flag: bool = True
    ) -> Ticket:
        now = utcnow()
        values = {Ticket.content_kind: ContentKind.LETTER}
        values.update(self._gate_values(unlock_at, visibility_flag, now))
        self._bind(db, code=code, values=values)
        try:
            db.execute(
                sa.insert(Letter).values(
                    ticket_code=code,
                    sender_name=obj_in.sender_name,
                    message_body=obj_in.message_body,
                    theme=obj_in.theme.value,
                    image_url=obj_in.image_url,
                    image_storage_key=obj_in.image_storage_key,
                    created_at=now,
                )
            )
            db.commit()
        except IntegrityError:
            db.rollback()
            raise AlreadyBoundError(code)
        logger.info(f"Letter bound to ticket {code}")
        return self.get_or_raise(db, code=code)

    @staticmethod
    def storage_keys(db_obj: Ticket) -> List[str]:
        keys = [db_obj.video_storage_key]
        if db_obj.letter:
            keys.append(db_obj.letter.image_storage_key)
        return [k for k in keys if k]

    def clear_content(self, db: Session, *, code: str) -> List[str]:
        """
        Return the ticket to unbound. Clearing an unbound ticket is a no-op.
        Returns the storage keys of the assets that are no longer referenced.

        The reset only applies to the binding that was read: if the ticket was
        cleared and bound again in between, the new binding is left alone and
        nothing is released.
        """
        db_obj = self.get_or_raise(db, code=code)
        db.refresh(db_obj)
        if not db_obj.is_bound:
            return []
        released = self.storage_keys(db_obj)
        rows = (
            db.query(self.model)
            .filter(Ticket.code == code)
            .filter(Ticket.content_kind == db_obj.content_kind)
            .filter(Ticket.bound_at == db_obj.bound_at)
            .update(
                {
                    Ticket.content_kind: None,
                    Ticket.video_url: None,
                    Ticket.video_storage_key: None,
                    Ticket.unlock_at: None,
                    Ticket.visibility_flag: True,
                    Ticket.bound_at: None,
                    Ticket.updated_at: utcnow(),
                },
                synchronize_session=False,
            )
        )
        if rows != 1:
            db.rollback()
            logger.warning(f"Ticket {code} changed while being cleared, left as is")
            return []
        db.query(Letter).filter(Letter.ticket_code == code).delete(synchronize_session=False)
        db.commit()
        logger.info(f"Content cleared from ticket {code}")
        return released

    def remove_by_code(self, db: Session, *, code: str) -> List[str]:
        """
        Delete the ticket and its letter. Deleting a missing ticket is a no-op.
        Returns the storage keys of the assets that are no longer referenced.
        """
        db_obj = self.get_by_code(db, code=code)
        if not db_obj:
            return []
        released = self.storage_keys(db_obj)
        db.query(Letter).filter(Letter.ticket_code == code).delete(synchronize_session=False)
        db.query(self.model).filter(Ticket.code == code).delete(synchronize_session=False)
        db.commit()
        logger.info(f"Ticket {code} deleted")
        return released

    def remove_where(self, db: Session, *, predicate: DeletePredicate) -> Tuple[int, List[str], List[str]]:
        """
        Bulk delete in one transaction: a concurrent reader sees either all matching
        tickets or none of them. Not isolated against a bind landing mid-sweep, a
        ticket bound while this runs may or may not be caught by BOUND/UNBOUND, and
        its asset may be missing from the returned keys. Do not run it concurrently
        with binds on the same tickets.

        Returns (deleted count, deleted codes, released storage keys).
        """
        condition = predicate_filter(predicate)
        matched = (
            db.query(Ticket.code, Ticket.video_storage_key, Letter.image_storage_key)
            .outerjoin(Letter, Letter.ticket_code == Ticket.code)
            .filter(condition)
            .all()
        )
        codes = [row[0] for row in matched]
        released = [key for row in matched for key in (row[1], row[2]) if key]

        db.query(Letter).filter(
            Letter.ticket_code.in_(sa.select(Ticket.code).where(condition))
        ).delete(synchronize_session=False)
        deleted = db.query(self.model).filter(condition).delete(synchronize_session=False)
        db.commit()
        logger.info(f"Bulk delete ({predicate.value}): {deleted} tickets removed")
        return deleted, codes, released


ticket = CRUDTicket(Ticket)

import pytest
from sqlalchemy.orm import Session

from paperplay import crud, schemas
from paperplay.core.exceptions import DuplicateCodeError
from paperplay.core.status import OrderStatus
from paperplay.models.order import LetterRequest
from paperplay.tests.utils.utils import random_code, random_lower_string


def create_letter_request(db: Session, *, ticket_code: str = None) -> (schemas.LetterRequestCreate, LetterRequest):
    new_request = schemas.LetterRequestCreate(
        ticket_code=ticket_code or random_code(),
        customer_name=random_lower_string(10),
        contact_link=f"https://m.me/{random_lower_string(10)}",
        category="Birthday",
        letter_type="Pop-up",
    )
    created_request = crud.letter_request.create_for_ticket(db, obj_in=new_request)
    return new_request, created_request


def assert_letter_requests(request_1: schemas.LetterRequestCreate, request_2: LetterRequest) -> None:
    assert request_1.ticket_code == request_2.ticket_code
    assert request_1.customer_name == request_2.customer_name
    assert request_1.contact_link == request_2.contact_link
    assert request_1.category == request_2.category
    assert request_1.letter_type == request_2.letter_type


# 1
def test_create_letter_request(db: Session) -> None:
    new_request, created_request = create_letter_request(db)
    assert_letter_requests(new_request, created_request)
    assert created_request.status == OrderStatus.PENDING
    crud.letter_request.remove(db, id=created_request.id)


# 2
def test_get_letter_request_by_ticket_code(db: Session) -> None:
    new_request, created_request = create_letter_request(db)
    stored_request = crud.letter_request.get_by_ticket_code(db, ticket_code=new_request.ticket_code)
    assert_letter_requests(new_request, stored_request)
    crud.letter_request.remove(db, id=created_request.id)


# 3
def test_one_letter_request_per_code(db: Session) -> None:
    new_request, created_request = create_letter_request(db)
    with pytest.raises(DuplicateCodeError):
        create_letter_request(db, ticket_code=new_request.ticket_code)
    crud.letter_request.remove(db, id=created_request.id)


# 4
def test_set_status_and_filter(db: Session) -> None:
    _, created_request = create_letter_request(db)
    updated = crud.letter_request.set_status(db, db_obj=created_request, status=OrderStatus.PROCESSING)
    assert updated.status == OrderStatus.PROCESSING
    processing = crud.letter_request.get_multi_by_status(db, status=OrderStatus.PROCESSING, limit=1000)
    assert created_request.id in [r.id for r in processing]
    done = crud.letter_request.get_multi_by_status(db, status=OrderStatus.DONE, limit=1000)
    assert created_request.id not in [r.id for r in done]
    crud.letter_request.remove(db, id=created_request.id)

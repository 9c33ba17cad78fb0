import asyncio
import os

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from paperplay import crud, schemas
from paperplay.core.exceptions import InvalidPayloadError
from paperplay.core.security import CODE_ALPHABET
from paperplay.core.status import ContentKind, LetterTheme
from paperplay.ticketing import letters
from paperplay.utils import filestorage
from paperplay.tests.utils.ticket import random_letter
from paperplay.tests.utils.upload import make_upload, stored_files


# 1
def test_compose_letter(db: Session) -> None:
    letter_in = random_letter(theme=LetterTheme.VALENTINES)
    issued = asyncio.run(letters.compose_letter(db, letter_in=letter_in))
    assert len(issued.code) == 8
    assert all(c in CODE_ALPHABET for c in issued.code)
    assert issued.link.endswith(f"/{issued.code}")

    ticket = crud.ticket.get_or_raise(db, code=issued.code)
    assert ticket.content_kind == ContentKind.LETTER
    assert ticket.letter.theme == "valentines"
    assert ticket.letter.image_url is None
    crud.ticket.remove_by_code(db, code=issued.code)


# 2
def test_compose_letter_with_image(db: Session) -> None:
    image = make_upload(content=b"\x89PNG\r\n", filename="us.png", content_type="image/png")
    issued = asyncio.run(letters.compose_letter(db, letter_in=random_letter(), image=image))
    ticket = crud.ticket.get_or_raise(db, code=issued.code)
    key = ticket.letter.image_storage_key
    assert key.startswith(f"{issued.code}-")
    assert os.path.exists(filestorage.local_path(key))
    crud.ticket.remove_by_code(db, code=issued.code)


# 3
def test_failed_compose_leaves_nothing(db: Session, monkeypatch) -> None:
    created = []
    create_ticket = crud.ticket.create_ticket

    def recording_create_ticket(db, **kwargs):
        ticket = create_ticket(db, **kwargs)
        created.append(ticket.code)
        return ticket

    monkeypatch.setattr(crud.ticket, "create_ticket", recording_create_ticket)
    before = stored_files()
    with pytest.raises(InvalidPayloadError):
        asyncio.run(letters.compose_letter(db, letter_in=random_letter(), image=make_upload()))
    assert stored_files() == before
    assert len(created) == 1
    assert not crud.ticket.exists(db, code=created[0])


# 4
def test_letter_must_not_be_blank() -> None:
    with pytest.raises(ValueError):
        schemas.LetterCreate(sender_name=" ", message_body="hi")
    with pytest.raises(ValueError):
        schemas.LetterCreate(sender_name="Ana", message_body="")
    with pytest.raises(ValueError):
        schemas.LetterCreate(sender_name="Ana", message_body="hi", theme="birthday")


# 5
def test_failed_letter_write_leaves_nothing(db: Session, monkeypatch) -> None:
    created = []
    create_ticket = crud.ticket.create_ticket

    def recording_create_ticket(db, **kwargs):
        ticket = create_ticket(db, **kwargs)
        created.append(ticket.code)
        return ticket

    def bind_broken(db, *, code, **kwargs):
        raise OperationalError("INSERT INTO letter", {}, Exception("disk I/O error"))

    monkeypatch.setattr(crud.ticket, "create_ticket", recording_create_ticket)
    monkeypatch.setattr(crud.ticket, "bind_letter", bind_broken)
    image = make_upload(content=b"\x89PNG\r\n", filename="us.png", content_type="image/png")
    before = stored_files()
    with pytest.raises(OperationalError):
        asyncio.run(letters.compose_letter(db, letter_in=random_letter(), image=image))
    assert stored_files() == before
    assert len(created) == 1
    assert not crud.ticket.exists(db, code=created[0])

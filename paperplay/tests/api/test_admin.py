from typing import Dict

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from paperplay import crud
from paperplay.core.config import settings
from paperplay.core.security import create_access_token
from paperplay.tests.utils.ticket import create_bound_ticket, create_random_ticket
from paperplay.tests.utils.utils import random_batch_prefix, random_code, tomorrow


# 1
def test_admin_requires_token(client: TestClient) -> None:
    r = client.get(f"{settings.API_V1_STR}/admin/tickets")
    assert r.status_code == 401

    r = client.get(f"{settings.API_V1_STR}/admin/tickets", headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 403

    token = create_access_token("viewer@paperplay.test", scopes=[])
    r = client.get(f"{settings.API_V1_STR}/admin/tickets", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 403


# 2
def test_issue_ticket(client: TestClient, db: Session, operator_token_headers: Dict[str, str]) -> None:
    code = random_code()
    r = client.post(f"{settings.API_V1_STR}/admin/tickets", headers=operator_token_headers, json={"code": code})
    assert r.status_code == 201, r.text
    assert r.json()["link"] == f"{settings.SHARE_BASE_URL}/{code}"

    r = client.post(f"{settings.API_V1_STR}/admin/tickets", headers=operator_token_headers, json={"code": code})
    assert r.status_code == 409
    assert r.json()["error_kind"] == "DuplicateCode"
    crud.ticket.remove_by_code(db, code=code)


# 3
def test_issue_batch(client: TestClient, db: Session, operator_token_headers: Dict[str, str]) -> None:
    prefix = random_batch_prefix()
    r = client.post(f"{settings.API_V1_STR}/admin/tickets/batch", headers=operator_token_headers,
                    json={"count": 5, "id_prefix": prefix})
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["batch_id"] == prefix
    assert [t["code"] for t in body["tickets"]] == [f"{prefix}-{i}" for i in range(1, 6)]

    r = client.get(f"{settings.API_V1_STR}/admin/tickets", headers=operator_token_headers,
                   params={"batch_id": prefix, "predicate": "unbound"})
    assert r.status_code == 200
    assert len(r.json()) == 5
    assert all(t["availability"] == "AVAILABLE" for t in r.json())

    r = client.post(f"{settings.API_V1_STR}/admin/tickets/batch", headers=operator_token_headers,
                    json={"count": 0})
    assert r.status_code == 400
    for t in crud.ticket.get_by_batch(db, batch_id=prefix):
        crud.ticket.remove_by_code(db, code=t.code)


# 4
def test_read_ticket_hides_locked_preview(client: TestClient, db: Session,
                                          operator_token_headers: Dict[str, str]) -> None:
    code = create_bound_ticket(db, unlock_at=tomorrow()).code
    r = client.get(f"{settings.API_V1_STR}/admin/tickets/{code}", headers=operator_token_headers)
    assert r.status_code == 200
    body = r.json()
    assert body["availability"] == "USED"
    assert body["is_open"] is False
    assert "preview" not in body
    crud.ticket.remove_by_code(db, code=code)


# 5
def test_clear_and_delete_ticket(client: TestClient, db: Session, operator_token_headers: Dict[str, str]) -> None:
    code = create_bound_ticket(db).code
    r = client.delete(f"{settings.API_V1_STR}/admin/tickets/{code}/content", headers=operator_token_headers)
    assert r.status_code == 200
    assert r.json()["bound"] is False

    r = client.delete(f"{settings.API_V1_STR}/admin/tickets/{code}", headers=operator_token_headers)
    assert r.json() == {"deleted": 1, "codes": [code]}
    r = client.delete(f"{settings.API_V1_STR}/admin/tickets/{code}", headers=operator_token_headers)
    assert r.status_code == 200
    assert r.json() == {"deleted": 0, "codes": []}

    r = client.delete(f"{settings.API_V1_STR}/admin/tickets/{code}/content", headers=operator_token_headers)
    assert r.status_code == 404


# 6
def test_bulk_delete_bound(client: TestClient, db: Session, operator_token_headers: Dict[str, str]) -> None:
    unbound_code = create_random_ticket(db).code
    bound_code = create_bound_ticket(db).code
    r = client.delete(f"{settings.API_V1_STR}/admin/tickets", headers=operator_token_headers,
                      params={"predicate": "bound"})
    assert r.status_code == 200
    assert bound_code in r.json()["codes"]
    assert unbound_code not in r.json()["codes"]
    assert crud.ticket.exists(db, code=unbound_code)

    r = client.delete(f"{settings.API_V1_STR}/admin/tickets", headers=operator_token_headers)
    assert r.status_code == 422
    crud.ticket.remove_by_code(db, code=unbound_code)


# 7
def test_order_workflow(client: TestClient, db: Session, operator_token_headers: Dict[str, str]) -> None:
    r = client.post(f"{settings.API_V1_STR}/orders",
                    data={"customer_name": "Ana", "contact_link": "https://m.me/ana"})
    code = r.json()["order"]["ticket_code"]

    r = client.patch(f"{settings.API_V1_STR}/admin/orders/{code}", headers=operator_token_headers,
                     json={"status": "Processing"})
    assert r.status_code == 200, r.text
    assert r.json()["status"] == "Processing"

    r = client.get(f"{settings.API_V1_STR}/admin/orders", headers=operator_token_headers,
                   params={"status": "Processing", "limit": 1000})
    assert code in [o["ticket_code"] for o in r.json()]

    r = client.patch(f"{settings.API_V1_STR}/admin/orders/{code}", headers=operator_token_headers,
                     json={"status": "Shipped"})
    assert r.status_code == 422

    order = crud.letter_request.get_by_ticket_code(db, ticket_code=code)
    crud.letter_request.remove(db, id=order.id)
    crud.ticket.remove_by_code(db, code=code)


# 8
def test_issue_batch_default_size(client: TestClient, db: Session, operator_token_headers: Dict[str, str],
                                  monkeypatch) -> None:
    monkeypatch.setattr(settings, "DEFAULT_BATCH_SIZE", 3)
    prefix = random_batch_prefix()
    r = client.post(f"{settings.API_V1_STR}/admin/tickets/batch", headers=operator_token_headers,
                    json={"id_prefix": prefix})
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["count"] == 3
    assert [t["code"] for t in body["tickets"]] == [f"{prefix}-{i}" for i in range(1, 4)]
    for t in crud.ticket.get_by_batch(db, batch_id=prefix):
        crud.ticket.remove_by_code(db, code=t.code)

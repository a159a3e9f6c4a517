"""
Pytest tests for the rental requests API (GET /requests, GET /requests/mine, POST /requests).
"""

from __future__ import annotations

from shortstay_api.database.models import RentalRequest

from conftest import auth_headers


def _create(client, uid: str = "alice", **overrides) -> str:
    body = {"area": "Florentin", "text": "Looking for a quiet place"}
    body.update(overrides)
    r = client.post("/requests", json=body, headers=auth_headers(uid))
    assert r.status_code == 201, r.text
    return r.json()["id"]


def test_create_request_with_dates_and_budget(client):
    """Dates are parsed from ISO-8601 and returned in UTC; status is ACTIVE."""
    request_id = _create(
        client,
        dateFrom="2026-07-01T12:00:00Z",
        dateTo="2026-07-05T10:00:00+02:00",
        budgetMax=400,
    )
    items = client.get("/requests").json()["items"]
    assert len(items) == 1
    item = items[0]
    assert item["id"] == request_id
    assert item["authorId"] == "alice"
    assert item["status"] == "ACTIVE"
    assert item["budgetMax"] == 400
    assert item["dateFrom"].startswith("2026-07-01T12:00:00")
    assert item["dateTo"].startswith("2026-07-05T08:00:00")


def test_create_request_optional_fields_default_to_null(client):
    _create(client)
    item = client.get("/requests").json()["items"][0]
    assert item["dateFrom"] is None
    assert item["dateTo"] is None
    assert item["budgetMax"] is None


def test_create_request_validation(client, store):
    for body in (
        {"area": "F", "text": "Looking for a quiet place"},
        {"area": "Florentin", "text": "hey"},
        {"area": "Florentin", "text": "Looking for a quiet place", "dateFrom": "next week"},
        {"area": "Florentin", "text": "Looking for a quiet place", "budgetMax": -5},
    ):
        r = client.post("/requests", json=body, headers=auth_headers("alice"))
        assert r.status_code == 400, body
    with store.session_scope() as session:
        assert session.query(RentalRequest).count() == 0


def test_create_request_requires_auth(client, store):
    r = client.post("/requests", json={"area": "Florentin", "text": "Looking for a quiet place"})
    assert r.status_code == 401
    with store.session_scope() as session:
        assert session.query(RentalRequest).count() == 0


def test_public_list_is_active_only_with_area_filter(client, store):
    """GET /requests shows ACTIVE requests only, newest first, optionally by area."""
    a = _create(client, area="Florentin")
    b = _create(client, "bob", area="Jaffa")
    closed = _create(client, area="Florentin")
    with store.session_scope() as session:
        session.get(RentalRequest, closed).status = "CLOSED"

    assert [i["id"] for i in client.get("/requests").json()["items"]] == [b, a]
    r = client.get("/requests", params={"area": "Jaffa"})
    assert [i["id"] for i in r.json()["items"]] == [b]


def test_mine_lists_all_own_requests(client, store):
    """GET /requests/mine includes CLOSED requests, excludes others', omits authorId."""
    own = _create(client)
    closed = _create(client)
    _create(client, "bob")
    with store.session_scope() as session:
        session.get(RentalRequest, closed).status = "CLOSED"

    r = client.get("/requests/mine", headers=auth_headers("alice"))
    assert r.status_code == 200
    items = r.json()["items"]
    assert [i["id"] for i in items] == [closed, own]
    assert all("authorId" not in i for i in items)


def test_mine_requires_auth(client):
    assert client.get("/requests/mine").status_code == 401

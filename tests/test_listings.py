"""
Pytest tests for the listings API (GET /listings, GET /listings/{id}, POST /listings).

Uses the temporary SQLite store and fake verifier from conftest.
"""

from __future__ import annotations

from shortstay_api.database import repositories
from shortstay_api.database.models import Listing

from conftest import auth_headers


def _listing_body(**overrides) -> dict:
    body = {
        "title": "Sunny loft",
        "area": "Florentin",
        "pricePerNight": 100,
        "description": "Two rooms, balcony, close to the beach.",
    }
    body.update(overrides)
    return body


def _create(client, uid: str = "alice", **overrides) -> str:
    r = client.post("/listings", json=_listing_body(**overrides), headers=auth_headers(uid))
    assert r.status_code == 201, r.text
    return r.json()["id"]


def test_create_listing_persists_active_with_owner(client, store):
    """POST /listings stores an ACTIVE listing owned by the caller."""
    listing_id = _create(
        client,
        availabilityText="Weekends in May",
        images=[{"storagePath": "listings/a/1.jpg"}],
    )
    r = client.get(f"/listings/{listing_id}")
    assert r.status_code == 200
    item = r.json()["item"]
    assert item["id"] == listing_id
    assert item["ownerId"] == "alice"
    assert item["status"] == "ACTIVE"
    assert item["pricePerNight"] == 100
    assert item["availabilityText"] == "Weekends in May"
    assert item["images"] == [{"storagePath": "listings/a/1.jpg"}]
    assert item["createdAt"] == item["updatedAt"]


def test_create_listing_requires_auth(client, store):
    """Unauthenticated or invalid-token POST -> 401 and nothing stored."""
    r = client.post("/listings", json=_listing_body())
    assert r.status_code == 401
    assert r.json() == {"error": "Missing Bearer token"}
    r = client.post("/listings", json=_listing_body(), headers={"Authorization": "Bearer nope"})
    assert r.status_code == 401
    assert r.json() == {"error": "Invalid/expired token"}
    with store.session_scope() as session:
        assert session.query(Listing).count() == 0


def test_create_listing_validation(client, store):
    """Out-of-range or mistyped fields -> 400 with a message; nothing stored."""
    bad_bodies = [
        _listing_body(title="ab"),
        _listing_body(area="x"),
        _listing_body(pricePerNight=-1),
        _listing_body(pricePerNight=1_000_001),
        _listing_body(pricePerNight="100"),
        _listing_body(pricePerNight=99.5),
        _listing_body(pricePerNight=True),
        _listing_body(description="short"),
        _listing_body(availabilityText="x" * 501),
        _listing_body(images=[{"storagePath": "ab"}]),
    ]
    for body in bad_bodies:
        r = client.post("/listings", json=body, headers=auth_headers("alice"))
        assert r.status_code == 400, body
        assert r.json()["error"]
    missing = _listing_body()
    del missing["description"]
    r = client.post("/listings", json=missing, headers=auth_headers("alice"))
    assert r.status_code == 400
    assert "description" in r.json()["error"]
    with store.session_scope() as session:
        assert session.query(Listing).count() == 0


def test_create_listing_accepts_integral_float_price(client):
    """A JSON number like 100.0 is a whole amount and is stored as the integer 100."""
    listing_id = _create(client, pricePerNight=100.0)
    item = client.get(f"/listings/{listing_id}").json()["item"]
    assert item["pricePerNight"] == 100
    assert isinstance(item["pricePerNight"], int)


def test_list_price_filter(client):
    """priceMax=150 returns only the 100-priced listing."""
    cheap = _create(client, pricePerNight=100)
    _create(client, pricePerNight=200)
    r = client.get("/listings", params={"priceMax": "150"})
    assert r.status_code == 200
    items = r.json()["items"]
    assert [i["id"] for i in items] == [cheap]


def test_list_ignores_non_numeric_price_max(client):
    _create(client, pricePerNight=100)
    _create(client, pricePerNight=200)
    for raw in ("abc", "", "inf"):
        r = client.get("/listings", params={"priceMax": raw})
        assert len(r.json()["items"]) == 2


def test_list_area_filter_and_newest_first(client):
    """area is an exact (trimmed) match; results are newest first."""
    first = _create(client, area="Florentin")
    second = _create(client, area="Florentin")
    _create(client, area="Jaffa")
    r = client.get("/listings", params={"area": "  Florentin "})
    assert [i["id"] for i in r.json()["items"]] == [second, first]


def test_list_status_filter_defaults_to_active(client, store):
    """Without status only ACTIVE listings are listed; status is case-insensitive."""
    active = _create(client)
    inactive = _create(client)
    with store.session_scope() as session:
        session.get(Listing, inactive).status = "INACTIVE"

    r = client.get("/listings")
    assert [i["id"] for i in r.json()["items"]] == [active]
    r = client.get("/listings", params={"status": "inactive"})
    assert [i["id"] for i in r.json()["items"]] == [inactive]


def test_list_capped_at_fifty(client, store):
    for i in range(55):
        repositories.create_listing(
            store,
            "alice",
            title=f"Listing {i}",
            area="Florentin",
            price_per_night=i,
            description="A perfectly fine place to stay.",
        )
    r = client.get("/listings")
    assert len(r.json()["items"]) == 50


def test_get_listing_invalid_and_missing(client):
    """Malformed id -> 400; well-formed but unknown id -> 404."""
    r = client.get("/listings/not-an-id")
    assert r.status_code == 400
    assert r.json() == {"error": "Invalid id"}
    r = client.get("/listings/" + "0" * 32)
    assert r.status_code == 404
    assert r.json() == {"error": "Not found"}

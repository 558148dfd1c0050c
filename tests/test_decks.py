from datetime import datetime, timedelta
from uuid import uuid4

import pytest

from prepai import models
from tests.conftest import deck_count, seed_deck


def test_list_decks_empty(client):
    r = client.get("/api/decks")
    assert r.status_code == 200, r.text
    assert r.json() == {"success": True, "count": 0, "data": []}


def test_list_decks_newest_first(client, db):
    old = seed_deck(db, "Old Topic")
    new = seed_deck(db, "New Topic")

    # make ordering independent of clock resolution (bulk update skips the immutability guard)
    db.query(models.Deck).filter(models.Deck.id == old.id).update(
        {"created_at": datetime.utcnow() - timedelta(days=1)}
    )
    db.commit()

    r = client.get("/api/decks")
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["count"] == 2
    assert [d["id"] for d in body["data"]] == [new.id, old.id]


def test_list_decks_keeps_card_order(client, db):
    seed_deck(db, "Ordered", n_cards=5)

    r = client.get("/api/decks")
    questions = [c["question"] for c in r.json()["data"][0]["cards"]]
    assert questions == ["AC00", "AC01", "AC02", "AC03", "AC04"]


def test_delete_deck_returns_deleted_record(client, db):
    deck = seed_deck(db, "To Delete", n_cards=4)
    deck_id = deck.id

    r = client.delete(f"/api/decks/{deck_id}")
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["success"] is True
    assert body["message"] == "Deck deleted successfully"
    assert body["data"]["id"] == deck_id
    assert body["data"]["topic"] == "To Delete"
    assert len(body["data"]["cards"]) == 4

    assert deck_count(db) == 0
    # cards go with the deck
    assert db.query(models.Card).count() == 0


def test_delete_missing_deck_is_404(client, db):
    seed_deck(db, "Keep Me")

    r = client.delete(f"/api/decks/{uuid4().hex}")
    assert r.status_code == 404, r.text
    assert r.json() == {"success": False, "error": "Deck not found"}
    assert deck_count(db) == 1


def test_delete_malformed_id_is_400(client, db):
    r = client.delete("/api/decks/not-an-id")
    assert r.status_code == 400, r.text
    assert r.json()["error"] == "Invalid deck ID"


def test_update_progress(client, db):
    deck = seed_deck(db, "Progress Deck")

    r = client.patch(f"/api/decks/{deck.id}/progress", json={"progress": 40})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["message"] == "Progress updated"
    assert body["data"]["progress"] == 40

    r = client.get("/api/decks")
    assert r.json()["data"][0]["progress"] == 40


def test_update_progress_keeps_fractional_value(client, db):
    deck = seed_deck(db, "Fractional")

    r = client.patch(f"/api/decks/{deck.id}/progress", json={"progress": 33.5})
    assert r.status_code == 200, r.text
    assert r.json()["data"]["progress"] == 33.5


@pytest.mark.parametrize("value", [0, 100])
def test_update_progress_bounds_are_inclusive(client, db, value):
    deck = seed_deck(db, "Bounds")

    r = client.patch(f"/api/decks/{deck.id}/progress", json={"progress": value})
    assert r.status_code == 200, r.text
    assert r.json()["data"]["progress"] == value


@pytest.mark.parametrize("value", [150, -1, 100.01, 10**400, "40", True, None, [40]])
def test_update_progress_rejects_bad_values(client, db, value):
    deck = seed_deck(db, "Strict", progress=10)

    r = client.patch(f"/api/decks/{deck.id}/progress", json={"progress": value})
    assert r.status_code == 400, r.text
    assert r.json()["error"] == "Progress must be a number between 0 and 100"

    db.refresh(deck)
    assert deck.progress == 10


def test_update_progress_rejects_integer_too_large_for_float(client, db):
    deck = seed_deck(db, "Huge", progress=10)

    body = '{"progress": 1' + "0" * 400 + "}"
    r = client.patch(
        f"/api/decks/{deck.id}/progress",
        content=body,
        headers={"Content-Type": "application/json"},
    )
    assert r.status_code == 400, r.text
    assert r.json()["error"] == "Progress must be a number between 0 and 100"

    db.refresh(deck)
    assert deck.progress == 10


def test_update_progress_missing_deck_is_404(client):
    r = client.patch(f"/api/decks/{uuid4().hex}/progress", json={"progress": 50})
    assert r.status_code == 404, r.text


def test_update_progress_malformed_id_is_400(client):
    r = client.patch("/api/decks/1234/progress", json={"progress": 50})
    assert r.status_code == 400, r.text
    assert r.json()["error"] == "Invalid deck ID"


def test_update_progress_bumps_updated_at_only(client, db):
    deck = seed_deck(db, "Timestamps")
    created_at = deck.created_at
    deck.updated_at = datetime.utcnow() - timedelta(days=1)
    db.commit()
    stale = deck.updated_at

    r = client.patch(f"/api/decks/{deck.id}/progress", json={"progress": 70})
    assert r.status_code == 200, r.text

    db.refresh(deck)
    assert deck.created_at == created_at
    assert deck.updated_at > stale


def test_timestamps_serialize_as_utc(client, db):
    deck = seed_deck(db, "Zulu")
    r = client.patch(f"/api/decks/{deck.id}/progress", json={"progress": 5})
    assert r.status_code == 200, r.text

    body = r.json()["data"]
    for key in ("createdAt", "updatedAt"):
        parsed = datetime.fromisoformat(body[key].replace("Z", "+00:00"))
        assert parsed.utcoffset() == timedelta(0)
    assert body["createdAt"].endswith("Z")


def test_created_at_is_immutable(db):
    deck = seed_deck(db, "Immutable")
    with pytest.raises(ValueError):
        deck.created_at = datetime.utcnow() + timedelta(days=3)


def test_unknown_route_is_404(client):
    r = client.get("/api/nope")
    assert r.status_code == 404
    assert r.json() == {"success": False, "error": "Route not found"}

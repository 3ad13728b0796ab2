from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from api.routers.submissions import resolve_submitted_at
from db.models import ContactMessage, ValuationRequest


def utc_naive_now():
    return datetime.now(timezone.utc).replace(tzinfo=None)


def only_row(session_factory, model):
    with session_factory() as db:
        rows = db.query(model).all()
        assert len(rows) == 1
        db.expunge_all()
        return rows[0]


def test_resolve_submitted_at_uses_client_timestamp():
    assert resolve_submitted_at("2026-05-01T12:00:00+02:00") == datetime(2026, 5, 1, 10, 0, tzinfo=timezone.utc)
    assert resolve_submitted_at("2026-05-01T10:00:00.000Z") == datetime(2026, 5, 1, 10, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize("value", [None, "", "yesterday", "2026-13-45"])
def test_resolve_submitted_at_falls_back_to_now(value):
    resolved = resolve_submitted_at(value)
    assert abs(datetime.now(timezone.utc) - resolved) < timedelta(minutes=1)


def test_contact_message_is_stored_verbatim(client, session_factory):
    resp = client.post("/api/messages", json={
        "vorname": "Anna",
        "nachname": "Huber",
        "email": "not-an-email",
        "telefon": "+43 660 1234567",
        "nachricht": "Ist der Golf noch da?",
        "submitted_at": "2026-05-01T12:00:00+02:00",
        "ignored": "field",
    })
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}

    row = only_row(session_factory, ContactMessage)
    assert row.vorname == "Anna"
    assert row.nachname == "Huber"
    assert row.email == "not-an-email"
    assert row.telefon == "+43 660 1234567"
    assert row.nachricht == "Ist der Golf noch da?"
    assert row.submitted_at.replace(tzinfo=None) == datetime(2026, 5, 1, 10, 0)


def test_contact_message_missing_fields_become_null(client, session_factory):
    assert client.post("/api/messages", json={"email": "a@b.at"}).status_code == 200

    row = only_row(session_factory, ContactMessage)
    assert row.email == "a@b.at"
    assert row.vorname is None
    assert row.nachricht is None
    assert abs(utc_naive_now() - row.submitted_at.replace(tzinfo=None)) < timedelta(minutes=1)


def test_empty_contact_body_is_accepted(client, count_rows):
    assert client.post("/api/messages").status_code == 200
    assert count_rows(ContactMessage) == 1


def test_messages_are_append_only(client, count_rows):
    payload = {"vorname": "Anna", "nachricht": "Hallo"}
    client.post("/api/messages", json=payload)
    client.post("/api/messages", json=payload)
    assert count_rows(ContactMessage) == 2

    assert client.get("/api/messages").status_code == 405
    assert client.delete("/api/messages").status_code == 405


def test_valuation_request_is_stored(client, session_factory):
    resp = client.post("/api/valuations", json={
        "marke": "VW",
        "modell": "Golf",
        "jahr": "2015",
        "km": 120000,
        "kraftstoff": "Diesel",
        "zustand": "gut",
        "kontakt": "0660 1234567",
        "anmerkung": "Kleiner Kratzer hinten",
        "submitted_at": "kaputt",
    })
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}

    row = only_row(session_factory, ValuationRequest)
    assert (row.marke, row.modell, row.jahr, row.km) == ("VW", "Golf", 2015, 120000)
    assert row.zustand == "gut"
    assert row.anmerkung == "Kleiner Kratzer hinten"
    assert abs(utc_naive_now() - row.submitted_at.replace(tzinfo=None)) < timedelta(minutes=1)


def test_unparseable_body_is_bad_request(client, count_rows):
    resp = client.post("/api/valuations", content="marke=VW",
                       headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Bad request"}
    assert count_rows(ValuationRequest) == 0


def test_store_failure_is_server_error(client, monkeypatch):
    def broken_commit(self):
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(Session, "commit", broken_commit)
    resp = client.post("/api/valuations", json={"marke": "VW"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "DB error"}


def test_resolve_submitted_at_accepts_epoch_milliseconds():
    assert resolve_submitted_at(1777629600000) == datetime(2026, 5, 1, 10, 0, tzinfo=timezone.utc)
    assert resolve_submitted_at(1777629600000.0) == datetime(2026, 5, 1, 10, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize("value", [True, {}, [1], float("inf"), 10**30])
def test_resolve_submitted_at_ignores_other_values(value):
    resolved = resolve_submitted_at(value)
    assert abs(datetime.now(timezone.utc) - resolved) < timedelta(minutes=1)


def test_non_string_contact_values_are_stored_as_text(client, session_factory):
    resp = client.post("/api/messages", json={
        "vorname": "Anna",
        "telefon": 6601234567,
        "nachricht": True,
        "submitted_at": 1777629600000,
    })
    assert resp.status_code == 200

    row = only_row(session_factory, ContactMessage)
    assert row.telefon == "6601234567"
    assert row.nachricht == "true"
    assert row.submitted_at.replace(tzinfo=None) == datetime(2026, 5, 1, 10, 0)


def test_non_string_valuation_values_are_stored_as_text(client, session_factory):
    resp = client.post("/api/valuations", json={"marke": "VW", "kontakt": 6601234567, "zustand": 2})
    assert resp.status_code == 200

    row = only_row(session_factory, ValuationRequest)
    assert row.kontakt == "6601234567"
    assert row.zustand == "2"

"""
Tests for the HTTP layer.

These tests use FastAPI TestClient with the policy book swapped for a
fresh in‑memory PolicyBook and the evaluation date pinned.
"""

import importlib
import logging
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from api.deps import get_book, get_today
from api.main import app
from conftest import TODAY
from polizas.portfolio import PolicyBook


@pytest.fixture
def client():
    book = PolicyBook()
    app.dependency_overrides[get_book] = lambda: book
    app.dependency_overrides[get_today] = lambda: TODAY
    yield TestClient(app)
    app.dependency_overrides.clear()


def _iso(days_from_today):
    return (TODAY + timedelta(days=days_from_today)).isoformat()


def _post(client, pid, **fields):
    body = {"id": pid, "policy_number": f"POL-{pid}", **fields}
    resp = client.post("/policies", json=body)
    assert resp.status_code == 201, resp.text
    return resp


def test_health(client):
    assert client.get("/").json()["status"] == "ok"


def test_create_and_get_policy(client):
    resp = _post(client, "p1", total=1500.0, payment_due=_iso(-3), term_end=_iso(200))
    assert resp.json() == {"id": "p1"}

    data = client.get("/policies/p1").json()
    assert data["policy_number"] == "POL-p1"
    assert data["status"] == "active"
    assert data["payment_due"] == _iso(-3)


def test_get_missing_policy_404(client):
    assert client.get("/policies/ghost").status_code == 404


def test_invalid_status_rejected(client):
    resp = client.post("/policies", json={"id": "x", "policy_number": "X", "status": "activa"})
    assert resp.status_code == 422


def test_overdue_critical_needs_a_late_payment(client):
    resp = client.post("/policies", json={"id": "x", "policy_number": "X",
                                           "status": "overdue_critical"})
    assert resp.status_code == 422
    resp = client.post("/policies", json={"id": "y", "policy_number": "Y",
                                           "status": "overdue_critical",
                                           "payment_due": _iso(-3)})
    assert resp.status_code == 422

    assert client.get("/collections").json() == []
    assert client.get("/policies/x").status_code == 404


def test_restamp_and_status_snapshot(client):
    _post(client, "crit", payment_due=_iso(-45), term_end=_iso(200))
    _post(client, "ok", payment_due=_iso(-2), term_end=_iso(200))
    _post(client, "renew", term_end=_iso(20))

    assert client.post("/policies/restamp").json() == {"changed": ["crit", "renew"]}
    counts = client.get("/status").json()
    assert counts["overdue_critical"] == 1
    assert counts["pending_renewal"] == 1
    assert counts["active"] == 1
    assert counts["cancelled"] == 0


def test_collections_worklist_order_and_filter(client):
    _post(client, "big", total=200000.0, payment_due=_iso(-5))
    _post(client, "old", total=50000.0, payment_due=_iso(-45))
    _post(client, "calm", total=10.0, payment_due=_iso(60))
    client.post("/policies/restamp")

    items = client.get("/collections").json()
    assert [i["id"] for i in items] == ["old", "big"]
    assert items[0]["tier"] == "CRÍTICO"
    assert items[0]["days_overdue"] == 45

    assert [i["id"] for i in client.get("/collections", params={"tier": "due_soon"}).json()] == ["big"]
    assert client.get("/collections", params={"tier": "urgent"}).status_code == 422


def test_collections_stats(client):
    _post(client, "old", total=50000.0, payment_due=_iso(-45), status="overdue_critical")
    _post(client, "calm", total=10.0, payment_due=_iso(60))
    stats = client.get("/collections/stats").json()
    assert stats["payments"]["critical"] == 1
    assert stats["payments"]["current"] == 1
    assert stats["payments"]["overdue_amount"] == 50000.0
    assert stats["collections"]["policies_with_debt"] == 1


def test_renewal_alerts_and_stats(client):
    _post(client, "late", term_end=_iso(-2))
    _post(client, "soon", term_end=_iso(6))
    _post(client, "far", term_end=_iso(300))

    alerts = client.get("/renewals").json()
    assert alerts[0]["policy_id"] == "late"
    assert alerts[0]["type"] == "renewal_overdue"
    assert {a["policy_id"] for a in alerts} == {"late", "soon"}

    stats = client.get("/renewals/stats").json()
    assert stats["needing_renewal"] == 1
    assert stats["expired"] == 1


def test_payment_received_clears_critical(client):
    _post(client, "p", payment_due=_iso(-45), term_end=_iso(200), has_pending_payment=True)
    client.post("/policies/restamp")
    assert client.get("/policies/p/display").json()["label"] == "Vencido Super Destacado"

    paid = client.post("/policies/p/payment-received").json()
    assert paid["status"] == "active"
    assert paid["has_pending_payment"] is False
    assert paid["payment_due"] == _iso(30)

    assert client.post("/policies/restamp").json() == {"changed": []}
    assert client.get("/policies/p/display").json()["label"] == "Activa"
    assert client.get("/collections").json() == []


def test_cancel_twice_conflicts(client):
    _post(client, "p")
    assert client.post("/policies/p/cancel").json()["status"] == "cancelled"
    assert client.post("/policies/p/cancel").status_code == 409


def test_renew_rolls_term(client):
    _post(client, "p", term_start=_iso(-360), term_end=_iso(5))
    data = client.post("/policies/p/renew", json={"new_term_end": _iso(370)}).json()
    assert data["status"] == "renewed"
    assert data["term_start"] == _iso(5)
    assert data["term_end"] == _iso(370)


def test_payment_alerts_route(client):
    _post(client, "late", total=900.0, payment_due=_iso(-10), contratante="Ana Ruiz")
    _post(client, "soon", payment_due=_iso(5))
    _post(client, "calm", payment_due=_iso(60))
    _post(client, "gone", payment_due=_iso(-10), status="cancelled")

    alerts = client.get("/collections/alerts").json()
    assert [a["policy_id"] for a in alerts] == ["late", "soon"]
    assert alerts[0]["type"] == "overdue_critical"
    assert alerts[0]["client_name"] == "Ana Ruiz"
    assert alerts[0]["amount"] == 900.0
    assert alerts[1]["category"] == "7_days"
    assert alerts[1]["persistent"] is True

    only_week = client.get("/collections/alerts", params={"category": "7_days"}).json()
    assert [a["policy_id"] for a in only_week] == ["soon"]
    assert client.get("/collections/alerts", params={"category": "soon"}).status_code == 422


def test_importing_app_leaves_logging_alone(monkeypatch):
    import api.main

    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda *a, **kw: calls.append(kw))
    importlib.reload(api.main)
    assert calls == []

"""
tests/test_records.py
=====================

Unit tests for raw record parsing and the per‑record error boundary.
"""

from datetime import date

import pytest

from conftest import TODAY
from polizas.errors import InvalidDateError
from polizas.models import PaymentFrequency, PolicyStatus
from polizas.records import parse_date, policy_from_record, policy_to_record, restamp_records

RAW = {
    "id": "pol-1",
    "policyNumber": "GMX-1001",
    "status": "active",
    "total": 50000,
    "fechaPagoActual": "2024-04-17",
    "vigenciaTotal": {"inicio": "2024-01-01", "fin": "2025-01-01"},
    "formaDePago": "Trimestral",
    "hasPendingPayment": True,
    "ramo": "Autos",
    "aseguradora": "GNP",
    "contratante": {"nombre": "Ana Ruiz", "rfc": "RUAA800101XXX"},
    "comentarios": "cliente frecuente",
}


def test_policy_from_record():
    p = policy_from_record(RAW)
    assert p.id == "pol-1"
    assert p.policy_number == "GMX-1001"
    assert p.status is PolicyStatus.ACTIVE
    assert p.total == 50000.0
    assert p.payment_due == date(2024, 4, 17)
    assert p.term.start == date(2024, 1, 1)
    assert p.term.end == date(2025, 1, 1)
    assert p.payment_frequency is PaymentFrequency.QUARTERLY
    assert p.has_pending_payment is True
    assert p.contratante == "Ana Ruiz"
    assert p.notes == "cliente frecuente"


def test_minimal_record_defaults():
    p = policy_from_record({"id": 7})
    assert p.id == "7"
    assert p.policy_number == "7"
    assert p.status is PolicyStatus.ACTIVE
    assert p.payment_due is None
    assert p.term.end is None


def test_record_round_trip():
    p = policy_from_record(RAW)
    assert policy_from_record(policy_to_record(p)) == p


@pytest.mark.parametrize("value, expected", [
    (None, None),
    ("", None),
    ("2024-05-01", date(2024, 5, 1)),
    ("2024-05-01T23:59:00Z", date(2024, 5, 1)),
    ("2024-05-01T08:00:00-06:00", date(2024, 5, 1)),
    (date(2024, 5, 1), date(2024, 5, 1)),
])
def test_parse_date(value, expected):
    assert parse_date(value, "f") == expected


@pytest.mark.parametrize("value", ["2024-13-01", "01/05/2024", "mañana", 20240501])
def test_parse_date_rejects_malformed(value):
    with pytest.raises(InvalidDateError) as exc:
        parse_date(value, "fechaPagoActual")
    assert exc.value.field == "fechaPagoActual"


def test_bad_record_does_not_abort_batch():
    records = [
        {**RAW, "id": "good-critical"},
        {**RAW, "id": "bad-date", "fechaPagoActual": "2024-02-30"},
        {**RAW, "id": "bad-status", "status": "activa"},
        {**RAW, "id": "bad-term", "vigenciaTotal": {"fin": "soon"}},
        {"policyNumber": "no id"},
        {**RAW, "id": "good-fine", "fechaPagoActual": "2024-06-20"},
    ]
    policies, rejected = restamp_records(records, TODAY)

    assert {p.id: p.status for p in policies} == {
        "good-critical": PolicyStatus.OVERDUE_CRITICAL,
        "good-fine": PolicyStatus.ACTIVE,
    }
    assert [r.record_id for r in rejected] == ["bad-date", "bad-status", "bad-term", None]
    assert "fechaPagoActual" in rejected[0].reason

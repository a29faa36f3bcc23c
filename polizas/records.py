"""
polizas.records
===============

Boundary between the hosted record store and the engine.

Raw policy records arrive as camelCase dictionaries
(``fechaPagoActual``, ``vigenciaTotal.fin``, ...).  Dates are parsed
here, once, so a malformed value is reported as
:class:`InvalidDateError` against the offending record and never reaches
the threshold math.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .errors import InvalidDateError, PolizasError
from .models import PaymentFrequency, Policy, PolicyStatus, Term
from .payments import update_statuses
from .settings import Settings

logger = logging.getLogger(__name__)


def parse_date(value: Any, field: str) -> Optional[date]:
    """
    ``None``/empty → ``None``; ISO date or datetime string → ``date``.

    Only the calendar day is kept, so ``"2024-05-01T23:59:00Z"`` and
    ``"2024-05-01"`` classify identically.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidDateError(field, value)
    text = value.strip()
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        raise InvalidDateError(field, value) from None


def _contact_name(raw: Any) -> Optional[str]:
    if isinstance(raw, dict):
        return raw.get("nombre")
    return raw


def policy_from_record(rec: Dict[str, Any]) -> Policy:
    """Build a :class:`Policy` from a record‑store dictionary."""
    term = rec.get("vigenciaTotal") or {}
    return Policy(
        id=str(rec["id"]),
        policy_number=rec.get("policyNumber") or str(rec["id"]),
        status=PolicyStatus.parse(rec.get("status") or PolicyStatus.ACTIVE),
        total=float(rec.get("total") or 0.0),
        payment_due=parse_date(rec.get("fechaPagoActual"), "fechaPagoActual"),
        term=Term(
            start=parse_date(term.get("inicio"), "vigenciaTotal.inicio"),
            end=parse_date(term.get("fin"), "vigenciaTotal.fin"),
        ),
        payment_frequency=PaymentFrequency.parse(rec.get("formaDePago")),
        has_pending_payment=bool(rec.get("hasPendingPayment", False)),
        ramo=rec.get("ramo"),
        aseguradora=rec.get("aseguradora"),
        contratante=_contact_name(rec.get("contratante")),
        notes=rec.get("comentarios"),
    )


def _iso(d: Optional[date]) -> Optional[str]:
    return d.isoformat() if d else None


def policy_to_record(policy: Policy) -> Dict[str, Any]:
    """Inverse of :pyfunc:`policy_from_record` for the fields it reads."""
    return {
        "id": policy.id,
        "policyNumber": policy.policy_number,
        "status": policy.status.value,
        "total": policy.total,
        "fechaPagoActual": _iso(policy.payment_due),
        "vigenciaTotal": {
            "inicio": _iso(policy.term.start),
            "fin": _iso(policy.term.end),
        },
        "formaDePago": policy.payment_frequency.value,
        "hasPendingPayment": policy.has_pending_payment,
        "ramo": policy.ramo,
        "aseguradora": policy.aseguradora,
        "contratante": {"nombre": policy.contratante} if policy.contratante else None,
        "comentarios": policy.notes,
    }


@dataclass(frozen=True)
class RejectedRecord:
    record_id: Optional[str]
    reason: str


def load_policies(records: Iterable[Dict[str, Any]]) -> Tuple[List[Policy], List[RejectedRecord]]:
    """
    Parse every record, setting aside the ones that cannot be parsed.

    A bad record is logged and reported; it never aborts the batch.
    """
    policies: List[Policy] = []
    rejected: List[RejectedRecord] = []
    for rec in records:
        rec_id = rec.get("id") if isinstance(rec, dict) else None
        try:
            policies.append(policy_from_record(rec))
        except (PolizasError, AttributeError, KeyError, TypeError, ValueError) as exc:
            logger.warning("skipping policy record %s: %s", rec_id, exc)
            rejected.append(RejectedRecord(None if rec_id is None else str(rec_id), str(exc)))
    return policies, rejected


def restamp_records(
    records: Iterable[Dict[str, Any]],
    now: date | datetime,
    settings: Settings | None = None,
) -> Tuple[List[Policy], List[RejectedRecord]]:
    """Parse raw records and re‑stamp the valid ones against one *now*."""
    policies, rejected = load_policies(records)
    return update_statuses(policies, now, settings), rejected

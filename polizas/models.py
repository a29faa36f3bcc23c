"""
polizas.models
==============

Dataclasses and enums representing a single insurance policy and its
life‑cycle status.  These objects are intentionally lightweight; they
carry **no** external‑library dependencies so that importing `polizas`
stays fast even in constrained environments.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Optional

from .errors import UnknownStatusError


class PolicyStatus(str, Enum):
    """Closed set of life‑cycle states for a policy."""
    ACTIVE = "active"
    PENDING = "pending"
    PENDING_RENEWAL = "pending_renewal"
    OVERDUE_CRITICAL = "overdue_critical"
    EXPIRED = "expired"
    CANCELLED = "cancelled"
    RENEWED = "renewed"

    def __str__(self) -> str:        # nicer REPL display
        return self.value

    @classmethod
    def parse(cls, value: "PolicyStatus | str") -> "PolicyStatus":
        """Return the member for *value* or raise :class:`UnknownStatusError`."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnknownStatusError(value) from None


# Statuses the automatic re-stamp never overwrites.
STICKY_STATUSES = frozenset({
    PolicyStatus.CANCELLED,
    PolicyStatus.RENEWED,
    PolicyStatus.PENDING,
})


class PaymentFrequency(str, Enum):
    """How often a premium instalment falls due (``formaDePago``)."""
    MONTHLY = "Mensual"
    QUARTERLY = "Trimestral"
    SEMIANNUAL = "Semestral"
    ANNUAL = "Anual"

    @property
    def days(self) -> int:
        return _FREQUENCY_DAYS[self]

    @classmethod
    def parse(cls, value: "PaymentFrequency | str | None") -> "PaymentFrequency":
        """Unknown or missing frequencies are billed monthly."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.MONTHLY


_FREQUENCY_DAYS = {
    PaymentFrequency.MONTHLY: 30,
    PaymentFrequency.QUARTERLY: 90,
    PaymentFrequency.SEMIANNUAL: 180,
    PaymentFrequency.ANNUAL: 365,
}


def as_day(now: date | datetime) -> date:
    """Truncate *now* to a calendar day so day counts are whole."""
    if isinstance(now, datetime):
        return now.date()
    return now


def next_payment_date(paid_on: date, frequency: PaymentFrequency | str | None) -> date:
    """Due date of the instalment that follows a payment made on *paid_on*."""
    return paid_on + timedelta(days=PaymentFrequency.parse(frequency).days)


@dataclass(frozen=True)
class Term:
    """Coverage window of a policy (``vigenciaTotal``)."""
    start: Optional[date] = None
    end: Optional[date] = None


@dataclass
class Policy:
    """
    Core record classified by the engine.

    Parameters
    ----------
    id : str
        Opaque identifier assigned by the record store.
    policy_number : str
        Carrier policy number shown to agents.
    status : PolicyStatus, default=ACTIVE
        Current life‑cycle phase.
    total : float, default=0.0
        Premium amount due; a prioritisation weight, never a classifier.
    payment_due : datetime.date | None
        Current payment due date (``fechaPagoActual``).  ``None`` means no
        payment obligation is tracked.
    term : Term
        Coverage window; ``term.end`` anchors renewal computations.
    payment_frequency : PaymentFrequency, default=MONTHLY
    has_pending_payment : bool, default=False
    ramo, aseguradora, contratante : str | None
        Line of business, carrier and policy holder name.
    notes : str | None
        Free‑text comments.
    """
    id: str
    policy_number: str
    status: PolicyStatus = PolicyStatus.ACTIVE
    total: float = 0.0
    payment_due: Optional[date] = None
    term: Term = field(default_factory=Term)
    payment_frequency: PaymentFrequency = PaymentFrequency.MONTHLY
    has_pending_payment: bool = False
    ramo: Optional[str] = None
    aseguradora: Optional[str] = None
    contratante: Optional[str] = None
    notes: Optional[str] = None

    def __post_init__(self):
        self.status = PolicyStatus.parse(self.status)
        self.payment_frequency = PaymentFrequency.parse(self.payment_frequency)
        if self.term.start and self.term.end and self.term.end < self.term.start:
            raise ValueError("term end cannot precede term start")

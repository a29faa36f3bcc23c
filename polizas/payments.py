"""
polizas.payments
================

Payment‑status classification and the automatic status re‑stamp.

Everything here is a pure function of ``(policy, today)``: nothing reads
the clock and nothing mutates its input.  Callers capture *today* once
and pass the same value for a whole batch, then decide themselves
whether to persist the re‑stamped policies.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import Enum
from typing import Iterable, List, Optional

from .models import STICKY_STATUSES, Policy, PolicyStatus, as_day
from .renewals import AlertRule, AlertSeverity, RenewalBand, compute_renewal_window
from .settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaymentStatus:
    """
    Verdict of :pyfunc:`classify_payment_status`.

    ``days_overdue`` keeps its sign: a negative value is the number of
    days left before the payment falls due.
    """
    days_overdue: int
    is_critical: bool
    requires_immediate_attention: bool
    next_payment_date: Optional[date] = None

    @property
    def is_overdue(self) -> bool:
        return self.days_overdue > 0


NO_PAYMENT_TRACKED = PaymentStatus(
    days_overdue=0, is_critical=False, requires_immediate_attention=False
)


def classify_payment_status(
    policy: Policy,
    now: date | datetime,
    settings: Settings | None = None,
) -> PaymentStatus:
    """
    Classify the payment side of *policy* as of *now*.

    A policy without ``payment_due`` never raises a payment alert.

    Examples
    --------
    >>> p = Policy("p1", "A-1", payment_due=date(2024, 1, 1))
    >>> classify_payment_status(p, date(2024, 1, 9)).is_critical
    True
    """
    cfg = settings or default_settings
    if policy.payment_due is None:
        return NO_PAYMENT_TRACKED

    days_overdue = (as_day(now) - policy.payment_due).days
    is_critical = days_overdue >= cfg.critical_threshold_days
    return PaymentStatus(
        days_overdue=days_overdue,
        is_critical=is_critical,
        requires_immediate_attention=is_critical
        or days_overdue >= -cfg.attention_window_days,
        next_payment_date=policy.payment_due,
    )


def derive_status(
    policy: Policy,
    now: date | datetime,
    settings: Settings | None = None,
) -> PolicyStatus:
    """
    Life‑cycle status *policy* should carry as of *now*.

    Priority: ``overdue_critical`` > ``expired`` > ``pending_renewal`` >
    ``active``.  Sticky statuses are returned as they are.
    """
    if policy.status in STICKY_STATUSES:
        return policy.status

    if classify_payment_status(policy, now, settings).is_critical:
        return PolicyStatus.OVERDUE_CRITICAL

    band = compute_renewal_window(policy, now, settings).band
    if band is RenewalBand.EXPIRED:
        return PolicyStatus.EXPIRED
    if band is RenewalBand.DUE_SOON:
        return PolicyStatus.PENDING_RENEWAL
    return PolicyStatus.ACTIVE


def update_statuses(
    policies: Iterable[Policy],
    now: date | datetime,
    settings: Settings | None = None,
) -> List[Policy]:
    """
    Re‑stamp ``status`` on every policy, judged against the same *now*.

    Returns new :class:`Policy` objects; policies whose status does not
    change are still copied so the result never aliases the input.
    """
    today = as_day(now)
    out: List[Policy] = []
    for policy in policies:
        new_status = derive_status(policy, today, settings)
        if new_status is not policy.status:
            logger.debug("re-stamp %s: %s -> %s", policy.id, policy.status, new_status)
        out.append(replace(policy, status=new_status))
    return out


# ---------------------------------------------------------------------
# Filtering & aggregate statistics
# ---------------------------------------------------------------------
PAYMENT_FILTERS = ("all", "current", "due_soon", "overdue", "critical")


def payment_category(
    policy: Policy,
    ps: PaymentStatus,
) -> str:
    """One of ``current``, ``due_soon``, ``overdue`` or ``critical``."""
    if policy.status is PolicyStatus.OVERDUE_CRITICAL:
        return "critical"
    if ps.is_critical:
        return "overdue"
    if ps.requires_immediate_attention:
        return "due_soon"
    return "current"


def filter_by_payment_status(
    policies: Iterable[Policy],
    now: date | datetime,
    kind: str = "all",
    settings: Settings | None = None,
) -> List[Policy]:
    """Keep policies whose payment category equals *kind* (or all of them)."""
    if kind not in PAYMENT_FILTERS:
        raise ValueError(f"unknown payment filter {kind!r}; expected one of {PAYMENT_FILTERS}")
    policies = list(policies)
    if kind == "all":
        return policies
    return [
        p for p in policies
        if payment_category(p, classify_payment_status(p, now, settings)) == kind
    ]


@dataclass
class PaymentStatistics:
    """Counts and amounts shown on the collections dashboard."""
    total: int = 0
    current: int = 0
    due_soon: int = 0
    overdue: int = 0
    critical: int = 0
    total_amount: float = 0.0
    overdue_amount: float = 0.0

    @property
    def on_time_rate(self) -> float:
        return self.current / self.total if self.total else 0.0

    @property
    def overdue_rate(self) -> float:
        return (self.overdue + self.critical) / self.total if self.total else 0.0


def payment_statistics(
    policies: Iterable[Policy],
    now: date | datetime,
    settings: Settings | None = None,
) -> PaymentStatistics:
    stats = PaymentStatistics()
    for policy in policies:
        category = payment_category(policy, classify_payment_status(policy, now, settings))
        amount = policy.total or 0.0
        stats.total += 1
        stats.total_amount += amount
        setattr(stats, category, getattr(stats, category) + 1)
        if category in ("critical", "overdue"):
            stats.overdue_amount += amount
    return stats


@dataclass(frozen=True)
class CollectionsSummary:
    pending_amount: float
    overdue_amount: float
    policies_with_debt: int

    @property
    def average_debt_per_policy(self) -> float:
        if not self.policies_with_debt:
            return 0.0
        return self.pending_amount / self.policies_with_debt


def collections_summary(
    policies: Iterable[Policy],
    now: date | datetime,
    settings: Settings | None = None,
) -> CollectionsSummary:
    """Amounts at stake across policies that need a collections contact."""
    pending = overdue = 0.0
    with_debt = 0
    for policy in policies:
        ps = classify_payment_status(policy, now, settings)
        if not ps.requires_immediate_attention:
            continue
        amount = policy.total or 0.0
        with_debt += 1
        pending += amount
        if ps.is_critical:
            overdue += amount
    return CollectionsSummary(
        pending_amount=pending,
        overdue_amount=overdue,
        policies_with_debt=with_debt,
    )


# ---------------------------------------------------------------------
# Payment alerts
# ---------------------------------------------------------------------
# One segment per policy; the narrowest window the due date falls into.
PAYMENT_ALERT_RULES = (
    AlertRule("30_days", 30, AlertSeverity.INFO, 4, False, "30 días"),
    AlertRule("15_days", 15, AlertSeverity.WARNING, 3, False, "15 días"),
    AlertRule("10_days", 10, AlertSeverity.WARNING, 2, False, "10 días"),
    AlertRule("7_days", 7, AlertSeverity.ERROR, 1, True, "1 semana"),
    AlertRule("overdue", 0, AlertSeverity.CRITICAL, 0, True, "Vencido"),
)
PAYMENT_ALERT_CATEGORIES = tuple(rule.key for rule in PAYMENT_ALERT_RULES)

_ALERTABLE = frozenset({PolicyStatus.ACTIVE, PolicyStatus.OVERDUE_CRITICAL})


class PaymentAlertKind(str, Enum):
    PAYMENT_DUE = "payment_due"
    OVERDUE = "overdue"
    OVERDUE_CRITICAL = "overdue_critical"


@dataclass(frozen=True)
class PaymentAlert:
    id: str
    policy_id: str
    policy_number: str
    client_name: str
    kind: PaymentAlertKind
    rule: AlertRule
    message: str
    due_date: date
    days_until_due: int
    amount: float

    @property
    def category(self) -> str:
        return self.rule.key

    @property
    def severity(self) -> AlertSeverity:
        return self.rule.severity

    @property
    def persistent(self) -> bool:
        return self.rule.persistent


def _payment_rule(days_until_due: int) -> AlertRule:
    if days_until_due < 0:
        return PAYMENT_ALERT_RULES[-1]
    # narrowest first: 7, 10, 15, 30
    for rule in reversed(PAYMENT_ALERT_RULES[:-1]):
        if days_until_due <= rule.days:
            return rule
    return PAYMENT_ALERT_RULES[0]


def _payment_message(days_until_due: int, critical: bool) -> str:
    if days_until_due < 0:
        late = -days_until_due
        if critical:
            return f"PAGO VENCIDO CRÍTICO - {late} días de retraso"
        return f"Pago vencido - {late} día{'s' if late > 1 else ''} de retraso"
    if days_until_due == 0:
        return "Pago vence HOY"
    return f"Pago próximo en {days_until_due} día{'s' if days_until_due > 1 else ''}"


def payment_alerts(
    policy: Policy,
    now: date | datetime,
    settings: Settings | None = None,
) -> List[PaymentAlert]:
    """
    The payment alert for *policy*, if any.

    Only ``active`` and ``overdue_critical`` policies with a due date alert,
    and only once the due date is 30 days away or closer.
    """
    if policy.status not in _ALERTABLE or policy.payment_due is None:
        return []

    ps = classify_payment_status(policy, now, settings)
    days_until_due = -ps.days_overdue
    if days_until_due > PAYMENT_ALERT_RULES[0].days:
        return []

    rule = _payment_rule(days_until_due)
    if days_until_due >= 0:
        kind = PaymentAlertKind.PAYMENT_DUE
    elif ps.is_critical:
        kind = PaymentAlertKind.OVERDUE_CRITICAL
    else:
        kind = PaymentAlertKind.OVERDUE
    return [PaymentAlert(
        id=f"payment-{policy.id}-{rule.key}",
        policy_id=policy.id,
        policy_number=policy.policy_number,
        client_name=policy.contratante or "Cliente sin nombre",
        kind=kind,
        rule=rule,
        message=_payment_message(days_until_due, ps.is_critical),
        due_date=policy.payment_due,
        days_until_due=days_until_due,
        amount=policy.total or 0.0,
    )]


def all_payment_alerts(
    policies: Iterable[Policy],
    now: date | datetime,
    settings: Settings | None = None,
    category: Optional[str] = None,
) -> List[PaymentAlert]:
    """Alerts for a whole list by segment priority, then soonest due date."""
    if category is not None and category not in PAYMENT_ALERT_CATEGORIES:
        raise ValueError(
            f"unknown alert category {category!r}; expected one of {PAYMENT_ALERT_CATEGORIES}"
        )
    today = as_day(now)
    alerts = [a for p in policies for a in payment_alerts(p, today, settings)]
    if category is not None:
        alerts = [a for a in alerts if a.category == category]
    return sorted(alerts, key=lambda a: (a.rule.priority, a.days_until_due, a.policy_id))

"""
polizas.renewals
================

Renewal windows, renewal alerts and the renewal dashboard counts.

Windows are always derived from ``term.end`` and *today*; nothing here
is stored on the policy.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Iterable, List, Optional

from .models import Policy, as_day
from .settings import Settings, settings as default_settings


class RenewalBand(str, Enum):
    EXPIRED = "expired"
    DUE_SOON = "due_soon"
    ON_TRACK = "on_track"


@dataclass(frozen=True)
class RenewalWindow:
    band: RenewalBand
    days_until_term_end: Optional[int] = None
    term_end: Optional[date] = None


def days_until_term_end(policy: Policy, now: date | datetime) -> Optional[int]:
    """Signed day count to ``term.end``; ``None`` when the end is unknown."""
    if policy.term.end is None:
        return None
    return (policy.term.end - as_day(now)).days


def compute_renewal_window(
    policy: Policy,
    now: date | datetime,
    settings: Settings | None = None,
) -> RenewalWindow:
    """
    Place *policy* in a renewal band as of *now*.

    A policy without a term end cannot be assessed and is ``ON_TRACK``.
    """
    cfg = settings or default_settings
    days = days_until_term_end(policy, now)
    if days is None:
        band = RenewalBand.ON_TRACK
    elif days < 0:
        band = RenewalBand.EXPIRED
    elif days <= cfg.renewal_window_days:
        band = RenewalBand.DUE_SOON
    else:
        band = RenewalBand.ON_TRACK
    return RenewalWindow(band=band, days_until_term_end=days, term_end=policy.term.end)


# ---------------------------------------------------------------------
# Renewal alerts
# ---------------------------------------------------------------------
class AlertSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


@dataclass(frozen=True)
class AlertRule:
    key: str
    days: int
    severity: AlertSeverity
    priority: int
    persistent: bool
    message: str


# Ordered from the widest window to the overdue rule.
RENEWAL_ALERT_RULES = (
    AlertRule("45_days", 45, AlertSeverity.INFO, 4, False,
              "Renovación próxima en 45 días"),
    AlertRule("30_days", 30, AlertSeverity.WARNING, 3, False,
              "Renovación próxima en 30 días"),
    AlertRule("15_days", 15, AlertSeverity.WARNING, 2, False,
              "Renovación próxima en 15 días"),
    AlertRule("7_days", 7, AlertSeverity.ERROR, 1, True,
              "Renovación próxima en 1 semana - ACCIÓN REQUERIDA"),
    AlertRule("overdue", 0, AlertSeverity.CRITICAL, 0, True,
              "RENOVACIÓN VENCIDA - ATENCIÓN INMEDIATA"),
)


@dataclass(frozen=True)
class RenewalAlert:
    id: str
    policy_id: str
    rule: AlertRule
    message: str
    days_until_term_end: int
    term_end: date

    @property
    def severity(self) -> AlertSeverity:
        return self.rule.severity

    @property
    def persistent(self) -> bool:
        return self.rule.persistent


def _alert_message(days: int) -> str:
    if days < 0:
        late = -days
        return f"RENOVACIÓN VENCIDA - {late} día{'s' if late > 1 else ''} de retraso"
    if days == 0:
        return "Renovación vence HOY"
    return f"Renovación próxima en {days} día{'s' if days > 1 else ''}"


def renewal_alerts(policy: Policy, now: date | datetime) -> List[RenewalAlert]:
    """Every alert rule *policy* has crossed, most urgent first."""
    days = days_until_term_end(policy, now)
    if days is None:
        return []

    alerts = []
    for rule in RENEWAL_ALERT_RULES:
        if rule.key == "overdue":
            crossed = days < 0
        else:
            crossed = 0 <= days <= rule.days
        if crossed:
            alerts.append(RenewalAlert(
                id=f"renewal-{policy.id}-{rule.key}",
                policy_id=policy.id,
                rule=rule,
                message=_alert_message(days),
                days_until_term_end=days,
                term_end=policy.term.end,
            ))
    return sorted(alerts, key=lambda a: a.rule.priority)


def all_renewal_alerts(policies: Iterable[Policy], now: date | datetime) -> List[RenewalAlert]:
    """Alerts for a whole list: expired terms first, then soonest term end."""
    today = as_day(now)
    alerts = [a for p in policies for a in renewal_alerts(p, today)]
    return sorted(alerts, key=lambda a: (a.days_until_term_end >= 0,
                                         a.days_until_term_end,
                                         a.rule.priority))


@dataclass
class RenewalStatistics:
    total_policies: int = 0
    in_45_days: int = 0
    in_30_days: int = 0
    in_15_days: int = 0
    in_7_days: int = 0
    expired: int = 0
    needing_renewal: int = 0
    vida: dict = field(default_factory=lambda: {"total": 0, "upcoming": 0})


def renewal_statistics(
    policies: Iterable[Policy],
    now: date | datetime,
    settings: Settings | None = None,
) -> RenewalStatistics:
    """
    Bucket counts for the renewal dashboard.

    ``needing_renewal`` counts the ``DUE_SOON`` band of
    :pyfunc:`compute_renewal_window`, so the dashboard and the alert view
    always agree on which policies are up for renewal.
    """
    today = as_day(now)
    stats = RenewalStatistics()
    for policy in policies:
        stats.total_policies += 1
        window = compute_renewal_window(policy, today, settings)
        days = window.days_until_term_end
        if window.band is RenewalBand.DUE_SOON:
            stats.needing_renewal += 1
        if days is None:
            continue

        if days < 0:
            stats.expired += 1
        elif days <= 7:
            stats.in_7_days += 1
        elif days <= 15:
            stats.in_15_days += 1
        elif days <= 30:
            stats.in_30_days += 1
        elif days <= 45:
            stats.in_45_days += 1

        if (policy.ramo or "").lower() == "vida":
            stats.vida["total"] += 1
            if days <= 45:
                stats.vida["upcoming"] += 1
    return stats

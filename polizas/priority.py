"""
polizas.priority
================

Collections worklist ordering.

:class:`SeverityTier` is the single place where the tier order lives::

    overdue_critical  >  is_critical  >  requires_immediate_attention  >  none

Within a tier the most overdue policy comes first; the policy id breaks
any remaining tie so the order is total and repeatable.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import IntEnum
from typing import Iterable, List, Optional, Tuple

from .models import Policy, PolicyStatus, as_day
from .payments import PaymentStatus, classify_payment_status
from .settings import Settings


class SeverityTier(IntEnum):
    """Lower value sorts first."""
    OVERDUE_CRITICAL = 0
    CRITICAL = 1
    ATTENTION = 2
    NONE = 3

    @property
    def label(self) -> str:
        return _TIER_LABELS[self]


_TIER_LABELS = {
    SeverityTier.OVERDUE_CRITICAL: "CRÍTICO",
    SeverityTier.CRITICAL: "ALTO",
    SeverityTier.ATTENTION: "MEDIO",
    SeverityTier.NONE: "BAJO",
}

# worklist ``tier`` filter name -> tier
TIER_FILTERS = {
    "critical": SeverityTier.OVERDUE_CRITICAL,
    "overdue": SeverityTier.CRITICAL,
    "due_soon": SeverityTier.ATTENTION,
}

# amount band -> [low, high)
AMOUNT_BANDS = {
    "high": (50_000.0, float("inf")),
    "medium": (10_000.0, 50_000.0),
    "low": (float("-inf"), 10_000.0),
}


def severity_tier(policy: Policy, ps: PaymentStatus) -> SeverityTier:
    if policy.status is PolicyStatus.OVERDUE_CRITICAL:
        return SeverityTier.OVERDUE_CRITICAL
    if ps.is_critical:
        return SeverityTier.CRITICAL
    if ps.requires_immediate_attention:
        return SeverityTier.ATTENTION
    return SeverityTier.NONE


def priority_key(policy: Policy, ps: PaymentStatus) -> Tuple[int, int, str]:
    return (severity_tier(policy, ps), -ps.days_overdue, policy.id)


def compare(
    a: Policy,
    b: Policy,
    now: date | datetime,
    settings: Settings | None = None,
) -> int:
    """Classic comparator: negative when *a* belongs before *b*."""
    ka = priority_key(a, classify_payment_status(a, now, settings))
    kb = priority_key(b, classify_payment_status(b, now, settings))
    return (ka > kb) - (ka < kb)


@dataclass(frozen=True)
class WorklistEntry:
    policy: Policy
    payment: PaymentStatus
    tier: SeverityTier


def _matches(policy: Policy, search: str) -> bool:
    needle = search.lower()
    return any(
        needle in (value or "").lower()
        for value in (policy.policy_number, policy.contratante)
    )


def collections_worklist(
    policies: Iterable[Policy],
    now: date | datetime,
    *,
    tier: Optional[str] = None,
    amount_band: Optional[str] = None,
    search: Optional[str] = None,
    settings: Settings | None = None,
) -> List[WorklistEntry]:
    """
    Policies that need a collections contact, most urgent first.

    A policy is on the list when it is in any tier above ``NONE`` or
    still carries ``has_pending_payment``.
    """
    if tier is not None and tier not in TIER_FILTERS:
        raise ValueError(f"unknown tier filter {tier!r}")
    if amount_band is not None and amount_band not in AMOUNT_BANDS:
        raise ValueError(f"unknown amount band {amount_band!r}")

    today = as_day(now)
    entries: List[WorklistEntry] = []
    for policy in policies:
        ps = classify_payment_status(policy, today, settings)
        t = severity_tier(policy, ps)
        if t is SeverityTier.NONE and not policy.has_pending_payment:
            continue
        if tier is not None and t is not TIER_FILTERS[tier]:
            continue
        if amount_band is not None:
            low, high = AMOUNT_BANDS[amount_band]
            if not low <= (policy.total or 0.0) < high:
                continue
        if search and not _matches(policy, search):
            continue
        entries.append(WorklistEntry(policy, ps, t))

    entries.sort(key=lambda e: priority_key(e.policy, e.payment))
    return entries

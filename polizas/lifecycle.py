"""
polizas.lifecycle
=================

Manual actions an agent takes on a policy: recording a payment,
cancelling, and processing a renewal.

A tiny finite‑state‑machine describes which statuses an agent may move a
policy to by hand.  The automatic re‑stamp in :pymod:`polizas.payments`
is not bound by these rules.  Every helper returns a **new** policy;
callers persist it.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

from .models import Policy, PolicyStatus, Term, as_day, next_payment_date

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------
# Allowed manual transitions: source status → set[valid target statuses]
# ---------------------------------------------------------------------
_OPEN = {PolicyStatus.ACTIVE, PolicyStatus.CANCELLED, PolicyStatus.RENEWED}

RULES = {
    PolicyStatus.PENDING:          {PolicyStatus.ACTIVE, PolicyStatus.CANCELLED},
    PolicyStatus.ACTIVE:           _OPEN,
    PolicyStatus.OVERDUE_CRITICAL: _OPEN,
    PolicyStatus.PENDING_RENEWAL:  _OPEN,
    PolicyStatus.EXPIRED:          {PolicyStatus.CANCELLED, PolicyStatus.RENEWED},
    PolicyStatus.RENEWED:          {PolicyStatus.ACTIVE, PolicyStatus.CANCELLED},
    PolicyStatus.CANCELLED:        set(),
}


def advance_status(policy: Policy, new_status: PolicyStatus) -> Policy:
    """
    Return a copy of *policy* at *new_status* if the transition is legal,
    otherwise raise :class:`ValueError`.

    Examples
    --------
    >>> p = Policy("p1", "A-1", status=PolicyStatus.CANCELLED)
    >>> advance_status(p, PolicyStatus.ACTIVE)
    Traceback (most recent call last):
        ...
    ValueError: illegal transition cancelled → active
    """
    current = policy.status
    if new_status not in RULES.get(current, set()):
        raise ValueError(f"illegal transition {current} → {new_status}")
    return replace(policy, status=new_status)


def mark_payment_received(policy: Policy, now: date | datetime) -> Policy:
    """
    Record that the current instalment was paid on *now*.

    The debt flag is cleared and the next instalment becomes due one
    billing period later.  Cancelled or renewed policies keep their
    status; anything else goes back to ``active``.
    """
    today = as_day(now)
    status = policy.status
    if status not in (PolicyStatus.CANCELLED, PolicyStatus.RENEWED):
        status = PolicyStatus.ACTIVE
    logger.info("payment received for %s on %s", policy.id, today.isoformat())
    return replace(
        policy,
        status=status,
        has_pending_payment=False,
        payment_due=next_payment_date(today, policy.payment_frequency),
    )


def cancel_policy(policy: Policy) -> Policy:
    cancelled = advance_status(policy, PolicyStatus.CANCELLED)
    logger.info("policy %s cancelled", policy.id)
    return cancelled


def mark_renewed(policy: Policy, new_term_end: Optional[date] = None) -> Policy:
    """
    Mark *policy* as renewed; optionally roll its term forward so the
    new coverage window starts where the old one ended.
    """
    renewed = advance_status(policy, PolicyStatus.RENEWED)
    if new_term_end is not None:
        start = policy.term.end or policy.term.start
        renewed = replace(renewed, term=Term(start=start, end=new_term_end))
    logger.info("policy %s renewed", policy.id)
    return renewed

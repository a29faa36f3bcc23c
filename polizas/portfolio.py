"""
polizas.portfolio
=================

An in‑memory registry that stores :class:`polizas.models.Policy`
objects keyed by their record‑store id.

This module is intentionally simple—only the standard library—so that
it can be unit‑tested without external dependencies or a database.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Dict, List

from .models import Policy, PolicyStatus
from .payments import update_statuses
from .settings import Settings


class PolicyBook:
    """
    Dictionary‑backed registry of policies.

    Example
    -------
    >>> book = PolicyBook()
    >>> book.add(Policy("p1", "A-1"))
    >>> book.get("p1").policy_number
    'A-1'
    """

    def __init__(self) -> None:
        self._policies: Dict[str, Policy] = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def add(self, policy: Policy) -> None:
        """Insert or overwrite a policy."""
        self._policies[policy.id] = policy

    def get(self, policy_id: str) -> Policy:
        """Retrieve by id (raise KeyError if not present)."""
        return self._policies[policy_id]

    def find_by_status(self, status: PolicyStatus) -> List[Policy]:
        """Return all policies currently at the given status."""
        return [p for p in self._policies.values() if p.status == status]

    def restamp(self, now: date | datetime, settings: Settings | None = None) -> List[str]:
        """
        Re‑stamp every stored policy against *now* and keep the results.

        Returns the ids whose status changed.
        """
        current = list(self._policies.values())
        changed = []
        for old, new in zip(current, update_statuses(current, now, settings)):
            if new.status is not old.status:
                changed.append(new.id)
            self.add(new)
        return changed

    # ------------------------------------------------------------------
    # Dunder helpers for convenience
    # ------------------------------------------------------------------
    def __iter__(self):
        return iter(list(self._policies.values()))

    def __len__(self) -> int:
        return len(self._policies)

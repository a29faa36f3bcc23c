"""
polizas.portfolio_db
====================

SQLite‑backed implementation of the PolicyBook public surface.

This adapter wraps the CRUD helpers in :pymod:`polizas.db` so that any
code expecting the in‑memory PolicyBook can switch to a persistent
store without changing its API calls.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterator, List

from sqlmodel import Session

from polizas.db import SessionLocal, all_policies, get_policy, save_all, upsert_policy
from polizas.models import Policy, PolicyStatus
from polizas.payments import update_statuses
from polizas.settings import Settings


class DBPolicyBook:
    """
    Drop‑in replacement backed by SQLite.

    Methods mirror the in‑memory PolicyBook:
    * add(policy)
    * get(policy_id)
    * find_by_status(status)
    * restamp(now)
    * iteration / len()
    """

    def __init__(self, session: Session | None = None) -> None:
        self._session: Session = session or SessionLocal()

    # ------------------------------------------------------------------ CRUD
    def add(self, policy: Policy) -> None:
        upsert_policy(self._session, policy)

    def get(self, policy_id: str) -> Policy:
        policy = get_policy(self._session, policy_id)
        if policy is None:
            raise KeyError(policy_id)
        return policy

    def find_by_status(self, status: PolicyStatus) -> List[Policy]:
        return [p for p in all_policies(self._session) if p.status == status]

    def restamp(self, now: date | datetime, settings: Settings | None = None) -> List[str]:
        """Re‑stamp every row and save the batch in one commit."""
        current = all_policies(self._session)
        stamped = update_statuses(current, now, settings)
        save_all(self._session, stamped)
        return [new.id for old, new in zip(current, stamped) if new.status is not old.status]

    # ------------------------------------------------------ dunder helpers
    def __iter__(self) -> Iterator[Policy]:
        yield from all_policies(self._session)

    def __len__(self) -> int:
        return len(all_policies(self._session))

    # ----------------------------------------------------- context manager
    def __enter__(self) -> "DBPolicyBook":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._session.close()

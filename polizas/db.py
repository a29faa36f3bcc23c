"""
polizas.db
==========

SQLite persistence layer used to "apply and save" a re‑stamp.

This module exposes:

* ``engine`` – a global SQLModel engine pointing at ``settings.db_url``
* ``SessionLocal`` – a session factory used via ``with SessionLocal() as s:``
* ``create_all()`` – helper to create tables at first run

The classification engine never imports this module.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional

from sqlalchemy.engine import Engine
from sqlmodel import Field, Session, SQLModel, create_engine, select

from polizas.models import PaymentFrequency, Policy, PolicyStatus, Term
from polizas.settings import settings


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------
engine = create_engine(settings.db_url, echo=settings.db_echo)


# ---------------------------------------------------------------------------
# Session factory
# ---------------------------------------------------------------------------
def SessionLocal() -> Session:  # noqa: N802 (factory camel‑case for consistency with FastAPI docs)
    """Return a new Session bound to the global engine."""
    return Session(engine)


# ---------------------------------------------------------------------------
# ORM model that mirrors polizas.models.Policy
# ---------------------------------------------------------------------------
class PolicyDB(SQLModel, table=True):
    """SQLite‑backed representation of a :class:`polizas.models.Policy`."""

    __tablename__ = "policies"

    id: str = Field(primary_key=True, index=True)
    policy_number: str
    status: PolicyStatus = Field(default=PolicyStatus.ACTIVE, index=True)
    total: float = 0.0
    payment_due: Optional[date] = None
    term_start: Optional[date] = None
    term_end: Optional[date] = None
    payment_frequency: PaymentFrequency = PaymentFrequency.MONTHLY
    has_pending_payment: bool = False
    ramo: Optional[str] = None
    aseguradora: Optional[str] = None
    contratante: Optional[str] = None
    notes: Optional[str] = None

    # ---------------------------------------------------------------------
    # Converters
    # ---------------------------------------------------------------------
    @classmethod
    def from_policy(cls, p: Policy) -> "PolicyDB":
        """Create a DB row from an in‑memory policy."""
        return cls(
            id=p.id,
            policy_number=p.policy_number,
            status=p.status,
            total=p.total,
            payment_due=p.payment_due,
            term_start=p.term.start,
            term_end=p.term.end,
            payment_frequency=p.payment_frequency,
            has_pending_payment=p.has_pending_payment,
            ramo=p.ramo,
            aseguradora=p.aseguradora,
            contratante=p.contratante,
            notes=p.notes,
        )

    def to_policy(self) -> Policy:
        """Convert the DB row back into a plain Policy."""
        return Policy(
            id=self.id,
            policy_number=self.policy_number,
            status=self.status,
            total=self.total,
            payment_due=self.payment_due,
            term=Term(start=self.term_start, end=self.term_end),
            payment_frequency=self.payment_frequency,
            has_pending_payment=self.has_pending_payment,
            ramo=self.ramo,
            aseguradora=self.aseguradora,
            contratante=self.contratante,
            notes=self.notes,
        )


# ---------------------------------------------------------------------------
# Convenience CRUD helpers
# ---------------------------------------------------------------------------
def upsert_policy(s: Session, policy: Policy) -> None:
    """Insert or update a policy row."""
    s.merge(PolicyDB.from_policy(policy))
    s.commit()


def save_all(s: Session, policies: Iterable[Policy]) -> int:
    """Write a whole re‑stamp batch in a single commit; returns the row count."""
    n = 0
    for policy in policies:
        s.merge(PolicyDB.from_policy(policy))
        n += 1
    s.commit()
    return n


def get_policy(s: Session, policy_id: str) -> Policy | None:
    """Return a policy by id or *None* if missing."""
    row = s.get(PolicyDB, policy_id)
    return row.to_policy() if row else None


def all_policies(s: Session) -> List[Policy]:
    """Return every policy in the database, ordered by id."""
    rows = s.exec(select(PolicyDB).order_by(PolicyDB.id)).all()
    return [row.to_policy() for row in rows]


# ---------------------------------------------------------------------------
# Utility: create tables
# ---------------------------------------------------------------------------
def create_all(bind: Engine | None = None) -> None:
    """Create all tables for imported SQLModel subclasses, including PolicyDB."""
    SQLModel.metadata.create_all(bind or engine)


# ---------------------------------------------------------------------------
# Lightweight CLI
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    """
    Quick bootstrap helper.

    Examples
    --------
    $ python -m polizas.db --create        # first‑time table creation
    """
    import argparse

    parser = argparse.ArgumentParser(prog="python -m polizas.db",
                                     description="Policy store utilities")
    parser.add_argument("--create", action="store_true", help="create tables")
    args = parser.parse_args()

    if args.create:
        create_all()
        print("✅ policy store schema initialised")

"""
tests/test_portfolio_db.py
==========================

Integration‑style tests for the SQLite‑backed policy book.

These tests mirror `test_portfolio.py` but use DBPolicyBook on an
in‑memory SQLite engine to ensure persistence and API parity with the
in‑memory version.
"""

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from conftest import TODAY, make_policy
from polizas.db import create_all, save_all
from polizas.models import PaymentFrequency, PolicyStatus
from polizas.portfolio_db import DBPolicyBook


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_all(eng)
    return eng


def test_add_and_find_by_status(engine):
    with DBPolicyBook(Session(engine)) as book:
        p = make_policy("beta", overdue=3, term_end_in=100, total=1200.5,
                        payment_frequency=PaymentFrequency.ANNUAL,
                        contratante="Beta SA")
        book.add(p)
        assert book.find_by_status(PolicyStatus.ACTIVE) == [p]


def test_persistence_across_sessions(engine):
    p = make_policy("gamma", overdue=-5, has_pending_payment=True)

    # write in first session
    with DBPolicyBook(Session(engine)) as book:
        book.add(p)

    # read in a brand‑new session
    with DBPolicyBook(Session(engine)) as book2:
        fetched = book2.get("gamma")

    assert fetched == p


def test_missing_policy_raises_key_error(engine):
    with DBPolicyBook(Session(engine)) as book:
        with pytest.raises(KeyError):
            book.get("nope")


def test_restamp_is_saved(engine):
    with Session(engine) as s:
        save_all(s, [
            make_policy("a", overdue=40, term_end_in=100),
            make_policy("b", term_end_in=-3),
            make_policy("c", overdue=-30, term_end_in=100),
        ])

    with DBPolicyBook(Session(engine)) as book:
        assert len(book) == 3
        assert sorted(book.restamp(TODAY)) == ["a", "b"]

    with DBPolicyBook(Session(engine)) as book:
        statuses = {p.id: p.status for p in book}
    assert statuses == {
        "a": PolicyStatus.OVERDUE_CRITICAL,
        "b": PolicyStatus.EXPIRED,
        "c": PolicyStatus.ACTIVE,
    }

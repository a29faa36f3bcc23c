"""
tests/test_portfolio.py
=======================

Unit tests for polizas.portfolio.PolicyBook
"""

from conftest import TODAY, make_policy
from polizas.models import PolicyStatus
from polizas.portfolio import PolicyBook


def _demo_book():
    book = PolicyBook()
    book.add(make_policy("a", overdue=40, term_end_in=100))
    book.add(make_policy("b", overdue=-20, term_end_in=100))
    book.add(make_policy("c", overdue=40, status=PolicyStatus.CANCELLED))
    return book


def test_add_and_get_by_id():
    book = PolicyBook()
    p = make_policy("acme")
    book.add(p)
    assert book.get("acme") is p


def test_find_by_status():
    book = _demo_book()
    cancelled = book.find_by_status(PolicyStatus.CANCELLED)
    assert [p.id for p in cancelled] == ["c"]


def test_len_and_iter():
    book = _demo_book()
    assert len(book) == 3
    assert {p.id for p in book} == {"a", "b", "c"}


def test_restamp_reports_changes_and_stores_results():
    book = _demo_book()
    assert book.restamp(TODAY) == ["a"]
    assert book.get("a").status is PolicyStatus.OVERDUE_CRITICAL
    assert book.get("c").status is PolicyStatus.CANCELLED
    assert book.restamp(TODAY) == []

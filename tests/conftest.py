"""
Pytest configuration: make sure `import polizas` works regardless of
where pytest is invoked, and share a few policy builders.

It prepends the project root (one directory above *tests/*) to
``sys.path`` **before** any tests are collected.
"""

import sys
from datetime import date, timedelta
from pathlib import Path

import pytest

# /path/to/project/tests -> project root
PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from polizas.models import Policy, Term  # noqa: E402

TODAY = date(2024, 6, 1)


def make_policy(pid="p1", *, overdue=None, term_end_in=None, **kw):
    """
    Policy whose payment is *overdue* days late (negative = not yet due)
    and whose term ends *term_end_in* days after TODAY.
    """
    if overdue is not None:
        kw.setdefault("payment_due", TODAY - timedelta(days=overdue))
    if term_end_in is not None:
        end = TODAY + timedelta(days=term_end_in)
        kw.setdefault("term", Term(start=end - timedelta(days=365), end=end))
    kw.setdefault("policy_number", f"POL-{pid}")
    return Policy(id=pid, **kw)


@pytest.fixture
def today():
    return TODAY

"""
tests/test_renewals.py
======================

Unit tests for polizas.renewals: window bands, alerts and dashboard
counts.
"""

import pytest

from conftest import TODAY, make_policy
from polizas.renewals import (
    AlertSeverity,
    RenewalBand,
    all_renewal_alerts,
    compute_renewal_window,
    renewal_alerts,
    renewal_statistics,
)
from polizas.settings import Settings


@pytest.mark.parametrize("days, band", [
    (-1, RenewalBand.EXPIRED),
    (0, RenewalBand.DUE_SOON),
    (30, RenewalBand.DUE_SOON),
    (31, RenewalBand.ON_TRACK),
    (365, RenewalBand.ON_TRACK),
])
def test_window_boundaries(days, band):
    window = compute_renewal_window(make_policy(term_end_in=days), TODAY)
    assert window.band is band
    assert window.days_until_term_end == days


def test_missing_term_end_is_on_track():
    window = compute_renewal_window(make_policy(), TODAY)
    assert window.band is RenewalBand.ON_TRACK
    assert window.days_until_term_end is None


def test_dashboard_count_matches_window_band():
    """needing_renewal and DUE_SOON must never disagree."""
    for cfg in (Settings(), Settings(renewal_window_days=15)):
        book = [make_policy(f"p{d}", term_end_in=d) for d in range(-5, 60)]
        due_soon = sum(
            compute_renewal_window(p, TODAY, cfg).band is RenewalBand.DUE_SOON for p in book
        )
        assert renewal_statistics(book, TODAY, cfg).needing_renewal == due_soon
        assert due_soon == cfg.renewal_window_days + 1


def test_alerts_for_upcoming_term():
    alerts = renewal_alerts(make_policy(term_end_in=10), TODAY)
    assert [a.rule.key for a in alerts] == ["15_days", "30_days", "45_days"]
    assert alerts[0].message == "Renovación próxima en 10 días"
    assert alerts[0].severity is AlertSeverity.WARNING
    assert not alerts[0].persistent


def test_alerts_on_term_end_day():
    alerts = renewal_alerts(make_policy(term_end_in=0), TODAY)
    assert [a.rule.key for a in alerts] == ["7_days", "15_days", "30_days", "45_days"]
    assert alerts[0].message == "Renovación vence HOY"
    assert alerts[0].persistent


def test_alerts_for_expired_term():
    alerts = renewal_alerts(make_policy("late", term_end_in=-3), TODAY)
    assert len(alerts) == 1
    assert alerts[0].id == "renewal-late-overdue"
    assert alerts[0].severity is AlertSeverity.CRITICAL
    assert alerts[0].message == "RENOVACIÓN VENCIDA - 3 días de retraso"


def test_no_alerts_far_from_term_end_or_without_term():
    assert renewal_alerts(make_policy(term_end_in=46), TODAY) == []
    assert renewal_alerts(make_policy(), TODAY) == []


def test_all_alerts_expired_first():
    book = [
        make_policy("soon", term_end_in=5),
        make_policy("later", term_end_in=40),
        make_policy("late", term_end_in=-10),
    ]
    alerts = all_renewal_alerts(book, TODAY)
    assert alerts[0].policy_id == "late"
    days = [a.days_until_term_end for a in alerts[1:]]
    assert days == sorted(days)
    assert alerts[-1].policy_id == "later"


def test_renewal_statistics_buckets():
    book = [
        make_policy("a", term_end_in=-2),
        make_policy("b", term_end_in=3),
        make_policy("c", term_end_in=12),
        make_policy("d", term_end_in=25),
        make_policy("e", term_end_in=40, ramo="Vida"),
        make_policy("f", term_end_in=100, ramo="Vida"),
        make_policy("g"),
    ]
    stats = renewal_statistics(book, TODAY)
    assert stats.total_policies == 7
    assert (stats.expired, stats.in_7_days, stats.in_15_days,
            stats.in_30_days, stats.in_45_days) == (1, 1, 1, 1, 1)
    assert stats.needing_renewal == 3
    assert stats.vida == {"total": 2, "upcoming": 1}

"""
Renewal endpoints: alert feed and renewal dashboard counts.
"""

from dataclasses import asdict
from datetime import date
from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from polizas.portfolio_db import DBPolicyBook
from polizas.renewals import all_renewal_alerts, renewal_statistics
from polizas.settings import Settings

from .deps import get_book, get_settings, get_today
from .schemas import RenewalAlertOut

router = APIRouter(prefix="/renewals", tags=["renewals"])


@router.get("", response_model=List[RenewalAlertOut])
def renewal_alerts(
    book: DBPolicyBook = Depends(get_book),
    today: date = Depends(get_today),
):
    """Expired terms first, then the closest term ends."""
    return [
        RenewalAlertOut(
            id=a.id,
            policy_id=a.policy_id,
            type=f"renewal_{a.rule.key}",
            severity=a.severity.value,
            message=a.message,
            days_until_term_end=a.days_until_term_end,
            term_end=a.term_end,
            persistent=a.persistent,
        )
        for a in all_renewal_alerts(book, today)
    ]


@router.get("/stats")
def stats(
    book: DBPolicyBook = Depends(get_book),
    today: date = Depends(get_today),
    cfg: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    return asdict(renewal_statistics(book, today, cfg))

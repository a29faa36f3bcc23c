"""
Collections endpoints: prioritised worklist and dashboard figures.
"""

import logging
from dataclasses import asdict
from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from polizas.payments import (
    PAYMENT_ALERT_CATEGORIES,
    all_payment_alerts,
    collections_summary,
    payment_statistics,
)
from polizas.portfolio_db import DBPolicyBook
from polizas.priority import AMOUNT_BANDS, TIER_FILTERS, collections_worklist
from polizas.settings import Settings

from .deps import get_book, get_settings, get_today
from .schemas import PaymentAlertOut, WorklistItem

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/collections", tags=["collections"])


@router.get("", response_model=List[WorklistItem])
def worklist(
    tier: Optional[str] = Query(None, description=f"one of {sorted(TIER_FILTERS)}"),
    amount: Optional[str] = Query(None, description=f"one of {sorted(AMOUNT_BANDS)}"),
    q: Optional[str] = Query(None, min_length=1, description="policy number or holder"),
    book: DBPolicyBook = Depends(get_book),
    today: date = Depends(get_today),
    cfg: Settings = Depends(get_settings),
):
    """Policies needing a collections contact, most urgent first."""
    try:
        entries = collections_worklist(list(book), today, tier=tier,
                                       amount_band=amount, search=q, settings=cfg)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    logger.info("collections worklist: %d policies (tier=%s)", len(entries), tier)
    return [
        WorklistItem(
            id=e.policy.id,
            policy_number=e.policy.policy_number,
            contratante=e.policy.contratante,
            status=e.policy.status,
            tier=e.tier.label,
            days_overdue=e.payment.days_overdue,
            is_critical=e.payment.is_critical,
            requires_immediate_attention=e.payment.requires_immediate_attention,
            total=e.policy.total,
        )
        for e in entries
    ]


@router.get("/stats")
def stats(
    book: DBPolicyBook = Depends(get_book),
    today: date = Depends(get_today),
    cfg: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    policies = list(book)
    pay = payment_statistics(policies, today, cfg)
    summary = collections_summary(policies, today, cfg)
    return {
        "payments": {**asdict(pay),
                     "on_time_rate": pay.on_time_rate,
                     "overdue_rate": pay.overdue_rate},
        "collections": {**asdict(summary),
                        "average_debt_per_policy": summary.average_debt_per_policy},
    }


@router.get("/alerts", response_model=List[PaymentAlertOut])
def alerts(
    category: Optional[str] = Query(None, description=f"one of {list(PAYMENT_ALERT_CATEGORIES)}"),
    book: DBPolicyBook = Depends(get_book),
    today: date = Depends(get_today),
    cfg: Settings = Depends(get_settings),
):
    """Payment alerts, most urgent segment first."""
    try:
        found = all_payment_alerts(list(book), today, cfg, category=category)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return [
        PaymentAlertOut(
            id=a.id,
            policy_id=a.policy_id,
            policy_number=a.policy_number,
            client_name=a.client_name,
            type=a.kind.value,
            category=a.category,
            severity=a.severity.value,
            message=a.message,
            due_date=a.due_date,
            days_until_due=a.days_until_due,
            amount=a.amount,
            persistent=a.persistent,
        )
        for a in found
    ]

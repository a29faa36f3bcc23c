import logging
from datetime import date
from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from polizas.display import describe_policy
from polizas.lifecycle import cancel_policy, mark_payment_received, mark_renewed
from polizas.models import PolicyStatus
from polizas.payments import classify_payment_status
from polizas.portfolio_db import DBPolicyBook
from polizas.settings import API_DEBUG, API_HOST, API_PORT, Settings, settings
from .deps import get_book, get_settings, get_today
from .schemas import PolicyBody, RenewBody, StatusBadge

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Polizas API",
    version="0.1.0",
    description="HTTP layer over the policy payment-status and renewal classification engine.",
)

# --- CORS ----------------------------------------------------------
# Dev-only origins for the CRM front end.
origins = [
    "http://localhost:5173",    # Vite dev server default port
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
)

# --- Include Routers ----------------------------------------------------------
from .worklist import router as worklist_router  # noqa: E402
from .renewals import router as renewals_router  # noqa: E402

app.include_router(worklist_router)
app.include_router(renewals_router)


def _load(book: DBPolicyBook, policy_id: str):
    try:
        return book.get(policy_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Policy not found")


# ---------- health-check ----------
@app.get("/")
def root():
    return {"status": "ok", "msg": "Polizas API is alive"}


# ---------- POST /policies ----------
@app.post("/policies", status_code=201)
def add_policy(
    body: PolicyBody,
    book: DBPolicyBook = Depends(get_book),
    today: date = Depends(get_today),
    cfg: Settings = Depends(get_settings),
):
    try:
        policy = body.to_policy()
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    # overdue_critical is only ever earned by a late enough payment
    if (policy.status is PolicyStatus.OVERDUE_CRITICAL
            and not classify_payment_status(policy, today, cfg).is_critical):
        raise HTTPException(
            status_code=422,
            detail=f"policy {policy.id!r} is not critically overdue as of {today.isoformat()}",
        )
    book.add(policy)
    return {"id": policy.id}


# ---------- GET /status ----------
@app.get("/status")
def status_snapshot(book: DBPolicyBook = Depends(get_book)) -> Dict[str, int]:
    counts: Dict[str, int] = {s.value: 0 for s in PolicyStatus}
    for p in book:
        counts[p.status.value] += 1
    return counts


# ---------- POST /policies/restamp ----------
@app.post("/policies/restamp")
def restamp(
    book: DBPolicyBook = Depends(get_book),
    today: date = Depends(get_today),
    cfg: Settings = Depends(get_settings),
) -> Dict[str, List[str]]:
    """Re‑stamp every stored policy against today's date and persist it."""
    changed = book.restamp(today, cfg)
    logger.info("re-stamp on %s changed %d policies", today.isoformat(), len(changed))
    return {"changed": changed}


# ---------- GET /policies/{policy_id} ----------
@app.get("/policies/{policy_id}", response_model=PolicyBody)
def get_policy(policy_id: str, book: DBPolicyBook = Depends(get_book)):
    return PolicyBody.from_policy(_load(book, policy_id))


# ---------- GET /policies/{policy_id}/display ----------
@app.get("/policies/{policy_id}/display", response_model=StatusBadge)
def policy_display(
    policy_id: str,
    book: DBPolicyBook = Depends(get_book),
    today: date = Depends(get_today),
    cfg: Settings = Depends(get_settings),
):
    return StatusBadge.from_display(describe_policy(_load(book, policy_id), today, cfg))


# ---------- manual actions ----------
@app.post("/policies/{policy_id}/payment-received", response_model=PolicyBody)
def payment_received(
    policy_id: str,
    book: DBPolicyBook = Depends(get_book),
    today: date = Depends(get_today),
):
    policy = mark_payment_received(_load(book, policy_id), today)
    book.add(policy)
    return PolicyBody.from_policy(policy)


@app.post("/policies/{policy_id}/cancel", response_model=PolicyBody)
def cancel(policy_id: str, book: DBPolicyBook = Depends(get_book)):
    try:
        policy = cancel_policy(_load(book, policy_id))
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    book.add(policy)
    return PolicyBody.from_policy(policy)


@app.post("/policies/{policy_id}/renew", response_model=PolicyBody)
def renew(
    policy_id: str,
    body: Optional[RenewBody] = None,
    book: DBPolicyBook = Depends(get_book),
):
    try:
        policy = mark_renewed(_load(book, policy_id),
                              body.new_term_end if body else None)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    book.add(policy)
    return PolicyBody.from_policy(policy)


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.DEBUG if API_DEBUG else settings.log_level.upper())
    uvicorn.run("api.main:app", host=API_HOST, port=API_PORT, reload=API_DEBUG)

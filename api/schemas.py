"""
api.schemas
===========

Request / response bodies.  The engine works on plain dataclasses; these
pydantic models only exist at the HTTP edge.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from polizas.display import ColorTier, StatusDisplay
from polizas.models import PaymentFrequency, Policy, PolicyStatus, Term


class PolicyBody(BaseModel):
    id: str = Field(..., min_length=1)
    policy_number: str
    status: PolicyStatus = PolicyStatus.ACTIVE
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

    def to_policy(self) -> Policy:
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

    @classmethod
    def from_policy(cls, p: Policy) -> "PolicyBody":
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


class RenewBody(BaseModel):
    new_term_end: Optional[date] = None


class StatusBadge(BaseModel):
    label: str
    color_tier: ColorTier
    icon: str
    priority: int
    description: str

    @classmethod
    def from_display(cls, d: StatusDisplay) -> "StatusBadge":
        return cls(label=d.label, color_tier=d.color_tier, icon=d.icon,
                   priority=d.priority, description=d.description)


class WorklistItem(BaseModel):
    id: str
    policy_number: str
    contratante: Optional[str]
    status: PolicyStatus
    tier: str
    days_overdue: int
    is_critical: bool
    requires_immediate_attention: bool
    total: float


class RenewalAlertOut(BaseModel):
    id: str
    policy_id: str
    type: str
    severity: str
    message: str
    days_until_term_end: int
    term_end: date
    persistent: bool


class PaymentAlertOut(BaseModel):
    id: str
    policy_id: str
    policy_number: str
    client_name: str
    type: str
    category: str
    severity: str
    message: str
    due_date: date
    days_until_due: int
    amount: float
    persistent: bool

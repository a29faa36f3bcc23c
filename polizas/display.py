"""
polizas.display
===============

Status → badge lookup used wherever a policy status is rendered.

The table is total over :class:`PolicyStatus`; any other string is a
programming error and raises :class:`UnknownStatusError` instead of
being shown under a harmless‑looking label.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from types import MappingProxyType

from .models import Policy, PolicyStatus
from .payments import classify_payment_status
from .settings import Settings


class ColorTier(str, Enum):
    """Severity colour family of a badge (renderer decides the shade)."""
    DANGER = "red"
    WARNING = "orange"
    NOTICE = "yellow"
    INFO = "blue"
    SUCCESS = "green"
    MUTED = "gray"
    ARCHIVED = "purple"


@dataclass(frozen=True)
class StatusDisplay:
    label: str
    color_tier: ColorTier
    icon: str
    priority: int
    description: str = ""


STATUS_DISPLAY = MappingProxyType({
    PolicyStatus.OVERDUE_CRITICAL: StatusDisplay(
        "Vencido Super Destacado", ColorTier.DANGER, "🚨", 1, "Retraso crítico en el pago"),
    PolicyStatus.PENDING_RENEWAL: StatusDisplay(
        "Renovación Pendiente", ColorTier.NOTICE, "🔁", 3, "Vigencia por terminar"),
    PolicyStatus.PENDING: StatusDisplay(
        "Pendiente", ColorTier.INFO, "⏳", 3, "Estado pendiente"),
    PolicyStatus.CANCELLED: StatusDisplay(
        "Cancelada", ColorTier.MUTED, "❌", 4, "Póliza cancelada"),
    PolicyStatus.EXPIRED: StatusDisplay(
        "Expirada", ColorTier.ARCHIVED, "📅", 4, "Póliza expirada"),
    PolicyStatus.RENEWED: StatusDisplay(
        "Renovada", ColorTier.INFO, "🔄", 5, "Póliza renovada"),
    PolicyStatus.ACTIVE: StatusDisplay(
        "Activa", ColorTier.SUCCESS, "✅", 5, "Al día con pagos"),
})


def get_status_display(status: PolicyStatus | str) -> StatusDisplay:
    """Badge for *status*; raises UnknownStatusError for foreign strings."""
    return STATUS_DISPLAY[PolicyStatus.parse(status)]


def describe_policy(
    policy: Policy,
    now: date | datetime,
    settings: Settings | None = None,
) -> StatusDisplay:
    """
    Badge for a specific policy.

    ``active`` policies are refined from the payment classification into
    "Pago Vencido" or "Pago Próximo"; every other status uses the plain
    table entry with the overdue day count filled in where relevant.
    """
    base = get_status_display(policy.status)
    ps = classify_payment_status(policy, now, settings)

    if policy.status is PolicyStatus.OVERDUE_CRITICAL:
        return StatusDisplay(base.label, base.color_tier, base.icon, base.priority,
                             f"{ps.days_overdue} días de retraso crítico")
    if policy.status is not PolicyStatus.ACTIVE:
        return base
    if ps.is_overdue:
        return StatusDisplay("Pago Vencido", ColorTier.WARNING, "⚠️", 2,
                             f"{ps.days_overdue} días de retraso")
    if ps.requires_immediate_attention:
        return StatusDisplay("Pago Próximo", ColorTier.NOTICE, "🔔", 3,
                             f"Vence en {-ps.days_overdue} días")
    return base

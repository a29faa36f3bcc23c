"""
Polizas
=======

Payment‑status and renewal classification for an insurance‑agency
policy book.

Import structure
----------------
`import polizas` is intentionally cheap: only the stdlib‑based
sub‑modules are imported on use.  Heavy dependencies such as
*matplotlib* and *sqlmodel* are only imported when you explicitly access
:pymod:`polizas.viz` or :pymod:`polizas.db`.

Sub‑modules
~~~~~~~~~~~
- :pymod:`polizas.models`        – ``Policy`` dataclass + :class:`~polizas.models.PolicyStatus` enum
- :pymod:`polizas.payments`      – ``classify_payment_status`` / ``update_statuses`` + statistics
- :pymod:`polizas.renewals`      – ``compute_renewal_window`` + renewal alerts
- :pymod:`polizas.display`       – ``get_status_display`` badge lookup
- :pymod:`polizas.priority`      – collections worklist ordering
- :pymod:`polizas.lifecycle`     – manual actions (payment received, cancel, renew)
- :pymod:`polizas.records`       – raw record parsing (``InvalidDateError`` boundary)
- :pymod:`polizas.portfolio`     – ``PolicyBook`` in‑memory registry
- :pymod:`polizas.portfolio_db`  – ``DBPolicyBook`` SQLite registry
- :pymod:`polizas.viz`           – status bar chart

Quick start
-----------
>>> from datetime import date
>>> from polizas.models import Policy
>>> from polizas.payments import update_statuses
>>> p = Policy("p1", "A-100", payment_due=date(2024, 1, 1))
>>> update_statuses([p], date(2024, 2, 15))[0].status
<PolicyStatus.OVERDUE_CRITICAL: 'overdue_critical'>
"""

__all__ = [
    "models",
    "payments",
    "renewals",
    "display",
    "priority",
    "lifecycle",
    "records",
    "portfolio",
    "portfolio_db",
    "viz",
]

__version__ = "0.1.0"

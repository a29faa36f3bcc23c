#!/usr/bin/env python
"""
Seed database with sample policies for testing.

Payment and term dates are offsets from the day the script runs, so the
collections and renewal views always have something in every tier.  An
optional ``sample_policies.json`` (record‑store shape) is appended.
"""

import json
from datetime import date, timedelta

from polizas.models import PaymentFrequency, Policy, PolicyStatus, Term
from polizas.portfolio_db import DBPolicyBook
from polizas.records import load_policies

TODAY = date.today()


def _days(n: int) -> date:
    return TODAY + timedelta(days=n)


def _term(end_in: int) -> Term:
    return Term(start=_days(end_in - 365), end=_days(end_in))


# Sample policies spread across every severity tier and renewal band
SAMPLE_POLICIES = [
    Policy("pol-001", "GMX-1001", total=50000.0, payment_due=_days(-45), term=_term(200),
           ramo="Autos", aseguradora="GNP", contratante="Ana Ruiz",
           has_pending_payment=True, notes="Sin contacto desde hace un mes"),
    Policy("pol-002", "GMX-1002", total=200000.0, payment_due=_days(-5), term=_term(150),
           ramo="Gastos Médicos", aseguradora="AXA", contratante="Comercial del Norte SA",
           payment_frequency=PaymentFrequency.QUARTERLY),
    Policy("pol-003", "GMX-1003", total=8000.0, payment_due=_days(4), term=_term(90),
           ramo="Daños", aseguradora="Qualitas", contratante="Luis Pérez"),
    Policy("pol-004", "VID-2001", total=12000.0, payment_due=_days(60), term=_term(20),
           ramo="Vida", aseguradora="Metlife", contratante="María Gómez",
           payment_frequency=PaymentFrequency.ANNUAL),
    Policy("pol-005", "VID-2002", total=15000.0, term=_term(-10),
           ramo="Vida", aseguradora="Metlife", contratante="Jorge Díaz",
           payment_frequency=PaymentFrequency.ANNUAL),
    Policy("pol-006", "AUT-3001", total=9500.0, payment_due=_days(-90), term=_term(100),
           ramo="Autos", aseguradora="HDI", contratante="Transportes Lía",
           status=PolicyStatus.CANCELLED, notes="Cancelada por falta de pago"),
    Policy("pol-007", "AUT-3002", total=7200.0, payment_due=_days(25), term=_term(300),
           ramo="Autos", aseguradora="GNP", contratante="Sofía Herrera"),
]

# Add additional policies from sample_policies.json if available
try:
    with open('sample_policies.json', 'r', encoding='utf-8') as f:
        extra, rejected = load_policies(json.load(f))
    SAMPLE_POLICIES.extend(extra)
    for r in rejected:
        print(f"Skipped {r.record_id}: {r.reason}")
except (FileNotFoundError, json.JSONDecodeError):
    # Continue with default sample policies
    pass


def seed_database():
    """Add sample policies to the database, then re-stamp them."""
    with DBPolicyBook() as book:
        for policy in SAMPLE_POLICIES:
            book.add(policy)
            print(f"Added: {policy.policy_number} ({policy.status})")

        changed = book.restamp(TODAY)
        print(f"\nAdded {len(SAMPLE_POLICIES)} policies; re-stamped {len(changed)}.")


if __name__ == "__main__":
    # Initialize DB if needed
    from polizas.db import create_all
    print("Ensuring database tables exist...")
    create_all()

    # Seed the database
    print("Seeding database with sample policies...")
    seed_database()

    print("\nDone! You can now run the API server with:")
    print("  uvicorn api.main:app --reload")

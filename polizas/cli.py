"""
polizas.cli
===========

Command‑line front end over a JSON export of the record store.

Examples
--------
$ python -m polizas.cli restamp policies.json --today 2024-06-01
$ python -m polizas.cli worklist policies.json --tier critical
$ python -m polizas.cli renewals policies.json
$ python -m polizas.cli stats policies.json
$ python -m polizas.cli chart policies.json --out images/status.png

Records that cannot be parsed are reported on stderr and skipped.  The
exit status is 1 only when the file holds records and none of them
could be used.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from datetime import date
from pathlib import Path
from typing import List, Optional

from .payments import collections_summary, payment_statistics
from .priority import AMOUNT_BANDS, TIER_FILTERS, collections_worklist
from .records import policy_to_record, restamp_records
from .renewals import all_renewal_alerts, renewal_statistics
from .settings import settings


def _today(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an ISO date: {value!r}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m polizas.cli",
        description="Classify policy payment status and renewal windows.",
    )
    parser.add_argument("--log-level", default=settings.log_level)
    sub = parser.add_subparsers(dest="command", required=True)

    def add(name: str, help_: str) -> argparse.ArgumentParser:
        p = sub.add_parser(name, help=help_)
        p.add_argument("records", type=Path, help="JSON list of policy records")
        p.add_argument("--today", type=_today, default=None,
                       help="evaluation date (defaults to the current day)")
        return p

    add("restamp", "re-stamp every policy status and print the records")
    wl = add("worklist", "print the prioritised collections worklist")
    wl.add_argument("--tier", choices=sorted(TIER_FILTERS))
    wl.add_argument("--amount", choices=sorted(AMOUNT_BANDS))
    wl.add_argument("-q", "--search")
    add("renewals", "print renewal alerts")
    add("stats", "print payment and renewal statistics")
    ch = add("chart", "write the status bar chart")
    ch.add_argument("--out", type=Path, default=Path("images/status_snapshot.png"))
    return parser


def run(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(),
                        format="%(levelname)s %(name)s: %(message)s")

    try:
        records = json.loads(args.records.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        print(f"⛔ cannot read {args.records}: {exc}", file=sys.stderr)
        return 2
    if not isinstance(records, list):
        print(f"⛔ {args.records} must hold a JSON list", file=sys.stderr)
        return 2

    # one instant for the whole run
    today = args.today or date.today()
    policies, rejected = restamp_records(records, today)
    for r in rejected:
        print(f"skipped {r.record_id}: {r.reason}", file=sys.stderr)

    if args.command == "restamp":
        out = [policy_to_record(p) for p in policies]
    elif args.command == "worklist":
        entries = collections_worklist(policies, today, tier=args.tier,
                                       amount_band=args.amount, search=args.search)
        out = [
            {
                "id": e.policy.id,
                "policyNumber": e.policy.policy_number,
                "status": e.policy.status.value,
                "tier": e.tier.label,
                "daysOverdue": e.payment.days_overdue,
                "total": e.policy.total,
            }
            for e in entries
        ]
    elif args.command == "renewals":
        out = [
            {
                "id": a.id,
                "policyId": a.policy_id,
                "severity": a.severity.value,
                "message": a.message,
                "daysUntilTermEnd": a.days_until_term_end,
                "termEnd": a.term_end.isoformat(),
            }
            for a in all_renewal_alerts(policies, today)
        ]
    elif args.command == "stats":
        pay = payment_statistics(policies, today)
        summary = collections_summary(policies, today)
        out = {
            "payments": {**asdict(pay),
                         "onTimeRate": pay.on_time_rate,
                         "overdueRate": pay.overdue_rate},
            "collections": {**asdict(summary),
                            "averageDebtPerPolicy": summary.average_debt_per_policy},
            "renewals": asdict(renewal_statistics(policies, today)),
        }
    else:  # chart
        from .viz import status_summary
        out = {"chart": str(status_summary(policies, args.out))}

    print(json.dumps(out, ensure_ascii=False, indent=2))
    return 1 if records and not policies else 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()

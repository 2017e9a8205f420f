"""Operational command line for payback schedules and payback generation."""

import argparse
import asyncio
import logging
from datetime import date
from typing import List, Optional

from pydantic import ValidationError

from app.config import settings
from app.core.enums import PaybackFrequency
from app.db.session import session_scope
from app.models.schemas.payback_plan import PaybackScheduleRequest
from app.services.payback_plan_service import PaybackPlanService, default_schedule_engine
from app.services.schedule import PaybackTerms, total_of

logger = logging.getLogger(__name__)


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date {value!r}, expected YYYY-MM-DD")


def _parse_paydays(value: str) -> List[int]:
    try:
        return [int(day) for day in value.split(",") if day.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid payday list {value!r}, expected e.g. 1,2,3")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per operation."""
    parser = argparse.ArgumentParser(prog="mca-crm", description="MCA CRM backend operations")
    subparsers = parser.add_subparsers(dest="command", required=True)

    schedule = subparsers.add_parser("schedule", help="Preview a payback list")
    schedule.add_argument(
        "--frequency",
        type=PaybackFrequency,
        choices=list(PaybackFrequency),
        required=True,
    )
    schedule.add_argument(
        "--paydays",
        type=_parse_paydays,
        required=True,
        help="Weekdays 0 (Sunday) to 6 (Saturday), or the day of month for MONTHLY",
    )
    schedule.add_argument("--start", type=_parse_date, required=True, help="Start date (YYYY-MM-DD)")
    schedule.add_argument("--total", required=True, help="Total amount to collect")
    schedule.add_argument("--count", type=int, required=True, help="Number of paybacks")
    schedule.add_argument("--avoid-holiday", action="store_true", help="Skip US federal holidays")

    run = subparsers.add_parser("run-paybacks", help="Generate due paybacks for active plans")
    run.add_argument("--as-of", type=_parse_date, default=None, help="Cut-off date, today if omitted")

    return parser


def preview(args: argparse.Namespace) -> int:
    """Print the payback list of the given terms."""
    try:
        request = PaybackScheduleRequest(
            frequency=args.frequency,
            payday_list=args.paydays,
            avoid_holiday=args.avoid_holiday,
            start_date=args.start,
            total_amount=args.total,
            payback_count=args.count,
        )
    except ValidationError as e:
        logger.error(f"Invalid schedule terms: {e}")
        return 2

    engine = default_schedule_engine()
    terms = PaybackTerms(**request.model_dump())
    paybacks = engine.generate_payback_list(terms)

    for index, payback in enumerate(paybacks, start=1):
        print(f"{index:>4}  {payback.date.isoformat()}  {payback.amount:>12}")
    print(f"Total {total_of(paybacks)} over {len(paybacks)} paybacks")
    print(f"Term length {engine.term_length(terms)} months, ends {engine.scheduled_end_date(terms)}")
    return 0


async def run_paybacks(as_of: Optional[date]) -> int:
    """Generate due paybacks; exit status 1 if any plan failed."""
    async with session_scope() as session:
        results = await PaybackPlanService(session).generate_all_due_paybacks(as_of)

    failed = [plan_id for plan_id, count in results.items() if count < 0]
    generated = sum(count for count in results.values() if count > 0)
    print(f"Generated {generated} paybacks across {len(results) - len(failed)} plans")
    for plan_id in failed:
        print(f"Failed: plan {plan_id}")
    return 1 if failed else 0


def main(argv: Optional[List[str]] = None) -> int:
    """Command line entry point."""
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    args = build_parser().parse_args(argv)
    if args.command == "schedule":
        return preview(args)
    return asyncio.run(run_paybacks(args.as_of))


if __name__ == "__main__":
    raise SystemExit(main())

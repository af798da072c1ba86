"""
Command-line availability viewer.

Runs the scheduling engine against the in-memory settings and booking
adapters, optionally seeded from JSON files exported from the document
store. No network calls.

Usage:
    python main.py --date 2026-10-20 --service foam-wash
    python main.py --date 2026-10-20 --service interior --service polish --extra 15
    python main.py --date 2026-10-20 --service wash --bookings day.json --json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from detailing_scheduler.config import settings
from detailing_scheduler.scheduling.errors import SchedulingError
from detailing_scheduler.tools.availability import check_availability
from detailing_scheduler.tools.booking_repository import InMemoryBookingRepository
from detailing_scheduler.tools.settings_provider import InMemorySettingsProvider

logger = logging.getLogger(__name__)

GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"


def _load_json(path: str):
    file_path = Path(path)
    if not file_path.exists():
        logger.error("File not found: %s", file_path)
        sys.exit(1)
    return json.loads(file_path.read_text(encoding="utf-8"))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Show bookable start times for detailing services on a date."
    )
    parser.add_argument("--date", required=True, help="Calendar date, YYYY-MM-DD.")
    parser.add_argument(
        "--service",
        action="append",
        required=True,
        help="Service ID or alias; repeat to combine services into one visit.",
    )
    parser.add_argument(
        "--extra", type=int, default=0, help="Extra minutes added to the job (default: 0)."
    )
    parser.add_argument(
        "--include-past",
        action="store_true",
        help="Keep today's elapsed slots selectable, labelled as passed.",
    )
    parser.add_argument("--shop", default=settings.default_shop_id, help="Shop ID.")
    parser.add_argument("--settings", default=None, help="JSON settings document for the shop.")
    parser.add_argument(
        "--bookings",
        default=None,
        help="JSON list of booking documents (each with an 'id').",
    )
    parser.add_argument("--json", action="store_true", help="Print slots as JSON.")
    return parser


def _print_table(result) -> None:
    print(f"{BOLD}{result['message']}{RESET}")
    for slot in result["slots"]:
        if slot.available:
            status = f"{GREEN}available{RESET}"
        elif slot.blocked_until:
            status = f"{RED}{slot.reason.value} until {slot.blocked_until}{RESET}"
        else:
            status = f"{YELLOW}{slot.reason.value}{RESET}"
        passed = f" {DIM}(passed){RESET}" if slot.passed else ""
        print(f"  {slot.time}  {slot.display:>8}  -> {slot.end_time}  {status}{passed}")


def main() -> None:
    args = _build_parser().parse_args()

    provider = InMemorySettingsProvider()
    if args.settings:
        provider.save_settings(args.shop, _load_json(args.settings))

    repository = InMemoryBookingRepository()
    if args.bookings:
        for document in _load_json(args.bookings):
            repository.add_record(str(document["id"]), document)

    try:
        result = check_availability(
            args.shop,
            args.date,
            args.service,
            extra_minutes=args.extra,
            include_past=args.include_past,
            settings_provider=provider,
            repository=repository,
        )
    except SchedulingError as exc:
        logger.error("Could not compute availability: %s", exc)
        sys.exit(1)

    if args.json:
        payload = {
            "message": result["message"],
            "nextAvailable": result["next_available"],
            "slots": [s.model_dump(by_alias=True, mode="json") for s in result["slots"]],
        }
        sys.stdout.write(json.dumps(payload, indent=2) + "\n")
    else:
        _print_table(result)


if __name__ == "__main__":
    main()

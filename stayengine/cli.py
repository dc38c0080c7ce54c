"""Command-line interface for stayengine."""

import argparse
import logging
import sys
from decimal import Decimal
from pathlib import Path

import yaml

from stayengine.availability import (
    availability_summary,
    fully_booked_dates,
    nightly_occupancy,
    summarize_availability,
)
from stayengine.calendar import as_date
from stayengine.engine import StayEngine
from stayengine.errors import StayEngineError
from stayengine.models import Occupancy
from stayengine.output import format_availability, format_calendar, format_match, format_pricing
from stayengine.parser import (
    create_inventory_template,
    parse_inventory_yaml,
    parse_reservations_csv,
)
from stayengine.settings import parse_decimal

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NOT_BOOKABLE = 2


def _date_arg(value: str):
    try:
        return as_date(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _occupancy_arg(value: str) -> Occupancy:
    """Parse ADULTS or ADULTS+CHILDREN."""
    adults, _, children = value.partition("+")
    try:
        occupancy = Occupancy(adults=int(adults), children=int(children or 0))
    except ValueError as e:
        raise argparse.ArgumentTypeError(
            f"Expected ADULTS or ADULTS+CHILDREN, got {value!r}"
        ) from e
    if occupancy.adults < 0 or occupancy.children < 0:
        raise argparse.ArgumentTypeError(f"Guest counts must not be negative: {value!r}")
    return occupancy


def _decimal_arg(value: str) -> Decimal:
    try:
        rate = parse_decimal(value, "tax rate")
    except StayEngineError as e:
        raise argparse.ArgumentTypeError(str(e)) from e
    if rate < 0:
        raise argparse.ArgumentTypeError(f"tax rate must not be negative: {value!r}")
    return rate


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stayengine",
        description="Price stays and check room availability against an inventory file.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Examples:
  stayengine --inventory inventory.yaml price deluxe bar 2024-12-24 2024-12-28
  stayengine --inventory inventory.yaml availability 2024-12-24 2024-12-28
  stayengine --inventory inventory.yaml --reservations export.csv match 2024-12-24 2024-12-28 \\
      --room 2 --room 2 --room 2 --suggest
  stayengine --inventory inventory.yaml calendar deluxe 2024-12-01 2025-01-01
  stayengine --init inventory.yaml
""",
    )
    parser.add_argument(
        "--inventory",
        type=Path,
        help="Path to the inventory YAML file",
    )
    parser.add_argument(
        "--reservations",
        type=Path,
        help="Path to a reservations CSV export, added to the inventory's reservations",
    )
    parser.add_argument(
        "--init",
        type=Path,
        metavar="PATH",
        help="Write an inventory template to PATH and exit",
    )
    parser.add_argument(
        "--tax-rate",
        type=_decimal_arg,
        default=None,
        help="Flat tax multiplier, e.g. 0.18 (default: from inventory settings, else 0.18)",
    )
    parser.add_argument(
        "--currency",
        default=None,
        help="Currency code shown with amounts (default: from inventory settings, else USD)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log engine decisions to stderr",
    )

    subparsers = parser.add_subparsers(dest="command")

    price = subparsers.add_parser("price", help="Price a stay night by night")
    price.add_argument("room_type")
    price.add_argument("rate_plan")
    price.add_argument("check_in", type=_date_arg)
    price.add_argument("check_out", type=_date_arg)
    price.add_argument(
        "--rooms",
        type=int,
        default=1,
        help="Number of rooms to quote (default: 1)",
    )

    avail = subparsers.add_parser("availability", help="Count free rooms per room type")
    avail.add_argument("check_in", type=_date_arg)
    avail.add_argument("check_out", type=_date_arg)
    avail.add_argument("--room-type", help="Only show this room type")

    match = subparsers.add_parser("match", help="Match requested rooms and guests to room types")
    match.add_argument("check_in", type=_date_arg)
    match.add_argument("check_out", type=_date_arg)
    match.add_argument(
        "--room",
        dest="rooms",
        type=_occupancy_arg,
        action="append",
        default=[],
        metavar="ADULTS[+CHILDREN]",
        help="Guests for one requested room; repeat for each room",
    )
    match.add_argument("--rate-plan", help="Rate plan to price candidates under")
    match.add_argument(
        "--suggest",
        action="store_true",
        help="Suggest a room type combination when no single type fits",
    )

    calendar = subparsers.add_parser("calendar", help="Show nightly occupancy for a room type")
    calendar.add_argument("room_type")
    calendar.add_argument("start", type=_date_arg)
    calendar.add_argument("end", type=_date_arg)

    return parser


def _run(args: argparse.Namespace, engine: StayEngine) -> int:
    if args.command == "price":
        pricing = engine.price_stay(args.room_type, args.rate_plan, args.check_in, args.check_out)
        print(format_pricing(pricing, engine.quote(pricing, args.rooms)))
        return EXIT_OK if pricing.is_bookable else EXIT_NOT_BOOKABLE

    if args.command == "availability":
        if args.room_type:
            summaries = [
                availability_summary(
                    engine.snapshot, args.room_type, args.check_in, args.check_out
                )
            ]
        else:
            summaries = summarize_availability(engine.snapshot, args.check_in, args.check_out)
        print(format_availability(summaries, args.check_in, args.check_out))
        return EXIT_OK

    if args.command == "match":
        result = engine.match_capacity(args.rooms, args.check_in, args.check_out, args.rate_plan)
        combination = allocations = None
        if args.suggest and result.kind == "fallback":
            combination = engine.suggest_combination(
                result, args.check_in, args.check_out, args.rate_plan
            )
        if combination is not None:
            allocations = engine.allocate_guests(
                combination.quantities, args.rooms, args.check_in, args.check_out
            )
        print(format_match(result, combination, allocations))
        return EXIT_OK if result.feasible else EXIT_NOT_BOOKABLE

    if args.command == "calendar":
        occupancy = nightly_occupancy(engine.snapshot, args.room_type, args.start, args.end)
        total_rooms = sum(1 for r in engine.snapshot.rooms_of_type(args.room_type) if r.sellable)
        print(format_calendar(args.room_type, occupancy, total_rooms))
        full = fully_booked_dates(engine.snapshot, args.room_type, args.start, args.end)
        print(f"\n{len(full)} fully booked night(s)")
        return EXIT_OK

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    """Main entry point for stayengine CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.init:
        create_inventory_template(args.init)
        print(f"Created inventory template at: {args.init}")
        return EXIT_OK

    if not args.command:
        parser.print_help()
        return EXIT_ERROR

    if args.inventory is None:
        print("Error: --inventory is required", file=sys.stderr)
        return EXIT_ERROR
    if not args.inventory.exists():
        print(f"Error: Inventory file not found: {args.inventory}", file=sys.stderr)
        return EXIT_ERROR

    # Parse reservations export
    extra_reservations = []
    if args.reservations:
        if not args.reservations.exists():
            print(f"Error: Reservations file not found: {args.reservations}", file=sys.stderr)
            return EXIT_ERROR
        try:
            extra_reservations = parse_reservations_csv(args.reservations)
        except StayEngineError as e:
            print(f"Error parsing reservations CSV: {e}", file=sys.stderr)
            return EXIT_ERROR

    try:
        snapshot, settings = parse_inventory_yaml(args.inventory, extra_reservations)
    except (StayEngineError, yaml.YAMLError) as e:
        print(f"Error parsing inventory YAML: {e}", file=sys.stderr)
        return EXIT_ERROR

    settings = settings.with_overrides(tax_rate=args.tax_rate, currency=args.currency)
    logger.info(
        "Loaded %d room types, %d rooms and %d reservations",
        len(snapshot.room_types),
        len(snapshot.rooms),
        len(snapshot.reservations),
    )

    try:
        return _run(args, StayEngine(snapshot, settings))
    except (StayEngineError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())

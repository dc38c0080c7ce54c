"""Output formatting for stayengine."""

from datetime import date

from stayengine.allocation import RoomAllocation
from stayengine.models import AvailabilitySummary, MatchResult, PricingResult, StayQuote
from stayengine.optimizer import Combination


def _flags(item) -> str:
    flags = []
    if item.closed:
        flags.append("closed")
    if item.cta:
        flags.append("CTA")
    if item.ctd:
        flags.append("CTD")
    if item.min_stay is not None:
        flags.append(f"min {item.min_stay}")
    if item.max_stay is not None:
        flags.append(f"max {item.max_stay}")
    return ", ".join(flags)


def format_pricing(pricing: PricingResult, stay_quote: StayQuote | None = None) -> str:
    """Format a night-by-night price breakdown for display."""
    lines: list[str] = []

    lines.append(f"=== {pricing.room_type_id} / {pricing.rate_plan_id} ===")
    lines.append(
        f"{pricing.check_in.isoformat()} -> {pricing.check_out.isoformat()} "
        f"({pricing.nights} night{'s' if pricing.nights != 1 else ''})"
    )
    lines.append("")

    for item in pricing.items:
        flags = _flags(item)
        suffix = f"  [{flags}]" if flags else ""
        rate = f"{item.nightly_rate:>10} {pricing.currency}"
        lines.append(f"  {item.day.isoformat()}  {rate}{suffix}")

    lines.append("")
    lines.append(f"Total: {pricing.total} {pricing.currency}")
    if stay_quote is not None:
        tax_percent = (stay_quote.tax_rate * 100).normalize()
        lines.append(f"Taxes ({tax_percent:f}%): {stay_quote.taxes} {pricing.currency}")
        lines.append(f"Grand total: {stay_quote.grand_total} {pricing.currency}")

    if pricing.violations:
        lines.append("")
        lines.append("=== Not bookable ===")
        for violation in pricing.violations:
            lines.append(f"  - {violation}")

    return "\n".join(lines)


def format_availability(
    summaries: list[AvailabilitySummary],
    check_in: date,
    check_out: date,
) -> str:
    """Format free-room counts as an aligned table."""
    headers = ["Room type", "Free", "Rooms", "Max guests", "Capacity"]
    rows = [
        [
            s.room_type_id,
            str(s.available_rooms),
            str(s.total_rooms),
            str(s.max_occupancy),
            str(s.capacity),
        ]
        for s in summaries
    ]
    col_widths = [
        max(len(headers[i]), max((len(r[i]) for r in rows), default=0)) for i in range(len(headers))
    ]

    header_line = " | ".join(h.ljust(col_widths[i]) for i, h in enumerate(headers))
    separator = "-" * len(header_line)

    lines = [
        f"=== Availability {check_in.isoformat()} -> {check_out.isoformat()} ===",
        header_line,
        separator,
    ]
    for row in rows:
        lines.append(" | ".join(cell.ljust(col_widths[i]) for i, cell in enumerate(row)))

    return "\n".join(lines)


def format_match(
    result: MatchResult,
    combination: Combination | None = None,
    allocations: list[RoomAllocation] | None = None,
) -> str:
    """Format a capacity match for display."""
    lines: list[str] = []
    lines.append(
        f"Requested: {result.requested_rooms} room(s), {result.total_guests} guest(s)"
    )
    lines.append(f"Free capacity across room types: {result.total_available_capacity}")
    lines.append("")

    if result.kind == "direct":
        lines.append("=== Direct match ===")
        for candidate in result.direct:
            price = ""
            if candidate.pricing is not None:
                price = f", {candidate.pricing.total} {candidate.pricing.currency} per room"
            lines.append(
                f"  {candidate.room_type_id}: {candidate.available_rooms} free, "
                f"up to {candidate.max_occupancy} guests{price}"
            )
    elif result.kind == "fallback":
        lines.append("=== No single room type fits; combine room types ===")
        for option in result.options:
            lines.append(
                f"  {option.room_type_id}: {option.available_rooms} free x "
                f"{option.max_occupancy} guests = {option.capacity}"
            )
    else:
        lines.append("=== Not enough rooms ===")
        lines.append(f"  Short by {result.shortfall} guest(s)")

    if result.blocked:
        lines.append("")
        lines.append("=== Blocked by restrictions ===")
        for candidate in result.blocked:
            reasons = "; ".join(candidate.pricing.violations) if candidate.pricing else ""
            lines.append(f"  {candidate.room_type_id}: {reasons}")

    if combination is not None:
        lines.append("")
        lines.append("=== Suggested combination ===")
        for room_type_id, qty in sorted(combination.quantities.items()):
            lines.append(f"  {qty} x {room_type_id}")
        lines.append(f"  {combination.total_rooms} room(s), capacity {combination.total_capacity}")
        if combination.total_price is not None:
            lines.append(f"  Total: {combination.total_price}")

    if allocations:
        lines.append("")
        lines.append("=== Guests per room ===")
        for placed in allocations:
            children = f" + {placed.children} child(ren)" if placed.children else ""
            lines.append(
                f"  {placed.room_id or placed.room_type_id} ({placed.room_type_id}): "
                f"{placed.adults} adult(s){children}"
            )

    return "\n".join(lines)


def format_calendar(room_type_id: str, occupancy: dict[date, int], total_rooms: int) -> str:
    """Format nightly occupancy, marking fully booked nights."""
    lines = [f"=== {room_type_id}: {total_rooms} sellable room(s) ==="]
    for day, taken in occupancy.items():
        marker = "  FULL" if taken >= total_rooms else ""
        lines.append(f"  {day.isoformat()} {day.strftime('%a')}  {taken}/{total_rooms}{marker}")
    return "\n".join(lines)

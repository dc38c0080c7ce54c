"""Match a requested occupancy against room type availability."""

import logging
from datetime import date
from decimal import Decimal

from stayengine.availability import availability_summary
from stayengine.calendar import validate_range
from stayengine.errors import NoAssignment
from stayengine.models import (
    AvailabilitySummary,
    DirectCandidate,
    MatchResult,
    Occupancy,
    PricingResult,
    RoomType,
)
from stayengine.rates import price_stay
from stayengine.settings import EngineSettings
from stayengine.snapshot import InventorySnapshot

logger = logging.getLogger(__name__)


def price_candidate(
    snapshot: InventorySnapshot,
    room_type: RoomType,
    rate_plan_id: str | None,
    check_in: date,
    check_out: date,
    settings: EngineSettings,
) -> PricingResult | None:
    """Price a room type under the given or primary rate plan; None when it has no rate."""
    plan_id = rate_plan_id or snapshot.primary_rate_plan_id(room_type.id)
    if plan_id is None:
        return None
    try:
        return price_stay(snapshot, room_type.id, plan_id, check_in, check_out, settings)
    except NoAssignment:
        logger.debug("%s has no rate under %s, left unpriced", room_type.id, plan_id)
        return None


def _direct_sort_key(candidate: DirectCandidate, names: dict[str, str]) -> tuple:
    total = candidate.total
    return (
        candidate.max_occupancy,
        total is None,
        total if total is not None else Decimal("0"),
        names[candidate.room_type_id],
    )


def match_capacity(
    snapshot: InventorySnapshot,
    requested_occupancies: list[Occupancy],
    check_in: date,
    check_out: date,
    rate_plan_id: str | None = None,
    settings: EngineSettings | None = None,
) -> MatchResult:
    """
    Find room types able to host the requested rooms.

    A direct match is one visible room type with enough free rooms, each large
    enough for the biggest requested room, whose stay has no restriction
    violations. When none exists the aggregate free capacity of all visible
    room types decides between a fallback (a combination can work) and
    infeasible (reported with the shortfall).

    Each candidate is priced under ``rate_plan_id`` or, when omitted, under the
    room type's primary rate plan. Candidates without any rate stay unpriced.
    """
    settings = settings or EngineSettings()
    validate_range(check_in, check_out)
    if rate_plan_id is not None:
        snapshot.rate_plan(rate_plan_id)

    occupancies = list(requested_occupancies) or [Occupancy(adults=0)]
    for occupancy in occupancies:
        if occupancy.adults < 0 or occupancy.children < 0:
            raise ValueError(f"Guest counts must not be negative: {occupancy}")

    requested_rooms = len(occupancies)
    total_guests = sum(o.guests for o in occupancies)
    largest_room = max(o.guests for o in occupancies)

    room_types = snapshot.visible_room_types()
    names = {rt.id: rt.name for rt in room_types}
    summaries: dict[str, AvailabilitySummary] = {
        rt.id: availability_summary(snapshot, rt.id, check_in, check_out) for rt in room_types
    }

    direct: list[DirectCandidate] = []
    blocked: list[DirectCandidate] = []
    for room_type in room_types:
        summary = summaries[room_type.id]
        if room_type.max_occupancy < largest_room:
            continue
        if summary.available_rooms < requested_rooms:
            continue

        pricing = price_candidate(
            snapshot, room_type, rate_plan_id, check_in, check_out, settings
        )
        candidate = DirectCandidate(
            room_type_id=room_type.id,
            available_rooms=summary.available_rooms,
            max_occupancy=room_type.max_occupancy,
            pricing=pricing,
        )
        if pricing is not None and not pricing.is_bookable:
            blocked.append(candidate)
        else:
            direct.append(candidate)

    options = tuple(s for s in summaries.values() if s.available_rooms > 0)
    total_capacity = sum(s.capacity for s in options)

    if direct:
        direct.sort(key=lambda c: _direct_sort_key(c, names))
        logger.debug(
            "Direct match for %d room(s) / %d guest(s): %s",
            requested_rooms,
            total_guests,
            ", ".join(c.room_type_id for c in direct),
        )
        return MatchResult(
            kind="direct",
            total_guests=total_guests,
            requested_rooms=requested_rooms,
            direct=tuple(direct),
            options=options,
            total_available_capacity=total_capacity,
            blocked=tuple(blocked),
        )

    if total_capacity < total_guests:
        shortfall = total_guests - total_capacity
        logger.debug(
            "Infeasible: %d guest(s), %d capacity, short by %d",
            total_guests,
            total_capacity,
            shortfall,
        )
        return MatchResult(
            kind="infeasible",
            total_guests=total_guests,
            requested_rooms=requested_rooms,
            options=options,
            total_available_capacity=total_capacity,
            shortfall=shortfall,
            blocked=tuple(blocked),
        )

    logger.debug(
        "Fallback: %d guest(s) fit in combined capacity %d across %d room type(s)",
        total_guests,
        total_capacity,
        len(options),
    )
    return MatchResult(
        kind="fallback",
        total_guests=total_guests,
        requested_rooms=requested_rooms,
        options=options,
        total_available_capacity=total_capacity,
        blocked=tuple(blocked),
    )

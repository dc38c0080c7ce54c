"""Free-room counts over date ranges."""

import logging
from datetime import date

from stayengine.calendar import each_night, overlaps, validate_range
from stayengine.errors import RoomConflict
from stayengine.models import AvailabilitySummary, Reservation, Room
from stayengine.snapshot import InventorySnapshot

logger = logging.getLogger(__name__)


def _holding_reservations(snapshot: InventorySnapshot, room_id: str) -> list[Reservation]:
    return [r for r in snapshot.reservations_for_room(room_id) if r.holds_room]


def free_rooms(
    snapshot: InventorySnapshot,
    room_type_id: str,
    check_in: date,
    check_out: date,
) -> list[Room]:
    """Sellable rooms of a type with no reservation holding them in [check_in, check_out)."""
    validate_range(check_in, check_out)
    snapshot.room_type(room_type_id)
    return [
        room
        for room in snapshot.rooms_of_type(room_type_id)
        if room.sellable
        and not any(
            overlaps(r.check_in, r.check_out, check_in, check_out)
            for r in _holding_reservations(snapshot, room.id)
        )
    ]


def rooms_available(
    snapshot: InventorySnapshot,
    room_type_id: str,
    check_in: date,
    check_out: date,
) -> int:
    """
    Count rooms of a type with no overlapping reservation in [check_in, check_out).

    Rooms under maintenance are never sellable. Cancelled and no-show
    reservations do not hold a room. A room with several overlapping rows is
    counted once.
    """
    available = len(free_rooms(snapshot, room_type_id, check_in, check_out))
    logger.debug("%s %s..%s: %d available", room_type_id, check_in, check_out, available)
    return available


def availability_summary(
    snapshot: InventorySnapshot,
    room_type_id: str,
    check_in: date,
    check_out: date,
) -> AvailabilitySummary:
    room_type = snapshot.room_type(room_type_id)
    return AvailabilitySummary(
        room_type_id=room_type_id,
        available_rooms=rooms_available(snapshot, room_type_id, check_in, check_out),
        total_rooms=sum(1 for room in snapshot.rooms_of_type(room_type_id) if room.sellable),
        max_occupancy=room_type.max_occupancy,
    )


def summarize_availability(
    snapshot: InventorySnapshot,
    check_in: date,
    check_out: date,
) -> list[AvailabilitySummary]:
    """Availability of every visible room type, in snapshot order."""
    return [
        availability_summary(snapshot, rt.id, check_in, check_out)
        for rt in snapshot.visible_room_types()
    ]


def nightly_occupancy(
    snapshot: InventorySnapshot,
    room_type_id: str,
    start: date,
    end: date,
) -> dict[date, int]:
    """
    Number of sellable rooms of a type taken on each night of [start, end).

    The checkout day of a reservation is free.
    """
    validate_range(start, end)
    snapshot.room_type(room_type_id)

    taken: dict[date, set[str]] = {day: set() for day in each_night(start, end)}
    for room in snapshot.rooms_of_type(room_type_id):
        if not room.sellable:
            continue
        for reservation in _holding_reservations(snapshot, room.id):
            if not overlaps(reservation.check_in, reservation.check_out, start, end):
                continue
            nights = each_night(max(reservation.check_in, start), min(reservation.check_out, end))
            for day in nights:
                taken[day].add(room.id)

    return {day: len(rooms) for day, rooms in taken.items()}


def fully_booked_dates(
    snapshot: InventorySnapshot,
    room_type_id: str,
    start: date,
    end: date,
) -> list[date]:
    """Nights in [start, end) on which no sellable room of the type is free."""
    total = sum(1 for room in snapshot.rooms_of_type(room_type_id) if room.sellable)
    occupancy = nightly_occupancy(snapshot, room_type_id, start, end)
    return [day for day, count in occupancy.items() if count >= total]


def find_conflicts(
    snapshot: InventorySnapshot,
    room_id: str,
    check_in: date,
    check_out: date,
    exclude_reservation_id: str | None = None,
) -> list[Reservation]:
    """Reservations holding ``room_id`` that overlap [check_in, check_out)."""
    validate_range(check_in, check_out)
    snapshot.room(room_id)
    return [
        r
        for r in _holding_reservations(snapshot, room_id)
        if r.id != exclude_reservation_id and overlaps(r.check_in, r.check_out, check_in, check_out)
    ]


def ensure_room_free(
    snapshot: InventorySnapshot,
    room_id: str,
    check_in: date,
    check_out: date,
    exclude_reservation_id: str | None = None,
) -> None:
    """
    Write-time check before inserting or moving a reservation.

    Raises RoomConflict listing the overlapping reservations.
    """
    conflicts = find_conflicts(snapshot, room_id, check_in, check_out, exclude_reservation_id)
    if conflicts:
        raise RoomConflict(room_id, [r.id for r in conflicts])

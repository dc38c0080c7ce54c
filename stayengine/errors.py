"""Exceptions raised by stayengine."""

from datetime import date


class StayEngineError(Exception):
    """Base class for structural errors that need caller correction."""


class InvalidRange(StayEngineError):
    """A date range whose end is not after its start."""

    def __init__(self, start: date, end: date):
        self.start = start
        self.end = end
        super().__init__(f"Invalid date range: {start} -> {end} (end must be after start)")


class UnknownRoomType(StayEngineError):
    def __init__(self, room_type_id: str):
        self.room_type_id = room_type_id
        super().__init__(f"Unknown room type: {room_type_id}")


class UnknownRatePlan(StayEngineError):
    def __init__(self, rate_plan_id: str):
        self.rate_plan_id = rate_plan_id
        super().__init__(f"Unknown rate plan: {rate_plan_id}")


class UnknownRoom(StayEngineError):
    def __init__(self, room_id: str):
        self.room_id = room_id
        super().__init__(f"Unknown room: {room_id}")


class NoAssignment(StayEngineError):
    """The room type is not linked to the rate plan and nothing supplies a default price."""

    def __init__(self, room_type_id: str, rate_plan_id: str):
        self.room_type_id = room_type_id
        self.rate_plan_id = rate_plan_id
        super().__init__(
            f"Room type {room_type_id} has no assignment to rate plan {rate_plan_id} "
            "and neither the plan nor the room type has a default price"
        )


class RoomConflict(StayEngineError):
    """A room already holds a reservation overlapping the requested stay."""

    def __init__(self, room_id: str, reservation_ids: list[str]):
        self.room_id = room_id
        self.reservation_ids = reservation_ids
        super().__init__(
            f"Room {room_id} is already booked by: {', '.join(reservation_ids)}"
        )


class SnapshotError(StayEngineError):
    """Inventory or reservation input that cannot be turned into a snapshot."""


class InvalidSelection(StayEngineError):
    """A selection event that refers to a room type the selection does not offer."""


class OverCapacity(StayEngineError):
    """More guests than the chosen rooms can hold."""

    def __init__(self, guests: int, capacity: int):
        self.guests = guests
        self.capacity = capacity
        super().__init__(f"{guests} guest(s) do not fit in rooms holding {capacity}")

"""Read-only inventory snapshot the engine computes against."""

import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Protocol

from stayengine.errors import SnapshotError, UnknownRatePlan, UnknownRoom, UnknownRoomType
from stayengine.models import (
    RatePlan,
    Reservation,
    Room,
    RoomRatePlan,
    RoomType,
    SeasonOverride,
)

logger = logging.getLogger(__name__)


class InventoryRepository(Protocol):
    """Read-only data access the snapshot can be built from."""

    def list_room_types(self) -> Iterable[RoomType]: ...

    def list_rooms(self) -> Iterable[Room]: ...

    def list_rate_plans(self) -> Iterable[RatePlan]: ...

    def list_assignments(self) -> Iterable[RoomRatePlan]: ...

    def list_season_overrides(self) -> Iterable[SeasonOverride]: ...

    def list_reservations(self) -> Iterable[Reservation]: ...


def _index(items: Iterable, kind: str) -> Mapping:
    by_id = {}
    for item in items:
        if item.id in by_id:
            raise SnapshotError(f"Duplicate {kind} id: {item.id}")
        by_id[item.id] = item
    return MappingProxyType(by_id)


@dataclass(frozen=True)
class InventorySnapshot:
    """
    Immutable view of rooms, rates, seasons and reservations.

    Every engine operation is a pure function of a snapshot, so one snapshot can
    be shared between concurrent requests. Build a new snapshot to see new data.
    """

    room_types: tuple[RoomType, ...] = ()
    rooms: tuple[Room, ...] = ()
    rate_plans: tuple[RatePlan, ...] = ()
    assignments: tuple[RoomRatePlan, ...] = ()
    season_overrides: tuple[SeasonOverride, ...] = ()
    reservations: tuple[Reservation, ...] = ()

    _room_types_by_id: Mapping[str, RoomType] = field(init=False, repr=False, compare=False)
    _rooms_by_id: Mapping[str, Room] = field(init=False, repr=False, compare=False)
    _rate_plans_by_id: Mapping[str, RatePlan] = field(init=False, repr=False, compare=False)
    _rooms_by_type: Mapping[str, tuple[Room, ...]] = field(init=False, repr=False, compare=False)
    _reservations_by_room: Mapping[str, tuple[Reservation, ...]] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        # Accept any iterable from callers but store tuples.
        for name in (
            "room_types",
            "rooms",
            "rate_plans",
            "assignments",
            "season_overrides",
            "reservations",
        ):
            object.__setattr__(self, name, tuple(getattr(self, name)))

        room_types = _index(self.room_types, "room type")
        rooms = _index(self.rooms, "room")
        object.__setattr__(self, "_room_types_by_id", room_types)
        object.__setattr__(self, "_rooms_by_id", rooms)
        object.__setattr__(self, "_rate_plans_by_id", _index(self.rate_plans, "rate plan"))

        rooms_by_type: dict[str, list[Room]] = defaultdict(list)
        for room in self.rooms:
            if room.room_type_id not in room_types:
                raise SnapshotError(
                    f"Room {room.id} references unknown room type {room.room_type_id}"
                )
            rooms_by_type[room.room_type_id].append(room)
        object.__setattr__(
            self,
            "_rooms_by_type",
            MappingProxyType({k: tuple(v) for k, v in rooms_by_type.items()}),
        )

        by_room: dict[str, list[Reservation]] = defaultdict(list)
        for reservation in self.reservations:
            if reservation.room_id not in rooms:
                raise SnapshotError(
                    f"Reservation {reservation.id} references unknown room {reservation.room_id}"
                )
            if reservation.check_out <= reservation.check_in:
                raise SnapshotError(
                    f"Reservation {reservation.id}: check_out must be after check_in"
                )
            by_room[reservation.room_id].append(reservation)
        object.__setattr__(
            self,
            "_reservations_by_room",
            MappingProxyType({k: tuple(v) for k, v in by_room.items()}),
        )

    @classmethod
    def from_repository(cls, repository: InventoryRepository) -> "InventorySnapshot":
        """Read everything from a repository once and freeze it."""
        snapshot = cls(
            room_types=tuple(repository.list_room_types()),
            rooms=tuple(repository.list_rooms()),
            rate_plans=tuple(repository.list_rate_plans()),
            assignments=tuple(repository.list_assignments()),
            season_overrides=tuple(repository.list_season_overrides()),
            reservations=tuple(repository.list_reservations()),
        )
        logger.debug(
            "Built snapshot: %d room types, %d rooms, %d reservations",
            len(snapshot.room_types),
            len(snapshot.rooms),
            len(snapshot.reservations),
        )
        return snapshot

    def room_type(self, room_type_id: str) -> RoomType:
        try:
            return self._room_types_by_id[room_type_id]
        except KeyError:
            raise UnknownRoomType(room_type_id) from None

    def rate_plan(self, rate_plan_id: str) -> RatePlan:
        try:
            return self._rate_plans_by_id[rate_plan_id]
        except KeyError:
            raise UnknownRatePlan(rate_plan_id) from None

    def room(self, room_id: str) -> Room:
        try:
            return self._rooms_by_id[room_id]
        except KeyError:
            raise UnknownRoom(room_id) from None

    def visible_room_types(self) -> list[RoomType]:
        return [rt for rt in self.room_types if rt.visible]

    def rooms_of_type(self, room_type_id: str) -> tuple[Room, ...]:
        return self._rooms_by_type.get(room_type_id, ())

    def reservations_for_room(self, room_id: str) -> tuple[Reservation, ...]:
        return self._reservations_by_room.get(room_id, ())

    def assignment(self, rate_plan_id: str, room_type_id: str) -> RoomRatePlan | None:
        """Return the assignment linking the pair, or None."""
        for assignment in self.assignments:
            if assignment.rate_plan_id == rate_plan_id and assignment.room_type_id == room_type_id:
                return assignment
        return None

    def primary_rate_plan_id(self, room_type_id: str) -> str | None:
        """Rate plan of the room type's primary assignment, falling back to its only one."""
        linked = [a for a in self.assignments if a.room_type_id == room_type_id]
        for assignment in linked:
            if assignment.is_primary:
                return assignment.rate_plan_id
        if len(linked) == 1:
            return linked[0].rate_plan_id
        return None

    def overrides_for(self, rate_plan_id: str, room_type_id: str) -> list[SeasonOverride]:
        """Overrides for the pair in declaration order."""
        return [
            o
            for o in self.season_overrides
            if o.rate_plan_id == rate_plan_id and o.room_type_id == room_type_id
        ]

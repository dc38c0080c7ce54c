"""Spread a party's adults and children over the rooms chosen for it."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from stayengine.errors import OverCapacity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoomAllocation:
    """Guests placed in one room of a combination."""

    room_type_id: str
    adults: int
    children: int
    room_id: str | None = None

    @property
    def guests(self) -> int:
        return self.adults + self.children


def _deal(count: int, space: list[int]) -> list[int]:
    """
    Hand out ``count`` guests one per room in turn, skipping full rooms.

    Every pass starts again at the first room, so without full rooms the
    first ``count % len(space)`` rooms end up holding one guest more.
    """
    dealt = [0] * len(space)
    while count:
        for i, free in enumerate(space):
            if count and dealt[i] < free:
                dealt[i] += 1
                count -= 1
    return dealt


def allocate_guests(
    quantities: Mapping[str, int],
    max_occupancy: Mapping[str, int],
    adults: int,
    children: int = 0,
) -> list[RoomAllocation]:
    """
    Split ``adults`` and ``children`` across ``quantities`` rooms per type.

    Rooms are filled largest type first. Adults are spread as evenly as the
    room sizes allow, then children over the space that is left, so no room
    holds more than its type's ``max_occupancy``. Raises OverCapacity when
    the rooms cannot hold the party.
    """
    if adults < 0 or children < 0:
        raise ValueError(f"Guest counts must not be negative: {adults}+{children}")

    slots = [
        room_type_id
        for room_type_id, qty in sorted(
            quantities.items(), key=lambda item: -max_occupancy[item[0]]
        )
        for _ in range(qty)
    ]
    capacity = sum(max_occupancy[room_type_id] for room_type_id in slots)
    if adults + children > capacity:
        raise OverCapacity(adults + children, capacity)

    space = [max_occupancy[room_type_id] for room_type_id in slots]
    adults_per_room = _deal(adults, space)
    children_per_room = _deal(children, [s - a for s, a in zip(space, adults_per_room)])

    logger.debug(
        "Allocated %d adult(s) and %d child(ren) over %d room(s)", adults, children, len(slots)
    )
    return [
        RoomAllocation(room_type_id, a, c)
        for room_type_id, a, c in zip(slots, adults_per_room, children_per_room)
    ]

"""Incremental multi-room selection as a pure reducer."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType

from stayengine.errors import InvalidSelection
from stayengine.models import AvailabilitySummary, MatchResult


@dataclass(frozen=True)
class AddRoom:
    room_type_id: str


@dataclass(frozen=True)
class RemoveRoom:
    room_type_id: str


@dataclass(frozen=True)
class ClearSelection:
    pass


SelectionEvent = AddRoom | RemoveRoom | ClearSelection


@dataclass(frozen=True)
class Selection:
    """
    Quantities chosen per room type while building a fallback combination.

    ``rejection`` explains why the last event left the selection unchanged.
    """

    total_guests: int
    options: Mapping[str, AvailabilitySummary]
    quantities: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    rejection: str | None = None

    @classmethod
    def from_match(cls, result: MatchResult) -> "Selection":
        return cls.from_options(result.total_guests, result.options)

    @classmethod
    def from_options(
        cls, total_guests: int, options: Iterable[AvailabilitySummary]
    ) -> "Selection":
        return cls(
            total_guests=total_guests,
            options=MappingProxyType({o.room_type_id: o for o in options}),
        )

    def quantity(self, room_type_id: str) -> int:
        return self.quantities.get(room_type_id, 0)

    @property
    def total_selected_capacity(self) -> int:
        return sum(
            qty * self.options[room_type_id].max_occupancy
            for room_type_id, qty in self.quantities.items()
        )

    @property
    def total_selected_rooms(self) -> int:
        return sum(self.quantities.values())

    @property
    def remaining_guests(self) -> int:
        return max(0, self.total_guests - self.total_selected_capacity)

    @property
    def is_complete(self) -> bool:
        return self.total_selected_rooms > 0 and self.total_selected_capacity >= self.total_guests

    def can_add(self, room_type_id: str) -> bool:
        return self._add_blocker(room_type_id) is None

    def _add_blocker(self, room_type_id: str) -> str | None:
        option = self._option(room_type_id)
        if self.total_selected_rooms > 0 and self.total_selected_capacity >= self.total_guests:
            return "selected rooms already cover all guests"
        if self.quantity(room_type_id) >= option.available_rooms:
            return f"no more {room_type_id} rooms available"
        return None

    def _option(self, room_type_id: str) -> AvailabilitySummary:
        try:
            return self.options[room_type_id]
        except KeyError:
            raise InvalidSelection(f"Room type not offered: {room_type_id}") from None

    def _with_quantity(self, room_type_id: str, qty: int) -> "Selection":
        quantities = dict(self.quantities)
        if qty:
            quantities[room_type_id] = qty
        else:
            quantities.pop(room_type_id, None)
        return replace(self, quantities=MappingProxyType(quantities), rejection=None)


def reduce_selection(selection: Selection, event: SelectionEvent) -> Selection:
    """
    Apply one event and return the next selection.

    Adding is refused once the selected capacity covers every guest or the
    room type has no more free rooms; removing is refused at zero. Refused
    events return the same quantities with ``rejection`` set.
    """
    if isinstance(event, AddRoom):
        blocker = selection._add_blocker(event.room_type_id)
        if blocker is not None:
            return replace(selection, rejection=blocker)
        return selection._with_quantity(
            event.room_type_id, selection.quantity(event.room_type_id) + 1
        )

    if isinstance(event, RemoveRoom):
        selection._option(event.room_type_id)
        current = selection.quantity(event.room_type_id)
        if current == 0:
            return replace(selection, rejection=f"no {event.room_type_id} rooms selected")
        return selection._with_quantity(event.room_type_id, current - 1)

    if isinstance(event, ClearSelection):
        return replace(selection, quantities=MappingProxyType({}), rejection=None)

    raise InvalidSelection(f"Unknown selection event: {event!r}")


def apply_events(selection: Selection, events) -> Selection:
    for event in events:
        selection = reduce_selection(selection, event)
    return selection

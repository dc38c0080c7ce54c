"""Facade binding a snapshot and settings to the engine operations."""

from collections.abc import Mapping
from dataclasses import replace
from datetime import date

from stayengine import allocation, availability, matcher, optimizer, rates
from stayengine.allocation import RoomAllocation
from stayengine.errors import InvalidSelection
from stayengine.models import MatchResult, Occupancy, PricingResult, StayQuote
from stayengine.selection import Selection
from stayengine.settings import EngineSettings
from stayengine.snapshot import InventorySnapshot


class StayEngine:
    """
    Pricing and availability queries against one inventory snapshot.

    Holds no mutable state; safe to share across threads and request handlers.
    """

    def __init__(self, snapshot: InventorySnapshot, settings: EngineSettings | None = None):
        self.snapshot = snapshot
        self.settings = settings or EngineSettings()

    def price_stay(
        self, room_type_id: str, rate_plan_id: str, check_in: date, check_out: date
    ) -> PricingResult:
        return rates.price_stay(
            self.snapshot, room_type_id, rate_plan_id, check_in, check_out, self.settings
        )

    def quote(self, pricing: PricingResult, rooms: int = 1) -> StayQuote:
        return rates.quote(pricing, rooms, self.settings)

    def rooms_available(self, room_type_id: str, check_in: date, check_out: date) -> int:
        return availability.rooms_available(self.snapshot, room_type_id, check_in, check_out)

    def match_capacity(
        self,
        requested_occupancies: list[Occupancy],
        check_in: date,
        check_out: date,
        rate_plan_id: str | None = None,
    ) -> MatchResult:
        return matcher.match_capacity(
            self.snapshot,
            requested_occupancies,
            check_in,
            check_out,
            rate_plan_id=rate_plan_id,
            settings=self.settings,
        )

    def suggest_combination(
        self,
        result: MatchResult,
        check_in: date,
        check_out: date,
        rate_plan_id: str | None = None,
    ) -> optimizer.Combination | None:
        """Suggest a combination for a fallback match, preferring bookable, cheaper rooms."""
        prices = {}
        options = []
        for option in result.options:
            room_type = self.snapshot.room_type(option.room_type_id)
            pricing = matcher.price_candidate(
                self.snapshot, room_type, rate_plan_id, check_in, check_out, self.settings
            )
            if pricing is not None and not pricing.is_bookable:
                continue
            if pricing is not None:
                prices[option.room_type_id] = pricing.total
            options.append(option)
        # Price only when every option is priced, so unpriced rooms are not treated as free.
        if len(prices) != len(options):
            prices = {}
        return optimizer.suggest_combination(options, result.total_guests, prices or None)

    def ensure_room_free(
        self,
        room_id: str,
        check_in: date,
        check_out: date,
        exclude_reservation_id: str | None = None,
    ) -> None:
        availability.ensure_room_free(
            self.snapshot, room_id, check_in, check_out, exclude_reservation_id
        )

    def start_selection(self, result: MatchResult) -> Selection:
        """Empty selection over a match's options, to be driven with reduce_selection."""
        return Selection.from_match(result)

    def allocate_guests(
        self,
        quantities: Mapping[str, int],
        requested_occupancies: list[Occupancy],
        check_in: date,
        check_out: date,
    ) -> list[RoomAllocation]:
        """
        Place the requested party into concrete free rooms.

        ``quantities`` is a combination or selection's rooms per type. Each
        allocation gets the id of a room free for the whole stay.
        """
        allocations = allocation.allocate_guests(
            quantities,
            {rt_id: self.snapshot.room_type(rt_id).max_occupancy for rt_id in quantities},
            sum(o.adults for o in requested_occupancies),
            sum(o.children for o in requested_occupancies),
        )

        free = {
            rt_id: iter(availability.free_rooms(self.snapshot, rt_id, check_in, check_out))
            for rt_id, qty in quantities.items()
            if qty
        }
        assigned = []
        for placed in allocations:
            room = next(free[placed.room_type_id], None)
            if room is None:
                raise InvalidSelection(
                    f"Not enough free {placed.room_type_id} rooms for "
                    f"{quantities[placed.room_type_id]} selected"
                )
            assigned.append(replace(placed, room_id=room.id))
        return assigned

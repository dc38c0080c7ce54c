from datetime import date, datetime
from decimal import Decimal

import pytest

from conftest import booking, make_snapshot
from stayengine.errors import InvalidRange, UnknownRatePlan
from stayengine.matcher import match_capacity
from stayengine.models import (
    Occupancy,
    RatePlan,
    Room,
    RoomRatePlan,
    RoomType,
    SeasonOverride,
)

D = date
CHECK_IN = D(2024, 7, 1)
CHECK_OUT = D(2024, 7, 4)


def small_hotel(season_overrides=(), extra_types=(), extra_assignments=()):
    """Two free standard rooms (2 guests) and one free family room (4 guests)."""
    return make_snapshot(
        room_types=[
            RoomType(id="standard", name="Standard", max_occupancy=2),
            RoomType(id="family", name="Family", max_occupancy=4),
            *extra_types,
        ],
        rooms=[
            Room(id="s1", room_type_id="standard"),
            Room(id="s2", room_type_id="standard"),
            Room(id="s3", room_type_id="standard"),
            Room(id="f1", room_type_id="family"),
            Room(id="f2", room_type_id="family"),
        ],
        rate_plans=[RatePlan(id="bar", name="BAR")],
        assignments=[
            RoomRatePlan("bar", "standard", Decimal("80"), is_primary=True),
            RoomRatePlan("bar", "family", Decimal("140"), is_primary=True),
            *extra_assignments,
        ],
        season_overrides=season_overrides,
        reservations=[
            booking("r1", "s3", "2024-06-28", "2024-07-02"),
            booking("r2", "f2", "2024-07-03", "2024-07-10"),
        ],
    )


def couples(count):
    return [Occupancy(adults=2) for _ in range(count)]


class TestFallback:
    def test_three_couples_need_a_combination(self):
        result = match_capacity(small_hotel(), couples(3), CHECK_IN, CHECK_OUT)

        assert result.kind == "fallback"
        assert result.feasible
        assert result.direct == ()
        assert result.total_guests == 6
        assert result.requested_rooms == 3
        assert result.total_available_capacity == 8
        assert {o.room_type_id: o.available_rooms for o in result.options} == {
            "standard": 2,
            "family": 1,
        }

    def test_hidden_room_types_are_never_offered(self, mixed_hotel):
        staff_sized = [Occupancy(adults=6)]
        result = match_capacity(mixed_hotel, staff_sized, D(2024, 7, 1), D(2024, 7, 3))

        assert result.kind == "fallback"
        assert "staff" not in {o.room_type_id for o in result.options}


class TestDirect:
    def test_single_type_covering_every_room(self):
        result = match_capacity(small_hotel(), couples(2), CHECK_IN, CHECK_OUT)

        assert result.kind == "direct"
        assert [c.room_type_id for c in result.direct] == ["standard"]
        assert result.direct[0].total == Decimal("240.00")

    def test_smallest_fitting_type_comes_first(self):
        result = match_capacity(small_hotel(), couples(1), CHECK_IN, CHECK_OUT)
        assert [c.room_type_id for c in result.direct] == ["standard", "family"]

    def test_room_too_small_for_largest_occupancy(self):
        request = [Occupancy(adults=2), Occupancy(adults=2, children=1)]
        result = match_capacity(small_hotel(), request, CHECK_IN, CHECK_OUT)
        # family fits three guests but only one family room is free
        assert result.kind == "fallback"

    def test_cheaper_type_wins_at_same_occupancy(self):
        twin = RoomType(id="twin", name="Twin", max_occupancy=2)
        snapshot = small_hotel(
            extra_types=[twin],
            extra_assignments=[RoomRatePlan("bar", "twin", Decimal("60"), is_primary=True)],
        )
        snapshot = make_snapshot(
            room_types=snapshot.room_types,
            rooms=snapshot.rooms + (Room(id="t1", room_type_id="twin"),),
            rate_plans=snapshot.rate_plans,
            assignments=snapshot.assignments,
            reservations=snapshot.reservations,
        )
        result = match_capacity(snapshot, couples(1), CHECK_IN, CHECK_OUT)
        assert [c.room_type_id for c in result.direct] == ["twin", "standard", "family"]

    def test_unpriced_type_sorts_after_priced(self):
        loft = RoomType(id="loft", name="Loft", max_occupancy=2)
        base = small_hotel(extra_types=[loft])
        snapshot = make_snapshot(
            room_types=base.room_types,
            rooms=base.rooms + (Room(id="l1", room_type_id="loft"),),
            rate_plans=base.rate_plans,
            assignments=base.assignments,
            reservations=base.reservations,
        )
        result = match_capacity(snapshot, couples(1), CHECK_IN, CHECK_OUT)

        assert [c.room_type_id for c in result.direct] == ["standard", "loft", "family"]
        assert result.direct[1].pricing is None

    def test_explicit_rate_plan(self):
        snapshot = small_hotel(
            extra_assignments=[RoomRatePlan("promo", "standard", Decimal("70"))],
        )
        snapshot = make_snapshot(
            room_types=snapshot.room_types,
            rooms=snapshot.rooms,
            rate_plans=snapshot.rate_plans + (RatePlan(id="promo", name="Promo"),),
            assignments=snapshot.assignments,
            reservations=snapshot.reservations,
        )
        result = match_capacity(snapshot, couples(1), CHECK_IN, CHECK_OUT, rate_plan_id="promo")

        standard, family = result.direct
        assert standard.pricing.rate_plan_id == "promo"
        assert standard.total == Decimal("210.00")
        # family has no promo rate and the plan no default price
        assert family.pricing is None

    def test_restricted_type_is_blocked_not_direct(self):
        cta = SeasonOverride(
            id="cta",
            rate_plan_id="bar",
            room_type_id="standard",
            start_date=CHECK_IN,
            end_date=CHECK_IN,
            closed_to_arrival=True,
            created_at=datetime(2024, 5, 1),
        )
        result = match_capacity(small_hotel([cta]), couples(1), CHECK_IN, CHECK_OUT)

        assert [c.room_type_id for c in result.direct] == ["family"]
        assert [c.room_type_id for c in result.blocked] == ["standard"]
        assert not result.blocked[0].pricing.is_bookable


class TestInfeasible:
    def test_reports_shortfall(self):
        families = [Occupancy(adults=2, children=2) for _ in range(3)]
        result = match_capacity(small_hotel(), families, CHECK_IN, CHECK_OUT)

        assert result.kind == "infeasible"
        assert not result.feasible
        assert result.total_guests == 12
        assert result.total_available_capacity == 8
        assert result.shortfall == 4

    def test_exact_capacity_is_not_infeasible(self):
        request = [Occupancy(adults=2), Occupancy(adults=3), Occupancy(adults=3)]
        result = match_capacity(small_hotel(), request, CHECK_IN, CHECK_OUT)
        assert result.kind == "fallback"
        assert result.shortfall == 0


class TestEdgeCases:
    def test_empty_request_is_one_zero_guest_room(self):
        result = match_capacity(small_hotel(), [], CHECK_IN, CHECK_OUT)

        assert result.kind == "direct"
        assert result.requested_rooms == 1
        assert result.total_guests == 0

    def test_negative_guests_rejected(self):
        with pytest.raises(ValueError):
            match_capacity(small_hotel(), [Occupancy(adults=-1)], CHECK_IN, CHECK_OUT)

    def test_invalid_range(self):
        with pytest.raises(InvalidRange):
            match_capacity(small_hotel(), couples(1), CHECK_OUT, CHECK_IN)

    @pytest.mark.parametrize("occupancies", [[Occupancy(adults=2)], [Occupancy(adults=6)]])
    def test_unknown_rate_plan(self, occupancies):
        # raised even when no room type would have been priced
        with pytest.raises(UnknownRatePlan):
            match_capacity(small_hotel(), occupancies, CHECK_IN, CHECK_OUT, rate_plan_id="promo")

"""Shared fixtures for stayengine tests."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from stayengine.models import (
    RatePlan,
    Reservation,
    ReservationStatus,
    Room,
    RoomRatePlan,
    RoomStatus,
    RoomType,
    SeasonOverride,
)
from stayengine.snapshot import InventorySnapshot


def make_snapshot(
    room_types=None,
    rooms=None,
    rate_plans=None,
    assignments=None,
    season_overrides=None,
    reservations=None,
) -> InventorySnapshot:
    return InventorySnapshot(
        room_types=room_types or [],
        rooms=rooms or [],
        rate_plans=rate_plans or [],
        assignments=assignments or [],
        season_overrides=season_overrides or [],
        reservations=reservations or [],
    )


def booking(res_id, room_id, check_in, check_out, status=ReservationStatus.CONFIRMED):
    return Reservation(
        id=res_id,
        room_id=room_id,
        check_in=date.fromisoformat(check_in),
        check_out=date.fromisoformat(check_out),
        status=status,
    )


@pytest.fixture
def deluxe():
    return RoomType(id="deluxe", name="Deluxe", max_occupancy=2, base_price=Decimal("100"))


@pytest.fixture
def bar_plan():
    return RatePlan(id="bar", name="Best Available Rate", price=Decimal("120"))


@pytest.fixture
def xmas_override():
    return SeasonOverride(
        id="xmas",
        rate_plan_id="bar",
        room_type_id="deluxe",
        start_date=date(2024, 12, 24),
        end_date=date(2024, 12, 26),
        price_override=Decimal("150"),
        closed_to_arrival=True,
        created_at=datetime(2024, 10, 1, 9, 0),
    )


@pytest.fixture
def hotel(deluxe, bar_plan, xmas_override):
    """Deluxe rooms under a BAR plan with a Christmas override."""
    return make_snapshot(
        room_types=[deluxe],
        rooms=[
            Room(id="101", room_type_id="deluxe"),
            Room(id="102", room_type_id="deluxe"),
            Room(id="103", room_type_id="deluxe"),
        ],
        rate_plans=[bar_plan],
        assignments=[
            RoomRatePlan(
                rate_plan_id="bar",
                room_type_id="deluxe",
                base_price=Decimal("100"),
                is_primary=True,
            )
        ],
        season_overrides=[xmas_override],
    )


@pytest.fixture
def mixed_hotel():
    """Standard rooms (2 guests) and family rooms (4 guests) with some bookings."""
    return make_snapshot(
        room_types=[
            RoomType(id="standard", name="Standard", max_occupancy=2, base_price=Decimal("80")),
            RoomType(id="family", name="Family", max_occupancy=4, base_price=Decimal("140")),
            RoomType(
                id="staff", name="Staff", max_occupancy=6, base_price=Decimal("0"), visible=False
            ),
        ],
        rooms=[
            Room(id="s1", room_type_id="standard"),
            Room(id="s2", room_type_id="standard"),
            Room(id="s3", room_type_id="standard"),
            Room(id="s4", room_type_id="standard", status=RoomStatus.MAINTENANCE),
            Room(id="f1", room_type_id="family"),
            Room(id="f2", room_type_id="family"),
            Room(id="x1", room_type_id="staff"),
        ],
        rate_plans=[RatePlan(id="bar", name="Best Available Rate")],
        assignments=[
            RoomRatePlan("bar", "standard", Decimal("80.00"), is_primary=True),
            RoomRatePlan("bar", "family", Decimal("140.00"), is_primary=True),
        ],
        reservations=[
            booking("r1", "s1", "2024-07-01", "2024-07-05"),
            booking("r2", "f1", "2024-07-03", "2024-07-06"),
        ],
    )

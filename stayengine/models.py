"""Data models for stayengine."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Literal


class ReservationStatus(str, Enum):
    """Lifecycle states a reservation row can carry."""

    TENTATIVE = "Tentative"
    STANDBY = "Standby"
    CONFIRMED = "Confirmed"
    CHECKED_IN = "Checked-in"
    CHECKED_OUT = "Checked-out"
    CANCELLED = "Cancelled"
    NO_SHOW = "No-show"

    @property
    def holds_room(self) -> bool:
        return self not in RELEASED_STATUSES


RELEASED_STATUSES = frozenset({ReservationStatus.CANCELLED, ReservationStatus.NO_SHOW})


class RoomStatus(str, Enum):
    """Housekeeping state of a physical room."""

    CLEAN = "Clean"
    DIRTY = "Dirty"
    INSPECTED = "Inspected"
    MAINTENANCE = "Maintenance"


@dataclass(frozen=True)
class RoomType:
    """A sellable category of rooms."""

    id: str
    name: str
    max_occupancy: int
    base_price: Decimal | None = None
    visible: bool = True


@dataclass(frozen=True)
class Room:
    """A physical room belonging to one room type."""

    id: str
    room_type_id: str
    room_number: str = ""
    status: RoomStatus = RoomStatus.CLEAN

    @property
    def sellable(self) -> bool:
        return self.status != RoomStatus.MAINTENANCE


@dataclass(frozen=True)
class RatePlan:
    """A named pricing plan with an optional default nightly price."""

    id: str
    name: str
    price: Decimal | None = None


@dataclass(frozen=True)
class RoomRatePlan:
    """Links a room type to a rate plan with a pairing-specific base price."""

    rate_plan_id: str
    room_type_id: str
    base_price: Decimal
    is_primary: bool = False


@dataclass(frozen=True)
class SeasonOverride:
    """
    A date-bounded rule set for one (rate plan, room type) pair.

    ``start_date`` and ``end_date`` are inclusive. Optional fields use None for
    "not set"; a zero price override is a real zero price.
    """

    id: str
    rate_plan_id: str
    room_type_id: str
    start_date: date
    end_date: date
    price_override: Decimal | None = None
    min_stay: int | None = None
    max_stay: int | None = None
    closed_to_arrival: bool = False
    closed_to_departure: bool = False
    closed_dates: frozenset[date] = field(default_factory=frozenset)
    created_at: datetime | None = None

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class Reservation:
    """A reservation row as consumed by the engine."""

    id: str
    room_id: str
    check_in: date
    check_out: date
    status: ReservationStatus = ReservationStatus.CONFIRMED

    @property
    def holds_room(self) -> bool:
        return self.status.holds_room


@dataclass(frozen=True)
class Occupancy:
    """Guests requested for a single room."""

    adults: int = 1
    children: int = 0

    @property
    def guests(self) -> int:
        return self.adults + self.children


@dataclass(frozen=True)
class NightBreakdown:
    """Price and restrictions for a single night of a stay."""

    day: date
    nightly_rate: Decimal
    closed: bool = False
    cta: bool = False
    ctd: bool = False
    min_stay: int | None = None
    max_stay: int | None = None
    override_id: str | None = None  # override that set the price, if any


@dataclass(frozen=True)
class StayQuote:
    """Totals for a priced stay including the flat tax multiplier."""

    subtotal: Decimal
    taxes: Decimal
    grand_total: Decimal
    tax_rate: Decimal


@dataclass(frozen=True)
class PricingResult:
    """Result of pricing a stay."""

    room_type_id: str
    rate_plan_id: str
    check_in: date
    check_out: date
    items: tuple[NightBreakdown, ...]
    total: Decimal
    violations: tuple[str, ...] = ()
    currency: str = "USD"

    @property
    def nights(self) -> int:
        return len(self.items)

    @property
    def is_bookable(self) -> bool:
        return not self.violations


@dataclass(frozen=True)
class AvailabilitySummary:
    """Free rooms of one room type over a date range."""

    room_type_id: str
    available_rooms: int
    total_rooms: int = 0
    max_occupancy: int = 0

    @property
    def capacity(self) -> int:
        return self.available_rooms * self.max_occupancy


MatchKind = Literal["direct", "fallback", "infeasible"]


@dataclass(frozen=True)
class DirectCandidate:
    """A single room type that covers the whole request."""

    room_type_id: str
    available_rooms: int
    max_occupancy: int
    pricing: PricingResult | None = None  # None when no rate plan applies

    @property
    def total(self) -> Decimal | None:
        # per-room total; multiply by requested rooms for the booking total
        return self.pricing.total if self.pricing is not None else None


@dataclass(frozen=True)
class MatchResult:
    """Outcome of matching a requested occupancy against inventory."""

    kind: MatchKind
    total_guests: int
    requested_rooms: int
    direct: tuple[DirectCandidate, ...] = ()
    options: tuple[AvailabilitySummary, ...] = ()
    total_available_capacity: int = 0
    shortfall: int = 0
    blocked: tuple[DirectCandidate, ...] = ()  # direct fits rejected by restrictions

    @property
    def feasible(self) -> bool:
        return self.kind != "infeasible"

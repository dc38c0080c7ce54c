"""Night-by-night pricing and restriction checks for a stay."""

import logging
from datetime import date
from decimal import Decimal

from stayengine.calendar import each_night, last_night, nights_between
from stayengine.errors import NoAssignment
from stayengine.models import NightBreakdown, PricingResult, StayQuote
from stayengine.seasons import SeasonRuleStore
from stayengine.settings import EngineSettings
from stayengine.snapshot import InventorySnapshot

logger = logging.getLogger(__name__)


def resolve_base_rate(snapshot: InventorySnapshot, room_type_id: str, rate_plan_id: str) -> Decimal:
    """
    Base nightly rate for a room type under a rate plan.

    The assignment's base price wins, then the rate plan's default price,
    then the room type's own base price. Raises NoAssignment when none exists.
    """
    room_type = snapshot.room_type(room_type_id)
    rate_plan = snapshot.rate_plan(rate_plan_id)

    assignment = snapshot.assignment(rate_plan_id, room_type_id)
    if assignment is not None:
        return assignment.base_price
    if rate_plan.price is not None:
        return rate_plan.price
    if room_type.base_price is not None:
        return room_type.base_price
    raise NoAssignment(room_type_id, rate_plan_id)


def price_stay(
    snapshot: InventorySnapshot,
    room_type_id: str,
    rate_plan_id: str,
    check_in: date,
    check_out: date,
    settings: EngineSettings | None = None,
) -> PricingResult:
    """
    Price a stay night by night and collect every restriction it breaks.

    Violations are returned, never raised: a stay with violations is still
    priced so callers can show why it cannot be booked. Structural problems
    (empty range, unknown ids, no base rate) raise.
    """
    settings = settings or EngineSettings()
    nights = nights_between(check_in, check_out)
    base_rate = resolve_base_rate(snapshot, room_type_id, rate_plan_id)
    store = SeasonRuleStore.for_pair(snapshot, rate_plan_id, room_type_id)
    departure_night = last_night(check_out)

    items: list[NightBreakdown] = []
    closed_violations: list[str] = []
    cta_violations: list[str] = []
    ctd_violations: list[str] = []
    min_stays: list[int] = []
    max_stays: list[int] = []

    for day in each_night(check_in, check_out):
        rules = store.rules_for(day)
        price_source = rules.price_source
        rate = price_source.price_override if price_source is not None else base_rate

        closed = rules.closed
        cta = day == check_in and rules.closed_to_arrival
        ctd = day == departure_night and rules.closed_to_departure
        min_stay = rules.min_stay
        max_stay = rules.max_stay

        if closed:
            closed_violations.append(f"closed on {day.isoformat()}")
        if cta:
            cta_violations.append(f"closed to arrival on {day.isoformat()}")
        if ctd:
            ctd_violations.append(f"closed to departure on {day.isoformat()}")
        if min_stay is not None and min_stay not in min_stays:
            min_stays.append(min_stay)
        if max_stay is not None and max_stay not in max_stays:
            max_stays.append(max_stay)

        items.append(
            NightBreakdown(
                day=day,
                nightly_rate=settings.money(rate),
                closed=closed,
                cta=cta,
                ctd=ctd,
                min_stay=min_stay,
                max_stay=max_stay,
                override_id=price_source.id if price_source is not None else None,
            )
        )

    violations = closed_violations + cta_violations + ctd_violations
    for min_stay in sorted(min_stays, reverse=True):
        if nights < min_stay:
            violations.append(
                f"minimum stay of {min_stay} nights not met (stay is {nights} nights)"
            )
    for max_stay in sorted(max_stays):
        if nights > max_stay:
            violations.append(
                f"maximum stay of {max_stay} nights exceeded (stay is {nights} nights)"
            )

    total = settings.money(sum((item.nightly_rate for item in items), Decimal("0")))
    logger.debug(
        "Priced %s/%s %s..%s: %d nights, total %s, %d violations",
        room_type_id,
        rate_plan_id,
        check_in,
        check_out,
        nights,
        total,
        len(violations),
    )

    return PricingResult(
        room_type_id=room_type_id,
        rate_plan_id=rate_plan_id,
        check_in=check_in,
        check_out=check_out,
        items=tuple(items),
        total=total,
        violations=tuple(violations),
        currency=settings.currency,
    )


def quote(
    pricing: PricingResult,
    rooms: int = 1,
    settings: EngineSettings | None = None,
) -> StayQuote:
    """Apply the flat tax multiplier to a priced stay booked ``rooms`` times."""
    settings = settings or EngineSettings()
    if rooms < 1:
        raise ValueError("rooms must be at least 1")

    subtotal = settings.money(pricing.total * rooms)
    taxes = settings.money(subtotal * settings.tax_rate)
    return StayQuote(
        subtotal=subtotal,
        taxes=taxes,
        grand_total=subtotal + taxes,
        tax_rate=settings.tax_rate,
    )

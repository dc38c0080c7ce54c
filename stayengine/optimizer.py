"""ILP-based suggestion of a room type combination for the fallback path."""

import logging
from dataclasses import dataclass
from decimal import Decimal

import numpy as np
from scipy.optimize import Bounds, LinearConstraint, milp

from stayengine.models import AvailabilitySummary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Combination:
    """A suggested quantity per room type covering every guest."""

    quantities: dict[str, int]
    total_rooms: int
    total_capacity: int
    total_price: Decimal | None = None  # None when any chosen room type is unpriced


def suggest_combination(
    options: list[AvailabilitySummary],
    total_guests: int,
    prices: dict[str, Decimal] | None = None,
) -> Combination | None:
    """
    Suggest how many rooms of each type to book using Integer Linear Programming.

    Minimizes the number of rooms first. Among equally small combinations the
    cheapest wins when ``prices`` (per room for the whole stay) are given,
    otherwise the one wasting the least capacity. Returns None when the
    available rooms cannot hold ``total_guests``.
    """
    options = [o for o in options if o.available_rooms > 0 and o.max_occupancy > 0]
    if not options:
        return None

    num_vars = len(options)
    max_rooms = sum(o.available_rooms for o in options)
    occupancies = np.array([o.max_occupancy for o in options], dtype=float)

    # Objective: one unit per room, plus a tie-break term that sums to less
    # than one over any feasible selection.
    c = np.ones(num_vars)
    if prices:
        price_values = np.array(
            [float(prices.get(o.room_type_id, Decimal("0"))) for o in options]
        )
        scale = max_rooms * max(price_values.max(), 1.0) + 1.0
        c += price_values / scale
    else:
        scale = max_rooms * occupancies.max() + 1.0
        c += occupancies / scale

    constraints = [
        # sum(q * occupancy) >= guests
        LinearConstraint(occupancies.reshape(1, -1), total_guests, np.inf),
        # at least one room, even for a zero-guest request
        LinearConstraint(np.ones((1, num_vars)), 1, np.inf),
    ]
    bounds = Bounds(
        np.zeros(num_vars),
        np.array([o.available_rooms for o in options], dtype=float),
    )
    integrality = np.ones(num_vars, dtype=np.intp)

    result = milp(c, constraints=constraints, bounds=bounds, integrality=integrality)
    if not result.success:
        logger.debug("No combination covers %d guest(s): %s", total_guests, result.message)
        return None

    assert result.x is not None  # Guaranteed by result.success check above
    quantities: dict[str, int] = {}
    for option, value in zip(options, result.x):
        qty = int(round(value))
        if qty > 0:
            quantities[option.room_type_id] = qty

    by_id = {o.room_type_id: o for o in options}
    total_capacity = sum(qty * by_id[rt].max_occupancy for rt, qty in quantities.items())

    total_price: Decimal | None = None
    if prices and all(rt in prices for rt in quantities):
        total_price = sum((prices[rt] * qty for rt, qty in quantities.items()), Decimal("0"))

    return Combination(
        quantities=quantities,
        total_rooms=sum(quantities.values()),
        total_capacity=total_capacity,
        total_price=total_price,
    )

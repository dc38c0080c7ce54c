"""Season override lookup with deterministic precedence."""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone

from stayengine.models import SeasonOverride
from stayengine.snapshot import InventorySnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NightRules:
    """The season rules in force for one night."""

    day: date
    overrides: tuple[SeasonOverride, ...]  # matching overrides, newest first

    @property
    def price_source(self) -> SeasonOverride | None:
        """Newest matching override that sets a price."""
        return next((o for o in self.overrides if o.price_override is not None), None)

    @property
    def min_stay(self) -> int | None:
        return next((o.min_stay for o in self.overrides if o.min_stay is not None), None)

    @property
    def max_stay(self) -> int | None:
        return next((o.max_stay for o in self.overrides if o.max_stay is not None), None)

    @property
    def closed(self) -> bool:
        return any(self.day in o.closed_dates for o in self.overrides)

    @property
    def closed_to_arrival(self) -> bool:
        return any(o.closed_to_arrival for o in self.overrides)

    @property
    def closed_to_departure(self) -> bool:
        return any(o.closed_to_departure for o in self.overrides)


def _precedence_key(position: int, override: SeasonOverride) -> tuple[datetime, int]:
    # Overrides without a timestamp sort as oldest; declaration order breaks ties.
    created = override.created_at or datetime.min
    if created.tzinfo is not None:
        created = created.astimezone(timezone.utc).replace(tzinfo=None)
    return (created, position)


class SeasonRuleStore:
    """
    Read-only lookup of season overrides for one (rate plan, room type) pair.

    Overlapping overrides are allowed. The most recently created one wins for
    single-valued fields (price, minimum and maximum stay); boolean and
    closed-date restrictions apply if any matching override sets them.
    """

    def __init__(self, overrides: list[SeasonOverride]):
        ranked = sorted(enumerate(overrides), key=lambda p: _precedence_key(*p), reverse=True)
        self._overrides: tuple[SeasonOverride, ...] = tuple(o for _, o in ranked)

    @classmethod
    def for_pair(
        cls, snapshot: InventorySnapshot, rate_plan_id: str, room_type_id: str
    ) -> "SeasonRuleStore":
        return cls(snapshot.overrides_for(rate_plan_id, room_type_id))

    def __len__(self) -> int:
        return len(self._overrides)

    def rules_for(self, day: date) -> NightRules:
        matching = tuple(o for o in self._overrides if o.covers(day))
        if len(matching) > 1:
            logger.debug(
                "%s: %d overlapping overrides, %s takes precedence",
                day,
                len(matching),
                matching[0].id,
            )
        return NightRules(day=day, overrides=matching)

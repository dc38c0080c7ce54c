"""Stay pricing and availability engine."""

from stayengine.allocation import RoomAllocation, allocate_guests
from stayengine.availability import ensure_room_free, free_rooms, rooms_available
from stayengine.calendar import nights_between, overlaps
from stayengine.engine import StayEngine
from stayengine.matcher import match_capacity
from stayengine.rates import price_stay
from stayengine.selection import (
    AddRoom,
    ClearSelection,
    RemoveRoom,
    Selection,
    apply_events,
    reduce_selection,
)
from stayengine.settings import EngineSettings
from stayengine.snapshot import InventorySnapshot

__all__ = [
    "AddRoom",
    "ClearSelection",
    "EngineSettings",
    "InventorySnapshot",
    "RemoveRoom",
    "RoomAllocation",
    "Selection",
    "StayEngine",
    "allocate_guests",
    "apply_events",
    "ensure_room_free",
    "free_rooms",
    "match_capacity",
    "nights_between",
    "overlaps",
    "price_stay",
    "reduce_selection",
    "rooms_available",
]

"""YAML inventory and CSV reservation parsing for stayengine."""

import csv
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

import yaml

from stayengine.calendar import as_date
from stayengine.errors import SnapshotError
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
from stayengine.settings import EngineSettings, parse_decimal
from stayengine.snapshot import InventorySnapshot

# Reservation CSV headers as exported by the operations console
RESERVATION_COLUMNS = ("id", "room_id", "check_in", "check_out", "status")


def _require(entry: dict[str, Any], key: str, kind: str) -> Any:
    if key not in entry or entry[key] in (None, ""):
        raise SnapshotError(f"{kind} entry is missing '{key}': {entry}")
    return entry[key]


def _amount(value: Any, key: str) -> Decimal:
    amount = parse_decimal(value, key)
    if amount < 0:
        raise SnapshotError(f"{key} must not be negative, got {value}")
    return amount


def _optional_amount(entry: dict[str, Any], key: str) -> Decimal | None:
    value = entry.get(key)
    if value is None or value == "":
        return None
    return _amount(value, key)


def _optional_int(entry: dict[str, Any], key: str) -> int | None:
    value = entry.get(key)
    if value is None or value == "":
        return None
    try:
        number = int(value)
    except (TypeError, ValueError) as e:
        raise SnapshotError(f"{key}: not a whole number: {value!r}") from e
    if number < 1:
        raise SnapshotError(f"{key} must be a positive number of nights, got {value}")
    return number


def _date(value: Any, key: str) -> date:
    try:
        return as_date(value if isinstance(value, date) else str(value))
    except ValueError as e:
        raise SnapshotError(f"{key}: {e}") from e


def _status(enum_cls, value: Any, key: str):
    try:
        return enum_cls(str(value).strip())
    except ValueError as e:
        allowed = ", ".join(s.value for s in enum_cls)
        raise SnapshotError(f"{key}: unknown status {value!r} (expected one of: {allowed})") from e


def parse_room_type(entry: dict[str, Any]) -> RoomType:
    room_type_id = str(_require(entry, "id", "room type"))
    try:
        max_occupancy = int(_require(entry, "max_occupancy", "room type"))
    except (TypeError, ValueError) as e:
        raise SnapshotError(f"Room type {room_type_id}: max_occupancy must be a number") from e
    if max_occupancy < 1:
        raise SnapshotError(f"Room type {room_type_id}: max_occupancy must be at least 1")
    return RoomType(
        id=room_type_id,
        name=str(entry.get("name", room_type_id)),
        max_occupancy=max_occupancy,
        base_price=_optional_amount(entry, "base_price"),
        visible=bool(entry.get("visible", True)),
    )


def parse_room(entry: dict[str, Any]) -> Room:
    return Room(
        id=str(_require(entry, "id", "room")),
        room_type_id=str(_require(entry, "room_type_id", "room")),
        room_number=str(entry.get("room_number") or entry["id"]),
        status=_status(RoomStatus, entry.get("status", "Clean"), "room status"),
    )


def parse_rate_plan(entry: dict[str, Any]) -> RatePlan:
    return RatePlan(
        id=str(_require(entry, "id", "rate plan")),
        name=str(entry.get("name", entry["id"])),
        price=_optional_amount(entry, "price"),
    )


def parse_assignment(entry: dict[str, Any]) -> RoomRatePlan:
    return RoomRatePlan(
        rate_plan_id=str(_require(entry, "rate_plan_id", "assignment")),
        room_type_id=str(_require(entry, "room_type_id", "assignment")),
        base_price=_amount(_require(entry, "base_price", "assignment"), "base_price"),
        is_primary=bool(entry.get("is_primary", False)),
    )


def parse_season_override(entry: dict[str, Any]) -> SeasonOverride:
    start = _date(_require(entry, "start_date", "season override"), "start_date")
    end = _date(_require(entry, "end_date", "season override"), "end_date")
    override_id = str(_require(entry, "id", "season override"))
    if end < start:
        raise SnapshotError(f"Season override {override_id}: end_date is before start_date")

    min_stay = _optional_int(entry, "min_stay")
    max_stay = _optional_int(entry, "max_stay")
    if min_stay is not None and max_stay is not None and min_stay > max_stay:
        raise SnapshotError(f"Season override {override_id}: min_stay is greater than max_stay")

    closed_dates = frozenset(_date(d, "closed_dates") for d in entry.get("closed_dates") or [])
    outside = sorted(d for d in closed_dates if not start <= d <= end)
    if outside:
        raise SnapshotError(
            f"Season override {override_id}: closed dates outside its range: "
            + ", ".join(d.isoformat() for d in outside)
        )

    created_at = entry.get("created_at")
    if created_at is not None and not isinstance(created_at, datetime):
        try:
            created_at = datetime.fromisoformat(str(created_at))
        except ValueError as e:
            raise SnapshotError(f"Season override {override_id}: bad created_at") from e

    return SeasonOverride(
        id=override_id,
        rate_plan_id=str(_require(entry, "rate_plan_id", "season override")),
        room_type_id=str(_require(entry, "room_type_id", "season override")),
        start_date=start,
        end_date=end,
        price_override=_optional_amount(entry, "price_override"),
        min_stay=min_stay,
        max_stay=max_stay,
        closed_to_arrival=bool(entry.get("closed_to_arrival", False)),
        closed_to_departure=bool(entry.get("closed_to_departure", False)),
        closed_dates=closed_dates,
        created_at=created_at,
    )


def parse_reservation(entry: dict[str, Any]) -> Reservation:
    reservation_id = str(_require(entry, "id", "reservation"))
    check_in = _date(_require(entry, "check_in", "reservation"), "check_in")
    check_out = _date(_require(entry, "check_out", "reservation"), "check_out")
    if check_out <= check_in:
        raise SnapshotError(f"Reservation {reservation_id}: check_out must be after check_in")
    return Reservation(
        id=reservation_id,
        room_id=str(_require(entry, "room_id", "reservation")),
        check_in=check_in,
        check_out=check_out,
        status=_status(ReservationStatus, entry.get("status") or "Confirmed", "reservation status"),
    )


def parse_reservations_csv(csv_path: Path) -> list[Reservation]:
    """
    Parse a reservations export.

    Expects the columns in RESERVATION_COLUMNS; extra columns are ignored.
    """
    reservations: list[Reservation] = []

    with csv_path.open(newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        fieldnames = reader.fieldnames or []
        missing = [c for c in RESERVATION_COLUMNS if c not in fieldnames and c != "status"]
        if missing:
            raise SnapshotError(f"{csv_path}: missing columns: {', '.join(missing)}")

        for row in reader:
            # Skip blank lines left by spreadsheet exports
            if not any((row.get(c) or "").strip() for c in RESERVATION_COLUMNS):
                continue
            reservations.append(
                parse_reservation({k: (v or "").strip() for k, v in row.items() if k})
            )

    return reservations


def parse_inventory_yaml(
    yaml_path: Path,
    extra_reservations: list[Reservation] | None = None,
) -> tuple[InventorySnapshot, EngineSettings]:
    """Parse the inventory YAML file into a snapshot and engine settings."""
    with yaml_path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not data:
        raise SnapshotError(f"{yaml_path}: inventory file is empty")
    if not isinstance(data, dict):
        raise SnapshotError(f"{yaml_path}: expected a mapping at the top level")

    reservations = [parse_reservation(e) for e in data.get("reservations") or []]
    reservations.extend(extra_reservations or [])

    snapshot = InventorySnapshot(
        room_types=[parse_room_type(e) for e in data.get("room_types") or []],
        rooms=[parse_room(e) for e in data.get("rooms") or []],
        rate_plans=[parse_rate_plan(e) for e in data.get("rate_plans") or []],
        assignments=[parse_assignment(e) for e in data.get("assignments") or []],
        season_overrides=[parse_season_override(e) for e in data.get("season_overrides") or []],
        reservations=reservations,
    )
    settings = EngineSettings.from_mapping(data.get("settings"))
    return snapshot, settings


def create_inventory_template(output_path: Path):
    """Create a starter inventory YAML file."""
    template = {
        "settings": {"currency": "USD", "tax_rate": "0.18"},
        "room_types": [
            {"id": "deluxe", "name": "Deluxe", "max_occupancy": 2, "base_price": "100.00"}
        ],
        "rooms": [{"id": "101", "room_type_id": "deluxe", "status": "Clean"}],
        "rate_plans": [{"id": "bar", "name": "Best Available Rate", "price": "120.00"}],
        "assignments": [
            {
                "rate_plan_id": "bar",
                "room_type_id": "deluxe",
                "base_price": "100.00",
                "is_primary": True,
            }
        ],
        "season_overrides": [],
        "reservations": [],
    }

    header = """\
# Inventory file for stayengine
#
# Dates are ISO calendar dates (YYYY-MM-DD). Amounts are quoted strings so
# they are read as exact decimals.
#
# Room status: Clean, Dirty, Inspected, Maintenance (never sellable)
# Reservation status: Tentative, Standby, Confirmed, Checked-in, Checked-out,
#   Cancelled, No-show (the last two do not hold a room)
#
# Example season override:
#   - id: xmas
#     rate_plan_id: bar
#     room_type_id: deluxe
#     start_date: 2024-12-24
#     end_date: 2024-12-26
#     price_override: "150.00"
#     closed_to_arrival: true
#     min_stay: 2
#     closed_dates: [2024-12-25]
#     created_at: 2024-10-01T09:00:00

"""

    with output_path.open("w", encoding="utf-8") as f:
        f.write(header)
        yaml.dump(template, f, default_flow_style=False, sort_keys=False)

import pytest

from stayengine.cli import EXIT_ERROR, EXIT_NOT_BOOKABLE, EXIT_OK, main

INVENTORY = """\
room_types:
  - id: deluxe
    name: Deluxe
    max_occupancy: 2
  - id: family
    name: Family
    max_occupancy: 4
rooms:
  - {id: "101", room_type_id: deluxe}
  - {id: "102", room_type_id: deluxe}
  - {id: "201", room_type_id: family}
rate_plans:
  - {id: bar, name: Best Available Rate}
assignments:
  - {rate_plan_id: bar, room_type_id: deluxe, base_price: "100.00", is_primary: true}
  - {rate_plan_id: bar, room_type_id: family, base_price: "180.00", is_primary: true}
season_overrides:
  - id: xmas
    rate_plan_id: bar
    room_type_id: deluxe
    start_date: 2024-12-24
    end_date: 2024-12-26
    price_override: "150.00"
    closed_to_arrival: true
reservations:
  - {id: r1, room_id: "101", check_in: 2024-12-20, check_out: 2024-12-26}
"""


@pytest.fixture
def inventory(tmp_path):
    path = tmp_path / "inventory.yaml"
    path.write_text(INVENTORY)
    return str(path)


class TestPrice:
    def test_restricted_stay_is_not_bookable(self, inventory, capsys):
        code = main(
            ["--inventory", inventory, "price", "deluxe", "bar", "2024-12-24", "2024-12-28"]
        )
        out = capsys.readouterr().out

        assert code == EXIT_NOT_BOOKABLE
        assert "Total: 550.00 USD" in out
        assert "closed to arrival on 2024-12-24" in out
        assert "[CTA]" in out

    def test_bookable_stay_with_tax(self, inventory, capsys):
        code = main(
            [
                "--inventory",
                inventory,
                "--tax-rate",
                "0.10",
                "price",
                "deluxe",
                "bar",
                "2024-12-27",
                "2024-12-29",
                "--rooms",
                "2",
            ]
        )
        out = capsys.readouterr().out

        assert code == EXIT_OK
        assert "Total: 200.00 USD" in out
        assert "Taxes (10%): 40.00 USD" in out
        assert "Grand total: 440.00 USD" in out

    def test_arrival_on_closed_to_arrival_day(self, inventory, capsys):
        code = main(
            ["--inventory", inventory, "price", "deluxe", "bar", "2024-12-25", "2024-12-27"]
        )
        assert code == EXIT_NOT_BOOKABLE
        assert "closed to arrival on 2024-12-25" in capsys.readouterr().out

    def test_unknown_room_type(self, inventory, capsys):
        code = main(
            ["--inventory", inventory, "price", "suite", "bar", "2024-12-25", "2024-12-27"]
        )
        assert code == EXIT_ERROR
        assert "Unknown room type: suite" in capsys.readouterr().err

    def test_reversed_dates(self, inventory, capsys):
        code = main(
            ["--inventory", inventory, "price", "deluxe", "bar", "2024-12-27", "2024-12-25"]
        )
        assert code == EXIT_ERROR
        assert "Invalid date range" in capsys.readouterr().err


class TestAvailability:
    def test_table(self, inventory, capsys):
        code = main(["--inventory", inventory, "availability", "2024-12-24", "2024-12-28"])
        out = capsys.readouterr().out

        assert code == EXIT_OK
        deluxe_row = next(line for line in out.splitlines() if line.startswith("deluxe"))
        assert deluxe_row.split(" | ")[1].strip() == "1"

    def test_reservations_csv_is_merged(self, inventory, tmp_path, capsys):
        export = tmp_path / "export.csv"
        export.write_text(
            "id,room_id,check_in,check_out,status\n"
            "r2,102,2024-12-23,2024-12-25,Confirmed\n"
        )

        main(
            [
                "--inventory",
                inventory,
                "--reservations",
                str(export),
                "availability",
                "2024-12-24",
                "2024-12-28",
                "--room-type",
                "deluxe",
            ]
        )
        out = capsys.readouterr().out
        deluxe_row = next(line for line in out.splitlines() if line.startswith("deluxe"))
        assert deluxe_row.split(" | ")[1].strip() == "0"


class TestMatch:
    def test_fallback_with_suggestion(self, inventory, capsys):
        code = main(
            [
                "--inventory",
                inventory,
                "match",
                "2024-12-27",
                "2024-12-29",
                "--room",
                "2",
                "--room",
                "2+1",
                "--suggest",
            ]
        )
        out = capsys.readouterr().out

        assert code == EXIT_OK
        assert "combine room types" in out
        assert "=== Suggested combination ===" in out
        assert "1 x deluxe" in out
        assert "1 x family" in out
        assert "=== Guests per room ===" in out
        assert "201 (family): 2 adult(s) + 1 child(ren)" in out
        assert "101 (deluxe): 2 adult(s)" in out

    def test_infeasible(self, inventory, capsys):
        code = main(
            [
                "--inventory",
                inventory,
                "match",
                "2024-12-27",
                "2024-12-29",
                "--room",
                "4+4",
                "--room",
                "1",
            ]
        )
        out = capsys.readouterr().out

        assert code == EXIT_NOT_BOOKABLE
        assert "Not enough rooms" in out
        assert "Short by 1 guest(s)" in out

    def test_bad_occupancy(self, inventory, capsys):
        with pytest.raises(SystemExit):
            main(["--inventory", inventory, "match", "2024-12-27", "2024-12-29", "--room", "two"])
        assert "ADULTS+CHILDREN" in capsys.readouterr().err


def test_calendar(inventory, capsys):
    code = main(["--inventory", inventory, "calendar", "deluxe", "2024-12-24", "2024-12-27"])
    out = capsys.readouterr().out

    assert code == EXIT_OK
    assert "2024-12-24 Tue  1/2" in out
    assert "2024-12-26 Thu  0/2" in out
    assert "0 fully booked night(s)" in out


def test_init_writes_template(tmp_path, capsys):
    path = tmp_path / "new.yaml"
    assert main(["--init", str(path)]) == EXIT_OK
    assert path.exists()


def test_missing_inventory(tmp_path, capsys):
    missing = str(tmp_path / "nope.yaml")
    code = main(["--inventory", missing, "availability", "2024-12-24", "2024-12-28"])
    assert code == EXIT_ERROR
    assert "Inventory file not found" in capsys.readouterr().err


def test_non_finite_price_is_rejected(tmp_path, capsys):
    path = tmp_path / "inventory.yaml"
    path.write_text(INVENTORY.replace('price_override: "150.00"', "price_override: Infinity"))
    code = main(["--inventory", str(path), "availability", "2024-12-24", "2024-12-28"])

    assert code == EXIT_ERROR
    assert "price_override: not a finite amount" in capsys.readouterr().err


def test_negative_tax_rate_is_rejected(inventory, capsys):
    with pytest.raises(SystemExit):
        main(
            [
                "--inventory",
                inventory,
                "--tax-rate",
                "-0.1",
                "price",
                "deluxe",
                "bar",
                "2024-12-27",
                "2024-12-29",
            ]
        )
    assert "tax rate must not be negative" in capsys.readouterr().err

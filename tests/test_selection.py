import pytest

from stayengine.errors import InvalidSelection
from stayengine.models import AvailabilitySummary, MatchResult
from stayengine.selection import (
    AddRoom,
    ClearSelection,
    RemoveRoom,
    Selection,
    apply_events,
    reduce_selection,
)


@pytest.fixture
def selection():
    """Six guests with two standard rooms (2 guests) and one family room (4 guests) free."""
    return Selection.from_options(
        6,
        [
            AvailabilitySummary("standard", available_rooms=2, total_rooms=3, max_occupancy=2),
            AvailabilitySummary("family", available_rooms=1, total_rooms=2, max_occupancy=4),
        ],
    )


class TestAdd:
    def test_add_until_every_guest_is_covered(self, selection):
        selection = apply_events(
            selection, [AddRoom("family"), AddRoom("standard")]
        )
        assert selection.quantity("family") == 1
        assert selection.quantity("standard") == 1
        assert selection.total_selected_capacity == 6
        assert selection.remaining_guests == 0
        assert selection.is_complete

    def test_add_refused_once_guests_are_covered(self, selection):
        covered = apply_events(selection, [AddRoom("family"), AddRoom("standard")])
        after = reduce_selection(covered, AddRoom("standard"))

        assert after.quantities == covered.quantities
        assert after.rejection == "selected rooms already cover all guests"
        assert not covered.can_add("standard")

    def test_add_refused_beyond_availability(self, selection):
        one_family = reduce_selection(selection, AddRoom("family"))
        again = reduce_selection(one_family, AddRoom("family"))

        assert again.quantity("family") == 1
        assert again.rejection == "no more family rooms available"

    def test_rejection_clears_on_next_accepted_event(self, selection):
        refused = apply_events(selection, [AddRoom("family"), AddRoom("family")])
        accepted = reduce_selection(refused, AddRoom("standard"))
        assert accepted.rejection is None

    def test_unknown_room_type(self, selection):
        with pytest.raises(InvalidSelection):
            reduce_selection(selection, AddRoom("penthouse"))

    def test_reducer_does_not_mutate_input(self, selection):
        reduce_selection(selection, AddRoom("standard"))
        assert selection.total_selected_rooms == 0


class TestRemoveAndClear:
    def test_remove_decrements(self, selection):
        selection = apply_events(
            selection, [AddRoom("standard"), AddRoom("standard"), RemoveRoom("standard")]
        )
        assert selection.quantity("standard") == 1
        assert selection.remaining_guests == 4

    def test_remove_at_zero_is_refused(self, selection):
        after = reduce_selection(selection, RemoveRoom("standard"))
        assert after.quantity("standard") == 0
        assert after.rejection == "no standard rooms selected"

    def test_clear(self, selection):
        selection = apply_events(
            selection, [AddRoom("standard"), AddRoom("family"), ClearSelection()]
        )
        assert selection.total_selected_rooms == 0
        assert not selection.is_complete


def test_zero_guest_selection_needs_one_room():
    selection = Selection.from_match(
        MatchResult(
            kind="direct",
            total_guests=0,
            requested_rooms=1,
            options=(AvailabilitySummary("standard", 2, 2, 2),),
        )
    )
    assert not selection.is_complete
    assert selection.can_add("standard")

    selection = reduce_selection(selection, AddRoom("standard"))
    assert selection.is_complete
    assert not selection.can_add("standard")

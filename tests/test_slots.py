"""Tests for merging and removing slot sets."""

import pytest

from app.core.errors import InvalidTimeFormat
from app.services.slots import contains_slot, merge_slots, remove_slots

SETS = [
    ([], []),
    (["9:00 AM"], ["09:00"]),
    (["9:00 AM", "2:00 PM"], ["09:00", "14:00", "11:00"]),
    (["14:30", "08:00", "8:00 AM"], ["12:00 PM", "00:15"]),
    (["11:00 PM"], ["1:00 AM", "13:00"]),
]


class TestMergeSlots:

    def test_mixed_notations_collapse_and_sort(self):
        existing = ["9:00 AM", "2:00 PM"]
        incoming = ["09:00", "14:00", "11:00"]
        assert merge_slots(existing, incoming) == ["9:00 AM", "11:00 AM", "2:00 PM"]

    @pytest.mark.parametrize("a,b", SETS)
    def test_idempotent(self, a, b):
        once = merge_slots(a, b)
        assert merge_slots(once, b) == once

    @pytest.mark.parametrize("a,b", SETS)
    def test_commutative(self, a, b):
        assert merge_slots(a, b) == merge_slots(b, a)

    def test_merge_into_empty_sorts_and_dedupes(self):
        assert merge_slots([], ["3:00 PM", "10:00", "15:00", "10:00 AM"]) == ["10:00 AM", "3:00 PM"]

    def test_input_order_does_not_matter(self):
        assert merge_slots(["1:00 PM", "9:00 AM"], []) == merge_slots(["9:00 AM", "1:00 PM"], [])

    def test_midnight_and_noon_order(self):
        assert merge_slots(["12:00 PM"], ["00:00", "23:30"]) == ["12:00 AM", "12:00 PM", "11:30 PM"]

    def test_rejects_malformed_entries(self):
        with pytest.raises(InvalidTimeFormat):
            merge_slots(["9:00 AM"], ["whenever"])


class TestRemoveSlots:

    def test_removes_in_any_notation(self):
        assert remove_slots(["9:00 AM", "11:00 AM", "2:00 PM"], ["14:00"]) == ["9:00 AM", "11:00 AM"]

    def test_missing_slot_is_a_no_op(self):
        assert remove_slots(["9:00 AM"], ["10:00"]) == ["9:00 AM"]


class TestContainsSlot:

    def test_matches_after_normalizing(self):
        assert contains_slot(["9:00 AM", "2:00 PM"], "14:00")
        assert contains_slot(["09:00"], "9:00 AM")
        assert not contains_slot(["9:00 AM"], "9:30 AM")

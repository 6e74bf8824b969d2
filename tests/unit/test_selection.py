"""Tests for number selection and auto-pick."""

import random

import pytest

from queno.constants import MAX_SELECTION, NUMBER_COUNT
from queno.selection import Selection, generate_random_numbers


class TestToggle:
    def test_adds_number(self):
        s = Selection()
        assert s.toggle(5) is True
        assert s.numbers == (5,)

    def test_toggle_selected_number_removes_it(self):
        s = Selection([5, 9])
        s.toggle(5)
        assert s.numbers == (9,)

    def test_never_exceeds_max(self):
        s = Selection()
        for n in range(1, NUMBER_COUNT + 1):
            s.toggle(n)
            assert len(s) <= MAX_SELECTION
        assert s.numbers == (1, 2, 3, 4)

    def test_full_selection_rejects_new_number(self):
        s = Selection([1, 2, 3, 4])
        assert s.toggle(10) is False
        assert 10 not in s

    def test_full_selection_still_allows_removal(self):
        s = Selection([1, 2, 3, 4])
        assert s.toggle(3) is True
        assert s.numbers == (1, 2, 4)

    def test_keeps_insertion_order(self):
        s = Selection()
        for n in (19, 3, 32, 7):
            s.toggle(n)
        assert s.numbers == (19, 3, 32, 7)

    @pytest.mark.parametrize("n", [0, 33, -1])
    def test_out_of_range_rejected(self, n):
        with pytest.raises(ValueError):
            Selection().toggle(n)


class TestReplace:
    def test_equality_ignores_order(self):
        assert Selection([3, 7, 19, 32]) == Selection([32, 19, 7, 3])

    def test_duplicates_collapsed(self):
        assert Selection([3, 3, 7]).numbers == (3, 7)

    def test_too_many_numbers(self):
        with pytest.raises(ValueError):
            Selection([1, 2, 3, 4, 5])


class TestAutoPick:
    def test_generate_random_numbers_distinct_and_in_range(self):
        rng = random.Random(1)
        for _ in range(200):
            nums = generate_random_numbers(MAX_SELECTION, NUMBER_COUNT, rng)
            assert len(nums) == MAX_SELECTION
            assert len(set(nums)) == MAX_SELECTION
            assert all(1 <= n <= NUMBER_COUNT for n in nums)

    def test_auto_pick_replaces_selection(self):
        s = Selection([1])
        picked = s.auto_pick(random.Random(3))
        assert len(picked) == MAX_SELECTION
        assert s.numbers == picked

"""Tests for tick array traversal."""

import pytest

from clmm_quote.errors import TickArrayOutOfRange, TickArraySequenceInvalid
from clmm_quote.models.state import TickArrayAccount
from clmm_quote.tick_array.sequence import TickArrayIndex, TickArraySequence
from tests.helpers import make_tick_array


def make_sequence(
    starts: list[int], a_to_b: bool, ticks: dict[int, int] | None = None
) -> TickArraySequence:
    """Loaded tick arrays at starts, named ta0, ta1, ... in order."""
    accounts = [
        TickArrayAccount(f"ta{i}", start, make_tick_array(start, ticks=ticks))
        for i, start in enumerate(starts)
    ]
    return TickArraySequence(accounts, 64, a_to_b)


class TestTickArrayIndex:
    """Tests for TickArrayIndex."""

    def test_negative_tick(self) -> None:
        """Tick -1 falls in the last slot of array -1, which is tick -64."""
        index = TickArrayIndex.from_tick_index(-1, 64)
        assert (index.array_index, index.offset_index) == (-1, 87)
        assert index.to_tick_index() == -64

    def test_next_and_prev_cross_arrays(self) -> None:
        """Stepping past an array edge moves to the neighbor array."""
        last = TickArrayIndex(-1, 87, 64)
        first = TickArrayIndex(0, 0, 64)
        assert last.next() == first
        assert first.prev() == last


class TestTickArraySequence:
    """Tests for TickArraySequence."""

    def test_first_array_required(self) -> None:
        """An uninitialized first array is rejected."""
        with pytest.raises(TickArraySequenceInvalid):
            TickArraySequence([TickArrayAccount("ta0", 0)], 64, True)

    def test_truncated_at_gap(self) -> None:
        """Arrays after an uninitialized one are ignored."""
        accounts = [
            TickArrayAccount("ta0", 0, make_tick_array(0)),
            TickArrayAccount("ta1", -5632),
            TickArrayAccount("ta2", -11264, make_tick_array(-11264)),
        ]
        assert len(TickArraySequence(accounts, 64, True)) == 1

    def test_valid_tick_array0(self) -> None:
        """Array 0 must contain the search start."""
        a_to_b = make_sequence([0], True)
        assert a_to_b.is_valid_tick_array0(0)
        assert not a_to_b.is_valid_tick_array0(-1)
        # b->a searches one spacing up
        assert make_sequence([0], False).is_valid_tick_array0(-64)

    def test_a_to_b_finds_lower_tick(self) -> None:
        """a->b finds the next initialized tick below, touching arrays on the way."""
        sequence = make_sequence([0, -5632, -11264], True, ticks={-64: 100})

        tick_index, tick = sequence.find_next_initialized_tick_index(0)

        assert tick_index == -64
        assert tick is not None and tick.liquidity_net == 100
        assert sequence.num_touched_arrays() == 2
        assert sequence.get_touched_arrays(3) == ["ta0", "ta1", "ta1"]

    def test_a_to_b_includes_current_tick(self) -> None:
        """a->b search starts at the current tick itself."""
        sequence = make_sequence([0, -5632, -11264], True, ticks={0: 1})
        assert sequence.find_next_initialized_tick_index(0)[0] == 0

    def test_b_to_a_skips_current_tick(self) -> None:
        """b->a search starts one spacing above the current tick."""
        sequence = make_sequence([0, 5632, 11264], False, ticks={0: 1, 128: 1})
        assert sequence.find_next_initialized_tick_index(0)[0] == 128

    def test_exhausted_returns_boundary(self) -> None:
        """Without initialized ticks the search ends at the last array's edge."""
        down = make_sequence([0, -5632, -11264], True)
        up = make_sequence([0, 5632, 11264], False)

        assert down.find_next_initialized_tick_index(0) == (-11264, None)
        assert up.find_next_initialized_tick_index(0) == (16895, None)
        assert down.num_touched_arrays() == 3

    def test_search_start_out_of_range(self) -> None:
        """Starting a search past the loaded arrays fails."""
        sequence = make_sequence([0, -5632, -11264], True)
        with pytest.raises(TickArrayOutOfRange):
            sequence.find_next_initialized_tick_index(-11265)

    def test_get_tick_out_of_range(self) -> None:
        """Ticks outside the loaded arrays are rejected."""
        sequence = make_sequence([0], True)
        with pytest.raises(TickArrayOutOfRange):
            sequence.get_tick(5632)

    def test_non_consecutive_arrays(self) -> None:
        """A skipped array is detected when its slot is read."""
        sequence = make_sequence([0, -11264], True)
        with pytest.raises(TickArraySequenceInvalid):
            sequence.get_tick(-64)

    def test_nothing_touched(self) -> None:
        """No touched arrays means no addresses."""
        assert make_sequence([0], True).get_touched_arrays(3) == []

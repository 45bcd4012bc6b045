"""Traversal over the tick arrays loaded for a swap."""

from __future__ import annotations

from dataclasses import dataclass

from clmm_quote.constants import MAX_TICK_INDEX, MIN_TICK_INDEX, TICK_ARRAY_SIZE
from clmm_quote.errors import TickArrayOutOfRange, TickArraySequenceInvalid
from clmm_quote.models.state import Tick, TickArrayAccount


@dataclass(frozen=True)
class TickArrayIndex:
    """Position of a tick as (array index, offset within the array).

    array_index counts whole arrays from tick 0, so array 0 starts at tick 0
    and array -1 ends at tick -tick_spacing.
    """

    array_index: int
    offset_index: int
    tick_spacing: int

    @classmethod
    def from_tick_index(cls, tick_index: int, tick_spacing: int) -> TickArrayIndex:
        ticks_in_array = tick_spacing * TICK_ARRAY_SIZE
        array_index = tick_index // ticks_in_array
        offset_index = (tick_index - array_index * ticks_in_array) // tick_spacing
        return cls(array_index, offset_index, tick_spacing)

    def to_tick_index(self) -> int:
        return (
            self.array_index * self.tick_spacing * TICK_ARRAY_SIZE
            + self.offset_index * self.tick_spacing
        )

    def next(self) -> TickArrayIndex:
        """Index of the next initializable tick above this one."""
        if self.offset_index + 1 < TICK_ARRAY_SIZE:
            return TickArrayIndex(self.array_index, self.offset_index + 1, self.tick_spacing)
        return TickArrayIndex(self.array_index + 1, 0, self.tick_spacing)

    def prev(self) -> TickArrayIndex:
        """Index of the previous initializable tick below this one."""
        if self.offset_index - 1 >= 0:
            return TickArrayIndex(self.array_index, self.offset_index - 1, self.tick_spacing)
        return TickArrayIndex(self.array_index - 1, TICK_ARRAY_SIZE - 1, self.tick_spacing)


class TickArraySequence:
    """Consecutive tick arrays in swap direction, starting with the current one.

    Arrays after the first uninitialized one are ignored: the swap cannot
    cross a gap. Every array a lookup lands in is marked as touched so the
    quote can report exactly which arrays the instruction needs.

    Args:
        tick_arrays: Accounts in traversal order; the first must be loaded
        tick_spacing: Pool tick spacing
        a_to_b: Swap direction

    Raises:
        TickArraySequenceInvalid: If the first array has no data
    """

    def __init__(self, tick_arrays: list[TickArrayAccount], tick_spacing: int, a_to_b: bool):
        if not tick_arrays or tick_arrays[0].data is None:
            raise TickArraySequenceInvalid("Tick array 0 must be initialized")

        self.tick_spacing = tick_spacing
        self.a_to_b = a_to_b

        self._sequence: list[TickArrayAccount] = []
        for account in tick_arrays:
            if account.data is None:
                break
            self._sequence.append(account)

        self._touched = [False] * len(self._sequence)
        self._start_array_index = TickArrayIndex.from_tick_index(
            self._sequence[0].data.start_tick_index, tick_spacing
        ).array_index

    def __len__(self) -> int:
        return len(self._sequence)

    def _local_array_index(self, array_index: int) -> int:
        if self.a_to_b:
            return self._start_array_index - array_index
        return array_index - self._start_array_index

    def _in_bounds(self, index: TickArrayIndex) -> bool:
        local = self._local_array_index(index.array_index)
        return 0 <= local < len(self._sequence)

    def _in_array_range(self, start_tick_index: int, tick_index: int) -> bool:
        return start_tick_index <= tick_index < start_tick_index + self.tick_spacing * TICK_ARRAY_SIZE

    def is_valid_tick_array0(self, tick_current_index: int) -> bool:
        """Whether array 0 contains the tick the swap starts searching from."""
        shift = 0 if self.a_to_b else self.tick_spacing
        return self._in_array_range(
            self._sequence[0].data.start_tick_index, tick_current_index + shift
        )

    def num_touched_arrays(self) -> int:
        return sum(self._touched)

    def get_touched_arrays(self, min_array_size: int) -> list[str]:
        """Addresses of touched arrays, padded with the last one to min_array_size."""
        result = [
            account.address
            for account, touched in zip(self._sequence, self._touched)
            if touched
        ]
        if not result:
            return []
        if len(result) < min_array_size:
            result.extend([result[-1]] * (min_array_size - len(result)))
        return result

    def get_tick(self, tick_index: int) -> Tick:
        """Tick data at tick_index, marking its array as touched.

        Raises:
            TickArrayOutOfRange: If the tick is outside the loaded arrays
            TickArraySequenceInvalid: If the arrays are not consecutive
        """
        index = TickArrayIndex.from_tick_index(tick_index, self.tick_spacing)
        if not self._in_bounds(index):
            raise TickArrayOutOfRange(f"Tick index {tick_index} is outside the loaded tick arrays")

        local = self._local_array_index(index.array_index)
        tick_array = self._sequence[local].data
        self._touched[local] = True

        if not self._in_array_range(tick_array.start_tick_index, tick_index):
            raise TickArraySequenceInvalid(
                f"Tick array {local} starting at {tick_array.start_tick_index} "
                f"does not contain tick {tick_index}"
            )
        return tick_array.ticks[index.offset_index]

    def find_next_initialized_tick_index(self, tick_current_index: int) -> tuple[int, Tick | None]:
        """Next initialized tick in swap direction.

        An a->b search includes tick_current_index; a b->a search starts one
        tick spacing above it. If no initialized tick remains in the loaded
        arrays, the boundary of the last array is returned with no tick data
        so the swap can run up to it.

        Returns:
            Tuple of (tick index, tick data or None)

        Raises:
            TickArrayOutOfRange: If the search starts outside the loaded arrays
        """
        search_index = tick_current_index if self.a_to_b else tick_current_index + self.tick_spacing
        index = TickArrayIndex.from_tick_index(search_index, self.tick_spacing)

        if not self._in_bounds(index):
            raise TickArrayOutOfRange(
                f"Swap traversed too many arrays, out of bounds at tick {index.to_tick_index()}"
            )

        while self._in_bounds(index):
            tick = self.get_tick(index.to_tick_index())
            if tick.initialized:
                return index.to_tick_index(), tick
            index = index.prev() if self.a_to_b else index.next()

        if self.a_to_b:
            boundary = index.to_tick_index() + self.tick_spacing
        else:
            boundary = index.to_tick_index() - 1
        return max(min(boundary, MAX_TICK_INDEX), MIN_TICK_INDEX), None


__all__ = ["TickArrayIndex", "TickArraySequence"]

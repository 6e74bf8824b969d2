import random
from typing import Iterable, Iterator, List, Optional, Tuple

from queno.constants import MAX_SELECTION, NUMBER_COUNT


def generate_random_numbers(count: int, max_value: int, rng: Optional[random.Random] = None) -> List[int]:
    """Unique values in [1, max_value] for auto-pick.

    Client-side convenience only; the draw itself happens on-chain.
    """
    rng = rng or random
    return rng.sample(range(1, max_value + 1), count)


class Selection:
    """The player's chosen numbers, in the order they were picked."""

    def __init__(self, numbers: Iterable[int] = (), pool_size: int = NUMBER_COUNT,
                 max_size: int = MAX_SELECTION) -> None:
        self.pool_size = pool_size
        self.max_size = max_size
        self._numbers: List[int] = []
        self.replace(numbers)

    @property
    def numbers(self) -> Tuple[int, ...]:
        return tuple(self._numbers)

    @property
    def is_full(self) -> bool:
        return len(self._numbers) >= self.max_size

    def __len__(self) -> int:
        return len(self._numbers)

    def __iter__(self) -> Iterator[int]:
        return iter(self._numbers)

    def __contains__(self, n: object) -> bool:
        return n in self._numbers

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Selection):
            return set(self._numbers) == set(other._numbers)
        return NotImplemented

    def __repr__(self) -> str:
        return f"Selection({self._numbers!r})"

    def _check(self, n: int) -> None:
        if not 1 <= n <= self.pool_size:
            raise ValueError(f"Number {n} is outside 1..{self.pool_size}")

    def toggle(self, n: int) -> bool:
        """Remove n if picked, else add it when there is room. Returns True on change."""
        self._check(n)
        if n in self._numbers:
            self._numbers.remove(n)
            return True
        if self.is_full:
            return False
        self._numbers.append(n)
        return True

    def replace(self, numbers: Iterable[int]) -> None:
        picked: List[int] = []
        for n in numbers:
            n = int(n)
            self._check(n)
            if n not in picked:
                picked.append(n)
        if len(picked) > self.max_size:
            raise ValueError(f"At most {self.max_size} numbers can be selected")
        self._numbers = picked

    def auto_pick(self, rng: Optional[random.Random] = None) -> Tuple[int, ...]:
        self._numbers = generate_random_numbers(self.max_size, self.pool_size, rng)
        return self.numbers

    def clear(self) -> None:
        self._numbers = []

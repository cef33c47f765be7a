"""Random number sources accepted by the battle engine."""

from __future__ import annotations

from itertools import cycle
from typing import Iterable, Protocol


class RandomSource(Protocol):
    """Subset of :class:`random.Random` the engine relies on."""

    def random(self) -> float: ...

    def randint(self, a: int, b: int) -> int: ...


class SequenceRandom:
    """Replays fixed values so battles can be reproduced exactly.

    ``random()`` cycles through ``floats`` and ``randint()`` cycles through
    ``ints``; integers outside the requested range are wrapped into it.
    """

    def __init__(self, floats: Iterable[float] = (0.5,), ints: Iterable[int] = (1,)) -> None:
        floats = list(floats)
        ints = list(ints)
        if not floats or not ints:
            raise ValueError("SequenceRandom needs at least one float and one int")
        for value in floats:
            if not 0.0 <= value < 1.0:
                raise ValueError(f"random() values must lie in [0, 1), got {value}")
        self._floats = cycle(floats)
        self._ints = cycle(ints)

    def random(self) -> float:
        return next(self._floats)

    def randint(self, a: int, b: int) -> int:
        if a > b:
            raise ValueError(f"Empty range for randint({a}, {b})")
        value = next(self._ints)
        return a + (value - a) % (b - a + 1)

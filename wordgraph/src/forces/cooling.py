"""Cooling schedule bounding per-iteration displacement."""

from dataclasses import dataclass
from typing import Iterator

from wordgraph.src.common.constants import (
    DEFAULT_ITERATIONS,
    FINAL_TEMPERATURE,
    INITIAL_TEMPERATURE,
)


@dataclass(frozen=True)
class CoolingSchedule:
    """Geometric decay from ``initial`` to ``final`` over ``iterations`` steps.

    The temperature used during iteration ``i`` is ``initial * factor**i``;
    after the last iteration the running temperature equals ``final``.
    """

    initial: float = INITIAL_TEMPERATURE
    final: float = FINAL_TEMPERATURE
    iterations: int = DEFAULT_ITERATIONS

    def __post_init__(self) -> None:
        if self.iterations < 1:
            raise ValueError(f"iterations must be >= 1, got {self.iterations}")
        if not 0 < self.final < self.initial:
            raise ValueError(
                f"need 0 < final < initial, got final={self.final}, initial={self.initial}"
            )

    @property
    def factor(self) -> float:
        return (self.final / self.initial) ** (1.0 / self.iterations)

    def temperature_at(self, iteration: int) -> float:
        return self.initial * self.factor**iteration

    def __iter__(self) -> Iterator[float]:
        """Temperatures used by each iteration, in order."""
        temperature = self.initial
        factor = self.factor
        for _ in range(self.iterations):
            yield temperature
            temperature *= factor

import math
from typing import Sequence


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3), unlike round()."""
    return int(math.floor(value + 0.5))


def mean(values: Sequence[float]) -> float:
    return sum(values) / len(values)

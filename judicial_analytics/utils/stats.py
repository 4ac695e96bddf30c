"""Small numeric helpers shared by the pattern extractors.

Rounding is half-up (2.5 → 3) everywhere a value is shown to a reader, so
that rounded rates and day counts do not drift with banker's rounding.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

import numpy as np

NO_DATA_CONFIDENCE = 60

_SAMPLE_SIZE_CURVE: tuple[tuple[int, int], ...] = (
    (100, 95),
    (50, 90),
    (30, 85),
    (20, 80),
    (10, 75),
    (5, 70),
)
_SMALL_SAMPLE_CONFIDENCE = 65


def sample_size_confidence(sample_size: int) -> int:
    """Map a bucket's sample size onto the shared 65-95 confidence curve."""
    for threshold, confidence in _SAMPLE_SIZE_CURVE:
        if sample_size >= threshold:
            return confidence
    return _SMALL_SAMPLE_CONFIDENCE


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round to ndigits with ties going toward positive infinity."""
    factor = 10**ndigits
    return math.floor(value * factor + 0.5) / factor


def round_int(value: float) -> int:
    return int(round_half_up(value))


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def is_usable_amount(value: float | None) -> bool:
    """True for finite, non-negative monetary or numeric values."""
    return value is not None and math.isfinite(value) and value >= 0


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean, 0.0 for an empty series."""
    if not values:
        return 0.0
    return float(np.mean(values))


def median(values: Iterable[float]) -> float:
    """Median (average of the two middle values for even counts), 0.0 if empty."""
    data = list(values)
    if not data:
        return 0.0
    return float(np.median(data))


def nearest_rank_percentile(sorted_values: Sequence[float], percentile: float) -> float:
    """Nearest-rank percentile of an ascending series, 0.0 if empty."""
    if not sorted_values:
        return 0.0
    index = math.ceil((percentile / 100) * len(sorted_values)) - 1
    return float(sorted_values[max(0, index)])


def population_std_dev(values: Sequence[float], center: float | None = None) -> float:
    """Population standard deviation around `center` (the mean by default)."""
    if not values:
        return 0.0
    data = np.asarray(values, dtype=float)
    mu = float(data.mean()) if center is None else center
    return float(np.sqrt(np.mean((data - mu) ** 2)))

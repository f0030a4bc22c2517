"""Domain services that contain pure numeric rules shared by the engines."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum

import numpy as np


def clamp(value: float, low: float, high: float) -> float:
    """Clamp ``value`` into ``[low, high]``."""

    return float(np.clip(value, low, high))


def round_to_step(value: float, step: float = 0.5) -> float:
    return float(np.round(value / step) * step)


def floor_to_step(value: float, step: float) -> float:
    return float(np.floor(value / step) * step)


def octave_distance(first_hz: float, second_hz: float) -> float:
    """Absolute distance in octaves between two positive frequencies."""

    return float(abs(np.log2(first_hz / second_hz)))


def mean_or_default(values: Iterable[float], default: float = 0.0) -> float:
    samples = np.fromiter(values, dtype=float)
    if samples.size == 0:
        return default
    return float(samples.mean())


def is_finite_reading(value: float | None) -> bool:
    """True when a meter or snapshot reading can be used numerically."""

    if value is None:
        return False
    try:
        return bool(np.isfinite(value))
    except TypeError:
        return False


def require_complete_table(table: Mapping[Enum, object], enum_cls: type[Enum], table_name: str) -> None:
    """Fail at import time when a property table misses enum members."""

    missing = [member.name for member in enum_cls if member not in table]
    if missing:
        raise LookupError(f"{table_name} is missing entries for: {', '.join(missing)}.")

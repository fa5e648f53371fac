"""Human readable formatting of durations, byte sizes and counts."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import timedelta
from typing import Union

DurationLike = Union[timedelta, int, float]

_MICROS_PER_SECOND = 1_000_000

# (length in seconds, singular name, abbreviation)
_UNITS: tuple[tuple[int, str, str], ...] = (
    (365 * 24 * 60 * 60, "year", "y"),
    (7 * 24 * 60 * 60, "week", "w"),
    (24 * 60 * 60, "day", "d"),
    (60 * 60, "hour", "h"),
    (60, "minute", "m"),
    (1, "second", "s"),
)

_BINARY_PREFIXES = ("Ki", "Mi", "Gi", "Ti", "Pi", "Ei", "Zi", "Yi")
_DECIMAL_PREFIXES = ("k", "M", "G", "T", "P", "E", "Z", "Y")


def _to_micros(duration: DurationLike) -> int:
    """Return a duration as a whole number of microseconds."""
    if isinstance(duration, timedelta):
        micros = (
            duration.days * 86_400 + duration.seconds
        ) * _MICROS_PER_SECOND + duration.microseconds
    else:
        micros = round(duration * _MICROS_PER_SECOND)
    if micros < 0:
        raise ValueError("duration must not be negative")
    return micros


def _to_seconds(duration: DurationLike) -> float:
    return _to_micros(duration) / _MICROS_PER_SECOND


def _group_thousands(digits: str) -> str:
    """Insert a comma before every group of three trailing characters."""
    size = len(digits)
    out = []
    for idx, char in enumerate(digits):
        out.append(char)
        remaining = size - idx - 1
        if remaining > 0 and remaining % 3 == 0:
            out.append(",")
    return "".join(out)


def _check_unsigned(value: int) -> int:
    if value < 0:
        raise ValueError("value must not be negative")
    return value


def _format_prefixed(amount: int, base: int, prefixes: tuple[str, ...]) -> str:
    number = float(_check_unsigned(amount))
    level = 0
    while number >= base and level < len(prefixes):
        number /= base
        level += 1
    if level == 0:
        return f"{number:.0f}B"
    return f"{number:.2f} {prefixes[level - 1]}B"


@dataclass(frozen=True)
class FormattedDuration:
    """A duration shown as ``HH:MM:SS`` (with days when needed)."""

    duration: DurationLike
    precision: int = 0

    def __str__(self) -> str:
        t = _to_seconds(self.duration)
        seconds = t % 60.0
        t /= 60.0
        minutes = t % 60.0
        t /= 60.0
        hours = t % 24.0
        t /= 24.0
        clock = f"{hours:02.0f}:{minutes:02.0f}:{seconds:02.{self.precision}f}"
        if t >= 1.0:
            return f"{t:.0f}d {clock}"
        return clock


@dataclass(frozen=True)
class HumanDuration:
    """A duration rounded to the most fitting unit, e.g. ``3 minutes``.

    Formatting with the ``#`` flag yields the short form, e.g. ``3m``.
    """

    duration: DurationLike

    def _parts(self) -> tuple[int, str, str]:
        micros = _to_micros(self.duration)
        idx = 0
        for i, (cur, _, _) in enumerate(_UNITS):
            idx = i
            if i + 1 < len(_UNITS):
                cur_us = cur * _MICROS_PER_SECOND
                next_us = _UNITS[i + 1][0] * _MICROS_PER_SECOND
                if micros + next_us // 2 >= cur_us + cur_us // 2:
                    break
        unit, name, alt = _UNITS[idx]
        unit_us = unit * _MICROS_PER_SECOND
        # Round half away from zero on the exact ratio.
        count = (2 * micros + unit_us) // (2 * unit_us)
        if idx < len(_UNITS) - 1:
            count = max(count, 2)
        return count, name, alt

    def __str__(self) -> str:
        count, name, _ = self._parts()
        if count == 1:
            return f"{count} {name}"
        return f"{count} {name}s"

    def __format__(self, spec: str) -> str:
        if "#" in spec:
            count, _, alt = self._parts()
            return format(f"{count}{alt}", spec.replace("#", "", 1))
        return format(str(self), spec)


@dataclass(frozen=True)
class HumanBytes:
    """A byte count with binary prefixes, e.g. ``3.00 MiB``."""

    value: int

    def __str__(self) -> str:
        return _format_prefixed(self.value, 1024, _BINARY_PREFIXES)


@dataclass(frozen=True)
class DecimalBytes:
    """A byte count with SI prefixes, e.g. ``3.00 MB``."""

    value: int

    def __str__(self) -> str:
        return _format_prefixed(self.value, 1000, _DECIMAL_PREFIXES)


@dataclass(frozen=True)
class BinaryBytes:
    """A byte count with ISO/IEC prefixes, e.g. ``3.00 MiB``."""

    value: int

    def __str__(self) -> str:
        return _format_prefixed(self.value, 1024, _BINARY_PREFIXES)


@dataclass(frozen=True)
class HumanCount:
    """An integer count with thousands separators, e.g. ``12,345``."""

    value: int

    def __str__(self) -> str:
        return _group_thousands(str(_check_unsigned(self.value)))


@dataclass(frozen=True)
class HumanFloatCount:
    """A float with thousands separators and trailing zeros trimmed."""

    value: float
    precision: int

    def __str__(self) -> str:
        text = f"{self.value:.{self.precision}f}"
        int_part, dot, frac_part = text.partition(".")
        if not dot:
            if math.isfinite(self.value):
                int_part = str(math.trunc(self.value))
            frac_part = ""
        result = _group_thousands(int_part)
        frac_trimmed = frac_part.rstrip("0")
        if frac_trimmed:
            result += "." + frac_trimmed
        return result
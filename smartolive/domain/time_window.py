"""
Time Window Value Object
========================
Time-of-day interval during which irrigation is allowed.

Three shapes share one contract:

- ``start < end``: same-day window, ``start <= t < end``
- ``start > end``: overnight window wrapping past midnight,
  ``t >= start or t <= end``
- ``start == end``: whole day allowed
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time

from smartolive.domain.exceptions import InvalidWindowError
from smartolive.utils.time import Clock, parse_time_of_day


@dataclass(frozen=True)
class TimeWindow:
    """Allowed irrigation interval within a day."""

    start: time
    end: time

    def __post_init__(self):
        for name, value in (("start", self.start), ("end", self.end)):
            if not isinstance(value, time):
                raise InvalidWindowError(
                    f"Time window {name} must be a time of day, got {value!r}",
                    detail={name: repr(value)},
                )

    @classmethod
    def parse(cls, text: str) -> "TimeWindow":
        """Build a window from ``"HH:MM-HH:MM"``."""
        if not isinstance(text, str) or "-" not in text:
            raise InvalidWindowError(f"Expected 'HH:MM-HH:MM', got {text!r}")
        raw_start, _, raw_end = text.partition("-")
        start = parse_time_of_day(raw_start)
        end = parse_time_of_day(raw_end)
        if start is None or end is None:
            raise InvalidWindowError(f"Expected 'HH:MM-HH:MM', got {text!r}")
        return cls(start, end)

    @classmethod
    def all_day(cls) -> "TimeWindow":
        return cls(time(0, 0), time(0, 0))

    @property
    def is_all_day(self) -> bool:
        return self.start == self.end

    @property
    def is_overnight(self) -> bool:
        return self.start > self.end

    def contains(self, moment: time) -> bool:
        if self.is_all_day:
            return True
        if self.start < self.end:
            return self.start <= moment < self.end
        return moment >= self.start or moment <= self.end

    def contains_datetime(self, moment: datetime) -> bool:
        return self.contains(moment.time())

    def contains_now(self, clock: Clock) -> bool:
        return self.contains_datetime(clock())

    def is_within(self, outer: "TimeWindow") -> bool:
        """True when this same-day window lies fully inside a same-day ``outer``."""
        if self.is_all_day or self.is_overnight or outer.is_all_day or outer.is_overnight:
            return False
        return outer.start <= self.start and self.end <= outer.end

    def __str__(self) -> str:
        return f"{self.start:%H:%M}-{self.end:%H:%M}"

    def to_dict(self) -> dict[str, str]:
        return {"start": self.start.strftime("%H:%M"), "end": self.end.strftime("%H:%M")}

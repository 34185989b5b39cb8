"""Time windows for the contact statistics, in unix milliseconds."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Final, Optional

from .errors import EC_WINDOW_INVALID, EC_WINDOW_PRESET, PipelineError

# preset name -> (start days ago, end days ago)
PRESETS: Final[dict[str, tuple[int, int]]] = {
    "last_6_months": (180, 0),
    "last_12_months": (365, 0),
    "six_to_twelve_months": (365, 180),
}


def to_ms(moment: datetime) -> int:
    """Whole-second unix milliseconds of an aware datetime."""
    return int(moment.timestamp()) * 1000


@dataclass(frozen=True)
class StatsWindow:
    """An inclusive ``[start_ms, end_ms]`` window.

    Attributes:
        start_ms: Inclusive start, unix milliseconds.
        end_ms: Inclusive end, unix milliseconds.
        label: Short name used in output file names.
    """

    start_ms: int
    end_ms: int
    label: str = "custom"

    def __post_init__(self) -> None:
        if self.start_ms > self.end_ms:
            raise PipelineError(
                EC_WINDOW_INVALID,
                f"window start {self.start_ms} is after window end {self.end_ms}",
            )

    @classmethod
    def days_ago(
        cls,
        start_days: int,
        end_days: int = 0,
        *,
        now: Optional[datetime] = None,
        label: str = "custom",
    ) -> "StatsWindow":
        """Window from ``start_days`` ago to ``end_days`` ago, relative to ``now`` (UTC)."""
        if now is None:
            now = datetime.now(timezone.utc)
        elif now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return cls(
            start_ms=to_ms(now - timedelta(days=start_days)),
            end_ms=to_ms(now - timedelta(days=end_days)),
            label=label,
        )

    @classmethod
    def from_preset(cls, name: str, *, now: Optional[datetime] = None) -> "StatsWindow":
        try:
            start_days, end_days = PRESETS[name]
        except KeyError:
            raise PipelineError(
                EC_WINDOW_PRESET,
                f"unknown window preset {name!r} (choose from {', '.join(PRESETS)})",
            ) from None
        return cls.days_ago(start_days, end_days, now=now, label=name)

    def contains(self, time_ms: int) -> bool:
        return self.start_ms <= time_ms <= self.end_ms

"""
Minute-resolution creation time of a journal entry.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

TIMESTAMP_FORMAT = "%Y-%m-%d_%H%M"

# Length of the rendered form, e.g. "2024-03-05_0930"
TIMESTAMP_WIDTH = 15


@dataclass(frozen=True, order=True)
class TimeStamp:
    """
    Naive local date and time, without seconds.

    Ordering is chronological because the fields compare most significant first.
    """
    year: int
    month: int
    day: int
    hour: int
    minute: int

    def __post_init__(self):
        # datetime raises ValueError for out-of-range calendar values
        datetime(self.year, self.month, self.day, self.hour, self.minute)

    @classmethod
    def now(cls) -> 'TimeStamp':
        return cls.from_datetime(datetime.now())

    @classmethod
    def from_datetime(cls, value: datetime) -> 'TimeStamp':
        return cls(value.year, value.month, value.day, value.hour, value.minute)

    @classmethod
    def parse(cls, text: str) -> Optional['TimeStamp']:
        """
        Parse the `YYYY-MM-DD_HHMM` form strictly.

        Returns:
            TimeStamp, or None if text is not exactly a valid timestamp
        """
        if len(text) != TIMESTAMP_WIDTH:
            return None
        if text[4] != "-" or text[7] != "-" or text[10] != "_":
            return None

        fields = (text[0:4], text[5:7], text[8:10], text[11:13], text[13:15])
        if not all(_is_ascii_digits(field) for field in fields):
            return None
        try:
            return cls(*(int(field) for field in fields))
        except ValueError:
            return None

    def to_datetime(self) -> datetime:
        return datetime(self.year, self.month, self.day, self.hour, self.minute)

    def isoformat(self) -> str:
        return self.to_datetime().isoformat(timespec="minutes")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'year': self.year,
            'month': self.month,
            'day': self.day,
            'hour': self.hour,
            'minute': self.minute,
        }

    def __str__(self) -> str:
        return (
            f"{self.year:04d}-{self.month:02d}-{self.day:02d}"
            f"_{self.hour:02d}{self.minute:02d}"
        )


def _is_ascii_digits(text: str) -> bool:
    return bool(text) and all("0" <= ch <= "9" for ch in text)

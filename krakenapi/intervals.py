"""OHLC candle intervals supported by Kraken."""

from enum import Enum


class Interval(Enum):
    """Candle width in minutes."""
    ONE_MINUTE = 1
    FIVE_MINUTES = 5
    FIFTEEN_MINUTES = 15
    THIRTY_MINUTES = 30
    ONE_HOUR = 60
    FOUR_HOURS = 240
    ONE_DAY = 1440
    ONE_WEEK = 10080
    FIFTEEN_DAYS = 21600

    @property
    def minutes(self) -> int:
        return self.value

    @property
    def seconds(self) -> int:
        return self.value * 60

    @classmethod
    def from_minutes(cls, minutes: int) -> "Interval":
        """
        Raises:
            ValueError: If Kraken does not offer this interval
        """
        for interval in cls:
            if interval.value == minutes:
                return interval
        supported = ", ".join(str(i.value) for i in cls)
        raise ValueError(f"unsupported interval {minutes}; expected one of {supported}")

from enum import Enum


class TimePeriod(Enum):
    CURRENT_MONTH = "Current Month"
    LAST_MONTH = "Last Month"
    LAST_3_MONTHS = "Last 3 Months"
    LAST_6_MONTHS = "Last 6 Months"
    CURRENT_YEAR = "Current Year"
    LAST_YEAR = "Last Year"

    @property
    def display_name(self) -> str:
        return self.value

    @classmethod
    def from_display_name(cls, name: str) -> "TimePeriod":
        for period in cls:
            if period.value == name:
                return period
        raise ValueError(f"Unknown period: {name}")

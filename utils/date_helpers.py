from datetime import date, datetime, timedelta
import calendar
from models.time_period import TimePeriod
from utils.constants import DATE_FORMAT

# ── Display date format options ───────────────────────────────────────────────

DATE_FORMAT_OPTIONS = ["YYYY-MM-DD", "MM/DD/YYYY", "DD/MM/YYYY", "DD.MM.YYYY", "MM-DD-YYYY"]

_STRFTIME_MAP = {
    "MM/DD/YYYY": "%m/%d/%Y",
    "DD/MM/YYYY": "%d/%m/%Y",
    "YYYY-MM-DD": "%Y-%m-%d",
    "DD.MM.YYYY": "%d.%m.%Y",
    "MM-DD-YYYY": "%m-%d-%Y",
}

# Last representable instant of a day at datetime's microsecond resolution.
_END_OF_DAY = dict(hour=23, minute=59, second=59, microsecond=999999)


def now() -> datetime:
    return datetime.now()


def today() -> date:
    return date.today()


def parse_date(date_str: str) -> date | None:
    """Parse a date string in YYYY-MM-DD format, returning None on failure."""
    if not date_str:
        return None
    for fmt in ("%Y-%m-%d", "%Y/%m/%d", "%Y.%m.%d"):
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue
    return None


# ── Storage encoding ──────────────────────────────────────────────────────────

def to_storage(dt: datetime) -> str:
    """Fixed-width ISO text, so SQLite string ordering matches time ordering."""
    return dt.isoformat(sep=" ", timespec="microseconds")


def from_storage(value: str) -> datetime:
    return datetime.fromisoformat(value)


# ── Calendar arithmetic ───────────────────────────────────────────────────────

def clamp_day_to_month(year: int, month: int, day: int) -> int:
    """Clamp day to valid range for the given year/month."""
    max_day = calendar.monthrange(year, month)[1]
    return min(day, max_day)


def add_months(d: date, n: int) -> date:
    """Add n months to date d, clamping day to month end."""
    month = d.month - 1 + n
    year = d.year + month // 12
    month = month % 12 + 1
    day = clamp_day_to_month(year, month, d.day)
    return d.replace(year=year, month=month, day=day)


def start_of_day(d: date) -> datetime:
    return datetime(d.year, d.month, d.day)


def end_of_day(d: date) -> datetime:
    return datetime(d.year, d.month, d.day, **_END_OF_DAY)


def start_of_month(dt: datetime) -> datetime:
    return datetime(dt.year, dt.month, 1)


def resolve_period(period: TimePeriod, reference: datetime | None = None) -> tuple[datetime, datetime]:
    """Return the (start, end) range covered by a named period.

    "Current" and "last N months" periods are open-ended and end at the
    reference instant. LAST_MONTH and LAST_YEAR are closed and end at the
    final microsecond of the prior period. Computed fresh on every call.
    """
    ref = reference or now()
    month_start = start_of_month(ref)

    if period is TimePeriod.CURRENT_MONTH:
        return month_start, ref
    if period is TimePeriod.LAST_3_MONTHS:
        return add_months(month_start, -3), ref
    if period is TimePeriod.LAST_6_MONTHS:
        return add_months(month_start, -6), ref
    if period is TimePeriod.CURRENT_YEAR:
        return datetime(ref.year, 1, 1), ref
    if period is TimePeriod.LAST_MONTH:
        start = add_months(month_start, -1)
        last_day = calendar.monthrange(start.year, start.month)[1]
        return start, end_of_day(start.replace(day=last_day))
    if period is TimePeriod.LAST_YEAR:
        year = ref.year - 1
        return datetime(year, 1, 1), end_of_day(date(year, 12, 31))
    raise ValueError(f"Unknown period: {period}")


# ── Display ───────────────────────────────────────────────────────────────────

def format_display_date(value: date | str, fmt_key: str = "YYYY-MM-DD") -> str:
    """Render a date (or a YYYY-MM-DD string) in the user-facing display format."""
    if not value:
        return ""
    if isinstance(value, str):
        d = parse_date(value)
        if d is None:
            return value
    else:
        d = value
    return d.strftime(_STRFTIME_MAP.get(fmt_key, DATE_FORMAT))


def parse_display_date(display_str: str, fmt_key: str) -> date | None:
    """Parse a date in the given display format. Returns None on failure.

    Falls back to ISO 8601 parse if the display format doesn't match.
    """
    if not display_str:
        return None
    fmt = _STRFTIME_MAP.get(fmt_key, DATE_FORMAT)
    try:
        return datetime.strptime(display_str.strip(), fmt).date()
    except ValueError:
        return parse_date(display_str)

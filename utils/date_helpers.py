from datetime import date, datetime, timezone
import calendar
from utils.constants import DATE_FORMAT


def today() -> date:
    """Default clock for the app. Services take a clock argument instead of calling this directly."""
    return date.today()


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def parse_date(value) -> date | None:
    """Parse a YYYY-MM-DD string (or an ISO timestamp) into a date, None on failure."""
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    for fmt in ("%Y-%m-%d", "%Y/%m/%d", "%Y.%m.%d"):
        try:
            return datetime.strptime(text[:10], fmt).date()
        except ValueError:
            continue
    return None


def parse_timestamp(value) -> datetime | None:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    text = str(value).strip().replace("Z", "+00:00")
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def format_date(d: date) -> str:
    return d.strftime(DATE_FORMAT)


def same_month(a: date, b: date) -> bool:
    return a.year == b.year and a.month == b.month


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def clamp_day_to_month(year: int, month: int, day: int) -> int:
    """Clamp day to valid range for the given year/month."""
    return max(1, min(day, days_in_month(year, month)))


def add_months(d: date, n: int) -> date:
    """Add n months to date d, clamping day to month end."""
    month = d.month - 1 + n
    year = d.year + month // 12
    month = month % 12 + 1
    day = clamp_day_to_month(year, month, d.day)
    return d.replace(year=year, month=month, day=day)


def last_n_months(n: int, ref: date) -> list[dict]:
    """Return the n months ending with ref's month, oldest first.

    Each entry: {year, month, name ('Mar'), full_name ('March 2024')}.
    """
    first = ref.replace(day=1)
    months = []
    for i in range(n - 1, -1, -1):
        d = add_months(first, -i)
        months.append({
            "year": d.year,
            "month": d.month,
            "name": d.strftime("%b"),
            "full_name": d.strftime("%B %Y"),
        })
    return months


def friendly_month(year: int, month: int) -> str:
    """e.g. 'February 2026'."""
    return date(year, month, 1).strftime("%B %Y")

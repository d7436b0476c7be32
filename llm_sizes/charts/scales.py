"""Axis range and tick label helpers."""

from datetime import date, datetime, timedelta

SHORT_SCALE = [
    (1e12, "T"),
    (1e9, "B"),
    (1e6, "M"),
    (1e3, "K"),
]


def short_scale_label(value: float) -> str:
    """Abbreviate a number with K/M/B/T suffixes (2.5e9 -> '2.5B')."""
    for cut, suffix in SHORT_SCALE:
        if abs(value) >= cut:
            return f"{_trim(value / cut)}{suffix}"
    return _trim(value)


def _trim(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")


def expand_range(lo: float, hi: float, mult: float) -> tuple[float, float]:
    """Pad a range by mult times its span on each side."""
    pad = (hi - lo) * mult
    return lo - pad, hi + pad


def to_day_number(value: date) -> float:
    """Days since 0001-01-01, with time of day as a fraction."""
    if isinstance(value, datetime):
        seconds = value.hour * 3600 + value.minute * 60 + value.second
        return value.toordinal() + seconds / 86400
    return float(value.toordinal())


def from_day_number(value: float) -> datetime:
    whole = int(value)
    return datetime.fromordinal(whole) + timedelta(days=value - whole)


def expand_date_range(lo: date, hi: date, mult: float) -> tuple[datetime, datetime]:
    start, end = expand_range(to_day_number(lo), to_day_number(hi), mult)
    return from_day_number(start), from_day_number(end)

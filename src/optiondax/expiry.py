"""
Calendar expiry dates to Black-Scholes year fractions.

Both the expiry and the evaluation instant are placed on the UTC timeline
before subtracting, so the result does not depend on the local timezone of
the machine doing the calculation. A year is 365 calendar days.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Union

import pandas as pd

DateLike = Union[str, date, datetime, pd.Timestamp]

_YEAR = pd.Timedelta(days=365)


def _to_utc(value: DateLike) -> pd.Timestamp:
    ts = pd.Timestamp(value)
    if ts is pd.NaT:
        raise ValueError(f"unparseable date: {value!r}")
    if ts.tzinfo is None:
        return ts.tz_localize("UTC")
    return ts.tz_convert("UTC")


def _utc_midnight(value: DateLike) -> pd.Timestamp:
    return _to_utc(value).normalize()


def time_to_expiry(expiry_date: DateLike, now: DateLike | None = None) -> float:
    """
    Year fraction remaining until an option expires.

    Parameters
    ----------
    expiry_date : str, date or datetime
        Expiry calendar date, e.g. ``"2026-03-20"``. It is taken at UTC
        midnight; any time-of-day component is dropped.
    now : str, date or datetime, optional
        Evaluation instant. Naive values are read as UTC. Defaults to the
        current UTC time.

    Returns
    -------
    float
        ``(expiry - now) / 365 days``, or exactly ``0.0`` if the option has
        already expired.

    Raises
    ------
    ValueError
        If a date string cannot be parsed.

    Examples
    --------
    >>> round(time_to_expiry("2026-03-20", now="2026-02-12T12:00:00Z") * 365, 6)
    35.5
    """

    expiry = _utc_midnight(expiry_date)
    current = _to_utc(now) if now is not None else pd.Timestamp(datetime.now(timezone.utc))
    remaining = expiry - current
    if remaining <= pd.Timedelta(0):
        return 0.0
    return remaining / _YEAR


def year_fraction(start: DateLike, end: DateLike) -> float:
    """
    Calendar-day year fraction between two dates.

    Both dates are taken at UTC midnight, so the result is always a whole
    number of days divided by 365.

    Examples
    --------
    >>> round(year_fraction("2026-02-12", "2026-03-20") * 365, 6)
    36.0
    """

    elapsed = _utc_midnight(end) - _utc_midnight(start)
    if elapsed <= pd.Timedelta(0):
        return 0.0
    return elapsed / _YEAR

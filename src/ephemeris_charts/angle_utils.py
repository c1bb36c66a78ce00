"""Angle parsing, formatting, and mean sky position of a set of points."""

from __future__ import annotations

import math
import re
from collections.abc import Sequence

import numpy as np

from ephemeris_charts.constants import HOURS_PER_CIRCLE, TWO_PI


def parse_angle(string: str) -> float | None:
    """Parse a sexagesimal angle given as hours/degrees, minutes, seconds.

    Accepts one, two, or three whitespace-separated numbers. Minutes and seconds
    must be non-negative; a leading minus negates the whole angle. The result is in
    the units of the first number (hours for RA, degrees for Dec).

    Parameters:
        string: e.g. ``"12 30 45"``, ``"-5 30"`` or ``"23.5"``.

    Returns:
        Angle, or None on parse failure.
    """
    s = string.strip()
    if not s:
        return None
    parts = re.split(r'\s+', s)[:3]
    try:
        values = [float(p) for p in parts]
    except ValueError:
        return None
    if any(v < 0 for v in values[1:]):
        return None
    angle = abs(values[0])
    for i, v in enumerate(values[1:], start=1):
        angle += v / 60.0**i
    if s.startswith('-'):
        angle = -angle
    return angle


def dms_string(value: float, separator: str, ndecimal: int = 1) -> str:
    """Format an angle as degrees/hours, minutes, seconds.

    Parameters:
        value: Angle in degrees (or hours for RA).
        separator: 3-character string of unit marks (e.g. 'hms' or 'dms').
        ndecimal: Decimal places for seconds.

    Returns:
        Formatted string (e.g. " 12h 30m 45.1s").
    """
    if not math.isfinite(value):
        return 'nan'
    sep1, sep2, sep3 = separator[:3] if len(separator) >= 3 else ('', '', '')
    sign = '-' if value < 0 else ' '
    ntens = 10**ndecimal
    units = round(abs(value) * 3600.0 * ntens)
    whole_secs, frac = divmod(units, ntens)
    minutes, secs = divmod(whole_secs, 60)
    degrees, minutes = divmod(minutes, 60)
    frac_str = f'.{frac:0{ndecimal}d}' if ndecimal > 0 else ''
    return f'{sign}{degrees:02d}{sep1} {minutes:02d}{sep2} {secs:02d}{frac_str}{sep3}'


def wrap_hours(ra_hours: float) -> float:
    """Normalize right ascension in hours into [0, 24)."""
    wrapped = ra_hours % HOURS_PER_CIRCLE
    # -1e-17 % 24 rounds to 24.0
    return 0.0 if wrapped >= HOURS_PER_CIRCLE else wrapped


def mean_position(
    ra_list: Sequence[float] | np.ndarray,
    dec_list: Sequence[float] | np.ndarray,
) -> tuple[float, float]:
    """Mean position on the sphere of a set of points.

    Points are averaged as unit vectors, so tracks straddling RA 0h/24h give the
    right answer. Non-finite points are ignored.

    Parameters:
        ra_list: Right ascensions in radians.
        dec_list: Declinations in radians.

    Returns:
        (ra, dec) in radians, ra in [0, 2pi).

    Raises:
        ValueError: If no finite points are given.
    """
    ra = np.asarray(ra_list, dtype=float)
    dec = np.asarray(dec_list, dtype=float)
    finite = np.isfinite(ra) & np.isfinite(dec)
    if not finite.any():
        raise ValueError('Cannot compute mean position of zero finite points')
    ra = ra[finite]
    dec = dec[finite]
    cos_dec = np.cos(dec)
    x = float(np.mean(cos_dec * np.cos(ra)))
    y = float(np.mean(cos_dec * np.sin(ra)))
    z = float(np.mean(np.sin(dec)))
    ra_mean = math.atan2(y, x) % TWO_PI
    if ra_mean >= TWO_PI:
        ra_mean = 0.0
    dec_mean = math.atan2(z, math.hypot(x, y))
    return ra_mean, dec_mean

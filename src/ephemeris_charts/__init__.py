"""Ephemeris paths on star charts.

This package draws the paths of solar-system objects across a star chart:
- Ephemeris loading: per-object (JD, RA, Dec) samples from an external generator
  or pre-computed files, with calendar date labels for tick marks
- Autoscale: frames the chart around the sky region the paths cover
- Rendering: paths, tick marks, and collision-free date labels (PostScript or matplotlib)

Calendar conversions use astropy.time.
"""

__all__: list[str] = []

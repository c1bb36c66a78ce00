"""Fixed constants: sky-coverage grid, autoscale thresholds, tick and label geometry."""

import math

# Angle: degrees per circle and per hour of right ascension
DEGREES_PER_CIRCLE = 360.0
HOURS_PER_CIRCLE = 24.0
DEGREES_PER_HOUR_RA = 15.0  # right ascension: 360° / 24 h
TWO_PI = 2.0 * math.pi
HALF_PI = 0.5 * math.pi

# Trace sampling cadence (days); not user-supplied
DEFAULT_JD_STEP = 0.5

# Sky coverage grid: 8 bins per hour of RA, 8 bins per 10 degrees of Dec
RA_BINS = 24 * 8
DEC_BINS = 18 * 8

# Autoscale
ANGULAR_MARGIN = 1.1  # chart is 10% wider than the tracks it frames
FULL_SKY_THRESHOLD_DEG = 350.0  # wider than this snaps to the whole sky
FLAMSTEED_WIDTH_LIMIT_DEG = 22.0
FLAT_PROJECTION_WIDTH_DEG = 110.0  # strictly wider charts use the flat projection
FLAT_WIDTH_SCALE = 1.6
FLAT_TALL_WIDTH_SCALE = 0.7
FLAT_FONT_SCALE = 0.95
FLAT_MAG_LIMIT = 5.0
FLAT_MAX_STAR_LABELS = 25
FLAT_MAX_ASPECT = 0.5
FLAT_ASPECT_STRETCH = 1.8
FLAT_DEC_LIMIT_DEG = 89.0
GNOMONIC_MIN_ASPECT = 0.5
GNOMONIC_MAX_ASPECT = 1.5

# Tick marks (cm); minor ticks subdivide months weekly
MAJOR_TICK_LEN = 0.2
MINOR_TICK_LEN = 0.12
MAJOR_TICK_WIDTH = 2.0
MINOR_TICK_WIDTH = 0.8
POINT_EXCLUSION_FRAC = 0.1
TICK_EXCLUSION_FRAC = 0.4
LABEL_GAP_NEAR = 1.5
LABEL_GAP_FAR = 1.85

# Tick labels
MAJOR_FONT_SIZE = 1.7
MINOR_FONT_SIZE = 1.3
MINOR_EXTRA_MARGIN = 2.0
# Priority: lower value wins; bonuses favour quarter and year boundaries
PRIORITY_BASE = 0.0123
PRIORITY_INDEX_STEP = 1e-12
PRIORITY_MAJOR_BONUS = 4e-6
PRIORITY_DAY14_BONUS = 1e-7
PRIORITY_JANUARY_BONUS = 3e-7
PRIORITY_JULY_BONUS = 2e-7
PRIORITY_APR_NOV_BONUS = 1e-7

MONTH_NAMES = (
    'January',
    'February',
    'March',
    'April',
    'May',
    'June',
    'July',
    'August',
    'September',
    'October',
    'November',
    'December',
)

# Julian dates the calendar conversion accepts (wider ranges are rejected by ERFA)
CALENDAR_JD_MIN = -68569.5
CALENDAR_JD_MAX = 1e9

# Length limit on object identifiers passed to the ephemeris generator
OBJECT_ID_LEN = 256

# Physical units
POINTS_PER_CM = 72.0 / 2.54

# Chart text height at font scale 1 (cm)
TEXT_HEIGHT_CM = 0.16

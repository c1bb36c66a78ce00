"""Configuration: ephemeris generator paths and log level from environment."""

import os

# Env var overrides with sensible defaults.
DEFAULT_EPHEMERIS_COMPUTE_PATH = 'ephemeris-compute-de430'
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


def get_ephemeris_compute_path() -> str:
    """Return the ephemeris generator executable (EPHEMERIS_COMPUTE_PATH env var or default).

    Returns:
        Executable name or path string.
    """
    return os.environ.get('EPHEMERIS_COMPUTE_PATH', DEFAULT_EPHEMERIS_COMPUTE_PATH)


def get_ephemeris_data_path() -> str | None:
    """Return directory of pre-computed ephemeris text files, if configured.

    Returns:
        EPHEMERIS_DATA_PATH value, or None when unset or blank.
    """
    path = os.environ.get('EPHEMERIS_DATA_PATH', '').strip()
    return path or None


def get_log_level() -> str | None:
    """Return log level name from EPHEMERIS_CHARTS_LOG, if it names a valid level."""
    level = os.environ.get('EPHEMERIS_CHARTS_LOG', '').strip().upper()
    return level if level in LOG_LEVELS else None

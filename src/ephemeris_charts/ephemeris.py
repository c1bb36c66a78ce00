"""Track loader: fetch ephemeris rows for solar-system objects and label them by date.

Ephemerides are computed outside this package. An EphemerisProvider yields the
generator's plain-text output, one sample per line::

    # jd            ra (rad)        dec (rad)   [further columns ignored]
    2458849.5   4.9234562   -0.3932211

Blank lines and lines starting with '#' are skipped.
"""

from __future__ import annotations

import logging
import math
import subprocess
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path
from typing import Protocol

from ephemeris_charts.config import get_ephemeris_compute_path, get_ephemeris_data_path
from ephemeris_charts.constants import OBJECT_ID_LEN
from ephemeris_charts.params import TraceSpec, parse_trace_definition
from ephemeris_charts.time_utils import CivilDate, calendar_from_jd, calendar_range_ok
from ephemeris_charts.tracks import Sample, Track, assign_labels

logger = logging.getLogger(__name__)


class EphemerisError(RuntimeError):
    """The ephemeris source produced no usable data; chart generation cannot continue."""


class EphemerisProvider(Protocol):
    """Source of ephemeris text lines for one trace."""

    def fetch_lines(self, spec: TraceSpec) -> Iterable[str]: ...


class EphemerisComputeProvider:
    """Run an external ephemeris generator (ephemeris-compute-de430) per object."""

    def __init__(self, executable: str | None = None) -> None:
        self.executable = executable or get_ephemeris_compute_path()

    def command(self, spec: TraceSpec) -> list[str]:
        """Command line requesting plain-text, non-constellation output for one object."""
        return [
            self.executable,
            '--jd_min',
            f'{spec.jd_start:.15f}',
            '--jd_max',
            f'{spec.jd_end:.15f}',
            '--jd_step',
            f'{spec.jd_step:.15f}',
            '--output_format',
            '1',
            '--output_constellations',
            '0',
            '--output_binary',
            '0',
            '--objects',
            spec.object_id[:OBJECT_ID_LEN],
        ]

    def fetch_lines(self, spec: TraceSpec) -> Iterator[str]:
        """Yield generator stdout lines until end-of-stream (blocks; no timeout).

        Raises:
            EphemerisError: If the executable cannot be started.
        """
        cmd = self.command(spec)
        logger.debug('Running ephemeris generator: %s', ' '.join(cmd))
        try:
            proc = subprocess.Popen(
                cmd,
                stdout=subprocess.PIPE,
                text=True,
            )
        except OSError as e:
            raise EphemerisError(
                f'Could not run ephemeris generator {self.executable!r}: {e}'
            ) from e
        if proc.stdout is None:
            proc.kill()
            raise EphemerisError(f'Ephemeris generator {self.executable!r} has no output stream')
        with proc.stdout:
            yield from proc.stdout
        returncode = proc.wait()
        if returncode != 0:
            logger.warning(
                'Ephemeris generator exited with status %d for %r',
                returncode,
                spec.object_id,
            )


class EphemerisFileProvider:
    """Read pre-computed generator output from ``<directory>/<object_id>.txt``."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def path_for(self, spec: TraceSpec) -> Path:
        return self.directory / f'{spec.object_id}.txt'

    def fetch_lines(self, spec: TraceSpec) -> Iterator[str]:
        """Yield lines of the object's file.

        Raises:
            EphemerisError: If the file cannot be read.
        """
        path = self.path_for(spec)
        try:
            with path.open() as f:
                yield from f
        except OSError as e:
            raise EphemerisError(f'Could not read ephemeris file {path}: {e}') from e


def default_provider(executable: str | None = None) -> EphemerisProvider:
    """File provider when EPHEMERIS_DATA_PATH is set (and no executable given), else generator."""
    data_path = get_ephemeris_data_path()
    if executable is None and data_path is not None:
        return EphemerisFileProvider(data_path)
    return EphemerisComputeProvider(executable)


def _to_float(token: str) -> float:
    """Best-effort numeric parse; malformed fields become NaN."""
    try:
        return float(token)
    except ValueError:
        return math.nan


def parse_ephemeris_lines(lines: Iterable[str]) -> list[Sample]:
    """Parse generator output into samples (time, ra, dec).

    Leading whitespace is ignored; blank and '#' lines are skipped; only the first
    three whitespace-separated columns are read.

    Parameters:
        lines: Text lines (with or without newlines).

    Returns:
        Samples in input order.
    """
    samples: list[Sample] = []
    for line in lines:
        text = line.strip()
        if not text or text.startswith('#'):
            continue
        fields = text.split()
        time, ra, dec = (_to_float(fields[i]) if i < len(fields) else math.nan for i in range(3))
        samples.append(Sample(time=time, ra=ra, dec=dec))
    return samples


def _calendar_dates(samples: Sequence[Sample]) -> list[CivilDate | None]:
    """Calendar date per sample; None for samples whose time has no calendar date."""
    dated_idx = [i for i, s in enumerate(samples) if calendar_range_ok(s.time)]
    out_of_range = sum(1 for s in samples if math.isfinite(s.time)) - len(dated_idx)
    if out_of_range:
        logger.warning('Leaving %d ephemeris rows with out-of-range Julian dates unlabelled', out_of_range)
    dates: list[CivilDate | None] = [None] * len(samples)
    converted = calendar_from_jd([samples[i].time for i in dated_idx])
    for i, date in zip(dated_idx, converted):
        dates[i] = date
    return dates


def load_track(spec: TraceSpec, provider: EphemerisProvider) -> Track:
    """Fetch, parse, and label the track of one object.

    Parameters:
        spec: Object and date range.
        provider: Source of ephemeris text.

    Returns:
        Track with one labelled sample per data row.

    Raises:
        EphemerisError: If the provider yields no data rows.
    """
    samples = parse_ephemeris_lines(provider.fetch_lines(spec))
    if not samples:
        raise EphemerisError(
            f'Ephemeris source returned no data for {spec.object_id!r} '
            f'(JD {spec.jd_start} to {spec.jd_end})'
        )
    logger.debug('Read %d ephemeris rows for %r', len(samples), spec.object_id)
    labelled = assign_labels(samples, _calendar_dates(samples))
    return Track(spec=spec, samples=tuple(labelled))


def fetch_tracks(
    definitions: Sequence[str],
    provider: EphemerisProvider | None = None,
) -> list[Track]:
    """Parse trace definitions and load each track in order.

    Parameters:
        definitions: Strings ``object_id,jd_start,jd_end``.
        provider: Ephemeris source; default_provider() if None.

    Returns:
        One Track per definition.

    Raises:
        ValueError: On a malformed definition.
        EphemerisError: If any object yields no data.
    """
    if provider is None:
        provider = default_provider()
    specs = [parse_trace_definition(d) for d in definitions]
    return [load_track(spec, provider) for spec in specs]

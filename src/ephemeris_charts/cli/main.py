"""CLI entry point: ephemeris-charts track|frame|chart subcommands."""

from __future__ import annotations

import argparse
import logging
import math
import sys
from typing import NoReturn, TextIO, cast

from ephemeris_charts.angle_utils import dms_string, parse_angle
from ephemeris_charts.autoscale import FrameResult, solve_tracks
from ephemeris_charts.chart import render_chart
from ephemeris_charts.config import get_log_level
from ephemeris_charts.constants import DEGREES_PER_HOUR_RA
from ephemeris_charts.ephemeris import (
    EphemerisComputeProvider,
    EphemerisError,
    EphemerisFileProvider,
    EphemerisProvider,
    default_provider,
    fetch_tracks,
)
from ephemeris_charts.params import PROJECTIONS, ChartConfig
from ephemeris_charts.tracks import Track

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool = False) -> None:
    """Configure logging for CLI (stderr, level from --verbose or EPHEMERIS_CHARTS_LOG)."""
    level = logging.DEBUG if verbose else logging.WARNING
    env_level = get_log_level()
    if env_level is not None:
        level = getattr(logging, env_level)
    logging.basicConfig(
        level=level,
        format='%(levelname)s: %(name)s: %(message)s',
        stream=sys.stderr,
    )
    # Suppress noisy third-party DEBUG output.
    for name in ('matplotlib', 'PIL', 'astropy'):
        logging.getLogger(name).setLevel(logging.WARNING)


def _angle_arg(value: str) -> float:
    """argparse type: sexagesimal or decimal angle (e.g. '12 30 00' or '-5.5')."""
    angle = parse_angle(value)
    if angle is None:
        raise argparse.ArgumentTypeError(f'invalid angle: {value!r}')
    return angle


def _provider_from_args(args: argparse.Namespace) -> EphemerisProvider:
    """Ephemeris source from --ephemeris-dir / --ephemeris-compute, else environment."""
    if args.ephemeris_dir:
        return EphemerisFileProvider(args.ephemeris_dir)
    if args.ephemeris_compute:
        return EphemerisComputeProvider(args.ephemeris_compute)
    return default_provider()


def write_track_table(out: TextIO, tracks: list[Track]) -> None:
    """Write one row per sample: Julian date, RA, Dec, and tick label."""
    for track in tracks:
        spec = track.spec
        out.write(
            f'# {spec.object_id}  JD {spec.jd_start} to {spec.jd_end}  '
            f'step {spec.jd_step}  ({len(track)} samples)\n'
        )
        for sample in track.samples:
            ra_hours = math.degrees(sample.ra) / DEGREES_PER_HOUR_RA
            dec_deg = math.degrees(sample.dec)
            row = (
                f'{sample.time:16.6f} {dms_string(ra_hours, "hms")} '
                f'{dms_string(dec_deg, "dms")}'
            )
            if sample.text_label is not None:
                kind = 'minor' if sample.is_minor_tick else 'major'
                row += f'  {sample.text_label} ({kind})'
            out.write(row.rstrip() + '\n')


def write_frame(out: TextIO, frame: FrameResult) -> None:
    """Write the solved chart framing, one field per line."""
    out.write(f'RA range:       {frame.ra_min:.3f}h to {frame.ra_max:.3f}h\n')
    out.write(f'Dec range:      {frame.dec_min:.2f}d to {frame.dec_max:.2f}d\n')
    out.write(f'Base width:     {frame.angular_width_base:.2f} deg\n')
    if not frame.autoscale_succeeded:
        out.write('Autoscale:      disabled (degenerate sky coverage)\n')
        return
    if frame.centre_ra is None or frame.centre_dec is None:
        raise ValueError('Autoscaled frame has no centre')
    out.write('Autoscale:      ok\n')
    out.write(f'Centre:         {frame.centre_ra:.3f}h {frame.centre_dec:+.2f}d\n')
    out.write(f'Angular width:  {frame.angular_width:.2f} deg\n')
    out.write(f'Aspect:         {frame.aspect:.2f}\n')
    out.write(f'Projection:     {frame.projection_kind}\n')


def _load(args: argparse.Namespace) -> list[Track] | None:
    """Fetch tracks for the --trace definitions; None (after reporting) on error."""
    try:
        return fetch_tracks(args.trace, _provider_from_args(args))
    except (ValueError, EphemerisError) as e:
        print(f'Error: {e}', file=sys.stderr)
        return None


def _track_cmd(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    """Print each track's samples and labels (track subcommand).

    Returns:
        Exit code 0 on success, 1 on error.
    """
    tracks = _load(args)
    if tracks is None:
        return 1
    write_track_table(sys.stdout, tracks)
    return 0


def _frame_cmd(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    """Print the autoscaled framing of the tracks (frame subcommand).

    Returns:
        Exit code 0 on success, 1 on error.
    """
    tracks = _load(args)
    if tracks is None:
        return 1
    write_frame(sys.stdout, solve_tracks(tracks))
    return 0


def _chart_cmd(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    """Render a star chart of the tracks (chart subcommand).

    Parameters:
        parser: Argument parser (unused).
        args: Parsed args; trace, output, framing defaults, ephemeris source.

    Returns:
        Exit code 0 on success, 1 on error.
    """
    config = ChartConfig(
        ra0=args.ra0,
        dec0=args.dec0,
        angular_width=args.width,
        aspect=args.aspect,
        projection=args.projection,
        ephemeris_autoscale=not args.no_autoscale,
        title=(args.title or '').strip(),
    )
    try:
        framed, frame, placed = render_chart(
            config, args.trace, args.output, provider=_provider_from_args(args)
        )
    except (ValueError, EphemerisError) as e:
        print(f'Error: {e}', file=sys.stderr)
        return 1
    if not frame.autoscale_succeeded and config.ephemeris_autoscale:
        logger.info('Chart drawn with default framing')
    logger.info(
        'Wrote %s: %s projection, centre %.3fh %+.2fd, width %.1f deg, %d labels',
        args.output,
        framed.projection,
        framed.ra0,
        framed.dec0,
        framed.angular_width,
        len(placed),
    )
    return 0


def _add_source_args(p: argparse.ArgumentParser) -> None:
    """Trace and ephemeris source options shared by all subcommands."""
    p.add_argument(
        '--trace',
        type=str,
        action='append',
        required=True,
        help='Object and Julian date range: object_id,jd_start,jd_end (repeatable)',
    )
    p.add_argument(
        '--ephemeris-compute',
        type=str,
        default=None,
        help='Ephemeris generator executable; env: EPHEMERIS_COMPUTE_PATH',
    )
    p.add_argument(
        '--ephemeris-dir',
        type=str,
        default=None,
        help='Directory of pre-computed <object_id>.txt files; env: EPHEMERIS_DATA_PATH',
    )
    p.add_argument('-v', '--verbose', action='store_true', help='Show DEBUG logs')


def main() -> int:
    """Entry point for ephemeris-charts CLI (track | frame | chart).

    Returns:
        Exit code 0 on success, 1 on failure.
    """
    parser = argparse.ArgumentParser(
        prog='ephemeris-charts',
        description='Paths of solar-system objects across autoscaled star charts.',
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    track_parser = subparsers.add_parser('track', help='List track samples and date labels')
    _add_source_args(track_parser)
    track_parser.set_defaults(func=_track_cmd)

    frame_parser = subparsers.add_parser('frame', help='Show autoscaled chart framing')
    _add_source_args(frame_parser)
    frame_parser.set_defaults(func=_frame_cmd)

    chart_parser = subparsers.add_parser('chart', help='Draw a chart of the tracks')
    _add_source_args(chart_parser)
    chart_parser.add_argument(
        '-o', '--output', type=str, required=True, help='Chart file (.ps, .eps, .png, .pdf, .svg)'
    )
    chart_parser.add_argument(
        '--ra0', type=_angle_arg, default=0.0, help='Default centre RA (hours, e.g. "12 30 00")'
    )
    chart_parser.add_argument(
        '--dec0', type=_angle_arg, default=0.0, help='Default centre Dec (degrees)'
    )
    chart_parser.add_argument(
        '--width', type=float, default=25.0, help='Default angular width (degrees)'
    )
    chart_parser.add_argument(
        '--aspect', type=float, default=1.0 / math.sqrt(2.0), help='Default aspect ratio'
    )
    chart_parser.add_argument(
        '--projection', type=str, default='gnomonic', choices=PROJECTIONS, help='Default projection'
    )
    chart_parser.add_argument(
        '--no-autoscale', action='store_true', help='Keep the default framing'
    )
    chart_parser.add_argument('--title', type=str, default='', help='Chart title')
    chart_parser.set_defaults(func=_chart_cmd)

    args = parser.parse_args()
    _configure_logging(verbose=args.verbose)
    return cast(int, args.func(parser, args))


def cli_main() -> NoReturn:
    """Entry point for console_scripts; calls main() and exits with its return code."""
    sys.exit(main())


if __name__ == '__main__':
    sys.exit(main())

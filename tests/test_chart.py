"""Tests for chart orchestration and the PostScript and matplotlib surfaces."""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from conftest import JUPITER_TRACE, RecordingSurface, StaticProvider

from ephemeris_charts.chart import draw_chart, output_format, prepare_chart, render_chart
from ephemeris_charts.params import ChartConfig
from ephemeris_charts.rendering.postscript import PostScriptSurface, ps_string
from ephemeris_charts.rendering.projection import CanvasBounds


def test_output_format() -> None:
    """File suffix selects the back end."""
    assert output_format('chart.ps') == 'ps'
    assert output_format('chart.EPS') == 'ps'
    assert output_format(Path('out/chart.png')) == 'mpl'
    assert output_format('chart.svg') == 'mpl'
    with pytest.raises(ValueError, match='Unsupported chart format'):
        output_format('chart.txt')


def test_prepare_chart_autoscales(jupiter_provider: StaticProvider) -> None:
    """Tracks are loaded and the config framed around them."""
    config = ChartConfig(ra0=12.0, dec0=-40.0)
    framed, tracks, frame = prepare_chart(config, [JUPITER_TRACE], jupiter_provider)
    assert len(tracks) == 1
    assert frame.autoscale_succeeded
    assert framed.ra0 == pytest.approx(4.375)
    assert framed.dec0 == pytest.approx(8.75)
    assert framed.projection == 'gnomonic'
    assert config.ra0 == 12.0


def test_prepare_chart_without_autoscale(jupiter_provider: StaticProvider) -> None:
    """With autoscale off the caller's framing is kept."""
    config = ChartConfig(ra0=4.0, dec0=8.0, ephemeris_autoscale=False)
    framed, _, frame = prepare_chart(config, [JUPITER_TRACE], jupiter_provider)
    assert framed is config
    assert frame.autoscale_succeeded


def test_draw_chart_records_frame_track_and_labels(
    jupiter_provider: StaticProvider, recording_surface: RecordingSurface
) -> None:
    """Border, title, track path, ticks and labels are drawn, then the surface finishes."""
    framed, tracks, _ = prepare_chart(
        ChartConfig(title='Jupiter 2020'), [JUPITER_TRACE], jupiter_provider
    )
    placed = draw_chart(framed, tracks, recording_surface)
    assert recording_surface.finished
    assert recording_surface.polylines[0][0] == recording_surface.polylines[0][-1]
    assert len(recording_surface.polylines) >= 2
    texts = [t[2] for t in recording_surface.texts]
    assert texts[0] == 'Jupiter 2020'
    assert 'Jan 2020' in texts
    assert [p.request.text for p in placed] == texts[1:]
    assert len(recording_surface.lines) == 10


def test_ps_string_escapes() -> None:
    """Parentheses, backslashes and degree signs are escaped."""
    assert ps_string('a(b)\\c') == '(a\\(b\\)\\\\c)'
    assert ps_string('50°') == '(50\\260)'


def test_postscript_surface_output() -> None:
    """EPS header, flipped y axis, aligned text and trailer."""
    out = io.StringIO()
    surface = PostScriptSurface(out, CanvasBounds(0.0, 10.0, 0.0, 5.0), title='Test')
    assert surface.to_device(0.0, 5.0) == (36.0, 36.0)
    surface.set_colour((1.0, 0.0, 0.0))
    surface.line(0.0, 0.0, 10.0, 5.0)
    surface.text(5.0, 2.5, 'Jan 2020', 0.7 * 2.54 / 72.0 * 10.0, -1, 1)
    surface.finish()
    text = out.getvalue()
    assert text.startswith('%!PS-Adobe-3.0 EPSF-3.0\n')
    assert '%%Title: Test' in text
    assert '1.000 0.000 0.000 setrgbcolor' in text
    assert 'newpath 36.00 177.73 moveto' in text
    assert '(Jan 2020) -1 1 10.00 177.73 106.87 AT' in text
    assert text.endswith('showpage\n%%Trailer\n%%EOF\n')


def test_render_chart_postscript(tmp_path: Path, jupiter_provider: StaticProvider) -> None:
    """A PostScript chart file is written with the track's labels."""
    path = tmp_path / 'jupiter.eps'
    framed, frame, placed = render_chart(ChartConfig(), [JUPITER_TRACE], path, jupiter_provider)
    content = path.read_text()
    assert content.startswith('%!PS-Adobe-3.0 EPSF-3.0')
    assert content.rstrip().endswith('%%EOF')
    assert '(Jan 2020)' in content
    assert frame.autoscale_succeeded
    assert framed.projection == 'gnomonic'
    assert any(p.request.text == 'Jan 2020' for p in placed)


def test_render_chart_png(tmp_path: Path, jupiter_provider: StaticProvider) -> None:
    """The matplotlib back end writes a PNG."""
    path = tmp_path / 'jupiter.png'
    render_chart(ChartConfig(title='Jupiter'), [JUPITER_TRACE], path, jupiter_provider)
    assert path.read_bytes()[:8] == b'\x89PNG\r\n\x1a\n'


def test_render_chart_rejects_unknown_format(tmp_path: Path) -> None:
    """Unsupported suffixes fail before any ephemeris is fetched."""
    provider = StaticProvider([])
    with pytest.raises(ValueError):
        render_chart(ChartConfig(), [JUPITER_TRACE], tmp_path / 'chart.gif', provider)
    assert provider.specs == []

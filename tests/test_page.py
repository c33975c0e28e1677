"""Tests for the standalone graph iframe page."""

import base64
import hashlib
import re
import xml.etree.ElementTree as ET

import pytest

from graphframe.dataset import Dataset, Point, load_registry, parse_registry
from graphframe.errors import DatasetNotFoundError, GraphError
from graphframe.page import iframe_tag, render_location, render_page, render_site, render_svg


def _sha256(content: str) -> str:
    return base64.b64encode(hashlib.sha256(content.encode('utf-8')).digest()).decode('ascii')


def test_page_structure(registry) -> None:
    html = render_page(registry.resolve('hourly'))
    assert html.startswith('<!DOCTYPE html>')
    assert '<meta name="robots" content="noindex, nofollow">' in html
    assert '<title>Snow depth</title>' in html
    assert 'viewBox="0 0 600 300"' in html
    assert 'preserveAspectRatio="xMinYMin meet"' in html
    assert '<body>' in html


def test_csp_admits_exactly_the_inline_blocks(registry) -> None:
    html = render_page(registry.resolve('hourly'))
    script = re.search(r'<script>(.*?)</script>', html, re.S).group(1)
    style = re.search(r'<style>(.*?)</style>', html, re.S).group(1)
    csp = re.search(r'content="([^"]*)"', html).group(1)

    assert csp.startswith("default-src 'none'")
    assert f"script-src 'sha256-{_sha256(script)}' 'unsafe-inline'" in csp
    assert f"style-src 'sha256-{_sha256(style)}' 'unsafe-inline'" in csp


def test_theme_modes(registry) -> None:
    dataset = registry.resolve('hourly')
    assert '<body class="dark">' in render_page(dataset, mode='dark')
    assert "const themeMode = 'light';" in render_page(dataset, mode='light')
    assert "const themeMode = 'auto';" in render_page(dataset)
    with pytest.raises(ValueError):
        render_page(dataset, mode='sepia')


def test_style_matches_hover_timings(registry) -> None:
    html = render_page(registry.resolve('hourly'))
    assert 'circle.line.hover{fill:steelblue;transition:fill 0.15s}' in html
    assert '.label{opacity:0;transition:opacity 0.15s}' in html


def test_svg_is_well_formed(registry) -> None:
    root = ET.fromstring(render_svg(registry.resolve('yearly'), (800, 400)))
    assert root.tag == '{http://www.w3.org/2000/svg}svg'
    assert root.get('viewBox') == '0 0 800 400'


def test_title_is_escaped() -> None:
    dataset = Dataset(name='x', title='A < B & C', points=(Point(0, 1), Point(60, 2)))
    html = render_page(dataset)
    assert '<title>A &lt; B &amp; C</title>' in html
    assert 'A &lt; B &amp; C</text>' in html


def test_render_location_reads_query(registry) -> None:
    html = render_location(registry, 'iframes/graph.html?yearly')
    assert '<title>Elevation gain</title>' in html
    with pytest.raises(DatasetNotFoundError):
        render_location(registry, 'iframes/graph.html?missing')


def test_render_site_writes_page_per_graph(registry_file, tmp_path) -> None:
    out = tmp_path / 'out'
    written = render_site(load_registry(str(registry_file)), str(out))
    assert sorted(p.name for p in written) == ['hourly.html', 'yearly.html']
    assert (out / 'iframes' / 'hourly.html').read_text(encoding='utf-8').startswith('<!DOCTYPE html>')


def test_render_site_rejects_path_like_names(tmp_path) -> None:
    registry = parse_registry({'../escape': {'points': [{'time': 0, 'value': 1}]}})
    with pytest.raises(GraphError, match='file name'):
        render_site(registry, str(tmp_path))


def test_iframe_tag() -> None:
    assert iframe_tag('iframes/graph.html', 'temps', 400, 200) == (
        '<figure><iframe class="graph" width=400 height=200 '
        'sandbox="allow-same-origin allow-scripts" src="iframes/graph.html?temps"></iframe>\n'
        '</figure>\n'
    )
    assert '<figcaption>Daily high</figcaption>' in iframe_tag('g.html', 't', 1, 1, caption='Daily high')

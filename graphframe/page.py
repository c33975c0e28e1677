"""
Standalone HTML pages for graph iframes.

Each page inlines its stylesheet, a small hover/theme script and the
rendered SVG, and carries a Content-Security-Policy that only admits those
inline blocks by hash.
"""

import logging
from html import escape
from pathlib import Path
from typing import List, Optional, Tuple

from .csp import DEFAULT, NONE, SCRIPT, STYLE, CspBuilder
from .dataset import Dataset, DatasetRegistry, name_from_query
from .errors import GraphError
from .interaction import LABEL_FADE_MS, MARKER_STYLE, NOTE_STYLE
from .render import Layout, render_chart
from .surface import SvgSurface

_logger = logging.getLogger(__name__)

# Subdirectory of the output dir that generated iframe pages go in.
IFRAME_OUT_DIR = 'iframes'

DEFAULT_SIZE = (600, 300)
MODES = ('auto', 'light', 'dark')


def _seconds(ms: int) -> str:
    return f'{ms / 1000:g}s'


def graph_style() -> str:
    """Stylesheet for a graph page, including the dark theme."""
    marker_t = f'fill {_seconds(MARKER_STYLE.leave_ms)}'
    marker_hover_t = f'fill {_seconds(MARKER_STYLE.enter_ms)}'
    note_t = f'fill {_seconds(NOTE_STYLE.leave_ms)},stroke {_seconds(NOTE_STYLE.leave_ms)}'
    note_hover_t = f'fill {_seconds(NOTE_STYLE.enter_ms)},stroke {_seconds(NOTE_STYLE.enter_ms)}'
    return (
        'body{margin:0;overflow:hidden}'
        'svg.graph{background-color:white;display:inline-block;height:100%;position:absolute;width:100%}'
        f'circle.line{{fill:{MARKER_STYLE.idle["fill"]};stroke:steelblue;stroke-width:1.5px;transition:{marker_t}}}'
        f'circle.line.hover{{fill:{MARKER_STYLE.hovered["fill"]};transition:{marker_hover_t}}}'
        'path.line{fill:none;stroke:steelblue;stroke-width:1.5px}'
        f'rect.note{{fill:{NOTE_STYLE.idle["fill"]};shape-rendering:crispEdges;stroke:{NOTE_STYLE.idle["stroke"]};'
        f'stroke-width:1px;transition:{note_t}}}'
        f'rect.note.hover{{fill:{NOTE_STYLE.hovered["fill"]};stroke:{NOTE_STYLE.hovered["stroke"]};'
        f'transition:{note_hover_t}}}'
        'text.title{font-family:Verdana, Helvetica, Arial, sans-serif;font-size:12px}'
        f'.label{{opacity:0;transition:opacity {_seconds(LABEL_FADE_MS)}}}'
        '.label.visible{opacity:1}'
        '.label rect{fill:#fffbe0;shape-rendering:crispEdges;stroke:#d2cfb9;stroke-width:1px}'
        '.label text{font-family:Helvetica, Arial, sans-serif;font-size:11px}'
        '.rule line{shape-rendering:crispEdges;stroke:#eee}'
        '.rule text{font-family:Helvetica, Arial, sans-serif;font-size:10px}'
        'body.dark svg.graph{background-color:#222}'
        'body.dark text{fill:#ccc}'
        'body.dark circle.line{fill:#222}'
        'body.dark .rule line{stroke:#333}'
        'body.dark rect.note{fill:#2a2a2a;stroke:#333}'
        'body.dark rect.note.hover{fill:#333;stroke:#444}'
        'body.dark .label rect{fill:#3a3828;stroke:#5a5740}'
    )


def graph_script(mode: str) -> str:
    """Inline script: applies the theme and toggles hover classes."""
    return f'''const themeMode = '{mode}';

// Adds the 'dark' class to document.body per localStorage and prefers-color-scheme.
function applyTheme() {{
  // Sandboxed frames can't reach localStorage.
  if (!document.domain) return;
  const saved = typeof Storage !== 'undefined' ? localStorage.getItem('theme') : null;
  const dark = saved !== null ? saved === 'dark' : window.matchMedia('(prefers-color-scheme: dark)').matches;
  dark ? document.body.classList.add('dark') : document.body.classList.remove('dark');
}}

// Each marker and note band names its label in data-label.
function wireHover() {{
  document.querySelectorAll('[data-label]').forEach(function(el) {{
    const label = document.getElementById(el.getAttribute('data-label'));
    if (!label) return;
    el.addEventListener('mouseenter', function() {{
      el.classList.add('hover');
      label.classList.add('visible');
    }});
    el.addEventListener('mouseleave', function() {{
      el.classList.remove('hover');
      label.classList.remove('visible');
    }});
  }});
}}

document.addEventListener('DOMContentLoaded', function() {{
  if (themeMode === 'auto') applyTheme();
  wireHover();
}}, false);
'''


def render_svg(dataset: Dataset, size: Tuple[float, float] = DEFAULT_SIZE, layout: Optional[Layout] = None) -> str:
    surface = SvgSurface(size[0], size[1])
    render_chart(dataset, surface, layout)
    return surface.to_string()


def render_page(dataset: Dataset, size: Tuple[float, float] = DEFAULT_SIZE, mode: str = 'auto',
                layout: Optional[Layout] = None) -> str:
    """Return the complete iframe page for one dataset."""
    if mode not in MODES:
        raise ValueError(f'unknown mode {mode!r}; expected one of {", ".join(MODES)}')

    svg = render_svg(dataset, size, layout)
    script = graph_script(mode)
    style = graph_style()

    csp = CspBuilder()
    csp.add(DEFAULT, NONE)
    csp.hash(SCRIPT, script)
    csp.hash(STYLE, style)

    body_class = ' class="dark"' if mode == 'dark' else ''
    return f'''<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  {csp.tag()}
  <meta name="robots" content="noindex, nofollow">
  <title>{escape(dataset.title or 'graph')}</title>
  <script>{script}</script>
  <style>{style}</style>
</head>
<body{body_class}>
  {svg}
</body>
</html>
'''


def render_location(registry: DatasetRegistry, location: str, size: Tuple[float, float] = DEFAULT_SIZE,
                    mode: str = 'auto') -> str:
    """Render the page for the dataset named by the query string of `location`."""
    return render_page(registry.resolve(name_from_query(location)), size, mode)


def render_site(registry: DatasetRegistry, out_dir: str, size: Tuple[float, float] = DEFAULT_SIZE,
                mode: str = 'auto') -> List[Path]:
    """Write one page per dataset to <out_dir>/iframes/<name>.html."""
    written = []
    for name in registry.names():
        if not name or Path(name).name != name:
            raise GraphError(f'graph name {name!r} cannot be used as a file name')
        html = render_page(registry.resolve(name), size, mode)
        output_path = Path(out_dir) / IFRAME_OUT_DIR / f'{name}.html'
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(html, encoding='utf-8')
        _logger.info('Wrote %s', output_path)
        written.append(output_path)
    return written


def iframe_tag(href: str, name: str, width: int, height: int, caption: Optional[str] = None) -> str:
    """<figure> embedding the graph page at `href` for dataset `name`."""
    caption_html = f'<figcaption>{escape(caption)}</figcaption>\n' if caption else ''
    return (
        '<figure>'
        f'<iframe class="graph" width={int(width)} height={int(height)} '
        f'sandbox="allow-same-origin allow-scripts" src="{escape(href)}?{escape(name)}"></iframe>\n'
        f'{caption_html}</figure>\n'
    )

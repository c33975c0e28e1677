"""
Drawing surfaces the chart renderer draws onto.

The renderer only talks to the DrawingSurface interface, so another backend
(a canvas, a GUI scene) can stand in for SvgSurface. Handles returned by the
drawing calls are opaque to the renderer.
"""

import abc
import xml.etree.ElementTree as ET
from collections import defaultdict
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Sequence, Tuple

SVG_NS = 'http://www.w3.org/2000/svg'

# Rough Helvetica metrics, in ems.
CHAR_WIDTH_EM = 0.55
ASCENT_EM = 0.8
LINE_HEIGHT_EM = 1.15


class BBox(NamedTuple):
    x: float
    y: float
    width: float
    height: float


class TransitionRecord(NamedTuple):
    handle: Any
    prop: str
    value: Any
    duration_ms: int


class DrawingSurface(abc.ABC):
    """Retained-mode drawing capability used by ChartRenderer."""

    def __init__(self, width: float, height: float):
        self.width = width
        self.height = height
        self._listeners: Dict[Tuple[int, str], List[Callable[[], None]]] = defaultdict(list)

    @abc.abstractmethod
    def group(self, parent: Any = None, cls: Optional[str] = None, translate: Optional[Tuple[float, float]] = None,
              **attrs) -> Any:
        """Create a container; None parent means the surface root."""

    @abc.abstractmethod
    def rect(self, parent: Any, x: float, y: float, width: float, height: float, cls: Optional[str] = None,
             **attrs) -> Any:
        pass

    @abc.abstractmethod
    def line(self, parent: Any, x1: float, y1: float, x2: float, y2: float, cls: Optional[str] = None,
             **attrs) -> Any:
        pass

    @abc.abstractmethod
    def circle(self, parent: Any, cx: float, cy: float, r: float, cls: Optional[str] = None, **attrs) -> Any:
        pass

    @abc.abstractmethod
    def path(self, parent: Any, points: Sequence[Tuple[float, float]], cls: Optional[str] = None,
             **attrs) -> Any:
        """Open polyline through `points` in order."""

    @abc.abstractmethod
    def text(self, parent: Any, x: float, y: float, content: str, cls: Optional[str] = None,
             anchor: Optional[str] = None, font_size: float = 11, **attrs) -> Any:
        pass

    @abc.abstractmethod
    def set_attrs(self, handle: Any, **attrs) -> None:
        pass

    @abc.abstractmethod
    def measure_text(self, handle: Any) -> Optional[BBox]:
        """Bounding box of a text handle, or None if it cannot be measured."""

    @abc.abstractmethod
    def transition(self, handle: Any, prop: str, value: Any, duration_ms: int) -> None:
        """Animate a style property towards `value`, replacing any transition in flight."""

    def listen(self, handle: Any, event: str, callback: Callable[[], None]) -> None:
        """Call `callback` whenever `event` ('pointerenter' or 'pointerleave') hits `handle`."""
        self._listeners[(id(handle), event)].append(callback)

    def dispatch(self, handle: Any, event: str) -> None:
        """Deliver a pointer event to the listeners of `handle`."""
        for callback in list(self._listeners.get((id(handle), event), ())):
            callback()


def _num(v: float) -> str:
    """Compact attribute number: 12 rather than 12.0, at most three decimals."""
    s = f'{v:.3f}'.rstrip('0').rstrip('.')
    return '0' if s == '-0' else s


def _attr(v: Any) -> str:
    if isinstance(v, bool):
        return 'true' if v else 'false'
    if isinstance(v, (int, float)):
        return _num(v)
    return str(v)


class SvgSurface(DrawingSurface):
    """Builds an SVG document tree with ElementTree."""

    def __init__(self, width: float, height: float, cls: str = 'graph'):
        super().__init__(width, height)
        self.root = ET.Element('svg', {
            'xmlns': SVG_NS,
            # Scales with the frame: https://stackoverflow.com/questions/16265123.
            'preserveAspectRatio': 'xMinYMin meet',
            'viewBox': f'0 0 {_num(width)} {_num(height)}',
            'class': cls,
        })
        self.transitions: List[TransitionRecord] = []
        self._font_sizes: Dict[ET.Element, float] = {}

    def _add(self, parent: Optional[ET.Element], tag: str, cls: Optional[str], attrs: Dict[str, Any]) -> ET.Element:
        el = ET.SubElement(self.root if parent is None else parent, tag)
        if cls:
            el.set('class', cls)
        self.set_attrs(el, **attrs)
        return el

    def group(self, parent=None, cls=None, translate=None, **attrs):
        if translate is not None:
            attrs['transform'] = f'translate({_num(translate[0])},{_num(translate[1])})'
        return self._add(parent, 'g', cls, attrs)

    def rect(self, parent, x, y, width, height, cls=None, **attrs):
        return self._add(parent, 'rect', cls, dict(attrs, x=x, y=y, width=width, height=height))

    def line(self, parent, x1, y1, x2, y2, cls=None, **attrs):
        return self._add(parent, 'line', cls, dict(attrs, x1=x1, y1=y1, x2=x2, y2=y2))

    def circle(self, parent, cx, cy, r, cls=None, **attrs):
        return self._add(parent, 'circle', cls, dict(attrs, cx=cx, cy=cy, r=r))

    def path(self, parent, points, cls=None, **attrs):
        d = 'L'.join(f'{_num(x)},{_num(y)}' for x, y in points)
        return self._add(parent, 'path', cls, dict(attrs, d=f'M{d}' if d else ''))

    def text(self, parent, x, y, content, cls=None, anchor=None, font_size=11, **attrs):
        if anchor:
            attrs['text-anchor'] = anchor
        el = self._add(parent, 'text', cls, dict(attrs, x=x, y=y))
        el.text = content
        self._font_sizes[el] = font_size
        return el

    def set_attrs(self, handle, **attrs):
        for key, value in attrs.items():
            if value is None:
                continue
            handle.set(key.replace('_', '-'), _attr(value))

    def measure_text(self, handle):
        if handle.tag != 'text' or not handle.text or handle not in self._font_sizes:
            return None
        size = self._font_sizes[handle]
        width = len(handle.text) * size * CHAR_WIDTH_EM
        x = float(handle.get('x', 0))
        y = float(handle.get('y', 0))
        anchor = handle.get('text-anchor', 'start')
        if anchor == 'middle':
            x -= width / 2
        elif anchor == 'end':
            x -= width
        return BBox(x, y - size * ASCENT_EM, width, size * LINE_HEIGHT_EM)

    def transition(self, handle, prop, value, duration_ms):
        # Static output has no timeline; keep the final value and remember the request.
        self.transitions.append(TransitionRecord(handle, prop, value, duration_ms))
        styles = _parse_style(handle.get('style', ''))
        styles[prop] = _attr(value)
        handle.set('style', ';'.join(f'{k}:{v}' for k, v in styles.items()))

    def style_of(self, handle: ET.Element, prop: str) -> Optional[str]:
        return _parse_style(handle.get('style', '')).get(prop)

    def to_string(self) -> str:
        return ET.tostring(self.root, encoding='unicode', short_empty_elements=True)


def _parse_style(style: str) -> Dict[str, str]:
    out = {}
    for decl in style.split(';'):
        if ':' in decl:
            k, v = decl.split(':', 1)
            out[k.strip()] = v.strip()
    return out

"""
Chart rendering for a single dataset.

ChartRenderer draws, in paint order: title, annotation bands, time rules,
value rules, the data line, point markers, and finally the hover labels for
notes and points. Labels start hidden and are positioned by reflow() once
their text can be measured.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from .dataset import Dataset
from .errors import GraphError
from .interaction import MARKER_STYLE, NOTE_STYLE, Interaction
from .scale import Scales, build_scales
from .surface import DrawingSurface
from .ticks import Granularity, Tick, axis_ticks, choose_granularity
from .timefmt import format_time, format_value

_logger = logging.getLogger(__name__)

VALUE_TICK_COUNT = 10


@dataclass(frozen=True)
class Layout:
    edge_padding: float = 20
    x_axis_space: float = 15
    y_axis_space: float = 20
    title_space: float = 20
    title_offset: float = 5
    label_padding_x: float = 5
    label_padding_y: float = 3
    data_label_spacing: float = 15
    note_label_spacing: float = 20
    note_width: float = 6
    marker_radius: float = 3.5
    title_font: float = 12
    label_font: float = 11
    rule_font: float = 10

    def plot_size(self, size: Tuple[float, float]) -> Tuple[float, float]:
        """Width and height left for the plot inside a viewport of `size`."""
        width = size[0] - 2 * self.edge_padding - self.y_axis_space
        height = size[1] - 2 * self.edge_padding - self.x_axis_space - self.title_space
        if width <= 0 or height <= 0:
            raise GraphError(f'viewport {size[0]}x{size[1]} is too small to hold a graph')
        return width, height

    def plot_origin(self) -> Tuple[float, float]:
        return self.edge_padding + self.y_axis_space, self.edge_padding + self.title_space


@dataclass(frozen=True)
class RenderContext:
    """Everything derived from the dataset and viewport, computed once."""
    dataset: Dataset
    size: Tuple[float, float]
    layout: Layout
    plot_width: float
    plot_height: float
    scales: Scales
    granularity: Granularity
    ticks: Tuple[Tick, ...]

    @classmethod
    def build(cls, dataset: Dataset, size: Tuple[float, float], layout: Optional[Layout] = None) -> 'RenderContext':
        layout = layout or Layout()
        width, height = layout.plot_size(size)
        scales = build_scales(dataset.points, dataset.value_range, width, height)
        granularity = choose_granularity(scales.max_time - scales.min_time)
        ticks = tuple(axis_ticks(scales.min_time, scales.max_time, granularity))
        _logger.debug('%s: %dx%d plot, %s ticks %s', dataset.name, width, height, granularity.value,
                      [t.label for t in ticks])
        return cls(dataset=dataset, size=(size[0], size[1]), layout=layout, plot_width=width,
                   plot_height=height, scales=scales, granularity=granularity, ticks=ticks)

    def format_time(self, instant: int, for_ticks: bool = False) -> str:
        return format_time(instant, self.granularity, for_ticks)


def clamp_label_x(x: float, label_width: float, plot_width: float) -> float:
    """Keep a centered label of `label_width` inside [0, plot_width].

    A label wider than the plot is pinned to its left edge.
    """
    half = 0.5 * label_width
    return max(half, min(plot_width - half, x))


@dataclass
class Label:
    id: str
    group: Any
    box: Any
    text: Any
    anchor_x: float
    interaction: Interaction
    hidden: bool = False


@dataclass
class ChartRenderer:
    context: RenderContext
    surface: DrawingSurface
    note_interactions: List[Interaction] = field(default_factory=list)
    point_interactions: List[Interaction] = field(default_factory=list)
    labels: List[Label] = field(default_factory=list)
    vis: Any = None

    def render(self) -> DrawingSurface:
        """Draw the whole chart onto the surface. Call once."""
        ctx = self.context
        origin = ctx.layout.plot_origin()
        self.vis = self.surface.group(translate=origin)
        self._draw_title()
        self._draw_notes()
        self._draw_time_rules()
        self._draw_value_rules()
        self._draw_line()
        self._draw_markers()
        self._draw_note_labels()
        self._draw_data_labels()
        self.reflow()
        return self.surface

    def _draw_title(self) -> None:
        ctx = self.context
        self.surface.text(self.vis, 0.5 * ctx.plot_width - ctx.layout.y_axis_space,
                          -(ctx.layout.title_space - ctx.layout.title_offset), ctx.dataset.title,
                          cls='title', anchor='middle', font_size=ctx.layout.title_font)

    def _draw_notes(self) -> None:
        ctx = self.context
        half = 0.5 * ctx.layout.note_width
        for note in ctx.dataset.notes:
            band = self.surface.rect(self.vis, ctx.scales.x(note.time) - half, 0, ctx.layout.note_width,
                                     ctx.plot_height, cls='note')
            interaction = Interaction(self.surface, band, NOTE_STYLE)
            interaction.attach()
            self.note_interactions.append(interaction)

    def _draw_time_rules(self) -> None:
        ctx = self.context
        for tick in ctx.ticks:
            x = ctx.scales.x(tick.instant)
            rule = self.surface.group(self.vis, cls='rule')
            self.surface.line(rule, x, 0, x, ctx.plot_height - 1)
            self.surface.text(rule, x, ctx.plot_height + 15, tick.label, anchor='middle', dy='.71em',
                              font_size=ctx.layout.rule_font)

    def _draw_value_rules(self) -> None:
        ctx = self.context
        y_scale = ctx.scales.y
        fmt = y_scale.tick_format(VALUE_TICK_COUNT)
        for value in y_scale.ticks(VALUE_TICK_COUNT):
            y = y_scale(value)
            rule = self.surface.group(self.vis, cls='rule')
            self.surface.line(rule, 0, y, ctx.plot_width + 1, y)
            self.surface.text(rule, -10, y, fmt(value), anchor='end', dy='.35em', font_size=ctx.layout.rule_font)

    def _draw_line(self) -> None:
        ctx = self.context
        coords = [(ctx.scales.x(p.time), ctx.scales.y(p.value)) for p in ctx.dataset.points]
        self.surface.path(self.vis, coords, cls='line', pointer_events='none')

    def _draw_markers(self) -> None:
        ctx = self.context
        for p in ctx.dataset.points:
            marker = self.surface.circle(self.vis, ctx.scales.x(p.time), ctx.scales.y(p.value),
                                         ctx.layout.marker_radius, cls='line')
            interaction = Interaction(self.surface, marker, MARKER_STYLE)
            interaction.attach()
            self.point_interactions.append(interaction)

    def _add_label(self, cls: str, label_id: str, content: str, x: float, y: float,
                   interaction: Interaction) -> None:
        group = self.surface.group(self.vis, cls=f'{cls} label', id=label_id, pointer_events='none', opacity=0)
        box = self.surface.rect(group, 0, 0, 0, 0)
        text = self.surface.text(group, x, y, content, anchor='middle', font_size=self.context.layout.label_font)
        interaction.label = group
        self.labels.append(Label(label_id, group, box, text, x, interaction))

    def _draw_note_labels(self) -> None:
        ctx = self.context
        for i, (note, interaction) in enumerate(zip(ctx.dataset.notes, self.note_interactions)):
            content = f'{ctx.format_time(note.time)}: {note.text}'
            self._add_label('noteLabel', f'note-label-{i}', content, ctx.scales.x(note.time),
                            ctx.layout.note_label_spacing, interaction)

    def _draw_data_labels(self) -> None:
        ctx = self.context
        units = f' {ctx.dataset.units}' if ctx.dataset.units else ''
        for i, (p, interaction) in enumerate(zip(ctx.dataset.points, self.point_interactions)):
            content = f'{ctx.format_time(p.time)}: {format_value(p.value)}{units}'
            self._add_label('dataLabel', f'data-label-{i}', content, ctx.scales.x(p.time),
                            ctx.scales.y(p.value) - ctx.layout.data_label_spacing, interaction)

    def reflow(self) -> None:
        """Position every label from its measured text. Safe to call again after fonts change."""
        for label in self.labels:
            if not label.hidden:
                self._place(label)

    def _place(self, label: Label) -> None:
        layout = self.context.layout
        bbox = self.surface.measure_text(label.text)
        if bbox is not None:
            self.surface.set_attrs(label.text, x=clamp_label_x(label.anchor_x, bbox.width, self.context.plot_width))
            bbox = self.surface.measure_text(label.text)
        if bbox is None:
            label.hidden = True
            label.interaction.hide_label()
            return
        self.surface.set_attrs(label.box,
                               x=bbox.x - layout.label_padding_x,
                               y=bbox.y - layout.label_padding_y,
                               width=bbox.width + 2 * layout.label_padding_x,
                               height=bbox.height + 2 * layout.label_padding_y)
        self.surface.set_attrs(label.interaction.target, data_label=label.id)


def render_chart(dataset: Dataset, surface: DrawingSurface, layout: Optional[Layout] = None) -> ChartRenderer:
    """Build the render context for `dataset` sized to `surface` and draw it."""
    context = RenderContext.build(dataset, (surface.width, surface.height), layout)
    renderer = ChartRenderer(context, surface)
    renderer.render()
    return renderer

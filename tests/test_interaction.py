"""Tests for the per-element hover state machine."""

from graphframe.interaction import MARKER_STYLE, NOTE_STYLE, HoverState, Interaction
from graphframe.surface import SvgSurface


def _interaction(style=MARKER_STYLE):
    surface = SvgSurface(200, 100)
    target = surface.circle(None, 10, 10, 3.5, cls='line')
    label = surface.group(None, cls='dataLabel label', opacity=0)
    interaction = Interaction(surface, target, style, label=label)
    interaction.attach()
    return surface, interaction


def test_starts_idle_with_hidden_label() -> None:
    _, interaction = _interaction()
    assert interaction.state is HoverState.IDLE
    assert not interaction.label_visible


def test_enter_emphasizes_marker_and_fades_label_in() -> None:
    surface, interaction = _interaction()
    surface.dispatch(interaction.target, 'pointerenter')

    assert interaction.state is HoverState.HOVERED
    assert interaction.label_visible
    assert surface.style_of(interaction.target, 'fill') == 'steelblue'
    assert surface.style_of(interaction.label, 'opacity') == '1'
    assert [(t.prop, t.duration_ms) for t in surface.transitions] == [('fill', 150), ('opacity', 150)]


def test_leave_reverts_slower_than_label_fades() -> None:
    surface, interaction = _interaction()
    surface.dispatch(interaction.target, 'pointerenter')
    surface.transitions.clear()
    surface.dispatch(interaction.target, 'pointerleave')

    assert interaction.state is HoverState.IDLE
    assert not interaction.label_visible
    assert surface.style_of(interaction.target, 'fill') == 'white'
    assert surface.style_of(interaction.label, 'opacity') == '0'
    assert [(t.prop, t.duration_ms) for t in surface.transitions] == [('fill', 300), ('opacity', 150)]


def test_note_band_changes_fill_and_stroke() -> None:
    surface, interaction = _interaction(NOTE_STYLE)
    surface.dispatch(interaction.target, 'pointerenter')
    assert surface.style_of(interaction.target, 'fill') == '#eee'
    assert surface.style_of(interaction.target, 'stroke') == '#ddd'
    surface.dispatch(interaction.target, 'pointerleave')
    assert surface.style_of(interaction.target, 'fill') == '#f5f5f5'
    assert surface.style_of(interaction.target, 'stroke') == '#eee'


def test_latest_event_wins() -> None:
    surface, interaction = _interaction()
    for event in ('pointerenter', 'pointerleave', 'pointerenter'):
        surface.dispatch(interaction.target, event)
    assert interaction.state is HoverState.HOVERED
    assert interaction.targets[('target', 'fill')] == 'steelblue'
    assert surface.style_of(interaction.label, 'opacity') == '1'


def test_repeated_enter_is_idempotent() -> None:
    surface, interaction = _interaction()
    surface.dispatch(interaction.target, 'pointerenter')
    surface.dispatch(interaction.target, 'pointerenter')
    assert interaction.state is HoverState.HOVERED
    assert surface.style_of(interaction.label, 'opacity') == '1'


def test_hidden_label_is_never_revealed() -> None:
    surface, interaction = _interaction()
    label = interaction.label
    interaction.hide_label()
    surface.dispatch(interaction.target, 'pointerenter')

    assert interaction.label is None
    assert not interaction.label_visible
    assert surface.style_of(label, 'opacity') == '0'
    assert surface.style_of(interaction.target, 'fill') == 'steelblue'

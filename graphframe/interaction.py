"""Per-element hover state for point markers and annotation bands."""

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from .surface import DrawingSurface

_logger = logging.getLogger(__name__)

ENTER_MS = 150
LEAVE_MS = 300
LABEL_FADE_MS = 150


class HoverState(enum.Enum):
    IDLE = 'idle'
    HOVERED = 'hovered'


@dataclass(frozen=True)
class HoverStyle:
    idle: Dict[str, str]
    hovered: Dict[str, str]
    enter_ms: int = ENTER_MS
    leave_ms: int = LEAVE_MS
    label_ms: int = LABEL_FADE_MS


MARKER_STYLE = HoverStyle(idle={'fill': 'white'}, hovered={'fill': 'steelblue'})
NOTE_STYLE = HoverStyle(idle={'fill': '#f5f5f5', 'stroke': '#eee'},
                        hovered={'fill': '#eee', 'stroke': '#ddd'})


@dataclass
class Interaction:
    """Hover state of one marker or band and the label it reveals.

    Every pointer event issues fresh transitions for all affected properties,
    so a quick enter/leave sequence always settles on the latest event.
    """
    surface: DrawingSurface
    target: Any
    style: HoverStyle
    label: Any = None
    state: HoverState = HoverState.IDLE
    # Latest requested value per (role, property).
    targets: Dict[Tuple[str, str], Any] = field(default_factory=dict)

    def attach(self) -> None:
        self.surface.listen(self.target, 'pointerenter', self.enter)
        self.surface.listen(self.target, 'pointerleave', self.leave)

    @property
    def label_visible(self) -> bool:
        return self.targets.get(('label', 'opacity'), 0) == 1

    def enter(self) -> None:
        self.state = HoverState.HOVERED
        for prop, value in self.style.hovered.items():
            self._set('target', self.target, prop, value, self.style.enter_ms)
        self._show_label(1)

    def leave(self) -> None:
        self.state = HoverState.IDLE
        for prop, value in self.style.idle.items():
            self._set('target', self.target, prop, value, self.style.leave_ms)
        self._show_label(0)

    def hide_label(self) -> None:
        """Detach a label that could not be laid out; hovering no longer reveals it."""
        if self.label is None:
            return
        _logger.debug('Hiding unplaceable label on %r', self.target)
        self._set('label', self.label, 'opacity', 0, self.style.label_ms)
        self.label = None

    def _show_label(self, opacity: int) -> None:
        if self.label is not None:
            self._set('label', self.label, 'opacity', opacity, self.style.label_ms)

    def _set(self, role: str, handle: Any, prop: str, value: Any, duration_ms: int) -> None:
        self.targets[(role, prop)] = value
        self.surface.transition(handle, prop, value, duration_ms)

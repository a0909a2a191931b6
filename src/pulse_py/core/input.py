"""Input handling for the drawing surface and the colour picker handle.

Pointer events and legacy touch events are two entry points into the same
state machine: a tap on the surface spawns a pulse, a drag on the picker
handle moves it, and a near-stationary drag opens the colour selection.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from pulse_py.core.color import random_color

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from pulse_py.core.animation import Surface

logger = structlog.get_logger(__name__)

PICKER_RADIUS = 20.0
PICKER_MARGIN = 24.0
# Drags shorter than this (css px) count as a tap on the handle.
TAP_THRESHOLD = 3.0


@dataclass(frozen=True)
class TouchPoint:
    """One entry of a touch list.

    Attributes:
        identifier: Stable id of the touch for its lifetime.
        x: Position in css pixels relative to the surface.
        y: Position in css pixels relative to the surface.
    """

    identifier: int
    x: float
    y: float


@dataclass
class ColorPicker:
    """Draggable colour picker handle.

    Attributes:
        color: Currently selected ``#rrggbb`` colour.
        radius: Handle radius in css pixels.
        margin: Default distance from the surface corner.
        x: Handle centre x, None until first positioned.
        y: Handle centre y, None until first positioned.
    """

    color: str = ""
    radius: float = PICKER_RADIUS
    margin: float = PICKER_MARGIN
    x: float | None = None
    y: float | None = None

    def __post_init__(self) -> None:
        """Start with a random visible colour when none is given."""
        if not self.color:
            self.color = random_color()

    def reposition(self, surface: Surface) -> None:
        """Place the handle bottom-left by default and clamp it on screen."""
        if self.x is None or self.y is None:
            self.x = self.margin + self.radius
            self.y = surface.css_height - (self.margin + self.radius)
        self.x = min(max(self.radius, self.x), max(self.radius, surface.css_width - self.radius))
        self.y = min(max(self.radius, self.y), max(self.radius, surface.css_height - self.radius))

    def contains(self, x: float, y: float) -> bool:
        """Whether a css-pixel position falls on the handle."""
        if self.x is None or self.y is None:
            return False
        return math.hypot(x - self.x, y - self.y) <= self.radius


@dataclass
class _Drag:
    pointer_id: int
    start_x: float
    start_y: float
    pointer_start_x: float
    pointer_start_y: float


class InputController:
    """Reduces pointer and touch events to pulse spawns and picker drags."""

    def __init__(
        self,
        surface: Surface,
        picker: ColorPicker,
        on_pulse: Callable[[float, float, str], object],
        on_open_picker: Callable[[], object] | None = None,
        *,
        tap_threshold: float = TAP_THRESHOLD,
    ) -> None:
        """Initialize the controller.

        Args:
            surface: Surface used to normalize tap positions.
            picker: The colour picker handle.
            on_pulse: Called with (norm_x, norm_y, color) for every surface tap.
            on_open_picker: Called when the handle is tapped rather than dragged.
            tap_threshold: Maximum handle travel (css px) still treated as a tap.
        """
        self.surface = surface
        self.picker = picker
        self._on_pulse = on_pulse
        self._on_open_picker = on_open_picker
        self._tap_threshold = tap_threshold
        self._drag: _Drag | None = None
        self.picker.reposition(surface)

    @property
    def is_dragging(self) -> bool:
        """Whether a picker drag is in progress."""
        return self._drag is not None

    @property
    def active_pointer(self) -> int | None:
        """Identifier of the pointer or touch driving the drag."""
        return self._drag.pointer_id if self._drag else None

    def resize(self, css_width: float, css_height: float, device_ratio: float | None = None) -> None:
        """Resize the surface and keep the handle within it."""
        self.surface.resize(css_width, css_height, device_ratio)
        self.picker.reposition(self.surface)

    # Surface taps

    def surface_pointer_down(self, x: float, y: float, *, on_surface: bool | None = None) -> bool:
        """Handle a pointer press on the drawing surface.

        ``on_surface`` reports whether the event targeted the surface itself;
        when omitted, presses on the picker handle are treated as off-surface.
        """
        if on_surface is None:
            on_surface = not self.picker.contains(x, y)
        if self.is_dragging or not on_surface:
            return False
        self._tap(x, y)
        return True

    def surface_touch_start(self, touches: Sequence[TouchPoint], *, on_surface: bool | None = None) -> bool:
        """Handle a touch start on the drawing surface; only the first touch counts."""
        if self.is_dragging or not touches:
            return False
        first = touches[0]
        if on_surface is None:
            on_surface = not self.picker.contains(first.x, first.y)
        if not on_surface:
            return False
        self._tap(first.x, first.y)
        return True

    def _tap(self, x: float, y: float) -> None:
        norm_x, norm_y = self.surface.normalize(x, y)
        self._on_pulse(norm_x, norm_y, self.picker.color)

    # Picker drag, pointer family

    def picker_pointer_down(self, pointer_id: int, x: float, y: float) -> bool:
        """Begin dragging the handle with a pointer."""
        return self._start_drag(pointer_id, x, y)

    def picker_pointer_move(self, pointer_id: int, x: float, y: float) -> bool:
        """Move the handle if ``pointer_id`` owns the drag."""
        if not self._owns(pointer_id):
            return False
        self._move_drag(x, y)
        return True

    def picker_pointer_up(self, pointer_id: int) -> bool:
        """Finish the drag; a short drag opens the colour selection."""
        if not self._owns(pointer_id):
            return False
        self._end_drag(open_picker=True)
        return True

    def picker_pointer_cancel(self, pointer_id: int) -> bool:
        """Abort the drag without opening the colour selection."""
        if not self._owns(pointer_id):
            return False
        self._end_drag(open_picker=False)
        return True

    # Picker drag, touch family

    def picker_touch_start(self, touches: Sequence[TouchPoint]) -> bool:
        """Begin dragging the handle with the first touch."""
        if not touches:
            return False
        first = touches[0]
        return self._start_drag(first.identifier, first.x, first.y)

    def picker_touch_move(self, touches: Sequence[TouchPoint]) -> bool:
        """Move the handle using the touch that owns the drag."""
        touch = self._find_touch(touches)
        if touch is None:
            return False
        self._move_drag(touch.x, touch.y)
        return True

    def picker_touch_end(self, changed_touches: Sequence[TouchPoint]) -> bool:
        """Finish the drag when the owning touch lifts."""
        if self._find_touch(changed_touches) is None:
            return False
        self._end_drag(open_picker=True)
        return True

    def picker_touch_cancel(self) -> bool:
        """Abort any active touch drag."""
        if not self.is_dragging:
            return False
        self._end_drag(open_picker=False)
        return True

    def set_color(self, color: str) -> None:
        """Apply a colour chosen through the selection affordance."""
        self.picker.color = color

    def _owns(self, pointer_id: int) -> bool:
        return self._drag is not None and self._drag.pointer_id == pointer_id

    def _find_touch(self, touches: Sequence[TouchPoint]) -> TouchPoint | None:
        if self._drag is None:
            return None
        for touch in touches:
            if touch.identifier == self._drag.pointer_id:
                return touch
        return None

    def _start_drag(self, pointer_id: int, x: float, y: float) -> bool:
        if self._drag is not None:
            return False
        self.picker.reposition(self.surface)
        self._drag = _Drag(
            pointer_id=pointer_id,
            start_x=self.picker.x or 0.0,
            start_y=self.picker.y or 0.0,
            pointer_start_x=x,
            pointer_start_y=y,
        )
        return True

    def _move_drag(self, x: float, y: float) -> None:
        drag = self._drag
        if drag is None:
            return
        self.picker.x = drag.start_x + (x - drag.pointer_start_x)
        self.picker.y = drag.start_y + (y - drag.pointer_start_y)
        self.picker.reposition(self.surface)

    def _end_drag(self, *, open_picker: bool) -> None:
        drag = self._drag
        if drag is None:
            return
        moved = math.hypot((self.picker.x or 0.0) - drag.start_x, (self.picker.y or 0.0) - drag.start_y)
        self._drag = None
        if open_picker and moved < self._tap_threshold and self._on_open_picker is not None:
            logger.debug("Opening colour selection", color=self.picker.color)
            self._on_open_picker()

"""Per-frame pulse animation: surface geometry, frame clock and the pulse field.

The field is owned by a single cooperative loop. Spawning (from input or from
the network) and stepping never run concurrently, so no locking is involved.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pulse_py.core.color import RGB, parse_hex_color
from pulse_py.core.models import GRADIENT_STOPS, MAX_FRAME_STEP, Pulse, clamp_unit

if TYPE_CHECKING:
    from collections.abc import Iterator


@dataclass
class Surface:
    """Drawing surface geometry.

    Drawing happens in css (resolution independent) units; the backing store is
    ``css * device_ratio`` physical pixels, mapped via :attr:`transform`.

    Attributes:
        css_width: Viewport width in css pixels.
        css_height: Viewport height in css pixels.
        device_ratio: Physical pixels per css pixel.
    """

    css_width: float
    css_height: float
    device_ratio: float = 1.0

    @property
    def pixel_width(self) -> int:
        """Backing-store width in physical pixels."""
        return round(self.css_width * self.device_ratio)

    @property
    def pixel_height(self) -> int:
        """Backing-store height in physical pixels."""
        return round(self.css_height * self.device_ratio)

    @property
    def transform(self) -> tuple[float, float, float, float, float, float]:
        """Affine transform (a, b, c, d, e, f) from css units to physical pixels."""
        return (self.device_ratio, 0.0, 0.0, self.device_ratio, 0.0, 0.0)

    def resize(self, css_width: float, css_height: float, device_ratio: float | None = None) -> None:
        """Re-derive the surface from new viewport dimensions."""
        self.css_width = css_width
        self.css_height = css_height
        if device_ratio is not None:
            self.device_ratio = device_ratio or 1.0

    def normalize(self, x: float, y: float) -> tuple[float, float]:
        """Convert a css-pixel position to normalized coordinates.

        Normalization is against the backing store so pulses land on the same
        spot on every device.
        """
        width = self.pixel_width or 1
        height = self.pixel_height or 1
        return (x * self.device_ratio) / width, (y * self.device_ratio) / height

    def to_css(self, norm_x: float, norm_y: float) -> tuple[float, float]:
        """Map normalized coordinates to a css-pixel position on the surface.

        Coordinates are clamped first, so the result is always within bounds.
        """
        return clamp_unit(norm_x) * self.css_width, clamp_unit(norm_y) * self.css_height


@dataclass
class FrameClock:
    """Produces clamped per-frame time steps from a monotonic timestamp."""

    max_step: float = MAX_FRAME_STEP
    _last: float | None = field(default=None, init=False, repr=False)

    def tick(self, now: float) -> float:
        """Return seconds elapsed since the previous tick, capped at ``max_step``."""
        if self._last is None:
            self._last = now
            return 0.0
        delta = max(0.0, now - self._last)
        self._last = now
        return min(delta, self.max_step)


@dataclass(frozen=True)
class PulseSprite:
    """A resolved draw instruction for one pulse in one frame.

    Attributes:
        x: Centre x in css pixels.
        y: Centre y in css pixels.
        radius: Gradient radius in css pixels.
        alpha: Global opacity applied to the gradient.
        rgb: Gradient colour.
        stops: Gradient (offset, opacity) stops.
    """

    x: float
    y: float
    radius: float
    alpha: float
    rgb: RGB
    stops: tuple[tuple[float, float], ...] = GRADIENT_STOPS


def gradient_alpha(offset: float, stops: tuple[tuple[float, float], ...] = GRADIENT_STOPS) -> float:
    """Interpolate the gradient opacity at ``offset`` (0 = centre, 1 = edge)."""
    offset = clamp_unit(offset)
    previous_offset, previous_alpha = stops[0]
    if offset <= previous_offset:
        return previous_alpha
    for stop_offset, stop_alpha in stops[1:]:
        if offset <= stop_offset:
            span = stop_offset - previous_offset
            t = (offset - previous_offset) / span if span else 1.0
            return previous_alpha + (stop_alpha - previous_alpha) * t
        previous_offset, previous_alpha = stop_offset, stop_alpha
    return previous_alpha


class PulseField:
    """The collection of active pulses on one surface."""

    def __init__(self, surface: Surface) -> None:
        """Initialize an empty field.

        Args:
            surface: The surface pulses are resolved against.
        """
        self.surface = surface
        self._pulses: list[Pulse] = []

    def spawn(self, norm_x: float, norm_y: float, color: str | RGB) -> Pulse:
        """Add a new pulse at normalized coordinates.

        Args:
            norm_x: Horizontal position, clamped to [0, 1].
            norm_y: Vertical position, clamped to [0, 1].
            color: ``#rrggbb`` string or RGB triple.

        Returns:
            The spawned pulse.

        Raises:
            InvalidColorError: If ``color`` cannot be decoded.
        """
        rgb = color if isinstance(color, RGB) else parse_hex_color(color)
        pulse = Pulse(norm_x=clamp_unit(norm_x), norm_y=clamp_unit(norm_y), rgb=rgb)
        self._pulses.append(pulse)
        return pulse

    def step(self, delta: float) -> list[PulseSprite]:
        """Advance all pulses and return draw instructions for the survivors.

        A pulse whose normalized age reaches 1 is removed in this step and not
        drawn.

        Args:
            delta: Elapsed seconds for this frame (already clamped).

        Returns:
            Sprites in spawn order.
        """
        sprites: list[PulseSprite] = []
        survivors: list[Pulse] = []
        for pulse in self._pulses:
            pulse.advance(delta)
            if pulse.expired:
                continue
            survivors.append(pulse)
            x, y = self.surface.to_css(pulse.norm_x, pulse.norm_y)
            sprites.append(PulseSprite(x=x, y=y, radius=pulse.radius, alpha=pulse.alpha, rgb=pulse.rgb))
        self._pulses = survivors
        return sprites

    def clear(self) -> None:
        """Remove all pulses."""
        self._pulses.clear()

    @property
    def pulses(self) -> list[Pulse]:
        """Snapshot of the active pulses."""
        return list(self._pulses)

    def __len__(self) -> int:
        return len(self._pulses)

    def __iter__(self) -> Iterator[Pulse]:
        return iter(list(self._pulses))

"""Core domain models for pulse-py animation."""

from __future__ import annotations

import math
from dataclasses import dataclass

from pulse_py.core.color import RGB

# Peak opacity of a pulse, reached at half its lifetime.
MAX_PULSE_ALPHA = 0.22
# Radius growth in css pixels per second.
GROWTH_RATE = 420.0
# Seconds a pulse stays on screen.
PULSE_LIFETIME = 1.4
# Longest frame step; larger gaps (backgrounded tab, slow frame) are clamped.
MAX_FRAME_STEP = 0.05
# Opacity of the black overlay painted every frame to leave fading trails.
TRAIL_FADE_ALPHA = 0.05
# Radial gradient stops as (offset, opacity) pairs, centre to edge.
GRADIENT_STOPS: tuple[tuple[float, float], ...] = ((0.0, 0.9), (0.4, 0.5), (1.0, 0.0))


def clamp_unit(value: float) -> float:
    """Clamp a value to the closed interval [0, 1]."""
    return max(0.0, min(1.0, float(value)))


@dataclass
class Pulse:
    """An expanding, fading circle anchored at a normalized point.

    Attributes:
        norm_x: Horizontal origin as a fraction of surface width.
        norm_y: Vertical origin as a fraction of surface height.
        rgb: Pulse colour.
        radius: Current radius in css pixels.
        age: Seconds since the pulse was spawned.
        lifetime: Seconds until the pulse expires.
        growth_rate: Radius growth in css pixels per second.
        max_alpha: Opacity at the middle of the lifetime.
    """

    norm_x: float
    norm_y: float
    rgb: RGB
    radius: float = 0.0
    age: float = 0.0
    lifetime: float = PULSE_LIFETIME
    growth_rate: float = GROWTH_RATE
    max_alpha: float = MAX_PULSE_ALPHA

    @property
    def life_fraction(self) -> float:
        """Normalized age in [0, 1]."""
        return min(1.0, self.age / self.lifetime)

    @property
    def alpha(self) -> float:
        """Bell-shaped opacity: zero at birth and death, peak at mid-life."""
        return self.max_alpha * math.sin(math.pi * self.life_fraction)

    @property
    def expired(self) -> bool:
        """Whether the pulse has reached the end of its lifetime."""
        return self.life_fraction >= 1.0

    def advance(self, delta: float) -> None:
        """Advance age and radius by ``delta`` seconds."""
        self.age += delta
        self.radius += self.growth_rate * delta

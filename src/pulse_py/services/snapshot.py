"""Raster and vector rendering of pulse frames."""

from __future__ import annotations

import io
from typing import TYPE_CHECKING

from PIL import Image, ImageDraw

from pulse_py.core.animation import gradient_alpha
from pulse_py.core.models import TRAIL_FADE_ALPHA

if TYPE_CHECKING:
    from collections.abc import Iterable

    from pulse_py.core.animation import PulseSprite, Surface

# Concentric rings used to approximate a radial gradient.
GRADIENT_RINGS = 24


class FrameRenderer:
    """Renders pulse sprites onto a persistent frame, the way the browser canvas does.

    The frame lives at backing-store resolution. Each call to :meth:`render`
    first darkens the whole frame slightly, so earlier frames decay into trails,
    then composites every sprite's radial gradient with normal blending.
    """

    def __init__(self, surface: Surface, *, rings: int = GRADIENT_RINGS) -> None:
        """Initialize the renderer with a black frame.

        Args:
            surface: Surface geometry; sprites are in its css units.
            rings: Number of rings approximating each gradient.
        """
        self.surface = surface
        self.rings = max(1, rings)
        self._frame = self._blank()

    def _blank(self) -> Image.Image:
        size = (max(1, self.surface.pixel_width), max(1, self.surface.pixel_height))
        return Image.new("RGBA", size, (0, 0, 0, 255))

    @property
    def frame(self) -> Image.Image:
        """The current frame."""
        return self._frame

    def reset(self) -> None:
        """Re-derive the frame from the surface and clear it to black."""
        self._frame = self._blank()

    def render(self, sprites: Iterable[PulseSprite]) -> Image.Image:
        """Draw one animation frame.

        Args:
            sprites: Draw instructions from :meth:`PulseField.step`.

        Returns:
            The updated frame.
        """
        if self._frame.size != (max(1, self.surface.pixel_width), max(1, self.surface.pixel_height)):
            self.reset()

        overlay = Image.new("RGBA", self._frame.size, (0, 0, 0, round(255 * TRAIL_FADE_ALPHA)))
        self._frame = Image.alpha_composite(self._frame, overlay)

        for sprite in sprites:
            self._draw_sprite(sprite)
        return self._frame

    def _draw_sprite(self, sprite: PulseSprite) -> None:
        """Composite one radial gradient onto the frame."""
        scale = self.surface.device_ratio
        radius = sprite.radius * scale
        if radius <= 0 or sprite.alpha <= 0:
            return
        cx = sprite.x * scale
        cy = sprite.y * scale

        layer = Image.new("RGBA", self._frame.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(layer)
        # Outer rings first; each inner ring overwrites the middle of the previous one.
        for ring in range(self.rings, 0, -1):
            offset = ring / self.rings
            r = radius * offset
            opacity = gradient_alpha(offset - 0.5 / self.rings, sprite.stops) * sprite.alpha
            fill = (sprite.rgb.r, sprite.rgb.g, sprite.rgb.b, round(255 * opacity))
            draw.ellipse((cx - r, cy - r, cx + r, cy + r), fill=fill)
        self._frame = Image.alpha_composite(self._frame, layer)

    def to_png(self) -> bytes:
        """Encode the current frame as PNG.

        Returns:
            PNG image as bytes.
        """
        buffer = io.BytesIO()
        self._frame.convert("RGB").save(buffer, format="PNG")
        return buffer.getvalue()


def sprites_to_svg(sprites: Iterable[PulseSprite], surface: Surface) -> str:
    """Export a single frame of sprites as SVG.

    Args:
        sprites: Draw instructions for one frame.
        surface: Surface geometry (css units).

    Returns:
        SVG document string.
    """
    defs = []
    circles = []
    for index, sprite in enumerate(sprites):
        if sprite.radius <= 0:
            continue
        color = f"rgb({sprite.rgb.r},{sprite.rgb.g},{sprite.rgb.b})"
        stops = "".join(
            f'<stop offset="{offset:g}" stop-color="{color}" stop-opacity="{opacity:g}"/>'
            for offset, opacity in sprite.stops
        )
        defs.append(f'<radialGradient id="pulse{index}">{stops}</radialGradient>')
        circles.append(
            f'<circle cx="{sprite.x:.2f}" cy="{sprite.y:.2f}" r="{sprite.radius:.2f}" '
            f'fill="url(#pulse{index})" opacity="{sprite.alpha:.4f}"/>'
        )

    defs_markup = "".join(defs)
    circles_markup = "\n  ".join(circles)
    width = surface.css_width
    height = surface.css_height
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg"
     width="{width:g}"
     height="{height:g}"
     viewBox="0 0 {width:g} {height:g}">
  <defs>{defs_markup}</defs>
  <rect width="100%" height="100%" fill="#000000"/>
  {circles_markup}
</svg>"""

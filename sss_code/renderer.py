"""Image rendering of a resolved :class:`RenderContext`.

The renderer receives the syntax and theme already chosen; it does not pick
either. :class:`ImageRenderer` paints the window background, a rounded code
panel in the theme colors and the text itself. Per-scope coloring belongs to
a highlighter and is not done here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from PIL import Image, ImageDraw, ImageFont

from sss_code.config import CodeConfig, FontConfig, Gradient, RenderConfig, Solid
from sss_code.exceptions import RenderError
from sss_code.highlighting.syntax import SyntaxDefinition, SyntaxSet
from sss_code.highlighting.theme import Color, Theme

logger = logging.getLogger(__name__)

_FALLBACK_FOREGROUND = Color(0xC0, 0xC5, 0xCE)
_FALLBACK_PANEL = Color(0x2B, 0x30, 0x3B)
_CONTROL_COLORS = (Color(0xFF, 0x5F, 0x56), Color(0xFF, 0xBD, 0x2E), Color(0x27, 0xC9, 0x3F))


@dataclass
class RenderContext:
    """Everything the renderer needs for one image. Consumed exactly once."""

    config: CodeConfig
    syntax: SyntaxDefinition
    theme: Theme
    lib_config: RenderConfig
    syntax_set: SyntaxSet
    content: str
    font: FontConfig


class Renderer(Protocol):
    def render(self, config: RenderConfig, context: RenderContext) -> None: ...


def _load_font(font: FontConfig) -> ImageFont.ImageFont | ImageFont.FreeTypeFont:
    if font.path is None:
        return ImageFont.load_default(size=font.size)
    try:
        return ImageFont.truetype(str(font.path), size=int(font.size))
    except OSError as e:
        raise RenderError(f"Cannot load font {font.path}", {"error": str(e)}) from e


def _paint_background(image: Image.Image, background: Solid | Gradient) -> None:
    if isinstance(background, Solid):
        image.paste(background.color.as_tuple(), (0, 0, image.width, image.height))
        return
    draw = ImageDraw.Draw(image)
    start, end = background.start.as_tuple(), background.end.as_tuple()
    height = max(image.height - 1, 1)
    for y in range(image.height):
        t = y / height
        color = tuple(round(s + (e - s) * t) for s, e in zip(start, end))
        draw.line([(0, y), (image.width, y)], fill=color)


class ImageRenderer:
    """Render plain code text into a PNG with Pillow."""

    radius = 12
    inner_pad = 24
    controls_height = 36

    def render(self, config: RenderConfig, context: RenderContext) -> None:
        image = self.draw(config, context)
        try:
            config.output.parent.mkdir(parents=True, exist_ok=True)
            image.save(config.output)
        except (OSError, ValueError) as e:
            raise RenderError(f"Cannot write image to {config.output}", {"error": str(e)}) from e
        logger.info("Image saved to %s", config.output)

    def draw(self, config: RenderConfig, context: RenderContext) -> Image.Image:
        font = _load_font(context.font)
        lines = context.content.expandtabs(4).splitlines() or [""]
        measure = ImageDraw.Draw(Image.new("RGBA", (1, 1)))
        boxes = [measure.textbbox((0, 0), line or " ", font=font) for line in lines]
        line_height = max(b[3] - b[1] for b in boxes) + config.line_pad
        text_width = max(b[2] - b[0] for b in boxes)

        top = self.controls_height if config.window_controls else 0
        panel_w = text_width + self.inner_pad * 2
        panel_h = top + line_height * len(lines) + self.inner_pad * 2
        width = panel_w + config.padding_x * 2
        height = panel_h + config.padding_y * 2

        image = Image.new("RGBA", (width, height))
        _paint_background(image, config.colors.windows_background)

        settings = context.theme.settings
        panel = (settings.background or _FALLBACK_PANEL).as_tuple()
        foreground = (settings.foreground or _FALLBACK_FOREGROUND).as_tuple()

        draw = ImageDraw.Draw(image)
        x0, y0 = config.padding_x, config.padding_y
        draw.rounded_rectangle(
            (x0, y0, x0 + panel_w, y0 + panel_h), radius=self.radius, fill=panel
        )
        if config.window_controls:
            for i, color in enumerate(_CONTROL_COLORS):
                cx = x0 + self.inner_pad + i * 22
                cy = y0 + self.controls_height // 2 + 4
                draw.ellipse((cx - 6, cy - 6, cx + 6, cy + 6), fill=color.as_tuple())

        y = y0 + top + self.inner_pad
        for line in lines:
            draw.text((x0 + self.inner_pad, y), line, font=font, fill=foreground)
            y += line_height
        return image

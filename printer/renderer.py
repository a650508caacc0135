"""PNG previews of tickets, for checking a layout without paper."""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable, Optional

from PIL import Image, ImageDraw, ImageFont

from printer.directives import (
    Cut,
    Directive,
    Feed,
    HardwareInit,
    OpenCashDrawerPulse,
    RawBytes,
    SetAlign,
    SetFont,
    SetSize,
    SetStyle,
    Text,
)
from printer.template import REVERSE_OFF, REVERSE_ON

LOGGER = logging.getLogger(__name__)

# Dot height of the ESC/POS fonts at size 1x1.
FONT_HEIGHTS = {"a": 24, "b": 17}


@dataclass(frozen=True)
class _PrintState:
    align: str = "left"
    bold: bool = False
    font: str = "a"
    width: int = 1
    height: int = 1
    reverse: bool = False


class DashedImageDraw(ImageDraw.ImageDraw):
    """Helper for drawing dashed lines."""

    def dashed_line(self, y: int, x_end: int, dash=(6, 4), fill=0, width=1):
        x = 0
        dash_enabled = True
        while x < x_end:
            for dash_step in dash:
                if x >= x_end:
                    break
                if dash_enabled:
                    self.line([(x, y), (min(x + dash_step, x_end), y)], fill=fill, width=width)
                dash_enabled = not dash_enabled
                x += dash_step


class TicketRenderer:
    """Draws a directive sequence roughly the way the printer lays it out.

    Used for previews only: glyph shapes come from Pillow's default font,
    but alignment, emphasis, size multipliers, feeds and cuts follow the
    directives.
    """

    LINE_SPACING = 6
    CUT_MARGIN = 12

    def __init__(self, width: int = 576):
        self.target_width = width
        self.temp_h = 4000
        self.im = Image.new("L", (self.target_width, self.temp_h), 255)
        self.draw = DashedImageDraw(self.im)
        self.y = 0
        self.state = _PrintState()
        self._fonts = {}

    def _font(self, size: int) -> ImageFont.ImageFont:
        if size not in self._fonts:
            try:
                self._fonts[size] = ImageFont.load_default(size=size)
            except (TypeError, OSError):
                LOGGER.debug("Scalable default font unavailable; using bitmap font")
                self._fonts[size] = ImageFont.load_default()
        return self._fonts[size]

    def _line_height(self) -> int:
        return FONT_HEIGHTS[self.state.font] * self.state.height + self.LINE_SPACING

    def _grow(self, needed: int) -> None:
        if self.y + needed <= self.im.height:
            return
        grown = Image.new("L", (self.target_width, max(self.im.height * 2, self.y + needed)), 255)
        grown.paste(self.im, (0, 0))
        self.im = grown
        self.draw = DashedImageDraw(self.im)

    def draw_text(self, content: str) -> None:
        line_height = self._line_height()
        self._grow(line_height)
        font = self._font(FONT_HEIGHTS[self.state.font] * self.state.height)
        length = int(font.getlength(content)) if content else 0

        if self.state.align == "center":
            x = max(0, (self.target_width - length) // 2)
        elif self.state.align == "right":
            x = max(0, self.target_width - length)
        else:
            x = 0

        fill = 0
        if self.state.reverse and content:
            self.draw.rectangle([(x, self.y), (x + length, self.y + line_height)], fill=0)
            fill = 255
        stroke = 1 if self.state.bold and isinstance(font, ImageFont.FreeTypeFont) else 0
        self.draw.text((x, self.y), content, font=font, fill=fill, stroke_width=stroke, stroke_fill=fill)
        self.y += line_height

    def draw_cut(self) -> None:
        self._grow(2 * self.CUT_MARGIN)
        self.y += self.CUT_MARGIN
        self.draw.dashed_line(self.y, self.target_width, fill=0, width=2)
        self.y += self.CUT_MARGIN

    def apply(self, directive: Directive) -> None:
        if isinstance(directive, Text):
            self.draw_text(directive.content)
        elif isinstance(directive, Feed):
            for _ in range(max(0, directive.lines)):
                self.draw_text("")
        elif isinstance(directive, SetAlign):
            self.state = replace(self.state, align=directive.align)
        elif isinstance(directive, SetStyle):
            self.state = replace(self.state, bold=directive.style == "bold")
        elif isinstance(directive, SetFont):
            self.state = replace(self.state, font=directive.font)
        elif isinstance(directive, SetSize):
            self.state = replace(self.state, width=directive.width, height=directive.height)
        elif isinstance(directive, RawBytes):
            if directive.data == REVERSE_ON:
                self.state = replace(self.state, reverse=True)
            elif directive.data == REVERSE_OFF:
                self.state = replace(self.state, reverse=False)
        elif isinstance(directive, Cut):
            self.draw_cut()
        elif isinstance(directive, HardwareInit):
            self.state = _PrintState()
        elif isinstance(directive, OpenCashDrawerPulse):
            LOGGER.debug("Preview ignores cash drawer pulse on pin %d", directive.pin)

    def render(self, directives: Iterable[Directive]) -> Image.Image:
        for directive in directives:
            self.apply(directive)
        final_h = max(40, self.y)
        return self.im.crop((0, 0, self.target_width, final_h))


def render_ticket_image(directives: Iterable[Directive], width: int = 576, path: Optional[str] = None) -> Image.Image:
    """Render ``directives`` to a grayscale image, saving it when ``path`` is set."""
    image = TicketRenderer(width).render(directives)
    if path:
        image.save(path)
        LOGGER.info("Ticket preview saved to %s", path)
    return image

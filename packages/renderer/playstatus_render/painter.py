"""Paints rendered frames into images: stacked lines, end-ellipsized to the widget width."""

from __future__ import annotations

import base64
from io import BytesIO

from PIL import Image, ImageDraw

from playstatus_core.models import RenderedLine

from .fonts import resolve_font


ELLIPSIS = "..."


class FramePainter:
    """Draws each line at the left margin, top to bottom in frame order."""

    def __init__(self, width: int = 300, height: int | None = None, background: str = "#FFFFFF", margin: int = 6) -> None:
        if width <= margin:
            raise ValueError("width must be larger than the margin")
        self.width = width
        self.height = height
        self.background = background
        self.margin = margin

    @staticmethod
    def line_height(font) -> int:
        if hasattr(font, "getmetrics"):
            ascent, descent = font.getmetrics()
            return int(ascent + descent)
        return int(font.getbbox("Ag")[3])

    @staticmethod
    def ellipsize(draw: ImageDraw.ImageDraw, text: str, font, max_width: float) -> str:
        if not text or draw.textlength(text, font=font) <= max_width:
            return text
        lo, hi = 0, len(text)
        while lo < hi:
            mid = (lo + hi + 1) // 2
            if draw.textlength(text[:mid] + ELLIPSIS, font=font) <= max_width:
                lo = mid
            else:
                hi = mid - 1
        return text[:lo] + ELLIPSIS

    def measure_height(self, frame: list[RenderedLine]) -> int:
        return self.margin * 2 + sum(self.line_height(resolve_font(line.style.font)) for line in frame)

    def render_image(self, frame: list[RenderedLine]) -> Image.Image:
        height = self.height or self.measure_height(frame)
        image = Image.new("RGB", (self.width, max(height, 1)), self.background)
        draw = ImageDraw.Draw(image)

        x = self.margin
        y = self.margin
        text_width = self.width - x
        for line in frame:
            font = resolve_font(line.style.font)
            text = self.ellipsize(draw, line.text, font, text_width)
            if text:
                draw.text((x, y), text, font=font, fill=line.style.color.to_rgb8())
            y += self.line_height(font)
        return image

    def to_png(self, frame: list[RenderedLine]) -> bytes:
        buf = BytesIO()
        self.render_image(frame).save(buf, format="PNG")
        return buf.getvalue()

    def preview_data_url(self, frame: list[RenderedLine]) -> str:
        b64 = base64.b64encode(self.to_png(frame)).decode("ascii")
        return f"data:image/png;base64,{b64}"

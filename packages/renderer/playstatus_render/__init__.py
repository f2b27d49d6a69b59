"""Renderer package turning status frames into images."""

from .fonts import font_candidates, resolve_font
from .painter import ELLIPSIS, FramePainter

__all__ = [
    "ELLIPSIS",
    "FramePainter",
    "font_candidates",
    "resolve_font",
]

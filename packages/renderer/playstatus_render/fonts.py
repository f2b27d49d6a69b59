"""Font descriptor to Pillow font resolution."""

from __future__ import annotations

from functools import lru_cache

from PIL import ImageFont

from playstatus_core.models import FontStyle


_GENERIC_FAMILIES = {
    "sans": "DejaVuSans",
    "sans-serif": "DejaVuSans",
    "serif": "DejaVuSerif",
    "mono": "DejaVuSansMono",
    "monospace": "DejaVuSansMono",
}


def font_candidates(style: FontStyle) -> list[str]:
    base = _GENERIC_FAMILIES.get(style.family.lower(), style.family.replace(" ", ""))
    names = []
    if style.bold:
        names.extend([f"{base}-Bold.ttf", f"{base} Bold.ttf"])
    names.append(f"{base}.ttf")
    if base != "DejaVuSans":
        names.append("DejaVuSans-Bold.ttf" if style.bold else "DejaVuSans.ttf")
    names.append("Arial Bold.ttf" if style.bold else "Arial.ttf")
    return names


@lru_cache(maxsize=64)
def resolve_font(style: FontStyle):
    for name in font_candidates(style):
        try:
            return ImageFont.truetype(name, style.size)
        except OSError:
            continue
    return ImageFont.load_default()

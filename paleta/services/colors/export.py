"""
Palette export serializers.

Renders a color sequence as JSON, CSS custom properties, an SVG swatch grid
or a PNG swatch grid. Every function returns the document in memory; writing
it anywhere is the caller's job.
"""

import base64
import io
import json
import math
from typing import Callable, Dict, List, Sequence, Tuple, Union

from PIL import Image, ImageDraw, ImageFont
from loguru import logger

from paleta.schemas import Color

SWATCH_COLUMNS = 5
SVG_SWATCH_SIZE = 100
PNG_SWATCH_SIZE = 150


def label_color(color: Color) -> str:
    """Black label on light swatches, white on dark ones."""
    return "#000000" if color.l > 50 else "#FFFFFF"


def grid_size(count: int, swatch_size: int) -> Tuple[int, int]:
    """Pixel size of a SWATCH_COLUMNS-wide grid holding `count` swatches."""
    rows = math.ceil(count / SWATCH_COLUMNS)
    return SWATCH_COLUMNS * swatch_size, rows * swatch_size


def export_json(colors: Sequence[Color]) -> str:
    """JSON array of {hex, rgb, hsl} objects, indented by two spaces."""
    palette_data = [
        {
            "hex": color.hex,
            "rgb": {"r": color.r, "g": color.g, "b": color.b},
            "hsl": {"h": color.h, "s": color.s, "l": color.l},
        }
        for color in colors
    ]
    return json.dumps(palette_data, indent=2)


def export_css(colors: Sequence[Color]) -> str:
    """CSS custom properties on :root, three per color, numbered from 1."""
    lines = [":root {"]
    for index, color in enumerate(colors, start=1):
        lines.append(f"  --color-{index}: {color.hex};")
        lines.append(f"  --color-{index}-rgb: {color.r}, {color.g}, {color.b};")
        lines.append(f"  --color-{index}-hsl: {color.h}, {color.s}%, {color.l}%;")
    lines.append("}")
    return "\n".join(lines) + "\n"


def export_svg(colors: Sequence[Color]) -> str:
    """SVG grid of labeled swatches."""
    size = SVG_SWATCH_SIZE
    width, height = grid_size(len(colors), size)

    parts: List[str] = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}">'
    ]
    for index, color in enumerate(colors):
        x = (index % SWATCH_COLUMNS) * size
        y = (index // SWATCH_COLUMNS) * size
        parts.append(f'  <rect x="{x}" y="{y}" width="{size}" height="{size}" fill="{color.hex}"/>')
        parts.append(
            f'  <text x="{x + size // 2}" y="{y + size // 2}" text-anchor="middle" '
            f'dominant-baseline="middle" font-family="monospace" font-size="12" '
            f'fill="{label_color(color)}">{color.hex}</text>'
        )
    parts.append('</svg>')
    return "\n".join(parts)


def render_swatch_grid(colors: Sequence[Color], swatch_size: int = PNG_SWATCH_SIZE,
                       include_labels: bool = True) -> Image.Image:
    """
    Render colors into a PIL image grid.

    Args:
        colors: Colors in palette order
        swatch_size: Edge length of each square swatch in pixels
        include_labels: Draw each hex code centered on its swatch

    Returns:
        RGB PIL Image
    """
    width, height = grid_size(len(colors), swatch_size)
    grid = Image.new('RGB', (max(width, 1), max(height, 1)), (255, 255, 255))
    draw = ImageDraw.Draw(grid)
    font = ImageFont.load_default() if include_labels else None

    for index, color in enumerate(colors):
        x = (index % SWATCH_COLUMNS) * swatch_size
        y = (index // SWATCH_COLUMNS) * swatch_size
        draw.rectangle([x, y, x + swatch_size - 1, y + swatch_size - 1], fill=color.rgb)

        if include_labels:
            left, top, right, bottom = draw.textbbox((0, 0), color.hex, font=font)
            text_x = x + (swatch_size - (right - left)) // 2 - left
            text_y = y + (swatch_size - (bottom - top)) // 2 - top
            draw.text((text_x, text_y), color.hex, fill=label_color(color), font=font)

    return grid


def export_png(colors: Sequence[Color]) -> bytes:
    """PNG bytes of the labeled swatch grid."""
    buffer = io.BytesIO()
    render_swatch_grid(colors).save(buffer, format='PNG')
    return buffer.getvalue()


def export_png_b64(colors: Sequence[Color]) -> str:
    """Base64-encoded PNG of the labeled swatch grid."""
    return base64.b64encode(export_png(colors)).decode('utf-8')


EXPORT_FORMATS: Dict[str, Tuple[Callable[[Sequence[Color]], Union[str, bytes]], str]] = {
    "json": (export_json, "application/json"),
    "css": (export_css, "text/css"),
    "svg": (export_svg, "image/svg+xml"),
    "png": (export_png, "image/png"),
}


def export_palette(colors: Sequence[Color], fmt: str) -> Union[str, bytes]:
    """
    Serialize colors in the named format.

    Raises:
        ValueError: If fmt is not one of EXPORT_FORMATS
    """
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format: {fmt} (expected one of {sorted(EXPORT_FORMATS)})")

    exporter, mime_type = EXPORT_FORMATS[fmt]
    logger.debug(f"Exporting {len(colors)} colors as {fmt} ({mime_type})")
    return exporter(colors)

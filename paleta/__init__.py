"""
Paleta
Dominant color extraction and harmony palette generation.
"""
from paleta.schemas import Color, HarmonyMode, Palette, Position
from paleta.services.colors.conversion import (
    rgb_to_hsl, hsl_to_rgb, rgb_to_hex, hex_to_rgb, color_distance
)
from paleta.services.colors.sampling import image_from_rgba_bytes
from paleta.services.colors.extraction import extract_dominant_colors
from paleta.services.colors.harmony import generate_harmony_ring
from paleta.services.colors.palette import (
    build_palette, replace_base_color, generate_color_variations, sample_color_at
)
from paleta.services.colors.export import (
    export_json, export_css, export_svg, export_png, export_png_b64, export_palette
)

__version__ = "1.0.0"

__all__ = [
    "Color",
    "HarmonyMode",
    "Palette",
    "Position",
    "rgb_to_hsl",
    "hsl_to_rgb",
    "rgb_to_hex",
    "hex_to_rgb",
    "color_distance",
    "image_from_rgba_bytes",
    "extract_dominant_colors",
    "generate_harmony_ring",
    "build_palette",
    "replace_base_color",
    "generate_color_variations",
    "sample_color_at",
    "export_json",
    "export_css",
    "export_svg",
    "export_png",
    "export_png_b64",
    "export_palette",
]

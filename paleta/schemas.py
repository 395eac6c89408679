"""
Paleta Schemas
Pydantic models for colors, positions and palettes returned by the engine.
"""
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, computed_field

from paleta.services.colors.conversion import (
    rgb_to_hsl, hsl_to_rgb, rgb_to_hex, hex_to_rgb
)


class HarmonyMode(str, Enum):
    """Color theory rule sets used to expand a base color into a ring."""
    COMPLEMENTARY = "complementary"
    ANALOGOUS = "analogous"
    TRIADIC = "triadic"
    TETRADIC = "tetradic"
    SPLIT_COMPLEMENTARY = "split-complementary"


class Position(BaseModel):
    """Image-space coordinate of a representative source pixel."""
    model_config = ConfigDict(frozen=True)

    x: float = Field(..., description="Column in source image pixels")
    y: float = Field(..., description="Row in source image pixels")


class Color(BaseModel):
    """
    A single palette color.

    Only RGB (and the optional source position) are stored. HSL and hex are
    derived on access, so the three representations can never disagree.
    """
    model_config = ConfigDict(frozen=True)

    r: int = Field(..., ge=0, le=255, description="Red component (0-255)")
    g: int = Field(..., ge=0, le=255, description="Green component (0-255)")
    b: int = Field(..., ge=0, le=255, description="Blue component (0-255)")
    position: Optional[Position] = Field(
        None,
        description="Source pixel coordinate used to anchor UI indicators"
    )

    @computed_field
    @property
    def h(self) -> int:
        """Hue in degrees (0-360)."""
        return rgb_to_hsl(self.r, self.g, self.b)[0]

    @computed_field
    @property
    def s(self) -> int:
        """Saturation percent (0-100)."""
        return rgb_to_hsl(self.r, self.g, self.b)[1]

    @computed_field
    @property
    def l(self) -> int:
        """Lightness percent (0-100)."""
        return rgb_to_hsl(self.r, self.g, self.b)[2]

    @computed_field
    @property
    def hex(self) -> str:
        """Lowercase #rrggbb code."""
        return rgb_to_hex(self.r, self.g, self.b)

    @property
    def rgb(self) -> Tuple[int, int, int]:
        return (self.r, self.g, self.b)

    @classmethod
    def from_rgb(cls, r: int, g: int, b: int,
                 position: Optional[Position] = None) -> "Color":
        return cls(r=int(r), g=int(g), b=int(b), position=position)

    @classmethod
    def from_hsl(cls, h: float, s: float, l: float,
                 position: Optional[Position] = None) -> "Color":
        r, g, b = hsl_to_rgb(h, s, l)
        return cls(r=r, g=g, b=b, position=position)

    @classmethod
    def from_hex(cls, hex_color: str,
                 position: Optional[Position] = None) -> "Color":
        r, g, b = hex_to_rgb(hex_color)
        return cls(r=r, g=g, b=b, position=position)

    def with_position(self, x: float, y: float) -> "Color":
        """Return a copy anchored at a new source coordinate."""
        return self.model_copy(update={"position": Position(x=x, y=y)})


class Palette(BaseModel):
    """Base colors plus the harmony ring generated for each of them."""
    model_config = ConfigDict(frozen=True)

    base_colors: List[Color] = Field(..., description="Dominant colors in extraction order")
    ring_count: int = Field(..., description="Number of harmony colors per base color")
    mode: HarmonyMode = Field(..., description="Harmony rule used for every ring")
    rings: List[List[Color]] = Field(
        ...,
        description="One ring per base color, in the same order as base_colors"
    )

    @property
    def colors(self) -> List[Color]:
        """Flattened palette: base colors first, then each ring in order."""
        flat = list(self.base_colors)
        for ring in self.rings:
            flat.extend(ring)
        return flat

    @property
    def hex_codes(self) -> List[str]:
        return [color.hex for color in self.colors]

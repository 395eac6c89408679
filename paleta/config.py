"""
Paleta Configuration
Manages environment variables and defaults for the extraction and harmony engine.
"""
import os
from typing import Tuple

from dotenv import load_dotenv

load_dotenv()


class Config:
    """Configuration class for Paleta services."""

    # Logging
    LOG_LEVEL: str = os.environ.get("PALETA_LOG_LEVEL", "INFO")

    # Pixel sampling
    SAMPLE_STRIDE: int = int(os.environ.get("PALETA_SAMPLE_STRIDE", "4"))
    MIN_SAMPLES: int = int(os.environ.get("PALETA_MIN_SAMPLES", "64"))

    # Clustering
    KMEANS_ITERATIONS: int = int(os.environ.get("PALETA_KMEANS_ITERATIONS", "15"))
    SEED_TRIALS: int = int(os.environ.get("PALETA_SEED_TRIALS", "50"))

    # Distinctness enforcement (Euclidean RGB units)
    MIN_DISTANCE: float = float(os.environ.get("PALETA_MIN_DISTANCE", "60"))
    NUDGE_STEP: int = int(os.environ.get("PALETA_NUDGE_STEP", "30"))
    REPLACEMENT_SCAN_LIMIT: int = 1000
    REPLACEMENT_SCAN_STEP: int = 10
    REPLACEMENT_TOP_N: int = 100

    # Palette defaults
    DEFAULT_COLORS: int = int(os.environ.get("PALETA_DEFAULT_COLORS", "5"))
    DEFAULT_RINGS: int = int(os.environ.get("PALETA_DEFAULT_RINGS", "5"))
    DEFAULT_MODE: str = os.environ.get("PALETA_DEFAULT_MODE", "complementary")

    # Harmony bounds
    MIN_RINGS: int = 3
    MAX_RINGS: int = 12
    LIGHTNESS_FLOOR: int = 10
    LIGHTNESS_CEIL: int = 90

    # Neutral gray used when an image yields no samples
    FALLBACK_GRAY: Tuple[int, int, int] = (128, 128, 128)

    HARMONY_MODES = ["complementary", "analogous", "triadic", "tetradic", "split-complementary"]

    @classmethod
    def validate_k(cls, k: int) -> bool:
        """Validate requested number of dominant colors."""
        return isinstance(k, int) and k >= 1

    @classmethod
    def validate_ring_count(cls, ring_count: int) -> bool:
        """Validate harmony ring size."""
        return cls.MIN_RINGS <= ring_count <= cls.MAX_RINGS

    @classmethod
    def validate_harmony_mode(cls, mode: str) -> bool:
        """Validate harmony mode name."""
        return mode in cls.HARMONY_MODES

    @classmethod
    def clamp_k(cls, k: int) -> int:
        """Clamp a caller-supplied color count to at least one."""
        return max(1, int(k))

    @classmethod
    def clamp_ring_count(cls, ring_count: int) -> int:
        """Clamp a caller-supplied ring count into [MIN_RINGS, MAX_RINGS]."""
        return max(cls.MIN_RINGS, min(cls.MAX_RINGS, int(ring_count)))


# Global config instance
config = Config()

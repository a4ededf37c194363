"""
colorgen Configuration
Manages environment variables and defaults for the scheme pipeline, CLI and API.
"""
import os
from typing import Literal


class Config:
    """Configuration class for colorgen services."""

    # Logging
    LOG_LEVEL: str = os.environ.get("COLORGEN_LOG_LEVEL", "INFO")

    # Quantization
    MAX_COLORS: int = int(os.environ.get("COLORGEN_MAX_COLORS", "128"))
    QUANTIZER: Literal["celebi", "wu"] = os.environ.get("COLORGEN_QUANTIZER", "celebi")
    RESIZE_WIDTH: int = int(os.environ.get("COLORGEN_RESIZE_WIDTH", "64"))
    ALPHA_THRESHOLD: int = int(os.environ.get("COLORGEN_ALPHA_THRESHOLD", "255"))

    # Scheme generation
    DEFAULT_VARIANT: str = os.environ.get("COLORGEN_DEFAULT_VARIANT", "default")
    CONTENT_PALETTES: bool = bool(int(os.environ.get("COLORGEN_CONTENT_PALETTES", "1")))
    SURFACE_ADJUST: bool = bool(int(os.environ.get("COLORGEN_SURFACE_ADJUST", "1")))
    SEED_CANDIDATES: int = int(os.environ.get("COLORGEN_SEED_CANDIDATES", "4"))

    # Uploads
    MAX_FILE_MB: int = int(os.environ.get("COLORGEN_MAX_FILE_MB", "10"))
    SUPPORTED_MIME_TYPES = ["image/jpeg", "image/png", "image/webp", "image/gif", "image/bmp"]

    SUPPORTED_VARIANTS = ["default", "analogous", "triadic", "complementary"]
    SUPPORTED_MODES = ["light", "dark", "amoled"]
    SUPPORTED_QUANTIZERS = ["celebi", "wu"]

    @classmethod
    def validate_variant(cls, variant: str) -> bool:
        """Validate palette variant."""
        return variant in cls.SUPPORTED_VARIANTS

    @classmethod
    def validate_mode(cls, mode: str) -> bool:
        """Validate scheme mode."""
        return mode in cls.SUPPORTED_MODES

    @classmethod
    def validate_quantizer(cls, quantizer: str) -> bool:
        """Validate quantizer method."""
        return quantizer in cls.SUPPORTED_QUANTIZERS

    @classmethod
    def validate_max_colors(cls, max_colors: int) -> bool:
        """Validate quantizer color budget."""
        return 1 <= max_colors <= 256


# Global config instance
config = Config()

"""
Unit tests for configuration validators.
"""
from colorgen.config import Config, config
from colorgen.services.colors.palettes import PALETTE_VARIANTS
from colorgen.services.colors.quantize import QUANTIZER_METHODS
from colorgen.services.colors.scheme import MODES


class TestConfigValidators:
    """Test the validator classmethods"""

    def test_variants_match_palette_variants(self):
        assert set(Config.SUPPORTED_VARIANTS) == set(PALETTE_VARIANTS)
        assert Config.validate_variant("triadic")
        assert not Config.validate_variant("vibrant")

    def test_modes_match_scheme_modes(self):
        assert tuple(Config.SUPPORTED_MODES) == MODES
        assert Config.validate_mode("amoled")
        assert not Config.validate_mode("sepia")

    def test_quantizers(self):
        assert set(Config.SUPPORTED_QUANTIZERS) == set(QUANTIZER_METHODS)
        assert Config.validate_quantizer("wu")
        assert not Config.validate_quantizer("kmeans")

    def test_max_colors_range(self):
        assert Config.validate_max_colors(1)
        assert Config.validate_max_colors(256)
        assert not Config.validate_max_colors(0)
        assert not Config.validate_max_colors(257)

    def test_defaults(self):
        assert config.validate_variant(config.DEFAULT_VARIANT)
        assert config.validate_quantizer(config.QUANTIZER)
        assert config.validate_max_colors(config.MAX_COLORS)

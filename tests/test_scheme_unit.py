"""
Unit tests for the scheme builder.

Tests role assignment:
- exact role set in every mode
- light/dark/amoled tone selection
- serialization
"""

import pytest

from colorgen.services.colors.color_utils import RGBColor, lstar_from_rgb
from colorgen.services.colors.palettes import CorePalette
from colorgen.services.colors.scheme import (
    MODES, ROLE_NAMES, ROLE_TABLE, RoleSpec, build_scheme, format_color, scheme_from_seed
)

VIOLET = RGBColor(103, 80, 164)


@pytest.fixture
def violet_scheme():
    return scheme_from_seed(VIOLET)


class TestRoleTable:
    """Test the static role table"""

    def test_names_unique(self):
        assert len(ROLE_NAMES) == len(set(ROLE_NAMES))

    def test_palettes_known(self):
        palettes = {spec.palette for spec in ROLE_TABLE}
        assert palettes == {"primary", "secondary", "tertiary", "neutral", "neutral_variant", "error"}

    def test_amoled_defaults_to_dark(self):
        spec = RoleSpec("x", "primary", 40, 80)
        assert spec.tone_for("amoled") == 80
        assert RoleSpec("y", "neutral", 98, 6, amoled=0).tone_for("amoled") == 0

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            ROLE_TABLE[0].tone_for("sepia")


class TestBuildScheme:
    """Test scheme construction"""

    def test_every_mode_has_exact_role_set(self, violet_scheme):
        assert tuple(violet_scheme.modes) == MODES
        for mode in MODES:
            assert set(violet_scheme.mode(mode)) == set(ROLE_NAMES)

    def test_dark_primary_lighter_than_light_primary(self, violet_scheme):
        """Test primary reads tone 40 in light mode and tone 80 in dark mode"""
        core = violet_scheme.core
        assert violet_scheme.light["primary"] == core.primary.tone(40)
        assert violet_scheme.dark["primary"] == core.primary.tone(80)
        assert lstar_from_rgb(violet_scheme.dark["primary"]) > lstar_from_rgb(violet_scheme.light["primary"])

    def test_on_primary(self, violet_scheme):
        assert violet_scheme.light["on_primary"] == RGBColor(255, 255, 255)
        assert violet_scheme.dark["on_primary"] == violet_scheme.core.primary.tone(20)

    def test_amoled_surfaces_black(self, violet_scheme):
        amoled = violet_scheme.mode("amoled")
        for role in ("background", "surface", "surface_dim", "surface_container_lowest"):
            assert amoled[role] == RGBColor(0, 0, 0)
        assert amoled["primary"] == violet_scheme.dark["primary"]
        assert amoled["on_surface"] == violet_scheme.dark["on_surface"]

    def test_shadow_and_scrim_black(self, violet_scheme):
        for mode in MODES:
            assert violet_scheme.mode(mode)["shadow"] == RGBColor(0, 0, 0)
            assert violet_scheme.mode(mode)["scrim"] == RGBColor(0, 0, 0)

    def test_fixed_roles_same_in_light_and_dark(self, violet_scheme):
        for role in ("primary_fixed", "secondary_fixed_dim", "on_tertiary_fixed"):
            assert violet_scheme.light[role] == violet_scheme.dark[role]

    def test_seed_and_options_recorded(self):
        scheme = scheme_from_seed(VIOLET, variant="triadic", content=False)
        assert scheme.seed == VIOLET
        assert scheme.variant == "triadic"
        assert scheme.content is False

    def test_immutable(self, violet_scheme):
        with pytest.raises(TypeError):
            violet_scheme.light["primary"] = RGBColor(0, 0, 0)

    def test_custom_table(self):
        core = CorePalette.of(VIOLET)
        table = (RoleSpec("accent", "tertiary", 50, 70),)
        scheme = build_scheme(core, VIOLET, table=table)
        assert set(scheme.light) == {"accent"}
        assert scheme.dark["accent"] == core.tertiary.tone(70)

    def test_deterministic(self):
        assert scheme_from_seed(VIOLET).to_dict() == scheme_from_seed(VIOLET).to_dict()

    def test_tonal_spot_blue_primary(self):
        """Test the tonal-spot blue scheme against known Material values"""
        scheme = scheme_from_seed(RGBColor(0, 0, 255), content=False)
        for actual, expected in [(scheme.light["primary"], "#343dff"), (scheme.dark["primary"], "#bec2ff")]:
            expected_rgb = RGBColor.from_hex(expected)
            assert abs(actual.red - expected_rgb.red) <= 1
            assert abs(actual.green - expected_rgb.green) <= 1
            assert abs(actual.blue - expected_rgb.blue) <= 1


class TestSerialization:
    """Test scheme serialization"""

    def test_format_color(self):
        color = RGBColor(103, 80, 164)
        assert format_color(color) == "#6750a4"
        assert format_color(color, hash_prefix=False) == "6750a4"
        assert format_color(color, fmt="rgb") == [103, 80, 164]
        with pytest.raises(ValueError):
            format_color(color, fmt="hsl")

    def test_to_dict_all_modes(self, violet_scheme):
        data = violet_scheme.to_dict()
        assert set(data) == set(MODES)
        assert data["light"]["on_primary"] == "#ffffff"

    def test_to_dict_selected_mode(self, violet_scheme):
        data = violet_scheme.to_dict(fmt="rgb", modes=["dark"])
        assert set(data) == {"dark"}
        assert data["dark"]["shadow"] == [0, 0, 0]

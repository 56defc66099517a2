"""Tests for parsing raw pack parameters."""

import math

import pytest

from rollpack.config import MM_TO_UNITS
from rollpack.model.pack_config import GapMode, PackConfig, PackConfigError, parse_pack_config


class TestParsePackConfig:
    """Raw input always yields a usable configuration."""

    def test_empty_input_uses_defaults(self):
        cfg = parse_pack_config({})
        assert cfg == PackConfig()
        assert (cfg.lane_count, cfg.channel_count, cfg.layer_count) == (4, 3, 2)
        assert cfg.roll_outer_diameter_mm == 120.0
        assert cfg.core_outer_diameter_mm == 45.0
        assert cfg.roll_length_mm == 100.0
        assert cfg.gap_mm == 7.0
        assert cfg.gap_mode == GapMode.LANE

    def test_none_input_uses_defaults(self):
        assert parse_pack_config(None) == PackConfig()

    def test_non_numeric_diameter_falls_back(self):
        cfg = parse_pack_config({"rollOuterDiameterMm": "abc"})
        assert cfg.roll_outer_diameter_mm == 120.0

    def test_numeric_strings_are_parsed(self):
        cfg = parse_pack_config({
            "laneCount": "5",
            "channelCount": " 2 ",
            "layerCount": "1",
            "rollOuterDiameterMm": "150.5",
            "coreOuterDiameterMm": "76",
            "rollLengthMm": "250",
            "gapMm": "0",
        })
        assert (cfg.lane_count, cfg.channel_count, cfg.layer_count) == (5, 2, 1)
        assert cfg.roll_outer_diameter_mm == 150.5
        assert cfg.core_outer_diameter_mm == 76.0
        assert cfg.roll_length_mm == 250.0
        assert cfg.gap_mm == 0.0

    def test_decimal_count_is_truncated(self):
        assert parse_pack_config({"laneCount": "3.7"}).lane_count == 3
        assert parse_pack_config({"laneCount": 2.2}).lane_count == 2

    @pytest.mark.parametrize("value", [0, -2, "0.5", "nan", "inf", None, True, "", [3]])
    def test_invalid_counts_fall_back(self, value):
        assert parse_pack_config({"channelCount": value}).channel_count == 3

    @pytest.mark.parametrize("key", ["laneCount", "channelCount", "layerCount"])
    def test_count_beyond_float_range_falls_back(self, key):
        cfg = parse_pack_config({key: 10**400})
        assert cfg == PackConfig()

    @pytest.mark.parametrize("key", ["rollOuterDiameterMm", "coreOuterDiameterMm", "rollLengthMm", "gapMm"])
    def test_dimension_beyond_float_range_falls_back(self, key):
        assert parse_pack_config({key: 10**400}) == PackConfig()

    @pytest.mark.parametrize("value", ["1e-323", 5e-324, 1e-308])
    def test_diameter_underflowing_in_scene_units_falls_back(self, value):
        cfg = parse_pack_config({"rollOuterDiameterMm": value, "coreOuterDiameterMm": value})
        assert cfg.roll_outer_diameter_mm == 120.0
        assert cfg.core_outer_diameter_mm == 45.0

    def test_small_diameter_is_kept(self):
        cfg = parse_pack_config({"coreOuterDiameterMm": "0.001"})
        assert cfg.core_outer_diameter_mm == 0.001

    @pytest.mark.parametrize("value", [0, -1.0, float("nan"), float("inf"), "-5"])
    def test_diameters_must_be_positive(self, value):
        cfg = parse_pack_config({"rollOuterDiameterMm": value, "coreOuterDiameterMm": value})
        assert cfg.roll_outer_diameter_mm == 120.0
        assert cfg.core_outer_diameter_mm == 45.0

    def test_zero_gap_and_length_are_accepted(self):
        cfg = parse_pack_config({"gapMm": 0, "rollLengthMm": 0})
        assert cfg.gap_mm == 0.0
        assert cfg.roll_length_mm == 0.0

    def test_negative_gap_falls_back(self):
        assert parse_pack_config({"gapMm": -3}).gap_mm == 7.0

    def test_python_field_names_are_accepted(self):
        cfg = parse_pack_config({"lane_count": 6, "gap_mm": 2.5})
        assert cfg.lane_count == 6
        assert cfg.gap_mm == 2.5

    def test_legacy_form_names_are_accepted(self):
        cfg = parse_pack_config({
            "rollsPerLane": 7,
            "rollsPerChannel": 8,
            "rollsPerLayer": 9,
            "rollDiameterMm": 110,
            "coreDiameterMm": 40,
            "rollHeightMm": 95,
            "rollGapMm": 3,
        })
        assert (cfg.lane_count, cfg.channel_count, cfg.layer_count) == (7, 8, 9)
        assert cfg.roll_outer_diameter_mm == 110.0
        assert cfg.core_outer_diameter_mm == 40.0
        assert cfg.roll_length_mm == 95.0
        assert cfg.gap_mm == 3.0

    def test_gap_mode(self):
        assert parse_pack_config({"gapMode": "ALL"}).gap_mode == GapMode.ALL
        assert parse_pack_config({"gap_mode": GapMode.ALL}).gap_mode == GapMode.ALL
        assert parse_pack_config({"gapMode": "diagonal"}).gap_mode == GapMode.LANE

    def test_core_larger_than_roll_is_kept_for_the_builder(self):
        cfg = parse_pack_config({"coreOuterDiameterMm": 200, "rollOuterDiameterMm": 120})
        assert cfg.core_outer_diameter_mm == 200.0


class TestPackConfig:

    def test_derived_scene_units(self, default_config):
        assert default_config.outer_radius == pytest.approx(60.0 * MM_TO_UNITS)
        assert default_config.core_outer_radius == pytest.approx(22.5 * MM_TO_UNITS)
        assert default_config.roll_length == pytest.approx(100.0 * MM_TO_UNITS)
        assert default_config.gap == pytest.approx(1.0 * MM_TO_UNITS)
        assert default_config.total_roll_count == 24

    def test_is_immutable(self, default_config):
        with pytest.raises(AttributeError):
            default_config.lane_count = 10

    def test_direct_construction_validates(self):
        with pytest.raises(PackConfigError, match="lane_count"):
            PackConfig(lane_count=0)
        with pytest.raises(PackConfigError, match="roll_outer_diameter_mm"):
            PackConfig(roll_outer_diameter_mm=math.nan)
        with pytest.raises(PackConfigError, match="gap_mm"):
            PackConfig(gap_mm=-1.0)

    def test_direct_construction_rejects_unrepresentable_diameters(self):
        with pytest.raises(PackConfigError, match="roll_outer_diameter_mm"):
            PackConfig(roll_outer_diameter_mm=10**400)
        with pytest.raises(PackConfigError, match="core_outer_diameter_mm"):
            PackConfig(core_outer_diameter_mm=1e-323)

    def test_as_dict(self, default_config):
        data = default_config.as_dict()
        assert data["lane_count"] == 4
        assert data["gap_mode"] == "lane"

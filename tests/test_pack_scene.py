"""Tests for assembling layout and geometry into a pack scene."""

import dataclasses

import pytest

from rollpack.config import EPSILON, MM_TO_UNITS
from rollpack.model.geometry_primitives import Vector
from rollpack.model.pack_config import PackConfig, parse_pack_config
from rollpack.model.pack_scene import PackAssembler, assemble_pack


class TestAssemblePack:

    def test_example_pack(self, default_config):
        scene = assemble_pack(default_config)
        assert scene.total_roll_count == 24
        assert len(scene) == 24
        lane_xs = sorted({round(p.translation.x, 9) for p in scene.placements})
        assert lane_xs[1] - lane_xs[0] == pytest.approx((100 + 1 + EPSILON / MM_TO_UNITS) * MM_TO_UNITS)

    def test_geometry_is_shared(self, default_config):
        scene = assemble_pack(default_config)
        assert all(instance.geometry is scene.geometry for instance in scene)

    def test_single_roll(self):
        scene = assemble_pack(PackConfig(lane_count=1, channel_count=1, layer_count=1))
        assert scene.total_roll_count == 1
        assert scene.instances[0].placement.translation == Vector(0.0, 0.0, 0.0)

    @pytest.mark.parametrize("counts", [(1, 1, 1), (2, 3, 4), (5, 1, 3)])
    def test_total_is_product_of_counts(self, counts):
        cfg = PackConfig(lane_count=counts[0], channel_count=counts[1], layer_count=counts[2])
        scene = assemble_pack(cfg)
        assert scene.total_roll_count == counts[0] * counts[1] * counts[2] == len(scene.placements)

    def test_idempotent(self, default_config):
        first, second = assemble_pack(default_config), assemble_pack(default_config)
        assert first.placements == second.placements
        assert first.geometry == second.geometry
        assert first.total_roll_count == second.total_roll_count

    def test_reuses_matching_geometry(self, default_config):
        first = assemble_pack(default_config)
        more_rolls = dataclasses.replace(default_config, lane_count=6)
        second = assemble_pack(more_rolls, geometry=first.geometry)
        assert second.geometry is first.geometry

    def test_rebuilds_geometry_for_new_dimensions(self, default_config):
        first = assemble_pack(default_config)
        thicker = dataclasses.replace(default_config, roll_outer_diameter_mm=150.0)
        second = assemble_pack(thicker, geometry=first.geometry)
        assert second.geometry is not first.geometry
        assert second.geometry.outer_radius == pytest.approx(7.5)

    def test_oversized_core_from_raw_input(self):
        cfg = parse_pack_config({"coreOuterDiameterMm": 200, "rollOuterDiameterMm": 120})
        geometry = assemble_pack(cfg).geometry
        assert geometry.core_outer_radius == pytest.approx(0.99 * 6.0)
        assert 0 < geometry.core_inner_radius < geometry.core_outer_radius < geometry.outer_radius

    @pytest.mark.parametrize("raw", [
        {"rollOuterDiameterMm": "1e-323"},
        {"rollOuterDiameterMm": "1e-323", "coreOuterDiameterMm": "1e-323"},
    ])
    def test_underflowing_diameters_from_raw_input(self, raw):
        scene = assemble_pack(parse_pack_config(raw))
        geometry = scene.geometry
        assert geometry.outer_radius == pytest.approx(6.0)
        assert 0 < geometry.core_inner_radius < geometry.core_outer_radius < geometry.outer_radius
        assert len(scene) == 24

    def test_tiny_core_keeps_positive_bore(self):
        geometry = assemble_pack(parse_pack_config({"coreOuterDiameterMm": "1e-300"})).geometry
        assert 0 < geometry.core_inner_radius < geometry.core_outer_radius

    def test_bounds_are_symmetric(self, default_config):
        x0, x1, y0, y1, z0, z1 = assemble_pack(default_config).bounds()
        assert x0 == pytest.approx(-x1)
        assert y0 == pytest.approx(-y1)
        assert z0 == pytest.approx(-z1)
        assert z1 - z0 == pytest.approx(3 * 12.0 + 2 * EPSILON)


class TestPackAssembler:

    def test_regenerate_installs_scene(self, default_config):
        assembler = PackAssembler()
        installed = []
        assembler.on_install(installed.append)
        scene = assembler.regenerate(default_config)
        assert assembler.scene is scene
        assert installed == [scene]

    def test_previous_scene_is_released_before_install(self, default_config):
        assembler = PackAssembler()
        events = []
        assembler.on_release(lambda s: events.append(("release", s)))
        assembler.on_install(lambda s: events.append(("install", s)))

        first = assembler.regenerate(default_config)
        second = assembler.regenerate(dataclasses.replace(default_config, roll_length_mm=200.0))

        assert events == [("install", first), ("release", first), ("install", second)]
        assert first.geometry.released
        assert not second.geometry.released

    def test_geometry_kept_when_dimensions_unchanged(self, default_config):
        assembler = PackAssembler()
        first = assembler.regenerate(default_config)
        second = assembler.regenerate(dataclasses.replace(default_config, layer_count=5))
        assert second.geometry is first.geometry
        assert not second.geometry.released
        assert second.total_roll_count == 60

    def test_repeated_regeneration_is_idempotent(self, default_config):
        assembler = PackAssembler()
        first = assembler.regenerate(default_config)
        second = assembler.regenerate(default_config)
        assert first.placements == second.placements
        assert first.total_roll_count == second.total_roll_count

    def test_clear(self, default_config):
        assembler = PackAssembler()
        released = []
        assembler.on_release(released.append)
        scene = assembler.regenerate(default_config)
        assembler.clear()
        assert assembler.scene is None
        assert released == [scene]
        assert scene.geometry.released
        assembler.clear()
        assert released == [scene]

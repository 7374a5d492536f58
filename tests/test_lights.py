"""Unit tests for light sources.

Tests cover:
- Attenuation coefficients and validation
- Directional, point and spot light direction and intensity
- Spot beam narrowing
- Device light_intensity / light_direction agreeing with the host
"""

import math

import pytest

from src.phong.core.errors import ZeroVectorError
from src.phong.core.primitives import Color, Point, Vector
from src.phong.lighting.lights import (
    AmbientLight,
    Attenuation,
    DirectionalLight,
    LightKind,
    LightSource,
    PointLight,
    SpotLight,
)


class TestAttenuation:
    """Tests for distance falloff coefficients."""

    def test_default_is_constant(self):
        assert Attenuation().factor(123.0) == 1.0

    def test_factor(self):
        attenuation = Attenuation(kc=1, kl=0.5, kq=0.25)
        assert attenuation.factor(2.0) == pytest.approx(1 + 1 + 1)

    @pytest.mark.parametrize(
        "coefficients",
        [(-1, 0, 0), (1, -0.1, 0), (1, 0, -0.1), (0, 0, 0)],
        ids=["negative-kc", "negative-kl", "negative-kq", "all-zero"],
    )
    def test_invalid_coefficients(self, coefficients):
        with pytest.raises(ValueError):
            Attenuation(*coefficients)


class TestAmbientAndDirectional:
    """Tests for ambient and directional lights."""

    def test_ambient_is_uniform(self):
        ambient = AmbientLight((10, 20, 30))
        assert ambient.intensity_at(Point(5, 5, 5)) == Color(10, 20, 30)

    def test_directional_direction_is_negated(self):
        light = DirectionalLight((100, 100, 100), (0, 0, -2))
        assert light.direction == Vector(0, 0, -1)
        assert light.direction_at(Point(3, 4, 5)) == Vector(0, 0, 1)

    def test_directional_intensity_is_constant(self):
        light = DirectionalLight((100, 50, 0), (1, 0, 0))
        assert light.intensity_at(Point(1000, 0, 0)) == Color(100, 50, 0)

    def test_lights_satisfy_protocol(self):
        assert isinstance(DirectionalLight((1, 1, 1), (1, 0, 0)), LightSource)
        assert isinstance(PointLight((1, 1, 1), (0, 0, 0)), LightSource)


class TestPointLight:
    """Tests for point lights."""

    def test_direction_points_away_from_light(self):
        light = PointLight((100, 100, 100), (0, 0, 10))
        assert light.direction_at(Point(0, 0, 0)) == Vector(0, 0, -1)

    def test_direction_at_light_position_raises(self):
        light = PointLight((100, 100, 100), (0, 0, 10))
        with pytest.raises(ZeroVectorError):
            light.direction_at(Point(0, 0, 10))

    def test_intensity_falls_off(self):
        light = PointLight((200, 100, 50), (0, 0, 10), Attenuation(kc=1, kl=0.1))
        intensity = light.intensity_at(Point(0, 0, 0))
        assert intensity.to_tuple() == pytest.approx((100, 50, 25))

    def test_pack(self):
        packed = PointLight((1, 2, 3), (4, 5, 6), Attenuation(1, 0.1, 0.01)).pack()
        assert packed.kind == LightKind.POINT
        assert packed.position == (4.0, 5.0, 6.0)
        assert (packed.kc, packed.kl, packed.kq) == (1, 0.1, 0.01)


class TestSpotLight:
    """Tests for spot lights."""

    def test_direction_at(self):
        spot = SpotLight(
            Color(400, 240, 0),
            (-50, -50, 25),
            (1, 1, -0.5),
            attenuation=Attenuation(kl=0.001, kq=0.0001),
        )
        assert spot.direction_at(Point(-50, -50, 0)) == Vector(0, 0, -1)

    def test_full_intensity_along_beam(self):
        spot = SpotLight((100, 100, 100), (0, 0, 10), (0, 0, -1))
        assert spot.intensity_at(Point(0, 0, 0)).to_tuple() == pytest.approx((100, 100, 100))

    def test_dark_beside_and_behind_beam(self):
        spot = SpotLight((100, 100, 100), (0, 0, 10), (0, 0, -1))
        assert spot.intensity_at(Point(10, 0, 10)).to_tuple() == pytest.approx((0, 0, 0))
        assert spot.intensity_at(Point(0, 0, 20)).to_tuple() == pytest.approx((0, 0, 0))

    def test_narrow_beam(self):
        wide = SpotLight((100, 100, 100), (0, 0, 10), (0, 0, -1))
        narrow = SpotLight((100, 100, 100), (0, 0, 10), (0, 0, -1), narrow_beam=2)
        point = Point(10, 0, 0)
        assert wide.intensity_at(point).r == pytest.approx(100 / math.sqrt(2))
        assert narrow.intensity_at(point).r == pytest.approx(50)

    @pytest.mark.parametrize("narrow_beam", [0, -1])
    def test_non_positive_narrow_beam(self, narrow_beam):
        with pytest.raises(ValueError):
            SpotLight((1, 1, 1), (0, 0, 0), (0, 0, 1), narrow_beam=narrow_beam)

    def test_pack(self):
        packed = SpotLight((1, 2, 3), (0, 0, 0), (0, 0, 2), narrow_beam=3).pack()
        assert packed.kind == LightKind.SPOT
        assert packed.direction == (0.0, 0.0, 1.0)
        assert packed.narrow_beam == 3.0


DEVICE_LIGHTS = [
    DirectionalLight((100, 80, 60), (1, -1, -1)),
    PointLight((500, 400, 300), (10, 20, 30), Attenuation(1, 0.01, 0.001)),
    SpotLight((800, 600, 0), (0, 50, 0), (0, -1, 0.2), Attenuation(1, 0.005), narrow_beam=4),
]

SHADED_POINTS = [(0.0, 0.0, 0.0), (5.0, -3.0, 2.0), (-20.0, 10.0, 40.0)]


class TestDeviceLights:
    """Tests for the device light functions."""

    @pytest.mark.parametrize("light", DEVICE_LIGHTS, ids=["directional", "point", "spot"])
    def test_matches_host(self, light):
        import taichi as ti

        from src.phong.core.ray import vec3
        from src.phong.lighting.lights import light_direction, light_intensity
        from src.phong.scene.device import add_light, get_light

        add_light(light.pack())
        n = len(SHADED_POINTS)
        intensities = ti.Vector.field(3, dtype=ti.f64, shape=n)
        directions = ti.Vector.field(3, dtype=ti.f64, shape=n)
        points = ti.Vector.field(3, dtype=ti.f64, shape=n)
        for k, p in enumerate(SHADED_POINTS):
            points[k] = p

        @ti.kernel
        def test_kernel():
            for k in range(n):
                device_light = get_light(0)
                p = vec3(points[k][0], points[k][1], points[k][2])
                intensities[k] = light_intensity(device_light, p)
                directions[k] = light_direction(device_light, p)

        test_kernel()
        for k, p in enumerate(SHADED_POINTS):
            expected_intensity = light.intensity_at(Point(*p)).to_tuple()
            expected_direction = light.direction_at(Point(*p)).to_tuple()
            got_intensity = tuple(intensities[k][c] for c in range(3))
            got_direction = tuple(directions[k][c] for c in range(3))
            assert got_intensity == pytest.approx(expected_intensity, abs=1e-9)
            assert got_direction == pytest.approx(expected_direction, abs=1e-12)

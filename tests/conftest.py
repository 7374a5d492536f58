"""Pytest configuration for the ray caster tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session and before any
module that declares Taichi fields is imported.
"""

import pytest

from src.phong.config import RuntimeConfig, init_runtime


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls, which would
    invalidate the fields declared by the device modules.
    """
    init_runtime(RuntimeConfig(arch="cpu", random_seed=42))
    yield


@pytest.fixture(autouse=True)
def clear_device_scene():
    """Clear the device scene before and after each test."""
    # Import here so the fields are declared after ti.init
    from src.phong.scene.device import clear_scene

    clear_scene()
    yield
    clear_scene()


@pytest.fixture
def run_kernel_ray():
    """Build a DeviceRay-taking kernel runner for device geometry tests.

    Returns a function ``make(func)`` where ``func(ray)`` is a ti.func
    returning a HitRecord; ``make(func)(origin, direction)`` runs it in a
    kernel and returns ``(hit, t, point)``.
    """
    import taichi as ti

    from src.phong.core.ray import DeviceRay, normalize_vector, vec3

    def make(func):
        hit = ti.field(dtype=ti.i32, shape=())
        t_val = ti.field(dtype=ti.f64, shape=())
        point = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def kernel(ox: ti.f64, oy: ti.f64, oz: ti.f64, dx: ti.f64, dy: ti.f64, dz: ti.f64):
            ray = DeviceRay(origin=vec3(ox, oy, oz), direction=normalize_vector(vec3(dx, dy, dz)))
            record = func(ray)
            hit[None] = record.hit
            t_val[None] = record.t
            point[None] = record.point

        def run(origin, direction):
            kernel(*origin, *direction)
            p = point[None]
            return int(hit[None]), float(t_val[None]), (float(p[0]), float(p[1]), float(p[2]))

        return run

    return make

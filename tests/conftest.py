"""Pytest configuration for raytracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield
    # Note: We don't call ti.reset() here as it can cause issues
    # with subsequent tests if any cleanup happens after


@pytest.fixture
def diffuse_material():
    """Pure diffuse, non-reflective material."""
    from src.ascii_raytracer.materials.material import MaterialParams

    return MaterialParams(
        refractive_index=1.0,
        albedo=(1.0, 0.0, 0.0, 0.0),
        diffuse_color=(0.5, 0.25, 1.0),
        specular_exponent=10.0,
        name="diffuse",
    )


@pytest.fixture
def perfect_mirror():
    """Material that only reflects, with weight 1."""
    from src.ascii_raytracer.materials.material import MaterialParams

    return MaterialParams(
        refractive_index=1.0,
        albedo=(0.0, 0.0, 1.0, 0.0),
        diffuse_color=(1.0, 1.0, 1.0),
        specular_exponent=0.0,
        name="perfect_mirror",
    )

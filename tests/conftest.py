"""Pytest configuration and fixtures for the fluid solver tests."""

import numpy as np
import pytest

from fluidsim import FluidSystem, ScalarGrid, VectorField


@pytest.fixture
def rng():
    """Seeded generator so random fields are reproducible."""
    return np.random.default_rng(1234)


@pytest.fixture
def small_system():
    """4x4 system with no diffusion and no viscosity."""
    return FluidSystem(4, 4, diffusion_constant=0.0, viscosity=0.0)


@pytest.fixture
def medium_system():
    """16x12 system with a little diffusion and viscosity."""
    return FluidSystem(16, 12, diffusion_constant=0.0001, viscosity=0.0001)


@pytest.fixture
def random_grid(rng):
    """6x5 grid with random values everywhere, ghost cells included."""
    grid = ScalarGrid(6, 5)
    grid.data[...] = rng.uniform(-1.0, 1.0, size=grid.shape)
    return grid


@pytest.fixture
def smooth_velocity():
    """16x16 field that pushes outward from the center (strongly divergent)."""
    field = VectorField(16, 16)
    i, j = np.meshgrid(np.arange(1, 17), np.arange(1, 17), indexing="ij")
    bump = np.exp(-((i - 8.5) ** 2 + (j - 8.5) ** 2) / 12.0)
    field[0].interior[...] = (i - 8.5) / 8.0 * bump
    field[1].interior[...] = (j - 8.5) / 8.0 * bump
    return field

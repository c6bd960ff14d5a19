"""Tests for the pressure projection stage."""

import numpy as np
import pytest

from fluidsim import BoundaryPolicy, ScalarGrid, VectorField, set_boundaries
from fluidsim.solver import divergence, gradient, max_divergence, project


@pytest.fixture
def uniform_rightward():
    """4x4 field with u = 1 in every interior cell, walls already applied."""
    field = VectorField(4, 4)
    field[0].interior[...] = 1.0
    set_boundaries(field[0], BoundaryPolicy.HORIZONTAL)
    set_boundaries(field[1], BoundaryPolicy.VERTICAL)
    return field


class TestDifferenceOperators:
    """Central differences with unit spacing, scaled by 0.5 per axis."""

    def test_divergence_of_linear_field(self):
        field = VectorField(5, 5)
        i, j = np.meshgrid(np.arange(7), np.arange(7), indexing="ij")
        field[0].data[...] = 2.0 * i
        field[1].data[...] = -0.5 * j

        div = ScalarGrid(5, 5)
        divergence(div, field)
        np.testing.assert_allclose(div.interior, 1.5)

    def test_gradient_of_linear_field(self):
        p = ScalarGrid(5, 5)
        i, j = np.meshgrid(np.arange(7), np.arange(7), indexing="ij")
        p.data[...] = 3.0 * i + j

        grad = VectorField(5, 5)
        gradient(grad, p)
        np.testing.assert_allclose(grad[0].interior, 3.0)
        np.testing.assert_allclose(grad[1].interior, 1.0)
        # Ghost cells of the output are not written
        assert np.all(grad[0].data[0, :] == 0.0)

    def test_walls_count_in_edge_divergence(self, uniform_rightward):
        """Reflective ghosts make a uniform flow diverge at the walls only."""
        div = ScalarGrid(4, 4)
        divergence(div, uniform_rightward)
        np.testing.assert_allclose(div.interior[0, :], 1.0)
        np.testing.assert_allclose(div.interior[1:3, :], 0.0)
        np.testing.assert_allclose(div.interior[3, :], -1.0)


class TestProject:
    """Projection removes the divergent part of a field."""

    def test_zero_field_stays_zero(self):
        field = VectorField(6, 6)
        project(field)
        assert np.all(field[0].data == 0.0) and np.all(field[1].data == 0.0)

    def test_reduces_divergence_of_uniform_flow(self, uniform_rightward):
        before = max_divergence(uniform_rightward)
        metrics = project(uniform_rightward)
        after = max_divergence(uniform_rightward)

        assert before == pytest.approx(1.0)
        assert after == pytest.approx(0.25, abs=0.03)
        assert metrics["divergence_before_max"] == pytest.approx(before)
        assert metrics["divergence_after_max"] == pytest.approx(after)

    def test_uniform_flow_converges_to_exact_projection(self, uniform_rightward):
        """With a converged pressure solve the result is known in closed form.

        The pressure is linear, p = [-1.5, -0.5, 0.5, 1.5] along x, so the
        full gradient is removed in the two middle columns and half of it
        in the wall columns. The wide central stencil leaves 0.25.
        """
        project(uniform_rightward, iterations=200)

        expected = np.tile(np.array([[0.5], [0.0], [0.0], [0.5]]), (1, 4))
        np.testing.assert_allclose(uniform_rightward[0].interior, expected, atol=1e-4)
        np.testing.assert_array_equal(uniform_rightward[1].interior, 0.0)
        assert max_divergence(uniform_rightward) == pytest.approx(0.25, abs=1e-4)

    def test_removes_most_divergence_of_smooth_field(self, smooth_velocity):
        before = max_divergence(smooth_velocity)
        project(smooth_velocity, iterations=200)
        assert max_divergence(smooth_velocity) < 0.25 * before

    def test_more_iterations_project_better(self, smooth_velocity):
        coarse = VectorField(16, 16)
        coarse.assign(smooth_velocity)
        project(coarse, iterations=2)
        project(smooth_velocity, iterations=200)
        assert max_divergence(smooth_velocity) < max_divergence(coarse)

    def test_reapplies_velocity_walls(self, rng):
        field = VectorField(6, 5)
        for comp in field:
            comp.interior[...] = rng.uniform(-1.0, 1.0, size=(6, 5))
        project(field)

        u, v = field
        np.testing.assert_array_equal(u[0, 1:6], -u[1, 1:6])
        np.testing.assert_array_equal(u[7, 1:6], -u[6, 1:6])
        np.testing.assert_array_equal(v[1:7, 0], -v[1:7, 1])
        np.testing.assert_array_equal(v[1:7, 6], -v[1:7, 5])

    def test_metrics_keys(self, uniform_rightward):
        metrics = project(uniform_rightward, iterations=5)
        assert metrics["iterations"] == 5
        assert metrics["time_ms"] >= 0.0
        assert metrics["divergence_after_mean"] <= metrics["divergence_after_max"]

"""
solver.py — Pressure Projection
================================
The projection step enforces INCOMPRESSIBILITY:
  div(v) ≈ 0 everywhere

After diffusion or advection the velocity field is generally NOT
divergence-free (fluid "piles up" in some cells). We fix this by:
  1. Computing the divergence of the current velocity field
  2. Solving the Poisson equation for pressure:  ∇²p = div(v)
  3. Subtracting the pressure gradient from velocity:  v = v - ∇p

This is the Helmholtz-Hodge decomposition: any vector field splits into a
divergence-free part plus a curl-free part (a gradient). We keep the
divergence-free part.

Everything is collocated at cell centers and uses central differences
with unit cell spacing, so the divergence and gradient are both scaled
by 0.5 per axis.
"""

import time

import numpy as np

from .boundary import BoundaryPolicy, set_boundaries
from .diffuse import solve_poisson
from .grid import ScalarGrid, VectorField


def divergence(out: ScalarGrid, velocity: VectorField):
    """
    Central-difference divergence at every interior cell.

      div[i,j] = 0.5 * (u[i+1,j] - u[i-1,j]) + 0.5 * (v[i,j+1] - v[i,j-1])

    Writes: out (interior only)
    """
    u = velocity[0].data
    v = velocity[1].data
    out.interior[...] = (
        0.5 * (u[2:, 1:-1] - u[:-2, 1:-1]) +
        0.5 * (v[1:-1, 2:] - v[1:-1, :-2])
    )


def gradient(out: VectorField, pressure: ScalarGrid):
    """
    Central-difference gradient of `pressure` at every interior cell.

    Writes: out[0], out[1] (interior only; ghost cells left as they are)
    """
    p = pressure.data
    out[0].interior[...] = 0.5 * (p[2:, 1:-1] - p[:-2, 1:-1])
    out[1].interior[...] = 0.5 * (p[1:-1, 2:] - p[1:-1, :-2])


def max_divergence(velocity: VectorField) -> float:
    """Largest |div(v)| over interior cells. High values = broken projection."""
    div = ScalarGrid(velocity.width, velocity.height)
    divergence(div, velocity)
    return float(np.abs(div.interior).max())


def project(velocity: VectorField, iterations: int = 20,
            scratch=None) -> dict:
    """
    Pressure projection: make the velocity field (approximately)
    divergence-free, in place.

    Args:
        velocity   : Field to correct (read and written)
        iterations : Jacobi sweeps for the pressure solve
        scratch    : Relaxation buffer passed through to solve_poisson

    Returns:
        dict with timing and divergence metrics (for benchmarking)
    """
    t_start = time.perf_counter()
    w, h = velocity.width, velocity.height

    # Step 1: divergence, negated to become the Poisson right-hand side
    div = ScalarGrid(w, h)
    divergence(div, velocity)
    divergence_before = float(np.abs(div.interior).max())
    div *= -1.0

    pressure = ScalarGrid(w, h)
    set_boundaries(div, BoundaryPolicy.CONTINUITY)
    set_boundaries(pressure, BoundaryPolicy.CONTINUITY)

    # Step 2: ∇²p = div(v) via the shared relaxation routine
    solve_poisson(pressure, div, 1.0, 4.0, BoundaryPolicy.CONTINUITY,
                  iterations, scratch)

    # Step 3: v = v - ∇p
    grad = VectorField(w, h)
    gradient(grad, pressure)
    velocity -= grad

    set_boundaries(velocity[0], BoundaryPolicy.HORIZONTAL)
    set_boundaries(velocity[1], BoundaryPolicy.VERTICAL)

    t_end = time.perf_counter()

    divergence(div, velocity)
    div_after = np.abs(div.interior)

    return {
        "time_ms"               : (t_end - t_start) * 1000,
        "iterations"            : iterations,
        "divergence_before_max" : divergence_before,
        "divergence_after_max"  : float(div_after.max()),
        "divergence_after_mean" : float(div_after.mean()),
    }

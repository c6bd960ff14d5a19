"""
diffuse.py — Diffusion via Jacobi Iteration
============================================
Diffusion makes quantities spread out over time.
  - High diffusion  → dye spreads fast (watercolor bleed)
  - Low diffusion   → dye stays tight
  - High viscosity  → thick fluid (honey)
  - Low viscosity   → thin fluid (air, water)

The math: we solve the implicit heat equation

  (I - a·∇²) x_new = x_old,    a = dt * rate * width * height

Implicit diffusion is unconditionally stable, so large dt does not blow up.
Solving it exactly is expensive; a fixed number of Jacobi sweeps is enough
for a plausible result.

The same relaxation solves the pressure Poisson equation in solver.py,
just with a = 1, c = 4. One routine, two sets of coefficients.
"""

from .boundary import BoundaryPolicy, VELOCITY_POLICIES, set_boundaries
from .grid import ScalarGrid, VectorField


def solve_poisson(
    x: ScalarGrid,
    x0: ScalarGrid,
    a: float,
    c: float,
    policy: BoundaryPolicy,
    iterations: int,
    scratch=None,
):
    """
    Jacobi relaxation for: x[i,j] = (x0[i,j] + a * sum_of_4_neighbors) / c

    Every sweep reads only the pre-sweep values of `x`: the new interior is
    written into `scratch`, then the whole scratch buffer is copied back
    into `x` and the boundary policy is applied. All sweeps always run.

    Args:
        x          : Output grid, overwritten (starts as a copy of x0)
        x0         : Right-hand side, read-only
        a, c       : Neighbor coefficient and normalizer
        policy     : Boundary policy applied after every sweep
        iterations : Number of sweeps (no early termination)
        scratch    : Destination buffer for each sweep; allocated if None
    """
    if iterations < 0:
        raise ValueError(f"iterations must be >= 0, got {iterations}")
    if scratch is None:
        scratch = ScalarGrid(x.width, x.height)
    assert scratch is not x and scratch is not x0, "scratch must be a separate buffer"

    # Scratch border stays zero; only its interior is written below
    scratch.clear()
    x.assign(x0)

    b = x0.data[1:-1, 1:-1]
    out = scratch.data[1:-1, 1:-1]
    for _ in range(iterations):
        p = x.data
        neighbors = (
            p[:-2, 1:-1] +   # i-1
            p[2:,  1:-1] +   # i+1
            p[1:-1, :-2] +   # j-1
            p[1:-1, 2:]      # j+1
        )
        out[...] = (b + a * neighbors) / c

        x.assign(scratch)
        set_boundaries(x, policy)


def diffuse(
    x: ScalarGrid,
    x0: ScalarGrid,
    rate: float,
    dt: float,
    policy: BoundaryPolicy,
    iterations: int,
    scratch=None,
):
    """
    Implicit diffusion of `x0` into `x`.

    Runs even when rate == 0 (then x = x0 with fresh ghost cells), so the
    output is always boundary-consistent.

    Reads: x0      Writes: x
    """
    a = dt * rate * x.width * x.height
    c = 1.0 + 4.0 * a
    solve_poisson(x, x0, a, c, policy, iterations, scratch)


def diffuse_velocity(
    velocity: VectorField,
    velocity_prev: VectorField,
    viscosity: float,
    dt: float,
    iterations: int,
    scratch=None,
):
    """
    Viscous diffusion of both velocity components, each with its own
    reflective policy.

    Reads: velocity_prev      Writes: velocity
    """
    for comp, comp_prev, policy in zip(velocity, velocity_prev, VELOCITY_POLICIES):
        diffuse(comp, comp_prev, viscosity, dt, policy, iterations, scratch)

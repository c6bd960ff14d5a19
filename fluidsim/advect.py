"""
advect.py — Semi-Lagrangian Advection
======================================
This is what makes fluid look like it's *actually flowing*.

The algorithm (per interior cell):
  1. Look at the cell center (i, j).
  2. Trace BACKWARD along the velocity at that cell by one timestep.
     → "Where did the stuff in this cell come FROM?"
  3. Sample the previous state at that back-traced position with
     bilinear interpolation (it'll land between grid cells).
  4. That sampled value becomes the new value for this cell.

Velocities are in domain units per second, so the trace is scaled by the
grid size (dt * width along x, dt * height along y) to get cell units.

Key reference: Jos Stam, "Stable Fluids" (SIGGRAPH 1999)
"""

import numpy as np

from .boundary import BoundaryPolicy, VELOCITY_POLICIES, set_boundaries
from .grid import ScalarGrid, VectorField


def _bilinear_interpolate(field: np.ndarray, x: np.ndarray, y: np.ndarray) -> np.ndarray:
    """
    Bilinear interpolation of a padded 2D field at fractional (x, y).

    Positions must already be clamped to [0.5, width+0.5] × [0.5, height+0.5]
    so that the upper corner index never leaves the ghost border.
    """
    # Lower corner of the surrounding 4-cell square
    i0 = np.floor(x).astype(np.int32)
    j0 = np.floor(y).astype(np.int32)
    i1 = i0 + 1
    j1 = j0 + 1

    # Fractional offsets
    s1 = x - i0
    s0 = 1.0 - s1
    t1 = y - j0
    t0 = 1.0 - t1

    return (
        s0 * (t0 * field[i0, j0] + t1 * field[i0, j1]) +
        s1 * (t0 * field[i1, j0] + t1 * field[i1, j1])
    )


def advect(d: ScalarGrid, d0: ScalarGrid, velocity: VectorField, dt: float,
           policy: BoundaryPolicy):
    """
    Move `d0` through `velocity` for one timestep, writing into `d`.

    `velocity` may be the same field `d0` belongs to (self-advection) or a
    different one (dye carried by velocity). `d` must not be `d0`.

    Reads: d0, velocity      Writes: d
    """
    assert d is not d0, "advection needs distinct source and destination"
    w, h = d.width, d.height

    i, j = np.meshgrid(
        np.arange(1, w + 1, dtype=np.float64),
        np.arange(1, h + 1, dtype=np.float64),
        indexing="ij",
    )

    # Back-trace, in grid-index space
    x = i - dt * w * velocity[0].interior
    y = j - dt * h * velocity[1].interior

    # Keep the sample inside interior + half a ghost cell
    x = np.clip(x, 0.5, w + 0.5)
    y = np.clip(y, 0.5, h + 0.5)

    d.interior[...] = _bilinear_interpolate(d0.data, x, y)
    set_boundaries(d, policy)


def advect_velocity(velocity: VectorField, velocity_prev: VectorField, dt: float):
    """
    Self-advection: each component of `velocity_prev` is carried by
    `velocity_prev` itself.

    Reads: velocity_prev      Writes: velocity
    """
    for comp, comp_prev, policy in zip(velocity, velocity_prev, VELOCITY_POLICIES):
        advect(comp, comp_prev, velocity_prev, dt, policy)

"""
boundary.py — Ghost-Cell Boundary Conditions
=============================================
Ghost cells are never simulated. They are recomputed from the adjacent
interior row/column every time a stage finishes, so the 5-point stencil
always has well-defined neighbors at the walls.

Three policies, picked per quantity:

  CONTINUITY  → density, pressure, divergence
                ghost = interior            (open / zero-gradient wall)
  HORIZONTAL  → x-velocity (u)
                ghost = -interior at left/right walls → no flow through them
  VERTICAL    → y-velocity (v)
                ghost = -interior at bottom/top walls → no flow through them

The left/right columns are filled first, then the bottom/top rows. Both
passes cover only the interior extent along the wall, so the four corner
cells are left as they were.
"""

from enum import Enum

from .grid import ScalarGrid


class BoundaryPolicy(Enum):
    CONTINUITY = 0
    HORIZONTAL = 1
    VERTICAL = 2


# Policy for component 0 (u) and component 1 (v) of a velocity field
VELOCITY_POLICIES = (BoundaryPolicy.HORIZONTAL, BoundaryPolicy.VERTICAL)


def set_boundaries(grid: ScalarGrid, policy: BoundaryPolicy):
    """
    Overwrite the ghost cells of `grid` from its edge interior cells.

    Modifies: grid (ghost cells only, corners untouched)
    """
    w, h = grid.width, grid.height
    d = grid.data

    x_sign = -1.0 if policy is BoundaryPolicy.HORIZONTAL else 1.0
    y_sign = -1.0 if policy is BoundaryPolicy.VERTICAL else 1.0

    # ── Left / right walls (i = 0, i = w+1) ───────────────────────────────
    d[0,     1:h + 1] = x_sign * d[1, 1:h + 1]
    d[w + 1, 1:h + 1] = x_sign * d[w, 1:h + 1]

    # ── Bottom / top walls (j = 0, j = h+1) ───────────────────────────────
    d[1:w + 1, 0]     = y_sign * d[1:w + 1, 1]
    d[1:w + 1, h + 1] = y_sign * d[1:w + 1, h]

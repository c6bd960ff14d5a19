"""
forces.py — Source Fields (Dye, Impulses, Wind)
================================================
Builders for the per-tick source fields handed to FluidSystem.step().

A source field has the same padded shape as the simulation grids. Only its
interior is written here; whatever lands in a source's ghost cells is
discarded by the first relaxation of the step anyway.

Typical use (a paint brush driven by the mouse):

    dye = sim.new_density_source()
    force = sim.new_velocity_source()
    splat_density(dye, x, y, amount=5.0)
    apply_impulse(force, x, y, fx=0.0, fy=2.0)
    sim.step(dye, force, dt)
"""

import numpy as np

from .grid import ScalarGrid, VectorField


def _interior_coords(width: int, height: int) -> tuple[np.ndarray, np.ndarray]:
    return np.meshgrid(np.arange(1, width + 1), np.arange(1, height + 1), indexing="ij")


def splat_density(field: ScalarGrid, x: int, y: int, amount: float, radius: int = 2):
    """
    Inject dye into a square of cells around (x, y).
    Uses a small radius so the injection looks smooth, not a single pixel.

    Args:
        field  : Density source to modify (in-place)
        x, y   : Center cell, interior indices 1..width / 1..height
        amount : Dye added to every covered cell
        radius : Half-size of the square, in cells
    """
    x0, x1 = max(1, x - radius), min(field.width + 1, x + radius + 1)
    y0, y1 = max(1, y - radius), min(field.height + 1, y + radius + 1)
    field[x0:x1, y0:y1] += amount


def apply_impulse(field: VectorField, x: float, y: float,
                  fx: float, fy: float, radius: float = 3.0):
    """
    Apply a localized force impulse (a fan, an explosion, a mouse drag).
    Force falls off linearly with distance from the center point.

    Args:
        field  : Velocity source to modify (in-place)
        x, y   : Center of the impulse (cell indices)
        fx, fy : Force components
        radius : Influence radius in cells
    """
    i, j = _interior_coords(field.width, field.height)
    dist = np.sqrt((i - x) ** 2 + (j - y) ** 2)
    mask = dist < radius
    falloff = 1.0 - dist[mask] / radius

    field[0].interior[mask] += fx * falloff
    field[1].interior[mask] += fy * falloff


def apply_wind(field: VectorField, direction: tuple = (1.0, 0.0), strength: float = 0.5):
    """
    Add a constant velocity to every interior cell.
    Useful for testing — blow dye in a consistent direction.

    Args:
        direction : (du, dv) direction of the wind
        strength  : Wind speed magnitude
    """
    du, dv = direction
    field[0].interior[...] += strength * du
    field[1].interior[...] += strength * dv

"""
fluidsim/ — 2D Stable Fluids Package
=====================================
Exports the main interfaces collaborators use.

Renderers import: FluidSystem → step(), .density, .velocity
Input handlers import: splat_density(), apply_impulse() to build sources
"""

from .boundary import BoundaryPolicy, set_boundaries
from .forces import apply_impulse, apply_wind, splat_density
from .grid import ScalarGrid, VectorField
from .simulation import DEFAULT_ITERATIONS, FluidSystem

__all__ = [
    "BoundaryPolicy",
    "DEFAULT_ITERATIONS",
    "FluidSystem",
    "ScalarGrid",
    "VectorField",
    "apply_impulse",
    "apply_wind",
    "set_boundaries",
    "splat_density",
]

"""
grid.py — Padded Collocated Grids
==================================
The storage every physics step reads from and writes into.

Layout of a single quantity (density, one velocity component, pressure...):

    j = height+1   .  g  g  g  g  .
    j = height     g  #  #  #  #  g
     ...           g  #  #  #  #  g
    j = 1          g  #  #  #  #  g
    j = 0          .  g  g  g  g  .
                  i=0 1  ...   width+1

  - `#` INTERIOR cells (1..width × 1..height) hold simulated values
  - `g` GHOST cells are one cell wide on every side; they only ever hold
    boundary reflections of the adjacent interior cell (see boundary.py)
  - `.` corners are never filled by the boundary step

All quantities live at cell centers (collocated), so every grid in a
FluidSystem has exactly the same (width+2, height+2) shape.
"""

import numpy as np


DTYPE = np.float32


class ScalarGrid:
    """
    One scalar quantity on a (width+2) × (height+2) zero-initialized buffer.

    Indexing is `grid[i, j]` with i along x and j along y, ghost border
    included. Out-of-range access is a programmer error.
    """

    def __init__(self, width: int, height: int):
        assert width > 0 and height > 0, "grid extents must be positive"
        self.width = width
        self.height = height
        self.data = np.zeros((width + 2, height + 2), dtype=DTYPE)

    @property
    def shape(self) -> tuple[int, int]:
        return self.data.shape

    @property
    def interior(self) -> np.ndarray:
        """Writable view of cells 1..width × 1..height."""
        return self.data[1:-1, 1:-1]

    def __getitem__(self, index):
        return self.data[index]

    def __setitem__(self, index, value):
        self.data[index] = value

    def _check(self, other: "ScalarGrid"):
        assert self.data.shape == other.data.shape, (
            f"grid shape mismatch: {self.data.shape} vs {other.data.shape}")

    def __iadd__(self, other: "ScalarGrid"):
        self._check(other)
        self.data += other.data
        return self

    def __isub__(self, other: "ScalarGrid"):
        self._check(other)
        self.data -= other.data
        return self

    def __imul__(self, scale: float):
        self.data *= scale
        return self

    def assign(self, other: "ScalarGrid"):
        """Copy the full buffer of `other` (ghost cells included) into self."""
        self._check(other)
        np.copyto(self.data, other.data)

    def clear(self):
        """Reset every cell to zero without reallocating."""
        self.data[:] = 0.0

    def copy(self) -> "ScalarGrid":
        grid = ScalarGrid(self.width, self.height)
        grid.assign(self)
        return grid

    def view(self) -> np.ndarray:
        """Read-only view of the full padded buffer (for renderers)."""
        v = self.data.view()
        v.flags.writeable = False
        return v

    def total(self) -> float:
        """Sum over interior cells."""
        return float(self.interior.sum())

    def __repr__(self):
        return (f"ScalarGrid({self.width}x{self.height}, "
                f"max={self.interior.max():.4f}, sum={self.total():.4f})")


class VectorField:
    """
    Two ScalarGrids of identical dimensions: component 0 = x, component 1 = y.
    """

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.components = (ScalarGrid(width, height), ScalarGrid(width, height))

    def __getitem__(self, k: int) -> ScalarGrid:
        return self.components[k]

    def __iter__(self):
        return iter(self.components)

    def __len__(self):
        return len(self.components)

    def __iadd__(self, other: "VectorField"):
        for mine, theirs in zip(self.components, other.components):
            mine += theirs
        return self

    def __isub__(self, other: "VectorField"):
        for mine, theirs in zip(self.components, other.components):
            mine -= theirs
        return self

    def __imul__(self, scale: float):
        for c in self.components:
            c *= scale
        return self

    def assign(self, other: "VectorField"):
        for mine, theirs in zip(self.components, other.components):
            mine.assign(theirs)

    def clear(self):
        for c in self.components:
            c.clear()

    def view(self) -> tuple[np.ndarray, np.ndarray]:
        return self.components[0].view(), self.components[1].view()

    def magnitude(self) -> np.ndarray:
        """Speed at each interior cell, shape (width, height)."""
        u, v = self.components
        return np.sqrt(u.interior ** 2 + v.interior ** 2)

    def __repr__(self):
        return (f"VectorField({self.width}x{self.height}, "
                f"max_speed={self.magnitude().max():.4f})")

"""
simulation.py — Master Physics Loop
====================================
The complete simulation step that ties everything together.
One call to `step()` advances the fluid by dt seconds.

Physics pipeline per tick:
  Velocity
    1. Add the injected velocity (forces, user input)
    2. Diffuse velocity (viscosity)
    3. Project (enforce incompressibility)
    4. Advect velocity through itself
    5. Project again (clean up after advection)
  Density
    6. Add the injected dye
    7. Diffuse density
    8. Advect density through the velocity produced by steps 1–5

The order is part of the algorithm: it follows Jos Stam's "Stable Fluids".

Buffers: each quantity has a current grid and a `_prev` grid. Before a
stage that needs the old state, the two references are swapped, so the
stage reads `_prev` and writes the current grid. No data is copied.
"""

import time

import numpy as np

from .advect import advect, advect_velocity
from .boundary import BoundaryPolicy
from .diffuse import diffuse, diffuse_velocity
from .grid import ScalarGrid, VectorField
from .solver import project


DEFAULT_ITERATIONS = 20   # Jacobi sweeps per diffusion / pressure solve


class FluidSystem:
    """
    A 2D incompressible fluid on a fixed width × height grid.

    Usage:
        sim = FluidSystem(64, 64, diffusion_constant=0.0001, viscosity=0.0)
        dye = sim.new_density_source()
        dye[32, 4] = 10.0
        for frame in range(100):
            sim.step(dye, None, dt=0.1)
            density = sim.density      # Hand to visualizer (read-only)
    """

    def __init__(self, width: int, height: int,
                 diffusion_constant: float = 0.0, viscosity: float = 0.0,
                 iterations: int = DEFAULT_ITERATIONS):
        """
        Args:
            width, height      : Interior cell counts (fixed for the lifetime)
            diffusion_constant : How fast dye spreads (0 = no spreading)
            viscosity          : Fluid thickness (0 = inviscid like air)
            iterations         : Jacobi sweeps per relaxation solve

        Large coefficients relative to 1/dt can make the result look wrong;
        they are not validated.
        """
        assert width > 0 and height > 0, "grid extents must be positive"
        if iterations < 0:
            raise ValueError(f"iterations must be >= 0, got {iterations}")

        self.width = width
        self.height = height
        self.diffusion_constant = diffusion_constant
        self.viscosity = viscosity
        self.iterations = iterations

        self._density = ScalarGrid(width, height)
        self._density_prev = ScalarGrid(width, height)
        self._velocity = VectorField(width, height)
        self._velocity_prev = VectorField(width, height)

        # Destination buffer for every Jacobi sweep
        self._scratch = ScalarGrid(width, height)

        self.frame = 0
        self.perf_log = []   # stores timing data per frame
        self._last_divergence_max = 0.0

    # ── Read access ───────────────────────────────────────────────────────

    @property
    def density(self) -> np.ndarray:
        """Read-only (width+2, height+2) view of the current density."""
        return self._density.view()

    @property
    def velocity(self) -> tuple[np.ndarray, np.ndarray]:
        """Read-only (u, v) views of the current velocity."""
        return self._velocity.view()

    def new_density_source(self) -> ScalarGrid:
        """Zeroed density source with this system's dimensions."""
        return ScalarGrid(self.width, self.height)

    def new_velocity_source(self) -> VectorField:
        """Zeroed velocity source with this system's dimensions."""
        return VectorField(self.width, self.height)

    # ── Transitions ───────────────────────────────────────────────────────

    def step(self, added_density: ScalarGrid, added_velocity: VectorField,
             dt: float) -> dict:
        """
        Advance the simulation by one timestep.

        Args:
            added_density  : Dye injected this tick (None = nothing)
            added_velocity : Velocity injected this tick (None = nothing)
            dt             : Timestep, positive; not clamped

        Returns performance metrics dict plus read-only field views.
        """
        assert dt > 0, "dt must be positive"
        t_total_start = time.perf_counter()

        timings = self.step_velocity(dt, added_velocity)
        timings.update(self.step_density(dt, added_density))

        self.frame += 1
        t_total = (time.perf_counter() - t_total_start) * 1000

        metrics = {
            "frame"          : self.frame,
            "total_ms"       : t_total,
            "fps"            : 1000.0 / t_total if t_total > 0 else 0,
            **timings,
            "divergence_max" : self._last_divergence_max,
            "density_total"  : self._density.total(),
            "density"        : self.density,
            "velocity"       : self.velocity,
        }
        self.perf_log.append({k: v for k, v in metrics.items()
                              if k not in ("density", "velocity")})
        return metrics

    def step_velocity(self, dt: float, added_velocity: VectorField) -> dict:
        """
        Add forces, diffuse, project, self-advect, project.

        Returns per-stage timings in milliseconds.
        """
        if added_velocity is not None:
            self._check_source(added_velocity[0])
            self._velocity += added_velocity

        # ── Diffuse: prev ← injected state, velocity ← solve ──────────────
        t0 = time.perf_counter()
        self._velocity, self._velocity_prev = self._velocity_prev, self._velocity
        diffuse_velocity(self._velocity, self._velocity_prev, self.viscosity, dt,
                         self.iterations, self._scratch)
        t_diffuse = (time.perf_counter() - t0) * 1000

        t0 = time.perf_counter()
        project(self._velocity, self.iterations, self._scratch)
        t_project1 = (time.perf_counter() - t0) * 1000

        # ── Advect: prev ← projected state, velocity ← traced ─────────────
        t0 = time.perf_counter()
        self._velocity, self._velocity_prev = self._velocity_prev, self._velocity
        advect_velocity(self._velocity, self._velocity_prev, dt)
        t_advect = (time.perf_counter() - t0) * 1000

        t0 = time.perf_counter()
        proj_metrics = project(self._velocity, self.iterations, self._scratch)
        t_project2 = (time.perf_counter() - t0) * 1000
        self._last_divergence_max = proj_metrics["divergence_after_max"]

        return {
            "diffuse_vel_ms" : t_diffuse,
            "project1_ms"    : t_project1,
            "advect_vel_ms"  : t_advect,
            "project2_ms"    : t_project2,
        }

    def step_density(self, dt: float, added_density: ScalarGrid) -> dict:
        """
        Add dye, diffuse, advect through the current velocity.

        Returns per-stage timings in milliseconds.
        """
        if added_density is not None:
            self._check_source(added_density)
            self._density += added_density

        # ── Diffuse: prev ← injected state, density ← solve ───────────────
        t0 = time.perf_counter()
        self._density, self._density_prev = self._density_prev, self._density
        diffuse(self._density, self._density_prev, self.diffusion_constant, dt,
                BoundaryPolicy.CONTINUITY, self.iterations, self._scratch)
        t_diffuse = (time.perf_counter() - t0) * 1000

        # ── Advect: prev ← diffused state, density ← traced ───────────────
        t0 = time.perf_counter()
        self._density, self._density_prev = self._density_prev, self._density
        advect(self._density, self._density_prev, self._velocity, dt,
               BoundaryPolicy.CONTINUITY)
        t_advect = (time.perf_counter() - t0) * 1000

        return {
            "diffuse_den_ms" : t_diffuse,
            "advect_den_ms"  : t_advect,
        }

    def clear(self):
        """Zero all four grids. Dimensions and coefficients are kept."""
        self._density.clear()
        self._density_prev.clear()
        self._velocity.clear()
        self._velocity_prev.clear()

    def _check_source(self, source: ScalarGrid):
        if not isinstance(source, ScalarGrid):
            raise ValueError(
                f"Sources must be ScalarGrid/VectorField, got {type(source).__name__}. "
                f"Use new_density_source() / new_velocity_source().")
        assert source.shape == self._density.shape, (
            f"source shape {source.shape} does not match grid {self._density.shape}")

    # ── Status ────────────────────────────────────────────────────────────

    def print_status(self):
        """Pretty-print current simulation state."""
        d = self._density.interior
        u, v = self._velocity
        print(f"\n{'='*50}")
        print(f"  Frame: {self.frame}  |  Grid: {self.width}x{self.height}")
        print(f"  Density   : max={d.max():.4f}, total={d.sum():.2f}")
        print(f"  Velocity  : max_u={np.abs(u.interior).max():.4f}, "
              f"max_v={np.abs(v.interior).max():.4f}")
        if self.perf_log:
            last = self.perf_log[-1]
            print(f"  Divergence: max={last['divergence_max']:.6f}")
            print(f"  Perf      : {last['total_ms']:.1f}ms/frame ({last['fps']:.1f} FPS)")
        print(f"{'='*50}")

    def __repr__(self):
        return (f"FluidSystem({self.width}x{self.height}, "
                f"diffusion={self.diffusion_constant}, viscosity={self.viscosity}, "
                f"frame={self.frame})")

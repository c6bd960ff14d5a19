"""
visualizer.py — Density Viewer
===============================
Renders the dye field of a FluidSystem with a speed overlay:
  - left : density (interior cells only, ghost border hidden)
  - right: velocity magnitude

Uses matplotlib FuncAnimation for real-time updates. The viewer only
reads the read-only views returned by FluidSystem.step().
"""

import numpy as np
import matplotlib.pyplot as plt
import matplotlib.animation as animation
from matplotlib.colors import LinearSegmentedColormap

# Custom smoke colormap: black → orange → white
SMOKE_COLORS = ["#000000", "#1a0a00", "#ff6a00", "#ffffff"]
smoke_cmap = LinearSegmentedColormap.from_list("smoke", SMOKE_COLORS)


class FluidVisualizer:
    """
    Real-time viewer of a FluidSystem.

    Usage (standalone):
        from fluidsim import FluidSystem, splat_density
        from visualizer import FluidVisualizer

        sim = FluidSystem(64, 64)
        dye = sim.new_density_source()
        splat_density(dye, 32, 4, 5.0)
        viz = FluidVisualizer(sim, dye, None, dt=0.1)
        viz.run()  # Opens live window
    """

    def __init__(self, simulation, added_density=None, added_velocity=None,
                 dt: float = 0.1, vmax: float = 2.0):
        """
        Args:
            simulation     : FluidSystem instance
            added_density  : Dye source injected every frame (or None)
            added_velocity : Velocity source injected every frame (or None)
            dt             : Timestep per frame
            vmax           : Density mapped to white
        """
        self.sim = simulation
        self.added_density = added_density
        self.added_velocity = added_velocity
        self.dt = dt
        self.vmax = vmax

        self._setup_figure()

    def _setup_figure(self):
        """Initialize the matplotlib figure with 2 subplots."""
        self.fig, self.axes = plt.subplots(1, 2, figsize=(11, 5))
        self.fig.patch.set_facecolor('#0a0a0a')

        titles = ["density", "speed"]
        cmaps = [smoke_cmap, "viridis"]
        vmaxes = [self.vmax, 1.0]   # speed is rescaled every frame
        self.imgs = []

        dummy = np.zeros((self.sim.height, self.sim.width))

        for ax, title, cmap, vmax in zip(self.axes, titles, cmaps, vmaxes):
            ax.set_facecolor('#0a0a0a')
            ax.set_title(title, color='#aaaaaa', fontsize=9, fontfamily='monospace')
            ax.set_xticks([])
            ax.set_yticks([])
            for spine in ax.spines.values():
                spine.set_edgecolor('#333333')

            img = ax.imshow(
                dummy, cmap=cmap,
                vmin=0, vmax=vmax,
                interpolation='bilinear',
                origin='lower',
                aspect='equal'
            )
            self.imgs.append(img)

        self.title_text = self.fig.suptitle(
            "Fluid Sim — Frame 0 | 0.0 FPS",
            color='#cccccc', fontsize=10, fontfamily='monospace'
        )

        plt.tight_layout()

    @staticmethod
    def _get_images(metrics) -> tuple:
        """Strip the ghost border; transpose so X is horizontal."""
        density = metrics["density"][1:-1, 1:-1]
        u, v = metrics["velocity"]
        speed = np.sqrt(u[1:-1, 1:-1] ** 2 + v[1:-1, 1:-1] ** 2)
        return density.T, speed.T

    def update(self, frame_num):
        """Called by FuncAnimation each frame. Steps sim and updates plots."""
        metrics = self.sim.step(self.added_density, self.added_velocity, self.dt)

        density, speed = self._get_images(metrics)
        self.imgs[0].set_data(density)
        self.imgs[1].set_data(speed)
        self.imgs[1].set_clim(0.0, max(float(speed.max()), 1e-6))

        self.title_text.set_text(
            f"Fluid Sim — Frame {metrics['frame']} | "
            f"{metrics['fps']:.1f} FPS | "
            f"div_max={metrics['divergence_max']:.5f}"
        )

        return self.imgs + [self.title_text]

    def run(self, fps: int = 10, frames: int = 500):
        """
        Start the live animation window.

        Args:
            fps    : Target animation frame rate
            frames : Total frames to render
        """
        interval_ms = 1000 // fps
        self.anim = animation.FuncAnimation(
            self.fig,
            self.update,
            frames=frames,
            interval=interval_ms,
            blit=False
        )
        plt.show()

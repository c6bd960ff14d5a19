"""
main.py — Master Entry Point
=============================
Runs the 2D fluid with a dye emitter at the bottom center.

Usage:
    python main.py                          # Headless run (default)
    python main.py --mode live              # Live matplotlib viewer
    python main.py --mode benchmark         # Per-stage timing breakdown
    python main.py --width 128 --height 64 --frames 200
"""

import argparse
import numpy as np


# ── Emitter parameters ────────────────────────────────────────────────────────
EMITTER_DENSITY = 5.0      # dye added per tick
EMITTER_FORCE   = 2.0      # upward velocity added per tick
EMITTER_RADIUS  = 2        # cells


def make_emitter(sim):
    """Dye + upward push near the bottom center, reused every tick."""
    from fluidsim import splat_density, apply_impulse

    x, y = sim.width // 2, 1 + EMITTER_RADIUS
    dye = sim.new_density_source()
    force = sim.new_velocity_source()
    splat_density(dye, x, y, EMITTER_DENSITY, radius=EMITTER_RADIUS)
    apply_impulse(force, x, y, 0.0, EMITTER_FORCE, radius=EMITTER_RADIUS + 1)
    return dye, force


def build_system(args):
    from fluidsim import FluidSystem

    return FluidSystem(args.width, args.height,
                       diffusion_constant=args.diffusion,
                       viscosity=args.viscosity,
                       iterations=args.iterations)


def run_live(args):
    """Live interactive visualization."""
    from visualizer import FluidVisualizer

    print(f"Starting live simulation ({args.width}x{args.height})...")
    print("Close the window to exit.\n")

    sim = build_system(args)
    dye, force = make_emitter(sim)
    viz = FluidVisualizer(sim, dye, force, dt=args.dt)
    viz.run(fps=10, frames=args.frames)


def run_headless(args):
    """Run simulation without display — prints stats every 10 frames."""
    print(f"\nHeadless simulation | {args.width}x{args.height} | {args.frames} frames")
    print(f"{'─'*60}")

    sim = build_system(args)
    dye, force = make_emitter(sim)
    total_times = []

    for f in range(args.frames):
        metrics = sim.step(dye, force, args.dt)
        total_times.append(metrics["total_ms"])

        if f % 10 == 0:
            print(f"  Frame {f:03d} | {metrics['total_ms']:6.1f}ms "
                  f"({metrics['fps']:.1f} FPS) | "
                  f"div_max={metrics['divergence_max']:.5f} | "
                  f"density={metrics['density_total']:.1f}")

    sim.print_status()
    print(f"  Average: {np.mean(total_times):.1f}ms/frame ({1000/np.mean(total_times):.1f} FPS)")
    print(f"  Min:     {np.min(total_times):.1f}ms")
    print(f"  Max:     {np.max(total_times):.1f}ms")


def run_benchmark(args):
    """Detailed performance breakdown: how long each physics stage takes."""
    print(f"\n{'='*60}")
    print(f"  BENCHMARK | {args.width}x{args.height} | {args.frames} frames "
          f"| {args.iterations} iterations")
    print(f"{'='*60}")

    sim = build_system(args)
    dye, force = make_emitter(sim)

    # Warm up
    for _ in range(5):
        sim.step(dye, force, args.dt)

    logs = [sim.step(dye, force, args.dt) for _ in range(args.frames)]

    keys = ["diffuse_vel_ms", "project1_ms", "advect_vel_ms", "project2_ms",
            "diffuse_den_ms", "advect_den_ms", "total_ms"]

    print(f"\n{'Stage':<20} {'Mean':>8} {'Min':>8} {'Max':>8}")
    print(f"{'─'*50}")
    for k in keys:
        vals = [m[k] for m in logs]
        print(f"  {k:<18} {np.mean(vals):>7.2f}ms {np.min(vals):>7.2f}ms {np.max(vals):>7.2f}ms")

    total_vals = [m["total_ms"] for m in logs]
    print(f"\n{'─'*50}")
    print(f"  FPS (physics only): {1000/np.mean(total_vals):.1f}")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="2D Stable Fluids Simulation")
    parser.add_argument(
        "--mode", choices=["live", "headless", "benchmark"],
        default="headless",
        help="Run mode (default: headless)"
    )
    parser.add_argument("--width",      type=int,   default=64,  help="Interior cells along x (default: 64)")
    parser.add_argument("--height",     type=int,   default=64,  help="Interior cells along y (default: 64)")
    parser.add_argument("--frames",     type=int,   default=100, help="Number of frames")
    parser.add_argument("--dt",         type=float, default=0.1, help="Timestep in seconds")
    parser.add_argument("--diffusion",  type=float, default=0.00005, help="Dye diffusion constant")
    parser.add_argument("--viscosity",  type=float, default=0.00001, help="Fluid viscosity")
    parser.add_argument("--iterations", type=int,   default=20,  help="Jacobi sweeps per solve")

    args = parser.parse_args(argv)
    if args.width <= 0 or args.height <= 0:
        parser.error("--width and --height must be positive")
    if args.dt <= 0:
        parser.error("--dt must be positive")
    if args.diffusion < 0 or args.viscosity < 0:
        parser.error("--diffusion and --viscosity must be non-negative")
    if args.iterations < 0:
        parser.error("--iterations must be non-negative")
    return args


if __name__ == "__main__":
    args = parse_args()

    if args.mode == "live":
        run_live(args)
    elif args.mode == "headless":
        run_headless(args)
    elif args.mode == "benchmark":
        run_benchmark(args)

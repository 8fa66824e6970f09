#!/usr/bin/env python3
"""
WingFlow command line entry point.

Usage:
    wingflow
    wingflow --naca 2412 --angle 8 --mode streamlines
    wingflow --control-points foil.json --heatmap
    wingflow --headless --frames 300 --particles 20000

Builds the airfoil and the flow simulation from the arguments and either
opens the interactive matplotlib view or runs a fixed number of ticks
headless and reports summary statistics.
"""

import argparse
import logging
import sys
import time

import numpy as np

from . import config
from .core.airfoil import Airfoil, NacaParameters, load_control_points
from .core.parameters import ConfigurationError, RenderMode, SimulationConfig, load_simulation_config
from .simulation import FlowSimulation

logger = logging.getLogger(__name__)


def parse_arguments(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog='wingflow',
        description='WingFlow - animated airflow around a 2D wing section',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  wingflow                                  # NACA 4414 at -10 degrees
  wingflow --naca 0012 --angle 18           # Stalled symmetric section
  wingflow --mode streamlines --heatmap     # Smoke lanes with heatmap
  wingflow --control-points foil.json       # Freeform section
  wingflow --headless --frames 500          # No window, print statistics
        """
    )

    geometry = parser.add_mutually_exclusive_group()
    geometry.add_argument('--naca', '-n', type=str, default=None,
                          help=f'NACA 4-digit code (default: {config.DEFAULT_NACA_CODE})')
    geometry.add_argument('--control-points', '-c', type=str, default=None,
                          help='JSON file with freeform control points')

    parser.add_argument('--angle', '-a', type=float, default=config.DEFAULT_ANGLE_DEG,
                        help='Angle of attack in degrees; negative values create downforce')
    parser.add_argument('--thickness', type=float, default=None,
                        help='Override the NACA thickness (%% of chord)')
    parser.add_argument('--config', type=str, default=None,
                        help='JSON file with simulation settings')
    parser.add_argument('--mode', '-m', type=str, default=None,
                        choices=[m.value for m in RenderMode], help='Particle render mode')
    parser.add_argument('--particles', '-p', type=int, default=None, help='Particle population size')
    parser.add_argument('--speed', type=float, default=None, help='Downstream drift per tick')
    parser.add_argument('--turbulence', type=float, default=None, help='Wake chaos multiplier (0-3)')
    parser.add_argument('--no-wake', action='store_true', help='Disable wake turbulence')
    parser.add_argument('--heatmap', action='store_true', help='Color particles by flow intensity')
    parser.add_argument('--seed', type=int, default=None, help='Random seed')
    parser.add_argument('--frames', type=int, default=config.ANIMATION_FRAMES, help='Number of frames')
    parser.add_argument('--interval', type=int, default=config.ANIMATION_INTERVAL,
                        help='Milliseconds between frames')
    parser.add_argument('--headless', action='store_true', help='Run without a window')
    parser.add_argument('--verbose', '-v', action='count', default=0, help='Increase log verbosity')

    args = parser.parse_args(argv)
    try:
        args.sim_config = build_config(args)
        args.airfoil = build_airfoil(args)
    except (ConfigurationError, OSError) as e:
        parser.error(str(e))
    return args


def build_config(args):
    """SimulationConfig from an optional JSON file and command-line overrides."""
    sim_config = SimulationConfig()
    if args.config:
        sim_config = load_simulation_config(args.config, sim_config)

    overrides = {}
    if args.mode is not None:
        overrides['render_mode'] = RenderMode.parse(args.mode)
    if args.particles is not None:
        overrides['population_size'] = args.particles
    if args.speed is not None:
        overrides['base_speed'] = args.speed
    if args.turbulence is not None:
        overrides['turbulence_intensity'] = args.turbulence
    if args.no_wake:
        overrides['wake_enabled'] = False
    if args.heatmap:
        overrides['heatmap_enabled'] = True
    return sim_config.with_changes(**overrides) if overrides else sim_config


def build_airfoil(args):
    """Airfoil from a NACA code or a control-point file."""
    if args.control_points:
        if args.thickness is not None:
            raise ConfigurationError('--thickness only applies to NACA sections')
        return Airfoil(control_points=load_control_points(args.control_points), angle_deg=args.angle)

    naca = NacaParameters.from_code(args.naca or config.DEFAULT_NACA_CODE)
    airfoil = Airfoil(naca=naca, angle_deg=args.angle)
    if args.thickness is not None:
        airfoil.set_thickness(args.thickness)
    return airfoil


def setup_logging(verbosity):
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format='%(asctime)s %(name)s %(levelname)s: %(message)s')


def run_headless(simulation, airfoil, frames, interval):
    """
    Run a fixed number of ticks without a window.

    Returns:
        dict: Summary statistics of the final frame and timing
    """
    aero = airfoil.aerodynamic_input()
    start = time.perf_counter()
    frame = None
    for i in range(frames):
        latest = simulation.step(aero, i * interval / 1000.0)
        if latest is not None:
            frame = latest
    elapsed = time.perf_counter() - start

    stats = {
        'frames': frames,
        'particles': simulation.field.population_size,
        'mean_tick_ms': 1000.0 * elapsed / max(frames, 1),
    }
    if frame is not None:
        x = frame.positions[:, 0]
        stats['x_range'] = (float(x.min()), float(x.max()))
        stats['visible'] = int(frame.visible.sum())
    if simulation.field.wake_spread is not None:
        stats['mean_wake_spread'] = float(np.mean(simulation.field.wake_spread))
    return stats


def main(argv=None):
    args = parse_arguments(argv)
    setup_logging(args.verbose)

    airfoil = args.airfoil
    sim_config = args.sim_config
    aero = airfoil.aerodynamic_input()
    logger.info("Section %s (%s): thickness %.1f%%, angle %.1f deg",
                airfoil.naca.code if airfoil.naca else 'freeform', airfoil.mode,
                aero.thickness_percent, aero.angle_of_attack_deg)
    logger.info("Simulation: %s", sim_config.to_dict())

    simulation = FlowSimulation(sim_config, seed=args.seed)

    if args.headless:
        stats = run_headless(simulation, airfoil, args.frames, args.interval)
        for key, value in stats.items():
            print(f"{key}: {value}")
        return 0

    import matplotlib.pyplot as plt
    from .ui.controls import UIController
    from .visualization.viewer import FlowViewer

    viewer = FlowViewer(simulation, airfoil)
    controls = UIController(viewer)
    anim = viewer.animate(frames=args.frames, interval=args.interval)
    plt.show()
    return 0


if __name__ == "__main__":
    sys.exit(main())

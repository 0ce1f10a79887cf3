#!/usr/bin/env python3
"""
Bellman-Ford Pathfinder Generator

Compiles a loop-unrolled pathfinding module for a fixed vision radius and
optionally walks a preview agent with it.

Usage:
    python -m bellman_table.main --radius 20 [options]
    python -m bellman_table.main --config configs/corridor.yaml [options]

Examples:
    python -m bellman_table.main --radius 20
    python -m bellman_table.main --radius 34 --no-comments --out BMF34.py
    python -m bellman_table.main --config configs/corridor.yaml --preview --gif
    python -m bellman_table.main --config configs/corridor.yaml --preview --extra-rounds 2 --quiet
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .config import AppConfig, default_config, load_config
from .compiler.errors import GenerationError
from .compiler.generator import PathfinderGenerator
from .preview.engine import WalkEngine
from .preview.loader import load_pathfinder
from .export.source_writer import SourceWriter
from .export.csv_writer import CSVWriter
from .export.visualizer import Visualizer
from .export.reporter import Reporter


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Bellman-Ford Pathfinder Generator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m bellman_table.main --radius 20
    python -m bellman_table.main --radius 34 --no-comments --out BMF34.py
    python -m bellman_table.main --config configs/corridor.yaml --preview --gif
        """
    )

    # Source of the generator settings
    parser.add_argument('--config', type=Path, default=None,
                        help='Path to YAML configuration file')
    parser.add_argument('--radius', type=int, default=None,
                        help='Vision radius in r^2 (overrides config)')

    # Generation overrides
    parser.add_argument('--out', type=Path, default=None,
                        help='Output path of the generated module '
                             '(default: <out-dir>/BMF<radius>.py)')
    parser.add_argument('--no-comments', dest='comments', action='store_false',
                        default=None,
                        help='Leave comments and docstrings out of the module')
    parser.add_argument('--indicators', action='store_true', default=None,
                        help='Emit debug indicator dots')

    # Preview walk
    parser.add_argument('--preview', action='store_true', default=False,
                        help='Walk the preview agent from the config')
    parser.add_argument('--extra-rounds', type=int, default=None,
                        help='Override extra relaxation rounds per tick')
    parser.add_argument('--steps', type=int, default=None,
                        help='Override max preview ticks')
    parser.add_argument('--out-dir', type=Path, default=Path('./output'),
                        help='Output directory for exports (default: ./output)')

    # Export toggles
    parser.add_argument('--csv', dest='csv', action='store_true', default=None,
                        help='Enable CSV export (default)')
    parser.add_argument('--no-csv', dest='csv', action='store_false',
                        help='Disable CSV export')

    parser.add_argument('--snapshot', dest='snapshot', action='store_true', default=None,
                        help='Enable field snapshot (default)')
    parser.add_argument('--no-snapshot', dest='snapshot', action='store_false',
                        help='Disable field snapshot')

    parser.add_argument('--gif', action='store_true', default=False,
                        help='Enable GIF animation export')

    parser.add_argument('--quiet', action='store_true', default=False,
                        help='Suppress stdout output')

    args = parser.parse_args(argv)
    if args.config is None and args.radius is None:
        parser.error('one of --config or --radius is required')
    return args


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    # Load configuration
    if args.config is not None:
        try:
            config = load_config(args.config)
        except FileNotFoundError:
            print(f"Error: Configuration file not found: {args.config}", file=sys.stderr)
            return 1
        except Exception as e:
            print(f"Error loading config: {e}", file=sys.stderr)
            return 1
    else:
        config = default_config(args.radius)

    # Apply CLI overrides
    if args.radius is not None:
        config.generator.radius = args.radius
    if args.comments is not None:
        config.generator.comments = args.comments
    if args.indicators is not None:
        config.generator.indicators = args.indicators
    if args.csv is not None:
        config.csv_enabled = args.csv
    if args.snapshot is not None:
        config.snapshot_enabled = args.snapshot
    if args.gif:
        config.gif_enabled = True
    config.quiet = args.quiet
    config.out_dir = args.out_dir
    if args.out is not None:
        config.source_path = args.out

    if args.preview and config.preview is None:
        print("Error: --preview needs a 'preview' section in the config", file=sys.stderr)
        return 1
    if config.preview is not None:
        if args.extra_rounds is not None:
            config.preview.extra_rounds = args.extra_rounds
        if args.steps is not None:
            config.preview.max_steps = args.steps

    # Generate; nothing is written unless the whole module rendered
    if not config.quiet:
        print(f"Generating pathfinder...")
        print(f"  Radius: {config.generator.radius} r^2")
        print(f"  Comments: {'on' if config.generator.comments else 'off'}")

    try:
        result = PathfinderGenerator(config.generator).build()
    except GenerationError as e:
        print(f"Error: generation failed: {e}", file=sys.stderr)
        return 1

    source_path = SourceWriter(config.source_file).write(result.source)
    if not config.quiet:
        print(f"  Cells: {len(result.topology)}")
        print(f"  Module saved: {source_path}")

    reporter = Reporter(str(args.config) if args.config else None, result)

    summary = None
    if args.preview:
        summary = run_preview(config, source_path, reporter)

    if not config.quiet:
        report = reporter.generate_summary(
            summary,
            config.out_dir,
            source_path,
            config.csv_enabled,
            config.snapshot_enabled,
            config.gif_enabled
        )
        print(report)

    return 0


def run_preview(config: AppConfig, source_path: Path, reporter: Reporter) -> dict:
    """Walk the preview agent tick by tick and export what was asked for."""
    preview = config.preview
    pathfinder = load_pathfinder(source_path)
    engine = WalkEngine(preview, pathfinder, config.generator.runtime.function_name)

    if not config.quiet:
        print(f"\nRunning preview walk...")
        print(f"  Grid: {preview.grid.width}x{preview.grid.height}")
        print(f"  Start: {preview.start}  Target: {preview.target}")
        print(f"  Extra rounds: {preview.extra_rounds}")

    csv_writer = None
    if config.csv_enabled:
        csv_writer = CSVWriter(config.out_dir / 'walk_log.csv')
        csv_writer.open()

    visualizer = Visualizer(engine.grid)

    first_state = None
    try:
        while not engine.is_finished():
            state = engine.step()
            if first_state is None:
                first_state = state

            if csv_writer:
                csv_writer.append(state)

            if config.gif_enabled:
                visualizer.buffer_frame(state, list(engine.route))

            reporter.update(state)

            if not config.quiet and state.step % 10 == 0:
                print(f"  Tick {state.step}: at ({state.x}, {state.y})")

    except KeyboardInterrupt:
        if not config.quiet:
            print("\nPreview interrupted by user.")

    if csv_writer:
        csv_writer.close()
        if not config.quiet:
            print(f"\nCSV saved: {config.out_dir / 'walk_log.csv'}")

    if config.snapshot_enabled and first_state:
        snapshot_path = config.out_dir / 'field.png'
        visualizer.save_snapshot(first_state, engine.route, snapshot_path)
        if not config.quiet:
            print(f"Snapshot saved: {snapshot_path}")

    if config.gif_enabled:
        gif_path = config.out_dir / 'walk.gif'
        if not config.quiet:
            print(f"Generating GIF ({len(visualizer.frames)} frames)...")
        visualizer.generate_gif(gif_path)
        if not config.quiet:
            print(f"Animation saved: {gif_path}")

    return engine.get_summary()


if __name__ == '__main__':
    sys.exit(main())

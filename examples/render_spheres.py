#!/usr/bin/env python3
"""Render the reference three-sphere scene to a PNG.

Usage:
    python -m examples.render_spheres [options]

Options:
    --width WIDTH         Image width in pixels (default: 1600)
    --height HEIGHT       Image height in pixels (default: 1200)
    --fov DEGREES         Vertical field of view (default: 45)
    --output OUTPUT       Output file path (default: output.png)
    --batch-rows ROWS     Rows per progress update (default: 64)
    --bounded-shadows     Ignore occluders beyond the light
    --cpu                 Force the Taichi CPU backend
    --quiet               Suppress progress output

Example:
    python -m examples.render_spheres --width 800 --height 600
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import taichi as ti


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the reference sphere scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=1600,
        help="Image width in pixels (default: 1600)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=1200,
        help="Image height in pixels (default: 1200)",
    )
    parser.add_argument(
        "--fov",
        type=float,
        default=45.0,
        help="Vertical field of view in degrees (default: 45)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="output.png",
        help="Output file path (default: output.png)",
    )
    parser.add_argument(
        "--batch-rows",
        type=int,
        default=64,
        help="Rows per progress update (default: 64)",
    )
    parser.add_argument(
        "--bounded-shadows",
        action="store_true",
        help="Ignore occluders farther away than the light",
    )
    parser.add_argument("--cpu", action="store_true", help="Force the Taichi CPU backend")
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
    return parser.parse_args(argv)


def render_spheres(
    width: int = 1600,
    height: int = 1200,
    fov: float = 45.0,
    output_path: str = "output.png",
    batch_rows: int = 64,
    bounded_shadows: bool = False,
    quiet: bool = False,
) -> Path:
    """Render the reference scene and save it.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports so Taichi is initialized first
    from src.shadowray.core.renderer import Renderer, RenderSettings
    from src.shadowray.scene.manager import SceneManager, SceneSummary
    from src.shadowray.scene.reference import create_reference_scene

    settings = RenderSettings(
        width=width,
        height=height,
        bounded_shadows=bounded_shadows,
        rows_per_batch=batch_rows,
    )

    manager = SceneManager()
    manager.load(create_reference_scene(vfov=fov))

    if not quiet:
        summary = SceneSummary.of(manager)
        print(
            f"Scene: {summary.objects} objects, {summary.lights} lights "
            f"({width}x{height}, fov {fov:g})"
        )

    renderer = Renderer(manager, settings)

    def progress_callback(done: int, total: int) -> None:
        if not quiet:
            print(f"\r  Rows: {done}/{total} ({100.0 * done / total:.1f}%)", end="", flush=True)

    renderer.render(callback=progress_callback)

    if not quiet:
        print()
        print(f"Rendered frame in: {renderer.render_time:.3f}s")

    output_file = renderer.save_png(output_path)

    if not quiet:
        print(f"Saved to: {output_file.absolute()}")

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    if args.cpu:
        ti.init(arch=ti.cpu)
    else:
        # Falls back to CPU when no GPU backend is available
        ti.init(arch=ti.gpu)

    try:
        render_spheres(
            width=args.width,
            height=args.height,
            fov=args.fov,
            output_path=args.output,
            batch_rows=args.batch_rows,
            bounded_shadows=args.bounded_shadows,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

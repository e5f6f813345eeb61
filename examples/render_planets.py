#!/usr/bin/env python3
"""Render the planets scene.

This script renders the default planets scene (a large sphere orbited by two
moons) or a scene loaded from a JSON file. A single frame is written as PNG;
several frames are written as an animated GIF, advancing the orbit between
frames.

Usage:
    python -m examples.render_planets [options]

Options:
    --width WIDTH       Image width in pixels (default: 320)
    --height HEIGHT     Image height in pixels (default: 240)
    --frames FRAMES     Number of animation frames (default: 1)
    --output OUTPUT     Output file path (default: planets.png, or planets.gif
                        when more than one frame is rendered)
    --scene SCENE       JSON scene file (camera, lights, spheres)
    --quiet             Suppress progress output

Example:
    python -m examples.render_planets --frames 60 --output planets.gif
"""

from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the planets scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=320,
        help="Image width in pixels (default: 320)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=240,
        help="Image height in pixels (default: 240)",
    )
    parser.add_argument(
        "--frames",
        type=int,
        default=1,
        help="Number of animation frames (default: 1)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output file path (default: planets.png or planets.gif)",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="JSON scene file to render instead of the planets scene",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args()


def render_planets(
    width: int = 320,
    height: int = 240,
    num_frames: int = 1,
    output_path: str | None = None,
    scene_path: str | None = None,
    quiet: bool = False,
) -> Path:
    """Render the scene and save it to file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        num_frames: Number of frames. More than one writes a GIF.
        output_path: Output file path. Defaults depend on num_frames.
        scene_path: Optional JSON scene file. Loaded scenes are not animated.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from spheretrace.core.renderer import FrameRenderer
    from spheretrace.preview.export import save_animation, save_png
    from spheretrace.scene.manager import SceneManager
    from spheretrace.scene.planets import PlanetOrbit, create_planets_scene

    if num_frames < 1:
        raise ValueError(f"Frame count must be at least 1, got {num_frames}")
    if output_path is None:
        output_path = "planets.gif" if num_frames > 1 else "planets.png"

    if scene_path is not None:
        if not quiet:
            print(f"Loading scene from {scene_path} ({width}x{height})...")
        scene = SceneManager()
        scene.from_dict(json.loads(Path(scene_path).read_text()))
        # A loaded scene has no orbit; frames repeat the same image
        orbit = PlanetOrbit([], (), ())
    else:
        if not quiet:
            print(f"Creating planets scene ({width}x{height})...")
        scene, orbit = create_planets_scene()

    renderer = FrameRenderer(width, height)

    if not quiet:
        print(f"Rendering {num_frames} frame(s)...")

    start_time = time.time()

    def progress_callback(index: int, frame: object) -> None:
        if not quiet:
            elapsed = time.time() - start_time
            fps = (index + 1) / elapsed if elapsed > 0 else 0
            print(
                f"\r  Progress: {index + 1}/{num_frames} frames - {fps:.1f} fps",
                end="",
                flush=True,
            )

    frames = list(
        renderer.render_animation(scene, orbit, num_frames, callback=progress_callback)
    )

    if not quiet:
        print()  # Newline after progress

    output_file = Path(output_path)
    if num_frames == 1:
        save_png(renderer, str(output_file))
    else:
        save_animation(frames, width, height, str(output_file))

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    # Initialize Taichi
    # Use GPU if available, fall back to CPU
    try:
        ti.init(arch=ti.gpu)
        if not args.quiet:
            print("Using GPU backend")
    except Exception:
        ti.init(arch=ti.cpu)
        if not args.quiet:
            print("Using CPU backend")

    try:
        render_planets(
            width=args.width,
            height=args.height,
            num_frames=args.frames,
            output_path=args.output,
            scene_path=args.scene,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

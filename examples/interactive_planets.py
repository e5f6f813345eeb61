#!/usr/bin/env python3
"""Interactive planets animation.

This script opens a GGUI window and plays the planets scene: a large sphere
with two moons orbiting it, rendered one frame per window refresh.

Usage:
    python -m examples.interactive_planets [--width W] [--height H]

Controls:
    - Pause/Resume: Freeze or continue the orbit
    - Export PNG: Save the current frame with a timestamp
"""

from __future__ import annotations

import argparse
import platform
import sys

import taichi as ti


def initialize_taichi() -> str:
    """Initialize Taichi with the best available backend.

    On macOS, prefers Metal. Falls back to CPU if GPU is unavailable.

    Returns:
        Name of the backend being used.
    """
    system = platform.system()

    if system == "Darwin":
        # macOS: prefer Metal
        try:
            ti.init(arch=ti.metal)
            return "Metal (GPU)"
        except Exception:
            pass

    # Try generic GPU (CUDA on Linux/Windows, Vulkan as fallback)
    try:
        ti.init(arch=ti.gpu)
        return "GPU"
    except Exception:
        pass

    ti.init(arch=ti.cpu)
    return "CPU"


def main() -> int:
    """Main entry point for the interactive planets animation.

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    parser = argparse.ArgumentParser(description="Interactive planets animation.")
    parser.add_argument("--width", type=int, default=320, help="Window width (default: 320)")
    parser.add_argument("--height", type=int, default=240, help="Window height (default: 240)")
    args = parser.parse_args()

    # Initialize Taichi first (before importing modules that declare fields)
    backend = initialize_taichi()
    print(f"Taichi backend: {backend}")

    # Import after Taichi initialization
    from spheretrace.core.renderer import FrameRenderer
    from spheretrace.preview.interactive import InteractivePreview
    from spheretrace.scene.planets import create_planets_scene

    if not InteractivePreview.is_display_available():
        print("Error: No display available. Cannot run interactive preview.")
        print("This script requires a graphical display environment.")
        return 1

    scene, orbit = create_planets_scene()
    renderer = FrameRenderer(args.width, args.height)

    print(f"Creating interactive preview window ({args.width}x{args.height})...")
    preview = InteractivePreview(args.width, args.height)

    print("Starting animation...")
    print("  - Click 'Pause' to freeze the orbit")
    print("  - Click 'Export PNG' to save the current frame")
    print("  - Close window to exit")
    print()

    try:
        preview.run_animation(renderer, scene, orbit)
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
    finally:
        preview.close()
        print("Preview window closed.")

    return 0


if __name__ == "__main__":
    sys.exit(main())

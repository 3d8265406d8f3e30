#!/usr/bin/env python3
"""Render one of the stock sphere scenes, or a scene loaded from JSON.

Usage:
    python examples/render_spheres.py [options]

Options:
    --scene NAME        Stock scene: basic, full or single (default: full)
    --scene-file PATH   Load the scene from a JSON description instead
    --width WIDTH       Image width in pixels (default: 1024)
    --height HEIGHT     Image height in pixels (default: 768)
    --fov DEGREES       Vertical field of view (default: 90)
    --output OUTPUT     Output file path (default: out.png)
    --arch ARCH         Taichi backend: cpu or gpu (default: gpu)
    --preview           Show the finished frame in a Matplotlib window
    --quiet             Only log warnings and errors

Example:
    python examples/render_spheres.py --scene basic --width 640 --height 480
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import taichi as ti
from loguru import logger


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a Whitted-style ray traced sphere scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    scene_group = parser.add_mutually_exclusive_group()
    scene_group.add_argument(
        "--scene",
        choices=["basic", "full", "single"],
        default="full",
        help="Stock scene to render (default: full)",
    )
    scene_group.add_argument(
        "--scene-file",
        type=str,
        default=None,
        help="Path of a JSON scene description",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=1024,
        help="Image width in pixels (default: 1024)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=768,
        help="Image height in pixels (default: 768)",
    )
    parser.add_argument(
        "--fov",
        type=float,
        default=90.0,
        help="Vertical field of view in degrees (default: 90)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="out.png",
        help="Output file path (default: out.png)",
    )
    parser.add_argument(
        "--arch",
        choices=["cpu", "gpu"],
        default="gpu",
        help="Taichi backend; gpu falls back to cpu when unavailable (default: gpu)",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Show the finished frame in a Matplotlib window",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Only log warnings and errors",
    )
    return parser.parse_args(argv)


def render_spheres(
    scene_name: str = "full",
    scene_file: str | None = None,
    width: int = 1024,
    height: int = 768,
    fov: float = 90.0,
    output_path: str = "out.png",
    preview: bool = False,
) -> Path:
    """Build a scene, render it and save the frame.

    Args:
        scene_name: Name of a stock scene, used when scene_file is None.
        scene_file: Optional JSON scene description.
        width: Image width in pixels.
        height: Image height in pixels.
        fov: Vertical field of view in degrees.
        output_path: Output file path (PNG).
        preview: Whether to show the frame after saving.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from whitted.camera.pinhole import PinholeCamera
    from whitted.core.renderer import Renderer
    from whitted.scene.manager import SceneManager
    from whitted.scene.presets import SCENE_PRESETS

    if scene_file is not None:
        scene = SceneManager()
        scene.load_json(scene_file)
        logger.info("Loaded scene from {}", scene_file)
    else:
        scene = SCENE_PRESETS[scene_name]()
        logger.info("Created '{}' scene", scene_name)
    logger.info(
        "Scene has {} spheres and {} lights",
        scene.get_sphere_count(),
        scene.get_light_count(),
    )

    renderer = Renderer(PinholeCamera(width=width, height=height, vfov=fov))
    framebuffer = renderer.render()
    output_file = renderer.save(output_path)

    if preview:
        from whitted.preview.display import show_preview

        show_preview(framebuffer, title=f"{scene_file or scene_name} - {width}x{height}")

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logger.remove()
    logger.add(sys.stderr, level="WARNING" if args.quiet else "INFO")

    ti.init(arch=ti.gpu if args.arch == "gpu" else ti.cpu)

    from whitted.preview.export import ImageWriteError

    try:
        output_file = render_spheres(
            scene_name=args.scene,
            scene_file=args.scene_file,
            width=args.width,
            height=args.height,
            fov=args.fov,
            output_path=args.output,
            preview=args.preview,
        )
    except (ImageWriteError, ValueError, RuntimeError) as e:
        logger.error("Error: {}", e)
        return 1

    logger.info("Saved to: {}", output_file.absolute())
    return 0


if __name__ == "__main__":
    sys.exit(main())

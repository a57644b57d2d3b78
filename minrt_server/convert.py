"""Compile a scene JSON file to SLD text, optionally rendering it to PNG.

Usage:
    python -m minrt_server.convert scene.json [out.png]
"""

import argparse
import logging
import sys
from pathlib import Path

from minrt_server import config
from minrt_server.errors import SceneStudioError
from minrt_server.scene import Scene
from minrt_server.services import render_service, sld_service

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compile a scene JSON file for min-rt")
    parser.add_argument("scene", type=Path, help="Scene JSON file")
    parser.add_argument("output", type=Path, nargs="?", help="Render the scene to this PNG file")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    config.configure_logging("WARNING")

    try:
        scene = Scene.from_json(args.scene.read_text())
        sys.stdout.write(sld_service.export_to_sld(scene))
        if args.output is not None:
            render_service.render_scene(scene, args.output)
            logger.info("Wrote %s", args.output)
    except (OSError, SceneStudioError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

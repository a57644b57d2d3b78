"""Render Service - runs min-rt and the PNG converter, stores scene artefacts.

Each external process is fully drained: all input is written, all output is
read, and the exit status is awaited before the next step. Blocking calls are
offloaded to the thread-pool by the async wrappers.
"""

import asyncio
import base64
import logging
import re
import subprocess
import time
from pathlib import Path

from minrt_server import config
from minrt_server.errors import ArtifactNotFoundError, RenderError, SchemaViolation
from minrt_server.scene import Scene
from minrt_server.services.sld_service import export_to_sld

logger = logging.getLogger(__name__)

_NAME_RE = re.compile(r"[A-Za-z0-9_-][A-Za-z0-9_.-]*")


def _run_process(cmd: list[str], data: bytes, label: str, timeout: int) -> bytes:
    """Feed ``data`` to ``cmd`` on stdin and return its stdout."""
    logger.info("Running %s: %s", label, " ".join(cmd))
    try:
        result = subprocess.run(cmd, input=data, capture_output=True, timeout=timeout)
    except subprocess.TimeoutExpired as e:
        logger.error("%s TIMEOUT (%ds)", label, timeout)
        raise RenderError(f"{label} timed out after {timeout}s") from e
    except OSError as e:
        logger.error("%s could not be started: %s", label, e)
        raise RenderError(f"{label} could not be started: {e}") from e

    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace")
        logger.error("%s failed (exit %d): %s", label, result.returncode, stderr)
        raise RenderError(f"{label} failed (exit {result.returncode}): {stderr}")
    return result.stdout


def render_sld(sld_text: str, timeout: int | None = None) -> bytes:
    """SLD text → PPM (min-rt) → PNG (magick). Returns PNG bytes."""
    if timeout is None:
        timeout = config.RENDER_TIMEOUT_SECONDS

    t0 = time.perf_counter()
    ppm = _run_process(
        [config.MINRT_PATH], (sld_text + "\n").encode("utf-8"), "MinRT", timeout
    )
    logger.info("MinRT rendering completed in %.1f ms", (time.perf_counter() - t0) * 1000)

    return _run_process(
        [config.MAGICK_PATH, "ppm:-", "png:-"], ppm, "Magick", timeout
    )


def render_scene(scene: Scene, outfile: Path | str | None = None) -> bytes:
    """Compile and render a scene, optionally writing the PNG to ``outfile``."""
    sld_text = export_to_sld(scene)
    logger.debug("SLD source:\n%s", sld_text)
    png = render_sld(sld_text)
    if outfile is not None:
        try:
            Path(outfile).write_bytes(png)
        except OSError as e:
            logger.error("Could not write %s: %s", outfile, e)
            raise RenderError(f"could not write {outfile}: {e}") from e
    return png


def _check_name(name: str) -> str:
    if not _NAME_RE.fullmatch(name):
        raise SchemaViolation([("name", "must match [A-Za-z0-9_.-]+ and not start with '.'")])
    return name


def _artifact_path(name: str, suffix: str) -> Path:
    return Path(config.IMAGES_DIR) / f"{_check_name(name)}{suffix}"


def render_image(scene: Scene, name: str) -> str:
    """Store the scene source and its PNG under ``name``. Returns base64 PNG."""
    source_path = _artifact_path(name, ".json")
    try:
        source_path.parent.mkdir(parents=True, exist_ok=True)
        source_path.write_text(scene.model_dump_json(indent=2, exclude_none=True))
    except OSError as e:
        logger.error("Could not store scene %r: %s", name, e)
        raise RenderError(f"could not store scene {name!r}: {e}") from e

    png = render_scene(scene, _artifact_path(name, ".png"))
    return base64.b64encode(png).decode()


def _read_artifact(name: str, suffix: str, kind: str) -> bytes:
    path = _artifact_path(name, suffix)
    try:
        return path.read_bytes()
    except OSError as e:
        logger.debug("Could not read %s: %s", path, e)
        raise ArtifactNotFoundError(f"No {kind} named {name!r}") from e


def read_image_bytes(name: str) -> bytes:
    return _read_artifact(name, ".png", "image")


def read_image(name: str) -> str:
    """Base64 of a stored PNG."""
    return base64.b64encode(read_image_bytes(name)).decode()


def read_source(name: str) -> str:
    """JSON source of a stored scene."""
    return _read_artifact(name, ".json", "scene").decode("utf-8")


def list_scenes() -> list[str]:
    images_dir = Path(config.IMAGES_DIR)
    if not images_dir.is_dir():
        return []
    return sorted(p.stem for p in images_dir.glob("*.json"))


async def render_image_async(scene: Scene, name: str) -> str:
    """Async wrapper: offloads the blocking subprocesses to the thread-pool."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, render_image, scene, name)

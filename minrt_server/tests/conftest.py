"""Shared fixtures: sample scenes and stand-ins for the external processes."""

import copy
import stat

import pytest

from minrt_server import config

BASE_SCENE = {
    "camera_position": {"x": 0, "y": 0, "z": 0},
    "camera_angle": {"a": 0, "b": 0},
    "lights": [{"angle": {"a": 30, "b": 20}, "intensity": 255}],
    "objects": [
        {
            "name": "floor",
            "shape": "Plane",
            "param": {"x": 0, "y": 1, "z": 0},
            "position": {"x": 0, "y": -40, "z": 0},
            "direction": 1,
            "color": {"r": 255, "g": 255, "b": 255},
            "texture": "Checker",
        },
        {
            "name": "ball",
            "shape": "Quad",
            "param": {"x": 40, "y": 40, "z": 40},
            "position": {"x": 0, "y": 0, "z": 50},
            "direction": 1,
            "color": {"r": 255, "g": 40, "b": 40},
            "reflect_type": "Normal",
            "highlight": 200,
        },
    ],
    "and_nets": [],
}

BASE_SLD = (
    "0 0 200\n"
    "0 0\n"
    "1\n"
    "30 20 255\n"
    "1 2 0 0 0 1 0 0 -40 0 1 1 0.5 255 255 255\n"
    "0 3 1 0 40 40 40 0 0 50 1 1 200 255 40 40\n"
    "-1\n"
    "0 -1\n"
    "1 -1\n"
    "-1\n"
    "99 0 1 -1\n"
    "-1\n"
)


def make_object(name, shape="Cube", **overrides):
    obj = {
        "name": name,
        "shape": shape,
        "param": {"x": 10, "y": 10, "z": 10},
        "position": {"x": 0, "y": 0, "z": 0},
        "direction": 1,
        "color": {"r": 0, "g": 128, "b": 255},
    }
    obj.update(overrides)
    return obj


@pytest.fixture
def scene_data():
    return copy.deepcopy(BASE_SCENE)


def _script(path, body):
    path.write_text("#!/bin/sh\n" + body)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return str(path)


@pytest.fixture
def fake_tools(tmp_path, monkeypatch):
    """Renderer echoes its input; converter prefixes it with ``PNG:``."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    renderer = _script(bin_dir / "minrt", "cat\n")
    converter = _script(bin_dir / "magick", "printf 'PNG:'\ncat\n")
    images = tmp_path / "images"

    monkeypatch.setattr(config, "MINRT_PATH", renderer)
    monkeypatch.setattr(config, "MAGICK_PATH", converter)
    monkeypatch.setattr(config, "IMAGES_DIR", images)
    return {"bin": bin_dir, "images": images}


@pytest.fixture
def failing_renderer(fake_tools, monkeypatch):
    renderer = _script(fake_tools["bin"] / "broken", "cat > /dev/null\necho 'bad scene' >&2\nexit 3\n")
    monkeypatch.setattr(config, "MINRT_PATH", renderer)
    return renderer

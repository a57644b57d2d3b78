"""Example scenes for LLM scene authoring."""

import json

BALL_SCENE = {
    "camera_position": {"x": 0.0, "y": 0.0, "z": -150.0},
    "camera_angle": {"a": 0.0, "b": 0.0},
    "lights": [{"angle": {"a": 30.0, "b": 20.0}, "intensity": 255.0}],
    "objects": [
        {
            "name": "floor",
            "shape": "Plane",
            "param": {"x": 0.0, "y": 1.0, "z": 0.0},
            "position": {"x": 0.0, "y": -40.0, "z": 0.0},
            "direction": 1.0,
            "color": {"r": 255.0, "g": 255.0, "b": 255.0},
            "texture": "Checker",
        },
        {
            "name": "ball",
            "shape": "Quad",
            "param": {"x": 40.0, "y": 40.0, "z": 40.0},
            "position": {"x": 0.0, "y": 0.0, "z": 50.0},
            "direction": 1.0,
            "color": {"r": 255.0, "g": 40.0, "b": 40.0},
            "reflect_type": "Normal",
            "highlight": 200.0,
        },
    ],
    "and_nets": [],
}

EXAMPLES = [
    {
        "name": "ball",
        "prompt": "A red ball on a checkered floor",
        "scene": BALL_SCENE,
    },
    {
        "name": "bowl",
        "prompt": "A mirror bowl",
        "scene": {
            "camera_position": {"x": 0.0, "y": 60.0, "z": -150.0},
            "camera_angle": {"a": 20.0, "b": 0.0},
            "lights": [{"angle": {"a": 45.0, "b": -30.0}, "intensity": 230.0}],
            "objects": [
                {
                    "name": "outer",
                    "shape": "Quad",
                    "param": {"x": 50.0, "y": 50.0, "z": 50.0},
                    "position": {"x": 0.0, "y": 0.0, "z": 60.0},
                    "direction": 1.0,
                    "color": {"r": 200.0, "g": 200.0, "b": 220.0},
                    "reflect_type": "Mirror",
                    "diffuse": 0.6,
                },
                {
                    "name": "inner",
                    "shape": "Quad",
                    "param": {"x": 45.0, "y": 45.0, "z": 45.0},
                    "position": {"x": 0.0, "y": 0.0, "z": 60.0},
                    "direction": -1.0,
                    "color": {"r": 200.0, "g": 200.0, "b": 220.0},
                },
                {
                    "name": "lid",
                    "shape": "Plane",
                    "param": {"x": 0.0, "y": 1.0, "z": 0.0},
                    "position": {"x": 0.0, "y": 0.0, "z": 0.0},
                    "direction": -1.0,
                    "color": {"r": 200.0, "g": 200.0, "b": 220.0},
                },
                {
                    "name": "table",
                    "shape": "Cube",
                    "param": {"x": 300.0, "y": 10.0, "z": 300.0},
                    "position": {"x": 0.0, "y": -60.0, "z": 60.0},
                    "direction": 1.0,
                    "color": {"r": 120.0, "g": 80.0, "b": 40.0},
                    "texture": "Striped",
                },
            ],
            "and_nets": [["outer", "inner", "lid"]],
        },
    },
    {
        "name": "pillar",
        "prompt": "A tilted striped pillar",
        "scene": {
            "camera_position": {"x": -80.0, "y": 20.0, "z": -120.0},
            "camera_angle": {"a": 5.0, "b": 30.0},
            "lights": [{"angle": {"a": 60.0, "b": 0.0}, "intensity": 255.0}],
            "objects": [
                {
                    "name": "shaft",
                    "shape": "Quad",
                    "param": {"x": 15.0, "y": 0.0, "z": 15.0},
                    "position": {"x": 0.0, "y": 0.0, "z": 50.0},
                    "direction": 1.0,
                    "color": {"r": 240.0, "g": 240.0, "b": 200.0},
                    "texture": "Striped",
                    "rotation": {"x": 0.0, "y": 0.0, "z": 15.0},
                },
                {
                    "name": "clip",
                    "shape": "Cube",
                    "param": {"x": 100.0, "y": 80.0, "z": 100.0},
                    "position": {"x": 0.0, "y": 0.0, "z": 50.0},
                    "direction": 1.0,
                    "color": {"r": 240.0, "g": 240.0, "b": 200.0},
                },
            ],
            "and_nets": [["shaft", "clip"]],
        },
    },
]


def get_example(name: str) -> dict | None:
    for ex in EXAMPLES:
        if ex["name"] == name:
            return ex
    return None


def format_few_shot() -> str:
    """Format examples as few-shot prompt text."""
    parts = []
    for ex in EXAMPLES:
        parts.append(
            f"Example `{ex['name']}` ({ex['prompt']}):\n{json.dumps(ex['scene'])}"
        )
    return "\n\n".join(parts)

"""SLD Service - compiles a Scene into the min-rt positional text protocol."""

import math
from typing import Iterable, Optional

from minrt_server.errors import InvalidSceneError, SchemaViolation, UnresolvedReferenceError
from minrt_server.scene import (
    MAX_OBJECTS,
    REQUIRED_LIGHTS,
    ObjectShape,
    ReflectType,
    Scene,
    SceneObject,
    TextureType,
    Vec3D,
)

# ── Protocol constants ──────────────────────────────────────────

TEXTURE_INDEX = {
    TextureType.PLAIN: 0,
    TextureType.CHECKER: 1,
    TextureType.STRIPED: 2,
    TextureType.CIRCULAR: 3,
    TextureType.DOTS: 4,
}

# One-based on the wire, unlike the texture and reflect tables.
SHAPE_INDEX = {
    ObjectShape.CUBE: 1,
    ObjectShape.PLANE: 2,
    ObjectShape.QUAD: 3,
    ObjectShape.CONE: 4,
}

REFLECT_INDEX = {
    ReflectType.MATTE: 0,
    ReflectType.NORMAL: 1,
    ReflectType.MIRROR: 2,
}

DEFAULT_TEXTURE = TextureType.PLAIN
DEFAULT_REFLECT = ReflectType.MATTE
DEFAULT_DIFFUSE = 1
# Emitted for every reflect type, although only Normal uses it.
DEFAULT_HIGHLIGHT = 0.5

# The wire camera position is the point 200 units ahead of the viewpoint.
CAMERA_OFFSET = 200

SENTINEL = -1
OR_NET_RANGE_PRIMITIVE = 99

__all__ = [
    "CAMERA_OFFSET",
    "DEFAULT_DIFFUSE",
    "DEFAULT_HIGHLIGHT",
    "DEFAULT_REFLECT",
    "DEFAULT_TEXTURE",
    "MAX_OBJECTS",
    "REQUIRED_LIGHTS",
    "check_preconditions",
    "effective_camera_position",
    "export_object",
    "export_to_sld",
    "normalize_and_nets",
    "parse_scene_json",
    "resolve_and_nets",
    "validate_scene_json",
]


# Beyond this, integral floats keep exponent notation (1e+300).
_INTEGRAL_LIMIT = 1e16


def _fmt(value: float) -> str:
    """Shortest text form of a number: 200 rather than 200.0."""
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, int):
        return str(value)
    if value.is_integer() and abs(value) < _INTEGRAL_LIMIT:
        return str(int(value))
    return repr(value)


def _line(values: Iterable[float]) -> str:
    return " ".join(_fmt(v) for v in values)


def check_preconditions(scene: Scene) -> None:
    """Export-time limits, checked even for scenes built without validation."""
    if len(scene.objects) > MAX_OBJECTS:
        raise InvalidSceneError("too many objects")
    if len(scene.lights) != REQUIRED_LIGHTS:
        raise InvalidSceneError("exactly one light is required")


def resolve_and_nets(scene: Scene) -> list[list[int]]:
    """Translate every AND-net from object names to zero-based object indices."""
    index_of = {obj.name: idx for idx, obj in enumerate(scene.objects)}
    resolved = []
    for net_idx, net in enumerate(scene.and_nets):
        indices = []
        for name in net:
            if name not in index_of:
                raise UnresolvedReferenceError(net_idx, name)
            indices.append(index_of[name])
        resolved.append(indices)
    return resolved


def normalize_and_nets(nets: list[list[int]], object_count: int) -> list[list[int]]:
    """Append a singleton net for every object that no net mentions.

    The renderer only draws objects reachable from a net. Singletons follow
    the explicit nets, in ascending object order.
    """
    covered = {idx for net in nets for idx in net}
    return [list(net) for net in nets] + [
        [idx] for idx in range(object_count) if idx not in covered
    ]


def effective_camera_position(scene: Scene) -> tuple[float, float, float]:
    a = math.radians(scene.camera_angle.a)
    b = math.radians(scene.camera_angle.b)
    direction = (
        math.cos(a) * math.sin(b),
        -math.sin(a),
        math.cos(a) * math.cos(b),
    )
    pos = scene.camera_position
    return (
        pos.x + CAMERA_OFFSET * direction[0],
        pos.y + CAMERA_OFFSET * direction[1],
        pos.z + CAMERA_OFFSET * direction[2],
    )


def _vec(v: Vec3D) -> tuple[float, float, float]:
    return (v.x, v.y, v.z)


def export_object(obj: SceneObject) -> str:
    """Render one object record with defaults filled in."""
    texture = obj.texture if obj.texture is not None else DEFAULT_TEXTURE
    reflect = obj.reflect_type if obj.reflect_type is not None else DEFAULT_REFLECT
    diffuse = obj.diffuse if obj.diffuse is not None else DEFAULT_DIFFUSE
    highlight = obj.highlight if obj.highlight is not None else DEFAULT_HIGHLIGHT

    values = [
        TEXTURE_INDEX[texture],
        SHAPE_INDEX[obj.shape],
        REFLECT_INDEX[reflect],
        1 if obj.rotation is not None else 0,
        *_vec(obj.param),
        *_vec(obj.position),
        obj.direction,
        diffuse,
        highlight,
        obj.color.r,
        obj.color.g,
        obj.color.b,
    ]
    if obj.rotation is not None:
        values.extend(_vec(obj.rotation))
    return _line(values)


def _section(lines: list[str]) -> list[str]:
    return lines + [str(SENTINEL)]


def export_to_sld(scene: Scene) -> str:
    """Compile a scene to SLD text. Pure: the scene is not modified."""
    check_preconditions(scene)
    nets = normalize_and_nets(resolve_and_nets(scene), len(scene.objects))

    lines = [
        _line(effective_camera_position(scene)),
        _line((scene.camera_angle.a, scene.camera_angle.b)),
        str(len(scene.lights)),
    ]
    for light in scene.lights:
        lines.append(_line((light.angle.a, light.angle.b, light.intensity)))

    lines += _section([export_object(obj) for obj in scene.objects])
    lines += _section([_line([*net, SENTINEL]) for net in nets])
    lines.append(_line([OR_NET_RANGE_PRIMITIVE, *range(len(nets)), SENTINEL]))
    lines.append(str(SENTINEL))

    return "\n".join(lines) + "\n"


def parse_scene_json(json_str: str) -> Scene:
    """Parse a scene JSON string into a Scene."""
    return Scene.from_json(json_str)


def validate_scene_json(json_str: str) -> tuple[bool, Optional[int], Optional[str]]:
    """Validate a scene JSON string and check it compiles.

    Returns (valid, object_count, error_message).
    """
    try:
        scene = parse_scene_json(json_str)
        export_to_sld(scene)
        return True, len(scene.objects), None
    except (SchemaViolation, InvalidSceneError, UnresolvedReferenceError) as e:
        return False, None, str(e)

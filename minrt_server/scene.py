"""Pydantic models for MinRT scene descriptions.

A scene is authored with names (objects are referenced by name from AND-nets)
and validated here; turning it into renderer input is the job of
``services.sld_service``.
"""

from enum import Enum
from typing import Annotated, Optional

from pydantic import (
    AllowInfNan,
    BaseModel,
    ConfigDict,
    Field,
    Strict,
    StrictStr,
    ValidationError,
    field_validator,
)

from minrt_server.errors import SchemaViolation

# JSON numbers only: no strings, no booleans, no NaN/inf
Number = Annotated[float, Strict(), AllowInfNan(False)]

MAX_OBJECTS = 60
REQUIRED_LIGHTS = 1


class _Model(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class Vec3D(_Model):
    x: Number
    y: Number
    z: Number


class Angle3D(_Model):
    """Angles in degrees. a=0, b=0 looks along +z."""

    a: Number = Field(..., ge=-90, le=90, description="Pitch in degrees; positive looks down")
    b: Number = Field(..., ge=-180, le=180, description="Yaw in degrees; 90 faces +x, -90 faces -x")


class ColorRGB(_Model):
    r: Number = Field(..., ge=0, le=255)
    g: Number = Field(..., ge=0, le=255)
    b: Number = Field(..., ge=0, le=255)


class TextureType(str, Enum):
    PLAIN = "Plain"
    CHECKER = "Checker"
    STRIPED = "Striped"
    CIRCULAR = "Circular"
    DOTS = "Dots"


class ObjectShape(str, Enum):
    CUBE = "Cube"
    PLANE = "Plane"
    QUAD = "Quad"
    CONE = "Cone"


class ReflectType(str, Enum):
    MATTE = "Matte"
    NORMAL = "Normal"
    MIRROR = "Mirror"


class Light(_Model):
    angle: Angle3D
    intensity: Number = Field(..., ge=0, le=255, description="Light intensity 0-255")


class SceneObject(_Model):
    name: StrictStr = Field(..., min_length=1, description="Object name (ID), unique within the scene")
    shape: ObjectShape
    param: Vec3D = Field(
        ...,
        description=(
            "Meaning depends on shape. Cube: X, Y, Z size. Plane: normal vector. "
            "Quad: A, B, C of sgn(A)/(A*A)*X^2 + sgn(B)/(B*B)*Y^2 + sgn(C)/(C*C)*Z^2 = 1; "
            "a 0 gives an infinite cylinder along that axis, a negative value a hyperboloid. "
            "Cone: exactly one value must be negative; the cone points along that axis "
            "with its apex at the origin."
        ),
    )
    position: Vec3D
    direction: Number = Field(
        ..., description="CSG direction: 1 intersects, -1 subtracts (difference)"
    )
    color: ColorRGB = Field(..., description="RGB, each 0-255")

    texture: Optional[TextureType] = None
    reflect_type: Optional[ReflectType] = None
    rotation: Optional[Vec3D] = Field(None, description="Rotation in degrees around X, Y, Z")
    diffuse: Optional[Annotated[Number, Field(ge=0, le=1)]] = Field(
        None,
        description="Fraction of the color reflected, 0-1. Below 1 darkens non-mirror surfaces.",
    )
    highlight: Optional[Annotated[Number, Field(ge=0, le=255)]] = Field(
        None,
        description="Highlight strength 0-255. Only effective when reflect_type is Normal.",
    )


class Scene(_Model):
    camera_position: Vec3D
    camera_angle: Angle3D
    lights: list[Light] = Field(
        ...,
        min_length=REQUIRED_LIGHTS,
        max_length=REQUIRED_LIGHTS,
        description="Lights in the scene. Exactly one is required.",
    )
    objects: list[SceneObject] = Field(
        ..., max_length=MAX_OBJECTS, description="Object definitions, at most 60."
    )
    and_nets: list[list[StrictStr]] = Field(
        ...,
        description=(
            "AND-nets. Each entry lists object names from `objects`. Objects in no "
            "AND-net are drawn on their own; members of a net are drawn as the CSG "
            "product (or difference) of its members. An object may belong to "
            "several nets."
        ),
    )

    @field_validator("objects")
    @classmethod
    def _unique_names(cls, objects: list[SceneObject]) -> list[SceneObject]:
        seen = set()
        for obj in objects:
            if obj.name in seen:
                raise ValueError(f"duplicate object name {obj.name!r}")
            seen.add(obj.name)
        return objects

    @classmethod
    def from_dict(cls, data: dict) -> "Scene":
        """Validate structured input, raising SchemaViolation on failure."""
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise SchemaViolation.from_validation_error(exc) from exc

    @classmethod
    def from_json(cls, text: str) -> "Scene":
        try:
            return cls.model_validate_json(text)
        except ValidationError as exc:
            raise SchemaViolation.from_validation_error(exc) from exc

"""Exception types for scene validation, export and rendering."""

from __future__ import annotations

from fastapi import HTTPException
from pydantic import ValidationError


class SceneStudioError(Exception):
    """Base class for domain errors with HTTP metadata."""

    status_code: int = 500
    user_message: str = "An unexpected error occurred"

    def __init__(self, message: str | None = None, *, status_code: int | None = None):
        super().__init__(message or self.user_message)
        if status_code is not None:
            self.status_code = status_code
        if message is not None:
            self.user_message = message

    def to_http_exception(self) -> HTTPException:
        """Convert the error to an :class:`HTTPException`."""

        return HTTPException(status_code=self.status_code, detail=self.user_message)


class SchemaViolation(SceneStudioError):
    """Raised when input does not match the scene schema.

    ``violations`` holds ``(field_path, constraint)`` pairs, one per failed rule.
    """

    status_code = 422
    user_message = "Scene schema violation"

    def __init__(self, violations: list[tuple[str, str]]):
        self.violations = violations
        message = "; ".join(f"{field}: {constraint}" for field, constraint in violations)
        super().__init__(message or self.user_message)

    @classmethod
    def from_validation_error(cls, exc: ValidationError) -> "SchemaViolation":
        violations = []
        for err in exc.errors():
            field = ".".join(str(part) for part in err["loc"]) or "<root>"
            violations.append((field, err["msg"]))
        return cls(violations)

    @property
    def fields(self) -> list[str]:
        return [field for field, _ in self.violations]


class InvalidSceneError(SceneStudioError):
    """Raised when a scene breaks an export-time precondition."""

    status_code = 422
    user_message = "Invalid scene"


class UnresolvedReferenceError(SceneStudioError):
    """Raised when an AND-net names an object the scene does not define."""

    status_code = 422
    user_message = "Unresolved object reference"

    def __init__(self, net_index: int, name: str):
        self.net_index = net_index
        self.name = name
        super().__init__(f"AND-net {net_index} references unknown object: {name!r}")


class RenderError(SceneStudioError):
    """Raised when the renderer or the image converter fails."""

    status_code = 502
    user_message = "Rendering failed"


class ArtifactNotFoundError(SceneStudioError):
    """Raised when a stored scene or image does not exist."""

    status_code = 404
    user_message = "Artifact not found"


__all__ = [
    "ArtifactNotFoundError",
    "InvalidSceneError",
    "RenderError",
    "SceneStudioError",
    "SchemaViolation",
    "UnresolvedReferenceError",
]

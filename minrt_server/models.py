"""Pydantic models for the MinRT scene studio API."""

from pydantic import BaseModel, Field
from typing import Any, Optional

from minrt_server.scene import Scene


class ValidateRequest(BaseModel):
    scene_json: str = Field(..., description="Scene JSON string to validate")


class ValidateResponse(BaseModel):
    valid: bool
    object_count: Optional[int] = None
    error: Optional[str] = None


class RenderRequest(BaseModel):
    name: str = Field(..., description="Name the scene and image are stored under")
    content: Scene


class AgentRequest(BaseModel):
    prompt: str = Field("", description="Instruction or follow-up for the agent")
    theme: Optional[str] = Field(None, description="Image theme; starts a new scene from the sample")
    model: Optional[str] = None
    max_turns: Optional[int] = Field(None, ge=1, le=50)
    history: Optional[list[dict[str, Any]]] = None


class AgentResponse(BaseModel):
    text: str = ""
    rendered: list[str] = []
    turns: int = 0
    stop_reason: str = ""
    elapsed_s: float = 0.0
    messages: list[dict[str, Any]] = []


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = ""
    renderer: bool = False
    converter: bool = False
    providers: dict = {}


class ErrorResponse(BaseModel):
    error: str
    detail: str

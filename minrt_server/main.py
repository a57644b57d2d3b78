"""MinRT scene studio FastAPI server."""

import base64
import shutil

from fastapi import Body, FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from pydantic import ValidationError

from minrt_server.errors import SceneStudioError, SchemaViolation
from minrt_server.models import (
    AgentRequest,
    AgentResponse,
    ErrorResponse,
    HealthResponse,
    RenderRequest,
    ValidateRequest,
    ValidateResponse,
)
from minrt_server.scene import Scene
from minrt_server.services import llm_service, render_service, sld_service
from minrt_server.prompts.examples import EXAMPLES
from minrt_server import config

app = FastAPI(
    title="MinRT Scene Studio",
    description="Author min-rt ray tracer scenes with an LLM and compile them to SLD",
    version=config.VERSION,
)


@app.exception_handler(SceneStudioError)
async def scene_error_handler(request: Request, exc: SceneStudioError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": type(exc).__name__, "detail": str(exc)},
    )


ERROR_RESPONSES = {
    404: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
}


# ── REST Endpoints ──────────────────────────────────────────────


@app.get("/api/health", response_model=HealthResponse)
async def health():
    return HealthResponse(
        status="ok",
        version=config.VERSION,
        renderer=shutil.which(config.MINRT_PATH) is not None,
        converter=shutil.which(config.MAGICK_PATH) is not None,
        providers={"claude": bool(config.ANTHROPIC_API_KEY)},
    )


@app.post("/api/validate", response_model=ValidateResponse)
async def validate(req: ValidateRequest):
    valid, object_count, error = sld_service.validate_scene_json(req.scene_json)
    return ValidateResponse(valid=valid, object_count=object_count, error=error)


@app.post("/api/compile", response_class=PlainTextResponse, responses=ERROR_RESPONSES)
async def compile_scene(payload: dict = Body(...)):
    scene = Scene.from_dict(payload)
    return PlainTextResponse(sld_service.export_to_sld(scene))


@app.post("/api/render", responses=ERROR_RESPONSES)
async def render(payload: dict = Body(...)):
    try:
        req = RenderRequest.model_validate(payload)
    except ValidationError as e:
        raise SchemaViolation.from_validation_error(e) from e

    png_base64 = await render_service.render_image_async(req.content, req.name)
    return Response(
        content=base64.b64decode(png_base64),
        media_type="image/png",
        headers={"Content-Disposition": f'inline; filename="{req.name}.png"'},
    )


@app.get("/api/scenes")
async def scenes():
    return render_service.list_scenes()


@app.get("/api/scenes/{name}", responses=ERROR_RESPONSES)
async def scene_source(name: str):
    return Response(content=render_service.read_source(name), media_type="application/json")


@app.get("/api/images/{name}", responses=ERROR_RESPONSES)
async def image(name: str):
    return Response(content=render_service.read_image_bytes(name), media_type="image/png")


@app.get("/api/examples")
async def examples():
    return [
        {"name": ex["name"], "prompt": ex["prompt"], "scene": ex["scene"]}
        for ex in EXAMPLES
    ]


@app.post("/api/agent", response_model=AgentResponse, responses=ERROR_RESPONSES)
async def agent(req: AgentRequest):
    prompt = llm_service.build_prompt(req.prompt, req.theme)
    if not prompt:
        raise SchemaViolation([("prompt", "a prompt or a theme is required")])

    result = await llm_service.run_agent(
        prompt, req.model, req.max_turns, req.history
    )
    return AgentResponse(
        text=result.text,
        rendered=result.rendered,
        turns=result.turns,
        stop_reason=result.stop_reason,
        elapsed_s=result.elapsed_s,
        messages=result.messages,
    )


# ── Main ────────────────────────────────────────────────────────


if __name__ == "__main__":
    import uvicorn

    config.configure_logging()
    uvicorn.run(
        "minrt_server.main:app",
        host=config.HOST,
        port=config.PORT,
        reload=True,
    )

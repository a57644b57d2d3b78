"""LLM Service - Claude agent loop that authors scenes through render tools."""

import logging
import time
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from minrt_server import config
from minrt_server.errors import SceneStudioError, SchemaViolation
from minrt_server.prompts.examples import format_few_shot
from minrt_server.prompts.system_prompt import INITIAL_PROMPT, SYSTEM_PROMPT
from minrt_server.scene import Scene
from minrt_server.services import render_service

logger = logging.getLogger(__name__)

# ── Lazy Singleton Client (connection reuse) ──────────────────
_claude_client = None


def _get_claude_client():
    """Get or create singleton AsyncAnthropic client."""
    global _claude_client
    if _claude_client is None:
        import anthropic
        _claude_client = anthropic.AsyncAnthropic(
            api_key=config.ANTHROPIC_API_KEY,
            max_retries=config.AGENT_MAX_RETRIES,
        )
        logger.info("Claude client initialized (singleton)")
    return _claude_client


# ── Tool definitions ──────────────────────────────────────────


class RenderArgs(BaseModel):
    name: str = Field(..., description="Scene name")
    content: Scene = Field(..., description="Scene content")


class NameArgs(BaseModel):
    name: str = Field(..., description="Scene name")


TOOLS = [
    {
        "name": "render",
        "description": "Render an image from the scene content and store it under the name.",
        "input_schema": RenderArgs.model_json_schema(),
    },
    {
        "name": "read_source",
        "description": "Read the source JSON of a stored scene.",
        "input_schema": NameArgs.model_json_schema(),
    },
    {
        "name": "read_image",
        "description": "Read the rendered image of a stored scene.",
        "input_schema": NameArgs.model_json_schema(),
    },
]


def _text_block(text: str) -> dict:
    return {"type": "text", "text": text}


def _image_block(png_base64: str) -> dict:
    return {
        "type": "image",
        "source": {"type": "base64", "media_type": "image/png", "data": png_base64},
    }


def _parse_args(model: type[BaseModel], arguments: Any) -> Any:
    try:
        return model.model_validate(arguments)
    except ValidationError as e:
        raise SchemaViolation.from_validation_error(e) from e


async def handle_tool_call(name: str, arguments: Any) -> tuple[list[dict], bool]:
    """Run one tool call. Returns (content_blocks, is_error).

    Domain failures are reported back to the model instead of raised, so it
    can fix the scene and try again.
    """
    try:
        if name == "render":
            args = _parse_args(RenderArgs, arguments)
            logger.info("Rendering image for %r", args.name)
            png = await render_service.render_image_async(args.content, args.name)
            return [_text_block(f"Rendered image {args.name!r}."), _image_block(png)], False

        if name == "read_image":
            args = _parse_args(NameArgs, arguments)
            logger.info("Reading image for %r", args.name)
            png = render_service.read_image(args.name)
            return [_text_block(f"Loaded image {args.name!r}."), _image_block(png)], False

        if name == "read_source":
            args = _parse_args(NameArgs, arguments)
            logger.info("Reading source for %r", args.name)
            source = render_service.read_source(args.name)
            return [_text_block(f"Source of {args.name!r}:\n{source}\n")], False

    except SceneStudioError as e:
        logger.warning("Tool %s failed: %s", name, e)
        return [_text_block(f"Tool {name} failed: {e}")], True

    return [_text_block(f"Unknown tool: {name}")], True


def _content_to_dicts(content) -> list[dict]:
    """Keep the text and tool_use blocks of an assistant reply as plain dicts."""
    blocks = []
    for block in content:
        if block.type == "text":
            blocks.append(_text_block(block.text))
        elif block.type == "tool_use":
            blocks.append({
                "type": "tool_use",
                "id": block.id,
                "name": block.name,
                "input": block.input,
            })
    return blocks


def _append_user_text(messages: list[dict], text: str) -> None:
    """Add a user turn, merging into a trailing user turn (pending tool results)."""
    if messages and messages[-1]["role"] == "user":
        last = messages[-1]
        content = last["content"]
        if isinstance(content, str):
            content = [_text_block(content)]
        last["content"] = [*content, _text_block(text)]
    else:
        messages.append({"role": "user", "content": text})


def build_prompt(prompt: str = "", theme: str | None = None) -> str:
    """Opening message for a themed session, with any extra instruction appended."""
    if theme is None:
        return prompt
    opening = INITIAL_PROMPT.format(theme=theme)
    return f"{opening}\n{prompt}" if prompt else opening


@dataclass
class AgentResult:
    text: str
    rendered: list[str] = field(default_factory=list)
    turns: int = 0
    stop_reason: str = ""
    elapsed_s: float = 0.0
    messages: list[dict] = field(default_factory=list)


async def run_agent(
    prompt: str,
    model: str | None = None,
    max_turns: int | None = None,
    history: list[dict] | None = None,
) -> AgentResult:
    """Let the model iterate on scenes until it answers in plain text.

    ``history`` continues an earlier conversation (``AgentResult.messages``).
    """
    model = model or config.DEFAULT_MODEL
    model_id = config.CLAUDE_MODELS.get(model, model)
    max_turns = max_turns or config.AGENT_MAX_TURNS
    client = _get_claude_client()

    system = SYSTEM_PROMPT + "\n\n## Examples\n\n" + format_few_shot()
    messages = [dict(m) for m in history or []]
    _append_user_text(messages, prompt)

    rendered: list[str] = []
    t0 = time.perf_counter()

    for turn in range(1, max_turns + 1):
        logger.info("Agent turn %d/%d (model=%s)", turn, max_turns, model_id)
        response = await client.messages.create(
            model=model_id,
            max_tokens=config.AGENT_MAX_TOKENS,
            system=system,
            tools=TOOLS,
            tool_choice={"type": "auto", "disable_parallel_tool_use": True},
            messages=messages,
        )
        messages.append({"role": "assistant", "content": _content_to_dicts(response.content)})

        tool_uses = [b for b in response.content if b.type == "tool_use"]
        if response.stop_reason != "tool_use" or not tool_uses:
            text = "\n".join(b.text for b in response.content if b.type == "text")
            return AgentResult(
                text=text,
                rendered=rendered,
                turns=turn,
                stop_reason=response.stop_reason or "",
                elapsed_s=round(time.perf_counter() - t0, 3),
                messages=messages,
            )

        results = []
        for block in tool_uses:
            logger.info("Calling tool: %s", block.name)
            content, is_error = await handle_tool_call(block.name, block.input)
            if block.name == "render" and not is_error:
                rendered.append(block.input["name"])
            results.append({
                "type": "tool_result",
                "tool_use_id": block.id,
                "content": content,
                "is_error": is_error,
            })
        messages.append({"role": "user", "content": results})

    logger.warning("Agent stopped after %d turns without a final answer", max_turns)
    return AgentResult(
        text="",
        rendered=rendered,
        turns=max_turns,
        stop_reason="max_turns",
        elapsed_s=round(time.perf_counter() - t0, 3),
        messages=messages,
    )

"""Configuration for the MinRT scene studio server."""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

VERSION = "0.1.0"

# LLM API Keys
ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY", "")

# LLM Models
CLAUDE_MODELS = {
    "haiku": "claude-haiku-4-5-20251001",
    "sonnet": "claude-sonnet-4-5-20250929",
}

DEFAULT_MODEL = os.getenv("DEFAULT_MODEL", "sonnet")

# Agent loop
AGENT_MAX_TURNS = int(os.getenv("AGENT_MAX_TURNS", "8"))
AGENT_MAX_TOKENS = int(os.getenv("AGENT_MAX_TOKENS", "16384"))
AGENT_MAX_RETRIES = 5

# External collaborators
MINRT_PATH = os.getenv("MINRT_PATH", "./minrt_256")
MAGICK_PATH = os.getenv("MAGICK_PATH", "magick")
RENDER_TIMEOUT_SECONDS = int(os.getenv("RENDER_TIMEOUT_SECONDS", "120"))

# Storage
IMAGES_DIR = Path(os.getenv("IMAGES_DIR", "./images"))

# Server
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def configure_logging(default_level: str = LOG_LEVEL) -> None:
    level = getattr(logging, default_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

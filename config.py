from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load API key and overrides from .env
load_dotenv()

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
PLANNER_MODEL = os.getenv("PLANNER_MODEL", "gpt-4o-mini")
PLANNER_VISION_MODEL = os.getenv("PLANNER_VISION_MODEL", "gpt-4o")
PLANNER_LOG_LEVEL = os.getenv("PLANNER_LOG_LEVEL", "INFO")

DATA_DIR = Path(os.getenv("PLANNER_DATA_DIR", "data"))
STATE_FILE = DATA_DIR / "planner_state.json"
DEMO_IMAGE = os.getenv("PLANNER_DEMO_IMAGE", "assets/demo-gym-layout.png")
API_KEY_FILE = os.path.expanduser("~/.studio_planner_key.json")


def configure_logging(level: str | None = None) -> None:
    """Apply PLANNER_LOG_LEVEL (or an explicit level) to the root logger."""
    name = (level or PLANNER_LOG_LEVEL or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

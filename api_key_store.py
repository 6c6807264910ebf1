from __future__ import annotations

import json
import logging
import os
from typing import Optional

import config

logger = logging.getLogger(__name__)


def load_api_key(path: Optional[str] = None) -> str:
    """
    Resolve the API key for generation requests.

    The key saved on this device wins; otherwise fall back to OPENAI_API_KEY
    from the environment or .env. Returns "" when neither is set.
    """
    path = path or config.API_KEY_FILE
    try:
        with open(path, "r", encoding="utf-8") as key_file:
            data = json.load(key_file)
        key = (data.get("api_key") or "").strip()
        if key:
            return key
    except FileNotFoundError:
        pass
    except (OSError, ValueError, AttributeError) as exc:
        logger.warning("Unable to read saved API key: %s", exc)
    return (config.OPENAI_API_KEY or "").strip()


def save_api_key(api_key: str, path: Optional[str] = None) -> bool:
    """Store the key on this device. Blank keys are ignored."""
    key = (api_key or "").strip()
    if not key:
        return False
    path = path or config.API_KEY_FILE
    try:
        with open(path, "w", encoding="utf-8") as key_file:
            json.dump({"api_key": key}, key_file)
    except OSError as exc:
        logger.warning("Unable to remember API key on this device: %s", exc)
        return False
    return True


def clear_api_key(path: Optional[str] = None) -> None:
    path = path or config.API_KEY_FILE
    try:
        if os.path.exists(path):
            os.remove(path)
    except OSError as exc:
        logger.warning("Unable to clear saved API key: %s", exc)


def mask_api_key(api_key: str) -> str:
    if not api_key:
        return ""
    if len(api_key) <= 8:
        return "*" * len(api_key)
    return f"{api_key[:4]}...{api_key[-4:]}"

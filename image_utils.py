from __future__ import annotations

import base64
import mimetypes
from pathlib import Path

import requests

from exceptions import ImageLoadError

REQUEST_TIMEOUT = 10


def file_to_payload(data: bytes) -> str:
    """Base64 payload for an uploaded file, without any data-URL prefix."""
    return base64.b64encode(data).decode("ascii")


def strip_data_url(value: str) -> str:
    """Remove a 'data:image/jpeg;base64,' style prefix if present."""
    if value.startswith("data:") and "," in value:
        return value.split(",", 1)[1]
    return value


def to_data_url(image_b64: str, mime_type: str = "image/jpeg") -> str:
    return f"data:{mime_type};base64,{image_b64}"


def guess_mime_type(filename: str | None, default: str = "image/jpeg") -> str:
    if not filename:
        return default
    mime_type, _ = mimetypes.guess_type(filename)
    if mime_type and mime_type.startswith("image/"):
        return mime_type
    return default


def load_image_bytes(source: str) -> bytes:
    """Read an image from a local path or an http(s) URL."""
    if source.startswith(("http://", "https://")):
        try:
            resp = requests.get(source, timeout=REQUEST_TIMEOUT)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise ImageLoadError(source, str(exc)) from exc
        return resp.content

    path = Path(source).expanduser()
    if not path.exists():
        raise ImageLoadError(source, "file not found")
    try:
        return path.read_bytes()
    except OSError as exc:
        raise ImageLoadError(source, str(exc)) from exc

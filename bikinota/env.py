from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv


_LOADED = False

DEFAULT_API_URL = "http://localhost:8080"
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_PORT = 8000


def load_env() -> None:
    global _LOADED
    if _LOADED:
        return
    _LOADED = True

    base_dir = Path(__file__).resolve().parent
    candidates = [
        base_dir.parent / ".env",
        base_dir / ".env",
    ]

    loaded_path: Path | None = None
    for path in candidates:
        if not path.exists():
            continue
        loaded_path = path
        # Real environment variables (Docker/K8s) win over the file.
        load_dotenv(dotenv_path=path, override=False)

    if debug_enabled() and loaded_path is not None:
        print(f"DEBUG: Environment loaded from {loaded_path}")


def debug_enabled() -> bool:
    return os.getenv("BIKINOTA_DEBUG") == "1"


def api_base_url() -> str:
    url = (os.getenv("BIKINOTA_API_URL") or "").strip() or DEFAULT_API_URL
    return url.rstrip("/")


def api_token() -> str | None:
    token = (os.getenv("BIKINOTA_TOKEN") or "").strip()
    return token or None


def request_timeout() -> float:
    raw = (os.getenv("BIKINOTA_TIMEOUT") or "").strip()
    if not raw:
        return DEFAULT_TIMEOUT_SECONDS
    try:
        return float(raw)
    except ValueError:
        return DEFAULT_TIMEOUT_SECONDS


def app_port() -> int:
    raw = (os.getenv("BIKINOTA_PORT") or "").strip()
    try:
        return int(raw) if raw else DEFAULT_PORT
    except ValueError:
        return DEFAULT_PORT

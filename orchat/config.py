from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlparse

from dotenv import load_dotenv

from orchat.errors import ConfigError

DEFAULT_API_URL = "https://openrouter.ai/api/v1/chat/completions"
DEFAULT_MODEL = "cognitivecomputations/dolphin3.0-mistral-24b:free"
BACKENDS = ("http", "mock")


@dataclass(frozen=True)
class Settings:
    backend: str

    api_key: str | None
    api_url: str
    model: str

    http_referer: str | None
    x_title: str | None
    system_prompt: str | None

    timeout_s: float
    log_dir: Path

    def headers(self) -> dict[str, str]:
        """HTTP headers sent with every chat-completions request."""
        h = {"Content-Type": "application/json"}
        if self.api_key:
            h["Authorization"] = f"Bearer {self.api_key}"
        if self.http_referer:
            h["HTTP-Referer"] = self.http_referer
        if self.x_title:
            h["X-Title"] = self.x_title
        return h


def load_settings(*, backend: str | None = None, model: str | None = None) -> Settings:
    """
    Read settings from the environment (and a local `.env`, if any).

    `backend` / `model` override the environment, e.g. from CLI flags.
    Raises ConfigError when the result cannot be used to talk to the endpoint.
    """
    # Allow users to keep secrets in a local `.env` (not committed).
    load_dotenv(override=False)

    def getenv(key: str, default: str | None = None) -> str | None:
        v = os.getenv(key)
        if v is None or v.strip() == "":
            return default
        return v.strip()

    backend = (backend or getenv("ORCHAT_BACKEND", "http") or "http").strip().lower()
    if backend not in BACKENDS:
        raise ConfigError(f"unknown ORCHAT_BACKEND={backend!r}, expected one of: {'|'.join(BACKENDS)}")

    api_key = getenv("OPENROUTER_API_KEY", None)
    if backend == "http" and not api_key:
        raise ConfigError("OPENROUTER_API_KEY must be set in the environment")

    api_url = getenv("OPENROUTER_API_URL", DEFAULT_API_URL) or DEFAULT_API_URL
    parsed = urlparse(api_url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigError(f"OPENROUTER_API_URL is not an http(s) URL: {api_url!r}")

    http_referer = getenv("HTTP_REFERER", None)
    x_title = getenv("X_TITLE", None)
    for name, value in (("OPENROUTER_API_KEY", api_key), ("HTTP_REFERER", http_referer), ("X_TITLE", x_title)):
        if value is not None:
            _check_header_value(name, value)

    raw_timeout = getenv("ORCHAT_TIMEOUT_S", "120") or "120"
    try:
        timeout_s = float(raw_timeout)
    except ValueError:
        raise ConfigError(f"ORCHAT_TIMEOUT_S must be a number, got {raw_timeout!r}") from None
    if timeout_s <= 0:
        raise ConfigError(f"ORCHAT_TIMEOUT_S must be positive, got {raw_timeout!r}")

    return Settings(
        backend=backend,
        api_key=api_key,
        api_url=api_url,
        model=model or getenv("ORCHAT_MODEL", DEFAULT_MODEL) or DEFAULT_MODEL,
        http_referer=http_referer,
        x_title=x_title,
        system_prompt=getenv("ORCHAT_SYSTEM_PROMPT", None),
        timeout_s=timeout_s,
        log_dir=Path(getenv("ORCHAT_LOG_DIR", "logs") or "logs").resolve(),
    )


def _check_header_value(name: str, value: str) -> None:
    # Header values go on the wire as ASCII; httpx only notices at send time.
    try:
        value.encode("ascii")
    except UnicodeEncodeError:
        raise ConfigError(f"{name} must contain only ASCII characters") from None
    if any(ord(ch) < 0x20 or ord(ch) == 0x7F for ch in value):
        raise ConfigError(f"{name} must not contain control characters")

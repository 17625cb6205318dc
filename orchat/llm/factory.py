from __future__ import annotations

from orchat.config import Settings
from orchat.errors import ConfigError

from .http_transport import HttpxTransport
from .mock import EchoTransport


def build_transport(settings: Settings):
    backend = settings.backend
    if backend == "mock":
        return EchoTransport()
    if backend == "http":
        return HttpxTransport(timeout_s=settings.timeout_s)
    raise ConfigError(f"unknown ORCHAT_BACKEND={backend!r}, expected one of: http|mock")

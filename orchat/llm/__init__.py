from .base import ChatMessage, ChatTransport, Role, TransportResponse
from .factory import build_transport

__all__ = ["ChatMessage", "ChatTransport", "Role", "TransportResponse", "build_transport"]

from .chat import ChatRequest, ChatResponse, Choice, RequestMessage, ResponseMessage

__all__ = ["ChatRequest", "ChatResponse", "Choice", "RequestMessage", "ResponseMessage"]

from .chat_service import ChatError, ChatMessage, ChatRequest, ChatService

__all__ = ["ChatError", "ChatMessage", "ChatRequest", "ChatService"]

"""Models module - Data structures."""

from .chat import Author, InboundMessage, CompletionRequest, CompletionResponse
from .memory import Role, ConversationTurn, ChannelMemory

__all__ = [
    'Author',
    'InboundMessage',
    'CompletionRequest',
    'CompletionResponse',
    'Role',
    'ConversationTurn',
    'ChannelMemory',
]

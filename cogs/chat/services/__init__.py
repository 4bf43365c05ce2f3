"""Services module - Business logic layer (framework-independent)."""

from .chat_service import ChatService, PipelineState, truncate
from .command_router import Command, CommandRouter, Intent
from .completion_client import CompletionClient
from .memory_manager import MemoryManager

__all__ = [
    "ChatService",
    "PipelineState",
    "truncate",
    "Command",
    "CommandRouter",
    "Intent",
    "CompletionClient",
    "MemoryManager",
]

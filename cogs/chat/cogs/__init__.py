"""Cogs module - Discord event handlers."""

from .chat_cog import ChatCog

__all__ = [
    "ChatCog",
]

"""
Cogs Package - Discord Bot Feature Modules
=========================================

This package contains the bot's features organized as independent cogs.
Each cog is a self-contained module with its own:
- Discord layer (cogs/)
- Business logic layer (services/)
- Configuration and exceptions layer (core/)

Available Cogs:
- chat: AI chat bridge with per-channel conversation memory
"""

__all__ = [
    'chat',
]

__version__ = '2.0.0'

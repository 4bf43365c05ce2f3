"""
AI Chat Module
===============================

Main module initialization with setup() function for Discord bot extension loading.
Coordinates all layers: cogs, core, models and services.
"""

from discord.ext import commands

import logging

from .cogs import ChatCog

logger = logging.getLogger(__name__)


async def setup(bot: commands.Bot) -> None:
    """
    Initialize the chat module and register its cog with the bot.

    This function is called by `bot.load_extension("cogs.chat")` in bot.py.

    Args:
        bot: The Discord bot instance
    """
    chat_cog = ChatCog(bot)
    await bot.add_cog(chat_cog)
    logger.info("✅ ChatCog loaded")

    logger.info("=" * 50)
    logger.info("🤖 Chat module fully initialized!")
    logger.info("=" * 50)

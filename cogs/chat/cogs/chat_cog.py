"""
Chat Cog - Discord Message Bridge
=================================

Discord-specific implementation of the chat bridge.
Turns on_message events into pipeline calls and delivers replies.
"""

import asyncio
import logging
from typing import Optional

import discord
from discord.ext import commands

from ..core import ChatConfig, SendException
from ..models import Author, InboundMessage
from ..services import ChatService, CommandRouter, CompletionClient, MemoryManager, truncate

logger = logging.getLogger(__name__)

DISCORD_MESSAGE_LIMIT = 2000


class ChatCog(commands.Cog):
    """AI chat bridge for Discord channels."""

    def __init__(self, bot: commands.Bot, config: Optional[ChatConfig] = None):
        self.bot = bot

        self.config = config or getattr(bot, "chat_config", None) or ChatConfig()
        logging.getLogger("cogs.chat").setLevel(
            getattr(logging, self.config.logging.log_level, logging.INFO)
        )

        self.memory_manager = MemoryManager(self.config.history.system_prompt)
        self.command_router = CommandRouter(self.config.commands.prefix)
        self.completion_client = CompletionClient(
            self.config.provider,
            log_api_calls=self.config.logging.log_api_calls,
        )
        self.chat_service = ChatService(
            config=self.config,
            memory_manager=self.memory_manager,
            command_router=self.command_router,
            completion_client=self.completion_client,
        )

    async def cog_unload(self) -> None:
        await self.completion_client.aclose()
        logger.info("ChatCog unloaded")

    # ==================== Reply Sink ====================

    async def send_reply(self, channel_id: int, text: str) -> None:
        """Send ``text`` to a channel, bounded by the configured send timeout.

        Text longer than Discord's message limit is cut to fit.
        """
        text = truncate(text, DISCORD_MESSAGE_LIMIT)
        channel = self.bot.get_channel(channel_id)
        try:
            if channel is None:
                channel = await self.bot.fetch_channel(channel_id)
            await asyncio.wait_for(channel.send(text), timeout=self.config.commands.send_timeout)
        except (discord.HTTPException, asyncio.TimeoutError) as e:
            raise SendException(channel_id, e)

    # ==================== Message Listener ====================

    @staticmethod
    def to_inbound(message: discord.Message) -> InboundMessage:
        """Build the platform-independent message the pipeline consumes."""
        author = message.author
        return InboundMessage(
            content=message.content or "",
            channel_id=message.channel.id,
            author=Author(
                id=author.id,
                display_name=author.display_name,
                mention=author.mention,
            ),
        )

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message) -> None:
        """Route every non-bot message through the chat pipeline."""
        if message.author.bot:
            return

        try:
            state = await self.chat_service.handle_message(self.to_inbound(message), self.send_reply)
            logger.debug(f"Message {message.id} in channel {message.channel.id}: {state.value}")
        except Exception as e:
            logger.error(f"Unhandled error while processing message {message.id}: {e}", exc_info=e)

    # ==================== Status Listeners ====================

    @commands.Cog.listener()
    async def on_ready(self) -> None:
        logger.info("=" * 50)
        logger.info("🤖 ChatCog is READY!")
        logger.info(f"✅ Model: {self.config.provider.model}")
        logger.info(f"✅ Endpoint: {self.config.provider.url}{self.config.provider.endpoint}")
        logger.info(f"✅ Command prefix: {self.config.commands.prefix}")
        logger.info(f"✅ Max history: {self.config.history.max_history_pairs} exchanges")
        logger.info("=" * 50)

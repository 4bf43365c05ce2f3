"""Main chat service orchestrating all layers."""

import logging
from enum import Enum
from typing import Awaitable, Callable

from ..core.config import ChatConfig
from ..core.exceptions import (
    ApiErrorException,
    AuthenticationException,
    CompletionException,
    CompletionTimeoutException,
    ContextException,
    SendException,
    UnreachableException,
)
from ..models.chat import InboundMessage
from ..models.memory import ConversationTurn, Role
from .command_router import CommandRouter, Intent
from .completion_client import CompletionClient
from .memory_manager import MemoryManager

logger = logging.getLogger(__name__)

SendReply = Callable[[int, str], Awaitable[None]]

GENERIC_ERROR = "Sorry, I couldn't process your request right now."


class PipelineState(Enum):
    """Terminal state of one handled message."""
    IGNORED = "ignored"
    REPLIED_COMMAND = "replied_command"
    REPLIED = "replied"
    ERROR_REPLIED = "error_replied"


def truncate(text: str, limit: int) -> str:
    """Cut ``text`` to at most ``limit`` characters."""
    if not text or len(text) <= limit:
        return text
    return text[:limit]


def format_user_turn(message: InboundMessage, prompt: str) -> str:
    """Tag a prompt with its author so the model can tell speakers apart."""
    author = message.author
    return f"User: {author.display_name} (ID: {author.id}) | {prompt}"


def format_error(error: CompletionException) -> str:
    """Human readable reply for a failed completion call."""
    if isinstance(error, UnreachableException):
        return f"Cannot reach OpenWebUI server. Check OPENWEBUI_URL.\nError: {error.message}"
    if isinstance(error, CompletionTimeoutException):
        return "Connection timed out. Check OPENWEBUI_URL."
    if isinstance(error, AuthenticationException):
        return "OpenWebUI API key is invalid."
    if isinstance(error, ApiErrorException):
        return f"OpenWebUI error {error.status_code}:\n{error.body}"
    return GENERIC_ERROR


class ChatService:
    """Handles one inbound message from routing to reply."""

    def __init__(
        self,
        config: ChatConfig,
        memory_manager: MemoryManager,
        command_router: CommandRouter,
        completion_client: CompletionClient
    ):
        """
        Initialize chat service.

        Args:
            config: ChatConfig object
            memory_manager: Per-channel history store
            command_router: Command classifier
            completion_client: Completion API client
        """
        self.config = config
        self.memory_manager = memory_manager
        self.command_router = command_router
        self.completion_client = completion_client

    async def handle_message(self, message: InboundMessage, send_reply: SendReply) -> PipelineState:
        """
        Process a message end-to-end. Never raises for per-message failures.

        Args:
            message: The received message
            send_reply: Coroutine delivering text to a channel

        Returns:
            The state the message finished in
        """
        try:
            return await self._process(message, send_reply)
        except Exception as e:
            logger.error(f"Unexpected error in channel {message.channel_id}: {e}", exc_info=e)
            await self._reply(send_reply, message.channel_id, f"{message.author.mention} {GENERIC_ERROR}")
            return PipelineState.ERROR_REPLIED

    async def _process(self, message: InboundMessage, send_reply: SendReply) -> PipelineState:
        if not message.content or not message.content.strip():
            return PipelineState.IGNORED

        command = self.command_router.route(message.content)
        if command.intent is Intent.IGNORE:
            return PipelineState.IGNORED

        channel_id = message.channel_id
        ping = message.author.mention

        if command.intent is Intent.CLEAR_HISTORY:
            async with self.memory_manager.locked(channel_id):
                await self.memory_manager.clear(channel_id)
            await self._reply(send_reply, channel_id, f"{ping} Channel memory cleared.")
            return PipelineState.REPLIED_COMMAND

        if command.intent is Intent.SHOW_SOURCE:
            await self._reply(
                send_reply, channel_id,
                f"{ping} You can find my source code here: {self.config.commands.source_link}"
            )
            return PipelineState.REPLIED_COMMAND

        if not command.prompt:
            await self._reply(send_reply, channel_id, f"{ping} Enter a question.")
            return PipelineState.REPLIED_COMMAND

        try:
            output = await self._chat(message, command.prompt)
        except CompletionException as e:
            logger.warning(f"Completion failed for channel {channel_id}: {e}")
            await self._reply(send_reply, channel_id, f"{ping} {format_error(e)}")
            return PipelineState.ERROR_REPLIED
        except ContextException as e:
            logger.error(f"History error: {e}")
            await self._reply(send_reply, channel_id, f"{ping} {GENERIC_ERROR}")
            return PipelineState.ERROR_REPLIED

        await self._reply(send_reply, channel_id, f"{ping} {output}")
        return PipelineState.REPLIED

    async def _chat(self, message: InboundMessage, prompt: str) -> str:
        """Run one exchange on the channel's history under its lock."""
        channel_id = message.channel_id
        history = self.config.history

        async with self.memory_manager.locked(channel_id):
            memory = await self.memory_manager.get_or_create(channel_id)

            user_turn = ConversationTurn(Role.USER, format_user_turn(message, prompt))
            await self.memory_manager.append(channel_id, user_turn)
            self.memory_manager.trim(memory, history.max_history_pairs)

            try:
                output = await self.completion_client.complete(memory.turns)
            except CompletionException:
                if history.rollback_failed_turns and memory.remove_last_turn(user_turn):
                    logger.debug(f"Rolled back user turn in channel {channel_id}")
                raise

            await self.memory_manager.append(channel_id, ConversationTurn(Role.ASSISTANT, output))
            logger.debug(f"Channel stats: {await self.memory_manager.get_channel_stats(channel_id)}")

        return output

    async def _reply(self, send_reply: SendReply, channel_id: int, text: str) -> None:
        """Send a truncated reply; delivery failures are logged and dropped."""
        text = truncate(text, self.config.history.max_response_length)
        try:
            await send_reply(channel_id, text)
        except SendException as e:
            logger.error(f"❌ {e}")

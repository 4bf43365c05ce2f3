"""Memory management service for per-channel conversation history."""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional

from ..core.config import DEFAULT_SYSTEM_PROMPT
from ..core.exceptions import ContextException
from ..models.memory import ChannelMemory, ConversationTurn

logger = logging.getLogger(__name__)

DEFAULT_MAX_PAIRS = 10


class MemoryManager:
    """
    Owns the conversation memory of every channel for the process lifetime.

    None of the registry operations suspend, so each one runs atomically on
    the event loop. Callers that need a whole exchange (append, completion
    call, append) to be ordered against other messages in the same channel
    hold ``locked(channel_id)`` for its duration. Other channels are not
    blocked by it. A channel's lock is dropped once nobody holds or awaits
    it and the channel has no memory, so cleared channels leave nothing
    behind.
    """

    def __init__(self, system_prompt: str = DEFAULT_SYSTEM_PROMPT):
        """
        Initialize memory manager.

        Args:
            system_prompt: Instruction text placed at the start of every conversation
        """
        self.system_prompt = system_prompt
        self._channel_cache: Dict[int, ChannelMemory] = {}
        self._channel_locks: Dict[int, asyncio.Lock] = {}
        self._lock_users: Dict[int, int] = {}

    def channel_lock(self, channel_id: int) -> asyncio.Lock:
        """Get the lock serializing exchanges on a channel."""
        lock = self._channel_locks.get(channel_id)
        if lock is None:
            lock = asyncio.Lock()
            self._channel_locks[channel_id] = lock
        return lock

    @asynccontextmanager
    async def locked(self, channel_id: int) -> AsyncIterator[None]:
        """Hold a channel's lock, pruning it afterwards if the channel is gone."""
        lock = self.channel_lock(channel_id)
        self._lock_users[channel_id] = self._lock_users.get(channel_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[channel_id] -= 1
            if not self._lock_users[channel_id]:
                del self._lock_users[channel_id]
                if channel_id not in self._channel_cache:
                    self._channel_locks.pop(channel_id, None)

    async def get_or_create(self, channel_id: int) -> ChannelMemory:
        """
        Get or create channel memory.

        Args:
            channel_id: Channel identifier

        Returns:
            ChannelMemory object, starting with the system turn
        """
        memory = self._channel_cache.get(channel_id)
        if memory is None:
            memory = ChannelMemory.with_system_prompt(channel_id, self.system_prompt)
            self._channel_cache[channel_id] = memory
            logger.debug(f"Created memory for channel {channel_id}")
        return memory

    async def get(self, channel_id: int) -> Optional[ChannelMemory]:
        """Get channel memory without creating it."""
        return self._channel_cache.get(channel_id)

    async def append(self, channel_id: int, turn: ConversationTurn) -> ChannelMemory:
        """
        Append a turn to an existing channel memory.

        Raises:
            ContextException: If the channel has no memory yet
        """
        memory = self._channel_cache.get(channel_id)
        if memory is None:
            raise ContextException(channel_id, "No conversation to append to")
        memory.add_turn(turn)
        return memory

    async def clear(self, channel_id: int) -> bool:
        """Remove all memory for a channel. Returns True if something was removed."""
        removed = self._channel_cache.pop(channel_id, None) is not None
        if removed:
            logger.info(f"Cleared memory for channel {channel_id}")
        return removed

    @staticmethod
    def trim(memory: ChannelMemory, max_pairs: int = DEFAULT_MAX_PAIRS) -> int:
        """
        Bound a transcript to its newest ``max_pairs`` exchanges.

        The system turn at index 0 is always kept. Nothing happens until the
        transcript is longer than ``2 * max_pairs + 1``.

        Returns:
            Number of turns removed
        """
        limit = max_pairs * 2
        if len(memory.turns) <= limit + 1:
            return 0

        system = memory.turns[0]
        removed = len(memory.turns) - limit - 1
        memory.turns[:] = [system] + memory.turns[len(memory.turns) - limit:]
        return removed

    async def get_channel_stats(self, channel_id: int) -> dict:
        """Get statistics for a channel."""
        memory = self._channel_cache.get(channel_id)
        if memory is None:
            return {"channel_id": channel_id, "turn_count": 0}
        return {
            "channel_id": channel_id,
            "turn_count": len(memory),
            "created_at": memory.created_at,
            "last_updated": memory.last_updated,
        }

    def __contains__(self, channel_id: int) -> bool:
        return channel_id in self._channel_cache

    def __len__(self) -> int:
        return len(self._channel_cache)

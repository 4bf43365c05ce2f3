"""Memory models for conversations."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List
import time


class Role(Enum):
    """Speaker of a conversation turn."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class ConversationTurn:
    """Single message in a channel transcript."""

    role: Role
    content: str

    def to_dict(self) -> Dict[str, str]:
        """Convert to the wire form sent to the completion API."""
        return {
            "role": self.role.value,
            "content": self.content,
        }


@dataclass
class ChannelMemory:
    """Conversation memory for a single channel.

    The first turn is always the system prompt. It is never evicted,
    duplicated or moved.
    """

    channel_id: int
    turns: List[ConversationTurn] = field(default_factory=list)
    created_at: float = field(default_factory=time.time)
    last_updated: float = field(default_factory=time.time)

    @classmethod
    def with_system_prompt(cls, channel_id: int, system_prompt: str) -> "ChannelMemory":
        """Create a fresh memory holding only the system turn."""
        return cls(
            channel_id=channel_id,
            turns=[ConversationTurn(Role.SYSTEM, system_prompt)],
        )

    def add_turn(self, turn: ConversationTurn) -> None:
        """Append a user or assistant turn."""
        if turn.role is Role.SYSTEM:
            raise ValueError("Channel memory already has a system turn")
        self.turns.append(turn)
        self.last_updated = time.time()

    def remove_last_turn(self, turn: ConversationTurn) -> bool:
        """Drop ``turn`` if it is still the newest entry."""
        if len(self.turns) > 1 and self.turns[-1] is turn:
            self.turns.pop()
            self.last_updated = time.time()
            return True
        return False

    def __len__(self) -> int:
        return len(self.turns)

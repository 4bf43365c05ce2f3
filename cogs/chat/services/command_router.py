"""Classifies inbound chat text into bot commands."""

from dataclasses import dataclass
from enum import Enum


class Intent(Enum):
    """What an inbound message asks the bot to do."""
    IGNORE = "ignore"
    CLEAR_HISTORY = "cm"
    SHOW_SOURCE = "source"
    CHAT = "ai"


@dataclass(frozen=True)
class Command:
    """Routing result for a single message."""

    intent: Intent
    prompt: str = ""


IGNORE = Command(Intent.IGNORE)


class CommandRouter:
    """
    Prefix-based command matcher.

    A command token only matches when it is followed by whitespace or the
    end of the message, so ``s.cmx`` and ``s.aihello`` are ignored. The
    first matching command wins.
    """

    ORDER = (Intent.CLEAR_HISTORY, Intent.SHOW_SOURCE, Intent.CHAT)

    def __init__(self, prefix: str = "s."):
        if not prefix:
            raise ValueError("Command prefix must not be empty")
        self.prefix = prefix

    def token(self, intent: Intent) -> str:
        """Full command token for an intent, e.g. ``s.ai``."""
        return f"{self.prefix}{intent.value}"

    def route(self, text: str) -> Command:
        """Classify ``text``; the prompt is only set for CHAT."""
        if not text:
            return IGNORE

        for intent in self.ORDER:
            token = self.token(intent)
            if not text.startswith(token):
                continue

            rest = text[len(token):]
            if rest and not rest[0].isspace():
                continue

            if intent is Intent.CHAT:
                return Command(intent, rest.strip())
            return Command(intent)

        return IGNORE

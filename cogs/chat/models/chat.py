"""Chat request and response models."""

from dataclasses import dataclass, field
from typing import Dict, Any, List

from .memory import ConversationTurn


@dataclass
class Author:
    """Identity of the member who sent a message."""

    id: int
    display_name: str
    mention: str


@dataclass
class InboundMessage:
    """Platform-independent view of a received chat message."""

    content: str
    channel_id: int
    author: Author


@dataclass
class CompletionRequest:
    """Body of a chat completion request."""

    model: str
    messages: List[ConversationTurn] = field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        """Serialize for the JSON request body."""
        return {
            "model": self.model,
            "messages": [turn.to_dict() for turn in self.messages],
        }


@dataclass
class CompletionResponse:
    """Successful completion response.

    Only ``choices[0].message.content`` is read; other fields are ignored.
    """

    content: str

    @classmethod
    def from_payload(cls, data: Any) -> "CompletionResponse":
        """
        Build a response from decoded JSON.

        Args:
            data: Decoded response body

        Returns:
            CompletionResponse with the assistant text

        Raises:
            ValueError: If the expected fields are absent or mistyped
        """
        if not isinstance(data, dict):
            raise ValueError("response body is not a JSON object")

        choices = data.get("choices")
        if not isinstance(choices, list) or not choices:
            raise ValueError("response has no choices")

        first = choices[0]
        if not isinstance(first, dict):
            raise ValueError("choices[0] is not an object")

        message = first.get("message")
        if not isinstance(message, dict):
            raise ValueError("choices[0].message is missing")

        content = message.get("content")
        if content is None:
            content = ""
        elif not isinstance(content, str):
            raise ValueError("choices[0].message.content is not a string")

        return cls(content=content)

import pytest

from cogs.chat.core import ChatConfig, SendException
from cogs.chat.models import Author, InboundMessage


class FakeCompletionClient:
    """Records the transcript of every call and answers from a script."""

    def __init__(self, reply="ok", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    async def complete(self, messages):
        self.calls.append([turn.to_dict() for turn in messages])
        if self.error is not None:
            raise self.error
        return self.reply


class RecordingSink:
    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []

    async def __call__(self, channel_id, text):
        if self.fail:
            raise SendException(channel_id, RuntimeError("503 Service Unavailable"))
        self.sent.append((channel_id, text))

    @property
    def texts(self):
        return [text for _, text in self.sent]


@pytest.fixture
def config(tmp_path, monkeypatch):
    monkeypatch.setenv("OPENWEBUI_API_KEY", "sk-test")
    monkeypatch.setenv("OPENWEBUI_URL", "http://openwebui.test/")
    return ChatConfig(str(tmp_path / "missing.ini"))


@pytest.fixture
def sink():
    return RecordingSink()


def make_message(content, channel_id=42, author_id=7, name="Sky"):
    return InboundMessage(
        content=content,
        channel_id=channel_id,
        author=Author(id=author_id, display_name=name, mention=f"<@{author_id}>"),
    )

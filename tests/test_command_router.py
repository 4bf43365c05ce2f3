import pytest

from cogs.chat.services import Command, CommandRouter, Intent


@pytest.fixture
def router():
    return CommandRouter("s.")


def test_clear_history(router):
    assert router.route("s.cm") == Command(Intent.CLEAR_HISTORY)
    assert router.route("s.cm please").intent is Intent.CLEAR_HISTORY


def test_show_source(router):
    assert router.route("s.source") == Command(Intent.SHOW_SOURCE)


def test_chat_prompt_is_stripped(router):
    assert router.route("s.ai   what is rust?  ") == Command(Intent.CHAT, "what is rust?")


def test_chat_keeps_inner_newlines(router):
    assert router.route("s.ai line one\nline two").prompt == "line one\nline two"


def test_chat_without_prompt(router):
    assert router.route("s.ai") == Command(Intent.CHAT, "")
    assert router.route("s.ai    ") == Command(Intent.CHAT, "")


@pytest.mark.parametrize("text", ["s.cmx", "s.aihello", "s.sourcecode", "s.sourceai hi"])
def test_token_must_end_at_boundary(router, text):
    assert router.route(text).intent is Intent.IGNORE


@pytest.mark.parametrize("text", ["", "hello", "ai hi", " s.ai hi", "S.AI hi", "s.", "!ai hi"])
def test_other_text_is_ignored(router, text):
    assert router.route(text).intent is Intent.IGNORE


def test_source_does_not_fall_through_to_chat(router):
    command = router.route("s.source s.ai hi")
    assert command == Command(Intent.SHOW_SOURCE)


def test_custom_prefix():
    router = CommandRouter("!sky ")
    assert router.route("!sky ai hello") == Command(Intent.CHAT, "hello")
    assert router.route("s.ai hello").intent is Intent.IGNORE


def test_empty_prefix_rejected():
    with pytest.raises(ValueError):
        CommandRouter("")

import asyncio

import pytest

from cogs.chat.core import ContextException
from cogs.chat.models import ChannelMemory, ConversationTurn, Role
from cogs.chat.services import MemoryManager


def run(coro):
    return asyncio.run(coro)


def filled_memory(pairs):
    memory = ChannelMemory.with_system_prompt(1, "be nice")
    for i in range(pairs):
        memory.add_turn(ConversationTurn(Role.USER, f"q{i}"))
        memory.add_turn(ConversationTurn(Role.ASSISTANT, f"a{i}"))
    return memory


def test_get_or_create_starts_with_system_turn():
    manager = MemoryManager("You are a helpful AI assistant. Keep responses under 2048 characters.")
    memory = run(manager.get_or_create(5))

    assert len(memory) == 1
    assert memory.turns[0].role is Role.SYSTEM
    assert "2048" in memory.turns[0].content


def test_get_or_create_returns_same_conversation():
    manager = MemoryManager()

    async def scenario():
        results = await asyncio.gather(*(manager.get_or_create(9) for _ in range(20)))
        return results

    results = run(scenario())
    assert all(memory is results[0] for memory in results)
    assert len(manager) == 1


def test_append_round_trip_preserves_order_and_content():
    manager = MemoryManager()

    async def scenario():
        memory = await manager.get_or_create(3)
        before = len(memory)
        await manager.append(3, ConversationTurn(Role.USER, "héllo\n  wörld "))
        await manager.append(3, ConversationTurn(Role.ASSISTANT, "  réponse\t"))
        return before, memory

    before, memory = run(scenario())
    assert len(memory) == before + 2
    assert memory.turns[-2] == ConversationTurn(Role.USER, "héllo\n  wörld ")
    assert memory.turns[-1] == ConversationTurn(Role.ASSISTANT, "  réponse\t")


def test_append_without_conversation_raises():
    manager = MemoryManager()
    with pytest.raises(ContextException):
        run(manager.append(1, ConversationTurn(Role.USER, "hi")))


def test_clear_is_idempotent():
    manager = MemoryManager()

    async def scenario():
        await manager.get_or_create(1)
        first = await manager.clear(1)
        second = await manager.clear(1)
        never = await manager.clear(999)
        return first, second, never

    assert run(scenario()) == (True, False, False)
    assert 1 not in manager


def test_clear_then_get_or_create_starts_fresh():
    manager = MemoryManager("sys")

    async def scenario():
        memory = await manager.get_or_create(1)
        await manager.append(1, ConversationTurn(Role.USER, "hi"))
        await manager.clear(1)
        return memory, await manager.get_or_create(1)

    old, new = run(scenario())
    assert new is not old
    assert [t.role for t in new.turns] == [Role.SYSTEM]


def test_trim_noop_at_bound():
    memory = filled_memory(10)
    assert len(memory) == 21

    assert MemoryManager.trim(memory, 10) == 0
    assert len(memory) == 21


def test_trim_keeps_system_and_newest_pairs():
    memory = filled_memory(10)
    memory.add_turn(ConversationTurn(Role.USER, "new"))
    assert len(memory) == 22

    removed = MemoryManager.trim(memory, 10)

    assert removed == 1
    assert len(memory) == 21
    assert memory.turns[0] == ConversationTurn(Role.SYSTEM, "be nice")
    assert memory.turns[1] == ConversationTurn(Role.ASSISTANT, "a0")
    assert memory.turns[-1] == ConversationTurn(Role.USER, "new")


@pytest.mark.parametrize("pairs,max_pairs", [(0, 1), (3, 1), (15, 10), (40, 3), (5, 0)])
def test_trim_invariant(pairs, max_pairs):
    memory = filled_memory(pairs)
    system = memory.turns[0]

    MemoryManager.trim(memory, max_pairs)

    assert len(memory) <= 2 * max_pairs + 1
    assert memory.turns[0] is system
    assert sum(1 for t in memory.turns if t.role is Role.SYSTEM) == 1


def test_system_turn_cannot_be_appended():
    memory = filled_memory(0)
    with pytest.raises(ValueError):
        memory.add_turn(ConversationTurn(Role.SYSTEM, "again"))


def test_channel_lock_is_per_channel():
    manager = MemoryManager()

    async def scenario():
        return manager.channel_lock(1), manager.channel_lock(1), manager.channel_lock(2)

    a, b, c = run(scenario())
    assert a is b
    assert a is not c


def test_channel_stats():
    manager = MemoryManager()

    async def scenario():
        empty = await manager.get_channel_stats(4)
        await manager.get_or_create(4)
        return empty, await manager.get_channel_stats(4)

    empty, stats = run(scenario())
    assert empty == {"channel_id": 4, "turn_count": 0}
    assert stats["turn_count"] == 1


def test_lock_kept_while_channel_has_memory():
    manager = MemoryManager()

    async def scenario():
        async with manager.locked(5):
            await manager.get_or_create(5)
        kept = 5 in manager._channel_locks
        async with manager.locked(5):
            await manager.clear(5)
        return kept

    assert run(scenario()) is True
    assert 5 not in manager._channel_locks
    assert manager._lock_users == {}


def test_lock_survives_clear_with_waiters():
    manager = MemoryManager()
    order = []

    async def exchange(name):
        async with manager.locked(6):
            order.append(f"{name} start")
            await asyncio.sleep(0.01)
            order.append(f"{name} end")

    async def clear():
        async with manager.locked(6):
            await manager.clear(6)
            order.append("clear")

    async def scenario():
        await asyncio.gather(exchange("a"), clear(), exchange("b"))

    run(scenario())

    assert order == ["a start", "a end", "clear", "b start", "b end"]
    assert 6 not in manager._channel_locks

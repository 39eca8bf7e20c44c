import anyio
import pytest

from src.platform.state.keyed_lock import KeyedLock


@pytest.mark.unit
class TestKeyedLock:
    @pytest.mark.asyncio
    async def test_same_key_is_serialized(self) -> None:
        locks = KeyedLock(name='test')
        events: list[str] = []

        async def worker(name: str) -> None:
            async with locks.hold('screening-1'):
                events.append(f'{name}:enter')
                await anyio.sleep(0.01)
                events.append(f'{name}:exit')

        async with anyio.create_task_group() as tg:
            tg.start_soon(worker, 'first')
            tg.start_soon(worker, 'second')

        # No interleaving inside the critical section
        assert events[0].split(':')[0] == events[1].split(':')[0]
        assert events[2].split(':')[0] == events[3].split(':')[0]

    @pytest.mark.asyncio
    async def test_different_keys_do_not_block(self) -> None:
        locks = KeyedLock(name='test')

        async with locks.hold('a'):
            with anyio.fail_after(1):
                async with locks.hold('b'):
                    assert locks.is_locked('a')
                    assert locks.is_locked('b')

        assert not locks.is_locked('a')
        assert not locks.is_locked('never-used')

    @pytest.mark.asyncio
    async def test_released_keys_are_dropped(self) -> None:
        locks = KeyedLock(name='test')

        async with locks.hold('reservation-1'):
            assert len(locks) == 1

        assert len(locks) == 0

    @pytest.mark.asyncio
    async def test_key_is_kept_while_a_task_waits(self) -> None:
        locks = KeyedLock(name='test')
        entered = anyio.Event()
        release = anyio.Event()
        waiter_done = anyio.Event()

        async def holder() -> None:
            async with locks.hold('k'):
                entered.set()
                await release.wait()

        async def waiter() -> None:
            async with locks.hold('k'):
                pass
            waiter_done.set()

        async with anyio.create_task_group() as tg:
            tg.start_soon(holder)
            await entered.wait()
            tg.start_soon(waiter)
            await anyio.sleep(0.01)

            # Holder and waiter share one lock
            assert len(locks) == 1
            release.set()
            await waiter_done.wait()

        assert len(locks) == 0

    @pytest.mark.asyncio
    async def test_cancelled_waiter_does_not_leak_its_key(self) -> None:
        locks = KeyedLock(name='test')

        async def impatient_waiter() -> None:
            with anyio.move_on_after(0.01):
                async with locks.hold('k'):
                    pass  # pragma: no cover

        async with locks.hold('k'):
            async with anyio.create_task_group() as tg:
                tg.start_soon(impatient_waiter)
            assert len(locks) == 1

        assert len(locks) == 0

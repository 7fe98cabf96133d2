"""
Tests for the concurrency limiter.
"""

import asyncio

import pytest

from edgesync.core.limiter import ConcurrencyLimiter


class TestConcurrencyLimiter:

    def test_capacity_must_be_positive(self):
        with pytest.raises(ValueError):
            ConcurrencyLimiter(0)

    def test_never_exceeds_capacity(self):
        """20 operations through a limiter of 3 never overlap more than 3 at a time."""

        async def run():
            limiter = ConcurrencyLimiter(3)
            active = 0
            seen_max = 0

            async def op():
                nonlocal active, seen_max
                active += 1
                seen_max = max(seen_max, active)
                await asyncio.sleep(0.001)
                active -= 1

            await asyncio.gather(*(limiter.run(op) for _ in range(20)))
            return limiter, seen_max

        limiter, seen_max = asyncio.run(run())
        assert seen_max == 3
        assert limiter.peak == 3
        assert limiter.in_flight == 0

    def test_permit_released_when_operation_fails(self):

        async def run():
            limiter = ConcurrencyLimiter(1)

            async def fail():
                raise RuntimeError("boom")

            async def succeed():
                return "ok"

            with pytest.raises(RuntimeError):
                await limiter.run(fail)
            # Would block forever if the permit leaked
            return limiter, await asyncio.wait_for(limiter.run(succeed), timeout=1)

        limiter, value = asyncio.run(run())
        assert value == "ok"
        assert limiter.in_flight == 0

    def test_waiters_start_in_arrival_order(self):

        async def run():
            limiter = ConcurrencyLimiter(1)
            order = []

            async def op(n):
                order.append(n)
                await asyncio.sleep(0)

            tasks = []
            for n in range(5):
                tasks.append(asyncio.create_task(limiter.run(op, n)))
                await asyncio.sleep(0)
            await asyncio.gather(*tasks)
            return order

        assert asyncio.run(run()) == [0, 1, 2, 3, 4]

    def test_passes_arguments_and_returns_value(self):

        async def add(a, b=0):
            return a + b

        async def run():
            return await ConcurrencyLimiter(2).run(add, 2, b=3)

        assert asyncio.run(run()) == 5

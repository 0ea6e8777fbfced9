"""Unit tests for the async token-bucket rate limiter."""

from unittest.mock import patch

import pytest

from litreview.adapters.common.rate_limiter import AsyncRateLimiter

pytestmark = pytest.mark.unit


@pytest.mark.parametrize("rpm", [None, 0, -5])
def test_non_positive_rate_disables_limiting(rpm):
    assert not AsyncRateLimiter(rpm).enabled


@pytest.mark.asyncio
async def test_disabled_limiter_never_waits():
    limiter = AsyncRateLimiter(0)

    with patch("litreview.adapters.common.rate_limiter.asyncio.sleep") as sleep:
        for _ in range(100):
            await limiter.acquire()

    sleep.assert_not_called()


@pytest.mark.asyncio
async def test_tokens_are_consumed_without_waiting():
    limiter = AsyncRateLimiter(60)

    for _ in range(3):
        await limiter.acquire()

    assert limiter.tokens == pytest.approx(57, abs=1)


@pytest.mark.asyncio
async def test_empty_bucket_waits_for_refill():
    limiter = AsyncRateLimiter(1)
    await limiter.acquire()

    async def fake_sleep(seconds):
        # Pretend the time passed
        limiter.last_refill -= seconds

    with patch(
        "litreview.adapters.common.rate_limiter.asyncio.sleep", side_effect=fake_sleep
    ) as sleep:
        await limiter.acquire()

    sleep.assert_called_once()
    assert sleep.call_args.args[0] == pytest.approx(60.0, abs=1.0)

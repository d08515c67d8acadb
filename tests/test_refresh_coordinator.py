import asyncio

import pytest

from docuflow.errors import ApiError
from docuflow.refresh import RefreshCoordinator


class GatedRefresh:
    def __init__(self, outcome: bool = True, error: Exception | None = None) -> None:
        self.calls = 0
        self.release = asyncio.Event()
        self._outcome = outcome
        self._error = error

    async def __call__(self) -> bool:
        self.calls += 1
        await self.release.wait()
        if self._error is not None:
            raise self._error
        return self._outcome


async def _settle() -> None:
    for _ in range(5):
        await asyncio.sleep(0)


@pytest.mark.asyncio
async def test_single_refresh_for_concurrent_callers() -> None:
    refresh = GatedRefresh()
    coordinator = RefreshCoordinator(refresh)

    waiters = [asyncio.ensure_future(coordinator.refresh()) for _ in range(5)]
    await _settle()

    assert coordinator.refreshing is True
    assert coordinator.waiters == 5

    refresh.release.set()
    results = await asyncio.gather(*waiters)

    assert results == [True] * 5
    assert refresh.calls == 1
    assert coordinator.refreshing is False
    assert coordinator.waiters == 0


@pytest.mark.asyncio
async def test_failed_refresh_releases_all_waiters_with_false() -> None:
    refresh = GatedRefresh(error=ApiError("refresh rejected"))
    coordinator = RefreshCoordinator(refresh)

    waiters = [asyncio.ensure_future(coordinator.refresh()) for _ in range(3)]
    await _settle()
    refresh.release.set()

    assert await asyncio.gather(*waiters) == [False, False, False]
    assert coordinator.refreshing is False


@pytest.mark.asyncio
async def test_new_refresh_starts_after_previous_settles() -> None:
    refresh = GatedRefresh()
    refresh.release.set()
    coordinator = RefreshCoordinator(refresh)

    assert await coordinator.refresh() is True
    assert await coordinator.refresh() is True
    assert refresh.calls == 2


@pytest.mark.asyncio
async def test_cancelled_waiter_does_not_cancel_refresh() -> None:
    refresh = GatedRefresh()
    coordinator = RefreshCoordinator(refresh)

    first = asyncio.ensure_future(coordinator.refresh())
    second = asyncio.ensure_future(coordinator.refresh())
    await _settle()

    first.cancel()
    await _settle()
    refresh.release.set()

    assert await second is True
    assert first.cancelled()
    assert refresh.calls == 1

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from .constants import LOGGER
from .errors import ApiError


class RefreshCoordinator:
    def __init__(
        self,
        refresh_fn: Callable[[], Awaitable[bool]],
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._refresh_fn = refresh_fn
        self._logger = logger or LOGGER
        self._task: asyncio.Task[bool] | None = None
        self._waiters = 0

    @property
    def refreshing(self) -> bool:
        return self._task is not None

    @property
    def waiters(self) -> int:
        return self._waiters

    async def refresh(self) -> bool:
        # No await between the check and the assignment below.
        task = self._task
        if task is None:
            task = asyncio.ensure_future(self._run())
            self._task = task
        else:
            self._logger.debug("Joining in-flight token refresh")

        self._waiters += 1
        try:
            return await asyncio.shield(task)
        finally:
            self._waiters -= 1

    async def _run(self) -> bool:
        self._logger.info("Access token rejected; refreshing credentials")
        try:
            refreshed = await self._refresh_fn()
        except ApiError as error:
            self._logger.warning("Token refresh failed: %s", error)
            refreshed = False
        finally:
            self._task = None

        if refreshed:
            self._logger.info("Token refresh succeeded")
        return refreshed

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable

import httpx

from docuflow.constants import AUTH_COOKIE_NAMES, LOGGER


class SessionEffects(ABC):
    @abstractmethod
    def clear_auth_cookies(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def redirect_to_login(self, url: str) -> None:
        raise NotImplementedError


class HeadlessSessionEffects(SessionEffects):
    def __init__(
        self,
        cookies: httpx.Cookies | None = None,
        *,
        on_redirect: Callable[[str], None] | None = None,
        cookie_names: tuple[str, ...] = AUTH_COOKIE_NAMES,
        logger: logging.Logger | None = None,
    ) -> None:
        self._cookies = cookies
        self._on_redirect = on_redirect
        self._cookie_names = cookie_names
        self._logger = logger or LOGGER

    def clear_auth_cookies(self) -> None:
        if self._cookies is None:
            return
        for name in self._cookie_names:
            self._cookies.delete(name)

    def redirect_to_login(self, url: str) -> None:
        if self._on_redirect is None:
            self._logger.warning("Session expired; sign in again at %s", url)
            return
        self._on_redirect(url)

from __future__ import annotations

import json
import os
import tempfile
from abc import ABC, abstractmethod
from dataclasses import asdict, fields
from pathlib import Path

from auth.models import TokenPair

# Failures a store may raise while reading or writing its backing file.
STORE_ERRORS = (OSError, ValueError, RuntimeError)

_TOKEN_FIELDS = {field.name for field in fields(TokenPair)}


class TokenStore(ABC):
    @abstractmethod
    async def get_tokens(self) -> TokenPair | None:
        raise NotImplementedError

    @abstractmethod
    async def save_tokens(self, access_token: str, refresh_token: str) -> None:
        raise NotImplementedError

    @abstractmethod
    async def clear_tokens(self) -> None:
        raise NotImplementedError

    async def get_access_token(self) -> str | None:
        tokens = await self.get_tokens()
        if tokens is None:
            return None
        return tokens.access_token

    async def get_refresh_token(self) -> str | None:
        tokens = await self.get_tokens()
        if tokens is None:
            return None
        return tokens.refresh_token


class MemoryTokenStore(TokenStore):
    def __init__(self, tokens: TokenPair | None = None) -> None:
        self._tokens = tokens

    async def get_tokens(self) -> TokenPair | None:
        return self._tokens

    async def save_tokens(self, access_token: str, refresh_token: str) -> None:
        self._tokens = TokenPair(access_token=access_token, refresh_token=refresh_token)

    async def clear_tokens(self) -> None:
        self._tokens = None


class FileTokenStore(TokenStore):
    def __init__(self, path: str | Path = ".tokens.json") -> None:
        self._path = Path(path)

    async def get_tokens(self) -> TokenPair | None:
        payload = self._read()
        if payload is None:
            return None
        return TokenPair(**payload)

    async def save_tokens(self, access_token: str, refresh_token: str) -> None:
        tokens = TokenPair(access_token=access_token, refresh_token=refresh_token)
        self._write(asdict(tokens))

    async def clear_tokens(self) -> None:
        if self._path.exists():
            self._path.unlink()

    def _read(self) -> dict[str, str] | None:
        if not self._path.exists():
            return None

        raw = json.loads(self._path.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise RuntimeError("Token store file is invalid; expected top-level JSON object.")
        if set(raw) != _TOKEN_FIELDS or not all(isinstance(value, str) for value in raw.values()):
            raise RuntimeError(
                "Token store file is invalid; expected string keys "
                f"{', '.join(sorted(_TOKEN_FIELDS))}."
            )
        return raw

    def _write(self, payload: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f"{self._path.name}.",
            suffix=".tmp",
            dir=self._path.parent,
        )
        tmp_path = Path(tmp_name)

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2, sort_keys=True)
            os.replace(tmp_path, self._path)
        finally:
            if tmp_path.exists():
                tmp_path.unlink()

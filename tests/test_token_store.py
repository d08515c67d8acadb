import json

import pytest

from auth.models import TokenPair
from auth.token_store import FileTokenStore, MemoryTokenStore


@pytest.mark.asyncio
async def test_memory_store_save_get() -> None:
    store = MemoryTokenStore()

    await store.save_tokens("access", "refresh")

    assert await store.get_tokens() == TokenPair("access", "refresh")
    assert await store.get_access_token() == "access"
    assert await store.get_refresh_token() == "refresh"


@pytest.mark.asyncio
async def test_memory_store_get_missing() -> None:
    store = MemoryTokenStore()

    assert await store.get_access_token() is None
    assert await store.get_refresh_token() is None


@pytest.mark.asyncio
async def test_memory_store_clear() -> None:
    store = MemoryTokenStore(TokenPair("access", "refresh"))

    await store.clear_tokens()

    assert await store.get_tokens() is None


@pytest.mark.asyncio
async def test_memory_store_replaces_both_tokens() -> None:
    store = MemoryTokenStore(TokenPair("A1", "R1"))
    before = await store.get_tokens()

    await store.save_tokens("A2", "R2")

    assert before == TokenPair("A1", "R1")
    assert await store.get_tokens() == TokenPair("A2", "R2")


@pytest.mark.asyncio
async def test_file_store_save_get(tmp_path) -> None:
    store = FileTokenStore(tmp_path / "tokens.json")

    await store.save_tokens("access", "refresh")

    assert await store.get_tokens() == TokenPair("access", "refresh")


@pytest.mark.asyncio
async def test_file_store_persists(tmp_path) -> None:
    path = tmp_path / "tokens.json"
    await FileTokenStore(path).save_tokens("access", "refresh")

    second_store = FileTokenStore(path)

    assert await second_store.get_access_token() == "access"
    assert json.loads(path.read_text(encoding="utf-8")) == {
        "access_token": "access",
        "refresh_token": "refresh",
    }


@pytest.mark.asyncio
async def test_file_store_leaves_no_temp_files(tmp_path) -> None:
    store = FileTokenStore(tmp_path / "tokens.json")

    await store.save_tokens("A1", "R1")
    await store.save_tokens("A2", "R2")

    assert [p.name for p in tmp_path.iterdir()] == ["tokens.json"]


@pytest.mark.asyncio
async def test_file_store_clear(tmp_path) -> None:
    path = tmp_path / "tokens.json"
    store = FileTokenStore(path)
    await store.save_tokens("access", "refresh")

    await store.clear_tokens()

    assert not path.exists()
    assert await store.get_tokens() is None


@pytest.mark.asyncio
async def test_file_store_missing_file(tmp_path) -> None:
    store = FileTokenStore(tmp_path / "missing.json")

    assert await store.get_tokens() is None
    await store.clear_tokens()


@pytest.mark.asyncio
async def test_file_store_rejects_invalid_file(tmp_path) -> None:
    path = tmp_path / "tokens.json"
    path.write_text("[]", encoding="utf-8")

    with pytest.raises(RuntimeError, match="Token store file is invalid"):
        await FileTokenStore(path).get_tokens()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"accessToken": "A1", "refreshToken": "R1"},
        {"access_token": "A1", "refresh_token": "R1", "expires_in": 60},
        {"access_token": "A1"},
        {"access_token": "A1", "refresh_token": None},
    ],
)
async def test_file_store_rejects_unexpected_keys(tmp_path, payload) -> None:
    path = tmp_path / "tokens.json"
    path.write_text(json.dumps(payload), encoding="utf-8")

    with pytest.raises(RuntimeError, match="Token store file is invalid"):
        await FileTokenStore(path).get_tokens()


def test_token_pair_from_payload_uses_fallback() -> None:
    tokens = TokenPair.from_payload({"accessToken": "A2"}, fallback_refresh_token="R1")

    assert tokens == TokenPair("A2", "R1")


@pytest.mark.parametrize(
    "payload",
    [None, [], {}, {"accessToken": ""}, {"accessToken": "A2"}, {"accessToken": 5, "refreshToken": "R"}],
)
def test_token_pair_from_payload_rejects_incomplete(payload) -> None:
    with pytest.raises(ValueError):
        TokenPair.from_payload(payload)

"""Tests for list store backends — memory, file, redis, s3 — and the factory."""

from __future__ import annotations

import io
import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from persistent_set.core.config import AppSettings, StoreConfig
from persistent_set.exceptions import StoreUnavailableError, StoreWriteError
from persistent_set.stores import FileListStore, IListStore, MemoryListStore, create_store
from persistent_set.stores.redis_backend import RedisListStore
from persistent_set.stores.s3_backend import S3ListStore

# ---------------------------------------------------------------------------
# MemoryListStore
# ---------------------------------------------------------------------------


class TestMemoryListStore:
    async def test_missing_key_is_none(self) -> None:
        assert await MemoryListStore().get_list("nope") is None

    async def test_set_and_get(self) -> None:
        store = MemoryListStore()
        await store.set_list("k", ["a", "b"])
        assert await store.get_list("k") == ["a", "b"]

    async def test_empty_list_is_present(self) -> None:
        store = MemoryListStore()
        await store.set_list("k", [])
        assert await store.get_list("k") == []

    async def test_returned_list_is_a_copy(self) -> None:
        store = MemoryListStore({"k": ["a"]})
        (await store.get_list("k")).append("b")  # type: ignore[union-attr]
        assert await store.get_list("k") == ["a"]

    async def test_remove(self) -> None:
        store = MemoryListStore({"k": ["a"]})
        await store.remove("k")
        await store.remove("k")  # Should not raise
        assert await store.get_list("k") is None

    def test_satisfies_protocol(self) -> None:
        assert isinstance(MemoryListStore(), IListStore)


# ---------------------------------------------------------------------------
# FileListStore
# ---------------------------------------------------------------------------


class TestFileListStore:
    async def test_round_trip(self, tmp_path: Path) -> None:
        store = FileListStore(tmp_path)
        await store.set_list("favorites", ["1", "2"])
        assert await store.get_list("favorites") == ["1", "2"]
        assert json.loads((tmp_path / "favorites.json").read_text()) == ["1", "2"]

    async def test_survives_new_instance(self, tmp_path: Path) -> None:
        await FileListStore(tmp_path).set_list("k", ["x"])
        assert await FileListStore(tmp_path).get_list("k") == ["x"]

    async def test_missing_key_is_none(self, tmp_path: Path) -> None:
        assert await FileListStore(tmp_path).get_list("nope") is None

    async def test_creates_base_directory(self, tmp_path: Path) -> None:
        FileListStore(tmp_path / "a" / "b")
        assert (tmp_path / "a" / "b").is_dir()

    async def test_key_with_slashes_is_sanitized(self, tmp_path: Path) -> None:
        store = FileListStore(tmp_path)
        await store.set_list("user/1\\tags", ["t"])
        assert (tmp_path / "user_1_tags.json").is_file()
        assert await store.get_list("user/1\\tags") == ["t"]

    async def test_no_temp_files_left_behind(self, tmp_path: Path) -> None:
        store = FileListStore(tmp_path)
        await store.set_list("k", ["a"])
        await store.set_list("k", ["b"])
        assert sorted(p.name for p in tmp_path.iterdir()) == ["k.json"]

    async def test_remove_deletes_file(self, tmp_path: Path) -> None:
        store = FileListStore(tmp_path)
        await store.set_list("k", ["a"])
        await store.remove("k")
        await store.remove("k")  # Should not raise
        assert not (tmp_path / "k.json").exists()
        assert await store.get_list("k") is None

    async def test_corrupt_file_raises(self, tmp_path: Path) -> None:
        (tmp_path / "k.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(StoreUnavailableError):
            await FileListStore(tmp_path).get_list("k")

    async def test_non_string_entries_raise(self, tmp_path: Path) -> None:
        (tmp_path / "k.json").write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(StoreUnavailableError, match="array of strings"):
            await FileListStore(tmp_path).get_list("k")

    async def test_write_failure_is_wrapped(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        store = FileListStore(tmp_path)

        def _boom(src: str, dst: object) -> None:
            raise PermissionError("read-only")

        monkeypatch.setattr("persistent_set.stores.file_backend.os.replace", _boom)
        with pytest.raises(StoreWriteError) as exc_info:
            await store.set_list("k", ["a"])

        assert exc_info.value.key == "k"
        assert list(tmp_path.iterdir()) == []

    async def test_temp_file_removed_when_encoding_fails(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        store = FileListStore(tmp_path)
        await store.set_list("k", ["a"])

        def _unserializable(obj: object, fh: object) -> None:
            raise TypeError("not JSON serializable")

        monkeypatch.setattr("persistent_set.stores.file_backend.json.dump", _unserializable)
        with pytest.raises(TypeError):
            await store.set_list("k", ["b"])

        assert sorted(p.name for p in tmp_path.iterdir()) == ["k.json"]
        assert json.loads((tmp_path / "k.json").read_text()) == ["a"]


# ---------------------------------------------------------------------------
# RedisListStore
# ---------------------------------------------------------------------------


def _redis_client(initial: dict[str, str] | None = None) -> MagicMock:
    data: dict[str, str] = dict(initial or {})
    client = MagicMock()
    client.get = AsyncMock(side_effect=lambda k: data.get(k))
    client.set = AsyncMock(side_effect=lambda k, v: data.__setitem__(k, v))
    client.delete = AsyncMock(side_effect=lambda k: data.pop(k, None))
    client.data = data
    return client


class TestRedisListStore:
    async def test_set_stores_json_under_prefixed_key(self) -> None:
        client = _redis_client()
        store = RedisListStore(prefix="app:", client=client)

        await store.set_list("tags", ["a", "b"])

        client.set.assert_awaited_once_with("app:tags", '["a", "b"]')

    async def test_get_round_trip(self) -> None:
        store = RedisListStore(client=_redis_client())
        await store.set_list("k", ["x"])
        assert await store.get_list("k") == ["x"]

    async def test_empty_list_is_present(self) -> None:
        store = RedisListStore(client=_redis_client())
        await store.set_list("k", [])
        assert await store.get_list("k") == []

    async def test_missing_key_is_none(self) -> None:
        assert await RedisListStore(client=_redis_client()).get_list("nope") is None

    async def test_remove(self) -> None:
        client = _redis_client({"pset:k": '["a"]'})
        store = RedisListStore(client=client)
        await store.remove("k")
        client.delete.assert_awaited_once_with("pset:k")
        assert await store.get_list("k") is None

    async def test_bytes_responses_are_decoded(self) -> None:
        client = MagicMock()
        client.get = AsyncMock(return_value=b'["a"]')
        assert await RedisListStore(client=client).get_list("k") == ["a"]

    async def test_non_json_value_raises(self) -> None:
        store = RedisListStore(client=_redis_client({"pset:k": "plain"}))
        with pytest.raises(StoreUnavailableError):
            await store.get_list("k")

    async def test_non_string_entries_raise(self) -> None:
        store = RedisListStore(client=_redis_client({"pset:k": '[1, null, {"x": 2}]'}))
        with pytest.raises(StoreUnavailableError, match="array of strings"):
            await store.get_list("k")

    async def test_connection_error_on_read(self) -> None:
        client = MagicMock()
        client.get = AsyncMock(side_effect=RedisConnectionError("down"))
        with pytest.raises(StoreUnavailableError, match="down"):
            await RedisListStore(client=client).get_list("k")

    async def test_connection_error_on_write(self) -> None:
        client = MagicMock()
        client.set = AsyncMock(side_effect=RedisConnectionError("down"))
        with pytest.raises(StoreWriteError):
            await RedisListStore(client=client).set_list("k", ["a"])

    def test_satisfies_protocol(self) -> None:
        assert isinstance(RedisListStore(client=_redis_client()), IListStore)

    async def test_aclose_closes_a_client_it_created(self, monkeypatch: pytest.MonkeyPatch) -> None:
        client = _redis_client()
        client.aclose = AsyncMock()
        monkeypatch.setattr("redis.asyncio.from_url", MagicMock(return_value=client))
        store = RedisListStore(url="redis://cache:6379")
        await store.get_list("k")

        await store.aclose()
        await store.aclose()

        client.aclose.assert_awaited_once()

    async def test_aclose_leaves_an_injected_client_open(self) -> None:
        client = _redis_client()
        client.aclose = AsyncMock()
        store = RedisListStore(client=client)

        await store.aclose()

        client.aclose.assert_not_awaited()
        assert await store.get_list("k") is None


# ---------------------------------------------------------------------------
# S3ListStore
# ---------------------------------------------------------------------------


class _NoSuchKey(Exception):
    pass


def _s3_client() -> MagicMock:
    objects: dict[str, bytes] = {}
    client = MagicMock()
    client.exceptions.NoSuchKey = _NoSuchKey

    def _get(Bucket: str, Key: str) -> dict:
        if Key not in objects:
            raise _NoSuchKey(Key)
        return {"Body": io.BytesIO(objects[Key])}

    def _put(**kwargs: object) -> None:
        objects[kwargs["Key"]] = kwargs["Body"]  # type: ignore[index,assignment]

    def _delete(Bucket: str, Key: str) -> None:
        objects.pop(Key, None)

    client.get_object.side_effect = _get
    client.put_object.side_effect = _put
    client.delete_object.side_effect = _delete
    client.objects = objects
    return client


class TestS3ListStore:
    async def test_round_trip(self) -> None:
        client = _s3_client()
        store = S3ListStore(bucket="b", prefix="sets/", boto3_client=client)

        await store.set_list("favs", ["1", "2"])

        assert client.objects["sets/favs.json"] == b'["1", "2"]'
        assert await store.get_list("favs") == ["1", "2"]

    async def test_missing_key_is_none(self) -> None:
        store = S3ListStore(bucket="b", boto3_client=_s3_client())
        assert await store.get_list("nope") is None

    async def test_kms_encryption_parameters(self) -> None:
        client = _s3_client()
        store = S3ListStore(bucket="b", kms_key_id="key-123", boto3_client=client)

        await store.set_list("k", [])

        kwargs = client.put_object.call_args.kwargs
        assert kwargs["ServerSideEncryption"] == "aws:kms"
        assert kwargs["SSEKMSKeyId"] == "key-123"

    async def test_remove(self) -> None:
        client = _s3_client()
        store = S3ListStore(bucket="b", boto3_client=client)
        await store.set_list("k", ["a"])
        await store.remove("k")
        assert await store.get_list("k") is None

    async def test_client_errors_are_wrapped(self) -> None:
        client = _s3_client()
        client.put_object.side_effect = RuntimeError("AccessDenied")
        store = S3ListStore(bucket="b", boto3_client=client)

        with pytest.raises(StoreWriteError, match="AccessDenied"):
            await store.set_list("k", ["a"])

    async def test_non_string_entries_raise(self) -> None:
        client = _s3_client()
        client.objects["sets/k.json"] = b'["a", 2, null]'
        store = S3ListStore(bucket="b", boto3_client=client)

        with pytest.raises(StoreUnavailableError, match="array of strings"):
            await store.get_list("k")


# ---------------------------------------------------------------------------
# create_store
# ---------------------------------------------------------------------------


class TestCreateStore:
    def test_none_is_memory(self) -> None:
        assert isinstance(create_store(None), MemoryListStore)

    def test_default_settings_are_memory(self) -> None:
        assert isinstance(create_store(AppSettings()), MemoryListStore)

    def test_file_backend(self, tmp_path: Path) -> None:
        store = create_store(StoreConfig(backend="file", store_path=tmp_path))
        assert isinstance(store, FileListStore)

    def test_redis_backend(self) -> None:
        settings = AppSettings(store=StoreConfig(backend="redis", redis_url="redis://cache:6379"))
        store = create_store(settings)
        assert isinstance(store, RedisListStore)

    def test_unknown_backend(self) -> None:
        config = MagicMock(spec=["backend"])
        config.backend = "etcd"
        with pytest.raises(ValueError, match="Unknown list store backend"):
            create_store(config)

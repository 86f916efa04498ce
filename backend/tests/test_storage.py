"""Tests for key-addressed locations and the file record store."""

import asyncio
import json
import stat

import pytest

from openstory.config import Settings
from openstory.errors import StorageError
from openstory.storage import build_record_store
from openstory.storage.base import location_for
from openstory.storage.file_store import FILE_MODE, FileRecordStore
from openstory.storage.locks import KeyedLock


# ---------------------------------------------------------------------------
# Locations
# ---------------------------------------------------------------------------


def test_location_is_deterministic():
    assert location_for("s1", "fantasy-quest") == location_for("s1", "fantasy-quest")
    assert location_for("s1", "fantasy-quest").key == location_for("s1", "fantasy-quest").key


def test_location_keys_do_not_collide():
    pairs = [
        ("a:b", "c"),
        ("a", "b:c"),
        ("a%3Ab", "c"),
        ("a/b", "c"),
        ("a", "b/c"),
        (".", "game"),
        ("..", "game"),
        ("%2E", "game"),
    ]
    keys = {location_for(s, g).key for s, g in pairs}
    assert len(keys) == len(pairs)


def test_location_segments_stay_inside_root(store):
    location = location_for("../../etc", "..")
    path = store.path_for(location)
    assert store.root in path.parents
    assert ".." not in path.relative_to(store.root).parts
    assert "/" not in location.session_segment


def test_file_layout(store):
    path = store.path_for(location_for("s1", "fantasy-quest"))
    assert path == store.root / "s1" / "fantasy-quest" / "chat.json"


# ---------------------------------------------------------------------------
# File store primitives
# ---------------------------------------------------------------------------


async def test_read_missing_returns_none(store):
    assert await store.read(location_for("nobody", "fantasy-quest")) is None


async def test_write_then_read(store):
    location = location_for("s1", "fantasy-quest")
    await store.ensure_scope(location)
    await store.write(location, '{"hello": "world"}')
    assert json.loads(await store.read(location)) == {"hello": "world"}


async def test_write_replaces_and_leaves_no_temp_files(store):
    location = location_for("s1", "fantasy-quest")
    await store.ensure_scope(location)
    await store.write(location, "old")
    await store.write(location, "new")

    assert await store.read(location) == "new"
    assert [p.name for p in store.scope_dir(location).iterdir()] == ["chat.json"]


async def test_ensure_scope_is_idempotent_and_race_safe(store):
    location = location_for("s1", "fantasy-quest")
    await asyncio.gather(*(store.ensure_scope(location) for _ in range(5)))
    await store.ensure_scope(location)
    assert store.scope_dir(location).is_dir()


async def test_write_without_scope_raises_storage_error(store):
    with pytest.raises(StorageError):
        await store.write(location_for("s1", "fantasy-quest"), "data")


async def test_delete_is_idempotent(store):
    location = location_for("s1", "fantasy-quest")
    await store.delete(location)  # never existed

    await store.ensure_scope(location)
    await store.write(location, "data")
    await store.delete(location)
    await store.delete(location)
    assert await store.read(location) is None
    # the scope directory itself is left alone
    assert store.scope_dir(location).is_dir()


async def test_undecodable_file_reads_as_empty(store):
    location = location_for("s1", "fantasy-quest")
    await store.ensure_scope(location)
    store.path_for(location).write_bytes(b"\xff\xfe\x00garbage")
    assert await store.read(location) == ""


# ---------------------------------------------------------------------------
# Keyed locks
# ---------------------------------------------------------------------------


async def test_keyed_lock_is_released_after_use():
    locks = KeyedLock()
    async with locks.hold("a"):
        assert len(locks) == 1
    assert len(locks) == 0


async def test_keyed_lock_serializes_same_key():
    locks = KeyedLock()
    events = []

    async def worker(name):
        async with locks.hold("same"):
            events.append(f"{name}-in")
            await asyncio.sleep(0.01)
            events.append(f"{name}-out")

    await asyncio.gather(worker("a"), worker("b"))
    assert events in (["a-in", "a-out", "b-in", "b-out"], ["b-in", "b-out", "a-in", "a-out"])
    assert len(locks) == 0


async def test_keyed_lock_does_not_block_other_keys():
    locks = KeyedLock()

    async def take_b():
        async with locks.hold("b"):
            return True

    async with locks.hold("a"):
        assert await asyncio.wait_for(take_b(), timeout=1)


# ---------------------------------------------------------------------------
# Backend selection
# ---------------------------------------------------------------------------


def test_build_file_store(tmp_path):
    store = build_record_store(Settings(STORAGE_BACKEND="file", USER_DATA_DIR=tmp_path))
    assert isinstance(store, FileRecordStore)
    assert store.root == tmp_path


def test_build_unknown_backend():
    with pytest.raises(ValueError):
        build_record_store(Settings(STORAGE_BACKEND="carrier-pigeon"))


async def test_read_io_failure_raises_storage_error(store):
    location = location_for("s1", "fantasy-quest")
    store.path_for(location).mkdir(parents=True)  # a directory where chat.json should be
    with pytest.raises(StorageError):
        await store.read(location)


async def test_written_file_follows_umask(store):
    location = location_for("s1", "fantasy-quest")
    await store.ensure_scope(location)
    await store.write(location, "data")
    assert stat.S_IMODE(store.path_for(location).stat().st_mode) == FILE_MODE


async def test_build_redis_store():
    from openstory.db.redis import close_redis
    from openstory.storage.redis_store import RedisRecordStore

    await close_redis()
    store = build_record_store(Settings(
        STORAGE_BACKEND="redis", REDIS_URL="redis://localhost:6399/2", REDIS_KEY_PREFIX="t",
    ))
    try:
        assert isinstance(store, RedisRecordStore)
        assert store.prefix == "t"
        assert store.redis.connection_pool.connection_kwargs["port"] == 6399
    finally:
        await close_redis()


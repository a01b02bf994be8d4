"""Tests for the lock file TraceStore."""

import asyncio
import json
import logging
import threading

import pytest

from remlog.errors import NotFoundError, StoreUnavailableError
from remlog.models import TraceRecord
from remlog.storage import TraceStore
from remlog.storage import lock as lock_module


def make_record(trace_id: str, **extra) -> TraceRecord:
    return TraceRecord(
        id=trace_id,
        host="192.0.2.1",
        timestamp="2024-05-01T12:00:00.000Z",
        **extra,
    )


class TestStoreLifecycle:
    """Tests for start/stop/flush."""

    async def test_save_before_start_raises(self, lock_file):
        """Test that a store without a writer refuses writes."""
        st = TraceStore(lock_file)
        with pytest.raises(RuntimeError):
            await st.save(make_record("a"))

    async def test_file_created_lazily(self, store, lock_file):
        """Test that nothing is written before the first save."""
        assert not lock_file.exists()

        await store.save(make_record("a"))
        await store.flush()

        assert lock_file.exists()

    async def test_stop_drains_pending_writes(self, lock_file):
        """Test that stop applies every accepted write."""
        st = TraceStore(lock_file)
        await st.start()
        for i in range(20):
            await st.save(make_record(f"t{i}"))
        await st.stop()

        reader = TraceStore(lock_file)
        records = await reader.load_all()
        assert [r.id for r in records] == [f"t{i}" for i in range(20)]

    async def test_start_is_idempotent(self, store):
        """Test that a second start keeps the same writer."""
        writer = store._writer
        await store.start()
        assert store._writer is writer


class TestStoreSave:
    """Tests for TraceStore.save()."""

    async def test_save_and_load_all(self, store):
        """Test saving and listing records."""
        await store.save(make_record("a", message="first"))
        await store.flush()

        records = await store.load_all()
        assert len(records) == 1
        assert records[0].id == "a"
        assert records[0].message == "first"

    async def test_file_is_json_array(self, store, lock_file):
        """Test the on-disk format."""
        await store.save(make_record("a", userAgent="curl"))
        await store.flush()

        data = json.loads(lock_file.read_text(encoding="utf-8"))
        assert data == [
            {
                "id": "a",
                "host": "192.0.2.1",
                "timestamp": "2024-05-01T12:00:00.000Z",
                "userAgent": "curl",
            }
        ]

    async def test_listing_preserves_insertion_order(self, store):
        """Test that records list in the order they were first written."""
        for trace_id in ["c", "a", "b"]:
            await store.save(make_record(trace_id))
        await store.flush()

        assert [r.id for r in await store.load_all()] == ["c", "a", "b"]

    async def test_same_id_overwrites(self, store):
        """Test that the last write for an id wins and no duplicate appears."""
        await store.save(make_record("a", message="old"))
        await store.save(make_record("b"))
        await store.save(make_record("a", message="new"))
        await store.flush()

        records = await store.load_all()
        assert [r.id for r in records] == ["a", "b"]
        assert records[0].message == "new"

    async def test_appends_to_existing_file(self, lock_file):
        """Test that a pre-existing lock file is extended, not replaced."""
        lock_file.parent.mkdir(parents=True)
        lock_file.write_text(
            json.dumps([make_record("old").to_document()]), encoding="utf-8"
        )

        st = TraceStore(lock_file)
        await st.start()
        await st.save(make_record("new"))
        await st.stop()

        assert [r.id for r in await st.load_all()] == ["old", "new"]

    async def test_no_temp_files_left(self, store, lock_file):
        """Test that atomic replace cleans up after itself."""
        for i in range(5):
            await store.save(make_record(f"t{i}"))
        await store.flush()

        assert [p.name for p in lock_file.parent.iterdir()] == [lock_file.name]

    async def test_concurrent_distinct_ids_all_land(self, store):
        """Test that no concurrent write is silently dropped."""
        ids = [f"trace-{i}" for i in range(100)]
        await asyncio.gather(*(store.save(make_record(i)) for i in ids))
        await store.flush()

        records = await store.load_all()
        assert sorted(r.id for r in records) == sorted(ids)

    async def test_concurrent_same_id_keeps_one_entry(self, store):
        """Test last-write-wins for racing writes to the same id."""
        messages = [f"m{i}" for i in range(20)]
        await asyncio.gather(
            *(store.save(make_record("dup", message=m)) for m in messages)
        )
        await store.flush()

        records = await store.load_all()
        assert len(records) == 1
        assert records[0].message in messages

    async def test_full_queue_times_out(self, lock_file):
        """Test that a saturated queue rejects writes after the timeout."""
        release = threading.Event()
        st = TraceStore(lock_file, queue_size=1, put_timeout=0.05)
        st._apply = lambda record: release.wait(5)
        await st.start()
        try:
            await st.save(make_record("taken-by-writer"))
            await asyncio.sleep(0.05)
            await st.save(make_record("queued"))

            with pytest.raises(StoreUnavailableError, match="queue is full"):
                await st.save(make_record("overflow"))
        finally:
            release.set()
            await st.stop()

    async def test_writer_survives_failed_write(self, store, monkeypatch, caplog):
        """Test that one failing write is logged and later writes still land."""
        real_write = lock_module._write_atomic
        calls = []

        def flaky_write(path, entries):
            calls.append(len(entries))
            if len(calls) == 1:
                raise OSError("disk full")
            real_write(path, entries)

        monkeypatch.setattr(lock_module, "_write_atomic", flaky_write)

        with caplog.at_level(logging.ERROR, logger="remlog.storage.lock"):
            await store.save(make_record("lost"))
            await store.save(make_record("kept"))
            await store.flush()

        assert "Failed to persist trace lost" in caplog.text
        # The in-memory view still holds the first record, so both are written
        assert [r.id for r in await store.load_all()] == ["lost", "kept"]


class TestStoreLoad:
    """Tests for load_all() and load_by_id()."""

    async def test_load_all_missing_file_is_empty(self, lock_file):
        """Test listing before any trace was written."""
        st = TraceStore(lock_file)
        assert await st.load_all() == []
        assert await st.load_all(strict=True) == []

    async def test_load_all_corrupt_file(self, lock_file):
        """Test that a corrupt file lists as empty unless strict."""
        lock_file.parent.mkdir(parents=True)
        lock_file.write_text("{not json", encoding="utf-8")
        st = TraceStore(lock_file)

        assert await st.load_all() == []
        with pytest.raises(StoreUnavailableError):
            await st.load_all(strict=True)

    async def test_load_all_wrong_shape(self, lock_file):
        """Test that a JSON object instead of an array counts as corrupt."""
        lock_file.parent.mkdir(parents=True)
        lock_file.write_text('{"id": "a"}', encoding="utf-8")
        st = TraceStore(lock_file)

        assert await st.load_all() == []
        with pytest.raises(StoreUnavailableError):
            await st.load_all(strict=True)

    async def test_load_by_id(self, store):
        """Test fetching a single record."""
        await store.save(make_record("a"))
        await store.save(make_record("b", message="bee"))
        await store.flush()

        record = await store.load_by_id("b")
        assert record.id == "b"
        assert record.message == "bee"

    async def test_load_by_id_not_found(self, store):
        """Test that an absent id raises NotFoundError."""
        await store.save(make_record("a"))
        await store.flush()

        with pytest.raises(NotFoundError, match="doesnotexist") as exc_info:
            await store.load_by_id("doesnotexist")
        assert exc_info.value.trace_id == "doesnotexist"

    async def test_load_by_id_missing_file(self, lock_file):
        """Test that a missing store is unavailable, not silently empty."""
        st = TraceStore(lock_file)
        with pytest.raises(StoreUnavailableError, match="abc"):
            await st.load_by_id("abc")

    async def test_load_by_id_corrupt_file(self, lock_file):
        """Test that a corrupt store is unavailable for lookups."""
        lock_file.parent.mkdir(parents=True)
        lock_file.write_text("[{]", encoding="utf-8")
        st = TraceStore(lock_file)

        with pytest.raises(StoreUnavailableError):
            await st.load_by_id("abc")

    async def test_writer_replaces_corrupt_file(self, lock_file):
        """Test that the writer starts over when the lock file is unreadable."""
        lock_file.parent.mkdir(parents=True)
        lock_file.write_text("garbage", encoding="utf-8")

        st = TraceStore(lock_file)
        await st.start()
        await st.save(make_record("fresh"))
        await st.stop()

        assert [r.id for r in await st.load_all(strict=True)] == ["fresh"]

"""Tests for the initiator-password store under concurrent access."""

import threading
import time

from mpesa_client.core.concurrency import ReadWriteLock, SecretStore


class TestSecretStore:
    def test_falls_back_to_default(self) -> None:
        store = SecretStore("default")

        assert store.get() == "default"
        assert store.is_default() is True

    def test_set_replaces_value(self) -> None:
        store = SecretStore("default")

        store.set("new-password")

        assert store.get() == "new-password"
        assert store.is_default() is False

    def test_repr_is_redacted(self) -> None:
        store = SecretStore("default", "hunter2")

        assert "hunter2" not in repr(store)
        assert "default" not in repr(store)

    def test_readers_never_observe_torn_values(self) -> None:
        """Every read returns one of the values that was actually written."""
        candidates = {"a" * 64, "b" * 64, "c" * 64}
        store = SecretStore("a" * 64)
        observed = set()
        stop = threading.Event()
        errors = []

        def writer(value: str) -> None:
            for _ in range(500):
                store.set(value)

        def reader() -> None:
            while not stop.is_set():
                value = store.get()
                observed.add(value)
                if value not in candidates:
                    errors.append(value)

        readers = [threading.Thread(target=reader) for _ in range(4)]
        writers = [threading.Thread(target=writer, args=(value,)) for value in sorted(candidates)]
        for thread in readers + writers:
            thread.start()
        for thread in writers:
            thread.join(timeout=10)
        stop.set()
        for thread in readers:
            thread.join(timeout=10)

        assert errors == []
        assert observed <= candidates
        assert store.get() in candidates


class TestReadWriteLock:
    def test_readers_share_the_lock(self) -> None:
        lock = ReadWriteLock()
        entered = threading.Event()

        def second_reader() -> None:
            with lock.read_locked():
                entered.set()

        with lock.read_locked():
            thread = threading.Thread(target=second_reader)
            thread.start()
            assert entered.wait(timeout=5)
        thread.join(timeout=5)

    def test_writer_waits_for_readers(self) -> None:
        store = SecretStore("old")
        written = threading.Event()

        def write() -> None:
            store.set("new")
            written.set()

        with store._lock.read_locked():
            thread = threading.Thread(target=write)
            thread.start()
            assert not written.wait(timeout=0.2)
        thread.join(timeout=5)

        assert written.is_set()
        assert store.get() == "new"

    def test_waiting_writer_blocks_new_readers(self) -> None:
        lock = ReadWriteLock()
        events = []
        writer_waiting = threading.Event()

        def write() -> None:
            writer_waiting.set()
            with lock.write_locked():
                events.append("write")

        def read() -> None:
            with lock.read_locked():
                events.append("read")

        with lock.read_locked():
            writer = threading.Thread(target=write)
            writer.start()
            writer_waiting.wait(timeout=5)
            # give the writer time to register itself as waiting
            while not lock._waiting_writers:
                time.sleep(0.01)
            reader = threading.Thread(target=read)
            reader.start()
            time.sleep(0.1)
            assert events == []
        writer.join(timeout=5)
        reader.join(timeout=5)

        assert events == ["write", "read"]

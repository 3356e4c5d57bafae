import threading
import time

from memkv.rwlock import ReadWriteLock

import pytest

#-------------FIXTURES----------------
@pytest.fixture
def lock():
    return ReadWriteLock()

#-------------SHARED / EXCLUSIVE----------------
def test_readers_share_the_lock(lock):
    inside = threading.Barrier(3, timeout=2)

    def reader():
        with lock.read_lock():
            inside.wait()  # only passes if all three readers hold the lock at once

    threads = [threading.Thread(target=reader) for _ in range(3)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(2)
    assert not inside.broken

def test_writer_excludes_readers(lock):
    events = []
    lock.acquire_write()

    def reader():
        with lock.read_lock():
            events.append("read")

    t = threading.Thread(target=reader)
    t.start()
    time.sleep(0.05)
    assert events == []  # still blocked behind the writer

    events.append("write-done")
    lock.release_write()
    t.join(2)
    assert events == ["write-done", "read"]

def test_writer_waits_for_readers(lock):
    events = []
    lock.acquire_read()

    def writer():
        with lock.write_lock():
            events.append("write")

    t = threading.Thread(target=writer)
    t.start()
    time.sleep(0.05)
    assert events == []

    lock.release_read()
    t.join(2)
    assert events == ["write"]

def test_waiting_writer_blocks_new_readers(lock):
    events = []
    lock.acquire_read()

    def writer():
        with lock.write_lock():
            events.append("write")

    def late_reader():
        with lock.read_lock():
            events.append("read")

    w = threading.Thread(target=writer)
    w.start()
    time.sleep(0.05)
    r = threading.Thread(target=late_reader)
    r.start()
    time.sleep(0.05)
    assert events == []

    lock.release_read()
    w.join(2)
    r.join(2)
    assert events == ["write", "read"]

#-------------MISUSE----------------
def test_release_read_without_acquire(lock):
    with pytest.raises(RuntimeError):
        lock.release_read()

def test_release_write_without_acquire(lock):
    with pytest.raises(RuntimeError):
        lock.release_write()

def test_lock_released_on_exception(lock):
    with pytest.raises(ValueError):
        with lock.write_lock():
            raise ValueError("boom")
    # would deadlock if the write side were still held
    with lock.read_lock():
        pass

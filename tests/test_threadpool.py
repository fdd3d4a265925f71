import threading
import time

import pytest

from quillchunk.threadpool import ThreadPool


def test_single_task():
    with ThreadPool(2) as pool:
        future = pool.submit(lambda: 42)
        assert future.result() == 42


def test_multiple_tasks():
    with ThreadPool(4) as pool:
        futures = [pool.submit(lambda i=i: i * i) for i in range(10)]
        assert [f.result() for f in futures] == [i * i for i in range(10)]


def test_concurrent_execution():
    done = []
    lock = threading.Lock()

    def work(index):
        time.sleep(0.05)
        with lock:
            done.append(index)
        return index * 10

    with ThreadPool(4) as pool:
        start = time.perf_counter()
        futures = [pool.submit(work, i) for i in range(8)]
        results = [future.result() for future in futures]
        elapsed = time.perf_counter() - start
    assert results == [i * 10 for i in range(8)]
    assert sorted(done) == list(range(8))
    assert elapsed < 0.3


def test_wait_all():
    done = []
    lock = threading.Lock()

    def work():
        time.sleep(0.01)
        with lock:
            done.append(1)

    with ThreadPool(2) as pool:
        for _ in range(5):
            pool.submit(work)
        pool.wait_all()
        assert len(done) == 5
        assert pool.active_threads() == 0


def test_queue_size():
    release = threading.Event()
    with ThreadPool(1) as pool:
        pool.submit(release.wait)
        for _ in range(5):
            pool.submit(lambda: None)
        assert pool.queue_size() > 0
        assert pool.active_threads() >= 5
        release.set()
        pool.wait_all()
        assert pool.queue_size() == 0


def test_exception_handling():
    def boom():
        raise RuntimeError("Test exception")

    with ThreadPool(2) as pool:
        future = pool.submit(boom)
        with pytest.raises(RuntimeError, match="Test exception"):
            future.result()


def test_different_return_types():
    with ThreadPool(2) as pool:
        int_future = pool.submit(lambda: 42)
        str_future = pool.submit(lambda: "hello")
        none_future = pool.submit(lambda: None)
        assert int_future.result() == 42
        assert str_future.result() == "hello"
        assert none_future.result() is None


def test_arguments_are_passed():
    with ThreadPool(1) as pool:
        future = pool.submit(lambda a, b=0: a - b, 10, b=3)
        assert future.result() == 7


def test_submit_after_shutdown_raises():
    pool = ThreadPool(1)
    pool.shutdown()
    with pytest.raises(RuntimeError, match="stopped"):
        pool.submit(lambda: 1)


def test_shutdown_drains_queue():
    results = []
    pool = ThreadPool(1)
    futures = [pool.submit(results.append, i) for i in range(4)]
    pool.shutdown()
    assert all(f.done() for f in futures)
    assert results == list(range(4))


def test_negative_thread_count_rejected():
    with pytest.raises(ValueError):
        ThreadPool(-1)
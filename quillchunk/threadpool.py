"""A fixed-size pool of worker threads that runs submitted callables."""

from __future__ import annotations

import threading
from collections import deque
from concurrent.futures import Future
from typing import Any, Callable


class ThreadPool:
    """Run callables on a fixed set of worker threads, returning futures."""

    def __init__(self, num_threads: int) -> None:
        if num_threads < 0:
            raise ValueError("num_threads must not be negative")
        self._tasks: deque[tuple[Future, Callable[..., Any], tuple, dict]] = deque()
        self._lock = threading.Lock()
        self._available = threading.Condition(self._lock)
        self._finished = threading.Condition(self._lock)
        self._stop = False
        self._active = 0
        self._workers = [
            threading.Thread(target=self._work, daemon=True) for _ in range(num_threads)
        ]
        for worker in self._workers:
            worker.start()

    def _work(self) -> None:
        while True:
            with self._available:
                self._available.wait_for(lambda: self._stop or bool(self._tasks))
                if self._stop and not self._tasks:
                    return
                future, fn, args, kwargs = self._tasks.popleft()
            if future.set_running_or_notify_cancel():
                try:
                    result = fn(*args, **kwargs)
                except BaseException as exc:  # delivered through the future
                    future.set_exception(exc)
                else:
                    future.set_result(result)
            with self._lock:
                self._active -= 1
                self._finished.notify_all()

    def submit(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        """Queue ``fn(*args, **kwargs)`` and return a future for its result."""
        future: Future = Future()
        with self._lock:
            if self._stop:
                raise RuntimeError("enqueue on stopped ThreadPool")
            self._active += 1
            self._tasks.append((future, fn, args, kwargs))
            self._available.notify()
        return future

    def wait_all(self) -> None:
        """Block until the queue is empty and no task is running."""
        with self._finished:
            self._finished.wait_for(lambda: not self._tasks and self._active == 0)

    def queue_size(self) -> int:
        """Number of tasks waiting to be picked up by a worker."""
        with self._lock:
            return len(self._tasks)

    def active_threads(self) -> int:
        """Number of submitted tasks that have not yet finished."""
        with self._lock:
            return self._active

    def shutdown(self) -> None:
        """Stop accepting work, let queued tasks finish and join the workers."""
        with self._lock:
            self._stop = True
            self._available.notify_all()
        current = threading.current_thread()
        for worker in self._workers:
            if worker is not current:
                worker.join()

    def __enter__(self) -> "ThreadPool":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()
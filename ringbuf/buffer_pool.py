import logging
from contextlib import contextmanager
from typing import Optional

from gevent.lock import BoundedSemaphore
from gevent.queue import SimpleQueue

from ringbuf.buffer import RingBuffer


class BufferPool:
    def __init__(self, capacity: int, pool_size: int, delimiter: Optional[int] = None):
        if pool_size < 0:
            raise ValueError(f"Invalid pool size: {pool_size}")
        self._logger = logging.getLogger(f"{self.__class__.__name__}-{hex(id(self))}")
        self._capacity = capacity
        self._delimiter = delimiter
        self._pool_size = pool_size
        self._lock = BoundedSemaphore()
        self._free_buffers = SimpleQueue()
        for _ in range(pool_size):
            self._free_buffers.put(RingBuffer(capacity, delimiter))
        self._overcommit = 0

    @property
    def available(self) -> int:
        return self._free_buffers.qsize()

    @property
    def overcommit(self) -> int:
        return self._overcommit

    @contextmanager
    def acquire(self):
        pooled, buffer = self._acquire()
        try:
            yield buffer
        finally:
            self._release(pooled, buffer)

    def _acquire(self) -> tuple[bool, RingBuffer]:
        with self._lock:
            if self._free_buffers.empty():
                self._overcommit += 1
                self._logger.warning(f"overcommit: {self._overcommit}")
                return False, RingBuffer(self._capacity, self._delimiter)
            return True, self._free_buffers.get()

    def _release(self, pooled: bool, buffer: RingBuffer) -> None:
        with self._lock:
            if not pooled:
                self._overcommit -= 1
                self._logger.debug(f"overcommit: {self._overcommit}")
            else:
                buffer.flush()
                self._free_buffers.put(buffer)

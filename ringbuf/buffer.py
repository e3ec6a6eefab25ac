"""
Fixed-capacity byte ring buffer.

Every slot of the storage is usable: cursors run modulo 2 * capacity
(see ringbuf.cursor), so a full buffer is told apart from an empty one
without a spare slot.

Full, empty and short transfers are not errors; they are reported by the
returned element count (0 = nothing moved, < requested = partial).

With a delimiter configured, the buffer keeps a running count of buffered
bytes equal to it. Every path that adds or removes bytes updates the count,
which is why discard() on a counting buffer walks the discarded bytes
instead of jumping the read cursor.

Not safe for concurrent use. Callers sharing a buffer between greenlets,
threads or signal handlers must serialize access themselves.
"""

from enum import Enum
from typing import Optional

from ringbuf import cursor
from ringbuf.counter import DelimiterCounter
from ringbuf.cursor import Cursors


class PutMode(Enum):
    BEST_EFFORT = "best_effort"
    ALL_OR_NOTHING = "all_or_nothing"


class RingBuffer:
    _capacity: int
    _data: bytearray
    _buffer: memoryview
    _cursors: Cursors
    _counter: Optional[DelimiterCounter]

    def __init__(self, capacity: int, delimiter: Optional[int] = None):
        if not (0 < capacity <= cursor.limit()):
            raise ValueError(f"Invalid capacity: {capacity}, valid: 0 < capacity <= {cursor.limit()}")
        self._capacity = capacity
        self._data = bytearray(capacity)
        self._buffer = memoryview(self._data)
        self._cursors = Cursors(capacity)
        self._counter = None if delimiter is None else DelimiterCounter(delimiter)

    def __repr__(self) -> str:
        msg = f"RingBuffer(capacity={self._capacity}, read={self._cursors.read}, write={self._cursors.write}, size={self.size()}"
        if self._counter is not None:
            msg += f", delimiter={self._counter.delimiter:#04x}, count={self._counter.count}"
        return msg + ")"

    def __len__(self) -> int:
        return self._cursors.size()

    @staticmethod
    def limit() -> int:
        return cursor.limit()

    @property
    def delimiter(self) -> Optional[int]:
        if self._counter is None:
            return None
        return self._counter.delimiter

    # --- producer side ---

    def put(self, element: int) -> int:
        if self._cursors.is_full():
            return 0
        self._buffer[self._cursors.write_index()] = element
        if self._counter is not None:
            self._counter.added(element)
        self._cursors.advance_write(1)
        return 1

    def put_bulk(self, data, mode: PutMode = PutMode.BEST_EFFORT) -> int:
        if data is None:
            return 0
        if not isinstance(data, (bytes, bytearray)):
            try:
                data = memoryview(data).tobytes()
            except TypeError:
                # not a buffer; accept an iterable of byte values, reject the rest
                try:
                    data = bytes(iter(data))
                except TypeError:
                    return 0

        n = len(data)
        free_size = self._cursors.free()
        if n > free_size:
            if mode is PutMode.ALL_OR_NOTHING:
                return 0
            n = free_size
        if n == 0:
            return 0

        # at most two runs: up to the end of storage, then from its start
        head = self._cursors.write_index()
        first = min(n, self._capacity - head)
        self._buffer[head : head + first] = data[:first]
        self._buffer[: n - first] = data[first:n]

        if self._counter is not None:
            self._counter.added_from(data[:n])
        self._cursors.advance_write(n)
        return n

    # --- consumer side ---

    def peek(self, out) -> int:
        if out is None or len(out) == 0 or self._cursors.is_empty():
            return 0
        out[0] = self._buffer[self._cursors.read_index()]
        return 1

    def get(self, out) -> int:
        if out is None or len(out) == 0 or self._cursors.is_empty():
            return 0
        element = self._buffer[self._cursors.read_index()]
        out[0] = element
        if self._counter is not None:
            self._counter.removed(element)
        self._cursors.advance_read(1)
        return 1

    def get_bulk(self, out, n: Optional[int] = None) -> int:
        if out is None:
            return 0
        if n is None:
            n = len(out)
        elif n < 0:
            raise ValueError(f"Invalid read size: {n}")
        n = min(n, len(out), self._cursors.size())
        if n == 0:
            return 0

        tail = self._cursors.read_index()
        first = min(n, self._capacity - tail)
        out[:first] = self._buffer[tail : tail + first]
        out[first:n] = self._buffer[: n - first]

        if self._counter is not None:
            self._counter.removed_from(self._buffer[tail : tail + first])
            self._counter.removed_from(self._buffer[: n - first])
        self._cursors.advance_read(n)
        return n

    def read(self, n: int = -1) -> bytes:
        size = self._cursors.size()
        if n < 0 or n > size:
            n = size
        out = bytearray(n)
        self.get_bulk(out)
        return bytes(out)

    def discard(self, n: int) -> int:
        if n < 0:
            raise ValueError(f"Invalid discard size: {n}")
        size = self._cursors.size()
        if n >= size:
            self.flush()
            return size

        if self._counter is None:
            self._cursors.advance_read(n)
        else:
            # every discarded byte has to pass the counter
            for _ in range(n):
                self._counter.removed(self._buffer[self._cursors.read_index()])
                self._cursors.advance_read(1)
        return n

    def flush(self) -> None:
        self._cursors.reset()
        if self._counter is not None:
            self._counter.reset()

    def find(self, element: int) -> int:
        """Logical offset of the first buffered `element`, or -1."""
        size = self._cursors.size()
        tail = self._cursors.read_index()
        first = min(size, self._capacity - tail)
        pos = self._data.find(element, tail, tail + first)
        if pos >= 0:
            return pos - tail
        pos = self._data.find(element, 0, size - first)
        if pos >= 0:
            return first + pos
        return -1

    # --- state ---

    def size(self) -> int:
        return self._cursors.size()

    def free(self) -> int:
        return self._cursors.free()

    def capacity(self) -> int:
        return self._capacity

    def is_full(self) -> bool:
        return self._cursors.is_full()

    def is_empty(self) -> bool:
        return self._cursors.is_empty()

    def count(self) -> int:
        if self._counter is None:
            raise ValueError("Buffer has no delimiter to count")
        return self._counter.count

    # --- copy / assignment ---

    def assign(self, other: "RingBuffer") -> None:
        """Replace this buffer's content and cursors with a copy of `other`'s."""
        if other is self:
            return
        if other._capacity != self._capacity:
            raise ValueError(f"Capacity mismatch: {self._capacity} != {other._capacity}")
        if other.delimiter != self.delimiter:
            raise ValueError(f"Delimiter mismatch: {self.delimiter} != {other.delimiter}")

        # only the live range is copied
        size = other.size()
        tail = other._cursors.read_index()
        first = min(size, self._capacity - tail)
        self._buffer[tail : tail + first] = other._buffer[tail : tail + first]
        self._buffer[: size - first] = other._buffer[: size - first]

        self._cursors = Cursors(self._capacity, other._cursors.read, other._cursors.write)
        self._counter = None if other._counter is None else other._counter.copy()

    def copy(self) -> "RingBuffer":
        clone = RingBuffer(self._capacity, self.delimiter)
        clone.assign(self)
        return clone

    def __copy__(self) -> "RingBuffer":
        return self.copy()

    def __deepcopy__(self, memo) -> "RingBuffer":
        return self.copy()

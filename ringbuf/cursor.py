"""
Cursor arithmetic for a ring of `capacity` slots.

Read and write cursors live in [0, 2 * capacity). Indexing uses the cursor
modulo capacity, occupancy uses the cursor difference modulo 2 * capacity,
so a full ring (cursors exactly `capacity` apart) and an empty ring
(cursors equal) never collide and every slot is usable.

parameter
    capacity: number of usable slots
    read: read cursor
    write: write cursor
function
    limit(): largest capacity representable on the native word
    physical(): cursor -> slot index
    occupied(): cursor pair -> element count
    advance(): move a cursor forward without word overflow
"""

import struct

WORD_BITS = struct.calcsize("P") * 8
MAX_UNSIGNED = (1 << WORD_BITS) - 1


def limit(word_bits: int = WORD_BITS) -> int:
    # 2 * capacity must still fit the word
    return ((1 << word_bits) - 1) // 2


def physical(cursor: int, capacity: int) -> int:
    return cursor % capacity


def occupied(write: int, read: int, capacity: int) -> int:
    return (write - read) % (capacity << 1)


def advance(cursor: int, n: int, capacity: int) -> int:
    """Return `(cursor + n) mod 2*capacity` without ever forming `cursor + n` past the span."""
    if n < 0:
        raise ValueError(f"Invalid advance: {n}")
    span = capacity << 1
    if n >= span:
        n %= span
    diff_to_max = span - cursor
    if diff_to_max <= n:
        return n - diff_to_max
    return cursor + n


class Cursors:
    _capacity: int
    _read: int
    _write: int

    def __init__(self, capacity: int, read: int = 0, write: int = 0):
        if capacity <= 0:
            raise ValueError(f"Invalid capacity: {capacity}")
        span = capacity << 1
        if not (0 <= read < span and 0 <= write < span):
            raise ValueError(f"Invalid cursors: read={read}, write={write}, span={span}")
        if occupied(write, read, capacity) > capacity:
            raise ValueError(f"Cursors too far apart: read={read}, write={write}")
        self._capacity = capacity
        self._read = read
        self._write = write

    def __repr__(self) -> str:
        return f"Cursors(capacity={self._capacity}, read={self._read}, write={self._write})"

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def read(self) -> int:
        return self._read

    @property
    def write(self) -> int:
        return self._write

    def read_index(self) -> int:
        return physical(self._read, self._capacity)

    def write_index(self) -> int:
        return physical(self._write, self._capacity)

    def size(self) -> int:
        return occupied(self._write, self._read, self._capacity)

    def free(self) -> int:
        return self._capacity - self.size()

    def is_empty(self) -> bool:
        return self._read == self._write

    def is_full(self) -> bool:
        return self.size() == self._capacity

    def advance_read(self, n: int = 1) -> None:
        if not (0 <= n <= self.size()):
            raise ValueError(f"Invalid read advance: {n}, readable: {self.size()}")
        self._read = advance(self._read, n, self._capacity)

    def advance_write(self, n: int = 1) -> None:
        if not (0 <= n <= self.free()):
            raise ValueError(f"Invalid write advance: {n}, writable: {self.free()}")
        self._write = advance(self._write, n, self._capacity)

    def reset(self) -> None:
        # fast-forward, never rewind
        self._read = self._write

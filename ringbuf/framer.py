import logging
from typing import Iterator, Optional

from ringbuf.buffer import PutMode, RingBuffer


class MessageFramer:
    """
    Splits the bytes of a counting RingBuffer into delimiter-terminated messages.

    The buffer's delimiter count tells whether a complete message is
    present, so nothing is scanned until one is.
    """

    def __init__(self, buffer: RingBuffer):
        if buffer.delimiter is None:
            raise ValueError("MessageFramer requires a buffer with a delimiter")
        self._logger = logging.getLogger(f"{self.__class__.__name__}-{hex(id(self))}")
        self._buffer = buffer
        self._delimiter = buffer.delimiter
        self._dropped = 0
        self._resync = False

    @property
    def buffer(self) -> RingBuffer:
        return self._buffer

    @property
    def dropped(self) -> int:
        return self._dropped

    @property
    def resyncing(self) -> bool:
        return self._resync

    def feed(self, data) -> int:
        """
        Append as much of `data` as fits.

        Returns the number of bytes consumed from `data`: written to the
        buffer or, while resynchronising, dropped as the tail of a message
        that did not fit.
        """
        if data is None:
            return 0
        skipped = 0
        if self._resync:
            pos = bytes(data).find(self._delimiter)
            if pos < 0:
                self._dropped += len(data)
                return len(data)
            skipped = pos + 1
            self._dropped += skipped
            self._resync = False
            self._logger.debug(f"resynchronised, skipped {skipped} bytes")
            data = data[skipped:]

        written = self._buffer.put_bulk(data, PutMode.BEST_EFFORT)
        if self._buffer.is_full() and not self.has_message():
            # an unterminated message filled the buffer and can never complete
            dropped = self._buffer.discard(self._buffer.size())
            self._dropped += dropped
            self._resync = True
            self._logger.warning(f"no delimiter in full buffer, dropped {dropped} bytes")
        return skipped + written

    def reset(self) -> None:
        self._buffer.flush()
        self._resync = False

    def has_message(self) -> bool:
        return self._buffer.count() > 0

    def next_message(self, keep_delimiter: bool = False) -> Optional[bytes]:
        if not self.has_message():
            return None
        length = self._buffer.find(self._delimiter) + 1
        out = bytearray(length)
        self._buffer.get_bulk(out)
        if not keep_delimiter:
            del out[-1]
        return bytes(out)

    def messages(self, keep_delimiter: bool = False) -> Iterator[bytes]:
        while (message := self.next_message(keep_delimiter)) is not None:
            yield message

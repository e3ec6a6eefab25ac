import logging
from typing import Callable

from gevent import socket
from gevent.socket import wait_read

from ringbuf.buffer import RingBuffer
from ringbuf.framer import MessageFramer

DEFAULT_CHUNK_SIZE = 1 << 12


class Session:
    """
    Receives a byte stream from one peer and hands each complete
    delimiter-terminated message to `handler`.

    The session greenlet is the only user of its buffer.
    """

    def __init__(
        self,
        sock: socket.socket,
        addr: tuple,
        buffer: RingBuffer,
        handler: Callable[[bytes], None],
        timeout: float,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self._logger = logging.getLogger(f"{self.__class__.__name__}-{hex(id(self))}")

        self._sock = sock
        self._addr = addr
        self._framer = MessageFramer(buffer)
        self._handler = handler
        self._timeout = timeout
        self._chunk = memoryview(bytearray(chunk_size))

        self._name = f"[{addr[0]}]:{addr[1]:<5}" if len(addr) >= 2 else str(addr)
        self._received = 0
        self._messages = 0

    @property
    def received(self) -> int:
        return self._received

    @property
    def dropped(self) -> int:
        return self._framer.dropped

    def run(self) -> int:
        self._log(logging.INFO, "Session started", self._name)
        try:
            self._receive()
        except (TimeoutError, socket.timeout):
            self._log(logging.INFO, "Session timed out", self._name)
        except Exception as e:
            self._log(logging.ERROR, f"Session error: {e}", self._name)
        finally:
            if leftover := self._framer.buffer.size():
                self._log(logging.DEBUG, f"Discarding {leftover} unterminated bytes", self._name)
            self._framer.reset()
        self._log(
            logging.INFO,
            "Session finished",
            f"{self._name} received={self._received} messages={self._messages} dropped={self.dropped}",
        )
        return self._messages

    def _receive(self) -> None:
        fd = self._sock.fileno()
        _recv = self._sock.recv_into
        _wait_read = wait_read
        chunk = self._chunk
        framer = self._framer

        while True:
            _wait_read(fd, self._timeout)
            if not (length := _recv(chunk)):
                break
            self._received += length

            pos = 0
            while pos < length:
                pos += framer.feed(chunk[pos:length])
                self._dispatch()

    def _dispatch(self) -> None:
        for message in self._framer.messages():
            self._messages += 1
            self._log(logging.DEBUG, f"Message of {len(message)} bytes", self._name)
            self._handler(message)

    def _log(self, level: int, subject: str, msg: str = "") -> None:
        output = f"{subject:60} |"
        if msg:
            output += f" {msg:100} |"
        self._logger.log(level, output)

from gevent import monkey

monkey.patch_all()

import logging
import os

from gevent import socket

from ringbuf.buffer_pool import BufferPool
from ringbuf.server import Server
from ringbuf.session import Session

LOG_LEVEL = logging.INFO
LOG_FORMAT = "%(name)-30s | %(levelname)-10s | %(message)s"

PORT = 8082
TIMEOUT = 600

BUFFER_SIZE = 1 << 12
POOL_SIZE = 100
CHUNK_SIZE = 1 << 10

# zero-delimited messages
DELIMITER = 0x00

logger = logging.getLogger("main")


def on_message(message: bytes) -> None:
    logger.info(f"{len(message):>6} bytes | {message[:64].hex(' ')}")


def main() -> None:
    buffer_pool = BufferPool(BUFFER_SIZE, POOL_SIZE, DELIMITER)

    def handler(client_sock: socket.socket, client_addr: tuple) -> None:
        with client_sock:
            with buffer_pool.acquire() as buffer:
                Session(client_sock, client_addr, buffer, on_message, TIMEOUT, CHUNK_SIZE).run()

    Server(PORT, handler).serve_forever()


if __name__ == "__main__":
    if os.getenv("DEBUG"):
        LOG_LEVEL = logging.DEBUG
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
    main()

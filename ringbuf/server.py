import logging
from typing import Callable

from gevent import socket
from gevent.server import StreamServer

BACKLOG = 10


class Server:
    def __init__(self, port: int, handler: Callable[[socket.socket, tuple], None], host: str = "") -> None:
        self._logger = logging.getLogger(f"{self.__class__.__name__}-{hex(id(self))}")
        self._port = port

        listener = socket.socket(socket.AF_INET6, socket.SOCK_STREAM)
        listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        listener.setsockopt(socket.IPPROTO_IPV6, socket.IPV6_V6ONLY, 0)
        listener.bind((host, self._port))
        listener.listen(BACKLOG)

        self._server = StreamServer(listener, handler)

    @property
    def port(self) -> int:
        return self._server.server_port

    def start(self) -> None:
        self._server.start()
        self._logger.info(f"Listening on port {self.port}")

    def serve_forever(self) -> None:
        self._logger.info(f"Listening on port {self.port}")
        self._server.serve_forever()

    def stop(self) -> None:
        self._server.stop()

# Copyright 2015, Aiven, https://aiven.io/
#
# This file is under the Apache License, Version 2.0.
# See the file `LICENSE` for details.
from .types import DestinationResolutionError
from typing import Any, Optional, Tuple

import logging
import socket

Address = Tuple[Any, ...]


class UdpTransport:
    def __init__(self, *, ipv6: bool = False, log: Optional[logging.Logger] = None) -> None:
        self.log = log or logging.getLogger("UdpTransport")
        self._family = socket.AF_INET6 if ipv6 else socket.AF_INET
        self._socket: Optional[socket.socket] = socket.socket(self._family, socket.SOCK_DGRAM)

    @property
    def receive_buffer_size(self) -> Optional[int]:
        if self._socket is None:
            return None
        try:
            return self._socket.getsockopt(socket.SOL_SOCKET, socket.SO_RCVBUF)
        except OSError as ex:
            self.log.debug("Could not read SO_RCVBUF: %r", ex)
            return None

    def resolve(self, host: str, port: int) -> Address:
        try:
            return socket.getaddrinfo(host, port, self._family, socket.SOCK_DGRAM)[0][4]
        except (socket.gaierror, IndexError, UnicodeError) as ex:
            raise DestinationResolutionError("Cannot resolve {}:{}: {}".format(host, port, ex)) from ex

    def send(self, data: bytes, address: Address) -> bool:
        if self._socket is None:
            self.log.warning("Transport already closed, not sending %d bytes", len(data))
            return False
        try:
            self._socket.sendto(data, address)
        except OSError as ex:
            self.log.warning("Failed to send %d bytes to %r: %s: %s", len(data), address, ex.__class__.__name__, ex)
            return False
        return True

    def close(self) -> None:
        if self._socket is not None:
            self._socket.close()
            self._socket = None

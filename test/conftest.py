from statsbatch.types import DestinationResolutionError
from typing import List, Optional, Tuple

import pytest
import socket


class StatsdReceiver:
    """Loopback UDP socket standing in for a StatsD server"""

    def __init__(self):
        self._socket = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self._socket.bind(("127.0.0.1", 0))
        self._socket.settimeout(0.5)
        self.host, self.port = self._socket.getsockname()

    def receive(self, count: int) -> List[bytes]:
        datagrams = []
        while len(datagrams) < count:
            datagrams.append(self._socket.recv(65535))
        return datagrams

    def assert_nothing_received(self):
        self._socket.settimeout(0.1)
        try:
            with pytest.raises(socket.timeout):
                self._socket.recv(65535)
        finally:
            self._socket.settimeout(0.5)

    def close(self):
        self._socket.close()


class FakeTransport:
    """In-memory transport recording every datagram"""

    instances: List["FakeTransport"] = []

    def __init__(self, *, ipv6=False, log=None, receive_buffer_size: Optional[int] = 64, fail_sends=(), resolvable=True):
        self.ipv6 = ipv6
        self.log = log
        self.receive_buffer_size = receive_buffer_size
        self.fail_sends = set(fail_sends)
        self.resolvable = resolvable
        self.sent: List[Tuple[bytes, tuple]] = []
        self.send_attempts = 0
        self.close_count = 0
        FakeTransport.instances.append(self)

    def resolve(self, host, port):
        if not self.resolvable:
            raise DestinationResolutionError("Cannot resolve {}:{}".format(host, port))
        return (host, port)

    def send(self, data, address):
        attempt = self.send_attempts
        self.send_attempts += 1
        if attempt in self.fail_sends:
            return False
        self.sent.append((data, address))
        return True

    def close(self):
        self.close_count += 1


@pytest.fixture(name="statsd_receiver")
def fixture_statsd_receiver():
    receiver = StatsdReceiver()
    yield receiver
    receiver.close()


@pytest.fixture(name="fake_transport")
def fixture_fake_transport():
    FakeTransport.instances = []
    yield FakeTransport
    FakeTransport.instances = []

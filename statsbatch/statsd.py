# Copyright 2015, Aiven, https://aiven.io/
#
# This file is under the Apache License, Version 2.0.
# See the file `LICENSE` for details.
"""
StatsD client

Metrics are buffered for the lifetime of a session and sent on close(),
packed into as few datagrams as the capacity allows:

  with StatsClient(host="statsd.local") as stats:
      stats.increase("user.logins")
      stats.timing("request.duration", 12)

"""
from .collector import BatchCollector
from .formatter import format_record
from .transport import UdpTransport
from .types import ConfigError, ConnectResult, DestinationResolutionError, FlushResult, StatType
from typing import Any, Callable, Mapping, Optional, SupportsFloat, Union

import logging

UNRESOLVED_HOST_POLICIES = ("drop", "raise")


class StatsClient:
    def __init__(
        self,
        host: Optional[str] = "127.0.0.1",
        port: int = 8125,
        *,
        capacity: Optional[int] = None,
        unresolved_host: str = "drop",
        ipv6: bool = False,
        transport_factory: Callable[..., Any] = UdpTransport,
        log: Optional[logging.Logger] = None
    ) -> None:
        if unresolved_host not in UNRESOLVED_HOST_POLICIES:
            raise ValueError("unresolved_host must be one of {}, not {!r}".format(UNRESOLVED_HOST_POLICIES, unresolved_host))
        self.log = log or logging.getLogger("StatsClient")
        self._host = host
        self._port = port
        self._capacity = capacity
        self._unresolved_host = unresolved_host
        self._ipv6 = ipv6
        self._transport_factory = transport_factory
        self._transport = None
        self._collector: Optional[BatchCollector] = None

    @classmethod
    def from_config(cls, config: Mapping[str, Any], **kwargs) -> "StatsClient":
        stats = config.get("statsd") or {}
        unresolved_host = stats.get("unresolved_host", "drop")
        if unresolved_host not in UNRESOLVED_HOST_POLICIES:
            raise ConfigError("statsd.unresolved_host must be one of {}, not {!r}".format(UNRESOLVED_HOST_POLICIES, unresolved_host))
        try:
            port = int(stats.get("port", 8125))
        except (TypeError, ValueError) as ex:
            raise ConfigError("Invalid statsd.port {!r}".format(stats.get("port"))) from ex
        capacity = stats.get("capacity")
        if capacity is not None:
            try:
                capacity = int(capacity)
            except (TypeError, ValueError) as ex:
                raise ConfigError("Invalid statsd.capacity {!r}".format(capacity)) from ex
        ipv6 = stats.get("ipv6", False)
        if not isinstance(ipv6, bool):
            raise ConfigError("statsd.ipv6 must be true or false, not {!r}".format(ipv6))
        return cls(
            host=stats.get("host", "127.0.0.1"),
            port=port,
            capacity=capacity,
            unresolved_host=unresolved_host,
            ipv6=ipv6,
            **kwargs
        )

    @property
    def connected(self) -> bool:
        return self._transport is not None

    def __enter__(self) -> "StatsClient":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def connect(self) -> ConnectResult:
        if self._transport is not None:
            self.log.warning("Already connected to %s:%s", self._host, self._port)
            return ConnectResult.ALREADY_CONNECTED

        transport = self._transport_factory(ipv6=self._ipv6, log=self.log)
        try:
            capacity = self._capacity if self._capacity is not None else transport.receive_buffer_size
            self._collector = BatchCollector(capacity, log=self.log)
        except Exception:
            transport.close()
            raise
        self._transport = transport
        self.log.debug("Connected, destination %s:%s, capacity %d", self._host, self._port, self._collector.capacity)
        return ConnectResult.CONNECTED

    def send(self, name: str, value: Any, stat_type: Union[StatType, str]) -> None:
        if self._host is None:
            # stats sending is disabled
            return
        if self._collector is None:
            self.log.warning("Not connected, dropping metric %r", name)
            return
        self._collector.add(format_record(name, value, stat_type))

    def gauge(self, metric: str, value: SupportsFloat) -> None:
        self.send(metric, value, StatType.GAUGE)

    def increase(self, metric: str, inc_value: SupportsFloat = 1) -> None:
        self.send(metric, inc_value, StatType.COUNTER)

    def timing(self, metric: str, value: SupportsFloat) -> None:
        self.send(metric, value, StatType.TIMER)

    def unexpected_exception(self, ex: BaseException, where: str) -> None:
        self.increase("exception.{}.{}".format(where, ex.__class__.__name__))

    def close(self) -> FlushResult:
        if self._transport is None or self._collector is None:
            return FlushResult()

        transport, collector = self._transport, self._collector
        self._transport = None
        self._collector = None
        try:
            return self._flush(transport, collector)
        finally:
            transport.close()
            collector.reset()

    def _flush(self, transport, collector: BatchCollector) -> FlushResult:
        datagrams = collector.flush_all()
        if not datagrams:
            return FlushResult()

        try:
            address = transport.resolve(self._host, self._port)
        except DestinationResolutionError as ex:
            if self._unresolved_host == "raise":
                raise
            self.log.warning("Dropping %d datagrams: %s", len(datagrams), ex)
            return FlushResult(dropped=len(datagrams))

        sent = failed = 0
        for datagram in datagrams:
            if transport.send(datagram, address):
                sent += 1
            else:
                failed += 1

        if failed:
            self.log.warning("Failed to send %d of %d datagrams to %s:%s", failed, len(datagrams), self._host, self._port)
        self.log.debug("Sent %d metrics in %d datagrams", len(collector), sent)
        return FlushResult(sent=sent, failed=failed)

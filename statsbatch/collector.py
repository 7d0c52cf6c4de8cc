# Copyright 2015, Aiven, https://aiven.io/
#
# This file is under the Apache License, Version 2.0.
# See the file `LICENSE` for details.
"""
Datagram batching

Formatted StatsD lines are packed greedily into groups, each group becoming
one UDP datagram on flush. A group's serialized size (newlines included) is
kept strictly below the collector's capacity.

"""
from typing import List, Optional

import logging

DEFAULT_CAPACITY = 1024
MAX_CAPACITY = 65507  # largest UDP payload over IPv4


def effective_capacity(capacity: Optional[int]) -> int:
    if not isinstance(capacity, int) or isinstance(capacity, bool):
        return DEFAULT_CAPACITY
    if capacity <= 0 or capacity > MAX_CAPACITY:
        return DEFAULT_CAPACITY
    return capacity


class BatchCollector:
    """Not thread safe, callers must serialize add() and flush_all()"""

    def __init__(self, capacity: Optional[int], *, log: Optional[logging.Logger] = None) -> None:
        self.log = log or logging.getLogger("BatchCollector")
        self.capacity = effective_capacity(capacity)
        if self.capacity != capacity:
            self.log.debug("Invalid capacity %r, using %d", capacity, self.capacity)
        self._groups: List[bytearray] = []
        self._record_count = 0
        self.reset()

    def __len__(self) -> int:
        return self._record_count

    @property
    def group_count(self) -> int:
        return len(self._groups)

    @property
    def record_count(self) -> int:
        return self._record_count

    @property
    def open_group_size(self) -> int:
        return len(self._groups[-1])

    def add(self, line: Optional[str]) -> None:
        if not line:
            return

        # unencodable characters, e.g. surrogates from os.fsdecode, become "?"
        data = line.encode("utf-8", errors="replace") + b"\n"
        if self.open_group_size + len(data) >= self.capacity and self.open_group_size > 0:
            self._groups.append(bytearray())

        if len(data) >= self.capacity:
            self.log.warning("Record of %d bytes does not fit in capacity %d, sending it alone", len(data), self.capacity)

        self._groups[-1] += data
        self._record_count += 1

    def flush_all(self) -> List[bytes]:
        # the initial group stays empty in a session without records, it is not sent
        return [bytes(group) for group in self._groups if group]

    def reset(self) -> None:
        self._groups = [bytearray()]
        self._record_count = 0

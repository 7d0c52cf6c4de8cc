# Copyright 2015, Aiven, https://aiven.io/
#
# This file is under the Apache License, Version 2.0.
# See the file `LICENSE` for details.
"""statsbatch internal types"""

from typing import NamedTuple

import enum


class StrEnum(str, enum.Enum):
    def __str__(self):
        return str(self.value)


class StatType(StrEnum):
    """StatsD metric type, valued by its wire suffix"""

    COUNTER = "c"
    GAUGE = "g"
    TIMER = "ms"


class ConnectResult(StrEnum):
    CONNECTED = "connected"
    ALREADY_CONNECTED = "already_connected"

    @property
    def ok(self) -> bool:
        return self is ConnectResult.CONNECTED


class FlushResult(NamedTuple):
    sent: int = 0
    failed: int = 0
    dropped: int = 0

    @property
    def ok(self) -> bool:
        return not self.failed and not self.dropped


class StatsError(Exception):
    """statsbatch error"""


class DestinationResolutionError(StatsError):
    """StatsD destination host could not be resolved"""


class ConfigError(StatsError):
    """Invalid or missing configuration"""

# Copyright 2015, Aiven, https://aiven.io/
#
# This file is under the Apache License, Version 2.0.
# See the file `LICENSE` for details.
from .statsd import StatsClient
from .types import ConnectResult, FlushResult, StatType

__version__ = "1.0.0"

__all__ = ["ConnectResult", "FlushResult", "StatsClient", "StatType", "__version__"]

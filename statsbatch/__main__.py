# Copyright 2015, Aiven, https://aiven.io/
#
# This file is under the Apache License, Version 2.0.
# See the file `LICENSE` for details.
"""
statsbatch command line

  statsbatch CONFIG METRIC [METRIC ...]

Each METRIC is given in StatsD wire format, e.g. "deploy.count:1|c".

"""
from .statsd import StatsClient
from .types import ConfigError, StatsError, StatType
from .util import load_config
from typing import List, Tuple

import logging
import sys

LOG_FORMAT = "%(asctime)s\t%(name)s\t%(levelname)s\t%(message)s"


def parse_metric(arg: str) -> Tuple[str, str, StatType]:
    name_value, sep, stat_type = arg.rpartition("|")
    name, sep2, value = name_value.rpartition(":")
    if not sep or not sep2 or not name or not value:
        raise ValueError("Metric {!r} is not in 'name:value|type' format".format(arg))
    try:
        return name, value, StatType(stat_type)
    except ValueError as ex:
        raise ValueError("Unknown metric type {!r} in {!r}".format(stat_type, arg)) from ex


def main(args: List[str]) -> int:
    if len(args) < 2:
        print("usage: statsbatch CONFIG METRIC [METRIC ...]")
        return 1

    log = logging.getLogger("statsbatch")
    try:
        config = load_config(args[0])
        logging.basicConfig(level=config.get("log_level", logging.INFO), format=LOG_FORMAT)
        metrics = [parse_metric(arg) for arg in args[1:]]
        stats = StatsClient.from_config(config)
    except (ConfigError, ValueError) as ex:
        logging.basicConfig(format=LOG_FORMAT)
        log.error("%s", ex)
        return 1

    try:
        with stats:
            for name, value, stat_type in metrics:
                stats.send(name, value, stat_type)
            result = stats.close()
    except (OSError, StatsError) as ex:
        log.error("Sending metrics failed: %s: %s", ex.__class__.__name__, ex)
        return 1

    log.info("Sent %d metrics in %d datagrams", len(metrics), result.sent)
    return 0 if result.ok else 1


def run_exit() -> None:
    sys.exit(main(sys.argv[1:]))


if __name__ == "__main__":
    run_exit()

# Copyright 2015, Aiven, https://aiven.io/
#
# This file is under the Apache License, Version 2.0.
# See the file `LICENSE` for details.
from .types import StatType
from typing import Union

import re

WHITESPACE_RE = re.compile(r"\s+")


def sanitize_name(name: str) -> str:
    """StatsD metric names can't contain whitespace"""
    return WHITESPACE_RE.sub("-", name)


def format_record(name: str, value: object, stat_type: Union[StatType, str]) -> str:
    # format: "user.logins:1|c"
    # value is passed through verbatim, the collector decides what it means
    stat_type = StatType(stat_type)
    return "{}:{}|{}".format(sanitize_name(name), value, stat_type.value)

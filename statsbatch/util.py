# Copyright 2019, Aiven, https://aiven.io/
#
# This file is under the Apache License, Version 2.0.
# See the file `LICENSE` for details.
from .types import ConfigError
from typing import Any, Dict

import json


def load_config(config_path: str) -> Dict[str, Any]:
    try:
        with open(config_path) as fp:
            config = json.load(fp)
    except FileNotFoundError as ex:
        raise ConfigError("Cannot start without json config file at {!r}".format(config_path)) from ex
    except ValueError as ex:
        raise ConfigError("Invalid json in config file {!r}: {}".format(config_path, ex)) from ex

    if not isinstance(config, dict):
        raise ConfigError("Config file {!r} must contain a json object".format(config_path))
    return config

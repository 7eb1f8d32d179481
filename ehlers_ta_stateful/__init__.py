# -*- coding: utf-8 -*-
import logging
from importlib.metadata import PackageNotFoundError, version as _dist_version

try:
    version = _dist_version("ehlers_ta_stateful")
except PackageNotFoundError:
    version = "0.0.0"

from ehlers_ta_stateful.stateful import *
from ehlers_ta_stateful.stateful import __all__ as stateful_all

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = ["version"] + stateful_all

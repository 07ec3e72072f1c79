# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from .logger import LogFormat, Logger, SchedulerLogger
from .utils import DottableDict, convert_dottable

__all__ = [
    "Logger",
    "LogFormat",
    "SchedulerLogger",
    "convert_dottable",
    "DottableDict",
]

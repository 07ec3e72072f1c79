# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

# isort: skip_file

from .__misc__ import __version__

from mipsched.scheduler import VmScheduler, build_scheduler

__all__ = ["__version__", "VmScheduler", "build_scheduler"]

# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from enum import IntEnum


class PeStatus(IntEnum):
    """PE status, a failed PE provides no capacity."""
    FREE = 0
    BUSY = 1
    FAILED = 2

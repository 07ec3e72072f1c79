# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.


from .base_exception import MipschedException
from .error_code import ERROR_CODE


class TopologyNotFoundError(MipschedException):
    """Exception when the topology is neither an existing folder nor a built-in topology."""

    def __init__(self, msg: str = None):
        super().__init__(2000, msg or ERROR_CODE[2000])


class InvalidTopologyError(MipschedException):
    """Exception when the topology configuration cannot describe a PE list."""

    def __init__(self, msg: str = None):
        super().__init__(2001, msg or ERROR_CODE[2001])


class InvalidPeError(MipschedException):
    """Exception if a PE is created without positive MIPS capacity."""

    def __init__(self, msg: str = None):
        super().__init__(2100, msg or ERROR_CODE[2100])


class InvalidPeListError(MipschedException):
    """Exception if a scheduler is created without any PE."""

    def __init__(self):
        super().__init__(2101, ERROR_CODE[2101])


class InvalidVmUidError(MipschedException):
    """Exception if the VM uid is empty or not a string."""

    def __init__(self, msg: str = None):
        super().__init__(2102, msg or ERROR_CODE[2102])


class InvalidMipsShareError(MipschedException):
    """Exception if a MIPS share contains a negative or non-finite entry.

    NOTE: A share entry larger than the PE capacity is not an error, the allocation is rejected
    with a ``False`` result instead.
    """

    def __init__(self, msg: str = None):
        super().__init__(2103, msg or ERROR_CODE[2103])


class SchedulerPolicyError(MipschedException):
    """Exception when calling an operation which the current scheduler policy does not have."""

    def __init__(self, msg: str = None):
        super().__init__(2104, msg or ERROR_CODE[2104])

# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.


ERROR_CODE = {
    # Error code table for mipsched.
    1000: "mipsched Internal Error",

    # 2000-2099: topology configuration
    2000: "Cannot find specified topology",
    2001: "Invalid topology configuration",

    # 2100-2199: scheduler
    2100: "Invalid PE, its MIPS capacity must be larger than 0",
    2101: "Invalid PE list, a scheduler needs at least one PE",
    2102: "Invalid VM uid, it must be a non-empty string",
    2103: "Invalid MIPS share, each entry must be a finite number not less than 0",
    2104: "Operation not supported by the scheduler policy",
}

# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

# Performance degradation of a VM migrating out of the host.
MIGRATION_OUT_PENALTY_FACTOR = 0.9
# The destination host only experiences this share of a migrating-in VM's MIPS.
MIGRATION_IN_VISIBILITY_FACTOR = 0.1

# Remainders below this value are not spread onto the next PE.
MIN_PE_PROVISIONING_MIPS = 0.1

metrics_desc = """
VM scheduler metrics used provide statistics information until now.
It contains following keys:

total_allocation_requests (int): Total allocation requests received by the scheduler.
successful_allocation (int): Accumulative admitted allocation requests.
failed_allocation (int): Accumulative rejected allocation requests.
total_redistributions (int): Accumulative redistributions due to over-subscription.
total_requested_mips (float): MIPS currently requested by all tracked VMs.
total_allocated_mips (float): MIPS currently allocated to all tracked VMs.
"""

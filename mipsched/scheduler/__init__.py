# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from .allocation_state import AllocationState
from .builder import build_pe_list, build_scheduler, load_topology_config
from .common import MIGRATION_IN_VISIBILITY_FACTOR, MIGRATION_OUT_PENALTY_FACTOR
from .enums import PeStatus
from .oversubscription import allocate_pes_for_vm, redistribute_mips_due_to_oversubscription
from .pe import Pe
from .vm_scheduler import VmScheduler

__all__ = [
    "AllocationState",
    "MIGRATION_IN_VISIBILITY_FACTOR", "MIGRATION_OUT_PENALTY_FACTOR",
    "Pe", "PeStatus",
    "VmScheduler",
    "allocate_pes_for_vm", "redistribute_mips_due_to_oversubscription",
    "build_pe_list", "build_scheduler", "load_topology_config",
]

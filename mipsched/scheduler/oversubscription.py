# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Time-shared allocation with over-subscription.

The host still admits VMs that require more MIPS than it has available. Instead of rejecting
them, the MIPS of every hosted VM are scaled down by one host-wide factor, so the whole
capacity is shared in proportion to the requests. Each virtual PE still cannot get more than
the MIPS of a single physical PE.
"""

from typing import List

import numpy as np

from mipsched.utils.logger import SchedulerLogger

from .allocation_state import AllocationState
from .common import MIGRATION_IN_VISIBILITY_FACTOR, MIGRATION_OUT_PENALTY_FACTOR
from .time_shared import (
    allocate_exact_share, exceeds_pe_capacity, get_visible_requested_mips, record_request, warn_migration_conflict
)

logger = SchedulerLogger(name=__name__)


def allocate_pes_for_vm(state: AllocationState, vm_uid: str, mips_share: List[float]) -> bool:
    """Admit the VM, allocate it exactly if possible, otherwise redistribute the host MIPS.

    Args:
        state (AllocationState): State of the host.
        vm_uid (str): The VM uid.
        mips_share (List[float]): Requested MIPS of each virtual PE.

    Returns:
        bool: False only if a virtual PE requests more than the capacity of one physical PE,
            the state is not changed then.
    """
    if exceeds_pe_capacity(state, mips_share):
        logger.warning(f"VM {vm_uid} requests {mips_share}, more than the PE capacity {state.pe_capacity}.")
        return False

    record_request(state, vm_uid, mips_share)
    warn_migration_conflict(state, vm_uid)

    total_requested_mips = get_visible_requested_mips(state, vm_uid, mips_share)

    if state.available_mips >= total_requested_mips:
        allocate_exact_share(state, vm_uid, mips_share, total_requested_mips)
    else:
        logger.info(
            f"VM {vm_uid} requests {total_requested_mips} MIPS, only {state.available_mips} MIPS available, "
            f"redistribute MIPS of {len(state.mips_map_requested)} VMs."
        )
        redistribute_mips_due_to_oversubscription(state)

    return True


def redistribute_mips_due_to_oversubscription(state: AllocationState):
    """Rebuild the allocation of all VMs from their requests.

    All requests are scaled by the same factor so their total equals the host capacity, then
    floored. The host has no available MIPS afterwards.
    """
    total_required_mips = 0.0
    for vm_uid, mips_share in state.mips_map_requested.items():
        warn_migration_conflict(state, vm_uid)
        total_required_mips += get_visible_requested_mips(state, vm_uid, mips_share)

    # Clear the old allocation.
    state.mips_map.clear()

    if total_required_mips <= 0:
        logger.debug("No MIPS required by the VMs, nothing to redistribute.")
        state.available_mips = 0.0
        state.total_redistributions += 1
        return

    # Capacity of the PEs, available MIPS may be stale at this point.
    scaling_factor = state.total_mips / total_required_mips

    for vm_uid, mips_share in state.mips_map_requested.items():
        requested_mips = np.asarray(mips_share, dtype=float)

        if vm_uid in state.vms_migrating_out:
            allocated_mips = requested_mips * scaling_factor * MIGRATION_OUT_PENALTY_FACTOR
        elif vm_uid in state.vms_migrating_in:
            allocated_mips = requested_mips * MIGRATION_IN_VISIBILITY_FACTOR * scaling_factor
        else:
            allocated_mips = requested_mips * scaling_factor

        state.mips_map[vm_uid] = np.floor(allocated_mips).tolist()

    # The host is over-subscribed, no MIPS left.
    state.available_mips = 0.0
    state.total_redistributions += 1

    logger.info(
        f"Redistributed {state.total_mips} MIPS to {len(state.mips_map)} VMs requiring {total_required_mips} MIPS, "
        f"scaling factor {scaling_factor:.4f}."
    )

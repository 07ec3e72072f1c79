# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Time-shared allocation without over-subscription.

Virtual PEs of all VMs share the physical PEs of the host. A request is admitted only if the
host still has enough available MIPS for it, and no virtual PE may get more than one physical
PE worth of MIPS.
"""

from typing import Callable, List

import numpy as np

from mipsched.utils.logger import SchedulerLogger

from .allocation_state import AllocationState
from .common import MIGRATION_IN_VISIBILITY_FACTOR, MIGRATION_OUT_PENALTY_FACTOR, MIN_PE_PROVISIONING_MIPS
from .enums import PeStatus

logger = SchedulerLogger(name=__name__)

AllocateFunction = Callable[[AllocationState, str, List[float]], bool]


def get_migration_multiplier(state: AllocationState, vm_uid: str) -> float:
    """Multiplier applied to each allocated entry of the VM.

    A VM migrating out is checked first, so it wins if the VM is in both migration sets.
    """
    if vm_uid in state.vms_migrating_out:
        return MIGRATION_OUT_PENALTY_FACTOR
    elif vm_uid in state.vms_migrating_in:
        return MIGRATION_IN_VISIBILITY_FACTOR
    return 1.0


def get_visible_requested_mips(state: AllocationState, vm_uid: str, mips_share: List[float]) -> float:
    """Total MIPS of the share as experienced by this host."""
    total_requested_mips = float(np.sum(mips_share)) if len(mips_share) > 0 else 0.0

    if vm_uid in state.vms_migrating_in:
        total_requested_mips *= MIGRATION_IN_VISIBILITY_FACTOR

    return total_requested_mips


def exceeds_pe_capacity(state: AllocationState, mips_share: List[float]) -> bool:
    pe_mips = state.pe_capacity
    return any(mips > pe_mips for mips in mips_share)


def warn_migration_conflict(state: AllocationState, vm_uid: str):
    if vm_uid in state.vms_migrating_in and vm_uid in state.vms_migrating_out:
        logger.warning(
            f"VM {vm_uid} is both migrating in and out, its demand is discounted as migrating in "
            f"while its allocation is penalized as migrating out."
        )


def record_request(state: AllocationState, vm_uid: str, mips_share: List[float]):
    state.mips_map_requested[vm_uid] = list(mips_share)
    state.pes_in_use += len(mips_share)


def allocate_exact_share(state: AllocationState, vm_uid: str, mips_share: List[float], total_requested_mips: float):
    """Allocate the share as requested, only scaled by the migration multiplier."""
    multiplier = get_migration_multiplier(state, vm_uid)
    mips_share_allocated = (np.asarray(mips_share, dtype=float) * multiplier).tolist()

    state.mips_map[vm_uid] = mips_share_allocated
    state.available_mips -= total_requested_mips

    logger.debug(
        f"VM {vm_uid} allocated {mips_share_allocated}, {state.available_mips} MIPS still available."
    )


def allocate_pes_for_vm_exact(state: AllocationState, vm_uid: str, mips_share: List[float]) -> bool:
    """Allocate the share if the host has enough available MIPS.

    Args:
        state (AllocationState): State of the host.
        vm_uid (str): The VM uid.
        mips_share (List[float]): Requested MIPS of each virtual PE.

    Returns:
        bool: True if the VM got all the requested MIPS.
    """
    if exceeds_pe_capacity(state, mips_share):
        logger.warning(f"VM {vm_uid} requests {mips_share}, more than the PE capacity {state.pe_capacity}.")
        return False

    record_request(state, vm_uid, mips_share)
    warn_migration_conflict(state, vm_uid)

    total_requested_mips = get_visible_requested_mips(state, vm_uid, mips_share)
    if total_requested_mips > state.available_mips:
        logger.debug(
            f"VM {vm_uid} requests {total_requested_mips} MIPS, only {state.available_mips} MIPS available."
        )
        return False

    allocate_exact_share(state, vm_uid, mips_share, total_requested_mips)

    return True


def update_pe_provisioning(state: AllocationState):
    """Spread the allocated MIPS of all VMs onto the physical PEs.

    PEs are filled in order, an entry larger than the remaining MIPS of a PE continues on the
    next one.
    """
    state.pe_map.clear()
    for pe in state.pe_list:
        pe.deallocate_mips_for_all_vms()

    pe_iter = iter([pe for pe in state.pe_list if pe.status != PeStatus.FAILED])
    pe = next(pe_iter, None)

    for vm_uid, mips_share in state.mips_map.items():
        pe_ids = state.pe_map.setdefault(vm_uid, [])

        for mips in mips_share:
            while mips >= MIN_PE_PROVISIONING_MIPS and pe is not None:
                provisioned = min(mips, pe.available_mips)
                if provisioned > 0:
                    pe.allocate_mips_for_vm(vm_uid, provisioned)
                    if pe.id not in pe_ids:
                        pe_ids.append(pe.id)

                mips -= provisioned
                if mips >= MIN_PE_PROVISIONING_MIPS:
                    pe = next(pe_iter, None)

            if mips >= MIN_PE_PROVISIONING_MIPS:
                logger.warning(f"There is no enough MIPS ({mips}) on the PEs to accommodate VM {vm_uid}.")


def deallocate_pes_for_vm(state: AllocationState, vm_uid: str, allocate_fn: AllocateFunction) -> bool:
    """Release the VM and re-admit all the remaining VMs.

    Args:
        state (AllocationState): State of the host.
        vm_uid (str): The VM to release.
        allocate_fn (AllocateFunction): Allocation policy used to re-admit the remaining VMs.

    Returns:
        bool: False if the VM is not tracked.
    """
    if vm_uid not in state.mips_map_requested:
        return False

    del state.mips_map_requested[vm_uid]
    state.pes_in_use = 0
    state.mips_map.clear()
    state.available_mips = state.total_mips

    for pe in state.pe_list:
        pe.deallocate_mips_for_vm(vm_uid)

    for remaining_vm_uid, mips_share in list(state.mips_map_requested.items()):
        allocate_fn(state, remaining_vm_uid, mips_share)

    update_pe_provisioning(state)

    logger.debug(f"VM {vm_uid} deallocated, {len(state.mips_map_requested)} VMs remain.")

    return True


def deallocate_pes_for_all_vms(state: AllocationState):
    """Release all VMs, the migration sets are kept as their owner maintains them."""
    state.mips_map_requested.clear()
    state.mips_map.clear()
    state.pe_map.clear()

    for pe in state.pe_list:
        pe.deallocate_mips_for_all_vms()

    state.available_mips = state.total_mips
    state.pes_in_use = 0


def get_allocated_mips_for_vm(state: AllocationState, vm_uid: str) -> List[float]:
    return list(state.mips_map.get(vm_uid, []))


def get_total_allocated_mips_for_vm(state: AllocationState, vm_uid: str) -> float:
    return float(sum(state.mips_map.get(vm_uid, [])))

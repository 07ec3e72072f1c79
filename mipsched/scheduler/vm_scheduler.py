# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import math
from numbers import Real
from typing import Dict, List, Set

from mipsched.utils.exception.scheduler_exception import (
    InvalidMipsShareError, InvalidVmUidError, SchedulerPolicyError
)

from .allocation_state import AllocationState
from .common import metrics_desc
from .helpers import DocableDict
from .oversubscription import allocate_pes_for_vm, redistribute_mips_due_to_oversubscription
from .pe import Pe, get_max_available_mips
from .time_shared import (
    allocate_pes_for_vm_exact, deallocate_pes_for_all_vms, deallocate_pes_for_vm, get_allocated_mips_for_vm,
    get_total_allocated_mips_for_vm, update_pe_provisioning
)


class VmScheduler:
    """Time-shared VM scheduler of one host.

    The scheduler exclusively owns the allocation state of the host, all changes go through
    its methods. It is not thread safe, callers must serialize the calls of one host.

    Args:
        pe_list (List[Pe]): Physical PEs of the host.
        oversubscription (bool): Admit VMs even if the host has not enough available MIPS,
            and scale down all VMs instead. Defaults to True.
    """
    def __init__(self, pe_list: List[Pe], oversubscription: bool = True):
        self._state = AllocationState(pe_list)
        self._oversubscription: bool = oversubscription
        self._allocate_fn = allocate_pes_for_vm if oversubscription else allocate_pes_for_vm_exact

        self._init_metrics()

    def _init_metrics(self):
        self._total_allocation_requests: int = 0
        self._successful_allocation: int = 0
        self._failed_allocation: int = 0

    @property
    def oversubscription(self) -> bool:
        return self._oversubscription

    @property
    def pe_list(self) -> List[Pe]:
        return self._state.pe_list

    @property
    def pe_capacity(self) -> float:
        return self._state.pe_capacity

    @property
    def total_mips(self) -> float:
        return self._state.total_mips

    @property
    def available_mips(self) -> float:
        return self._state.available_mips

    @property
    def max_available_mips(self) -> float:
        """float: The largest MIPS still free on a single PE."""
        return get_max_available_mips(self._state.pe_list)

    @property
    def pes_in_use(self) -> int:
        return self._state.pes_in_use

    @property
    def mips_map(self) -> Dict[str, List[float]]:
        """Dict[str, List[float]]: A copy of the allocated MIPS share of each VM."""
        return {vm_uid: list(mips_share) for vm_uid, mips_share in self._state.mips_map.items()}

    @property
    def mips_map_requested(self) -> Dict[str, List[float]]:
        """Dict[str, List[float]]: A copy of the latest requested MIPS share of each VM."""
        return {vm_uid: list(mips_share) for vm_uid, mips_share in self._state.mips_map_requested.items()}

    @property
    def pe_map(self) -> Dict[str, List[int]]:
        """Dict[str, List[int]]: Ids of the PEs provisioning each VM."""
        return {vm_uid: list(pe_ids) for vm_uid, pe_ids in self._state.pe_map.items()}

    @property
    def vms_migrating_in(self) -> Set[str]:
        return set(self._state.vms_migrating_in)

    @property
    def vms_migrating_out(self) -> Set[str]:
        return set(self._state.vms_migrating_out)

    @property
    def metrics(self) -> DocableDict:
        """DocableDict: Statistics of the scheduler until now."""
        return DocableDict(
            metrics_desc,
            total_allocation_requests=self._total_allocation_requests,
            successful_allocation=self._successful_allocation,
            failed_allocation=self._failed_allocation,
            total_redistributions=self._state.total_redistributions,
            total_requested_mips=float(sum(sum(share) for share in self._state.mips_map_requested.values())),
            total_allocated_mips=float(sum(sum(share) for share in self._state.mips_map.values())),
        )

    def allocate_pes_for_vm(self, vm_uid: str, mips_share: List[float], in_migration: bool = None) -> bool:
        """Allocate MIPS for the virtual PEs of a VM.

        The request replaces any previous request of the same VM.

        Args:
            vm_uid (str): The VM uid.
            mips_share (List[float]): Requested MIPS of each virtual PE.
            in_migration (bool): Whether the VM is in migration. If True, a VM not migrating in is
                marked as migrating out. If False, a stale migrating out mark is removed. Defaults
                to None, which leaves the migration marks unchanged.

        Returns:
            bool: False if the request is rejected. With over-subscription, only a virtual PE
                requesting more than one physical PE is rejected.
        """
        self._validate_vm_uid(vm_uid)
        mips_share = self._validate_mips_share(vm_uid, mips_share)

        if in_migration and vm_uid not in self._state.vms_migrating_in:
            self._state.vms_migrating_out.add(vm_uid)
        elif in_migration is False:
            self._state.vms_migrating_out.discard(vm_uid)

        self._total_allocation_requests += 1

        result = self._allocate_fn(self._state, vm_uid, mips_share)
        update_pe_provisioning(self._state)

        if result:
            self._successful_allocation += 1
        else:
            self._failed_allocation += 1

        return result

    def redistribute(self):
        """Scale the MIPS of all VMs to share the whole host capacity."""
        if not self._oversubscription:
            raise SchedulerPolicyError("Redistribution needs a scheduler with over-subscription.")

        redistribute_mips_due_to_oversubscription(self._state)
        update_pe_provisioning(self._state)

    def deallocate_pes_for_vm(self, vm_uid: str) -> bool:
        """Release the MIPS of the VM, the remaining VMs are allocated again.

        Returns:
            bool: False if the VM is not allocated on this host.
        """
        return deallocate_pes_for_vm(self._state, vm_uid, self._allocate_fn)

    def deallocate_pes_for_all_vms(self):
        deallocate_pes_for_all_vms(self._state)

    def get_allocated_mips_for_vm(self, vm_uid: str) -> List[float]:
        return get_allocated_mips_for_vm(self._state, vm_uid)

    def get_total_allocated_mips_for_vm(self, vm_uid: str) -> float:
        return get_total_allocated_mips_for_vm(self._state, vm_uid)

    def add_migrating_in(self, vm_uid: str):
        self._validate_vm_uid(vm_uid)
        self._state.vms_migrating_in.add(vm_uid)

    def remove_migrating_in(self, vm_uid: str):
        self._state.vms_migrating_in.discard(vm_uid)

    def add_migrating_out(self, vm_uid: str):
        self._validate_vm_uid(vm_uid)
        self._state.vms_migrating_out.add(vm_uid)

    def remove_migrating_out(self, vm_uid: str):
        self._state.vms_migrating_out.discard(vm_uid)

    def reset(self):
        """Drop all VMs and migration marks, and clear the metrics."""
        self._state.reset()
        self._init_metrics()

    def _validate_vm_uid(self, vm_uid: str):
        if not isinstance(vm_uid, str) or not vm_uid:
            raise InvalidVmUidError(f"Invalid VM uid {vm_uid!r}, it must be a non-empty string.")

    def _validate_mips_share(self, vm_uid: str, mips_share: List[float]) -> List[float]:
        mips_share = list(mips_share)
        for mips in mips_share:
            if isinstance(mips, bool) or not isinstance(mips, Real) or not math.isfinite(mips) or mips < 0:
                raise InvalidMipsShareError(
                    f"Invalid MIPS share {mips_share} of VM {vm_uid}, each entry must be a finite number >= 0."
                )
        return [float(mips) for mips in mips_share]

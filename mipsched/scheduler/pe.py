# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from typing import Dict, List

from mipsched.utils.exception.scheduler_exception import InvalidPeError

from .enums import PeStatus


class Pe:
    """Physical processing element.

    The PE keeps the MIPS provisioned to each VM, so the host can tell which VM runs on which PE.

    Args:
        id (int): PE id, unique in the PE list of a host.
        mips (float): The MIPS capacity of the PE.
        status (PeStatus): The status of the PE. Defaults to ``PeStatus.FREE``.
    """
    def __init__(self, id: int, mips: float, status: PeStatus = PeStatus.FREE):
        if mips <= 0:
            raise InvalidPeError(f"The MIPS capacity of PE {id} must be larger than 0, got {mips}.")

        self.id: int = id
        self.mips: float = float(mips)
        self.status: PeStatus = status

        # VM uid -> MIPS provisioned on this PE.
        self._mips_table: Dict[str, List[float]] = {}
        self._available_mips: float = self.mips

    @property
    def available_mips(self) -> float:
        return self._available_mips

    @property
    def allocated_mips(self) -> float:
        return self.mips - self._available_mips

    @property
    def vm_uids(self) -> List[str]:
        return list(self._mips_table.keys())

    def get_allocated_mips_for_vm(self, vm_uid: str) -> List[float]:
        return list(self._mips_table.get(vm_uid, []))

    def get_total_allocated_mips_for_vm(self, vm_uid: str) -> float:
        return sum(self._mips_table.get(vm_uid, []))

    def allocate_mips_for_vm(self, vm_uid: str, mips: float) -> bool:
        """Provision MIPS on this PE for the VM.

        Args:
            vm_uid (str): The VM uid.
            mips (float): MIPS to provision.

        Returns:
            bool: False if the PE has not enough available MIPS, nothing is changed then.
        """
        if mips > self._available_mips:
            return False

        self._mips_table.setdefault(vm_uid, []).append(mips)
        self._available_mips -= mips
        if self.status == PeStatus.FREE:
            self.status = PeStatus.BUSY

        return True

    def deallocate_mips_for_vm(self, vm_uid: str):
        for mips in self._mips_table.pop(vm_uid, []):
            self._available_mips += mips

        if not self._mips_table and self.status == PeStatus.BUSY:
            self.status = PeStatus.FREE

    def deallocate_mips_for_all_vms(self):
        self._mips_table.clear()
        self._available_mips = self.mips

        if self.status == PeStatus.BUSY:
            self.status = PeStatus.FREE

    def __repr__(self):
        return "%s {id: %r, mips: %r, available_mips: %r, status: %r}" % \
            (self.__class__.__name__, self.id, self.mips, self._available_mips, self.status)


def get_total_mips(pe_list: List[Pe]) -> float:
    """Total MIPS capacity of the working PEs."""
    return sum(pe.mips for pe in pe_list if pe.status != PeStatus.FAILED)


def get_pe_capacity(pe_list: List[Pe]) -> float:
    """MIPS capacity of one PE, all PEs of a host are assumed to be the same."""
    if not pe_list:
        return 0.0

    return pe_list[0].mips


def get_max_available_mips(pe_list: List[Pe]) -> float:
    """The largest available MIPS among the working PEs."""
    return max((pe.available_mips for pe in pe_list if pe.status != PeStatus.FAILED), default=0.0)

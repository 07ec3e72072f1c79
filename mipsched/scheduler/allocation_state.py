# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from typing import Dict, List, Set

from mipsched.utils.exception.scheduler_exception import InvalidPeListError
from mipsched.utils.logger import SchedulerLogger

from .pe import Pe, get_pe_capacity, get_total_mips

logger = SchedulerLogger(name=__name__)


class AllocationState:
    """State shared by the allocation policies of one host.

    One ``VmScheduler`` owns one state, the allocation functions take it as the first parameter
    and are the only code that mutates it.

    Args:
        pe_list (List[Pe]): Physical PEs of the host, all with the same MIPS capacity.
    """
    def __init__(self, pe_list: List[Pe]):
        if not pe_list:
            raise InvalidPeListError()

        if len({pe.mips for pe in pe_list}) > 1:
            logger.warning(
                f"PE capacities {sorted({pe.mips for pe in pe_list})} are not the same, "
                f"the capacity of the first PE is used as the per-PE ceiling."
            )

        self.pe_list: List[Pe] = list(pe_list)

        # VM uid -> requested MIPS share, always the latest request of the VM.
        self.mips_map_requested: Dict[str, List[float]] = {}
        # VM uid -> allocated MIPS share.
        self.mips_map: Dict[str, List[float]] = {}
        # VM uid -> ids of PEs that provision the VM.
        self.pe_map: Dict[str, List[int]] = {}

        self.available_mips: float = 0.0
        self.pes_in_use: int = 0
        self.total_redistributions: int = 0

        self.vms_migrating_in: Set[str] = set()
        self.vms_migrating_out: Set[str] = set()

        self.reset()

    @property
    def pe_capacity(self) -> float:
        """float: MIPS capacity of a single PE."""
        return get_pe_capacity(self.pe_list)

    @property
    def total_mips(self) -> float:
        """float: Total MIPS capacity of the host, computed from the PE list."""
        return get_total_mips(self.pe_list)

    def reset(self):
        """Drop all VMs, the whole capacity becomes available."""
        self.mips_map_requested.clear()
        self.mips_map.clear()
        self.pe_map.clear()
        self.vms_migrating_in.clear()
        self.vms_migrating_out.clear()

        for pe in self.pe_list:
            pe.deallocate_mips_for_all_vms()

        self.available_mips = self.total_mips
        self.pes_in_use = 0
        self.total_redistributions = 0

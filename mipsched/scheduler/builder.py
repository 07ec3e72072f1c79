# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import os
from numbers import Real
from pathlib import Path
from typing import List

from yaml import safe_load

from mipsched.utils.exception.scheduler_exception import InvalidTopologyError, TopologyNotFoundError
from mipsched.utils.logger import SchedulerLogger
from mipsched.utils.utils import DottableDict, convert_dottable

from .pe import Pe
from .vm_scheduler import VmScheduler

logger = SchedulerLogger(name=__name__)


def get_topology_config_path(topology: str) -> str:
    """Resolve the folder of a topology.

    An existing folder is used as it is, otherwise the topology is looked up in the built-in
    ``topologies`` folder.

    Args:
        topology (str): Topology folder path or built-in topology name.

    Returns:
        str: Path of the ``config.yml`` of the topology.
    """
    path = Path(topology)

    if path.exists() and path.is_dir():
        config_folder = topology
    else:
        config_folder = os.path.join(os.path.split(os.path.realpath(__file__))[0], "topologies", topology)

    config_path = os.path.join(config_folder, "config.yml")
    if not os.path.exists(config_path):
        raise TopologyNotFoundError(f"Cannot find config.yml of topology '{topology}'.")

    return config_path


def load_topology_config(topology: str) -> DottableDict:
    with open(get_topology_config_path(topology)) as fp:
        config = safe_load(fp)

    if not isinstance(config, dict):
        raise InvalidTopologyError(f"Topology '{topology}' must be a mapping.")

    return convert_dottable(config)


def build_pe_list(config: DottableDict) -> List[Pe]:
    """Build PEs from either ``pe: {amount, mips}`` or a ``pe_list`` of capacities."""
    if "pe_list" in config:
        capacities = config.pe_list
    elif "pe" in config:
        try:
            capacities = [config.pe.mips] * int(config.pe.amount)
        except (AttributeError, TypeError, ValueError) as e:
            raise InvalidTopologyError(f"Invalid pe section {config.pe}: {e}.")
    else:
        raise InvalidTopologyError("Topology must contain either 'pe' or 'pe_list'.")

    if not isinstance(capacities, list) or not capacities:
        raise InvalidTopologyError(f"Topology describes no PE: {capacities}.")

    for mips in capacities:
        if isinstance(mips, bool) or not isinstance(mips, Real) or mips <= 0:
            raise InvalidTopologyError(f"Invalid PE capacity {mips!r}, it must be a number larger than 0.")

    return [Pe(id=pe_id, mips=mips) for pe_id, mips in enumerate(capacities)]


def build_scheduler(topology: str, **overrides) -> VmScheduler:
    """Build a scheduler of one host from a topology.

    Example:

        .. code-block:: python

            scheduler = build_scheduler("single_pe")
            scheduler.allocate_pes_for_vm("vm-0", [500, 500])

    Args:
        topology (str): Topology folder path or built-in topology name.
        overrides (dict): Config items to override, e.g. ``oversubscription=False``.

    Returns:
        VmScheduler: Scheduler with the PEs of the topology.
    """
    config = load_topology_config(topology)
    config.update(convert_dottable(overrides))

    pe_list = build_pe_list(config)
    oversubscription = config.get("oversubscription", True)
    if not isinstance(oversubscription, bool):
        raise InvalidTopologyError(f"Invalid oversubscription {oversubscription!r}, it must be true or false.")

    logger.debug(
        f"Build scheduler of topology '{topology}' with {len(pe_list)} PEs, oversubscription: {oversubscription}."
    )

    return VmScheduler(pe_list=pe_list, oversubscription=oversubscription)

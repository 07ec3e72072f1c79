# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import unittest

from mipsched.scheduler import AllocationState, Pe, PeStatus, allocate_pes_for_vm
from mipsched.scheduler.time_shared import (
    allocate_pes_for_vm_exact, deallocate_pes_for_all_vms, deallocate_pes_for_vm, get_allocated_mips_for_vm,
    get_migration_multiplier, get_total_allocated_mips_for_vm, get_visible_requested_mips, update_pe_provisioning
)


class TestExactAllocation(unittest.TestCase):
    def setUp(self):
        self.state = AllocationState([Pe(id=0, mips=1000)])

    def test_reject_when_not_enough_available(self):
        self.assertTrue(allocate_pes_for_vm_exact(self.state, "a", [600]))
        self.assertFalse(allocate_pes_for_vm_exact(self.state, "b", [600]))

        self.assertDictEqual({"a": [600.0]}, self.state.mips_map)
        self.assertEqual(400, self.state.available_mips)
        # The request is kept, it is allocated once some VM is released.
        self.assertIn("b", self.state.mips_map_requested)

    def test_reject_virtual_pe_larger_than_pe(self):
        self.assertFalse(allocate_pes_for_vm_exact(self.state, "a", [1001]))
        self.assertDictEqual({}, self.state.mips_map_requested)

    def test_released_vm_lets_pending_request_in(self):
        allocate_pes_for_vm_exact(self.state, "a", [600])
        allocate_pes_for_vm_exact(self.state, "b", [600])

        self.assertTrue(deallocate_pes_for_vm(self.state, "a", allocate_pes_for_vm_exact))

        self.assertDictEqual({"b": [600.0]}, self.state.mips_map)
        self.assertEqual(400, self.state.available_mips)
        self.assertEqual(1, self.state.pes_in_use)


class TestMigrationHelpers(unittest.TestCase):
    def setUp(self):
        self.state = AllocationState([Pe(id=0, mips=1000)])

    def test_multiplier(self):
        self.state.vms_migrating_in.add("in")
        self.state.vms_migrating_out.add("out")
        self.state.vms_migrating_in.add("both")
        self.state.vms_migrating_out.add("both")

        self.assertEqual(1.0, get_migration_multiplier(self.state, "a"))
        self.assertEqual(0.1, get_migration_multiplier(self.state, "in"))
        self.assertEqual(0.9, get_migration_multiplier(self.state, "out"))
        self.assertEqual(0.9, get_migration_multiplier(self.state, "both"))

    def test_visible_requested_mips(self):
        self.state.vms_migrating_in.add("in")
        self.state.vms_migrating_out.add("out")

        self.assertEqual(700, get_visible_requested_mips(self.state, "a", [300, 400]))
        self.assertAlmostEqual(70, get_visible_requested_mips(self.state, "in", [300, 400]))
        self.assertEqual(700, get_visible_requested_mips(self.state, "out", [300, 400]))
        self.assertEqual(0, get_visible_requested_mips(self.state, "a", []))


class TestDeallocation(unittest.TestCase):
    def setUp(self):
        self.state = AllocationState([Pe(id=0, mips=1000)])

    def test_remaining_vm_gets_full_request_back(self):
        allocate_pes_for_vm(self.state, "a", [800])
        allocate_pes_for_vm(self.state, "b", [800])
        self.assertListEqual([500.0], get_allocated_mips_for_vm(self.state, "b"))

        self.assertTrue(deallocate_pes_for_vm(self.state, "a", allocate_pes_for_vm))

        self.assertDictEqual({"b": [800.0]}, self.state.mips_map_requested)
        self.assertDictEqual({"b": [800.0]}, self.state.mips_map)
        self.assertEqual(200, self.state.available_mips)
        self.assertEqual(1, self.state.pes_in_use)
        self.assertListEqual([], get_allocated_mips_for_vm(self.state, "a"))

    def test_remaining_vms_still_oversubscribed(self):
        for vm_uid in ("a", "b", "c"):
            allocate_pes_for_vm(self.state, vm_uid, [800])

        deallocate_pes_for_vm(self.state, "a", allocate_pes_for_vm)

        self.assertDictEqual({"b": [500.0], "c": [500.0]}, self.state.mips_map)
        self.assertEqual(0, self.state.available_mips)
        self.assertEqual(2, self.state.pes_in_use)

    def test_unknown_vm(self):
        allocate_pes_for_vm(self.state, "a", [800])

        self.assertFalse(deallocate_pes_for_vm(self.state, "x", allocate_pes_for_vm))
        self.assertDictEqual({"a": [800.0]}, self.state.mips_map)

    def test_deallocate_all_keeps_migration_sets(self):
        self.state.vms_migrating_in.add("a")
        allocate_pes_for_vm(self.state, "a", [800])
        allocate_pes_for_vm(self.state, "b", [800])

        deallocate_pes_for_all_vms(self.state)

        self.assertDictEqual({}, self.state.mips_map)
        self.assertDictEqual({}, self.state.mips_map_requested)
        self.assertEqual(1000, self.state.available_mips)
        self.assertEqual(0, self.state.pes_in_use)
        self.assertSetEqual({"a"}, self.state.vms_migrating_in)


class TestPeProvisioning(unittest.TestCase):
    def setUp(self):
        self.pe_list = [Pe(id=0, mips=1000), Pe(id=1, mips=1000)]
        self.state = AllocationState(self.pe_list)

    def test_entries_fill_pes_in_order(self):
        allocate_pes_for_vm(self.state, "a", [600])
        allocate_pes_for_vm(self.state, "b", [600])

        update_pe_provisioning(self.state)

        self.assertDictEqual({"a": [0], "b": [0, 1]}, self.state.pe_map)
        self.assertEqual(0, self.pe_list[0].available_mips)
        self.assertEqual(800, self.pe_list[1].available_mips)
        self.assertListEqual([400.0], self.pe_list[0].get_allocated_mips_for_vm("b"))
        self.assertListEqual([200.0], self.pe_list[1].get_allocated_mips_for_vm("b"))
        self.assertEqual(600, get_total_allocated_mips_for_vm(self.state, "b"))

    def test_provisioning_is_rebuilt(self):
        allocate_pes_for_vm(self.state, "a", [600])
        update_pe_provisioning(self.state)
        deallocate_pes_for_vm(self.state, "a", allocate_pes_for_vm)

        self.assertDictEqual({}, self.state.pe_map)
        self.assertEqual(1000, self.pe_list[0].available_mips)
        self.assertEqual(PeStatus.FREE, self.pe_list[0].status)

    def test_failed_pe_is_skipped(self):
        self.pe_list[0].status = PeStatus.FAILED
        state = AllocationState(self.pe_list)
        self.assertEqual(1000, state.total_mips)

        allocate_pes_for_vm(state, "a", [300])
        update_pe_provisioning(state)

        self.assertDictEqual({"a": [1]}, state.pe_map)


if __name__ == "__main__":
    unittest.main()

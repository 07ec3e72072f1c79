# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import unittest

from mipsched.scheduler import Pe, PeStatus
from mipsched.scheduler.pe import get_max_available_mips, get_pe_capacity, get_total_mips


class TestPe(unittest.TestCase):
    def setUp(self):
        self.pe = Pe(id=0, mips=1000)

    def test_allocate(self):
        self.assertTrue(self.pe.allocate_mips_for_vm("a", 300))
        self.assertTrue(self.pe.allocate_mips_for_vm("a", 200))
        self.assertTrue(self.pe.allocate_mips_for_vm("b", 500))

        self.assertEqual(0, self.pe.available_mips)
        self.assertEqual(1000, self.pe.allocated_mips)
        self.assertListEqual([300, 200], self.pe.get_allocated_mips_for_vm("a"))
        self.assertEqual(500, self.pe.get_total_allocated_mips_for_vm("a"))
        self.assertListEqual(["a", "b"], self.pe.vm_uids)
        self.assertEqual(PeStatus.BUSY, self.pe.status)

    def test_allocate_more_than_available(self):
        self.pe.allocate_mips_for_vm("a", 800)

        self.assertFalse(self.pe.allocate_mips_for_vm("b", 300))
        self.assertEqual(200, self.pe.available_mips)
        self.assertListEqual([], self.pe.get_allocated_mips_for_vm("b"))

    def test_deallocate(self):
        self.pe.allocate_mips_for_vm("a", 300)
        self.pe.allocate_mips_for_vm("b", 500)

        self.pe.deallocate_mips_for_vm("a")
        self.assertEqual(500, self.pe.available_mips)
        self.assertEqual(PeStatus.BUSY, self.pe.status)

        self.pe.deallocate_mips_for_vm("b")
        self.assertEqual(1000, self.pe.available_mips)
        self.assertEqual(PeStatus.FREE, self.pe.status)

    def test_failed_pe_keeps_status(self):
        self.pe.status = PeStatus.FAILED
        self.pe.allocate_mips_for_vm("a", 300)
        self.pe.deallocate_mips_for_all_vms()

        self.assertEqual(PeStatus.FAILED, self.pe.status)


class TestPeList(unittest.TestCase):
    def test_capacity(self):
        pe_list = [Pe(id=0, mips=1000), Pe(id=1, mips=1000), Pe(id=2, mips=1000, status=PeStatus.FAILED)]
        pe_list[1].allocate_mips_for_vm("a", 100)

        self.assertEqual(2000, get_total_mips(pe_list))
        self.assertEqual(1000, get_pe_capacity(pe_list))
        self.assertEqual(1000, get_max_available_mips(pe_list))

    def test_empty(self):
        self.assertEqual(0, get_total_mips([]))
        self.assertEqual(0, get_pe_capacity([]))
        self.assertEqual(0, get_max_available_mips([]))


if __name__ == "__main__":
    unittest.main()

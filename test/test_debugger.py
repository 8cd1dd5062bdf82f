#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import io
import unittest
from chip8vm.debugger import Debugger
from chip8vm.machine import Machine


class TestDebugger(unittest.TestCase):
    def setUp(self):
        self.stream = io.StringIO()
        self.debugger = Debugger(live=True, stream=self.stream)
        self.machine = Machine(debugger=self.debugger)

    def test_debugger_live_output(self):
        self.machine.load(b"\x6A\x42\x22\x00")  # LD VA, 0x42 / CALL 0x200
        self.machine.step()
        self.machine.step()
        lines = self.stream.getvalue().splitlines()
        self.assertEqual(2, len(lines))
        self.assertTrue(lines[0].endswith("PC: 0x200 OP: 0x6a42 IN: LD Va, 0x42"))
        self.assertTrue(lines[1].startswith("V: 0x000000000042"))  # Printed from Vf down, so Va is sixth
        self.assertTrue(lines[1].endswith("IN: CALL 0x200"))

    def test_debugger_verbose(self):
        self.machine.load(b"\x22\x04\x00\x00\x22\x08")
        self.machine.step()
        self.machine.step()
        dump = self.debugger.debug(self.machine.cpu, "???", verbose=True)
        self.assertTrue(dump.endswith("Stack: 0x202 0x206"))

    def test_debugger_verbose_empty_stack(self):
        dump = self.debugger.debug(self.machine.cpu, "???", verbose=True)
        self.assertTrue(dump.endswith("Stack: (Empty)"))

    def test_debugger_not_live(self):
        debugger = Debugger(stream=self.stream)
        self.assertFalse(debugger.is_live())
        machine = Machine(debugger=debugger)
        machine.load(b"\x00\xE0")
        machine.step()
        self.assertEqual("", self.stream.getvalue())

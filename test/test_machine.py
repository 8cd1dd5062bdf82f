#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from random import Random
from chip8vm.constants import SYSTEM_FONT
from chip8vm.cpu import CPUError
from chip8vm.keypad import KeypadError
from chip8vm.machine import Machine
from chip8vm.quirks import Quirks
from chip8vm.ram import RAMError
from chip8vm.stack import StackError


class TestMachine(unittest.TestCase):
    def setUp(self):
        self.machine = Machine()

    def _run(self, program, steps):
        self.machine.load(program)

        for _ in range(steps):
            self.machine.step()

    def test_machine_font_loaded(self):
        self.assertEqual(SYSTEM_FONT, bytes(self.machine.ram.read_block(0, len(SYSTEM_FONT))))

    def test_machine_first_step(self):
        self._run(b"\x00\xE0", 1)
        self.assertEqual(0x202, self.machine.cpu.pc)
        self.assertEqual(0x00E0, self.machine.cpu.opcode)

    def test_machine_load_largest(self):
        self.machine.load(b"\xAB" * (4096 - 0x200))
        self.assertEqual(0xAB, self.machine.ram.read(0xFFF))

    def test_machine_load_too_large(self):
        self.assertRaises(RAMError, self.machine.load, b"\xAB" * (4096 - 0x200 + 1))
        self.assertEqual(bytes(4096 - 0x200), bytes(self.machine.ram.read_block(0x200, 4096 - 0x200)))
        self.assertEqual(SYSTEM_FONT, bytes(self.machine.ram.read_block(0, len(SYSTEM_FONT))))

    def test_machine_add_program(self):
        # LD V1, 0xFF / LD V2, 0x01 / ADD V1, V2
        self._run(b"\x61\xFF\x62\x01\x81\x24", 3)
        self.assertEqual(0x00, self.machine.cpu.v[0x1])
        self.assertEqual(0x1, self.machine.cpu.v[0xF])

    def test_machine_subroutine(self):
        # CALL 0x206 / LD V0, 0x01 / JP 0x204 / LD V1, 0x02 / RET
        self._run(b"\x22\x06\x60\x01\x12\x04\x61\x02\x00\xEE", 3)
        self.assertEqual(0x202, self.machine.cpu.pc)
        self.assertEqual(0x02, self.machine.cpu.v[0x1])
        self.assertEqual(0x00, self.machine.cpu.v[0x0])
        self.machine.step()
        self.assertEqual(0x01, self.machine.cpu.v[0x0])

    def test_machine_return_without_call(self):
        self.machine.load(b"\x00\xEE")
        self.assertRaises(StackError, self.machine.step)

    def test_machine_recursion_limit(self):
        self.machine.load(b"\x22\x00")  # CALL 0x200, forever

        for _ in range(16):
            self.machine.step()

        self.assertRaises(StackError, self.machine.step)

    def test_machine_invalid_opcode(self):
        self.machine.load(b"\xFF\xFF")

        with self.assertRaises(CPUError) as context:
            self.machine.step()

        self.assertEqual(0xFFFF, context.exception.opcode)
        self.assertEqual(0x200, context.exception.address)

    def test_machine_draw_twice(self):
        # LD I, 0x20A / DRW V0, V0, 1 / DRW V0, V0, 1 / JP 0x208 (spin) / sprite 0xFF
        self.machine.load(b"\xA2\x0A\xD0\x01\xD0\x01\x12\x08\x12\x08\xFF")
        self.machine.step()
        self.machine.step()
        self.assertEqual(8, sum(self.machine.display()))
        self.assertEqual(0, self.machine.cpu.v[0xF])
        self.machine.step()
        self.assertEqual(bytes(64 * 32), self.machine.display())
        self.assertEqual(1, self.machine.cpu.v[0xF])

    def test_machine_bcd(self):
        # LD V5, 0xFF / LD I, 0x300 / LD B, V5
        self._run(b"\x65\xFF\xA3\x00\xF5\x33", 3)
        self.assertEqual("020505", self.machine.ram.read_block(0x300, 3).hex())

    def test_machine_key_wait(self):
        self.machine.load(b"\xF4\x0A")  # LD V4, K

        for _ in range(5):
            self.machine.step()
            self.assertEqual(0x200, self.machine.cpu.pc)

        self.machine.set_key(0xB, True)
        self.machine.step()
        self.assertEqual(0x202, self.machine.cpu.pc)
        self.assertEqual(0xB, self.machine.cpu.v[0x4])

    def test_machine_set_key(self):
        self.machine.set_key(0xF, True)
        self.assertTrue(self.machine.is_key_down(0xF))
        self.machine.set_key(0xF, False)
        self.assertFalse(self.machine.is_key_down(0xF))
        self.assertRaises(KeypadError, self.machine.set_key, 16, True)
        self.assertRaises(KeypadError, self.machine.is_key_down, -1)

    def test_machine_timers(self):
        # LD V0, 0x02 / LD DT, V0 / LD ST, V0
        self._run(b"\x60\x02\xF0\x15\xF0\x18", 3)
        self.assertEqual((2, 2), (self.machine.delay_timer(), self.machine.sound_timer()))
        self.machine.tick_delay()
        self.assertEqual((1, 2), (self.machine.delay_timer(), self.machine.sound_timer()))
        self.machine.tick_sound()
        self.machine.tick_sound()
        self.machine.tick_sound()
        self.assertEqual(0, self.machine.sound_timer())

    def test_machine_timer_saturation(self):
        self.machine.tick_delay()
        self.machine.tick_sound()
        self.assertEqual(0, self.machine.delay_timer())
        self.assertEqual(0, self.machine.sound_timer())

    def test_machine_display_idempotent(self):
        # LD I, 0x000 (glyph "0") / DRW V0, V0, 5
        self._run(b"\xA0\x00\xD0\x05", 2)
        first = self.machine.display()
        self.assertEqual(first, self.machine.display())
        self.assertEqual(64 * 32, len(first))
        self.assertEqual(1, first[0])

    def test_machine_display_changed(self):
        self.assertTrue(self.machine.display_changed())
        self.assertFalse(self.machine.display_changed())
        self._run(b"\x00\xE0", 1)
        self.assertTrue(self.machine.display_changed())

    def test_machine_shift_quirks(self):
        program = b"\x61\x05\x62\x80\x81\x26"  # LD V1, 0x05 / LD V2, 0x80 / SHR V1 {, V2}
        results = []

        for quirks in Quirks(), Quirks(shift_quirks=True):
            machine = Machine(quirks=quirks)
            machine.load(program)

            for _ in range(3):
                machine.step()

            results.append(machine.cpu.v[0x1])

        self.assertEqual([0x02, 0x40], results)

    def test_machine_independent_random(self):
        # Machines with the same seed produce the same numbers, whatever the other one is doing
        program = b"\xC0\xFF\xC1\xFF\xC2\xFF"
        machine_a = Machine(rng=Random(99))
        machine_b = Machine(rng=Random(99))
        machine_a.load(program)
        machine_b.load(program)

        for _ in range(3):
            machine_a.step()

        for _ in range(3):
            machine_b.step()

        self.assertEqual(bytes(machine_a.cpu.v), bytes(machine_b.cpu.v))

    def test_machine_stack_depth(self):
        machine = Machine(stack_depth=2)
        machine.load(b"\x22\x00")
        machine.step()
        machine.step()
        self.assertRaises(StackError, machine.step)

#!/usr/bin/env python3

"""
CPU Emulator (CHIP-8)

Like a real computer, this is where most of the processing happens.  The CPU
never loops by itself: each call to step() fetches, decodes and executes one
instruction, then returns.  Pacing, timer ticks and screen refreshes are the
frame driver's job.

Decoding is table-driven.  The top nibble of an opcode selects a mask, and the
masked opcode selects the handler.  Both tables are plain module-level data, so
every defined opcode can be listed (and tested) without running anything, and
any opcode that masks to a missing key raises CPUError rather than being
skipped over.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from random import Random
from .constants import APP_INTRO, ADDR_MASK, FONT_LOCATION, FONT_GLYPH_SIZE, PROGRAM_START
from .debugger import Debugger
from .decoder import Instruction
from .quirks import Quirks

# Bits of the opcode that identify the instruction, by top nibble
OPCODE_MASKS = {
    0x0: 0xFFFF,  # Exact match
    0x1: 0xF000,
    0x2: 0xF000,
    0x3: 0xF000,
    0x4: 0xF000,
    0x5: 0xF00F,
    0x6: 0xF000,
    0x7: 0xF000,
    0x8: 0xF00F,
    0x9: 0xF00F,
    0xA: 0xF000,
    0xB: 0xF000,
    0xC: 0xF000,
    0xD: 0xF000,
    0xE: 0xF0FF,
    0xF: 0xF0FF
}

# Masked opcode -> (handler name, mnemonic).  Mnemonics are formatted with the decoded instruction's fields.
# n = Nibble
# nn = Byte
# nnn = address
# x/y = register (0-15)
OPCODES = {
    0x00E0: ("_00E0", "CLS"),
    0x00EE: ("_00EE", "RET"),
    0x1000: ("_1nnn", "JP 0x{nnn:03x}"),
    0x2000: ("_2nnn", "CALL 0x{nnn:03x}"),
    0x3000: ("_3xnn", "SE V{x:01x}, 0x{nn:02x}"),
    0x4000: ("_4xnn", "SNE V{x:01x}, 0x{nn:02x}"),
    0x5000: ("_5xy0", "SE V{x:01x}, V{y:01x}"),
    0x6000: ("_6xnn", "LD V{x:01x}, 0x{nn:02x}"),
    0x7000: ("_7xnn", "ADD V{x:01x}, 0x{nn:02x}"),
    0x8000: ("_8xy0", "LD V{x:01x}, V{y:01x}"),
    0x8001: ("_8xy1", "OR V{x:01x}, V{y:01x}"),
    0x8002: ("_8xy2", "AND V{x:01x}, V{y:01x}"),
    0x8003: ("_8xy3", "XOR V{x:01x}, V{y:01x}"),
    0x8004: ("_8xy4", "ADD V{x:01x}, V{y:01x}"),
    0x8005: ("_8xy5", "SUB V{x:01x}, V{y:01x}"),
    0x8006: ("_8xy6", "SHR V{x:01x} {{, V{y:01x}}}"),
    0x8007: ("_8xy7", "SUBN V{x:01x}, V{y:01x}"),
    0x800E: ("_8xyE", "SHL V{x:01x} {{, V{y:01x}}}"),
    0x9000: ("_9xy0", "SNE V{x:01x}, V{y:01x}"),
    0xA000: ("_Annn", "LD I, 0x{nnn:03x}"),
    0xB000: ("_Bnnn", "JP V0, 0x{nnn:03x}"),
    0xC000: ("_Cxnn", "RND V{x:01x}, 0x{nn:02x}"),
    0xD000: ("_Dxyn", "DRW V{x:01x}, V{y:01x}, 0x{n:01x}"),
    0xE09E: ("_Ex9E", "SKP V{x:01x}"),
    0xE0A1: ("_ExA1", "SKNP V{x:01x}"),
    0xF007: ("_Fx07", "LD V{x:01x}, DT"),
    0xF00A: ("_Fx0A", "LD V{x:01x}, K"),
    0xF015: ("_Fx15", "LD DT, V{x:01x}"),
    0xF018: ("_Fx18", "LD ST, V{x:01x}"),
    0xF01E: ("_Fx1E", "ADD I, V{x:01x}"),
    0xF029: ("_Fx29", "LD F, V{x:01x}"),
    0xF033: ("_Fx33", "LD B, V{x:01x}"),
    0xF055: ("_Fx55", "LD [I], V{x:01x}"),
    0xF065: ("_Fx65", "LD V{x:01x}, [I]")
}


class CPUError(Exception):
    def __init__(self, message, opcode=None, address=None):
        super().__init__(message)
        self.opcode = opcode
        self.address = address


def opcode_key(opcode):
    # The OPCODES key an opcode is looked up by.  Not necessarily present.
    return opcode & OPCODE_MASKS[(opcode & 0xF000) >> 12]


def mnemonic(instruction):
    entry = OPCODES.get(opcode_key(instruction.opcode))

    if entry is None:
        return "???"

    ins = instruction
    return entry[1].format(x=ins.x, y=ins.y, n=ins.n, nn=ins.nn, nnn=ins.nnn)


class CPU:
    def __init__(self, ram, stack, framebuffer, keypad, debugger=None, quirks=None, rng=None):
        self.ram = ram
        self.stack = stack
        self.framebuffer = framebuffer
        self.keypad = keypad
        self.debugger = Debugger() if debugger is None else debugger
        self.live_debug = self.debugger.is_live()
        self.quirks = Quirks() if quirks is None else quirks
        self.rng = Random() if rng is None else rng  # Pass a seeded Random for repeatable runs

        # Quirks are read on every affected instruction, so keep them as plain attributes
        self.shift_quirks = self.quirks.shift_quirks
        self.jump_quirks = self.quirks.jump_quirks
        self.load_quirks = self.quirks.load_quirks

        # Bind handlers once, so dispatch is a single dictionary lookup
        self.instructions = {key: getattr(self, handler) for key, (handler, _) in OPCODES.items()}

        # Initialise registers
        self.v = memoryview(bytearray(16))  # Bytearrays are mutable, so this should be fast when a register is updated
        self.i = 0  # Index register

        # Initialise timers
        self.dt = 0  # Delay timer
        self.st = 0  # Sound timer

        # Initialise program counter and current opcode
        self.pc = PROGRAM_START
        self.debug_pc = PROGRAM_START
        self.opcode = 0

    def step(self):
        # Keep track of the program counter before altering it in any way for debugging purposes
        self.debug_pc = self.pc
        self.opcode = self.fetch()
        self.inc_pc()  # Program counter updates after fetch, but before execute
        self.execute(self.opcode)

    def fetch(self):
        # CHIP-8 is big-endian.  An instruction at 0xFFF takes its low byte from 0x000
        high, low = self.ram.read_wrapped(self.pc, 2)
        return (high << 8) | low

    def execute(self, opcode):
        ins = Instruction(opcode)
        handler = self.instructions.get(opcode_key(opcode))

        if handler is None:
            self._opcode_unsupported(ins)

        if self.live_debug:
            self.debugger.output(self, mnemonic(ins))

        handler(ins)

    def inc_pc(self):
        self.pc = (self.pc + 2) & ADDR_MASK

    def dec_pc(self):
        # Only used to re-run instructions (keypress wait)
        self.pc = (self.pc - 2) & ADDR_MASK

    def tick_delay(self):
        if self.dt > 0:
            self.dt -= 1

    def tick_sound(self):
        if self.st > 0:
            self.st -= 1

    def _opcode_unsupported(self, ins):
        raise CPUError(
            (
                "Emulation halted.\n\n" +
                "{}Debug info:\n" +
                "{}\n\nOpcode 0x{:04x} at address 0x{:03x} is not a CHIP-8 instruction."
            ).format(
                APP_INTRO, self.debugger.debug(self, "???", verbose=True), ins.opcode, self.debug_pc
            ),
            opcode=ins.opcode,
            address=self.debug_pc
        ) from None

    def _00E0(self, ins):  # CLS
        self.framebuffer.clear()

    def _00EE(self, ins):  # RET
        self.pc = self.stack.pop()

    def _1nnn(self, ins):  # JP addr
        self.pc = ins.nnn

    def _2nnn(self, ins):  # CALL addr
        self.stack.push(self.pc)
        self.pc = ins.nnn

    def _3xnn(self, ins):  # SE Vx, byte
        if self.v[ins.x] == ins.nn:
            self.inc_pc()

    def _4xnn(self, ins):  # SNE Vx, byte
        if self.v[ins.x] != ins.nn:
            self.inc_pc()

    def _5xy0(self, ins):  # SE Vx, Vy
        if self.v[ins.x] == self.v[ins.y]:
            self.inc_pc()

    def _6xnn(self, ins):  # LD Vx, byte
        self.v[ins.x] = ins.nn

    def _7xnn(self, ins):  # ADD Vx, byte
        # No carry flag for this one
        self.v[ins.x] = (self.v[ins.x] + ins.nn) & 0xFF

    def _8xy0(self, ins):  # LD Vx, Vy
        self.v[ins.x] = self.v[ins.y]

    def _8xy1(self, ins):  # OR Vx, Vy
        self.v[ins.x] |= self.v[ins.y]

    def _8xy2(self, ins):  # AND Vx, Vy
        self.v[ins.x] &= self.v[ins.y]

    def _8xy3(self, ins):  # XOR Vx, Vy
        self.v[ins.x] ^= self.v[ins.y]

    def _8xy4(self, ins):  # ADD Vx, Vy
        val = self.v[ins.x] + self.v[ins.y]
        self.v[ins.x] = val & 0xFF
        self.v[0xF] = int(val > 0xFF)  # Vf is set when carrying

    def _post_8xy5_8xy7(self, ins, val):  # Post-SUB/SUBN
        self.v[ins.x] = val & 0xFF
        # Vf is set when NOT borrowing, and this has to happen AFTER Vx is set, as Vf may be the destination
        self.v[0xF] = int(val >= 0)

    def _8xy5(self, ins):  # SUB Vx, Vy
        self._post_8xy5_8xy7(ins, self.v[ins.x] - self.v[ins.y])

    def _8xy6(self, ins):  # SHR Vx {, Vy}
        if self.shift_quirks:
            self.v[ins.x] = self.v[ins.y]

        val = self.v[ins.x]
        self.v[ins.x] = val >> 1
        self.v[0xF] = val & 1

    def _8xy7(self, ins):  # SUBN Vx, Vy
        self._post_8xy5_8xy7(ins, self.v[ins.y] - self.v[ins.x])

    def _8xyE(self, ins):  # SHL Vx {, Vy}
        if self.shift_quirks:
            self.v[ins.x] = self.v[ins.y]

        val = self.v[ins.x]
        self.v[ins.x] = (val << 1) & 0xFF
        self.v[0xF] = val >> 7

    def _9xy0(self, ins):  # SNE Vx, Vy
        if self.v[ins.x] != self.v[ins.y]:
            self.inc_pc()

    def _Annn(self, ins):  # LD I, addr
        self.i = ins.nnn

    def _Bnnn(self, ins):  # JP V0, addr
        # With jump quirks the register is picked out of the top nibble of the address itself
        vr = ins.x if self.jump_quirks else 0
        self.pc = (self.v[vr] + ins.nnn) & ADDR_MASK

    def _Cxnn(self, ins):  # RND Vx, byte
        # The ANDing here is intentional.  This is not a random number between 0 and 'byte' inclusive.
        self.v[ins.x] = self.rng.randint(0, 0xFF) & ins.nn

    def _Dxyn(self, ins):  # DRW Vx, Vy, nibble
        # The sprite's start always wraps, but anything hanging off the right or bottom edge is trimmed
        framebuffer = self.framebuffer
        vid_width, vid_height = framebuffer.get_vid_size()
        vx_pos = self.v[ins.x] % vid_width
        vy_pos = self.v[ins.y] % vid_height
        collided = False

        for y, spr_data in enumerate(self.ram.read_wrapped(self.i, ins.n)):
            scr_y = y + vy_pos

            if scr_y >= vid_height:
                break

            for x in range(8):
                if spr_data & (0x80 >> x) and framebuffer.xor_pixel(x + vx_pos, scr_y):
                    # Don't stop drawing.  Set the flag, and never unset it for this sprite.
                    collided = True

        self.v[0xF] = int(collided)

    def _Ex9E(self, ins):  # SKP Vx
        if self.keypad.is_key_down(self.v[ins.x] & 0xF):
            self.inc_pc()

    def _ExA1(self, ins):  # SKNP Vx
        if not self.keypad.is_key_down(self.v[ins.x] & 0xF):
            self.inc_pc()

    def _Fx07(self, ins):  # LD Vx, DT
        self.v[ins.x] = self.dt

    def _Fx0A(self, ins):  # LD Vx, K
        # Rather than blocking, step back so this instruction runs again on the next step.  Timers and the display
        # carry on being serviced by the frame driver in the meantime.
        key = self.keypad.first_key_down()

        if key is None:
            self.dec_pc()
        else:
            self.v[ins.x] = key

    def _Fx15(self, ins):  # LD DT, Vx
        self.dt = self.v[ins.x]

    def _Fx18(self, ins):  # LD ST, Vx
        self.st = self.v[ins.x]

    def _Fx1E(self, ins):  # ADD I, Vx
        # Vf is left alone
        self.i = (self.i + self.v[ins.x]) & ADDR_MASK

    def _Fx29(self, ins):  # LD F, Vx
        self.i = (FONT_LOCATION + FONT_GLYPH_SIZE * (self.v[ins.x] & 0xF)) & ADDR_MASK

    def _Fx33(self, ins):  # LD B, Vx
        val = self.v[ins.x]
        self.ram.write_wrapped(self.i, (val // 100, (val // 10) % 10, val % 10))  # Most-significant digit first

    def _post_Fx55_Fx65(self, ins):
        if self.load_quirks:
            self.i = (self.i + ins.x + 1) & ADDR_MASK

    def _Fx55(self, ins):  # LD [I], Vx
        self.ram.write_wrapped(self.i, self.v[:ins.x + 1])
        self._post_Fx55_Fx65(ins)

    def _Fx65(self, ins):  # LD Vx, [I]
        self.v[:ins.x + 1] = self.ram.read_wrapped(self.i, ins.x + 1)
        self._post_Fx55_Fx65(ins)

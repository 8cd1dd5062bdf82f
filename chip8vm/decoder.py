#!/usr/bin/env python3

"""
Instruction Decoder

Vx, Vy, byte and address fields are always in the same position throughout
all instructions, so a fetched word is split once into every field view and
the handlers pick whichever ones they need.

    nnn = address (bits 0-11)
    nn  = byte (bits 0-7)
    n   = nibble (bits 0-3)
    x/y = register (bits 8-11 / 4-7)
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class Instruction:
    __slots__ = ("opcode", "family", "x", "y", "n", "nn", "nnn")

    def __init__(self, opcode):
        self.opcode = opcode
        self.family = (opcode & 0xF000) >> 12
        self.x = (opcode & 0xF00) >> 8
        self.y = (opcode & 0xF0) >> 4
        self.n = opcode & 0xF
        self.nn = opcode & 0xFF
        self.nnn = opcode & 0xFFF

    def __repr__(self):
        return "Instruction(0x{:04x})".format(self.opcode)

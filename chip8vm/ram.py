#!/usr/bin/env python3

"""
RAM Emulator

A fixed-size bank of bytes.  There are two ways in:

    * plain reads and writes (single bytes or blocks), which are range checked
      and raise RAMError rather than silently wrapping.  These are used by the
      host side, e.g. writing the font and a program image,
    * wrapped reads and writes, which carry on from address 0 after the top of
      the bank.  These are what instructions use, since anything addressed
      through I may run off the end of memory.

Block writes are checked before anything is copied, so a rejected write leaves
memory untouched.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class RAMError(Exception):
    pass


class RAM:
    def __init__(self, mem_size):
        self.mem = memoryview(bytearray(mem_size))
        self.mem_size = mem_size

    def read(self, location):
        self.check_range(location, 1)
        return self.mem[location]

    def read_block(self, location, size=1):
        self.check_range(location, size)
        return self.mem[location:location + size]

    def write(self, location, byte):
        self.check_range(location, 1)
        self.mem[location] = byte

    def write_block(self, location, block):
        self.check_range(location, len(block))
        self.mem[location:location + len(block)] = block

    def read_wrapped(self, location, size):
        mem = self.mem
        mem_size = self.mem_size
        return bytes(mem[(location + offset) % mem_size] for offset in range(size))

    def write_wrapped(self, location, block):
        mem = self.mem
        mem_size = self.mem_size

        for offset, byte in enumerate(block):
            mem[(location + offset) % mem_size] = byte

    def check_range(self, location, size):
        if location < 0 or location + size > self.mem_size:
            raise RAMError(
                "{} byte(s) at 0x{:03x} do not fit in {} bytes of memory".format(size, location, self.mem_size)
            )

    def clear(self):
        self.mem[:] = bytes(self.mem_size)

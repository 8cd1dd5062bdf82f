#!/usr/bin/env python3

"""
Machine

Plugs RAM, the stack, the framebuffer and the keypad into a CPU, writes the
system font into low memory, and exposes the handful of calls the rest of the
world needs:

    * load(data)            - write a program image at 0x200
    * step()                - run exactly one instruction
    * tick_delay()          - count the delay timer down (once per 60Hz frame)
    * tick_sound()          - count the sound timer down (once per 60Hz frame)
    * display()             - snapshot of the 64x32 screen, one byte per pixel
    * sound_timer()         - audio should play whenever this is above zero
    * set_key(index, down)  - update one of the 16 keys

Everything lives on the instance, including the random source, so any number
of machines can run side by side.  No locking is done: callers sharing a
machine between threads must serialise every call themselves.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import RAM_SIZE, FONT_LOCATION, SYSTEM_FONT, PROGRAM_START, MAX_PROGRAM_SIZE, STACK_DEPTH
from .cpu import CPU
from .framebuffer import Framebuffer
from .keypad import Keypad
from .ram import RAM, RAMError
from .stack import Stack


class Machine:
    def __init__(self, quirks=None, rng=None, debugger=None, stack_depth=STACK_DEPTH):
        self.ram = RAM(RAM_SIZE)
        self.ram.write_block(FONT_LOCATION, SYSTEM_FONT)
        self.stack = Stack(stack_depth)
        self.framebuffer = Framebuffer()
        self.keypad = Keypad()
        self.cpu = CPU(self.ram, self.stack, self.framebuffer, self.keypad, debugger=debugger, quirks=quirks, rng=rng)

    def load(self, data):
        # Refuse before writing anything, so a failed load leaves memory as it was
        if len(data) > MAX_PROGRAM_SIZE:
            raise RAMError(
                "Program is {} bytes, but only {} bytes are available from 0x{:03x}".format(
                    len(data), MAX_PROGRAM_SIZE, PROGRAM_START
                )
            )

        self.ram.write_block(PROGRAM_START, data)

    def step(self):
        self.cpu.step()

    def tick_delay(self):
        self.cpu.tick_delay()

    def tick_sound(self):
        self.cpu.tick_sound()

    def display(self):
        return self.framebuffer.get_pixels()

    def display_changed(self):
        # True once after each draw or clear
        return self.framebuffer.take_changes()

    def delay_timer(self):
        return self.cpu.dt

    def sound_timer(self):
        return self.cpu.st

    def set_key(self, index, down):
        self.keypad.set_key(index, down)

    def is_key_down(self, index):
        return self.keypad.is_key_down(index)

    def get_keypad(self):
        return self.keypad

    def get_vid_size(self):
        return self.framebuffer.get_vid_size()

#!/usr/bin/env python3

"""
Framebuffer Emulator

Programs cannot write directly into video RAM.  Instead, sprites are drawn to
the screen using an XOR method, and the screen can be cleared as a whole.  Those
are the only two ways the display is ever changed.

Each pixel is held as a whole byte (0 or 1) in a RAM bank, row-major, so a
snapshot of the bank is directly usable by a renderer.  Nothing here knows
about the host display: the frame driver takes a snapshot at 60Hz and only
passes it on when the 'changed' flag says something was drawn since the last
one.

Pixels placed past the right or bottom edge are clipped rather than wrapped.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import VID_WIDTH, VID_HEIGHT
from .ram import RAM


class Framebuffer:
    def __init__(self, vid_width=VID_WIDTH, vid_height=VID_HEIGHT):
        self.vid_width = vid_width
        self.vid_height = vid_height
        self.vid_size = vid_width * vid_height
        self.vram = RAM(self.vid_size)
        self.changed = True  # Force the very first frame to be drawn

    def clear(self):
        self.vram.clear()
        self.changed = True

    def xor_pixel(self, x, y):
        # Returns flagging any collision, or None if the pixel falls off the screen
        if x >= self.vid_width or y >= self.vid_height:
            return None

        vram_loc = y * self.vid_width + x
        pixel = self.vram.read(vram_loc)
        self.vram.write(vram_loc, pixel ^ 1)
        self.changed = True

        return pixel != 0

    def get_pixel(self, x, y):
        return self.vram.read(y * self.vid_width + x)

    def get_pixels(self):
        # Immutable copy, so taking two snapshots with no draw in between compares equal
        return bytes(self.vram.read_block(0, self.vid_size))

    def take_changes(self):
        changed = self.changed
        self.changed = False
        return changed

    def get_vid_size(self):
        return self.vid_width, self.vid_height

#!/usr/bin/env python3

"""
Keypad State

The 16-key hex keypad ("0" to "F") is owned by the machine.  Host input
plugins translate their own events into set_key calls, and the CPU only ever
reads the state back, either to skip on a key or to wait for one.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import NUM_KEYS


class KeypadError(Exception):
    pass


class Keypad:
    def __init__(self):
        self.key_down = [False] * NUM_KEYS

    def check_key(self, key):
        if not 0 <= key < NUM_KEYS:
            raise KeypadError("Key 0x{:x} is out of range, keys 0x0-0xf are available".format(key))

    def set_key(self, key, down):
        self.check_key(key)
        self.key_down[key] = bool(down)

    def is_key_down(self, key):
        self.check_key(key)
        return self.key_down[key]

    def first_key_down(self):
        # Lowest-numbered key held, or None
        for key, down in enumerate(self.key_down):
            if down:
                return key

        return None

    def release_all(self):
        self.key_down = [False] * NUM_KEYS

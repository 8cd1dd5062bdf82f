#!/usr/bin/env python3

"""
Curses TTY Terminal Input Plugin

Uses a thread to trap Terminal inputs and redirects them to the emulator.  Note
that standard TTY Terminals only understand characters, they do not know when
an actual key is 'pressed' or 'released'.

What we can do is assume a key is held for a very short time, and then take
advantage of keyboard repeats to fake a 'press' and 'release'.  The last time a
character corresponding to a key has been 'seen' is stored.  If it was last
seen a long time ago (when checked), then it has almost certainly been
released.

The thread never touches the keypad itself.  Characters are passed back through
a queue, and the keypad is only written from process_messages, on the thread
that is also stepping the machine.

We will also quit if ESC (char 27) or CTRL+C (char 3) is detected.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import queue
from threading import Thread
from time import monotonic
from .i_null import Inputs as InputsBase
from ..constants import NUM_KEYS

# Terminals don't have separate key press/release, so we have to pause after a character is seen.
KEYBOARD_FAKE_KEYDOWN_TIME = 0.2
QUIT_CHARS = (27, 3)  # ESC, CTRL+C


def input_thread(thread_quitter_queue, input_queue, keymap_dict, curses_screen):
    while thread_quitter_queue.empty():
        # This blocks, so the thread won't see the quit message until at least one key is pressed.  As a daemon
        # thread, it is terminated when the main thread shuts down anyway.
        char = curses_screen.getch()

        if char < 0:
            continue

        char = ord(chr(char).lower())

        if char in QUIT_CHARS:
            input_queue.put(None, block=True)
            break

        hex_key = keymap_dict.get(char)

        if hex_key is not None:
            try:
                input_queue.put(hex_key, block=False)
            except queue.Full:
                pass


class Inputs(InputsBase):
    def __init__(self, keymap, renderer):
        self.key_timers = [0.0] * NUM_KEYS
        super().__init__(keymap, renderer, force_lowercase=True)

        self.thread_quitter_queue = queue.Queue(1)  # Used to inform the thread it should quit
        self.input_queue = queue.Queue(16)
        self.thread = Thread(
            target=input_thread,
            args=(
                self.thread_quitter_queue,
                self.input_queue,
                self.keymap_dict,
                renderer.get_curses_screen()
            ),
            daemon=True  # Terminate the thread when the main program quits, even if waiting for a keypress
        )
        self.thread.start()

    def process_messages(self, keypad):
        now = monotonic()

        while True:
            try:
                # Blocking here would lock up the main thread if nothing was pressed
                hex_key = self.input_queue.get(block=False)
            except queue.Empty:
                break

            if hex_key is None:
                return True

            self.key_timers[hex_key] = now + KEYBOARD_FAKE_KEYDOWN_TIME

        for hex_key, key_timer in enumerate(self.key_timers):
            keypad.set_key(hex_key, key_timer > now)

        return False

    def shutdown(self):
        try:
            self.thread_quitter_queue.put(None, block=False)
        except queue.Full:
            # Something else has already requested the thread quits
            pass

        super().shutdown()

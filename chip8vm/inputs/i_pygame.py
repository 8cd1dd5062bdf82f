#!/usr/bin/env python3

"""
PyGame Input Plugin

Scans the PyGame event queue for key 'press' and 'release' events and mirrors
them into the machine's keypad.  The queue should not be checked more often
than 60Hz, as constantly checking it is time consuming.

Closing the window or pressing Escape quits.  All keys are released if the
window loses focus.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import pygame
from .i_null import Inputs as InputsBase


class Inputs(InputsBase):
    def __init__(self, keymap, renderer):
        self.pygame_methods = {
            pygame.QUIT:    self._pygame_quit,
            pygame.KEYDOWN: self._pygame_keydown,
            pygame.KEYUP:   self._pygame_keyup,
            pygame.WINDOWFOCUSLOST: self._pygame_focus_lost
        }

        super().__init__(keymap, renderer)

    def process_messages(self, keypad):
        # Call PyGame method based on fast dictionary lookup of event
        quit_program = False

        for event in pygame.event.get():
            pygame_method = self.pygame_methods.get(event.type)

            if pygame_method and pygame_method(event, keypad):
                quit_program = True  # Process more events, even if planning to quit

        return quit_program

    def _pygame_quit(self, event, keypad):  # pylint: disable=unused-argument
        return True

    def _pygame_keydown(self, event, keypad):
        if event.key == pygame.K_ESCAPE:
            return True

        hex_key = self.keymap_dict.get(event.key)

        if hex_key is not None:
            keypad.set_key(hex_key, True)

        return False

    def _pygame_keyup(self, event, keypad):
        hex_key = self.keymap_dict.get(event.key)

        if hex_key is not None:
            keypad.set_key(hex_key, False)

        return False

    def _pygame_focus_lost(self, event, keypad):  # pylint: disable=unused-argument
        # Key releases are not delivered to a window without focus, so drop everything held
        keypad.release_all()
        return False

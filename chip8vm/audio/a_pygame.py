#!/usr/bin/env python3

"""
PyGame Audio Plugin

Plays the buzzer through PyGame / SDL as a looped square wave.

One period of the wave is built into an unsigned 8-bit sample at start-up, and
looped for as long as the buzzer is enabled.  Re-enabling a buzzer which is
already playing does not restart the sample.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import pygame
from .a_null import Audio as AudioBase

PLAYBACK_FREQUENCY = 44100
BUZZER_FREQUENCY = 440.0
DEFAULT_VOLUME = 0.1


def build_square_wave(playback_frequency, tone_frequency):
    # High for the first half of the period, low for the second
    period = max(2, round(playback_frequency / tone_frequency))
    half_period = period // 2
    return b"\xFF" * half_period + b"\x00" * (period - half_period)


class Audio(AudioBase):
    def __init__(self):
        pygame.mixer.pre_init(PLAYBACK_FREQUENCY, size=8, channels=1, buffer=512, allowedchanges=0)
        pygame.mixer.init()
        self.sound = pygame.mixer.Sound(buffer=build_square_wave(PLAYBACK_FREQUENCY, BUZZER_FREQUENCY))
        self.sound.set_volume(DEFAULT_VOLUME)
        super().__init__()

    def enable_buzzer(self, enabled):
        if enabled:
            if not self.buzzer_enabled:
                self.sound.play(-1)
        elif self.buzzer_enabled:
            self.sound.stop()

        super().enable_buzzer(enabled)

    def shutdown(self):
        self.sound.stop()
        pygame.mixer.quit()
        super().shutdown()

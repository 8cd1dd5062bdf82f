#!/usr/bin/env python3

"""
Frame Runner

Drives a Machine in real time.  Every 60Hz frame:

    1. host inputs are processed into the keypad (and may ask to quit),
    2. a fixed number of instructions are executed (clock speed / 60),
    3. the delay and sound timers are ticked once,
    4. the buzzer is switched on or off to follow the sound timer,
    5. the screen is passed to the renderer, if anything was drawn.

The remainder of the frame is slept away.  If the host can't keep up, the
frame schedule is reset rather than trying to catch up in a burst.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from time import perf_counter, sleep
from .constants import APP_NAME, DEFAULT_CLOCK_SPEED, FRAME_FREQ


class RunnerError(Exception):
    pass


class Runner:
    def __init__(self, machine, renderer, inputs, audio, clock_speed=DEFAULT_CLOCK_SPEED, frame_freq=FRAME_FREQ):
        if clock_speed is None:
            clock_speed = DEFAULT_CLOCK_SPEED

        if clock_speed <= 0:
            raise RunnerError("Clock speed must be at least 1 operation per second")

        self.machine = machine
        self.renderer = renderer
        self.inputs = inputs
        self.audio = audio
        self.ops_per_frame = max(1, round(clock_speed / frame_freq))
        self.frame_interval = 1.0 / frame_freq
        self.buzzer_enabled = False

        # Performance-related vars
        self.perf_counter_fps = 0
        self.perf_counter_ops = 0
        self.next_perf_report_time = 0

        self.renderer.set_resolution(*machine.get_vid_size())
        self.report_perf()

    def run(self):
        next_frame_time = perf_counter()

        while True:
            this_time = perf_counter()

            # Reporting the performance is done before a refresh, as refreshing will likely show the report
            if this_time >= self.next_perf_report_time:
                self.next_perf_report_time = int(this_time) + 1.0
                self.report_perf(self.perf_counter_fps, self.perf_counter_ops)
                self.perf_counter_fps = 0
                self.perf_counter_ops = 0

            if self.run_frame():
                return

            next_frame_time += self.frame_interval
            remaining = next_frame_time - perf_counter()

            if remaining > 0:
                sleep(remaining)
            else:
                # Lagging behind, so start the schedule afresh from now
                next_frame_time = perf_counter()

    def run_frame(self):
        # Returns True if the host has asked to quit
        machine = self.machine

        if self.inputs.process_messages(machine.get_keypad()):
            return True

        for _ in range(self.ops_per_frame):
            machine.step()

        machine.tick_delay()
        machine.tick_sound()
        self._update_buzzer(machine.sound_timer() > 0)

        if machine.display_changed():
            self.renderer.draw(machine.display())

        self.renderer.refresh_display()
        self.perf_counter_fps += 1
        self.perf_counter_ops += self.ops_per_frame
        return False

    def _update_buzzer(self, enabled):
        # Only tell the audio plugin about changes, since some (Curses) beep every time they're enabled
        if enabled != self.buzzer_enabled:
            self.audio.enable_buzzer(enabled)
            self.buzzer_enabled = enabled

    def report_perf(self, fps=0, ops=0):
        self.renderer.set_title("{} - {} FPS, {} OPS".format(APP_NAME, fps, ops))

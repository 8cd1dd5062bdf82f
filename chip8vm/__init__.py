#!/usr/bin/env python3

"""
Main Startup Module

Simply call main(args) to start the emulator, replacing args with a dictionary
of options.  This can be done via the Terminal or GUI.

Missing options, or options set to None, fall back to their defaults.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import APP_INTRO, APP_COPYRIGHT, DEFAULT_KEYMAP
from .debugger import Debugger
from .hostio import Loader
from .machine import Machine
from .quirks import Quirks
from .runner import Runner


class StartupError(Exception):
    pass


def select_plugins(opt_renderer, mute_audio):
    # Returns (Renderer, Inputs, Audio) classes.  If no renderer is given, try PyGame first, then Curses.
    # pylint: disable=unused-import, import-outside-toplevel
    auto_select_renderer = opt_renderer is None

    if auto_select_renderer or opt_renderer == "pygame":
        try:
            import pygame  # noqa: F401
        except ImportError:
            if not auto_select_renderer:
                raise StartupError("PyGame does not appear to be installed.") from None

            opt_renderer = "curses"
        else:
            from .inputs.i_pygame import Inputs
            from .renderers.r_pygame import Renderer

            if mute_audio:
                from .audio.a_null import Audio
            else:
                from .audio.a_pygame import Audio

            return Renderer, Inputs, Audio

    if opt_renderer == "curses":
        try:
            import curses  # noqa: F401
        except ImportError:
            if auto_select_renderer:
                raise StartupError("Neither PyGame nor Curses (or Windows-Curses) appear to be installed.") from None

            raise StartupError("Curses (or Windows-Curses) does not appear to be installed.") from None

        from .inputs.i_curses import Inputs
        from .renderers.r_curses import Renderer

        # Terminals can handle fixed-length beeps, but they get annoying, so they're muted unless asked for
        if mute_audio or mute_audio is None:
            from .audio.a_null import Audio
        else:
            from .audio.a_curses import Audio

        return Renderer, Inputs, Audio

    if opt_renderer == "null":
        from .inputs.i_null import Inputs
        from .renderers.r_null import Renderer
        from .audio.a_null import Audio

        return Renderer, Inputs, Audio

    raise StartupError("Unknown renderer '{}'.".format(opt_renderer))


def main(args):
    print("".join((APP_INTRO, APP_COPYRIGHT)))
    Renderer, Inputs, Audio = select_plugins(args.get("renderer"), args.get("mute"))

    # Set up debugger and live output if necessary
    debugger = Debugger()
    debugger.set_live(bool(args.get("debug")))

    # Create a new machine and write the ROM into it, before any host window is opened
    machine = Machine(quirks=Quirks.from_args(args), debugger=debugger)
    Loader().load_into(machine, args["filename"])

    renderer = Renderer(
        scale=args.get("scale"),
        pygame_palette=args.get("pygame_palette"),
        curses_cursor_mode=args.get("curses_cursor_mode") or 0
    )
    inputs = None
    audio = None

    try:
        inputs = Inputs(args.get("keymap") or DEFAULT_KEYMAP, renderer)
        audio = Audio()
        runner = Runner(machine, renderer, inputs, audio, clock_speed=args.get("clock_speed"))
        runner.run()
    finally:
        # The machine has stopped, so shut down the host frameworks.  __del__ cannot be relied upon when using PyPy
        if audio is not None:
            audio.shutdown()

        if inputs is not None:
            inputs.shutdown()

        renderer.shutdown()

#!/usr/bin/env python3

"""
Null Renderer Plugin

This serves as a base class for other rendering plugins.

This module can be used on its own as a Renderer plugin if you only want to see
debug output.  Without a renderer, performance data will also not be shown.
The most recent frame is kept, so the screen can still be inspected.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class RendererError(Exception):
    pass


class Renderer:
    def __init__(self, scale=None, **kwargs):  # pylint: disable=unused-argument
        self.scale = 1 if scale is None else scale
        self.pixels = b""
        self.title = ""
        self.refresh_needed = False
        self.set_resolution(0, 0)

    def set_resolution(self, width, height):
        self.width = width
        self.height = height
        self.pixels = bytes(width * height)

    def draw(self, pixels):
        # Pixels are one byte each (0 or 1), row-major
        self.pixels = pixels
        self.refresh_needed = True

    def refresh_display(self):
        self.refresh_needed = False

    def set_title(self, title):
        self.title = title

    def shutdown(self):
        pass

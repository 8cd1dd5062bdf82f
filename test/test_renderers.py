#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from unittest import mock
from chip8vm.constants import APP_NAME
from chip8vm.renderers import r_pygame
from chip8vm.renderers.r_null import Renderer, RendererError


class TestNullRenderer(unittest.TestCase):
    def test_null_renderer_keeps_frame(self):
        renderer = Renderer()
        renderer.set_resolution(4, 2)
        self.assertEqual(bytes(8), renderer.pixels)
        renderer.draw(b"\x01\x00\x00\x00\x00\x00\x00\x01")
        self.assertTrue(renderer.refresh_needed)
        renderer.refresh_display()
        self.assertFalse(renderer.refresh_needed)
        self.assertEqual(b"\x01\x00\x00\x00\x00\x00\x00\x01", renderer.pixels)


class TestPyGameRenderer(unittest.TestCase):
    def setUp(self):
        # No real window is opened
        patcher = mock.patch.object(r_pygame, "pygame")
        self.pygame = patcher.start()
        self.addCleanup(patcher.stop)

    def test_pygame_renderer_title(self):
        renderer = r_pygame.Renderer()
        self.assertEqual(APP_NAME, renderer.title)
        self.pygame.display.set_caption.assert_called_with(APP_NAME)
        renderer.set_title("Running")
        self.assertEqual("Running", renderer.title)

    def test_pygame_renderer_window_size(self):
        r_pygame.Renderer(scale=256)
        self.pygame.display.set_mode.assert_called_with((256, 128))

    def test_pygame_renderer_palette(self):
        renderer = r_pygame.Renderer(pygame_palette="000000,33FF66")
        self.assertEqual([b"\x00\x00\x00", b"\x33\xFF\x66"], renderer.rgb_map)
        renderer.set_resolution(2, 1)
        renderer.draw(b"\x00\x01")
        self.assertEqual("00000033ff66", renderer.rgb_buffer.hex())

    def test_pygame_renderer_bad_palette(self):
        self.assertRaises(RendererError, r_pygame.Renderer, pygame_palette="000000,111111,222222")
        self.assertRaises(RendererError, r_pygame.Renderer, pygame_palette="12345")
        self.assertRaises(RendererError, r_pygame.Renderer, pygame_palette="GGGGGG")

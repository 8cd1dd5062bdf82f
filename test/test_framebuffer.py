#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from chip8vm.framebuffer import Framebuffer


class TestFrameBuffer(unittest.TestCase):
    def setUp(self):
        self.framebuffer = Framebuffer(4, 5)

    def test_framebuffer_default_size(self):
        framebuffer = Framebuffer()
        self.assertEqual((64, 32), framebuffer.get_vid_size())
        self.assertEqual(64 * 32, len(framebuffer.get_pixels()))

    def test_framebuffer_writes(self):
        fb = self.framebuffer
        self.assertFalse(fb.xor_pixel(0, 0))
        self.assertEqual("0100000000000000000000000000000000000000", fb.get_pixels().hex())
        self.assertFalse(fb.xor_pixel(1, 1))
        self.assertEqual("0100000000010000000000000000000000000000", fb.get_pixels().hex())
        self.assertEqual(1, fb.get_pixel(1, 1))

    def test_framebuffer_collision(self):
        fb = self.framebuffer
        fb.xor_pixel(2, 3)
        self.assertTrue(fb.xor_pixel(2, 3))
        self.assertEqual(0, fb.get_pixel(2, 3))

    def test_framebuffer_clipping(self):
        fb = self.framebuffer
        self.assertIsNone(fb.xor_pixel(4, 0))
        self.assertIsNone(fb.xor_pixel(0, 5))
        self.assertEqual(bytes(20), fb.get_pixels())

    def test_framebuffer_clear(self):
        fb = self.framebuffer
        fb.xor_pixel(3, 4)
        fb.clear()
        self.assertEqual(bytes(20), fb.get_pixels())

    def test_framebuffer_changes(self):
        fb = self.framebuffer
        self.assertTrue(fb.take_changes())  # First frame is always drawn
        self.assertFalse(fb.take_changes())
        fb.xor_pixel(1, 0)
        self.assertTrue(fb.take_changes())
        self.assertFalse(fb.take_changes())
        fb.xor_pixel(7, 7)  # Clipped, so nothing changed
        self.assertFalse(fb.take_changes())
        fb.clear()
        self.assertTrue(fb.take_changes())

    def test_framebuffer_snapshot_is_stable(self):
        fb = self.framebuffer
        fb.xor_pixel(1, 2)
        first = fb.get_pixels()
        self.assertEqual(first, fb.get_pixels())
        fb.xor_pixel(1, 2)
        self.assertNotEqual(first, fb.get_pixels())

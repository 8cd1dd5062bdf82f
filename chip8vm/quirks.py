#!/usr/bin/env python3

"""
CPU Quirks
----------

Programs were written against different interpreters, which disagree on a few
instructions.  Each quirk switches one of those instructions to the alternate
behaviour.  All are disabled by default.

- Shift quirks: 8XY6/8XYE copy Vy into Vx before shifting.
- Jump quirks : BNNN jumps to NNN + Vx (x being the top nibble of NNN), rather
                than NNN + V0.
- Load quirks : FX55/FX65 leave I pointing after the last register copied.

Quirks are fixed for the lifetime of a machine.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from collections import namedtuple
from .constants import CPU_QUIRKS


QUIRK_FIELDS = ["{}_quirks".format(cpu_quirk) for cpu_quirk in CPU_QUIRKS]


class Quirks(namedtuple("Quirks", QUIRK_FIELDS, defaults=(False,) * len(QUIRK_FIELDS))):
    __slots__ = ()

    @classmethod
    def from_args(cls, args):
        # Options missing or set to None keep their defaults
        settings = {}

        for field in cls._fields:
            setting = args.get(field)

            if setting is not None:
                settings[field] = bool(setting)

        return cls(**settings)

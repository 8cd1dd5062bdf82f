#!/usr/bin/env python3

"""
Host I/O Functionality

Handles loading ROM binaries from the host file system, ready for writing into
a machine.  The system font is built in, so only programs come from files.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class Loader:
    def load_binary(self, filename):
        with open(filename, "rb") as f:
            return f.read()

    def load_into(self, machine, filename):
        # Read ROM binary and write it into the machine's RAM at the program origin
        machine.load(self.load_binary(filename))

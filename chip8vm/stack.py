#!/usr/bin/env python3

"""
Stack Emulator

The call stack is not part of system RAM, because there is no specified
location for it, and there is no stack pointer register exposed to the running
program.  A wrapped list is enough to fully emulate it.

The depth is capped (16 levels by default, as on most interpreters).  Both a
call past the cap and a return with nothing on the stack raise StackError, so
the fault is reported from the instruction that caused it instead of leaving
the program running with a corrupt program counter.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class StackError(Exception):
    pass


class Stack:
    def __init__(self, depth):
        self.return_addrs = []
        self.depth = depth

    def __len__(self):
        return len(self.return_addrs)

    def push(self, addr):
        if len(self.return_addrs) >= self.depth:
            raise StackError("Stack overflow (more than {} nested calls)".format(self.depth))

        self.return_addrs.append(addr)

    def pop(self):
        if not self.return_addrs:
            raise StackError("Stack underflow (return with no matching call)")

        return self.return_addrs.pop()

    def snapshot(self):
        # Oldest return address first.  For debugging
        return tuple(self.return_addrs)

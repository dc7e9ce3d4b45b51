"""
ABACUS Emulator — Machine Errors

Errors raised while a program is being loaded. Execution faults are not
raised out of the engine; step() reports them as a StopReason instead.
"""


class MachineError(Exception):
    """Base class for fatal machine errors raised to the caller."""
    pass


class MalformedInput(MachineError):
    """A token where an integer was expected was not an integer."""
    def __init__(self, token=None):
        self.token = token
        if token is None:
            detail = "input ended before an integer was read"
        elif len(token) > 40:
            detail = f"expected an integer, got {token[:20]!r}... ({len(token)} chars)"
        else:
            detail = f"expected an integer, got {token!r}"
        super().__init__(detail)


class WordRangeError(MachineError):
    """A value placed in memory does not fit the machine word."""
    def __init__(self, value: int, bits: int):
        self.value = value
        self.bits = bits
        super().__init__(f"Value {value} does not fit in {bits}-bit word")


class MemoryOverflow(MachineError):
    """More values supplied than memory has cells."""
    def __init__(self, capacity: int, value: int = None):
        self.capacity = capacity
        self.value = value
        super().__init__(f"Program does not fit in {capacity} cells")

"""
ABACUS Emulator — CPU Register Set

Register model for the ABACUS machine:
  ACC — signed accumulator (one machine word)
  PC  — program counter, index of the next cell to fetch

PC is deliberately not masked or wrapped: a jump may leave it anywhere and
the cycle driver checks it against the memory size before every fetch.
"""


class Registers:
    """ABACUS register set plus the executed-instruction counter."""

    __slots__ = ('ACC', 'PC', 'steps')

    def __init__(self):
        self.ACC: int = 0     # Accumulator
        self.PC: int = 0      # Program counter
        self.steps: int = 0   # Instructions executed since reset

    @property
    def zero(self) -> bool:
        return self.ACC == 0

    @property
    def positive(self) -> bool:
        return self.ACC > 0

    def display(self) -> str:
        """Format register state for trace lines."""
        return f"PC={self.PC:03d} ACC={self.ACC:+d} STEPS={self.steps}"

    def reset(self):
        """Reset CPU to power-on state."""
        self.ACC = 0
        self.PC = 0
        self.steps = 0

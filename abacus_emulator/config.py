"""
ABACUS Emulator — Machine Configuration
========================================

Sizing and behaviour knobs for one machine instance.

The defaults reproduce the ABACUS C machine exactly:
  - 256 memory cells, all zero at power-on
  - C ``int`` (32-bit signed) cells and accumulator, wraparound on overflow
  - ``-1`` ends program entry

Note: the instruction encoding (opcode = value / 100, operand = value % 100)
only reaches addresses 0..99, whatever MEMORY_SIZE is. Cells 100..255 can
be filled by the loader but never addressed by an operand.
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
#  MACHINE SIZING
# =============================================================================
MEMORY_SIZE = 256          # Cells, addresses 0..255
SENTINEL = -1              # Ends program entry, never stored
OPCODE_RADIX = 100         # instruction = opcode * 100 + operand
WORD_BITS = 32             # C int


class ConfigError(ValueError):
    """Raised when a MachineConfig field is out of range."""
    pass


@dataclass
class MachineConfig:
    """Settings for one AbacusMachine.

    Usage:
        cfg = MachineConfig(memory_size=50, checked_arithmetic=True)
        emu = AbacusMachine(config=cfg)
    """
    memory_size: int = MEMORY_SIZE
    sentinel: int = SENTINEL
    word_bits: int = WORD_BITS
    checked_arithmetic: bool = False
    color: bool = True
    max_steps: Optional[int] = None

    def __post_init__(self):
        if self.memory_size < 1:
            raise ConfigError(f"memory_size must be >= 1, got {self.memory_size}")
        if self.word_bits < 8:
            raise ConfigError(f"word_bits must be >= 8, got {self.word_bits}")
        if self.max_steps is not None and self.max_steps < 0:
            raise ConfigError(f"max_steps must be >= 0, got {self.max_steps}")

"""
ABACUS Emulator
===============
A stored-program accumulator machine: one accumulator, a program counter
and 256 signed integer cells holding both code and data.

    ┌───────────┐    ┌──────────┐    ┌──────────────────────────────┐
    │   stdin   │───>│  Loader  │───>│ Memory ── fetch/decode/exec  │
    │ (tokens)  │    │ (until   │    │   ACC, PC     ──> OUTPUT     │
    └───────────┘    │   -1)    │    └──────────────────────────────┘
          │          └──────────┘                  ^
          └──────────────── INPUT ─────────────────┘

    - stream.py:   shared integer tokenizer (loader + INPUT)
    - loader.py:   program entry into memory
    - cpu/:        registers, decoder, word arithmetic
    - mem/:        bounds-checked word memory
    - emu.py:      the machine and its step/run loop
    - console.py:  prompts and OUTPUT lines, ANSI colour optional

Instruction word: opcode * 100 + operand
    0 HALT   1 ADD   2 SUB   3 STORE  4 LOAD
    5 JUMP   6 JZ    7 JP    8 INPUT  9 OUTPUT
"""

__version__ = "1.0.0"

from .config import MachineConfig, ConfigError
from .console import Console
from .errors import MachineError, MalformedInput, MemoryOverflow, WordRangeError
from .emu import AbacusMachine, StopReason
from .loader import load_program
from .stream import TokenStream


def run_source(text: str, *, config: MachineConfig = None, out=None) -> AbacusMachine:
    """Load and run a program given as text (program, -1, then INPUT data).

    Returns the machine after it stops; inspect ``stop_reason`` and
    ``fault``. Loader errors propagate as MachineError subclasses.
    """
    config = config or MachineConfig(color=False)
    console = Console(out=out, color=config.color, prompts=False)
    emu = AbacusMachine(config=config, stream=TokenStream(text), console=console)
    emu.load_from_stream()
    emu.run()
    return emu

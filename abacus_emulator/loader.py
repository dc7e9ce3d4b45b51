"""
ABACUS Emulator — Program Loader

Reads integers from a TokenStream into memory, one per cell, starting at
address 0, until the sentinel. Values are not checked for opcode legality;
a bad instruction only matters if execution reaches it.

Capacity rule: after every cell is filled the loader still looks at the
next token. The sentinel or a clean end of input finishes loading; another
integer is one value too many and raises MemoryOverflow.
"""

import logging
from typing import Optional

from .cpu.alu import word_bounds
from .config import SENTINEL, WORD_BITS
from .console import Console
from .errors import MemoryOverflow
from .mem.memory import Memory
from .stream import TokenStream

logger = logging.getLogger(__name__)


def load_program(memory: Memory, stream: TokenStream,
                 console: Optional[Console] = None,
                 sentinel: int = SENTINEL,
                 word_bits: int = WORD_BITS) -> int:
    """Fill memory from stream. Returns the number of cells written.

    Raises:
        MalformedInput: non-integer token, or input ended early
        MemoryOverflow: more values than memory cells
    """
    if console is not None:
        console.banner()
        console.program_prompt()

    lo, hi = word_bounds(word_bits)
    addr = 0
    while True:
        if addr >= memory.size and stream.at_eof():
            logger.debug("Input ended with memory full")
            break
        value = stream.next_int(lo, hi)
        if value == sentinel:
            break
        if addr >= memory.size:
            logger.debug(f"Value {value} would be cell {addr}, memory holds {memory.size}")
            raise MemoryOverflow(memory.size, value)
        memory.write(addr, value)
        addr += 1

    logger.info(f"Loaded {addr} cells")
    return addr

"""
ABACUS Emulator — Main Emulator Class

Integrates:
  - CPU registers (regs.py)
  - Word memory (memory.py)
  - Instruction decoder (decoder.py)
  - Word arithmetic (alu.py)
  - Token stream + console for INPUT / OUTPUT

Execution model, one step():
  1. Check PC is inside memory
  2. Fetch the word at PC
  3. Decode opcode / operand, range check the operand
  4. Execute the handler
  5. PC += 1 unless the handler set PC itself

Termination reasons:
  - HALT:                 opcode 0
  - INVALID_INSTRUCTION:  opcode outside 0..9
  - INVALID_OPERAND:      operand outside [0, memory size)
  - PC_OUT_OF_BOUNDS:     a jump left PC outside memory
  - MALFORMED_INPUT:      INPUT read something that is not an integer
  - ARITHMETIC_OVERFLOW:  checked mode only
  - TIMEOUT:              step limit reached
  - BREAK:                breakpoint address hit

Nothing here exits the process. Faults come back as a StopReason with the
diagnostic text in ``fault``; a failed step leaves registers and memory
exactly as they were before it.
"""

import logging
import sys
from enum import Enum
from typing import Optional, Sequence, Set

from .config import MachineConfig
from .console import (
    Console, MSG_INVALID_INPUT, MSG_INVALID_OPERAND, MSG_PC_OUT_OF_BOUNDS,
    MSG_INVALID_INSTRUCTION, MSG_ARITHMETIC_OVERFLOW,
)
from .cpu import alu
from .cpu.alu import ArithmeticOverflow
from .cpu.decoder import (
    decode_instruction, disassemble, Decoded, IllegalInstruction, InvalidOperand,
    HALT, ADD, SUB, STORE, LOAD, JMP, JZ, JP, INPUT, OUTPUT,
)
from .cpu.regs import Registers
from .errors import MalformedInput
from .loader import load_program
from .mem.memory import Memory
from .stream import TokenStream

logger = logging.getLogger(__name__)


class StopReason(Enum):
    HALT = 'HALT'
    INVALID_INSTRUCTION = 'INVALID_INSTRUCTION'
    INVALID_OPERAND = 'INVALID_OPERAND'
    PC_OUT_OF_BOUNDS = 'PC_OUT_OF_BOUNDS'
    MALFORMED_INPUT = 'MALFORMED_INPUT'
    ARITHMETIC_OVERFLOW = 'ARITHMETIC_OVERFLOW'
    TIMEOUT = 'TIMEOUT'
    BREAK = 'BREAK'

    @property
    def is_fault(self) -> bool:
        return self in FAULTS


FAULTS = frozenset({
    StopReason.INVALID_INSTRUCTION,
    StopReason.INVALID_OPERAND,
    StopReason.PC_OUT_OF_BOUNDS,
    StopReason.MALFORMED_INPUT,
    StopReason.ARITHMETIC_OVERFLOW,
})


class AbacusMachine:
    """ABACUS accumulator machine.

    Usage:
        emu = AbacusMachine()
        emu.load([803, 903, 0])          # INPUT 03, OUTPUT 03, HALT
        result = emu.run()
        if result.is_fault:
            print(emu.fault)
    """

    def __init__(self, config: Optional[MachineConfig] = None,
                 stream: Optional[TokenStream] = None,
                 console: Optional[Console] = None):
        self.config = config or MachineConfig()

        # Core components
        self.regs = Registers()
        self.mem = Memory(self.config.memory_size, self.config.word_bits)

        # I/O
        self.stream = stream if stream is not None else TokenStream(sys.stdin)
        self.console = console if console is not None else Console(color=self.config.color)

        # Last stop
        self.stop_reason: Optional[StopReason] = None
        self.fault: Optional[str] = None

        # Breakpoints: set of PC addresses that trigger BREAK
        self._breakpoints: Set[int] = set()
        self._resume_pc: Optional[int] = None

        # Trace output
        self._trace = False
        self._trace_output = []

        self._dispatch = self._build_dispatch()

    # ══════════════════════════════════════════════
    # Loading
    # ══════════════════════════════════════════════

    def load(self, values: Sequence[int], base_addr: int = 0) -> int:
        """Place instruction words directly into memory.

        Raises MemoryOverflow or WordRangeError; memory is unchanged then.
        """
        return self.mem.load(values, base_addr)

    def load_from_stream(self, prompts: bool = True) -> int:
        """Run the program loader against this machine's input stream.

        Raises MalformedInput / MemoryOverflow on bad program input.
        """
        return load_program(
            self.mem, self.stream,
            console=self.console if prompts else None,
            sentinel=self.config.sentinel,
            word_bits=self.config.word_bits,
        )

    # ══════════════════════════════════════════════
    # Execution
    # ══════════════════════════════════════════════

    def step(self) -> Optional[StopReason]:
        """Execute one instruction. Returns StopReason if stopped, else None."""
        pc = self.regs.PC

        if not self.mem.valid(pc):
            return self._stop(StopReason.PC_OUT_OF_BOUNDS, MSG_PC_OUT_OF_BOUNDS.format(pc))

        # Breakpoint check; a resumed run steps over the one it stopped on
        if pc in self._breakpoints and self._resume_pc != pc:
            self._resume_pc = pc
            return self._stop(StopReason.BREAK)
        self._resume_pc = None

        instruction = self.mem.read(pc)

        try:
            op = decode_instruction(instruction, self.mem.size)
        except InvalidOperand as e:
            return self._stop(StopReason.INVALID_OPERAND, MSG_INVALID_OPERAND.format(e.operand))
        except IllegalInstruction as e:
            return self._stop(StopReason.INVALID_INSTRUCTION,
                              MSG_INVALID_INSTRUCTION.format(e.instruction))

        if self._trace:
            line = f"{pc:03d}: {instruction:6d}  {disassemble(instruction):12s} {self.regs.display()}"
            self._trace_output.append(line)
            logger.debug(line)

        try:
            new_pc = self._dispatch[op.opcode](op)
        except _HaltException:
            self.regs.steps += 1
            return self._stop(StopReason.HALT)
        except MalformedInput:
            return self._stop(StopReason.MALFORMED_INPUT, MSG_INVALID_INPUT)
        except ArithmeticOverflow as e:
            return self._stop(StopReason.ARITHMETIC_OVERFLOW,
                              MSG_ARITHMETIC_OVERFLOW.format(e.value))

        self.regs.PC = pc + 1 if new_pc is None else new_pc
        self.regs.steps += 1
        return None

    def run(self, max_steps: Optional[int] = None) -> StopReason:
        """Run until termination condition.

        Args:
            max_steps: instructions to execute before TIMEOUT
                       (config.max_steps if None, unbounded if both None)

        Returns:
            StopReason indicating why execution stopped
        """
        if max_steps is None:
            max_steps = self.config.max_steps

        executed = 0
        while max_steps is None or executed < max_steps:
            reason = self.step()
            if reason is not None:
                return reason
            executed += 1

        return self._stop(StopReason.TIMEOUT)

    def _stop(self, reason: StopReason, message: Optional[str] = None) -> StopReason:
        self.stop_reason = reason
        self.fault = message
        if reason.is_fault:
            logger.info(f"{reason.value} at PC={self.regs.PC}: {message}")
        else:
            logger.info(f"{reason.value} at PC={self.regs.PC} after {self.regs.steps} steps")
        return reason

    # ══════════════════════════════════════════════
    # Instruction handlers
    # ══════════════════════════════════════════════
    # Handler signature: handler(op) -> Optional[int]
    # Return None to fall through to PC + 1, or the new PC.

    def _build_dispatch(self) -> dict:
        """Build opcode → handler dispatch table."""
        return {
            HALT:   self._op_halt,
            ADD:    self._op_add,
            SUB:    self._op_sub,
            STORE:  self._op_store,
            LOAD:   self._op_load,
            JMP:    self._op_jump,
            JZ:     self._op_jz,
            JP:     self._op_jp,
            INPUT:  self._op_input,
            OUTPUT: self._op_output,
        }

    def _op_halt(self, op: Decoded):
        raise _HaltException("HALT")

    def _op_add(self, op: Decoded):
        self.regs.ACC = alu.add(self.regs.ACC, self.mem.read(op.operand),
                                self.config.word_bits, self.config.checked_arithmetic)

    def _op_sub(self, op: Decoded):
        self.regs.ACC = alu.sub(self.regs.ACC, self.mem.read(op.operand),
                                self.config.word_bits, self.config.checked_arithmetic)

    def _op_store(self, op: Decoded):
        self.mem.write(op.operand, self.regs.ACC)

    def _op_load(self, op: Decoded):
        self.regs.ACC = self.mem.read(op.operand)

    def _op_jump(self, op: Decoded):
        return op.operand

    def _op_jz(self, op: Decoded):
        if self.regs.zero:
            return op.operand
        return None

    def _op_jp(self, op: Decoded):
        if self.regs.positive:
            return op.operand
        return None

    def _op_input(self, op: Decoded):
        self.console.input_prompt()
        lo, hi = alu.word_bounds(self.config.word_bits)
        value = self.stream.next_int(lo, hi)
        self.mem.write(op.operand, value)

    def _op_output(self, op: Decoded):
        self.console.output(self.mem.read(op.operand))

    # ══════════════════════════════════════════════
    # Breakpoint API
    # ══════════════════════════════════════════════

    def add_breakpoint(self, addr: int):
        """Add a breakpoint at PC address. Execution stops when PC hits this."""
        self._breakpoints.add(addr)

    def remove_breakpoint(self, addr: int):
        self._breakpoints.discard(addr)

    def clear_breakpoints(self):
        self._breakpoints.clear()

    # ══════════════════════════════════════════════
    # Trace / Debug
    # ══════════════════════════════════════════════

    def enable_trace(self, enable: bool = True):
        """Enable instruction trace logging."""
        self._trace = enable

    def get_trace(self) -> str:
        return '\n'.join(self._trace_output)

    def clear_trace(self):
        self._trace_output.clear()

    def reset(self):
        """Full machine reset: registers, memory, breakpoints, trace."""
        self.regs.reset()
        self.mem.clear()
        self.stop_reason = None
        self.fault = None
        self._breakpoints.clear()
        self._resume_pc = None
        self._trace_output.clear()


# Internal exception for flow control
class _HaltException(Exception):
    pass

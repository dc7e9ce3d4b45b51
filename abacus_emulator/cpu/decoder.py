"""
ABACUS Emulator — Instruction Decoder

Every memory cell is a signed integer. An instruction is split as:

    opcode  = instruction / 100    (truncating toward zero)
    operand = instruction % 100    (sign of the instruction)

so 905 is OUTPUT 05, 1 is HALT with operand 01, and -105 decodes to
opcode -1 / operand -5. Operands are always memory addresses.

Decode order matters: the operand is range checked BEFORE the opcode is
looked up, so -5 (HALT, operand -5) is an invalid operand, not a halt.
"""

from typing import NamedTuple

from .alu import trunc_divmod
from ..config import OPCODE_RADIX


# ──────────────────────────────────────────────
# Opcode table
# ──────────────────────────────────────────────
# Format: opcode -> mnemonic

HALT   = 0
ADD    = 1
SUB    = 2
STORE  = 3
LOAD   = 4
JMP    = 5
JZ     = 6
JP     = 7
INPUT  = 8
OUTPUT = 9

OPCODES = {
    HALT:   'HALT',
    ADD:    'ADD',
    SUB:    'SUB',
    STORE:  'STORE',
    LOAD:   'LOAD',
    JMP:    'JUMP',
    JZ:     'JZ',
    JP:     'JP',
    INPUT:  'INPUT',
    OUTPUT: 'OUTPUT',
}


class IllegalInstruction(Exception):
    """Raised when the decoded opcode is not in OPCODES."""
    def __init__(self, instruction: int, opcode: int):
        self.instruction = instruction
        self.opcode = opcode
        super().__init__(f"Unknown opcode {opcode} in instruction {instruction}")


class InvalidOperand(Exception):
    """Raised when the decoded operand is not a valid memory address."""
    def __init__(self, instruction: int, operand: int):
        self.instruction = instruction
        self.operand = operand
        super().__init__(f"Operand {operand} of instruction {instruction} out of range")


class Decoded(NamedTuple):
    instruction: int
    opcode: int
    operand: int
    mnemonic: str


def split_instruction(instruction: int) -> tuple:
    """Return (opcode, operand) with C division semantics."""
    return trunc_divmod(instruction, OPCODE_RADIX)


def decode_instruction(instruction: int, memory_size: int) -> Decoded:
    """Decode one instruction word.

    Raises InvalidOperand if the operand is outside [0, memory_size),
    then IllegalInstruction if the opcode is unknown.
    """
    opcode, operand = split_instruction(instruction)

    if operand < 0 or operand >= memory_size:
        raise InvalidOperand(instruction, operand)

    if opcode not in OPCODES:
        raise IllegalInstruction(instruction, opcode)

    return Decoded(instruction, opcode, operand, OPCODES[opcode])


def disassemble(instruction: int) -> str:
    """Render a cell as ``MNEMONIC nn``; unknown opcodes render as data."""
    opcode, operand = split_instruction(instruction)
    if opcode in OPCODES and operand >= 0:
        if opcode == HALT:
            return 'HALT'
        return f"{OPCODES[opcode]:<6s} {operand:02d}"
    return f"DATA   {instruction}"

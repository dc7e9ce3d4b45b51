"""
ABACUS Emulator — Console Presentation

Exact texts of the ABACUS C machine, escape sequences included, so that
scripts reading its output keep working. With color=False the ANSI
sequences are dropped and the text is otherwise byte-identical.
"""

import sys
from typing import TextIO


# ANSI sequences
CYAN_BOLD_UNDERLINE = "\033[96;1;4m"
YELLOW = "\033[93m"
GREEN = "\033[92m"
RESET = "\033[0m"

# Diagnostics (stderr)
MSG_INVALID_INPUT = "!!! -- INVALID INPUT. ENTER AN INTEGER."
MSG_MEMORY_OVERFLOW = "!!! -- MEMORY OVERFLOW. MAXIMUM INSTRUCTIONS REACHED."
MSG_INVALID_OPERAND = "!!! -- INVALID OPERAND -> {}"
MSG_PC_OUT_OF_BOUNDS = "!!! -- PROGRAM COUNTER OUT OF BOUNDS -> {}"
MSG_INVALID_INSTRUCTION = "!!! -- INVALID INSTRUCTION -> {}"
MSG_ARITHMETIC_OVERFLOW = "!!! -- ARITHMETIC OVERFLOW -> {}"


class Console:
    """Prompt and result writer for one machine."""

    def __init__(self, out: TextIO = None, err: TextIO = None,
                 color: bool = True, prompts: bool = True):
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr
        self.color = color
        self.prompts = prompts

    def _c(self, seq: str) -> str:
        return seq if self.color else ""

    def _write(self, text: str):
        self.out.write(text)
        self.out.flush()

    def banner(self):
        if self.prompts:
            self._write(f"\n{self._c(CYAN_BOLD_UNDERLINE)}-- ABACUS C MACHINE --\n"
                        f"{self._c(RESET)}")

    def program_prompt(self):
        if self.prompts:
            self._write(f"\nENTER THE PROGRAM {self._c(YELLOW)}[END WITH -1] ->\n\n"
                        f"{self._c(RESET)}")

    def input_prompt(self):
        self._write("ENTER A NUMBER -> ")

    def output(self, value: int):
        self._write(f"\n{self._c(GREEN)}OUTPUT -> {value}\n\n{self._c(RESET)}")

    def error(self, message: str):
        self.err.write(message + "\n")
        self.err.flush()

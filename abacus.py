#!/usr/bin/env python3
"""
abacus — ABACUS accumulator machine CLI

Usage:
    python abacus.py [program.txt] [--memory-size N] [--checked] [--no-color]
                     [--max-steps N] [--trace] [--dump] [--verbose]
                     [--log-file PATH]

Without a program file the program is typed (or piped) on stdin, ended by
-1, and INPUT instructions keep reading the same stdin. With a program
file the file is loaded silently and INPUT reads stdin.

Exit status:
    0  HALT
    1  machine error (bad input, memory overflow, bad operand/instruction,
       PC out of bounds, arithmetic overflow)
    2  internal error or unreadable program file
    3  --max-steps reached

Examples:
    echo "803 903 0 -1 42" | python abacus.py
    python abacus.py countdown.txt --trace --no-color
"""

import argparse
import logging
import sys
import os

# Allow running from project root
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from rich.console import Console as RichConsole
from rich.table import Table

from abacus_emulator import __version__
from abacus_emulator.config import MachineConfig, ConfigError
from abacus_emulator.console import Console, MSG_INVALID_INPUT, MSG_MEMORY_OVERFLOW
from abacus_emulator.cpu.decoder import disassemble
from abacus_emulator.emu import AbacusMachine, StopReason
from abacus_emulator.errors import MalformedInput, MemoryOverflow
from abacus_emulator.log_setup import setup_logging
from abacus_emulator.stream import TokenStream

EXIT_OK = 0
EXIT_MACHINE_ERROR = 1
EXIT_INTERNAL = 2
EXIT_TIMEOUT = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="abacus",
        description="ABACUS stored-program accumulator machine",
    )
    parser.add_argument("program", nargs="?", default=None,
                        help="Program file of integer tokens (default: read stdin)")
    parser.add_argument("--memory-size", type=int, default=None,
                        help="Number of memory cells (default: 256)")
    parser.add_argument("--checked", action="store_true",
                        help="Stop on arithmetic overflow instead of wrapping")
    parser.add_argument("--no-color", action="store_true",
                        help="Omit ANSI colour sequences from output")
    parser.add_argument("--max-steps", type=int, default=None,
                        help="Stop after N instructions (exit status 3)")
    parser.add_argument("--trace", action="store_true",
                        help="Print the instruction trace to stderr when stopped")
    parser.add_argument("--dump", action="store_true",
                        help="Print registers and non-zero memory to stderr when stopped")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log loader/engine details to stderr")
    parser.add_argument("--log-file", default=None,
                        help="Also write a DEBUG log to this file")
    parser.add_argument("--version", action="version",
                        version=f"abacus {__version__}")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging(
        console_level=logging.DEBUG if args.verbose else logging.WARNING,
        log_file=args.log_file,
    )

    try:
        config = MachineConfig(
            checked_arithmetic=args.checked,
            color=not args.no_color,
            max_steps=args.max_steps,
            **({"memory_size": args.memory_size} if args.memory_size is not None else {}),
        )
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INTERNAL

    console = Console(color=config.color, prompts=args.program is None)
    stdin_stream = TokenStream(sys.stdin)

    if args.program:
        try:
            with open(args.program, "r", encoding="utf-8") as f:
                program_stream = TokenStream(f.read())
        except OSError as e:
            print(f"Error reading {args.program}: {e}", file=sys.stderr)
            return EXIT_INTERNAL
        except UnicodeDecodeError:
            console.error(MSG_INVALID_INPUT)
            return EXIT_MACHINE_ERROR
    else:
        program_stream = stdin_stream

    emu = AbacusMachine(config=config, stream=program_stream, console=console)
    if args.trace:
        emu.enable_trace()

    try:
        emu.load_from_stream()
    except MalformedInput:
        console.error(MSG_INVALID_INPUT)
        return EXIT_MACHINE_ERROR
    except MemoryOverflow:
        console.error(MSG_MEMORY_OVERFLOW)
        return EXIT_MACHINE_ERROR

    # INPUT always reads stdin, even when the program came from a file
    emu.stream = stdin_stream

    try:
        reason = emu.run()
    except Exception as e:
        print(f"Internal emulator error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return EXIT_INTERNAL

    if args.trace:
        print(emu.get_trace(), file=sys.stderr)
    if args.dump:
        _print_state(emu)

    if reason == StopReason.HALT:
        return EXIT_OK
    if reason == StopReason.TIMEOUT:
        print(f"Stopped after {emu.regs.steps} steps (--max-steps)", file=sys.stderr)
        return EXIT_TIMEOUT
    console.error(emu.fault)
    return EXIT_MACHINE_ERROR


def _print_state(emu: AbacusMachine):
    """Registers and non-zero memory cells as a table on stderr."""
    out = RichConsole(stderr=True, no_color=not emu.config.color)
    out.print(f"[bold]{emu.stop_reason.value}[/bold]  {emu.regs.display()}")

    table = Table(title="Memory (non-zero cells)")
    table.add_column("Addr", justify="right")
    table.add_column("Value", justify="right")
    table.add_column("Decoded")
    for addr, value in emu.mem.used().items():
        marker = " <PC" if addr == emu.regs.PC else ""
        table.add_row(f"{addr:03d}", str(value), disassemble(value) + marker)
    out.print(table)


if __name__ == "__main__":
    sys.exit(main())

"""
ABACUS Emulator — Flat Word Memory

N signed cells (256 by default), all zero at power-on. There are no
regions, no I/O mapping and no write protection: the program, its data and
any self-modified code live in the same array.

Python lists accept negative indices, so every access is bounds checked
explicitly; memory[-1] must never silently read the last cell.
"""

from typing import Callable, Dict, List, Optional, Sequence

from ..cpu.alu import fits_word
from ..errors import MemoryOverflow, WordRangeError


class AddressError(IndexError):
    """Raised on access outside [0, size)."""
    def __init__(self, addr: int, size: int):
        self.addr = addr
        self.size = size
        super().__init__(f"Address {addr} outside memory [0, {size})")


class Memory:
    """Word-addressable memory with write watchpoints and snapshots."""

    def __init__(self, size: int = 256, word_bits: int = 32):
        self.size = size
        self.word_bits = word_bits
        self._cells: List[int] = [0] * size

        # Watchpoints: addr → [callback(addr, old_val, new_val)]
        self._watchpoints: Dict[int, List[Callable]] = {}

    def __len__(self) -> int:
        return self.size

    def valid(self, addr: int) -> bool:
        return 0 <= addr < self.size

    def _check(self, addr: int):
        if not self.valid(addr):
            raise AddressError(addr, self.size)

    # --- Core read/write ---

    def read(self, addr: int) -> int:
        self._check(addr)
        return self._cells[addr]

    def write(self, addr: int, value: int):
        """Write a word. Watchpoint callbacks fire before the cell changes."""
        self._check(addr)
        old = self._cells[addr]
        for cb in self._watchpoints.get(addr, ()):
            cb(addr, old, value)
        self._cells[addr] = value

    # --- Bulk load ---

    def load(self, values: Sequence[int], base_addr: int = 0) -> int:
        """Copy values into consecutive cells starting at base_addr.

        Raises MemoryOverflow if they would run past the last cell, or
        WordRangeError if a value does not fit the word; memory is left
        untouched in either case. Returns the count written.
        """
        self._check(base_addr)
        if base_addr + len(values) > self.size:
            raise MemoryOverflow(self.size)
        for value in values:
            if not fits_word(value, self.word_bits):
                raise WordRangeError(value, self.word_bits)
        for i, value in enumerate(values):
            self._cells[base_addr + i] = value
        return len(values)

    def clear(self):
        self._cells = [0] * self.size

    # --- Watchpoints ---

    def add_watchpoint(self, addr: int, callback: Callable):
        """Call callback(addr, old_val, new_val) on every write to addr."""
        self._check(addr)
        self._watchpoints.setdefault(addr, []).append(callback)

    def remove_watchpoint(self, addr: int, callback: Optional[Callable] = None):
        """Remove a watchpoint. If callback is None, removes all on that addr."""
        if addr in self._watchpoints:
            if callback is None:
                del self._watchpoints[addr]
            else:
                self._watchpoints[addr] = [
                    cb for cb in self._watchpoints[addr] if cb != callback
                ]

    # --- Snapshots ---

    def snapshot(self, start: int = 0, end: Optional[int] = None) -> tuple:
        """Copy of cells start..end inclusive (whole memory by default)."""
        if end is None:
            end = self.size - 1
        return tuple(self._cells[start:end + 1])

    @staticmethod
    def diff_snapshots(snap_a: Sequence[int], snap_b: Sequence[int],
                       base_addr: int = 0) -> Dict[int, tuple]:
        """Compare two snapshots, return {addr: (old, new)} for changes."""
        changes = {}
        for i in range(min(len(snap_a), len(snap_b))):
            if snap_a[i] != snap_b[i]:
                changes[base_addr + i] = (snap_a[i], snap_b[i])
        return changes

    # --- Dump ---

    def used(self) -> Dict[int, int]:
        """Non-zero cells as {addr: value}."""
        return {addr: v for addr, v in enumerate(self._cells) if v != 0}

    def dump(self, start: int = 0, length: Optional[int] = None,
             per_line: int = 10) -> str:
        """Decimal dump, ten cells per line."""
        if length is None:
            length = self.size - start
        end = min(start + length, self.size)
        lines = []
        for addr in range(start, end, per_line):
            row = ' '.join(f'{v:6d}' for v in self._cells[addr:min(addr + per_line, end)])
            lines.append(f'{addr:03d}  {row}')
        return '\n'.join(lines)

"""
ABACUS Emulator — Decoder, ALU, Memory and Config Tests
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from abacus_emulator.config import MachineConfig, ConfigError
from abacus_emulator.cpu import alu
from abacus_emulator.cpu.decoder import (
    decode_instruction, disassemble, split_instruction,
    IllegalInstruction, InvalidOperand, OPCODES,
)
from abacus_emulator.errors import MemoryOverflow, WordRangeError
from abacus_emulator.mem.memory import Memory, AddressError


class TestSplit:

    def test_positive(self):
        assert split_instruction(905) == (9, 5)
        assert split_instruction(1) == (0, 1)
        assert split_instruction(9950) == (99, 50)

    def test_truncates_toward_zero(self):
        """C semantics, not Python floor division."""
        assert split_instruction(-105) == (-1, -5)
        assert split_instruction(-5) == (0, -5)
        assert split_instruction(-100) == (-1, 0)

    def test_trunc_divmod_identity(self):
        for a in (-1234, -99, -1, 0, 1, 99, 1234):
            for b in (-7, 3, 100):
                q, r = alu.trunc_divmod(a, b)
                assert q * b + r == a
                assert r == 0 or (r < 0) == (a < 0)


class TestDecode:

    def test_mnemonics(self):
        assert decode_instruction(105, 256).mnemonic == 'ADD'
        assert decode_instruction(505, 256).mnemonic == 'JUMP'
        assert decode_instruction(605, 256).mnemonic == 'JZ'
        assert decode_instruction(705, 256).mnemonic == 'JP'
        assert decode_instruction(0, 256).mnemonic == 'HALT'
        assert sorted(OPCODES) == list(range(10))

    def test_fields(self):
        op = decode_instruction(342, 256)
        assert (op.opcode, op.operand, op.mnemonic) == (3, 42, 'STORE')

    def test_operand_checked_before_opcode(self):
        """Bad operand wins even when the opcode is also bad."""
        with pytest.raises(InvalidOperand):
            decode_instruction(-9950, 256)

    def test_operand_limit_follows_memory_size(self):
        decode_instruction(409, 10)
        with pytest.raises(InvalidOperand) as exc:
            decode_instruction(410, 10)
        assert exc.value.operand == 10

    def test_illegal(self):
        with pytest.raises(IllegalInstruction) as exc:
            decode_instruction(1234, 256)
        assert exc.value.opcode == 12

    def test_disassemble(self):
        assert disassemble(0) == 'HALT'
        assert disassemble(905) == 'OUTPUT 05'
        assert disassemble(612) == 'JZ     12'
        assert disassemble(9950) == 'DATA   9950'
        assert disassemble(-5) == 'DATA   -5'


class TestALU:

    def test_wrap(self):
        assert alu.wrap_word(2 ** 31) == -2 ** 31
        assert alu.wrap_word(-2 ** 31 - 1) == 2 ** 31 - 1
        assert alu.wrap_word(5) == 5
        assert alu.wrap_word(200, bits=8) == -56

    def test_checked(self):
        assert alu.add(1, 2, checked=True) == 3
        with pytest.raises(alu.ArithmeticOverflow):
            alu.add(2 ** 31 - 1, 1, checked=True)
        with pytest.raises(alu.ArithmeticOverflow):
            alu.sub(-2 ** 31, 1, checked=True)

    def test_bounds(self):
        assert alu.word_bounds(8) == (-128, 127)
        assert alu.fits_word(127, 8)
        assert not alu.fits_word(128, 8)


class TestMemory:

    def test_zeroed(self):
        mem = Memory()
        assert len(mem) == 256
        assert mem.used() == {}

    def test_negative_address_rejected(self):
        """A list would happily read index -1; memory must not."""
        mem = Memory(4)
        with pytest.raises(AddressError):
            mem.read(-1)
        with pytest.raises(AddressError):
            mem.write(4, 1)

    def test_load_overflow_leaves_memory(self):
        mem = Memory(2)
        with pytest.raises(MemoryOverflow):
            mem.load([1, 2, 3])
        assert mem.used() == {}

    def test_load_checks_word_range(self):
        mem = Memory(8, word_bits=8)
        mem.load([127, -128])
        with pytest.raises(WordRangeError) as exc:
            mem.load([1, 128], base_addr=2)
        assert (exc.value.value, exc.value.bits) == (128, 8)
        assert mem.used() == {0: 127, 1: -128}

    def test_remove_one_watchpoint(self):
        mem = Memory(4)
        seen_a, seen_b = [], []
        cb_a = lambda addr, old, new: seen_a.append(new)
        cb_b = lambda addr, old, new: seen_b.append(new)
        mem.add_watchpoint(2, cb_a)
        mem.add_watchpoint(2, cb_b)
        mem.write(2, 1)
        mem.remove_watchpoint(2, cb_a)
        mem.write(2, 2)
        assert seen_a == [1]
        assert seen_b == [1, 2]

    def test_remove_all_watchpoints(self):
        mem = Memory(4)
        seen = []
        mem.add_watchpoint(1, lambda addr, old, new: seen.append(new))
        mem.add_watchpoint(1, lambda addr, old, new: seen.append(-new))
        mem.remove_watchpoint(1)
        mem.remove_watchpoint(3)
        mem.write(1, 5)
        assert seen == []
        assert mem.read(1) == 5

    def test_snapshot_diff(self):
        mem = Memory()
        before = mem.snapshot()
        mem.write(3, 7)
        mem.write(200, -1)
        diff = Memory.diff_snapshots(before, mem.snapshot())
        assert diff == {3: (0, 7), 200: (0, -1)}

    def test_dump(self):
        mem = Memory(12)
        mem.load([901, 0])
        lines = mem.dump().splitlines()
        assert len(lines) == 2
        assert lines[0].startswith("000     901      0")
        assert lines[1].startswith("010")


class TestConfig:

    def test_defaults(self):
        cfg = MachineConfig()
        assert cfg.memory_size == 256
        assert cfg.sentinel == -1
        assert alu.word_bounds(cfg.word_bits) == (-2 ** 31, 2 ** 31 - 1)

    def test_rejects_empty_memory(self):
        with pytest.raises(ConfigError):
            MachineConfig(memory_size=0)

    def test_rejects_negative_steps(self):
        with pytest.raises(ConfigError):
            MachineConfig(max_steps=-1)

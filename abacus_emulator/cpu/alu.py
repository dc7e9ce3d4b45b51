"""
ABACUS Emulator — Word Arithmetic

The ABACUS C machine keeps every cell and the accumulator in a C ``int``.
Python ints never overflow, so the word size is modelled here:

  wrap mode (default):  results are reduced modulo 2**bits into the signed
                        range, matching two's complement hardware
  checked mode:         a result outside the signed range raises
                        ArithmeticOverflow instead of wrapping

Decoding also needs C division semantics. C truncates toward zero and the
remainder takes the sign of the dividend; Python's // and % floor instead:

  C:       -105 / 100 == -1    -105 % 100 == -5
  Python:  -105 // 100 == -2   -105 % 100 == 95
"""


class ArithmeticOverflow(Exception):
    """Raised in checked mode when a result does not fit the machine word."""
    def __init__(self, value: int, bits: int):
        self.value = value
        self.bits = bits
        super().__init__(f"Result {value} does not fit in {bits}-bit word")


def word_bounds(bits: int) -> tuple:
    """Return (min, max) of a signed word of the given width."""
    return (-(1 << (bits - 1)), (1 << (bits - 1)) - 1)


def wrap_word(value: int, bits: int = 32) -> int:
    """Reduce value into the signed range of a ``bits``-wide word."""
    mask = (1 << bits) - 1
    value &= mask
    if value & (1 << (bits - 1)):
        value -= 1 << bits
    return value


def fits_word(value: int, bits: int = 32) -> bool:
    lo, hi = word_bounds(bits)
    return lo <= value <= hi


def to_word(value: int, bits: int = 32, checked: bool = False) -> int:
    """Store a raw Python int result as a machine word."""
    if checked:
        if not fits_word(value, bits):
            raise ArithmeticOverflow(value, bits)
        return value
    return wrap_word(value, bits)


def add(a: int, b: int, bits: int = 32, checked: bool = False) -> int:
    return to_word(a + b, bits, checked)


def sub(a: int, b: int, bits: int = 32, checked: bool = False) -> int:
    return to_word(a - b, bits, checked)


def trunc_divmod(a: int, b: int) -> tuple:
    """Integer division truncating toward zero (C99 ``/`` and ``%``).

    Invariant: a == q * b + r, and r has the sign of a (or is zero).
    """
    q = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        q = -q
    r = a - q * b
    return (q, r)

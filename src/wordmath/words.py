"""Fixed-width unsigned word utilities.

Values are plain Python ints interpreted as unsigned machine words of a
given bit length. Arithmetic here truncates the way native unsigned
integers do, so the modular layer above can be written (and tested) against
real overflow at every width, including 8-bit words where the product of
two large operands always wraps.
"""

import secrets
from dataclasses import dataclass, field
from functools import lru_cache

_CHUNK_BITS = 63  # one native 64-bit signed random draw


@dataclass(frozen=True)
class WordType:
    """An unsigned integer width and its derived constants."""

    bits: int
    all_ones: int = field(init=False, repr=False)
    msb_mask: int = field(init=False, repr=False)
    half_zeros_half_ones: int = field(init=False, repr=False)
    sqrt_of_overflow: int = field(init=False, repr=False)

    def __post_init__(self):
        # Curve formulas use the literals 3, 4 and 27 as words.
        if self.bits < 8 or self.bits % 2:
            raise ValueError(f"Word width must be an even number >= 8, got {self.bits}")
        all_ones = (1 << self.bits) - 1
        half = all_ones >> (self.bits // 2)
        object.__setattr__(self, 'all_ones', all_ones)
        object.__setattr__(self, 'msb_mask', all_ones ^ (all_ones >> 1))
        object.__setattr__(self, 'half_zeros_half_ones', half)
        object.__setattr__(self, 'sqrt_of_overflow', half + 1)

    def __str__(self):
        return f"U{self.bits}"

    # -- truncating machine arithmetic -------------------------------------

    def wrap(self, value: int) -> int:
        """Drop every bit above the width (negatives wrap as two's complement)."""
        return value & self.all_ones

    def fits(self, value: int) -> bool:
        return 0 <= value <= self.all_ones

    def add(self, a: int, b: int) -> int:
        return (a + b) & self.all_ones

    def sub(self, a: int, b: int) -> int:
        return (a - b) & self.all_ones

    def mul(self, a: int, b: int) -> int:
        return (a * b) & self.all_ones

    def neg(self, a: int) -> int:
        return -a & self.all_ones

    def msb(self, value: int) -> bool:
        """True if the most significant bit is set."""
        return (value & self.msb_mask) != 0

    def signed(self, value: int) -> int:
        """Read the bit pattern as a two's-complement signed value."""
        return value - (1 << self.bits) if self.msb(value) else value

    # -- random sampling ----------------------------------------------------

    def random(self, rng=None) -> int:
        """Uniform word over the full range.

        Concatenates 63-bit chunks until the width is covered. Pass a
        random.Random instance for reproducible sequences.
        """
        result = 0
        filled = 0
        while filled < self.bits:
            chunk = rng.getrandbits(_CHUNK_BITS) if rng is not None else secrets.randbits(_CHUNK_BITS)
            result |= chunk << filled
            filled += _CHUNK_BITS
        return result & self.all_ones

    def random_below(self, max_exclusive: int, rng=None) -> int:
        """Word in [0, max_exclusive); 0 when max_exclusive is 0."""
        if max_exclusive == 0:
            return 0
        return self.random(rng) % max_exclusive

    def random_between(self, min_value: int, max_inclusive: int, rng=None) -> int:
        """Word in [min_value, max_inclusive]."""
        if max_inclusive < min_value:
            raise ValueError(
                f"max_inclusive must be >= min_value, got {max_inclusive} < {min_value}"
            )
        if min_value == 0 and max_inclusive == self.all_ones:
            return self.random(rng)
        span = self.add(self.sub(max_inclusive, min_value), 1)
        return min_value + self.random_below(span, rng)

    # -- number theory --------------------------------------------------------

    def gcd(self, a: int, b: int) -> int:
        """Greatest common divisor by Euclid's algorithm."""
        if a == 0 or b == 0:
            raise ValueError(f"GCD: one of the values {a}, {b} is zero")
        previous, current = (a, b) if a > b else (b, a)
        while True:
            remainder = previous % current
            if remainder == 0:
                return current
            previous, current = current, remainder

    def extended_gcd(self, a: int, b: int) -> tuple:
        """Return (g, coeff_a, coeff_b) with a*coeff_a + b*coeff_b == g.

        Coefficients are tracked in truncating word arithmetic, so a negative
        coefficient comes back as its two's-complement bit pattern. Use
        signed_residue() to turn it into a residue.
        """
        if a == 0 or b == 0:
            raise ValueError(f"Extended GCD: one of the values {a}, {b} is zero")

        # Each row is (remainder, coefficient of a, coefficient of b)
        if a > b:
            previous = (a, 1, 0)
            current = (b, 0, 1)
        else:
            previous = (b, 0, 1)
            current = (a, 1, 0)

        while True:
            q, remainder = divmod(previous[0], current[0])
            if remainder == 0:
                return current
            following = (
                remainder,
                self.sub(previous[1], self.mul(current[1], q)),
                self.sub(previous[2], self.mul(current[2], q)),
            )
            previous, current = current, following

    def signed_residue(self, value: int, modulus: int) -> int:
        """Reduce value mod modulus, treating a set msb as a negative number.

        Meant for the coefficients returned by extended_gcd().
        """
        if self.msb(value):
            residue = self.neg(value) % modulus
            return modulus - residue if residue != 0 else 0
        return value % modulus


@lru_cache(maxsize=None)
def word_type(bits: int) -> WordType:
    """Cached WordType for a bit length."""
    return WordType(bits)


U8 = word_type(8)
U16 = word_type(16)
U32 = word_type(32)
U64 = word_type(64)
U128 = word_type(128)


def convert(value: int, source: WordType, target: WordType) -> int:
    """Reinterpret a source word as a target word, dropping bits that don't fit.

    E.g. U16 0x0123 converts to U8 0x23.
    """
    return source.wrap(value) & target.all_ones

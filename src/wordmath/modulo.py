"""Overflow-safe modular arithmetic over fixed-width words.

Every operation works on words of the Modulo's WordType and never relies on
a product or sum that would not fit that width: sums detect the lost carry,
products fall back to double-and-add once the native product could overflow.
Results always lie in [0, modulus).
"""

import logging
from typing import Optional

from wordmath.residue import MutableResidue, Residue
from wordmath.words import U64, WordType

logger = logging.getLogger(__name__)


class ModularDivisionError(ZeroDivisionError):
    """Raised when a denominator and the modulus are not coprime.

    common_divisor carries their GCD (the modulus itself when the
    denominator is zero).
    """

    def __init__(self, common_divisor: int, message: str = ''):
        super().__init__(message)
        self.common_divisor = common_divisor


class NotQuadraticResidueError(ArithmeticError):
    """Raised when a square root is requested for a value that has none."""


class Modulo:
    """Arithmetic in Z/nZ for one modulus of a fixed word width."""

    __slots__ = ('modulus', 'word')

    def __init__(self, modulus: int, word: WordType = U64):
        if modulus == 0:
            raise ValueError("Modulus must be non-zero")
        if not word.fits(modulus):
            raise ValueError(f"Modulus {modulus} does not fit {word}")
        object.__setattr__(self, 'modulus', modulus)
        object.__setattr__(self, 'word', word)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __repr__(self):
        return f"Modulo({self.modulus}, {self.word})"

    def __str__(self):
        return f"mod {self.modulus}"

    def __eq__(self, other):
        if not isinstance(other, Modulo):
            return NotImplemented
        return self.modulus == other.modulus and self.word.bits == other.word.bits

    def __hash__(self):
        return hash((self.modulus, self.word.bits))

    # -- ring operations ----------------------------------------------------

    def add(self, x: int, y: int) -> int:
        """(x + y) mod n, correcting for a carry out of the word."""
        word = self.word
        n = self.modulus
        carry_correction = None
        while True:
            total = word.add(x, y) % n
            if x <= word.all_ones - y:
                return total
            # The dropped carry is worth 2**bits, i.e. (-n) mod n.
            if carry_correction is None:
                carry_correction = word.neg(n) % n
            x, y = total, carry_correction

    def negate(self, x: int) -> int:
        """(-x) mod n."""
        x %= self.modulus
        return 0 if x == 0 else self.modulus - x

    def subtract(self, x: int, y: int) -> int:
        """(x - y) mod n."""
        return self.add(x, self.negate(y))

    def multiply(self, x: int, y: int) -> int:
        """(x * y) mod n without forming an overflowing product."""
        if x == 0 or y == 0:
            return 0
        word = self.word
        fits = (x < word.sqrt_of_overflow and y < word.sqrt_of_overflow) or word.all_ones // x > y
        if fits:
            return (x * y) % self.modulus

        # Double-and-add over the smaller operand.
        if x > y:
            x, y = y, x
        result = 0
        doubled = y
        while x > 0:
            if x & 1:
                result = self.add(result, doubled)
            x >>= 1
            doubled = self.add(doubled, doubled)
        return result

    # -- field operations -----------------------------------------------------

    def inverse(self, x: int) -> int:
        """Multiplicative inverse via the extended Euclidean algorithm."""
        if x == 0:
            raise ModularDivisionError(self.modulus, f"Cannot invert zero {self}")
        if x == 1:
            return x % self.modulus

        g, coeff, _ = self.word.extended_gcd(x, self.modulus)
        if g > 1:
            raise ModularDivisionError(
                g, f"Unable to find inverse of {x}; GCD({x}, {self.modulus}) = {g}"
            )
        return self.word.signed_residue(coeff, self.modulus)

    def divide(self, x: int, y: int) -> int:
        """(x / y) mod n = x * y^(-1) mod n."""
        return self.multiply(x, self.inverse(y))

    def power(self, value: int, exponent: int) -> int:
        """value^exponent mod n; negative exponents invert the result."""
        if exponent < 0:
            return self.inverse(self.power(value, -exponent))
        if exponent == 0:
            return 1 % self.modulus
        if exponent == 1:
            return value % self.modulus

        result = 1
        square = value  # value^(2^i)
        while exponent > 0:
            if exponent & 1:
                result = self.multiply(result, square)
            exponent >>= 1
            square = self.multiply(square, square)
        return result

    # -- quadratic residues -----------------------------------------------------

    def legendre_symbol(self, a: int, p: Optional[int] = None) -> int:
        """Legendre symbol (a | p) as -1, 0 or 1; p defaults to the modulus.

        Evaluated by quadratic reciprocity, so for a composite odd p this
        is the Jacobi symbol. Only meaningful when p is an odd prime.
        """
        if p is None:
            p = self.modulus
        elif p < 1:
            raise ValueError(f"Legendre symbol needs a positive p, got {p}")
        a %= p
        sign = 1
        # Every step drops at least one bit from a*p.
        for _ in range(2 * max(self.word.bits, p.bit_length()) + 2):
            if a == 0:
                return 0
            if a == 1:
                return sign
            if a & 1 == 0:
                if p % 8 in (3, 5):
                    sign = -sign
                a >>= 1
                continue
            if (a >> 1) & 1 and (p >> 1) & 1:
                sign = -sign
            a, p = p % a, a
        raise ArithmeticError(f"Legendre symbol did not converge for {self}")

    def is_quadratic_residue(self, a: int) -> bool:
        return self.legendre_symbol(a) == 1

    def square_root(self, value: int) -> int:
        """A square root of value mod a prime modulus.

        Raises NotQuadraticResidueError if value has no square root, or if the
        modulus turns out not to be prime and no root can be produced.
        """
        n = self.modulus
        value %= n
        if value in (0, 1):
            return value
        if self.legendre_symbol(value) != 1:
            raise NotQuadraticResidueError(f"{value} is not a quadratic residue {self}")

        if n % 4 == 3:
            root = self.power(value, (n >> 2) + 1)
        elif n % 8 == 5:
            m = n >> 3
            root = self.power(value, m + 1)
            if self.multiply(root, root) != value:
                root = self.multiply(root, self.power(2, 2 * m + 1))
        else:
            root = self._tonelli_shanks(value)

        if self.multiply(root, root) != value:
            raise NotQuadraticResidueError(f"No square root of {value} found {self}; is the modulus prime?")
        return root

    def _tonelli_shanks(self, value: int) -> int:
        n = self.modulus
        # n - 1 = 2^s * q with q odd
        q = n - 1
        s = 0
        while q and q & 1 == 0:
            s += 1
            q >>= 1
        if s == 0:
            raise NotQuadraticResidueError(f"Tonelli-Shanks needs an odd prime modulus, got {self}")

        logger.debug("Tonelli-Shanks %s: s=%d q=%d", self, s, q)
        non_residue = self._find_non_residue()

        c = self.power(non_residue, q)
        root = self.power(value, (q + 1) >> 1)
        t = self.power(value, q)
        m = s
        while t != 1:
            # Least i in (0, m) with t^(2^i) == 1
            i = 0
            probe = t
            while probe != 1:
                i += 1
                if i >= m:
                    raise NotQuadraticResidueError(f"{value} is not a quadratic residue {self}")
                probe = self.multiply(probe, probe)

            b = c
            for _ in range(m - i - 1):
                b = self.multiply(b, b)
            root = self.multiply(root, b)
            c = self.multiply(b, b)
            t = self.multiply(t, c)
            m = i
        return root

    def _find_non_residue(self) -> int:
        # Under GRH the least non-residue of a prime p is below 2 ln(p)^2.
        bound = min(self.modulus, 2 * self.word.bits * self.word.bits)
        for candidate in range(2, bound):
            if self.legendre_symbol(candidate) == -1:
                logger.debug("Quadratic non-residue %d %s", candidate, self)
                return candidate
        raise NotQuadraticResidueError(
            f"No quadratic non-residue below {bound} {self}; is the modulus prime?"
        )

    # -- residue builders -------------------------------------------------------

    def residue(self, value: int):
        """Immutable Residue bound to this modulus."""
        return Residue(value, self)

    def mutable_residue(self, value: int):
        """MutableResidue cell bound to this modulus."""
        return MutableResidue(value, self)

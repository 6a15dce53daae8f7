"""Short Weierstrass curves y^2 = x^3 + a*x + b over a prime field.

Points are Coordinates(x, y) in affine form; None is the point at infinity.
All field arithmetic goes through the curve's Modulo, so the group law is
overflow-safe at any word width.
"""

import logging
from enum import Enum
from typing import Optional

from wordmath.modulo import Modulo
from wordmath.point import AffinePoint, Coordinates
from wordmath.words import U64, WordType

logger = logging.getLogger(__name__)


class PointRelation(Enum):
    EQUAL = 1
    INVERSE = -1
    NEITHER = 0


class InconsistentPointsError(ValueError):
    """Two points share x but their y values are neither equal nor opposite."""


class EllipticCurve:
    """The curve y^2 = x^3 + a*x + b (mod p) and its point group law."""

    __slots__ = ('a', 'b', 'modp')

    def __init__(self, a: int, b: int, modulus, word: WordType = U64):
        modp = modulus if isinstance(modulus, Modulo) else Modulo(modulus, word)
        object.__setattr__(self, 'modp', modp)
        object.__setattr__(self, 'a', a % modp.modulus)
        object.__setattr__(self, 'b', b % modp.modulus)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def p(self) -> int:
        return self.modp.modulus

    def __repr__(self):
        return f"EllipticCurve({self.a}, {self.b}, {self.modp!r})"

    def __str__(self):
        return f"y^2 = x^3 + {self.a}x + {self.b} {self.modp}"

    def __eq__(self, other):
        if not isinstance(other, EllipticCurve):
            return NotImplemented
        return self.a == other.a and self.b == other.b and self.modp == other.modp

    def __hash__(self):
        return hash((self.a, self.b, self.modp))

    # -- curve equation -------------------------------------------------------

    def right_part(self, x: int) -> int:
        """x^3 + a*x + b."""
        modp = self.modp
        res = modp.multiply(x, x)        # x^2
        res = modp.add(res, self.a)      # x^2 + a
        res = modp.multiply(res, x)      # x^3 + ax
        return modp.add(res, self.b)     # x^3 + ax + b

    def left_part(self, y: int) -> int:
        """y^2."""
        return self.modp.multiply(y, y)

    def discriminant(self) -> int:
        """4a^3 + 27b^2; zero means the cubic has a repeated root."""
        modp = self.modp
        a_cubed = modp.multiply(modp.multiply(self.a, self.a), self.a)
        b_squared = modp.multiply(self.b, self.b)
        return modp.add(modp.multiply(4, a_cubed), modp.multiply(27, b_squared))

    def is_singular(self) -> bool:
        return self.discriminant() == 0

    def is_affine(self, point: Optional[Coordinates]) -> bool:
        """True if point is the identity or satisfies the curve equation.

        Coordinates must be reduced residues.
        """
        if point is None:
            return True
        x, y = point
        if not (0 <= x < self.p and 0 <= y < self.p):
            return False
        return self.left_part(y) == self.right_part(x)

    def point_from_x(self, x: int) -> Coordinates:
        """The point with this x and the smaller of its two y values.

        Raises NotQuadraticResidueError if no point has this x.
        """
        y = self.modp.square_root(self.right_part(x))
        y = min(y, self.modp.negate(y))
        return Coordinates(x % self.p, y)

    # -- group law ------------------------------------------------------------

    def inverse(self, point: Optional[Coordinates]) -> Optional[Coordinates]:
        if point is None or point[1] == 0:
            return point
        x, y = point
        return Coordinates(x, self.modp.negate(y))

    def add(self, p1: Optional[Coordinates], p2: Optional[Coordinates]) -> Optional[Coordinates]:
        """Sum of two points under the chord-and-tangent law."""
        if p1 is None:
            return p2
        if p2 is None:
            return p1

        modp = self.modp
        x1, y1 = p1
        x2, y2 = p2

        if x1 == x2:
            if y1 != y2:
                if y1 == modp.negate(y2):
                    return None
                raise InconsistentPointsError(
                    f"{p1} and {p2} have same x and different y, but are not inverse for curve {self}"
                )
            if y1 == 0:
                return None
            # d = (3*x1^2 + a) / (2*y1)
            d = modp.divide(
                modp.add(modp.multiply(3, modp.multiply(x1, x1)), self.a),
                modp.multiply(2, y1),
            )
            # x3 = d^2 - 2*x1
            x3 = modp.subtract(modp.multiply(d, d), modp.multiply(2, x1))
        else:
            # d = (y1 - y2) / (x1 - x2)
            d = modp.divide(modp.subtract(y1, y2), modp.subtract(x1, x2))
            # x3 = d^2 - x1 - x2
            x3 = modp.subtract(modp.multiply(d, d), modp.add(x1, x2))

        # y3 = d*(x1 - x3) - y1
        y3 = modp.subtract(modp.multiply(d, modp.subtract(x1, x3)), y1)
        return Coordinates(x3, y3)

    def multiply(self, k: int, point: Optional[Coordinates], order: Optional[int] = None) -> Optional[Coordinates]:
        """k * point by right-to-left double-and-add.

        If order is given, k is reduced modulo it first.
        """
        if order is not None:
            k %= order
        if point is None or k == 0:
            return None
        if k < 0:
            return self.multiply(-k, self.inverse(point))

        result = point if k & 1 else None
        doubled = point
        k >>= 1
        while k > 0:
            doubled = self.add(doubled, doubled)
            if k & 1:
                result = self.add(result, doubled)
            k >>= 1
        return result

    def relation(self, p1: Optional[Coordinates], p2: Optional[Coordinates]) -> PointRelation:
        """Whether two points are equal, inverse to each other, or neither."""
        if p1 is None or p2 is None:
            return PointRelation.EQUAL if p1 is p2 else PointRelation.NEITHER
        x1, y1 = p1
        x2, y2 = p2
        if x1 != x2:
            return PointRelation.NEITHER
        if y1 == y2:
            return PointRelation.EQUAL
        if y1 == self.modp.negate(y2):
            return PointRelation.INVERSE
        return PointRelation.NEITHER

    def random_point(self, rng=None) -> Coordinates:
        """A random point, found by sampling x until the right part is a square.

        Pass a random.Random instance for reproducible results.
        """
        word = self.modp.word
        attempts = 1
        x = word.random_below(self.p, rng)
        while not self.modp.is_quadratic_residue(self.right_part(x)):
            x = word.random_below(self.p, rng)
            attempts += 1
        logger.debug("random_point on %s: x=%d after %d attempts", self, x, attempts)
        return self.point_from_x(x)

    # -- AffinePoint builders -------------------------------------------------

    def point(self, x: Optional[int] = None, y: Optional[int] = None, order: Optional[int] = None) -> AffinePoint:
        """Validated point on this curve; no coordinates gives the identity."""
        if x is None and y is None:
            return AffinePoint(self, None, order)
        if x is None or y is None:
            raise ValueError("Both x and y are required for a finite point")
        return AffinePoint(self, Coordinates(x, y), order)

    def identity(self, order: Optional[int] = None) -> AffinePoint:
        return AffinePoint(self, None, order)

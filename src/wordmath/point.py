"""Curve-bound affine points.

An AffinePoint pairs Coordinates with the EllipticCurve they lie on and is
checked against the curve equation when built. The optional order tags the
point with the order of its subgroup; scalar multiples are then reduced
modulo that order.
"""

from typing import NamedTuple, Optional


class Coordinates(NamedTuple):
    x: int
    y: int

    def __str__(self):
        return f"({self.x},{self.y})"


class PointNotOnCurveError(ValueError):
    """Coordinates do not satisfy the curve equation."""

    def __init__(self, coordinates, curve):
        super().__init__(f"{coordinates} is not affine to {curve}")
        self.coordinates = coordinates
        self.curve = curve


class CurveMismatchError(ValueError):
    """Raised when combining points of different curves."""


class AffinePoint:
    """A point on a specific curve; None coordinates is the point at infinity."""

    __slots__ = ('curve', 'coordinates', 'order')

    def __init__(self, curve, coordinates: Optional[Coordinates] = None, order: Optional[int] = None):
        if coordinates is not None:
            coordinates = Coordinates(*coordinates)
        if not curve.is_affine(coordinates):
            raise PointNotOnCurveError(coordinates, curve)
        object.__setattr__(self, 'curve', curve)
        object.__setattr__(self, 'coordinates', coordinates)
        object.__setattr__(self, 'order', order)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def _derive(self, coordinates) -> 'AffinePoint':
        return AffinePoint(self.curve, coordinates, self.order)

    @property
    def is_identity(self) -> bool:
        return self.coordinates is None

    @property
    def x(self) -> Optional[int]:
        return None if self.coordinates is None else self.coordinates.x

    @property
    def y(self) -> Optional[int]:
        return None if self.coordinates is None else self.coordinates.y

    def __repr__(self):
        return f"AffinePoint({self.coordinates!r}, {self.curve!r})"

    def __str__(self):
        point = "Inf" if self.coordinates is None else str(self.coordinates)
        return f"{point} over {self.curve}"

    def inverse(self) -> 'AffinePoint':
        return self._derive(self.curve.inverse(self.coordinates))

    def __neg__(self):
        return self.inverse()

    def __add__(self, other):
        if isinstance(other, AffinePoint):
            if other.curve != self.curve:
                raise CurveMismatchError("Passed points belong to different elliptic curves")
            other = other.coordinates
        elif other is not None and not isinstance(other, tuple):
            return NotImplemented
        return self._derive(self.curve.add(self.coordinates, other))

    __radd__ = __add__

    def __sub__(self, other):
        if not isinstance(other, AffinePoint):
            return NotImplemented
        return self + other.inverse()

    def __mul__(self, k):
        if not isinstance(k, int):
            return NotImplemented
        return self._derive(self.curve.multiply(k, self.coordinates, self.order))

    __rmul__ = __mul__

    def relation(self, other):
        """PointRelation between this point and another point or Coordinates."""
        if isinstance(other, AffinePoint):
            other = other.coordinates
        return self.curve.relation(self.coordinates, other)

    def __eq__(self, other):
        if not isinstance(other, AffinePoint):
            return NotImplemented
        return self.curve == other.curve and self.coordinates == other.coordinates

    def __hash__(self):
        return hash((self.curve, self.coordinates))

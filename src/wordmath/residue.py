"""Residue wrappers: operator-level sugar over a Modulo.

Residue is an immutable value; MutableResidue is a cell holding one and
updating it in place. Build them with Modulo.residue() and
Modulo.mutable_residue().

MutableResidue is not thread-safe. Share one across threads only behind
your own lock.
"""

from dataclasses import dataclass


class ModulusMismatchError(ValueError):
    """Raised when combining residues of different moduli."""


def _value_of(other, modulo):
    if isinstance(other, Residue):
        if other.modulo != modulo:
            raise ModulusMismatchError(f"Modulus of {other} and mod {modulo.modulus} mismatch")
        return other.value
    if isinstance(other, int):
        return other % modulo.modulus
    return None


@dataclass(frozen=True, eq=False)
class Residue:
    """An element of Z/nZ carried together with its Modulo.

    Int operands are reduced modulo n first, so any Python int is accepted.
    A residue compares equal to every int congruent to its value, but only
    hashes like the reduced one; key dicts and sets by residues or by
    reduced ints, not by a mix of unreduced ints.
    """

    value: int
    modulo: object  # wordmath.modulo.Modulo

    def __post_init__(self):
        object.__setattr__(self, 'value', self.value % self.modulo.modulus)

    def __str__(self):
        return f"{self.value} mod {self.modulo.modulus}"

    @property
    def modulus(self) -> int:
        return self.modulo.modulus

    def with_value(self, value: int) -> 'Residue':
        return Residue(value, self.modulo)

    def with_modulo(self, modulo) -> 'Residue':
        """The same value reduced under another modulus."""
        return Residue(self.value, modulo)

    def add(self, other) -> 'Residue':
        return self.with_value(self.modulo.add(self.value, _value_of(other, self.modulo)))

    def subtract(self, other) -> 'Residue':
        return self.with_value(self.modulo.subtract(self.value, _value_of(other, self.modulo)))

    def multiply(self, other) -> 'Residue':
        return self.with_value(self.modulo.multiply(self.value, _value_of(other, self.modulo)))

    def divide(self, other) -> 'Residue':
        return self.with_value(self.modulo.divide(self.value, _value_of(other, self.modulo)))

    def negate(self) -> 'Residue':
        return self.with_value(self.modulo.negate(self.value))

    def inverse(self) -> 'Residue':
        return self.with_value(self.modulo.inverse(self.value))

    def power(self, exponent: int) -> 'Residue':
        return self.with_value(self.modulo.power(self.value, exponent))

    def __add__(self, other):
        if _value_of(other, self.modulo) is None:
            return NotImplemented
        return self.add(other)

    __radd__ = __add__

    def __sub__(self, other):
        if _value_of(other, self.modulo) is None:
            return NotImplemented
        return self.subtract(other)

    def __rsub__(self, other):
        if not isinstance(other, int):
            return NotImplemented
        return self.with_value(self.modulo.subtract(other % self.modulus, self.value))

    def __mul__(self, other):
        if _value_of(other, self.modulo) is None:
            return NotImplemented
        return self.multiply(other)

    __rmul__ = __mul__

    def __truediv__(self, other):
        if _value_of(other, self.modulo) is None:
            return NotImplemented
        return self.divide(other)

    def __rtruediv__(self, other):
        if not isinstance(other, int):
            return NotImplemented
        return self.with_value(self.modulo.divide(other % self.modulus, self.value))

    def __pow__(self, exponent):
        if not isinstance(exponent, int):
            return NotImplemented
        return self.power(exponent)

    def __neg__(self):
        return self.negate()

    def __eq__(self, other):
        if isinstance(other, Residue):
            return self.modulo == other.modulo and self.value == other.value
        if isinstance(other, int):
            return self.value == other % self.modulo.modulus
        return NotImplemented

    def __hash__(self):
        # hash(r) == hash(r.value)
        return hash(self.value)


class MutableResidue:
    """A mutable cell around a Residue; in-place operators update the cell."""

    __slots__ = ('_residue',)

    def __init__(self, value: int, modulo):
        self._residue = Residue(value, modulo)

    def __repr__(self):
        return f"MutableResidue({self._residue.value}, {self._residue.modulo!r})"

    def __str__(self):
        return str(self._residue)

    @property
    def value(self) -> int:
        return self._residue.value

    @property
    def modulo(self):
        return self._residue.modulo

    def freeze(self) -> Residue:
        """The current value as an immutable Residue."""
        return self._residue

    def set(self, value: int) -> 'MutableResidue':
        self._residue = self._residue.with_value(value)
        return self

    def set_modulo(self, modulo) -> 'MutableResidue':
        self._residue = self._residue.with_modulo(modulo)
        return self

    def add(self, other) -> 'MutableResidue':
        self._residue = self._residue.add(_unwrap(other))
        return self

    def subtract(self, other) -> 'MutableResidue':
        self._residue = self._residue.subtract(_unwrap(other))
        return self

    def multiply(self, other) -> 'MutableResidue':
        self._residue = self._residue.multiply(_unwrap(other))
        return self

    def divide(self, other) -> 'MutableResidue':
        self._residue = self._residue.divide(_unwrap(other))
        return self

    def negate(self) -> 'MutableResidue':
        self._residue = self._residue.negate()
        return self

    def inverse(self) -> 'MutableResidue':
        self._residue = self._residue.inverse()
        return self

    def power(self, exponent: int) -> 'MutableResidue':
        self._residue = self._residue.power(exponent)
        return self

    __iadd__ = add
    __isub__ = subtract
    __imul__ = multiply
    __itruediv__ = divide

    def __eq__(self, other):
        return self._residue == _unwrap(other)

    __hash__ = None


def _unwrap(other):
    return other.freeze() if isinstance(other, MutableResidue) else other

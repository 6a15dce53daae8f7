"""Tests for Residue and MutableResidue."""

import dataclasses
import pytest
from wordmath.modulo import Modulo, ModularDivisionError
from wordmath.residue import ModulusMismatchError, MutableResidue, Residue
from wordmath.words import U8, U128


@pytest.fixture
def mod7():
    return Modulo(7, U8)


class TestResidue:

    def test_builder_reduces(self, mod7):
        r = mod7.residue(10)
        assert r.value == 3
        assert r.modulus == 7
        assert r.modulo is mod7

    def test_negative_value_reduced(self, mod7):
        assert Residue(-1, mod7).value == 6

    def test_str(self, mod7):
        assert str(mod7.residue(3)) == "3 mod 7"

    def test_operators(self, mod7):
        a, b = mod7.residue(5), mod7.residue(4)
        assert a + b == 2
        assert a - b == 1
        assert b - a == 6
        assert a * b == 6
        assert a / b == 3
        assert a ** 2 == 4
        assert a ** -1 == 3
        assert -a == 2

    def test_int_operands(self, mod7):
        a = mod7.residue(5)
        assert a + 3 == 1
        assert 3 + a == 1
        assert a - 6 == 6
        assert 10 - a == 5
        assert 2 * a == 3
        assert a * 2 == 3
        assert 1 / a == 3

    def test_negative_int_operands(self, mod7):
        assert mod7.residue(0) + (-1) == 6
        assert mod7.residue(3) * -1 == 4
        assert mod7.residue(3) - (-4) == 0
        assert -1 - mod7.residue(3) == 3
        assert -1 / mod7.residue(3) == 2

    def test_int_operands_wider_than_word(self, mod7):
        assert mod7.residue(3) * 1000 == 4
        assert mod7.residue(3) + 1000 == 2
        assert 1000 * mod7.residue(3) == 4
        assert 1000 - mod7.residue(3) == 3
        assert (1 << 200) / mod7.residue(1) == pow(2, 200, 7)

    def test_named_methods(self, mod7):
        a = mod7.residue(5)
        assert a.add(4) == a + 4
        assert a.subtract(4) == a - 4
        assert a.multiply(4) == a * 4
        assert a.divide(4) == a / 4
        assert a.negate() == -a
        assert a.inverse() == 3
        assert a.power(3) == a ** 3

    def test_operations_return_new_values(self, mod7):
        a = mod7.residue(5)
        b = a + 1
        assert a.value == 5
        assert b.value == 6
        assert isinstance(b, Residue)

    def test_frozen(self, mod7):
        a = mod7.residue(5)
        with pytest.raises(dataclasses.FrozenInstanceError):
            a.value = 1

    def test_equality(self, mod7):
        assert mod7.residue(3) == mod7.residue(10)
        assert mod7.residue(3) == 10
        assert mod7.residue(3) != Modulo(11, U8).residue(3)
        assert len({mod7.residue(3), mod7.residue(10)}) == 1

    def test_hash_matches_reduced_int(self, mod7):
        assert hash(mod7.residue(10)) == hash(3)
        assert {3: "three"}[mod7.residue(10)] == "three"
        assert mod7.residue(3) in {3, 4}

    def test_with_modulo(self, mod7):
        r = Modulo(11, U8).residue(10)
        assert r.with_modulo(mod7) == mod7.residue(3)
        assert r.with_value(12) == 1

    def test_modulus_mismatch_raises(self, mod7):
        other = Modulo(11, U8).residue(1)
        with pytest.raises(ModulusMismatchError):
            mod7.residue(1) + other
        with pytest.raises(ModulusMismatchError):
            mod7.residue(1).multiply(other)

    def test_same_modulus_different_width_mismatch(self):
        with pytest.raises(ModulusMismatchError):
            Modulo(7, U8).residue(1) + Modulo(7, U128).residue(1)

    def test_unsupported_operand(self, mod7):
        with pytest.raises(TypeError):
            mod7.residue(1) + "1"
        with pytest.raises(TypeError):
            mod7.residue(1) * 1.5

    def test_division_by_non_unit_raises(self):
        with pytest.raises(ModularDivisionError) as excinfo:
            Modulo(8, U8).residue(3) / 2
        assert excinfo.value.common_divisor == 2

    def test_u128_matches_python_ints(self, rng, run_iterations):
        p = (1 << 127) - 1
        mod = Modulo(p, U128)

        def body():
            x, y = U128.random_below(p, rng), U128.random_below(p, rng)
            a, b = mod.residue(x), mod.residue(y)
            assert (a + b).value == (x + y) % p
            assert (a - b).value == (x - y) % p
            assert (a * b).value == (x * y) % p
        run_iterations(body, 5)


class TestMutableResidue:

    def test_builder(self, mod7):
        m = mod7.mutable_residue(12)
        assert isinstance(m, MutableResidue)
        assert m.value == 5
        assert m.modulo is mod7

    def test_in_place_operators_keep_identity(self, mod7):
        m = mod7.mutable_residue(5)
        cell = m
        m += 4
        assert m is cell
        assert m == 2
        m -= mod7.residue(3)
        assert m == 6
        m *= 3
        assert m == 4
        m /= 4
        assert m == 1
        assert m is cell

    def test_chained_methods(self, mod7):
        m = mod7.mutable_residue(0)
        assert m.set(3).power(2).negate() is m
        assert m.value == 5
        assert m.inverse().value == 3

    def test_mutable_operand(self, mod7):
        m = mod7.mutable_residue(2)
        m.add(mod7.mutable_residue(6))
        assert m == 1
        assert m == mod7.mutable_residue(8)

    def test_freeze_is_a_snapshot(self, mod7):
        m = mod7.mutable_residue(2)
        snapshot = m.freeze()
        m.add(1)
        assert snapshot == 2
        assert m.freeze() == 3

    def test_set_modulo(self, mod7):
        m = Modulo(11, U8).mutable_residue(10)
        m.set_modulo(mod7)
        assert m.modulo is mod7
        assert m == 3

    def test_mismatch_leaves_value(self, mod7):
        m = mod7.mutable_residue(4)
        with pytest.raises(ModulusMismatchError):
            m += Modulo(11, U8).residue(1)
        assert m.value == 4

    def test_failed_division_leaves_value(self):
        m = Modulo(8, U8).mutable_residue(3)
        with pytest.raises(ModularDivisionError):
            m /= 4
        assert m.value == 3

    def test_unhashable(self, mod7):
        with pytest.raises(TypeError):
            hash(mod7.mutable_residue(1))

    def test_str_and_repr(self, mod7):
        m = mod7.mutable_residue(3)
        assert str(m) == "3 mod 7"
        assert repr(m) == "MutableResidue(3, Modulo(7, U8))"

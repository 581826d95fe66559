"""Tests for the conformal geometric algebra helpers."""

import math

import pytest

from ga import cga
from ga.algebra import GeometricAlgebra
from ga.basis import BasisCache
from ga.cga import ConformalAlgebra
from ga.multivector import Multivector


@pytest.fixture
def conformal():
    return ConformalAlgebra()


class TestNullBasis:

    def test_origin_and_infinity_are_null(self, conformal):
        assert conformal.e_o.dot(conformal.e_o).zeroish()
        assert conformal.e_inf.dot(conformal.e_inf).zeroish()

    def test_origin_dot_infinity(self, conformal):
        assert conformal.e_o.dot(conformal.e_inf) == -1

    def test_module_constants(self):
        assert cga.ORIGIN_POINT == Multivector('0.5o0 + 0.5i0')
        assert cga.INFINITY_POINT == Multivector('-o0 + i0')


class TestPoints:

    @pytest.mark.parametrize("v", [[0, 0, 0], [1, 2, 3], [-0.5, 4]])
    def test_points_are_null(self, conformal, v):
        point = conformal.create_point(v)
        assert point.dot(point).zeroish()

    def test_origin_embeds_to_origin_point(self, conformal):
        assert conformal.create_point([0, 0]) == conformal.e_o

    def test_weight(self, conformal):
        point = conformal.create_point([1, 2, 3])
        assert conformal.conformal_weight(point) == pytest.approx(1.0)
        assert conformal.conformal_weight(point * 3) == pytest.approx(3.0)

    def test_normalize(self, conformal):
        point = conformal.create_point([1, 2, 3])
        assert conformal.normalize_point(point * 2.5) == point
        assert conformal.normalize_point(point * -2) == point

    @pytest.mark.parametrize("v", [[1, 2, 3], [0, -4], [7]])
    def test_vectorize_recovers_vector(self, conformal, v):
        point = conformal.create_point(v)
        assert conformal.vectorize_point(point) == Multivector(v)
        assert conformal.vectorize_point(point * 4) == Multivector(v)


class TestDistance:

    def test_quadrance(self, conformal):
        a = conformal.create_point([0, 0])
        b = conformal.create_point([3, 4])
        assert conformal.conformal_quadrance(a, b) == pytest.approx(25.0)

    def test_distance_ignores_weight(self, conformal):
        a = conformal.create_point([1, 1, 1])
        b = conformal.create_point([1, 1, 3])
        assert conformal.conformal_distance(a * 2, b * 0.5) == pytest.approx(2.0)

    def test_distance_to_self(self, conformal):
        a = conformal.create_point([5, -2])
        assert conformal.conformal_distance(a, a) == pytest.approx(0.0, abs=1e-9)


class TestRotation:

    def test_quarter_turn(self, conformal):
        rotor = conformal.create_rotation('o1o2', math.pi / 2)
        assert Multivector('o1').apply_rotor(rotor) == Multivector('o2')

    def test_bivector_is_normalized(self, conformal):
        assert conformal.create_rotation('3o1o2', 0.4) == conformal.create_rotation('o1o2', 0.4)

    def test_rotates_points(self, conformal):
        rotor = conformal.create_rotation('o1o2', math.pi / 2)
        point = conformal.create_point([1, 0])
        assert point.apply_rotor(rotor) == conformal.create_point([0, 1])

    def test_rotor(self, conformal):
        assert conformal.create_rotation('o2o3', 2.0).is_rotor()


class TestUnimplemented:

    @pytest.mark.parametrize("name, args", [
        ("create_translation", ([1, 0],)),
        ("create_reflection", ([1, 0],)),
        ("create_dilation", (2,)),
        ("create_inversion", ()),
    ])
    def test_raises(self, conformal, name, args):
        with pytest.raises(NotImplementedError):
            getattr(conformal, name)(*args)


class TestModuleFunctions:

    def test_aliases_use_default_model(self, conformal):
        assert cga.create_point([1, 2]) == conformal.create_point([1, 2])
        assert cga.vectorize_point(cga.create_point([1, 2])) == Multivector([1, 2])
        assert cga.conformal_distance(cga.create_point([0]), cga.create_point([2])) == \
            pytest.approx(2.0)

    def test_injected_algebra(self):
        algebra = GeometricAlgebra(BasisCache())
        conformal = ConformalAlgebra(algebra)
        point = conformal.create_point([1, 2])
        assert point.algebra is algebra
        assert conformal.vectorize_point(point) == Multivector([1, 2])

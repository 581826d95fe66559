# Ripple: Sparse Geometric Algebra for Game Physics
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.

import math
from enum import Enum
from typing import Dict, Mapping, Optional

from ga.basis import BasisCache, Blade, GLOBAL_CACHE
from ga.validation import NotABladeError, NotInvertibleError, check_finite

EPSILON = 1e-11

Components = Dict[str, float]


def zeroish(value: float) -> bool:
    """True when ``value`` is within :data:`EPSILON` of zero (NaN never is)."""
    return -EPSILON <= value <= EPSILON


class Product(Enum):
    """Products sharing one combinatorial kernel.

    All of them agree on pairs of vectors but differ for other grades,
    including scalars:

        ========= ====== ====== ==== ======== ======== ==========
        Product   o1, o1 o1, o2 2, 7 o1o2, o1 o1, o1o2 o1o2, o2o3
        ========= ====== ====== ==== ======== ======== ==========
        geometric 1      o1o2   14   -o2      o2       o1o3
        outer     0      o1o2   14   0        0        0
        inner     1      0      0    -o2      o2       o1o3
        dot       1      0      14   -o2      o2       0
        contract  1      0      14   0        o2       0
        ========= ====== ====== ==== ======== ======== ==========
    """
    GEOMETRIC = 'geometric'
    OUTER = 'outer'
    INNER = 'inner'
    DOT = 'dot'
    CONTRACT = 'contract'

    def keeps(self, left: int, right: int, result: int) -> bool:
        """Grade filter applied to each term before accumulation.

        Args:
            left (int): Grade of the left basis blade.
            right (int): Grade of the right basis blade.
            result (int): Grade of their canonical product.
        """
        if self is Product.OUTER:
            return result == left + right
        if self is Product.INNER:
            return result != left + right
        if self is Product.DOT:
            return abs(right - left) == result
        if self is Product.CONTRACT:
            return right - left == result
        return True


class GeometricAlgebra:
    """Sparse multivector kernel.

    Operates on raw component mappings from canonical basis label to
    coefficient. The :class:`~ga.multivector.Multivector` wrapper builds
    its operators on top of this kernel.

    Attributes:
        cache (BasisCache): Canonicalization memo shared by every operation.
    """

    def __init__(self, cache: Optional[BasisCache] = None):
        """Initialize the kernel.

        Args:
            cache (BasisCache, optional): Canonicalization cache. Defaults
                to the process-wide cache; pass a fresh one to isolate tests.
        """
        self.cache = GLOBAL_CACHE if cache is None else cache

    def canonicalize(self, basis: str) -> Blade:
        return self.cache.canonicalize(basis)

    def polish(self, components: Mapping[str, float]) -> Components:
        """Drop negligible coefficients and order the rest by label."""
        return {label: float(value)
                for label, value in sorted(components.items())
                if not zeroish(value)}

    def combine(self, kind: Product, a: Mapping[str, float],
                b: Mapping[str, float]) -> Components:
        """Computes a product of two component maps.

        Every pair of basis blades is concatenated and canonicalized. The
        term ``sign * a[left] * b[right]`` is accumulated under the
        canonical label whenever ``kind`` keeps that combination of grades.

        Args:
            kind (Product): Which product to compute.
            a (Mapping[str, float]): Left operand.
            b (Mapping[str, float]): Right operand.

        Returns:
            Components: Polished product.
        """
        result: Components = {}
        for left, left_value in a.items():
            left_grade = self.canonicalize(left).grade
            for right, right_value in b.items():
                blade = self.canonicalize(left + right)
                if kind is not Product.GEOMETRIC and not kind.keeps(
                        left_grade, self.canonicalize(right).grade, blade.grade):
                    continue
                result[blade.label] = (result.get(blade.label, 0.0) +
                                       blade.sign * left_value * right_value)
        return self.polish(result)

    def add(self, a: Mapping[str, float], b: Mapping[str, float]) -> Components:
        """Label-wise sum, no cross terms."""
        result = dict(a)
        for label, value in b.items():
            result[label] = result.get(label, 0.0) + value
        return self.polish(result)

    def subtract(self, a: Mapping[str, float], b: Mapping[str, float]) -> Components:
        """Label-wise difference, no cross terms."""
        result = dict(a)
        for label, value in b.items():
            result[label] = result.get(label, 0.0) - value
        return self.polish(result)

    def scale(self, a: Mapping[str, float], factor: float) -> Components:
        return self.polish({label: value * factor for label, value in a.items()})

    def conjugate(self, a: Mapping[str, float]) -> Components:
        """Computes the reversion.

        A grade-k blade changes sign when k(k-1)/2 is odd.
        """
        result = {}
        for label, value in a.items():
            k = self.canonicalize(label).grade
            result[label] = -value if (k * (k - 1) // 2) % 2 else value
        return self.polish(result)

    def grade(self, a: Mapping[str, float], homogeneous: bool = False) -> Optional[int]:
        """Returns the highest grade present.

        Args:
            a (Mapping[str, float]): Components.
            homogeneous (bool): When True, mixed-grade input has no grade.

        Returns:
            Optional[int]: The grade, or None for zero (and mixed input
            when ``homogeneous`` is set).
        """
        grades = {self.canonicalize(label).grade
                  for label, value in a.items() if not zeroish(value)}
        if not grades or (homogeneous and len(grades) > 1):
            return None
        return max(grades)

    def is_grade(self, a: Mapping[str, float], grade: int) -> bool:
        """Homogeneous grade test; the zero multivector matches every grade."""
        return (all(zeroish(value) for value in a.values()) or
                self.grade(a, homogeneous=True) == grade)

    def quadrance(self, a: Mapping[str, float]) -> float:
        """Scalar part of ``conjugate(a) * a``, the squared norm.

        Raises:
            NotInvertibleError: If ``conjugate(a) * a`` is not a scalar.
        """
        product = self.combine(Product.GEOMETRIC, self.conjugate(a), a)
        if not self.is_grade(product, 0):
            raise NotInvertibleError(
                f"Non-scalar quadrance ({format_components(product)}) "
                f"for: {format_components(a)}")
        return product.get('', 0.0)

    def inverse(self, a: Mapping[str, float]) -> Components:
        """Multiplicative inverse ``conjugate(a) / quadrance(a)``.

        Only blades and versors have an inverse of this form.

        Raises:
            NotInvertibleError: If the quadrance is zero or not scalar.
        """
        quadrance = self.quadrance(a)
        if zeroish(quadrance):
            raise NotInvertibleError(
                f"Multiplicative inverse is infinite (quadrance: {quadrance}): "
                f"{format_components(a)}")
        result = self.scale(self.conjugate(a), 1.0 / quadrance)
        check_finite(result, f"Multiplicative inverse of {format_components(a)}")
        return result

    def exp_blade(self, b: Mapping[str, float]) -> Components:
        """Exponentiates a blade into a versor.

        Three regimes depending on the scalar ``b * b``:
            - b^2 < 0: cos(theta) + sin(theta)/theta . b,  theta = sqrt(-b^2)
            - b^2 > 0: cosh(theta) + sinh(theta)/theta . b,  theta = sqrt(b^2)
            - b^2 ~= 0: 1 + b

        Raises:
            NotABladeError: If ``b * b`` is not a scalar.
        """
        square = self.combine(Product.GEOMETRIC, b, b)
        if not self.is_grade(square, 0):
            raise NotABladeError(f"This is not a blade: {format_components(b)}")
        alpha = square.get('', 0.0)
        if zeroish(alpha):
            return self.add(b, {'': 1.0})
        theta = math.sqrt(abs(alpha))
        if alpha < 0:
            scalar, factor = math.cos(theta), math.sin(theta) / theta
        else:
            scalar, factor = math.cosh(theta), math.sinh(theta) / theta
        return self.add(self.scale(b, factor), {'': scalar})


def format_coefficient(value: float) -> str:
    if float(value).is_integer() and abs(value) < 1e15:
        return str(int(value))
    return repr(float(value))


def format_components(components: Mapping[str, float]) -> str:
    """Render components as ``'2 + o1 - 3o1o2'``, or ``'0'`` when empty."""
    result = ''
    for label in sorted(components):
        value = components[label]
        if zeroish(value):
            continue
        magnitude = abs(value)
        text = '' if label and zeroish(magnitude - 1) else format_coefficient(magnitude)
        if not result:
            result = ('-' if value < 0 else '') + text + label
        else:
            result += (' - ' if value < 0 else ' + ') + text + label
    return result or '0'


DEFAULT_ALGEBRA = GeometricAlgebra()

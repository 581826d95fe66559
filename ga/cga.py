# Ripple: Sparse Geometric Algebra for Game Physics
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.

"""Conformal Geometric Algebra (CGA) utilities.

Helpers to map between Euclidean space and the conformal null cone.
"""

import math
from typing import Optional

from ga.algebra import DEFAULT_ALGEBRA, GeometricAlgebra
from ga.multivector import Multivector


class ConformalAlgebra:
    """Helper for CGA. Handles Conformal Geometric Algebra operations.

    Euclidean vectors use ``o1``, ``o2``, ... and the model adds the pair
    ``o0`` (+1) and ``i0`` (-1), from which two null vectors are built:

        e_o   = (o0 + i0) / 2
        e_inf = -o0 + i0

    so that ``e_o . e_o = e_inf . e_inf = 0`` and ``e_o . e_inf = -1``.

    Attributes:
        algebra (GeometricAlgebra): Kernel used for every multivector.
        e_o (Multivector): Origin point (null).
        e_inf (Multivector): Point at infinity (null).
    """

    def __init__(self, algebra: Optional[GeometricAlgebra] = None):
        self.algebra = DEFAULT_ALGEBRA if algebra is None else algebra
        self.e_o = Multivector({'o0': 0.5, 'i0': 0.5}, self.algebra)
        self.e_inf = Multivector({'o0': -1, 'i0': 1}, self.algebra)

    def create_point(self, v) -> Multivector:
        """Embeds a Euclidean vector into the conformal null cone.

        P(v) = v + e_o + 0.5 * v^2 * e_inf.

        Args:
            v: Euclidean vector (anything :class:`Multivector` accepts).

        Returns:
            Multivector: Conformal point with unit weight.
        """
        v = Multivector(v, self.algebra)
        return v.add(self.e_o, self.e_inf.multiply(v.quadrance(), 0.5))

    def conformal_weight(self, point) -> float:
        """Scalar ``-(e_inf . P)``, one for a normalized point."""
        return self.e_inf.inner(point).multiply(-1).scalar

    def normalize_point(self, point) -> Multivector:
        """Rescales a point to unit weight.

        Normalization: P -> P / (e_inf . P) / -1.
        """
        point = Multivector(point, self.algebra)
        return point.divide(self.e_inf.inner(point), -1)

    def vectorize_point(self, point) -> Multivector:
        """Projects a conformal point back to a Euclidean vector.

        Rejects the normalized point from the ``e_o ^ e_inf`` plane, which
        leaves the ordinary ``o1``, ``o2``, ... coordinates.
        """
        return self.normalize_point(point).reject(self.e_o.wedge(self.e_inf))

    def conformal_quadrance(self, point1, point2) -> float:
        """Squared Euclidean distance between two conformal points.

        For normalized points, P1 . P2 = -|x1 - x2|^2 / 2.
        """
        return self.normalize_point(point1).dot(
            self.normalize_point(point2)).multiply(-2).scalar

    def conformal_distance(self, point1, point2) -> float:
        """Euclidean distance between two conformal points."""
        return math.sqrt(self.conformal_quadrance(point1, point2))

    def create_rotation(self, bivector, angle: float) -> Multivector:
        """Builds a rotor turning by ``angle`` in the plane of ``bivector``.

        R = sin(-angle/2) * B / |B| + cos(-angle/2), applied as R x ~R.
        """
        bivector = Multivector(bivector, self.algebra)
        bivector = bivector.divide(bivector.norm())
        return bivector.multiply(math.sin(-angle / 2)).add(math.cos(-angle / 2))

    def create_translation(self, vector) -> Multivector:
        raise NotImplementedError("Conformal translation is not implemented")

    def create_reflection(self, vector) -> Multivector:
        raise NotImplementedError("Conformal reflection is not implemented")

    def create_dilation(self, scalar) -> Multivector:
        raise NotImplementedError("Conformal dilation is not implemented")

    def create_inversion(self) -> Multivector:
        raise NotImplementedError("Conformal inversion is not implemented")


_DEFAULT = ConformalAlgebra()

ORIGIN_POINT = _DEFAULT.e_o
INFINITY_POINT = _DEFAULT.e_inf

create_point = _DEFAULT.create_point
conformal_weight = _DEFAULT.conformal_weight
normalize_point = _DEFAULT.normalize_point
vectorize_point = _DEFAULT.vectorize_point
conformal_quadrance = _DEFAULT.conformal_quadrance
conformal_distance = _DEFAULT.conformal_distance
create_rotation = _DEFAULT.create_rotation

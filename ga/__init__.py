# Ripple: Sparse Geometric Algebra for Game Physics
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.

"""Sparse geometric algebra kernel.

Provides basis canonicalization, the multivector value type, the shared
product kernel, the conformal model and a dense tensor bridge.
"""

from .validation import ParseError, DomainError, NotInvertibleError, NotABladeError
from .basis import Blade, BasisCache, canonicalize_basis
from .algebra import EPSILON, Product, GeometricAlgebra, zeroish
from .multivector import Multivector, Polar
from .cga import (
    ConformalAlgebra,
    ORIGIN_POINT,
    INFINITY_POINT,
    create_point,
    conformal_weight,
    normalize_point,
    vectorize_point,
    conformal_quadrance,
    conformal_distance,
    create_rotation,
)
from .dense import DenseAlgebra

__all__ = [
    # errors
    "ParseError",
    "DomainError",
    "NotInvertibleError",
    "NotABladeError",
    # basis
    "Blade",
    "BasisCache",
    "canonicalize_basis",
    # algebra
    "EPSILON",
    "Product",
    "GeometricAlgebra",
    "zeroish",
    "Multivector",
    "Polar",
    # conformal
    "ConformalAlgebra",
    "ORIGIN_POINT",
    "INFINITY_POINT",
    "create_point",
    "conformal_weight",
    "normalize_point",
    "vectorize_point",
    "conformal_quadrance",
    "conformal_distance",
    "create_rotation",
    # dense
    "DenseAlgebra",
]

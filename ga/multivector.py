# Ripple: Sparse Geometric Algebra for Game Physics
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.

"""Multivector value type.

A multivector is the sum of zero or more components, each a coefficient
times zero or more ortho-normal basis vectors. Multivectors can represent
real numbers, complex numbers, quaternions, vectors and many other kinds
of mathematical objects. They are immutable, their basis labels are always
canonical and components within ``EPSILON`` of zero are dropped.

Construct one from a number, a sequence of numbers (a vector), a string,
a mapping of basis to coefficient, a :class:`Polar` descriptor or another
multivector::

    Multivector(3.14159)
    Multivector([3, -1, 2])
    Multivector("2 + o2o1")
    Multivector({'': 2, 'o2o1': 1})
    Multivector(Polar(theta=math.pi / 4, r=2))

Operators follow the usual Python conventions for geometric algebra::

    (Multivector([2, 1]) + [1, 2]) == Multivector([3, 3])   # True
    Multivector("2o1 + o2").x                              # 2.0
"""

import math
import numbers
import re
from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import NamedTuple, Optional

import numpy as np
import torch

from ga.algebra import DEFAULT_ALGEBRA, EPSILON, GeometricAlgebra, Product, format_components
from ga.validation import DomainError, NotInvertibleError, ParseError, check_finite

_OPERATOR = re.compile(r'\s*([-+])')
_TERM = re.compile(r'''
    \s*(?P<coefficient>(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][-+]?[0-9]+)?)?
    \s*(?P<basis>(?:[oOiInN](?:0|[1-9][0-9]*)|[xyzXYZ])*)
    \s*''', re.VERBOSE)


class Polar(NamedTuple):
    """Polar (``phi`` unset) or spherical direction with length ``r``."""
    theta: float
    r: float = 1.0
    phi: Optional[float] = None


def _parse(text: str, algebra: GeometricAlgebra) -> dict:
    components = {}
    if not text.strip():
        return components

    position, sign = 0, 1.0
    match = _OPERATOR.match(text)
    if match:
        sign = -1.0 if match.group(1) == '-' else 1.0
        position = match.end()

    while True:
        term = _TERM.match(text, position)
        coefficient, basis = term.group('coefficient'), term.group('basis')
        if not coefficient and not basis:
            raise ParseError(f'Unable to parse "{text}" as a multivector')
        blade = algebra.canonicalize(basis)
        components[blade.label] = (components.get(blade.label, 0.0) +
                                   sign * blade.sign * float(coefficient or 1))
        position = term.end()
        if position >= len(text):
            return components
        match = _OPERATOR.match(text, position)
        if match is None:
            raise ParseError(f'Unable to parse "{text}" as a multivector')
        sign = -1.0 if match.group(1) == '-' else 1.0
        position = match.end()


def _polar(theta: float, r: Optional[float] = None, phi: Optional[float] = None) -> dict:
    factor = 1.0 if r is None else r
    components = {}
    if phi is not None:
        components['o3'] = factor * math.sin(phi)
        factor *= math.cos(phi)
    components['o1'] = factor * math.cos(theta)
    components['o2'] = factor * math.sin(theta)
    return components


def _vector(values) -> dict:
    components = {}
    for index, value in enumerate(values):
        if not isinstance(value, numbers.Real):
            raise TypeError(f"Vector components must be real numbers, got {value!r}")
        components[f'o{index + 1}'] = float(value)
    return components


def _convert(value, algebra: GeometricAlgebra) -> dict:
    """Normalizes every accepted input form into raw components."""
    if isinstance(value, Multivector):
        return dict(value.components)
    if value is None:
        return {}
    if isinstance(value, str):
        return _parse(value, algebra)
    if isinstance(value, numbers.Real):
        return {'': float(value)}
    if isinstance(value, (np.ndarray, torch.Tensor)):
        if value.ndim == 0:
            return {'': float(value.item())}
        if value.ndim == 1:
            return _vector(value.tolist())
        raise TypeError(f"Expected a 0-d or 1-d array, got shape {tuple(value.shape)}")
    if isinstance(value, Polar):
        return _polar(value.theta, value.r, value.phi)
    if isinstance(value, Mapping):
        if 'theta' in value:
            return _polar(value['theta'], value.get('r'), value.get('phi'))
        components = {}
        for key, coefficient in value.items():
            blade = algebra.canonicalize(key)
            components[blade.label] = (components.get(blade.label, 0.0) +
                                       blade.sign * coefficient)
        return components
    if isinstance(value, Sequence):
        return _vector(value)
    raise TypeError(f"Cannot create a multivector from {type(value).__name__}")


class Multivector:
    """Immutable sparse multivector.

    Attributes:
        algebra (GeometricAlgebra): Kernel used for every operation.
        scalar (float): Coefficient of the scalar unit.
        x (float): Coefficient of ``o1``.
        y (float): Coefficient of ``o2``.
        z (float): Coefficient of ``o3``.
    """

    __slots__ = ('algebra', '_components', 'scalar', 'x', 'y', 'z')
    __hash__ = None

    def __init__(self, value=None, algebra: Optional[GeometricAlgebra] = None):
        """Initializes a Multivector.

        Args:
            value: Number, sequence, string, mapping, :class:`Polar` or
                multivector. None gives zero.
            algebra (GeometricAlgebra, optional): Kernel to use. Defaults
                to the kernel of a copied multivector, else the default.

        Raises:
            ParseError: If a string or basis token is malformed.
            TypeError: If ``value`` has an unsupported type.
        """
        if algebra is None:
            algebra = value.algebra if isinstance(value, Multivector) else DEFAULT_ALGEBRA
        self._polish(_convert(value, algebra), algebra)

    @classmethod
    def _wrap(cls, components, algebra: GeometricAlgebra) -> 'Multivector':
        result = cls.__new__(cls)
        result._polish(components, algebra)
        return result

    def _polish(self, components, algebra: GeometricAlgebra) -> None:
        components = algebra.polish(components)
        setter = object.__setattr__
        setter(self, 'algebra', algebra)
        setter(self, '_components', MappingProxyType(components))
        setter(self, 'scalar', components.get('', 0.0))
        setter(self, 'x', components.get('o1', 0.0))
        setter(self, 'y', components.get('o2', 0.0))
        setter(self, 'z', components.get('o3', 0.0))

    def __setattr__(self, name, value):
        raise AttributeError("Multivector is immutable")

    def _coerce(self, value) -> 'Multivector':
        if isinstance(value, Multivector):
            return value
        return Multivector(value, self.algebra)

    def _fold(self, kind: Product, others) -> 'Multivector':
        result = self._components
        for other in others:
            result = self.algebra.combine(kind, result, self._coerce(other)._components)
        return Multivector._wrap(result, self.algebra)

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    @property
    def components(self) -> Mapping:
        """Read-only mapping from canonical label to coefficient."""
        return self._components

    @property
    def labels(self):
        return tuple(self._components)

    def items(self):
        return self._components.items()

    def __getitem__(self, basis: str) -> float:
        """Coefficient of ``basis``, which need not be canonical.

        ``Multivector('o1o2')['o2o1']`` is ``-1.0``.
        """
        blade = self.algebra.canonicalize(basis)
        return blade.sign * self._components.get(blade.label, 0.0)

    def __str__(self):
        return format_components(self._components)

    def __repr__(self):
        return f"Multivector('{self}')"

    def __bool__(self):
        return not self.zeroish()

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def zeroish(self) -> bool:
        """True when every component is within ``EPSILON`` of zero."""
        return not self._components

    def equals(self, *others) -> bool:
        """True when every argument is approximately equal to this multivector."""
        return all(
            not self.algebra.subtract(self._components, self._coerce(other)._components)
            for other in others)

    def __eq__(self, other):
        try:
            return self.equals(other)
        except (TypeError, ValueError):
            return NotImplemented

    # ------------------------------------------------------------------
    # Grades
    # ------------------------------------------------------------------

    def grade(self, homogeneous: bool = False) -> Optional[int]:
        """Highest grade present, None for zero or for mixed grades when
        ``homogeneous`` is set."""
        return self.algebra.grade(self._components, homogeneous)

    def is_homogeneous(self) -> bool:
        return self.grade(homogeneous=True) is not None

    def is_grade(self, grade: int) -> bool:
        return self.algebra.is_grade(self._components, grade)

    def is_scalar(self) -> bool:
        return self.is_grade(0)

    def is_vector(self) -> bool:
        return self.is_grade(1)

    def is_bivector(self) -> bool:
        return self.is_grade(2)

    def is_trivector(self) -> bool:
        return self.is_grade(3)

    def is_rotor(self) -> bool:
        """True for an even, unit versor whose inverse is its conjugate."""
        if not self.conjugate().multiply(self).equals(1):
            return False
        if abs(self.norm() - 1) > EPSILON:
            return False
        return all(self.algebra.canonicalize(label).grade % 2 == 0
                   for label in self._components)

    # ------------------------------------------------------------------
    # Norms and inverses
    # ------------------------------------------------------------------

    def conjugate(self) -> 'Multivector':
        """Reversion of every basis blade."""
        return Multivector._wrap(self.algebra.conjugate(self._components), self.algebra)

    def __invert__(self):
        return self.conjugate()

    def quadrance(self) -> float:
        """Squared norm, the scalar ``conjugate(self) * self``.

        Raises:
            NotInvertibleError: If that product is not a scalar.
        """
        return self.algebra.quadrance(self._components)

    def norm(self) -> float:
        """Square root of the quadrance.

        Raises:
            DomainError: If the quadrance is negative or not a scalar.
        """
        quadrance = self.quadrance()
        if quadrance < 0:
            raise DomainError(f"Negative quadrance ({quadrance}) for: {self}")
        return math.sqrt(quadrance)

    def __abs__(self):
        return self.norm()

    def normalize(self) -> 'Multivector':
        """Unit multivector in the same direction.

        Raises:
            NotInvertibleError: If the norm is zero or not a scalar.
        """
        norm = self.norm()
        if norm == 0:
            raise NotInvertibleError(f"Cannot normalize (norm: {norm}): {self}")
        result = self.algebra.scale(self._components, 1.0 / norm)
        check_finite(result, f"Cannot normalize (norm: {norm}): {self}")
        return Multivector._wrap(result, self.algebra)

    def inverse(self) -> 'Multivector':
        """Multiplicative inverse; ``a * a.inverse() == 1`` for blades and versors.

        Raises:
            NotInvertibleError: For zero or non-scalar quadrance.
        """
        return Multivector._wrap(self.algebra.inverse(self._components), self.algebra)

    def negate(self) -> 'Multivector':
        """Additive inverse."""
        return Multivector._wrap(self.algebra.scale(self._components, -1.0), self.algebra)

    def __neg__(self):
        return self.negate()

    def __pos__(self):
        return self

    # ------------------------------------------------------------------
    # Arithmetic, each folding left to right over its arguments
    # ------------------------------------------------------------------

    def add(self, *others) -> 'Multivector':
        result = self._components
        for other in others:
            result = self.algebra.add(result, self._coerce(other)._components)
        return Multivector._wrap(result, self.algebra)

    def subtract(self, *others) -> 'Multivector':
        result = self._components
        for other in others:
            result = self.algebra.subtract(result, self._coerce(other)._components)
        return Multivector._wrap(result, self.algebra)

    def multiply(self, *others) -> 'Multivector':
        """Geometric product."""
        return self._fold(Product.GEOMETRIC, others)

    def divide(self, *others) -> 'Multivector':
        """Geometric product with the inverse of each argument.

        Raises:
            NotInvertibleError: If an argument has no inverse.
        """
        result = self._components
        for other in others:
            inverse = self.algebra.inverse(self._coerce(other)._components)
            result = self.algebra.combine(Product.GEOMETRIC, result, inverse)
        return Multivector._wrap(result, self.algebra)

    def wedge(self, *others) -> 'Multivector':
        """Outer product."""
        return self._fold(Product.OUTER, others)

    def inner(self, *others) -> 'Multivector':
        """Geometric product without the outer product terms."""
        return self._fold(Product.INNER, others)

    def dot(self, *others) -> 'Multivector':
        """Inner product keeping scalar terms."""
        return self._fold(Product.DOT, others)

    def contract(self, *others) -> 'Multivector':
        """Left contraction."""
        return self._fold(Product.CONTRACT, others)

    plus = add
    minus = subtract
    times = multiply
    outer = wedge

    def _binary(self, method, other, reflected=False):
        try:
            other = self._coerce(other)
        except TypeError:
            return NotImplemented
        return method(other, self) if reflected else method(self, other)

    def __add__(self, other):
        return self._binary(Multivector.add, other)

    def __radd__(self, other):
        return self._binary(Multivector.add, other, reflected=True)

    def __sub__(self, other):
        return self._binary(Multivector.subtract, other)

    def __rsub__(self, other):
        return self._binary(Multivector.subtract, other, reflected=True)

    def __mul__(self, other):
        return self._binary(Multivector.multiply, other)

    def __rmul__(self, other):
        return self._binary(Multivector.multiply, other, reflected=True)

    def __truediv__(self, other):
        return self._binary(Multivector.divide, other)

    def __rtruediv__(self, other):
        return self._binary(Multivector.divide, other, reflected=True)

    def __xor__(self, other):
        return self._binary(Multivector.wedge, other)

    def __rxor__(self, other):
        return self._binary(Multivector.wedge, other, reflected=True)

    def __or__(self, other):
        return self._binary(Multivector.inner, other)

    def __ror__(self, other):
        return self._binary(Multivector.inner, other, reflected=True)

    def __lshift__(self, other):
        return self._binary(Multivector.contract, other)

    def __rlshift__(self, other):
        return self._binary(Multivector.contract, other, reflected=True)

    # ------------------------------------------------------------------
    # Subspaces and versors
    # ------------------------------------------------------------------

    def project(self, space) -> 'Multivector':
        """Component lying in the subspace of the blade ``space``."""
        return self.contract(space).divide(space)

    def reject(self, space) -> 'Multivector':
        """Component orthogonal to the subspace of the blade ``space``."""
        return self.wedge(space).divide(space)

    def apply_versor(self, *versors) -> 'Multivector':
        """Sandwich ``v * self / v`` for each versor in turn."""
        result = self
        for versor in versors:
            versor = self._coerce(versor)
            result = versor.multiply(result).divide(versor)
        return result

    def apply_rotor(self, *rotors) -> 'Multivector':
        """Sandwich ``v * self * conjugate(v)`` for each rotor in turn.

        Cheaper than :meth:`apply_versor` but only correct for unit rotors.
        Callers are responsible for passing valid rotors.
        """
        result = self
        for rotor in rotors:
            rotor = self._coerce(rotor)
            result = rotor.multiply(result, rotor.conjugate())
        return result

    def reflect(self, v) -> 'Multivector':
        return self.apply_versor(v)

    def rotate(self, v, w=None) -> 'Multivector':
        """Rotates this multivector.

        Args:
            v: With ``w`` a vector, the versor is ``v * (v + w)`` which
                turns ``w`` onto ``v`` (by the angle between them). With
                ``w`` a scalar angle, ``v`` is a bivector and the versor is
                ``v sin(w) + cos(w)``. Without ``w``, ``v`` must be a blade
                and is exponentiated.
            w (optional): Second vector, or angle paired with a bivector.
                A scalar ``v`` paired with a bivector ``w`` also works.

        Raises:
            NotABladeError: If ``v`` alone does not square to a scalar.
            DomainError: If the grades of ``v`` and ``w`` do not form a rotation.
        """
        v = self._coerce(v)
        if w is None:
            versor = Multivector._wrap(self.algebra.exp_blade(v._components), self.algebra)
            return self.apply_versor(versor)

        w = self._coerce(w)
        if v.grade() == 1 and w.grade() == 1:
            versor = v.multiply(v.add(w))
        elif v.grade() == 2 and w.is_scalar():
            versor = v.multiply(math.sin(w.scalar)).add(math.cos(w.scalar))
        elif v.is_scalar() and w.grade() == 2:
            versor = w.multiply(math.sin(v.scalar)).add(math.cos(v.scalar))
        else:
            raise DomainError(f"Cannot rotate with grades {v.grade()} and {w.grade()}")
        return self.apply_versor(versor)


def _first(values, default) -> Multivector:
    return Multivector(values[0] if values else default)


def add(*values) -> Multivector:
    """Sum of all arguments (zero when there are none)."""
    return _first(values, 0).add(*values[1:])


def subtract(first, *rest) -> Multivector:
    return Multivector(first).subtract(*rest)


def product(*values) -> Multivector:
    """Geometric product of all arguments (one when there are none)."""
    return _first(values, 1).multiply(*values[1:])


def wedge(first, *rest) -> Multivector:
    return Multivector(first).wedge(*rest)


def inner(first, *rest) -> Multivector:
    return Multivector(first).inner(*rest)


def dot(first, *rest) -> Multivector:
    return Multivector(first).dot(*rest)


def contract(first, *rest) -> Multivector:
    return Multivector(first).contract(*rest)


def equals(*values) -> bool:
    """True when all arguments are approximately equal."""
    if len(values) < 2:
        return True
    return Multivector(values[0]).equals(*values[1:])


def zeroish(*values) -> bool:
    """True when every argument is approximately zero."""
    return all(Multivector(value).zeroish() for value in values)

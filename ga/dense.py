# Ripple: Sparse Geometric Algebra for Game Physics
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.

"""Dense tensor bridge for batched products.

Sparse multivectors are convenient for a handful of values; physics steps
over many bodies want the same products batched on tensors. A
:class:`DenseAlgebra` fixes a set of generating basis vectors, lays every
blade they span out along the last tensor dimension and precomputes one
Cayley table per :class:`~ga.algebra.Product` with the sparse kernel, so
both paths agree exactly on labels and signs.
"""

from typing import List, Optional, Sequence, Union

import torch

from log import get_logger
from ga.algebra import DEFAULT_ALGEBRA, GeometricAlgebra, Product
from ga.basis import tokenize
from ga.multivector import Multivector
from ga.validation import check_multivector

logger = get_logger(__name__)


class DenseAlgebra:
    """Batched products over the blades spanned by a few basis vectors.

    Blade ``i`` contains generator ``b`` iff bit ``b`` of ``i`` is set,
    generators being kept in canonical order.

    Attributes:
        generators (tuple): Canonical generating basis vectors.
        n (int): Number of generators.
        dim (int): Number of blades (2^n).
        labels (list): Canonical label of each blade index.
        device (str): Device holding the tables.
    """
    _CACHED_TABLES = {}

    def __init__(self, generators: Sequence[str] = ('o1', 'o2', 'o3'),
                 device='cpu', algebra: Optional[GeometricAlgebra] = None):
        """Initialize the layout and cache the Cayley tables.

        Args:
            generators (Sequence[str]): Basis vectors such as ``'o1'`` or ``'i0'``.
            device (str, optional): Device for the tables. Defaults to 'cpu'.
            algebra (GeometricAlgebra, optional): Sparse kernel used to
                build the tables and to convert multivectors.

        Raises:
            ValueError: If a generator is not a single basis vector or
                repeats, or there are more than 10 generators.
        """
        self.algebra = DEFAULT_ALGEBRA if algebra is None else algebra
        canonical = []
        for generator in generators:
            blade = self.algebra.canonicalize(generator)
            if blade.grade != 1:
                raise ValueError(f"Generator {generator!r} is not a basis vector")
            canonical.append(blade.label)
        if len(set(canonical)) != len(canonical):
            raise ValueError(f"Repeated generators in {tuple(generators)}")
        if len(canonical) > 10:
            raise ValueError(f"At most 10 generators, got {len(canonical)}")

        self.generators = tuple(sorted(canonical, key=lambda label: tokenize(label)[0]))
        self.n = len(self.generators)
        self.dim = 2 ** self.n
        self.device = device
        self.labels = [
            ''.join(g for bit, g in enumerate(self.generators) if index & (1 << bit))
            for index in range(self.dim)
        ]
        self.index = {label: i for i, label in enumerate(self.labels)}

        cache_key = (self.generators, str(device))
        if cache_key not in DenseAlgebra._CACHED_TABLES:
            DenseAlgebra._CACHED_TABLES[cache_key] = self._generate_tables()
        self.cayley_indices, self.signs, self.rev_signs, self.grade_masks = \
            DenseAlgebra._CACHED_TABLES[cache_key]

    def _generate_tables(self):
        """Precompute the Cayley indices, per-product signs, reversion signs and grade masks."""
        logger.debug(f"Building dense tables for {self.generators} ({self.dim} blades)")
        indices = torch.arange(self.dim, device=self.device)

        # Result index = A XOR B; squared generators drop out of the label
        cayley_indices = indices.unsqueeze(0) ^ indices.unsqueeze(1)

        grades = [self.algebra.canonicalize(label).grade for label in self.labels]
        raw = {kind: torch.zeros(self.dim, self.dim, dtype=torch.float64)
               for kind in Product}
        for i, left in enumerate(self.labels):
            for j, right in enumerate(self.labels):
                blade = self.algebra.canonicalize(left + right)
                for kind in Product:
                    if kind.keeps(grades[i], grades[j], blade.grade):
                        raw[kind][i, j] = blade.sign

        # signs[kind][i, k] multiplies A[i] * B[i ^ k] into result k
        signs = {kind: torch.gather(table, 1, cayley_indices.cpu()).to(self.device)
                 for kind, table in raw.items()}

        rev_signs = torch.tensor(
            [-1.0 if (k * (k - 1) // 2) % 2 else 1.0 for k in grades],
            dtype=torch.float64, device=self.device)
        grade_masks = [
            torch.tensor([g == k for g in grades], dtype=torch.bool, device=self.device)
            for k in range(self.n + 1)
        ]
        return cayley_indices, signs, rev_signs, grade_masks

    def to_tensor(self, values: Union[Multivector, Sequence], dtype=torch.float64) -> torch.Tensor:
        """Lays multivectors out densely.

        Args:
            values: One multivector-like value, or a list/tuple of them.
                A list is always a batch, so wrap a plain vector as
                ``[[1, 2, 3]]`` or pass a :class:`Multivector`.
            dtype (torch.dtype, optional): Result dtype.

        Returns:
            torch.Tensor: ``[dim]`` for one value, ``[N, dim]`` for a sequence.

        Raises:
            ValueError: If a component lies outside the spanned blades.
        """
        single = not isinstance(values, (list, tuple))
        batch = [values] if single else values
        result = torch.zeros(len(batch), self.dim, dtype=dtype, device=self.device)
        for row, value in enumerate(batch):
            for label, coefficient in Multivector(value, self.algebra).items():
                if label not in self.index:
                    raise ValueError(
                        f"Component '{label}' is outside the span of {self.generators}")
                result[row, self.index[label]] = coefficient
        return result[0] if single else result

    def from_tensor(self, tensor: torch.Tensor) -> Union[Multivector, List[Multivector]]:
        """Inverse of :meth:`to_tensor` for ``[dim]`` or ``[N, dim]`` tensors."""
        check_multivector(tensor, self, "from_tensor")
        if tensor.ndim == 1:
            return Multivector._wrap(dict(zip(self.labels, tensor.tolist())), self.algebra)
        return [self.from_tensor(row) for row in tensor.reshape(-1, self.dim)]

    def embed_vector(self, vectors: torch.Tensor) -> torch.Tensor:
        """Injects vectors into the Grade-1 subspace.

        Args:
            vectors (torch.Tensor): Raw vectors [..., n], in generator order.

        Returns:
            torch.Tensor: Multivector coefficients [..., dim].
        """
        batch_shape = vectors.shape[:-1]
        mv = torch.zeros(*batch_shape, self.dim, device=vectors.device, dtype=vectors.dtype)
        for i in range(self.n):
            mv[..., 1 << i] = vectors[..., i]
        return mv

    def product(self, A: torch.Tensor, B: torch.Tensor,
                kind: Product = Product.GEOMETRIC) -> torch.Tensor:
        """Computes a product of two batches of multivectors.

        Uses vectorized gather + broadcast multiply + sum.

        Args:
            A (torch.Tensor): Left operand [..., dim].
            B (torch.Tensor): Right operand [..., dim].
            kind (Product, optional): Which product. Defaults to geometric.

        Returns:
            torch.Tensor: The product [..., dim].
        """
        check_multivector(A, self, f"{kind.value}(A)")
        check_multivector(B, self, f"{kind.value}(B)")
        idx = self.cayley_indices.to(A.device)
        signs = self.signs[kind].to(device=A.device, dtype=A.dtype)

        # result[..., k] = sum_i A[..., i] * B[..., i ^ k] * signs[i, k]
        B_gathered = B[..., idx]
        return (A.unsqueeze(-1) * B_gathered * signs).sum(dim=-2)

    def geometric_product(self, A: torch.Tensor, B: torch.Tensor) -> torch.Tensor:
        return self.product(A, B, Product.GEOMETRIC)

    def reverse(self, mv: torch.Tensor) -> torch.Tensor:
        """Computes the reversion (the conjugate)."""
        return mv * self.rev_signs.to(dtype=mv.dtype, device=mv.device)

    def grade_projection(self, mv: torch.Tensor, grade: int) -> torch.Tensor:
        """Isolates a specific grade."""
        mask = self.grade_masks[grade].to(mv.device)
        result = torch.zeros_like(mv)
        result[..., mask] = mv[..., mask]
        return result

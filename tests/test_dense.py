"""Tests for the dense tensor bridge.

The dense tables are generated from the sparse kernel, so every product
kind must agree with the sparse result on the same inputs.
"""

import random

import pytest
import torch

from ga.algebra import Product
from ga.dense import DenseAlgebra
from ga.multivector import Multivector


METHODS = {
    Product.GEOMETRIC: 'multiply',
    Product.OUTER: 'wedge',
    Product.INNER: 'inner',
    Product.DOT: 'dot',
    Product.CONTRACT: 'contract',
}


# ── Helpers ────────────────────────────────────────────────────────────

def _random_multivector(rng, dense, terms=5):
    """Integer multivector over the blades spanned by ``dense``."""
    return Multivector({label: rng.randint(-3, 3)
                        for label in rng.sample(dense.labels, min(terms, dense.dim))})


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def euclidean():
    return DenseAlgebra()


# ── Layout ────────────────────────────────────────────────────────────

class TestLayout:

    def test_default_labels(self, euclidean):
        assert euclidean.dim == 8
        assert euclidean.labels == ['', 'o1', 'o2', 'o1o2', 'o3', 'o1o3', 'o2o3', 'o1o2o3']

    def test_generators_sorted_canonically(self):
        dense = DenseAlgebra(('o2', 'i0', 'x'))
        assert dense.generators == ('i0', 'o1', 'o2')
        assert dense.labels[3] == 'i0o1'

    @pytest.mark.parametrize("generators", [('o1o2',), ('o1', 'o1'), ('x', 'o1'), ('',)])
    def test_invalid_generators(self, generators):
        with pytest.raises(ValueError):
            DenseAlgebra(generators)

    def test_too_many_generators(self):
        with pytest.raises(ValueError, match="At most 10"):
            DenseAlgebra([f'o{i}' for i in range(11)])

    def test_tables_are_cached(self):
        assert DenseAlgebra(('o1', 'o2')).signs is DenseAlgebra(('o2', 'o1')).signs

    def test_cayley_indices(self, euclidean):
        idx = euclidean.cayley_indices
        assert idx.shape == (8, 8)
        assert idx[3, 5].item() == 6


# ── Conversion ────────────────────────────────────────────────────────

class TestConversion:

    def test_to_tensor_single(self, euclidean):
        t = euclidean.to_tensor('2 + 3o2 - o1o3')
        expected = torch.tensor([2, 0, 3, 0, 0, -1, 0, 0], dtype=torch.float64)
        assert torch.equal(t, expected)

    def test_to_tensor_batch(self, euclidean):
        t = euclidean.to_tensor(['o1', [0, 2], 'o1o2o3'])
        assert t.shape == (3, 8)
        assert t[2, 7].item() == 1

    def test_to_tensor_dtype(self, euclidean):
        assert euclidean.to_tensor('o1', dtype=torch.float32).dtype == torch.float32

    def test_outside_span(self):
        with pytest.raises(ValueError):
            DenseAlgebra(('o1', 'o2')).to_tensor('o3')

    def test_round_trip(self, euclidean, rng):
        values = [_random_multivector(rng, euclidean) for _ in range(5)]
        restored = euclidean.from_tensor(euclidean.to_tensor(values))
        assert all(a == b for a, b in zip(values, restored))
        assert euclidean.from_tensor(euclidean.to_tensor(values[0])) == values[0]

    def test_embed_vector(self, euclidean):
        mv = euclidean.embed_vector(torch.tensor([[1.0, 2.0, 3.0]]))
        assert euclidean.from_tensor(mv) == [Multivector([1, 2, 3])]

    def test_wrong_width(self, euclidean):
        with pytest.raises(AssertionError):
            euclidean.from_tensor(torch.zeros(4))


# ── Products ──────────────────────────────────────────────────────────

class TestProducts:

    @pytest.fixture(params=[('o1', 'o2', 'o3'), ('o0', 'i0', 'o1'), ('o1', 'n1', 'i2', 'o2')])
    def dense(self, request):
        return DenseAlgebra(request.param)

    @pytest.mark.parametrize("kind", list(Product))
    def test_matches_sparse(self, dense, kind, rng):
        a = [_random_multivector(rng, dense) for _ in range(6)]
        b = [_random_multivector(rng, dense) for _ in range(6)]
        result = dense.from_tensor(dense.product(dense.to_tensor(a), dense.to_tensor(b), kind))
        for left, right, got in zip(a, b, result):
            assert got == getattr(left, METHODS[kind])(right)

    def test_geometric_product_default(self, euclidean):
        A = euclidean.to_tensor('o1')
        B = euclidean.to_tensor('o2')
        assert euclidean.from_tensor(euclidean.geometric_product(A, B)) == Multivector('o1o2')

    def test_broadcast_batch_shape(self, euclidean):
        A = euclidean.to_tensor(['o1', 'o2']).reshape(2, 1, 8)
        B = euclidean.to_tensor(['o1', 'o2', 'o3']).reshape(1, 3, 8)
        assert euclidean.geometric_product(A, B).shape == (2, 3, 8)

    def test_float32(self, euclidean):
        A = euclidean.to_tensor('o1 + o2', dtype=torch.float32)
        result = euclidean.geometric_product(A, A)
        assert result.dtype == torch.float32
        assert result[0].item() == pytest.approx(2.0)

    def test_reverse_matches_conjugate(self, euclidean, rng):
        m = _random_multivector(rng, euclidean, terms=8)
        assert euclidean.from_tensor(euclidean.reverse(euclidean.to_tensor(m))) == m.conjugate()

    def test_grade_projection(self, euclidean):
        t = euclidean.to_tensor('1 + o1 + o1o2 + o1o2o3')
        assert euclidean.from_tensor(euclidean.grade_projection(t, 1)) == Multivector('o1')
        assert euclidean.from_tensor(euclidean.grade_projection(t, 2)) == Multivector('o1o2')

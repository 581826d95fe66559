# Ripple: Sparse Geometric Algebra for Game Physics
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.

"""Basis blade canonicalization.

Basis blades are written as strings of ortho-normal basis vectors such as
``'o1o2'`` or ``'i0'``. The letter selects the signature:

    - ``o``: positive signature (o_k^2 = +1)
    - ``i``: negative signature (i_k^2 = -1)
    - ``n``: degenerate signature (n_k^2 = 0)

The letters ``x``, ``y`` and ``z`` are shorthand for ``o1``, ``o2`` and
``o3``. The letter ``o`` is used instead of the conventional ``e`` because
``e`` already marks exponents in floating point literals.
"""

import re
import threading
from typing import Dict, List, NamedTuple, Optional, Tuple

from ga.validation import ParseError

_SIGNATURES = {'o': 1, 'i': -1, 'n': 0}
_LETTERS = {1: 'o', -1: 'i', 0: 'n'}
_SHORTHAND = {'x': (1, 1), 'y': (1, 2), 'z': (1, 3)}

BASIS_VECTOR = re.compile(r'([oOiInN])(0|[1-9][0-9]*)|[xyzXYZ]')


class Blade(NamedTuple):
    """Canonical form of a basis blade.

    Attributes:
        label (str): Canonical label, empty for the scalar unit.
        grade (int): Number of surviving basis vectors.
        sign (int): Factor picked up while reordering (+1, -1, or 0
            when a degenerate basis vector was squared).
    """
    label: str
    grade: int
    sign: int


def tokenize(basis: str) -> List[Tuple[int, int]]:
    """Split a basis string into ``(signature, subscript)`` pairs.

    Raises:
        ParseError: If any part of the string is not a basis vector.
    """
    factors = []
    position = 0
    while position < len(basis):
        match = BASIS_VECTOR.match(basis, position)
        if match is None:
            raise ParseError(f'Unable to parse "{basis}" as a basis')
        if match.group(1) is None:
            factors.append(_SHORTHAND[match.group(0).lower()])
        else:
            factors.append((_SIGNATURES[match.group(1).lower()],
                            int(match.group(2))))
        position = match.end()
    return factors


def _canonicalize(basis: str) -> Blade:
    factors = tokenize(basis)
    sign = 1

    # Bubble sort, each swap of distinct basis vectors anticommutes
    for squeeze in range(1, len(factors)):
        swapped = False
        for ii in range(len(factors) - squeeze):
            if factors[ii] > factors[ii + 1]:
                factors[ii], factors[ii + 1] = factors[ii + 1], factors[ii]
                sign = -sign
                swapped = True
        if not swapped:
            break

    # Collapse adjacent equal basis vectors
    label = []
    ii = 0
    while ii < len(factors):
        if ii + 1 < len(factors) and factors[ii] == factors[ii + 1]:
            sign *= factors[ii][0]
            ii += 2
        else:
            signature, subscript = factors[ii]
            label.append(f'{_LETTERS[signature]}{subscript}')
            ii += 1

    return Blade(''.join(label), len(label), sign)


class BasisCache:
    """Append-only memo of raw basis strings to canonical blades.

    Entries are never rewritten or evicted. Insertion takes a lock so
    concurrent writers cannot interleave; a lost race only repeats the
    computation, and readers only ever see complete :class:`Blade` tuples.
    """

    def __init__(self):
        self._entries: Dict[str, Blade] = {}
        self._lock = threading.Lock()

    def __contains__(self, basis: str) -> bool:
        return basis in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def canonicalize(self, basis: str) -> Blade:
        """Return the canonical blade for ``basis``.

        Args:
            basis (str): Raw basis string, e.g. ``'o2o1'``.

        Returns:
            Blade: Canonical label, grade and sign.

        Raises:
            ParseError: If the string contains unparseable residue.
        """
        blade = self._entries.get(basis)
        if blade is None:
            blade = _canonicalize(basis)
            with self._lock:
                blade = self._entries.setdefault(basis, blade)
        return blade


GLOBAL_CACHE = BasisCache()


def canonicalize_basis(basis: str, cache: Optional[BasisCache] = None) -> Blade:
    """Canonicalize ``basis`` through ``cache`` (the process-wide cache by default)."""
    if cache is None:
        cache = GLOBAL_CACHE
    return cache.canonicalize(basis)

# Ripple: Sparse Geometric Algebra for Game Physics
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.

"""Error types and lightweight input validation.

Shape checks on tensors use ``assert`` so they are free under ``python -O``.
Set ``VALIDATE = False`` to disable them even without the -O flag. Domain
errors are always raised since callers depend on them.
"""

import math
from typing import Mapping

import torch

VALIDATE = True


class ParseError(ValueError):
    """A basis token or multivector string could not be parsed."""


class DomainError(ValueError):
    """An operation was applied outside the domain where it is defined."""


class NotInvertibleError(DomainError):
    """Zero or non-scalar quadrance where an inverse or a norm was required."""


class NotABladeError(DomainError):
    """A multivector whose square is not scalar was used as a blade."""


def check_finite(components: Mapping[str, float], message: str) -> None:
    """Raise :class:`NotInvertibleError` if any coefficient is NaN or infinite."""
    for label, value in components.items():
        if not math.isfinite(value):
            raise NotInvertibleError(f"{message} (component '{label}' is {value})")


def check_multivector(x: torch.Tensor, algebra, name: str = "x") -> None:
    """Assert *x* looks like a dense multivector for *algebra*.

    Checks ``x.ndim >= 1`` and ``x.shape[-1] == algebra.dim``.
    """
    if not VALIDATE:
        return
    assert x.ndim >= 1, (
        f"{name}: expected ndim >= 1, got shape {tuple(x.shape)}"
    )
    assert x.shape[-1] == algebra.dim, (
        f"{name}: last dim should be {algebra.dim} (algebra dim), "
        f"got {x.shape[-1]} (shape {tuple(x.shape)})"
    )


def check_points(x: torch.Tensor, name: str = "x") -> None:
    """Assert *x* is a batch of points laid out as ``[N, D]``."""
    if not VALIDATE:
        return
    assert x.ndim == 2, (
        f"{name}: expected shape [N, D], got shape {tuple(x.shape)}"
    )

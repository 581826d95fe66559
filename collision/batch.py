# Ripple: Sparse Geometric Algebra for Game Physics
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.

"""Batched time of impact on tensors.

Same semantics as :func:`collision.continuous.collide_radius_radius`, for
``N`` pairs at once. Missing roots and missing collisions are NaN.
"""

from typing import Optional, Union

import torch

from ga.validation import check_points
from collision.config import DEFAULT_CONFIG, CollisionConfig

Radius = Union[float, torch.Tensor]


def batch_quadratic_roots(a: torch.Tensor, b: torch.Tensor, c: torch.Tensor,
                          config: Optional[CollisionConfig] = None) -> torch.Tensor:
    """Real roots of ``a t^2 + b t + c = 0`` element-wise.

    Args:
        a, b, c (torch.Tensor): Coefficients [N].
        config (CollisionConfig, optional): Supplies the degeneracy tolerance.

    Returns:
        torch.Tensor: Roots [N, 2], NaN where a root does not exist. Linear
        and double roots fill the first column only.
    """
    config = config or DEFAULT_CONFIG
    tol = config.degenerate_tolerance
    nan = torch.full_like(a, float('nan'))

    linear = a.abs() <= tol
    flat = linear & (b.abs() <= tol)
    discriminant = b * b - 4 * a * c
    double = ~linear & (discriminant.abs() <= tol)
    imaginary = ~linear & ~double & (discriminant < 0)

    # Placeholders keep the unused branches finite
    safe_a = torch.where(linear, torch.ones_like(a), a)
    safe_b = torch.where(flat, torch.ones_like(b), b)
    root = discriminant.clamp(min=0).sqrt()

    first = torch.where(
        linear, -c / safe_b,
        torch.where(double, -b / (2 * safe_a), (-b + root) / (2 * safe_a)))
    second = torch.where(linear | double, nan, (-b - root) / (2 * safe_a))

    missing = flat | imaginary
    first = torch.where(missing, nan, first)
    second = torch.where(missing, nan, second)
    return torch.stack([first, second], dim=-1)


def batch_collide_radius_radius(s1: torch.Tensor, e1: torch.Tensor, r1: Radius,
                                s2: torch.Tensor, e2: torch.Tensor, r2: Radius,
                                config: Optional[CollisionConfig] = None) -> torch.Tensor:
    """Earliest contact for ``N`` pairs of round objects.

    Args:
        s1, e1 (torch.Tensor): Start and end of the first centers [N, D].
        r1 (float or torch.Tensor): First radii, scalar or [N].
        s2, e2 (torch.Tensor): Start and end of the second centers [N, D].
        r2 (float or torch.Tensor): Second radii, scalar or [N].
        config (CollisionConfig, optional): Tolerances.

    Returns:
        torch.Tensor: Fraction of the step [N], NaN for no collision.
    """
    config = config or DEFAULT_CONFIG
    for name, points in (("s1", s1), ("e1", e1), ("s2", s2), ("e2", e2)):
        check_points(points, name)

    gap = torch.as_tensor(r1, dtype=s1.dtype, device=s1.device) + \
        torch.as_tensor(r2, dtype=s1.dtype, device=s1.device)
    ds = s1 - s2
    dd = (e1 - s1) - (e2 - s2)
    start_sq = (ds * ds).sum(dim=-1)
    b = 2 * (ds * dd).sum(dim=-1)
    c = start_sq - gap * gap
    roots = batch_quadratic_roots((dd * dd).sum(dim=-1), b, c, config)

    # Snapping avoids rounding errors that cause missed collisions
    roots = torch.where(roots.abs() <= config.snap_tolerance, torch.zeros_like(roots), roots)
    inf = torch.full_like(roots, float('inf'))
    in_step = (roots >= 0) & (roots <= 1)
    earliest = torch.where(in_step, roots, inf).min(dim=-1).values
    # Overlapping pairs touch at the start only while closing
    overlap = torch.where(b < 0, torch.zeros_like(earliest), torch.full_like(earliest, float('inf')))
    earliest = torch.where(c < 0, overlap, earliest)

    end_sq = ((e1 - e2) ** 2).sum(dim=-1)
    separating = (c >= 0) & (earliest.abs() <= config.snap_tolerance) & (start_sq < end_sq)
    missing = torch.isinf(earliest) | separating
    return torch.where(missing, torch.full_like(earliest, float('nan')), earliest)

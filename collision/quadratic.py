# Ripple: Sparse Geometric Algebra for Game Physics
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.

import math
from typing import List, Optional

from collision.config import DEFAULT_CONFIG, CollisionConfig


def quadratic_roots(a: float, b: float, c: float,
                    config: Optional[CollisionConfig] = None) -> List[float]:
    """Real roots of ``a t^2 + b t + c = 0``.

    Args:
        a, b, c (float): Coefficients.
        config (CollisionConfig, optional): Supplies the degeneracy tolerance.

    Returns:
        List[float]: No roots, a single (linear or double) root, or two roots.
    """
    config = config or DEFAULT_CONFIG
    if config.degenerate(a):
        if config.degenerate(b):
            return []
        return [-c / b]

    discriminant = b * b - 4 * a * c
    if config.degenerate(discriminant):
        return [-b / (2 * a)]
    if discriminant < 0:
        return []
    discriminant = math.sqrt(discriminant)
    return [(-b + discriminant) / (2 * a), (-b - discriminant) / (2 * a)]

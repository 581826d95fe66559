# Ripple: Sparse Geometric Algebra for Game Physics
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.

"""Tolerances for the time-of-impact solvers.

Defaults live in ``conf/collision.yaml`` and match the algebra epsilon,
which downstream physics code relies on for near-zero snapping.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from omegaconf import OmegaConf

from ga.algebra import EPSILON

DEFAULT_CONFIG_PATH = os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "conf", "collision.yaml")


@dataclass
class CollisionConfig:
    """Bag of collision tolerances.

    Attributes:
        snap_tolerance: Roots this close to zero become exactly zero, and
            results this close to zero count as contact at the start of
            the step for the moving-away checks.
        degenerate_tolerance: Threshold below which quadratic coefficients,
            the discriminant and segment lengths are treated as zero.
    """

    snap_tolerance: float = EPSILON
    degenerate_tolerance: float = EPSILON

    def snapped(self, value: float) -> bool:
        return abs(value) <= self.snap_tolerance

    def degenerate(self, value: float) -> bool:
        return abs(value) <= self.degenerate_tolerance


DEFAULT_CONFIG = CollisionConfig()


def load_config(path: Optional[str] = None, **overrides) -> CollisionConfig:
    """Load tolerances from YAML onto the :class:`CollisionConfig` schema.

    Args:
        path: YAML file. Defaults to ``conf/collision.yaml`` when present.
        **overrides: Field values applied last.

    Returns:
        CollisionConfig: Validated configuration.
    """
    schema = OmegaConf.structured(CollisionConfig)
    layers = [schema]
    path = path or DEFAULT_CONFIG_PATH
    if os.path.exists(path):
        layers.append(OmegaConf.load(path))
    if overrides:
        layers.append(OmegaConf.create(overrides))
    merged = OmegaConf.merge(*layers)
    return CollisionConfig(**OmegaConf.to_container(merged, resolve=True))

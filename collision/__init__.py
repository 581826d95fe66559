# Ripple: Sparse Geometric Algebra for Game Physics
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.

"""Continuous collision detection.

Closed-form time of impact for round objects moving at constant velocity,
against each other or against fixed line segments.
"""

from .config import CollisionConfig, load_config
from .quadratic import quadratic_roots
from .continuous import (
    Segment,
    shortest_segment,
    collide_radius_radius,
    collide_radius_segment,
)
from .batch import batch_quadratic_roots, batch_collide_radius_radius

__all__ = [
    # config
    "CollisionConfig",
    "load_config",
    # scalar
    "quadratic_roots",
    "Segment",
    "shortest_segment",
    "collide_radius_radius",
    "collide_radius_segment",
    # batched
    "batch_quadratic_roots",
    "batch_collide_radius_radius",
]

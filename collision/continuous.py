# Ripple: Sparse Geometric Algebra for Game Physics
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.

"""Continuous collision detection for round objects.

Each object moves at constant velocity from its start point (``t == 0``)
to its end point (``t == 1``) during a simulation step. The routines here
return the earliest fraction of the step at which the objects touch, or
``None`` when they do not.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import List, Optional

from log import get_logger
from ga.algebra import zeroish
from ga.multivector import Multivector
from ga.validation import DomainError
from collision.config import DEFAULT_CONFIG, CollisionConfig
from collision.quadratic import quadratic_roots

logger = get_logger(__name__)


@dataclass(frozen=True)
class Segment:
    """Line segment of thickness ``width`` between ``start`` and ``end``."""
    start: Multivector
    end: Multivector
    width: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, 'start', Multivector(self.start))
        object.__setattr__(self, 'end', Multivector(self.end))
        object.__setattr__(self, 'width', float(self.width or 0.0))

    @classmethod
    def coerce(cls, value) -> 'Segment':
        """Accepts a Segment or a mapping with ``start``/``end`` (or ``s``/``e``)
        and an optional ``width``."""
        if isinstance(value, Segment):
            return value
        if isinstance(value, Mapping):
            start = value['start'] if 'start' in value else value['s']
            end = value['end'] if 'end' in value else value['e']
            return cls(start, end, value.get('width') or 0.0)
        raise TypeError(f"Cannot use {type(value).__name__} as a segment")

    @property
    def direction(self) -> Multivector:
        return self.end.subtract(self.start)

    def quadrance(self) -> float:
        return self.direction.quadrance()

    def length(self) -> float:
        return math.sqrt(self.quadrance())


def shortest_segment(v, segment) -> Multivector:
    """Vector from ``v`` to the closest point on the segment's line.

    Adding the result to ``v`` gives that closest point.

    Raises:
        DomainError: If the segment has zero length and so no line.
    """
    segment = Segment.coerce(segment)
    offset = Multivector(v).subtract(segment.start)
    q = segment.direction
    q2 = q.quadrance()
    if zeroish(q2):
        raise DomainError(f"Zero length segment {segment.start} {segment.end} has no line")
    return offset.subtract(q.multiply(offset.dot(q).scalar / q2)).negate()


def _earliest(roots: List[float], config: CollisionConfig) -> Optional[float]:
    # Snapping avoids rounding errors that cause missed collisions
    times = [0.0 if config.snapped(t) else t for t in roots]
    times = [t for t in times if 0 <= t <= 1]
    return min(times) if times else None


def _overlap(closing: float) -> Optional[float]:
    # Already overlapping: every root in the step is an exit, so only a
    # pair that is still closing touches, at the start
    return 0.0 if closing < 0 else None


def collide_radius_radius(s1, e1, r1: float, s2, e2, r2: float,
                          config: Optional[CollisionConfig] = None) -> Optional[float]:
    """Earliest contact between two round objects moving at constant velocity.

    The separation of the centers is parameterized by ``t`` and the
    quadratic formula finds where it equals the sum of the radii, which is
    where the edges touch. Objects already overlapping at the start touch
    at ``t == 0`` only while they are still closing; resting or separating
    overlaps are not contacts. A touching contact at the start is ignored
    when the objects end the step farther apart than they began.

    Args:
        s1, e1: Start and end of the first center.
        r1 (float): Radius of the first object.
        s2, e2: Start and end of the second center.
        r2 (float): Radius of the second object.
        config (CollisionConfig, optional): Tolerances.

    Returns:
        Optional[float]: Fraction of the step in ``[0, 1]``, or None.
    """
    config = config or DEFAULT_CONFIG
    s1, e1, s2, e2 = (Multivector(v) for v in (s1, e1, s2, e2))
    gap = r1 + r2

    ds = s1.subtract(s2)
    dd = e1.subtract(s1).subtract(e2.subtract(s2))
    b = 2 * ds.dot(dd).scalar
    c = ds.dot(ds).scalar - gap * gap
    if c < 0:
        result = _overlap(b)
        if result is None:
            logger.debug(f"Ignoring overlap between separating objects {s1} and {s2}")
        return result
    result = _earliest(quadratic_roots(dd.dot(dd).scalar, b, c, config), config)

    # Don't report collision when close and moving away
    if (result is not None and config.snapped(result) and
            ds.quadrance() < e1.subtract(e2).quadrance()):
        logger.debug(f"Ignoring contact at t=0 between separating objects {s1} and {s2}")
        return None
    return result


def collide_radius_segment(s, e, r: float, segment,
                           config: Optional[CollisionConfig] = None) -> Optional[float]:
    """Earliest contact between a moving round object and a fixed segment.

    Rather than computing square roots the squared distance between the
    center and the segment's line is compared with the square of the
    radius plus half the segment width. Contacts beyond the ends of the
    segment are discarded so objects can move around it.

    Args:
        s: Start of the center (``t == 0``).
        e: End of the center (``t == 1``).
        r (float): Radius of the object.
        segment: :class:`Segment` or mapping with ``start``, ``end`` and
            optional ``width``.
        config (CollisionConfig, optional): Tolerances.

    Returns:
        Optional[float]: Fraction of the step in ``[0, 1]``, or None.
    """
    config = config or DEFAULT_CONFIG
    segment = Segment.coerce(segment)
    s, e = Multivector(s), Multivector(e)
    segs, sege = segment.start, segment.end
    radius = segment.width / 2
    q = segment.direction
    q2 = q.quadrance()

    # A zero length segment would divide by zero, treat it as round instead
    if config.degenerate(q2):
        return collide_radius_radius(s, e, r, segs, sege, radius, config)
    length = math.sqrt(q2)
    gap = (r + radius) ** 2

    ps = s.subtract(segs).dot(q).scalar / length
    ds = shortest_segment(s, segment)
    if ds.quadrance() < gap:
        if ps < 0:
            logger.debug(f"Contact with segment start {segs}, treating it as round")
            return collide_radius_radius(s, e, r, segs, segs, radius, config)
        if ps > length:
            logger.debug(f"Contact with segment end {sege}, treating it as round")
            return collide_radius_radius(s, e, r, sege, sege, radius, config)

    # Squared line distance of p = s + (e - s)t is
    #   |(p - segs) - ((p - segs) . q) q / q^2|^2
    # expanded in powers of t with m = e - s and n = s - segs
    m = e.subtract(s)
    n = s.subtract(segs)
    mq = m.dot(q).scalar
    nq = n.dot(q).scalar
    b = 2 * m.dot(n).scalar - 2 * mq * nq / q2
    c = n.dot(n).scalar - nq * nq / q2 - gap
    if c < 0:
        result = _overlap(b)
        if result is None:
            logger.debug(f"Ignoring overlap with segment {segs} {sege}, not closing")
    else:
        result = _earliest(quadratic_roots(m.dot(m).scalar - mq * mq / q2, b, c, config),
                           config)

    if result is not None and config.snapped(result):
        # Starts up against the segment but is moving away
        de = shortest_segment(e, segment)
        if de.quadrance() > ds.quadrance() and ds.dot(de).scalar > 0:
            logger.debug(f"Ignoring contact at t=0 moving away from segment {segs} {sege}")
            return None

    if result is not None:
        pe = e.subtract(segs).dot(q).scalar / length
        if (ps + r < 0 and pe + r < 0) or (ps - r > length and pe - r > length):
            return None
    return result

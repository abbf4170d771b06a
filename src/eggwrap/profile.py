"""Closed-form egg cross-section used as the lathe profile."""

from __future__ import annotations

import math
from typing import List, Tuple

from eggwrap.errors import InvalidShapeParameter
from eggwrap.geom import epsilon, isgoodnum

Point2D = Tuple[float, float]

# Fixed shape constants; apex/girth sets the pointed-top, rounded-bottom
# asymmetry and is not a user parameter.
GIRTH = 0.719
APEX = GIRTH / 9

# About 6 degrees.  The last sample lands just short of pi, so the top
# pole is a tiny ring rather than a single point.
PROFILE_STEP = 0.1047


def profile_sample_count(step: float = PROFILE_STEP) -> int:
    """Number of samples taken over ``[0, pi]`` at ``step`` radians."""

    if not isgoodnum(step) or step <= 0:
        raise InvalidShapeParameter(f"profile step must be positive, got {step!r}")
    return int(math.floor(math.pi / step + epsilon)) + 1


def egg_profile(radius_x: float, radius_y: float,
                step: float = PROFILE_STEP) -> List[Point2D]:
    """Return the half cross-section of the egg as ``(x, y)`` pairs.

    Samples run from the bottom pole (``rad=0``, ``y=-radius_y``) to the
    top pole (``rad`` close to pi).  ``x`` is the distance from the
    vertical axis and is zero, or very nearly so, at both ends.
    """

    if not isgoodnum(radius_x) or radius_x <= 0:
        raise InvalidShapeParameter(f"radius_x must be positive, got {radius_x!r}",
                                    {"field": "radius_x", "value": radius_x})
    if not isgoodnum(radius_y) or radius_y <= 0:
        raise InvalidShapeParameter(f"radius_y must be positive, got {radius_y!r}",
                                    {"field": "radius_y", "value": radius_y})

    points = []
    for i in range(profile_sample_count(step)):
        rad = i * step
        x = (APEX * math.cos(rad) + GIRTH) * math.sin(rad) * radius_x
        y = -math.cos(rad) * radius_y
        points.append((x, y))
    return points


__all__ = ['APEX', 'GIRTH', 'PROFILE_STEP', 'egg_profile', 'profile_sample_count']

"""Seam-free UV parameterization of the egg surface.

``u`` comes from the vertex angle around the vertical axis, shifted by
half a turn so that the wrap-around sits at the back of the model.
``v`` is the vertex height, inverted and remapped so that only the
coverage band of :class:`~eggwrap.settings.VerticalMapping` spans the
texture; everything above or below the band clamps to an edge row.
"""

from __future__ import annotations

import numpy as np

from eggwrap.errors import InvalidShapeParameter
from eggwrap.geom import pi2
from eggwrap.settings import VerticalMapping


def horizontal_coordinates(positions: np.ndarray) -> np.ndarray:
    """``u = (atan2(z, x) / 2pi + 0.5) mod 1`` for every vertex."""

    angle_fraction = np.arctan2(positions[:, 2], positions[:, 0]) / pi2
    return np.mod(angle_fraction + 0.5, 1.0)


def normalized_heights(positions: np.ndarray, radius_y: float) -> np.ndarray:
    """Heights mapped to ``[0, 1]`` and inverted, so the top is 0."""

    y_min = -radius_y
    y_max = radius_y
    return 1.0 - (positions[:, 1] - y_min) / (y_max - y_min)


def coverage_remap(v_normalized: np.ndarray, vertical: VerticalMapping) -> np.ndarray:
    """Stretch the coverage band to ``[0, 1]`` and clamp outside it."""

    start = vertical.coverage_start
    end = vertical.coverage_end
    if end == start:
        raise InvalidShapeParameter("coverage band is empty",
                                    {"field": "coverage", "value": vertical.coverage})

    v_normalized = np.asarray(v_normalized, dtype=float)
    inside = (v_normalized >= start) & (v_normalized <= end)
    remapped = (v_normalized - start) / (end - start)
    return np.where(inside, remapped, np.where(v_normalized < start, 0.0, 1.0))


def egg_uvs(positions: np.ndarray, radius_y: float, vertical: VerticalMapping) -> np.ndarray:
    """Return an ``(n, 2)`` array of UVs for the Z-corrected positions."""

    if radius_y <= 0:
        raise InvalidShapeParameter(f"radius_y must be positive, got {radius_y!r}",
                                    {"field": "radius_y", "value": radius_y})
    u = horizontal_coordinates(positions)
    v = coverage_remap(normalized_heights(positions, radius_y), vertical)
    return np.stack([u, v], axis=-1)


__all__ = ['coverage_remap', 'egg_uvs', 'horizontal_coordinates', 'normalized_heights']

"""Solid-of-revolution mesh builder for the egg.

The profile is swept a full turn around the Y axis, the X/Z radii are
made independent by rescaling each vertex in the X-Z plane, UVs are
replaced by the seam-free mapping of :mod:`eggwrap.uvmap`, and finally
vertex normals are recomputed from the corrected positions.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from eggwrap.errors import InvalidShapeParameter
from eggwrap.geom import pi2
from eggwrap.profile import egg_profile
from eggwrap.settings import EggShapeParams, VerticalMapping
from eggwrap.uvmap import egg_uvs

logger = logging.getLogger(__name__)


@dataclass
class EggMesh:
    """Indexed triangle mesh with per-vertex normals and UVs.

    Vertex ``j`` of ring ``i`` lives at index ``i * profile_count + j``.
    There are ``segments + 1`` rings; the last one duplicates the first
    so the UV seam can close.
    """

    positions: np.ndarray
    normals: np.ndarray
    uvs: np.ndarray
    faces: np.ndarray
    segments: int
    profile_count: int

    @property
    def vertex_count(self) -> int:
        return int(self.positions.shape[0])

    @property
    def face_count(self) -> int:
        return int(self.faces.shape[0])

    def ring(self, i: int) -> slice:
        """Index range of angular ring ``i``."""
        start = i * self.profile_count
        return slice(start, start + self.profile_count)

    def freeze(self) -> "EggMesh":
        """Mark every array read-only; installed meshes are never mutated."""
        for arr in (self.positions, self.normals, self.uvs, self.faces):
            arr.setflags(write=False)
        return self


def _ring_angles(segments: int) -> Tuple[np.ndarray, np.ndarray]:
    # Pre-compute sin/cos per ring so the closing ring reuses the exact
    # values of ring 0 instead of sin(2*pi) ~ -2.4e-16.
    sines = [0.0]
    cosines = [1.0]
    step = pi2 / segments
    for i in range(1, segments):
        sines.append(math.sin(i * step))
        cosines.append(math.cos(i * step))
    sines.append(sines[0])
    cosines.append(cosines[0])
    return np.array(sines), np.array(cosines)


def lathe(profile: Sequence[Tuple[float, float]], segments: int) -> EggMesh:
    """Sweep ``profile`` 360 degrees around Y in ``segments`` steps.

    Returns a mesh whose UVs are the sweep's own ``(i/segments,
    j/(n-1))`` grid and whose normals are zero; :func:`build_egg_mesh`
    replaces both.
    """

    if isinstance(segments, bool) or not isinstance(segments, int) or segments < 3:
        raise InvalidShapeParameter(f"segments must be an integer >= 3, got {segments!r}",
                                    {"field": "segments", "value": segments})
    if len(profile) < 2:
        raise InvalidShapeParameter("profile needs at least two points",
                                    {"field": "profile", "value": len(profile)})

    prof = np.asarray(profile, dtype=float)
    count = prof.shape[0]
    sines, cosines = _ring_angles(segments)

    # rings x profile points
    px = prof[:, 0][np.newaxis, :]
    x = px * sines[:, np.newaxis]
    y = np.broadcast_to(prof[:, 1][np.newaxis, :], x.shape)
    z = px * cosines[:, np.newaxis]
    positions = np.stack([x, y, z], axis=-1).reshape(-1, 3)

    u = np.repeat(np.arange(segments + 1) / segments, count)
    v = np.tile(np.arange(count) / (count - 1), segments + 1)
    uvs = np.stack([u, v], axis=-1)

    faces = []
    for i in range(segments):
        for j in range(count - 1):
            a = j + i * count
            b = a + count
            c = a + count + 1
            d = a + 1
            faces.append((a, b, d))
            faces.append((c, d, b))

    return EggMesh(
        positions=positions,
        normals=np.zeros_like(positions),
        uvs=uvs,
        faces=np.array(faces, dtype=np.int64),
        segments=segments,
        profile_count=count,
    )


def correct_depth(positions: np.ndarray, radius_x: float, radius_z: float) -> np.ndarray:
    """Rescale every vertex radius in the X-Z plane by ``radius_z/radius_x``.

    The polar angle of each vertex is kept, and ``y`` is untouched.
    """

    if radius_x <= 0:
        raise InvalidShapeParameter(f"radius_x must be positive, got {radius_x!r}",
                                    {"field": "radius_x", "value": radius_x})
    x = positions[:, 0]
    z = positions[:, 2]
    angle = np.arctan2(z, x)
    radius = np.sqrt(x * x + z * z) * (radius_z / radius_x)
    out = positions.copy()
    out[:, 0] = np.cos(angle) * radius
    out[:, 2] = np.sin(angle) * radius
    return out


def compute_vertex_normals(positions: np.ndarray, faces: np.ndarray) -> np.ndarray:
    """Area-weighted vertex normals; isolated or degenerate vertices get zero."""

    v0 = positions[faces[:, 0]]
    v1 = positions[faces[:, 1]]
    v2 = positions[faces[:, 2]]
    face_normals = np.cross(v2 - v1, v0 - v1)

    normals = np.zeros_like(positions)
    for k in range(3):
        np.add.at(normals, faces[:, k], face_normals)

    lengths = np.linalg.norm(normals, axis=1)
    lengths[lengths == 0] = 1.0
    return normals / lengths[:, np.newaxis]


def build_egg_mesh(shape: EggShapeParams, vertical: VerticalMapping) -> EggMesh:
    """Build the complete, frozen egg mesh for the given settings.

    Raises :class:`~eggwrap.errors.InvalidShapeParameter` before any
    geometry is produced if either struct is invalid.
    """

    shape.validate()
    vertical.validate()

    profile = egg_profile(shape.radius_x, shape.radius_y)
    mesh = lathe(profile, shape.segments)
    mesh.positions = correct_depth(mesh.positions, shape.radius_x, shape.radius_z)

    uvs = egg_uvs(mesh.positions, shape.radius_y, vertical)
    # last ring duplicates the first
    uvs[mesh.ring(mesh.segments)] = uvs[mesh.ring(0)]
    mesh.uvs = uvs

    mesh.normals = compute_vertex_normals(mesh.positions, mesh.faces)
    logger.debug("built egg mesh: %d vertices, %d faces (segments=%d)",
                 mesh.vertex_count, mesh.face_count, mesh.segments)
    return mesh.freeze()


__all__ = [
    'EggMesh',
    'build_egg_mesh',
    'compute_vertex_normals',
    'correct_depth',
    'lathe',
]

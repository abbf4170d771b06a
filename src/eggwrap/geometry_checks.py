"""Validation helpers for egg meshes.

:func:`check_mesh` is run on every freshly built mesh before it is
installed; the individual checks are usable on their own.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from eggwrap.geom import epsilon
from eggwrap.lathe import EggMesh


@dataclass
class CheckResult:
    ok: bool
    warnings: List[str]

    def __bool__(self) -> bool:
        return self.ok


def _weld(positions: np.ndarray, tol: float) -> np.ndarray:
    """Map every vertex to the first vertex sharing its ``tol`` grid cell."""

    keys = np.round(positions / tol).astype(np.int64)
    _, first, inverse = np.unique(keys, axis=0, return_index=True, return_inverse=True)
    return first[inverse.reshape(-1)]


def edge_counts(mesh: EggMesh, tol: float = 1e-9):
    """Undirected welded edges and how many faces use each.

    The sweep duplicates the seam ring and the pole vertices, so
    positions are welded on a ``tol`` grid first and faces that collapse
    under welding are dropped.  Edge endpoints are original vertex
    indices (the first vertex of each welded group).
    """

    if not isinstance(mesh, EggMesh):
        raise ValueError('edge_counts expects an EggMesh')

    faces = _weld(mesh.positions, tol)[mesh.faces]
    a, b, c = faces[:, 0], faces[:, 1], faces[:, 2]
    faces = faces[(a != b) & (b != c) & (c != a)]

    edges = np.concatenate([faces[:, [0, 1]], faces[:, [1, 2]], faces[:, [2, 0]]])
    edges.sort(axis=1)
    return np.unique(edges, axis=0, return_counts=True)


def surface_watertight(mesh: EggMesh, tol: float = 1e-9) -> CheckResult:
    """Check that every edge is shared by exactly two faces."""

    edges, counts = edge_counts(mesh, tol)
    warnings: List[str] = []
    boundary = int(np.count_nonzero(counts == 1))
    if boundary:
        warnings.append(f'{boundary} boundary edges detected')
    invalid = edges[counts > 2]
    if len(invalid):
        warnings.append(f'edges with multiplicity >2: {invalid.tolist()}')
    return CheckResult(not warnings, warnings)


def faces_outward(mesh: EggMesh) -> CheckResult:
    """Check that face normals point away from the origin.

    The egg is star-shaped about its centre, so an outward face has a
    positive normal/centroid dot product.  Collapsed faces are skipped.
    """

    tri = mesh.positions[mesh.faces]
    normals = np.cross(tri[:, 1] - tri[:, 0], tri[:, 2] - tri[:, 0])
    lengths = np.linalg.norm(normals, axis=1)
    keep = lengths > epsilon * epsilon
    if not np.any(keep):
        return CheckResult(True, ['no non-degenerate faces found'])

    centroids = tri[keep].mean(axis=1)
    facing = np.einsum('ij,ij->i', normals[keep], centroids) / lengths[keep]
    inward = int(np.count_nonzero(facing < -epsilon))
    if inward:
        return CheckResult(False, [f'{inward} of {int(keep.sum())} faces point inward'])
    return CheckResult(True, [])


def uvs_in_unit_square(uvs: Sequence[Sequence[float]]) -> CheckResult:
    """Check that every UV lies in ``[0, 1] x [0, 1]``."""

    arr = np.asarray(uvs, dtype=float)
    bad = np.flatnonzero(~np.all((arr >= 0.0) & (arr <= 1.0), axis=1))
    if bad.size:
        return CheckResult(False, [f'{bad.size} UVs outside the unit square, first at {int(bad[0])}'])
    return CheckResult(True, [])


def check_mesh(mesh: EggMesh) -> CheckResult:
    """Full check of a built egg mesh.

    UVs must lie in the unit square, faces must point outward, and the
    surface must be closed except for the small opening left by the top
    profile ring.
    """

    warnings: List[str] = []
    for result in (uvs_in_unit_square(mesh.uvs), faces_outward(mesh)):
        if not result.ok:
            warnings.extend(result.warnings)

    edges, counts = edge_counts(mesh)
    top = mesh.profile_count - 1
    on_top = np.all(edges % mesh.profile_count == top, axis=1)
    stray = int(np.count_nonzero((counts == 1) & ~on_top))
    if stray:
        warnings.append(f'{stray} boundary edges away from the top pole')
    if np.any(counts > 2):
        warnings.append(f'{int(np.count_nonzero(counts > 2))} edges with multiplicity >2')

    return CheckResult(not warnings, warnings)


__all__ = [
    'CheckResult',
    'check_mesh',
    'edge_counts',
    'faces_outward',
    'surface_watertight',
    'uvs_in_unit_square',
]

"""Utilities for working with the triangle lists of egg meshes."""

from __future__ import annotations

from typing import Set, Tuple

from eggwrap.lathe import EggMesh


def wireframe_edges(mesh: EggMesh) -> Set[Tuple[int, int]]:
    """Unique undirected vertex-index edges, for wireframe overlays."""

    if not isinstance(mesh, EggMesh):
        raise ValueError("wireframe_edges expects an EggMesh")

    edges = set()
    for a, b, c in mesh.faces.tolist():
        for p, q in ((a, b), (b, c), (c, a)):
            edges.add((p, q) if p < q else (q, p))
    return edges


__all__ = ['wireframe_edges']

import numpy as np
import pytest

from eggwrap.geometry_checks import (
    CheckResult,
    check_mesh,
    edge_counts,
    faces_outward,
    surface_watertight,
    uvs_in_unit_square,
)
from eggwrap.lathe import EggMesh, build_egg_mesh
from eggwrap.mesh import wireframe_edges
from eggwrap.settings import EggShapeParams, VerticalMapping


@pytest.fixture(scope='module')
def egg():
    return build_egg_mesh(EggShapeParams(segments=32), VerticalMapping())


def _variant(mesh, positions=None, uvs=None, faces=None):
    return EggMesh(
        mesh.positions if positions is None else positions,
        mesh.normals,
        mesh.uvs if uvs is None else uvs,
        mesh.faces if faces is None else faces,
        mesh.segments,
        mesh.profile_count,
    )


def test_top_ring_leaves_small_opening(egg):
    result = surface_watertight(egg)
    assert not result
    assert result.warnings == ['32 boundary edges detected']


def test_watertight_once_top_ring_welded(egg):
    result = surface_watertight(egg, tol=1e-3)
    assert result.ok, result.warnings


def test_edge_counts(egg):
    edges, counts = edge_counts(egg)
    assert set(counts.tolist()) == {1, 2}
    top = egg.profile_count - 1
    assert np.all(edges[counts == 1] % egg.profile_count == top)


def test_edge_counts_rejects_other_types():
    with pytest.raises(ValueError):
        surface_watertight([[0, 0, 0]])


def test_faces_point_outward(egg):
    assert faces_outward(egg).ok


def test_flipped_faces_detected(egg):
    result = faces_outward(_variant(egg, faces=egg.faces[:, ::-1].copy()))
    assert not result.ok
    assert 'inward' in result.warnings[0]


def test_uv_range_check():
    assert uvs_in_unit_square([[0.0, 0.0], [1.0, 1.0], [0.5, 0.25]])
    result = uvs_in_unit_square([[0.5, 0.5], [0.5, 1.2]])
    assert not result.ok
    assert 'first at 1' in result.warnings[0]


def test_check_result_truthiness():
    assert CheckResult(True, [])
    assert not CheckResult(False, ['x'])


@pytest.mark.parametrize('shape', [
    EggShapeParams(segments=3),
    EggShapeParams(segments=32),
    EggShapeParams(radius_x=0.3, radius_y=2.0, radius_z=1.7, segments=64),
])
def test_built_meshes_pass_full_check(shape):
    result = check_mesh(build_egg_mesh(shape, VerticalMapping(coverage=0.4, offset=0.2)))
    assert result.ok, result.warnings


def test_open_seam_detected(egg):
    positions = egg.positions.copy()
    positions[egg.ring(egg.segments), 0] += 0.01
    result = check_mesh(_variant(egg, positions=positions))
    assert not result.ok
    assert any('away from the top pole' in w for w in result.warnings)


def test_full_check_collects_every_failure(egg):
    result = check_mesh(_variant(egg, uvs=egg.uvs + 2.0, faces=egg.faces[:, ::-1].copy()))
    assert not result.ok
    assert len(result.warnings) == 2


def test_wireframe_edges_are_unique(egg):
    edges = wireframe_edges(egg)
    assert all(a < b for a, b in edges)
    n, p = egg.segments, egg.profile_count
    # ring edges, profile edges and one diagonal per quad
    assert len(edges) == n * p + (n + 1) * (p - 1) + n * (p - 1)


def test_wireframe_edges_rejects_other_types():
    with pytest.raises(ValueError):
        wireframe_edges(np.zeros((3, 3)))

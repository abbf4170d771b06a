import numpy as np
import pytest

from eggwrap.settings import ProjectionSettings
from eggwrap.texture import CLAMP_TO_EDGE, REPEAT, TextureSampling, sample
from eggwrap.xform import projection_matrix


def _checker():
    # 2 rows x 4 columns, every pixel distinct
    pixels = np.zeros((2, 4, 4), dtype=np.uint8)
    for r in range(2):
        for c in range(4):
            pixels[r, c] = (r * 4 + c, 0, 0, 255)
    return pixels


def test_default_sampling_state():
    sampling = TextureSampling()
    assert sampling.matrix.isidentity()
    assert sampling.wrap_s == REPEAT
    assert sampling.wrap_t == CLAMP_TO_EDGE
    assert sampling.matrix_auto_update is False

    d = sampling.to_dict()
    assert d['wrapS'] == 'repeat'
    assert d['wrapT'] == 'clamp_to_edge'
    assert d['anisotropy'] == 16
    assert d['minFilter'] == 'linear_mipmap_linear'
    assert d['matrix'] == [1, 0, 0, 0, 1, 0, 0, 0, 1]


def test_top_row_at_high_v():
    pixels = _checker()
    out = sample(pixels, [[0.1, 0.9], [0.9, 0.1]], TextureSampling())
    assert out[0, 0] == 0
    assert out[1, 0] == 7


def test_u_repeats():
    pixels = _checker()
    out = sample(pixels, [[0.1, 0.9], [1.1, 0.9], [-0.9, 0.9]], TextureSampling())
    assert out[0, 0] == out[1, 0] == out[2, 0]


def test_v_clamps_to_edge_rows():
    pixels = _checker()
    out = sample(pixels, [[0.3, 1.5], [0.3, -0.5]], TextureSampling())
    assert out[0, 0] == 1
    assert out[1, 0] == 5


def test_sampling_goes_through_matrix():
    pixels = _checker()
    sampling = TextureSampling(matrix=projection_matrix(ProjectionSettings()))
    # half a turn about the centre swaps opposite corners
    out = sample(pixels, [[0.1, 0.9]], sampling)
    assert out[0, 0] == 7


def test_unknown_wrap_mode():
    with pytest.raises(ValueError):
        sample(_checker(), [[0.5, 0.5]], TextureSampling(wrap_s='mirror'))

"""Texture sampling state and a CPU reference sampler.

The projection matrix is applied at sample time to UVs that were baked
into the mesh by :mod:`eggwrap.uvmap`.  ``u`` repeats, so the design
tiles around the egg; ``v`` clamps to the edge rows and never tiles
past the coverage band.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from eggwrap.xform import Matrix

REPEAT = "repeat"
CLAMP_TO_EDGE = "clamp_to_edge"


@dataclass(frozen=True)
class TextureSampling:
    """How a host must sample the design texture.

    ``matrix_auto_update`` is always off: ``matrix`` is authoritative and
    must not be re-derived from offset or repeat scalars.
    """

    matrix: Matrix = field(default_factory=Matrix)
    matrix_auto_update: bool = False
    wrap_s: str = REPEAT
    wrap_t: str = CLAMP_TO_EDGE
    anisotropy: int = 16
    mag_filter: str = "linear"
    min_filter: str = "linear_mipmap_linear"

    def to_dict(self):
        """Return a JSON-serializable dict."""
        return {
            "matrix": list(self.matrix.elements()),
            "matrixAutoUpdate": self.matrix_auto_update,
            "wrapS": self.wrap_s,
            "wrapT": self.wrap_t,
            "anisotropy": self.anisotropy,
            "magFilter": self.mag_filter,
            "minFilter": self.min_filter,
        }


def _wrap(coord: np.ndarray, mode: str) -> np.ndarray:
    if mode == REPEAT:
        return np.mod(coord, 1.0)
    if mode == CLAMP_TO_EDGE:
        return np.clip(coord, 0.0, 1.0)
    raise ValueError(f"unknown wrap mode: {mode}")


def sample(pixels: np.ndarray, uv, sampling: TextureSampling) -> np.ndarray:
    """Nearest-neighbour lookup of ``pixels`` at each ``(u, v)``.

    ``pixels`` is a ``(height, width, channels)`` array whose first row
    is the top of the image; ``v = 1`` addresses that row, as with an
    uploaded texture.  Returns an ``(n, channels)`` array.
    """

    uv = np.atleast_2d(np.asarray(uv, dtype=float))
    mapped = sampling.matrix.apply(uv)
    u = _wrap(mapped[:, 0], sampling.wrap_s)
    v = _wrap(mapped[:, 1], sampling.wrap_t)

    height, width = pixels.shape[:2]
    col = np.minimum((u * width).astype(np.int64), width - 1)
    row = np.minimum(((1.0 - v) * height).astype(np.int64), height - 1)
    return pixels[row, col]


__all__ = ['CLAMP_TO_EDGE', 'REPEAT', 'TextureSampling', 'sample']

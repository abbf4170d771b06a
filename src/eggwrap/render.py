"""Render composition: the material layers a host draws over one mesh."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from eggwrap.lathe import EggMesh
from eggwrap.mesh import wireframe_edges
from eggwrap.raster import RasterImage
from eggwrap.settings import Appearance
from eggwrap.texture import TextureSampling

SURFACE_ROUGHNESS = 0.1
SURFACE_METALNESS = 0.0
WIREFRAME_COLOR = "#000000"
WIREFRAME_OPACITY = 0.1


@dataclass(frozen=True)
class Layer:
    name: str
    mesh: EggMesh
    material: Dict[str, Any] = field(default_factory=dict)


def compose_layers(mesh: EggMesh,
                   appearance: Appearance,
                   raster: Optional[RasterImage] = None,
                   sampling: Optional[TextureSampling] = None) -> List[Layer]:
    """Return the layers to draw, bottom first.

    The base surface is always present; the design layer only once a
    texture is installed; the wireframe only when requested.
    """

    appearance.validate()
    layers = [Layer('base', mesh, {
        'type': 'standard',
        'color': appearance.egg_color,
        'roughness': SURFACE_ROUGHNESS,
        'metalness': SURFACE_METALNESS,
    })]

    if raster is not None:
        layers.append(Layer('design', mesh, {
            'type': 'standard',
            'map': raster,
            'sampling': sampling if sampling is not None else TextureSampling(),
            'transparent': True,
            'opacity': appearance.texture_opacity,
            'roughness': SURFACE_ROUGHNESS,
            'metalness': SURFACE_METALNESS,
        }))

    if appearance.show_wireframe:
        layers.append(Layer('wireframe', mesh, {
            'type': 'basic',
            'color': WIREFRAME_COLOR,
            'wireframe': True,
            'edges': wireframe_edges(mesh),
            'transparent': True,
            'opacity': WIREFRAME_OPACITY,
        }))

    return layers


__all__ = ['Layer', 'compose_layers']

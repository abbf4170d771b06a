import pytest

from eggwrap.errors import EggWrapError, InvalidShapeParameter
from eggwrap.settings import (
    Appearance,
    EggShapeParams,
    ProjectionSettings,
    ProjectorSettings,
    RasterSettings,
    VerticalMapping,
)


def test_startup_defaults():
    s = ProjectorSettings()
    s.validate()
    assert (s.shape.radius_x, s.shape.radius_y, s.shape.radius_z) == (1.0, 1.2, 1.0)
    assert s.shape.segments == 512
    assert s.vertical.coverage == 0.7
    assert s.projection.rotation_degrees == 180
    assert s.projection.offset == (0.0, 0.0)
    assert s.raster.resolution == 72
    assert s.appearance.egg_color == '#F0EAD6'
    assert s.appearance.texture_opacity == 1.0
    assert not s.appearance.show_wireframe


def test_reset_values_differ_from_startup():
    s = ProjectorSettings.reset()
    assert s.shape.radius_y == 1.5
    assert s.appearance.egg_color == '#ffffff'
    assert s.projection == ProjectionSettings()
    assert s.vertical == VerticalMapping()


def test_rotation_is_normalized():
    assert ProjectionSettings(rotation_degrees=450).rotation_degrees == 90
    assert ProjectionSettings(rotation_degrees=-90).rotation_degrees == 270
    assert ProjectionSettings(rotation_degrees=300).rotated(90).rotation_degrees == 30
    assert ProjectionSettings().rotated(180).rotation_degrees == 0


def test_offset_becomes_tuple():
    p = ProjectionSettings(offset=[0.1, 0.2])
    assert p.offset == (0.1, 0.2)
    assert hash(p) == hash(ProjectionSettings(offset=(0.1, 0.2)))


@pytest.mark.parametrize('bad', [
    EggShapeParams(segments=2),
    EggShapeParams(segments=12.0),
    EggShapeParams(radius_x=-1.0),
    EggShapeParams(radius_z=float('inf')),
    VerticalMapping(coverage=0.0),
    VerticalMapping(offset=float('nan')),
    ProjectionSettings(size=0.0),
    ProjectionSettings(offset=(0.0, -1.5)),
    RasterSettings(0),
    RasterSettings(72.0),
    Appearance(texture_opacity=1.5),
    Appearance(egg_color=''),
])
def test_validation_rejects(bad):
    with pytest.raises(InvalidShapeParameter) as info:
        bad.validate()
    assert 'field' in info.value.details


def test_errors_are_value_errors():
    err = InvalidShapeParameter('bad', {'field': 'x'})
    assert isinstance(err, ValueError)
    assert isinstance(err, EggWrapError)
    assert err.details == {'field': 'x'}


def test_from_dict_accepts_camel_case():
    s = ProjectorSettings.from_dict({
        'shape': {'radiusX': 0.9, 'radiusY': 1.4, 'segments': 64},
        'vertical': {'verticalCoverage': 0.5, 'verticalOffset': 0.1},
        'projection': {'projectionSize': 1.5, 'offset': {'x': 0.2, 'y': -0.1},
                       'designRotation': 90},
        'raster': {'resolution': 144},
        'appearance': {'eggColor': '#123456', 'showWireframe': True},
    })
    assert s.shape == EggShapeParams(radius_x=0.9, radius_y=1.4, segments=64)
    assert s.vertical == VerticalMapping(coverage=0.5, offset=0.1)
    assert s.projection == ProjectionSettings(size=1.5, offset=(0.2, -0.1), rotation_degrees=90)
    assert s.raster.resolution == 144
    assert s.appearance.egg_color == '#123456'
    assert s.appearance.show_wireframe


def test_from_dict_round_trip():
    s = ProjectorSettings.reset()
    assert ProjectorSettings.from_dict(s.to_dict()) == s


def test_empty_dict_gives_defaults():
    assert ProjectorSettings.from_dict(None) == ProjectorSettings()
    assert ProjectorSettings.from_dict({}) == ProjectorSettings()


@pytest.mark.parametrize('offset', [0.5, (0.1,), (0.1, 0.2, 0.3), 'xy'])
def test_offset_must_be_a_pair(offset):
    with pytest.raises(InvalidShapeParameter) as info:
        ProjectionSettings.from_dict({'offset': offset})
    assert info.value.details['field'] == 'offset'


@pytest.mark.parametrize('flag', ['false', 0, 1, None])
def test_wireframe_flag_must_be_bool(flag):
    appearance = Appearance.from_dict({'showWireframe': flag})
    with pytest.raises(InvalidShapeParameter) as info:
        appearance.validate()
    assert info.value.details['field'] == 'show_wireframe'


def test_wireframe_flag_from_dict():
    assert Appearance.from_dict({'showWireframe': True}).show_wireframe is True
    assert Appearance.from_dict({'show_wireframe': False}).show_wireframe is False

import logging
import xml.etree.ElementTree as ET

import numpy as np
import pytest

from eggwrap.errors import InvalidShapeParameter, VectorParseFailure
from eggwrap.raster import (
    PAGE_HEIGHT,
    PAGE_WIDTH,
    fit_to_page,
    native_size,
    raster_size,
    rasterize_svg,
)

WIDE_SVG = """<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 400 100">
  <rect x="0" y="0" width="400" height="100" fill="#ff0000"/>
</svg>"""

SQUARE_SVG = """<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 100">
  <rect x="0" y="0" width="50" height="100" fill="#ff0000"/>
</svg>"""


def test_page_size_at_base_resolution():
    assert raster_size(72) == (PAGE_WIDTH, PAGE_HEIGHT)


def test_page_size_scales_with_resolution():
    assert raster_size(90) == (4000, 1000)
    assert raster_size(144) == (6400, 1600)
    assert raster_size(73) == (3244, 811)


@pytest.mark.parametrize('resolution', [0, -72, 72.0])
def test_bad_resolution(resolution):
    with pytest.raises(InvalidShapeParameter):
        raster_size(resolution)


def test_native_size_prefers_viewbox():
    root = ET.fromstring('<svg xmlns="http://www.w3.org/2000/svg" '
                         'width="10" height="10" viewBox="0,0 640 160"/>')
    assert native_size(root) == (640.0, 160.0)


def test_native_size_from_attributes():
    root = ET.fromstring('<svg xmlns="http://www.w3.org/2000/svg" width="300px" height="150"/>')
    assert native_size(root) == (300.0, 150.0)


def test_native_size_defaults():
    root = ET.fromstring('<svg xmlns="http://www.w3.org/2000/svg"/>')
    assert native_size(root) == (100.0, 100.0)


def test_malformed_viewbox():
    root = ET.fromstring('<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 10"/>')
    with pytest.raises(VectorParseFailure):
        native_size(root)


def test_fit_to_page_forces_stretch():
    document, size, warnings = fit_to_page(WIDE_SVG)
    root = ET.fromstring(document)
    assert root.get('width') == str(PAGE_WIDTH)
    assert root.get('height') == str(PAGE_HEIGHT)
    assert root.get('preserveAspectRatio') == 'none'
    assert root.get('viewBox') == '0 0 400 100'
    assert size == (400.0, 100.0)
    assert warnings == []


def test_aspect_mismatch_warns(caplog):
    with caplog.at_level(logging.WARNING, logger='eggwrap.raster'):
        _, _, warnings = fit_to_page(SQUARE_SVG)
    assert len(warnings) == 1
    assert 'aspect' in warnings[0]
    assert any('aspect' in rec.getMessage() for rec in caplog.records)


def test_malformed_svg():
    with pytest.raises(VectorParseFailure):
        fit_to_page('<svg xmlns="http://www.w3.org/2000/svg"><rect></svg>')


def test_non_svg_root():
    with pytest.raises(VectorParseFailure):
        fit_to_page('<html><body/></html>')


def test_rasterize_fills_page():
    image = rasterize_svg(WIDE_SVG)
    assert image.pixels.shape == (PAGE_HEIGHT, PAGE_WIDTH, 4)
    assert image.pixels.dtype == np.uint8
    assert (image.width, image.height) == (PAGE_WIDTH, PAGE_HEIGHT)
    assert tuple(image.pixels[400, 1600]) == (255, 0, 0, 255)
    assert image.warnings == []


def test_rasterize_at_higher_resolution():
    image = rasterize_svg(WIDE_SVG, 90)
    assert image.pixels.shape == (1000, 4000, 4)
    assert image.resolution == 90
    assert tuple(image.pixels[500, 2000]) == (255, 0, 0, 255)


def test_rasterize_stretches_mismatched_aspect():
    image = rasterize_svg(SQUARE_SVG)
    assert image.pixels.shape == (PAGE_HEIGHT, PAGE_WIDTH, 4)
    assert image.native_size == (100.0, 100.0)
    assert len(image.warnings) == 1
    # left half of the source covers the left half of the page
    assert tuple(image.pixels[400, 800]) == (255, 0, 0, 255)
    assert image.pixels[400, 2400][3] == 0


def test_rasterize_rejects_garbage():
    with pytest.raises(VectorParseFailure):
        rasterize_svg('not svg at all')

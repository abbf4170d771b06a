"""Rasterize an SVG design onto the fixed-aspect texture page.

The source document is forced onto a 3200x800 page whatever its native
aspect ratio (``preserveAspectRatio="none"``), then rendered at
``resolution / 72`` times the page size.  Non-uniform stretching is the
intended result; a mismatched aspect is only reported as a warning.
"""

from __future__ import annotations

import io
import logging
import math
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import cairosvg
import numpy as np
from PIL import Image

from eggwrap.errors import RasterizationFailure, VectorParseFailure
from eggwrap.settings import BASE_RESOLUTION, RasterSettings

logger = logging.getLogger(__name__)

PAGE_WIDTH = 3200
PAGE_HEIGHT = 800
ASPECT_TOLERANCE = 0.01
DEFAULT_NATIVE_SIZE = 100.0

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"

ET.register_namespace("", SVG_NS)
ET.register_namespace("xlink", XLINK_NS)

_LEADING_FLOAT = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


@dataclass
class RasterImage:
    """RGBA pixel buffer ready for texture upload (row 0 is the top)."""

    pixels: np.ndarray
    resolution: int
    native_size: Tuple[float, float]
    warnings: List[str] = field(default_factory=list)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def raster_size(resolution: int) -> Tuple[int, int]:
    """Pixel ``(width, height)`` of the page at ``resolution``."""

    RasterSettings(resolution).validate()
    scale = resolution / BASE_RESOLUTION
    return _round_half_up(PAGE_WIDTH * scale), _round_half_up(PAGE_HEIGHT * scale)


def _parse_length(text: Optional[str], default: float = DEFAULT_NATIVE_SIZE) -> float:
    # leading number only, units are ignored
    if text is None:
        return default
    match = _LEADING_FLOAT.match(text)
    if not match:
        return float("nan")
    return float(match.group(1))


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def native_size(root: ET.Element) -> Tuple[float, float]:
    """Width and height from ``viewBox`` if present, else the attributes."""

    view_box = root.get("viewBox")
    if view_box is not None:
        parts = [p for p in re.split(r"[\s,]+", view_box.strip()) if p]
        try:
            values = [float(p) for p in parts]
        except ValueError:
            raise VectorParseFailure(f"malformed viewBox: {view_box!r}",
                                     {"viewBox": view_box}) from None
        if len(values) != 4:
            raise VectorParseFailure(f"malformed viewBox: {view_box!r}",
                                     {"viewBox": view_box})
        return values[2], values[3]
    return _parse_length(root.get("width")), _parse_length(root.get("height"))


def fit_to_page(svg_text: str) -> Tuple[bytes, Tuple[float, float], List[str]]:
    """Rewrite ``svg_text`` so it renders onto exactly the page size.

    Returns the serialized document, its native size, and any warnings.
    """

    try:
        root = ET.fromstring(svg_text)
    except ET.ParseError as exc:
        raise VectorParseFailure(f"could not parse SVG: {exc}",
                                 {"position": getattr(exc, "position", None)}) from exc
    if _local_name(root.tag) != "svg":
        raise VectorParseFailure(f"root element is <{_local_name(root.tag)}>, not <svg>",
                                 {"tag": root.tag})

    width, height = native_size(root)
    warnings = []
    aspect = width / height if height else float("nan")
    target = PAGE_WIDTH / PAGE_HEIGHT
    if not abs(aspect - target) <= ASPECT_TOLERANCE:
        msg = (f"stretching SVG with aspect {aspect:.3f} "
               f"({width:g}x{height:g}) to the {PAGE_WIDTH}x{PAGE_HEIGHT} page")
        logger.warning(msg)
        warnings.append(msg)

    root.set("width", str(PAGE_WIDTH))
    root.set("height", str(PAGE_HEIGHT))
    root.set("preserveAspectRatio", "none")
    return ET.tostring(root, encoding="utf-8"), (width, height), warnings


def rasterize_svg(svg_text: str, resolution: int = BASE_RESOLUTION) -> RasterImage:
    """Render ``svg_text`` into an RGBA buffer of exactly :func:`raster_size`.

    Raises :class:`VectorParseFailure` for malformed input and
    :class:`RasterizationFailure` if the renderer itself fails.
    """

    width, height = raster_size(resolution)
    document, size, warnings = fit_to_page(svg_text)

    try:
        png = cairosvg.svg2png(bytestring=document,
                               output_width=width,
                               output_height=height)
        image = Image.open(io.BytesIO(png)).convert("RGBA")
    except Exception as exc:
        raise RasterizationFailure(f"failed to render SVG: {exc}",
                                   {"width": width, "height": height}) from exc

    if image.size != (width, height):
        image = image.resize((width, height), Image.Resampling.BILINEAR)

    pixels = np.array(image)
    logger.debug("rasterized SVG to %dx%d at %d ppi", width, height, resolution)
    return RasterImage(pixels=pixels, resolution=resolution,
                       native_size=size, warnings=warnings)


__all__ = [
    'PAGE_HEIGHT',
    'PAGE_WIDTH',
    'RasterImage',
    'fit_to_page',
    'native_size',
    'raster_size',
    'rasterize_svg',
]

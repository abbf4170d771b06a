"""Parameter structs consumed by the egg mesh and texture pipelines.

Every struct is an immutable dataclass so that the pipelines can detect
changes with plain value equality.  ``from_dict`` accepts both the
camelCase keys used by UI hosts (``radiusX``, ``rotationDegrees``) and
the snake_case field names.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional, Tuple

from eggwrap.errors import InvalidShapeParameter
from eggwrap.geom import isgoodnum

DEFAULT_EGG_COLOR = "#F0EAD6"
RESET_EGG_COLOR = "#ffffff"
BASE_RESOLUTION = 72
OFFSET_LIMIT = 1.0


def _positive(name: str, value: Any) -> None:
    if not isgoodnum(value) or not math.isfinite(value) or value <= 0:
        raise InvalidShapeParameter(
            f"{name} must be a positive number, got {value!r}",
            {"field": name, "value": value},
        )


def _in_range(name: str, value: Any, lo: float, hi: float) -> None:
    if not isgoodnum(value) or not (lo <= value <= hi):
        raise InvalidShapeParameter(
            f"{name} must be in [{lo}, {hi}], got {value!r}",
            {"field": name, "value": value},
        )


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return default


@dataclass(frozen=True)
class EggShapeParams:
    """Proportions and tessellation of the egg solid."""

    radius_x: float = 1.0
    radius_y: float = 1.2
    radius_z: float = 1.0
    segments: int = 512

    def validate(self) -> None:
        """Validate configuration values."""
        _positive("radius_x", self.radius_x)
        _positive("radius_y", self.radius_y)
        _positive("radius_z", self.radius_z)
        if not isinstance(self.segments, int) or isinstance(self.segments, bool) \
                or self.segments < 3:
            raise InvalidShapeParameter(
                f"segments must be an integer >= 3, got {self.segments!r}",
                {"field": "segments", "value": self.segments},
            )

    def to_dict(self) -> Dict[str, object]:
        """Return a JSON-serializable dict."""
        return {
            "radiusX": self.radius_x,
            "radiusY": self.radius_y,
            "radiusZ": self.radius_z,
            "segments": self.segments,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EggShapeParams":
        base = cls()
        return cls(
            radius_x=_pick(data, "radiusX", "radius_x", default=base.radius_x),
            radius_y=_pick(data, "radiusY", "radius_y", default=base.radius_y),
            radius_z=_pick(data, "radiusZ", "radius_z", default=base.radius_z),
            segments=_pick(data, "segments", default=base.segments),
        )


@dataclass(frozen=True)
class VerticalMapping:
    """Vertical band of the egg that the design occupies.

    Applied when UVs are built, not at texture-sample time.
    """

    coverage: float = 0.7
    offset: float = 0.0

    @property
    def coverage_start(self) -> float:
        return 0.5 - self.coverage / 2 + self.offset

    @property
    def coverage_end(self) -> float:
        return 0.5 + self.coverage / 2 + self.offset

    def validate(self) -> None:
        """Validate configuration values."""
        _positive("coverage", self.coverage)
        if not isgoodnum(self.offset) or not math.isfinite(self.offset):
            raise InvalidShapeParameter(
                f"offset must be a finite number, got {self.offset!r}",
                {"field": "offset", "value": self.offset},
            )

    def to_dict(self) -> Dict[str, object]:
        """Return a JSON-serializable dict."""
        return {"coverage": self.coverage, "offset": self.offset}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "VerticalMapping":
        base = cls()
        return cls(
            coverage=_pick(data, "coverage", "verticalCoverage", default=base.coverage),
            offset=_pick(data, "offset", "verticalOffset", default=base.offset),
        )


@dataclass(frozen=True)
class ProjectionSettings:
    """Placement of the design over the already UV-mapped surface.

    ``offset`` is ``(0, 0)`` when the design is centred; the composed
    matrix is then the identity for ``size=1`` and no rotation.
    """

    size: float = 1.0
    offset: Tuple[float, float] = (0.0, 0.0)
    rotation_degrees: float = 180.0

    def __post_init__(self):
        if not isinstance(self.offset, (tuple, list)) or len(self.offset) != 2:
            raise InvalidShapeParameter(
                "offset must be an (x, y) pair", {"field": "offset", "value": self.offset}
            )
        object.__setattr__(self, "offset", tuple(self.offset))
        if isgoodnum(self.rotation_degrees):
            object.__setattr__(self, "rotation_degrees", self.rotation_degrees % 360)

    def rotated(self, degrees: float) -> "ProjectionSettings":
        """Return a copy turned by ``degrees`` (the 90/180 presets)."""
        return replace(self, rotation_degrees=(self.rotation_degrees + degrees) % 360)

    def validate(self) -> None:
        """Validate configuration values."""
        _positive("size", self.size)
        _in_range("offset.x", self.offset[0], -OFFSET_LIMIT, OFFSET_LIMIT)
        _in_range("offset.y", self.offset[1], -OFFSET_LIMIT, OFFSET_LIMIT)
        if not isgoodnum(self.rotation_degrees) or not math.isfinite(self.rotation_degrees):
            raise InvalidShapeParameter(
                f"rotation_degrees must be a finite number, got {self.rotation_degrees!r}",
                {"field": "rotation_degrees", "value": self.rotation_degrees},
            )

    def to_dict(self) -> Dict[str, object]:
        """Return a JSON-serializable dict."""
        return {
            "size": self.size,
            "offset": {"x": self.offset[0], "y": self.offset[1]},
            "rotationDegrees": self.rotation_degrees,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProjectionSettings":
        base = cls()
        offset = _pick(data, "offset", "projectionOffset", default=base.offset)
        if isinstance(offset, Mapping):
            offset = (offset.get("x", 0.0), offset.get("y", 0.0))
        return cls(
            size=_pick(data, "size", "projectionSize", default=base.size),
            offset=offset,
            rotation_degrees=_pick(
                data, "rotationDegrees", "rotation_degrees", "designRotation",
                default=base.rotation_degrees,
            ),
        )


@dataclass(frozen=True)
class RasterSettings:
    """Rasterization density; 72 reproduces the base page size."""

    resolution: int = BASE_RESOLUTION

    def validate(self) -> None:
        """Validate configuration values."""
        if not isinstance(self.resolution, int) or isinstance(self.resolution, bool) \
                or self.resolution <= 0:
            raise InvalidShapeParameter(
                f"resolution must be a positive integer, got {self.resolution!r}",
                {"field": "resolution", "value": self.resolution},
            )

    def to_dict(self) -> Dict[str, object]:
        """Return a JSON-serializable dict."""
        return {"resolution": self.resolution}


@dataclass(frozen=True)
class Appearance:
    """Material inputs forwarded untouched to render composition."""

    egg_color: str = DEFAULT_EGG_COLOR
    texture_opacity: float = 1.0
    show_wireframe: bool = False

    def validate(self) -> None:
        """Validate configuration values."""
        _in_range("texture_opacity", self.texture_opacity, 0.0, 1.0)
        if not isinstance(self.egg_color, str) or not self.egg_color:
            raise InvalidShapeParameter(
                "egg_color must be a non-empty colour string",
                {"field": "egg_color", "value": self.egg_color},
            )
        if not isinstance(self.show_wireframe, bool):
            raise InvalidShapeParameter(
                f"show_wireframe must be a bool, got {self.show_wireframe!r}",
                {"field": "show_wireframe", "value": self.show_wireframe},
            )

    def to_dict(self) -> Dict[str, object]:
        """Return a JSON-serializable dict."""
        return {
            "eggColor": self.egg_color,
            "textureOpacity": self.texture_opacity,
            "showWireframe": self.show_wireframe,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Appearance":
        base = cls()
        return cls(
            egg_color=_pick(data, "eggColor", "egg_color", default=base.egg_color),
            texture_opacity=_pick(
                data, "textureOpacity", "texture_opacity", default=base.texture_opacity
            ),
            show_wireframe=_pick(
                data, "showWireframe", "show_wireframe", default=base.show_wireframe
            ),
        )


@dataclass(frozen=True)
class ProjectorSettings:
    """Everything the UI host hands to the core in one struct."""

    shape: EggShapeParams = field(default_factory=EggShapeParams)
    vertical: VerticalMapping = field(default_factory=VerticalMapping)
    projection: ProjectionSettings = field(default_factory=ProjectionSettings)
    raster: RasterSettings = field(default_factory=RasterSettings)
    appearance: Appearance = field(default_factory=Appearance)

    @classmethod
    def reset(cls) -> "ProjectorSettings":
        """Values restored by the host's "Reset Settings" action.

        These differ from the startup values in the egg height and colour.
        """
        return cls(
            shape=EggShapeParams(radius_y=1.5),
            appearance=Appearance(egg_color=RESET_EGG_COLOR),
        )

    def validate(self) -> None:
        """Validate configuration values."""
        self.shape.validate()
        self.vertical.validate()
        self.projection.validate()
        self.raster.validate()
        self.appearance.validate()

    def to_dict(self) -> Dict[str, object]:
        """Return a JSON-serializable dict."""
        return {
            "shape": self.shape.to_dict(),
            "vertical": self.vertical.to_dict(),
            "projection": self.projection.to_dict(),
            "raster": self.raster.to_dict(),
            "appearance": self.appearance.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ProjectorSettings":
        data = data or {}
        raster = data.get("raster", {})
        return cls(
            shape=EggShapeParams.from_dict(data.get("shape", {})),
            vertical=VerticalMapping.from_dict(data.get("vertical", {})),
            projection=ProjectionSettings.from_dict(data.get("projection", {})),
            raster=RasterSettings(raster.get("resolution", BASE_RESOLUTION)),
            appearance=Appearance.from_dict(data.get("appearance", {})),
        )


__all__ = [
    "Appearance",
    "BASE_RESOLUTION",
    "EggShapeParams",
    "ProjectionSettings",
    "ProjectorSettings",
    "RasterSettings",
    "VerticalMapping",
]

"""Reactive recomputation of the mesh, texture and projection outputs.

Each pipeline owns one output slot, recomputes it only when its own
inputs change, and swaps the new value in whole.  Failures never clear
a slot: the last good mesh, texture or matrix stays installed and the
error is returned as a :class:`PipelineResult`.

Rasterization may run on an executor.  Every request carries a
generation number and only the most recent request may install its
result; late completions of superseded requests come back as
``stale`` and are dropped.
"""

from __future__ import annotations

import itertools
import logging
import threading
from concurrent.futures import Executor, Future
from dataclasses import dataclass, replace
from typing import Any, Callable, List, Optional, Tuple

from eggwrap.errors import (
    EggWrapError,
    InvalidShapeParameter,
    RasterizationFailure,
    VectorParseFailure,
)
from eggwrap.geometry_checks import check_mesh
from eggwrap.lathe import EggMesh, build_egg_mesh
from eggwrap.raster import RasterImage, rasterize_svg
from eggwrap.render import Layer, compose_layers
from eggwrap.settings import (
    Appearance,
    EggShapeParams,
    ProjectionSettings,
    ProjectorSettings,
    RasterSettings,
    VerticalMapping,
)
from eggwrap.texture import TextureSampling
from eggwrap.xform import projection_matrix

logger = logging.getLogger(__name__)

OK = "ok"
UNCHANGED = "unchanged"
ERROR = "error"
STALE = "stale"
PENDING = "pending"


@dataclass(frozen=True)
class PipelineResult:
    """Outcome of one recomputation.

    ``value`` is whatever the slot holds afterwards, which after an
    error or a stale completion is the previous good value.
    """

    status: str
    value: Any = None
    error: Optional[EggWrapError] = None

    @property
    def ok(self) -> bool:
        return self.status in (OK, UNCHANGED, PENDING)


class MeshPipeline:
    """Egg mesh and UVs, rebuilt when shape or vertical mapping change."""

    def __init__(self):
        self._inputs: Optional[Tuple[EggShapeParams, VerticalMapping]] = None
        self._mesh: Optional[EggMesh] = None

    @property
    def mesh(self) -> Optional[EggMesh]:
        return self._mesh

    def update(self, shape: EggShapeParams, vertical: VerticalMapping) -> PipelineResult:
        inputs = (shape, vertical)
        if self._mesh is not None and inputs == self._inputs:
            return PipelineResult(UNCHANGED, self._mesh)
        try:
            mesh = build_egg_mesh(shape, vertical)
            check = check_mesh(mesh)
            if not check.ok:
                raise InvalidShapeParameter(
                    f"mesh failed validation: {'; '.join(check.warnings)}",
                    {"warnings": check.warnings},
                )
        except EggWrapError as exc:
            logger.warning("mesh rebuild rejected: %s", exc)
            return PipelineResult(ERROR, self._mesh, exc)
        self._inputs = inputs
        self._mesh = mesh
        return PipelineResult(OK, mesh)


@dataclass(frozen=True)
class RasterRequest:
    generation: int
    svg_text: str
    resolution: int


class RasterPipeline:
    """Design texture, re-rasterized when the SVG or resolution change."""

    def __init__(self, rasterizer: Callable[[str, int], RasterImage] = rasterize_svg):
        self._rasterizer = rasterizer
        self._counter = itertools.count(1)
        self._lock = threading.Lock()
        self._latest: Optional[RasterRequest] = None
        self._pending = False
        self._image: Optional[RasterImage] = None

    @property
    def image(self) -> Optional[RasterImage]:
        return self._image

    @property
    def loading(self) -> bool:
        """True while the most recent request has not completed."""
        return self._pending

    def request(self, svg_text: Optional[str], resolution: int) -> Optional[RasterRequest]:
        """Open a request superseding every earlier one.

        Returns ``None`` when there is no source or when the inputs match
        the latest request.
        """
        if svg_text is None:
            return None
        with self._lock:
            latest = self._latest
            if latest is not None and (latest.svg_text, latest.resolution) == (svg_text, resolution):
                return None
            req = RasterRequest(next(self._counter), svg_text, resolution)
            self._latest = req
            self._pending = True
        return req

    def run(self, req: RasterRequest) -> PipelineResult:
        """Rasterize ``req`` on the calling thread and try to install it."""
        try:
            image = self._rasterizer(req.svg_text, req.resolution)
        except EggWrapError as exc:
            return self._finish(req, None, exc)
        except Exception as exc:
            failure = RasterizationFailure(f"rasterizer raised {type(exc).__name__}: {exc}",
                                           {"generation": req.generation,
                                            "resolution": req.resolution})
            failure.__cause__ = exc
            return self._finish(req, None, failure)
        return self._finish(req, image, None)

    def submit(self, req: RasterRequest, executor: Executor) -> Future:
        """Run ``req`` on ``executor``; the future resolves to a result."""
        return executor.submit(self.run, req)

    def _finish(self, req: RasterRequest, image: Optional[RasterImage],
                error: Optional[EggWrapError]) -> PipelineResult:
        with self._lock:
            if self._latest is None or req.generation != self._latest.generation:
                logger.debug("discarding stale raster request %d", req.generation)
                return PipelineResult(STALE, self._image)
            self._pending = False
            if error is not None:
                # forget the failed inputs so the same source can be retried
                self._latest = None
                logger.warning("rasterization failed, keeping previous texture: %s", error)
                return PipelineResult(ERROR, self._image, error)
            self._image = image
            return PipelineResult(OK, image)


class ProjectionPipeline:
    """Texture-sampling matrix, recomposed on every projection change."""

    def __init__(self):
        self._inputs: Optional[ProjectionSettings] = None
        self._sampling = TextureSampling()

    @property
    def sampling(self) -> TextureSampling:
        return self._sampling

    def update(self, settings: ProjectionSettings) -> PipelineResult:
        if settings == self._inputs:
            return PipelineResult(UNCHANGED, self._sampling)
        try:
            matrix = projection_matrix(settings)
        except EggWrapError as exc:
            logger.warning("projection update rejected: %s", exc)
            return PipelineResult(ERROR, self._sampling, exc)
        self._inputs = settings
        self._sampling = TextureSampling(matrix=matrix)
        return PipelineResult(OK, self._sampling)


class EggProjector:
    """Core facade driven by a UI host.

    Setters return a :class:`PipelineResult`; subscribers are called
    with ``"mesh"``, ``"texture"``, ``"projection"`` or ``"appearance"``
    whenever that output is replaced.  With an ``executor``,
    rasterization runs in the background and :meth:`load_svg` returns a
    ``pending`` result immediately; the outcome of the latest completed
    rasterization, failed or not, is kept in ``texture_result``.
    """

    def __init__(self, settings: Optional[ProjectorSettings] = None, *,
                 rasterizer: Callable[[str, int], RasterImage] = rasterize_svg,
                 executor: Optional[Executor] = None):
        self.settings = settings if settings is not None else ProjectorSettings()
        self.meshes = MeshPipeline()
        self.textures = RasterPipeline(rasterizer)
        self.projection = ProjectionPipeline()
        # the sampling matrix always reflects the current projection settings
        self.projection.update(self.settings.projection)
        self._executor = executor
        self._svg_text: Optional[str] = None
        self.texture_result: Optional[PipelineResult] = None
        self._listeners: List[Callable[[str], None]] = []

    @property
    def mesh(self) -> Optional[EggMesh]:
        return self.meshes.mesh

    @property
    def image(self) -> Optional[RasterImage]:
        return self.textures.image

    @property
    def sampling(self) -> TextureSampling:
        return self.projection.sampling

    @property
    def loading(self) -> bool:
        return self.textures.loading

    def subscribe(self, callback: Callable[[str], None]) -> Callable[[], None]:
        """Register a rebuild listener; returns a function that removes it."""
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)
        return unsubscribe

    def _notify(self, artifact: str) -> None:
        logger.debug("%s rebuilt", artifact)
        for callback in list(self._listeners):
            callback(artifact)

    def _announce(self, result: PipelineResult, artifact: str) -> PipelineResult:
        if result.status == OK:
            self._notify(artifact)
        return result

    def rebuild(self) -> List[PipelineResult]:
        """Bring every output up to date with the current settings."""
        return [
            self._announce(self.meshes.update(self.settings.shape, self.settings.vertical), "mesh"),
            self._announce(self.projection.update(self.settings.projection), "projection"),
            self._rasterize(),
        ]

    def set_shape(self, shape: EggShapeParams) -> PipelineResult:
        result = self.meshes.update(shape, self.settings.vertical)
        if result.status == OK:
            self.settings = replace(self.settings, shape=shape)
        return self._announce(result, "mesh")

    def set_vertical_mapping(self, vertical: VerticalMapping) -> PipelineResult:
        result = self.meshes.update(self.settings.shape, vertical)
        if result.status == OK:
            self.settings = replace(self.settings, vertical=vertical)
        return self._announce(result, "mesh")

    def set_projection(self, projection: ProjectionSettings) -> PipelineResult:
        result = self.projection.update(projection)
        if result.status == OK:
            self.settings = replace(self.settings, projection=projection)
        return self._announce(result, "projection")

    def rotate_design(self, degrees: float) -> PipelineResult:
        return self.set_projection(self.settings.projection.rotated(degrees))

    def set_appearance(self, appearance: Appearance) -> PipelineResult:
        try:
            appearance.validate()
        except EggWrapError as exc:
            return PipelineResult(ERROR, self.settings.appearance, exc)
        if appearance == self.settings.appearance:
            return PipelineResult(UNCHANGED, appearance)
        self.settings = replace(self.settings, appearance=appearance)
        return self._announce(PipelineResult(OK, appearance), "appearance")

    def set_resolution(self, resolution: int) -> PipelineResult:
        raster = RasterSettings(resolution)
        try:
            raster.validate()
        except EggWrapError as exc:
            return PipelineResult(ERROR, self.image, exc)
        self.settings = replace(self.settings, raster=raster)
        return self._rasterize()

    def load_svg(self, svg_text: Optional[str], filename: Optional[str] = None) -> PipelineResult:
        """Select a new design source; ``None`` means nothing selected."""
        if filename is not None and not filename.endswith(".svg"):
            exc = VectorParseFailure(f"not an SVG file: {filename}", {"filename": filename})
            return PipelineResult(ERROR, self.image, exc)
        self._svg_text = svg_text
        return self._rasterize()

    def reset(self) -> List[PipelineResult]:
        """Restore the reset values; the selected design is kept."""
        self.settings = ProjectorSettings.reset()
        return self.rebuild()

    def _rasterize(self) -> PipelineResult:
        req = self.textures.request(self._svg_text, self.settings.raster.resolution)
        if req is None:
            return PipelineResult(UNCHANGED, self.image)
        if self._executor is None:
            return self._texture_done(self.textures.run(req))

        future = self.textures.submit(req, self._executor)
        future.add_done_callback(self._on_raster_done)
        return PipelineResult(PENDING, self.image)

    def _on_raster_done(self, future: Future) -> None:
        self._texture_done(future.result())

    def _texture_done(self, result: PipelineResult) -> PipelineResult:
        if result.status != STALE:
            self.texture_result = result
        return self._announce(result, "texture")

    def layers(self) -> List[Layer]:
        """Material layers for the current outputs (empty before a mesh exists)."""
        if self.mesh is None:
            return []
        return compose_layers(self.mesh, self.settings.appearance, self.image, self.sampling)


__all__ = [
    'EggProjector',
    'MeshPipeline',
    'PipelineResult',
    'ProjectionPipeline',
    'RasterPipeline',
    'RasterRequest',
]

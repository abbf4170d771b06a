"""Error kinds raised by the eggWrap mesh and texture pipelines.

Low-level builders raise these; :mod:`eggwrap.pipeline` catches them and
reports a structured result instead, keeping the last good output.
"""

from __future__ import annotations


class EggWrapError(Exception):
    """Base class for every error raised by eggWrap."""

    def __init__(self, message, details=None):
        super().__init__(message)
        self.details = details or {}


class InvalidShapeParameter(EggWrapError, ValueError):
    """Raised when a shape, mapping or projection setting is out of range."""


class VectorParseFailure(EggWrapError, ValueError):
    """Raised when the vector image source cannot be parsed."""


class RasterizationFailure(EggWrapError, RuntimeError):
    """Raised when the renderer fails to produce a pixel buffer."""


__all__ = [
    'EggWrapError',
    'InvalidShapeParameter',
    'VectorParseFailure',
    'RasterizationFailure',
]

"""Exception hierarchy for the annealing core."""

from __future__ import annotations


class ShapeAnnealError(ValueError):
    """Base class for every error raised by :mod:`shape_anneal`."""


class InvalidDimensionsError(ShapeAnnealError):
    """A pixel buffer has zero area, a malformed shape, or is too small
    for the requested shape kind."""


class DegenerateShapeError(ShapeAnnealError):
    """A triangle was drawn with coincident or axis-collinear vertices.

    The candidate generator resamples on this error; it never reaches
    the annealing loop.
    """

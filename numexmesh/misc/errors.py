"""
Fatal error conditions of mesh construction.

None of these is recoverable at this layer: the caller has to restart the
mesh construction with corrected parameters.
"""

from typing import Optional, Sequence


class MeshGenerationError(Exception):
    """Base class of all mesh-construction failures."""


class InvalidNotchGeometry(MeshGenerationError, ValueError):
    """
    The depth / half-width combination cannot produce a valid contour.

    Raised for a non-positive half width, a negative depth, a depth beyond
    the body's own extent, or a round notch whose fillet would overshoot
    (depth > half width).
    """


class UnclassifiedBoundaryFace(MeshGenerationError, RuntimeError):
    """A boundary face matched none of the classification tests."""

    def __init__(self, centroid: Sequence[float],
            body: Optional[str] = None) -> None:
        self.centroid = tuple(float(c) for c in centroid)
        self.body = body
        prefix = '{} - '.format(body) if body else ''
        super().__init__(
            '[error] {}Found an unidentified face at the boundary with centre {}. '
            'Either the body geometry does not match the classifier or the '
            'search tolerance is misconfigured.'.format(prefix, self.centroid))


class DegenerateMeshOperation(MeshGenerationError, RuntimeError):
    """A mesh operation (e.g. cell removal) failed its sanity check."""

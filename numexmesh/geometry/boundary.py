"""
Boundary classification by coordinate proximity.

A boundary face is tagged by testing its centroid against a list of planes
in a fixed priority order; the first plane within the tolerance wins. Faces
that match no plane are tested against an optional curved surface (circle,
sphere or cylinder) using their vertices, since only the vertices are
guaranteed to lie on the curve.
"""

import numpy as np
from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple

from ..misc.enums import Axis, Tag
from ..misc.errors import UnclassifiedBoundaryFace
from ..misc.math_utils import vec_norm
from .manifold import FlatManifold
from .mesh import Mesh
from .point import Point, _as_point


Plane = Tuple[Tag, Axis, float]


class CurvedSurface(NamedTuple):
    """
    Circle (2D), sphere or cylinder (3D) used for curved-face detection.

    axis is the coordinate direction of a cylinder axis; the vertex
    distance is then measured perpendicular to it. None measures the full
    distance from the centre.
    """
    center: Point
    radius: float
    axis: Optional[int] = None
    tag: Tag = Tag.HOLE_EDGE

    def distance(self, vertex) -> float:
        pos = _as_point(vertex).pos
        center = _as_point(self.center).to3d().pos
        rel = pos - center[:pos.size]
        if self.axis is not None and int(self.axis) < rel.size:
            rel[int(self.axis)] = 0.0
        return float(vec_norm(rel)[0])

    def contains(self, vertex, tolerance: float) -> bool:
        return abs(self.distance(vertex) - self.radius) < tolerance


def default_planes(extents: Sequence[float]) -> List[Plane]:
    """x-, x+, y-, y+ [, z-, z+] planes of the box [0, extents]."""
    planes = []
    for k, extent in enumerate(extents):
        planes.append((Tag.minus(k), Axis(k), 0.0))
        planes.append((Tag.plus(k), Axis(k), float(extent)))
    return planes


class BoundaryClassifier(object):
    """
    Assign a boundary tag to a face from its centroid and vertices.

    Parameters
    ----------
    extents : sequence of float, optional
        Body dimensions per axis; gives the default planes x-, x+, y-, y+
        [, z-, z+] of the box [0, extents]
    planes : list of (Tag, Axis, float), optional
        Explicit planes in priority order (overrides extents)
    curved : CurvedSurface, optional
        Curved surface tested when no plane matches
    tolerance : float
        Proximity tolerance; must be below half the smallest feature
        separation of the mesh

    Examples
    --------
    >>> classifier = BoundaryClassifier(extents = (10.0, 10.0, 10.0))
    >>> classifier.classify(Point(1e-13, 1e-13, 5.0))
    <Tag.X_MINUS: 1>
    """

    def __init__(self,
            extents: Optional[Sequence[float]] = None,
            planes: Optional[Iterable[Plane]] = None,
            curved: Optional[CurvedSurface] = None,
            tolerance: float = 1e-12) -> None:
        if planes is None:
            if extents is None:
                raise ValueError('[error] BoundaryClassifier needs either extents or planes')
            planes = default_planes(extents)
        self.planes = [(Tag(tag), Axis(axis), float(value)) for tag, axis, value in planes]
        self.curved = curved
        self.tolerance = float(tolerance)

    def classify(self, centroid, vertices: Sequence = ()) -> Tag:
        centroid = _as_point(centroid)
        for tag, axis, value in self.planes:
            if axis < centroid.dim and abs(centroid[axis] - value) < self.tolerance:
                return tag

        if self.curved is not None:
            for vertex in vertices:
                if self.curved.contains(vertex, self.tolerance):
                    return self.curved.tag

        return Tag.UNCLASSIFIED

    def __repr__(self) -> str:
        return 'BoundaryClassifier(planes={}, curved={}, tolerance={:g})'.format(
            [(tag.name, axis.name, value) for tag, axis, value in self.planes], self.curved, self.tolerance)


def classify_boundary(mesh: Mesh, classifier: BoundaryClassifier,
        strict: bool = True, body: Optional[str] = None) -> Mesh:
    """
    Tag every boundary face of the mesh (in place).

    Faces the classifier cannot place keep the tag they already carry.

    Parameters
    ----------
    mesh : Mesh
    classifier : BoundaryClassifier
    strict : bool
        Raise on the first face that ends up unclassified
    body : str, optional
        Body name for the error message

    Raises
    ------
    UnclassifiedBoundaryFace
    """
    for face in mesh.boundary_faces():
        tag = classifier.classify(face.centroid, face.vertices)
        if tag != Tag.UNCLASSIFIED:
            mesh.set_boundary_id(face.key, tag)
        elif strict and mesh.boundary_id(face.key) == Tag.UNCLASSIFIED:
            raise UnclassifiedBoundaryFace(tuple(face.centroid), body)
    return mesh


def attach_curved_manifold(mesh: Mesh, surface: CurvedSurface, manifold_id: int,
        manifold: FlatManifold, tolerance: float = 1e-12) -> int:
    """
    Flag boundary faces with any vertex on the curved surface and register
    the manifold under manifold_id.

    Returns
    -------
    n_faces : int
        Number of flagged faces
    """
    count = 0
    for face in mesh.boundary_faces():
        if any(surface.contains(v, tolerance) for v in face.vertices):
            mesh.set_manifold_id(face.key, manifold_id)
            count += 1
    mesh.set_manifold(manifold_id, manifold)
    return count

"""
Notch geometry: contour offsets and in-place carving of mesh vertices.

A notch is described by its deepest point on the undisturbed face
(reference point), the outward face normal, the loading axis along which
the notch extends, the half width of the notched band and the depth.

The contour is either a straight taper (linear) or a circular fillet
(round). The fillet of radius R = (half_width^2 + depth^2) / (2 depth) is
tangent to the undisturbed face at the band edge |s| = half_width and
passes through the deepest point at s = 0; it exists only for
depth <= half_width.
"""

import warnings
from dataclasses import dataclass, replace
from typing import Optional, Tuple, Union

import numpy as np

from ..misc.enums import Axis, NotchType, Tag
from ..misc.errors import InvalidNotchGeometry
from .layers import shift_vertex_layer
from .manifold import FlatManifold
from .mesh import Mesh
from .point import Point, _as_point


@dataclass(frozen = True)
class NotchSpecification:
    """
    Immutable notch description.

    Properties
    ----------
    notch_type : NotchType
        Linear taper or round fillet
    half_width : float
        Half width of the notched band along the loading axis (> 0)
    depth : float
        Depth at the reference point (>= 0)
    reference_point : Point
        Deepest point of the notch on the undisturbed face
    boundary_tag : Tag
        Tag of the notched face
    face_normal : Point
        Outward unit normal of the notched face
    loading_axis : Axis
        Axis along which the band extends
    reference_radius : float, optional
        Extent of the body below the notched face (width, rod radius); the
        depth may not exceed it
    manifold_id : int, optional
        Manifold id of the notched faces

    Examples
    --------
    >>> notch = NotchSpecification(NotchType.LINEAR, 1.0, 0.5, Point(2.0, 5.0),
    ...     Tag.X_PLUS, Point(1.0, 0.0), Axis.Y, reference_radius = 2.0)
    >>> notch.offset(0.5)
    0.25
    """
    notch_type: NotchType
    half_width: float
    depth: float
    reference_point: Point
    boundary_tag: Tag
    face_normal: Point
    loading_axis: Axis
    reference_radius: Optional[float] = None
    manifold_id: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, 'notch_type', NotchType(self.notch_type))
        object.__setattr__(self, 'reference_point', _as_point(self.reference_point))
        object.__setattr__(self, 'face_normal', _as_point(self.face_normal))
        object.__setattr__(self, 'boundary_tag', Tag(self.boundary_tag))
        object.__setattr__(self, 'loading_axis', Axis(self.loading_axis))
        object.__setattr__(self, 'half_width', float(self.half_width))
        object.__setattr__(self, 'depth', float(self.depth))

        if not self.half_width > 0:
            raise InvalidNotchGeometry('[error] Notch half width must be > 0, got {}'.format(self.half_width))
        if self.depth < 0:
            raise InvalidNotchGeometry('[error] Notch depth must be >= 0, got {}'.format(self.depth))
        if self.reference_radius is not None and self.depth > self.reference_radius:
            raise InvalidNotchGeometry('[error] Notch depth {} exceeds the body extent {}'.format(
                self.depth, self.reference_radius))
        if self.face_normal.dim != self.reference_point.dim:
            raise InvalidNotchGeometry('[error] Face normal and reference point differ in dimension')
        if abs(self.face_normal.norm() - 1.0) > 1e-12:
            raise InvalidNotchGeometry('[error] Face normal must be a unit vector, got {}'.format(self.face_normal))
        if self.loading_axis >= self.dim or self.face_normal[self.loading_axis] != 0.0:
            raise InvalidNotchGeometry('[error] Loading axis must lie in the notched face')
        if self.notch_type == NotchType.ROUND and self.depth > self.half_width:
            raise InvalidNotchGeometry(
                '[error] Round notch with depth {} > half width {}: the fillet overshoots'.format(
                    self.depth, self.half_width))

    @property
    def dim(self) -> int:
        return self.reference_point.dim

    def to3d(self) -> 'NotchSpecification':
        """Same notch for the extruded 3D body."""
        return replace(self, reference_point = self.reference_point.to3d(),
                       face_normal = self.face_normal.to3d())

    @property
    def fillet_radius(self) -> Optional[float]:
        """Fillet radius of a round notch (None for linear notches)."""
        if self.notch_type != NotchType.ROUND:
            return None
        if self.depth == 0:
            return np.inf
        return (self.half_width ** 2 + self.depth ** 2) / (2.0 * self.depth)

    def fillet_centers(self) -> Optional[Tuple[Point, Point]]:
        """Centres of the fillet arcs at s = -half_width and s = +half_width."""
        R = self.fillet_radius
        if R is None or not np.isfinite(R):
            return None
        along = np.zeros(self.dim)
        along[self.loading_axis] = self.half_width
        base = self.reference_point.pos - self.face_normal.pos * R
        return Point(base - along), Point(base + along)

    @property
    def cyl_center(self) -> Optional[Point]:
        """Centre of the fillet arc on the positive side of the reference point."""
        centers = self.fillet_centers()
        return None if centers is None else centers[1]

    def axial_coordinate(self, points) -> np.ndarray:
        """Signed distance of points from the reference point along the loading axis."""
        pos = np.atleast_2d(np.asarray(points, dtype = float))
        return pos[:, self.loading_axis] - self.reference_point[self.loading_axis]

    def in_band(self, points) -> np.ndarray:
        """True for points whose axial distance is at most half_width."""
        s = self.axial_coordinate(points)
        return np.abs(s) <= self.half_width * (1 + 1e-12)

    def offset(self, s: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
        """
        Inward offset of the contour at axial distance s.

        Parameters
        ----------
        s : float or ndarray
            Axial distance from the reference point (sign ignored)

        Returns
        -------
        offset : float or ndarray
            depth at s = 0, 0 at and beyond |s| = half_width
        """
        a = np.abs(np.asarray(s, dtype = float))
        if self.depth == 0:
            out = np.zeros_like(a)
        elif self.notch_type == NotchType.LINEAR:
            out = np.clip(self.depth * (1.0 - a / self.half_width), 0.0, self.depth)
        else:
            R = self.fillet_radius
            # distance from the band edge, where the fillet touches the face
            u = self.half_width - np.minimum(a, self.half_width)
            out = np.clip(R - np.sqrt(np.maximum(R ** 2 - u ** 2, 0.0)), 0.0, self.depth)

        if np.ndim(out) == 0:
            return float(out)
        return out


class NotchContourManifold(FlatManifold):
    """
    Places new points of notched faces onto the notch contour.

    The parents' average keeps its axial and tangential coordinates; its
    coordinate along the face normal is set to the contour.
    """

    def __init__(self, notch: NotchSpecification) -> None:
        self.notch = notch

    def new_point(self, parents: np.ndarray) -> np.ndarray:
        p = np.mean(np.atleast_2d(parents), axis = 0)
        notch = self.notch
        s = p[notch.loading_axis] - notch.reference_point[notch.loading_axis]
        if abs(s) > notch.half_width:
            return p

        normal = notch.face_normal.pos[:p.size]
        height = (p - notch.reference_point.pos[:p.size]) @ normal
        return p - normal * (height + notch.offset(s))

    def __repr__(self) -> str:
        return 'NotchContourManifold({})'.format(self.notch)


def notch_body(mesh: Mesh, notch: NotchSpecification, radial: bool = False) -> int:
    """
    Carve the notch into the mesh by moving vertices in the band (in place).

    Vertices move inward along the face normal (or towards the loading axis
    when radial) by offset(s), scaled by their distance from the opposite
    face (or the axis) relative to reference_radius. Vertices on the
    notched face thus follow the contour exactly, vertices on the opposite
    face (or the axis) stay put. Without reference_radius the extent of the
    mesh behind the notched face takes its place.

    Parameters
    ----------
    mesh : Mesh
    notch : NotchSpecification
    radial : bool
        Rotationally symmetric notch around the loading axis (rods)

    Returns
    -------
    n_moved : int
        Number of vertices that moved

    Raises
    ------
    InvalidNotchGeometry
        If the notch is deeper than the body behind the notched face
    """
    if notch.dim != mesh.dim:
        raise ValueError('[error] Notch is {}D but the mesh is {}D'.format(notch.dim, mesh.dim))
    if notch.depth == 0:
        warnings.warn('Notch of zero depth, mesh left unchanged')
        return 0

    band = np.where(notch.in_band(mesh.vertices))[0]
    pos = mesh.vertices[band]
    off = notch.offset(notch.axial_coordinate(pos))
    R0 = notch.reference_radius

    if radial:
        if R0 is None:
            raise ValueError('[error] Radial notching needs the reference radius')
        axis_point = notch.reference_point.pos - notch.face_normal.pos * R0
        rel = pos - axis_point
        rel[:, notch.loading_axis] = 0.0
        # scaling the radial part moves the surface by off and keeps the axis
        new = pos - rel * (off / R0)[:, None]
    else:
        normal = notch.face_normal.pos
        if R0 is None:
            # extent of the body behind the notched face
            R0 = float(np.max((notch.reference_point.pos - mesh.vertices) @ normal))
            if notch.depth > R0:
                raise InvalidNotchGeometry('[error] Notch depth {} exceeds the body extent {}'.format(
                    notch.depth, R0))
        anchor = notch.reference_point.pos - normal * R0
        factor = np.clip((pos - anchor) @ normal / R0, 0.0, 1.0)
        new = pos - (off * factor)[:, None] * normal[None, :]

    mesh.vertices[band] = new
    return int(np.sum(np.any(new != pos, axis = 1)))


def prepare_mesh_for_notching(mesh: Mesh, notch: NotchSpecification,
        tolerance: float = 1e-10) -> int:
    """
    Snap the vertex layers closest to the band edges onto the edges
    (round notches, in place), so the fillet starts at a mesh line.

    Only interior layers are moved, and only when they stay between their
    neighbouring layers. The first and last layer bound the body.

    Returns
    -------
    n_moved : int
        Number of vertices moved
    """
    if notch.notch_type != NotchType.ROUND:
        return 0

    axis = int(notch.loading_axis)
    center = notch.reference_point[axis]
    count = 0

    for edge in (center - notch.half_width, center + notch.half_width):
        coords = np.sort(mesh.vertices[:, axis])
        layers = coords[np.concatenate([[True], np.diff(coords) > tolerance])]
        if layers.size < 3 or edge <= layers[0] or edge >= layers[-1]:
            continue
        if np.any(np.abs(layers - edge) < tolerance):
            continue

        i = 1 + int(np.argmin(np.abs(layers[1:-1] - edge)))
        if layers[i - 1] < edge < layers[i + 1]:
            count += shift_vertex_layer(mesh, layers[i], edge, axis, tolerance)

    return count


def attach_notch_manifold(mesh: Mesh, notch: NotchSpecification) -> int:
    """
    Attach the contour manifold to the notched faces of a round notch.

    Faces tagged with the notch's boundary tag whose vertices all lie in
    the band get notch.manifold_id, and a NotchContourManifold is
    registered under that id.

    Returns
    -------
    n_faces : int
        Number of faces flagged
    """
    if notch.notch_type != NotchType.ROUND or notch.depth == 0:
        return 0
    if notch.manifold_id is None:
        raise ValueError('[error] Round notch needs a manifold id to attach its manifold')
    if notch.dim != mesh.dim:
        raise ValueError('[error] Notch is {}D but the mesh is {}D'.format(notch.dim, mesh.dim))

    count = 0
    for face in mesh.boundary_faces():
        if mesh.boundary_id(face.key) != notch.boundary_tag:
            continue
        if np.all(notch.in_band(mesh.vertices[list(face.vertex_indices)])):
            mesh.set_manifold_id(face.key, notch.manifold_id)
            count += 1

    mesh.set_manifold(notch.manifold_id, NotchContourManifold(notch))
    return count

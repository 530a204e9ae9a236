"""
Curved-surface descriptors attached to boundary faces.

A manifold decides where a vertex created during refinement between a set
of parent vertices is placed. Faces without a manifold use the plain average
of the parents (straight edges, flat faces).
"""

import numpy as np
from typing import Optional, Sequence

from ..misc.math_utils import axial_decompose, vec_normalize


class FlatManifold(object):
    """Straight edges and flat faces."""

    def new_point(self, parents: np.ndarray) -> np.ndarray:
        return np.mean(np.atleast_2d(parents), axis = 0)

    def __repr__(self) -> str:
        return 'FlatManifold()'


class SphericalManifold(FlatManifold):
    """
    Circle (2D) or sphere (3D) around a centre.

    New points lie in the direction of the parents' average, at the mean
    distance of the parents from the centre.

    Parameters
    ----------
    center : array_like, shape (dim,)
        Centre of the circle or sphere
    """

    def __init__(self, center: Sequence[float]) -> None:
        self.center = np.asarray(center, dtype = float)

    def new_point(self, parents: np.ndarray) -> np.ndarray:
        parents = np.atleast_2d(parents)
        rel = parents - self.center[:parents.shape[1]]
        radius = np.mean(np.linalg.norm(rel, axis = 1))

        avg = np.mean(rel, axis = 0)
        length = np.linalg.norm(avg)
        if length < 1e-14 * max(radius, 1.0):
            # parents on opposite sides, direction undefined
            return np.mean(parents, axis = 0)

        return self.center[:parents.shape[1]] + avg / length * radius

    def __repr__(self) -> str:
        return 'SphericalManifold(center={})'.format(self.center.tolist())


class CylindricalManifold(FlatManifold):
    """
    Cylinder around an axis.

    The coordinate along the axis is averaged, the radial part is placed at
    the mean radius of the parents.

    Parameters
    ----------
    direction : array_like or int
        Axis direction, or coordinate index of the axis direction
    point_on_axis : array_like, optional
        Any point of the axis (default: origin)
    """

    def __init__(self, direction, point_on_axis: Optional[Sequence[float]] = None) -> None:
        if np.ndim(direction) == 0:
            axis = int(direction)
            direction = np.zeros(3)
            direction[axis] = 1.0
        self.direction = vec_normalize(np.asarray(direction, dtype = float))
        dim = self.direction.size

        if point_on_axis is None:
            point_on_axis = np.zeros(dim)
        point_on_axis = np.asarray(point_on_axis, dtype = float)
        if point_on_axis.size < dim:
            point_on_axis = np.concatenate([point_on_axis, np.zeros(dim - point_on_axis.size)])
        self.point_on_axis = point_on_axis

    def new_point(self, parents: np.ndarray) -> np.ndarray:
        parents = np.atleast_2d(parents)
        s, radial = axial_decompose(parents, self.point_on_axis, self.direction)
        radius = np.mean(np.linalg.norm(radial, axis = 1))

        avg = np.mean(radial, axis = 0)
        length = np.linalg.norm(avg)
        if length < 1e-14 * max(radius, 1.0):
            return np.mean(parents, axis = 0)

        return self.point_on_axis + np.mean(s) * self.direction + avg / length * radius

    def __repr__(self) -> str:
        return 'CylindricalManifold(direction={}, point_on_axis={})'.format(
            self.direction.tolist(), self.point_on_axis.tolist())

"""
Result records shared by the grid builders.
"""

from typing import List, NamedTuple

import numpy as np

from ..geometry.mesh import Mesh
from ..geometry.notch import NotchSpecification
from ..geometry.point import Point
from ..misc.enums import Axis, TRACKED_QP
from ..misc.math_utils import pdist2


class EvalPoint(NamedTuple):
    """Point where the driver evaluates the given displacement component."""
    point: Point
    component: Axis


class GridResult(NamedTuple):
    """
    Output of a grid builder.

    Properties
    ----------
    mesh : Mesh
        Tagged mesh with manifolds attached
    eval_points : list of EvalPoint
    notches : list of NotchSpecification
        Notches carved into the mesh
    """
    mesh: Mesh
    eval_points: List[EvalPoint]
    notches: List[NotchSpecification]


def check_dim(dim: int, body: str) -> int:
    if dim not in (2, 3):
        raise ValueError('[error] {}: dim must be 2 or 3, got {}'.format(body, dim))
    return int(dim)


def eval_point(dim: int, *coords: float) -> Point:
    """Point of the given dimension from up to three coordinates."""
    return Point(*coords[:dim])


def mark_tracked_cell(mesh: Mesh, target: Point, tag, tol: float) -> np.ndarray:
    """
    Give TRACKED_QP as material id to the cells owning a face with the
    given tag that have a vertex at target.

    Returns
    -------
    cells : ndarray
        Indices of the marked cells
    """
    target = np.asarray(target.pos, dtype = float)
    found = []
    for i in mesh.cells_at_boundary(tag):
        if np.any(pdist2(mesh.vertices[mesh.cells[i]], target) < tol):
            mesh.material_ids[i] = TRACKED_QP
            found.append(i)
    return np.array(found, dtype = int)

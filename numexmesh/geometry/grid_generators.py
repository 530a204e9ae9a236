"""
Grid generation functions for the base meshes of the numerical examples.

Local refinement patterns are expressed as graded subdivisions of the
coarse blocks, so every generated mesh is conforming.
"""

import numpy as np
from scipy.spatial import cKDTree
from typing import List, Optional, Sequence, Tuple, Union

from ..misc.enums import Tag
from .mesh import Mesh


def tensor_grid(coords: Sequence[np.ndarray]) -> Mesh:
    """
    Structured mesh spanned by the grid lines along each axis.

    Parameters
    ----------
    coords : list of array_like
        Strictly increasing grid-line positions per axis (2 or 3 axes)

    Returns
    -------
    mesh : Mesh
    """
    coords = [np.asarray(c, dtype = float) for c in coords]
    dim = len(coords)
    if dim not in (2, 3):
        raise ValueError('[error] tensor_grid needs 2 or 3 axes, got {}'.format(dim))
    for c in coords:
        if c.size < 2 or np.any(np.diff(c) <= 0):
            raise ValueError('[error] Grid lines must be strictly increasing with at least two entries')

    shape = tuple(c.size for c in coords)
    grids = np.meshgrid(*coords, indexing = 'ij')
    verts = np.column_stack([g.ravel(order = 'F') for g in grids])

    # vertex numbers with axis 0 running fastest
    idx = np.arange(verts.shape[0]).reshape(shape, order = 'F')
    cols = []
    for v in range(2 ** dim):
        sl = tuple(slice((v >> k) & 1, shape[k] - 1 + ((v >> k) & 1)) for k in range(dim))
        cols.append(idx[sl].ravel(order = 'F'))

    return Mesh(verts, np.column_stack(cols))


def subdivided_hyper_rectangle(repetitions: Sequence[Union[int, Sequence[float]]],
        p1: Sequence[float],
        p2: Sequence[float]) -> Mesh:
    """
    Hyper rectangle between two opposite corners, subdivided per axis.

    Parameters
    ----------
    repetitions : list
        Per axis either a number of equal subdivisions or a list of step
        sizes that adds up to the edge length
    p1, p2 : array_like
        Opposite corners (any order)

    Returns
    -------
    mesh : Mesh

    Examples
    --------
    >>> mesh = subdivided_hyper_rectangle([2, 4], [0, 0], [1, 2])
    >>> mesh.n_cells
    8
    """
    p1 = np.asarray(p1, dtype = float)
    p2 = np.asarray(p2, dtype = float)
    lo = np.minimum(p1, p2)
    hi = np.maximum(p1, p2)

    if len(repetitions) != lo.size:
        raise ValueError('[error] Need one repetition entry per axis')

    coords = []
    for k, rep in enumerate(repetitions):
        length = hi[k] - lo[k]
        if np.ndim(rep) == 0:
            n = int(rep)
            if n < 1:
                raise ValueError('[error] Number of subdivisions must be >= 1, got {}'.format(n))
            coords.append(np.linspace(lo[k], hi[k], n + 1))
        else:
            steps = np.asarray(rep, dtype = float)
            if abs(np.sum(steps) - length) > 1e-12 * max(length, 1.0):
                raise ValueError('[error] Step sizes along axis {} add up to {}, edge length is {}'.format(
                    k, np.sum(steps), length))
            pos = lo[k] + np.concatenate([[0.0], np.cumsum(steps)])
            pos[-1] = hi[k]
            coords.append(pos)

    return tensor_grid(coords)


def hyper_rectangle(p1: Sequence[float], p2: Sequence[float]) -> Mesh:
    """Single-cell hyper rectangle."""
    return subdivided_hyper_rectangle([1] * len(p1), p1, p2)


def band_step_sizes(start: float, end: float, n_coarse: int,
        band: Optional[Tuple[float, float]] = None,
        n_refine: int = 0) -> List[float]:
    """
    Step sizes of n_coarse equal cells, where cells whose centre lies in the
    band are split into 2**n_refine cells.

    Parameters
    ----------
    start, end : float
        Interval
    n_coarse : int
        Number of coarse cells
    band : tuple of float, optional
        (lower, upper) bound of the band
    n_refine : int
        Number of bisections inside the band

    Returns
    -------
    steps : list of float
    """
    if n_coarse < 1:
        raise ValueError('[error] Number of coarse cells must be >= 1, got {}'.format(n_coarse))

    h = (end - start) / n_coarse
    steps = []
    for i in range(n_coarse):
        center = start + (i + 0.5) * h
        if band is not None and n_refine > 0 and band[0] <= center <= band[1]:
            steps.extend([h / 2 ** n_refine] * 2 ** n_refine)
        else:
            steps.append(h)
    return steps


def merge_meshes(a: Mesh, b: Mesh, tolerance: float = 1e-12) -> Mesh:
    """
    Merge two meshes; vertices closer than tolerance are identified.

    The interface between the meshes must be meshed identically, hanging
    vertices are not detected. Boundary tags are not carried over, manifold
    ids and manifolds are.
    """
    if a.dim != b.dim:
        raise ValueError('[error] Cannot merge a {}D and a {}D mesh'.format(a.dim, b.dim))

    tree = cKDTree(a.vertices)
    dist, match = tree.query(b.vertices, distance_upper_bound = tolerance)

    renumber = np.empty(b.n_vertices, dtype = int)
    new = ~np.isfinite(dist)
    renumber[~new] = match[~new]
    renumber[new] = a.n_vertices + np.arange(int(np.sum(new)))

    verts = np.vstack([a.vertices, b.vertices[new]])
    cells = np.vstack([a.cells, renumber[b.cells]])
    merged = Mesh(verts, cells, np.concatenate([a.material_ids, b.material_ids]))

    for key in a.boundary_face_keys():
        if a.manifold_id(key) is not None:
            merged.set_manifold_id(key, a.manifold_id(key))
    for key in b.boundary_face_keys():
        if b.manifold_id(key) is not None:
            merged.set_manifold_id(tuple(sorted(int(renumber[i]) for i in key)), b.manifold_id(key))
    for mid, manifold in list(a.manifolds.items()) + list(b.manifolds.items()):
        merged.set_manifold(mid, manifold)

    return merged


def extrude(mesh: Mesh, slices: Union[int, Sequence[float]],
        height: Optional[float] = None, axis: int = 2) -> Mesh:
    """
    Extrude a 2D quadrilateral mesh into a 3D hexahedral mesh.

    Side faces inherit the boundary tags of the 2D edges; the two cap faces
    are left unclassified.

    Parameters
    ----------
    mesh : Mesh
        2D mesh
    slices : int or array_like
        Number of copies of the 2D mesh (cell layers = slices - 1) spread
        evenly over [0, height], or the explicit extrusion positions
    height : float, optional
        Extrusion height (needed when slices is a number)
    axis : int
        Coordinate direction of the extrusion; the 2D coordinates fill the
        remaining directions in order. Cells are positively oriented for
        every axis if the 2D cells are.

    Returns
    -------
    mesh3d : Mesh
    """
    if mesh.dim != 2:
        raise ValueError('[error] Only 2D meshes can be extruded')

    if np.ndim(slices) == 0:
        if height is None:
            raise ValueError('[error] Extrusion by number of slices needs a height')
        if int(slices) < 2:
            raise ValueError('[error] Extrusion needs at least 2 slices, got {}'.format(slices))
        positions = np.linspace(0.0, height, int(slices))
    else:
        positions = np.asarray(slices, dtype = float)
        if positions.size < 2 or np.any(np.diff(positions) <= 0):
            raise ValueError('[error] Extrusion positions must be strictly increasing')

    nv = mesh.n_vertices
    others = [k for k in range(3) if k != int(axis)]

    verts = np.zeros((nv * positions.size, 3))
    for layer, pos in enumerate(positions):
        block = verts[layer * nv:(layer + 1) * nv]
        block[:, others[0]] = mesh.vertices[:, 0]
        block[:, others[1]] = mesh.vertices[:, 1]
        block[:, int(axis)] = pos

    # (x, z, y) is left handed: swap the two in-plane directions of each quad
    quads = mesh.cells[:, [0, 2, 1, 3]] if int(axis) == 1 else mesh.cells

    cells = []
    for layer in range(positions.size - 1):
        cells.append(np.hstack([quads + layer * nv, quads + (layer + 1) * nv]))

    out = Mesh(verts, np.vstack(cells), np.tile(mesh.material_ids, positions.size - 1))

    # side faces keep the tags of the edges they were swept from
    for key in mesh.boundary_face_keys():
        tag = mesh.boundary_id(key)
        if tag == Tag.UNCLASSIFIED:
            continue
        for layer in range(positions.size - 1):
            side = tuple(sorted([i + layer * nv for i in key] + [i + (layer + 1) * nv for i in key]))
            out.set_boundary_id(side, tag)

    return out


def structured_block(points: np.ndarray) -> Mesh:
    """
    Mesh from a structured array of node positions.

    Parameters
    ----------
    points : ndarray, shape (n0 + 1, n1 + 1, dim)
        Node positions indexed by reference coordinates

    Returns
    -------
    mesh : Mesh
    """
    n0, n1 = points.shape[0], points.shape[1]
    verts = points.transpose(1, 0, 2).reshape(-1, points.shape[2])

    idx = np.arange(n0 * n1).reshape(n1, n0).T
    cells = np.column_stack([
        idx[:-1, :-1].ravel(order = 'F'),
        idx[1:, :-1].ravel(order = 'F'),
        idx[:-1, 1:].ravel(order = 'F'),
        idx[1:, 1:].ravel(order = 'F')])
    return Mesh(verts, cells)


def _blend(inner: np.ndarray, outer: np.ndarray, n_radial) -> np.ndarray:
    """
    Linear transfinite blend between two curves sampled at equal parameters.

    n_radial is either the number of equal steps or the increasing blend
    parameters from 0 to 1.
    """
    if np.ndim(n_radial) == 0:
        xi = np.linspace(0.0, 1.0, int(n_radial) + 1)
    else:
        xi = np.asarray(n_radial, dtype = float)
        if xi[0] != 0.0 or xi[-1] != 1.0 or np.any(np.diff(xi) <= 0):
            raise ValueError('[error] Radial blend parameters must increase from 0 to 1')
    return (1 - xi)[:, None, None] * inner[None, :, :] + xi[:, None, None] * outer[None, :, :]


def _arc(radius: float, theta0: float, theta1: float, n: int) -> np.ndarray:
    theta = np.linspace(theta0, theta1, n + 1)
    return radius * np.column_stack([np.cos(theta), np.sin(theta)])


def quarter_hyper_cube_with_cylindrical_hole(hole_radius: float, half_size: float,
        n_angular: int = 1, n_radial: int = 1) -> Mesh:
    """
    Square [0, half_size]^2 without the quarter disk of radius hole_radius.

    Two blocks between the quarter arc and the square edges x = half_size
    (angles 0..45 deg) and y = half_size (45..90 deg); each block has
    n_angular cells along the arc and n_radial cells from the arc outwards.
    The edges x = half_size and y = half_size are divided evenly.

    Returns
    -------
    mesh : Mesh
    """
    if not 0 < hole_radius < half_size:
        raise ValueError('[error] Need 0 < hole_radius < half_size, got {} and {}'.format(hole_radius, half_size))

    eta = np.linspace(0.0, 1.0, n_angular + 1)

    arc_a = _arc(hole_radius, 0.0, np.pi / 4, n_angular)
    edge_a = np.column_stack([np.full_like(eta, half_size), eta * half_size])
    block_a = structured_block(_blend(arc_a, edge_a, n_radial))

    arc_b = _arc(hole_radius, np.pi / 4, np.pi / 2, n_angular)
    edge_b = np.column_stack([(1 - eta) * half_size, np.full_like(eta, half_size)])
    block_b = structured_block(_blend(arc_b, edge_b, n_radial))

    return merge_meshes(block_a, block_b, 1e-12 * half_size)


def quarter_disk(radius: float, n_angular: int = 1, n_radial = 1,
        core_fraction: float = 0.5) -> Mesh:
    """
    Quarter disk of the given radius in the first quadrant.

    A core square [0, core_fraction * radius]^2 with n_angular x n_angular
    cells and two blocks between the core edges and the arc (angles 0..45
    and 45..90 deg). n_radial is the number of cells between core and arc,
    or the blend parameters of the layers (0 at the core, 1 at the arc).

    Returns
    -------
    mesh : Mesh
    """
    if not 0 < core_fraction < 1 / np.sqrt(2):
        raise ValueError('[error] Core square corner must lie inside the disk')

    c = core_fraction * radius
    eta = np.linspace(0.0, 1.0, n_angular + 1)

    core = subdivided_hyper_rectangle([n_angular, n_angular], [0.0, 0.0], [c, c])

    edge_a = np.column_stack([np.full_like(eta, c), eta * c])
    block_a = structured_block(_blend(edge_a, _arc(radius, 0.0, np.pi / 4, n_angular), n_radial))

    edge_b = np.column_stack([(1 - eta) * c, np.full_like(eta, c)])
    block_b = structured_block(_blend(edge_b, _arc(radius, np.pi / 4, np.pi / 2, n_angular), n_radial))

    tol = 1e-12 * radius
    return merge_meshes(merge_meshes(core, block_a, tol), block_b, tol)

"""
Mesh class - quadrilateral (2D) and hexahedral (3D) cell meshes.

Vertices of a cell are stored in lexicographic order of the cell's
reference coordinates: bit k of the local vertex number selects the lower
(0) or upper (1) end of reference direction k. Boundary faces are the cell
faces that belong to exactly one cell; each boundary face may carry a
boundary tag and a manifold id.

Iteration over boundary faces, vertices and cells is restartable: every call
of ``boundary_faces()``, ``iter_vertices()`` or ``iter_cells()`` returns a
fresh finite iterator over the current state.
"""

import itertools

import numpy as np
from typing import Dict, Iterator, List, NamedTuple, Optional, Tuple

from ..misc.enums import Tag
from ..misc.errors import DegenerateMeshOperation
from .manifold import FlatManifold
from .point import Point


# local vertex numbers of the faces, ordered x-, x+, y-, y+, (z-, z+)
FACES_PER_DIM = {
    2: ((0, 2), (1, 3), (0, 1), (2, 3)),
    3: ((0, 2, 4, 6), (1, 3, 5, 7), (0, 1, 4, 5), (2, 3, 6, 7), (0, 1, 2, 3), (4, 5, 6, 7)),
}

# edges of a lexicographically ordered quadrilateral
_QUAD_EDGES = ((0, 1), (2, 3), (0, 2), (1, 3))

FaceKey = Tuple[int, ...]


class BoundaryFace(NamedTuple):
    key: FaceKey
    vertex_indices: Tuple[int, ...]
    centroid: Point
    vertices: List[Point]


class Mesh:
    """
    Mesh of quadrilaterals or hexahedra.

    Properties
    ----------
    vertices : ndarray, shape (n, dim)
        Vertex positions; mutable in place (notching, layer shifting)
    cells : ndarray, shape (m, 2**dim)
        Vertex indices of the cells in lexicographic order
    material_ids : ndarray, shape (m,)
        Material id per cell

    Examples
    --------
    >>> mesh = Mesh([[0, 0], [1, 0], [0, 1], [1, 1]], [[0, 1, 2, 3]])
    >>> len(list(mesh.boundary_faces()))
    4
    """

    def __init__(self, vertices: np.ndarray, cells: np.ndarray,
            material_ids: Optional[np.ndarray] = None) -> None:
        self.vertices = np.array(vertices, dtype = float)
        self.cells = np.array(cells, dtype = int)

        if self.vertices.ndim != 2 or self.vertices.shape[1] not in (2, 3):
            raise ValueError('[error] Vertices must have shape (n, 2) or (n, 3), got {}'.format(self.vertices.shape))
        if self.cells.ndim != 2 or self.cells.shape[1] != 2 ** self.dim:
            raise ValueError('[error] Cells of a {}D mesh need {} vertices, got shape {}'.format(
                self.dim, 2 ** self.dim, self.cells.shape))
        if self.cells.size > 0 and (self.cells.min() < 0 or self.cells.max() >= self.n_vertices):
            raise ValueError('[error] Cell vertex indices out of range')

        if material_ids is None:
            self.material_ids = np.zeros(self.n_cells, dtype = int)
        else:
            self.material_ids = np.array(material_ids, dtype = int)

        self._boundary_ids = {}
        self._manifold_ids = {}
        self._manifolds = {}
        self._face_table = None

    @property
    def dim(self) -> int:
        return self.vertices.shape[1]

    @property
    def n_vertices(self) -> int:
        return self.vertices.shape[0]

    @property
    def n_cells(self) -> int:
        return self.cells.shape[0]

    n_active_cells = n_cells

    # ==================== Topology ====================

    def _boundary_table(self) -> List[Tuple[FaceKey, Tuple[int, ...]]]:
        """(key, ordered vertex indices) of all boundary faces, cached."""
        if self._face_table is None:
            count = {}
            ordered = {}
            for cell in self.cells:
                for local in FACES_PER_DIM[self.dim]:
                    ids = tuple(int(cell[i]) for i in local)
                    key = tuple(sorted(ids))
                    count[key] = count.get(key, 0) + 1
                    ordered.setdefault(key, ids)
            self._face_table = [(key, ordered[key]) for key in ordered if count[key] == 1]
        return self._face_table

    def _topology_changed(self) -> None:
        self._face_table = None

    def boundary_faces(self) -> Iterator[BoundaryFace]:
        """Iterate over the boundary faces with their current geometry."""
        for key, ids in self._boundary_table():
            pos = self.vertices[list(ids)]
            yield BoundaryFace(key, ids, Point(np.mean(pos, axis = 0)), [Point(p) for p in pos])

    def boundary_face_keys(self) -> List[FaceKey]:
        return [key for key, _ in self._boundary_table()]

    @property
    def n_boundary_faces(self) -> int:
        return len(self._boundary_table())

    def iter_vertices(self) -> Iterator[Tuple[int, Point]]:
        for i in range(self.n_vertices):
            yield i, Point(self.vertices[i])

    def iter_cells(self) -> Iterator[Tuple[int, np.ndarray]]:
        for i in range(self.n_cells):
            yield i, self.cells[i]

    def cell_centers(self) -> np.ndarray:
        return np.mean(self.vertices[self.cells], axis = 1)

    def cells_at_boundary(self, tag: Optional[Tag] = None) -> np.ndarray:
        """Indices of cells owning a boundary face (with the given tag)."""
        keys = set(key for key, _ in self._boundary_table()
                   if tag is None or self.boundary_id(key) == tag)
        found = []
        for i, cell in enumerate(self.cells):
            for local in FACES_PER_DIM[self.dim]:
                if tuple(sorted(int(cell[j]) for j in local)) in keys:
                    found.append(i)
                    break
        return np.array(found, dtype = int)

    def vertices_at(self, value: float, axis: int, tol: float = 1e-12) -> np.ndarray:
        """Indices of vertices whose coordinate along axis equals value."""
        return np.where(np.abs(self.vertices[:, int(axis)] - value) < tol)[0]

    # ==================== Boundary and manifold ids ====================

    def set_boundary_id(self, key: FaceKey, tag: Tag) -> None:
        self._boundary_ids[tuple(key)] = Tag(tag)

    def boundary_id(self, key: FaceKey) -> Tag:
        return self._boundary_ids.get(tuple(key), Tag.UNCLASSIFIED)

    def clear_boundary_ids(self) -> None:
        self._boundary_ids = {}

    @property
    def boundary_ids(self) -> Dict[FaceKey, Tag]:
        """Tags of all boundary faces (unclassified faces included)."""
        return {key: self.boundary_id(key) for key in self.boundary_face_keys()}

    def faces_with_tag(self, tag: Tag) -> List[FaceKey]:
        return [key for key in self.boundary_face_keys() if self.boundary_id(key) == tag]

    def set_manifold_id(self, key: FaceKey, manifold_id: int) -> None:
        self._manifold_ids[tuple(key)] = int(manifold_id)

    def manifold_id(self, key: FaceKey) -> Optional[int]:
        return self._manifold_ids.get(tuple(key))

    def set_manifold(self, manifold_id: int, manifold: FlatManifold) -> None:
        self._manifolds[int(manifold_id)] = manifold

    def reset_manifold(self, manifold_id: int) -> None:
        self._manifolds.pop(int(manifold_id), None)

    def get_manifold(self, manifold_id: Optional[int]) -> FlatManifold:
        if manifold_id is None:
            return FlatManifold()
        return self._manifolds.get(int(manifold_id), FlatManifold())

    @property
    def manifolds(self) -> Dict[int, FlatManifold]:
        return dict(self._manifolds)

    # ==================== Transformations ====================

    def shift(self, vec: np.ndarray) -> 'Mesh':
        """Shift all vertices by vec (in place)."""
        self.vertices += np.asarray(vec, dtype = float)
        return self

    def rotate(self, angle: float, axis: int = 2) -> 'Mesh':
        """Rotate about a coordinate axis through the origin (in place)."""
        c, s = np.cos(angle), np.sin(angle)
        if self.dim == 2:
            rot = np.array([[c, -s], [s, c]])
        else:
            i, j = [k for k in range(3) if k != int(axis)]
            # keep a right-handed rotation about the remaining axis
            if int(axis) == 1:
                i, j = j, i
            rot = np.eye(3)
            rot[i, i], rot[i, j], rot[j, i], rot[j, j] = c, -s, s, c
        self.vertices = self.vertices @ rot.T
        return self

    def copy(self) -> 'Mesh':
        new = Mesh(self.vertices.copy(), self.cells.copy(), self.material_ids.copy())
        new._boundary_ids = dict(self._boundary_ids)
        new._manifold_ids = dict(self._manifold_ids)
        new._manifolds = dict(self._manifolds)
        return new

    def remove_cells(self, mask: np.ndarray) -> 'Mesh':
        """
        Mesh without the cells selected by mask.

        Unused vertices are dropped; ids of faces that survive are kept.

        Raises
        ------
        DegenerateMeshOperation
            If the mask removes no cell or every cell.
        """
        mask = np.asarray(mask, dtype = bool)
        if mask.shape != (self.n_cells,):
            raise ValueError('[error] Mask must have one entry per cell')

        n_remove = int(np.sum(mask))
        if n_remove == 0:
            raise DegenerateMeshOperation('[error] Cell removal selected no cell')
        if n_remove == self.n_cells:
            raise DegenerateMeshOperation('[error] Cell removal selected every cell')

        keep = self.cells[~mask]
        used = np.unique(keep)
        renumber = -np.ones(self.n_vertices, dtype = int)
        renumber[used] = np.arange(used.size)

        new = Mesh(self.vertices[used], renumber[keep], self.material_ids[~mask])
        new._boundary_ids = _renumber_keys(self._boundary_ids, renumber)
        new._manifold_ids = _renumber_keys(self._manifold_ids, renumber)
        new._manifolds = dict(self._manifolds)
        return new

    # ==================== Refinement ====================

    def refine_global(self, times: int = 1) -> 'Mesh':
        """
        Refine every cell into 2**dim children, times times (in place).

        New vertices on boundary faces with a registered manifold are placed
        on that manifold; child faces inherit boundary and manifold ids and
        child cells the material id of their parent.
        """
        for _ in range(int(times)):
            self._refine_once()
        return self

    def _refine_once(self) -> None:
        dim = self.dim
        curved = self._curved_subsets()

        positions = [p for p in self.vertices]
        index = {(i,): i for i in range(self.n_vertices)}
        origin = [(i,) for i in range(self.n_vertices)]

        allowed = {0: (0,), 1: (0, 1), 2: (1,)}
        corners = list(itertools.product((0, 1), repeat = dim))
        multi = list(itertools.product((0, 1, 2), repeat = dim))

        children = []
        for cell in self.cells:
            local = {}
            for m in multi:
                # m[k] = 0, 1, 2: lower end, midpoint, upper end along direction k
                parents = sorted(set(
                    int(cell[v]) for v in range(2 ** dim)
                    if all(((v >> k) & 1) in allowed[m[k]] for k in range(dim))))
                key = tuple(parents)

                if key not in index:
                    manifold = curved.get(key)
                    pos = self.vertices[parents]
                    if manifold is None:
                        positions.append(np.mean(pos, axis = 0))
                    else:
                        positions.append(manifold.new_point(pos))
                    index[key] = len(positions) - 1
                    origin.append(key)
                local[m] = index[key]

            for offset in corners:
                child = []
                for vertex in range(2 ** dim):
                    m = tuple(offset[k] + ((vertex >> k) & 1) for k in range(dim))
                    child.append(local[m])
                children.append(child)

        old_boundary = self._boundary_ids
        old_manifold = self._manifold_ids

        self.vertices = np.array(positions, dtype = float)
        self.cells = np.array(children, dtype = int)
        self.material_ids = np.repeat(self.material_ids, 2 ** dim)
        self._topology_changed()

        self._boundary_ids = {}
        self._manifold_ids = {}
        for key, _ in self._boundary_table():
            parent = tuple(sorted(set().union(*[origin[i] for i in key])))
            if parent in old_boundary:
                self._boundary_ids[key] = old_boundary[parent]
            if parent in old_manifold:
                self._manifold_ids[key] = old_manifold[parent]

    def _curved_subsets(self) -> Dict[FaceKey, FlatManifold]:
        """Map face keys (and edge keys in 3D) on registered manifolds."""
        curved = {}
        for key, ids in self._boundary_table():
            mid = self._manifold_ids.get(key)
            if mid is None or mid not in self._manifolds:
                continue
            manifold = self._manifolds[mid]
            curved[key] = manifold
            if self.dim == 3:
                for a, b in _QUAD_EDGES:
                    curved[tuple(sorted((ids[a], ids[b])))] = manifold
        return curved

    def __repr__(self) -> str:
        return 'Mesh(dim={}, n_vertices={}, n_cells={})'.format(self.dim, self.n_vertices, self.n_cells)


def _renumber_keys(ids: Dict[FaceKey, object], renumber: np.ndarray) -> Dict[FaceKey, object]:
    out = {}
    for key, value in ids.items():
        new_key = tuple(sorted(int(renumber[i]) for i in key))
        if min(new_key) >= 0:
            out[new_key] = value
    return out

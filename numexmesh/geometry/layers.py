"""
Vertex-layer shifting for graded meshes along the loading axis.

The rod meshes are refined towards the symmetry plane by repeated halving
of the first cell layer. The layers are then shifted so that the notched
region [0, half_notch_length] is discretised uniformly fine and the rest of
the rod uniformly coarse.
"""

import numpy as np
from typing import Iterator, List, Tuple

from .mesh import Mesh
from ..misc.errors import DegenerateMeshOperation


def shift_vertex_layer(mesh: Mesh, initial_pos: float, new_pos: float,
        axis: int, tolerance: float = 1e-8) -> int:
    """
    Move every vertex whose coordinate along axis equals initial_pos to
    new_pos (in place).

    Parameters
    ----------
    mesh : Mesh
    initial_pos : float
        Current coordinate of the layer
    new_pos : float
        Target coordinate
    axis : int
        Coordinate direction
    tolerance : float
        Matching tolerance for initial_pos

    Returns
    -------
    n_moved : int
        Number of vertices moved
    """
    ind = mesh.vertices_at(initial_pos, axis, tolerance)
    mesh.vertices[ind, int(axis)] = new_pos
    return ind.size


def _rod_layer_schedule(half_length: float, half_notch_length: float,
        n_additional: int, n_max_coarse: int = 6) -> Iterator[Tuple[float, float]]:
    """(initial, new) layer positions, in the order the shifts are applied."""
    n_cells = 4 + n_additional
    n_coarse = min(int(np.ceil(n_cells / 2.0)), n_max_coarse)
    n_fine = n_cells - n_coarse
    coarse_length = half_length - half_notch_length

    # outer area uniformly coarse
    for i in range(1, 4):
        yield (half_length * (4 - i) / 4.0,
               (n_coarse - i) / n_coarse * coarse_length + half_notch_length)

    # more than 9 cells: borrow layers from the local refinements
    if n_coarse > 4:
        for i in range(3, n_coarse - 1):
            yield (half_length / 2 ** i,
                   (n_coarse - 1 - i) / n_coarse * coarse_length + half_notch_length)

    if n_additional <= 2:
        n_coarse = 4

    # notched area uniformly fine
    for i in range(n_coarse - 1, n_additional + 3):
        yield half_length / 2 ** i, (n_cells - 1 - i) / n_fine * half_notch_length


def halved_layer_positions(half_length: float, n_additional: int) -> List[float]:
    """
    Layer positions of [0, half_length] split into four equal cells with
    the first cell halved n_additional times.
    """
    fine = [half_length / 2 ** i for i in range(n_additional + 2, 2, -1)]
    return [0.0] + fine + [half_length / 4.0, half_length / 2.0, 3.0 * half_length / 4.0, half_length]


def rod_layer_positions(half_length: float, half_notch_length: float,
        n_additional: int, n_max_coarse: int = 6) -> np.ndarray:
    """
    Final layer positions of the rod along its axis.

    Every shift is matched against the halved positions, so a layer moved
    onto the original coordinate of another layer is not moved twice.

    Parameters
    ----------
    half_length : float
        Half length of the rod
    half_notch_length : float
        Half length of the notched region
    n_additional : int
        Number of additional halvings of the first layer (>= 1)
    n_max_coarse : int
        Maximum number of cells in the coarse area

    Returns
    -------
    positions : ndarray
        4 + n_additional + 1 increasing layer positions from 0 to half_length

    Raises
    ------
    DegenerateMeshOperation
        If two layers end up on the same position

    Examples
    --------
    >>> rod_layer_positions(10.0, 2.0, 1)
    array([ 0.        ,  1.        ,  2.        ,  4.66666667,  7.33333333, 10.        ])
    """
    if n_additional < 1:
        raise ValueError('[error] Rod layers need at least one additional refinement, got {}'.format(n_additional))
    if not 0 < half_notch_length < half_length:
        raise ValueError('[error] Need 0 < half_notch_length < half_length, got {} and {}'.format(
            half_notch_length, half_length))

    original = np.array(halved_layer_positions(half_length, n_additional))
    pos = original.copy()
    tol = 1e-8 * half_length
    for initial, new in _rod_layer_schedule(half_length, half_notch_length, n_additional, n_max_coarse):
        pos[np.abs(original - initial) < tol] = new

    pos = np.sort(pos)
    if np.any(np.diff(pos) <= tol):
        raise DegenerateMeshOperation('[error] Rod layer shift merged two layers: {}'.format(pos))
    return pos


def shift_rod_layers(mesh: Mesh, half_length: float, half_notch_length: float,
        n_additional: int, axis: int = 1, tolerance: float = 1e-8,
        n_max_coarse: int = 6) -> Mesh:
    """
    Shift the halved layers of a rod mesh onto the positions of
    rod_layer_positions (in place).
    """
    rod_layer_positions(half_length, half_notch_length, n_additional, n_max_coarse)

    # select all layers before moving any of them
    moves = [(mesh.vertices_at(initial, axis, tolerance), new)
             for initial, new in _rod_layer_schedule(half_length, half_notch_length, n_additional, n_max_coarse)]
    for ind, new in moves:
        mesh.vertices[ind, int(axis)] = new
    return mesh

"""
Point class - immutable 2D or 3D coordinate.
"""

import numpy as np
from typing import Iterator, Union


class Point:
    """
    Immutable coordinate tuple with 2 or 3 components.

    Used both as mesh-vertex position and as geometric input (centres,
    normals, reference points).

    Properties
    ----------
    pos : ndarray, shape (dim,)
        Read-only coordinates

    Examples
    --------
    >>> p = Point(1.0, 2.0)
    >>> p.dim
    2
    >>> Point(3.0, 4.0).distance(Point(0.0, 0.0))
    5.0
    """

    __slots__ = ('_pos',)

    def __init__(self, *coords: Union[float, np.ndarray]):
        if len(coords) == 1 and np.ndim(coords[0]) == 1:
            coords = tuple(coords[0])

        pos = np.array(coords, dtype = float)
        if pos.ndim != 1 or pos.size not in (2, 3):
            raise ValueError('[error] Point needs 2 or 3 coordinates, got {}'.format(pos.size))

        pos.setflags(write = False)
        self._pos = pos

    @property
    def pos(self) -> np.ndarray:
        return self._pos

    @property
    def dim(self) -> int:
        return self._pos.size

    def distance(self, other: 'Point') -> float:
        """Euclidean distance to another point of equal dimension."""
        other = _as_point(other)
        return float(np.linalg.norm(self._pos - other.pos))

    def norm(self) -> float:
        return float(np.linalg.norm(self._pos))

    def project(self, axis: int) -> 'Point':
        """Project onto the plane through the origin perpendicular to axis."""
        pos = self._pos.copy()
        pos[int(axis)] = 0.0
        return Point(pos)

    def to3d(self) -> 'Point':
        if self.dim == 3:
            return self
        return Point(self._pos[0], self._pos[1], 0.0)

    def __add__(self, other: 'Point') -> 'Point':
        return Point(self._pos + _as_point(other).pos)

    def __sub__(self, other: 'Point') -> 'Point':
        return Point(self._pos - _as_point(other).pos)

    def __mul__(self, factor: float) -> 'Point':
        return Point(self._pos * float(factor))

    __rmul__ = __mul__

    def __neg__(self) -> 'Point':
        return Point(-self._pos)

    def __getitem__(self, index: int) -> float:
        return float(self._pos[index])

    def __iter__(self) -> Iterator[float]:
        return iter(self._pos.tolist())

    def __len__(self) -> int:
        return self.dim

    def __array__(self, dtype = None, copy = None) -> np.ndarray:
        return np.array(self._pos, dtype = dtype)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return self.dim == other.dim and bool(np.all(self._pos == other.pos))

    def __hash__(self) -> int:
        return hash(tuple(self._pos.tolist()))

    def __repr__(self) -> str:
        return 'Point({})'.format(', '.join('{:g}'.format(c) for c in self._pos))


def _as_point(value) -> Point:
    if isinstance(value, Point):
        return value
    return Point(np.asarray(value, dtype = float))

"""
Vector helpers for coordinate arrays.
"""

import numpy as np
from typing import Optional


def vec_norm(v: np.ndarray, key: Optional[str] = None) -> np.ndarray:
    """
    Norm of vector array.
    v: array of size (n, dim)
    Returns norm array of size (n,) or max if key='max'.
    """
    n = np.sqrt(np.sum(np.abs(np.atleast_2d(v)) ** 2, axis = 1))

    if key is not None and key == 'max':
        n = np.max(n)

    return n


def vec_normalize(v: np.ndarray) -> np.ndarray:
    """
    Normalize vector array.
    v: array of size (n, dim) or a single vector
    """
    v = np.asarray(v, dtype = float)
    n = np.sqrt(np.sum(v ** 2, axis = -1, keepdims = True))
    if np.any(n == 0):
        raise ValueError('[error] Cannot normalize a zero vector!')
    return v / n


def pdist2(p1: np.ndarray, p2: np.ndarray) -> np.ndarray:
    """
    Distance array between position arrays P1 and P2.

    Parameters
    ----------
    p1 : ndarray, shape (n1, dim)
    p2 : ndarray, shape (n2, dim)

    Returns
    -------
    d : ndarray, shape (n1, n2)
    """
    diff = np.atleast_2d(p1)[:, None, :] - np.atleast_2d(p2)[None, :, :]
    return np.sqrt(np.sum(diff ** 2, axis = 2))


def axial_decompose(pos: np.ndarray,
        origin: np.ndarray,
        direction: np.ndarray):
    """
    Split positions into the coordinate along an axis and the radial part.

    Parameters
    ----------
    pos : ndarray, shape (n, dim)
    origin : ndarray, shape (dim,)
        Point on the axis
    direction : ndarray, shape (dim,)
        Unit direction of the axis

    Returns
    -------
    s : ndarray, shape (n,)
        Signed coordinate along the axis
    radial : ndarray, shape (n, dim)
        Component perpendicular to the axis
    """
    rel = np.atleast_2d(pos) - origin
    s = rel @ direction
    radial = rel - s[:, None] * direction[None, :]
    return s, radial

"""
Miscellaneous utilities for numexmesh.
"""

from .enums import Tag, Axis, NotchType, BC, Driver, RefineSpecial, TRACKED_QP
from .errors import (
    MeshGenerationError, InvalidNotchGeometry, UnclassifiedBoundaryFace,
    DegenerateMeshOperation,
)
from .options import GeneralParameters, meshoptions, getmeshoptions, getfields
from .math_utils import vec_norm, vec_normalize, pdist2, axial_decompose


__all__ = [
    # enums
    'Tag', 'Axis', 'NotchType', 'BC', 'Driver', 'RefineSpecial', 'TRACKED_QP',
    # errors
    'MeshGenerationError', 'InvalidNotchGeometry', 'UnclassifiedBoundaryFace',
    'DegenerateMeshOperation',
    # options
    'GeneralParameters', 'meshoptions', 'getmeshoptions', 'getfields',
    # math_utils
    'vec_norm', 'vec_normalize', 'pdist2', 'axial_decompose',
]

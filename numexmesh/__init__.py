"""
numexmesh - Meshes and boundary conditions of notched numerical examples
for finite-element plasticity drivers

Main modules:
- misc: Enumerators, errors and mesh options
- geometry: Mesh, manifolds, grid generators, boundary classification and notching
- bodies: Grid and constraint builders (HyperRectangle, QPlate, Rod)
"""

__version__ = "0.1.0"

from .misc import (
    Tag, Axis, NotchType, BC, Driver, RefineSpecial, TRACKED_QP,
    MeshGenerationError, InvalidNotchGeometry, UnclassifiedBoundaryFace, DegenerateMeshOperation,
    GeneralParameters, meshoptions, getmeshoptions,
)
from .geometry import (
    Point, Mesh, BoundaryClassifier, CurvedSurface, NotchSpecification,
    classify_boundary, notch_body,
)
from .bodies import (
    BODIES, make_grid, make_constraints, EvalPoint, GridResult, DirichletConstraint,
)

__all__ = [
    "Tag",
    "Axis",
    "NotchType",
    "BC",
    "Driver",
    "RefineSpecial",
    "TRACKED_QP",
    "MeshGenerationError",
    "InvalidNotchGeometry",
    "UnclassifiedBoundaryFace",
    "DegenerateMeshOperation",
    "GeneralParameters",
    "meshoptions",
    "getmeshoptions",
    "Point",
    "Mesh",
    "BoundaryClassifier",
    "CurvedSurface",
    "NotchSpecification",
    "classify_boundary",
    "notch_body",
    "BODIES",
    "make_grid",
    "make_constraints",
    "EvalPoint",
    "GridResult",
    "DirichletConstraint",
]

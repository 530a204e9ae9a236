"""
Geometry and mesh generation module.

Classes:
- Point: Immutable 2D or 3D coordinate
- Mesh: Quadrilateral / hexahedral mesh with boundary and manifold ids
- SphericalManifold, CylindricalManifold: Curved-surface descriptors
- BoundaryClassifier: Boundary tags by coordinate proximity
- NotchSpecification: Linear or round notch geometry

Functions:
- subdivided_hyper_rectangle: Structured brick with graded subdivisions
- quarter_hyper_cube_with_cylindrical_hole: Quarter square with a hole
- quarter_disk: Quarter-disk cross-section
- merge_meshes: Merge two meshes with matching interfaces
- extrude: Extrude a 2D mesh into 3D
- classify_boundary: Tag all boundary faces of a mesh
- notch_body: Carve a notch into a mesh
- shift_vertex_layer: Move a layer of vertices
"""

from .point import Point
from .manifold import FlatManifold, SphericalManifold, CylindricalManifold
from .mesh import Mesh, BoundaryFace, FACES_PER_DIM
from .grid_generators import (
    tensor_grid, subdivided_hyper_rectangle, hyper_rectangle, band_step_sizes,
    merge_meshes, extrude, structured_block,
    quarter_hyper_cube_with_cylindrical_hole, quarter_disk
)
from .layers import (
    shift_vertex_layer, halved_layer_positions, rod_layer_positions, shift_rod_layers
)
from .boundary import (
    CurvedSurface, BoundaryClassifier, default_planes, classify_boundary,
    attach_curved_manifold
)
from .notch import (
    NotchSpecification, NotchContourManifold, notch_body,
    prepare_mesh_for_notching, attach_notch_manifold
)

__all__ = [
    "Point",
    "FlatManifold",
    "SphericalManifold",
    "CylindricalManifold",
    "Mesh",
    "BoundaryFace",
    "FACES_PER_DIM",
    "tensor_grid",
    "subdivided_hyper_rectangle",
    "hyper_rectangle",
    "band_step_sizes",
    "merge_meshes",
    "extrude",
    "structured_block",
    "quarter_hyper_cube_with_cylindrical_hole",
    "quarter_disk",
    "shift_vertex_layer",
    "halved_layer_positions",
    "rod_layer_positions",
    "shift_rod_layers",
    "CurvedSurface",
    "BoundaryClassifier",
    "default_planes",
    "classify_boundary",
    "attach_curved_manifold",
    "NotchSpecification",
    "NotchContourManifold",
    "notch_body",
    "prepare_mesh_for_notching",
    "attach_notch_manifold",
]

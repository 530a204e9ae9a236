"""
QPlate - a quarter of a plate with a hole in 2D, 1/8 of it in 3D.

The plate [0, width]^2 has a quarter hole of radius hole_radius at the
origin. An inner block around the hole is meshed by two transfinite
blocks; the rest of the plate by a conforming brick grid. The hole edge
carries a curved manifold for refinement.
"""

import warnings
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from ..geometry.boundary import (
    BoundaryClassifier, CurvedSurface, attach_curved_manifold, classify_boundary
)
from ..geometry.grid_generators import (
    extrude, merge_meshes, quarter_hyper_cube_with_cylindrical_hole, subdivided_hyper_rectangle
)
from ..geometry.manifold import CylindricalManifold, SphericalManifold
from ..geometry.mesh import Mesh
from ..geometry.point import Point
from ..misc.enums import Axis, BC, Driver, RefineSpecial, Tag
from ..misc.options import GeneralParameters
from .common import EvalPoint, GridResult, check_dim, eval_point, mark_tracked_cell
from .constraints import DirichletConstraint, bc_apply


NAME = 'QPlate'


@dataclass(frozen = True)
class QuarterPlateConfig:
    """Fixed choices of the plate with hole example."""
    loading_axis: Axis = Axis.Y
    load_boundary: Tag = Tag.Y_PLUS
    bc_x_minus: BC = BC.SYM
    bc_x_plus: BC = BC.NONE
    sym_on_top_face: bool = False
    manifold_id_hole: int = 10
    search_tolerance: float = 1e-12


def make_quarter_plate_with_hole(parameters: GeneralParameters,
        config: QuarterPlateConfig) -> Mesh:
    """
    Untagged 2D quarter plate with the hole manifold attached and the
    global refinements executed.

    The inner block has the half size hole_radius + ratio_x * (width -
    hole_radius); its resolution is doubled by every hole-edge refinement.
    With ratio_x = 1 the inner block is the whole plate.
    """
    width = parameters.width
    radius = parameters.hole_radius
    if not 0 < radius < width:
        raise ValueError('[error] {}: need 0 < hole_radius < width, got {} and {}'.format(NAME, radius, width))
    if not 0 < parameters.ratio_x <= 1:
        raise ValueError('[error] {}: ratio_x must be in (0, 1], got {}'.format(NAME, parameters.ratio_x))

    inner = radius + parameters.ratio_x * (width - radius)
    n_inner = 2 ** parameters.nbr_hole_edge_refinements

    mesh = quarter_hyper_cube_with_cylindrical_hole(radius, inner, n_angular = n_inner, n_radial = n_inner)

    if abs(parameters.ratio_x - 1.0) > 1e-12:
        remaining = width - inner
        n_subs = max(1, int(np.ceil(remaining / inner)))
        steps = [inner / n_inner] * n_inner + [remaining / n_subs] * n_subs

        plate = subdivided_hyper_rectangle([steps, steps], (0.0, 0.0), (width, width))
        centers = plate.cell_centers()
        plate = plate.remove_cells((centers[:, 0] < inner) & (centers[:, 1] < inner))
        mesh = merge_meshes(mesh, plate, 1e-12 * width)

    hole = CurvedSurface(Point(0.0, 0.0), radius)
    attach_curved_manifold(mesh, hole, config.manifold_id_hole, SphericalManifold((0.0, 0.0)),
                           config.search_tolerance)

    if parameters.stepwise_global_refinement:
        mesh.refine_global(1)
    else:
        mesh.refine_global(parameters.nbr_global_refinements)

    return mesh


def make_grid(parameters: Optional[GeneralParameters] = None,
        dim: int = 2,
        config: Optional[QuarterPlateConfig] = None) -> GridResult:
    """
    Build the quarter plate with hole.

    Parameters
    ----------
    parameters : GeneralParameters
        width, hole_radius, ratio_x, thickness, nbr_global_refinements,
        nbr_hole_edge_refinements, nbr_elements_in_z,
        stepwise_global_refinement
    dim : int
        2 or 3
    config : QuarterPlateConfig, optional

    Returns
    -------
    result : GridResult
    """
    if parameters is None:
        parameters = GeneralParameters()
    if config is None:
        config = QuarterPlateConfig()
    dim = check_dim(dim, NAME)

    width = parameters.width
    radius = parameters.hole_radius
    tol = config.search_tolerance

    mesh = make_quarter_plate_with_hole(parameters, config)

    if dim == 2:
        hole = CurvedSurface(Point(0.0, 0.0), radius)
        classifier = BoundaryClassifier(extents = (width, width), curved = hole, tolerance = tol)
        manifold = SphericalManifold((0.0, 0.0))
    else:
        half_thickness = parameters.thickness / 2.0
        mesh = extrude(mesh, parameters.nbr_elements_in_z + 1, half_thickness)
        hole = CurvedSurface(Point(0.0, 0.0, 0.0), radius, axis = Axis.Z)
        classifier = BoundaryClassifier(extents = (width, width, half_thickness), curved = hole, tolerance = tol)
        manifold = CylindricalManifold(Axis.Z)

    mesh.clear_boundary_ids()
    classify_boundary(mesh, classifier, body = NAME)
    attach_curved_manifold(mesh, hole, config.manifold_id_hole, manifold, tol)

    mark_tracked_cell(mesh, eval_point(dim, radius, 0.0, 0.0), Tag.Y_MINUS, tol)

    if dim == 3 and parameters.refine_special == RefineSpecial.COARSE_AND_FINE_BRICK:
        warnings.warn('{}: local refinement around the tracked cell is not supported, ignored'.format(NAME))

    eval_points = [EvalPoint(eval_point(dim, width, width, parameters.thickness / 2.0), config.loading_axis)]
    return GridResult(mesh, eval_points, [])


def make_constraints(parameters: GeneralParameters, dim: int,
        current_load_increment: float,
        apply_dirichlet_bc: bool = True,
        config: Optional[QuarterPlateConfig] = None) -> List[DirichletConstraint]:
    """
    Symmetry constraints on x = 0, y = 0 (and z = 0) and the load on the
    loaded face for the Dirichlet driver.
    """
    if config is None:
        config = QuarterPlateConfig()
    dim = check_dim(dim, NAME)
    constraints = []

    if config.bc_x_minus == BC.SYM:
        constraints.append(bc_apply(Tag.X_MINUS, Axis.X, 0.0, apply_dirichlet_bc))
    if config.bc_x_plus == BC.SYM:
        constraints.append(bc_apply(Tag.X_PLUS, Axis.X, 0.0, apply_dirichlet_bc))

    constraints.append(bc_apply(Tag.Y_MINUS, Axis.Y, 0.0, apply_dirichlet_bc))

    if dim == 3:
        constraints.append(bc_apply(Tag.Z_MINUS, Axis.Z, 0.0, apply_dirichlet_bc))
        if config.sym_on_top_face:
            constraints.append(bc_apply(Tag.Z_PLUS, Axis.Z, 0.0, apply_dirichlet_bc))

    if parameters.driver == Driver.DIRICHLET:
        constraints.append(bc_apply(config.load_boundary, config.loading_axis,
                                    current_load_increment, apply_dirichlet_bc))

    return constraints

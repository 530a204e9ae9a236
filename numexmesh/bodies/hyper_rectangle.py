"""
HyperRectangle - a notched brick with three symmetry constraints, loaded in
y-direction.

2D: [0, width] x [0, height]; 3D: extruded over the thickness. The notch
sits on the x+ face at the symmetry plane y = 0 (or, notched twice, one
notch on each side face around mid height) to trigger localisation.
"""

import warnings
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from ..geometry.boundary import BoundaryClassifier, classify_boundary
from ..geometry.grid_generators import (
    band_step_sizes, extrude, merge_meshes, subdivided_hyper_rectangle
)
from ..geometry.mesh import Mesh
from ..geometry.notch import (
    NotchSpecification, attach_notch_manifold, notch_body, prepare_mesh_for_notching
)
from ..geometry.point import Point
from ..misc.enums import Axis, BC, Driver, NotchType, RefineSpecial, Tag
from ..misc.options import GeneralParameters
from .common import EvalPoint, GridResult, check_dim, eval_point
from .constraints import DirichletConstraint, bc_apply, bc_apply_fix


NAME = 'HyperRectangle'


@dataclass(frozen = True)
class HyperRectangleConfig:
    """Fixed choices of the hyper rectangle example."""
    loading_axis: Axis = Axis.Y
    load_boundary: Tag = Tag.Y_PLUS
    bc_x_minus: BC = BC.SYM
    bc_y_minus: BC = BC.SYM
    bc_z_minus: BC = BC.SYM
    bc_y_plus: BC = BC.NONE
    constrain_sideways_sliding: bool = False
    sym_on_top_face: bool = False       # plane strain in 3D, top face is z+
    notching: bool = True
    notch_type: NotchType = NotchType.LINEAR
    notch_twice: bool = False
    search_tolerance: float = 1e-12
    manifold_id_notch_left: int = 10
    manifold_id_notch_right: int = 11


def make_notches(parameters: GeneralParameters,
        config: HyperRectangleConfig) -> List[NotchSpecification]:
    """
    Notch on the x+ face at y = 0; notched twice, a second notch on the x-
    face, both offset by width/2 from mid height.
    """
    width = parameters.width
    length = parameters.height
    depth = (1.0 - parameters.ratio_x) * width
    half_width = parameters.notch_width / 2.0

    notch_offset = width
    y_right = length / 2.0 + notch_offset / 2.0 if config.notch_twice else 0.0
    y_left = length / 2.0 - notch_offset / 2.0

    notches = [NotchSpecification(config.notch_type, half_width, depth, Point(width, y_right), Tag.X_PLUS,
                                  Point(1.0, 0.0), Axis.Y, reference_radius = width,
                                  manifold_id = config.manifold_id_notch_right)]
    if config.notch_twice:
        notches.append(NotchSpecification(config.notch_type, half_width, depth, Point(0.0, y_left), Tag.X_MINUS,
                                          Point(-1.0, 0.0), Axis.Y, reference_radius = width,
                                          manifold_id = config.manifold_id_notch_left))
    return notches


def _refinement_band(parameters: GeneralParameters, config: HyperRectangleConfig):
    if config.notch_twice:
        # covers the band of slope 1 between the two notches
        width = parameters.width
        half_width = parameters.notch_width / 2.0
        y_left = parameters.height / 2.0 - width / 2.0
        return (y_left - 1.75 * half_width, y_left + width + 1.75 * half_width)
    return (0.0, parameters.width)


def make_grid_flat(parameters: GeneralParameters,
        notches: List[NotchSpecification],
        config: HyperRectangleConfig) -> Mesh:
    """
    Tagged and notched 2D grid.

    Local refinements bisect every column and, in y, the rows whose centre
    lies in the refinement band, so the grid stays conforming.
    """
    width = parameters.width
    length = parameters.height
    n0 = parameters.grid_y_repetitions
    n_global = parameters.nbr_global_refinements
    n_local = parameters.nbr_hole_edge_refinements

    if n0 < 1:
        raise ValueError('[error] {}: grid_y_repetitions must be >= 1, got {}'.format(NAME, n0))

    edge_length_ratio = length / width
    ny_homogeneous = n0 * int(np.ceil(edge_length_ratio))
    ny_overhead = n0 * int(np.ceil(np.ceil(edge_length_ratio) - edge_length_ratio))

    band = _refinement_band(parameters, config)
    nx = n0 * (n_global + 1) * 2 ** n_local

    if parameters.refine_special == RefineSpecial.COARSE_AND_FINE_BRICK:
        length_refined = min(width, 0.9 * length)
        ny_fine = n0 + ny_overhead
        ny_coarse = ny_homogeneous - ny_fine
        if ny_coarse < 1:
            raise ValueError('[error] {}: body too short for a fine and a coarse brick'.format(NAME))

        fine = subdivided_hyper_rectangle(
            [nx, band_step_sizes(0.0, length_refined, ny_fine * (n_global + 1), band, n_local)],
            (0.0, 0.0), (width, length_refined))
        coarse = subdivided_hyper_rectangle(
            [nx, band_step_sizes(length_refined, length, ny_coarse * (n_global + 1), band, n_local)],
            (width, length_refined), (0.0, length))
        mesh = merge_meshes(fine, coarse, 1e-9 * length)
    else:
        mesh = subdivided_hyper_rectangle(
            [nx, band_step_sizes(0.0, length, ny_homogeneous * (n_global + 1), band, n_local)],
            (0.0, 0.0), (width, length))

    mesh.clear_boundary_ids()
    classifier = BoundaryClassifier(extents = (width, length), tolerance = config.search_tolerance)
    classify_boundary(mesh, classifier, body = NAME)

    if config.notching:
        if notches[0].depth > 1e-20:
            for notch in notches:
                if notch.notch_type == NotchType.ROUND:
                    prepare_mesh_for_notching(mesh, notch)
                notch_body(mesh, notch)
                attach_notch_manifold(mesh, notch)
        else:
            warnings.warn('{}: notch depth is zero, the body is not notched'.format(NAME))

    return mesh


def make_grid(parameters: Optional[GeneralParameters] = None,
        dim: int = 2,
        config: Optional[HyperRectangleConfig] = None) -> GridResult:
    """
    Build the hyper rectangle.

    Parameters
    ----------
    parameters : GeneralParameters
        width, height, thickness, notch_width, ratio_x, grid_y_repetitions,
        nbr_global_refinements, nbr_hole_edge_refinements,
        nbr_elements_in_z, refine_special
    dim : int
        2 or 3
    config : HyperRectangleConfig, optional

    Returns
    -------
    result : GridResult
    """
    if parameters is None:
        parameters = GeneralParameters()
    if config is None:
        config = HyperRectangleConfig()
    dim = check_dim(dim, NAME)

    notches = make_notches(parameters, config)
    mesh = make_grid_flat(parameters, notches, config)

    if dim == 3:
        n_slices = parameters.nbr_elements_in_z
        if n_slices < 2:
            print('{}: using 2 slices in z instead of {}'.format(NAME, n_slices))
            n_slices = 2
        thickness = parameters.thickness
        mesh = extrude(mesh, n_slices, thickness)

        classifier = BoundaryClassifier(planes = [(Tag.Z_MINUS, Axis.Z, 0.0), (Tag.Z_PLUS, Axis.Z, thickness)],
                                        tolerance = config.search_tolerance)
        classify_boundary(mesh, classifier, body = NAME)

        notches = [notch.to3d() for notch in notches]
        if config.notching:
            for notch in notches:
                attach_notch_manifold(mesh, notch)

    # deepest point of the (first) notch
    depth = notches[0].depth if config.notching else 0.0
    y_notch = notches[0].reference_point[Axis.Y]
    eval_points = [
        EvalPoint(eval_point(dim, parameters.width - depth, y_notch, 0.0), Axis.X),
        EvalPoint(eval_point(dim, parameters.width, parameters.height, 0.0), Axis.X),
    ]
    return GridResult(mesh, eval_points, notches if config.notching else [])


def make_constraints(parameters: GeneralParameters, dim: int,
        current_load_increment: float,
        apply_dirichlet_bc: bool = True,
        config: Optional[HyperRectangleConfig] = None) -> List[DirichletConstraint]:
    """
    Symmetry constraints on x = 0, y = 0 (and z = 0) and the load on the
    loaded face for the Dirichlet driver.
    """
    if config is None:
        config = HyperRectangleConfig()
    dim = check_dim(dim, NAME)
    constraints = []

    if config.bc_x_minus == BC.SYM:
        constraints.append(bc_apply(Tag.X_MINUS, Axis.X, 0.0, apply_dirichlet_bc))

    if config.bc_y_minus == BC.FIX:
        constraints.append(bc_apply_fix(Tag.Y_MINUS))
    elif config.bc_y_minus == BC.SYM:
        constraints.append(bc_apply(Tag.Y_MINUS, Axis.Y, 0.0, apply_dirichlet_bc))

    if dim == 3:
        if config.bc_z_minus == BC.SYM:
            constraints.append(bc_apply(Tag.Z_MINUS, Axis.Z, 0.0, apply_dirichlet_bc))
        if config.sym_on_top_face:
            constraints.append(bc_apply(Tag.Z_PLUS, Axis.Z, 0.0, apply_dirichlet_bc))

    if config.constrain_sideways_sliding and config.bc_y_plus == BC.X0:
        constraints.append(bc_apply(Tag.Y_PLUS, Axis.X, 0.0, apply_dirichlet_bc))

    if parameters.driver == Driver.DIRICHLET:
        constraints.append(bc_apply(config.load_boundary, config.loading_axis,
                                    current_load_increment, apply_dirichlet_bc))

    return constraints

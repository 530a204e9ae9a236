"""
Rod - 1/8 of a notched rod in 3D and the axisymmetric half model in 2D.

The rod of length width and radius hole_radius is loaded along y. The
notched region of length notch_width around the symmetry plane y = 0 is
meshed uniformly fine, the rest uniformly coarse. The radial notch reduces
the radius to ratio_x * hole_radius at y = 0.
"""

import warnings
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from ..geometry.boundary import (
    BoundaryClassifier, CurvedSurface, attach_curved_manifold, classify_boundary
)
from ..geometry.grid_generators import (
    band_step_sizes, extrude, quarter_disk, subdivided_hyper_rectangle
)
from ..geometry.layers import halved_layer_positions, rod_layer_positions, shift_rod_layers
from ..geometry.manifold import CylindricalManifold
from ..geometry.mesh import Mesh
from ..geometry.notch import NotchSpecification, notch_body
from ..geometry.point import Point
from ..misc.enums import Axis, BC, Driver, NotchType, RefineSpecial, Tag
from ..misc.options import GeneralParameters
from .common import EvalPoint, GridResult, check_dim, eval_point
from .constraints import DirichletConstraint, bc_apply


NAME = 'Rod'


@dataclass(frozen = True)
class RodConfig:
    """Fixed choices of the notched rod example."""
    loading_axis: Axis = Axis.Y
    load_boundary: Tag = Tag.Y_PLUS
    bc_x_minus: BC = BC.X0
    bc_x_plus: BC = BC.NONE
    bc_y_plus: BC = BC.NONE
    notch_type: NotchType = NotchType.LINEAR
    manifold_id_surface: int = 10
    search_tolerance: float = 1e-8
    n_max_coarse: int = 6


def make_notch(parameters: GeneralParameters, dim: int, config: RodConfig) -> NotchSpecification:
    """Radial notch at y = 0 down to ratio_x * hole_radius."""
    radius = parameters.hole_radius
    depth = radius - parameters.ratio_x * radius
    tag = Tag.X_PLUS if dim == 2 else Tag.Z_PLUS
    return NotchSpecification(config.notch_type, parameters.notch_width / 2.0, depth,
                              eval_point(dim, radius, 0.0, 0.0), tag, eval_point(dim, 1.0, 0.0, 0.0),
                              Axis.Y, reference_radius = radius)


def _require_local_refinement(n: int) -> None:
    if n < 1:
        raise ValueError('[error] {}: mesh not implemented for only 4 elements in total, '
                         'increase nbr_hole_edge_refinements to at least 1'.format(NAME))


def _make_grid_2d(parameters: GeneralParameters, config: RodConfig) -> Mesh:
    half_length = parameters.width / 2.0
    radius = parameters.hole_radius
    n_local = parameters.nbr_hole_edge_refinements
    strategy = parameters.refine_special
    p1, p2 = (0.0, 0.0), (radius, half_length)

    if strategy == RefineSpecial.STANDARD:
        _require_local_refinement(n_local)
        steps = np.diff(halved_layer_positions(half_length, n_local))
        mesh = subdivided_hyper_rectangle([4, steps], p1, p2)
    elif strategy == RefineSpecial.ROD_UNIFORM:
        mesh = subdivided_hyper_rectangle([1, 4], p1, p2)
    elif strategy == RefineSpecial.SIMO:
        # the first layer is halved towards y = 0
        steps = np.diff(halved_layer_positions(half_length, n_local))
        mesh = subdivided_hyper_rectangle([1, steps], p1, p2)
    elif strategy == RefineSpecial.NONE:
        mesh = subdivided_hyper_rectangle([4, 1], p1, p2)
    elif strategy == RefineSpecial.ROD_UPSETTING_TAPERED:
        # matches the tapering exactly
        mesh = subdivided_hyper_rectangle([10, 15], p1, p2)
    elif strategy == RefineSpecial.ROD_AX_RATIO_EL:
        nx = parameters.nbr_elements_in_z * parameters.grid_y_repetitions
        x_steps = band_step_sizes(0.0, radius, nx, (0.9 * radius, radius), n_local)
        mesh = subdivided_hyper_rectangle([x_steps, parameters.grid_y_repetitions], p1, p2)
    else:
        raise ValueError('[error] {}: refinement strategy {} not available in 2D'.format(NAME, strategy.name))

    mesh.clear_boundary_ids()
    classifier = BoundaryClassifier(extents = (radius, half_length), tolerance = config.search_tolerance)
    classify_boundary(mesh, classifier, body = NAME)

    if strategy == RefineSpecial.STANDARD:
        shift_rod_layers(mesh, half_length, parameters.notch_width / 2.0, n_local, Axis.Y,
                         config.search_tolerance, config.n_max_coarse)
    return mesh


def _surface_blend(n_local: int) -> List[float]:
    """Radial layers of the cross-section, halved towards the surface."""
    return [0.0] + [1.0 - 0.5 ** k for k in range(1, n_local + 1)] + [1.0]


def _make_grid_3d(parameters: GeneralParameters, config: RodConfig) -> Mesh:
    half_length = parameters.width / 2.0
    half_notch_length = parameters.notch_width / 2.0
    radius = parameters.hole_radius
    n_local = parameters.nbr_hole_edge_refinements
    strategy = parameters.refine_special
    tol = config.search_tolerance

    if strategy == RefineSpecial.STANDARD:
        _require_local_refinement(n_local)
        section = quarter_disk(radius, 2, 2)
        positions = halved_layer_positions(half_length, n_local)
    elif strategy == RefineSpecial.INNERMOST:
        # four additional layers, the local refinements go to the innermost layer
        section = quarter_disk(radius, 2, 2)
        fine = rod_layer_positions(half_length, half_notch_length, 4, config.n_max_coarse)
        innermost = [fine[1] / 2 ** k for k in range(n_local, 0, -1)]
        positions = np.concatenate([[0.0], innermost, fine[1:]])
    elif strategy == RefineSpecial.ROD_UNIFORM:
        section = quarter_disk(radius, 1, 1)
        positions = [0.0, half_length / 2.0, half_length]
    elif strategy == RefineSpecial.SIMO:
        section = quarter_disk(radius, 2, 2)
        positions = halved_layer_positions(half_length, n_local)
    elif strategy == RefineSpecial.UNIFORM:
        section = quarter_disk(radius, 1, _surface_blend(n_local))
        positions = [0.0, half_length / 2.0, half_length]
    else:
        raise ValueError('[error] {}: refinement strategy {} not available in 3D'.format(NAME, strategy.name))

    mesh = extrude(section, positions, axis = Axis.Y)

    planes = [(Tag.X_MINUS, Axis.X, 0.0), (Tag.Y_MINUS, Axis.Y, 0.0),
              (Tag.Z_MINUS, Axis.Z, 0.0), (Tag.Y_PLUS, Axis.Y, half_length)]
    surface = CurvedSurface(Point(0.0, 0.0, 0.0), radius, axis = Axis.Y, tag = Tag.Z_PLUS)
    classify_boundary(mesh, BoundaryClassifier(planes = planes, curved = surface, tolerance = tol), body = NAME)
    attach_curved_manifold(mesh, surface, config.manifold_id_surface, CylindricalManifold(Axis.Y), tol)

    if strategy == RefineSpecial.STANDARD:
        shift_rod_layers(mesh, half_length, half_notch_length, n_local, Axis.Y, tol, config.n_max_coarse)
    elif strategy == RefineSpecial.UNIFORM:
        mesh.refine_global(1 + parameters.nbr_global_refinements)

    return mesh


def make_grid(parameters: Optional[GeneralParameters] = None,
        dim: int = 2,
        config: Optional[RodConfig] = None) -> GridResult:
    """
    Build the notched rod.

    Parameters
    ----------
    parameters : GeneralParameters
        width (rod length), hole_radius (rod radius), notch_width, ratio_x,
        nbr_global_refinements, nbr_hole_edge_refinements, refine_special
        (and grid_y_repetitions, nbr_elements_in_z for ROD_AX_RATIO_EL)
    dim : int
        2 or 3
    config : RodConfig, optional

    Returns
    -------
    result : GridResult
    """
    if parameters is None:
        parameters = GeneralParameters()
    if config is None:
        config = RodConfig()
    dim = check_dim(dim, NAME)

    notch = make_notch(parameters, dim, config)
    if dim == 2:
        mesh = _make_grid_2d(parameters, config)
    else:
        mesh = _make_grid_3d(parameters, config)

    notches = []
    if abs(parameters.ratio_x - 1.0) > 1e-10:
        # the surface manifold of the 3D rod keeps describing the notched faces
        notch_body(mesh, notch, radial = True)
        notches.append(notch)
    else:
        warnings.warn('{}: ratio_x = 1, the rod is not notched'.format(NAME))

    if not (dim == 3 and parameters.refine_special == RefineSpecial.UNIFORM):
        mesh.refine_global(parameters.nbr_global_refinements)

    radius = parameters.hole_radius
    eval_points = [
        EvalPoint(eval_point(dim, parameters.ratio_x * radius, 0.0, 0.0), Axis.X),
        EvalPoint(eval_point(dim, radius, parameters.width / 2.0, 0.0), Axis.X),
    ]
    return GridResult(mesh, eval_points, notches)


def make_constraints(parameters: GeneralParameters, dim: int,
        current_load_increment: float,
        apply_dirichlet_bc: bool = True,
        config: Optional[RodConfig] = None) -> List[DirichletConstraint]:
    """
    Symmetry constraints on x = 0, y = 0 (and z = 0), the selected
    condition on the loaded face and the load for the Dirichlet driver.
    """
    if config is None:
        config = RodConfig()
    dim = check_dim(dim, NAME)
    constraints = []

    if config.bc_x_minus == BC.X0:
        constraints.append(bc_apply(Tag.X_MINUS, Axis.X, 0.0, apply_dirichlet_bc))
    if config.bc_x_plus == BC.X0:
        constraints.append(bc_apply(Tag.X_PLUS, Axis.X, 0.0, apply_dirichlet_bc))

    constraints.append(bc_apply(Tag.Y_MINUS, Axis.Y, 0.0, apply_dirichlet_bc))

    if dim == 3:
        constraints.append(bc_apply(Tag.Z_MINUS, Axis.Z, 0.0, apply_dirichlet_bc))

    if config.bc_y_plus == BC.X0_Z0:
        # no contraction of the loaded face
        constraints.append(bc_apply(Tag.Y_PLUS, Axis.X, 0.0, apply_dirichlet_bc))
        if dim == 3:
            constraints.append(bc_apply(Tag.Y_PLUS, Axis.Z, 0.0, apply_dirichlet_bc))
    elif config.bc_y_plus == BC.Y0:
        constraints.append(bc_apply(Tag.Y_PLUS, Axis.Y, 0.0, apply_dirichlet_bc))

    if parameters.driver == Driver.DIRICHLET:
        constraints.append(bc_apply(config.load_boundary, config.loading_axis,
                                    current_load_increment, apply_dirichlet_bc))

    return constraints

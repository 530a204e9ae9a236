"""
Grid and constraint builders of the numerical examples.

Bodies:
- HyperRectangle: Notched brick loaded in y-direction
- QPlate: Quarter plate with a hole
- Rod: Notched rod (axisymmetric in 2D, 1/8 model in 3D)
"""

from typing import List, Optional

from ..misc.options import GeneralParameters
from . import hyper_rectangle, quarter_plate, rod
from .common import EvalPoint, GridResult, mark_tracked_cell
from .constraints import DirichletConstraint, bc_apply, bc_apply_fix, constraints_on
from .hyper_rectangle import HyperRectangleConfig
from .quarter_plate import QuarterPlateConfig
from .rod import RodConfig


BODIES = {
    hyper_rectangle.NAME: hyper_rectangle,
    quarter_plate.NAME: quarter_plate,
    rod.NAME: rod,
}


def _body(name: str):
    if name not in BODIES:
        raise ValueError('[error] Unknown body <{}>, available: {}'.format(name, ', '.join(BODIES)))
    return BODIES[name]


def make_grid(name: str,
        parameters: Optional[GeneralParameters] = None,
        dim: int = 2,
        config = None) -> GridResult:
    """
    Build the grid of the named body.

    Parameters
    ----------
    name : str
        'HyperRectangle', 'QPlate' or 'Rod'
    parameters : GeneralParameters, optional
    dim : int
        2 or 3
    config : body configuration, optional

    Returns
    -------
    result : GridResult
    """
    return _body(name).make_grid(parameters, dim, config)


def make_constraints(name: str,
        parameters: GeneralParameters,
        dim: int,
        current_load_increment: float,
        apply_dirichlet_bc: bool = True,
        config = None) -> List[DirichletConstraint]:
    """Dirichlet constraints of the named body."""
    return _body(name).make_constraints(parameters, dim, current_load_increment, apply_dirichlet_bc, config)


__all__ = [
    "BODIES",
    "make_grid",
    "make_constraints",
    "EvalPoint",
    "GridResult",
    "mark_tracked_cell",
    "DirichletConstraint",
    "bc_apply",
    "bc_apply_fix",
    "constraints_on",
    "HyperRectangleConfig",
    "QuarterPlateConfig",
    "RodConfig",
]

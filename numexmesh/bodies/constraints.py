"""
Dirichlet constraints returned to the finite-element driver.

The builders only describe which boundary gets which prescribed
displacement component; assembling them into an affine constraint object
is left to the driver.
"""

from typing import List, NamedTuple, Optional

from ..misc.enums import Axis, Tag


class DirichletConstraint(NamedTuple):
    """
    Prescribed displacement on all faces with the given boundary tag.

    component None constrains every displacement component (clamped).
    """
    boundary: Tag
    component: Optional[Axis]
    value: float = 0.0


def bc_apply(boundary: Tag, component: Axis, value: float,
        apply_dirichlet_bc: bool = True) -> DirichletConstraint:
    """
    Constraint of one displacement component.

    The value is only imposed when apply_dirichlet_bc is set; otherwise
    the constraint is homogeneous (e.g. for Newton corrections).
    """
    return DirichletConstraint(Tag(boundary), Axis(component),
                               float(value) if apply_dirichlet_bc else 0.0)


def bc_apply_fix(boundary: Tag) -> DirichletConstraint:
    """Clamp all displacement components to zero."""
    return DirichletConstraint(Tag(boundary), None, 0.0)


def constraints_on(constraints: List[DirichletConstraint], boundary: Tag) -> List[DirichletConstraint]:
    return [c for c in constraints if c.boundary == boundary]

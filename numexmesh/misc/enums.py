"""
Enumerators shared by the grid builders and the constraint builders.

Boundary tags, coordinate axes, notch types, boundary-condition selectors,
loading drivers and the special refinement strategies.
"""

from enum import Enum, IntEnum


class Tag(IntEnum):
    """
    Symbolic boundary labels stored on boundary faces.

    The integer values are the boundary ids handed to the finite-element
    driver.
    """
    UNCLASSIFIED = 0
    X_MINUS = 1
    X_PLUS = 2
    Y_MINUS = 3
    Y_PLUS = 4
    Z_MINUS = 5
    Z_PLUS = 6
    HOLE_EDGE = 10

    @classmethod
    def minus(cls, axis: int) -> 'Tag':
        return (cls.X_MINUS, cls.Y_MINUS, cls.Z_MINUS)[int(axis)]

    @classmethod
    def plus(cls, axis: int) -> 'Tag':
        return (cls.X_PLUS, cls.Y_PLUS, cls.Z_PLUS)[int(axis)]


class Axis(IntEnum):
    X = 0
    Y = 1
    Z = 2


class NotchType(Enum):
    LINEAR = 'linear'
    ROUND = 'round'


class BC(Enum):
    """Boundary-condition selector for a single face."""
    NONE = 'none'
    SYM = 'sym'         # symmetry, normal component fixed
    FIX = 'fix'         # clamped, all components fixed
    X0 = 'x0'
    Y0 = 'y0'
    X0_Z0 = 'x0_z0'     # no contraction of the loaded face


class Driver(Enum):
    DIRICHLET = 'dirichlet'
    NEUMANN = 'neumann'
    CONTACT = 'contact'


class RefineSpecial(IntEnum):
    STANDARD = 0
    COARSE_AND_FINE_BRICK = 1
    INNERMOST = 2
    ROD_UNIFORM = 3
    SIMO = 4
    UNIFORM = 5
    NONE = 6
    ROD_UPSETTING_TAPERED = 7
    ROD_AX_RATIO_EL = 8


# material id of the quarter-plate cell at the bottom edge next to the hole
TRACKED_QP = 1

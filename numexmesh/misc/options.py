"""
Simulation parameters for the grid builders.

The parameter record is immutable; every builder receives it explicitly
instead of reading process-wide settings.
"""

from typing import Any, Dict, List, NamedTuple, Optional

from .enums import Driver, RefineSpecial


class GeneralParameters(NamedTuple):
    """
    Recognised options of a grid / constraint builder call.

    Parameters
    ----------
    width : float
        Body width (hyper rectangle), plate size (quarter plate) or total
        rod length (rod)
    height : float
        Body length in loading direction (hyper rectangle)
    thickness : float
        Body thickness for 3D grids
    hole_radius : float
        Hole radius (quarter plate) or rod radius (rod)
    notch_width : float
        Full width of the notch along the loading axis
    ratio_x : float
        Reduction ratio controlling the notch depth (hyper rectangle, rod) or
        the size of the inner block around the hole (quarter plate)
    grid_y_repetitions : int
        Number of coarse elements across the width
    nbr_global_refinements : int
        Global refinements
    nbr_hole_edge_refinements : int
        Local refinements (hole edge, notch band)
    nbr_elements_in_z : int
        Number of elements through the thickness
    refine_special : RefineSpecial
        Special refinement strategy
    stepwise_global_refinement : bool
        Refine the initial grid only once (quarter plate)
    driver : Driver
        Loading driver; the load is only imposed as constraint for Dirichlet
    """
    width: float = 10.0
    height: float = 20.0
    thickness: float = 1.0
    hole_radius: float = 1.0
    notch_width: float = 2.0
    ratio_x: float = 0.9
    grid_y_repetitions: int = 2
    nbr_global_refinements: int = 0
    nbr_hole_edge_refinements: int = 1
    nbr_elements_in_z: int = 1
    refine_special: RefineSpecial = RefineSpecial.STANDARD
    stepwise_global_refinement: bool = False
    driver: Driver = Driver.DIRICHLET


def meshoptions(op: Optional[GeneralParameters] = None,
        **kwargs: Any) -> GeneralParameters:
    """
    Standard or user-defined parameters for a grid builder.

    Parameters
    ----------
    op : GeneralParameters, optional
        Parameters from a previous call
    **kwargs : dict
        Additional option name-value pairs

    Returns
    -------
    op : GeneralParameters
    """
    if op is None:
        op = GeneralParameters()

    _check_names(kwargs)
    return _coerce(op._replace(**kwargs))


def getmeshoptions(*args: Any,
        **kwargs: Any) -> GeneralParameters:
    """
    Collect parameters from dicts, parameter records and name-value pairs.

    Processes arguments in order: dicts and parameter records are merged,
    lists of strings trigger extraction of body-specific sub-dictionaries
    (e.g. ``['Rod']`` picks up ``{'Rod': {'ratio_x': 0.5}}``), and
    name-value pairs are added directly.

    Returns
    -------
    op : GeneralParameters
    """
    op = {}
    sub = None
    it = 0

    while it < len(args):
        arg = args[it]

        if isinstance(arg, GeneralParameters):
            op.update(arg._asdict())
            it += 1

        elif isinstance(arg, dict):
            op.update(arg)
            if sub is not None:
                op = _extract_subs(op, sub)
            it += 1

        elif isinstance(arg, str):
            if it + 1 >= len(args):
                raise ValueError('[error] Missing value for option <{}>!'.format(arg))
            op[arg] = args[it + 1]
            it += 2

        elif isinstance(arg, (list, tuple)):
            sub = arg
            op = _extract_subs(op, sub)
            it += 1

        else:
            raise TypeError('[error] Unsupported option argument of type {}'.format(type(arg).__name__))

    op.update(kwargs)

    # drop the body sub-dictionaries that were not requested
    op = {k: v for k, v in op.items() if not isinstance(v, dict)}
    return meshoptions(**op)


def _extract_subs(op: Dict[str, Any],
        sub: List[str]) -> Dict[str, Any]:
    """Extract fields from substructures."""
    for name in sub:
        if name in op and isinstance(op[name], dict):
            for key, val in op[name].items():
                op[key] = val
    return op


def getfields(param: GeneralParameters,
        *names: str) -> Dict[str, Any]:
    """
    Extract fields from a parameter record. If names are provided,
    only extract those fields.
    """
    fields = param._asdict()
    if len(names) == 0:
        return fields
    return {k: v for k, v in fields.items() if k in names}


def _check_names(kwargs: Dict[str, Any]) -> None:
    unknown = set(kwargs) - set(GeneralParameters._fields)
    if unknown:
        raise ValueError('[error] Unknown mesh option(s) <{}>!'.format(', '.join(sorted(unknown))))


def _coerce(op: GeneralParameters) -> GeneralParameters:
    # values coming from parameter files arrive as plain ints / strings
    return op._replace(
        refine_special = RefineSpecial(op.refine_special),
        driver = op.driver if isinstance(op.driver, Driver) else Driver(op.driver))

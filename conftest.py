"""
Pytest configuration for numexmesh tests
"""

import pytest


@pytest.fixture
def atol():
    """Absolute tolerance for numerical comparisons"""
    return 1e-12


@pytest.fixture
def coarse_parameters():
    """Small parameter set that keeps the example grids fast"""
    from numexmesh.misc.options import meshoptions

    return meshoptions(width = 4.0, height = 8.0, thickness = 1.0, hole_radius = 1.0,
                       notch_width = 1.0, ratio_x = 0.8, grid_y_repetitions = 1,
                       nbr_global_refinements = 0, nbr_hole_edge_refinements = 1,
                       nbr_elements_in_z = 2)

import sys
import os

import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from numexmesh.geometry.boundary import BoundaryClassifier, classify_boundary
from numexmesh.geometry.grid_generators import (
    band_step_sizes,
    extrude,
    hyper_rectangle,
    merge_meshes,
    quarter_disk,
    quarter_hyper_cube_with_cylindrical_hole,
    structured_block,
    subdivided_hyper_rectangle,
    tensor_grid,
)
from numexmesh.misc.enums import Axis, Tag


def _cell_areas(mesh) -> np.ndarray:
    # bilinear quads: exact area from the two triangles (v0, v1, v3) and (v0, v3, v2)
    v = mesh.vertices[mesh.cells]
    def tri(a, b, c):
        e1 = b - a
        e2 = c - a
        return 0.5 * np.abs(e1[:, 0] * e2[:, 1] - e1[:, 1] * e2[:, 0])
    return tri(v[:, 0], v[:, 1], v[:, 3]) + tri(v[:, 0], v[:, 3], v[:, 2])


# ============================================================================
# Tests: structured bricks
# ============================================================================

class TestSubdividedHyperRectangle(object):

    def test_counts(self) -> None:
        mesh = subdivided_hyper_rectangle([2, 4], [0, 0], [1, 2])
        assert mesh.n_cells == 8
        assert mesh.n_vertices == 15

    def test_corners_in_any_order(self) -> None:
        mesh = subdivided_hyper_rectangle([1, 1], (1.0, 2.0), (0.0, 0.0))
        np.testing.assert_allclose(mesh.vertices.min(axis = 0), [0.0, 0.0])
        np.testing.assert_allclose(mesh.vertices.max(axis = 0), [1.0, 2.0])

    def test_step_sizes(self) -> None:
        mesh = subdivided_hyper_rectangle([2, [0.5, 0.5, 1.0]], (0.0, 0.0), (1.0, 2.0))
        assert mesh.n_cells == 6
        np.testing.assert_allclose(np.unique(mesh.vertices[:, 1]), [0.0, 0.5, 1.0, 2.0])

    def test_step_sizes_must_add_up(self) -> None:
        with pytest.raises(ValueError):
            subdivided_hyper_rectangle([2, [0.5, 0.5]], (0.0, 0.0), (1.0, 2.0))

    def test_invalid_repetitions(self) -> None:
        with pytest.raises(ValueError):
            subdivided_hyper_rectangle([0, 1], (0.0, 0.0), (1.0, 1.0))
        with pytest.raises(ValueError):
            subdivided_hyper_rectangle([1], (0.0, 0.0), (1.0, 1.0))

    def test_3d(self) -> None:
        mesh = subdivided_hyper_rectangle([1, 2, 3], (0.0, 0.0, 0.0), (1.0, 1.0, 1.0))
        assert mesh.dim == 3
        assert mesh.n_cells == 6
        assert mesh.n_vertices == 2 * 3 * 4

    def test_hyper_rectangle(self) -> None:
        mesh = hyper_rectangle((0.0, 0.0), (2.0, 3.0))
        assert mesh.n_cells == 1
        assert _cell_areas(mesh)[0] == pytest.approx(6.0)

    def test_tensor_grid_rejects_unsorted(self) -> None:
        with pytest.raises(ValueError):
            tensor_grid([[0.0, 1.0], [1.0, 0.0]])


class TestBandStepSizes(object):

    def test_refined_band(self) -> None:
        steps = band_step_sizes(0.0, 4.0, 4, (0.0, 1.5), 1)
        np.testing.assert_allclose(steps, [0.5, 0.5, 0.5, 0.5, 1.0, 1.0])
        assert sum(steps) == pytest.approx(4.0)

    def test_no_band(self) -> None:
        assert band_step_sizes(0.0, 3.0, 3) == [1.0, 1.0, 1.0]

    def test_two_refinements(self) -> None:
        steps = band_step_sizes(2.0, 4.0, 2, (3.5, 4.0), 2)
        np.testing.assert_allclose(steps, [1.0, 0.25, 0.25, 0.25, 0.25])

    def test_invalid(self) -> None:
        with pytest.raises(ValueError):
            band_step_sizes(0.0, 1.0, 0)


# ============================================================================
# Tests: merging and extrusion
# ============================================================================

class TestMergeMeshes(object):

    def test_shared_edge(self) -> None:
        a = hyper_rectangle((0.0, 0.0), (1.0, 1.0))
        b = hyper_rectangle((1.0, 0.0), (2.0, 1.0))
        mesh = merge_meshes(a, b)
        assert mesh.n_cells == 2
        assert mesh.n_vertices == 6
        assert mesh.n_boundary_faces == 6

    def test_disjoint(self) -> None:
        a = hyper_rectangle((0.0, 0.0), (1.0, 1.0))
        b = hyper_rectangle((2.0, 0.0), (3.0, 1.0))
        mesh = merge_meshes(a, b)
        assert mesh.n_vertices == 8
        assert mesh.n_boundary_faces == 8

    def test_tolerance(self) -> None:
        a = hyper_rectangle((0.0, 0.0), (1.0, 1.0))
        b = hyper_rectangle((1.0 + 1e-10, 0.0), (2.0, 1.0))
        assert merge_meshes(a, b, 1e-8).n_vertices == 6
        assert merge_meshes(a, b, 1e-12).n_vertices == 8

    def test_dimension_mismatch(self) -> None:
        a = hyper_rectangle((0.0, 0.0), (1.0, 1.0))
        b = hyper_rectangle((1.0, 0.0, 0.0), (2.0, 1.0, 1.0))
        with pytest.raises(ValueError):
            merge_meshes(a, b)


class TestExtrude(object):

    def test_counts(self) -> None:
        mesh = extrude(subdivided_hyper_rectangle([2, 1], (0.0, 0.0), (2.0, 1.0)), 3, 2.0)
        assert mesh.dim == 3
        assert mesh.n_cells == 4
        assert mesh.n_vertices == 18
        np.testing.assert_allclose(np.unique(mesh.vertices[:, 2]), [0.0, 1.0, 2.0])

    def test_positions(self) -> None:
        mesh = extrude(hyper_rectangle((0.0, 0.0), (1.0, 1.0)), [0.0, 0.25, 1.0])
        np.testing.assert_allclose(np.unique(mesh.vertices[:, 2]), [0.0, 0.25, 1.0])

    def test_side_tags_inherited(self) -> None:
        flat = subdivided_hyper_rectangle([2, 1], (0.0, 0.0), (2.0, 1.0))
        classify_boundary(flat, BoundaryClassifier(extents = (2.0, 1.0)))
        mesh = extrude(flat, 3, 2.0)

        assert len(mesh.faces_with_tag(Tag.X_MINUS)) == 2
        assert len(mesh.faces_with_tag(Tag.Y_MINUS)) == 4
        # the caps are left to the caller
        assert len(mesh.faces_with_tag(Tag.UNCLASSIFIED)) == 4

        classify_boundary(mesh, BoundaryClassifier(planes = [(Tag.Z_MINUS, Axis.Z, 0.0),
                                                             (Tag.Z_PLUS, Axis.Z, 2.0)]))
        assert len(mesh.faces_with_tag(Tag.UNCLASSIFIED)) == 0

    def test_extrusion_axis(self) -> None:
        mesh = extrude(hyper_rectangle((0.0, 0.0), (1.0, 2.0)), [0.0, 3.0], axis = Axis.Y)
        np.testing.assert_allclose(mesh.vertices.max(axis = 0), [1.0, 3.0, 2.0])

    @pytest.mark.parametrize('axis', [Axis.X, Axis.Y, Axis.Z])
    def test_cells_positively_oriented(self, axis) -> None:
        flat = subdivided_hyper_rectangle([2, 3], (0.0, 0.0), (2.0, 3.0))
        mesh = extrude(flat, [0.0, 0.5, 1.0], axis = axis)
        corners = mesh.vertices[mesh.cells]
        jac = np.einsum('ij,ij->i', np.cross(corners[:, 1] - corners[:, 0], corners[:, 2] - corners[:, 0]),
                        corners[:, 4] - corners[:, 0])
        assert np.all(jac > 0)

    def test_invalid(self) -> None:
        flat = hyper_rectangle((0.0, 0.0), (1.0, 1.0))
        with pytest.raises(ValueError):
            extrude(flat, 3)
        with pytest.raises(ValueError):
            extrude(flat, 1, 1.0)
        with pytest.raises(ValueError):
            extrude(flat, [0.0, 0.0])
        with pytest.raises(ValueError):
            extrude(extrude(flat, 2, 1.0), 2, 1.0)


# ============================================================================
# Tests: curved blocks
# ============================================================================

class TestCurvedBlocks(object):

    def test_structured_block(self) -> None:
        xi, eta = np.meshgrid(np.linspace(0, 1, 3), np.linspace(0, 2, 4), indexing = 'ij')
        mesh = structured_block(np.stack([xi, eta], axis = 2))
        assert mesh.n_cells == 6
        assert mesh.n_vertices == 12
        np.testing.assert_allclose(_cell_areas(mesh), 1.0 / 3.0)

    def test_plate_with_hole(self) -> None:
        mesh = quarter_hyper_cube_with_cylindrical_hole(1.0, 2.0, n_angular = 2, n_radial = 2)
        assert mesh.n_cells == 8
        assert mesh.n_vertices == 15
        assert mesh.n_boundary_faces == 12

        radius = np.linalg.norm(mesh.vertices, axis = 1)
        assert np.all(radius >= 1.0 - 1e-12)
        assert np.all(mesh.vertices <= 2.0 + 1e-12)
        # area of the square minus the quarter disk, up to the polygonal arc
        assert np.sum(_cell_areas(mesh)) == pytest.approx(4.0 - np.pi / 4, abs = 0.05)

    def test_plate_with_hole_validation(self) -> None:
        with pytest.raises(ValueError):
            quarter_hyper_cube_with_cylindrical_hole(2.0, 1.0)

    def test_quarter_disk(self) -> None:
        mesh = quarter_disk(1.0, 2, 2)
        assert mesh.n_cells == 12
        assert mesh.n_vertices == 19
        assert mesh.n_boundary_faces == 12
        assert np.all(np.linalg.norm(mesh.vertices, axis = 1) <= 1.0 + 1e-12)
        assert np.all(_cell_areas(mesh) > 0.0)

    def test_quarter_disk_graded_layers(self) -> None:
        mesh = quarter_disk(2.0, 1, [0.0, 0.5, 0.75, 1.0])
        assert mesh.n_cells == 1 + 2 * 3
        radius = np.linalg.norm(mesh.vertices, axis = 1)
        assert np.sum(np.abs(radius - 2.0) < 1e-12) == 3

    def test_quarter_disk_invalid_blend(self) -> None:
        with pytest.raises(ValueError):
            quarter_disk(1.0, 1, [0.0, 0.6, 0.5, 1.0])
        with pytest.raises(ValueError):
            quarter_disk(1.0, core_fraction = 0.8)

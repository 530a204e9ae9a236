import sys
import os

import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from numexmesh.geometry.boundary import BoundaryClassifier, classify_boundary
from numexmesh.geometry.grid_generators import subdivided_hyper_rectangle, tensor_grid
from numexmesh.geometry.mesh import Mesh
from numexmesh.geometry.notch import (
    NotchContourManifold,
    NotchSpecification,
    attach_notch_manifold,
    notch_body,
    prepare_mesh_for_notching,
)
from numexmesh.geometry.point import Point
from numexmesh.misc.enums import Axis, NotchType, Tag
from numexmesh.misc.errors import InvalidNotchGeometry


def _side_notch(notch_type: NotchType = NotchType.LINEAR,
        half_width: float = 1.0,
        depth: float = 0.5,
        manifold_id = None) -> NotchSpecification:
    # notch on the x = 2 face of [0, 2] x [0, 10] at y = 5
    return NotchSpecification(notch_type, half_width, depth, Point(2.0, 5.0), Tag.X_PLUS,
                              Point(1.0, 0.0), Axis.Y, reference_radius = 2.0,
                              manifold_id = manifold_id)


def _find(mesh: Mesh, original: np.ndarray, x: float, y: float) -> int:
    ind = np.where(np.all(np.abs(original - np.array([x, y])) < 1e-12, axis = 1))[0]
    assert ind.size == 1
    return int(ind[0])


# ============================================================================
# Tests: NotchSpecification validation
# ============================================================================

class TestNotchSpecification(object):

    def test_round_depth_beyond_half_width(self) -> None:
        with pytest.raises(InvalidNotchGeometry):
            NotchSpecification(NotchType.ROUND, 5.0, 10.0, Point(0.0, 0.0), Tag.X_PLUS,
                               Point(1.0, 0.0), Axis.Y)

    def test_invalid_geometry_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            _side_notch(NotchType.ROUND, half_width = 5.0, depth = 10.0)

    def test_non_positive_half_width(self) -> None:
        with pytest.raises(InvalidNotchGeometry):
            _side_notch(half_width = 0.0)
        with pytest.raises(InvalidNotchGeometry):
            _side_notch(half_width = -1.0)

    def test_negative_depth(self) -> None:
        with pytest.raises(InvalidNotchGeometry):
            _side_notch(depth = -0.1)

    def test_depth_beyond_body(self) -> None:
        with pytest.raises(InvalidNotchGeometry):
            _side_notch(half_width = 5.0, depth = 2.5)

    def test_non_unit_normal(self) -> None:
        with pytest.raises(InvalidNotchGeometry):
            NotchSpecification(NotchType.LINEAR, 1.0, 0.5, Point(2.0, 5.0), Tag.X_PLUS,
                               Point(2.0, 0.0), Axis.Y)

    def test_loading_axis_along_normal(self) -> None:
        with pytest.raises(InvalidNotchGeometry):
            NotchSpecification(NotchType.LINEAR, 1.0, 0.5, Point(2.0, 5.0), Tag.X_PLUS,
                               Point(1.0, 0.0), Axis.X)

    def test_coerces_plain_values(self) -> None:
        notch = NotchSpecification('round', 2, 1, (0.0, 0.0), 2, (0.0, 1.0), 0)
        assert notch.notch_type == NotchType.ROUND
        assert isinstance(notch.reference_point, Point)
        assert notch.boundary_tag == Tag.X_PLUS
        assert notch.loading_axis == Axis.X
        assert notch.half_width == 2.0

    def test_to3d(self) -> None:
        notch = _side_notch().to3d()
        assert notch.dim == 3
        assert notch.reference_point == Point(2.0, 5.0, 0.0)
        assert notch.face_normal == Point(1.0, 0.0, 0.0)
        assert notch.depth == 0.5

    def test_fillet_radius(self) -> None:
        assert _side_notch().fillet_radius is None
        notch = _side_notch(NotchType.ROUND, half_width = 2.0, depth = 1.0)
        assert notch.fillet_radius == pytest.approx(2.5)

    def test_fillet_centers_lie_at_fillet_radius(self) -> None:
        notch = NotchSpecification(NotchType.ROUND, 2.0, 1.0, Point(0.0, 0.0), Tag.Y_PLUS,
                                   Point(0.0, 1.0), Axis.X)
        lower, upper = notch.fillet_centers()
        np.testing.assert_allclose(lower.pos, [-2.0, -2.5])
        np.testing.assert_allclose(upper.pos, [2.0, -2.5])
        assert notch.cyl_center == upper

        # contour points on the positive side are at distance R from the centre
        for s in np.linspace(0.0, 2.0, 9):
            contour = np.array([s, -notch.offset(s)])
            assert np.linalg.norm(contour - upper.pos) == pytest.approx(2.5, abs = 1e-12)


# ============================================================================
# Tests: contour offsets
# ============================================================================

class TestOffset(object):

    def test_linear_values(self) -> None:
        notch = _side_notch()
        assert notch.offset(0.0) == pytest.approx(0.5)
        assert notch.offset(0.5) == pytest.approx(0.25)
        assert notch.offset(-0.5) == pytest.approx(0.25)
        assert notch.offset(1.0) == 0.0
        assert notch.offset(3.0) == 0.0

    def test_linear_monotone(self) -> None:
        notch = _side_notch()
        s = np.linspace(0.0, 1.0, 101)
        off = notch.offset(s)
        assert off[0] == pytest.approx(notch.depth)
        assert off[-1] == pytest.approx(0.0)
        assert np.all(np.diff(off) <= 0.0)

    def test_round_deepest_point(self) -> None:
        notch = _side_notch(NotchType.ROUND, half_width = 2.0, depth = 1.0)
        assert abs(notch.offset(0.0) - notch.depth) < 1e-9

    def test_round_tangent_at_band_edge(self) -> None:
        notch = _side_notch(NotchType.ROUND, half_width = 2.0, depth = 1.0)
        hw = notch.half_width
        assert notch.offset(hw) == 0.0

        h = 1e-6
        slope = (notch.offset(hw - h) - notch.offset(hw)) / h
        assert abs(slope) < 1e-5

        # continuous across the band edge
        assert abs(notch.offset(hw - 1e-9) - notch.offset(hw + 1e-9)) < 1e-8

    def test_round_pointed_root(self) -> None:
        # the fillets of both sides meet at s = 0 with opposite slopes
        notch = _side_notch(NotchType.ROUND, half_width = 1.0, depth = 0.5)
        h = 1e-6
        right = (notch.offset(h) - notch.offset(0.0)) / h
        left = (notch.offset(0.0) - notch.offset(-h)) / h
        assert right == pytest.approx(-4.0 / 3.0, rel = 1e-4)
        assert left == pytest.approx(4.0 / 3.0, rel = 1e-4)

        # shallower than the linear notch between root and band edge
        assert notch.offset(0.5) == pytest.approx(1.25 - np.sqrt(1.25 ** 2 - 0.25))
        assert notch.offset(0.5) < _side_notch(depth = 0.5).offset(0.5)

    def test_round_monotone(self) -> None:
        notch = _side_notch(NotchType.ROUND, half_width = 2.0, depth = 1.0)
        off = notch.offset(np.linspace(0.0, 2.0, 201))
        assert np.all(np.diff(off) <= 1e-15)
        assert np.all((off >= 0.0) & (off <= notch.depth))

    def test_round_depth_equal_half_width(self) -> None:
        # quarter circle
        notch = _side_notch(NotchType.ROUND, half_width = 1.0, depth = 1.0)
        assert notch.fillet_radius == pytest.approx(1.0)
        assert notch.offset(0.0) == pytest.approx(1.0)
        assert notch.offset(1.0) == pytest.approx(0.0)

    def test_scalar_offset_is_float(self) -> None:
        assert isinstance(_side_notch().offset(0.25), float)
        assert _side_notch().offset(np.array([0.0, 0.5])).shape == (2,)

    def test_in_band(self) -> None:
        notch = _side_notch()
        inside = notch.in_band(np.array([[2.0, 4.0], [2.0, 5.5], [2.0, 6.0], [2.0, 6.5]]))
        np.testing.assert_array_equal(inside, [True, True, True, False])


# ============================================================================
# Tests: notch_body
# ============================================================================

class TestNotchBody(object):

    def test_end_to_end_rectangle(self) -> None:
        mesh = tensor_grid([[0.0, 1.0, 2.0], [0.0, 4.0, 4.5, 5.0, 5.9, 6.5, 10.0]])
        original = mesh.vertices.copy()

        n_moved = notch_body(mesh, _side_notch())
        assert n_moved == 6

        assert mesh.vertices[_find(mesh, original, 2.0, 5.0)][0] == pytest.approx(1.5)
        assert mesh.vertices[_find(mesh, original, 2.0, 4.0)][0] == pytest.approx(2.0)
        assert mesh.vertices[_find(mesh, original, 2.0, 4.5)][0] == pytest.approx(1.75)
        assert mesh.vertices[_find(mesh, original, 2.0, 5.9)][0] == pytest.approx(1.95)
        np.testing.assert_array_equal(mesh.vertices[_find(mesh, original, 2.0, 6.5)], [2.0, 6.5])

        # proportional to the distance from the opposite face
        assert mesh.vertices[_find(mesh, original, 1.0, 5.0)][0] == pytest.approx(0.75)
        np.testing.assert_array_equal(mesh.vertices[_find(mesh, original, 0.0, 5.0)], [0.0, 5.0])

        # only the normal coordinate changes
        np.testing.assert_array_equal(mesh.vertices[:, 1], original[:, 1])

    def test_mesh_extent_without_reference_radius(self) -> None:
        mesh = tensor_grid([[0.0, 1.0, 2.0], [4.0, 5.0, 6.0]])
        notch = NotchSpecification(NotchType.LINEAR, 1.0, 0.5, Point(2.0, 5.0), Tag.X_PLUS,
                                   Point(1.0, 0.0), Axis.Y)
        notch_body(mesh, notch)
        # the opposite face x = 0 stays put
        np.testing.assert_allclose(mesh.vertices[mesh.vertices[:, 1] == 5.0][:, 0], [0.0, 0.75, 1.5])
        assert mesh.vertices[:, 0].min() == 0.0

    def test_too_deep_without_reference_radius(self) -> None:
        mesh = tensor_grid([[0.0, 1.0, 2.0], [4.0, 5.0, 6.0]])
        before = mesh.vertices.copy()
        notch = NotchSpecification(NotchType.LINEAR, 1.0, 3.0, Point(2.0, 5.0), Tag.X_PLUS,
                                   Point(1.0, 0.0), Axis.Y)
        with pytest.raises(InvalidNotchGeometry):
            notch_body(mesh, notch)
        np.testing.assert_array_equal(mesh.vertices, before)

    def test_zero_depth_warns(self) -> None:
        mesh = tensor_grid([[0.0, 2.0], [0.0, 10.0]])
        before = mesh.vertices.copy()
        with pytest.warns(UserWarning):
            n_moved = notch_body(mesh, _side_notch(depth = 0.0))
        assert n_moved == 0
        np.testing.assert_array_equal(mesh.vertices, before)

    def test_dimension_mismatch(self) -> None:
        mesh = tensor_grid([[0.0, 2.0], [0.0, 10.0], [0.0, 1.0]])
        with pytest.raises(ValueError):
            notch_body(mesh, _side_notch())

    def test_radial_2d(self) -> None:
        mesh = tensor_grid([[0.0, 0.5, 1.0], [0.0, 0.25, 2.0]])
        notch = NotchSpecification(NotchType.LINEAR, 0.5, 0.2, Point(1.0, 0.0), Tag.X_PLUS,
                                   Point(1.0, 0.0), Axis.Y, reference_radius = 1.0)
        original = mesh.vertices.copy()
        notch_body(mesh, notch, radial = True)

        assert mesh.vertices[_find(mesh, original, 1.0, 0.0)][0] == pytest.approx(0.8)
        assert mesh.vertices[_find(mesh, original, 0.5, 0.0)][0] == pytest.approx(0.4)
        assert mesh.vertices[_find(mesh, original, 0.0, 0.0)][0] == 0.0
        assert mesh.vertices[_find(mesh, original, 1.0, 0.25)][0] == pytest.approx(0.9)
        assert mesh.vertices[_find(mesh, original, 1.0, 2.0)][0] == 1.0

    def test_radial_3d_keeps_circles(self) -> None:
        verts = [[0.6, 0.0, 0.8], [1.0, 0.0, 0.0], [0.0, 0.0, 0.0], [0.0, 0.0, 1.0],
                 [0.6, 1.0, 0.8], [1.0, 1.0, 0.0], [0.0, 1.0, 0.0], [0.0, 1.0, 1.0]]
        mesh = Mesh(verts, [list(range(8))])
        notch = NotchSpecification(NotchType.LINEAR, 0.5, 0.2, Point(1.0, 0.0, 0.0), Tag.Z_PLUS,
                                   Point(1.0, 0.0, 0.0), Axis.Y, reference_radius = 1.0)
        notch_body(mesh, notch, radial = True)

        np.testing.assert_allclose(mesh.vertices[0], [0.48, 0.0, 0.64])
        np.testing.assert_allclose(mesh.vertices[1], [0.8, 0.0, 0.0])
        np.testing.assert_allclose(mesh.vertices[3], [0.0, 0.0, 0.8])
        # outside the band
        np.testing.assert_allclose(mesh.vertices[4:], np.array(verts)[4:])

    def test_radial_needs_reference_radius(self) -> None:
        mesh = tensor_grid([[0.0, 1.0], [0.0, 1.0]])
        notch = NotchSpecification(NotchType.LINEAR, 0.5, 0.2, Point(1.0, 0.0), Tag.X_PLUS,
                                   Point(1.0, 0.0), Axis.Y)
        with pytest.raises(ValueError):
            notch_body(mesh, notch, radial = True)


# ============================================================================
# Tests: round notch preparation and contour manifold
# ============================================================================

class TestRoundNotch(object):

    def test_prepare_snaps_layers_to_band_edges(self) -> None:
        mesh = tensor_grid([[0.0, 1.0, 2.0], [0.0, 2.0, 3.9, 5.0, 6.2, 8.0, 10.0]])
        notch = _side_notch(NotchType.ROUND)
        n_moved = prepare_mesh_for_notching(mesh, notch)
        assert n_moved == 6
        np.testing.assert_allclose(np.unique(mesh.vertices[:, 1]), [0.0, 2.0, 4.0, 5.0, 6.0, 8.0, 10.0])

    def test_prepare_keeps_bounding_layers(self) -> None:
        mesh = tensor_grid([[0.0, 2.0], [0.0, 2.0, 4.0]])
        notch = NotchSpecification(NotchType.ROUND, 1.0, 0.5, Point(2.0, 0.0), Tag.X_PLUS,
                                   Point(1.0, 0.0), Axis.Y)
        prepare_mesh_for_notching(mesh, notch)
        np.testing.assert_allclose(np.unique(mesh.vertices[:, 1]), [0.0, 1.0, 4.0])

    def test_prepare_ignores_linear_notches(self) -> None:
        mesh = tensor_grid([[0.0, 1.0, 2.0], [0.0, 3.9, 5.0, 10.0]])
        assert prepare_mesh_for_notching(mesh, _side_notch()) == 0

    def test_manifold_places_refined_vertices_on_contour(self) -> None:
        mesh = subdivided_hyper_rectangle([2, 20], (0.0, 0.0), (2.0, 10.0))
        classify_boundary(mesh, BoundaryClassifier(extents = (2.0, 10.0)))
        notch = _side_notch(NotchType.ROUND, manifold_id = 11)

        notch_body(mesh, notch)
        n_faces = attach_notch_manifold(mesh, notch)
        assert n_faces == 4
        assert isinstance(mesh.get_manifold(11), NotchContourManifold)

        mesh.refine_global(1)
        face_vertices = np.unique(np.concatenate(mesh.faces_with_tag(Tag.X_PLUS)))
        pos = mesh.vertices[face_vertices]
        band = np.abs(pos[:, 1] - 5.0) <= 1.0
        assert np.sum(band) == 9

        expected = 2.0 - notch.offset(pos[band, 1] - 5.0)
        np.testing.assert_allclose(pos[band, 0], expected, atol = 1e-12)

    def test_manifold_needs_id(self) -> None:
        mesh = subdivided_hyper_rectangle([2, 20], (0.0, 0.0), (2.0, 10.0))
        with pytest.raises(ValueError):
            attach_notch_manifold(mesh, _side_notch(NotchType.ROUND))

    def test_no_manifold_for_linear_notch(self) -> None:
        mesh = subdivided_hyper_rectangle([2, 20], (0.0, 0.0), (2.0, 10.0))
        assert attach_notch_manifold(mesh, _side_notch(manifold_id = 11)) == 0
        assert 11 not in mesh.manifolds

import math

import pytest

from conway_poly import solids, vec3
from conway_poly.polyhedron import Polyhedron, face_area, face_center, face_normal


def _close(a, b, tol=1e-9):
    return all(math.isclose(x, y, abs_tol=tol) for x, y in zip(a, b))


UNIT_SQUARE = [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0), (0.0, 1.0, 0.0)]


def test_vector_basics():
    assert vec3.add((1, 2, 3), (4, 5, 6)) == (5, 7, 9)
    assert vec3.sub((4, 5, 6), (1, 2, 3)) == (3, 3, 3)
    assert vec3.dot((1, 0, 0), (0, 1, 0)) == 0
    assert vec3.cross((1, 0, 0), (0, 1, 0)) == (0, 0, 1)
    assert vec3.neg((1, -2, 3)) == (-1, 2, -3)
    assert math.isclose(vec3.norm((3, 4, 0)), 5.0)


def test_degenerate_vectors_are_total():
    assert vec3.normalize((0.0, 0.0, 0.0)) == vec3.ZERO
    assert vec3.divide((1.0, 2.0, 3.0), 0) == vec3.ZERO
    assert vec3.mean([]) == vec3.ZERO


def test_interpolation_helpers():
    a, b = (0.0, 0.0, 0.0), (3.0, 6.0, 9.0)
    assert _close(vec3.midpoint(a, b), (1.5, 3.0, 4.5))
    assert _close(vec3.tween(a, b, 0.25), (0.75, 1.5, 2.25))
    assert _close(vec3.one_third(a, b), (1.0, 2.0, 3.0))
    assert _close(vec3.lerp(a, b, 0.5), vec3.midpoint(a, b))


def test_face_normal_center_area_of_square():
    assert _close(face_normal(UNIT_SQUARE), (0.0, 0.0, 1.0))
    assert _close(face_center(UNIT_SQUARE), (0.5, 0.5, 0.0))
    assert math.isclose(face_area(UNIT_SQUARE, (0.0, 0.0, 1.0)), 1.0)


def test_face_normal_scales_with_face_size():
    big = [vec3.scale(p, 3.0) for p in UNIT_SQUARE]
    assert _close(face_normal(big), (0.0, 0.0, 9.0))
    # The area projection does not depend on the normal length.
    assert math.isclose(face_area(big, face_normal(big)), 9.0)
    assert math.isclose(face_area(UNIT_SQUARE, (0.0, 0.0, 5.0)), 1.0)


def test_collinear_first_corners_give_zero_normal():
    points = [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (2.0, 0.0, 0.0), (1.0, 1.0, 0.0)]
    assert face_normal(points) == vec3.ZERO


def test_polyhedron_coerces_to_tuples():
    poly = Polyhedron(name="sq", vertices=[[0, 0, 0], [1, 0, 0], [0, 1, 0]], faces=[[0, 1, 2]])
    assert poly.vertices[1] == (1.0, 0.0, 0.0)
    assert poly.faces == ((0, 1, 2),)
    assert poly.summary() == "sq: 3 vertices / 1 faces"


def test_cube_queries():
    cube = solids.cube()
    normals = cube.calc_normals()
    centers = cube.calc_centers()
    for n, c in zip(normals, centers):
        # Unnormalised: an edge-1.414 square face gives length 1.414 squared.
        assert math.isclose(vec3.norm(n), 1.414 * 1.414, rel_tol=1e-9)
        assert vec3.dot(n, c) > 0
    areas = cube.calc_areas()
    assert all(math.isclose(a, 1.414 * 1.414, rel_tol=1e-9) for a in areas)
    assert len(cube.edges()) == 12
    assert cube.check_indices() == []


def test_vertex_normals_point_outward():
    cube = solids.cube()
    for p, n in zip(cube.vertices, cube.vertex_normals()):
        assert math.isclose(vec3.norm(n), 1.0)
        assert vec3.dot(p, n) > 0


def test_check_indices_reports_out_of_range():
    poly = Polyhedron(name="bad", vertices=[(0, 0, 0)], faces=[(0, 1, 2)])
    assert poly.check_indices() == [(0, 1), (0, 2)]


def test_normalized_scales_span_to_one():
    poly = solids.cube().normalized()
    coords = [c for p in poly.vertices for c in p]
    assert math.isclose(max(coords) - min(coords), 1.0)
    assert poly.faces == solids.cube().faces


def test_renamed_keeps_geometry():
    cube = solids.cube()
    other = cube.renamed("box")
    assert other.name == "box"
    assert other.vertices == cube.vertices


@pytest.mark.parametrize(
    "build, counts",
    [
        (solids.tetrahedron, (4, 4)),
        (solids.cube, (8, 6)),
        (solids.octahedron, (6, 8)),
        (solids.icosahedron, (12, 20)),
        (solids.dodecahedron, (20, 12)),
    ],
)
def test_platonic_counts_and_euler(build, counts):
    poly = build()
    assert (len(poly.vertices), len(poly.faces)) == counts
    assert len(poly.vertices) - len(poly.edges()) + len(poly.faces) == 2


def test_platonic_faces_wound_outward():
    for build in (solids.tetrahedron, solids.cube, solids.octahedron, solids.icosahedron, solids.dodecahedron):
        poly = build()
        for n, c in zip(poly.avg_normals(), poly.calc_centers()):
            assert vec3.dot(n, c) > 0, poly.name


def test_prism_family_counts():
    assert (len(solids.prism(5).vertices), len(solids.prism(5).faces)) == (10, 7)
    assert (len(solids.antiprism(4).vertices), len(solids.antiprism(4).faces)) == (8, 10)
    assert (len(solids.pyramid(6).vertices), len(solids.pyramid(6).faces)) == (7, 7)
    assert (len(solids.cupola(3).vertices), len(solids.cupola(3).faces)) == (9, 8)
    assert (len(solids.anticupola(4).vertices), len(solids.anticupola(4).faces)) == (12, 14)


def test_prism_family_rejects_too_few_sides():
    with pytest.raises(ValueError):
        solids.prism(2)
    assert solids.cupola(1).faces == ()
    assert solids.anticupola(2).vertices == ()


def test_seed_lookup():
    assert solids.seed("C").name == "C"
    assert solids.seed("R5").name == "R5"
    assert solids.seed("A7").name == "A7"
    with pytest.raises(ValueError):
        solids.seed("X")
    with pytest.raises(ValueError):
        solids.seed("P")

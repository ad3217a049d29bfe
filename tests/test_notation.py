import pytest

from conway_poly import operators, solids
from conway_poly.notation import OPERATORS, RecipeError, apply_recipe, parse_recipe
from conway_poly.parameters import OperatorParameters


def test_parse_reads_right_to_left():
    recipe = parse_recipe("dkD")
    assert recipe.seed == "D"
    assert recipe.operations == (("k", 0), ("d", 0))


def test_parse_counts_and_family_seeds():
    recipe = parse_recipe("k4n5R5")
    assert recipe.seed == "R5"
    assert recipe.operations == (("n", 5), ("k", 4))
    assert parse_recipe("P4").operations == ()
    assert parse_recipe("PC").operations == (("P", 0),)


@pytest.mark.parametrize("bad", ["", "dk", "zC", "a3C", "C5"])
def test_malformed_recipes_raise(bad):
    with pytest.raises(RecipeError):
        parse_recipe(bad)


def test_recipe_error_is_value_error():
    assert issubclass(RecipeError, ValueError)


def test_registry_covers_every_operator_letter():
    assert set(OPERATORS) == set("kagprdcwqnxlHP")


def test_apply_recipe_matches_direct_calls():
    poly = apply_recipe("dkD")
    direct = operators.dual(operators.kis_n(solids.dodecahedron()))
    assert poly.name == "dkD"
    assert poly.vertices == direct.vertices
    assert poly.faces == direct.faces
    assert len(poly.vertices) == 60
    assert len(poly.faces) == 32


def test_apply_recipe_uses_parameters():
    params = OperatorParameters(recipe="kC", apex_dist=0.5)
    poly = apply_recipe("kC", params)
    assert poly == operators.kis_n(solids.cube(), 0, 0.5).renamed("kC")


def test_apply_recipe_parallel_kis():
    params = OperatorParameters(parallel_kis=True, chunk_size=1000)
    poly = apply_recipe("kI", params)
    assert poly.faces == operators.kis_n(solids.icosahedron()).faces

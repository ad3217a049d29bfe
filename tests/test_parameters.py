import json
import math

import pytest

from conway_poly import parameters
from conway_poly.parameters import OperatorParameters


def test_defaults_validate():
    params = OperatorParameters()
    params.validate()
    assert params.recipe == "D"
    assert params.chunk_size == 2048
    assert params.max_workers is None


@pytest.mark.parametrize(
    "field, value",
    [
        ("recipe", ""),
        ("apex_dist", float("nan")),
        ("inset_dist", float("inf")),
        ("chunk_size", 0),
        ("palette_size", 0),
        ("max_workers", 0),
    ],
)
def test_validate_rejects_bad_values(field, value):
    with pytest.raises(ValueError):
        OperatorParameters.from_dict({field: value})


def test_from_dict_rejects_unknown_keys():
    with pytest.raises(KeyError):
        OperatorParameters.from_dict({"radius": 2.0})


def test_apply_overrides_returns_copy():
    base = OperatorParameters()
    updated = parameters.apply_overrides(base, {"recipe": "aC", "apex_dist": 0.3})
    assert updated.recipe == "aC"
    assert math.isclose(updated.apex_dist, 0.3)
    assert base.recipe == "D"
    with pytest.raises(KeyError):
        parameters.apply_overrides(base, {"bogus": 1})


def test_cli_overrides():
    overrides, parsed = parameters.parse_cli_overrides(
        [
            "dkD",
            "--apex-dist",
            "0.2",
            "--inset",
            "0.4",
            "-0.2",
            "--parallel-kis",
            "--workers",
            "3",
            "--unknown-flag",
        ]
    )
    assert overrides["recipe"] == "dkD"
    assert math.isclose(overrides["apex_dist"], 0.2)
    assert math.isclose(overrides["inset_dist"], 0.4)
    assert math.isclose(overrides["popout_dist"], -0.2)
    assert overrides["parallel_kis"] is True
    assert overrides["max_workers"] == 3
    assert parsed.config is None


def test_cli_without_flags_has_no_overrides():
    overrides, _ = parameters.parse_cli_overrides([])
    assert overrides == {}


def test_load_parameters_json_then_cli(tmp_path):
    config_path = tmp_path / "poly.json"
    config_path.write_text(json.dumps({"recipe": "gO", "chamfer_dist": 0.1}))

    params = parameters.load_parameters(config_path, {"recipe": "cO"})
    assert params.recipe == "cO"
    assert math.isclose(params.chamfer_dist, 0.1)


def test_load_json_config_errors(tmp_path):
    assert parameters.load_json_config(None) == {}
    with pytest.raises(FileNotFoundError):
        parameters.load_json_config(tmp_path / "missing.json")
    listing = tmp_path / "list.json"
    listing.write_text("[1, 2]")
    with pytest.raises(ValueError):
        parameters.load_json_config(listing)

from __future__ import annotations

import copy
import logging

import pytest

from docfold.core.composer import (
    CompositionResult,
    compose,
    compose_layers,
    compose_with_diagnostics,
)
from docfold.core.layers import Layer, LayerStack


def test_single_layer_is_identity() -> None:
    layer = {"docus": {"title": "Vekos", "aside": {"exclude": []}}}
    assert compose(layer) == layer


def test_single_layer_result_is_a_copy() -> None:
    layer = {"docus": {"title": "Vekos"}}
    result = compose(layer)
    result["docus"]["title"] = "changed"
    assert layer["docus"]["title"] == "Vekos"


def test_empty_input_yields_empty_mapping() -> None:
    assert compose() == {}
    assert compose_layers([]) == {}


def test_later_layer_wins_on_scalars() -> None:
    assert compose({"a": 1}, {"a": 2}) == {"a": 2}


def test_mappings_merge_recursively() -> None:
    assert compose({"a": {"x": 1, "y": 2}}, {"a": {"y": 3, "z": 4}}) == {"a": {"x": 1, "y": 3, "z": 4}}


def test_sequences_are_replaced_not_concatenated() -> None:
    assert compose({"a": [1, 2]}, {"a": [3]}) == {"a": [3]}


def test_type_mismatch_resolves_to_later_layer() -> None:
    assert compose({"a": {"x": 1}}, {"a": "replaced"}) == {"a": "replaced"}
    assert compose({"a": "scalar"}, {"a": {"x": 1}}) == {"a": {"x": 1}}


def test_explicit_null_overrides_concrete_value() -> None:
    assert compose({"a": 5}, {"a": None}) == {"a": None}


def test_scalar_layers_fold_to_last() -> None:
    assert compose(1, "two") == "two"


@pytest.mark.parametrize(
    "l1, l2, l3",
    [
        ({"a": 1}, {"a": 2, "b": {"c": 1}}, {"b": {"d": 2}}),
        ({"a": {"x": 1}}, {"a": 5}, {"a": {"y": 2}}),
        ({"a": [1]}, {"a": {"k": 1}}, {"a": [2, 3]}),
        ({"a": None}, {}, {"a": {"b": None}}),
    ],
)
def test_left_fold_associativity(l1, l2, l3) -> None:
    assert compose(compose(l1, l2), l3) == compose(l1, l2, l3)


def test_inputs_are_not_mutated() -> None:
    l1 = {"docus": {"header": {"exclude": ["/a"]}, "title": "Docus"}}
    l2 = {"docus": {"header": {"exclude": []}, "socials": {"github": "x"}}}
    before = copy.deepcopy((l1, l2))

    result = compose(l1, l2)
    result["docus"]["socials"]["github"] = "mutated"

    assert (l1, l2) == before


def test_layers_and_bare_trees_mix() -> None:
    theme = Layer(name="docus", tree={"docus": {"title": "Docus", "layout": "default"}})
    assert compose(theme, {"docus": {"title": "Vekos"}}) == {"docus": {"title": "Vekos", "layout": "default"}}


def test_compose_layers_accepts_a_generator() -> None:
    layers = [{"a": 1}, {"b": 2}]
    assert compose_layers(layer for layer in layers) == {"a": 1, "b": 2}


def test_mutating_a_layer_after_compose_leaves_result_unchanged() -> None:
    theme = {"docus": {"title": "Docus", "aside": {"exclude": ["/changelog"]}}}
    site = {"docus": {"socials": {"github": "vekos"}}}

    result = compose(theme, site)
    theme["docus"]["title"] = "edited"
    theme["docus"]["aside"]["exclude"].append("/drafts")
    site["docus"]["socials"]["github"] = "edited"
    del site["docus"]

    assert result == {
        "docus": {"title": "Docus", "aside": {"exclude": ["/changelog"]}, "socials": {"github": "vekos"}}
    }


def test_appending_to_the_source_list_does_not_change_a_stack() -> None:
    layers = [Layer(name="docus", tree={"docus": {"title": "Docus"}})]
    stack = LayerStack.of(layers)
    layers.append(Layer(name="site", tree={"docus": {"title": "Vekos"}}))

    assert stack.names == ("docus",)
    assert stack.compose() == {"docus": {"title": "Docus"}}


def test_diagnostics_match_plain_compose_result() -> None:
    layers = [{"a": {"x": 1}, "l": [1, 2]}, {"a": "s", "l": []}]
    result = compose_with_diagnostics(layers)
    assert isinstance(result, CompositionResult)
    assert result.config == compose(*layers)


def test_diagnostics_name_layer_and_path() -> None:
    layers = [
        Layer(name="docus", tree={"docus": {"github": {"branch": "main"}, "aside": {"exclude": ["/x"]}}}),
        Layer(name="site", tree={"docus": {"github": False, "aside": {"exclude": []}}}),
    ]

    result = compose_with_diagnostics(layers)

    found = {(d.kind, d.path, d.layer) for d in result.diagnostics}
    assert found == {
        ("type_mismatch", "docus.github", "site"),
        ("sequence_discarded", "docus.aside.exclude", "site"),
    }
    assert result.layer_names == ("docus", "site")


def test_first_layer_never_produces_diagnostics() -> None:
    result = compose_with_diagnostics(["scalar", {"a": 1}])
    assert [d.kind for d in result.diagnostics] == ["type_mismatch"]
    assert result.diagnostics[0].layer == "layer[1]"


def test_diagnostics_are_logged_at_requested_level(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="docfold"):
        compose_with_diagnostics([{"a": {"x": 1}}, {"a": 1}], log_level=logging.INFO)
    assert any("type_mismatch" in rec.getMessage() for rec in caplog.records)


def test_no_diagnostics_logged_by_default(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="docfold"):
        compose_with_diagnostics([{"a": {"x": 1}}, {"a": 1}])
    assert not [r for r in caplog.records if "type_mismatch" in r.getMessage()]


def test_provenance_points_at_last_layer_supplying_each_leaf() -> None:
    layers = [
        Layer(name="schema-defaults", tree={"docus": {"title": "Docus", "main": {"padded": True, "fluid": False}}}),
        Layer(name="docus", tree={"docus": {"header": {"logo": False}}}),
        Layer(name="site", tree={"docus": {"title": "Vekos", "main": {"fluid": True}}}),
    ]

    result = compose_with_diagnostics(layers)

    assert result.provenance == {
        "docus.title": "site",
        "docus.main.padded": "schema-defaults",
        "docus.main.fluid": "site",
        "docus.header.logo": "docus",
    }


def test_provenance_after_mapping_replaced_by_scalar() -> None:
    layers = [
        Layer(name="a", tree={"github": {"branch": "main"}}),
        Layer(name="b", tree={"github": False}),
    ]
    result = compose_with_diagnostics(layers)
    assert result.provenance == {"github": "b"}

import pytest

from app_builder.visual import EntityFieldMap, default_style, filter_style_overrides, merge_style


def test_merge_is_idempotent():
    once = merge_style(default_style(), {"buttonColor": "#fff"})
    twice = merge_style(once, {"buttonColor": "#fff"})

    assert once == twice
    assert once["buttonColor"] == "#fff"


def test_merge_keeps_unset_keys_and_overwrites_set_ones():
    state = merge_style(default_style(), {"fontSize": "20px"})
    state = merge_style(state, {"buttonColor": "red", "fontSize": "22px"})

    assert state == {
        "formBackground": "#2a2a2a",
        "buttonColor": "red",
        "fontSize": "22px",
        "borderRadius": "16px",
    }


def test_filter_drops_unknown_keys():
    assert filter_style_overrides({"buttonColor": "#fff", "unknownKey": "x"}) == {"buttonColor": "#fff"}


def test_filter_ignores_non_mappings():
    assert filter_style_overrides(["buttonColor"]) == {}
    assert filter_style_overrides(None) == {}


def test_default_style_is_a_fresh_copy():
    style = default_style()
    style["buttonColor"] = "black"

    assert default_style()["buttonColor"] == "#4ade80"


@pytest.mark.parametrize(
    "entity, fields",
    [
        ("Teacher", ["Name", "Subject", "Email"]),
        ("Course", ["Title", "Code", "Credits"]),
        ("student records", ["Name", "Email", "Age"]),
        ("Final Grades", ["Student", "Course", "Score"]),
        ("Widget", ["Name", "Email", "Age"]),
        ("", ["Name", "Email", "Age"]),
    ],
)
def test_default_field_lookup(entity, fields):
    assert EntityFieldMap().fields_for(entity) == fields


def test_first_matching_fragment_wins():
    field_map = EntityFieldMap(
        table=[("pet", ["Species"]), ("petshop", ["Address"])],
        default=["Label"],
    )

    assert field_map.fields_for("PetShop") == ["Species"]
    assert field_map.fields_for("Gadget") == ["Label"]

"""
Object rendering tests.

Tests for the form engine's object handling including:
- Field ids built from property names
- Sibling properties rendered before the oneOf selector
- Immutable form data updates
"""

import pytest

from schemaform.api import SchemaFormAPI
from schemaform.core.values import UNDEFINED


@pytest.mark.rendering
def test_field_ids_follow_property_paths(api, form_schemas):
    """Test that nested properties get separator-joined ids."""
    form = api.create_form(form_schemas["payment"], form_data={"method": {"kind": "card"}})

    ids = [w.id for w in form.node.query_selector_all("input")]
    assert ids == ["root_amount", "root_method_kind", "root_method_number", "root_method_holder"]


@pytest.mark.rendering
def test_custom_id_prefix_and_separator(form_schemas):
    """Test that id configuration reaches every field."""
    api = SchemaFormAPI(id_prefix="form", id_separator=".")
    form = api.create_form(form_schemas["buzz_with_foo_or_bar"])

    assert form.node.query_selector("#form.buzz") is not None
    assert form.node.query_selector("select").id == "form__oneof_select"


@pytest.mark.rendering
def test_siblings_render_before_selector(api, form_schemas):
    """Test the order of fields in an object with a oneOf."""
    form = api.create_form(form_schemas["buzz_with_foo_or_bar"])
    fieldset = form.node.query_selector("fieldset#root")

    assert [(w.kind, w.id) for w in fieldset.children] == [
        ("input", "root_buzz"),
        ("select", "root__oneof_select"),
        ("input", "root_foo"),
    ]


@pytest.mark.rendering
def test_branch_property_shadowed_by_sibling_renders_once(api):
    """Test that a property declared in both places is rendered once."""
    schema = {
        "type": "object",
        "properties": {"note": {"type": "string"}},
        "oneOf": [{"properties": {"note": {"type": "string"}, "a": {"type": "string"}}}],
    }
    form = api.create_form(schema)

    assert len(form.node.query_selector_all("#root_note")) == 1


@pytest.mark.rendering
def test_input_values_and_types(api):
    """Test that leaf widgets reflect the data and schema type."""
    schema = {
        "type": "object",
        "properties": {
            "name": {"type": "string", "title": "Name"},
            "age": {"type": "integer"},
            "active": {"type": "boolean"},
            "color": {"type": "string", "enum": ["red", "green"]},
        },
    }
    form = api.create_form(schema, form_data={"name": "Ann", "active": False})

    name = form.find("#root_name")
    assert (name.input_type, name.label, name.value) == ("text", "Name", "Ann")
    assert form.find("#root_age").input_type == "number"
    assert form.find("#root_age").value is None
    assert form.find("#root_active").input_type == "checkbox"
    assert form.find("#root_active").value is False
    assert form.find("#root_color").attrs["choices"] == ["red", "green"]


def test_edits_never_mutate_previous_data(api, form_schemas):
    """Test that each edit produces a new form data object."""
    initial = {"buzz": "a"}
    form = api.create_form(form_schemas["buzz_with_foo_or_bar"], form_data=initial)

    form.simulate_change("#root_buzz", "b")
    form.simulate_change("#root_foo", "c")

    assert initial == {"buzz": "a"}
    assert form.form_data == {"buzz": "b", "foo": "c"}


def test_empty_string_kept_when_configured(form_schemas):
    """Test the empty_string_is_undefined switch."""
    api = SchemaFormAPI(empty_string_is_undefined=False)
    form = api.create_form(form_schemas["plain"])

    form.simulate_change("#root_foo", "")

    assert form.form_data == {"foo": ""}


def test_no_data_is_undefined(api, form_schemas):
    """Test that a fresh form has absent data."""
    form = api.create_form(form_schemas["plain"])

    assert form.form_data is UNDEFINED
    assert form.json_data() is None

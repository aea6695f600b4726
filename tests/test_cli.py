"""Tests for the schemaform command line interface."""

import json

import pytest
from typer.testing import CliRunner

from schemaform.cli.commands import app

runner = CliRunner()


@pytest.fixture
def write_json(tmp_path):
    """Write a JSON document into the test's temporary directory."""

    def _write(name, data):
        path = tmp_path / name
        path.write_text(json.dumps(data))
        return path

    return _write


@pytest.mark.cli
def test_render_json(write_json, form_schemas):
    """Test rendering a widget tree as JSON."""
    schema = write_json("schema.json", form_schemas["user_id"])
    data = write_json("data.json", {"userId": "foobarbaz"})

    result = runner.invoke(app, ["render", str(schema), "--data", str(data), "--output-format", "json"])

    assert result.exit_code == 0
    tree = json.loads(result.stdout)
    assert tree["kind"] == "form"
    assert '"root_userId__oneof_select"' in result.stdout


@pytest.mark.cli
def test_render_minimal(write_json, form_schemas):
    """Test the one-line-per-selector output."""
    schema = write_json("schema.json", form_schemas["user_id"])
    data = write_json("data.json", {"userId": "foobarbaz"})

    result = runner.invoke(app, ["render", str(schema), "--data", str(data), "--output-format", "minimal"])

    assert result.exit_code == 0
    assert result.stdout.strip() == "root_userId__oneof_select=1 [Option 1, Option 2]"


@pytest.mark.cli
def test_render_pretty(write_json, form_schemas):
    """Test the rich tree output."""
    schema = write_json("schema.json", form_schemas["payment"])

    result = runner.invoke(app, ["render", str(schema)])

    assert result.exit_code == 0
    assert "Bank transfer" in result.stdout
    assert "#root_method_number" in result.stdout


@pytest.mark.cli
def test_resolve_json(write_json, form_schemas):
    """Test listing active alternatives."""
    schema = write_json("schema.json", form_schemas["identifiers"])
    data = write_json("data.json", {"ids": [1, "a"]})

    result = runner.invoke(app, ["resolve", str(schema), "--data", str(data), "--output-format", "json"])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {
        "ids/0@#/properties/ids/items/oneOf": 0,
        "ids/1@#/properties/ids/items/oneOf": 1,
    }


@pytest.mark.cli
def test_resolve_without_sites(write_json, form_schemas):
    """Test the message for schemas without oneOf."""
    schema = write_json("schema.json", form_schemas["plain"])

    result = runner.invoke(app, ["resolve", str(schema)])

    assert result.exit_code == 0
    assert "No oneOf sites" in result.stdout


@pytest.mark.cli
def test_select_reconciles(write_json, form_schemas, tmp_path):
    """Test switching an alternative from the command line."""
    schema = write_json("schema.json", form_schemas["buzz_with_foo_or_bar"])
    data = write_json("data.json", {"buzz": "keep", "foo": "drop"})
    output = tmp_path / "out.json"

    result = runner.invoke(
        app,
        ["select", str(schema), "--data", str(data), "--option", "1", "--output-file", str(output)],
    )

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"buzz": "keep"}
    assert json.loads(output.read_text()) == {"buzz": "keep"}


@pytest.mark.cli
def test_select_invalid_option(write_json, form_schemas):
    """Test that an out-of-range option exits with code 2."""
    schema = write_json("schema.json", form_schemas["user_id"])

    result = runner.invoke(app, ["select", str(schema), "--site", "root_userId", "--option", "5"])

    assert result.exit_code == 2
    assert "does not exist" in result.stdout


@pytest.mark.cli
def test_missing_schema_file(tmp_path):
    """Test that a missing file is reported, not raised."""
    result = runner.invoke(app, ["render", str(tmp_path / "nope.json")])

    assert result.exit_code == 2
    assert "not found" in result.stdout


@pytest.mark.cli
def test_cyclic_schema_reported(write_json, ref_schemas):
    """Test that cyclic schemas are reported with the detected cycle."""
    schema = write_json("schema.json", ref_schemas["tree_node"])

    result = runner.invoke(app, ["render", str(schema)])

    assert result.exit_code == 2
    assert "Cyclic references detected" in result.stdout

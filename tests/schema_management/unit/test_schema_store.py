"""Schema store tests."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from setter_sync.schema_management.schema_models import SetterUpdate
from setter_sync.schema_management.schema_store import (
    SchemaLoadError,
    SchemaUpdateError,
    load_schema_document,
    parse_setter_definitions,
    update_schema_file,
)

KPTFILE = """\
apiVersion: kpt.dev/v1alpha1
kind: Kptfile
metadata:
  name: app
openAPI:
  definitions:
    io.k8s.cli.setters.image-tag:
      description: image tag
      x-k8s-cli:
        setter:
          name: image-tag
          value: v1
          setBy: alice
    io.k8s.cli.setters.replicas:
      type: integer
      x-k8s-cli:
        setter:
          name: replicas
          value: "3"
    io.k8s.cli.setters.args:
      type: array
      x-k8s-cli:
        setter:
          name: args
          listValues:
          - --verbose
    io.k8s.cli.substitutions.image:
      x-k8s-cli:
        substitution:
          name: image
          pattern: nginx:IMAGE_TAG
"""


def _write_schema(tmp_path: Path, contents: str = KPTFILE) -> Path:
    path = tmp_path / "Kptfile"
    path.write_text(contents, encoding="utf-8")
    return path


def _setter_section(path: Path, name: str) -> dict:
    document = yaml.safe_load(path.read_text(encoding="utf-8"))
    definition = document["openAPI"]["definitions"][f"io.k8s.cli.setters.{name}"]
    return definition["x-k8s-cli"]["setter"]


def test_parse_setter_definitions_reads_scalar_and_list_setters(tmp_path: Path) -> None:
    definitions = parse_setter_definitions(load_schema_document(_write_schema(tmp_path)))

    by_name = {definition.name: definition for definition in definitions}
    assert list(by_name) == ["image-tag", "replicas", "args"]
    assert by_name["image-tag"].value == "v1"
    assert by_name["image-tag"].description == "image tag"
    assert by_name["image-tag"].set_by == "alice"
    assert by_name["replicas"].type == "integer"
    assert by_name["args"].value is None
    assert by_name["args"].list_values == ("--verbose",)
    assert by_name["args"].is_list is True


def test_parse_setter_definitions_stringifies_typed_values(tmp_path: Path) -> None:
    schema_path = _write_schema(
        tmp_path,
        """
openAPI:
  definitions:
    io.k8s.cli.setters.enabled:
      x-k8s-cli:
        setter:
          name: enabled
          value: true
    io.k8s.cli.setters.port:
      x-k8s-cli:
        setter:
          value: 8080
""",
    )

    definitions = parse_setter_definitions(load_schema_document(schema_path))

    assert [(definition.name, definition.value) for definition in definitions] == [
        ("enabled", "true"),
        ("port", "8080"),
    ]


def test_schema_without_openapi_section_has_no_setters(tmp_path: Path) -> None:
    schema_path = _write_schema(tmp_path, "kind: Kptfile\n")

    assert parse_setter_definitions(load_schema_document(schema_path)) == []


def test_load_schema_document_rejects_malformed_yaml(tmp_path: Path) -> None:
    schema_path = _write_schema(tmp_path, "openAPI: [unclosed\n")

    with pytest.raises(SchemaLoadError, match="Failed to parse"):
        load_schema_document(schema_path)


def test_load_schema_document_rejects_missing_file(tmp_path: Path) -> None:
    with pytest.raises(SchemaLoadError, match="not found"):
        load_schema_document(tmp_path / "missing")


def test_update_schema_file_writes_value_and_attribution(tmp_path: Path) -> None:
    schema_path = _write_schema(tmp_path)

    written = update_schema_file(
        schema_path,
        SetterUpdate(name="image-tag", value="v2", description="new tag", set_by="bob"),
    )

    assert written.value == "v2"
    assert _setter_section(schema_path, "image-tag") == {
        "name": "image-tag",
        "value": "v2",
        "setBy": "bob",
        "isSet": True,
    }
    document = yaml.safe_load(schema_path.read_text(encoding="utf-8"))
    definition = document["openAPI"]["definitions"]["io.k8s.cli.setters.image-tag"]
    assert definition["description"] == "new tag"
    assert document["metadata"] == {"name": "app"}


def test_update_schema_file_keeps_description_and_clears_set_by_when_omitted(
    tmp_path: Path,
) -> None:
    schema_path = _write_schema(tmp_path)

    update_schema_file(schema_path, SetterUpdate(name="image-tag", value="v3"))

    definitions = parse_setter_definitions(load_schema_document(schema_path))
    image_tag = next(definition for definition in definitions if definition.name == "image-tag")
    assert image_tag.description == "image tag"
    assert image_tag.set_by == ""


def test_update_schema_file_writes_list_values(tmp_path: Path) -> None:
    schema_path = _write_schema(tmp_path)

    update_schema_file(schema_path, SetterUpdate(name="args", list_values=("--a", "--b")))

    assert _setter_section(schema_path, "args")["listValues"] == ["--a", "--b"]
    assert "value" not in _setter_section(schema_path, "args")


def test_update_schema_file_accepts_valid_integer(tmp_path: Path) -> None:
    schema_path = _write_schema(tmp_path)

    update_schema_file(schema_path, SetterUpdate(name="replicas", value="5"))

    assert _setter_section(schema_path, "replicas")["value"] == "5"


@pytest.mark.parametrize(
    ("update", "message"),
    [
        (SetterUpdate(name="missing", value="x"), "No setter 'missing'"),
        (SetterUpdate(name="image", value="x"), "No setter 'image'"),
        (SetterUpdate(name="image-tag"), "No value provided"),
        (SetterUpdate(name="image-tag", value="x", list_values=("y",)), "not both"),
        (SetterUpdate(name="replicas", list_values=("1", "2")), "cannot take list values"),
        (SetterUpdate(name="args", value="--x"), "requires list values"),
        (SetterUpdate(name="replicas", value="many"), "not a valid integer"),
    ],
)
def test_update_schema_file_rejects_invalid_updates(
    tmp_path: Path, update: SetterUpdate, message: str
) -> None:
    schema_path = _write_schema(tmp_path)

    with pytest.raises(SchemaUpdateError, match=message):
        update_schema_file(schema_path, update)

    assert schema_path.read_text(encoding="utf-8") == KPTFILE


def test_update_schema_file_reports_unparseable_schema(tmp_path: Path) -> None:
    schema_path = _write_schema(tmp_path, "- just\n- a list\n")

    with pytest.raises(SchemaUpdateError, match="must be a mapping"):
        update_schema_file(schema_path, SetterUpdate(name="image-tag", value="v2"))

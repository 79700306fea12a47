"""Tests for the plugin manifest models."""

import pytest
from pydantic import BaseModel, ValidationError

from core.plugins.manifest import (
    CommandOption,
    CommandOutputSpec,
    CommandSpec,
    CompatibilityRange,
    PluginManifest,
    PluginStateSchema,
    normalize_version_range,
    version_satisfies,
)


def noop(args):
    return None


class Payload(BaseModel):
    value: int


class TestVersionRanges:
    """Tests for npm-style range normalization."""

    def test_caret_range(self):
        assert normalize_version_range("^1.2.3") == ">=1.2.3,<2.0.0"
        assert normalize_version_range("^0.2.3") == ">=0.2.3,<0.3.0"

    def test_tilde_range(self):
        assert normalize_version_range("~1.2.3") == ">=1.2.3,<1.3.0"

    def test_wildcard_matches_everything(self):
        assert normalize_version_range("*") == ""
        assert version_satisfies("42.0.0", "*")

    def test_pep440_passthrough(self):
        assert version_satisfies("1.0.0", ">=1.0.0")
        assert not version_satisfies("1.0.0", ">=2.0.0")
        assert version_satisfies("1.4.0", "^1.0.0")
        assert not version_satisfies("2.0.0", "^1.0.0")

    def test_invalid_range_rejected(self):
        with pytest.raises(ValidationError):
            CompatibilityRange(cli="not a range")


class TestCommandOption:
    """Tests for option declarations."""

    def test_dest_is_snake_case(self):
        assert CommandOption(name="max-fee").dest == "max_fee"

    def test_has_default_only_when_declared(self):
        assert not CommandOption(name="limit", type="number").has_default
        assert CommandOption(name="limit", type="number", default=None).has_default
        assert CommandOption(name="limit", type="number", default=10).has_default

    def test_name_must_be_kebab_case(self):
        with pytest.raises(ValidationError):
            CommandOption(name="maxFee")

    def test_short_alias_single_character(self):
        with pytest.raises(ValidationError):
            CommandOption(name="network", short="nw")

    def test_short_alias_h_reserved(self):
        with pytest.raises(ValidationError):
            CommandOption(name="host", short="h")


class TestCommandSpec:
    """Tests for command declarations."""

    def test_duplicate_option_names_rejected(self):
        with pytest.raises(ValidationError, match="Duplicate option"):
            CommandSpec(
                name="send",
                handler=noop,
                options=[CommandOption(name="to"), CommandOption(name="to")],
            )

    def test_duplicate_short_aliases_rejected(self):
        with pytest.raises(ValidationError, match="Duplicate short alias"):
            CommandSpec(
                name="send",
                handler=noop,
                options=[CommandOption(name="to", short="t"), CommandOption(name="token", short="t")],
            )

    def test_output_presence_selects_contract(self):
        legacy = CommandSpec(name="legacy", handler=noop)
        structured = CommandSpec(
            name="structured",
            handler=noop,
            output=CommandOutputSpec(schema=Payload),
        )
        assert not legacy.uses_output_contract
        assert structured.uses_output_contract

    def test_handler_accepts_path_string(self):
        command = CommandSpec(name="list", handler="./commands/list")
        assert command.handler == "./commands/list"


class TestCommandOutputSpec:
    """Tests for declared output schemas."""

    def test_accepts_pydantic_model(self):
        spec = CommandOutputSpec(schema=Payload, humanTemplate="{{ value }}")
        assert spec.output_schema is Payload
        assert spec.human_template == "{{ value }}"

    def test_accepts_json_schema(self):
        schema = {"type": "object", "properties": {"value": {"type": "integer"}}}
        assert CommandOutputSpec(schema=schema).output_schema == schema

    def test_rejects_invalid_json_schema(self):
        with pytest.raises(ValidationError):
            CommandOutputSpec(schema={"type": "no-such-type"})

    def test_rejects_other_values(self):
        with pytest.raises(ValidationError):
            CommandOutputSpec(schema="object")


class TestPluginManifest:
    """Tests for the top-level manifest."""

    def test_defaults(self):
        manifest = PluginManifest(name="demo")
        assert manifest.version == "1.0.0"
        assert manifest.commands == []
        assert manifest.namespaces == []
        assert manifest.is_compatible_with("1.0.0")

    def test_camel_case_aliases(self):
        manifest = PluginManifest.model_validate(
            {
                "name": "demo",
                "displayName": "Demo Plugin",
                "stateSchemas": [{"namespace": "demo-state", "jsonSchema": {"type": "object"}}],
            }
        )
        assert manifest.display_name == "Demo Plugin"
        assert manifest.namespaces == ["demo-state"]

    def test_duplicate_commands_rejected(self):
        with pytest.raises(ValidationError, match="Duplicate command"):
            PluginManifest(
                name="demo",
                commands=[CommandSpec(name="run", handler=noop), CommandSpec(name="run", handler=noop)],
            )

    def test_invalid_state_schema_rejected(self):
        with pytest.raises(ValidationError):
            PluginStateSchema(namespace="demo", json_schema={"type": 5})

    def test_get_command(self):
        run = CommandSpec(name="run", handler=noop)
        manifest = PluginManifest(name="demo", commands=[run])
        assert manifest.get_command("run") is run
        assert manifest.get_command("missing") is None

    def test_compatibility_gate(self):
        manifest = PluginManifest(name="demo", compatibility=CompatibilityRange(cli="^2.0.0"))
        assert not manifest.is_compatible_with("1.0.0")
        assert manifest.is_compatible_with("2.3.0")

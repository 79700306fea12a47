"""Tests for the Core API services."""

import io
import json

import pytest
from pydantic import BaseModel
from rich.console import Console

from core.services.config_service import DEFAULT_NETWORK, ConfigService
from core.services.output_service import OutputRenderError, OutputService, format_key_value
from core.services.state_service import StateService


class Balance(BaseModel):
    account: str
    amount: int


def make_output(format="human"):
    buffer = io.StringIO()
    console = Console(file=buffer, width=200, soft_wrap=True, highlight=False, color_system=None)
    return OutputService(format=format, console=console), buffer


class TestStateService:
    """Tests for namespaced state persistence."""

    def test_set_persists_file_format(self, tmp_path):
        state = StateService(tmp_path)
        state.set("accounts", "alice", {"id": "0.0.1001"})

        content = json.loads((tmp_path / "accounts-storage.json").read_text(encoding="utf-8"))
        assert content == {"data": {"alice": {"id": "0.0.1001"}}}

    def test_existing_namespaces_discovered(self, tmp_path):
        StateService(tmp_path).set("tokens", "usd", 1)

        state = StateService(tmp_path)
        assert "tokens" in state.get_namespaces()
        assert state.get("tokens", "usd") == 1

    def test_register_namespaces_creates_empty_stores(self, tmp_path):
        state = StateService(tmp_path)
        state.register_namespaces(["a", "b"])

        assert state.get_namespaces() == ["a", "b"]
        assert state.list("a") == []
        assert state.get_last_modified("a") is None
        assert state.get_storage_size("a") == 0

    def test_delete_clear_and_keys(self, tmp_path):
        state = StateService(tmp_path)
        state.set("ns", "one", 1)
        state.set("ns", "two", 2)

        state.delete("ns", "one")
        assert state.get_keys("ns") == ["two"]
        assert not state.has("ns", "one")

        state.clear("ns")
        assert state.get_keys("ns") == []
        assert state.get_last_modified("ns") is not None

    def test_malformed_file_starts_empty(self, tmp_path):
        (tmp_path / "bad-storage.json").write_text("{not json", encoding="utf-8")
        state = StateService(tmp_path)
        assert state.get("bad", "anything", "fallback") == "fallback"


class TestConfigService:
    """Tests for config persistence and environment overrides."""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for name in ("LEDGER_CLI_NETWORK", "LEDGER_CLI_FORMAT", "TESTNET_OPERATOR_ID"):
            monkeypatch.delenv(name, raising=False)

    def test_defaults(self, tmp_path):
        config = ConfigService(tmp_path / "config.json")
        assert config.get_current_network() == DEFAULT_NETWORK
        assert config.get_format() == "human"
        assert config.get_plugin_paths() == []
        assert not (tmp_path / "config.json").exists()

    def test_set_network_persists(self, tmp_path):
        config_file = tmp_path / "config.json"
        ConfigService(config_file).set_current_network("mainnet")

        assert ConfigService(config_file).get_current_network() == "mainnet"
        assert json.loads(config_file.read_text(encoding="utf-8"))["network"] == "mainnet"

    def test_unknown_network_rejected(self, tmp_path):
        config = ConfigService(tmp_path / "config.json")
        with pytest.raises(ValueError, match="Unknown network 'moonnet'"):
            config.set_current_network("moonnet")
        with pytest.raises(ValueError):
            config.get_network_config("moonnet")

    def test_environment_overrides(self, tmp_path, monkeypatch):
        config = ConfigService(tmp_path / "config.json")
        monkeypatch.setenv("LEDGER_CLI_NETWORK", "previewnet")
        monkeypatch.setenv("LEDGER_CLI_FORMAT", "json")

        assert config.get_current_network() == "previewnet"
        assert config.get_format() == "json"

    def test_invalid_format_falls_back(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LEDGER_CLI_FORMAT", "yaml")
        assert ConfigService(tmp_path / "config.json").get_format() == "human"

    def test_operator_from_config_and_env(self, tmp_path, monkeypatch):
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"networks": {"testnet": {"operator_id": "0.0.2"}}}), encoding="utf-8")
        config = ConfigService(config_file)

        assert config.get_operator_id("testnet") == "0.0.2"
        assert config.get_network_config("testnet").rpc_url == "https://testnet.hashio.io/api"

        monkeypatch.setenv("TESTNET_OPERATOR_ID", "0.0.7")
        assert config.get_operator_id("testnet") == "0.0.7"

    def test_plugin_paths(self, tmp_path):
        config = ConfigService(tmp_path / "config.json")

        assert config.add_plugin_path("/opt/plugins/extra") is True
        assert config.add_plugin_path("/opt/plugins/extra") is False
        assert config.get_plugin_paths() == ["/opt/plugins/extra"]
        assert config.remove_plugin_path("/opt/plugins/extra") is True
        assert config.remove_plugin_path("/opt/plugins/extra") is False

    def test_saved_file_holds_only_used_settings(self, tmp_path):
        config_file = tmp_path / "config.json"
        ConfigService(config_file).set_current_network("localnet")

        saved = json.loads(config_file.read_text(encoding="utf-8"))
        assert sorted(saved) == ["format", "network", "networks", "plugins"]


class TestFormatKeyValue:
    """Tests for the template-less human rendering."""

    def test_nested_rendering(self):
        data = {"name": "alice", "active": True, "memo": None, "keys": ["k1"], "meta": {"level": 2}}
        assert format_key_value(data) == "\n".join([
            "name: alice",
            "active: true",
            "memo: null",
            "keys:",
            "  [0]",
            "    k1",
            "meta:",
            "  level: 2",
        ])


class TestOutputService:
    """Tests for validation and rendering of command output."""

    def test_json_format(self):
        output, buffer = make_output("json")
        output.handle_command_output('{"account": "0.0.5", "amount": 10}', schema=Balance)
        assert json.loads(buffer.getvalue()) == {"account": "0.0.5", "amount": 10}

    def test_human_template(self):
        output, buffer = make_output()
        output.handle_command_output(
            '{"account": "0.0.5", "amount": 10}',
            schema=Balance,
            template="Account {{ account }} holds {{ amount }}\n",
        )
        assert buffer.getvalue() == "Account 0.0.5 holds 10\n"

    def test_human_without_template(self):
        output, buffer = make_output()
        output.handle_command_output('{"account": "0.0.5"}')
        assert buffer.getvalue() == "account: 0.0.5\n"

    def test_format_argument_overrides_default(self):
        output, buffer = make_output("human")
        output.handle_command_output("[1, 2]", format="json")
        assert json.loads(buffer.getvalue()) == [1, 2]

    def test_pydantic_schema_mismatch(self):
        output, buffer = make_output()
        with pytest.raises(OutputRenderError, match="does not match Balance"):
            output.handle_command_output('{"account": "0.0.5"}', schema=Balance)
        assert buffer.getvalue() == ""

    def test_json_schema_mismatch(self):
        output, _ = make_output()
        schema = {"type": "object", "required": ["count"], "properties": {"count": {"type": "integer"}}}
        with pytest.raises(OutputRenderError, match="does not match schema"):
            output.handle_command_output('{"count": "three"}', schema=schema)

    def test_invalid_json(self):
        output, _ = make_output()
        with pytest.raises(OutputRenderError, match="Failed to parse output JSON"):
            output.handle_command_output("{broken")

    def test_template_error(self):
        output, _ = make_output()
        with pytest.raises(OutputRenderError, match="Failed to render template"):
            output.handle_command_output('{"a": 1}', template="{% for x in %}")

    def test_non_object_template_context(self):
        output, _ = make_output()
        assert output.render_template("{{ data | length }}", [1, 2, 3]) == "3"

    def test_payload_keys_shadowing_render_arguments(self):
        output, buffer = make_output()
        output.handle_command_output('{"self": "0.0.5", "format": "hbar"}', template="{{ self }} in {{ format }}")
        assert buffer.getvalue() == "0.0.5 in hbar\n"

    def test_set_format_rejects_unknown(self):
        output, _ = make_output()
        with pytest.raises(ValueError):
            output.set_format("xml")

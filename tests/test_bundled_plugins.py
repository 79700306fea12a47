"""End-to-end tests of the bundled plugins through the binder and executor."""

import asyncio
import io
import json
import logging

import pytest
from rich.console import Console

from core.constants import DEFAULT_PLUGINS
from core.dependencies import create_core_api, create_plugin_manager
from core.plugins.binder import CommandBinder
from core.plugins.executor import CommandExecutor
from core.services.logger_service import PLUGIN_LOGGER_NAME


class BundledCli:
    """Runs command lines against an initialized manager, capturing stdout."""

    def __init__(self, api, manager, buffer):
        self.api = api
        self.manager = manager
        self.buffer = buffer

    def run(self, *argv):
        binder = CommandBinder()
        self.manager.register_commands(binder)
        invocation = binder.parse(list(argv))
        executor = CommandExecutor(self.api, self.manager.lifecycle)

        self.buffer.seek(0)
        self.buffer.truncate()
        exit_code = asyncio.run(
            executor.execute(invocation.bound.plugin, invocation.bound.command, invocation.args)
        )
        return exit_code, self.buffer.getvalue()

    def run_json(self, *argv):
        exit_code, output = self.run(*argv)
        return exit_code, json.loads(output) if output else None


@pytest.fixture
def cli(tmp_path, monkeypatch):
    for name in ("LEDGER_CLI_NETWORK", "LEDGER_CLI_FORMAT", "MAINNET_OPERATOR_ID", "LEDGER_CLI_PLUGIN_PATHS"):
        monkeypatch.delenv(name, raising=False)

    api = create_core_api(
        state_dir=tmp_path / "state",
        config_file=tmp_path / "config.json",
        output_format="json",
    )
    buffer = io.StringIO()
    api.output.console = Console(file=buffer, width=200, soft_wrap=True, highlight=False, color_system=None)
    manager = create_plugin_manager(api, default_plugins=DEFAULT_PLUGINS)
    asyncio.run(manager.initialize())
    return BundledCli(api, manager, buffer)


class TestNetworkPlugin:
    """Tests for network list/use/get-operator."""

    def test_list(self, cli):
        exit_code, output = cli.run_json("network", "list")

        assert exit_code == 0
        assert output["active_network"] == "testnet"
        assert [network["name"] for network in output["networks"]] == ["localnet", "testnet", "previewnet", "mainnet"]

    def test_use_switches_and_records_state(self, cli):
        exit_code, output = cli.run_json("network", "use", "-N", "mainnet")

        assert exit_code == 0
        assert output == {"active_network": "mainnet", "previous_network": "testnet"}
        assert cli.api.config.get_current_network() == "mainnet"
        assert cli.api.state.get("network-state", "active")["network"] == "mainnet"

    def test_use_unknown_network(self, cli):
        exit_code, output = cli.run("network", "use", "--network", "moonnet")

        assert exit_code == 1
        assert output == ""
        assert cli.api.config.get_current_network() == "testnet"

    def test_use_human_format(self, cli):
        cli.api.output.set_format("human")
        exit_code, output = cli.run("network", "use", "--network", "previewnet")

        assert exit_code == 0
        assert output == "Switched to network: previewnet (was testnet)\n"

    def test_get_operator_exits_with_operator(self, cli, monkeypatch, caplog):
        caplog.set_level(logging.INFO, logger=PLUGIN_LOGGER_NAME)
        monkeypatch.setenv("MAINNET_OPERATOR_ID", "0.0.9")

        with pytest.raises(SystemExit) as exc_info:
            cli.run("network", "get-operator", "--network", "mainnet")

        assert exc_info.value.code == 0
        assert "Account ID: 0.0.9" in caplog.text

    def test_get_operator_without_operator(self, cli, caplog):
        with pytest.raises(SystemExit) as exc_info:
            cli.run("network", "get-operator", "-n", "mainnet")

        assert exc_info.value.code == 0
        assert "No operator configured for network: mainnet" in caplog.text

    def test_get_operator_unknown_network(self, cli):
        with pytest.raises(SystemExit) as exc_info:
            cli.run("network", "get-operator", "--network", "moonnet")
        assert exc_info.value.code == 1


class TestStateManagementPlugin:
    """Tests for the path-string handlers of state-management."""

    def test_clear_requires_confirm(self, cli):
        cli.api.state.set("network-state", "active", {"network": "testnet"})

        exit_code, output = cli.run("state-management", "clear")

        assert exit_code == 1
        assert output == ""
        assert cli.api.state.has("network-state", "active")

    def test_clear_namespace(self, cli):
        cli.api.state.set("network-state", "active", {"network": "testnet"})

        exit_code, output = cli.run_json("state-management", "clear", "-n", "network-state", "--confirm")

        assert exit_code == 0
        assert output["entries_cleared"] == 1
        assert cli.api.state.list("network-state") == []

    def test_list_hides_empty_namespaces(self, cli):
        exit_code, output = cli.run_json("state-management", "list")
        assert exit_code == 0
        assert output["total_namespaces"] == 0

        cli.run("network", "use", "--network", "mainnet")
        _, output = cli.run_json("state-management", "list")
        assert [ns["name"] for ns in output["namespaces"]] == ["network-state"]
        assert output["total_entries"] == 1

    def test_stats(self, cli):
        exit_code, output = cli.run_json("state-management", "stats")

        assert exit_code == 0
        assert "network-state" in [ns["name"] for ns in output["namespaces"]]

    def test_info(self, cli):
        exit_code, output = cli.run_json("state-management", "info")

        assert exit_code == 0
        assert output["is_initialized"] is True
        assert output["storage_directory"] == cli.api.state.get_storage_directory()

    def test_backup_to_file(self, cli, tmp_path):
        cli.api.state.set("network-state", "active", {"network": "testnet"})
        target = tmp_path / "backups" / "state.json"

        exit_code, output = cli.run_json("state-management", "backup", "-o", str(target))

        assert exit_code == 0
        assert output["file_path"] == str(target.resolve())
        backup = json.loads(target.read_text(encoding="utf-8"))
        assert backup["namespaces"]["network-state"] == [{"network": "testnet"}]


class TestPluginManagementPlugin:
    """Tests for plugin-management list/info/add/remove."""

    def test_list(self, cli):
        exit_code, output = cli.run_json("plugin-management", "list")

        assert exit_code == 0
        assert output["count"] == 3
        assert [plugin["name"] for plugin in output["plugins"]] == [
            "plugin-management",
            "state-management",
            "network",
        ]

    def test_info(self, cli):
        exit_code, output = cli.run_json("plugin-management", "info", "--name", "network")

        assert exit_code == 0
        assert output["found"] is True
        assert output["plugin"]["commands"] == ["list", "use", "get-operator"]
        assert output["plugin"]["namespaces"] == ["network-state"]

    def test_info_unknown_plugin(self, cli):
        exit_code, output = cli.run_json("plugin-management", "info", "-n", "ghost")

        assert exit_code == 0
        assert output["found"] is False
        assert "plugin" not in output

    def test_remove(self, cli):
        exit_code, output = cli.run_json("plugin-management", "remove", "--name", "network")

        assert exit_code == 0
        assert output["removed"] is True
        assert cli.manager.get_plugin("network") is None

    def test_remove_unknown(self, cli):
        exit_code, _ = cli.run("plugin-management", "remove", "--name", "ghost")
        assert exit_code == 1

    def test_add_persists_path(self, cli, tmp_path):
        plugin_dir = tmp_path / "extra"
        plugin_dir.mkdir()
        (plugin_dir / "manifest.py").write_text(
            'manifest = {"name": "extra-tools", "stateSchemas": [{"namespace": "extra-tools-state"}]}\n',
            encoding="utf-8",
        )

        exit_code, output = cli.run_json("plugin-management", "add", "--path", str(plugin_dir))

        assert exit_code == 0
        assert output["added"] is True
        assert cli.api.config.get_plugin_paths() == [str(plugin_dir.resolve())]
        assert cli.manager.get_plugin("extra-tools").is_loaded

        _, output = cli.run_json("plugin-management", "add", "--path", str(plugin_dir))
        assert output["added"] is False

    def test_add_then_remove_forgets_persisted_path(self, cli, tmp_path):
        plugin_dir = tmp_path / "extra"
        plugin_dir.mkdir()
        (tmp_path / "elsewhere").mkdir()
        (plugin_dir / "manifest.py").write_text('manifest = {"name": "extra-tools"}\n', encoding="utf-8")
        given = f"{tmp_path}/elsewhere/../extra"

        cli.run("plugin-management", "add", "--path", given)
        assert cli.manager.get_plugin("extra-tools").path == given
        assert cli.api.config.get_plugin_paths() == [str(plugin_dir.resolve())]

        exit_code, output = cli.run_json("plugin-management", "remove", "--name", "extra-tools")

        assert exit_code == 0
        assert output["message"] == "Plugin extra-tools removed successfully"
        assert cli.api.config.get_plugin_paths() == []

    def test_add_missing_path(self, cli, tmp_path):
        exit_code, _ = cli.run("plugin-management", "add", "--path", str(tmp_path / "missing"))

        assert exit_code == 1
        assert cli.api.config.get_plugin_paths() == []

"""Tests for lbl.config — YAML configuration loading."""

import textwrap

import pytest

from lbl.config import ConfigError, LocatorConfig, load_config


class TestLocatorConfigDefaults:
    """LocatorConfig should provide sensible defaults for every field."""

    def test_inventory_defaults(self) -> None:
        cfg = LocatorConfig()
        assert cfg.inventory_path == "k8s.inventory"
        assert cfg.inventory_group == "k8s"

    def test_prefix_default(self) -> None:
        assert LocatorConfig().ip_prefix == "7"

    def test_strategy_default(self) -> None:
        assert LocatorConfig().interface_strategy == "route"

    def test_probe_defaults(self) -> None:
        cfg = LocatorConfig()
        assert cfg.ansible_binary == "ansible"
        assert cfg.probe_count == 1
        assert cfg.command_timeout is None

    def test_color_default(self) -> None:
        assert LocatorConfig().color is True


class TestLoadConfigExplicitPath:
    """load_config(path=...) with an explicit file path."""

    def test_full_config(self, tmp_path: pytest.TempPathFactory) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text(
            textwrap.dedent("""\
                inventory_path: /tmp/lbl.inventory
                inventory_group: nodes
                ip_prefix: "10.20"
                interface_strategy: address
                ansible_binary: /opt/ansible/bin/ansible
                probe_count: 3
                command_timeout: 15
                color: false
            """),
            encoding="utf-8",
        )

        cfg = load_config(cfg_file)

        assert cfg.inventory_path == "/tmp/lbl.inventory"
        assert cfg.inventory_group == "nodes"
        assert cfg.ip_prefix == "10.20"
        assert cfg.interface_strategy == "address"
        assert cfg.ansible_binary == "/opt/ansible/bin/ansible"
        assert cfg.probe_count == 3
        assert cfg.command_timeout == 15
        assert cfg.color is False

    def test_partial_config_uses_defaults(
        self, tmp_path: pytest.TempPathFactory
    ) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text("probe_count: 2\n", encoding="utf-8")

        cfg = load_config(cfg_file)

        assert cfg.probe_count == 2
        assert cfg.inventory_path == "k8s.inventory"
        assert cfg.ip_prefix == "7"

    def test_numeric_prefix_becomes_string(
        self, tmp_path: pytest.TempPathFactory
    ) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text("ip_prefix: 7\n", encoding="utf-8")

        cfg = load_config(cfg_file)

        assert cfg.ip_prefix == "7"

    def test_empty_file_returns_defaults(
        self, tmp_path: pytest.TempPathFactory
    ) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text("", encoding="utf-8")

        assert load_config(cfg_file) == LocatorConfig()

    def test_unknown_keys_are_ignored(
        self, tmp_path: pytest.TempPathFactory, caplog: pytest.LogCaptureFixture
    ) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text(
            textwrap.dedent("""\
                probe_count: 2
                some_future_key: true
            """),
            encoding="utf-8",
        )

        cfg = load_config(cfg_file)

        assert cfg.probe_count == 2
        assert "some_future_key" in caplog.text

    def test_accepts_string_path(self, tmp_path: pytest.TempPathFactory) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text("inventory_group: lb\n", encoding="utf-8")

        assert load_config(str(cfg_file)).inventory_group == "lb"


class TestLoadConfigMissingFile:
    """Behavior when the config file doesn't exist."""

    def test_explicit_path_not_found_raises(
        self, tmp_path: pytest.TempPathFactory
    ) -> None:
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_config(tmp_path / "nonexistent.yaml")

    def test_no_default_file_returns_defaults(
        self, tmp_path: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        import lbl.config as config_mod

        monkeypatch.setattr(
            config_mod, "DEFAULT_CONFIG_PATH", tmp_path / "nope" / "config.yaml"
        )

        assert load_config() == LocatorConfig()


class TestLoadConfigInvalid:
    """load_config should raise ConfigError on malformed input."""

    def test_invalid_yaml_raises_config_error(
        self, tmp_path: pytest.TempPathFactory
    ) -> None:
        cfg_file = tmp_path / "bad.yaml"
        cfg_file.write_text(":\n  - :\n    bad: [", encoding="utf-8")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(cfg_file)

    def test_non_mapping_top_level_raises(
        self, tmp_path: pytest.TempPathFactory
    ) -> None:
        cfg_file = tmp_path / "list.yaml"
        cfg_file.write_text("- one\n- two\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="Expected a YAML mapping"):
            load_config(cfg_file)

    def test_unknown_strategy_raises(self, tmp_path: pytest.TempPathFactory) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text("interface_strategy: lldp\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="Unknown interface_strategy 'lldp'"):
            load_config(cfg_file)


class TestLoadConfigValueTypes:
    """Values of the wrong type are rejected instead of reaching callers."""

    @pytest.mark.parametrize(
        "line",
        [
            'command_timeout: "30"',
            "command_timeout: 0",
            "command_timeout: true",
            'color: "no"',
            "color: 1",
            "probe_count: 0",
            'probe_count: "3"',
            "probe_count: 2.5",
            "probe_count: true",
            "inventory_path: 42",
            'inventory_group: ""',
            "ansible_binary: [ansible]",
        ],
    )
    def test_bad_value_raises(
        self, tmp_path: pytest.TempPathFactory, line: str
    ) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text(line + "\n", encoding="utf-8")

        key = line.split(":")[0]
        with pytest.raises(ConfigError, match=f"Bad value for {key}"):
            load_config(cfg_file)

    def test_integer_timeout_becomes_float(
        self, tmp_path: pytest.TempPathFactory
    ) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text("command_timeout: 30\n", encoding="utf-8")

        timeout = load_config(cfg_file).command_timeout

        assert timeout == 30.0
        assert isinstance(timeout, float)

    def test_null_timeout_allowed(self, tmp_path: pytest.TempPathFactory) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text("command_timeout: null\n", encoding="utf-8")

        assert load_config(cfg_file).command_timeout is None


class TestLoadConfigIpPrefix:
    """ip_prefix is limited to address characters."""

    @pytest.mark.parametrize("prefix", ['"10.7"', '"fd00:7"', "7"])
    def test_accepted(self, tmp_path: pytest.TempPathFactory, prefix: str) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text(f"ip_prefix: {prefix}\n", encoding="utf-8")

        assert load_config(cfg_file).ip_prefix == prefix.strip('"')

    @pytest.mark.parametrize(
        "prefix", ['"7/ {system(\\"id\\")} /"', "\"7'\"", '"7.*"', "10.20", '""']
    )
    def test_rejected(self, tmp_path: pytest.TempPathFactory, prefix: str) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text(f"ip_prefix: {prefix}\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="Bad value for ip_prefix"):
            load_config(cfg_file)

"""Tests for the configuration system."""

from __future__ import annotations

import textwrap
from typing import TYPE_CHECKING

import pytest

from tapyrus_script.config.settings import (
    MAX_OP_RETURN_RELAY,
    AppConfig,
    LogLevel,
    Network,
    PolicyConfig,
    ScriptConfig,
    _load_yaml,
)
from tapyrus_script.script.standard import Capability

if TYPE_CHECKING:
    from pathlib import Path

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


class TestDefaults:
    """Verify all default values are correct."""

    def test_policy_defaults(self) -> None:
        cfg = PolicyConfig()
        assert cfg.accept_datacarrier is True
        assert cfg.max_datacarrier_bytes == MAX_OP_RETURN_RELAY == 83

    def test_script_defaults(self) -> None:
        cfg = ScriptConfig()
        assert cfg.enable_witness is False
        assert cfg.capabilities() == Capability.NONE

    def test_app_config_defaults(self) -> None:
        cfg = AppConfig()
        assert cfg.debug is False
        assert cfg.log_level == LogLevel.WARNING
        assert cfg.network == Network.MAINNET
        assert cfg.testnet is False
        assert cfg.config_path == ""
        assert isinstance(cfg.policy, PolicyConfig)
        assert isinstance(cfg.script, ScriptConfig)


class TestValidation:
    def test_negative_datacarrier_bytes(self) -> None:
        with pytest.raises(Exception):  # noqa: B017
            PolicyConfig(max_datacarrier_bytes=-1)

    def test_invalid_network(self) -> None:
        with pytest.raises(Exception):  # noqa: B017
            AppConfig(network="regtest")  # type: ignore[arg-type]

    def test_witness_capability(self) -> None:
        assert ScriptConfig(enable_witness=True).capabilities() == Capability.WITNESS


# ---------------------------------------------------------------------------
# Environment variable override
# ---------------------------------------------------------------------------


class TestEnvOverride:
    """Verify environment variables override defaults."""

    def test_top_level_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TAPYRUS_DEBUG", "true")
        monkeypatch.setenv("TAPYRUS_NETWORK", "testnet")
        cfg = AppConfig()
        assert cfg.debug is True
        assert cfg.testnet is True

    def test_nested_env_via_delimiter(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TAPYRUS_POLICY__MAX_DATACARRIER_BYTES", "40")
        monkeypatch.setenv("TAPYRUS_POLICY__ACCEPT_DATACARRIER", "false")
        cfg = AppConfig()
        assert cfg.policy.max_datacarrier_bytes == 40
        assert cfg.policy.accept_datacarrier is False

    def test_script_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TAPYRUS_SCRIPT__ENABLE_WITNESS", "1")
        assert ScriptConfig().capabilities() == Capability.WITNESS


# ---------------------------------------------------------------------------
# YAML loading
# ---------------------------------------------------------------------------


class TestYAML:
    """YAML config file loading."""

    def test_load_yaml_nonexistent(self, tmp_path: Path) -> None:
        assert _load_yaml(tmp_path / "nonexistent.yaml") == {}

    def test_load_yaml_empty_file(self, tmp_path: Path) -> None:
        f = tmp_path / "empty.yaml"
        f.write_text("")
        assert _load_yaml(f) == {}

    def test_load_yaml_non_dict(self, tmp_path: Path) -> None:
        f = tmp_path / "list.yaml"
        f.write_text("- item1\n- item2\n")
        assert _load_yaml(f) == {}

    def test_from_yaml(self, tmp_path: Path) -> None:
        f = tmp_path / "app.yaml"
        f.write_text(
            textwrap.dedent("""\
                debug: true
                network: testnet
                policy:
                  max_datacarrier_bytes: 223
                script:
                  enable_witness: true
            """)
        )
        cfg = AppConfig.from_yaml(f)
        assert cfg.debug is True
        assert cfg.network == Network.TESTNET
        assert cfg.policy.max_datacarrier_bytes == 223
        assert cfg.script.capabilities() == Capability.WITNESS

    def test_env_overrides_yaml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        f = tmp_path / "app.yaml"
        f.write_text("network: testnet\n")
        monkeypatch.setenv("TAPYRUS_NETWORK", "mainnet")
        cfg = AppConfig.from_yaml(f)
        assert cfg.network == Network.MAINNET

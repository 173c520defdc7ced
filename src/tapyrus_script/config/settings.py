"""Settings loaded from environment variables and config files.

Configuration is loaded from (highest priority first):
1. Environment variables (prefix: ``TAPYRUS_``, nested via ``__``)
2. YAML config file (``--config path`` or ``TAPYRUS_CONFIG_PATH`` env var)
3. Defaults defined here

Classification itself takes no configuration. These values are read by
the relay policy and the command-line tool and handed down explicitly.
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Any, Self

import yaml
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tapyrus_script.script.standard import Capability

# Largest standard null-data output script: OP_RETURN + push opcodes + 80 bytes.
MAX_OP_RETURN_RELAY = 83

DEFAULT_ACCEPT_DATACARRIER = True

# ---------------------------------------------------------------------------
# Enums for validated choices
# ---------------------------------------------------------------------------


class Network(enum.StrEnum):
    """Address network."""

    MAINNET = "mainnet"
    TESTNET = "testnet"


class LogLevel(enum.StrEnum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


# ---------------------------------------------------------------------------
# Sub-config models
# ---------------------------------------------------------------------------


class PolicyConfig(BaseSettings):
    """Relay policy for data-carrier outputs."""

    model_config = SettingsConfigDict(
        env_prefix="TAPYRUS_POLICY__",
        case_sensitive=False,
    )

    accept_datacarrier: bool = Field(
        default=DEFAULT_ACCEPT_DATACARRIER,
        description="Relay and mine null-data outputs",
    )
    max_datacarrier_bytes: int = Field(
        default=MAX_OP_RETURN_RELAY,
        ge=0,
        description="Largest null-data output script accepted, in bytes",
    )


class ScriptConfig(BaseSettings):
    """Optional script capabilities."""

    model_config = SettingsConfigDict(
        env_prefix="TAPYRUS_SCRIPT__",
        case_sensitive=False,
    )

    enable_witness: bool = False

    def capabilities(self) -> Capability:
        """The capability flags implied by these settings."""
        caps = Capability.NONE
        if self.enable_witness:
            caps |= Capability.WITNESS
        return caps


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------


def _load_yaml(path: str | Path) -> dict[str, Any]:
    """Load a YAML configuration file and return its contents as a dict.

    Returns an empty dict if the file doesn't exist or is empty.
    """
    p = Path(path)
    if not p.exists():
        return {}
    text = p.read_text(encoding="utf-8")
    data = yaml.safe_load(text)
    return data if isinstance(data, dict) else {}


class AppConfig(BaseSettings):
    """Top-level configuration.

    Loads settings from environment variables (``TAPYRUS_`` prefix),
    an optional YAML file, and built-in defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="TAPYRUS_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    debug: bool = False
    log_level: LogLevel = LogLevel.WARNING
    network: Network = Network.MAINNET
    config_path: str = ""

    policy: PolicyConfig = Field(default_factory=PolicyConfig)
    script: ScriptConfig = Field(default_factory=ScriptConfig)

    @model_validator(mode="before")
    @classmethod
    def _merge_yaml(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Merge YAML config file contents under the env var overrides."""
        config_path = values.get("config_path", "")
        if not config_path:
            return values
        yaml_data = _load_yaml(config_path)
        # YAML values serve as defaults; env vars (already in *values*) win.
        for key, val in yaml_data.items():
            if key not in values or values[key] is None:
                values[key] = val
            elif isinstance(val, dict) and isinstance(values.get(key), dict):
                values[key] = {**val, **values[key]}
        return values

    @classmethod
    def from_yaml(cls, path: str | Path) -> Self:
        """Construct ``AppConfig`` loading defaults from a YAML file.

        Environment variables still override YAML values.
        """
        return cls(config_path=str(path))

    @property
    def testnet(self) -> bool:
        return self.network == Network.TESTNET

"""Tests for relay standardness — script/policy.py."""

from __future__ import annotations

import pytest

from tapyrus_script.config.settings import PolicyConfig
from tapyrus_script.script.destination import get_script_for_multisig
from tapyrus_script.script.policy import is_standard
from tapyrus_script.script.script import push_data
from tapyrus_script.script.standard import TxOutType

_P2PKH = b"\x76\xa9\x14" + b"\x00" * 20 + b"\x88\xac"


def _keys(n: int) -> list[bytes]:
    return [b"\x02" + bytes([i + 1]) * 32 for i in range(n)]


class TestIsStandard:
    def test_pubkeyhash(self, policy_config: PolicyConfig) -> None:
        assert is_standard(_P2PKH, policy_config) == (True, TxOutType.PUBKEYHASH)

    def test_custom_is_standard(self, policy_config: PolicyConfig) -> None:
        assert is_standard(b"\x52\x53\x93", policy_config) == (True, TxOutType.CUSTOM)

    def test_malformed(self, policy_config: PolicyConfig) -> None:
        assert is_standard(b"\x7e", policy_config) == (False, TxOutType.NONSTANDARD)

    def test_witness_program(self, policy_config: PolicyConfig) -> None:
        assert is_standard(b"\x00\x14" + b"\x00" * 20, policy_config) == (
            False,
            TxOutType.NONSTANDARD,
        )

    @pytest.mark.parametrize(("m", "n"), [(1, 1), (1, 3), (2, 3), (3, 3)])
    def test_multisig_within_limit(self, policy_config: PolicyConfig, m: int, n: int) -> None:
        script = get_script_for_multisig(m, _keys(n))
        assert is_standard(script, policy_config) == (True, TxOutType.MULTISIG)

    def test_multisig_too_many_keys(self, policy_config: PolicyConfig) -> None:
        script = get_script_for_multisig(2, _keys(4))
        assert is_standard(script, policy_config) == (False, TxOutType.MULTISIG)


class TestDataCarrier:
    def test_within_limit(self, policy_config: PolicyConfig) -> None:
        script = b"\x6a" + push_data(b"\x00" * 80)
        assert len(script) == 83
        assert is_standard(script, policy_config) == (True, TxOutType.NULL_DATA)

    def test_over_limit(self, policy_config: PolicyConfig) -> None:
        script = b"\x6a" + push_data(b"\x00" * 81)
        assert is_standard(script, policy_config) == (False, TxOutType.NULL_DATA)

    def test_custom_limit(self) -> None:
        policy = PolicyConfig(max_datacarrier_bytes=10)
        assert not is_standard(b"\x6a" + push_data(b"\x00" * 9), policy)[0]
        assert is_standard(b"\x6a" + push_data(b"\x00" * 8), policy)[0]

    def test_datacarrier_disabled(self) -> None:
        policy = PolicyConfig(accept_datacarrier=False)
        assert is_standard(b"\x6a", policy) == (False, TxOutType.NULL_DATA)

    def test_classification_ignores_policy(self) -> None:
        from tapyrus_script.script.standard import solver

        script = b"\x6a" + push_data(b"\x00" * 200)
        assert solver(script).type == TxOutType.NULL_DATA
        assert solver(script).success

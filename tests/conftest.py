"""Shared test fixtures for the tapyrus-script test suite."""

from __future__ import annotations

import pytest

from tapyrus_script.script.keys import private_key_to_public_key


def _privkey(n: int) -> bytes:
    return n.to_bytes(32, "big")


@pytest.fixture
def compressed_keys() -> list[bytes]:
    """Three distinct 33-byte compressed public keys (private keys 1, 2, 3)."""
    return [private_key_to_public_key(_privkey(n)) for n in (1, 2, 3)]


@pytest.fixture
def uncompressed_key() -> bytes:
    """65-byte uncompressed public key for private key 1."""
    return private_key_to_public_key(_privkey(1), compressed=False)


@pytest.fixture
def color_id() -> bytes:
    """33-byte color identifier: token type 0x01 + 32-byte payload."""
    return b"\x01" + bytes(range(32))


@pytest.fixture
def policy_config():
    """Policy settings with the built-in defaults."""
    from tapyrus_script.config.settings import PolicyConfig

    return PolicyConfig(accept_datacarrier=True, max_datacarrier_bytes=83)

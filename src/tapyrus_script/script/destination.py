"""Destinations — what an output script pays to, and back again.

Provides the mapping between classified scripts and destination values:
- Destination variants (key hash, script hash, witness programs, none)
- Destination extraction from single-key and multisig scripts
- Canonical script construction from destinations, keys and redeem scripts
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from tapyrus_script.errors.definitions import (
    ErrInvalidHashLength,
    ErrInvalidWitnessHashLength,
    ErrInvalidWitnessProgram,
)
from tapyrus_script.script.keys import PubKey
from tapyrus_script.script.opcodes import OpCode, encode_op_n
from tapyrus_script.script.script import push_data
from tapyrus_script.script.standard import Capability, TxOutType, solver
from tapyrus_script.utils.crypto import hash160, sha256

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Destination variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NoDestination:
    """Placeholder for "no valid destination"."""


@dataclass(frozen=True)
class KeyID:
    """Pay to the Hash160 of a public key."""

    hash: bytes

    def __post_init__(self) -> None:
        if len(self.hash) != 20:
            raise ErrInvalidHashLength


@dataclass(frozen=True)
class ScriptID:
    """Pay to the Hash160 of a redeem script."""

    hash: bytes

    def __post_init__(self) -> None:
        if len(self.hash) != 20:
            raise ErrInvalidHashLength

    @classmethod
    def from_script(cls, redeem_script: bytes) -> ScriptID:
        return cls(hash160(redeem_script))


@dataclass(frozen=True)
class WitnessV0KeyHash:
    hash: bytes

    def __post_init__(self) -> None:
        if len(self.hash) != 20:
            raise ErrInvalidHashLength


@dataclass(frozen=True)
class WitnessV0ScriptHash:
    hash: bytes

    def __post_init__(self) -> None:
        if len(self.hash) != 32:
            raise ErrInvalidWitnessHashLength

    @classmethod
    def from_script(cls, redeem_script: bytes) -> WitnessV0ScriptHash:
        """SHA-256 of the whole redeem script."""
        return cls(sha256(redeem_script))


@dataclass(frozen=True)
class WitnessUnknown:
    """A witness program with a version this code does not interpret."""

    version: int
    program: bytes

    def __post_init__(self) -> None:
        if not 0 <= self.version <= 16 or not 2 <= len(self.program) <= 40:
            raise ErrInvalidWitnessProgram


Destination = (
    NoDestination | KeyID | ScriptID | WitnessV0KeyHash | WitnessV0ScriptHash | WitnessUnknown
)

_WITNESS_DESTINATIONS = (WitnessV0KeyHash, WitnessV0ScriptHash, WitnessUnknown)


def is_valid_destination(dest: Destination) -> bool:
    """Any variant other than NoDestination is a valid destination."""
    return not isinstance(dest, NoDestination)


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


def extract_destination(script: bytes) -> Destination | None:
    """Return the single destination *script* pays to, or None.

    Bare multisig scripts have no single destination and yield None, as do
    null-data, custom and non-standard scripts. The color id of colored
    templates is dropped.
    """
    result = solver(script)
    if not result.success:
        return None
    solutions = result.solutions

    match result.type:
        case TxOutType.PUBKEY:
            pubkey = PubKey(solutions[0])
            if not pubkey.is_valid():
                return None
            return KeyID(pubkey.get_id())
        case TxOutType.PUBKEYHASH | TxOutType.COLOR_PUBKEYHASH:
            return KeyID(solutions[0])
        case TxOutType.SCRIPTHASH | TxOutType.COLOR_SCRIPTHASH:
            return ScriptID(solutions[0])
        case TxOutType.WITNESS_V0_KEYHASH:
            return WitnessV0KeyHash(solutions[0])
        case TxOutType.WITNESS_V0_SCRIPTHASH:
            return WitnessV0ScriptHash(solutions[0])
        case TxOutType.WITNESS_UNKNOWN:
            return WitnessUnknown(solutions[0][0], solutions[1])
        case _:
            return None


@dataclass(frozen=True)
class ExtractedDestinations:
    """Outcome of :func:`extract_destinations`.

    Attributes:
        success: True if at least one destination was found.
        type: The solver's classification of the script.
        destinations: Destinations in script order.
        required: Signatures required to spend (``m`` for multisig, else 1).
    """

    success: bool
    type: TxOutType
    destinations: list[Destination] = field(default_factory=list)
    required: int = 0


def extract_destinations(script: bytes) -> ExtractedDestinations:
    """Return every destination *script* pays to.

    Multisig keys that fail the encoding check are skipped; the call only
    fails if none are left. Null-data outputs carry data, not addresses, and
    always fail.
    """
    result = solver(script)
    if not result.success:
        return ExtractedDestinations(False, result.type)
    if result.type == TxOutType.NULL_DATA:
        return ExtractedDestinations(False, result.type)

    if result.type == TxOutType.MULTISIG:
        required = result.solutions[0][0]
        destinations: list[Destination] = []
        for key in result.solutions[1:-1]:
            pubkey = PubKey(key)
            if not pubkey.is_valid():
                logger.debug("Skipping invalid multisig key %s", key.hex())
                continue
            destinations.append(KeyID(pubkey.get_id()))
        if not destinations:
            return ExtractedDestinations(False, result.type, [], required)
        return ExtractedDestinations(True, result.type, destinations, required)

    dest = extract_destination(script)
    if dest is None:
        return ExtractedDestinations(False, result.type, [], 1)
    return ExtractedDestinations(True, result.type, [dest], 1)


# ---------------------------------------------------------------------------
# Script construction
# ---------------------------------------------------------------------------


def get_script_for_destination(
    dest: Destination, capabilities: Capability = Capability.NONE
) -> bytes:
    """Build the canonical locking script for *dest*.

    Returns an empty script for NoDestination, and for witness destinations
    unless ``Capability.WITNESS`` is enabled.
    """
    if isinstance(dest, _WITNESS_DESTINATIONS) and Capability.WITNESS not in capabilities:
        return b""

    match dest:
        case NoDestination():
            return b""
        case KeyID(hash=h):
            return (
                bytes([OpCode.OP_DUP, OpCode.OP_HASH160])
                + push_data(h)
                + bytes([OpCode.OP_EQUALVERIFY, OpCode.OP_CHECKSIG])
            )
        case ScriptID(hash=h):
            return bytes([OpCode.OP_HASH160]) + push_data(h) + bytes([OpCode.OP_EQUAL])
        case WitnessV0KeyHash(hash=h) | WitnessV0ScriptHash(hash=h):
            return bytes([OpCode.OP_0]) + push_data(h)
        case WitnessUnknown(version=version, program=program):
            return bytes([encode_op_n(version)]) + push_data(program)
    msg = f"unsupported destination: {dest!r}"
    raise TypeError(msg)


def get_script_for_raw_pubkey(pubkey: bytes | PubKey) -> bytes:
    """``<pubkey> OP_CHECKSIG``."""
    return push_data(bytes(pubkey)) + bytes([OpCode.OP_CHECKSIG])


def get_script_for_multisig(required: int, keys: list[bytes] | list[PubKey]) -> bytes:
    """``<m> <pubkey>... <n> OP_CHECKMULTISIG`` with keys in the given order.

    No policy limit on the number of keys is applied here; both counts must
    still fit a small-integer opcode.

    Raises:
        ScriptError: If *required* or ``len(keys)`` is outside 0..16.
    """
    script = bytes([encode_op_n(required)])
    for key in keys:
        script += push_data(bytes(key))
    return script + bytes([encode_op_n(len(keys)), OpCode.OP_CHECKMULTISIG])


def get_script_for_witness(
    redeem_script: bytes, capabilities: Capability = Capability.NONE
) -> bytes:
    """Wrap *redeem_script* in a version 0 witness program.

    Single-key scripts (pay-to-pubkey and pay-to-pubkey-hash) become a
    witness key hash; anything else becomes a witness script hash of the
    full redeem script. Returns an empty script without
    ``Capability.WITNESS``.
    """
    if Capability.WITNESS not in capabilities:
        return b""
    result = solver(redeem_script)
    if result.success:
        if result.type == TxOutType.PUBKEY:
            return get_script_for_destination(
                WitnessV0KeyHash(hash160(result.solutions[0])), capabilities
            )
        if result.type == TxOutType.PUBKEYHASH:
            return get_script_for_destination(
                WitnessV0KeyHash(result.solutions[0]), capabilities
            )
    return get_script_for_destination(
        WitnessV0ScriptHash.from_script(redeem_script), capabilities
    )

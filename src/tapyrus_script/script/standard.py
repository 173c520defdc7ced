"""Standard output script templates — matching, syntax checking, solving.

The solver classifies a locking script into one of a closed set of
templates and extracts the template's variable fields. Classification is
pure: the same script always yields the same result, and malformed input
is reported through ``SolverResult.success`` rather than an exception.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from tapyrus_script.script.keys import COMPRESSED_PUBLIC_KEY_SIZE, PUBLIC_KEY_SIZE, PubKey
from tapyrus_script.script.opcodes import (
    DISABLED_OPCODES,
    MAX_OPS_PER_SCRIPT,
    MAX_SCRIPT_ELEMENT_SIZE,
    OpCode,
    decode_op_n,
    is_small_integer,
)
from tapyrus_script.script.script import (
    get_op,
    is_colored_pay_to_script_hash,
    is_pay_to_script_hash,
    is_push_only,
    witness_program,
)

logger = logging.getLogger(__name__)

# Push opcode for a 33-byte color identifier.
COLOR_ID_PUSH = 0x21
COLOR_ID_SIZE = 33
COLOR_TYPES = (0x01, 0x02, 0x03)

# ---------------------------------------------------------------------------
# Output types
# ---------------------------------------------------------------------------


class TxOutType(enum.IntEnum):
    """Template classification of an output script."""

    NONSTANDARD = 0
    PUBKEY = 1
    PUBKEYHASH = 2
    SCRIPTHASH = 3
    MULTISIG = 4
    NULL_DATA = 5
    CUSTOM = 6
    COLOR_PUBKEYHASH = 7
    COLOR_SCRIPTHASH = 8
    WITNESS_V0_KEYHASH = 9
    WITNESS_V0_SCRIPTHASH = 10
    WITNESS_UNKNOWN = 11


class Capability(enum.Flag):
    """Optional feature sets. Witness support is off unless requested."""

    NONE = 0
    WITNESS = enum.auto()


WITNESS_TYPES = frozenset(
    {TxOutType.WITNESS_V0_KEYHASH, TxOutType.WITNESS_V0_SCRIPTHASH, TxOutType.WITNESS_UNKNOWN}
)

_TYPE_NAMES = {
    TxOutType.NONSTANDARD: "nonstandard",
    TxOutType.PUBKEY: "pubkey",
    TxOutType.PUBKEYHASH: "pubkeyhash",
    TxOutType.SCRIPTHASH: "scripthash",
    TxOutType.MULTISIG: "multisig",
    TxOutType.NULL_DATA: "nulldata",
    TxOutType.CUSTOM: "custom",
    TxOutType.COLOR_PUBKEYHASH: "coloredpubkeyhash",
    TxOutType.COLOR_SCRIPTHASH: "coloredscripthash",
    TxOutType.WITNESS_V0_KEYHASH: "witness_v0_keyhash",
    TxOutType.WITNESS_V0_SCRIPTHASH: "witness_v0_scripthash",
    TxOutType.WITNESS_UNKNOWN: "witness_unknown",
}


def get_txn_output_type(
    t: TxOutType | int, capabilities: Capability = Capability.NONE
) -> str | None:
    """Stable display name of an output type, for logs and RPC output.

    Returns None for values outside the recognised set, which includes the
    witness types unless ``Capability.WITNESS`` is enabled.
    """
    try:
        t = TxOutType(t)
    except ValueError:
        return None
    if t in WITNESS_TYPES and Capability.WITNESS not in capabilities:
        return None
    return _TYPE_NAMES[t]


@dataclass(frozen=True)
class SolverResult:
    """Outcome of :func:`solver`.

    Attributes:
        type: Template tag. Always set, even when ``success`` is False.
        solutions: Extracted fields; their meaning depends on ``type``.
        success: False only for scripts that fail the syntax check.
    """

    type: TxOutType
    solutions: tuple[bytes, ...] = ()
    success: bool = True


# ---------------------------------------------------------------------------
# Template matchers
# ---------------------------------------------------------------------------


def match_pay_to_pubkey(script: bytes) -> bytes | None:
    """``<33|65-byte pubkey> OP_CHECKSIG`` → the public key."""
    for size in (PUBLIC_KEY_SIZE, COMPRESSED_PUBLIC_KEY_SIZE):
        if len(script) == size + 2 and script[0] == size and script[-1] == OpCode.OP_CHECKSIG:
            pubkey = script[1 : size + 1]
            return pubkey if PubKey.valid_size(pubkey) else None
    return None


def match_pay_to_pubkey_hash(script: bytes) -> bytes | None:
    """``OP_DUP OP_HASH160 <20 bytes> OP_EQUALVERIFY OP_CHECKSIG`` → the hash."""
    if (
        len(script) == 25
        and script[0] == OpCode.OP_DUP
        and script[1] == OpCode.OP_HASH160
        and script[2] == 20
        and script[23] == OpCode.OP_EQUALVERIFY
        and script[24] == OpCode.OP_CHECKSIG
    ):
        return script[3:23]
    return None


def match_colored_pay_to_pubkey_hash(script: bytes) -> tuple[bytes, bytes] | None:
    """``<color id> OP_COLOR OP_DUP OP_HASH160 <20 bytes> OP_EQUALVERIFY OP_CHECKSIG``.

    Returns:
        ``(pubkey_hash, color_id)`` or None.
    """
    if (
        len(script) == 60
        and script[0] == COLOR_ID_PUSH
        and script[1] in COLOR_TYPES
        and script[34] == OpCode.OP_COLOR
        and script[35] == OpCode.OP_DUP
        and script[36] == OpCode.OP_HASH160
        and script[37] == 20
        and script[58] == OpCode.OP_EQUALVERIFY
        and script[59] == OpCode.OP_CHECKSIG
    ):
        return script[38:58], script[1:34]
    return None


def match_custom_colored_script(script: bytes) -> bytes | None:
    """Locate a ``0x21 <33 bytes> OP_COLOR`` color id anywhere in *script*.

    The first literal 0x21 byte is taken as the color id push even when it
    is really part of some other push's payload, so this can report a color
    id for scripts that do not contain one. The OP_COLOR search walks the
    ops properly and gives up on a truncated push. An OP_COLOR that is the
    last op of the script is not accepted.
    """
    color_push = script.find(COLOR_ID_PUSH)

    pc = 0
    color_pos = -1
    while pc < len(script):
        ok, opcode, _, next_pc = get_op(script, pc)
        if not ok:
            return None
        if opcode == OpCode.OP_COLOR:
            if next_pc == len(script):
                return None
            color_pos = pc
            break
        pc = next_pc

    if color_pos < 0 or color_push < 0:
        return None
    if color_pos - color_push != COLOR_ID_SIZE + 1:
        return None
    return script[color_push + 1 : color_pos]


def match_multisig(script: bytes) -> tuple[int, list[bytes]] | None:
    """``<m> <pubkey>... <n> OP_CHECKMULTISIG`` → ``(m, pubkeys)``.

    Both counts must be OP_1..OP_16, the number of keys must equal ``n``,
    ``m`` may not exceed ``n`` and nothing may follow OP_CHECKMULTISIG.
    """
    if len(script) < 1 or script[-1] != OpCode.OP_CHECKMULTISIG:
        return None

    ok, opcode, _, pc = get_op(script, 0)
    if not ok or not is_small_integer(opcode):
        return None
    required = decode_op_n(opcode)

    pubkeys: list[bytes] = []
    while True:
        ok, opcode, data, pc = get_op(script, pc)
        if not ok or not PubKey.valid_size(data):
            break
        pubkeys.append(data)

    if not is_small_integer(opcode):
        return None
    keys = decode_op_n(opcode)
    if len(pubkeys) != keys or keys < required:
        return None
    if pc + 1 != len(script):
        return None
    return required, pubkeys


# ---------------------------------------------------------------------------
# Syntax validation
# ---------------------------------------------------------------------------


def check_script_syntax(script: bytes) -> bool:
    """Apply the interpreter's static rejection rules without executing.

    Fails on a truncated push, an element larger than
    ``MAX_SCRIPT_ELEMENT_SIZE``, more than ``MAX_OPS_PER_SCRIPT`` non-push
    operations, or any disabled opcode.
    """
    op_count = 0
    pc = 0
    while pc < len(script):
        ok, opcode, data, next_pc = get_op(script, pc)
        if not ok:
            logger.debug("Script syntax: truncated push at offset %d", pc)
            return False
        if len(data) > MAX_SCRIPT_ELEMENT_SIZE:
            logger.debug("Script syntax: %d-byte element at offset %d", len(data), pc)
            return False
        if opcode > OpCode.OP_16:
            op_count += 1
            if op_count > MAX_OPS_PER_SCRIPT:
                logger.debug("Script syntax: more than %d operations", MAX_OPS_PER_SCRIPT)
                return False
        if opcode in DISABLED_OPCODES:
            logger.debug("Script syntax: disabled opcode %#04x at offset %d", opcode, pc)
            return False
        pc = next_pc
    return True


# ---------------------------------------------------------------------------
# Solver
# ---------------------------------------------------------------------------


def solver(script: bytes) -> SolverResult:
    """Classify *script* and extract its template fields.

    Templates are tried in a fixed order; the first match wins. Solutions:

    - SCRIPTHASH: ``[hash]``
    - COLOR_SCRIPTHASH: ``[hash, color_id]``
    - PUBKEY: ``[pubkey]``
    - PUBKEYHASH: ``[hash]``
    - COLOR_PUBKEYHASH: ``[hash, color_id]``
    - MULTISIG: ``[m, pubkey..., n]`` with ``m`` and ``n`` as single bytes
    - NULL_DATA, CUSTOM: ``[]``

    Witness programs are reported as NONSTANDARD with ``success=True``.
    ``success`` is False only when no template matched and the script
    fails :func:`check_script_syntax`; callers must test ``success``
    rather than comparing the type with NONSTANDARD.
    """
    if is_pay_to_script_hash(script):
        return SolverResult(TxOutType.SCRIPTHASH, (script[2:22],))

    if is_colored_pay_to_script_hash(script):
        return SolverResult(TxOutType.COLOR_SCRIPTHASH, (script[37:57], script[1:34]))

    if witness_program(script) is not None:
        return SolverResult(TxOutType.NONSTANDARD)

    # Provably unspendable, data-carrying output. Whatever follows OP_RETURN
    # only has to be push-only.
    if len(script) >= 1 and script[0] == OpCode.OP_RETURN and is_push_only(script, 1):
        return SolverResult(TxOutType.NULL_DATA)

    pubkey = match_pay_to_pubkey(script)
    if pubkey is not None:
        return SolverResult(TxOutType.PUBKEY, (pubkey,))

    pubkey_hash = match_pay_to_pubkey_hash(script)
    if pubkey_hash is not None:
        return SolverResult(TxOutType.PUBKEYHASH, (pubkey_hash,))

    colored = match_colored_pay_to_pubkey_hash(script)
    if colored is not None:
        return SolverResult(TxOutType.COLOR_PUBKEYHASH, colored)

    multisig = match_multisig(script)
    if multisig is not None:
        required, pubkeys = multisig
        return SolverResult(
            TxOutType.MULTISIG,
            (bytes([required]), *pubkeys, bytes([len(pubkeys)])),
        )

    if not check_script_syntax(script):
        logger.debug("Script rejected as malformed (%d bytes)", len(script))
        return SolverResult(TxOutType.NONSTANDARD, (), success=False)

    return SolverResult(TxOutType.CUSTOM)

"""Script bytecode primitives — push encoding, op decoding, shape predicates.

A script is an immutable ``bytes`` value. Nothing here mutates its input:
- Minimal data push encoding
- Forward decoding of one opcode (plus its push payload) at a time
- Push-only suffix test
- Pay-to-script-hash, colored pay-to-script-hash and witness program shapes
"""

from __future__ import annotations

import struct
from collections.abc import Iterator
from typing import NamedTuple

from tapyrus_script.errors.script_errors import ScriptDecodeError
from tapyrus_script.script.opcodes import OpCode, decode_op_n

# ---------------------------------------------------------------------------
# Data push helpers
# ---------------------------------------------------------------------------


def push_data(data: bytes) -> bytes:
    """Encode a data push operation.

    Args:
        data: Arbitrary data bytes.

    Returns:
        The opcode(s) + data for a push of *data*.
    """
    length = len(data)
    if length == 0:
        return bytes([OpCode.OP_0])
    if length < OpCode.OP_PUSHDATA1:
        return bytes([length]) + data
    if length <= 0xFF:
        return bytes([OpCode.OP_PUSHDATA1, length]) + data
    if length <= 0xFFFF:
        return bytes([OpCode.OP_PUSHDATA2]) + struct.pack("<H", length) + data
    return bytes([OpCode.OP_PUSHDATA4]) + struct.pack("<I", length) + data


# ---------------------------------------------------------------------------
# Op decoding
# ---------------------------------------------------------------------------


class ScriptOp(NamedTuple):
    """One decoded op: opcode, push payload (empty for non-push ops), offset."""

    opcode: int
    data: bytes
    offset: int


def get_op(script: bytes, pc: int) -> tuple[bool, int, bytes, int]:
    """Decode the op starting at offset *pc*.

    Returns:
        Tuple of ``(ok, opcode, data, next_pc)``. When the script ends at
        *pc* or a push is truncated, ``ok`` is False and ``opcode`` is
        ``OP_INVALIDOPCODE``.
    """
    end = len(script)
    if pc >= end:
        return False, OpCode.OP_INVALIDOPCODE, b"", pc
    opcode = script[pc]
    pc += 1
    if opcode > OpCode.OP_PUSHDATA4:
        return True, opcode, b"", pc

    if opcode < OpCode.OP_PUSHDATA1:
        size = opcode
    else:
        width = {OpCode.OP_PUSHDATA1: 1, OpCode.OP_PUSHDATA2: 2, OpCode.OP_PUSHDATA4: 4}[opcode]
        if end - pc < width:
            return False, OpCode.OP_INVALIDOPCODE, b"", pc
        size = int.from_bytes(script[pc : pc + width], "little")
        pc += width
    if end - pc < size:
        return False, OpCode.OP_INVALIDOPCODE, b"", pc
    return True, opcode, script[pc : pc + size], pc + size


def iter_ops(script: bytes, start: int = 0) -> Iterator[ScriptOp]:
    """Iterate over the ops of *script* beginning at offset *start*.

    Raises:
        ScriptDecodeError: If a push declares more bytes than remain.
    """
    pc = start
    while pc < len(script):
        ok, opcode, data, next_pc = get_op(script, pc)
        if not ok:
            msg = f"truncated push at offset {pc}"
            raise ScriptDecodeError(msg, offset=pc)
        yield ScriptOp(opcode, data, pc)
        pc = next_pc


# ---------------------------------------------------------------------------
# Shape predicates
# ---------------------------------------------------------------------------


def is_push_only(script: bytes, start: int = 0) -> bool:
    """True if every op from *start* onwards decodes and is a push.

    OP_RESERVED is counted as a push-type opcode here: it sits below OP_16
    and does not fail until executed.
    """
    pc = start
    while pc < len(script):
        ok, opcode, _, pc = get_op(script, pc)
        if not ok or opcode > OpCode.OP_16:
            return False
    return True


def is_pay_to_script_hash(script: bytes) -> bool:
    """``OP_HASH160 <20 bytes> OP_EQUAL``."""
    return (
        len(script) == 23
        and script[0] == OpCode.OP_HASH160
        and script[1] == 0x14
        and script[22] == OpCode.OP_EQUAL
    )


def is_colored_pay_to_script_hash(script: bytes) -> bool:
    """``<33-byte color id> OP_COLOR OP_HASH160 <20 bytes> OP_EQUAL``.

    The color id starts with a token type byte of 1, 2 or 3.
    """
    return (
        len(script) == 58
        and script[0] == 0x21
        and script[1] in (0x01, 0x02, 0x03)
        and script[34] == OpCode.OP_COLOR
        and script[35] == OpCode.OP_HASH160
        and script[36] == 0x14
        and script[57] == OpCode.OP_EQUAL
    )


def witness_program(script: bytes) -> tuple[int, bytes] | None:
    """Return ``(version, program)`` if *script* is a witness program.

    A witness program is a 1-byte version push (OP_0, OP_1..OP_16) followed
    by a single direct push of 2 to 40 bytes.
    """
    if not 4 <= len(script) <= 42:
        return None
    version_op = script[0]
    if version_op != OpCode.OP_0 and not OpCode.OP_1 <= version_op <= OpCode.OP_16:
        return None
    if script[1] + 2 != len(script):
        return None
    return decode_op_n(version_op), script[2:]

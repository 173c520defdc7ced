"""Tests for the opcode table — script/opcodes.py."""

from __future__ import annotations

import pytest

from tapyrus_script.errors.script_errors import ScriptError
from tapyrus_script.script.opcodes import (
    DISABLED_OPCODES,
    OpCode,
    decode_op_n,
    encode_op_n,
    is_small_integer,
    opcode_name,
)


class TestSmallIntegers:
    def test_range(self) -> None:
        assert is_small_integer(OpCode.OP_1)
        assert is_small_integer(OpCode.OP_16)
        assert not is_small_integer(OpCode.OP_0)
        assert not is_small_integer(OpCode.OP_1NEGATE)
        assert not is_small_integer(OpCode.OP_NOP)

    @pytest.mark.parametrize("n", [0, 1, 2, 15, 16])
    def test_encode_decode(self, n: int) -> None:
        assert decode_op_n(encode_op_n(n)) == n

    def test_encode_values(self) -> None:
        assert encode_op_n(0) == OpCode.OP_0
        assert encode_op_n(1) == 0x51
        assert encode_op_n(16) == 0x60

    @pytest.mark.parametrize("n", [-1, 17, 100])
    def test_encode_out_of_range(self, n: int) -> None:
        with pytest.raises(ScriptError, match="0..16") as exc_info:
            encode_op_n(n)
        assert exc_info.value.code == "small-integer-range"

    def test_decode_non_integer_opcode(self) -> None:
        with pytest.raises(ScriptError):
            decode_op_n(OpCode.OP_DUP)


class TestOpcodeTable:
    def test_tapyrus_opcodes(self) -> None:
        assert OpCode.OP_COLOR == 0xBC
        assert OpCode.OP_CHECKDATASIG == 0xBA
        assert OpCode.OP_CHECKDATASIGVERIFY == 0xBB

    def test_disabled_set(self) -> None:
        assert len(DISABLED_OPCODES) == 29
        assert OpCode.OP_CAT in DISABLED_OPCODES
        assert OpCode.OP_NOP1 in DISABLED_OPCODES
        assert OpCode.OP_NOP10 in DISABLED_OPCODES
        assert OpCode.OP_RESERVED in DISABLED_OPCODES
        # CLTV / CSV occupy NOP2 / NOP3 and stay enabled
        assert OpCode.OP_CHECKLOCKTIMEVERIFY not in DISABLED_OPCODES
        assert OpCode.OP_CHECKSEQUENCEVERIFY not in DISABLED_OPCODES
        assert OpCode.OP_COLOR not in DISABLED_OPCODES

    def test_opcode_name(self) -> None:
        assert opcode_name(OpCode.OP_DUP) == "OP_DUP"
        assert opcode_name(0) == "OP_0"
        assert opcode_name(0x14) == "OP_PUSHBYTES_20"
        assert opcode_name(0xC0) == "OP_UNKNOWN"

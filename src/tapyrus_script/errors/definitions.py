"""Pre-built error instances shared across the package."""

from __future__ import annotations

from tapyrus_script.errors.script_errors import ScriptError

# -- Script building -------------------------------------------------------

ErrSmallIntegerRange = ScriptError(
    "small integer must be in range 0..16", code="small-integer-range"
)
ErrInvalidHashLength = ScriptError("hash must be 20 bytes", code="invalid-hash-length")
ErrInvalidWitnessHashLength = ScriptError(
    "witness script hash must be 32 bytes", code="invalid-witness-hash-length"
)
ErrInvalidWitnessProgram = ScriptError(
    "witness program must be 2..40 bytes with version 0..16",
    code="invalid-witness-program",
)

# -- Keys ------------------------------------------------------------------

ErrInvalidPubKey = ScriptError("invalid public key encoding", code="invalid-pubkey")

# -- Input -----------------------------------------------------------------

ErrInvalidHex = ScriptError("input is not valid hex", code="invalid-hex")
ErrInvalidAddress = ScriptError("invalid address", code="invalid-address")

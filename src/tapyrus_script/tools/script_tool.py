#!/usr/bin/env python3
"""Tapyrus Script Tool — classify output scripts and build standard ones.

    # Classify a hex-encoded locking script
    python -m tapyrus_script.tools.script_tool classify <script_hex>

    # List the addresses a locking script pays to
    python -m tapyrus_script.tools.script_tool destinations <script_hex>

    # Build pay-to-pubkey-hash / pay-to-script-hash scripts from a 20-byte hash
    python -m tapyrus_script.tools.script_tool p2pkh <hash_hex>
    python -m tapyrus_script.tools.script_tool p2sh <hash_hex>

    # Build an m-of-n multisig script
    python -m tapyrus_script.tools.script_tool multisig <m> <pubkey_hex> [<pubkey_hex> ...]

Settings come from ``TAPYRUS_*`` environment variables (see
``tapyrus_script.config.settings``), e.g. ``TAPYRUS_NETWORK=testnet``.
"""

from __future__ import annotations

import logging
import sys

from tapyrus_script.config.settings import AppConfig
from tapyrus_script.errors.definitions import ErrInvalidHex
from tapyrus_script.errors.script_errors import ScriptDecodeError, ScriptError
from tapyrus_script.script.address import encode_destination
from tapyrus_script.script.destination import (
    KeyID,
    ScriptID,
    extract_destinations,
    get_script_for_destination,
    get_script_for_multisig,
)
from tapyrus_script.script.keys import PubKey, decompress_public_key
from tapyrus_script.script.opcodes import opcode_name
from tapyrus_script.script.policy import is_standard
from tapyrus_script.script.script import iter_ops
from tapyrus_script.script.standard import (
    TxOutType,
    get_txn_output_type,
    match_custom_colored_script,
    solver,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def _parse_hex(text: str) -> bytes:
    try:
        return bytes.fromhex(text)
    except ValueError as exc:
        raise ErrInvalidHex from exc


def _disassemble(script: bytes) -> str:
    """Render *script* as opcode names and hex push payloads."""
    parts: list[str] = []
    try:
        for op in iter_ops(script):
            parts.append(op.data.hex() if op.data else opcode_name(op.opcode))
    except ScriptDecodeError as exc:
        parts.append(f"[truncated push at offset {exc.offset}]")
    return " ".join(parts)


def _cmd_classify(config: AppConfig, script: bytes) -> int:
    """Print the solver's view of *script*."""
    caps = config.script.capabilities()
    result = solver(script)
    standard, _ = is_standard(script, config.policy)

    print(f"Script:    {_disassemble(script)}")
    print(f"Type:      {get_txn_output_type(result.type, caps)}")
    print(f"Success:   {result.success}")
    print(f"Standard:  {standard}")
    for i, solution in enumerate(result.solutions):
        print(f"  [{i}] {solution.hex()}")

    if result.type in (TxOutType.PUBKEY, TxOutType.MULTISIG):
        keys = result.solutions[:1] if result.type == TxOutType.PUBKEY else result.solutions[1:-1]
        for key in keys:
            pubkey = PubKey(key)
            state = "on curve" if pubkey.is_fully_valid() else "NOT on curve"
            print(f"  key {key.hex()[:16]}... {state}")
            if pubkey.is_compressed() and pubkey.is_fully_valid():
                print(f"    uncompressed {decompress_public_key(key).hex()}")

    if result.type == TxOutType.CUSTOM:
        color_id = match_custom_colored_script(script)
        if color_id is not None:
            print(f"Color id:  {color_id.hex()}")

    return EXIT_OK if result.success else EXIT_FAILURE


def _cmd_destinations(config: AppConfig, script: bytes) -> int:
    """Print the addresses *script* pays to."""
    extracted = extract_destinations(script)
    if not extracted.success:
        print(f"No destinations ({get_txn_output_type(extracted.type)})")
        return EXIT_FAILURE
    print(f"Required:  {extracted.required}")
    for dest in extracted.destinations:
        print(f"  {encode_destination(dest, testnet=config.testnet)}")
    return EXIT_OK


def _cmd_build(dest: KeyID | ScriptID, config: AppConfig) -> int:
    script = get_script_for_destination(dest, config.script.capabilities())
    print(script.hex())
    print(encode_destination(dest, testnet=config.testnet))
    return EXIT_OK


def _cmd_multisig(required: int, keys: list[bytes]) -> int:
    print(get_script_for_multisig(required, keys).hex())
    return EXIT_OK


def _usage(message: str) -> int:
    print(message)
    return EXIT_USAGE


def run(argv: list[str], config: AppConfig | None = None) -> int:
    """Run one command and return the process exit status."""
    if not argv:
        return _usage(__doc__ or "")
    config = config or AppConfig()
    cmd, args = argv[0].lower(), argv[1:]

    try:
        if cmd in ("classify", "destinations"):
            if len(args) != 1:
                return _usage(f"Usage: script_tool {cmd} <script_hex>")
            script = _parse_hex(args[0])
            if cmd == "classify":
                return _cmd_classify(config, script)
            return _cmd_destinations(config, script)
        if cmd in ("p2pkh", "p2sh"):
            if len(args) != 1:
                return _usage(f"Usage: script_tool {cmd} <hash_hex>")
            h = _parse_hex(args[0])
            return _cmd_build(KeyID(h) if cmd == "p2pkh" else ScriptID(h), config)
        if cmd == "multisig":
            if len(args) < 2 or not (args[0].isascii() and args[0].isdigit()):
                return _usage("Usage: script_tool multisig <m> <pubkey_hex> [<pubkey_hex> ...]")
            return _cmd_multisig(int(args[0]), [_parse_hex(k) for k in args[1:]])
    except ScriptError as exc:
        logger.debug("Command %s failed: %s", cmd, exc.code)
        print(f"Error: {exc.message}")
        return EXIT_FAILURE

    print(f"Unknown command: {cmd}")
    return _usage(__doc__ or "")


def main() -> None:
    """CLI entry point."""
    config = AppConfig()
    logging.basicConfig(
        level=logging.DEBUG if config.debug else config.log_level.value,
        format="%(levelname)s %(name)s: %(message)s",
    )
    sys.exit(run(sys.argv[1:], config))


if __name__ == "__main__":
    main()

"""Address encoding — Base58Check text form of key-hash and script-hash destinations.

Witness destinations have no Base58Check form and are not encoded here.
"""

from __future__ import annotations

from tapyrus_script.errors.definitions import ErrInvalidAddress
from tapyrus_script.errors.script_errors import ScriptError
from tapyrus_script.script.destination import Destination, KeyID, ScriptID
from tapyrus_script.utils.crypto import sha256d

# Network version bytes
_MAINNET_PUBKEY_HASH = 0x00  # 1...
_MAINNET_SCRIPT_HASH = 0x05  # 3...
_TESTNET_PUBKEY_HASH = 0x6F  # m... or n...
_TESTNET_SCRIPT_HASH = 0xC4  # 2...

# ---------------------------------------------------------------------------
# Base58Check encoding / decoding
# ---------------------------------------------------------------------------

_B58_ALPHABET = b"123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"


def base58_encode(payload: bytes) -> str:
    """Encode raw bytes to Base58 (no checksum)."""
    n = int.from_bytes(payload, "big")
    result: list[int] = []
    while n > 0:
        n, remainder = divmod(n, 58)
        result.append(_B58_ALPHABET[remainder])
    # Preserve leading zero bytes
    for byte in payload:
        if byte == 0:
            result.append(_B58_ALPHABET[0])
        else:
            break
    return bytes(reversed(result)).decode("ascii")


def base58_decode(s: str) -> bytes:
    """Decode Base58 string to raw bytes (no checksum).

    Raises:
        ScriptError: If *s* contains a character outside the alphabet.
    """
    n = 0
    for char in s:
        index = _B58_ALPHABET.find(char.encode("ascii", "replace"))
        if index < 0:
            raise ErrInvalidAddress
        n = n * 58 + index
    result = n.to_bytes((n.bit_length() + 7) // 8, "big") if n > 0 else b""
    pad_count = len(s) - len(s.lstrip("1"))
    return b"\x00" * pad_count + result


def base58check_encode(payload: bytes) -> str:
    """Encode bytes with a 4-byte SHA256d checksum (Base58Check)."""
    checksum = sha256d(payload)[:4]
    return base58_encode(payload + checksum)


def base58check_decode(s: str) -> bytes:
    """Decode a Base58Check string, verifying the checksum.

    Raises:
        ScriptError: If the string is too short or the checksum is wrong.
    """
    raw = base58_decode(s)
    if len(raw) < 4:
        raise ErrInvalidAddress
    payload, checksum = raw[:-4], raw[-4:]
    if checksum != sha256d(payload)[:4]:
        raise ErrInvalidAddress
    return payload


# ---------------------------------------------------------------------------
# Destination <-> address
# ---------------------------------------------------------------------------


def encode_destination(dest: Destination, *, testnet: bool = False) -> str | None:
    """Encode a KeyID or ScriptID as an address; None for other variants."""
    match dest:
        case KeyID(hash=h):
            version = _TESTNET_PUBKEY_HASH if testnet else _MAINNET_PUBKEY_HASH
        case ScriptID(hash=h):
            version = _TESTNET_SCRIPT_HASH if testnet else _MAINNET_SCRIPT_HASH
        case _:
            return None
    return base58check_encode(bytes([version]) + h)


def decode_destination(address: str, *, testnet: bool = False) -> Destination:
    """Decode an address back into a KeyID or ScriptID.

    Raises:
        ScriptError: If the address is malformed or for another network.
    """
    payload = base58check_decode(address)
    if len(payload) != 21:
        raise ErrInvalidAddress
    version, h = payload[0], payload[1:]
    if version == (_TESTNET_PUBKEY_HASH if testnet else _MAINNET_PUBKEY_HASH):
        return KeyID(h)
    if version == (_TESTNET_SCRIPT_HASH if testnet else _MAINNET_SCRIPT_HASH):
        return ScriptID(h)
    raise ErrInvalidAddress


def validate_address(address: str, *, testnet: bool = False) -> bool:
    """Check if *address* decodes to a destination on the given network."""
    try:
        decode_destination(address, testnet=testnet)
    except ScriptError:
        return False
    return True

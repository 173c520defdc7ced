"""Public key encoding checks and key identity hashing.

The template matchers only need cheap structural checks:
- Size check (33-byte compressed or 65-byte uncompressed encodings)
- Header byte validity (02/03 compressed, 04/06/07 uncompressed)
- Key identity (Hash160 of the encoded key)

Full curve validation and (de)compression go through ``ecdsa``.
"""

from __future__ import annotations

from dataclasses import dataclass

from ecdsa import SECP256k1, SigningKey, VerifyingKey
from ecdsa.errors import MalformedPointError

from tapyrus_script.errors.definitions import ErrInvalidPubKey
from tapyrus_script.utils.crypto import hash160

_CURVE = SECP256k1

PUBLIC_KEY_SIZE = 65
COMPRESSED_PUBLIC_KEY_SIZE = 33


def _expected_len(header: int) -> int:
    """Encoded length implied by the first byte of a public key, or 0."""
    if header in (0x02, 0x03):
        return COMPRESSED_PUBLIC_KEY_SIZE
    if header in (0x04, 0x06, 0x07):
        return PUBLIC_KEY_SIZE
    return 0


@dataclass(frozen=True)
class PubKey:
    """An encoded secp256k1 public key.

    Attributes:
        data: Raw key bytes exactly as they appear in a script.
    """

    data: bytes

    @staticmethod
    def valid_size(data: bytes) -> bool:
        """True if *data* has the length of a compressed or uncompressed key."""
        return len(data) in (PUBLIC_KEY_SIZE, COMPRESSED_PUBLIC_KEY_SIZE)

    def is_valid(self) -> bool:
        """Header byte and length agree. Does not check the curve point."""
        return len(self.data) > 0 and _expected_len(self.data[0]) == len(self.data)

    def is_compressed(self) -> bool:
        return len(self.data) == COMPRESSED_PUBLIC_KEY_SIZE

    def is_fully_valid(self) -> bool:
        """True if the key decodes to a point on secp256k1."""
        if not self.is_valid():
            return False
        encoded = self.data
        if encoded[0] in (0x06, 0x07):
            # hybrid encoding: parity lives in the header, the point is uncompressed
            encoded = b"\x04" + encoded[1:]
        try:
            VerifyingKey.from_string(encoded, curve=_CURVE)
        except (MalformedPointError, ValueError):
            return False
        return True

    def get_id(self) -> bytes:
        """Key identity: Hash160 of the encoded key."""
        return hash160(self.data)

    def __bytes__(self) -> bytes:
        return self.data


# ---------------------------------------------------------------------------
# ECDSA helpers
# ---------------------------------------------------------------------------


def private_key_to_public_key(privkey_bytes: bytes, *, compressed: bool = True) -> bytes:
    """Derive the public key from a 32-byte private key.

    Args:
        privkey_bytes: 32-byte big-endian scalar.
        compressed: If True, return the 33-byte SEC compressed encoding.

    Returns:
        The public key bytes (33 compressed or 65 uncompressed).
    """
    sk = SigningKey.from_string(privkey_bytes, curve=_CURVE)
    vk = sk.get_verifying_key()
    if compressed:
        return compress_public_key(vk.to_string())
    return b"\x04" + vk.to_string()


def compress_public_key(raw_pubkey: bytes) -> bytes:
    """Compress a 64-byte (or 65-byte with 0x04 prefix) raw public key to 33 bytes."""
    if len(raw_pubkey) == 65 and raw_pubkey[0] == 0x04:
        raw_pubkey = raw_pubkey[1:]
    if len(raw_pubkey) != 64:
        if len(raw_pubkey) == 33 and raw_pubkey[0] in (0x02, 0x03):
            return raw_pubkey
        raise ErrInvalidPubKey
    y = int.from_bytes(raw_pubkey[32:], "big")
    prefix = b"\x02" if y % 2 == 0 else b"\x03"
    return prefix + raw_pubkey[:32]


def decompress_public_key(compressed: bytes) -> bytes:
    """Decompress a 33-byte compressed public key to 65-byte uncompressed."""
    if len(compressed) != 33 or compressed[0] not in (0x02, 0x03):
        raise ErrInvalidPubKey
    x = int.from_bytes(compressed[1:], "big")
    p = _CURVE.curve.p()
    # y^2 = x^3 + 7  (mod p)  for secp256k1
    y_sq = (pow(x, 3, p) + 7) % p
    y = pow(y_sq, (p + 1) // 4, p)
    if (y % 2 == 0) != (compressed[0] == 0x02):
        y = p - y
    return b"\x04" + x.to_bytes(32, "big") + y.to_bytes(32, "big")

"""
Fixed-width binary encodings.

    private key         32 B   big-endian scalar < r
    public key          48 B   compressed G1
    signature           96 B   compressed G2  (also blinded messages)
    partial signature  100 B   u32 BE share index ‖ signature
    share               36 B   u32 BE share index ‖ private key
    token               32 B   big-endian blinding scalar
    polynomial     4 + 48·t B  u32 BE coefficient count ‖ commitments

Point decoding always checks subgroup membership and public keys may not be
the identity.  Every decode failure is reported as
:class:`~.errors.MalformedBufferError`.
"""

from __future__ import annotations

from typing import List

from .curve import Scalar, Point, SCALAR_BYTES, G1_BYTES, G2_BYTES
from .errors import MalformedBufferError

INDEX_BYTES = 4
PRIVKEY_LEN = SCALAR_BYTES
PUBKEY_LEN = G1_BYTES
SIGNATURE_LEN = G2_BYTES
PARTIAL_SIG_LENGTH = INDEX_BYTES + SIGNATURE_LEN
SHARE_LEN = INDEX_BYTES + PRIVKEY_LEN
TOKEN_LEN = SCALAR_BYTES


def _expect(data: bytes, width: int, what: str) -> bytes:
    if data is None:
        raise MalformedBufferError(f"{what}: no data")
    data = bytes(data)
    if len(data) != width:
        raise MalformedBufferError(f"{what}: need {width} bytes, got {len(data)}")
    return data


def encode_index(index: int) -> bytes:
    if not 0 <= index < 1 << (8 * INDEX_BYTES):
        raise MalformedBufferError(f"share index {index} out of range")
    return index.to_bytes(INDEX_BYTES, "big")


def decode_index(data: bytes) -> int:
    return int.from_bytes(_expect(data, INDEX_BYTES, "index"), "big")


# ── keys and signatures ─────────────────────────────────────────────────

def serialize_private_key(sk: Scalar) -> bytes:
    return sk.to_bytes()


def deserialize_private_key(data: bytes) -> Scalar:
    data = _expect(data, PRIVKEY_LEN, "private key")
    try:
        return Scalar.from_bytes(data)
    except ValueError as exc:
        raise MalformedBufferError(f"private key: {exc}") from exc


def serialize_public_key(pk: Point) -> bytes:
    return pk.to_bytes()


def deserialize_public_key(data: bytes) -> Point:
    pk = _decode_point(_expect(data, PUBKEY_LEN, "public key"), 1, "public key")
    if pk.is_inf():
        raise MalformedBufferError("public key: identity point")
    return pk


def serialize_signature(sig: Point) -> bytes:
    return sig.to_bytes()


def deserialize_signature(data: bytes) -> Point:
    return _decode_point(_expect(data, SIGNATURE_LEN, "signature"), 2, "signature")


def _decode_point(data: bytes, group: int, what: str) -> Point:
    try:
        return Point.from_bytes(data, group)
    except ValueError as exc:
        raise MalformedBufferError(f"{what}: {exc}") from exc


# ── concatenated partial signatures ─────────────────────────────────────

def split_chunks(data: bytes, width: int = PARTIAL_SIG_LENGTH) -> List[bytes]:
    """Split a flat buffer into equal *width*-byte chunks."""
    data = bytes(data)
    if len(data) % width:
        raise MalformedBufferError(
            f"buffer of {len(data)} bytes is not a multiple of {width}"
        )
    return [data[i:i + width] for i in range(0, len(data), width)]

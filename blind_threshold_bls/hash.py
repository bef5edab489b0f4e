"""
Message hashing into G2.

Uses the IETF hash-to-curve suite ``BLS12381G2_XMD:SHA-256_SSWU_RO_`` with
the basic-scheme domain tag, so a non-blind signature produced here is a
standard BLS signature (minimal-pubkey-size variant).
"""

from __future__ import annotations

import hashlib

from py_ecc.bls.hash_to_curve import hash_to_G2

from .curve import Point

DST = b"BLS_SIG_BLS12381G2_XMD:SHA-256_SSWU_RO_NUL_"


def hash_to_point(message: bytes, dst: bytes = DST) -> Point:
    """H(m) ∈ G2."""
    return Point(hash_to_G2(bytes(message), dst, hashlib.sha256), 2)

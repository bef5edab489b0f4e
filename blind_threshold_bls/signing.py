"""
Single-key BLS signing and verification.

    sign(x, m)        σ = x · H(m)
    blind_sign(x, M') σ' = x · M'          (M' already in G2)
    verify(X, m, σ)   e(G1, σ) == e(X, H(m))

Verification is checked as  e(-G1, σ) · e(X, H(m)) == 1  with a single
final exponentiation.  The ``verify*`` helpers never raise on bad input;
malformed bytes simply do not verify.
"""

from __future__ import annotations

import logging

from .codec import deserialize_signature
from .curve import Scalar, Point, G1, pairing_product_is_one
from .errors import MalformedBufferError
from .hash import hash_to_point

logger = logging.getLogger(__name__)


def sign(private_key: Scalar, message: bytes) -> bytes:
    return (private_key * hash_to_point(message)).to_bytes()


def blind_sign(private_key: Scalar, blinded_message: bytes) -> bytes:
    """
    Sign a blinded message.  Raises ``MalformedBufferError`` if it is not a
    valid G2 encoding.
    """
    point = deserialize_signature(blinded_message)
    return (private_key * point).to_bytes()


def verify_point(public_key: Point, message_point: Point, signature: bytes) -> bool:
    """Check *signature* against an already-hashed message point."""
    try:
        sig = deserialize_signature(signature)
    except MalformedBufferError as exc:
        logger.debug("rejecting signature: %s", exc)
        return False
    return pairing_product_is_one([(-G1, sig), (public_key, message_point)])


def verify(public_key: Point, message: bytes, signature: bytes) -> bool:
    return verify_point(public_key, hash_to_point(message), signature)


def verify_blind(public_key: Point, blinded_message: bytes, blinded_signature: bytes) -> bool:
    """
    Verify a signature over the blinded message itself, before unblinding.
    """
    try:
        point = deserialize_signature(blinded_message)
    except MalformedBufferError as exc:
        logger.debug("rejecting blinded message: %s", exc)
        return False
    return verify_point(public_key, point, blinded_signature)

"""
Threshold BLS: partial signatures, partial verification, aggregation.

Share *i* holds s_i = f(i + 1).  Its partial signature is

    σ_i = s_i · H(m)          (or s_i · M' for a blinded message)

which is f evaluated at i + 1 "in the exponent" of H(m).  Lagrange
interpolation at x = 0 over any t of them gives f(0) · H(m), the signature
under the threshold public key, without anyone reconstructing f(0).

``aggregate`` trusts its inputs.  It neither re-verifies the partials nor
checks that their indices are distinct; run ``partial_verify`` on every
contribution first.  Duplicate indices produce a wrong signature, not an
error.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import List, Sequence

from .codec import (
    INDEX_BYTES, PARTIAL_SIG_LENGTH,
    decode_index, deserialize_signature, encode_index, split_chunks,
)
from .curve import Point
from .errors import MalformedBufferError, NotEnoughSharesError, ThresholdError
from .hash import hash_to_point
from .keys import PublicPolynomial, Share
from .polynomial import recover_point
from .signing import verify_point

logger = logging.getLogger(__name__)


# ── data structures ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class PartialSignature:
    """A share's signature tagged with the share index."""

    index: int
    signature: bytes          # 96-byte compressed G2

    def to_bytes(self) -> bytes:
        """Serialise to 100 bytes: index (4) + signature (96)."""
        return encode_index(self.index) + self.signature

    @classmethod
    def from_bytes(cls, data: bytes) -> PartialSignature:
        data = bytes(data)
        if len(data) != PARTIAL_SIG_LENGTH:
            raise MalformedBufferError(
                f"partial signature: need {PARTIAL_SIG_LENGTH} bytes, got {len(data)}"
            )
        return cls(index=decode_index(data[:INDEX_BYTES]), signature=data[INDEX_BYTES:])

    def point(self) -> Point:
        return deserialize_signature(self.signature)


# ── signing ─────────────────────────────────────────────────────────────

def partial_sign(share: Share, message: bytes) -> bytes:
    """Partial signature over H(message), encoded with the share index."""
    sig = share.private * hash_to_point(message)
    return PartialSignature(share.index, sig.to_bytes()).to_bytes()


def partial_sign_blinded(share: Share, blinded_message: bytes) -> bytes:
    """Partial signature over an already-blinded G2 point."""
    point = deserialize_signature(blinded_message)
    return PartialSignature(share.index, (share.private * point).to_bytes()).to_bytes()


# ── verification ────────────────────────────────────────────────────────

def _partial_verify_point(
    polynomial: PublicPolynomial,
    message_point: Point,
    partial: bytes,
) -> bool:
    try:
        ps = PartialSignature.from_bytes(partial)
    except MalformedBufferError as exc:
        logger.debug("rejecting partial signature: %s", exc)
        return False
    return verify_point(polynomial.eval(ps.index), message_point, ps.signature)


def partial_verify(polynomial: PublicPolynomial, message: bytes, partial: bytes) -> bool:
    """
    Check a partial signature against the public key of its share, read
    off the public polynomial at the embedded index.
    """
    return _partial_verify_point(polynomial, hash_to_point(message), partial)


def partial_verify_blind(
    polynomial: PublicPolynomial,
    blinded_message: bytes,
    partial: bytes,
) -> bool:
    """Same as :func:`partial_verify` for a partial over a blinded message."""
    try:
        point = deserialize_signature(blinded_message)
    except MalformedBufferError as exc:
        logger.debug("rejecting blinded message: %s", exc)
        return False
    return _partial_verify_point(polynomial, point, partial)


# ── aggregation ─────────────────────────────────────────────────────────

def aggregate(threshold: int, partials: Sequence[bytes]) -> bytes:
    """
    Combine at least *threshold* encoded partial signatures into one
    96-byte signature.

    Partials are ordered by share index and the first *threshold* are
    interpolated; any extra ones are ignored.
    """
    if threshold < 1:
        raise ThresholdError(f"threshold must be ≥ 1, got {threshold}")
    if len(partials) < threshold:
        raise NotEnoughSharesError(have=len(partials), need=threshold)

    parsed: List[PartialSignature] = [PartialSignature.from_bytes(p) for p in partials]
    dupes = [i for i, c in Counter(ps.index for ps in parsed).items() if c > 1]
    if dupes:
        logger.warning(
            "aggregating partial signatures with repeated indices %s; "
            "the result will not verify", sorted(dupes),
        )

    evals = [(ps.index, ps.point()) for ps in parsed]
    return recover_point(threshold, evals).to_bytes()


def aggregate_bytes(threshold: int, signatures: bytes) -> bytes:
    """:func:`aggregate` over a flat buffer of 100-byte partials."""
    return aggregate(threshold, split_chunks(signatures, PARTIAL_SIG_LENGTH))

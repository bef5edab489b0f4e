"""
Key material: single keypairs and trusted-dealer (t, n) sharings.

Both generators are deterministic in their seed.  ``threshold_keygen`` is
a dealer-based helper: whoever runs it sees every share, so it is meant for
tests and for deployments that already trust the dealer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from .codec import (
    INDEX_BYTES, PUBKEY_LEN, SHARE_LEN,
    decode_index, deserialize_private_key, deserialize_public_key,
    encode_index, split_chunks,
)
from .curve import Scalar, Point, G1
from .errors import MalformedBufferError, ThresholdError
from .polynomial import (
    commit_polynomial, evaluate, evaluate_public, sample_polynomial, share_x,
)
from .rng import ChaChaRng

logger = logging.getLogger(__name__)


# ── data structures ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class Keypair:
    """A private scalar and its G1 public key."""

    private: Scalar
    public: Point


@dataclass(frozen=True)
class Share:
    """One party's evaluation of the secret polynomial."""

    index: int          # 0-based; evaluates f at index + 1
    private: Scalar

    def public_key(self) -> Point:
        return self.private * G1

    def to_bytes(self) -> bytes:
        return encode_index(self.index) + self.private.to_bytes()

    @classmethod
    def from_bytes(cls, data: bytes) -> Share:
        data = bytes(data)
        if len(data) != SHARE_LEN:
            raise MalformedBufferError(f"share: need {SHARE_LEN} bytes, got {len(data)}")
        return cls(
            index=decode_index(data[:INDEX_BYTES]),
            private=deserialize_private_key(data[INDEX_BYTES:]),
        )


@dataclass(frozen=True)
class PublicPolynomial:
    """
    Feldman commitment to the sharing polynomial.

    ``coefficients[0]`` is the threshold public key; there are exactly
    *t* coefficients.
    """

    coefficients: List[Point]

    def eval(self, index: int) -> Point:
        """Public key of share *index*."""
        return evaluate_public(self.coefficients, share_x(index))

    @property
    def public_key(self) -> Point:
        return self.coefficients[0]

    @property
    def threshold(self) -> int:
        return len(self.coefficients)

    def to_bytes(self) -> bytes:
        parts = [len(self.coefficients).to_bytes(INDEX_BYTES, "big")]
        parts.extend(c.to_bytes() for c in self.coefficients)
        return b"".join(parts)

    @classmethod
    def from_bytes(cls, data: bytes) -> PublicPolynomial:
        data = bytes(data)
        if len(data) < INDEX_BYTES:
            raise MalformedBufferError("polynomial: missing length prefix")
        count = int.from_bytes(data[:INDEX_BYTES], "big")
        body = data[INDEX_BYTES:]
        if count == 0 or len(body) != count * PUBKEY_LEN:
            raise MalformedBufferError(
                f"polynomial: {count} coefficients do not fit {len(body)} bytes"
            )
        coeffs = [deserialize_public_key(c) for c in split_chunks(body, PUBKEY_LEN)]
        return cls(coefficients=coeffs)


@dataclass(frozen=True)
class Keys:
    """Output of :func:`threshold_keygen`."""

    shares: List[Share]
    polynomial: PublicPolynomial
    threshold_public_key: Point
    t: int
    n: int


# ── generation ──────────────────────────────────────────────────────────

def keygen(seed: bytes) -> Keypair:
    """Deterministic keypair from a seed of at least 32 bytes."""
    rng = ChaChaRng(seed)
    private = rng.random_scalar()
    return Keypair(private=private, public=private * G1)


def threshold_keygen(n: int, t: int, seed: bytes) -> Keys:
    """
    Deal a t-of-n sharing of a fresh secret.

    Samples a degree t-1 polynomial from the seed, hands share *i* the
    value f(i + 1) for i in 0..n-1, and publishes the coefficientwise
    commitment.  Same (n, t, seed) always gives the same keys.
    """
    if t < 1 or t > n:
        raise ThresholdError(f"need 1 ≤ t ≤ n, got t={t}, n={n}")
    rng = ChaChaRng(seed)
    coeffs = sample_polynomial(t - 1, rng)
    shares = [
        Share(index=i, private=evaluate(coeffs, share_x(i)))
        for i in range(n)
    ]
    polynomial = PublicPolynomial(coefficients=commit_polynomial(coeffs))
    logger.debug("dealt %d-of-%d sharing", t, n)
    return Keys(
        shares=shares,
        polynomial=polynomial,
        threshold_public_key=polynomial.public_key,
        t=t,
        n=n,
    )


def verify_share(polynomial: PublicPolynomial, share: Share) -> bool:
    """Feldman check:  share · G1  ==  Σ_j C_j · x^j."""
    return share.public_key() == polynomial.eval(share.index)

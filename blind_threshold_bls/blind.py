"""
Blinding for BLS signatures.

The requester hashes the message into G2 and masks it with a random
scalar r:

    M' = r · H(m)

Any signer (single key or threshold share) signs M' as-is, producing
x · M'.  Multiplying by r⁻¹ leaves x · H(m), an ordinary BLS signature on
*m*.  The signer only ever sees M', which is uniformly distributed in G2
and reveals nothing about *m*.

r comes from :class:`~.rng.ChaChaRng`, so the same (message, seed) pair
always gives the same token and blinded message.  Reusing a seed links
the two requests; use a fresh random seed for every blinding.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .codec import TOKEN_LEN, deserialize_signature
from .curve import Scalar
from .errors import BlindingError, MalformedBufferError
from .hash import hash_to_point
from .rng import ChaChaRng


@dataclass(frozen=True)
class Token:
    """Blinding factor r.  Keep it until the signature comes back."""

    factor: Scalar

    def to_bytes(self) -> bytes:
        return self.factor.to_bytes()

    @classmethod
    def from_bytes(cls, data: bytes) -> Token:
        data = bytes(data)
        if len(data) != TOKEN_LEN:
            raise MalformedBufferError(f"token: need {TOKEN_LEN} bytes, got {len(data)}")
        try:
            factor = Scalar.from_bytes(data)
        except ValueError as exc:
            raise MalformedBufferError(f"token: {exc}") from exc
        if factor.is_zero():
            raise MalformedBufferError("token: zero blinding factor")
        return cls(factor=factor)


def blind(message: bytes, seed: bytes) -> Tuple[Token, bytes]:
    """Return the token and the 96-byte blinded message r · H(m)."""
    rng = ChaChaRng(seed)
    r = rng.random_scalar()
    blinded = r * hash_to_point(message)
    return Token(factor=r), blinded.to_bytes()


def unblind(token: Token, blinded_signature: bytes) -> bytes:
    """Strip r from a signature over r · H(m)."""
    try:
        sig = deserialize_signature(blinded_signature)
    except MalformedBufferError as exc:
        raise BlindingError(str(exc)) from exc
    if token.factor.is_zero():
        raise BlindingError("zero blinding factor")
    return (token.factor.inv() * sig).to_bytes()

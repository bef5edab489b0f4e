"""
Blind threshold BLS signatures on BLS12-381.

n key-holders share one public key through a (t, n) Shamir sharing.  Any t
of them sign a message with their shares, and the partial signatures are
combined by Lagrange interpolation into an ordinary BLS signature.  The
requester may blind the message first, so signers never see what they
sign.

Quick start
-----------
::

    from blind_threshold_bls import (
        threshold_keygen, blind, partial_sign_blinded, partial_verify_blind,
        aggregate, unblind, verify,
    )

    keys = threshold_keygen(n=5, t=3, seed=dealer_seed)
    token, blinded = blind(b"vote: yes", seed=secrets.token_bytes(32))

    partials = [partial_sign_blinded(s, blinded) for s in keys.shares[:3]]
    assert all(partial_verify_blind(keys.polynomial, blinded, p) for p in partials)

    sig = unblind(token, aggregate(3, partials))
    assert verify(keys.threshold_public_key, b"vote: yes", sig)

The foreign-call boundary with handles and borrowed buffers lives in
:mod:`blind_threshold_bls.ffi`.
"""

__version__ = "0.2.0"

# ── core types ──────────────────────────────────────────────────────────
from .curve import Scalar, Point, G1, G2, ORDER

# ── encodings ───────────────────────────────────────────────────────────
from .codec import (
    PRIVKEY_LEN,
    PUBKEY_LEN,
    SIGNATURE_LEN,
    PARTIAL_SIG_LENGTH,
    serialize_private_key,
    deserialize_private_key,
    serialize_public_key,
    deserialize_public_key,
    serialize_signature,
    deserialize_signature,
)

# ── randomness ──────────────────────────────────────────────────────────
from .rng import ChaChaRng, SEED_BYTES

# ── key material ────────────────────────────────────────────────────────
from .keys import (
    Keypair,
    Keys,
    Share,
    PublicPolynomial,
    keygen,
    threshold_keygen,
    verify_share,
)

# ── blinding ────────────────────────────────────────────────────────────
from .blind import Token, blind, unblind

# ── signatures ──────────────────────────────────────────────────────────
from .signing import sign, blind_sign, verify, verify_blind
from .threshold import (
    PartialSignature,
    partial_sign,
    partial_sign_blinded,
    partial_verify,
    partial_verify_blind,
    aggregate,
    aggregate_bytes,
)

# ── errors ──────────────────────────────────────────────────────────────
from .errors import (
    ThresholdBLSError,
    NullInputError,
    MalformedBufferError,
    InvalidSeedError,
    VerificationError,
    NotEnoughSharesError,
    BlindingError,
    ThresholdError,
)

__all__ = [
    "__version__",
    # core
    "Scalar", "Point", "G1", "G2", "ORDER",
    # encodings
    "PRIVKEY_LEN", "PUBKEY_LEN", "SIGNATURE_LEN", "PARTIAL_SIG_LENGTH",
    "serialize_private_key", "deserialize_private_key",
    "serialize_public_key", "deserialize_public_key",
    "serialize_signature", "deserialize_signature",
    # randomness
    "ChaChaRng", "SEED_BYTES",
    # keys
    "Keypair", "Keys", "Share", "PublicPolynomial",
    "keygen", "threshold_keygen", "verify_share",
    # blinding
    "Token", "blind", "unblind",
    # signing
    "sign", "blind_sign", "verify", "verify_blind",
    "PartialSignature", "partial_sign", "partial_sign_blinded",
    "partial_verify", "partial_verify_blind", "aggregate", "aggregate_bytes",
    # errors
    "ThresholdBLSError", "NullInputError", "MalformedBufferError",
    "InvalidSeedError", "VerificationError", "NotEnoughSharesError",
    "BlindingError", "ThresholdError",
]

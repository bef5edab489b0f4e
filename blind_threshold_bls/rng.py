"""
Seeded ChaCha20 random stream.

Every operation that needs randomness (key generation, blinding) builds its
own ``ChaChaRng`` from a caller-supplied seed, so results are reproducible
and no generator state outlives a call.  The keystream is ChaCha20 keyed
with the first 32 seed bytes, zero nonce, counter starting at zero.

Determinism is a feature here: the same seed gives the same keys and the
same blinding factor.  Callers that blind real messages must pass a fresh
unpredictable seed (``secrets.token_bytes(32)``) every time.
"""

from __future__ import annotations

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms

from .curve import Scalar, ORDER, SCALAR_BYTES
from .errors import InvalidSeedError

SEED_BYTES = 32
_NONCE = b"\x00" * 16          # 4-byte counter ‖ 12-byte nonce, all zero
_SCALAR_MASK = (1 << ORDER.bit_length()) - 1


class ChaChaRng:
    """Cryptographic byte stream derived from a seed of at least 32 bytes."""

    def __init__(self, seed: bytes) -> None:
        if seed is None or len(seed) < SEED_BYTES:
            got = 0 if seed is None else len(seed)
            raise InvalidSeedError(f"need at least {SEED_BYTES} bytes, got {got}")
        key = bytes(seed[:SEED_BYTES])
        cipher = Cipher(algorithms.ChaCha20(key, _NONCE), mode=None)
        self._stream = cipher.encryptor()

    def fill_bytes(self, n: int) -> bytes:
        """Next *n* keystream bytes."""
        if n < 0:
            raise ValueError("byte count must be ≥ 0")
        return self._stream.update(b"\x00" * n)

    def random_scalar(self) -> Scalar:
        """Uniform in [1, r-1] via rejection sampling."""
        while True:
            c = int.from_bytes(self.fill_bytes(SCALAR_BYTES), "big") & _SCALAR_MASK
            if 0 < c < ORDER:
                return Scalar(c)

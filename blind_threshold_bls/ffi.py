"""
Boundary layer: the foreign-call contract in Python form.

Every entry point here follows the same rules so that the scheme can sit
behind a C ABI, a WASM export or another scripting runtime unchanged:

* Inputs are either borrowed byte views (:class:`Buffer`) or opaque
  :class:`Handle` objects returned by an earlier call.
* Outputs go into :class:`Out` cells, which stand in for out-pointers.  An
  ``Out`` is written only when the call succeeds.
* The return value is ``True`` on success and ``False`` on any failure.
  Nothing raises across the boundary; the reason is logged at DEBUG on
  this side and goes no further.
* ``None`` for any required argument is a failure, detected before any
  work is done.

Ownership
---------
A byte sequence is either *borrowed* (``Buffer.borrow``: the caller keeps
it, the library copies what it needs during the call) or *transferred*
(returned in an ``Out``; release it with :func:`free_vector` exactly
once).  Handles from ``keygen``, ``threshold_keygen``, ``blind`` and the
``deserialize_*`` calls are owned by the caller and released with the
matching ``destroy_*``.  Handles from the ``*_ptr`` accessors are borrowed
from their parent and die with it.  Copy a handle only through
:func:`clone_handle`.

Releasing twice or using a released handle is a programmer error.  This
rendition happens to report it as a null input, but callers must not rely
on that.

Example
-------
::

    keys = Out()
    threshold_keygen(5, 3, Buffer.borrow(seed), keys)
    sig = Out()
    partial_sign(share_ptr(keys.value, 0), Buffer.borrow(msg), sig)
    ...
    free_vector(sig.value)
    destroy_keys(keys.value)
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Optional

from .blind import blind as _blind_message, unblind as _unblind_signature
from . import codec, keys as _keys, signing, threshold as _threshold
from .errors import (
    MalformedBufferError,
    NullInputError,
    ThresholdBLSError,
    VerificationError,
)

logger = logging.getLogger(__name__)

# handle kinds
KEYPAIR = "keypair"
KEYS = "keys"
TOKEN = "token"
PRIVATE_KEY = "private_key"
PUBLIC_KEY = "public_key"
SIGNATURE = "signature"
SHARE = "share"
POLYNOMIAL = "polynomial"


# ── boundary types ──────────────────────────────────────────────────────

class Buffer:
    """
    A ``(pointer, length)`` window over bytes.

    ``Buffer.borrow(data)`` wraps caller memory without copying; the
    library reads it only while the call runs.  Buffers the library hands
    back are transferred and must be released with :func:`free_vector`.
    """

    __slots__ = ("_view", "_owned")

    def __init__(self, view: Optional[memoryview], owned: bool) -> None:
        self._view = view
        self._owned = owned

    @classmethod
    def borrow(cls, data) -> Buffer:
        return cls(memoryview(data), owned=False)

    @classmethod
    def _transfer(cls, data: bytes) -> Buffer:
        return cls(memoryview(bytes(data)), owned=True)

    @property
    def owned(self) -> bool:
        return self._owned

    @property
    def released(self) -> bool:
        return self._view is None

    def __len__(self) -> int:
        return 0 if self._view is None else self._view.nbytes

    def __bytes__(self) -> bytes:
        if self._view is None:
            raise NullInputError("buffer has been freed")
        return self._view.tobytes()

    def __repr__(self) -> str:
        state = "freed" if self._view is None else f"{len(self)} B"
        return f"Buffer({'owned' if self._owned else 'borrowed'}, {state})"


class Out:
    """Output cell.  ``value`` stays ``None`` unless the call succeeds."""

    __slots__ = ("value",)

    def __init__(self) -> None:
        self.value: Any = None

    def __repr__(self) -> str:
        return f"Out({self.value!r})"


class Handle:
    """
    Opaque reference to a library object.

    A borrowed handle (from a ``*_ptr`` accessor) keeps a reference to its
    parent and becomes unusable once the parent is destroyed.
    """

    __slots__ = ("_obj", "_kind", "_parent")

    def __init__(self, obj: Any, kind: str, parent: Optional[Handle] = None) -> None:
        self._obj = obj
        self._kind = kind
        self._parent = parent

    @property
    def kind(self) -> str:
        return self._kind

    @property
    def borrowed(self) -> bool:
        return self._parent is not None

    @property
    def released(self) -> bool:
        if self._obj is None:
            return True
        return self._parent is not None and self._parent.released

    def _release(self) -> None:
        self._obj = None

    def __repr__(self) -> str:
        state = "released" if self.released else "live"
        return f"Handle({self._kind}, {state})"


# ── internal helpers ────────────────────────────────────────────────────

def _entry_point(fn):
    """Run *fn*; map any library or codec error to ``False``."""

    @functools.wraps(fn)
    def wrapper(*args, **kwargs) -> bool:
        try:
            fn(*args, **kwargs)
        except (ThresholdBLSError, ValueError, TypeError) as exc:
            logger.debug("%s failed: %s", fn.__name__, exc)
            return False
        return True

    return wrapper


def _require(**params: Any) -> None:
    missing = [name for name, value in params.items() if value is None]
    if missing:
        raise NullInputError(", ".join(missing))


def _read(buf: Buffer) -> bytes:
    if not isinstance(buf, Buffer):
        raise MalformedBufferError(f"expected Buffer, got {type(buf).__name__}")
    return bytes(buf)


def _deref(handle: Handle, kind: str) -> Any:
    if not isinstance(handle, Handle):
        raise MalformedBufferError(f"expected {kind} handle, got {type(handle).__name__}")
    if handle.kind != kind:
        raise MalformedBufferError(f"expected {kind} handle, got {handle.kind}")
    if handle.released:
        raise NullInputError(f"{kind} handle has been released")
    return handle._obj


def _check_out(out: Out) -> None:
    if not isinstance(out, Out):
        raise NullInputError(f"expected Out, got {type(out).__name__}")


# ── key generation ──────────────────────────────────────────────────────

@_entry_point
def keygen(seed: Buffer, keypair_out: Out) -> None:
    """Deterministic keypair; release with :func:`destroy_keypair`."""
    _require(seed=seed, keypair_out=keypair_out)
    _check_out(keypair_out)
    keypair = _keys.keygen(_read(seed))
    keypair_out.value = Handle(keypair, KEYPAIR)


@_entry_point
def threshold_keygen(n: int, t: int, seed: Buffer, keys_out: Out) -> None:
    """
    Deal a t-of-n sharing; release with :func:`destroy_keys`.

    Whoever calls this learns every share.  Use it only for tests or with a
    trusted dealer.
    """
    _require(seed=seed, keys_out=keys_out)
    _check_out(keys_out)
    dealt = _keys.threshold_keygen(n, t, _read(seed))
    keys_out.value = Handle(dealt, KEYS)


def share_ptr(keys: Handle, index: int) -> Optional[Handle]:
    """Borrowed handle to share *index*; ``None`` if unavailable."""
    try:
        dealt = _deref(keys, KEYS)
    except ThresholdBLSError:
        return None
    if not 0 <= index < len(dealt.shares):
        return None
    return Handle(dealt.shares[index], SHARE, parent=keys)


def num_shares(keys: Handle) -> int:
    try:
        return len(_deref(keys, KEYS).shares)
    except ThresholdBLSError:
        return 0


def polynomial_ptr(keys: Handle) -> Optional[Handle]:
    try:
        return Handle(_deref(keys, KEYS).polynomial, POLYNOMIAL, parent=keys)
    except ThresholdBLSError:
        return None


def threshold_public_key_ptr(keys: Handle) -> Optional[Handle]:
    try:
        return Handle(_deref(keys, KEYS).threshold_public_key, PUBLIC_KEY, parent=keys)
    except ThresholdBLSError:
        return None


def public_key_ptr(keypair: Handle) -> Optional[Handle]:
    try:
        return Handle(_deref(keypair, KEYPAIR).public, PUBLIC_KEY, parent=keypair)
    except ThresholdBLSError:
        return None


def private_key_ptr(keypair: Handle) -> Optional[Handle]:
    try:
        return Handle(_deref(keypair, KEYPAIR).private, PRIVATE_KEY, parent=keypair)
    except ThresholdBLSError:
        return None


# ── user → library ──────────────────────────────────────────────────────

@_entry_point
def blind(
    message: Buffer,
    seed: Buffer,
    blinded_message_out: Out,
    blinding_factor_out: Out,
) -> None:
    """
    Blind *message*.  Keep the token handle for :func:`unblind` and release
    it with :func:`destroy_token`; free the blinded message buffer with
    :func:`free_vector`.

    The same seed always gives the same result.  Pass a fresh random seed
    per call.
    """
    _require(
        message=message, seed=seed,
        blinded_message_out=blinded_message_out,
        blinding_factor_out=blinding_factor_out,
    )
    _check_out(blinded_message_out)
    _check_out(blinding_factor_out)
    token, blinded = _blind_message(_read(message), _read(seed))
    blinded_message_out.value = Buffer._transfer(blinded)
    blinding_factor_out.value = Handle(token, TOKEN)


@_entry_point
def unblind(blinded_signature: Buffer, blinding_factor: Handle, unblinded_signature: Out) -> None:
    _require(
        blinded_signature=blinded_signature,
        blinding_factor=blinding_factor,
        unblinded_signature=unblinded_signature,
    )
    _check_out(unblinded_signature)
    token = _deref(blinding_factor, TOKEN)
    sig = _unblind_signature(token, _read(blinded_signature))
    unblinded_signature.value = Buffer._transfer(sig)


@_entry_point
def verify(public_key: Handle, message: Buffer, signature: Buffer) -> None:
    """Verify an (unblinded) signature against a public key."""
    _require(public_key=public_key, message=message, signature=signature)
    pk = _deref(public_key, PUBLIC_KEY)
    if not signing.verify(pk, _read(message), _read(signature)):
        raise VerificationError("signature")


@_entry_point
def verify_blind_signature(public_key: Handle, blinded_message: Buffer, signature: Buffer) -> None:
    """Verify a signature over a blinded message before unblinding it."""
    _require(public_key=public_key, blinded_message=blinded_message, signature=signature)
    pk = _deref(public_key, PUBLIC_KEY)
    if not signing.verify_blind(pk, _read(blinded_message), _read(signature)):
        raise VerificationError("blind signature")


# ── service → library ───────────────────────────────────────────────────

@_entry_point
def sign(private_key: Handle, message: Buffer, signature: Out) -> None:
    _require(private_key=private_key, message=message, signature=signature)
    _check_out(signature)
    sk = _deref(private_key, PRIVATE_KEY)
    signature.value = Buffer._transfer(signing.sign(sk, _read(message)))


@_entry_point
def sign_blinded_message(private_key: Handle, message: Buffer, signature: Out) -> None:
    _require(private_key=private_key, message=message, signature=signature)
    _check_out(signature)
    sk = _deref(private_key, PRIVATE_KEY)
    signature.value = Buffer._transfer(signing.blind_sign(sk, _read(message)))


@_entry_point
def partial_sign(share: Handle, message: Buffer, signature: Out) -> None:
    _require(share=share, message=message, signature=signature)
    _check_out(signature)
    s = _deref(share, SHARE)
    signature.value = Buffer._transfer(_threshold.partial_sign(s, _read(message)))


@_entry_point
def partial_sign_blinded_message(share: Handle, blinded_message: Buffer, signature: Out) -> None:
    _require(share=share, blinded_message=blinded_message, signature=signature)
    _check_out(signature)
    s = _deref(share, SHARE)
    signature.value = Buffer._transfer(
        _threshold.partial_sign_blinded(s, _read(blinded_message))
    )


# ── combiner → library ──────────────────────────────────────────────────

@_entry_point
def partial_verify(polynomial: Handle, message: Buffer, signature: Buffer) -> None:
    _require(polynomial=polynomial, message=message, signature=signature)
    poly = _deref(polynomial, POLYNOMIAL)
    if not _threshold.partial_verify(poly, _read(message), _read(signature)):
        raise VerificationError("partial signature")


@_entry_point
def partial_verify_blind_signature(polynomial: Handle, blinded_message: Buffer, signature: Buffer) -> None:
    _require(polynomial=polynomial, blinded_message=blinded_message, signature=signature)
    poly = _deref(polynomial, POLYNOMIAL)
    if not _threshold.partial_verify_blind(poly, _read(blinded_message), _read(signature)):
        raise VerificationError("blind partial signature")


@_entry_point
def combine(threshold: int, signatures: Buffer, asig: Out) -> None:
    """
    Aggregate a flat buffer of 100-byte partial signatures.

    Does not check that the partials are valid or carry distinct indices;
    run :func:`partial_verify` on each one first.
    """
    _require(signatures=signatures, asig=asig)
    _check_out(asig)
    sig = _threshold.aggregate_bytes(threshold, _read(signatures))
    asig.value = Buffer._transfer(sig)


# ── serialization ───────────────────────────────────────────────────────

@_entry_point
def serialize_pubkey(pubkey: Handle, pubkey_buf: Out) -> None:
    _require(pubkey=pubkey, pubkey_buf=pubkey_buf)
    _check_out(pubkey_buf)
    data = codec.serialize_public_key(_deref(pubkey, PUBLIC_KEY))
    pubkey_buf.value = Buffer._transfer(data)


@_entry_point
def serialize_privkey(privkey: Handle, privkey_buf: Out) -> None:
    _require(privkey=privkey, privkey_buf=privkey_buf)
    _check_out(privkey_buf)
    data = codec.serialize_private_key(_deref(privkey, PRIVATE_KEY))
    privkey_buf.value = Buffer._transfer(data)


@_entry_point
def serialize_sig(sig: Handle, sig_buf: Out) -> None:
    _require(sig=sig, sig_buf=sig_buf)
    _check_out(sig_buf)
    data = codec.serialize_signature(_deref(sig, SIGNATURE))
    sig_buf.value = Buffer._transfer(data)


@_entry_point
def deserialize_pubkey(pubkey_buf: Buffer, pubkey: Out) -> None:
    _require(pubkey_buf=pubkey_buf, pubkey=pubkey)
    _check_out(pubkey)
    pubkey.value = Handle(codec.deserialize_public_key(_read(pubkey_buf)), PUBLIC_KEY)


@_entry_point
def deserialize_privkey(privkey_buf: Buffer, privkey: Out) -> None:
    _require(privkey_buf=privkey_buf, privkey=privkey)
    _check_out(privkey)
    privkey.value = Handle(codec.deserialize_private_key(_read(privkey_buf)), PRIVATE_KEY)


@_entry_point
def deserialize_sig(sig_buf: Buffer, sig: Out) -> None:
    _require(sig_buf=sig_buf, sig=sig)
    _check_out(sig)
    sig.value = Handle(codec.deserialize_signature(_read(sig_buf)), SIGNATURE)


# ── handle lifecycle ────────────────────────────────────────────────────

@_entry_point
def clone_handle(handle: Handle, out: Out) -> None:
    """Independent, caller-owned copy of *handle* (borrowed or not)."""
    _require(handle=handle, out=out)
    _check_out(out)
    if not isinstance(handle, Handle):
        raise MalformedBufferError(f"expected handle, got {type(handle).__name__}")
    out.value = Handle(_deref(handle, handle.kind), handle.kind)


def _destroy(handle: Handle, kind: str) -> None:
    _require(handle=handle)
    _deref(handle, kind)
    if handle.borrowed:
        raise MalformedBufferError(f"borrowed {kind} handle is released with its parent")
    handle._release()


@_entry_point
def destroy_token(token: Handle) -> None:
    _destroy(token, TOKEN)


@_entry_point
def destroy_keys(keys: Handle) -> None:
    _destroy(keys, KEYS)


@_entry_point
def destroy_keypair(keypair: Handle) -> None:
    _destroy(keypair, KEYPAIR)


@_entry_point
def destroy_privkey(private_key: Handle) -> None:
    _destroy(private_key, PRIVATE_KEY)


@_entry_point
def destroy_pubkey(public_key: Handle) -> None:
    _destroy(public_key, PUBLIC_KEY)


@_entry_point
def destroy_sig(signature: Handle) -> None:
    _destroy(signature, SIGNATURE)


@_entry_point
def free_vector(buf: Buffer) -> None:
    """Release a buffer the library transferred to the caller."""
    _require(buf=buf)
    if not isinstance(buf, Buffer) or not buf.owned:
        raise MalformedBufferError("only library-owned buffers can be freed")
    if buf.released:
        raise NullInputError("buffer already freed")
    buf._view = None

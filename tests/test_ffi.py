"""
Boundary tests.  The general pattern:

1. create an empty ``Out``
2. pass it to the entry point
3. assert that the call returned True
4. read ``Out.value``
"""

import pytest

from blind_threshold_bls import ffi
from blind_threshold_bls.codec import PRIVKEY_LEN, PUBKEY_LEN
from blind_threshold_bls.ffi import Buffer, Handle, Out

SEED = b"a" * 59
USER_SEED = b"b" * 59
MSG = bytes([1, 2, 3, 4, 6])


def _keys(n=5, t=3):
    out = Out()
    assert ffi.threshold_keygen(n, t, Buffer.borrow(SEED), out)
    return out.value


def _keypair():
    out = Out()
    assert ffi.keygen(Buffer.borrow(SEED), out)
    return out.value


def _blind():
    blinded, token = Out(), Out()
    assert ffi.blind(Buffer.borrow(MSG), Buffer.borrow(USER_SEED), blinded, token)
    return blinded.value, token.value


@pytest.mark.parametrize("should_blind", [True, False])
def test_threshold_verify(should_blind):
    partial_sign_fn = ffi.partial_sign_blinded_message if should_blind else ffi.partial_sign
    partial_verify_fn = (
        ffi.partial_verify_blind_signature if should_blind else ffi.partial_verify
    )
    keys = _keys()
    assert ffi.num_shares(keys) == 5

    if should_blind:
        message_to_sign, token = _blind()
    else:
        message_to_sign, token = Buffer.borrow(MSG), None

    # partially sign
    sigs = []
    for i in range(3):
        out = Out()
        assert partial_sign_fn(ffi.share_ptr(keys, i), message_to_sign, out)
        sigs.append(out.value)

    # verify the partials and concatenate them
    polynomial = ffi.polynomial_ptr(keys)
    for sig in sigs:
        assert partial_verify_fn(polynomial, message_to_sign, sig)
    concatenated = Buffer.borrow(b"".join(bytes(s) for s in sigs))

    asig = Out()
    assert ffi.combine(3, concatenated, asig)
    asig = asig.value

    if should_blind:
        unblinded = Out()
        assert ffi.unblind(asig, token, unblinded)
        asig = unblinded.value

    assert ffi.verify(ffi.threshold_public_key_ptr(keys), Buffer.borrow(MSG), asig)

    for sig in sigs:
        assert ffi.free_vector(sig)
    if should_blind:
        assert ffi.destroy_token(token)
    assert ffi.destroy_keys(keys)


@pytest.mark.parametrize("should_blind", [True, False])
def test_verify(should_blind):
    sign_fn = ffi.sign_blinded_message if should_blind else ffi.sign
    keypair = _keypair()

    if should_blind:
        message_to_sign, token = _blind()
    else:
        message_to_sign, token = Buffer.borrow(MSG), None

    sig = Out()
    assert sign_fn(ffi.private_key_ptr(keypair), message_to_sign, sig)
    sig = sig.value

    if should_blind:
        assert ffi.verify_blind_signature(ffi.public_key_ptr(keypair), message_to_sign, sig)
        unblinded = Out()
        assert ffi.unblind(sig, token, unblinded)
        sig = unblinded.value

    assert ffi.verify(ffi.public_key_ptr(keypair), Buffer.borrow(MSG), sig)
    assert not ffi.verify(ffi.public_key_ptr(keypair), Buffer.borrow(MSG + b"\x00"), sig)


def test_combine_with_too_few_partials_fails():
    keys = _keys()
    sigs = []
    for i in range(2):
        out = Out()
        assert ffi.partial_sign(ffi.share_ptr(keys, i), Buffer.borrow(MSG), out)
        sigs.append(bytes(out.value))
    asig = Out()
    assert not ffi.combine(3, Buffer.borrow(b"".join(sigs)), asig)
    assert asig.value is None


def test_private_key_serialization():
    keypair = _keypair()
    privkey = ffi.private_key_ptr(keypair)
    buf = Out()
    assert ffi.serialize_privkey(privkey, buf)
    assert len(buf.value) == PRIVKEY_LEN

    de = Out()
    assert ffi.deserialize_privkey(buf.value, de)
    assert de.value.kind == ffi.PRIVATE_KEY

    again = Out()
    assert ffi.serialize_privkey(de.value, again)
    assert bytes(again.value) == bytes(buf.value)
    assert ffi.destroy_privkey(de.value)


def test_public_key_serialization():
    keypair = _keypair()
    buf = Out()
    assert ffi.serialize_pubkey(ffi.public_key_ptr(keypair), buf)
    assert len(buf.value) == PUBKEY_LEN

    de = Out()
    assert ffi.deserialize_pubkey(buf.value, de)
    again = Out()
    assert ffi.serialize_pubkey(de.value, again)
    assert bytes(again.value) == bytes(buf.value)
    assert ffi.destroy_pubkey(de.value)


def test_signature_serialization():
    keypair = _keypair()
    sig = Out()
    assert ffi.sign(ffi.private_key_ptr(keypair), Buffer.borrow(MSG), sig)
    de = Out()
    assert ffi.deserialize_sig(sig.value, de)
    again = Out()
    assert ffi.serialize_sig(de.value, again)
    assert bytes(again.value) == bytes(sig.value)
    assert ffi.destroy_sig(de.value)


def test_deserialize_wrong_length_fails():
    out = Out()
    assert not ffi.deserialize_pubkey(Buffer.borrow(b"\x00" * 10), out)
    assert not ffi.deserialize_privkey(Buffer.borrow(b"\x00" * 31), out)
    assert not ffi.deserialize_sig(Buffer.borrow(b""), out)
    assert out.value is None


# ── null inputs ─────────────────────────────────────────────────────────

def test_null_inputs_fail():
    keypair = _keypair()
    sk = ffi.private_key_ptr(keypair)
    msg = Buffer.borrow(MSG)
    out = Out()
    assert not ffi.sign(None, msg, out)
    assert not ffi.sign(sk, None, out)
    assert not ffi.sign(sk, msg, None)
    assert not ffi.blind(None, Buffer.borrow(USER_SEED), Out(), Out())
    assert not ffi.blind(msg, Buffer.borrow(USER_SEED), None, Out())
    assert not ffi.verify(None, msg, msg)
    assert not ffi.combine(3, None, out)
    assert not ffi.keygen(None, out)
    assert not ffi.threshold_keygen(5, 3, Buffer.borrow(SEED), None)
    assert out.value is None


def test_outputs_untouched_on_failure():
    out = Out()
    assert not ffi.keygen(Buffer.borrow(b"short seed"), out)
    assert out.value is None

    blinded, token = Out(), Out()
    assert not ffi.blind(Buffer.borrow(MSG), Buffer.borrow(b"short"), blinded, token)
    assert blinded.value is None and token.value is None


def test_bad_threshold_parameters():
    out = Out()
    assert not ffi.threshold_keygen(3, 4, Buffer.borrow(SEED), out)
    assert out.value is None


# ── handle lifecycle ────────────────────────────────────────────────────

def test_wrong_handle_kind_fails():
    keypair = _keypair()
    out = Out()
    assert not ffi.sign(ffi.public_key_ptr(keypair), Buffer.borrow(MSG), out)
    assert not ffi.sign(keypair, Buffer.borrow(MSG), out)
    assert not ffi.destroy_keys(keypair)
    assert out.value is None


def test_borrowed_handles_die_with_parent():
    keys = _keys()
    share = ffi.share_ptr(keys, 0)
    polynomial = ffi.polynomial_ptr(keys)
    assert ffi.destroy_keys(keys)
    assert share.released and polynomial.released
    assert not ffi.partial_sign(share, Buffer.borrow(MSG), Out())
    assert ffi.share_ptr(keys, 0) is None
    assert ffi.num_shares(keys) == 0
    assert ffi.polynomial_ptr(keys) is None
    assert ffi.threshold_public_key_ptr(keys) is None


def test_borrowed_handles_cannot_be_destroyed_directly():
    keypair = _keypair()
    assert not ffi.destroy_pubkey(ffi.public_key_ptr(keypair))
    assert not ffi.destroy_privkey(ffi.private_key_ptr(keypair))
    assert ffi.destroy_keypair(keypair)


def test_share_ptr_out_of_range():
    keys = _keys()
    assert ffi.share_ptr(keys, 5) is None
    assert ffi.share_ptr(keys, -1) is None
    assert ffi.share_ptr(None, 0) is None


def test_clone_survives_parent():
    keypair = _keypair()
    clone = Out()
    assert ffi.clone_handle(ffi.public_key_ptr(keypair), clone)
    assert not clone.value.borrowed
    assert ffi.destroy_keypair(keypair)
    buf = Out()
    assert ffi.serialize_pubkey(clone.value, buf)
    assert ffi.destroy_pubkey(clone.value)


def test_use_after_destroy_reads_as_null():
    _, token = _blind()
    assert ffi.destroy_token(token)
    assert not ffi.destroy_token(token)
    assert not ffi.unblind(Buffer.borrow(b"\x00" * 96), token, Out())


def test_free_vector():
    blinded, token = _blind()
    assert blinded.owned
    assert ffi.free_vector(blinded)
    assert blinded.released
    assert not ffi.free_vector(blinded)
    # caller memory is never freed by the library
    assert not ffi.free_vector(Buffer.borrow(b"abc"))
    assert not ffi.free_vector(None)
    assert ffi.destroy_token(token)


def test_handle_repr_has_no_secrets():
    keypair = _keypair()
    assert repr(keypair) == "Handle(keypair, live)"
    assert isinstance(keypair, Handle)


def test_failure_is_logged(caplog):
    with caplog.at_level("DEBUG", logger="blind_threshold_bls.ffi"):
        assert not ffi.keygen(Buffer.borrow(b"short"), Out())
    assert "keygen failed" in caplog.text
    assert "TBLS_E003" in caplog.text

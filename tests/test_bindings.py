from concurrent.futures import ThreadPoolExecutor

from blind_threshold_bls import bindings
from blind_threshold_bls.signing import verify
from blind_threshold_bls.threshold import aggregate, partial_sign


def test_combine(keys, msg):
    partials = [partial_sign(s, msg) for s in keys.shares[:3]]
    sig = bindings.combine(3, b"".join(partials))
    assert sig == aggregate(3, partials)
    assert verify(keys.threshold_public_key, msg, sig)


def test_combine_failures(keys, msg):
    partials = [partial_sign(s, msg) for s in keys.shares[:2]]
    assert bindings.combine(3, b"".join(partials)) is None
    assert bindings.combine(2, b"".join(partials) + b"\x01") is None
    assert bindings.combine(3, None) is None


def test_combine_copies_its_input(keys, msg):
    flat = bytearray(b"".join(partial_sign(s, msg) for s in keys.shares[1:4]))
    expected = bindings.combine(3, bytes(flat))

    with ThreadPoolExecutor(max_workers=2) as pool:
        results = list(pool.map(lambda _: bindings.combine(3, flat), range(2)))
    assert results == [expected, expected]

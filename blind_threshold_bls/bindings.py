"""
Scripting binding: aggregation only.

Runtimes that call into the library from worker threads get a single
``combine`` that takes and returns plain ``bytes``.  The input is copied
into an owned value before anything else happens, so no view into the
caller's memory ever reaches another thread.
"""

from __future__ import annotations

from typing import Optional

from . import ffi


def combine(threshold: int, signatures) -> Optional[bytes]:
    """
    Aggregate a flat buffer of partial signatures.

    Returns the 96-byte signature, or ``None`` on failure (too few
    partials, malformed chunk, ``None`` input).
    """
    if signatures is None:
        return None
    owned = bytes(signatures)
    out = ffi.Out()
    if not ffi.combine(threshold, ffi.Buffer.borrow(owned), out):
        return None
    result = bytes(out.value)
    ffi.free_vector(out.value)
    return result

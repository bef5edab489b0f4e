"""
Group arithmetic on BLS12-381 via ``py_ecc``.

Scalars live in Z_r (r = prime order of G1/G2).  Public keys and polynomial
commitments are G1 points; messages hash into G2 and signatures are G2
points, so verification is the pairing equation

    e(G1, σ)  ==  e(pk, H(m))

Install
-------
    pip install py_ecc>=6.0.0

References
----------
- draft-irtf-cfrg-pairing-friendly-curves  §4.2.1  BLS12-381
- draft-irtf-cfrg-bls-signature  §2.6  CoreVerify
"""

from __future__ import annotations

from typing import Iterable, List, Tuple

from py_ecc.bls.g2_primitives import (
    G1_to_pubkey,
    G2_to_signature,
    pubkey_to_G1,
    signature_to_G2,
    subgroup_check,
)
from py_ecc.optimized_bls12_381 import (
    FQ12,
    G1 as _G1,
    G2 as _G2,
    Z1,
    Z2,
    add,
    curve_order,
    eq,
    final_exponentiate,
    is_inf,
    multiply,
    neg,
    pairing,
)

# ── BLS12-381 constants ─────────────────────────────────────────────────
ORDER = curve_order
SCALAR_BYTES = 32
G1_BYTES = 48
G2_BYTES = 96


# ── Scalar  (Z_r arithmetic) ────────────────────────────────────────────
class Scalar:
    """Element of the scalar field  Z_r  where *r* = ``ORDER``."""

    __slots__ = ("_v",)

    def __init__(self, value: int) -> None:
        self._v = value % ORDER

    @classmethod
    def zero(cls) -> Scalar:
        return cls(0)

    @classmethod
    def one(cls) -> Scalar:
        return cls(1)

    @classmethod
    def from_bytes(cls, data: bytes) -> Scalar:
        if len(data) != SCALAR_BYTES:
            raise ValueError(f"need {SCALAR_BYTES} bytes, got {len(data)}")
        v = int.from_bytes(data, "big")
        if v >= ORDER:
            raise ValueError("scalar out of range")
        return cls(v)

    def to_bytes(self) -> bytes:
        return self._v.to_bytes(SCALAR_BYTES, "big")

    @property
    def value(self) -> int:
        return self._v

    def is_zero(self) -> bool:
        return self._v == 0

    def __add__(self, o: Scalar) -> Scalar:
        if not isinstance(o, Scalar):
            return NotImplemented
        return Scalar(self._v + o._v)

    def __sub__(self, o: Scalar) -> Scalar:
        if not isinstance(o, Scalar):
            return NotImplemented
        return Scalar(self._v - o._v)

    def __mul__(self, o):
        if isinstance(o, Scalar):
            return Scalar(self._v * o._v)
        if isinstance(o, Point):
            return o._smul(self)
        return NotImplemented

    def __rmul__(self, o):
        if isinstance(o, int):
            return Scalar(o * self._v)
        return NotImplemented

    def __neg__(self) -> Scalar:
        return Scalar(-self._v)

    def __truediv__(self, o: Scalar) -> Scalar:
        if not isinstance(o, Scalar):
            return NotImplemented
        return self * o.inv()

    def inv(self) -> Scalar:
        if self._v == 0:
            raise ZeroDivisionError("cannot invert zero scalar")
        return Scalar(pow(self._v, ORDER - 2, ORDER))

    def __eq__(self, o: object) -> bool:
        if isinstance(o, Scalar):
            return self._v == o._v
        if isinstance(o, int):
            return self._v == o % ORDER
        return False

    def __hash__(self) -> int:
        return hash(self._v)

    def __bool__(self) -> bool:
        return self._v != 0

    def __repr__(self) -> str:
        # never print secret material in full
        return "Scalar(…)"


# ── Point  (G1 or G2 element) ───────────────────────────────────────────
class Point:
    """
    Point in G1 or G2 of BLS12-381.

    Wraps a ``py_ecc`` projective point together with its group tag so that
    mixing groups (adding a public key to a signature, say) fails loudly
    instead of producing garbage.
    """

    __slots__ = ("_p", "_group")

    def __init__(self, p, group: int) -> None:
        if group not in (1, 2):
            raise ValueError(f"unknown group G{group}")
        self._p = p
        self._group = group

    # constructors -----------------------------------------------------------
    @classmethod
    def generator(cls, group: int) -> Point:
        return cls(_G1 if group == 1 else _G2, group)

    @classmethod
    def identity(cls, group: int) -> Point:
        return cls(Z1 if group == 1 else Z2, group)

    @classmethod
    def from_bytes(cls, data: bytes, group: int) -> Point:
        """
        Decode a compressed point and check subgroup membership.

        Raises ``ValueError`` on wrong length, off-curve encodings and
        points outside the prime-order subgroup.
        """
        width = G1_BYTES if group == 1 else G2_BYTES
        if len(data) != width:
            raise ValueError(f"G{group} point needs {width} bytes, got {len(data)}")
        if group == 1:
            p = pubkey_to_G1(bytes(data))
        else:
            p = signature_to_G2(bytes(data))
        if not subgroup_check(p):
            raise ValueError(f"point is not in the G{group} subgroup")
        return cls(p, group)

    # serialisation ----------------------------------------------------------
    def to_bytes(self) -> bytes:
        if self._group == 1:
            return bytes(G1_to_pubkey(self._p))
        return bytes(G2_to_signature(self._p))

    @property
    def group(self) -> int:
        return self._group

    def is_inf(self) -> bool:
        return is_inf(self._p)

    # group operations -------------------------------------------------------
    def _smul(self, s: Scalar) -> Point:
        return Point(multiply(self._p, s.value), self._group)

    def _check(self, o: Point) -> None:
        if o._group != self._group:
            raise TypeError(f"cannot combine G{self._group} with G{o._group}")

    def __neg__(self) -> Point:
        return Point(neg(self._p), self._group)

    def __add__(self, o: Point) -> Point:
        if not isinstance(o, Point):
            return NotImplemented
        self._check(o)
        return Point(add(self._p, o._p), self._group)

    def __sub__(self, o: Point) -> Point:
        return self + (-o)

    def __rmul__(self, s) -> Point:
        if isinstance(s, Scalar):
            return self._smul(s)
        if isinstance(s, int):
            return self._smul(Scalar(s))
        return NotImplemented

    def __eq__(self, o: object) -> bool:
        if not isinstance(o, Point) or o._group != self._group:
            return False
        return eq(self._p, o._p)

    def __hash__(self) -> int:
        return hash(self.to_bytes())

    def __repr__(self) -> str:
        if self.is_inf():
            return f"G{self._group}(∞)"
        return f"G{self._group}(0x{self.to_bytes()[:8].hex()}…)"

    @staticmethod
    def sum_points(points: Iterable[Point], group: int) -> Point:
        acc = Point.identity(group)
        for p in points:
            acc = acc + p
        return acc


# ── pairing ─────────────────────────────────────────────────────────────
def pairing_product_is_one(pairs: List[Tuple[Point, Point]]) -> bool:
    """
    Check  Π e(P_i, Q_i) == 1  for (G1, G2) pairs with one final
    exponentiation.
    """
    acc = FQ12.one()
    for p, q in pairs:
        if p.group != 1 or q.group != 2:
            raise TypeError("pairing takes (G1, G2) pairs")
        acc = acc * pairing(q._p, p._p, final_exponentiate=False)
    return final_exponentiate(acc) == FQ12.one()


# ── module-level generators ─────────────────────────────────────────────
G1 = Point.generator(1)
G2 = Point.generator(2)

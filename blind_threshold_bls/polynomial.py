"""
Polynomial arithmetic and Lagrange interpolation over Z_r.

A (t, n) sharing is a random polynomial

    f(x) = a_0 + a_1 x + … + a_{t-1} x^{t-1}

whose constant term a_0 is the secret.  Share *i* (0-based) is
f(i + 1); x = 0 is never handed out.  The public side is the Feldman
commitment  C_j = a_j · G1.

Interpolation works equally in the exponent: given evaluations
y_i = f(x_i) · P  for some group element P, the same Lagrange weights
recover  f(0) · P.  That is how partial signatures are combined without
reconstructing the private key.

Indices used throughout this module are *share indices*; the x-coordinate
for share index *i* is ``i + 1`` (see :func:`share_x`).
"""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from .curve import Scalar, Point, G1
from .rng import ChaChaRng


# ── polynomial representation ───────────────────────────────────────────
#  coeffs[i] = a_i   so  f(x) = a_0 + a_1 x + a_2 x^2 + …


def share_x(index: int) -> Scalar:
    """x-coordinate at which share *index* evaluates the polynomial."""
    if index < 0:
        raise ValueError("share index must be ≥ 0")
    return Scalar(index + 1)


def sample_polynomial(degree: int, rng: ChaChaRng) -> List[Scalar]:
    """
    Draw ``degree + 1`` coefficients from *rng*, constant term first.

    Deterministic for a given generator state.
    """
    if degree < 0:
        raise ValueError("degree must be ≥ 0")
    return [rng.random_scalar() for _ in range(degree + 1)]


def evaluate(coeffs: Sequence[Scalar], x: Scalar) -> Scalar:
    """Evaluate f(x) via Horner's method."""
    if not coeffs:
        return Scalar.zero()
    result = coeffs[-1]
    for c in reversed(coeffs[:-1]):
        result = result * x + c
    return result


def commit_polynomial(coeffs: Sequence[Scalar]) -> List[Point]:
    """Feldman commitment:  C_j = a_j · G1."""
    return [c * G1 for c in coeffs]


def evaluate_public(commitments: Sequence[Point], x: Scalar) -> Point:
    """
    Evaluate the committed polynomial in the exponent:
    Σ_j C_j · x^j  =  f(x) · G1.  Horner again, with point accumulation.
    """
    if not commitments:
        raise ValueError("empty commitment")
    result = commitments[-1]
    for c in reversed(commitments[:-1]):
        result = (x * result) + c
    return result


# ── Lagrange interpolation at x = 0 ─────────────────────────────────────

def batch_inverse(scalars: List[Scalar]) -> List[Scalar]:
    """
    Invert every element with one field inversion (Montgomery's trick).

    Raises ``ZeroDivisionError`` if any element is zero.
    """
    if not scalars:
        return []
    prefix: List[Scalar] = []
    acc = Scalar.one()
    for s in scalars:
        acc = acc * s
        prefix.append(acc)

    inv_acc = acc.inv()
    out = [Scalar.zero()] * len(scalars)
    for i in range(len(scalars) - 1, 0, -1):
        out[i] = prefix[i - 1] * inv_acc
        inv_acc = inv_acc * scalars[i]
    out[0] = inv_acc
    return out


def lagrange_coefficients(xs: Sequence[Scalar]) -> List[Scalar]:
    r"""
    Weights  λ_i  with  f(0) = Σ λ_i f(x_i):

    .. math::
        \lambda_i = \prod_{j \ne i} \frac{x_j}{x_j - x_i}

    The x-coordinates must be pairwise distinct and non-zero.
    """
    nums: List[Scalar] = []
    dens: List[Scalar] = []
    for i, xi in enumerate(xs):
        num = Scalar.one()
        den = Scalar.one()
        for j, xj in enumerate(xs):
            if i == j:
                continue
            num = num * xj
            den = den * (xj - xi)
        nums.append(num)
        dens.append(den)
    return [n * d for n, d in zip(nums, batch_inverse(dens))]


def lagrange_coefficient(target_index: int, indices: Sequence[int]) -> Scalar:
    """Single weight for share *target_index* within the set *indices*."""
    if target_index not in indices:
        raise ValueError(f"target index {target_index} not in set")
    xs = [share_x(i) for i in indices]
    return lagrange_coefficients(xs)[list(indices).index(target_index)]


def _select(threshold: int, evals: Sequence[Tuple[int, object]]) -> Dict[int, object]:
    """
    Sort by index and keep the first *threshold* evaluations.

    A repeated index overwrites the earlier entry, so duplicates leave
    fewer than *threshold* points behind and the result is simply wrong.
    """
    picked: Dict[int, object] = {}
    for idx, value in sorted(evals, key=lambda e: e[0])[:threshold]:
        picked[idx] = value
    return picked


def recover_scalar(threshold: int, evals: Sequence[Tuple[int, Scalar]]) -> Scalar:
    """Recover f(0) from ``(share_index, f(share_x(index)))`` pairs."""
    picked = _select(threshold, evals)
    xs = [share_x(i) for i in picked]
    lambdas = lagrange_coefficients(xs)
    total = Scalar.zero()
    for lam, value in zip(lambdas, picked.values()):
        total = total + lam * value
    return total


def recover_point(threshold: int, evals: Sequence[Tuple[int, Point]]) -> Point:
    """Recover f(0)·P from ``(share_index, f(share_x(index))·P)`` pairs."""
    picked = _select(threshold, evals)
    if not picked:
        raise ValueError("nothing to interpolate")
    xs = [share_x(i) for i in picked]
    lambdas = lagrange_coefficients(xs)
    points = [lam * p for lam, p in zip(lambdas, picked.values())]
    return Point.sum_points(points, points[0].group)

"""
Vectors of polynomials

A vector is a plain list of Poly (or NTTPoly) of length k or l. Transform and
multiplication steps on vectors go through the accelerator; this module holds
the coefficient-wise steps the orchestrator performs itself.
"""

from typing import List, Tuple
from .poly import Poly, _PolyBase
from .rounding import poly_make_hint, poly_use_hint

PolyVec = List[_PolyBase]


def vec_add(a: PolyVec, b: PolyVec) -> PolyVec:
    """Add two vectors of polynomials"""
    return [a[i].add(b[i]) for i in range(len(a))]


def vec_sub(a: PolyVec, b: PolyVec) -> PolyVec:
    """Subtract two vectors of polynomials"""
    return [a[i].sub(b[i]) for i in range(len(a))]


def vec_reduce(v: PolyVec) -> PolyVec:
    return [p.reduce() for p in v]


def vec_caddq(v: PolyVec) -> PolyVec:
    return [p.caddq() for p in v]


def vec_shiftl(v: List[Poly]) -> List[Poly]:
    return [p.shiftl() for p in v]


def vec_chknorm(v: List[Poly], bound: int) -> bool:
    """True if any polynomial of the vector fails the norm check"""
    return any(p.chknorm(bound) for p in v)


def vec_power2round(v: List[Poly]) -> Tuple[List[Poly], List[Poly]]:
    """Apply Power2Round to vector of polynomials"""
    v1 = []
    v0 = []
    for p in v:
        p1, p0 = p.power2round()
        v1.append(p1)
        v0.append(p0)
    return v1, v0


def vec_decompose(v: List[Poly], gamma2: int) -> Tuple[List[Poly], List[Poly]]:
    """Apply Decompose to vector of polynomials"""
    v1 = []
    v0 = []
    for p in v:
        p1, p0 = p.decompose(gamma2)
        v1.append(p1)
        v0.append(p0)
    return v1, v0


def vec_make_hint(v0: List[Poly], v1: List[Poly], gamma2: int) -> Tuple[List[Poly], int]:
    """Make hints for vector, returns (hint_vec, total count)"""
    h = []
    total = 0
    for p0, p1 in zip(v0, v1):
        hi, count = poly_make_hint(p0.coeffs, p1.coeffs, gamma2)
        h.append(Poly(hi))
        total += count
    return h, total


def vec_use_hint(v: List[Poly], h: List[Poly], gamma2: int) -> List[Poly]:
    """Use hints to recover high bits for vector"""
    return [Poly(poly_use_hint(v[i].coeffs, h[i].coeffs, gamma2)) for i in range(len(v))]

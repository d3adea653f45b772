"""
Rounding and hint functions for Dilithium

Coefficient-level Power2Round, Decompose, MakeHint, UseHint and the infinity
norm check, written with the integer formulas of the round-3 reference so
that high/low parts agree bit for bit with other implementations.
"""

from typing import List, Tuple
from .params import Q, N, D

_GAMMA2_88 = (Q - 1) // 88
_GAMMA2_32 = (Q - 1) // 32


def power2round(a: int) -> Tuple[int, int]:
    """
    Split a into (a1, a0) with a = a1 * 2^D + a0

    Input: a in [0, q)
    Output: a1, a0 with -2^(D-1) < a0 <= 2^(D-1)
    """
    a1 = (a + (1 << (D - 1)) - 1) >> D
    a0 = a - (a1 << D)
    return a1, a0


def decompose(a: int, gamma2: int) -> Tuple[int, int]:
    """
    Split a into (a1, a0) with a = a1 * 2 * gamma2 + a0 mod q

    Input: a in [0, q)
    Output: a1 in [0, (q-1)/(2*gamma2)), a0 centered around 0.
    When a - a0 would be q - 1 the high part wraps to 0 and a0 becomes a0 - 1,
    which the final conditional subtraction of q takes care of.
    """
    a1 = (a + 127) >> 7
    if gamma2 == _GAMMA2_32:
        a1 = (a1 * 1025 + (1 << 21)) >> 22
        a1 &= 15
    elif gamma2 == _GAMMA2_88:
        a1 = (a1 * 11275 + (1 << 23)) >> 24
        a1 ^= ((43 - a1) >> 31) & a1
    else:
        raise ValueError(f"Unsupported gamma2: {gamma2}")

    a0 = a - a1 * 2 * gamma2
    a0 -= (((Q - 1) // 2 - a0) >> 31) & Q
    return a1, a0


def make_hint(a0: int, a1: int, gamma2: int) -> int:
    """
    Hint bit telling whether the low part a0 overflows into the high bits

    Input: a0 low bits (signed), a1 high bits
    Output: 1 if the high bits of a1 * 2 * gamma2 + a0 differ from a1

    Set when a0 leaves [-gamma2, gamma2] or sits on -gamma2 while a1 is
    nonzero, computed with sign masks rather than comparisons.
    """
    d = a0 + gamma2
    above = (gamma2 - a0) >> 31
    below = d >> 31
    on_edge = ~((d | -d) >> 31)
    a1_set = (a1 | -a1) >> 31
    return (above | below | (on_edge & a1_set)) & 1


def use_hint(a: int, hint: int, gamma2: int) -> int:
    """
    Correct the high bits of a according to the hint

    Input: a in [0, q), hint in {0, 1}
    Output: corrected high bits
    """
    a1, a0 = decompose(a, gamma2)
    if hint == 0:
        return a1

    m = (Q - 1) // (2 * gamma2)  # 16 or 44 possible high parts
    if a0 > 0:
        return (a1 + 1) % m
    return (a1 - 1) % m


def chknorm(coeffs: List[int], bound: int) -> bool:
    """
    Check the infinity norm against a bound

    Input: coefficients with |a_i| <= (q-1)/2 after reduction
    Output: True (reject) if bound > (q-1)/8 or some |a_i| >= bound
    """
    if bound > (Q - 1) // 8:
        return True

    # Leaking which coefficient fails is fine: each one fails independently
    # of the secret.
    for a in coeffs:
        t = a >> 31
        t = a - (t & (2 * a))
        if t >= bound:
            return True
    return False


def poly_make_hint(a0: List[int], a1: List[int], gamma2: int) -> Tuple[List[int], int]:
    """Make hints for a polynomial, returns (hint, count of 1s)"""
    h = [make_hint(a0[i], a1[i], gamma2) for i in range(N)]
    return h, sum(h)


def poly_use_hint(a: List[int], h: List[int], gamma2: int) -> List[int]:
    """Use hints to recover high bits"""
    return [use_hint(a[i], h[i], gamma2) for i in range(N)]

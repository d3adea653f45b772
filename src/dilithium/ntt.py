"""
Number Theoretic Transform (NTT) for Dilithium

The NTT enables O(n log n) multiplication in R_q = Z_q[X]/(X^256 + 1).
Twiddle factors are kept in Montgomery form, so every butterfly multiplies
through montgomery_reduce and no coefficient ever needs a division.
"""

from typing import List
from .params import Q, N, ROOT_OF_UNITY
from .reduce import MONT, montgomery_reduce


def bitrev8(x: int) -> int:
    """8-bit reversal"""
    result = 0
    for _ in range(8):
        result = (result << 1) | (x & 1)
        x >>= 1
    return result


def _centered(x: int) -> int:
    x %= Q
    if x > Q // 2:
        x -= Q
    return x


# MONT * ROOT_OF_UNITY^BitRev8(k) mod q for k = 0, ..., 255, centered.
# Index 0 is never read by the butterflies.
ZETAS = [0] + [_centered(MONT * pow(ROOT_OF_UNITY, bitrev8(k), Q)) for k in range(1, N)]

# mont^2 / 256 mod q: undoes the 2^8 growth of the inverse transform and
# leaves the result multiplied by the Montgomery factor 2^32
F = 41978


def ntt(a: List[int]) -> None:
    """
    Forward NTT, in place

    Input coefficients need |a_i| < q. No modular reduction is performed
    after additions or subtractions, output is in bit-reversed order.
    """
    k = 0
    length = 128
    while length > 0:
        start = 0
        while start < N:
            k += 1
            zeta = ZETAS[k]
            for j in range(start, start + length):
                t = montgomery_reduce(zeta * a[j + length])
                a[j + length] = a[j] - t
                a[j] = a[j] + t
            start += 2 * length
        length >>= 1


def invntt_tomont(a: List[int]) -> None:
    """
    Inverse NTT with multiplication by the Montgomery factor 2^32, in place

    Input coefficients need |a_i| < q, output coefficients are bounded by q.
    invntt_tomont(ntt(x)) == MONT * x (mod q).
    """
    k = 256
    length = 1
    while length < N:
        start = 0
        while start < N:
            k -= 1
            zeta = -ZETAS[k]
            for j in range(start, start + length):
                t = a[j]
                a[j] = t + a[j + length]
                a[j + length] = montgomery_reduce(zeta * (t - a[j + length]))
            start += 2 * length
        length <<= 1

    for j in range(N):
        a[j] = montgomery_reduce(F * a[j])


def pointwise_montgomery(a: List[int], b: List[int]) -> List[int]:
    """
    Pointwise product of two NTT-domain polynomials

    c_i = a_i * b_i * 2^(-32) mod q
    """
    return [montgomery_reduce(a[i] * b[i]) for i in range(N)]

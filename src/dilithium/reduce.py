"""
Modular reduction primitives over Z_q

All functions work on Python ints that stand in for the 32-bit (and 64-bit
accumulator) registers of the reference code. None of them branch on the
coefficient value: corrections are applied with sign masks. Input bounds are
checked with ``assert`` and therefore vanish under ``python -O``.
"""

from .params import Q

MONT = -4186625  # 2^32 mod q, centered
QINV = 58728449  # q^(-1) mod 2^32

_MASK32 = 0xFFFFFFFF
_SIGN32 = 0x80000000


def montgomery_reduce(a: int) -> int:
    """
    Montgomery reduction

    Input: a with -2^31 * q <= a <= 2^31 * q
    Output: r = a * 2^(-32) mod q with -q < r < q
    """
    assert -(1 << 31) * Q <= a <= (1 << 31) * Q, "montgomery_reduce input out of range"
    # t = (int32)((int32)a * QINV)
    t = ((a & _MASK32) * QINV) & _MASK32
    t -= (t & _SIGN32) << 1
    return (a - t * Q) >> 32


def reduce32(a: int) -> int:
    """
    Barrett-style reduction without division

    Input: a <= 2^31 - 2^22 - 1
    Output: r = a mod q with -6283009 <= r <= 6283008
    """
    assert a <= (1 << 31) - (1 << 22) - 1, "reduce32 input out of range"
    t = (a + (1 << 22)) >> 23
    return a - t * Q


def caddq(a: int) -> int:
    """Add q if a is negative"""
    return a + ((a >> 31) & Q)


def freeze(a: int) -> int:
    """Standard representative r = a mod q in [0, q)"""
    return caddq(reduce32(a))

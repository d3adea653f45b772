"""
Domain-typed polynomials in R_q

A polynomial is either in the standard (coefficient) domain, ``Poly``, or in
the NTT domain, ``NTTPoly``. The only way to move between them is through the
transform methods, and arithmetic refuses to mix the two.
"""

from typing import Iterable, Tuple
from .params import N, D
from .reduce import reduce32, caddq, freeze
from .rounding import chknorm, power2round, decompose
from . import ntt as _ntt


class _PolyBase:
    """Fixed-length coefficient list shared by both domains"""

    __slots__ = ("coeffs",)

    def __init__(self, coeffs: Iterable[int] = None):
        if coeffs is None:
            self.coeffs = [0] * N
        else:
            self.coeffs = list(coeffs)
            if len(self.coeffs) != N:
                raise ValueError(f"Polynomial must have {N} coefficients, got {len(self.coeffs)}")

    def _check_same_domain(self, other: "_PolyBase") -> None:
        if type(other) is not type(self):
            raise TypeError(
                f"Cannot combine {type(self).__name__} with {type(other).__name__}"
            )

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.coeffs == other.coeffs

    def __repr__(self):
        head = ", ".join(str(c) for c in self.coeffs[:4])
        return f"{type(self).__name__}([{head}, ...])"

    def __len__(self):
        return N

    def __getitem__(self, i):
        return self.coeffs[i]

    def copy(self):
        return type(self)(self.coeffs)

    def reduce(self):
        """Reduce all coefficients to [-6283009, 6283008]"""
        return type(self)(reduce32(c) for c in self.coeffs)

    def caddq(self):
        """Add q to all negative coefficients"""
        return type(self)(caddq(c) for c in self.coeffs)

    def freeze(self):
        """Standard representatives in [0, q)"""
        return type(self)(freeze(c) for c in self.coeffs)

    def add(self, other):
        """Coefficient-wise addition, no modular reduction"""
        self._check_same_domain(other)
        return type(self)(a + b for a, b in zip(self.coeffs, other.coeffs))

    def sub(self, other):
        """Coefficient-wise subtraction, no modular reduction"""
        self._check_same_domain(other)
        return type(self)(a - b for a, b in zip(self.coeffs, other.coeffs))

    __add__ = add
    __sub__ = sub


class Poly(_PolyBase):
    """Polynomial in the standard domain"""

    __slots__ = ()

    def shiftl(self) -> "Poly":
        """Multiply by 2^D without modular reduction"""
        return Poly(c << D for c in self.coeffs)

    def ntt(self) -> "NTTPoly":
        """Forward transform, coefficients must satisfy |a_i| < q"""
        coeffs = list(self.coeffs)
        _ntt.ntt(coeffs)
        return NTTPoly(coeffs)

    def chknorm(self, bound: int) -> bool:
        """True if some coefficient has |a_i| >= bound (reject)"""
        return chknorm(self.coeffs, bound)

    def power2round(self) -> Tuple["Poly", "Poly"]:
        pairs = [power2round(c) for c in self.coeffs]
        return Poly(p[0] for p in pairs), Poly(p[1] for p in pairs)

    def decompose(self, gamma2: int) -> Tuple["Poly", "Poly"]:
        pairs = [decompose(c, gamma2) for c in self.coeffs]
        return Poly(p[0] for p in pairs), Poly(p[1] for p in pairs)


class NTTPoly(_PolyBase):
    """Polynomial in the NTT domain"""

    __slots__ = ()

    def invntt_tomont(self) -> Poly:
        """Inverse transform, result multiplied by the Montgomery factor 2^32"""
        coeffs = list(self.coeffs)
        _ntt.invntt_tomont(coeffs)
        return Poly(coeffs)

    def pointwise_montgomery(self, other: "NTTPoly") -> "NTTPoly":
        """Pointwise product with the factor 2^(-32)"""
        self._check_same_domain(other)
        return NTTPoly(_ntt.pointwise_montgomery(self.coeffs, other.coeffs))


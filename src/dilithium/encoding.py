"""
Encoding functions for Dilithium keys and signatures

Fixed-width, least-significant-bit-first packing. Every packer has an exact
inverse; lengths follow from the parameter set alone.
"""

from typing import List, Tuple, Optional
from .params import (
    D, N, SEEDBYTES, CRHBYTES, POLYT1_PACKEDBYTES, POLYT0_PACKEDBYTES,
    DilithiumParams,
)
from .poly import Poly
from .errors import MalformedEncodingError
from .utils import simple_bit_pack, simple_bit_unpack, bit_pack, bit_unpack

_T1_BITS = 10
_T0_HALF = 1 << (D - 1)


# Polynomial-level packing
def polyeta_pack(a: Poly, params: DilithiumParams) -> bytes:
    """Coefficients in [-eta, eta], stored as eta - a_i"""
    return bit_pack(a.coeffs, params.eta, params.eta_bits)


def polyeta_unpack(buf: bytes, params: DilithiumParams) -> Poly:
    return Poly(bit_unpack(buf, params.eta, params.eta_bits))


def polyt1_pack(a: Poly) -> bytes:
    """Coefficients in [0, 2^10)"""
    return simple_bit_pack(a.coeffs, _T1_BITS)


def polyt1_unpack(buf: bytes) -> Poly:
    return Poly(simple_bit_unpack(buf, _T1_BITS))


def polyt0_pack(a: Poly) -> bytes:
    """Coefficients in (-2^(D-1), 2^(D-1)], stored as 2^(D-1) - a_i in D bits"""
    return bit_pack(a.coeffs, _T0_HALF, D)


def polyt0_unpack(buf: bytes) -> Poly:
    return Poly(bit_unpack(buf, _T0_HALF, D))


def polyz_pack(a: Poly, params: DilithiumParams) -> bytes:
    """Coefficients in (-gamma1, gamma1], stored as gamma1 - a_i"""
    return bit_pack(a.coeffs, params.gamma1, params.z_bits)


def polyz_unpack(buf: bytes, params: DilithiumParams) -> Poly:
    return Poly(bit_unpack(buf, params.gamma1, params.z_bits))


def polyw1_pack(a: Poly, params: DilithiumParams) -> bytes:
    """High bits in [0, 44) (6 bits) or [0, 16) (4 bits)"""
    return simple_bit_pack(a.coeffs, params.w1_bits)


def polyw1_unpack(buf: bytes, params: DilithiumParams) -> Poly:
    return Poly(simple_bit_unpack(buf, params.w1_bits))


def w1_encode(w1: List[Poly], params: DilithiumParams) -> bytes:
    """Encode w1 for the challenge hash"""
    return b"".join(polyw1_pack(p, params) for p in w1)


# Hint vector
def hint_pack(h: List[Poly], params: DilithiumParams) -> bytes:
    """
    Pack hint polynomials into omega + k bytes

    The first omega bytes list the positions of the ones, polynomial after
    polynomial; byte omega + i is the running count after polynomial i.
    """
    omega, k = params.omega, params.k
    y = bytearray(omega + k)
    idx = 0
    for i in range(k):
        for j in range(N):
            if h[i].coeffs[j] != 0:
                y[idx] = j
                idx += 1
        y[omega + i] = idx
    return bytes(y)


def hint_unpack(y: bytes, params: DilithiumParams) -> Optional[List[Poly]]:
    """
    Inverse of hint_pack

    Output: hint polynomials, or None if the encoding is not the unique
    encoding of some hint vector with at most omega ones
    """
    omega, k = params.omega, params.k
    h = []
    idx = 0
    for i in range(k):
        coeffs = [0] * N
        end = y[omega + i]
        if end < idx or end > omega:
            return None  # Malformed hint

        first = idx
        while idx < end:
            # Indices must be strictly increasing
            if idx > first and y[idx] <= y[idx - 1]:
                return None
            coeffs[y[idx]] = 1
            idx += 1
        h.append(Poly(coeffs))

    # Unused index slots must be zero
    if any(y[idx:omega]):
        return None
    return h


# Keys and signatures
def pk_encode(rho: bytes, t1: List[Poly], params: DilithiumParams) -> bytes:
    """
    Encode public key

    Output: rho || t1, SEEDBYTES + k * 320 bytes
    """
    pk = bytearray(rho)
    for i in range(params.k):
        pk.extend(polyt1_pack(t1[i]))
    return bytes(pk)


def pk_decode(pk: bytes, params: DilithiumParams) -> Tuple[bytes, List[Poly]]:
    """Decode public key into (rho, t1)"""
    if len(pk) != params.pk_size:
        raise MalformedEncodingError(
            f"{params.name} public key must be {params.pk_size} bytes, got {len(pk)}"
        )
    rho = bytes(pk[:SEEDBYTES])

    t1 = []
    offset = SEEDBYTES
    for i in range(params.k):
        t1.append(polyt1_unpack(pk[offset:offset + POLYT1_PACKEDBYTES]))
        offset += POLYT1_PACKEDBYTES

    return rho, t1


def sk_encode(rho: bytes, key: bytes, tr: bytes,
              s1: List[Poly], s2: List[Poly], t0: List[Poly],
              params: DilithiumParams) -> bytes:
    """
    Encode secret key

    Output: rho || key || tr || s1 || s2 || t0
    """
    sk = bytearray()
    sk.extend(rho)  # 32 bytes
    sk.extend(key)  # 32 bytes
    sk.extend(tr)   # 48 bytes

    for i in range(params.l):
        sk.extend(polyeta_pack(s1[i], params))

    for i in range(params.k):
        sk.extend(polyeta_pack(s2[i], params))

    for i in range(params.k):
        sk.extend(polyt0_pack(t0[i]))

    return bytes(sk)


def sk_decode(sk: bytes, params: DilithiumParams) -> Tuple[bytes, bytes, bytes,
                                                           List[Poly], List[Poly], List[Poly]]:
    """
    Decode secret key

    Output: (rho, key, tr, s1, s2, t0)
    """
    if len(sk) != params.sk_size:
        raise MalformedEncodingError(
            f"{params.name} secret key must be {params.sk_size} bytes, got {len(sk)}"
        )
    offset = 0

    rho = bytes(sk[offset:offset + SEEDBYTES])
    offset += SEEDBYTES

    key = bytes(sk[offset:offset + SEEDBYTES])
    offset += SEEDBYTES

    tr = bytes(sk[offset:offset + CRHBYTES])
    offset += CRHBYTES

    eta_bytes = params.polyeta_packedbytes

    s1 = []
    for i in range(params.l):
        s1.append(polyeta_unpack(sk[offset:offset + eta_bytes], params))
        offset += eta_bytes

    s2 = []
    for i in range(params.k):
        s2.append(polyeta_unpack(sk[offset:offset + eta_bytes], params))
        offset += eta_bytes

    t0 = []
    for i in range(params.k):
        t0.append(polyt0_unpack(sk[offset:offset + POLYT0_PACKEDBYTES]))
        offset += POLYT0_PACKEDBYTES

    return rho, key, tr, s1, s2, t0


def sig_encode(c_tilde: bytes, z: List[Poly], h: List[Poly],
               params: DilithiumParams) -> bytes:
    """
    Encode signature

    Output: c_tilde || z || h
    """
    sigma = bytearray(c_tilde)  # SEEDBYTES

    for i in range(params.l):
        sigma.extend(polyz_pack(z[i], params))

    sigma.extend(hint_pack(h, params))

    return bytes(sigma)


def sig_decode(sigma: bytes, params: DilithiumParams) -> Optional[Tuple[bytes, List[Poly], List[Poly]]]:
    """
    Decode signature

    Output: (c_tilde, z, h) or None if malformed
    """
    if len(sigma) != params.sig_size:
        return None

    offset = 0
    c_tilde = bytes(sigma[offset:offset + SEEDBYTES])
    offset += SEEDBYTES

    z_bytes = params.polyz_packedbytes
    z = []
    for i in range(params.l):
        z.append(polyz_unpack(sigma[offset:offset + z_bytes], params))
        offset += z_bytes

    h = hint_unpack(sigma[offset:offset + params.polyvech_packedbytes], params)
    if h is None:
        return None

    return c_tilde, z, h

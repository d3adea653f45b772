"""
Sampling functions for Dilithium

Every sampler is a pure function of (seed, nonce): bytes are drawn from a
SHAKE stream keyed with seed || nonce and consumed strictly in stream order.
"""

from .params import Q, N, DilithiumParams
from .poly import Poly, NTTPoly
from .errors import SamplingError
from .utils import SHAKE256Stream, stream128, stream256, bit_unpack

# Ceiling on stream bytes per polynomial. Honest streams stay far below it
# (the uniform sampler needs about 770 bytes).
SAMPLER_MAX_BYTES = 1 << 16


def _check_ceiling(stream, what: str) -> None:
    if stream.bytes_read > SAMPLER_MAX_BYTES:
        raise SamplingError(f"{what} sampler exceeded {SAMPLER_MAX_BYTES} stream bytes")


def uniform(seed: bytes, nonce: int) -> NTTPoly:
    """
    Uniform polynomial with coefficients in [0, q)

    Input: seed in B^32, nonce < 2^16
    Output: polynomial read as an NTT-domain element (entry of matrix A)

    Takes 3-byte little-endian chunks of SHAKE128(seed || nonce), masks them to
    23 bits and rejects values >= q.
    """
    a = [0] * N
    xof = stream128(seed, nonce)
    j = 0

    while j < N:
        b = xof.read(3)
        t = (b[0] | (b[1] << 8) | (b[2] << 16)) & 0x7FFFFF
        if t < Q:
            a[j] = t
            j += 1
        else:
            _check_ceiling(xof, "uniform")

    return NTTPoly(a)


def uniform_eta(seed: bytes, nonce: int, eta: int) -> Poly:
    """
    Polynomial with coefficients in [-eta, eta]

    Input: seed in B^48, nonce < 2^16, eta in {2, 4}
    Output: a in S_eta

    Each stream byte yields two candidates, low nibble first.
    """
    if eta == 2:
        bound = 15
    elif eta == 4:
        bound = 9
    else:
        raise ValueError(f"Unsupported eta: {eta}")

    a = [0] * N
    xof = stream256(seed, nonce)
    j = 0

    while j < N:
        b = xof.read(1)[0]
        for t in (b & 0x0F, b >> 4):
            if t < bound and j < N:
                # 205 * t >> 10 == t // 5 for t < 15
                a[j] = eta - (t - (205 * t >> 10) * 5) if eta == 2 else eta - t
                j += 1
        _check_ceiling(xof, "uniform_eta")

    return Poly(a)


def uniform_gamma1(seed: bytes, nonce: int, params: DilithiumParams) -> Poly:
    """
    Polynomial with coefficients in (-gamma1, gamma1]

    Input: seed in B^48, nonce < 2^16
    Output: the first polyz_packedbytes stream bytes unpacked as a z polynomial
    """
    buf = stream256(seed, nonce).read(params.polyz_packedbytes)
    return Poly(bit_unpack(buf, params.gamma1, params.z_bits))


def challenge(seed: bytes, tau: int) -> Poly:
    """
    Challenge polynomial with exactly tau coefficients in {-1, 1}

    Input: seed in B^32 (c_tilde)
    Output: c in R

    The first 8 stream bytes are the sign bits (little-endian). Positions come
    from an inside-out Fisher-Yates shuffle: for i = N-tau .. N-1 a byte b <= i
    is drawn by rejection, c[i] takes c[b] and c[b] takes the next sign.
    """
    c = [0] * N
    xof = SHAKE256Stream(seed)

    signs = int.from_bytes(xof.read(8), "little")

    for i in range(N - tau, N):
        while True:
            b = xof.read(1)[0]
            if b <= i:
                break
            _check_ceiling(xof, "challenge")

        c[i] = c[b]
        c[b] = 1 - 2 * (signs & 1)
        signs >>= 1

    return Poly(c)

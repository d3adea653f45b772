"""
Accelerator interface for the heavy Dilithium steps

The orchestrator never calls the transform, the pointwise multiplication,
the samplers or the hash directly: it goes through an Accelerator. Any
implementation must return results bit-identical to SoftwareAccelerator.
Requests are synchronous, the caller blocks until each one completes.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Tuple

from .params import DilithiumParams
from .poly import Poly, NTTPoly
from . import sampling
from .utils import shake256

logger = logging.getLogger(__name__)

FORWARD = "forward"
INVERSE = "inverse"

SAMPLE_UNIFORM = "uniform"
SAMPLE_ETA = "eta"
SAMPLE_GAMMA1 = "gamma1"
SAMPLE_CHALLENGE = "challenge"


class Accelerator:
    """
    Base class for accelerator back ends

    Subclasses provide the four primitives; the vector and matrix helpers
    below are built on top of them.
    """

    def __init__(self, params: DilithiumParams):
        self.params = params

    def transform(self, poly, direction: str):
        """Poly -> NTTPoly (forward) or NTTPoly -> Poly with 2^32 factor (inverse)"""
        raise NotImplementedError

    def pointwise_multiply(self, a: NTTPoly, b: NTTPoly) -> NTTPoly:
        """Pointwise Montgomery product of two NTT-domain polynomials"""
        raise NotImplementedError

    def sample(self, seed: bytes, nonce: int, kind: str):
        """Sample one polynomial; the nonce is ignored for challenges"""
        raise NotImplementedError

    def hash(self, data: bytes, outlen: int) -> bytes:
        """SHAKE256 digest of data, outlen bytes"""
        raise NotImplementedError

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # Vector helpers
    def vec_ntt(self, v: List[Poly]) -> List[NTTPoly]:
        """Apply NTT to each polynomial in vector"""
        return [self.transform(p, FORWARD) for p in v]

    def vec_invntt_tomont(self, v: List[NTTPoly]) -> List[Poly]:
        """Apply inverse NTT to each polynomial in vector"""
        return [self.transform(p, INVERSE) for p in v]

    def vec_pointwise_poly_montgomery(self, c: NTTPoly, v: List[NTTPoly]) -> List[NTTPoly]:
        """Multiply every polynomial of v by c in the NTT domain"""
        return [self.pointwise_multiply(c, p) for p in v]

    def matrix_pointwise_montgomery(self, A: List[List[NTTPoly]],
                                    v: List[NTTPoly]) -> List[NTTPoly]:
        """
        Multiply matrix by vector in NTT domain

        Row i is the sum over j of A[i][j] * v[j], accumulated without
        intermediate reduction.
        """
        result = []
        for row in A:
            acc = self.pointwise_multiply(row[0], v[0])
            for j in range(1, len(v)):
                acc = acc.add(self.pointwise_multiply(row[j], v[j]))
            result.append(acc)
        return result

    # Expansion from seeds
    def expand_matrix(self, rho: bytes) -> List[List[NTTPoly]]:
        """
        Expand seed rho to the k x l matrix A in NTT domain

        Entry (i, j) uses nonce (i << 8) + j.
        """
        k, l = self.params.k, self.params.l
        return [[self.sample(rho, (i << 8) + j, SAMPLE_UNIFORM) for j in range(l)]
                for i in range(k)]

    def expand_s(self, rho_prime: bytes) -> Tuple[List[Poly], List[Poly]]:
        """
        Expand seed to secret vectors s1 (nonces 0..l-1) and s2 (nonces l..l+k-1)
        """
        k, l = self.params.k, self.params.l
        s1 = [self.sample(rho_prime, i, SAMPLE_ETA) for i in range(l)]
        s2 = [self.sample(rho_prime, l + i, SAMPLE_ETA) for i in range(k)]
        return s1, s2

    def expand_mask(self, rho_prime: bytes, kappa: int) -> List[Poly]:
        """
        Masking vector y for signing attempt kappa

        Polynomial i uses nonce l * kappa + i, truncated to 16 bits.
        """
        l = self.params.l
        return [self.sample(rho_prime, (l * kappa + i) & 0xFFFF, SAMPLE_GAMMA1)
                for i in range(l)]


class SoftwareAccelerator(Accelerator):
    """Pure-Python implementation, the reference for every other back end"""

    def transform(self, poly, direction: str):
        if direction == FORWARD:
            if not isinstance(poly, Poly):
                raise TypeError(f"Forward transform needs a Poly, got {type(poly).__name__}")
            return poly.ntt()
        if direction == INVERSE:
            if not isinstance(poly, NTTPoly):
                raise TypeError(f"Inverse transform needs an NTTPoly, got {type(poly).__name__}")
            return poly.invntt_tomont()
        raise ValueError(f"Unknown transform direction: {direction}")

    def pointwise_multiply(self, a: NTTPoly, b: NTTPoly) -> NTTPoly:
        return a.pointwise_montgomery(b)

    def sample(self, seed: bytes, nonce: int, kind: str):
        params = self.params
        if kind == SAMPLE_UNIFORM:
            return sampling.uniform(seed, nonce)
        if kind == SAMPLE_ETA:
            return sampling.uniform_eta(seed, nonce, params.eta)
        if kind == SAMPLE_GAMMA1:
            return sampling.uniform_gamma1(seed, nonce, params)
        if kind == SAMPLE_CHALLENGE:
            return sampling.challenge(seed, params.tau)
        raise ValueError(f"Unknown sample kind: {kind}")

    def hash(self, data: bytes, outlen: int) -> bytes:
        return shake256(data, outlen)


class OffloadAccelerator(Accelerator):
    """
    Runs every primitive on a dedicated worker and waits for it

    Models an external device with a synchronous request/response contract:
    one worker, one outstanding request at a time. The work itself is
    delegated to ``backend`` (SoftwareAccelerator by default).
    """

    def __init__(self, params: DilithiumParams, backend: Accelerator = None):
        super().__init__(params)
        self.backend = backend if backend is not None else SoftwareAccelerator(params)
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="dilithium-offload")
        self.requests = 0
        logger.debug("Offload accelerator started for %s", params.name)

    def _call(self, fn, *args):
        self.requests += 1
        return self._executor.submit(fn, *args).result()

    def transform(self, poly, direction: str):
        return self._call(self.backend.transform, poly, direction)

    def pointwise_multiply(self, a: NTTPoly, b: NTTPoly) -> NTTPoly:
        return self._call(self.backend.pointwise_multiply, a, b)

    def sample(self, seed: bytes, nonce: int, kind: str):
        return self._call(self.backend.sample, seed, nonce, kind)

    def hash(self, data: bytes, outlen: int) -> bytes:
        return self._call(self.backend.hash, data, outlen)

    def close(self) -> None:
        self._executor.shutdown(wait=True)
        self.backend.close()
        logger.debug("Offload accelerator closed after %d requests", self.requests)

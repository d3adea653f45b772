"""
CRYSTALS-Dilithium Core Implementation (round 3)

This module implements the main Dilithium operations:
- Key Generation
- Signing (deterministic or randomized, rejection loop)
- Verification
- Attached signatures (signed message = signature || message)
"""

import hmac
import logging
import os
from typing import Callable, Optional, Tuple

from .params import (
    SEEDBYTES, CRHBYTES, DilithiumParams,
    DILITHIUM2_PARAMS, DILITHIUM3_PARAMS, DILITHIUM5_PARAMS,
)
from .accelerator import Accelerator, SoftwareAccelerator, FORWARD, SAMPLE_CHALLENGE
from .encoding import (
    pk_encode, pk_decode, sk_encode, sk_decode, sig_encode, sig_decode, w1_encode,
)
from .errors import EntropyError, MalformedEncodingError, SigningAttemptsExceeded
from .polyvec import (
    vec_add, vec_sub, vec_reduce, vec_caddq, vec_shiftl, vec_chknorm,
    vec_power2round, vec_decompose, vec_make_hint, vec_use_hint,
)

logger = logging.getLogger(__name__)

# Expected attempts are 4.25 / 5.1 / 3.85 for modes 2 / 3 / 5
DEFAULT_MAX_ATTEMPTS = 1000


def _as_bytes(data) -> bytes:
    """Copy a bytes-like object, TypeError for anything else (ints included)"""
    return bytes(memoryview(data))


class Dilithium:
    """
    CRYSTALS-Dilithium Digital Signature Algorithm

    One instance per parameter set. Transforms, pointwise products, sampling
    and hashing are delegated to ``accelerator`` (pure software by default).
    """

    def __init__(self, params: DilithiumParams,
                 accelerator: Optional[Accelerator] = None,
                 max_attempts: int = DEFAULT_MAX_ATTEMPTS,
                 randombytes: Callable[[int], bytes] = os.urandom,
                 randomized: bool = False):
        """Initialize Dilithium with given parameter set"""
        self.params = params
        self.accelerator = accelerator if accelerator is not None else SoftwareAccelerator(params)
        if self.accelerator.params != params:
            raise ValueError(
                f"Accelerator configured for {self.accelerator.params.name}, not {params.name}"
            )
        self.max_attempts = max_attempts
        self.randomized = randomized
        self._randombytes = randombytes
        logger.debug("Dilithium instance for %s using %s",
                     params.name, type(self.accelerator).__name__)

    def _random(self, n: int) -> bytes:
        try:
            buf = self._randombytes(n)
        except (OSError, NotImplementedError) as e:
            raise EntropyError(f"Randomness source failed: {e}") from e
        if buf is None or len(buf) != n:
            raise EntropyError(f"Randomness source returned {0 if buf is None else len(buf)} bytes, wanted {n}")
        return bytes(buf)

    def keygen(self, seed: Optional[bytes] = None) -> Tuple[bytes, bytes]:
        """
        Generate public/private key pair

        Input: seed (optional 32-byte seed for deterministic generation)
        Output: (pk, sk) public and private keys
        """
        if seed is None:
            seed = self._random(SEEDBYTES)
        seed = _as_bytes(seed)
        if len(seed) != SEEDBYTES:
            raise MalformedEncodingError(f"Seed must be {SEEDBYTES} bytes")

        return self._keygen_internal(seed)

    def _keygen_internal(self, seed: bytes) -> Tuple[bytes, bytes]:
        accel = self.accelerator
        params = self.params

        # Step 1: Expand seed to (rho, rho', key)
        seedbuf = accel.hash(seed, 2 * SEEDBYTES + CRHBYTES)
        rho = seedbuf[:SEEDBYTES]
        rho_prime = seedbuf[SEEDBYTES:SEEDBYTES + CRHBYTES]
        key = seedbuf[SEEDBYTES + CRHBYTES:]

        # Step 2: Expand matrix A in NTT domain
        A_hat = accel.expand_matrix(rho)

        # Step 3: Sample short vectors s1, s2
        s1, s2 = accel.expand_s(rho_prime)

        # Step 4: t = A*s1 + s2
        s1_hat = accel.vec_ntt(s1)
        t = accel.matrix_pointwise_montgomery(A_hat, s1_hat)
        t = vec_reduce(t)
        t = accel.vec_invntt_tomont(t)
        t = vec_add(t, s2)

        # Step 5: Extract t1 and write public key
        t = vec_caddq(t)
        t1, t0 = vec_power2round(t)
        pk = pk_encode(rho, t1, params)

        # Step 6: tr = CRH(pk), write secret key
        tr = accel.hash(pk, CRHBYTES)
        sk = sk_encode(rho, key, tr, s1, s2, t0, params)

        logger.debug("Generated %s key pair", params.name)
        return pk, sk

    def sign(self, sk: bytes, message: bytes, randomized: Optional[bool] = None) -> bytes:
        """
        Sign a message

        Input:
            sk: Secret key
            message: Message to sign
            randomized: draw the masking seed from the randomness source
                instead of deriving it from key and message (defaults to the
                instance setting)

        Output: Signature sigma
        """
        params = self.params
        accel = self.accelerator
        gamma1, gamma2 = params.gamma1, params.gamma2
        beta, omega = params.beta, params.omega

        message = _as_bytes(message)
        rho, key, tr, s1, s2, t0 = sk_decode(_as_bytes(sk), params)

        # mu = CRH(tr || M)
        mu = accel.hash(tr + message, CRHBYTES)

        if randomized is None:
            randomized = self.randomized
        if randomized:
            rho_prime = self._random(CRHBYTES)
        else:
            rho_prime = accel.hash(key + mu, CRHBYTES)

        # Expand matrix and transform vectors
        A_hat = accel.expand_matrix(rho)
        s1_hat = accel.vec_ntt(s1)
        s2_hat = accel.vec_ntt(s2)
        t0_hat = accel.vec_ntt(t0)

        for kappa in range(self.max_attempts):
            # Sample intermediate vector y
            y = accel.expand_mask(rho_prime, kappa)

            # Matrix-vector multiplication w = A*y
            w = accel.matrix_pointwise_montgomery(A_hat, accel.vec_ntt(y))
            w = vec_reduce(w)
            w = accel.vec_invntt_tomont(w)

            # Decompose w and call the random oracle
            w = vec_caddq(w)
            w1, w0 = vec_decompose(w, gamma2)
            c_tilde = accel.hash(mu + w1_encode(w1, params), SEEDBYTES)
            c = accel.sample(c_tilde, 0, SAMPLE_CHALLENGE)
            c_hat = accel.transform(c, FORWARD)

            # Compute z, reject if it reveals secret
            z = accel.vec_invntt_tomont(accel.vec_pointwise_poly_montgomery(c_hat, s1_hat))
            z = vec_add(z, y)
            z = vec_reduce(z)
            if vec_chknorm(z, gamma1 - beta):
                logger.debug("Attempt %d rejected: z norm", kappa)
                continue

            # Check that subtracting cs2 does not change high bits of w and
            # low bits do not reveal secret information
            cs2 = accel.vec_invntt_tomont(accel.vec_pointwise_poly_montgomery(c_hat, s2_hat))
            w0 = vec_sub(w0, cs2)
            w0 = vec_reduce(w0)
            if vec_chknorm(w0, gamma2 - beta):
                logger.debug("Attempt %d rejected: r0 norm", kappa)
                continue

            # Compute hints for w1
            ct0 = accel.vec_invntt_tomont(accel.vec_pointwise_poly_montgomery(c_hat, t0_hat))
            ct0 = vec_reduce(ct0)
            if vec_chknorm(ct0, gamma2):
                logger.debug("Attempt %d rejected: ct0 norm", kappa)
                continue

            w0 = vec_add(w0, ct0)
            h, hints_count = vec_make_hint(w0, w1, gamma2)
            if hints_count > omega:
                logger.debug("Attempt %d rejected: %d hints", kappa, hints_count)
                continue

            logger.debug("%s signature found after %d attempts", params.name, kappa + 1)
            return sig_encode(c_tilde, z, h, params)

        raise SigningAttemptsExceeded(self.max_attempts)

    def verify(self, pk: bytes, message: bytes, sigma: bytes) -> bool:
        """
        Verify a signature

        Input:
            pk: Public key
            message: Message
            sigma: Signature

        Output: True if valid, False otherwise. The reason for a rejection
        is not reported.
        """
        params = self.params
        accel = self.accelerator

        pk = _as_bytes(pk)
        message = _as_bytes(message)
        rho, t1 = pk_decode(pk, params)

        decoded = sig_decode(_as_bytes(sigma), params)
        if decoded is None:
            return False
        c_tilde, z, h = decoded

        if vec_chknorm(z, params.gamma1 - params.beta):
            return False

        # mu = CRH(CRH(pk) || M)
        mu = accel.hash(accel.hash(pk, CRHBYTES) + message, CRHBYTES)

        # Matrix-vector multiplication, w' = A*z - c*t1*2^d
        c = accel.sample(c_tilde, 0, SAMPLE_CHALLENGE)
        A_hat = accel.expand_matrix(rho)
        Az_hat = accel.matrix_pointwise_montgomery(A_hat, accel.vec_ntt(z))

        c_hat = accel.transform(c, FORWARD)
        t1_hat = accel.vec_ntt(vec_shiftl(t1))
        ct1_hat = accel.vec_pointwise_poly_montgomery(c_hat, t1_hat)

        w_prime = vec_sub(Az_hat, ct1_hat)
        w_prime = vec_reduce(w_prime)
        w_prime = accel.vec_invntt_tomont(w_prime)

        # Reconstruct w1
        w_prime = vec_caddq(w_prime)
        w1_prime = vec_use_hint(w_prime, h, params.gamma2)

        # Call random oracle and verify challenge
        c_tilde_prime = accel.hash(mu + w1_encode(w1_prime, params), SEEDBYTES)
        return hmac.compare_digest(c_tilde, c_tilde_prime)

    def sign_message(self, sk: bytes, message: bytes, randomized: Optional[bool] = None) -> bytes:
        """Signed message sigma || M"""
        message = _as_bytes(message)
        return self.sign(sk, message, randomized=randomized) + message

    def open(self, pk: bytes, signed_message: bytes) -> Optional[bytes]:
        """
        Verify a signed message

        Output: the message if the signature is valid, None otherwise
        """
        signed_message = _as_bytes(signed_message)
        sig_size = self.params.sig_size
        if len(signed_message) < sig_size:
            return None
        sigma = signed_message[:sig_size]
        message = signed_message[sig_size:]
        if not self.verify(pk, message, sigma):
            return None
        return message


# Convenience classes for specific parameter sets
class Dilithium2(Dilithium):
    """Dilithium2: NIST security level 2"""
    def __init__(self, **kwargs):
        super().__init__(DILITHIUM2_PARAMS, **kwargs)


class Dilithium3(Dilithium):
    """Dilithium3: NIST security level 3"""
    def __init__(self, **kwargs):
        super().__init__(DILITHIUM3_PARAMS, **kwargs)


class Dilithium5(Dilithium):
    """Dilithium5: NIST security level 5"""
    def __init__(self, **kwargs):
        super().__init__(DILITHIUM5_PARAMS, **kwargs)

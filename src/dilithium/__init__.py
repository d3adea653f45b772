"""
CRYSTALS-Dilithium Digital Signatures (round 3)

A pure-Python implementation of the lattice-based signature scheme in its
three security modes, with the transform, sampling and hashing steps
routed through a pluggable accelerator.

Usage:
    from dilithium import Dilithium3

    dsa = Dilithium3()
    pk, sk = dsa.keygen()
    sig = dsa.sign(sk, b"message")
    assert dsa.verify(pk, b"message", sig)
"""

import logging

from .dilithium import Dilithium, Dilithium2, Dilithium3, Dilithium5, DEFAULT_MAX_ATTEMPTS
from .params import (
    DilithiumParams,
    DILITHIUM2_PARAMS,
    DILITHIUM3_PARAMS,
    DILITHIUM5_PARAMS,
    get_params,
)
from .accelerator import Accelerator, SoftwareAccelerator, OffloadAccelerator
from .errors import (
    DilithiumError,
    MalformedEncodingError,
    EntropyError,
    SigningAttemptsExceeded,
    SamplingError,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "1.0.0"
__all__ = [
    # Signature scheme
    "Dilithium",
    "Dilithium2",
    "Dilithium3",
    "Dilithium5",
    "DEFAULT_MAX_ATTEMPTS",
    # Parameter sets
    "DilithiumParams",
    "DILITHIUM2_PARAMS",
    "DILITHIUM3_PARAMS",
    "DILITHIUM5_PARAMS",
    "get_params",
    # Accelerators
    "Accelerator",
    "SoftwareAccelerator",
    "OffloadAccelerator",
    # Errors
    "DilithiumError",
    "MalformedEncodingError",
    "EntropyError",
    "SigningAttemptsExceeded",
    "SamplingError",
]

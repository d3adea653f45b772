"""
Exceptions raised by the Dilithium implementation

Rejections inside the signing loop and failed verifications are not
exceptions: the former are retried, the latter return False.
"""


class DilithiumError(Exception):
    """Base class for all Dilithium errors"""


class MalformedEncodingError(DilithiumError, ValueError):
    """A key or seed buffer does not have the length of the parameter set"""


class EntropyError(DilithiumError, RuntimeError):
    """The randomness source failed or returned too few bytes"""


class SigningAttemptsExceeded(DilithiumError, RuntimeError):
    """The signing loop hit its safety ceiling without producing a signature"""

    def __init__(self, attempts: int):
        super().__init__(f"Signing failed: too many rejection attempts ({attempts})")
        self.attempts = attempts


class SamplingError(DilithiumError, RuntimeError):
    """A rejection sampler consumed more stream bytes than its ceiling allows"""

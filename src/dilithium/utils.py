"""
Utility functions for Dilithium: keyed SHAKE streams and bit packing
"""

from typing import List
from hashlib import shake_128, shake_256

from .params import N


# SHAKE functions
def shake256(data: bytes, output_len: int) -> bytes:
    """SHAKE256 XOF"""
    return shake_256(data).digest(output_len)


def _nonce_bytes(nonce: int) -> bytes:
    if not 0 <= nonce <= 0xFFFF:
        raise ValueError(f"Nonce must fit in 16 bits, got {nonce}")
    return bytes([nonce & 0xFF, nonce >> 8])


class _SHAKEStream:
    """Resumable XOF reader on top of hashlib's one-shot digest"""

    _factory = None
    _chunk = 1024

    def __init__(self, data: bytes):
        self._hasher = self._factory(data)
        self._buffer = b""
        self._total_read = 0

    @property
    def bytes_read(self) -> int:
        return self._total_read

    def read(self, n: int) -> bytes:
        """Read the next n bytes of the XOF output"""
        needed = self._total_read + n
        if len(self._buffer) < needed:
            self._buffer = self._hasher.digest(needed + self._chunk)
        result = self._buffer[self._total_read:needed]
        self._total_read = needed
        return result


class SHAKE128Stream(_SHAKEStream):
    """Streaming SHAKE128 XOF"""
    _factory = staticmethod(shake_128)


class SHAKE256Stream(_SHAKEStream):
    """Streaming SHAKE256 XOF"""
    _factory = staticmethod(shake_256)


def stream128(seed: bytes, nonce: int) -> SHAKE128Stream:
    """SHAKE128 stream keyed with seed || nonce (little-endian, 2 bytes)"""
    return SHAKE128Stream(seed + _nonce_bytes(nonce))


def stream256(seed: bytes, nonce: int) -> SHAKE256Stream:
    """SHAKE256 stream keyed with seed || nonce (little-endian, 2 bytes)"""
    return SHAKE256Stream(seed + _nonce_bytes(nonce))


def squeeze(key: bytes, domain_separator: int, n_bytes: int) -> bytes:
    """First n_bytes of the SHAKE256 stream for (key, domain_separator)"""
    return stream256(key, domain_separator).read(n_bytes)


# Bit packing, least significant bit first
def simple_bit_pack(w: List[int], b: int) -> bytes:
    """
    Pack N unsigned integers of b bits each

    Input: w in {0, ..., 2^b - 1}^N
    Output: N*b/8 bytes
    """
    acc = 0
    for i, coef in enumerate(w):
        acc |= coef << (b * i)
    return acc.to_bytes(N * b // 8, "little")


def simple_bit_unpack(z: bytes, b: int) -> List[int]:
    """Inverse of simple_bit_pack"""
    acc = int.from_bytes(z, "little")
    mask = (1 << b) - 1
    return [(acc >> (b * i)) & mask for i in range(N)]


def bit_pack(w: List[int], b: int, bits: int) -> bytes:
    """
    Pack signed integers in {b - 2^bits + 1, ..., b} as b - w_i

    Input: w with 0 <= b - w_i < 2^bits
    Output: N*bits/8 bytes
    """
    return simple_bit_pack([b - coef for coef in w], bits)


def bit_unpack(z: bytes, b: int, bits: int) -> List[int]:
    """Inverse of bit_pack"""
    return [b - v for v in simple_bit_unpack(z, bits)]

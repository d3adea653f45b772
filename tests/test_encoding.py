"""
Tests for fixed-width packing of polynomials, keys and signatures
"""

import pytest

from dilithium import (
    DILITHIUM2_PARAMS, DILITHIUM3_PARAMS, DILITHIUM5_PARAMS,
    MalformedEncodingError,
)
from dilithium.params import N, D, Q, POLYT1_PACKEDBYTES, POLYT0_PACKEDBYTES
from dilithium.poly import Poly
from dilithium.utils import simple_bit_pack, simple_bit_unpack, bit_pack, bit_unpack
from dilithium.encoding import (
    polyeta_pack, polyeta_unpack, polyt1_pack, polyt1_unpack,
    polyt0_pack, polyt0_unpack, polyz_pack, polyz_unpack,
    polyw1_pack, polyw1_unpack, w1_encode,
    hint_pack, hint_unpack, pk_encode, pk_decode, sig_encode, sig_decode,
)

ALL_PARAMS = [DILITHIUM2_PARAMS, DILITHIUM3_PARAMS, DILITHIUM5_PARAMS]


def poly_in(rng, lo, hi):
    return Poly(rng.randint(lo, hi) for _ in range(N))


class TestBitPacking:
    """Test the LSB-first packers underneath every field"""

    def test_lsb_first(self):
        w = [1, 2, 3] + [0] * (N - 3)
        packed = simple_bit_pack(w, 4)
        assert packed[:2] == bytes([0x21, 0x03])
        assert len(packed) == N * 4 // 8

    def test_offset_packing(self):
        w = [-2, 2] + [0] * (N - 2)
        packed = bit_pack(w, 2, 3)
        # Stored values are 4, 0, 2, 2, ...
        assert packed[0] == 0b10000100
        assert bit_unpack(packed, 2, 3) == w

    def test_unpack_inverts_pack(self, rng):
        w = [rng.randrange(1 << 20) for _ in range(N)]
        assert simple_bit_unpack(simple_bit_pack(w, 20), 20) == w


class TestPolyPacking:
    """Test per-field encodings and their lengths"""

    @pytest.mark.parametrize("params", [DILITHIUM2_PARAMS, DILITHIUM3_PARAMS], ids=lambda p: p.name)
    def test_eta(self, rng, params):
        a = poly_in(rng, -params.eta, params.eta)
        packed = polyeta_pack(a, params)
        assert len(packed) == params.polyeta_packedbytes
        assert polyeta_unpack(packed, params) == a

    def test_t1(self, rng):
        a = poly_in(rng, 0, (1 << 10) - 1)
        packed = polyt1_pack(a)
        assert len(packed) == POLYT1_PACKEDBYTES
        assert polyt1_unpack(packed) == a

    def test_t0(self, rng):
        a = poly_in(rng, -(1 << (D - 1)) + 1, 1 << (D - 1))
        a.coeffs[0], a.coeffs[1] = -(1 << (D - 1)) + 1, 1 << (D - 1)
        packed = polyt0_pack(a)
        assert len(packed) == POLYT0_PACKEDBYTES
        assert polyt0_unpack(packed) == a

    @pytest.mark.parametrize("params", [DILITHIUM2_PARAMS, DILITHIUM5_PARAMS], ids=lambda p: p.name)
    def test_z(self, rng, params):
        a = poly_in(rng, -params.gamma1 + 1, params.gamma1)
        a.coeffs[0] = params.gamma1
        packed = polyz_pack(a, params)
        assert len(packed) == params.polyz_packedbytes
        assert polyz_unpack(packed, params) == a

    @pytest.mark.parametrize("params", [DILITHIUM2_PARAMS, DILITHIUM3_PARAMS], ids=lambda p: p.name)
    def test_w1(self, rng, params):
        m = (Q - 1) // (2 * params.gamma2)
        a = poly_in(rng, 0, m - 1)
        packed = polyw1_pack(a, params)
        assert len(packed) == params.polyw1_packedbytes
        assert polyw1_unpack(packed, params) == a
        assert len(w1_encode([a] * params.k, params)) == params.k * params.polyw1_packedbytes


def sample_hint(params):
    h = [Poly() for _ in range(params.k)]
    h[0].coeffs[3] = 1
    h[0].coeffs[10] = 1
    h[2].coeffs[5] = 1
    return h


class TestHintPacking:
    """Test the sparse hint encoding and its uniqueness checks"""

    def test_layout(self):
        params = DILITHIUM2_PARAMS
        y = hint_pack(sample_hint(params), params)
        omega = params.omega
        assert len(y) == params.polyvech_packedbytes
        assert y[:3] == bytes([3, 10, 5])
        assert y[omega:] == bytes([2, 2, 3, 3])
        assert not any(y[3:omega])
        assert hint_unpack(y, params) == sample_hint(params)

    def test_decreasing_marker_rejected(self):
        params = DILITHIUM2_PARAMS
        y = bytearray(hint_pack(sample_hint(params), params))
        y[params.omega + 1] = 1
        assert hint_unpack(bytes(y), params) is None

    def test_marker_above_omega_rejected(self):
        params = DILITHIUM2_PARAMS
        y = bytearray(hint_pack(sample_hint(params), params))
        y[params.omega + params.k - 1] = params.omega + 1
        assert hint_unpack(bytes(y), params) is None

    def test_unordered_indices_rejected(self):
        params = DILITHIUM2_PARAMS
        y = bytearray(hint_pack(sample_hint(params), params))
        y[1] = 3
        assert hint_unpack(bytes(y), params) is None
        y[1] = 2
        assert hint_unpack(bytes(y), params) is None

    def test_index_order_resets_per_polynomial(self):
        """Polynomial 2 may start below the last index of polynomial 0"""
        params = DILITHIUM2_PARAMS
        y = hint_pack(sample_hint(params), params)
        assert y[2] < y[1]
        assert hint_unpack(y, params) is not None

    def test_nonzero_padding_rejected(self):
        params = DILITHIUM2_PARAMS
        y = bytearray(hint_pack(sample_hint(params), params))
        y[params.omega - 1] = 7
        assert hint_unpack(bytes(y), params) is None


class TestKeyAndSignatureEncoding:
    """Test the top-level byte layouts"""

    @pytest.mark.parametrize("params", ALL_PARAMS, ids=lambda p: p.name)
    def test_public_key(self, rng, params):
        rho = bytes(range(32))
        t1 = [poly_in(rng, 0, 1023) for _ in range(params.k)]
        pk = pk_encode(rho, t1, params)
        assert len(pk) == params.pk_size
        assert pk_decode(pk, params) == (rho, t1)

    @pytest.mark.parametrize("params", ALL_PARAMS, ids=lambda p: p.name)
    def test_public_key_length_checked(self, params):
        with pytest.raises(MalformedEncodingError):
            pk_decode(bytes(params.pk_size - 1), params)
        with pytest.raises(ValueError):
            pk_decode(bytes(params.pk_size + 1), params)

    def test_signature(self, rng):
        params = DILITHIUM3_PARAMS
        c_tilde = bytes(range(100, 132))
        z = [poly_in(rng, -params.gamma1 + 1, params.gamma1) for _ in range(params.l)]
        h = sample_hint(params)
        sig = sig_encode(c_tilde, z, h, params)
        assert len(sig) == params.sig_size
        assert sig_decode(sig, params) == (c_tilde, z, h)

    def test_signature_length_checked(self):
        params = DILITHIUM2_PARAMS
        assert sig_decode(bytes(params.sig_size - 1), params) is None
        assert sig_decode(bytes(params.sig_size + 1), params) is None

"""
Tests for field arithmetic, the NTT and domain-typed polynomials
"""

import pytest

from dilithium.params import Q, N
from dilithium.reduce import MONT, montgomery_reduce, reduce32, caddq, freeze
from dilithium.ntt import ZETAS, F, bitrev8
from dilithium.poly import Poly, NTTPoly
from dilithium.accelerator import SoftwareAccelerator, FORWARD, INVERSE
from dilithium import DILITHIUM2_PARAMS


def negacyclic_mul(a, b):
    """Schoolbook product in Z_q[X]/(X^N + 1)"""
    c = [0] * (2 * N)
    for i in range(N):
        for j in range(N):
            c[i + j] += a[i] * b[j]
    return [(c[k] - c[k + N]) % Q for k in range(N)]


def random_poly(rng, bound=Q // 2):
    return Poly(rng.randint(-bound, bound) for _ in range(N))


class TestReduce:
    """Test modular reduction primitives"""

    def test_montgomery_constants(self):
        """MONT is 2^32 mod q and QINV inverts q mod 2^32"""
        assert MONT % Q == pow(2, 32, Q)
        assert (Q * 58728449) % (1 << 32) == 1

    def test_montgomery_reduce(self, rng):
        """montgomery_reduce(a) == a * 2^-32 mod q, strictly inside (-q, q)"""
        rinv = pow(2, -32, Q)
        for _ in range(500):
            a = rng.randint(-(1 << 31) * Q, (1 << 31) * Q)
            r = montgomery_reduce(a)
            assert -Q < r < Q
            assert (r - a * rinv) % Q == 0

    def test_montgomery_removes_mont_factor(self, rng):
        for _ in range(100):
            x = rng.randint(-Q + 1, Q - 1)
            assert montgomery_reduce(MONT * x) % Q == x % Q

    def test_reduce32(self, rng):
        """reduce32 keeps the residue and lands in [-6283009, 6283008]"""
        samples = [0, 1, -1, Q, -Q, (1 << 31) - (1 << 22) - 1, -(1 << 31)]
        samples += [rng.randint(-(1 << 31), (1 << 31) - (1 << 22) - 1) for _ in range(500)]
        for a in samples:
            r = reduce32(a)
            assert -6283009 <= r <= 6283008
            assert (r - a) % Q == 0
        # Upper end of the range is reached at the largest allowed input
        assert reduce32((1 << 31) - (1 << 22) - 1) == 6283008

    def test_caddq(self):
        assert caddq(-1) == Q - 1
        assert caddq(-Q + 1) == 1
        assert caddq(0) == 0
        assert caddq(5) == 5

    def test_freeze(self, rng):
        for _ in range(200):
            a = rng.randint(-(1 << 31), (1 << 31) - (1 << 22) - 1)
            r = freeze(a)
            assert 0 <= r < Q
            assert r == a % Q

    @pytest.mark.skipif(not __debug__, reason="bound checks are stripped under -O")
    def test_bounds_asserted(self):
        with pytest.raises(AssertionError):
            montgomery_reduce((1 << 31) * Q + 1)
        with pytest.raises(AssertionError):
            reduce32(1 << 31)


class TestNTT:
    """Test the number theoretic transform"""

    def test_twiddle_table(self):
        assert len(ZETAS) == N
        assert ZETAS[0] == 0
        assert all(-Q // 2 <= z <= Q // 2 for z in ZETAS)
        rinv = pow(2, -32, Q)
        for k in (1, 2, 17, 255):
            assert (ZETAS[k] * rinv - pow(1753, bitrev8(k), Q)) % Q == 0

    def test_inverse_scale_constant(self):
        """F = mont^2 / 256 mod q"""
        assert (F * 256 - MONT * MONT) % Q == 0

    def test_bitrev8(self):
        assert bitrev8(1) == 128
        assert bitrev8(0b00000110) == 0b01100000
        assert [bitrev8(bitrev8(x)) for x in range(256)] == list(range(256))

    def test_round_trip_scales_by_mont(self, rng):
        """invntt_tomont(ntt(x)) == MONT * x (mod q)"""
        x = random_poly(rng)
        y = x.ntt().reduce().invntt_tomont()
        for xi, yi in zip(x.coeffs, y.coeffs):
            assert (yi - MONT * xi) % Q == 0
            assert -Q < yi < Q

    def test_multiplication_matches_schoolbook(self, rng):
        """ntt -> pointwise -> invntt_tomont is the exact negacyclic product"""
        a = random_poly(rng)
        b = random_poly(rng)
        c = a.ntt().pointwise_montgomery(b.ntt()).invntt_tomont()
        assert [x % Q for x in c.coeffs] == negacyclic_mul(a.coeffs, b.coeffs)

    def test_multiplication_by_sparse_challenge(self, rng):
        """Small operands as used for c * s1"""
        a = Poly([0] * N)
        a.coeffs[0], a.coeffs[3], a.coeffs[255] = 1, -1, 1
        s = random_poly(rng, bound=4)
        c = a.ntt().pointwise_montgomery(s.ntt()).invntt_tomont()
        assert [x % Q for x in c.coeffs] == negacyclic_mul(a.coeffs, s.coeffs)


class TestPolyDomains:
    """Test that the transform domain is carried by the type"""

    def test_length_checked(self):
        with pytest.raises(ValueError):
            Poly([1, 2, 3])
        assert Poly() == Poly([0] * N)

    def test_ntt_changes_type(self, rng):
        p = random_poly(rng)
        p_hat = p.ntt()
        assert isinstance(p_hat, NTTPoly)
        assert isinstance(p_hat.invntt_tomont(), Poly)

    def test_mixing_domains_rejected(self, rng):
        p = random_poly(rng)
        p_hat = p.ntt()
        with pytest.raises(TypeError):
            p + p_hat
        with pytest.raises(TypeError):
            p_hat.sub(p)
        with pytest.raises(TypeError):
            p_hat.pointwise_montgomery(p)
        assert p != NTTPoly(p.coeffs)

    def test_accelerator_checks_domain(self, rng):
        accel = SoftwareAccelerator(DILITHIUM2_PARAMS)
        p = random_poly(rng)
        with pytest.raises(TypeError):
            accel.transform(p.ntt(), FORWARD)
        with pytest.raises(TypeError):
            accel.transform(p, INVERSE)
        with pytest.raises(ValueError):
            accel.transform(p, "sideways")

    def test_arithmetic(self, rng):
        a = random_poly(rng, bound=1000)
        b = random_poly(rng, bound=1000)
        assert (a + b - b) == a
        assert a.copy() == a and a.copy() is not a
        assert a.shiftl().coeffs == [c << 13 for c in a.coeffs]
        assert all(0 <= c < Q for c in a.freeze().coeffs)
        assert a.caddq().coeffs == [c + Q if c < 0 else c for c in a.coeffs]

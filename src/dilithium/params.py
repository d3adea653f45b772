"""
CRYSTALS-Dilithium Parameter Sets (round 3)
"""

from dataclasses import dataclass
from typing import Dict, Union


# Global constants shared by every mode
SEEDBYTES = 32  # Size of rho, key and the challenge seed c_tilde
CRHBYTES = 48  # Output size of the collision-resistant hash CRH
N = 256  # Polynomial degree
Q = 8380417  # Modulus q = 2^23 - 2^13 + 1
D = 13  # Dropped bits from t
ROOT_OF_UNITY = 1753  # Primitive 512th root of unity mod q

POLYT1_PACKEDBYTES = 320
POLYT0_PACKEDBYTES = 416


@dataclass(frozen=True)
class DilithiumParams:
    """Parameter set for one Dilithium security mode"""
    name: str
    mode: int
    k: int  # Rows in matrix A
    l: int  # Columns in matrix A
    eta: int  # Secret key coefficient bound
    tau: int  # Number of +/-1 coefficients in challenge
    beta: int  # tau * eta
    gamma1: int  # y coefficient range
    gamma2: int  # Low-order rounding range
    omega: int  # Maximum number of 1s in hint

    def __post_init__(self):
        if self.eta not in (2, 4):
            raise ValueError(f"Unsupported eta: {self.eta}")
        if self.gamma1 not in (1 << 17, 1 << 19):
            raise ValueError(f"Unsupported gamma1: {self.gamma1}")
        if self.gamma2 not in ((Q - 1) // 88, (Q - 1) // 32):
            raise ValueError(f"Unsupported gamma2: {self.gamma2}")
        if self.beta != self.tau * self.eta:
            raise ValueError(f"beta must equal tau * eta, got {self.beta}")

    @property
    def eta_bits(self) -> int:
        """Bit length for encoding eta-bounded coefficients"""
        return 3 if self.eta == 2 else 4

    @property
    def z_bits(self) -> int:
        """Bit length for encoding z coefficients"""
        return 18 if self.gamma1 == (1 << 17) else 20

    @property
    def w1_bits(self) -> int:
        """Bit length for encoding high bits of w"""
        return 6 if self.gamma2 == (Q - 1) // 88 else 4

    @property
    def polyeta_packedbytes(self) -> int:
        return N * self.eta_bits // 8

    @property
    def polyz_packedbytes(self) -> int:
        return N * self.z_bits // 8

    @property
    def polyw1_packedbytes(self) -> int:
        return N * self.w1_bits // 8

    @property
    def polyvech_packedbytes(self) -> int:
        return self.omega + self.k

    @property
    def pk_size(self) -> int:
        """Public key size in bytes"""
        return SEEDBYTES + self.k * POLYT1_PACKEDBYTES  # rho + t1 encoding

    @property
    def sk_size(self) -> int:
        """Secret key size in bytes"""
        # rho + key + tr + s1 + s2 + t0
        return (2 * SEEDBYTES + CRHBYTES
                + self.l * self.polyeta_packedbytes
                + self.k * self.polyeta_packedbytes
                + self.k * POLYT0_PACKEDBYTES)

    @property
    def sig_size(self) -> int:
        """Signature size in bytes"""
        # c_tilde + z encoding + hint encoding
        return SEEDBYTES + self.l * self.polyz_packedbytes + self.polyvech_packedbytes


# Dilithium2: NIST security level 2
DILITHIUM2_PARAMS = DilithiumParams(
    name="Dilithium2",
    mode=2,
    k=4,
    l=4,
    eta=2,
    tau=39,
    beta=78,
    gamma1=1 << 17,
    gamma2=(Q - 1) // 88,
    omega=80,
)

# Dilithium3: NIST security level 3
DILITHIUM3_PARAMS = DilithiumParams(
    name="Dilithium3",
    mode=3,
    k=6,
    l=5,
    eta=4,
    tau=49,
    beta=196,
    gamma1=1 << 19,
    gamma2=(Q - 1) // 32,
    omega=55,
)

# Dilithium5: NIST security level 5
DILITHIUM5_PARAMS = DilithiumParams(
    name="Dilithium5",
    mode=5,
    k=8,
    l=7,
    eta=2,
    tau=60,
    beta=120,
    gamma1=1 << 19,
    gamma2=(Q - 1) // 32,
    omega=75,
)


# Lookup by mode number and by name
PARAMETER_SETS: Dict[Union[int, str], DilithiumParams] = {}
for _params in (DILITHIUM2_PARAMS, DILITHIUM3_PARAMS, DILITHIUM5_PARAMS):
    PARAMETER_SETS[_params.mode] = _params
    PARAMETER_SETS[_params.name] = _params


def get_params(mode: Union[int, str]) -> DilithiumParams:
    """Get a parameter set by mode (2, 3, 5) or name ("Dilithium3")."""
    if mode not in PARAMETER_SETS:
        raise ValueError(f"Unknown parameter set: {mode}")
    return PARAMETER_SETS[mode]

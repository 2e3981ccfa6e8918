"""
KID Cipher Participants

A participant owns a (public_key, private_key, n) triple. The public half is
shared with other participants so they can address messages to the owner or
check the owner's signatures; the private exponent never leaves the owner.
"""

from dataclasses import dataclass, field
from typing import Dict, Union

from cryptography.hazmat.primitives import hashes

from .primitives import (
    U64_MAX,
    ArithmeticOverflowError,
    ConfigError,
    CryptoError,
    OutOfRangeError,
    is_integer,
    transform,
)


def _require_u64(name: str, value: int) -> None:
    if value < 0 or value > U64_MAX:
        raise ArithmeticOverflowError(f"{name} = {value} does not fit in 64 bits")


@dataclass(frozen=True)
class PublicKey:
    """
    The shareable half of a participant's keys.

    Attributes:
        public_key: Public exponent
        n: Modulus all of the owner's transforms are computed under
    """
    public_key: int
    n: int

    def __post_init__(self):
        for name, value in (('public_key', self.public_key), ('n', self.n)):
            if not is_integer(value):
                raise OutOfRangeError(f"Public key field '{name}' must be an integer")
            if value < 0 or value > U64_MAX:
                raise OutOfRangeError(f"Public key field '{name}' does not fit in 64 bits")
        if self.n < 1:
            raise OutOfRangeError("Public key modulus must be positive")

    def fingerprint(self) -> str:
        """
        SHA-256 fingerprint identifying this public key.

        Returns:
            64-character hex digest over the big-endian encodings of key and modulus
        """
        digest = hashes.Hash(hashes.SHA256())
        digest.update(self.public_key.to_bytes(8, "big"))
        digest.update(self.n.to_bytes(8, "big"))
        return digest.finalize().hex()

    def to_dict(self) -> Dict:
        """Convert to dictionary for serialization"""
        return {
            'public_key': self.public_key,
            'n': self.n
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'PublicKey':
        """
        Create from dictionary.

        Raises:
            CryptoError: If a field is missing or not an unsigned 64-bit integer
        """
        try:
            public_key = data['public_key']
            n = data['n']
        except KeyError as e:
            raise CryptoError(f"Public key is missing field {e}") from e

        return cls(public_key=public_key, n=n)


@dataclass(frozen=True)
class Participant:
    """
    Holder of a KID cipher key triple.

    Instances are normally produced by KeyGenerator; constructing one by hand
    is allowed for fixed test vectors.

    Attributes:
        private_key: Exponent used only by the owner
        public_key: Exponent shared with others
        n: Modulus shared with others
    """
    private_key: int = field(repr=False)
    public_key: int
    n: int

    def __post_init__(self):
        _require_u64("private_key", self.private_key)
        _require_u64("public_key", self.public_key)
        _require_u64("n", self.n)
        if self.n < 1:
            raise ConfigError("Modulus must be positive")
        # Equal exponents make the scheme degenerate
        if self.private_key == self.public_key:
            raise ConfigError("Public and private exponents must differ")

    @property
    def public(self) -> PublicKey:
        """Public half of the key triple"""
        return PublicKey(public_key=self.public_key, n=self.n)

    def fingerprint(self) -> str:
        """Fingerprint of this participant's public key"""
        return self.public.fingerprint()

    def transform_with_private_key(self, payload: int) -> int:
        """
        Self-transform: apply our own private key under our modulus.

        Args:
            payload: Value below our modulus

        Returns:
            Transformed value
        """
        return transform(payload, self.private_key, self.n)

    def transform_with_public_key_from(self, payload: int,
                                       other: Union['Participant', PublicKey]) -> int:
        """
        Cross-transform: apply another participant's public key under their modulus.

        Args:
            payload: Value below the other participant's modulus
            other: Participant or PublicKey whose public key is used

        Returns:
            Transformed value
        """
        return transform(payload, other.public_key, other.n)

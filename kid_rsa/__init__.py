"""
KID cipher: a toy public-key scheme for teaching cryptographic reasoning.

Implements Neal Koblitz's Kid-RSA idea with:
- Key generation from four bounded random integers
- A single modular transform used for encryption, decryption and signatures
- Message exchange patterns built from that transform

The scheme is deliberately insecure and limited to 64-bit values.
"""

from .primitives import (
    U64_MAX,
    transform,
    CryptoError,
    ConfigError,
    ArithmeticOverflowError,
    OutOfRangeError
)
from .participant import Participant, PublicKey
from .keygen import KeyGenerator, KeyRange, new_participant
from .exchange import (
    confidential_send,
    confidential_receive,
    sign,
    open_signed,
    sign_and_seal,
    open_sealed
)

__all__ = [
    'U64_MAX',
    'transform',
    'CryptoError',
    'ConfigError',
    'ArithmeticOverflowError',
    'OutOfRangeError',
    'Participant',
    'PublicKey',
    'KeyGenerator',
    'KeyRange',
    'new_participant',
    'confidential_send',
    'confidential_receive',
    'sign',
    'open_signed',
    'sign_and_seal',
    'open_sealed'
]

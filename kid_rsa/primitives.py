"""
Arithmetic Primitives for the KID Cipher

This module provides the error types, the checked unsigned 64-bit arithmetic
and the single modular transform that every other part of the cipher is
built from.
"""

U64_MAX = 2 ** 64 - 1


class CryptoError(Exception):
    """Base exception for cipher errors"""
    pass


class ConfigError(CryptoError, ValueError):
    """Key generation cannot proceed with the requested configuration"""
    pass


class ArithmeticOverflowError(CryptoError, OverflowError):
    """An unsigned 64-bit operation left the representable range"""
    pass


class OutOfRangeError(CryptoError, ValueError):
    """A transform input lies outside its domain"""
    pass


def is_integer(value) -> bool:
    """True for int values, excluding bool"""
    return isinstance(value, int) and not isinstance(value, bool)


def _check_u64(value: int, operation: str) -> int:
    if value < 0 or value > U64_MAX:
        raise ArithmeticOverflowError(f"{operation} = {value} does not fit in 64 bits")
    return value


def checked_add(x: int, y: int) -> int:
    """
    Add two unsigned 64-bit integers.

    Raises:
        ArithmeticOverflowError: If the sum exceeds U64_MAX
    """
    return _check_u64(x + y, f"{x} + {y}")


def checked_sub(x: int, y: int) -> int:
    """
    Subtract two unsigned 64-bit integers.

    Raises:
        ArithmeticOverflowError: If the difference is negative
    """
    return _check_u64(x - y, f"{x} - {y}")


def checked_mul(x: int, y: int) -> int:
    """
    Multiply two unsigned 64-bit integers.

    Raises:
        ArithmeticOverflowError: If the product exceeds U64_MAX
    """
    return _check_u64(x * y, f"{x} * {y}")


def transform(payload: int, exponent: int, modulus: int) -> int:
    """
    Apply a key to a payload: (payload * exponent) mod modulus.

    The same operation encrypts and decrypts; which one happens depends only
    on the key that is supplied. Both factors are reduced below the modulus
    before multiplying, so the product stays within 64 bits as long as the
    modulus is small enough.

    Args:
        payload: Value to transform, must satisfy 0 <= payload < modulus
        exponent: Public or private key of the modulus owner
        modulus: Modulus of the key owner

    Returns:
        Transformed value, strictly below modulus

    Raises:
        OutOfRangeError: If the payload is not below the modulus, or the
            exponent or modulus is not a valid unsigned 64-bit value
        ArithmeticOverflowError: If the reduced product exceeds 64 bits
    """
    for name, value in (('payload', payload), ('exponent', exponent), ('modulus', modulus)):
        if not is_integer(value):
            raise OutOfRangeError(f"{name.capitalize()} must be an integer")
    if modulus < 1 or modulus > U64_MAX:
        raise OutOfRangeError(f"Modulus {modulus} is not a positive 64-bit value")
    if payload < 0 or payload >= modulus:
        raise OutOfRangeError(f"Payload {payload} must be lower than modulus {modulus}")
    if exponent < 0 or exponent > U64_MAX:
        raise OutOfRangeError("Exponent is not an unsigned 64-bit value")

    a = payload % modulus
    b = exponent % modulus
    return checked_mul(a, b) % modulus

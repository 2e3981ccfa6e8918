"""
KID Cipher Key Generation

Derives a participant's (public_key, private_key, n) triple from four random
integers a, ax, b, bx drawn from a bounded range:

    m           = a*b - 1
    public_key  = ax*m + a
    private_key = bx*m + b
    n           = ax*bx*m + a*bx + ax*b + 1    (== (public_key*private_key - 1) / m)

so that public_key * private_key == 1 (mod n).

The range bounds trade off two things. A narrow range makes two
participants more likely to end up with the same public key. A wide range
grows n until the transform no longer fits in 64 bits. The lower bound also
bounds how large a payload can be.
"""

import logging
import os
import secrets
from dataclasses import dataclass
from typing import List, Optional, Protocol

from .participant import Participant
from .primitives import (
    U64_MAX,
    ConfigError,
    checked_add,
    checked_mul,
    checked_sub,
    is_integer,
)

logger = logging.getLogger(__name__)

DEFAULT_RANGE_LOWER = 500
DEFAULT_RANGE_UPPER = 550
DEFAULT_MAX_ATTEMPTS = 1000

RANGE_LOWER_ENV = "KID_RSA_RANGE_LOWER"
RANGE_UPPER_ENV = "KID_RSA_RANGE_UPPER"


class RandomSource(Protocol):
    """Anything that can draw an integer from [start, stop), e.g. random.Random"""

    def randrange(self, start: int, stop: int) -> int:
        ...


@dataclass(frozen=True)
class KeyRange:
    """
    Half-open range [lower, upper) the key quadruple is sampled from.

    Attributes:
        lower: Smallest value that can be sampled
        upper: Exclusive upper bound
    """
    lower: int = DEFAULT_RANGE_LOWER
    upper: int = DEFAULT_RANGE_UPPER

    def __post_init__(self):
        for name, value in (('lower', self.lower), ('upper', self.upper)):
            if not is_integer(value):
                raise ConfigError(f"Range bound '{name}' must be an integer, got {value!r}")
        if self.upper - self.lower <= 1:
            raise ConfigError(
                f"Range [{self.lower}, {self.upper}) is too narrow to sample distinct keys"
            )
        # a*b must be at least 1 for m = a*b - 1
        if self.lower < 1:
            raise ConfigError(f"Range lower bound must be at least 1, got {self.lower}")
        if self.upper - 1 > U64_MAX:
            raise ConfigError(f"Range upper bound {self.upper} exceeds 64 bits")

    @classmethod
    def from_env(cls) -> 'KeyRange':
        """
        Build the range from KID_RSA_RANGE_LOWER / KID_RSA_RANGE_UPPER.

        Unset variables fall back to the defaults.

        Raises:
            ConfigError: If a variable is not an integer or the range is invalid
        """
        raw_lower = os.getenv(RANGE_LOWER_ENV, str(DEFAULT_RANGE_LOWER))
        raw_upper = os.getenv(RANGE_UPPER_ENV, str(DEFAULT_RANGE_UPPER))
        try:
            lower, upper = int(raw_lower), int(raw_upper)
        except ValueError as e:
            raise ConfigError(f"Invalid key range in environment: {e}") from e
        return cls(lower=lower, upper=upper)


class KeyGenerator:
    """
    Produces participants with self-consistent key triples.
    """

    def __init__(self, key_range: Optional[KeyRange] = None,
                 rng: Optional[RandomSource] = None,
                 max_attempts: int = DEFAULT_MAX_ATTEMPTS):
        """
        Initialize a key generator.

        Args:
            key_range: Sampling range, defaults to [500, 550)
            rng: Randomness provider, defaults to a fresh SystemRandom
            max_attempts: Resamples allowed before giving up on a key
        """
        if max_attempts < 1:
            raise ConfigError(f"max_attempts must be at least 1, got {max_attempts}")
        self.key_range = key_range if key_range is not None else KeyRange()
        self.rng = rng if rng is not None else secrets.SystemRandom()
        self.max_attempts = max_attempts

    def _sample(self, rng: RandomSource) -> int:
        return rng.randrange(self.key_range.lower, self.key_range.upper)

    def generate(self, rng: Optional[RandomSource] = None) -> Participant:
        """
        Generate a new participant.

        All four values are resampled whenever the public and private
        exponents come out equal.

        Args:
            rng: Randomness provider for this call, defaults to the generator's own

        Returns:
            Participant with a fresh key triple

        Raises:
            ConfigError: If every attempt produced equal exponents
            ArithmeticOverflowError: If the range yields values beyond 64 bits
        """
        rng = rng if rng is not None else self.rng

        for attempt in range(1, self.max_attempts + 1):
            a = self._sample(rng)
            ax = self._sample(rng)
            b = self._sample(rng)
            bx = self._sample(rng)

            m = checked_sub(checked_mul(a, b), 1)
            public_key = checked_add(checked_mul(ax, m), a)
            private_key = checked_add(checked_mul(bx, m), b)
            logger.debug("Attempt %d: a=%s ax=%s b=%s bx=%s m=%s", attempt, a, ax, b, bx, m)

            if public_key != private_key:
                break
            logger.debug("Attempt %d produced equal exponents, resampling", attempt)
        else:
            raise ConfigError(
                f"No distinct key pair found in {self.max_attempts} attempts "
                f"for range [{self.key_range.lower}, {self.key_range.upper})"
            )

        n = checked_mul(checked_mul(ax, bx), m)
        n = checked_add(n, checked_mul(a, bx))
        n = checked_add(n, checked_mul(ax, b))
        n = checked_add(n, 1)

        # Every payload below n must be transformable by either exponent
        checked_mul(n - 1, max(public_key, private_key) % n)

        return Participant(private_key=private_key, public_key=public_key, n=n)

    def generate_many(self, count: int, rng: Optional[RandomSource] = None) -> List[Participant]:
        """
        Generate participants whose public keys are pairwise distinct.

        Args:
            count: Number of participants
            rng: Randomness provider for this call

        Returns:
            List of participants

        Raises:
            ValueError: If count is negative
            ConfigError: If a unique public key could not be found
        """
        if count < 0:
            raise ValueError(f"count must not be negative, got {count}")

        participants: List[Participant] = []
        taken = set()
        for _ in range(count):
            for _ in range(self.max_attempts):
                participant = self.generate(rng)
                if participant.public_key not in taken:
                    break
                logger.debug("Public key collision with an earlier participant, regenerating")
            else:
                raise ConfigError(
                    f"No unique public key found in {self.max_attempts} attempts; "
                    f"widen the range [{self.key_range.lower}, {self.key_range.upper})"
                )
            taken.add(participant.public_key)
            participants.append(participant)
        return participants


def new_participant(range_lower: int = DEFAULT_RANGE_LOWER,
                    range_upper: int = DEFAULT_RANGE_UPPER,
                    rng: Optional[RandomSource] = None) -> Participant:
    """
    Create a participant with keys sampled from [range_lower, range_upper).

    Raises:
        ConfigError: If the range is degenerate
        ArithmeticOverflowError: If the range is too wide for 64-bit keys
    """
    return KeyGenerator(KeyRange(range_lower, range_upper), rng=rng).generate()

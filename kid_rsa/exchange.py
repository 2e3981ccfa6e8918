"""
Message Exchange Patterns

Compositions of the self-transform and cross-transform that realise the three
classic uses of a public-key scheme:

- Confidential send: only the recipient can read the message, but anyone
  could have written it.
- Signed send: anyone can read the message, but only the sender could have
  written it.
- Sign and seal: only the recipient can read it and only the sender could
  have written it.

Nothing here keeps session state; every call is a pure function of its
arguments.
"""

import logging
from typing import Union

from .participant import Participant, PublicKey
from .primitives import transform

logger = logging.getLogger(__name__)

PublicParty = Union[Participant, PublicKey]


def _public(party: PublicParty) -> PublicKey:
    return party.public if isinstance(party, Participant) else party


def _cross_transform(data: int, key: PublicKey) -> int:
    return transform(data, key.public_key, key.n)


def confidential_send(data: int, recipient: PublicParty) -> int:
    """
    Encrypt data so that only the recipient can read it.

    Args:
        data: Plaintext below the recipient's modulus
        recipient: Recipient or their public key

    Returns:
        Ciphertext for the recipient
    """
    recipient_key = _public(recipient)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Confidential send to %s", recipient_key.fingerprint())
    return _cross_transform(data, recipient_key)


def confidential_receive(ciphertext: int, recipient: Participant) -> int:
    """
    Decrypt a confidential message with the recipient's private key.

    Args:
        ciphertext: Output of confidential_send
        recipient: The addressed participant

    Returns:
        Recovered plaintext
    """
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Confidential receive by %s", recipient.fingerprint())
    return recipient.transform_with_private_key(ciphertext)


def sign(data: int, sender: Participant) -> int:
    """
    Sign data with the sender's private key.

    The result is not confidential: anyone holding the sender's public key
    recovers the data.
    """
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Signing by %s", sender.fingerprint())
    return sender.transform_with_private_key(data)


def open_signed(signed: int, sender: PublicParty) -> int:
    """
    Recover signed data with the sender's public key.

    Args:
        signed: Output of sign
        sender: Claimed sender or their public key

    Returns:
        The signed data if the sender really signed it, unrelated garbage otherwise
    """
    sender_key = _public(sender)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Opening data signed by %s", sender_key.fingerprint())
    return _cross_transform(signed, sender_key)


def sign_and_seal(data: int, sender: Participant, recipient: PublicParty) -> int:
    """
    Sign with the sender's private key, then encrypt for the recipient.

    The signed intermediate is bounded by the sender's modulus but must also
    be below the recipient's modulus.

    Args:
        data: Plaintext below the sender's modulus
        sender: Signing participant
        recipient: Recipient or their public key

    Returns:
        Ciphertext only the recipient can open

    Raises:
        OutOfRangeError: If the signed intermediate is not below the recipient's modulus
    """
    recipient_key = _public(recipient)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Sign and seal from %s to %s", sender.fingerprint(), recipient_key.fingerprint())
    signed = sender.transform_with_private_key(data)
    return _cross_transform(signed, recipient_key)


def open_sealed(ciphertext: int, recipient: Participant, sender: PublicParty) -> int:
    """
    Decrypt with the recipient's private key, then verify with the sender's public key.

    Args:
        ciphertext: Output of sign_and_seal
        recipient: The addressed participant
        sender: Claimed sender or their public key

    Returns:
        Recovered plaintext
    """
    sender_key = _public(sender)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Opening sealed data for %s from %s", recipient.fingerprint(), sender_key.fingerprint())
    signed = recipient.transform_with_private_key(ciphertext)
    return _cross_transform(signed, sender_key)

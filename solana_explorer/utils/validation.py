"""Validation utilities for the Solana explorer.

This module provides utilities for validating Solana-specific data.
"""

import re

from solders.pubkey import Pubkey

from solana_explorer.utils.errors import InvalidPublicKeyError, InvalidSignatureError

# Solana public key validation pattern (base58 format)
PUBKEY_PATTERN = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$")

# Transaction signatures are also base58 encoded but longer than public keys
SIGNATURE_PATTERN = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{43,88}$")


def validate_public_key(pubkey: str) -> bool:
    """Validate a Solana public key.

    Args:
        pubkey: The public key to validate

    Returns:
        True if the public key is valid, False otherwise
    """
    if not pubkey or not isinstance(pubkey, str):
        return False
    if not PUBKEY_PATTERN.match(pubkey):
        return False
    try:
        Pubkey.from_string(pubkey)
    except ValueError:
        return False
    return True


def validate_transaction_signature(signature: str) -> bool:
    """Validate a Solana transaction signature.

    Args:
        signature: The transaction signature to validate

    Returns:
        True if the signature is valid, False otherwise
    """
    if not signature or not isinstance(signature, str):
        return False
    return bool(SIGNATURE_PATTERN.match(signature))


def require_public_key(pubkey: str) -> str:
    """Return the key unchanged or raise InvalidPublicKeyError."""
    if not validate_public_key(pubkey):
        raise InvalidPublicKeyError(pubkey)
    return pubkey


def require_transaction_signature(signature: str) -> str:
    """Return the signature unchanged or raise InvalidSignatureError."""
    if not validate_transaction_signature(signature):
        raise InvalidSignatureError(signature)
    return signature

"""
Symmetric encryption for credentials stored at rest.

AES-256-GCM via the cryptography library. Every call draws a fresh
96-bit nonce, so encrypting the same plaintext twice yields different
ciphertexts. Wire format: base64(nonce || ciphertext || tag).

Usage:
    token = encrypt("strava_access_token", key)
    plain = decrypt(token, key)
"""

import base64
import binascii
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

KEY_SIZE = 32
NONCE_SIZE = 12
TAG_SIZE = 16


class CryptoError(Exception):
    """Base error for encryption/decryption failures."""
    pass


class KeyLengthError(CryptoError):
    """Key is not exactly 32 bytes."""
    pass


class EncryptionError(CryptoError):
    """Encryption could not be performed."""
    pass


class CiphertextDecodeError(CryptoError):
    """Ciphertext is not valid base64 or is truncated."""
    pass


class AuthenticationError(CryptoError):
    """Ciphertext failed authentication (wrong key or tampered data)."""
    pass


def _key_bytes(key: str | bytes) -> bytes:
    raw = key.encode("utf-8") if isinstance(key, str) else bytes(key)
    if len(raw) != KEY_SIZE:
        raise KeyLengthError(
            f"encryption key must be {KEY_SIZE} bytes, got {len(raw)}"
        )
    return raw


def encrypt(plaintext: str, key: str | bytes) -> str:
    """
    Encrypt plaintext with AES-256-GCM.

    Args:
        plaintext: Text to encrypt (may be empty)
        key: 32-byte key, as str (UTF-8 encoded) or bytes

    Returns:
        Base64 encoded nonce + ciphertext

    Raises:
        KeyLengthError: If key is not 32 bytes
        EncryptionError: If the cipher rejects the input
    """
    aead = AESGCM(_key_bytes(key))
    nonce = os.urandom(NONCE_SIZE)
    try:
        sealed = aead.encrypt(nonce, plaintext.encode("utf-8"), None)
    except (OverflowError, ValueError) as e:
        raise EncryptionError(f"encryption failed: {e}") from e
    return base64.b64encode(nonce + sealed).decode("ascii")


def decrypt(ciphertext: str, key: str | bytes) -> str:
    """
    Decrypt a value produced by encrypt().

    Raises:
        KeyLengthError: If key is not 32 bytes
        CiphertextDecodeError: If ciphertext is not valid base64 or too short
        AuthenticationError: If key is wrong or data was modified
    """
    aead = AESGCM(_key_bytes(key))

    try:
        data = base64.b64decode(ciphertext, validate=True)
    except (binascii.Error, ValueError) as e:
        raise CiphertextDecodeError(f"ciphertext is not valid base64: {e}") from e

    if len(data) < NONCE_SIZE + TAG_SIZE:
        raise CiphertextDecodeError("ciphertext too short")

    nonce, sealed = data[:NONCE_SIZE], data[NONCE_SIZE:]
    try:
        plain = aead.decrypt(nonce, sealed, None)
    except InvalidTag as e:
        raise AuthenticationError("ciphertext authentication failed") from e

    try:
        return plain.decode("utf-8")
    except UnicodeDecodeError as e:
        raise CiphertextDecodeError("decrypted payload is not UTF-8") from e

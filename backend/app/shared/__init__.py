"""
Shared utilities (NOT business logic).

Usage:
    from app.shared import BaseRepository
    from app.shared.crypto import encrypt, decrypt
"""
from .crypto import (
    CryptoError,
    KeyLengthError,
    EncryptionError,
    CiphertextDecodeError,
    AuthenticationError,
    encrypt,
    decrypt,
)
from .dates import utcnow, to_naive_utc
from .repository import BaseRepository

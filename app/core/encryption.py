"""
Symmetric encryption utilities for integration credentials.

Integration tokens (Readwise access tokens, Pocket access tokens) are stored
encrypted with Fernet and decrypted only when an export client needs them.

Key Derivation:
- Uses HKDF (HMAC-based Key Derivation Function) with SHA256
- Derives a stable 32-byte Fernet key from the application's SECRET_KEY
- Same SECRET_KEY always yields the same Fernet key, so tokens remain
  decryptable across worker restarts

Security Notes:
- Changing SECRET_KEY invalidates all encrypted tokens
- Never log or expose decrypted tokens

Usage:
    from app.core.encryption import encrypt_token, decrypt_token

    encrypted = encrypt_token("readwise-token")
    original = decrypt_token(encrypted)
"""
import base64
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from app.core.config import settings
from app.core.logging_config import log_error

# Cache the derived key to avoid recomputing on every operation
_fernet_key_cache: Optional[bytes] = None


def _get_fernet_key() -> bytes:
    """
    Derive a stable Fernet key from the application's SECRET_KEY.
    """
    global _fernet_key_cache

    if _fernet_key_cache is not None:
        return _fernet_key_cache

    if not settings.secret_key:
        raise ValueError(
            "SECRET_KEY must be set for encryption. "
            "Set it in your .env file or environment variables."
        )

    kdf = HKDF(
        algorithm=hashes.SHA256(),
        length=32,  # Fernet requires exactly 32 bytes
        salt=None,
        info=b'readstash-integration-token-encryption'
    )
    derived_key = kdf.derive(settings.secret_key.encode('utf-8'))

    # Fernet expects a URL-safe base64-encoded 32-byte key
    _fernet_key_cache = base64.urlsafe_b64encode(derived_key)
    return _fernet_key_cache


def _get_fernet() -> Fernet:
    return Fernet(_get_fernet_key())


def encrypt_token(token: str) -> str:
    """
    Encrypt an integration token using Fernet symmetric encryption.
    """
    if not token or not token.strip():
        raise ValueError("Cannot encrypt empty token")

    try:
        encrypted_bytes = _get_fernet().encrypt(token.encode('utf-8'))
        return encrypted_bytes.decode('utf-8')
    except Exception as e:
        log_error(e, action="token_encryption")
        raise


def decrypt_token(encrypted_token: str) -> str:
    """
    Decrypt a Fernet-encrypted integration token.

    Raises:
        ValueError: if the token is empty, corrupted, or was encrypted with
            a different SECRET_KEY.
    """
    if not encrypted_token or not encrypted_token.strip():
        raise ValueError("Cannot decrypt empty token")

    try:
        decrypted_bytes = _get_fernet().decrypt(encrypted_token.encode('utf-8'))
        return decrypted_bytes.decode('utf-8')
    except InvalidToken as e:
        log_error(e, action="token_decryption")
        raise ValueError(
            "Failed to decrypt token. This may indicate the token is corrupted "
            "or the SECRET_KEY has changed. "
            "The user may need to reconnect their integration."
        )


def reset_key_cache():
    """
    Reset the cached Fernet key.

    Only needed in tests or if SECRET_KEY changes at runtime.
    """
    global _fernet_key_cache
    _fernet_key_cache = None

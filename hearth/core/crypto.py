from __future__ import annotations

import secrets
from typing import Protocol, Tuple

from cryptography.exceptions import InternalError, InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from hearth.core.errors import AuthenticationError, KeyDerivationError, ValidationError


SALT_SIZE = 16
NONCE_SIZE = 12  # AES-256-GCM standard
TAG_SIZE = 16
KEY_SIZE = 32  # 256 bits

# scrypt cost. Not stored in the envelope: changing these orphans existing envelopes.
SCRYPT_N = 2**14
SCRYPT_R = 8
SCRYPT_P = 1


class RandomSource(Protocol):
    def token_bytes(self, n: int) -> bytes: ...


class SystemRandomSource:
    """OS CSPRNG via `secrets`; safe to share between threads."""

    def token_bytes(self, n: int) -> bytes:
        return secrets.token_bytes(n)


def derive_key(passphrase: str, salt: bytes) -> bytes:
    """
    Stretch a passphrase into a 256-bit key with scrypt.

    Deterministic for a given (passphrase, salt). Deliberately slow (tens of ms);
    every encrypt/decrypt pays this cost since derived keys are never cached.
    """
    if not isinstance(passphrase, str) or not passphrase:
        raise ValidationError("A non-empty passphrase is required.")
    if not isinstance(salt, (bytes, bytearray)) or len(salt) != SALT_SIZE:
        raise ValidationError(f"Salt must be exactly {SALT_SIZE} bytes.")
    kdf = Scrypt(salt=bytes(salt), length=KEY_SIZE, n=SCRYPT_N, r=SCRYPT_R, p=SCRYPT_P)
    try:
        return kdf.derive(passphrase.encode("utf-8"))
    except (MemoryError, InternalError) as e:
        raise KeyDerivationError(error=type(e).__name__) from e


def _check_key_nonce(key: bytes, nonce: bytes) -> None:
    if len(key) != KEY_SIZE:
        raise ValidationError(f"Key must be {KEY_SIZE} bytes (AES-256).")
    if len(nonce) != NONCE_SIZE:
        raise ValidationError(f"Nonce must be {NONCE_SIZE} bytes.")


def seal(key: bytes, nonce: bytes, plaintext: bytes) -> Tuple[bytes, bytes]:
    """AES-256-GCM encrypt without associated data. Returns (ciphertext, tag)."""
    _check_key_nonce(key, nonce)
    out = AESGCM(key).encrypt(nonce, plaintext, None)
    # AESGCM appends the 16-byte tag to the ciphertext
    return out[:-TAG_SIZE], out[-TAG_SIZE:]


def open_sealed(key: bytes, nonce: bytes, ciphertext: bytes, tag: bytes) -> bytes:
    _check_key_nonce(key, nonce)
    if len(tag) != TAG_SIZE:
        raise ValidationError(f"Auth tag must be {TAG_SIZE} bytes.")
    try:
        return AESGCM(key).decrypt(nonce, ciphertext + tag, None)
    except InvalidTag:
        raise AuthenticationError() from None

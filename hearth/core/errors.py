from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict

from hearth.core.events import redact


class Severity(str, Enum):
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class HearthError(Exception):
    code: str
    user_message: str
    severity: Severity = Severity.ERROR
    recoverable: bool = True
    context: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        super().__init__(self.code)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "user_message": self.user_message,
            "severity": self.severity.value,
            "recoverable": bool(self.recoverable),
            "context": redact(self.context or {}),
        }


# ---- Crypto path ----
# None of these are retried: identical inputs reproduce the identical failure.
class KeyDerivationError(HearthError):
    def __init__(self, user_message: str = "Key derivation failed.", **ctx: Any):
        super().__init__("key_derivation_error", user_message, severity=Severity.CRITICAL, recoverable=False, context=ctx)


class AuthenticationError(HearthError):
    """Opaque: never says whether the key, nonce, ciphertext or tag was wrong."""

    def __init__(self, user_message: str = "Decryption failed.", **ctx: Any):
        super().__init__("authentication_error", user_message, severity=Severity.WARN, recoverable=False, context=ctx)


class EnvelopeFormatError(HearthError):
    def __init__(self, user_message: str = "Malformed envelope.", **ctx: Any):
        super().__init__("envelope_format_error", user_message, severity=Severity.WARN, recoverable=False, context=ctx)


class RecordDecodeError(HearthError):
    def __init__(self, user_message: str = "Decrypted payload is not a community record.", **ctx: Any):
        super().__init__("record_decode_error", user_message, severity=Severity.ERROR, recoverable=False, context=ctx)


class EncryptionDisabledError(HearthError):
    def __init__(self, user_message: str = "Encryption is disabled by the privacy policy.", **ctx: Any):
        super().__init__("encryption_disabled", user_message, severity=Severity.WARN, recoverable=False, context=ctx)


# ---- General ----
class ValidationError(HearthError):
    def __init__(self, user_message: str = "Invalid request.", **ctx: Any):
        super().__init__("validation_error", user_message, severity=Severity.WARN, recoverable=False, context=ctx)


class ConfigError(HearthError):
    def __init__(self, user_message: str = "Configuration error.", **ctx: Any):
        super().__init__("config_error", user_message, severity=Severity.CRITICAL, recoverable=False, context=ctx)

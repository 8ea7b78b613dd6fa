from __future__ import annotations

import json
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from hearth.core.crypto import NONCE_SIZE, SALT_SIZE, RandomSource, SystemRandomSource, derive_key, open_sealed, seal
from hearth.core.envelope import decode_envelope, encode_envelope
from hearth.core.error_reporter import ErrorReporter
from hearth.core.errors import EncryptionDisabledError, HearthError, RecordDecodeError, ValidationError
from hearth.core.events import EventLogger
from hearth.core.policy.access import evaluate_access
from hearth.core.policy.models import AccessDecision
from hearth.core.privacy.models import CommunityRecord, PolicyOverrides, PrivacyPolicy, coerce_record, merge_policy
from hearth.core.privacy.redaction import apply_policy, record_summary
from hearth.core.security_events import SecurityAuditLogger


RecordInput = Union[CommunityRecord, Mapping[str, Any]]


@dataclass(frozen=True)
class EncryptResult:
    ok: bool
    envelope: Optional[str] = None
    error: Optional[HearthError] = None


@dataclass(frozen=True)
class DecryptResult:
    ok: bool
    record: Optional[CommunityRecord] = None
    error: Optional[HearthError] = None


def _new_trace_id() -> str:
    return uuid.uuid4().hex


class PrivacyEngine:
    """
    Facade over key derivation, AEAD, the envelope codec, redaction and access checks.

    Holds no mutable state: every call is a function of its arguments plus the
    random source, so one instance can be shared across threads. All
    observability collaborators are optional and can never change an outcome.
    """

    def __init__(
        self,
        *,
        random_source: Optional[RandomSource] = None,
        logger: Any = None,
        event_logger: Optional[EventLogger] = None,
        audit_logger: Optional[SecurityAuditLogger] = None,
        error_reporter: Optional[ErrorReporter] = None,
    ):
        self.random_source = random_source or SystemRandomSource()
        self.logger = logger
        self.event_logger = event_logger
        self.audit_logger = audit_logger
        self.error_reporter = error_reporter

    def policy_for(self, policy_overrides: PolicyOverrides = None) -> PrivacyPolicy:
        return merge_policy(policy_overrides)

    # ---- crypto path ----
    def encrypt(self, record: RecordInput, passphrase: str, policy_overrides: PolicyOverrides = None, *, trace_id: Optional[str] = None) -> str:
        tid = trace_id or _new_trace_id()
        policy = merge_policy(policy_overrides)
        record_id: Optional[str] = None
        try:
            # Refuse rather than pass plaintext through: callers must see the difference.
            if not policy.encryption_enabled:
                raise EncryptionDisabledError()
            rec = self._coerce(record)
            record_id = rec.id
            plaintext = self._serialize(rec)
            salt = self.random_source.token_bytes(SALT_SIZE)
            nonce = self.random_source.token_bytes(NONCE_SIZE)
            key = derive_key(passphrase, salt)
            ciphertext, tag = seal(key, nonce, plaintext)
            envelope = encode_envelope(salt, nonce, tag, ciphertext)
        except HearthError as e:
            self._failed(e, trace_id=tid, event="record.encrypt_failed", record_id=record_id)
            raise
        self._log("info", f"Record encrypted: {rec.id}")
        self._event(tid, "record.encrypted", record_id=rec.id, details={"record": record_summary(rec), "envelope_len": len(envelope)})
        return envelope

    def decrypt(self, envelope: str, passphrase: str, *, trace_id: Optional[str] = None) -> CommunityRecord:
        tid = trace_id or _new_trace_id()
        try:
            env = decode_envelope(envelope)
            key = derive_key(passphrase, env.salt)
            plaintext = open_sealed(key, env.nonce, env.ciphertext, env.auth_tag)
            rec = self._deserialize(plaintext)
        except HearthError as e:
            self._failed(e, trace_id=tid, event="record.decrypt_failed")
            raise
        self._log("info", f"Record decrypted: {rec.id}")
        self._event(tid, "record.decrypted", record_id=rec.id, details={"record": record_summary(rec)})
        return rec

    def try_encrypt(self, record: RecordInput, passphrase: str, policy_overrides: PolicyOverrides = None, *, trace_id: Optional[str] = None) -> EncryptResult:
        try:
            return EncryptResult(ok=True, envelope=self.encrypt(record, passphrase, policy_overrides, trace_id=trace_id))
        except HearthError as e:
            return EncryptResult(ok=False, error=e)

    def try_decrypt(self, envelope: str, passphrase: str, *, trace_id: Optional[str] = None) -> DecryptResult:
        try:
            return DecryptResult(ok=True, record=self.decrypt(envelope, passphrase, trace_id=trace_id))
        except HearthError as e:
            return DecryptResult(ok=False, error=e)

    # ---- policy path ----
    def apply_policy(self, record: RecordInput, policy_overrides: PolicyOverrides = None, *, trace_id: Optional[str] = None) -> CommunityRecord:
        policy = merge_policy(policy_overrides)
        out = apply_policy(self._coerce(record), policy)
        self._event(
            trace_id or _new_trace_id(),
            "record.policy_applied",
            record_id=out.id,
            details={"sensitivity_level": policy.sensitivity_level.value, "anonymize": policy.anonymize},
        )
        return out

    def evaluate_access(self, role: str, policy_overrides: PolicyOverrides = None, *, trace_id: Optional[str] = None) -> AccessDecision:
        policy = merge_policy(policy_overrides)
        dec = evaluate_access(role, policy)
        if self.audit_logger is not None:
            try:
                self.audit_logger.log_decision(trace_id=trace_id or _new_trace_id(), decision=dec)
            except Exception:
                pass
        return dec

    def check_access(self, role: str, policy_overrides: PolicyOverrides = None, *, trace_id: Optional[str] = None) -> bool:
        return self.evaluate_access(role, policy_overrides, trace_id=trace_id).allowed

    # ---- internals ----
    @staticmethod
    def _coerce(record: RecordInput) -> CommunityRecord:
        try:
            return coerce_record(record)
        except PydanticValidationError as e:
            raise ValidationError("Invalid community record.", errors=e.error_count()) from None
        except (TypeError, ValueError):
            raise ValidationError("Community record must be a mapping.") from None

    @staticmethod
    def _serialize(rec: CommunityRecord) -> bytes:
        wire = rec.to_wire()
        try:
            text = json.dumps(wire, ensure_ascii=False, sort_keys=True, separators=(",", ":"), allow_nan=False)
        except (TypeError, ValueError):
            raise ValidationError("Cultural context must be JSON-serializable.", record_id=rec.id) from None
        # json.dumps stringifies non-str keys and turns tuples into lists; decrypt must give back the same record
        if json.loads(text) != wire:
            raise ValidationError("Cultural context does not survive a JSON round trip.", record_id=rec.id)
        return text.encode("utf-8")

    @staticmethod
    def _deserialize(plaintext: bytes) -> CommunityRecord:
        try:
            data = json.loads(plaintext.decode("utf-8"))
            return CommunityRecord.model_validate(data)
        except (UnicodeDecodeError, json.JSONDecodeError, PydanticValidationError):
            raise RecordDecodeError() from None

    def _failed(self, err: HearthError, *, trace_id: str, event: str, record_id: Optional[str] = None) -> None:
        self._log("warning", f"{event}: {err.code}")
        self._event(trace_id, event, record_id=record_id, outcome="failed", details={"error_code": err.code})
        if self.error_reporter is not None:
            try:
                self.error_reporter.write_error(err, trace_id=trace_id, subsystem="crypto", internal_exc=err)
            except Exception:
                pass

    def _log(self, level: str, msg: str) -> None:
        if self.logger is None:
            return
        try:
            getattr(self.logger, level)(msg)
        except Exception:
            pass

    def _event(
        self,
        trace_id: str,
        event_type: str,
        *,
        record_id: Optional[str] = None,
        outcome: str = "ok",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        if self.event_logger is None:
            return
        try:
            self.event_logger.log(trace_id, event_type, record_id=record_id, outcome=outcome, details=details)
        except Exception:
            pass

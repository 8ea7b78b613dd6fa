from __future__ import annotations

"""
Record redaction.

Two layers:
- apply_policy(): the policy-driven transform applied before a record is exposed
- privacy_redact(): log-safe summaries (never names, content or cultural context)
"""

import hashlib
from typing import Any, Dict

from hearth.core.events import redact as secret_redact
from hearth.core.privacy.models import CommunityRecord, PrivacyPolicy, SensitivityLevel


ANONYMOUS_NAME = "Anonymous Community"
MASKED_CONTEXT: Dict[str, Any] = {"masked": True}

_DROP_KEYS = {"name", "content", "culturalcontext", "cultural_context", "plaintext", "text", "raw"}


def apply_policy(record: CommunityRecord, policy: PrivacyPolicy) -> CommunityRecord:
    """
    Fixed order: mask cultural context at HIGH sensitivity, then anonymize.
    Each rule is idempotent; low/medium sensitivity leaves cultural context as is.
    """
    update: Dict[str, Any] = {}
    if policy.sensitivity_level == SensitivityLevel.HIGH and record.cultural_context is not None:
        update["cultural_context"] = dict(MASKED_CONTEXT)
    if policy.anonymize:
        update["name"] = ANONYMOUS_NAME
    return record.model_copy(update=update, deep=True)


def _hash8(s: str) -> str:
    return hashlib.sha256(s.encode("utf-8", errors="ignore")).hexdigest()[:8]


def privacy_redact(obj: Any) -> Any:
    """
    Redact secrets + remove record content fields.
    """
    safe = secret_redact(obj)
    if isinstance(safe, dict):
        out: Dict[str, Any] = {}
        for k, v in list(safe.items())[:200]:
            kk = str(k or "")
            if kk.lower() in _DROP_KEYS:
                # preserve minimal metadata
                if isinstance(v, str):
                    out[f"{kk}_len"] = len(v)
                    out[f"{kk}_hash8"] = _hash8(v)
                else:
                    out[f"{kk}_present"] = v is not None
                continue
            out[kk] = privacy_redact(v)
        return out
    if isinstance(safe, list):
        return [privacy_redact(x) for x in safe[:50]]
    if isinstance(safe, str):
        return safe if len(safe) <= 200 else safe[:200] + "…"
    return safe


def record_summary(record: CommunityRecord) -> Dict[str, Any]:
    return privacy_redact(record.to_wire())

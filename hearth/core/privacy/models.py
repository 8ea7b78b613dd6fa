from __future__ import annotations

import copy
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AccessLevel(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"
    RESTRICTED = "restricted"


class SensitivityLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


_TRUE_STRINGS = {"true", "1", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off"}


def _coerce_flag(v: Any, default: bool) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, int) and v in (0, 1):
        return bool(v)
    if isinstance(v, str):
        s = v.strip().lower()
        if s in _TRUE_STRINGS:
            return True
        if s in _FALSE_STRINGS:
            return False
    return default


class PrivacyPolicy(BaseModel):
    """
    Call-site privacy policy.

    Always built by `merge_policy()` from DEFAULT_POLICY plus overrides. Accepts
    both snake_case names and the camelCase spellings used on the wire
    (encryptionEnabled, accessLevel, sensitivityLevel).

    Normalization never raises: unknown access levels fail closed to
    `restricted`, unknown sensitivity levels fall back to `medium`, and
    unparseable flags keep their conservative default (True).
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    encryption_enabled: bool = Field(default=True, alias="encryptionEnabled")
    access_level: AccessLevel = Field(default=AccessLevel.RESTRICTED, alias="accessLevel")
    sensitivity_level: SensitivityLevel = Field(default=SensitivityLevel.MEDIUM, alias="sensitivityLevel")
    anonymize: bool = True

    @field_validator("encryption_enabled", "anonymize", mode="before")
    @classmethod
    def _flag(cls, v: Any) -> bool:
        return _coerce_flag(v, True)

    @field_validator("access_level", mode="before")
    @classmethod
    def _access_level(cls, v: Any) -> AccessLevel:
        try:
            return AccessLevel(str(getattr(v, "value", v)).strip().lower())
        except ValueError:
            return AccessLevel.RESTRICTED

    @field_validator("sensitivity_level", mode="before")
    @classmethod
    def _sensitivity_level(cls, v: Any) -> SensitivityLevel:
        try:
            return SensitivityLevel(str(getattr(v, "value", v)).strip().lower())
        except ValueError:
            return SensitivityLevel.MEDIUM


# Process-wide constant. Never mutated: the model is frozen and merge_policy copies.
DEFAULT_POLICY = PrivacyPolicy()

_POLICY_KEYS = {
    "encryption_enabled": "encryption_enabled",
    "encryptionEnabled": "encryption_enabled",
    "access_level": "access_level",
    "accessLevel": "access_level",
    "sensitivity_level": "sensitivity_level",
    "sensitivityLevel": "sensitivity_level",
    "anonymize": "anonymize",
}

PolicyOverrides = Union[PrivacyPolicy, Mapping[str, Any], None]


def merge_policy(overrides: PolicyOverrides = None) -> PrivacyPolicy:
    """Merge caller overrides onto DEFAULT_POLICY. Unknown keys and None values are ignored."""
    if isinstance(overrides, PrivacyPolicy):
        return overrides
    merged: Dict[str, Any] = DEFAULT_POLICY.model_dump()
    for k, v in dict(overrides or {}).items():
        name = _POLICY_KEYS.get(str(k))
        if name is None or v is None:
            continue
        merged[name] = v
    return PrivacyPolicy.model_validate(merged)


class CommunityRecord(BaseModel):
    """
    A community-contributed record as handed over by the caller.

    Frozen: transformations return new records. Wire form (JSON inside the
    envelope) uses camelCase keys and omits an absent culturalContext.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    id: str = Field(min_length=1)
    name: str
    content: str
    cultural_context: Optional[Dict[str, Any]] = Field(default=None, alias="culturalContext")

    def to_wire(self) -> Dict[str, Any]:
        out = self.model_dump(by_alias=True)
        if out.get("culturalContext") is None:
            out.pop("culturalContext", None)
        return out


def coerce_record(record: Union[CommunityRecord, Mapping[str, Any]]) -> CommunityRecord:
    """Validate caller input into a record that shares no mutable state with it."""
    if isinstance(record, CommunityRecord):
        return record.model_copy(deep=True)
    return CommunityRecord.model_validate(copy.deepcopy(dict(record)))

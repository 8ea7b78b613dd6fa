from __future__ import annotations

import time

from pydantic import BaseModel, ConfigDict, Field

from hearth.core.privacy.models import AccessLevel


class AccessDecision(BaseModel):
    model_config = ConfigDict(extra="forbid")

    allowed: bool
    role: str
    access_level: AccessLevel
    reason: str = ""
    decided_at: float = Field(default_factory=lambda: time.time())

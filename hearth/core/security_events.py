from __future__ import annotations

import json
import os
import threading
import time
from dataclasses import dataclass
from typing import Any, Dict

from hearth.core.policy.models import AccessDecision


@dataclass(frozen=True)
class SecurityAuditLogger:
    """
    Append-only JSONL trail of access decisions.

    One line per decision: who asked (role), at which access level, and the
    outcome. Records themselves never reach this log.
    """

    path: str = os.path.join("logs", "security.log")
    _lock: threading.Lock = threading.Lock()

    def log_decision(self, *, trace_id: str, decision: AccessDecision) -> None:
        parent = os.path.dirname(self.path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        line = json.dumps(self._entry(trace_id, decision), ensure_ascii=False)
        with self._lock:
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(line + "\n")

    @staticmethod
    def _entry(trace_id: str, decision: AccessDecision) -> Dict[str, Any]:
        return {
            "ts": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime(decision.decided_at)),
            "trace_id": trace_id,
            "severity": "INFO" if decision.allowed else "WARN",
            "event": "access.decision",
            "role": decision.role[:64],
            "access_level": decision.access_level.value,
            "outcome": "allowed" if decision.allowed else "denied",
            "reason": decision.reason,
        }

from __future__ import annotations

import json
import os
import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


# Field names whose values never leave the process in logs or error exports.
REDACT_KEYS = {
    "passphrase",
    "password",
    "secret",
    "token",
    "key",
    "derived_key",
    "salt",
    "nonce",
    "authorization",
}


def redact(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {k: ("***REDACTED***" if str(k).lower() in REDACT_KEYS else redact(v)) for k, v in obj.items()}
    if isinstance(obj, list):
        return [redact(x) for x in obj]
    return obj


@dataclass(frozen=True)
class EventLogger:
    """
    Record lifecycle events as JSONL: `record.encrypted`, `record.decrypted`,
    `record.*_failed`, `record.policy_applied`.

    `record_id` and `outcome` are top-level so a record's history can be
    pulled with `for_record()`; `details` carries log-safe summaries only.
    """

    path: str
    _lock: threading.Lock = threading.Lock()

    def log(
        self,
        trace_id: str,
        event_type: str,
        *,
        record_id: Optional[str] = None,
        outcome: str = "ok",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        parent = os.path.dirname(self.path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        payload = {
            "ts": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
            "trace_id": trace_id,
            "event": event_type,
            "record_id": record_id,
            "outcome": outcome,
            "details": redact(details or {}),
        }
        line = json.dumps(payload, ensure_ascii=False)
        with self._lock:
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(line + "\n")

    def for_record(self, record_id: str) -> List[Dict[str, Any]]:
        if not os.path.exists(self.path):
            return []
        out: List[Dict[str, Any]] = []
        with open(self.path, "r", encoding="utf-8") as f:
            for line in f:
                try:
                    obj = json.loads(line)
                except json.JSONDecodeError:
                    continue
                if obj.get("record_id") == record_id:
                    out.append(obj)
        return out

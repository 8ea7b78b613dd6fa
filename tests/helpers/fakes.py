from __future__ import annotations

import hashlib
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


class DeterministicRandom:
    """
    Reproducible stand-in for the system CSPRNG (fixtures only).
    Two instances with the same seed return the same byte stream.
    """

    def __init__(self, seed: str = "seed"):
        self.seed = seed
        self.calls: List[int] = []
        self._counter = 0
        self._lock = threading.Lock()

    def token_bytes(self, n: int) -> bytes:
        with self._lock:
            self._counter += 1
            c = self._counter
            self.calls.append(n)
        out = b""
        block = 0
        while len(out) < n:
            out += hashlib.sha256(f"{self.seed}:{c}:{block}".encode("utf-8")).digest()
            block += 1
        return out[:n]


@dataclass
class RecordingLogger:
    lines: List[Tuple[str, str]] = field(default_factory=list)

    def info(self, msg: str, *_a: Any, **_k: Any) -> None:
        self.lines.append(("info", msg))

    def warning(self, msg: str, *_a: Any, **_k: Any) -> None:
        self.lines.append(("warning", msg))

    def error(self, msg: str, *_a: Any, **_k: Any) -> None:
        self.lines.append(("error", msg))


class ExplodingLogger:
    """Every logging call raises; outcomes must not change."""

    def info(self, *_a: Any, **_k: Any) -> None:
        raise RuntimeError("log sink down")

    warning = info
    error = info


class ExplodingEventLogger:
    def log(self, *_a: Any, **_k: Any) -> None:
        raise OSError("disk full")


class ExplodingErrorReporter:
    def write_error(self, *_a: Any, **_k: Any) -> None:
        raise OSError("disk full")


@dataclass
class CapturingAuditLogger:
    entries: List[Dict[str, Any]] = field(default_factory=list)
    fail: bool = False

    def log_decision(self, *, trace_id: str, decision: Any) -> None:
        if self.fail:
            raise OSError("audit sink down")
        self.entries.append(
            {
                "trace_id": trace_id,
                "role": decision.role,
                "outcome": "allowed" if decision.allowed else "denied",
                "access_level": decision.access_level.value,
                "reason": decision.reason,
            }
        )

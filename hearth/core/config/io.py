from __future__ import annotations

import json
import os
import shutil
import tempfile
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class ReadResult:
    ok: bool
    data: Dict[str, Any]
    error: Optional[str] = None

    @property
    def corrupt(self) -> bool:
        return bool(self.error and self.error.startswith("corrupt_json"))


def _ts() -> str:
    return time.strftime("%Y%m%d_%H%M%S", time.gmtime())


def read_json_file(path: str) -> ReadResult:
    if not os.path.exists(path):
        return ReadResult(ok=False, data={}, error="missing")
    try:
        with open(path, "r", encoding="utf-8") as f:
            obj = json.load(f)
    except json.JSONDecodeError as e:
        return ReadResult(ok=False, data={}, error=f"corrupt_json:{e}")
    except OSError as e:
        return ReadResult(ok=False, data={}, error=str(e))
    if not isinstance(obj, dict):
        return ReadResult(ok=False, data={}, error="corrupt_json:not_object")
    return ReadResult(ok=True, data=obj)


def prune_backups(backups_dir: str, base: str, *, keep: int) -> None:
    prefix = f"{base}."
    items = [os.path.join(backups_dir, f) for f in os.listdir(backups_dir) if f.startswith(prefix)]
    items.sort(key=os.path.getmtime, reverse=True)
    for p in items[max(0, keep) :]:
        try:
            os.remove(p)
        except OSError:
            pass


def atomic_write_json(path: str, data: Dict[str, Any], backups_dir: str, *, max_backups: int = 10) -> None:
    """Write via temp file + os.replace; the previous version is copied to backups first."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    os.makedirs(backups_dir, exist_ok=True)
    base = os.path.basename(path)
    if os.path.exists(path):
        shutil.copy2(path, os.path.join(backups_dir, f"{base}.{_ts()}.prewrite.json"))
        prune_backups(backups_dir, base, keep=max_backups)
    fd, tmp = tempfile.mkstemp(prefix=".tmp_", suffix=".json", dir=os.path.dirname(path) or ".")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False, sort_keys=True)
            f.write("\n")
        os.replace(tmp, path)
    finally:
        if os.path.exists(tmp):
            os.remove(tmp)


def recover_from_corrupt(path: str, backups_dir: str, last_known_good_dir: str) -> Tuple[Dict[str, Any], bool]:
    """
    Move a corrupt file aside to backups/<name>.<ts>.corrupt.json and restore
    last_known_good/<name> if there is one. Returns (data, recovered).
    """
    os.makedirs(backups_dir, exist_ok=True)
    base = os.path.basename(path)
    if os.path.exists(path):
        shutil.move(path, os.path.join(backups_dir, f"{base}.{_ts()}.corrupt.json"))
    rr = read_json_file(os.path.join(last_known_good_dir, base))
    if not rr.ok:
        return {}, False
    atomic_write_json(path, rr.data, backups_dir)
    return rr.data, True


def snapshot_last_known_good(path: str, last_known_good_dir: str) -> None:
    os.makedirs(last_known_good_dir, exist_ok=True)
    shutil.copy2(path, os.path.join(last_known_good_dir, os.path.basename(path)))

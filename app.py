from __future__ import annotations

import argparse
import getpass
import json
import os
import sys
from typing import Any, Dict, List, Optional

from hearth.core.config.manager import ConfigManager
from hearth.core.config.paths import ConfigFsPaths
from hearth.core.engine import PrivacyEngine
from hearth.core.errors import HearthError, ValidationError
from hearth.core.factory import build_privacy_engine


PASSPHRASE_ENV = "HEARTH_PASSPHRASE"


def _parse_policy(items: Optional[List[str]]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for item in items or []:
        k, sep, v = item.partition("=")
        if not sep or not k.strip():
            raise ValidationError("Policy overrides must look like KEY=VALUE.", item=item)
        out[k.strip()] = v.strip()
    return out


def _read_input(path: Optional[str]) -> str:
    if not path or path == "-":
        return sys.stdin.read()
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except OSError as e:
        raise ValidationError("Input file could not be read.", error=e.strerror or type(e).__name__, path=path) from None


def _read_record(path: Optional[str]) -> Dict[str, Any]:
    try:
        obj = json.loads(_read_input(path))
    except json.JSONDecodeError as e:
        raise ValidationError("Record input is not valid JSON.", error=str(e)) from None
    if not isinstance(obj, dict):
        raise ValidationError("Record input must be a JSON object.")
    return obj


def _passphrase(env_name: str) -> str:
    p = os.environ.get(env_name)
    if p:
        return p
    return getpass.getpass("Passphrase: ")


def _print_json(obj: Any) -> None:
    print(json.dumps(obj, indent=2, ensure_ascii=False, sort_keys=True))


def _run(args: argparse.Namespace, engine: PrivacyEngine, cm: ConfigManager) -> int:
    policy = _parse_policy(args.policy)
    if args.command == "encrypt":
        record = _read_record(args.input)
        print(engine.encrypt(record, _passphrase(args.passphrase_env), policy))
        return 0
    if args.command == "decrypt":
        envelope = _read_input(args.input).strip()
        _print_json(engine.decrypt(envelope, _passphrase(args.passphrase_env)).to_wire())
        return 0
    if args.command == "apply-policy":
        _print_json(engine.apply_policy(_read_record(args.input), policy).to_wire())
        return 0
    if args.command == "check-access":
        dec = engine.evaluate_access(args.role, policy)
        _print_json({"allowed": dec.allowed, "access_level": dec.access_level.value, "reason": dec.reason})
        return 0 if dec.allowed else 1
    if args.command == "show-config":
        _print_json(cm.get().model_dump())
        return 0
    return 2


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Hearth community record privacy engine")
    ap.add_argument("--root", default=".", help="Directory holding config/ (default: current directory).")
    ap.add_argument("--policy", action="append", metavar="KEY=VALUE", help="Privacy policy override (repeatable).")
    sub = ap.add_subparsers(dest="command", required=True)

    p_enc = sub.add_parser("encrypt", help="Encrypt a JSON record into an envelope string.")
    p_enc.add_argument("--in", dest="input", default=None, help="Record JSON file (default: stdin).")
    p_enc.add_argument("--passphrase-env", default=PASSPHRASE_ENV, help="Env var holding the passphrase; prompts if unset.")

    p_dec = sub.add_parser("decrypt", help="Decrypt an envelope string back into a record.")
    p_dec.add_argument("--in", dest="input", default=None, help="Envelope file (default: stdin).")
    p_dec.add_argument("--passphrase-env", default=PASSPHRASE_ENV, help="Env var holding the passphrase; prompts if unset.")

    p_pol = sub.add_parser("apply-policy", help="Redact/anonymize a JSON record.")
    p_pol.add_argument("--in", dest="input", default=None, help="Record JSON file (default: stdin).")

    p_acc = sub.add_parser("check-access", help="Decide whether a role may see a record (exit 1 when denied).")
    p_acc.add_argument("role")

    sub.add_parser("show-config", help="Print the effective engine configuration.")

    args = ap.parse_args(argv)

    try:
        cm = ConfigManager(fs=ConfigFsPaths(args.root), logger=None)
        cfg = cm.load()
        if not os.path.isabs(cfg.logs_dir):
            cfg = cfg.model_copy(update={"logs_dir": os.path.join(args.root, cfg.logs_dir)})
        engine = build_privacy_engine(cfg, stream_logs=False)
        return _run(args, engine, cm)
    except HearthError as e:
        print(json.dumps(e.to_dict(), ensure_ascii=False), file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())

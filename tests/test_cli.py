from __future__ import annotations

import json

import app


def _write(tmp_path, name, obj):
    p = tmp_path / name
    p.write_text(json.dumps(obj) if not isinstance(obj, str) else obj, encoding="utf-8")
    return str(p)


def _root(tmp_path):
    (tmp_path / "config").mkdir(exist_ok=True)
    (tmp_path / "config" / "engine.json").write_text(json.dumps({"text_log_enabled": False}), encoding="utf-8")
    return ["--root", str(tmp_path)]


def test_apply_policy_command(tmp_path, capsys, sunrise_record):
    rec = _write(tmp_path, "rec.json", sunrise_record)
    rc = app.main(_root(tmp_path) + ["--policy", "sensitivityLevel=high", "apply-policy", "--in", rec])
    assert rc == 0
    out = json.loads(capsys.readouterr().out)
    assert out == {"id": "c1", "name": "Anonymous Community", "content": "gathering notes", "culturalContext": {"masked": True}}


def test_encrypt_then_decrypt_commands(tmp_path, capsys, monkeypatch, sunrise_record):
    monkeypatch.setenv("HEARTH_PASSPHRASE", "correct-horse")
    rec = _write(tmp_path, "rec.json", sunrise_record)
    assert app.main(_root(tmp_path) + ["encrypt", "--in", rec]) == 0
    envelope = capsys.readouterr().out.strip()
    assert envelope.count(":") == 3

    env_file = _write(tmp_path, "rec.env", envelope + "\n")
    assert app.main(_root(tmp_path) + ["decrypt", "--in", env_file]) == 0
    assert json.loads(capsys.readouterr().out) == sunrise_record


def test_decrypt_malformed_envelope_reports_error(tmp_path, capsys, monkeypatch):
    monkeypatch.setenv("HEARTH_PASSPHRASE", "correct-horse")
    env_file = _write(tmp_path, "bad.env", "only:two:fields")
    assert app.main(_root(tmp_path) + ["decrypt", "--in", env_file]) == 2
    err = json.loads(capsys.readouterr().err)
    assert err["code"] == "envelope_format_error"


def test_encrypt_refused_when_disabled(tmp_path, capsys, monkeypatch, sunrise_record):
    monkeypatch.setenv("HEARTH_PASSPHRASE", "correct-horse")
    rec = _write(tmp_path, "rec.json", sunrise_record)
    assert app.main(_root(tmp_path) + ["--policy", "encryptionEnabled=false", "encrypt", "--in", rec]) == 2
    assert json.loads(capsys.readouterr().err)["code"] == "encryption_disabled"


def test_check_access_exit_codes(tmp_path, capsys):
    assert app.main(_root(tmp_path) + ["check-access", "admin"]) == 0
    assert json.loads(capsys.readouterr().out)["allowed"] is True
    assert app.main(_root(tmp_path) + ["--policy", "accessLevel=private", "check-access", "member"]) == 1
    assert (tmp_path / "logs" / "security.log").exists()


def test_bad_policy_syntax(tmp_path, capsys):
    assert app.main(_root(tmp_path) + ["--policy", "nonsense", "check-access", "admin"]) == 2
    assert json.loads(capsys.readouterr().err)["code"] == "validation_error"


def test_show_config(tmp_path, capsys):
    assert app.main(_root(tmp_path) + ["show-config"]) == 0
    assert json.loads(capsys.readouterr().out)["text_log_enabled"] is False


def test_missing_input_file_reports_error(tmp_path, capsys, monkeypatch):
    monkeypatch.setenv("HEARTH_PASSPHRASE", "correct-horse")
    missing = str(tmp_path / "nope.json")
    assert app.main(_root(tmp_path) + ["encrypt", "--in", missing]) == 2
    err = json.loads(capsys.readouterr().err)
    assert err["code"] == "validation_error"
    assert app.main(_root(tmp_path) + ["decrypt", "--in", str(tmp_path)]) == 2
    assert json.loads(capsys.readouterr().err)["code"] == "validation_error"

from __future__ import annotations

import copy

import pytest

from hearth.core.privacy.models import CommunityRecord, coerce_record, merge_policy
from hearth.core.privacy.redaction import ANONYMOUS_NAME, apply_policy, privacy_redact, record_summary


def test_sunrise_circle_scenario(sunrise_record):
    out = apply_policy(coerce_record(sunrise_record), merge_policy({"sensitivityLevel": "high", "anonymize": True}))
    assert out.to_wire() == {
        "id": "c1",
        "name": "Anonymous Community",
        "content": "gathering notes",
        "culturalContext": {"masked": True},
    }


def test_input_record_is_not_mutated(sunrise_record):
    before = copy.deepcopy(sunrise_record)
    rec = coerce_record(sunrise_record)
    out = apply_policy(rec, merge_policy({"sensitivityLevel": "high"}))
    assert sunrise_record == before
    assert rec.name == "Sunrise Circle"
    assert rec.cultural_context == {"tradition": "X"}
    assert out is not rec


@pytest.mark.parametrize("sensitivity", ["low", "medium", "high"])
@pytest.mark.parametrize("anonymize", [True, False])
@pytest.mark.parametrize("context", [None, {"tradition": "X", "songs": ["a", "b"]}, {"masked": True}])
def test_applying_policy_twice_equals_once(sensitivity, anonymize, context):
    rec = CommunityRecord(id="c1", name="Sunrise Circle", content="notes", cultural_context=context)
    policy = merge_policy({"sensitivityLevel": sensitivity, "anonymize": anonymize})
    once = apply_policy(rec, policy)
    assert apply_policy(once, policy) == once


@pytest.mark.parametrize("name", ["", "Sunrise Circle", ANONYMOUS_NAME, "  ", "名前"])
def test_anonymization_replaces_every_name(name):
    rec = CommunityRecord(id="c1", name=name, content="notes")
    assert apply_policy(rec, merge_policy({"anonymize": True})).name == ANONYMOUS_NAME


def test_no_anonymization_keeps_name():
    rec = CommunityRecord(id="c1", name="Sunrise Circle", content="notes")
    assert apply_policy(rec, merge_policy({"anonymize": False})).name == "Sunrise Circle"


@pytest.mark.parametrize("sensitivity", ["low", "medium"])
def test_low_and_medium_keep_cultural_context(sensitivity, sunrise_record):
    out = apply_policy(coerce_record(sunrise_record), merge_policy({"sensitivityLevel": sensitivity}))
    assert out.cultural_context == {"tradition": "X"}


def test_high_sensitivity_leaves_absent_context_absent():
    rec = CommunityRecord(id="c1", name="n", content="notes")
    out = apply_policy(rec, merge_policy({"sensitivityLevel": "high"}))
    assert out.cultural_context is None
    assert "culturalContext" not in out.to_wire()


def test_content_is_never_touched(sunrise_record):
    out = apply_policy(coerce_record(sunrise_record), merge_policy({"sensitivityLevel": "high"}))
    assert out.content == "gathering notes"
    assert out.id == "c1"


def test_record_summary_keeps_metadata_only(sunrise_record):
    s = record_summary(coerce_record(sunrise_record))
    blob = repr(s)
    assert s["id"] == "c1"
    assert s["content_len"] == len("gathering notes")
    assert s["culturalContext_present"] is True
    assert "Sunrise Circle" not in blob
    assert "gathering notes" not in blob
    assert "tradition" not in blob


def test_privacy_redact_also_redacts_secrets():
    out = privacy_redact({"passphrase": "correct-horse", "nested": [{"content": "x"}]})
    assert out["passphrase"] == "***REDACTED***"
    assert out["nested"][0] == {"content_len": 1, "content_hash8": out["nested"][0]["content_hash8"]}

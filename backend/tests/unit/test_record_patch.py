"""Unit tests for RecordPatch and the record entity helpers."""

import pytest

from hermes.domain.entities import PERSONNEL, Record, RecordPatch, get_variant


def test_empty_patch_has_no_changes():
    patch = RecordPatch()
    assert patch.changes() == {}
    assert not patch


def test_none_is_an_explicit_change():
    patch = RecordPatch(chat_identity=None, telepon="0811")
    assert patch.changes() == {"chat_identity": None, "telepon": "0811"}
    assert patch.is_set("chat_identity")
    assert not patch.is_set("nama")


def test_single_builds_one_field_patch():
    assert RecordPatch.single("ig_uname", "budi").changes() == {"ig_uname": "budi"}


def test_single_rejects_unknown_field():
    with pytest.raises(ValueError):
        RecordPatch.single("metadata", {})


def test_get_variant():
    assert get_variant("personnel") is PERSONNEL
    with pytest.raises(ValueError):
        get_variant("admins")


def test_replace_with_keeps_identity_and_creation_time():
    record = Record(variant="personnel", natural_key="1", nama="Budi", chat_identity="99", id=7)
    created_at = record.created_at

    record.replace_with(Record(variant="personnel", natural_key="2", nama="Ahmad", telepon="0811"))

    assert record.natural_key == "2"
    assert record.nama == "Ahmad"
    assert record.telepon == "0811"
    assert record.id == 7
    assert record.chat_identity == "99"
    assert record.created_at == created_at

"""Entry Model — decode, ID assignment and exhaustive semantic validation.

Tests cover:
    - new_entry decodes camelCase JSON and assigns a 32-char hex public id
    - public_id is derived from email + construction time and cannot be reassigned
    - submitAction is case-insensitive and normalised; unknown values are decode errors
    - type mismatches are decode errors
    - valid() accumulates one message per missing field across nested structures
    - valid() is idempotent
"""

import json
from datetime import datetime, timezone

import pytest

from capture.core.entry import (
    Entrant, Entry, EntryItem, Perms, SubmitAction, entry_hash, new_entry,
)
from capture.core.errors import EntryDecodeError

FIXED = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _body(**overrides) -> bytes:
    doc = {
        "campaignName": "Foo",
        "campaignVersion": "0.0.1",
        "entrant": {
            "title": "Mr",
            "firstName": "John",
            "lastName": "Smith",
            "emailAddress": "foo@bar.com",
        },
        "form": [],
    }
    doc.update(overrides)
    return json.dumps(doc).encode()


# ─── new_entry ───────────────────────────────────────────────────

def test_new_entry_decodes_camel_case_fields():
    entry = new_entry(_body(
        sessionFingerprint="fp",
        permissions={"optInEmail": True, "optInPost": True},
        tags=[{"key": "k", "value": "v"}],
    ))
    assert entry.campaign_name == "Foo"
    assert entry.entrant.email_address == "foo@bar.com"
    assert entry.session_fingerprint == "fp"
    assert entry.permissions == Perms(opt_in_email=True, opt_in_post=True)
    assert entry.tags == [EntryItem(key="k", value="v")]


def test_public_id_is_hash_of_email_and_time():
    entry = new_entry(_body(), clock=lambda: FIXED)
    assert entry.public_id == entry_hash("foo@bar.com", FIXED)
    assert len(entry.public_id) == 32
    int(entry.public_id, 16)


def test_public_id_differs_across_construction_times():
    a = new_entry(_body(), clock=lambda: FIXED)
    b = new_entry(_body(), clock=lambda: datetime(2024, 5, 1, 12, 0, 1, tzinfo=timezone.utc))
    assert a.public_id != b.public_id


def test_public_id_cannot_be_reassigned():
    entry = new_entry(_body())
    with pytest.raises((AttributeError, ValueError)):
        entry.public_id = "other"
    assert entry.public_id != "other"


@pytest.mark.parametrize("raw,expected", [
    ("email", SubmitAction.EMAIL),
    ("EMAIL", SubmitAction.EMAIL),
    ("Store", SubmitAction.STORE),
    ("", SubmitAction.NONE),
])
def test_submit_action_case_insensitive(raw, expected):
    assert new_entry(_body(submitAction=raw)).submit_action is expected


def test_submit_action_defaults_to_none():
    assert new_entry(_body()).submit_action is SubmitAction.NONE


def test_unknown_submit_action_is_decode_error():
    with pytest.raises(EntryDecodeError) as exc:
        new_entry(_body(submitAction="print"))
    assert exc.value.messages == [
        "submitAction: submitAction must be one of 'email' or 'store', found 'print'",
    ]


def test_type_mismatch_is_decode_error():
    with pytest.raises(EntryDecodeError) as exc:
        new_entry(_body(campaignName=100))
    assert exc.value.messages[0].startswith("campaignName:")


def test_malformed_json_is_decode_error():
    with pytest.raises(EntryDecodeError):
        new_entry(b"{not json")


def test_deeply_nested_json_is_decode_error():
    body = b'{"form":' + b"[" * 100_000 + b"]" * 100_000 + b"}"
    with pytest.raises(EntryDecodeError):
        new_entry(body)


def test_to_document_uses_wire_names_and_entry_id():
    entry = new_entry(_body(submitAction="Email"), clock=lambda: FIXED)
    doc = entry.to_document()
    assert doc["campaignName"] == "Foo"
    assert doc["submitAction"] == "email"
    assert doc["entrant"]["emailAddress"] == "foo@bar.com"
    assert doc["permissions"]["optInSms"] is False
    assert doc["entryId"] == entry.public_id


# ─── valid() ─────────────────────────────────────────────────────

def test_complete_entry_is_valid():
    assert new_entry(_body()).valid() == (True, [])


def test_valid_entrant_has_no_messages():
    entrant = Entrant(title="Ms", first_name="A", last_name="B", email_address="a@b.c")
    assert entrant.valid() == (True, [])


def test_optional_entrant_fields_unconstrained():
    entrant = Entrant(
        title="Ms", first_name="A", last_name="B", email_address="a@b.c",
        birth_date="not a date", phone_number="",
    )
    assert entrant.valid()[0] is True


def test_perms_always_valid():
    assert Perms().valid() == (True, [])


def test_missing_fields_accumulate_across_structure():
    entry = Entry()
    valid, messages = entry.valid()
    assert valid is False
    assert messages == [
        "campaignName is a required field",
        "campaignVersion is a required field",
        "entrant.title is a required field",
        "entrant.firstName is a required field",
        "entrant.lastName is a required field",
        "entrant.emailAddress is a required field",
    ]


def test_item_messages_name_collection_and_index():
    entry = new_entry(_body(
        form=[{"key": "q1", "value": "a"}, {"key": "", "value": ""}],
        tags=[{"key": "t", "value": ""}],
    ))
    assert entry.valid() == (False, [
        "form[1].key is a required field",
        "form[1].value is a required field",
        "tags[0].value is a required field",
    ])


def test_validation_is_idempotent():
    entry = new_entry(_body(campaignVersion="", form=[{"key": "", "value": "x"}]))
    first = entry.valid()
    assert entry.valid() == first
    assert len(first[1]) == 2

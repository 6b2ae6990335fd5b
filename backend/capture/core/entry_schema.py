"""Entry JSON Schema — structural validation of the raw request body.

Invariants:
    - ENTRY_SCHEMA is draft-04 and static (compiled once at import)
    - All violations are reported, ordered by their position in the document
    - A body that is not JSON (or nested past the parser's depth) raises
      MalformedBodyError (single message, not a list)
    - An object with several unexpected properties yields one violation per property
    - submitAction is matched case-insensitively, like the decoder that follows it

Design Decisions:
    - jsonschema Draft4Validator.iter_errors over validate(): validate() stops at
      the best match, iter_errors yields every violation
    - Violation messages prefixed with the JSON path (form[0].key) so clients can
      map them back onto form fields
"""

import json
import re

from jsonschema import Draft4Validator
from jsonschema.exceptions import ValidationError

from capture.core.errors import MalformedBodyError


def _item_schema(description: str) -> dict:
    return {
        "type": "object",
        "description": description,
        "properties": {
            "key": {"type": "string"},
            "value": {"type": "string"},
        },
        "additionalProperties": False,
        "required": ["key", "value"],
    }


ENTRY_SCHEMA: dict = {
    "$schema": "http://json-schema.org/draft-04/schema#",
    "title": "Campaign POST request body",
    "type": "object",
    "properties": {
        "campaignName": {
            "type": "string",
            "description": "Campaign reference name",
        },
        "campaignVersion": {
            "type": "string",
            "description": "Campaign semantic version number",
        },
        "sessionFingerprint": {
            "type": "string",
            "description": "Campaign entrant browser session hash",
        },
        "submitAction": {
            "type": "string",
            "description": "Action to be taken on entry submission",
            "pattern": "^(?i:email|store)?$",
        },
        "entrant": {
            "type": "object",
            "description": "Campaign entrant information",
            "properties": {
                "title": {"type": "string"},
                "firstName": {"type": "string"},
                "lastName": {"type": "string"},
                "emailAddress": {"type": "string"},
                "phoneNumber": {"type": "string"},
                "birthDate": {"type": "string"},
            },
            "additionalProperties": False,
            "required": ["title", "firstName", "lastName", "emailAddress"],
        },
        "permissions": {
            "type": "object",
            "description": "Marketing opt-in indicators",
            "properties": {
                "optInEmail": {"type": "boolean"},
                "optInPhone": {"type": "boolean"},
                "optInSms": {"type": "boolean"},
                "optInPost": {"type": "boolean"},
            },
            "additionalProperties": False,
        },
        "form": {
            "type": "array",
            "description": "Campaign questions and responses",
            "items": _item_schema("Campaign question and response"),
        },
        "tags": {
            "type": "array",
            "description": "Arbitrary key/value metadata",
            "items": _item_schema("Optional extra information"),
        },
    },
    "additionalProperties": False,
    "required": ["campaignName", "campaignVersion", "entrant", "form"],
}

Draft4Validator.check_schema(ENTRY_SCHEMA)
_validator = Draft4Validator(ENTRY_SCHEMA)


def format_path(path) -> str:
    """Render a JSON path as entrant.title / form[0].key."""
    out = ""
    for part in path:
        if isinstance(part, int):
            out += f"[{part}]"
        else:
            out += f".{part}" if out else str(part)
    return out


def _sort_key(error: ValidationError) -> tuple:
    # ints (array indices) and strs (object keys) never share a level
    return tuple((isinstance(p, int), p) for p in error.absolute_path)


def _unexpected_keys(error: ValidationError) -> list[str]:
    declared = error.schema.get("properties", {})
    patterns = error.schema.get("patternProperties", {})
    return [
        key for key in error.instance
        if key not in declared and not any(re.search(p, key) for p in patterns)
    ]


def _describe(error: ValidationError) -> list[str]:
    if error.validator == "additionalProperties":
        messages = [
            f"Additional property {key!r} is not allowed"
            for key in _unexpected_keys(error)
        ]
    else:
        messages = [error.message]
    path = format_path(error.absolute_path)
    return [f"{path}: {m}" if path else m for m in messages]


def schema_violations(body: bytes) -> list[str]:
    """Validate raw body bytes; return every violation (empty list when valid)."""
    try:
        document = json.loads(body)
    except json.JSONDecodeError as e:
        raise MalformedBodyError(e.msg) from e
    except UnicodeDecodeError as e:
        raise MalformedBodyError("body is not valid UTF-8") from e
    except RecursionError as e:
        raise MalformedBodyError("body is nested too deeply") from e
    errors = sorted(_validator.iter_errors(document), key=_sort_key)
    return [m for e in errors for m in _describe(e)]

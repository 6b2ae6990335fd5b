"""Entry Model — typed campaign submission, decode, semantic validation and ID assignment.

Invariants:
    - Wire names are camelCase (alias generator); Python attributes are snake_case
    - Missing string fields decode to "" so valid() can report them
    - submit_action is normalised to lowercase; anything outside {email, store, ""}
      is a decode error, not a validation error
    - public_id is assigned once by new_entry() and has no setter
    - valid() is exhaustive (never stops at the first problem) and side-effect free

Design Decisions:
    - Pydantic handles decode (type mismatches surface as EntryDecodeError);
      semantic rules live in valid() so the full message list is returned
    - public_id = md5(email + timestamp): opaque identifier, not a commitment
    - Form and Tags share EntryItem; the owning collection name is passed in so
      messages read form[0].key / tags[2].value
"""

import hashlib
from datetime import datetime, timezone
from enum import Enum
from typing import Callable

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from capture.core.errors import EntryDecodeError


Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _required(value: str, path: str) -> list[str]:
    return [] if value else [f"{path} is a required field"]


class SubmitAction(str, Enum):
    """What the campaign front end asked the backend to do with the entry."""
    EMAIL = "email"
    STORE = "store"
    NONE = ""


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore",
    )


class Entrant(_WireModel):
    """The individual who submitted the entry."""
    title: str = ""
    first_name: str = ""
    last_name: str = ""
    email_address: str = ""
    birth_date: str = ""
    phone_number: str = ""

    def valid(self) -> tuple[bool, list[str]]:
        msgs = (
            _required(self.title, "entrant.title")
            + _required(self.first_name, "entrant.firstName")
            + _required(self.last_name, "entrant.lastName")
            + _required(self.email_address, "entrant.emailAddress")
        )
        return not msgs, msgs


class Perms(_WireModel):
    """Contact permission flags at time of capture. No required fields."""
    opt_in_email: bool = False
    opt_in_phone: bool = False
    opt_in_sms: bool = False
    opt_in_post: bool = False

    def valid(self) -> tuple[bool, list[str]]:
        return True, []


class EntryItem(_WireModel):
    """A key/value pair: a questionnaire answer (form) or free metadata (tags)."""
    key: str = ""
    value: str = ""

    def valid(self, path: str) -> tuple[bool, list[str]]:
        msgs = _required(self.key, f"{path}.key") + _required(self.value, f"{path}.value")
        return not msgs, msgs


class Entry(_WireModel):
    """One campaign submission."""
    campaign_name: str = ""
    campaign_version: str = ""
    session_fingerprint: str = ""
    submit_action: SubmitAction = SubmitAction.NONE
    entrant: Entrant = Field(default_factory=Entrant)
    permissions: Perms = Field(default_factory=Perms)
    form: list[EntryItem] = Field(default_factory=list)
    tags: list[EntryItem] = Field(default_factory=list)

    _public_id: str = PrivateAttr(default="")

    @field_validator("submit_action", mode="before")
    @classmethod
    def normalise_submit_action(cls, v):
        if not isinstance(v, str):
            return v
        lowered = v.lower()
        if lowered not in {a.value for a in SubmitAction}:
            raise ValueError(
                f"submitAction must be one of 'email' or 'store', found '{v}'",
            )
        return lowered

    @property
    def public_id(self) -> str:
        return self._public_id

    def valid(self) -> tuple[bool, list[str]]:
        """Validate this entry and every nested structure, accumulating all messages."""
        msgs = (
            _required(self.campaign_name, "campaignName")
            + _required(self.campaign_version, "campaignVersion")
        )
        msgs += self.entrant.valid()[1]
        msgs += self.permissions.valid()[1]
        for i, item in enumerate(self.form):
            msgs += item.valid(f"form[{i}]")[1]
        for i, item in enumerate(self.tags):
            msgs += item.valid(f"tags[{i}]")[1]
        return not msgs, msgs

    def to_document(self) -> dict:
        """camelCase document for persistence, including entryId."""
        doc = self.model_dump(by_alias=True, mode="json")
        doc["entryId"] = self.public_id
        return doc


def entry_hash(email_address: str, at: datetime) -> str:
    """Opaque 32-char hex identifier for an entrant at a point in time."""
    h = hashlib.md5()
    h.update(email_address.encode("utf-8"))
    h.update(str(at).encode("utf-8"))
    return h.hexdigest()


def _format_decode_error(err: dict) -> str:
    field = ".".join(str(p) for p in err["loc"])
    msg = err["msg"]
    if err["type"] == "value_error":
        msg = str(err["ctx"]["error"])
    return f"{field}: {msg}" if field else msg


def new_entry(body: bytes, clock: Clock = _utcnow) -> Entry:
    """Decode a request body into an Entry and assign its public id.

    Raises EntryDecodeError on malformed or over-nested JSON, type mismatches
    or an unknown submitAction.
    """
    try:
        entry = Entry.model_validate_json(body)
    except ValidationError as e:
        raise EntryDecodeError([_format_decode_error(err) for err in e.errors()]) from e
    except RecursionError as e:
        raise EntryDecodeError(["body is nested too deeply"]) from e
    entry._public_id = entry_hash(entry.entrant.email_address, clock())
    return entry

"""Response Envelopes — the two JSON shapes every capture response takes.

Invariants:
    - ErrorEnvelope.messages is never empty
    - SuccessEnvelope serialises entry_id as entryId
"""

from pydantic import BaseModel, ConfigDict, Field


class ErrorEnvelope(BaseModel):
    """Error response: HTTP status plus every client-facing message."""
    status: int = Field(ge=400, le=599)
    messages: list[str] = Field(min_length=1)


class SuccessEnvelope(BaseModel):
    """Success response carrying the public entry id."""
    model_config = ConfigDict(populate_by_name=True)

    status: int = 200
    entry_id: str = Field(alias="entryId", min_length=1)

"""Base model for generated records and request bodies."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class BotApiModel(BaseModel):
    """Immutable Bot API record.

    Fields whose Python name differs from the wire name (``from_`` for
    ``from``) declare an alias; both spellings are accepted on input and
    the wire name is used when serialising by alias. Unknown keys sent by
    newer API versions are ignored.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

"""
Shared model plumbing.

Python code uses snake_case attributes; the JSON API speaks camelCase.
Money is kept as Decimal internally and rendered as a JSON number.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel


Money = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json"),
]


def utcnow() -> datetime:
    """Naive UTC timestamp, the format every storage backend round-trips."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class CamelModel(BaseModel):
    """Base model with camelCase aliases and whitespace stripping."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

"""Shared Pydantic base for API-facing models."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Model serialized with camelCase aliases.

    Python code and database rows use snake_case field names; the HTTP
    layer dumps by alias, so clients see ``tokenId``/``totalSupply``.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def normalize_address(value: str) -> str:
    """Canonical (lowercased, trimmed) form of a chain address."""
    return value.strip().lower()

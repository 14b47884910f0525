"""Serialization helpers for route envelopes."""

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel


def dump(model: BaseModel) -> dict[str, Any]:
    """JSON-ready camelCase form of an API model."""
    return model.model_dump(mode="json", by_alias=True)


def dump_all(models: Iterable[BaseModel]) -> list[dict[str, Any]]:
    return [dump(m) for m in models]

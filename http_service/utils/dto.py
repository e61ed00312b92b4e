"""
Plain-to-DTO conversion helpers.

Decoded JSON values are coerced into typed values through pydantic
``TypeAdapter``s, so any type pydantic can validate (models, dataclasses,
TypedDicts, builtins) works as a target.
"""

from functools import lru_cache
from typing import Any, Optional, Type, TypeVar

from pydantic import BaseModel, TypeAdapter

T = TypeVar("T")


@lru_cache(maxsize=256)
def _adapter_for(dto: Any) -> TypeAdapter[Any]:
    return TypeAdapter(dto)


def plain_to_dto(plain: Any, dto: Optional[Type[T]] = None) -> Any:
    """
    Convert a decoded JSON value into ``dto`` instances.

    Lists are converted element-wise. ``None`` and calls without a DTO return
    the value unchanged.

    Args:
        plain: Decoded JSON value
        dto: Target type

    Returns:
        DTO instance, list of DTO instances, or the untouched value

    Raises:
        pydantic.ValidationError: If the value does not fit the DTO
    """
    if dto is None or plain is None:
        return plain

    adapter = _adapter_for(dto)
    if isinstance(plain, list):
        return [adapter.validate_python(item) for item in plain]
    return adapter.validate_python(plain)


def dto_to_plain(value: Any) -> Any:
    """
    Convert pydantic models (also nested in lists/dicts) into JSON-able data.

    Args:
        value: Request body

    Returns:
        Value safe to hand to a JSON encoder
    """
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, dict):
        return {key: dto_to_plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [dto_to_plain(item) for item in value]
    return value

"""
Object masker for diagnostic logging.

Produces a redacted copy of request/response data before it reaches a log
line. Fields are matched by name at any depth, including inside list
elements. Hidden fields are dropped from the copy; masked fields keep their
visible length but every character becomes ``*``.
"""

from typing import Any, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field

MASK_CHAR = "*"

_CONTAINER_TYPES = (dict, list, tuple)


class MaskOptions(BaseModel):
    """Field names to hide or mask in logged data."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    hide_properties: List[str] = Field(
        default_factory=list,
        alias="hideProperties",
        description="Field names removed from logged data",
    )
    mask_properties: List[str] = Field(
        default_factory=list,
        alias="maskProperties",
        description="Field names replaced by a same-length run of '*'",
    )

    @property
    def is_empty(self) -> bool:
        """True when no rule is configured."""
        return not self.hide_properties and not self.mask_properties


def mask_object(value: Any, options: Optional[MaskOptions] = None) -> Any:
    """
    Return a redacted copy of ``value``.

    The input is never mutated. Primitives, ``None`` and calls without rules
    return the input unchanged.

    Args:
        value: Data to redact (dict, list, tuple or primitive)
        options: Hide/mask rules

    Returns:
        Redacted copy of the data

    Examples:
        >>> mask_object({"a": 1, "b": {"c": 2, "d": 3}},
        ...             MaskOptions(hide_properties=["c"], mask_properties=["d"]))
        {'a': 1, 'b': {'d': '*'}}
    """
    if not isinstance(value, _CONTAINER_TYPES):
        return value
    if options is None or options.is_empty:
        return value

    hide = frozenset(options.hide_properties)
    # hide takes precedence when a name is listed twice
    mask = frozenset(options.mask_properties) - hide
    return _mask_container(value, hide, mask)


def _mask_container(value: Any, hide: FrozenSet[str], mask: FrozenSet[str]) -> Any:
    if isinstance(value, dict):
        masked: dict[Any, Any] = {}
        for key, item in value.items():
            if item is None:
                masked[key] = item
            elif isinstance(item, dict) or _is_nested_sequence(item):
                masked[key] = _mask_container(item, hide, mask)
            elif isinstance(item, (list, tuple)) and not item:
                masked[key] = []
            elif key in hide:
                continue
            elif key in mask:
                masked[key] = MASK_CHAR * _visible_length(item)
            elif isinstance(item, (list, tuple)):
                masked[key] = list(item)
            else:
                masked[key] = item
        return masked

    return [
        _mask_container(item, hide, mask) if isinstance(item, _CONTAINER_TYPES) else item
        for item in value
    ]


def _is_nested_sequence(value: Any) -> bool:
    """A list holding records or lists is walked, never masked as a whole."""
    return isinstance(value, (list, tuple)) and any(
        isinstance(item, _CONTAINER_TYPES) for item in value
    )


def _visible_length(value: Any) -> int:
    if isinstance(value, str):
        return len(value)
    if isinstance(value, (list, tuple)):
        return len(value)
    if isinstance(value, bool):
        return len("true" if value else "false")
    if isinstance(value, float) and value.is_integer():
        return len(str(int(value)))
    return len(str(value))

"""
Base domain model with camelCase JSON compatibility.

Command files written for the original tool use camelCase keys
(altName, subCommands, canExecuteShell); Python code uses snake_case.
Models inheriting from BaseDomainModel convert in both directions.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, fields
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Type, TypeVar

T = TypeVar("T", bound="BaseDomainModel")


def to_camel_case(snake_str: str) -> str:
    """
    Convert snake_case to camelCase.

    Examples:
        >>> to_camel_case("source_path")
        'sourcePath'
        >>> to_camel_case("can_execute_shell")
        'canExecuteShell'
    """
    components = snake_str.split("_")
    return components[0] + "".join(x.title() for x in components[1:])


def lookup(data: Mapping[str, Any], field_name: str, default: Any = None) -> Any:
    """Read a snake_case field from a mapping that may use camelCase keys."""
    if field_name in data:
        return data[field_name]
    return data.get(to_camel_case(field_name), default)


def has_key(data: Mapping[str, Any], field_name: str) -> bool:
    """True if the mapping carries the field under either spelling."""
    return field_name in data or to_camel_case(field_name) in data


def _to_json_value(value: Any) -> Any:
    if isinstance(value, BaseDomainModel):
        return value.to_json()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, (set, frozenset)):
        return sorted(_to_json_value(item) for item in value)
    if isinstance(value, (list, tuple)):
        return [_to_json_value(item) for item in value]
    if isinstance(value, dict):
        return {k: _to_json_value(v) for k, v in value.items()}
    return value


@dataclass(frozen=True)
class BaseDomainModel:
    """
    Base class for domain models.

    - to_json() serializes to camelCase
    - from_json() accepts camelCase or snake_case keys
    - Enums serialize to their value, sets to sorted lists, paths to strings
    - Callables are not serializable and are skipped
    """

    def to_json(self) -> Dict[str, Any]:
        """
        Serialize to camelCase JSON.

        Returns:
            Dictionary with camelCase keys
        """
        result: Dict[str, Any] = {}

        for field in fields(self):
            value = getattr(self, field.name)
            if callable(value) and not isinstance(value, BaseDomainModel):
                continue
            result[to_camel_case(field.name)] = _to_json_value(value)

        return result

    @classmethod
    def from_json(cls: Type[T], data: Mapping[str, Any]) -> T:
        """
        Deserialize from a camelCase or snake_case mapping.

        Args:
            data: Mapping with field values

        Returns:
            Instance of the domain model

        Raises:
            ValueError: If a required field is missing
        """
        kwargs: Dict[str, Any] = {}

        for field in fields(cls):
            if not has_key(data, field.name):
                if (
                    field.default is not dataclasses.MISSING
                    or field.default_factory is not dataclasses.MISSING  # type: ignore[misc]
                ):
                    continue
                raise ValueError(f"Missing required field: {to_camel_case(field.name)}")

            kwargs[field.name] = lookup(data, field.name)

        return cls(**kwargs)

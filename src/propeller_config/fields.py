"""Field table: the external surface of the configuration schema.

Each leaf field of ``Config`` is described by its dotted external key, the
command-line flag and environment variable a loader maps onto it, its type,
its default (in external form) and its description. Documentation generators
and flag parsers read this table; the table itself is plain data.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel
from whenever import TimeDelta

from propeller_config.defaults import DEFAULT_CONFIG, SECTION_KEY
from propeller_config.models import Config
from propeller_config.types import FieldValueType


class ConfigField(BaseModel):
    key: str
    attribute_path: str
    flag: str
    env_var: str
    value_type: FieldValueType
    default: int | float | str | bool
    description: str
    allowed_values: list[str] | None = None


class FieldTable:
    """Lookup table of configuration fields keyed by dotted external key."""

    def __init__(self, section_key: str = SECTION_KEY) -> None:
        self.section_key = section_key
        self._entries: dict[str, ConfigField] = {}

    def register(self, entry: ConfigField) -> None:
        if entry.key in self._entries:
            raise ValueError(f"Field '{entry.key}' is already registered")
        self._entries[entry.key] = entry

    def get(self, key: str) -> ConfigField | None:
        return self._entries.get(key)

    def find_by_env_var(self, env_var: str) -> ConfigField | None:
        for entry in self._entries.values():
            if entry.env_var == env_var:
                return entry
        return None

    def all_keys(self) -> list[str]:
        return list(self._entries.keys())

    def all_entries(self) -> list[ConfigField]:
        return list(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)


def flag_name(section_key: str, key: str) -> str:
    return f"--{section_key}.{key}"


def env_var_name(section_key: str, key: str) -> str:
    """``propeller`` + ``queue.sub-queue.rate`` → ``PROPELLER_QUEUE_SUB_QUEUE_RATE``."""
    raw = f"{section_key}.{key}"
    return raw.upper().replace(".", "_").replace("-", "_")


def build_field_table(
    model: type[BaseModel] = Config,
    defaults: BaseModel = DEFAULT_CONFIG,
    section_key: str = SECTION_KEY,
) -> FieldTable:
    """Build the field table for ``model`` using ``defaults`` for default values."""
    table = FieldTable(section_key)
    external = defaults.model_dump(mode="json", by_alias=True)
    _collect(table, model, defaults, external, key_prefix="", attr_prefix="")
    return table


def _collect(
    table: FieldTable,
    model: type[BaseModel],
    value: BaseModel,
    external: dict[str, Any],
    *,
    key_prefix: str,
    attr_prefix: str,
) -> None:
    for name, info in model.model_fields.items():
        alias = info.alias or name
        key = f"{key_prefix}{alias}"
        attribute_path = f"{attr_prefix}{name}"
        current = getattr(value, name)

        if isinstance(current, BaseModel):
            _collect(
                table,
                type(current),
                current,
                external[alias],
                key_prefix=f"{key}.",
                attr_prefix=f"{attribute_path}.",
            )
            continue

        table.register(
            ConfigField(
                key=key,
                attribute_path=attribute_path,
                flag=flag_name(table.section_key, key),
                env_var=env_var_name(table.section_key, key),
                value_type=_value_type(current),
                default=external[alias],
                description=info.description or "",
                allowed_values=[m.value for m in type(current)]
                if isinstance(current, StrEnum)
                else None,
            )
        )


def _value_type(value: Any) -> FieldValueType:
    if isinstance(value, StrEnum):
        return FieldValueType.ENUM
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return FieldValueType.BOOL
    if isinstance(value, int):
        return FieldValueType.INT
    if isinstance(value, float):
        return FieldValueType.FLOAT
    if isinstance(value, TimeDelta):
        return FieldValueType.DURATION
    return FieldValueType.STR

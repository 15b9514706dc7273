"""Explain capability: deterministic, template-based explanation of a single field."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel

from propeller_config.document import config_to_dict
from propeller_config.types import FieldValueType  # noqa: TC001

if TYPE_CHECKING:
    from propeller_config.fields import FieldTable
    from propeller_config.models import Config


class UnknownFieldError(ValueError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Unknown configuration key '{key}'")


class FieldExplanation(BaseModel):
    key: str
    value_type: FieldValueType
    value: int | float | str | bool
    default: int | float | str | bool
    source: Literal["default", "override"]
    description: str
    flag: str
    env_var: str
    allowed_values: list[str] | None = None

    def to_text(self) -> str:
        lines = [
            f"Field: {self.key}",
            f"  Type: {self.value_type.value}",
            f"  Value: {self.value} (source: {self.source})",
            f"  Default: {self.default}",
        ]
        if self.allowed_values:
            lines.append(f"  Allowed: {', '.join(self.allowed_values)}")
        lines.extend(
            [
                f"  Flag: {self.flag}",
                f"  Env: {self.env_var}",
                f"  Purpose: {self.description}",
            ]
        )
        return "\n".join(lines)

    def to_json(self) -> str:
        return self.model_dump_json(indent=2)


def explain_field(key: str, config: Config, table: FieldTable) -> FieldExplanation:
    entry = table.get(key)
    if entry is None:
        raise UnknownFieldError(key)

    value = _lookup(config_to_dict(config), key)
    return FieldExplanation(
        key=key,
        value_type=entry.value_type,
        value=value,
        default=entry.default,
        source="default" if value == entry.default else "override",
        description=entry.description,
        flag=entry.flag,
        env_var=entry.env_var,
        allowed_values=entry.allowed_values,
    )


def _lookup(document: dict[str, Any], key: str) -> Any:
    # External keys never contain dots, so the dotted path splits cleanly
    node: Any = document
    for part in key.split("."):
        node = node[part]
    return node

"""Document codec: Config to and from its external YAML/JSON representation.

The external form uses the kebab-case keys and Go-style duration strings the
controller's configuration files use. Keys missing from a document take their
defaults; unknown keys are rejected.

Sub-sections registered under a section share its document namespace. When
the section is passed in, their keys are split out and decoded against the
sub-section's own type instead of being rejected as unknown.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import yaml
from pydantic import BaseModel, ValidationError

from propeller_config.defaults import SECTION_KEY
from propeller_config.models import Config
from propeller_config.registry import validation_messages

if TYPE_CHECKING:
    from propeller_config.registry import Section


class DocumentError(ValueError):
    """Raised when a configuration document cannot be decoded into a Config."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


def config_to_dict(config: Config) -> dict[str, Any]:
    return config.model_dump(mode="json", by_alias=True)


def section_to_dict(section: Section[Any]) -> Any:
    """External form of a section's current value with its sub-sections merged in."""
    value = section.get_config()
    data = value.model_dump(mode="json", by_alias=True) if isinstance(value, BaseModel) else value
    if isinstance(data, dict):
        for key, child in section.sub_sections().items():
            data[key] = section_to_dict(child)
    return data


def config_to_json(config: Config, *, indent: int | None = 2) -> str:
    return json.dumps(config_to_dict(config), indent=indent, ensure_ascii=False)


def config_to_yaml(config: Config, *, wrap_section: bool = False) -> str:
    data = config_to_dict(config)
    if wrap_section:
        data = {SECTION_KEY: data}
    return yaml.safe_dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)


def sections_from_dict(data: Any, section: Section[Any]) -> dict[str, Any]:
    """Decode a document for ``section`` and every sub-section registered under it.

    Returns:
        Decoded values keyed by section path (``"propeller"``,
        ``"propeller.catalog-cache"``, ...). Sub-sections absent from the
        document map to their registered defaults.

    Raises:
        DocumentError: If any part of the document is invalid. Errors from
            all sections are reported together.
    """
    data = _unwrap(data, section.key)
    values: dict[str, Any] = {}
    errors: list[str] = []
    _decode_section(section, data, "", values, errors)
    if errors:
        raise DocumentError(
            f"Invalid configuration ({len(errors)} error(s)):\n" + "\n".join(errors),
            errors=errors,
        )
    return values


def config_from_dict(data: Any, section: Section[Config] | None = None) -> Config:
    if section is not None:
        return sections_from_dict(data, section)[section.path]

    data = _unwrap(data, SECTION_KEY)
    try:
        return Config.model_validate(data)
    except ValidationError as e:
        messages = validation_messages(e)
        raise DocumentError(
            f"Invalid configuration ({len(messages)} error(s)):\n" + "\n".join(messages),
            errors=messages,
        ) from e


def config_from_json(text: str, section: Section[Config] | None = None) -> Config:
    return config_from_dict(_parse_json(text), section)


def config_from_yaml(text: str, section: Section[Config] | None = None) -> Config:
    return config_from_dict(_parse_yaml(text), section)


def sections_from_yaml(text: str, section: Section[Any]) -> dict[str, Any]:
    return sections_from_dict(_parse_yaml(text), section)


def sections_from_json(text: str, section: Section[Any]) -> dict[str, Any]:
    return sections_from_dict(_parse_json(text), section)


def _parse_json(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise DocumentError(f"Failed to parse JSON: {e}") from e


def _parse_yaml(text: str) -> Any:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DocumentError(f"Failed to parse YAML: {e}") from e


def _unwrap(data: Any, section_key: str) -> dict[Any, Any]:
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise DocumentError(
            f"Configuration document must contain a mapping, got {type(data).__name__}"
        )
    # Whole-file documents nest the section under its key
    if set(data) == {section_key} and isinstance(data[section_key], dict | None):
        data = data[section_key] or {}
    return data


def _decode_section(
    section: Section[Any],
    payload: Any,
    prefix: str,
    values: dict[str, Any],
    errors: list[str],
) -> None:
    children = section.sub_sections()
    nested: dict[str, Any] = {}
    if isinstance(payload, dict) and children:
        own: dict[Any, Any] = {}
        for key, item in payload.items():
            name = key.strip().lower() if isinstance(key, str) else key
            if name in children:
                nested[name] = item
            else:
                own[key] = item
        payload = own

    values[section.path] = _decode_value(section, payload, prefix, errors)

    for name, child in children.items():
        if name in nested:
            _decode_section(child, nested[name], f"{prefix}{name}.", values, errors)
        else:
            _fill_defaults(child, values)


def _decode_value(section: Section[Any], payload: Any, prefix: str, errors: list[str]) -> Any:
    config_type = section.config_type
    if issubclass(config_type, BaseModel):
        try:
            return config_type.model_validate({} if payload is None else payload)
        except ValidationError as e:
            errors.extend(validation_messages(e, prefix))
            return None

    if isinstance(payload, config_type):
        return payload
    where = prefix.rstrip(".") or "(root)"
    errors.append(f"[{where}] expected {config_type.__name__}, got {type(payload).__name__}")
    return None


def _fill_defaults(section: Section[Any], values: dict[str, Any]) -> None:
    values[section.path] = section.defaults
    for child in section.sub_sections().values():
        _fill_defaults(child, values)

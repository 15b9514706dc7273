"""Section registry: named, independently registrable configuration sub-trees.

A ``ConfigRegistry`` is an ordinary object: components that need
configuration should be handed one (or a ``Section``) explicitly. The
process-wide instance from ``get_root_registry()`` is only a convenience for
code that runs at import time.

Registration faults are defects, not runtime input errors. They are raised
and never handled here; a process with an ambiguous configuration identity
should not finish starting up.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError
from pydantic_core import PydanticSerializationError

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger("propeller_config.registry")

T = TypeVar("T")


class ConfigSectionError(Exception):
    """Base class for section registration and retrieval defects."""


class DuplicateSectionError(ConfigSectionError, ValueError):
    def __init__(self, key: str, parent: str | None = None) -> None:
        self.key = key
        self.parent = parent
        where = f" under '{parent}'" if parent else ""
        super().__init__(f"Section '{key}' is already registered{where}")


class SectionNotRegisteredError(ConfigSectionError, LookupError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Section '{key}' has not been registered")


class SectionTypeError(ConfigSectionError, TypeError):
    def __init__(self, key: str, expected: type, actual: type) -> None:
        self.key = key
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Section '{key}' holds {actual.__name__}, expected {expected.__name__}"
        )


class SectionValueError(ConfigSectionError, ValueError):
    def __init__(self, key: str, errors: list[str]) -> None:
        self.key = key
        self.errors = errors
        super().__init__(f"Section '{key}' rejected an invalid value: " + "; ".join(errors))


def validation_messages(error: ValidationError, prefix: str = "") -> list[str]:
    """Flatten a ValidationError into ``"[dotted.loc] message"`` lines.

    ``prefix`` is the dotted key of the sub-tree that was validated, e.g.
    ``"catalog-cache."``.
    """
    messages = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err["loc"])
        where = f"{prefix}{loc}" if loc else prefix.rstrip(".")
        messages.append(f"[{where or '(root)'}] {err['msg']}")
    return messages


def _normalize_key(key: str) -> str:
    normalized = key.strip().lower()
    if not normalized:
        raise ValueError("Section key must be a non-empty string")
    return normalized


class Section(Generic[T]):
    """A registered configuration section and its current value.

    The value starts as the registered defaults. The external loader replaces
    it once during startup via ``set_config``; afterwards it is only read.
    """

    def __init__(self, key: str, defaults: T, *, parent: Section[Any] | None = None) -> None:
        self.key = key
        self.parent = parent
        self.config_type: type[T] = type(defaults)
        self._defaults = defaults
        self._value = defaults
        self._children: dict[str, Section[Any]] = {}

    @property
    def path(self) -> str:
        """Dotted key from the root section, e.g. ``propeller.catalog``."""
        if self.parent is None:
            return self.key
        return f"{self.parent.path}.{self.key}"

    @property
    def defaults(self) -> T:
        return self._defaults

    def get_config(self) -> T:
        value = self._value
        if not isinstance(value, self.config_type):
            raise SectionTypeError(self.path, self.config_type, type(value))
        return value

    def set_config(self, value: T) -> None:
        """Install a new value for this section.

        Pydantic values are validated again from their dumped form, so an
        instance built with ``model_copy(update=...)`` cannot smuggle in a
        value its own schema would reject.

        Raises:
            SectionTypeError: If ``value`` is not of the registered type.
            SectionValueError: If ``value`` fails its model's validation.
        """
        if not isinstance(value, self.config_type):
            raise SectionTypeError(self.path, self.config_type, type(value))
        if isinstance(value, BaseModel):
            value = self._revalidate(value)
        self._value = value
        logger.debug("Section %s updated", self.path)

    def _revalidate(self, value: BaseModel) -> T:
        try:
            return self.config_type.model_validate(  # type: ignore[attr-defined]
                value.model_dump(by_alias=True, warnings=False)
            )
        except ValidationError as e:
            raise SectionValueError(self.path, validation_messages(e)) from e
        except PydanticSerializationError as e:
            raise SectionValueError(self.path, [str(e)]) from e

    def reset(self) -> None:
        self._value = self._defaults

    def register_sub_section(self, key: str, defaults: Any) -> Section[Any]:
        normalized = _normalize_key(key)
        if normalized in self._children or normalized in self._field_keys():
            raise DuplicateSectionError(normalized, parent=self.path)
        child: Section[Any] = Section(normalized, defaults, parent=self)
        self._children[normalized] = child
        logger.debug("Registered sub-section %s", child.path)
        return child

    def must_register_sub_section(self, key: str, defaults: Any) -> Section[Any]:
        return self.register_sub_section(key, defaults)

    def get_sub_section(self, key: str) -> Section[Any]:
        normalized = _normalize_key(key)
        child = self._children.get(normalized)
        if child is None:
            raise SectionNotRegisteredError(f"{self.path}.{normalized}")
        return child

    def sub_sections(self) -> Mapping[str, Section[Any]]:
        return MappingProxyType(self._children)

    def _field_keys(self) -> set[str]:
        # A sub-section shares the parent's document namespace, so it must not
        # shadow one of the parent's own external keys.
        if not isinstance(self._defaults, BaseModel):
            return set()
        return {
            (info.alias or name).lower()
            for name, info in type(self._defaults).model_fields.items()
        }

    def __repr__(self) -> str:
        return f"Section({self.path!r}, {self.config_type.__name__})"


class ConfigRegistry:
    """Registry of top-level configuration sections, keyed case-insensitively."""

    def __init__(self) -> None:
        self._sections: dict[str, Section[Any]] = {}

    def register_section(self, key: str, defaults: T) -> Section[T]:
        normalized = _normalize_key(key)
        if normalized in self._sections:
            raise DuplicateSectionError(normalized)
        section = Section(normalized, defaults)
        self._sections[normalized] = section
        logger.debug(
            "Registered section %s (%s)", normalized, type(defaults).__name__
        )
        return section

    def must_register_section(self, key: str, defaults: T) -> Section[T]:
        return self.register_section(key, defaults)

    def get_section(self, key: str) -> Section[Any]:
        normalized = _normalize_key(key)
        section = self._sections.get(normalized)
        if section is None:
            raise SectionNotRegisteredError(normalized)
        return section

    def has_section(self, key: str) -> bool:
        return _normalize_key(key) in self._sections

    def section_keys(self) -> list[str]:
        return list(self._sections.keys())

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and bool(key.strip()) and self.has_section(key)

    def __len__(self) -> int:
        return len(self._sections)


@lru_cache(maxsize=1)
def get_root_registry() -> ConfigRegistry:
    """Get the process-wide registry singleton."""
    return ConfigRegistry()

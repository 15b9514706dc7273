"""Binding of the propeller ``Config`` into the section registry.

Importing this module registers ``DEFAULT_CONFIG`` under ``"propeller"`` in
the root registry, the same way the controller does at process start. Code
that wants an isolated registry (tests, embedded tooling) calls
``register_config_section`` with its own ``ConfigRegistry`` and passes the
returned section around.
"""

from __future__ import annotations

from typing import Any

from propeller_config.defaults import DEFAULT_CONFIG, SECTION_KEY
from propeller_config.models import Config
from propeller_config.registry import ConfigRegistry, Section, get_root_registry


def register_config_section(registry: ConfigRegistry) -> Section[Config]:
    return registry.must_register_section(SECTION_KEY, DEFAULT_CONFIG)


config_section: Section[Config] = register_config_section(get_root_registry())


def get_config(section: Section[Config] | None = None) -> Config:
    """Return the effective propeller configuration.

    Args:
        section: Section to read from. Defaults to the root registry binding.

    Raises:
        SectionTypeError: If the stored value is not a ``Config``.
    """
    return (section or config_section).get_config()


def must_register_sub_section(
    key: str,
    defaults: Any,
    section: Section[Config] | None = None,
) -> Section[Any]:
    """Nest another component's configuration under the propeller section."""
    return (section or config_section).must_register_sub_section(key, defaults)

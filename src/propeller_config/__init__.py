"""Configuration schema and section registration for the propeller workflow controller.

Usage:
    from propeller_config import get_config

    config = get_config()
    config.queue.queue.base_delay       # TimeDelta(seconds=10)
    config.leader_election.enabled      # False

Other components extend the configuration surface with their own sections:

    catalog_section = must_register_sub_section("catalog-cache", CatalogConfig())
"""

from propeller_config.controller import (
    config_section,
    get_config,
    must_register_sub_section,
    register_config_section,
)
from propeller_config.defaults import DEFAULT_CONFIG, SECTION_KEY
from propeller_config.models import (
    CompositeQueueConfig,
    Config,
    DefaultDeadlines,
    KubeClientConfig,
    LeaderElectionConfig,
    NodeConfig,
    WorkqueueConfig,
)
from propeller_config.registry import (
    ConfigRegistry,
    ConfigSectionError,
    DuplicateSectionError,
    Section,
    SectionNotRegisteredError,
    SectionTypeError,
    SectionValueError,
    get_root_registry,
)
from propeller_config.types import CompositeQueueType, NamespacedName, WorkqueueType

__all__ = [
    "DEFAULT_CONFIG",
    "SECTION_KEY",
    "CompositeQueueConfig",
    "CompositeQueueType",
    "Config",
    "ConfigRegistry",
    "ConfigSectionError",
    "DefaultDeadlines",
    "DuplicateSectionError",
    "KubeClientConfig",
    "LeaderElectionConfig",
    "NamespacedName",
    "NodeConfig",
    "Section",
    "SectionNotRegisteredError",
    "SectionTypeError",
    "SectionValueError",
    "WorkqueueConfig",
    "WorkqueueType",
    "config_section",
    "get_config",
    "get_root_registry",
    "must_register_sub_section",
    "register_config_section",
]

"""Unit tests for the default value table."""

import pytest
from pydantic import BaseModel
from whenever import TimeDelta

from propeller_config.defaults import DEFAULT_CONFIG, SECTION_KEY
from propeller_config.models import Config, NodeConfig
from propeller_config.types import CompositeQueueType, NamespacedName, WorkqueueType

# attribute path → documented default
EXPECTED_DEFAULTS = {
    "kube_config_path": "",
    "master_url": "",
    "workers": 2,
    "workflow_reeval": TimeDelta(seconds=30),
    "downstream_eval": TimeDelta(seconds=60),
    "limit_namespace": "all",
    "profiler_port": 10254,
    "metadata_prefix": "",
    "metrics_prefix": "flyte:",
    "enable_admin_launcher": False,
    "max_workflow_retries": 5,
    "max_ttl_in_hours": 23,
    "gc_interval": TimeDelta(minutes=30),
    "publish_k8s_events": False,
    "max_dataset_size_bytes": 10 * 1024 * 1024,
    "queue.type": CompositeQueueType.SIMPLE,
    "queue.queue.type": WorkqueueType.DEFAULT,
    "queue.queue.base_delay": TimeDelta(seconds=10),
    "queue.queue.max_delay": TimeDelta(seconds=10),
    "queue.queue.rate": 10,
    "queue.queue.capacity": 100,
    "queue.sub.type": WorkqueueType.DEFAULT,
    "queue.sub.base_delay": TimeDelta(seconds=10),
    "queue.sub.max_delay": TimeDelta(seconds=10),
    "queue.sub.rate": 10,
    "queue.sub.capacity": 100,
    "queue.batching_interval": TimeDelta(seconds=1),
    "queue.batch_size": -1,
    "kube_config.qps": 5.0,
    "kube_config.burst": 10,
    "kube_config.timeout": TimeDelta.ZERO,
    "leader_election.enabled": False,
    "leader_election.lock_config_map": NamespacedName(namespace="flyte", name="propeller-leader"),
    "leader_election.lease_duration": TimeDelta(seconds=15),
    "leader_election.renew_deadline": TimeDelta(seconds=10),
    "leader_election.retry_period": TimeDelta(seconds=2),
    "node_config.default_deadlines.node_execution_deadline": TimeDelta(hours=48),
    "node_config.default_deadlines.node_active_deadline": TimeDelta(hours=48),
    "node_config.default_deadlines.workflow_active_deadline": TimeDelta(hours=72),
    "node_config.max_node_retries_on_system_failures": 3,
    "node_config.interruptible_failure_threshold": 1,
}

# Fields whose documented default is the zero value of their type
ZERO_DEFAULTS = {
    "kube_config_path",
    "master_url",
    "metadata_prefix",
    "enable_admin_launcher",
    "publish_k8s_events",
    "kube_config.timeout",
    "leader_election.enabled",
}


def _resolve(obj, path):
    for part in path.split("."):
        obj = getattr(obj, part)
    return obj


def _leaf_paths(model: BaseModel, prefix: str = ""):
    for name in type(model).model_fields:
        value = getattr(model, name)
        path = f"{prefix}{name}"
        if isinstance(value, BaseModel) and not isinstance(value, NamespacedName):
            yield from _leaf_paths(value, f"{path}.")
        else:
            yield path


class TestDefaultTable:
    @pytest.mark.parametrize(("path", "expected"), sorted(EXPECTED_DEFAULTS.items()))
    def test_documented_default(self, path, expected):
        assert _resolve(DEFAULT_CONFIG, path) == expected

    def test_table_covers_every_leaf(self):
        assert set(_leaf_paths(DEFAULT_CONFIG)) == set(EXPECTED_DEFAULTS)

    def test_no_accidental_zero_values(self):
        for path in _leaf_paths(DEFAULT_CONFIG):
            if path in ZERO_DEFAULTS:
                continue
            value = _resolve(DEFAULT_CONFIG, path)
            assert value not in (0, "", TimeDelta.ZERO, None), f"{path} left at zero value"

    def test_model_defaults_match_table(self):
        assert Config() == DEFAULT_CONFIG

    def test_max_workflow_retries_uses_table_value(self):
        """The table value (5) wins over the inline field annotation (50)."""
        assert DEFAULT_CONFIG.max_workflow_retries == 5

    def test_node_retries_uses_table_value(self):
        assert NodeConfig().max_node_retries_on_system_failures == 3

    def test_section_key(self):
        assert SECTION_KEY == "propeller"


class TestDefaultTableIsImmutable:
    def test_frozen_root(self):
        with pytest.raises(ValueError):
            DEFAULT_CONFIG.workers = 10  # type: ignore[misc]

    def test_frozen_nested(self):
        with pytest.raises(ValueError):
            DEFAULT_CONFIG.queue.queue.rate = 1  # type: ignore[misc]

    def test_override_produces_new_instance(self):
        updated = DEFAULT_CONFIG.model_copy(update={"workers": 8})
        assert updated.workers == 8
        assert DEFAULT_CONFIG.workers == 2


class TestChosenDefaults:
    """Entries the upstream table leaves at zero values but which are set here."""

    def test_sub_queue_mirrors_primary_queue(self):
        assert DEFAULT_CONFIG.queue.sub == DEFAULT_CONFIG.queue.queue

    def test_batching_interval_is_one_second(self):
        assert DEFAULT_CONFIG.queue.batching_interval == TimeDelta(seconds=1)

    def test_lock_config_map_is_named(self):
        lock = DEFAULT_CONFIG.leader_election.lock_config_map
        assert (lock.namespace, lock.name) == ("flyte", "propeller-leader")

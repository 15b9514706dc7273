"""Default value table for the propeller configuration section.

``DEFAULT_CONFIG`` is built once at import and seeds the registry. It is a
frozen value; overrides produce new ``Config`` instances rather than
mutating it.

Where the field documentation and this table used to disagree
(max-workflow-retries 50 vs 5, max-node-retries-system-failures 2 vs 3),
the values below are authoritative.

The sub-queue, batching-interval and lock-config-map entries are not
taken from the upstream table, which leaves them at zero values; see the
comments next to them.
"""

from __future__ import annotations

from typing import Final

from whenever import TimeDelta

from propeller_config.models import (
    BATCH_ALL_AVAILABLE,
    CompositeQueueConfig,
    Config,
    DefaultDeadlines,
    KubeClientConfig,
    LeaderElectionConfig,
    NodeConfig,
    WorkqueueConfig,
)
from propeller_config.types import CompositeQueueType, NamespacedName, WorkqueueType

SECTION_KEY: Final = "propeller"

DEFAULT_CONFIG: Final[Config] = Config(
    workers=2,
    workflow_reeval=TimeDelta(seconds=30),
    downstream_eval=TimeDelta(seconds=60),
    limit_namespace="all",
    profiler_port=10254,
    metrics_prefix="flyte:",
    max_workflow_retries=5,
    max_ttl_in_hours=23,
    gc_interval=TimeDelta(minutes=30),
    max_dataset_size_bytes=10 * 1024 * 1024,
    queue=CompositeQueueConfig(
        type=CompositeQueueType.SIMPLE,
        queue=WorkqueueConfig(
            type=WorkqueueType.DEFAULT,
            base_delay=TimeDelta(seconds=10),
            max_delay=TimeDelta(seconds=10),
            rate=10,
            capacity=100,
        ),
        # Departs from the upstream table, which leaves sub-queue and
        # batching-interval at their zero values: the sub-queue mirrors the
        # primary queue and downstream updates are batched every second.
        sub=WorkqueueConfig(
            type=WorkqueueType.DEFAULT,
            base_delay=TimeDelta(seconds=10),
            max_delay=TimeDelta(seconds=10),
            rate=10,
            capacity=100,
        ),
        batching_interval=TimeDelta(seconds=1),
        batch_size=BATCH_ALL_AVAILABLE,
    ),
    kube_config=KubeClientConfig(
        qps=5,
        burst=10,
        timeout=TimeDelta.ZERO,
    ),
    leader_election=LeaderElectionConfig(
        enabled=False,
        # Upstream leaves the lock config map empty; a usable lock is named here.
        lock_config_map=NamespacedName(namespace="flyte", name="propeller-leader"),
        lease_duration=TimeDelta(seconds=15),
        renew_deadline=TimeDelta(seconds=10),
        retry_period=TimeDelta(seconds=2),
    ),
    node_config=NodeConfig(
        default_deadlines=DefaultDeadlines(
            node_execution_deadline=TimeDelta(hours=48),
            node_active_deadline=TimeDelta(hours=48),
            workflow_active_deadline=TimeDelta(hours=72),
        ),
        max_node_retries_on_system_failures=3,
        interruptible_failure_threshold=1,
    ),
)

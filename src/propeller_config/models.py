"""Configuration models for the propeller workflow controller.

Every field's alias is its external key: the name used in configuration
documents, command-line flags and environment variables. Renaming an alias
is a breaking change for anything that reads those sources.

Sub-trees:
- queue: how workflows are dequeued and re-enqueued
- kube-client-config: Kubernetes API client throttling
- leader-election: single-active-controller coordination
- node-config: per-node execution deadlines and retry limits
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from whenever import TimeDelta

from propeller_config.duration import Duration
from propeller_config.types import (
    CompositeQueueType,
    NamespacedName,
    Port,
    WorkqueueType,
)

DEFAULT_KUBE_QPS = 5.0
DEFAULT_KUBE_BURST = 10
BATCH_ALL_AVAILABLE = -1


class _ConfigModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
    )


class WorkqueueConfig(_ConfigModel):
    """Rate limiting policy for a single workqueue.

    See https://github.com/kubernetes/client-go/tree/master/util/workqueue for
    the limiter each type selects.
    """

    type: WorkqueueType = Field(
        default=WorkqueueType.DEFAULT,
        alias="type",
        description="Type of RateLimiter to use for the WorkQueue",
    )
    base_delay: Duration = Field(
        default=TimeDelta(seconds=10),
        alias="base-delay",
        description="base backoff delay for failure",
    )
    max_delay: Duration = Field(
        default=TimeDelta(seconds=10),
        alias="max-delay",
        description="Max backoff delay for failure",
    )
    rate: int = Field(
        default=10,
        alias="rate",
        description="Bucket Refill rate per second",
    )
    capacity: int = Field(
        default=100,
        alias="capacity",
        description="Bucket capacity as number of items",
    )


class CompositeQueueConfig(_ConfigModel):
    """Primary workqueue plus the sub-queue fed by downstream node updates."""

    type: CompositeQueueType = Field(
        default=CompositeQueueType.SIMPLE,
        alias="type",
        description="Type of composite queue to use for the WorkQueue",
    )
    queue: WorkqueueConfig = Field(
        default_factory=WorkqueueConfig,
        alias="queue",
        description=(
            "Workflow workqueue configuration, affects the way the work is consumed from the queue."
        ),
    )
    sub: WorkqueueConfig = Field(
        default_factory=WorkqueueConfig,
        alias="sub-queue",
        description=(
            "SubQueue configuration, affects the way the nodes cause the top-level Work to be "
            "re-evaluated."
        ),
    )
    batching_interval: Duration = Field(
        default=TimeDelta(seconds=1),
        alias="batching-interval",
        description="Duration for which downstream updates are buffered",
    )
    batch_size: int = Field(
        default=BATCH_ALL_AVAILABLE,
        alias="batch-size",
        description=(
            "Number of downstream triggered top-level objects to re-enqueue every duration. "
            "-1 indicates all available."
        ),
    )

    @property
    def batch_limit(self) -> int | None:
        """Batch size, or None when every available item is re-enqueued."""
        return None if self.batch_size == BATCH_ALL_AVAILABLE else self.batch_size


class KubeClientConfig(_ConfigModel):
    """Throttling for the Kubernetes API client. Zero values fall back to client defaults."""

    qps: float = Field(
        default=DEFAULT_KUBE_QPS,
        alias="qps",
        description="Max QPS to the master for requests to KubeAPI. 0 defaults to 5.",
    )
    burst: int = Field(
        default=DEFAULT_KUBE_BURST,
        alias="burst",
        description="Max burst rate for throttle. 0 defaults to 10",
    )
    timeout: Duration = Field(
        default=TimeDelta.ZERO,
        alias="timeout",
        description=(
            "Max duration allowed for every request to KubeAPI before giving up. "
            "0 implies no timeout."
        ),
    )

    @property
    def effective_qps(self) -> float:
        return self.qps if self.qps > 0 else DEFAULT_KUBE_QPS

    @property
    def effective_burst(self) -> int:
        return self.burst if self.burst > 0 else DEFAULT_KUBE_BURST

    @property
    def effective_timeout(self) -> TimeDelta | None:
        return self.timeout if self.timeout > TimeDelta.ZERO else None


class LeaderElectionConfig(_ConfigModel):
    """Leader election settings.

    Consumers must keep renew-deadline below lease-duration, with
    retry-period well under both; these numbers are passed through unchanged.
    """

    enabled: bool = Field(
        default=False,
        alias="enabled",
        description="Enables/Disables leader election.",
    )
    lock_config_map: NamespacedName = Field(
        default_factory=lambda: NamespacedName(namespace="flyte", name="propeller-leader"),
        alias="lock-config-map",
        description="ConfigMap namespace/name to use for resource lock.",
    )
    lease_duration: Duration = Field(
        default=TimeDelta(seconds=15),
        alias="lease-duration",
        description=(
            "Duration that non-leader candidates will wait to force acquire leadership. "
            "This is measured against time of last observed ack."
        ),
    )
    renew_deadline: Duration = Field(
        default=TimeDelta(seconds=10),
        alias="renew-deadline",
        description=(
            "Duration that the acting master will retry refreshing leadership before giving up."
        ),
    )
    retry_period: Duration = Field(
        default=TimeDelta(seconds=2),
        alias="retry-period",
        description="Duration the LeaderElector clients should wait between tries of actions.",
    )


class DefaultDeadlines(_ConfigModel):
    node_execution_deadline: Duration = Field(
        default=TimeDelta(hours=48),
        alias="node-execution-deadline",
        description="Default value of node execution timeout",
    )
    node_active_deadline: Duration = Field(
        default=TimeDelta(hours=48),
        alias="node-active-deadline",
        description="Default value of node timeout",
    )
    workflow_active_deadline: Duration = Field(
        default=TimeDelta(hours=72),
        alias="workflow-active-deadline",
        description="Default value of workflow timeout",
    )


class NodeConfig(_ConfigModel):
    default_deadlines: DefaultDeadlines = Field(
        default_factory=DefaultDeadlines,
        alias="default-deadlines",
        description="Default value for timeouts",
    )
    max_node_retries_on_system_failures: int = Field(
        default=3,
        alias="max-node-retries-system-failures",
        description="Maximum number of retries per node for node failure due to infra issues",
    )
    interruptible_failure_threshold: int = Field(
        default=1,
        alias="interruptible-failure-threshold",
        description="number of failures for a node to be still considered interruptible",
    )


class Config(_ConfigModel):
    """Base configuration to start propeller."""

    kube_config_path: str = Field(
        default="",
        alias="kube-config",
        description="Path to kubernetes client config file.",
    )
    master_url: str = Field(
        default="",
        alias="master",
        description="Address of the Kubernetes API server. Overrides any value in kube-config.",
    )
    workers: int = Field(
        default=2,
        ge=1,
        alias="workers",
        description="Number of threads to process workflows",
    )
    workflow_reeval: Duration = Field(
        default=TimeDelta(seconds=30),
        alias="workflow-reeval-duration",
        description="Frequency of re-evaluating workflows",
    )
    downstream_eval: Duration = Field(
        default=TimeDelta(seconds=60),
        alias="downstream-eval-duration",
        description="Frequency of re-evaluating downstream tasks",
    )
    limit_namespace: str = Field(
        default="all",
        alias="limit-namespace",
        description="Namespaces to watch for this propeller",
    )
    profiler_port: Port = Field(
        default=10254,
        alias="prof-port",
        description="Profiler port",
    )
    metadata_prefix: str = Field(
        default="",
        alias="metadata-prefix",
        description=(
            "MetadataPrefix should be used if all the metadata for Flyte executions should be "
            "stored under a specific prefix in CloudStorage. If not specified, the data will be "
            "stored in the base container directly."
        ),
    )
    queue: CompositeQueueConfig = Field(
        default_factory=CompositeQueueConfig,
        alias="queue",
        description=(
            "Workflow workqueue configuration, affects the way the work is consumed from the queue."
        ),
    )
    metrics_prefix: str = Field(
        default="flyte:",
        alias="metrics-prefix",
        description="An optional prefix for all published metrics.",
    )
    enable_admin_launcher: bool = Field(
        default=False,
        alias="enable-admin-launcher",
        description="Enable remote Workflow launcher to Admin",
    )
    max_workflow_retries: int = Field(
        default=5,
        alias="max-workflow-retries",
        description="Maximum number of retries per workflow",
    )
    max_ttl_in_hours: int = Field(
        default=23,
        alias="max-ttl-hours",
        description=(
            "Maximum number of hours a completed workflow should be retained. "
            "Number between 1-23 hours"
        ),
    )
    gc_interval: Duration = Field(
        default=TimeDelta(minutes=30),
        alias="gc-interval",
        description="Run periodic GC every 30 minutes",
    )
    leader_election: LeaderElectionConfig = Field(
        default_factory=LeaderElectionConfig,
        alias="leader-election",
        description="Config for leader election.",
    )
    publish_k8s_events: bool = Field(
        default=False,
        alias="publish-k8s-events",
        description="Enable events publishing to K8s events API.",
    )
    max_dataset_size_bytes: int = Field(
        default=10 * 1024 * 1024,
        alias="max-output-size-bytes",
        description="Maximum size of outputs per task",
    )
    kube_config: KubeClientConfig = Field(
        default_factory=KubeClientConfig,
        alias="kube-client-config",
        description="Configuration to control the Kubernetes client",
    )
    node_config: NodeConfig = Field(
        default_factory=NodeConfig,
        alias="node-config",
        description="config for a workflow node",
    )

"""Hypothesis strategies for generating propeller configuration objects.

These strategies generate valid instances of every configuration sub-tree
for property-based testing.
"""

from hypothesis import strategies as st
from whenever import TimeDelta

from propeller_config.models import (
    CompositeQueueConfig,
    Config,
    DefaultDeadlines,
    KubeClientConfig,
    LeaderElectionConfig,
    NodeConfig,
    WorkqueueConfig,
)
from propeller_config.types import CompositeQueueType, NamespacedName, WorkqueueType

# =============================================================================
# SCALARS
# =============================================================================

NS_PER_DAY = 86_400 * 1_000_000_000


def nanosecond_durations(min_days: int, max_days: int) -> st.SearchStrategy[TimeDelta]:
    return st.integers(min_value=min_days * NS_PER_DAY, max_value=max_days * NS_PER_DAY).map(
        lambda ns: TimeDelta(nanoseconds=ns)
    )


durations = nanosecond_durations(-10, 100)
positive_durations = nanosecond_durations(0, 100)

# Printable ASCII keeps documents readable when a failing example is shown
plain_text = st.text(alphabet=st.characters(min_codepoint=32, max_codepoint=126), max_size=30)
counts = st.integers(min_value=-1000, max_value=1_000_000)

# =============================================================================
# SUB-TREES
# =============================================================================


@st.composite
def workqueue_configs(draw):
    return WorkqueueConfig(
        type=draw(st.sampled_from(list(WorkqueueType))),
        base_delay=draw(positive_durations),
        max_delay=draw(positive_durations),
        rate=draw(counts),
        capacity=draw(counts),
    )


@st.composite
def composite_queue_configs(draw):
    return CompositeQueueConfig(
        type=draw(st.sampled_from(list(CompositeQueueType))),
        queue=draw(workqueue_configs()),
        sub=draw(workqueue_configs()),
        batching_interval=draw(positive_durations),
        batch_size=draw(st.integers(min_value=-1, max_value=10_000)),
    )


@st.composite
def kube_client_configs(draw):
    return KubeClientConfig(
        qps=draw(st.floats(min_value=0, max_value=1000, allow_nan=False)),
        burst=draw(st.integers(min_value=0, max_value=1000)),
        timeout=draw(positive_durations),
    )


@st.composite
def leader_election_configs(draw):
    return LeaderElectionConfig(
        enabled=draw(st.booleans()),
        lock_config_map=NamespacedName(namespace=draw(plain_text), name=draw(plain_text)),
        lease_duration=draw(positive_durations),
        renew_deadline=draw(positive_durations),
        retry_period=draw(positive_durations),
    )


@st.composite
def node_configs(draw):
    return NodeConfig(
        default_deadlines=DefaultDeadlines(
            node_execution_deadline=draw(positive_durations),
            node_active_deadline=draw(positive_durations),
            workflow_active_deadline=draw(positive_durations),
        ),
        max_node_retries_on_system_failures=draw(st.integers(min_value=0, max_value=100)),
        interruptible_failure_threshold=draw(st.integers(min_value=0, max_value=100)),
    )


@st.composite
def configs(draw):
    return Config(
        kube_config_path=draw(plain_text),
        master_url=draw(plain_text),
        workers=draw(st.integers(min_value=1, max_value=512)),
        workflow_reeval=draw(durations),
        downstream_eval=draw(durations),
        limit_namespace=draw(plain_text),
        profiler_port=draw(st.integers(min_value=0, max_value=65535)),
        metadata_prefix=draw(plain_text),
        queue=draw(composite_queue_configs()),
        metrics_prefix=draw(plain_text),
        enable_admin_launcher=draw(st.booleans()),
        max_workflow_retries=draw(st.integers(min_value=0, max_value=1000)),
        max_ttl_in_hours=draw(st.integers(min_value=-5, max_value=48)),
        gc_interval=draw(durations),
        leader_election=draw(leader_election_configs()),
        publish_k8s_events=draw(st.booleans()),
        max_dataset_size_bytes=draw(st.integers(min_value=0, max_value=2**40)),
        kube_config=draw(kube_client_configs()),
        node_config=draw(node_configs()),
    )

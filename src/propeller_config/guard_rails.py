"""Guard rail engine: flags unsafe or contradictory propeller configurations.

The configuration core passes values through unmodified; these checks are for
consumers (the controller at startup, the CLI) that want to refuse a
configuration before acting on it. Errors should block startup; warnings are
advisory.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from propeller_config.duration import format_duration
from propeller_config.models import Config, WorkqueueConfig


class GuardRailResult(BaseModel):
    rule_name: str
    severity: Literal["error", "warning"]
    message: str
    parameter_keys: list[str]


class GuardRailEngine:
    """Evaluates all guard rails against a Config."""

    def evaluate(self, config: Config) -> list[GuardRailResult]:
        results: list[GuardRailResult] = []
        for check in (
            self._check_renew_deadline,
            self._check_retry_period,
            self._check_workqueue_delays,
            self._check_max_ttl_hours,
            self._check_batch_size,
        ):
            results.extend(check(config))
        return results

    @staticmethod
    def has_errors(results: list[GuardRailResult]) -> bool:
        return any(r.severity == "error" for r in results)

    @staticmethod
    def _check_renew_deadline(config: Config) -> list[GuardRailResult]:
        """Renew deadline must be shorter than the lease, or leadership flaps."""
        le = config.leader_election
        if not le.enabled or le.renew_deadline < le.lease_duration:
            return []
        return [
            GuardRailResult(
                rule_name="leader_election_renew_deadline",
                severity="error",
                message=(
                    f"leader-election.renew-deadline ({format_duration(le.renew_deadline)}) "
                    f"must be shorter than leader-election.lease-duration "
                    f"({format_duration(le.lease_duration)})."
                ),
                parameter_keys=["leader-election.renew-deadline", "leader-election.lease-duration"],
            )
        ]

    @staticmethod
    def _check_retry_period(config: Config) -> list[GuardRailResult]:
        le = config.leader_election
        if not le.enabled or le.retry_period * 2 <= le.renew_deadline:
            return []
        return [
            GuardRailResult(
                rule_name="leader_election_retry_period",
                severity="warning",
                message=(
                    f"leader-election.retry-period ({format_duration(le.retry_period)}) "
                    f"should be at most half of leader-election.renew-deadline "
                    f"({format_duration(le.renew_deadline)}); candidates may not get enough "
                    f"attempts to renew before the deadline."
                ),
                parameter_keys=["leader-election.retry-period", "leader-election.renew-deadline"],
            )
        ]

    @staticmethod
    def _check_workqueue_delays(config: Config) -> list[GuardRailResult]:
        results: list[GuardRailResult] = []
        queues: list[tuple[str, WorkqueueConfig]] = [
            ("queue.queue", config.queue.queue),
            ("queue.sub-queue", config.queue.sub),
        ]
        for prefix, wq in queues:
            if wq.base_delay <= wq.max_delay:
                continue
            results.append(
                GuardRailResult(
                    rule_name="workqueue_delay_order",
                    severity="warning",
                    message=(
                        f"{prefix}.base-delay ({format_duration(wq.base_delay)}) exceeds "
                        f"{prefix}.max-delay ({format_duration(wq.max_delay)}); backoff is "
                        f"capped at max-delay from the first failure."
                    ),
                    parameter_keys=[f"{prefix}.base-delay", f"{prefix}.max-delay"],
                )
            )
        return results

    @staticmethod
    def _check_max_ttl_hours(config: Config) -> list[GuardRailResult]:
        if 1 <= config.max_ttl_in_hours <= 23:
            return []
        return [
            GuardRailResult(
                rule_name="max_ttl_hours_range",
                severity="error",
                message=(
                    f"max-ttl-hours ({config.max_ttl_in_hours}) must be between 1 and 23."
                ),
                parameter_keys=["max-ttl-hours"],
            )
        ]

    @staticmethod
    def _check_batch_size(config: Config) -> list[GuardRailResult]:
        size = config.queue.batch_size
        if size == -1 or size >= 1:
            return []
        return [
            GuardRailResult(
                rule_name="batch_size_range",
                severity="error",
                message=(
                    f"queue.batch-size ({size}) must be -1 (all available) or a positive count."
                ),
                parameter_keys=["queue.batch-size"],
            )
        ]

"""Unit tests for single-field explanations."""

import json

import pytest

from propeller_config.defaults import DEFAULT_CONFIG
from propeller_config.document import config_from_yaml
from propeller_config.explain import UnknownFieldError, explain_field
from propeller_config.fields import build_field_table


@pytest.fixture(scope="module")
def table():
    return build_field_table()


class TestExplainField:
    def test_default_value(self, table):
        explanation = explain_field("queue.sub-queue.rate", DEFAULT_CONFIG, table)
        assert explanation.value == 10
        assert explanation.default == 10
        assert explanation.source == "default"
        assert explanation.env_var == "PROPELLER_QUEUE_SUB_QUEUE_RATE"

    def test_override_value(self, table):
        config = config_from_yaml("gc-interval: 1h\n")
        explanation = explain_field("gc-interval", config, table)
        assert explanation.value == "1h0m0s"
        assert explanation.default == "30m0s"
        assert explanation.source == "override"

    def test_enum_lists_allowed_values(self, table):
        explanation = explain_field("queue.type", DEFAULT_CONFIG, table)
        assert explanation.allowed_values == ["simple", "batch"]

    def test_unknown_key(self, table):
        with pytest.raises(UnknownFieldError, match="Unknown configuration key 'queue.rate'"):
            explain_field("queue.rate", DEFAULT_CONFIG, table)

    def test_sub_tree_key_is_not_a_field(self, table):
        with pytest.raises(UnknownFieldError):
            explain_field("leader-election", DEFAULT_CONFIG, table)


class TestRendering:
    def test_to_text(self, table):
        text = explain_field("max-workflow-retries", DEFAULT_CONFIG, table).to_text()
        assert text.splitlines() == [
            "Field: max-workflow-retries",
            "  Type: int",
            "  Value: 5 (source: default)",
            "  Default: 5",
            "  Flag: --propeller.max-workflow-retries",
            "  Env: PROPELLER_MAX_WORKFLOW_RETRIES",
            "  Purpose: Maximum number of retries per workflow",
        ]

    def test_to_text_with_allowed_values(self, table):
        text = explain_field("queue.queue.type", DEFAULT_CONFIG, table).to_text()
        assert "  Allowed: default, bucket, expfailure, maxof" in text.splitlines()

    def test_to_json(self, table):
        data = json.loads(explain_field("leader-election.enabled", DEFAULT_CONFIG, table).to_json())
        assert data["value"] is False
        assert data["value_type"] == "bool"
        assert data["allowed_values"] is None

    def test_deterministic(self, table):
        a = explain_field("workers", DEFAULT_CONFIG, table).to_text()
        b = explain_field("workers", DEFAULT_CONFIG, table).to_text()
        assert a == b

"""Enumerations and small value types shared by the configuration models."""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class CompositeQueueType(StrEnum):
    SIMPLE = "simple"
    BATCH = "batch"


class WorkqueueType(StrEnum):
    """Rate limiter backing a workqueue (mirrors client-go's workqueue limiters)."""

    DEFAULT = "default"
    BUCKET = "bucket"
    EXPONENTIAL_FAILURE = "expfailure"
    MAX_OF = "maxof"


class FieldValueType(StrEnum):
    INT = "int"
    FLOAT = "float"
    STR = "str"
    BOOL = "bool"
    DURATION = "duration"
    ENUM = "enum"


def parse_composite_queue_type(value: str) -> CompositeQueueType:
    try:
        return CompositeQueueType(value)
    except ValueError:
        allowed = ", ".join(t.value for t in CompositeQueueType)
        raise ValueError(f"Unknown composite queue type '{value}'. Allowed: {allowed}") from None


def parse_workqueue_type(value: str) -> WorkqueueType:
    try:
        return WorkqueueType(value)
    except ValueError:
        allowed = ", ".join(t.value for t in WorkqueueType)
        raise ValueError(f"Unknown workqueue type '{value}'. Allowed: {allowed}") from None


Port = Annotated[int, Field(ge=0, le=65535)]


class NamespacedName(BaseModel):
    """Kubernetes object reference (namespace + name).

    Serialized with capitalised keys because the Kubernetes type carries no
    JSON tags. Also accepts the ``"namespace/name"`` shorthand.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    namespace: str = Field(default="", alias="Namespace", description="Namespace of the object")
    name: str = Field(default="", alias="Name", description="Name of the object")

    @model_validator(mode="before")
    @classmethod
    def _parse_shorthand(cls, v: Any) -> Any:
        if isinstance(v, str):
            namespace, sep, name = v.partition("/")
            if not sep:
                return {"Namespace": "", "Name": namespace}
            return {"Namespace": namespace, "Name": name}
        return v

    def __str__(self) -> str:
        if not self.namespace:
            return self.name
        return f"{self.namespace}/{self.name}"

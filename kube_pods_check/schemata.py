#!/usr/bin/env python3
# Copyright (C) 2024 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""
Models of the Kubernetes API payloads consumed by the pod check.

The raw models mirror the subset of the `v1/PodList` and `v1/NamespaceList`
JSON documents which is evaluated. They are parsed strictly: a missing
required field rejects the complete payload. The parsed pods are then
converted into `PodRecord` objects, which are what the evaluation works on,
regardless of whether kubectl or the API server delivered the data.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ClusterConnectionError, PayloadDecodingError
from .log import logger


class RawMetadata(BaseModel):
    name: str
    namespace: str | None = None


class RawCondition(BaseModel):
    type: str
    status: str


class RawContainerStatus(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    ready: bool
    restart_count: int = Field(alias="restartCount", ge=0)


class RawPodStatus(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Both lists are omitted (or null) by the API server as long as the pod is
    # not scheduled / no container has been created yet.
    conditions: Sequence[RawCondition] | None = None
    container_statuses: Sequence[RawContainerStatus] | None = Field(
        default=None, alias="containerStatuses"
    )


class RawPod(BaseModel):
    metadata: RawMetadata
    status: RawPodStatus = RawPodStatus()


class RawPodList(BaseModel):
    items: Sequence[RawPod]


class RawNamespace(BaseModel):
    metadata: RawMetadata


class RawNamespaceList(BaseModel):
    items: Sequence[RawNamespace]


@dataclass(frozen=True)
class Condition:
    type: str
    status: str


@dataclass(frozen=True)
class ContainerStatus:
    name: str
    ready: bool
    restart_count: int

    @property
    def ready_text(self) -> str:
        """
        >>> ContainerStatus(name="app", ready=False, restart_count=0).ready_text
        'false'
        """
        return "true" if self.ready else "false"


@dataclass(frozen=True)
class PodRecord:
    name: str
    namespace: str | None
    conditions: Sequence[Condition]
    containers: Sequence[ContainerStatus]

    @classmethod
    def from_raw(cls, raw_pod: RawPod) -> PodRecord:
        return cls(
            name=raw_pod.metadata.name,
            namespace=raw_pod.metadata.namespace,
            conditions=tuple(
                Condition(type=c.type, status=c.status) for c in raw_pod.status.conditions or ()
            ),
            containers=tuple(
                ContainerStatus(name=c.name, ready=c.ready, restart_count=c.restart_count)
                for c in raw_pod.status.container_statuses or ()
            ),
        )


def _ensure_payload(raw: str | bytes, what: str) -> None:
    if not raw.strip():
        raise ClusterConnectionError(f"Received an empty {what}")


def decode_pod_list(raw: str | bytes) -> Sequence[PodRecord]:
    """Decode the JSON document of a `v1/PodList`

    >>> decode_pod_list('{"items": [{"metadata": {"name": "web-1"}}]}')
    (PodRecord(name='web-1', namespace=None, conditions=(), containers=()),)
    """
    _ensure_payload(raw, "pod list")
    try:
        pod_list = RawPodList.model_validate_json(raw)
    except ValidationError as e:
        logger.debug("Could not parse pod list: %s", e)
        raise PayloadDecodingError(f"Invalid pod list: {e.error_count()} error(s)") from e
    return tuple(PodRecord.from_raw(raw_pod) for raw_pod in pod_list.items)


def decode_namespace_list(raw: str | bytes) -> Sequence[str]:
    """Decode the JSON document of a `v1/NamespaceList` into the namespace names"""
    _ensure_payload(raw, "namespace list")
    try:
        namespace_list = RawNamespaceList.model_validate_json(raw)
    except ValidationError as e:
        logger.debug("Could not parse namespace list: %s", e)
        raise PayloadDecodingError(f"Invalid namespace list: {e.error_count()} error(s)") from e
    return [namespace.metadata.name for namespace in namespace_list.items]

#!/usr/bin/env python3
# Copyright (C) 2024 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

import json

import pytest

from kube_pods_check.exceptions import ClusterConnectionError, PayloadDecodingError
from kube_pods_check.schemata import (
    Condition,
    ContainerStatus,
    decode_namespace_list,
    decode_pod_list,
    PodRecord,
)


def test_decode_pod_list(make_pod, make_pod_list) -> None:  # type: ignore[no-untyped-def]
    raw = make_pod_list(
        make_pod(
            "web-1",
            [("Initialized", "True"), ("Ready", "False")],
            [("app", False, 7), ("sidecar", True, 0)],
            namespace="shop",
        ),
        make_pod("web-2"),
    )
    assert decode_pod_list(raw) == (
        PodRecord(
            name="web-1",
            namespace="shop",
            conditions=(Condition("Initialized", "True"), Condition("Ready", "False")),
            containers=(ContainerStatus("app", False, 7), ContainerStatus("sidecar", True, 0)),
        ),
        PodRecord(name="web-2", namespace="default", conditions=(), containers=()),
    )


def test_decode_pod_without_status_lists() -> None:
    raw = json.dumps(
        {
            "items": [
                {"metadata": {"name": "pending"}, "status": {"phase": "Pending"}},
                {"metadata": {"name": "nulls"}, "status": {"conditions": None}},
                {"metadata": {"name": "no-status"}},
            ]
        }
    )
    assert [(p.name, p.conditions, p.containers) for p in decode_pod_list(raw)] == [
        ("pending", (), ()),
        ("nulls", (), ()),
        ("no-status", (), ()),
    ]


def test_decode_empty_pod_list() -> None:
    assert decode_pod_list('{"kind": "PodList", "items": []}') == ()


@pytest.mark.parametrize("raw", ["", "   \n", b""])
def test_decode_empty_payload(raw: str | bytes) -> None:
    with pytest.raises(ClusterConnectionError):
        decode_pod_list(raw)


@pytest.mark.parametrize(
    "raw",
    [
        "<html>Service Unavailable</html>",
        '{"kind": "Status", "status": "Failure", "code": 403}',
        '{"items": [{"metadata": {}}]}',
        '{"items": [{"metadata": {"name": "p"}, "status": {"conditions": [{"type": "Ready"}]}}]}',
        '{"items": [{"metadata": {"name": "p"}, "status": {"containerStatuses": '
        '[{"name": "c", "ready": true}]}}]}',
        '{"items": [{"metadata": {"name": "p"}, "status": {"containerStatuses": '
        '[{"name": "c", "ready": true, "restartCount": -1}]}}]}',
    ],
)
def test_decode_invalid_pod_list(raw: str) -> None:
    with pytest.raises(PayloadDecodingError):
        decode_pod_list(raw)


def test_decode_namespace_list() -> None:
    raw = json.dumps(
        {
            "kind": "NamespaceList",
            "items": [
                {"metadata": {"name": "default"}, "status": {"phase": "Active"}},
                {"metadata": {"name": "kube-system"}},
            ],
        }
    )
    assert decode_namespace_list(raw) == ["default", "kube-system"]


def test_decode_invalid_namespace_list() -> None:
    with pytest.raises(PayloadDecodingError):
        decode_namespace_list('{"items": [{"metadata": {"uid": "1"}}]}')


def test_ready_text() -> None:
    assert ContainerStatus("app", True, 0).ready_text == "true"
    assert ContainerStatus("app", False, 0).ready_text == "false"

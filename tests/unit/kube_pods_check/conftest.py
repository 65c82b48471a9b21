#!/usr/bin/env python3
# Copyright (C) 2024 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

import json
from collections.abc import Iterator, Mapping, Sequence
from typing import Any

import pytest

from kube_pods_check.log import clear_console_logging


def pod_json(
    name: str,
    conditions: Sequence[tuple[str, str]] = (),
    containers: Sequence[tuple[str, bool, int]] = (),
    namespace: str = "default",
) -> Mapping[str, Any]:
    return {
        "metadata": {"name": name, "namespace": namespace, "uid": f"uid-{name}"},
        "spec": {"nodeName": "node-1"},
        "status": {
            "phase": "Running",
            "conditions": [
                {"type": type_, "status": status, "lastTransitionTime": "2024-01-01T00:00:00Z"}
                for type_, status in conditions
            ],
            "containerStatuses": [
                {"name": c_name, "ready": ready, "restartCount": restarts, "image": "nginx"}
                for c_name, ready, restarts in containers
            ],
        },
    }


def pod_list_json(*pods: Mapping[str, Any]) -> str:
    # kubectl pretty prints its output
    return json.dumps(
        {"apiVersion": "v1", "kind": "List", "items": list(pods), "metadata": {}}, indent=4
    )


class FakeSource:
    def __init__(self, payloads: Mapping[str, str]) -> None:
        self.payloads = payloads
        self.requested: list[str] = []

    def namespaces(self) -> Sequence[str]:
        return list(self.payloads)

    def pods(self, namespace: str) -> str:
        self.requested.append(namespace)
        return self.payloads[namespace]


@pytest.fixture(name="web_1_payload")
def fixture_web_1_payload() -> str:
    return pod_list_json(pod_json("web-1", [("Ready", "False")], [("app", False, 7)]))


@pytest.fixture(name="make_pod")
def fixture_make_pod() -> Any:
    return pod_json


@pytest.fixture(name="make_pod_list")
def fixture_make_pod_list() -> Any:
    return pod_list_json


@pytest.fixture(name="make_source")
def fixture_make_source() -> type[FakeSource]:
    return FakeSource


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    yield
    clear_console_logging()

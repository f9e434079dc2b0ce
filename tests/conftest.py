# /*
# Copyright 2026 The Kuberang Authors.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# */

"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import io
import json
from unittest.mock import MagicMock

import pytest
from rich.console import Console

from kuberang.kubectl import KubeOutput
from kuberang.models import RunNames

SERVICE_NAME = "kuberang-nginx-1"
CLIENT_POD = "kuberang-busybox-abc"
SERVICE_IP = "10.0.5.5"
POD_IPS = ["10.0.0.1", "10.0.0.2", "10.0.0.3"]


# ============================================================================
# kubectl output builders
# ============================================================================

def ok(data=None) -> KubeOutput:
    """Successful kubectl output, with *data* serialized as JSON stdout."""
    stdout = "" if data is None else json.dumps(data)
    return KubeOutput(success=True, combined_output=stdout, stdout=stdout)


def fail(message: str = "Error from server (NotFound)") -> KubeOutput:
    return KubeOutput(success=False, combined_output=message)


def pods_json(*pods: tuple[str, str]) -> dict:
    return {
        "kind": "List",
        "items": [{"metadata": {"name": name}, "status": {"podIP": ip}} for name, ip in pods],
    }


def pod_item(name: str, ip: str, phase: str = "Running", deleting: bool = False) -> dict:
    metadata = {"name": name}
    if deleting:
        metadata["deletionTimestamp"] = "2026-10-17T12:00:00Z"
    return {"metadata": metadata, "status": {"podIP": ip, "phase": phase}}


def pod_list(*items: dict) -> dict:
    return {"kind": "List", "items": list(items)}


def service_json(cluster_ip: str) -> dict:
    return {"kind": "Service", "metadata": {"name": SERVICE_NAME}, "spec": {"clusterIP": cluster_ip}}


def deployment_json(available: int) -> dict:
    return {"kind": "Deployment", "status": {"availableReplicas": available}}


def nodes_json(schedulable: int, unschedulable: int = 0) -> dict:
    items = [{"metadata": {"name": f"node-{i}"}, "spec": {}} for i in range(schedulable)]
    items += [{"metadata": {"name": f"cordoned-{i}"}, "spec": {"unschedulable": True}}
              for i in range(unschedulable)]
    return {"kind": "List", "items": items}


def namespace_json(phase: str) -> dict:
    return {"kind": "Namespace", "status": {"phase": phase}}


# ============================================================================
# Fakes
# ============================================================================

class FakeAccessor:
    """Recording ClusterAccessor that answers by argument prefix.

    Rules registered later take precedence. A rule holding several responses
    hands them out in order and keeps repeating the last one.
    """

    def __init__(self, default: KubeOutput | None = None) -> None:
        self.calls: list[tuple[str, ...]] = []
        self.default = default if default is not None else ok()
        self._rules: list[tuple[tuple[str, ...], list[KubeOutput]]] = []

    def on(self, *prefix: str, responses: list[KubeOutput]) -> FakeAccessor:
        self._rules.append((prefix, list(responses)))
        return self

    def invoke(self, *args: str) -> KubeOutput:
        self.calls.append(args)
        for prefix, responses in reversed(self._rules):
            if args[:len(prefix)] == prefix:
                return responses.pop(0) if len(responses) > 1 else responses[0]
        return self.default

    def calls_starting(self, *prefix: str) -> list[tuple[str, ...]]:
        return [call for call in self.calls if call[:len(prefix)] == prefix]


class FakeClock:
    """Monotonic clock that only advances when sleep is called."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def names() -> RunNames:
    return RunNames(service=SERVICE_NAME)


@pytest.fixture
def out() -> Console:
    """Console writing plain text to an in-memory buffer."""
    return Console(file=io.StringIO(), width=200, color_system=None)


@pytest.fixture
def output(out: Console):
    """Callable returning everything printed to the test console so far."""
    return lambda: out.file.getvalue()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def http_get() -> MagicMock:
    return MagicMock(return_value=MagicMock(status_code=200))


@pytest.fixture
def cluster(names: RunNames) -> FakeAccessor:
    """Accessor for a healthy three-node cluster with no leftover resources."""
    fake = FakeAccessor()
    fake.on("get", "namespace", responses=[ok(namespace_json("Active"))])
    fake.on("get", "service", names.service,
            responses=[fail(), ok(service_json(SERVICE_IP))])
    fake.on("get", "deployment", names.client,
            responses=[fail(), ok(deployment_json(1))])
    fake.on("get", "deployment", names.target,
            responses=[fail(), ok(deployment_json(3))])
    fake.on("get", "nodes", responses=[ok(nodes_json(3))])
    fake.on("get", "pods", "-l", f"app={names.target}",
            responses=[ok(pods_json(*[(f"kuberang-nginx-{i}", ip) for i, ip in enumerate(POD_IPS)]))])
    fake.on("get", "pods", "-l", f"app={names.client}",
            responses=[ok(pods_json((CLIENT_POD, "10.0.1.1")))])
    return fake

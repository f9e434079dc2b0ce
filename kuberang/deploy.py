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

"""Test workload deployment and readiness polling."""

from __future__ import annotations

import time
from collections.abc import Callable

from rich.console import Console

from kuberang import logger
from kuberang.config import CheckConfig
from kuberang.constants import (
    CLIENT_REPLICAS,
    CLIENT_SLEEP_COMMAND,
    DEFAULT_DEPLOYMENT_TIMEOUT_SECONDS,
    DEFAULT_POLL_INTERVAL_SECONDS,
    TARGET_PORT,
)
from kuberang.errors import DeploymentError
from kuberang.kubectl import ClusterAccessor, KubeOutput, get_deployment, get_nodes
from kuberang.models import RunNames, TestWorkload
from kuberang.utils import print_err, print_failure_detail, print_ok


def _issue(out: Console, ko: KubeOutput, label: str) -> None:
    """Report a creation request, raising when it was rejected."""
    if not ko.success:
        print_err(out, label)
        print_failure_detail(out, ko.combined_output)
        raise DeploymentError("Failed to deploy test workloads")
    print_ok(out, label)


def target_replica_count(accessor: ClusterAccessor, out: Console) -> int:
    """Desired probe-target replicas: one per schedulable node, at least one.

    Raises:
        DeploymentError: If the nodes cannot be listed.
    """
    ko = get_nodes(accessor)
    if not ko.success:
        print_err(out, "Listed schedulable cluster nodes")
        print_failure_detail(out, ko.combined_output)
        raise DeploymentError("Failed to list cluster nodes")
    count = ko.node_count()
    if count == 0:
        logger.warning("No schedulable nodes reported; requesting a single nginx replica")
        return 1
    return count


def create_workloads(
    accessor: ClusterAccessor,
    out: Console,
    names: RunNames,
    cfg: CheckConfig,
) -> list[TestWorkload]:
    """Create the busybox client, the nginx target and the nginx service.

    Returns:
        The client and target workloads with their desired replica counts.

    Raises:
        DeploymentError: If any creation request is rejected.
    """
    client = TestWorkload(names.client, cfg.image_ref("busybox"), CLIENT_REPLICAS)
    ko = accessor.invoke(
        "create", "deployment", client.name,
        f"--image={client.image}",
        f"--replicas={client.desired_replicas}",
        "--", *CLIENT_SLEEP_COMMAND,
    )
    _issue(out, ko, "Issued BusyBox start request")

    # One pod per node is requested, but the scheduler is free to co-locate them.
    target = TestWorkload(names.target, cfg.image_ref("nginx"), target_replica_count(accessor, out))
    ko = accessor.invoke(
        "create", "deployment", target.name,
        f"--image={target.image}",
        f"--replicas={target.desired_replicas}",
        f"--port={TARGET_PORT}",
    )
    _issue(out, ko, "Issued Nginx start request")

    ko = accessor.invoke(
        "expose", "deployment", target.name,
        f"--name={names.service}",
        f"--port={TARGET_PORT}",
    )
    _issue(out, ko, "Issued expose Nginx service request")
    return [client, target]


def check_deployments(accessor: ClusterAccessor, workloads: list[TestWorkload]) -> bool:
    """Refresh observed replica counts and report whether all workloads are ready."""
    ready = True
    for workload in workloads:
        ko = get_deployment(accessor, workload.name)
        workload.exists = ko.success
        workload.observed_replicas = ko.observed_replica_count() if ko.success else 0
        if not workload.ready:
            ready = False
    return ready


def wait_for_deployments(
    accessor: ClusterAccessor,
    out: Console,
    workloads: list[TestWorkload],
    timeout: float = DEFAULT_DEPLOYMENT_TIMEOUT_SECONDS,
    interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """Poll until every workload is ready or *timeout* seconds have elapsed.

    Returns:
        True if all workloads became ready within the timeout.
    """
    label = "Both deployments completed successfully within timeout"
    start = clock()
    while clock() - start < timeout:
        if check_deployments(accessor, workloads):
            print_ok(out, label)
            return True
        logger.debug("Waiting for deployments: %s", ", ".join(
            f"{w.name} {w.observed_replicas}/{w.desired_replicas}" for w in workloads))
        sleep(interval)
    print_err(out, label)
    return False


def deploy_test_workloads(
    accessor: ClusterAccessor,
    out: Console,
    names: RunNames,
    cfg: CheckConfig,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """Create the test workloads and wait for them to become ready.

    Returns:
        Whether both deployments became ready within the configured timeout.

    Raises:
        DeploymentError: If any creation request is rejected.
    """
    workloads = create_workloads(accessor, out, names, cfg)
    return wait_for_deployments(
        accessor, out, workloads,
        timeout=cfg.deployment_timeout,
        interval=cfg.poll_interval,
        clock=clock,
        sleep=sleep,
    )

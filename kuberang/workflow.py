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

"""The end-to-end verification workflow."""

from __future__ import annotations

import time
from collections.abc import Callable

import requests
from rich.console import Console
from rich.panel import Panel

from kuberang import console, logger
from kuberang.config import CheckConfig
from kuberang.deploy import deploy_test_workloads
from kuberang.errors import ChecksFailedError, PreconditionError
from kuberang.kubectl import ClusterAccessor
from kuberang.models import CheckReport, ProbeOutcome, RunNames
from kuberang.preconditions import check_preconditions, precheck_kubectl
from kuberang.probes import HttpGet, gather_cluster_info, run_probe_sequence
from kuberang.teardown import remove_existing, teardown_on_exit


def check_kubernetes(
    accessor: ClusterAccessor,
    cfg: CheckConfig | None = None,
    out: Console = console,
    names: RunNames | None = None,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
    http_get: HttpGet = requests.get,
) -> CheckReport:
    """Deploy the test workloads, run every check, and clean up.

    Args:
        accessor: Cluster accessor used for every kubectl call.
        cfg: Run configuration, or None for defaults and KUBERANG_* env vars.
        out: Console receiving the status lines.
        names: Resource names for this run, or None to generate them.
        clock: Monotonic clock used by readiness polling.
        sleep: Sleep function used by readiness polling.
        http_get: HTTP GET function used for checks issued from this machine.

    Returns:
        The report of a run whose required checks all passed.

    Raises:
        KubectlUnavailableError: If kubectl cannot reach the cluster.
        CleanupError: If orphaned resources could not be removed.
        PreconditionError: If test resources already exist or the namespace is not Active.
        DeploymentError: If a creation request is rejected.
        ClusterInfoError: If pod IPs, the service IP or the client pod name are missing.
        ChecksFailedError: If any required check failed.
    """
    cfg = cfg if cfg is not None else CheckConfig()
    names = names if names is not None else RunNames.for_run()
    report = CheckReport()

    out.print(Panel.fit("Checking preconditions", style="bold blue"))
    precheck_kubectl(accessor, out)
    remove_existing(accessor, out, names)
    if not check_preconditions(accessor, out, names, cfg.namespace):
        raise PreconditionError("Pre-conditions failed")

    with teardown_on_exit(accessor, out, names, skip=cfg.skip_cleanup):
        out.print(Panel.fit("Deploying test workloads", style="bold blue"))
        ready = deploy_test_workloads(accessor, out, names, cfg, clock=clock, sleep=sleep)
        report.add(ProbeOutcome("Both deployments completed successfully within timeout", ready))
        if not ready:
            logger.warning("Deployments not ready after %ss; continuing with checks",
                           cfg.deployment_timeout)

        info = gather_cluster_info(accessor, out, names, report)
        logger.info("Checking from %s against %d nginx pod(s) behind %s",
                    info.client_pod, len(info.target_pods), info.service.cluster_ip)
        run_probe_sequence(
            accessor, out, info, report,
            external_host=cfg.external_host,
            http_timeout=cfg.http_timeout,
            http_get=http_get,
        )
        if not report.passed:
            raise ChecksFailedError(report)

    return report

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

"""Cluster information gathering and the ordered connectivity checks."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import requests
from rich.console import Console
from rich.panel import Panel

from kuberang import logger
from kuberang.constants import (
    DEFAULT_EXTERNAL_HOST,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DNS_RETRY_ATTEMPTS,
    INFO_RETRY_ATTEMPTS,
    KUBERNETES_SERVICE_NAME,
    PING_COUNT,
    PROBE_RETRY_ATTEMPTS,
)
from kuberang.errors import ClusterInfoError
from kuberang.kubectl import ClusterAccessor, KubeOutput, exec_in_pod, get_pods, get_service
from kuberang.models import CheckReport, ClusterInfo, ProbeOutcome, ProbeService, RunNames
from kuberang.retry import retry_until
from kuberang.utils import print_ignored, print_ok, print_result

HttpGet = Callable[..., Any]


# ============================================================================
# Information gathering
# ============================================================================

def _has_pod_ips(ko: KubeOutput) -> bool:
    ips = ko.pod_ips()
    return ko.success and bool(ips) and all(ips)


def _has_service_ip(ko: KubeOutput) -> bool:
    return ko.success and bool(ko.service_cluster_ip())


def _has_pod_name(ko: KubeOutput) -> bool:
    return ko.success and bool(ko.first_pod_name())


def gather_cluster_info(
    accessor: ClusterAccessor,
    out: Console,
    names: RunNames,
    report: CheckReport | None = None,
) -> ClusterInfo:
    """Resolve target pod IPs, the service IP and the client pod name.

    Each lookup is retried, reported and recorded on its own; all three are attempted.

    Raises:
        ClusterInfoError: If any of the three could not be resolved. It carries the report.
    """
    report = report if report is not None else CheckReport()
    lookups = [
        ("Grab nginx pod ip addresses", lambda: get_pods(accessor, names.target), _has_pod_ips),
        ("Grab nginx service ip address", lambda: get_service(accessor, names.service), _has_service_ip),
        ("Grab BusyBox pod name", lambda: get_pods(accessor, names.client), _has_pod_name),
    ]
    results = []
    resolved_all = True
    for label, lookup, resolved in lookups:
        ko = retry_until(INFO_RETRY_ATTEMPTS, lookup, resolved)
        ok = print_result(out, resolved(ko), label, ko.combined_output)
        report.add(ProbeOutcome(label, ok, detail="" if ok else ko.combined_output))
        results.append(ko)
        resolved_all = resolved_all and ok

    if not resolved_all:
        raise ClusterInfoError("Failed to get required information from cluster", report)

    pods_ko, svc_ko, client_ko = results
    return ClusterInfo(
        target_pods=pods_ko.pods(),
        service=ProbeService(names.service, svc_ko.service_cluster_ip()),
        client_pod=client_ko.first_pod_name(),
    )


# ============================================================================
# Probes
# ============================================================================

def wget_from_pod(accessor: ClusterAccessor, pod: str, target: str) -> KubeOutput:
    return exec_in_pod(accessor, pod, "wget", "-qO-", target)


def ping_from_pod(accessor: ClusterAccessor, pod: str, host: str, count: int = PING_COUNT) -> KubeOutput:
    return exec_in_pod(accessor, pod, "ping", "-c", str(count), host)


def http_get_from_host(url: str, timeout: float, http_get: HttpGet = requests.get) -> tuple[bool, str]:
    """Issue one HTTP GET from this machine. Any response counts as reachable.

    Returns:
        Tuple of (reachable, error detail).
    """
    try:
        http_get(url, timeout=timeout)
    except requests.RequestException as exc:
        logger.debug("GET %s failed: %s", url, exc)
        return False, str(exc)
    return True, ""


def _required_from_pod(
    out: Console,
    report: CheckReport,
    label: str,
    attempts: int,
    probe: Callable[[], KubeOutput],
) -> None:
    ko = retry_until(attempts, probe, lambda result: result.success)
    print_result(out, ko.success, label, ko.combined_output)
    report.add(ProbeOutcome(label, ko.success, detail="" if ko.success else ko.combined_output))


def _tolerated(out: Console, report: CheckReport, label: str, ok: bool, detail: str = "") -> None:
    if ok:
        print_ok(out, label)
    else:
        print_ignored(out, label)
    report.add(ProbeOutcome(label, ok, required=False, detail=detail))


def run_probe_sequence(
    accessor: ClusterAccessor,
    out: Console,
    info: ClusterInfo,
    report: CheckReport | None = None,
    external_host: str = DEFAULT_EXTERNAL_HOST,
    http_timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
    http_get: HttpGet = requests.get,
) -> CheckReport:
    """Run the seven connectivity checks in order.

    No check stops the sequence. Egress checks and checks issued from this
    machine are recorded as not required.

    Returns:
        The report with one outcome appended per check (per IP where applicable).
    """
    report = report if report is not None else CheckReport()
    client = info.client_pod
    service_ip = info.service.cluster_ip
    service_name = info.service.name

    out.print(Panel.fit("Running connectivity checks", style="bold blue"))

    # 1. Service by cluster IP
    _required_from_pod(
        out, report, f"Accessed Nginx service at {service_ip} from BusyBox",
        PROBE_RETRY_ATTEMPTS, lambda: wget_from_pod(accessor, client, service_ip))

    # 2. Service by DNS name
    _required_from_pod(
        out, report, f"Accessed Nginx service via DNS {service_name} from BusyBox",
        DNS_RETRY_ATTEMPTS, lambda: wget_from_pod(accessor, client, service_name))

    # 3. Every nginx pod by IP
    for pod_ip in info.pod_ips:
        _required_from_pod(
            out, report, f"Accessed Nginx pod at {pod_ip} from BusyBox",
            PROBE_RETRY_ATTEMPTS, lambda ip=pod_ip: wget_from_pod(accessor, client, ip))

    # 4. Internet egress from the pod
    ko = wget_from_pod(accessor, client, external_host)
    _tolerated(out, report, f"Accessed {external_host} from BusyBox", ko.success,
               "" if ko.success else ko.combined_output)

    # 5. Every nginx pod from this machine
    for pod_ip in info.pod_ips:
        ok, detail = http_get_from_host(f"http://{pod_ip}", http_timeout, http_get)
        _tolerated(out, report, f"Accessed Nginx pod at {pod_ip} from this node", ok, detail)

    # 6. Internet egress from this machine
    ok, detail = http_get_from_host(f"http://{external_host}/", http_timeout, http_get)
    _tolerated(out, report, f"Accessed {external_host} from this node", ok, detail)

    # 7. API server through the kubernetes service
    _required_from_pod(
        out, report, "Ping kubernetes service from BusyBox",
        PROBE_RETRY_ATTEMPTS, lambda: ping_from_pod(accessor, client, KUBERNETES_SERVICE_NAME))

    return report

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

"""kubectl access: command execution and typed views of its JSON output."""

from __future__ import annotations

import json
import subprocess
from dataclasses import dataclass, field
from typing import Any, Protocol

import sh

from kuberang import logger
from kuberang.constants import APP_LABEL_KEY, POD_RUNNING
from kuberang.errors import KubectlUnavailableError
from kuberang.models import Pod


@dataclass
class KubeOutput:
    """Result of a single kubectl invocation.

    Attributes:
        success: Whether kubectl exited with status 0.
        combined_output: stdout followed by stderr, for diagnostics only.
        stdout: Raw stdout, parsed as JSON on demand.
    """

    success: bool
    combined_output: str = ""
    stdout: str = ""
    _parsed: Any = field(default=None, init=False, repr=False, compare=False)

    def json(self) -> Any:
        """Parse stdout as JSON, returning an empty dict when it is not JSON."""
        if self._parsed is None:
            try:
                self._parsed = json.loads(self.stdout) if self.stdout.strip() else {}
            except ValueError:
                logger.debug("kubectl output is not JSON: %.200s", self.stdout)
                self._parsed = {}
        return self._parsed

    def _items(self) -> list[dict]:
        data = self.json()
        if not isinstance(data, dict):
            return []
        return data.get("items") or []

    def pods(self) -> list[Pod]:
        """Pods listed in a ``get pods -o json`` response, skipping terminating ones."""
        pods = []
        for item in self._items():
            metadata = item.get("metadata") or {}
            if metadata.get("deletionTimestamp"):
                continue
            status = item.get("status") or {}
            pods.append(Pod(
                name=metadata.get("name", ""),
                ip=status.get("podIP", "") or "",
                phase=status.get("phase", "") or "",
            ))
        return pods

    def pod_ips(self) -> list[str]:
        return [pod.ip for pod in self.pods()]

    def first_pod_name(self) -> str:
        """Name of the first Running pod, or of the first pod if none is Running yet."""
        pods = self.pods()
        running = [pod for pod in pods if pod.phase == POD_RUNNING]
        if running:
            return running[0].name
        return pods[0].name if pods else ""

    def service_cluster_ip(self) -> str:
        data = self.json()
        if not isinstance(data, dict):
            return ""
        ip = (data.get("spec") or {}).get("clusterIP") or ""
        return "" if ip == "None" else ip

    def namespace_status(self) -> str:
        data = self.json()
        if not isinstance(data, dict):
            return ""
        return (data.get("status") or {}).get("phase", "") or ""

    def observed_replica_count(self) -> int:
        """Available replicas reported by a ``get deployment -o json`` response."""
        data = self.json()
        if not isinstance(data, dict):
            return 0
        return int((data.get("status") or {}).get("availableReplicas") or 0)

    def node_count(self) -> int:
        """Number of schedulable nodes in a ``get nodes -o json`` response."""
        return sum(
            1 for item in self._items()
            if not (item.get("spec") or {}).get("unschedulable", False)
        )


class ClusterAccessor(Protocol):
    """Anything that can run a kubectl subcommand and return its output."""

    def invoke(self, *args: str) -> KubeOutput:
        ...


class KubectlAccessor:
    """ClusterAccessor backed by the kubectl binary.

    Args:
        kubectl: Name or path of the kubectl binary.
        namespace: Namespace passed to every invocation, or None.
        timeout: Seconds before an invocation is abandoned, or None.
    """

    def __init__(self, kubectl: str = "kubectl", namespace: str | None = None,
                 timeout: int | None = None) -> None:
        self.kubectl = kubectl
        self.namespace = namespace
        self.timeout = timeout

    def command(self, *args: str) -> list[str]:
        cmd = [self.kubectl]
        if self.namespace:
            cmd.extend(["--namespace", self.namespace])
        cmd.extend(args)
        return cmd

    def invoke(self, *args: str) -> KubeOutput:
        cmd = self.command(*args)
        logger.debug("Running: %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except (subprocess.SubprocessError, OSError) as exc:
            logger.debug("kubectl invocation failed: %s", exc)
            return KubeOutput(success=False, combined_output=str(exc))
        logger.debug("kubectl exited with %d", result.returncode)
        return KubeOutput(
            success=result.returncode == 0,
            combined_output=result.stdout + result.stderr,
            stdout=result.stdout,
        )


def require_command(cmd: str) -> None:
    """Check if a command exists on the system PATH.

    Args:
        cmd: Name of the CLI command to check.

    Raises:
        KubectlUnavailableError: If the command is not found.
    """
    message = (f"Required command '{cmd}' not found. "
               "Kubectl must be configured on this machine before running kuberang")
    try:
        found = sh.which(cmd)
    except sh.ErrorReturnCode as err:
        raise KubectlUnavailableError(message) from err
    if not found:
        raise KubectlUnavailableError(message)


# ============================================================================
# Query helpers
# ============================================================================

def app_selector(name: str) -> str:
    return f"{APP_LABEL_KEY}={name}"


def get_service(accessor: ClusterAccessor, name: str) -> KubeOutput:
    return accessor.invoke("get", "service", name, "-o", "json")


def get_deployment(accessor: ClusterAccessor, name: str) -> KubeOutput:
    return accessor.invoke("get", "deployment", name, "-o", "json")


def get_namespace(accessor: ClusterAccessor, name: str) -> KubeOutput:
    return accessor.invoke("get", "namespace", name, "-o", "json")


def get_nodes(accessor: ClusterAccessor) -> KubeOutput:
    return accessor.invoke("get", "nodes", "-o", "json")


def get_pods(accessor: ClusterAccessor, app: str) -> KubeOutput:
    """List the pods of a deployment created by ``kubectl create deployment``."""
    return accessor.invoke("get", "pods", "-l", app_selector(app), "-o", "json")


def exec_in_pod(accessor: ClusterAccessor, pod: str, *command: str) -> KubeOutput:
    return accessor.invoke("exec", pod, "--", *command)

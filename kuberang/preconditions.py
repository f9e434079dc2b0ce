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

"""Precondition checks run before any test resource is created."""

from __future__ import annotations

from rich.console import Console

from kuberang import logger
from kuberang.constants import NAMESPACE_ACTIVE
from kuberang.errors import KubectlUnavailableError
from kuberang.kubectl import ClusterAccessor, get_deployment, get_namespace, get_service
from kuberang.models import RunNames
from kuberang.utils import print_err, print_failure_detail, print_ok, print_result


def precheck_kubectl(accessor: ClusterAccessor, out: Console) -> None:
    """Confirm kubectl can talk to the cluster.

    Raises:
        KubectlUnavailableError: If ``kubectl version`` fails.
    """
    ko = accessor.invoke("version")
    if not ko.success:
        print_err(out, "Configured kubectl exists")
        print_failure_detail(out, ko.combined_output)
        raise KubectlUnavailableError(
            "Kubectl must be configured on this machine before running kuberang")
    print_ok(out, "Kubectl configured on this node")


def precheck_namespace(accessor: ClusterAccessor, out: Console, namespace: str | None) -> bool:
    """Confirm the configured namespace exists and is Active. Passes when none is configured."""
    if not namespace:
        return True
    label = f"Configured kubernetes namespace `{namespace}` exists"
    ko = get_namespace(accessor, namespace)
    if not ko.success:
        return print_result(out, False, label, ko.combined_output)
    status = ko.namespace_status()
    if status != NAMESPACE_ACTIVE:
        logger.debug("Namespace %s has status %r", namespace, status)
        return print_result(out, False, label, f"namespace status is {status or 'unknown'!r}")
    return print_result(out, True, label)


def precheck_service(accessor: ClusterAccessor, out: Console, service: str) -> bool:
    ko = get_service(accessor, service)
    # A successful lookup means the name is taken.
    return print_result(out, not ko.success, "Nginx service does not already exist", ko.combined_output)


def precheck_deployments(accessor: ClusterAccessor, out: Console, names: RunNames) -> bool:
    ok = True
    for name, label in ((names.client, "BusyBox deployment does not already exist"),
                        (names.target, "Nginx deployment does not already exist")):
        ko = get_deployment(accessor, name)
        if not print_result(out, not ko.success, label, ko.combined_output):
            ok = False
    return ok


def check_preconditions(
    accessor: ClusterAccessor,
    out: Console,
    names: RunNames,
    namespace: str | None = None,
) -> bool:
    """Run every precondition and report each one.

    All checks are evaluated even when an earlier one fails.

    Returns:
        True if the cluster is clean and ready for a run.
    """
    results = [
        precheck_namespace(accessor, out, namespace),
        precheck_service(accessor, out, names.service),
        precheck_deployments(accessor, out, names),
    ]
    return all(results)

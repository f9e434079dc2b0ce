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

"""Exception hierarchy for kuberang runs."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kuberang.models import CheckReport


class KuberangError(RuntimeError):
    """Base class for every failure that ends a kuberang run."""


class KubectlUnavailableError(KuberangError):
    """kubectl is missing or cannot reach the cluster."""


class CleanupError(KuberangError):
    """Orphaned kuberang resources could not be removed."""


class PreconditionError(KuberangError):
    """The cluster is not in a state where the checks can run."""


class DeploymentError(KuberangError):
    """A test workload or its service could not be created."""


class ClusterInfoError(KuberangError):
    """Pod IPs, the service IP, or the client pod name could not be resolved."""

    def __init__(self, message: str, report: CheckReport | None = None) -> None:
        super().__init__(message)
        self.report = report


class ChecksFailedError(KuberangError):
    """One or more required checks failed."""

    def __init__(self, report: CheckReport) -> None:
        super().__init__("One or more required steps failed")
        self.report = report

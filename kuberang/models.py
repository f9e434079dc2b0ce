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

"""Data model shared by the workflow stages."""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from kuberang.constants import CLIENT_DEPLOYMENT_NAME, TARGET_DEPLOYMENT_NAME

_last_run_suffix = 0


def _next_run_suffix() -> int:
    """Nanosecond timestamp, strictly increasing within this process."""
    global _last_run_suffix
    _last_run_suffix = max(time.time_ns(), _last_run_suffix + 1)
    return _last_run_suffix


@dataclass(frozen=True)
class RunNames:
    """Names of the resources owned by a single run.

    Attributes:
        client: Probe-client deployment name.
        target: Probe-target deployment name.
        service: Probe-target service name, unique per run.
    """

    client: str = CLIENT_DEPLOYMENT_NAME
    target: str = TARGET_DEPLOYMENT_NAME
    service: str = ""

    @classmethod
    def for_run(cls) -> RunNames:
        """Build names with a nanosecond timestamp suffix on the service."""
        return cls(service=f"{TARGET_DEPLOYMENT_NAME}-{_next_run_suffix()}")


@dataclass
class TestWorkload:
    """A deployment created by the run and polled for readiness."""

    __test__ = False

    name: str
    image: str
    desired_replicas: int
    observed_replicas: int = 0
    exists: bool = False

    @property
    def ready(self) -> bool:
        return self.exists and self.observed_replicas == self.desired_replicas


@dataclass
class ProbeService:
    name: str
    cluster_ip: str = ""


@dataclass(frozen=True)
class Pod:
    name: str
    ip: str
    phase: str = ""


@dataclass(frozen=True)
class ClusterInfo:
    """Everything the probe sequence needs, resolved after deployment.

    Attributes:
        target_pods: Probe-target pods, each with a non-blank IP.
        service: Probe-target service with its cluster IP.
        client_pod: Name of the probe-client pod checks are executed from.
    """

    target_pods: list[Pod]
    service: ProbeService
    client_pod: str

    @property
    def pod_ips(self) -> list[str]:
        return [pod.ip for pod in self.target_pods]


@dataclass(frozen=True)
class ProbeOutcome:
    """Result of one check.

    Attributes:
        label: Human-readable description of what was checked.
        ok: Whether the check passed.
        required: Whether a failure fails the run.
        detail: Raw output of the last failed attempt, if any.
    """

    label: str
    ok: bool
    required: bool = True
    detail: str = ""


@dataclass
class CheckReport:
    """Ordered outcomes of a run."""

    outcomes: list[ProbeOutcome] = field(default_factory=list)

    def add(self, outcome: ProbeOutcome) -> ProbeOutcome:
        self.outcomes.append(outcome)
        return outcome

    @property
    def passed(self) -> bool:
        """True when every required outcome passed."""
        return all(o.ok for o in self.outcomes if o.required)

    @property
    def failures(self) -> list[ProbeOutcome]:
        return [o for o in self.outcomes if o.required and not o.ok]

    @property
    def ignored(self) -> list[ProbeOutcome]:
        return [o for o in self.outcomes if not o.required and not o.ok]

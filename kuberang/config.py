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

"""Configuration for a kuberang run."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from kuberang.constants import (
    DEFAULT_DEPLOYMENT_TIMEOUT_SECONDS,
    DEFAULT_EXTERNAL_HOST,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_POLL_INTERVAL_SECONDS,
    dep_value,
)


class CheckConfig(BaseSettings):
    """Run configuration, auto-loaded from KUBERANG_* env vars.

    Attributes:
        registry_url: Registry URL prefixed to the test images, or None for the default registry.
        namespace: Namespace the run is restricted to, or None for the kubectl context default.
        skip_cleanup: Leave the test resources in place after the run.
        kubectl: Name or path of the kubectl binary.
        command_timeout: Seconds before a kubectl invocation is abandoned, or None for no limit.
        deployment_timeout: Seconds to wait for both deployments to become ready.
        poll_interval: Seconds between readiness polls.
        http_timeout: Seconds allowed for each HTTP request issued from this machine.
        external_host: Well-known internet host used by the egress checks.
    """

    model_config = SettingsConfigDict(env_prefix="KUBERANG_", extra="ignore")

    registry_url: str | None = None
    namespace: str | None = None
    skip_cleanup: bool = False
    kubectl: str = "kubectl"
    command_timeout: int | None = Field(default=None, ge=1)
    deployment_timeout: float = Field(default=DEFAULT_DEPLOYMENT_TIMEOUT_SECONDS, gt=0)
    poll_interval: float = Field(default=DEFAULT_POLL_INTERVAL_SECONDS, ge=0)
    http_timeout: float = Field(default=DEFAULT_HTTP_TIMEOUT_SECONDS, gt=0)
    external_host: str = DEFAULT_EXTERNAL_HOST

    @property
    def image_prefix(self) -> str:
        """Registry prefix for test images, with a trailing slash when set."""
        if not self.registry_url:
            return ""
        return self.registry_url.rstrip("/") + "/"

    def image_ref(self, name: str) -> str:
        """Resolve a test image reference from dependencies.yaml.

        Args:
            name: Key under ``test_images`` (``busybox`` or ``nginx``).

        Returns:
            Image reference such as ``registry.local/busybox:latest``.
        """
        image = dep_value("test_images", name, "image", default=name)
        tag = dep_value("test_images", name, "tag", default="latest")
        return f"{self.image_prefix}{image}:{tag}"

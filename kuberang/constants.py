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

"""Constants, test image loading, and dep_value helper."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


def load_dependencies() -> dict:
    """Load test image names and tags from dependencies.yaml.

    Returns:
        Parsed YAML content as a nested dictionary.
    """
    deps_file = Path(__file__).resolve().parent / "dependencies.yaml"
    with open(deps_file) as f:
        return yaml.safe_load(f)


DEPENDENCIES = load_dependencies()


def dep_value(*keys: str, default: Any = None) -> Any:
    """Safely traverse the DEPENDENCIES dict by key path.

    Args:
        *keys: Sequence of dictionary keys to traverse.
        default: Value to return if any key is missing.

    Returns:
        The value at the nested key path, or *default* if not found.
    """
    node = DEPENDENCIES
    for key in keys:
        if not isinstance(node, dict):
            return default
        node = node.get(key)
        if node is None:
            return default
    return node


# -- Resource names --
RUN_PREFIX = "kuberang-"
CLIENT_DEPLOYMENT_NAME = RUN_PREFIX + "busybox"
TARGET_DEPLOYMENT_NAME = RUN_PREFIX + "nginx"
APP_LABEL_KEY = "app"

# -- Workloads --
CLIENT_REPLICAS = 1
CLIENT_SLEEP_COMMAND = ("sleep", "3600")
TARGET_PORT = 80

# -- Timing --
DEFAULT_DEPLOYMENT_TIMEOUT_SECONDS = 300
DEFAULT_POLL_INTERVAL_SECONDS = 1
DEFAULT_HTTP_TIMEOUT_SECONDS = 1.0

# -- Retry attempts --
INFO_RETRY_ATTEMPTS = 3
PROBE_RETRY_ATTEMPTS = 3
DNS_RETRY_ATTEMPTS = 6
PING_COUNT = 5

# -- Probe targets --
DEFAULT_EXTERNAL_HOST = "google.com"
KUBERNETES_SERVICE_NAME = "kubernetes"
NAMESPACE_ACTIVE = "Active"
POD_RUNNING = "Running"

# -- Output --
FAILURE_DETAIL_HEADER = "-------- OUTPUT --------"
FAILURE_DETAIL_FOOTER = "------------------------"

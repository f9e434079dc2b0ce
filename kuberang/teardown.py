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

"""Removal of the resources a run creates."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from rich.console import Console

from kuberang import logger
from kuberang.errors import CleanupError
from kuberang.kubectl import ClusterAccessor, app_selector
from kuberang.models import RunNames
from kuberang.utils import print_err, print_failure_detail, print_ok, print_result


def remove_existing(accessor: ClusterAccessor, out: Console, names: RunNames) -> None:
    """Delete resources orphaned by an earlier run, ignoring missing ones.

    Raises:
        CleanupError: If the delete request fails.
    """
    args = ["delete", "--ignore-not-found=true",
            f"deployment/{names.client}",
            f"deployment/{names.target}"]
    if names.service:
        args.append(f"service/{names.service}")
    ko = accessor.invoke(*args)
    if ko.success:
        # Services from earlier runs carry a different suffix; match them by label.
        ko = accessor.invoke("delete", "service", "--ignore-not-found=true",
                             "-l", app_selector(names.target))
    if not ko.success:
        print_err(out, "Delete existing deployments if they exist")
        print_failure_detail(out, ko.combined_output)
        raise CleanupError("Failure removing existing kuberang deployments")
    print_ok(out, "Delete existing deployments if they exist")


def power_down(accessor: ClusterAccessor, out: Console, names: RunNames) -> bool:
    """Delete the service and both deployments.

    Each deletion is attempted regardless of the others.

    Returns:
        True if all three deletions succeeded.
    """
    steps = [
        (("delete", "service", names.service), "Powered down Nginx service"),
        (("delete", "deployments", names.client), "Powered down Busybox deployment"),
        (("delete", "deployments", names.target), "Powered down Nginx deployment"),
    ]
    ok = True
    for args, label in steps:
        ko = accessor.invoke(*args)
        if not print_result(out, ko.success, label, ko.combined_output):
            ok = False
    return ok


@contextmanager
def teardown_on_exit(
    accessor: ClusterAccessor,
    out: Console,
    names: RunNames,
    skip: bool = False,
) -> Iterator[None]:
    """Run power_down when the block exits, on every exit path.

    Args:
        skip: Leave the resources in place for manual inspection.
    """
    try:
        yield
    finally:
        if skip:
            logger.info("Skipping cleanup; remove resources with 'kuberang cleanup'")
        else:
            power_down(accessor, out, names)

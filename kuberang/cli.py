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

"""
cli.py - Command line entry point for kuberang.

Subcommands:
    check      Deploy test workloads and verify cluster networking
    cleanup    Remove kuberang resources left behind by earlier runs
    version    Print the kuberang version

Environment Variables:
    Every option of ``check`` can also be set via KUBERANG_* environment
    variables (KUBERANG_REGISTRY_URL, KUBERANG_NAMESPACE, KUBERANG_SKIP_CLEANUP, ...).

Examples:
    # Smoke test the current kubectl context
    kuberang check

    # Pull test images from a private registry and keep resources afterwards
    kuberang check --registry-url registry.local:5000 --skip-cleanup

    # Remove leftovers from a --skip-cleanup run
    kuberang cleanup --namespace smoke
"""

from __future__ import annotations

import logging
from typing import NoReturn

import typer
from rich.markup import escape

from kuberang import __version__, console, err_console
from kuberang.config import CheckConfig
from kuberang.errors import KuberangError
from kuberang.kubectl import KubectlAccessor, require_command
from kuberang.models import RunNames
from kuberang.teardown import remove_existing
from kuberang.workflow import check_kubernetes

app = typer.Typer(
    help="Kubernetes cluster network smoke test.",
    no_args_is_help=True,
)


@app.callback()
def _main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Initialize logging for all subcommands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )


def _accessor(cfg: CheckConfig) -> KubectlAccessor:
    require_command(cfg.kubectl)
    return KubectlAccessor(cfg.kubectl, namespace=cfg.namespace, timeout=cfg.command_timeout)


def _fail(err: KuberangError) -> NoReturn:
    err_console.print(f"[red]\u274c {escape(str(err))}[/red]")
    raise typer.Exit(code=1)


@app.command()
def check(
    skip_cleanup: bool = typer.Option(
        False, "--skip-cleanup", help="Leave test resources in place after the run"),
    registry_url: str | None = typer.Option(
        None, "--registry-url", help="Registry URL prefixed to the test images"),
    namespace: str | None = typer.Option(
        None, "--namespace", "-n", help="Namespace to run the checks in (must be Active)"),
    kubectl: str | None = typer.Option(
        None, "--kubectl", help="Name or path of the kubectl binary"),
) -> None:
    """Deploy busybox and nginx, verify pod, service, DNS and egress networking."""
    cfg = CheckConfig()
    overrides: dict = {}
    if skip_cleanup:
        overrides["skip_cleanup"] = True
    if registry_url is not None:
        overrides["registry_url"] = registry_url
    if namespace is not None:
        overrides["namespace"] = namespace
    if kubectl is not None:
        overrides["kubectl"] = kubectl
    if overrides:
        cfg = cfg.model_copy(update=overrides)

    try:
        report = check_kubernetes(_accessor(cfg), cfg, console)
    except KuberangError as err:
        _fail(err)
    else:
        if report.ignored:
            console.print(f"[yellow]{len(report.ignored)} optional check(s) failed and were ignored[/yellow]")
        console.print("[green]\u2705 All required checks passed[/green]")


@app.command()
def cleanup(
    namespace: str | None = typer.Option(
        None, "--namespace", "-n", help="Namespace the earlier run used"),
    kubectl: str | None = typer.Option(
        None, "--kubectl", help="Name or path of the kubectl binary"),
) -> None:
    """Remove kuberang deployments and services left by earlier runs."""
    cfg = CheckConfig()
    overrides: dict = {}
    if namespace is not None:
        overrides["namespace"] = namespace
    if kubectl is not None:
        overrides["kubectl"] = kubectl
    if overrides:
        cfg = cfg.model_copy(update=overrides)

    try:
        remove_existing(_accessor(cfg), console, RunNames())
    except KuberangError as err:
        _fail(err)


@app.command()
def version() -> None:
    """Print the kuberang version."""
    console.print(f"kuberang {__version__}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()

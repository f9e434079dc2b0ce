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

"""Status line helpers for the run's output console."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

from kuberang.constants import FAILURE_DETAIL_FOOTER, FAILURE_DETAIL_HEADER


def print_ok(out: Console, message: str) -> None:
    out.print(f"[green]\u2705 {escape(message)}[/green]")


def print_err(out: Console, message: str) -> None:
    out.print(f"[red]\u274c {escape(message)}[/red]")


def print_ignored(out: Console, message: str) -> None:
    out.print(f"[yellow]\u26a0\ufe0f  {escape(message)} (ignored)[/yellow]")


def print_failure_detail(out: Console, detail: str) -> None:
    """Print raw kubectl output beneath a failed status line.

    The detail is printed verbatim, without markup or highlighting.
    """
    out.print(FAILURE_DETAIL_HEADER, markup=False, highlight=False)
    if detail:
        out.print(detail.rstrip("\n"), markup=False, highlight=False)
    out.print(FAILURE_DETAIL_FOOTER, markup=False, highlight=False)
    out.print()


def print_result(out: Console, ok: bool, message: str, detail: str = "") -> bool:
    """Print an ok or failed status line, with detail on failure.

    Returns:
        *ok*, so callers can fold the result into an aggregate.
    """
    if ok:
        print_ok(out, message)
    else:
        print_err(out, message)
        print_failure_detail(out, detail)
    return ok

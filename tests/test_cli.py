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

"""Tests for the kuberang command line."""

from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from kuberang import __version__
from kuberang.cli import app
from kuberang.errors import (
    ChecksFailedError,
    CleanupError,
    KubectlUnavailableError,
    PreconditionError,
)
from kuberang.models import CheckReport, ProbeOutcome

runner = CliRunner()


@pytest.fixture
def mock_accessor():
    with patch("kuberang.cli._accessor") as mock:
        mock.return_value = MagicMock()
        yield mock


class TestCheckCommand:

    @patch("kuberang.cli.check_kubernetes")
    def test_success_exits_zero(self, mock_check, mock_accessor):
        mock_check.return_value = CheckReport([ProbeOutcome("ok", True)])

        result = runner.invoke(app, ["check"])

        assert result.exit_code == 0
        assert "All required checks passed" in result.output

    @patch("kuberang.cli.check_kubernetes")
    def test_required_failure_exits_nonzero(self, mock_check, mock_accessor):
        mock_check.side_effect = ChecksFailedError(CheckReport([ProbeOutcome("ping", False)]))

        result = runner.invoke(app, ["check"])

        assert result.exit_code == 1

    @patch("kuberang.cli.check_kubernetes")
    def test_precondition_failure_exits_nonzero(self, mock_check, mock_accessor):
        mock_check.side_effect = PreconditionError("Pre-conditions failed")

        result = runner.invoke(app, ["check"])

        assert result.exit_code == 1

    def test_missing_kubectl_exits_nonzero(self):
        with patch("kuberang.cli.require_command",
                   side_effect=KubectlUnavailableError("Required command 'kubectl' not found")):
            result = runner.invoke(app, ["check"])

        assert result.exit_code == 1

    @patch("kuberang.cli.check_kubernetes")
    def test_options_override_config(self, mock_check, mock_accessor):
        mock_check.return_value = CheckReport()

        result = runner.invoke(app, ["check", "--skip-cleanup", "--registry-url", "reg.local",
                                     "--namespace", "smoke"])

        assert result.exit_code == 0
        cfg = mock_check.call_args.args[1]
        assert cfg.skip_cleanup is True
        assert cfg.registry_url == "reg.local"
        assert cfg.namespace == "smoke"
        assert mock_accessor.call_args.args[0] is cfg

    @patch("kuberang.cli.check_kubernetes")
    def test_environment_config(self, mock_check, mock_accessor, monkeypatch):
        monkeypatch.setenv("KUBERANG_REGISTRY_URL", "env.registry")
        mock_check.return_value = CheckReport()

        runner.invoke(app, ["check"])

        assert mock_check.call_args.args[1].registry_url == "env.registry"


class TestOtherCommands:

    @patch("kuberang.cli.remove_existing")
    def test_cleanup(self, mock_remove, mock_accessor):
        result = runner.invoke(app, ["cleanup"])

        assert result.exit_code == 0
        names = mock_remove.call_args.args[2]
        assert names.client == "kuberang-busybox"
        assert names.target == "kuberang-nginx"

    @patch("kuberang.cli.remove_existing")
    def test_cleanup_namespace_and_kubectl(self, mock_remove, mock_accessor):
        result = runner.invoke(app, ["cleanup", "--namespace", "smoke", "--kubectl", "/opt/bin/kubectl"])

        assert result.exit_code == 0
        cfg = mock_accessor.call_args.args[0]
        assert cfg.namespace == "smoke"
        assert cfg.kubectl == "/opt/bin/kubectl"
        mock_remove.assert_called_once()

    @patch("kuberang.cli.remove_existing")
    def test_cleanup_failure_exits_nonzero(self, mock_remove, mock_accessor):
        mock_remove.side_effect = CleanupError("Failure removing existing kuberang deployments")

        result = runner.invoke(app, ["cleanup", "-n", "smoke"])

        assert result.exit_code == 1

    def test_version(self):
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert __version__ in result.output

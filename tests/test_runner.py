"""
Tests for the kubectl-backed runner and listers.
"""

import subprocess
from unittest.mock import patch

import pytest

from conftest import FakeRunner, KubectlResponse
from kubechat.errors import CommandExecutionError
from kubechat.modules.executor import KubectlNamespaceLister, KubectlResourceNameLister, KubectlRunner


@pytest.mark.kubectl_mock
class TestKubectlRunner:
    """Test subprocess execution."""

    def test_success(self, kubectl_mocker):
        kubectl_mocker.register("get pods", KubectlResponse(stdout="NAME\nnginx\n"))
        out = KubectlRunner().run_combined_output(["kubectl", "get", "pods"])
        assert out == "NAME\nnginx\n"
        assert kubectl_mocker.calls == [["kubectl", "get", "pods"]]

    def test_stderr_is_combined(self, kubectl_mocker):
        kubectl_mocker.register("get pods", KubectlResponse(stdout="NAME\n", stderr="Warning: deprecated"))
        out = KubectlRunner().run_combined_output(["kubectl", "get", "pods"])
        assert out == "NAME\n\nWarning: deprecated"

    def test_non_zero_exit(self, kubectl_mocker):
        kubectl_mocker.register("get secrets", KubectlResponse(stderr="Forbidden", returncode=1))
        with pytest.raises(CommandExecutionError) as exc_info:
            KubectlRunner().run_combined_output(["kubectl", "get", "secrets"])
        assert exc_info.value.output == "Forbidden"
        assert "code 1" in str(exc_info.value)

    def test_timeout(self):
        with patch("subprocess.run", side_effect=subprocess.TimeoutExpired(["kubectl"], 3)):
            with pytest.raises(CommandExecutionError) as exc_info:
                KubectlRunner(timeout=3).run_combined_output(["kubectl", "get", "pods"])
        assert "timed out after 3s" in str(exc_info.value)

    def test_missing_binary(self):
        with patch("subprocess.run", side_effect=FileNotFoundError("kubectl")):
            with pytest.raises(CommandExecutionError):
                KubectlRunner().run_combined_output(["kubectl", "version"])

    def test_no_shell(self, kubectl_mocker):
        """Arguments are passed as a list; shell metacharacters stay literal."""
        kubectl_mocker.register("get", KubectlResponse(stdout="ok"))
        KubectlRunner().run_combined_output(["kubectl", "get", "pods;rm -rf /"])
        assert kubectl_mocker.calls == [["kubectl", "get", "pods;rm -rf /"]]


class TestListers:
    def test_namespace_lister(self):
        runner = FakeRunner(output="default kube-system team-a")
        assert KubectlNamespaceLister(runner).list_namespaces() == ["default", "kube-system", "team-a"]
        assert runner.calls[0][:3] == ["kubectl", "get", "namespaces"]

    def test_resource_name_lister(self):
        runner = FakeRunner(output="pod/nginx-1\npod/nginx-2\n\n")
        names = KubectlResourceNameLister(runner).list_names("pods", "default")
        assert names == ["nginx-1", "nginx-2"]
        assert runner.calls[0][-2:] == ["-n", "default"]

    def test_cluster_scoped_names(self):
        runner = FakeRunner(output="node/node-a\n")
        assert KubectlResourceNameLister(runner).list_names("nodes", None) == ["node-a"]
        assert "-n" not in runner.calls[0]

    def test_lister_propagates_failure(self):
        runner = FakeRunner()
        runner.error = CommandExecutionError("forbidden")
        with pytest.raises(CommandExecutionError):
            KubectlNamespaceLister(runner).list_namespaces()

"""
Tests for the kubectl sub-handler: policy checks, default namespace
injection, output handling and cancellation.
"""

import asyncio
import copy

import pytest

from conftest import SAMPLE_CONFIG, all_text
from kubechat.errors import CommandExecutionError, InvalidCommandError
from kubechat.modules.config import Config
from kubechat.modules.kubectl import forbidden_flag
from kubechat.modules.executor.kubectl import parse_namespace, resource_types

DENIED_HEADER = ":no_entry: Permission denied"


def denial(message) -> str:
    for section in message.sections:
        if section.header == DENIED_HEADER:
            return section.body.plaintext
    return ""


class TestCommandParsing:
    """Test the helpers that read kubectl arguments."""

    @pytest.mark.parametrize(
        "args,expected",
        [
            (["-n", "dev"], ("dev", False)),
            (["--namespace", "dev"], ("dev", False)),
            (["--namespace=dev"], ("dev", False)),
            (["-ndev"], ("dev", False)),
            (["-A"], (None, True)),
            (["--all-namespaces"], (None, True)),
            (["--all-namespaces=TRUE"], (None, True)),
            (["--all-namespaces=True"], (None, True)),
            (["-A=1"], (None, True)),
            (["-A=t"], (None, True)),
            (["-A=false"], (None, False)),
            (["--all-namespaces=F", "-n", "dev"], ("dev", False)),
            (["-o", "wide"], (None, False)),
        ],
    )
    def test_parse_namespace(self, args, expected):
        assert parse_namespace(["pods"] + args) == expected

    @pytest.mark.parametrize("arg", ["-A=yes", "--all-namespaces=", "--all-namespaces=tRuE"])
    def test_parse_namespace_rejects_non_boolean(self, arg):
        with pytest.raises(InvalidCommandError):
            parse_namespace(["pods", arg])

    @pytest.mark.parametrize(
        "args,expected",
        [
            (["pods", "--kubeconfig=/tmp/other"], "--kubeconfig"),
            (["pods", "--context", "staging"], "--context"),
            (["pods", "-s", "https://other:6443"], "-s"),
            (["pods", "-shttps://other:6443"], "-s"),
            (["pods", "--as=system:admin"], "--as"),
            (["pods", "-o", "wide", "--as-group", "system:masters"], "--as-group"),
            (["pods", "-o", "wide"], None),
            (["pods", "--all-namespaces"], None),
            (["nginx", "--", "curl", "--token", "x"], None),
        ],
    )
    def test_forbidden_flag(self, args, expected):
        assert forbidden_flag(args) == expected

    @pytest.mark.parametrize(
        "verb,args,expected",
        [
            ("get", ["pods"], ["pods"]),
            ("get", ["pods,svc", "-o", "wide"], ["pods", "svc"]),
            ("get", ["pods/nginx", "deploy/web"], ["pods", "deploy"]),
            ("get", ["-o", "wide", "pods"], ["pods"]),
            ("logs", ["nginx"], ["pods"]),
            ("logs", ["deploy/web"], ["deploy"]),
            ("exec", ["nginx", "--", "ls"], ["pods"]),
            ("cordon", ["node-a"], ["nodes"]),
            ("rollout", ["restart", "deployment/web"], ["deployment"]),
            ("explain", ["pods.spec.containers"], ["pods"]),
            ("api-resources", [], []),
            ("get", [], []),
        ],
    )
    def test_resource_types(self, verb, args, expected):
        assert resource_types(verb, args) == expected


class TestKubectlExecution:
    """Commands go through the checks in order before reaching the runner."""

    @pytest.mark.asyncio
    async def test_permitted_command_runs(self, dispatch, runner):
        msg = await dispatch("kubectl get pods -n default")
        assert runner.calls == [["kubectl", "get", "pods", "-n", "default"]]
        assert msg.body.code_block.startswith("NAME")
        assert msg.description == "`kubectl get pods -n default` on `prod`"

    @pytest.mark.asyncio
    async def test_alias_is_case_insensitive(self, dispatch, runner):
        await dispatch("Kubectl get pods -n default")
        assert runner.calls == [["kubectl", "get", "pods", "-n", "default"]]

    @pytest.mark.asyncio
    async def test_short_alias_is_normalized(self, dispatch, runner):
        await dispatch("k get po -n default")
        assert runner.calls == [["kubectl", "get", "po", "-n", "default"]]

    @pytest.mark.asyncio
    async def test_default_namespace_injected(self, dispatch, runner):
        """The settings default applies when no binding sets one."""
        await dispatch("kubectl get pods")
        assert runner.calls == [["kubectl", "get", "pods", "-n", "default"]]

    @pytest.mark.asyncio
    async def test_binding_default_namespace_wins(self, dispatch, runner):
        await dispatch("kubectl get pods", bindings=("kubectl-read-only", "kubectl-team"))
        assert runner.calls == [["kubectl", "get", "pods", "-n", "team-a"]]

    @pytest.mark.asyncio
    async def test_cluster_scoped_resource_gets_no_namespace(self, dispatch, runner):
        await dispatch("kubectl get nodes")
        assert runner.calls == [["kubectl", "get", "nodes"]]

    @pytest.mark.asyncio
    async def test_verb_not_allowed(self, dispatch, runner):
        msg = await dispatch("kubectl exec nginx -- ls")
        assert "'exec'" in denial(msg)
        assert runner.calls == []

    @pytest.mark.asyncio
    async def test_unknown_verb_denied(self, dispatch, runner):
        msg = await dispatch("kubectl destroy pods")
        assert denial(msg)
        assert runner.calls == []

    @pytest.mark.asyncio
    async def test_resource_not_allowed(self, dispatch, runner):
        msg = await dispatch("kubectl get secrets -n default")
        assert "'secrets'" in denial(msg)
        assert runner.calls == []

    @pytest.mark.asyncio
    async def test_one_forbidden_type_in_list_denies_all(self, dispatch, runner):
        msg = await dispatch("kubectl get pods,secrets -n default")
        assert denial(msg)
        assert runner.calls == []

    @pytest.mark.asyncio
    async def test_unknown_resource_denied(self, dispatch, runner):
        msg = await dispatch("kubectl get widgets")
        assert "'widgets'" in denial(msg)
        assert runner.calls == []

    @pytest.mark.asyncio
    async def test_flag_after_verb_rejected(self, dispatch, runner):
        msg = await dispatch("kubectl get -n default pods")
        assert "Format <verb> <resource> [flags]" in msg.body.plaintext
        assert runner.calls == []

    @pytest.mark.asyncio
    async def test_missing_resource_type(self, dispatch, runner):
        msg = await dispatch("kubectl delete -f manifest.yaml")
        assert runner.calls == []
        assert "Format" in msg.body.plaintext

    @pytest.mark.asyncio
    async def test_namespace_not_allowed(self, dispatch, runner):
        msg = await dispatch("kubectl get pods -n kube-system", bindings=("kubectl-read-only", "kubectl-team"))
        assert "'kube-system'" in denial(msg)
        assert runner.calls == []

    @pytest.mark.asyncio
    async def test_all_namespaces_requires_open_policy(self, dispatch, runner):
        await dispatch("kubectl get pods -A")
        assert runner.calls == [["kubectl", "get", "pods", "-A"]]

        runner.calls.clear()
        msg = await dispatch("kubectl get pods -A", bindings=("kubectl-read-only", "kubectl-team"))
        assert "all Namespaces" in denial(msg)
        assert runner.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("flag", ["--all-namespaces=TRUE", "--all-namespaces=True", "-A=1", "-A=t", "-A=T"])
    async def test_all_namespaces_spellings_are_checked(self, dispatch, runner, flag):
        msg = await dispatch(f"kubectl get pods {flag}", bindings=("kubectl-read-only", "kubectl-team"))
        assert "all Namespaces" in denial(msg)
        assert runner.calls == []

    @pytest.mark.asyncio
    async def test_all_namespaces_false_keeps_default_namespace(self, dispatch, runner):
        await dispatch("kubectl get pods -A=false", bindings=("kubectl-read-only", "kubectl-team"))
        assert runner.calls == [["kubectl", "get", "pods", "-A=false", "-n", "team-a"]]

    @pytest.mark.asyncio
    async def test_all_namespaces_invalid_value(self, dispatch, runner):
        msg = await dispatch("kubectl get pods --all-namespaces=yes")
        assert "'yes'" in msg.body.plaintext
        assert runner.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "flag",
        [
            "--kubeconfig=/tmp/other",
            "--kubeconfig /tmp/other",
            "--server=https://other:6443",
            "-s https://other:6443",
            "--token=abc",
            "--as=system:admin",
            "--context staging",
            "--user=admin",
            "--insecure-skip-tls-verify",
        ],
    )
    async def test_retargeting_flags_denied(self, dispatch, runner, flag):
        msg = await dispatch(f"kubectl get pods -n default {flag}")
        assert "flag cannot be used" in denial(msg)
        assert runner.calls == []

    @pytest.mark.asyncio
    async def test_restrict_access_on_unauthenticated_channel(self, dispatch, runner):
        msg = await dispatch("kubectl get pods", bindings=("kubectl-restricted",), authenticated=False)
        assert "not authorized" in denial(msg)
        assert runner.calls == []

    @pytest.mark.asyncio
    async def test_restrict_access_on_authenticated_channel(self, dispatch, runner):
        await dispatch("kubectl get pods", bindings=("kubectl-restricted",), authenticated=True)
        assert len(runner.calls) == 1

    @pytest.mark.asyncio
    async def test_unrestricted_policy_on_unauthenticated_channel(self, dispatch, runner):
        await dispatch("kubectl get pods", authenticated=False)
        assert len(runner.calls) == 1

    @pytest.mark.asyncio
    async def test_disabled_policy_denies(self, dispatch, runner):
        msg = await dispatch("kubectl get pods", bindings=("helm",))
        assert denial(msg)
        assert runner.calls == []

    @pytest.mark.asyncio
    async def test_checker_is_authoritative_at_execution(self, dispatch, runner, config_holder):
        """A disabled fragment bound last blocks execution even if verbs were offered before."""
        data = copy.deepcopy(SAMPLE_CONFIG)
        data["executors"]["kubectl-team"]["kubectl"]["enabled"] = False
        config_holder.publish(Config.model_validate(data))

        msg = await dispatch("kubectl get pods -n team-a", bindings=("kubectl-read-only", "kubectl-team"))
        assert denial(msg)
        assert runner.calls == []


class TestKubectlOutput:
    """Test output handling."""

    @pytest.mark.asyncio
    async def test_filter_reduces_output(self, dispatch, runner):
        runner.output = "NAME   STATUS\nnginx-1   Running\nredis-1   Pending\n"
        msg = await dispatch("kubectl get pods -n default --filter=Pending")
        assert msg.body.code_block == "redis-1   Pending"

    @pytest.mark.asyncio
    async def test_filter_with_separate_value(self, dispatch, runner):
        runner.output = "a\nb\n"
        msg = await dispatch('kubectl get pods --filter "b"')
        assert msg.body.code_block == "b"
        assert runner.calls == [["kubectl", "get", "pods", "-n", "default"]]

    @pytest.mark.asyncio
    async def test_empty_output(self, dispatch, runner):
        runner.output = ""
        msg = await dispatch("kubectl get pods")
        assert "no output" in msg.body.plaintext

    @pytest.mark.asyncio
    async def test_execution_failure_is_generic(self, dispatch, runner):
        """The runner error stays in the logs."""
        runner.error = CommandExecutionError("exit 1", output="Error from server (Forbidden): secret stuff")
        msg = await dispatch("kubectl get pods")
        assert "secret stuff" not in all_text(msg)
        assert "failed" in msg.body.plaintext


class TestCancellation:
    """A cancelled dispatch never reaches the runner."""

    @pytest.mark.asyncio
    async def test_cancelled_before_execution(self, dispatch, runner):
        task = asyncio.ensure_future(dispatch("kubectl get pods"))
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert runner.calls == []

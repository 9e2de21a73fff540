"""
Shared pytest fixtures for kubechat tests.

This module provides common fixtures including:
- KubectlMocker: Mock kubectl subprocess calls with canned responses
- Fake collaborators (runner, listers, analytics, notifier state)
- A sample policy configuration and an executor factory wired to fakes
- Redis mocks for persistence tests
"""

import os
import sys
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Pattern, Sequence, Tuple, Union
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from kubechat.errors import CommandExecutionError
from kubechat.modules.config import CommPlatformIntegration, Config, ConfigHolder
from kubechat.modules.executor import (
    Conversation,
    DefaultExecutorFactory,
    DefaultExecutorFactoryParams,
    InMemoryFilterEngine,
    NewDefaultInput,
    Origin,
)

BOT = "@Kubechat"

SAMPLE_CONFIG = {
    "settings": {"clusterName": "prod", "defaultNamespace": "default"},
    "sources": {
        "k8s-events": {"displayName": "Kubernetes events"},
        "k8s-errors": {"displayName": "Kubernetes errors"},
        "argo": {},
    },
    "executors": {
        "kubectl-read-only": {
            "kubectl": {
                "enabled": True,
                "namespaces": {"include": [".*"]},
                "commands": {
                    "verbs": ["get", "describe", "logs", "api-resources", "delete"],
                    "resources": ["pods", "deployments", "nodes"],
                },
            }
        },
        "kubectl-team": {
            "kubectl": {
                "namespaces": {"include": ["team-.*"], "exclude": ["team-secret"]},
                "defaultNamespace": "team-a",
            }
        },
        "kubectl-restricted": {
            "kubectl": {
                "enabled": True,
                "restrictAccess": True,
                "namespaces": {"include": [".*"]},
                "commands": {"verbs": ["get"], "resources": ["pods"]},
            }
        },
        "helm": {},
    },
    "communications": {
        "default-group": {
            "mattermost": {
                "enabled": True,
                "botName": "Kubechat",
                "channels": {
                    "ops": {
                        "name": "ops-channel",
                        "bindings": {
                            "executors": ["kubectl-read-only"],
                            "sources": ["k8s-events"],
                        },
                    },
                    "team": {
                        "name": "team-channel",
                        "notification": {"disabled": True},
                        "bindings": {"executors": ["kubectl-read-only", "kubectl-team"]},
                    },
                },
            },
            "teams": {"enabled": True, "botName": "Kubechat", "channels": {}},
            "socketSlack": {"enabled": True, "botID": "U123", "channels": {}},
            "discord": {"enabled": False, "botID": "D1"},
        }
    },
    "filters": {
        "ObjectAnnotationChecker": {"enabled": True, "description": "Checks annotations"},
        "NodeEventsChecker": {"enabled": False},
    },
}


# =============================================================================
# Kubectl Mocking Infrastructure
# =============================================================================

@dataclass
class KubectlResponse:
    """Represents a mocked kubectl command response."""
    stdout: str = ""
    stderr: str = ""
    returncode: int = 0

    def to_completed_process(self) -> MagicMock:
        """Convert to a subprocess.CompletedProcess-like mock."""
        result = MagicMock()
        result.stdout = self.stdout
        result.stderr = self.stderr
        result.returncode = self.returncode
        return result


class KubectlMocker:
    """
    Mock kubectl subprocess calls with pattern-matched responses.

    Usage:
        def test_runner(kubectl_mocker):
            kubectl_mocker.register("get pods", KubectlResponse(stdout="NAME ..."))
            KubectlRunner().run_combined_output(["kubectl", "get", "pods"])
            assert kubectl_mocker.was_called_with("get pods")
    """

    def __init__(self):
        self._responses: List[Tuple[Union[str, Pattern], KubectlResponse]] = []
        self.calls: List[List[str]] = []
        self._default_response = KubectlResponse(
            stderr="Error: mock not configured for this command",
            returncode=1,
        )

    def register(self, pattern: Union[str, Pattern], response: KubectlResponse) -> "KubectlMocker":
        """Register a response for commands matching the pattern (substring or regex)."""
        self._responses.append((pattern, response))
        return self

    def mock_run(self, cmd: List[str], capture_output: bool = True, text: bool = True,
                 timeout: Optional[int] = None, **kwargs) -> MagicMock:
        """Side effect for subprocess.run."""
        if cmd[0] != "kubectl":
            raise RuntimeError(f"Non-kubectl command blocked: {' '.join(cmd)}")

        self.calls.append(list(cmd))
        kubectl_args = " ".join(cmd[1:])
        for pattern, response in self._responses:
            if isinstance(pattern, str) and pattern in kubectl_args:
                return response.to_completed_process()
            if not isinstance(pattern, str) and pattern.search(kubectl_args):
                return response.to_completed_process()
        return self._default_response.to_completed_process()

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def was_called_with(self, pattern: str) -> bool:
        """Check if any call contained the given pattern."""
        return any(pattern in " ".join(call) for call in self.calls)


@pytest.fixture
def kubectl_mocker():
    """KubectlMocker with subprocess.run patched."""
    mocker = KubectlMocker()
    with patch("subprocess.run", side_effect=mocker.mock_run):
        yield mocker


# =============================================================================
# Fake collaborators
# =============================================================================

class FakeRunner:
    """Records commands and returns canned output."""

    def __init__(self, output: str = "NAME    READY   STATUS\nnginx   1/1     Running\n"):
        self.output = output
        self.error: Optional[CommandExecutionError] = None
        self.calls: List[List[str]] = []

    def run_combined_output(self, args: Sequence[str]) -> str:
        self.calls.append(list(args))
        if self.error is not None:
            raise self.error
        return self.output


class FakeNamespaceLister:
    def __init__(self, namespaces: Sequence[str] = ("default", "kube-system", "team-a", "team-secret")):
        self.namespaces = list(namespaces)
        self.error: Optional[CommandExecutionError] = None
        self.calls = 0

    def list_namespaces(self) -> List[str]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.namespaces)


class FakeResourceNameLister:
    def __init__(self, names: Optional[Dict[str, List[str]]] = None):
        self.names = names if names is not None else {"pods": ["nginx-1", "nginx-2"], "nodes": ["node-a"]}
        self.calls: List[Tuple[str, Optional[str]]] = []

    def list_names(self, resource_type: str, namespace: Optional[str]) -> List[str]:
        self.calls.append((resource_type, namespace))
        return list(self.names.get(resource_type, []))


@dataclass
class RecordingAnalytics:
    """Analytics reporter that remembers every report."""
    reports: List[Tuple[CommPlatformIntegration, str, Origin, bool]] = field(default_factory=list)
    fail: bool = False

    def report_command(self, platform, command, origin, with_filter):
        if self.fail:
            raise RuntimeError("analytics backend down")
        self.reports.append((platform, command, origin, with_filter))

    @property
    def commands(self) -> List[str]:
        return [r[1] for r in self.reports]


class FakeNotifierHandler:
    def __init__(self, enabled: bool = False, bot_name: str = BOT):
        self._bot_name = bot_name
        self.state: Dict[str, bool] = {}
        self.default = enabled

    def bot_name(self) -> str:
        return self._bot_name

    def notifications_enabled(self, conversation_id: str) -> bool:
        return self.state.get(conversation_id, self.default)

    def set_notifications_enabled(self, conversation_id: str, enabled: bool) -> None:
        self.state[conversation_id] = enabled


def make_persistence() -> AsyncMock:
    """Persistence manager mock; every persist call succeeds."""
    manager = AsyncMock()
    manager.persist_source_bindings = AsyncMock(return_value=None)
    manager.persist_notifications_enabled = AsyncMock(return_value=None)
    manager.persist_filter_enabled = AsyncMock(return_value=None)
    return manager


# =============================================================================
# Configuration and factory fixtures
# =============================================================================

@pytest.fixture
def sample_config() -> Config:
    return Config.model_validate(SAMPLE_CONFIG)


@pytest.fixture
def config_holder(sample_config) -> ConfigHolder:
    return ConfigHolder(sample_config)


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def namespace_lister():
    return FakeNamespaceLister()


@pytest.fixture
def resource_name_lister():
    return FakeResourceNameLister()


@pytest.fixture
def analytics():
    return RecordingAnalytics()


@pytest.fixture
def persistence():
    return make_persistence()


@pytest.fixture
def filter_engine(sample_config):
    return InMemoryFilterEngine(sample_config.filters)


@pytest.fixture
def notifier_handler():
    return FakeNotifierHandler()


@pytest.fixture
def executor_factory(config_holder, runner, namespace_lister, resource_name_lister, analytics, persistence,
                     filter_engine):
    return DefaultExecutorFactory(
        DefaultExecutorFactoryParams(
            config_source=config_holder,
            cmd_runner=runner,
            cfg_manager=persistence,
            analytics_reporter=analytics,
            namespace_lister=namespace_lister,
            resource_name_lister=resource_name_lister,
            filter_engine=filter_engine,
        )
    )


@pytest.fixture
def dispatch(executor_factory, notifier_handler):
    """
    Run one command through a fresh dispatcher.

    Usage:
        msg = await dispatch("kubectl get pods", bindings=("kubectl-read-only",))
    """

    async def _dispatch(
        text: str,
        bindings: Sequence[str] = ("kubectl-read-only",),
        sources: Sequence[str] = ("k8s-events",),
        authenticated: bool = True,
        origin: Origin = Origin.TYPED_MESSAGE,
        user: str = "alice",
    ):
        conversation = Conversation(
            alias="ops",
            id="ops-channel",
            executor_bindings=tuple(bindings),
            source_bindings=tuple(sources),
            is_authenticated=authenticated,
            command_origin=origin,
        )
        executor = executor_factory.new_default(
            NewDefaultInput(
                comm_group_name="default-group",
                platform=CommPlatformIntegration.MATTERMOST,
                notifier_handler=notifier_handler,
                conversation=conversation,
                message=text,
                user=user,
            )
        )
        return await executor.execute()

    return _dispatch


def strip_bot(command: str) -> str:
    """Turn a button payload back into the text the adapter hands over."""
    assert command.startswith(BOT + " "), command
    return command[len(BOT) + 1:]


def all_text(message) -> str:
    """Concatenate every visible string of a Message, for loose assertions."""
    parts = [message.header, message.description, message.body.plaintext, message.body.code_block]
    for section in message.sections:
        parts += [section.header, section.description, section.body.plaintext, section.body.code_block]
        parts += list(section.context)
        parts += [f"{f.key} {f.value}" for f in section.text_fields]
    return "\n".join(p for p in parts if p)


# =============================================================================
# Redis Mocking Infrastructure
# =============================================================================

@pytest.fixture
def mock_redis_with_data():
    """
    Redis mock with in-memory data storage for more realistic tests.

    This allows testing code that reads back what it writes.
    """
    storage = {}

    redis = AsyncMock()

    async def mock_set(key, value, *args, **kwargs):
        storage[key] = value
        return True

    async def mock_get(key):
        return storage.get(key)

    async def mock_delete(*keys):
        count = 0
        for key in keys:
            if key in storage:
                del storage[key]
                count += 1
        return count

    redis.set = mock_set
    redis.get = mock_get
    redis.delete = mock_delete
    redis._storage = storage  # Expose for test assertions

    return redis


# =============================================================================
# Test Markers Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "kubectl_mock: Tests using mocked kubectl subprocess calls"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take a long time to run"
    )

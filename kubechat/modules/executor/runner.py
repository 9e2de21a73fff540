"""
Default collaborators backed by the kubectl binary.

The binary is expected on PATH; locating it is the deployment's concern.
"""

import logging
import subprocess
from typing import List, Optional, Sequence

from ...errors import CommandExecutionError
from ..kubectl import KUBECTL_BINARY
from .interfaces import CommandRunner

logger = logging.getLogger("kubechat.executor.runner")


class KubectlRunner:
    """Runs commands as subprocesses without a shell."""

    def __init__(self, timeout: int = 30):
        self.timeout = timeout

    def run_combined_output(self, args: Sequence[str]) -> str:
        """
        Execute a command.

        Args:
            args: Full argv, binary first

        Returns:
            stdout and stderr combined

        Raises:
            CommandExecutionError: On timeout, spawn failure or non-zero exit
        """
        cmd = list(args)
        logger.debug(f"Running: {' '.join(cmd)}")

        try:
            process = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            logger.error(f"Command timed out after {self.timeout}s: {' '.join(cmd)}")
            raise CommandExecutionError(f"command timed out after {self.timeout}s")
        except OSError as e:
            logger.error(f"Command execution failed: {e}")
            raise CommandExecutionError(str(e))

        # Combine stdout and stderr for output
        output = process.stdout
        if process.stderr:
            output += "\n" + process.stderr if output else process.stderr

        if process.returncode != 0:
            raise CommandExecutionError(f"command exited with code {process.returncode}", output=output)

        return output


class KubectlNamespaceLister:
    """Lists live namespaces with `kubectl get namespaces`."""

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def list_namespaces(self) -> List[str]:
        out = self.runner.run_combined_output(
            [KUBECTL_BINARY, "get", "namespaces", "-o", "jsonpath={.items[*].metadata.name}"]
        )
        return out.split()


class KubectlResourceNameLister:
    """Lists resource names with `kubectl get <type> -o name`."""

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def list_names(self, resource_type: str, namespace: Optional[str]) -> List[str]:
        args = [KUBECTL_BINARY, "get", resource_type, "-o", "name", "--ignore-not-found=true"]
        if namespace:
            args += ["-n", namespace]
        out = self.runner.run_combined_output(args)

        # "-o name" prints kind/name
        return [line.split("/", 1)[-1] for line in out.splitlines() if line.strip()]

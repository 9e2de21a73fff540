"""Static kubectl vocabulary, independent of cluster state and configuration."""

from typing import Optional, Sequence

# Every verb kubectl itself recognizes
KUBECTL_VERBS = frozenset(
    {
        "annotate",
        "api-resources",
        "api-versions",
        "apply",
        "attach",
        "auth",
        "autoscale",
        "certificate",
        "cluster-info",
        "completion",
        "config",
        "cordon",
        "cp",
        "create",
        "debug",
        "delete",
        "describe",
        "diff",
        "drain",
        "edit",
        "events",
        "exec",
        "explain",
        "expose",
        "get",
        "kustomize",
        "label",
        "logs",
        "options",
        "patch",
        "plugin",
        "port-forward",
        "proxy",
        "replace",
        "rollout",
        "run",
        "scale",
        "set",
        "taint",
        "top",
        "uncordon",
        "version",
        "wait",
    }
)

# Verbs the interactive builder knows how to present
BUILDER_VERBS = (
    "api-resources",
    "api-versions",
    "cluster-info",
    "describe",
    "explain",
    "get",
    "logs",
    "top",
)

# Verbs that take no resource type
VERBS_WITHOUT_RESOURCE = frozenset(
    {
        "api-resources",
        "api-versions",
        "apply",
        "auth",
        "certificate",
        "cluster-info",
        "completion",
        "config",
        "diff",
        "events",
        "kustomize",
        "options",
        "plugin",
        "proxy",
        "replace",
        "version",
    }
)

# Verbs whose first argument is a name of an implied resource type
IMPLIED_RESOURCE_VERBS = {
    "attach": "pods",
    "cp": "pods",
    "debug": "pods",
    "exec": "pods",
    "logs": "pods",
    "port-forward": "pods",
    "run": "pods",
    "cordon": "nodes",
    "drain": "nodes",
    "uncordon": "nodes",
}

# Verbs with a subcommand before the resource type
VERBS_WITH_SUBCOMMAND = frozenset({"rollout", "set"})

# Verbs that never take the "type/name" form
NAME_ONLY_VERBS = frozenset({"cp", "run", "cordon", "drain", "uncordon"})

# Verbs that cannot run without a resource name
VERBS_REQUIRING_NAME = frozenset({"logs"})

KUBECTL_ALIASES = ("kubectl", "kc", "k")
KUBECTL_BINARY = "kubectl"

# Global flags that retarget the command to other clusters, credentials or identities
FORBIDDEN_FLAGS = frozenset(
    {
        "--kubeconfig",
        "--context",
        "--cluster",
        "--user",
        "--server",
        "-s",
        "--token",
        "--username",
        "--password",
        "--client-certificate",
        "--client-key",
        "--certificate-authority",
        "--insecure-skip-tls-verify",
        "--tls-server-name",
        "--as",
        "--as-group",
        "--as-uid",
        "--raw",
    }
)


def is_kubectl_alias(token: str) -> bool:
    return token.lower() in KUBECTL_ALIASES


def forbidden_flag(args: Sequence[str]) -> Optional[str]:
    """
    First argument naming a forbidden flag, in either ``--flag`` or ``--flag=value`` form.

    Arguments after ``--`` belong to the remote process and are not inspected.
    """
    for arg in args:
        if arg == "--":
            break
        if not arg.startswith("-"):
            continue
        name = arg.split("=", 1)[0]
        if not arg.startswith("--") and arg.startswith("-s"):
            # short form also takes an attached value: -shttps://host
            name = "-s"
        if name in FORBIDDEN_FLAGS:
            return name
    return None

"""
Default resource catalogue.

Each entry describes one resource kind: canonical name, aliases, scope and
the kubectl verbs it supports. New kinds are added here or in the
``resources`` section of the configuration file, never as code.
"""

_READ = ("get", "describe", "explain")
_LABELS = ("label", "annotate")

DEFAULT_RESOURCES = (
    {
        "name": "pods",
        "aliases": ("po", "pod"),
        "namespaced": True,
        "verbs": _READ + _LABELS + ("logs", "top", "delete", "exec", "port-forward", "cp", "attach", "debug"),
    },
    {
        "name": "services",
        "aliases": ("svc", "service"),
        "namespaced": True,
        "verbs": _READ + _LABELS + ("delete", "port-forward", "expose"),
    },
    {
        "name": "deployments",
        "aliases": ("deploy", "deployment"),
        "namespaced": True,
        "verbs": _READ + _LABELS + ("logs", "delete", "scale", "rollout", "set", "autoscale", "expose"),
    },
    {
        "name": "statefulsets",
        "aliases": ("sts", "statefulset"),
        "namespaced": True,
        "verbs": _READ + _LABELS + ("logs", "delete", "scale", "rollout", "set"),
    },
    {
        "name": "daemonsets",
        "aliases": ("ds", "daemonset"),
        "namespaced": True,
        "verbs": _READ + _LABELS + ("logs", "delete", "rollout", "set"),
    },
    {
        "name": "replicasets",
        "aliases": ("rs", "replicaset"),
        "namespaced": True,
        "verbs": _READ + _LABELS + ("delete", "scale"),
    },
    {
        "name": "jobs",
        "aliases": ("job",),
        "namespaced": True,
        "verbs": _READ + _LABELS + ("logs", "delete"),
    },
    {
        "name": "cronjobs",
        "aliases": ("cj", "cronjob"),
        "namespaced": True,
        "verbs": _READ + _LABELS + ("delete",),
    },
    {
        "name": "configmaps",
        "aliases": ("cm", "configmap"),
        "namespaced": True,
        "verbs": _READ + _LABELS + ("delete",),
    },
    {
        "name": "secrets",
        "aliases": ("secret",),
        "namespaced": True,
        "verbs": _READ + _LABELS + ("delete",),
    },
    {
        "name": "ingresses",
        "aliases": ("ing", "ingress"),
        "namespaced": True,
        "verbs": _READ + _LABELS + ("delete",),
    },
    {
        "name": "persistentvolumeclaims",
        "aliases": ("pvc", "persistentvolumeclaim"),
        "namespaced": True,
        "verbs": _READ + _LABELS + ("delete",),
    },
    {
        "name": "events",
        "aliases": ("ev", "event"),
        "namespaced": True,
        "verbs": ("get", "describe"),
    },
    {
        "name": "namespaces",
        "aliases": ("ns", "namespace"),
        "namespaced": False,
        "verbs": _READ + _LABELS,
    },
    {
        "name": "nodes",
        "aliases": ("no", "node"),
        "namespaced": False,
        "verbs": _READ + _LABELS + ("top", "cordon", "uncordon", "drain", "taint"),
    },
    {
        "name": "persistentvolumes",
        "aliases": ("pv", "persistentvolume"),
        "namespaced": False,
        "verbs": _READ + _LABELS + ("delete",),
    },
    {
        "name": "storageclasses",
        "aliases": ("sc", "storageclass"),
        "namespaced": False,
        "verbs": _READ,
    },
)

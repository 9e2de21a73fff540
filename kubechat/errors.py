"""Exception hierarchy shared by all kubechat modules."""


class KubechatError(Exception):
    """Base class for every error raised by kubechat."""


class UnsupportedVerbError(KubechatError):
    """The verb is not a recognized kubectl verb at all."""

    def __init__(self, verb: str):
        super().__init__(f"kubectl verb {verb!r} is not supported")
        self.verb = verb


class UnknownResourceError(KubechatError):
    """No resource in the catalogue matches the given name or alias."""

    def __init__(self, resource_type: str):
        super().__init__(f"resource {resource_type!r} not found")
        self.resource_type = resource_type


class VerbNotSupportedError(KubechatError):
    """The resource exists but does not support the verb."""

    def __init__(self, verb: str, resource_type: str):
        super().__init__(f"verb {verb!r} is not supported for resource {resource_type!r}")
        self.verb = verb
        self.resource_type = resource_type


class PermissionDeniedError(KubechatError):
    """The effective policy forbids the requested action."""


class PersistenceError(KubechatError):
    """Persisting a configuration change failed."""


class CommandExecutionError(KubechatError):
    """Running a resolved command failed."""

    def __init__(self, message: str, output: str = ""):
        super().__init__(message)
        self.output = output


class UnrecognizedCommandError(KubechatError):
    """The message does not match any known command."""


class InvalidCommandError(KubechatError):
    """The command is recognized but malformed."""

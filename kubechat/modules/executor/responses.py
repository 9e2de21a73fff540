"""Shared user-facing responses for failures."""

from ..interactive import Body, Message, Section

PERSISTENCE_FAILURE_MSG = "Sorry, I could not save this change. Please try again later or contact your administrator."
EXECUTION_FAILURE_MSG = "Sorry, the command failed to run on cluster {cluster!r}. Check the kubechat logs for details."


def persistence_failure_message() -> Message:
    """Generic notice; the cause stays in the logs."""
    return Message(body=Body(plaintext=PERSISTENCE_FAILURE_MSG))


def execution_failure_message(cluster_name: str) -> Message:
    return Message(body=Body(plaintext=EXECUTION_FAILURE_MSG.format(cluster=cluster_name)))


def permission_denied_message(reason: str) -> Message:
    return Message(
        sections=(Section(header=":no_entry: Permission denied", body=Body(plaintext=reason)),),
    )

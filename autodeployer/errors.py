"""
Deployment Errors
Batch-fatal configuration errors and target-scoped failures
"""

from autodeployer.models.deployment import ErrorKind, Outcome


class DeploymentError(Exception):
    """Base class for all AutoDeployer errors"""


class ConfigValidationError(DeploymentError):
    """
    Bad or missing batch configuration.
    The only batch-fatal error: raised before any target task starts.
    """


class TargetError(DeploymentError):
    """
    Failure scoped to a single target.
    Degrades that target's Outcome and never aborts sibling tasks.
    """

    kind: ErrorKind = ErrorKind.UNEXPECTED

    def to_outcome(self, target: str) -> Outcome:
        return Outcome.failure(target, self.kind, str(self))


class UnsupportedFileType(TargetError):
    kind = ErrorKind.UNSUPPORTED_FILE_TYPE


class TargetUnreachable(TargetError):
    kind = ErrorKind.TARGET_UNREACHABLE


class TransferFailure(TargetError):
    kind = ErrorKind.TRANSFER_FAILURE


class InvocationFailure(TargetError):
    kind = ErrorKind.INVOCATION_FAILURE


class TaskCancelled(TargetError):
    kind = ErrorKind.CANCELLED


class TimeoutExceeded(TargetError):
    kind = ErrorKind.TIMEOUT_EXCEEDED

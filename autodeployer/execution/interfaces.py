"""
Session Interfaces
Capability contracts for probing, staging and launching on a target machine

Implemented by adapters (PowerShell remoting, test fakes). The core only
ever talks to a TargetSession opened for one target task.
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional

from autodeployer.execution.resolver import Operation
from autodeployer.models.deployment import IOResult, ProcessResult


class ReachabilityProbe(ABC):
    @abstractmethod
    def is_valid(self, target: str) -> bool:
        """True if the target is a known computer and is online"""


class FileTransfer(ABC):
    @abstractmethod
    def copy_file(self, target: str, src_file: str, dest_path: str) -> IOResult:
        """Copies a single file into dest_path on the target"""

    @abstractmethod
    def copy_directory(self, target: str, src_dir: str, dest_path: str) -> IOResult:
        """Copies the contents of src_dir into dest_path on the target"""

    @abstractmethod
    def remove_directory(self, target: str, path: str) -> IOResult:
        """Removes a directory on the target (best-effort)"""


class Invoker(ABC):
    @abstractmethod
    def invoke(
        self,
        operation: Operation,
        path: str,
        arguments: Optional[str] = None,
        target: Optional[str] = None,
    ) -> ProcessResult:
        """
        Launches the operation and waits for it to finish.

        Args:
            operation: Resolved operation (kind + location)
            path: Effective file path, or product code for removal by identifier
            arguments: Extra installer arguments
            target: Target computer; ignored for local operations

        Raises:
            InvocationFailure: If the process could not be launched
        """


class TargetSession(ReachabilityProbe, FileTransfer, Invoker):
    """
    Per-target bundle of capabilities with a scoped lifetime.
    Opened by the executor for one target task and closed on every exit path.
    """

    def close(self) -> None:
        """Release any process/session handles held for the target"""

    def __enter__(self) -> "TargetSession":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


SessionFactory = Callable[[str], TargetSession]

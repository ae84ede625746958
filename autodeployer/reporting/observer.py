"""
Deployment Observers
Injected status reporting, decoupled from orchestration and dispatch logic
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, Optional

from autodeployer.models.deployment import BatchResult
from autodeployer.utils.logging_config import get_logger

logger = get_logger(__name__)


class DeploymentObserver(ABC):
    """Receives status notifications from the orchestrator and target tasks"""

    @abstractmethod
    def status(self, message: str) -> None:
        """Free-form status line"""

    def batch_started(self, target_count: int) -> None:
        self.status(f"Starting tasks for {target_count} target computer(s).")

    def target_valid(self, target: str) -> None:
        self.status(f"Computer {target} is valid and online.")

    def target_failed(self, target: str, message: str) -> None:
        self.status(f"Error executing task for {target}: {message}")

    def target_timed_out(self, target: str) -> None:
        self.status(f"Task for {target} timed out.")

    def batch_completed(self, result: BatchResult) -> None:
        self.status(
            f"All tasks completed: {result.success_count} succeeded, "
            f"{result.failure_count} failed in {result.elapsed_seconds:.2f}s."
        )


class LoggingObserver(DeploymentObserver):
    """Default observer: status lines go to the module logger"""

    def status(self, message: str) -> None:
        logger.info(message)


class ConsoleObserver(DeploymentObserver):
    """Prints timestamped status lines to the console and logs them"""

    def __init__(self, write: Optional[Callable[[str], None]] = None):
        self.write = write or print

    def status(self, message: str) -> None:
        logger.info(message)
        self.write(f"[{datetime.now().strftime('%Y-%m-%d %H:%M:%S')}] {message}")

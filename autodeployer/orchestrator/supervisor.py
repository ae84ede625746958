"""
Timeout Supervisor Module
Single Responsibility: Race one target task against its wall-clock deadline

Cancellation is cooperative. When the deadline wins, the cancel signal is set
and a synthetic timeout Outcome is returned; the worker thread is not killed
and the launched installer/script may keep running on the target. A result
produced after the deadline is dropped.
"""

import threading
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Optional

from autodeployer.errors import TimeoutExceeded
from autodeployer.execution.executor import TargetExecutor
from autodeployer.models.deployment import BatchConfig, ErrorKind, Outcome
from autodeployer.reporting.observer import DeploymentObserver, LoggingObserver
from autodeployer.utils.logging_config import get_logger

logger = get_logger(__name__)

TIMED_OUT_MESSAGE = "Task timed out"


class TimeoutSupervisor:
    """Runs a TargetExecutor in its own worker thread under a hard deadline"""

    def __init__(
        self,
        executor: TargetExecutor,
        observer: Optional[DeploymentObserver] = None,
    ):
        self.executor = executor
        self.observer = observer or LoggingObserver()

    def run_with_timeout(
        self, target: str, config: BatchConfig, timeout_seconds: float
    ) -> Outcome:
        """
        Executes the target task, returning whichever finishes first.

        Args:
            target: Target computer name
            config: Batch configuration
            timeout_seconds: Deadline for the whole target workflow

        Returns:
            The executor's Outcome, or a -1 "Task timed out" Outcome
        """
        cancel_event = threading.Event()
        future: "Future[Outcome]" = Future()

        # Daemon so a hung launch can never block interpreter exit
        worker = threading.Thread(
            target=self._work,
            args=(future, target, config, cancel_event),
            name=f"deploy-{target}",
            daemon=True,
        )
        worker.start()
        logger.debug(f"[{target}] Task started with timeout {timeout_seconds:.3f}s")

        try:
            outcome = future.result(timeout=timeout_seconds)
        except FutureTimeoutError:
            cancel_event.set()
            logger.warning(
                f"[{target}] Timed out after {timeout_seconds:.3f}s; cancellation signalled, "
                "the launched operation may still be running on the target"
            )
            self.observer.target_timed_out(target)
            return TimeoutExceeded(TIMED_OUT_MESSAGE).to_outcome(target)
        except Exception as e:
            logger.error(
                f"[{target}] Task failed outside the executor: {type(e).__name__}: {e}",
                exc_info=True,
            )
            return Outcome.failure(target, ErrorKind.UNEXPECTED, str(e))

        logger.debug(f"[{target}] Task completed with exit code {outcome.exit_code}")
        return outcome

    def _work(
        self,
        future: "Future[Outcome]",
        target: str,
        config: BatchConfig,
        cancel_event: threading.Event,
    ):
        if not future.set_running_or_notify_cancel():
            return
        try:
            future.set_result(self.executor.execute(target, config, cancel_event))
        except BaseException as e:
            future.set_exception(e)

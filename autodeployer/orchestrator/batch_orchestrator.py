"""
Batch Orchestrator Module
Fans one supervised deployment task out per target and aggregates the outcomes
"""

import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

from autodeployer.execution.executor import TargetExecutor
from autodeployer.execution.interfaces import SessionFactory
from autodeployer.models.deployment import BatchConfig, BatchResult, ErrorKind, Outcome
from autodeployer.orchestrator.supervisor import TimeoutSupervisor
from autodeployer.reporting.observer import DeploymentObserver, LoggingObserver
from autodeployer.utils.logging_config import get_logger

logger = get_logger(__name__)


class BatchOrchestrator:
    """
    Orchestrates one deployment batch across all target computers.

    Workflow:
    1. Launch one TimeoutSupervisor per target, all at once (no concurrency cap)
    2. Each supervisor runs a TargetExecutor:
       a. Validate computer (AD + online)
       b. Stage source items (optional)
       c. Resolve and invoke the operation
       d. Clean up staged items (optional, best-effort)
    3. Wait for every target to reach an Outcome
    4. Return BatchResult (submission order + elapsed time)

    A failing target yields a failing Outcome; the batch itself never fails.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        observer: Optional[DeploymentObserver] = None,
    ):
        """
        Initialize orchestrator with its collaborators.

        Args:
            session_factory: Opens a TargetSession for each target task
            observer: Status observer (defaults to logging only)
        """
        logger.info("Initializing BatchOrchestrator")
        self.observer = observer or LoggingObserver()
        self.executor = TargetExecutor(session_factory, self.observer)
        self.supervisor = TimeoutSupervisor(self.executor, self.observer)
        logger.info("BatchOrchestrator initialization complete")

    def run_batch(self, config: BatchConfig) -> BatchResult:
        """
        Runs the configured action on every target concurrently.

        Args:
            config: Validated batch configuration

        Returns:
            BatchResult with exactly one Outcome per target
        """
        targets = list(config.target_computers)
        logger.info(
            f"Starting batch for {config.app_name}: mode={config.mode.value}, "
            f"file={config.file}, targets={len(targets)}, timeout={config.timeout_ms}ms"
        )
        self.observer.batch_started(len(targets))

        started = time.monotonic()
        with ThreadPoolExecutor(
            max_workers=len(targets), thread_name_prefix="supervisor"
        ) as pool:
            futures = [
                pool.submit(
                    self.supervisor.run_with_timeout,
                    target,
                    config,
                    config.timeout_seconds,
                )
                for target in targets
            ]
            outcomes: List[Outcome] = []
            for target, future in zip(targets, futures):
                outcomes.append(self._collect(target, future))
        elapsed = time.monotonic() - started

        result = BatchResult(outcomes=outcomes, elapsed_seconds=elapsed)
        logger.info(
            f"Batch complete: {result.success_count} succeeded, "
            f"{result.failure_count} failed, elapsed={elapsed:.3f}s"
        )
        self.observer.batch_completed(result)
        return result

    @staticmethod
    def _collect(target: str, future) -> Outcome:
        try:
            return future.result()
        except Exception as e:
            logger.error(
                f"[{target}] Supervisor crashed: {type(e).__name__}: {e}", exc_info=True
            )
            return Outcome.failure(target, ErrorKind.UNEXPECTED, str(e))

"""
Target Executor Module
Single Responsibility: Run the full deployment workflow for one target

Workflow (strictly sequential within a target):
1. Honour an already-set cancellation signal
2. Validate the target is a known computer and online
3. Stage source items when configured (then always clean up)
4. Resolve and invoke the operation
Every failure becomes an Outcome; nothing escapes execute().
"""

import os
import threading
from pathlib import PureWindowsPath
from typing import Optional

from autodeployer.errors import TargetError, TargetUnreachable, TaskCancelled, TransferFailure
from autodeployer.execution.interfaces import SessionFactory, TargetSession
from autodeployer.execution.resolver import OperationKind, resolve
from autodeployer.models.deployment import (
    BatchConfig,
    ErrorKind,
    IOResult,
    Outcome,
    is_localhost,
    location_for,
)
from autodeployer.reporting.observer import DeploymentObserver, LoggingObserver
from autodeployer.utils.logging_config import get_logger

logger = get_logger(__name__)

CANCELLED_MESSAGE = "Task was cancelled"
UNREACHABLE_MESSAGE = "Computer is not a valid AD computer or is offline"
COPY_FAILED_MESSAGE = "Files could not be copied"


def effective_path(config: BatchConfig) -> str:
    """
    Path of the file to launch.

    Staged files live under the destination path on the target; otherwise the
    file is taken from the source directory, or the source item is the file.
    """
    if config.copy_source_items:
        return str(PureWindowsPath(config.destination_path) / config.file)
    if os.path.isdir(config.source_items):
        return os.path.join(config.source_items, config.file)
    return config.source_items


class TargetExecutor:
    """
    Runs validate -> stage -> invoke -> clean up for a single target.
    Opens one session per call and closes it on every exit path.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        observer: Optional[DeploymentObserver] = None,
    ):
        """
        Initialize target executor.

        Args:
            session_factory: Opens a TargetSession for a target name
            observer: Receives per-target status notifications
        """
        self.session_factory = session_factory
        self.observer = observer or LoggingObserver()

    def execute(
        self, target: str, config: BatchConfig, cancel_event: threading.Event
    ) -> Outcome:
        """
        Executes the deployment for one target.

        Args:
            target: Target computer name ("localhost" for local execution)
            config: Batch configuration
            cancel_event: Cooperative cancellation signal set by the supervisor

        Returns:
            Outcome for the target (never raises)
        """
        if cancel_event.is_set():
            logger.info(f"[{target}] Cancelled before start")
            return Outcome.failure(target, ErrorKind.CANCELLED, CANCELLED_MESSAGE)

        try:
            with self.session_factory(target) as session:
                return self._run_stages(session, target, config, cancel_event)

        except TargetUnreachable as e:
            logger.warning(f"[{target}] {e}")
            return e.to_outcome(target)

        except TaskCancelled as e:
            # The supervisor already reported the timeout for this target
            logger.debug(f"[{target}] Stopped at cancellation checkpoint")
            return e.to_outcome(target)

        except TargetError as e:
            logger.warning(f"[{target}] {type(e).__name__}: {e}")
            self.observer.target_failed(target, str(e))
            return e.to_outcome(target)

        except Exception as e:
            logger.error(
                f"[{target}] Unexpected error: {type(e).__name__}: {e}", exc_info=True
            )
            self.observer.target_failed(target, str(e))
            return Outcome.failure(target, ErrorKind.UNEXPECTED, str(e))

    def _run_stages(
        self,
        session: TargetSession,
        target: str,
        config: BatchConfig,
        cancel_event: threading.Event,
    ) -> Outcome:
        logger.debug(f"[{target}] Validating computer")
        if not session.is_valid(target):
            raise TargetUnreachable(UNREACHABLE_MESSAGE)

        if not is_localhost(target):
            self.observer.target_valid(target)

        self._check_cancelled(cancel_event)

        if not config.copy_source_items:
            return self._invoke(session, target, config)

        result = self._stage(session, target, config)
        if not result.ok:
            logger.warning(f"[{target}] Staging failed: {result.error}")
            raise TransferFailure(COPY_FAILED_MESSAGE)

        try:
            self._check_cancelled(cancel_event)
            return self._invoke(session, target, config)
        finally:
            self._cleanup(session, target, config)

    @staticmethod
    def _check_cancelled(cancel_event: threading.Event):
        if cancel_event.is_set():
            raise TaskCancelled(CANCELLED_MESSAGE)

    @staticmethod
    def _stage(session: TargetSession, target: str, config: BatchConfig) -> IOResult:
        if os.path.isdir(config.source_items):
            logger.info(
                f"[{target}] Copying directory {config.source_items} -> {config.destination_path}"
            )
            return session.copy_directory(target, config.source_items, config.destination_path)

        logger.info(f"[{target}] Copying file {config.source_items} -> {config.destination_path}")
        return session.copy_file(target, config.source_items, config.destination_path)

    @staticmethod
    def _cleanup(session: TargetSession, target: str, config: BatchConfig):
        """Best-effort removal of staged files; failures are logged, never surfaced"""
        try:
            result = session.remove_directory(target, config.destination_path)
        except Exception as e:
            logger.warning(f"[{target}] Cleanup of {config.destination_path} raised: {e}")
            return

        if result.ok:
            logger.debug(f"[{target}] Removed {config.destination_path}")
        else:
            logger.warning(
                f"[{target}] Cleanup of {config.destination_path} failed: {result.error}"
            )

    @staticmethod
    def _invoke(session: TargetSession, target: str, config: BatchConfig) -> Outcome:
        location = location_for(target)
        operation = resolve(location, config.mode, config.file)

        if operation.kind == OperationKind.PRODUCT_CODE_UNINSTALL:
            path = operation.product_code
        else:
            path = effective_path(config)

        logger.info(f"[{target}] Resolved operation: {operation.description} ({path})")
        result = session.invoke(
            operation,
            path,
            arguments=config.arguments,
            target=None if operation.is_local else target,
        )
        outcome = Outcome.from_process_result(target, result)

        if outcome.succeeded:
            logger.info(f"[{target}] Completed successfully")
        else:
            logger.warning(f"[{target}] Completed with exit code {outcome.exit_code}")
        return outcome

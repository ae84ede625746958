"""
Deployment Run Module
Single Responsibility: Drive one complete run from settings to CSV report
"""

from pathlib import Path
from typing import Optional

from autodeployer.execution.interfaces import SessionFactory
from autodeployer.execution.powershell import powershell_session_factory
from autodeployer.models.deployment import BatchConfig, BatchResult
from autodeployer.orchestrator.batch_orchestrator import BatchOrchestrator
from autodeployer.reporting.csv_report import CsvReportWriter, build_log_path, create_log_file
from autodeployer.reporting.observer import DeploymentObserver, LoggingObserver
from autodeployer.reporting.result_formatter import ResultFormatter
from autodeployer.utils.logging_config import get_logger

logger = get_logger(__name__)


class DeploymentRun:
    """
    Runs a validated batch and hands the result to reporting.

    Workflow:
    1. Create the CSV report file for <app>_<mode>_<timestamp>
    2. Run the batch across all targets
    3. Export outcomes and time taken to CSV
    4. Print the summary (optional)
    """

    def __init__(
        self,
        config: BatchConfig,
        log_dir: str = "data/logs",
        session_factory: Optional[SessionFactory] = None,
        observer: Optional[DeploymentObserver] = None,
        report_writer: Optional[CsvReportWriter] = None,
        print_summary: bool = True,
    ):
        self.config = config
        self.log_dir = log_dir
        self.observer = observer or LoggingObserver()
        self.orchestrator = BatchOrchestrator(
            session_factory or powershell_session_factory(), self.observer
        )
        self.report_writer = report_writer or CsvReportWriter()
        self.print_summary = print_summary
        self.report_path: Optional[Path] = None

    def execute(self) -> BatchResult:
        """
        Executes the run end to end.

        Returns:
            The BatchResult that was exported
        """
        self.report_path = create_log_file(
            build_log_path(self.log_dir, self.config.app_name, self.config.mode.value)
        )
        self.observer.status("Application started.")

        result = self.orchestrator.run_batch(self.config)

        self.report_writer.write(result, self.report_path)
        self.observer.status(f"Results exported to CSV: {self.report_path}")

        if self.print_summary:
            ResultFormatter.print_summary(result)

        self.observer.status("Application finished.")
        return result

"""
Reporting Module
"""

from .csv_report import CsvReportWriter, build_log_path, create_log_file
from .observer import ConsoleObserver, DeploymentObserver, LoggingObserver
from .result_formatter import ResultFormatter

__all__ = [
    "CsvReportWriter",
    "build_log_path",
    "create_log_file",
    "ConsoleObserver",
    "DeploymentObserver",
    "LoggingObserver",
    "ResultFormatter",
]

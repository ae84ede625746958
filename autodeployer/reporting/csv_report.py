"""
CSV Report Module
Persists a BatchResult as a CSV file, one row per target plus the time taken
"""

from datetime import datetime
from pathlib import Path
from typing import Optional

import pandas as pd

from autodeployer.models.deployment import BatchResult
from autodeployer.utils.logging_config import get_logger

logger = get_logger(__name__)

REPORT_COLUMNS = ["PCAddress", "ExitCode", "StandardOutput", "StandardError", "ErrorKind"]


def build_log_path(
    log_dir: str,
    app_name: str,
    mode: str,
    extension: str = "csv",
    now: Optional[datetime] = None,
) -> Path:
    """
    Builds the report path for a run.

    Returns:
        <log_dir>/<app_name>_<mode>_<YYYYmmdd_HHMMSS>.<extension>
    """
    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return Path(log_dir) / f"{app_name}_{mode}_{stamp}.{extension.lstrip('.')}"


def create_log_file(path: Path) -> Path:
    """Creates the report file (and its directory) if missing"""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.touch(exist_ok=True)
    logger.debug(f"Report file ready: {path.absolute()}")
    return path


def format_elapsed(elapsed_seconds: float) -> str:
    """Formats a duration as HH:MM:SS.fff"""
    total_ms = int(round(elapsed_seconds * 1000))
    hours, remainder = divmod(total_ms, 3_600_000)
    minutes, remainder = divmod(remainder, 60_000)
    seconds, millis = divmod(remainder, 1000)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{millis:03d}"


class CsvReportWriter:
    """Reporting collaborator: writes outcomes and run duration to CSV"""

    @staticmethod
    def to_dataframe(result: BatchResult) -> pd.DataFrame:
        rows = [
            {
                "PCAddress": o.target,
                "ExitCode": o.exit_code,
                "StandardOutput": (o.output or "").strip(),
                "StandardError": (o.error_message or "").strip(),
                "ErrorKind": o.error_kind.value if o.error_kind else "",
            }
            for o in result.outcomes
        ]
        return pd.DataFrame(rows, columns=REPORT_COLUMNS)

    def export(self, result: BatchResult, path: Path) -> Path:
        """
        Writes one row per outcome.

        Args:
            result: Completed batch result
            path: Destination CSV file

        Returns:
            The written path
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        df = self.to_dataframe(result)
        df.to_csv(path, index=False, encoding="utf-8")
        logger.info(f"Exported {len(df)} outcome(s) to {path}")
        return path

    @staticmethod
    def append_time_taken(path: Path, elapsed_seconds: float) -> None:
        """Appends a 'Time taken' row when the run took measurable time"""
        if elapsed_seconds <= 0:
            return
        with open(path, "a", encoding="utf-8") as f:
            f.write(f"\nTime taken,{format_elapsed(elapsed_seconds)}\n")
        logger.debug(f"Appended time taken ({elapsed_seconds:.3f}s) to {path}")

    def write(self, result: BatchResult, path: Path) -> Path:
        """Exports the outcomes and the time taken in one call"""
        self.export(result, path)
        self.append_time_taken(path, result.elapsed_seconds)
        return path

"""
Result Formatter Module
Single Responsibility: Summarize and print batch results
"""

from collections import Counter
from typing import Any, Dict

from autodeployer.models.deployment import BatchResult, Outcome
from autodeployer.reporting.csv_report import format_elapsed
from autodeployer.utils.logging_config import get_logger

logger = get_logger(__name__)


class ResultFormatter:
    """
    Formats batch results and summary reports.
    Pure formatting - no business logic.
    """

    @staticmethod
    def generate_summary(result: BatchResult) -> Dict[str, Any]:
        """
        Aggregates outcomes into summary statistics.

        Args:
            result: Completed batch result

        Returns:
            Summary statistics dictionary
        """
        failures_by_kind = Counter(
            o.error_kind.value for o in result.outcomes if o.error_kind is not None
        )
        return {
            "total_targets": len(result.outcomes),
            "success_count": result.success_count,
            "failure_count": result.failure_count,
            "failures_by_kind": dict(failures_by_kind),
            "elapsed_seconds": round(result.elapsed_seconds, 3),
        }

    @staticmethod
    def format_outcome(outcome: Outcome) -> str:
        """One console line per target"""
        status = "OK  " if outcome.succeeded else "FAIL"
        line = f"   [{status}] {outcome.target:<24} exit={outcome.exit_code}"
        message = (outcome.error_message or "").strip()
        if not outcome.succeeded and message:
            line += f"  {message.splitlines()[0][:100]}"
        return line

    @staticmethod
    def print_summary(result: BatchResult):
        """
        Prints per-target results and the summary report to console.

        Args:
            result: Completed batch result
        """
        summary = ResultFormatter.generate_summary(result)

        print(f"\n{'=' * 60}")
        print("DEPLOYMENT SUMMARY")
        print(f"{'=' * 60}")
        for outcome in result.outcomes:
            print(ResultFormatter.format_outcome(outcome))
        print(f"{'-' * 60}")
        print(f"Total Targets:   {summary['total_targets']}")
        print(f"  Succeeded:     {summary['success_count']}")
        print(f"  Failed:        {summary['failure_count']}")
        for kind, count in sorted(summary["failures_by_kind"].items()):
            print(f"    {kind:<22} {count}")
        print(f"Time taken:      {format_elapsed(result.elapsed_seconds)}")
        print(f"{'=' * 60}\n")

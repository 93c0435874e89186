"""
Error Reporting for the Transaction Validator

This module turns ValidationResults into error reports for operators: each
diagnostic becomes an ErrorReport with remediation suggestions, registered handlers
are notified per code, and reports can be rendered as text, JSON or Markdown.

The validator itself never depends on this module; callers feed results in.
"""

import json
import logging
import time
from collections import Counter, defaultdict
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from .errors import ValidationErrorCode, ValidationResult


class ReportFormat(Enum):
    """Available report formats."""
    TEXT = "text"
    JSON = "json"
    MARKDOWN = "markdown"


SUGGESTIONS: Dict[ValidationErrorCode, List[str]] = {
    ValidationErrorCode.EMPTY_INPUTS: [
        "Reference at least one unspent output as an input",
    ],
    ValidationErrorCode.EMPTY_OUTPUTS: [
        "Add at least one output assigning the spent value",
    ],
    ValidationErrorCode.NON_POSITIVE_AMOUNT: [
        "Output amounts must be strictly greater than zero",
        "Remove zero-value outputs instead of emitting them",
    ],
    ValidationErrorCode.DOUBLE_SPEND: [
        "Reference each UTXO at most once per transaction",
    ],
    ValidationErrorCode.UTXO_NOT_FOUND: [
        "Check that the referenced output exists and has not been spent",
        "Confirm the source transaction id and output index",
    ],
    ValidationErrorCode.AMOUNT_MISMATCH: [
        "Make the output total equal the sum of the spent UTXO amounts",
        "Add a change output for any remainder",
    ],
    ValidationErrorCode.INVALID_SIGNATURE: [
        "Sign the canonical payload with the key of the UTXO's recorded recipient",
        "Re-sign after any change to ids, owners, outputs or timestamp",
    ],
}


@dataclass
class ErrorReport:
    """Error report for one diagnostic of one transaction."""
    report_id: str
    timestamp: float
    transaction_id: str
    code: str
    message: str
    location: str = ""
    details: Dict[str, Any] = field(default_factory=dict)
    suggestions: List[str] = field(default_factory=list)


@dataclass
class ErrorSummary:
    """Summary statistics for error reporting."""
    total_errors: int
    transactions_seen: int = 0
    transactions_rejected: int = 0
    by_code: Dict[str, int] = field(default_factory=dict)
    most_common_codes: List[Tuple[str, int]] = field(default_factory=list)


class ErrorReporter:
    """
    Collects validation results and reports on their errors.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize error reporter.

        Args:
            config: Optional configuration dictionary
        """
        self.config = config or {}
        self.logger = logging.getLogger(__name__)

        self.error_reports: List[ErrorReport] = []
        self.results: List[Tuple[str, ValidationResult]] = []
        self.max_stored_reports = self.config.get("max_stored_reports", 10000)
        self.max_stored_results = self.config.get("max_stored_results", 1000)
        self.transactions_seen = 0
        self.transactions_rejected = 0

        # Error handlers keyed by code value, '*' for all
        self.error_handlers: Dict[str, List[Callable[[ErrorReport], None]]] = defaultdict(list)

    def report_validation_result(self, transaction_id: str,
                                 result: ValidationResult) -> List[ErrorReport]:
        """
        Process and store a validation result.

        Args:
            transaction_id: Identifier of the validated transaction
            result: ValidationResult to process

        Returns:
            The error reports created, in detection order
        """
        self._store_result(transaction_id, result)

        reports = []
        for position, error in enumerate(result.errors):
            report = ErrorReport(
                report_id=f"{transaction_id}#{position}",
                timestamp=time.time(),
                transaction_id=transaction_id,
                code=error.code.value,
                message=error.message,
                location=error.location,
                details=error.to_dict()["details"],
                suggestions=list(SUGGESTIONS.get(error.code, [])),
            )
            self._store_report(report)
            self._trigger_handlers(report)
            self._log_error(report)
            reports.append(report)

        return reports

    def add_error_handler(self, error_code: str, handler: Callable[[ErrorReport], None]) -> None:
        """
        Add a custom error handler for specific error codes.

        Args:
            error_code: Error code to handle (use '*' for all errors)
            handler: Callback function to handle the error
        """
        if isinstance(error_code, ValidationErrorCode):
            error_code = error_code.value
        self.error_handlers[error_code].append(handler)

    def get_error_summary(self) -> ErrorSummary:
        """Generate error summary statistics."""
        code_counts = Counter(report.code for report in self.error_reports)

        return ErrorSummary(
            total_errors=len(self.error_reports),
            transactions_seen=self.transactions_seen,
            transactions_rejected=self.transactions_rejected,
            by_code=dict(code_counts),
            most_common_codes=code_counts.most_common(10),
        )

    def generate_report(self,
                        format: ReportFormat = ReportFormat.TEXT,
                        include_summary: bool = True,
                        include_details: bool = True) -> str:
        """
        Generate an error report.

        Args:
            format: Output format for the report
            include_summary: Whether to include summary statistics
            include_details: Whether to include detailed error listings

        Returns:
            Generated report as string
        """
        if isinstance(format, str):
            format = ReportFormat(format)

        if format == ReportFormat.TEXT:
            return self._generate_text_report(include_summary, include_details)
        elif format == ReportFormat.JSON:
            return self._generate_json_report(include_summary, include_details)
        elif format == ReportFormat.MARKDOWN:
            return self._generate_markdown_report(include_summary, include_details)
        else:
            raise ValueError(f"Unsupported report format: {format}")

    def clear_reports(self) -> int:
        """
        Clear stored error reports.

        Returns:
            Number of reports cleared
        """
        cleared = len(self.error_reports)
        self.error_reports = []
        self.results = []
        self.transactions_seen = 0
        self.transactions_rejected = 0
        return cleared

    # Private methods

    def _store_report(self, report: ErrorReport) -> None:
        """Store error report with size management."""
        self.error_reports.append(report)

        if len(self.error_reports) > self.max_stored_reports:
            excess = len(self.error_reports) - self.max_stored_reports
            self.error_reports = self.error_reports[excess:]

    def _store_result(self, transaction_id: str, result: ValidationResult) -> None:
        """Count a result and keep the most recent ones for the report listing."""
        self.transactions_seen += 1
        if not result.valid:
            self.transactions_rejected += 1

        self.results.append((transaction_id, result))
        if len(self.results) > self.max_stored_results:
            self.results = self.results[len(self.results) - self.max_stored_results:]

    def _trigger_handlers(self, report: ErrorReport) -> None:
        """Trigger registered error handlers."""
        for handler in self.error_handlers.get(report.code, []):
            try:
                handler(report)
            except Exception as e:
                self.logger.error(f"Error handler failed for {report.code}: {e}")

        for handler in self.error_handlers.get("*", []):
            try:
                handler(report)
            except Exception as e:
                self.logger.error(f"Wildcard error handler failed: {e}")

    def _log_error(self, report: ErrorReport) -> None:
        """Log error report to standard logging system."""
        self.logger.warning(
            f"[{report.transaction_id}] {report.code}: {report.message}",
            extra={"error_report_id": report.report_id}
        )

    def _generate_text_report(self, include_summary: bool, include_details: bool) -> str:
        """Generate text format report."""
        lines = []
        lines.append("Transaction Validation Report")
        lines.append("=" * 50)
        lines.append(f"Generated: {datetime.now(timezone.utc).isoformat()}")
        lines.append("")

        for transaction_id, result in self.results:
            status = "VALID" if result.valid else "INVALID"
            lines.append(f"Transaction {transaction_id}: {status}")
        lines.append("")

        if include_summary:
            summary = self.get_error_summary()
            lines.append("SUMMARY")
            lines.append("-" * 20)
            lines.append(f"Transactions: {summary.transactions_seen}")
            lines.append(f"Rejected: {summary.transactions_rejected}")
            lines.append(f"Total Errors: {summary.total_errors}")

            if summary.most_common_codes:
                lines.append("\nBy Code:")
                for code, count in summary.most_common_codes:
                    lines.append(f"  {code}: {count}")

            lines.append("")

        if include_details and self.error_reports:
            lines.append("ERRORS")
            lines.append("-" * 20)

            for report in self.error_reports:
                lines.append(f"\n[{report.report_id}] {report.code}")
                lines.append(f"Message: {report.message}")
                if report.location:
                    lines.append(f"Location: {report.location}")
                if report.suggestions:
                    lines.append("Suggestions:")
                    for suggestion in report.suggestions:
                        lines.append(f"  - {suggestion}")

        return "\n".join(lines)

    def _generate_json_report(self, include_summary: bool, include_details: bool) -> str:
        """Generate JSON format report."""
        data: Dict[str, Any] = {
            "metadata": {
                "generated_at": datetime.now(timezone.utc).isoformat(),
                "total_reports": len(self.error_reports),
            },
            "results": [
                {"transaction_id": transaction_id, **result.to_dict()}
                for transaction_id, result in self.results
            ],
        }

        if include_summary:
            data["summary"] = asdict(self.get_error_summary())

        if include_details:
            data["reports"] = [asdict(report) for report in self.error_reports]

        return json.dumps(data, indent=2, default=str)

    def _generate_markdown_report(self, include_summary: bool, include_details: bool) -> str:
        """Generate Markdown format report."""
        lines = []
        lines.append("# Transaction Validation Report")
        lines.append("")
        lines.append(f"**Generated:** {datetime.now(timezone.utc).isoformat()}")
        lines.append("")

        for transaction_id, result in self.results:
            status = "valid" if result.valid else "invalid"
            lines.append(f"- `{transaction_id}`: **{status}**")
        lines.append("")

        if include_summary:
            summary = self.get_error_summary()
            lines.append("## Summary")
            lines.append("")
            lines.append(f"- **Total Errors:** {summary.total_errors}")
            for code, count in summary.most_common_codes:
                lines.append(f"- **{code}:** {count}")
            lines.append("")

        if include_details and self.error_reports:
            lines.append("## Errors")
            lines.append("")

            for report in self.error_reports:
                lines.append(f"### {report.code}")
                lines.append("")
                lines.append(f"- **Transaction:** `{report.transaction_id}`")
                lines.append(f"- **Message:** {report.message}")
                if report.location:
                    lines.append(f"- **Location:** `{report.location}`")
                if report.suggestions:
                    lines.append("- **Suggestions:**")
                    for suggestion in report.suggestions:
                        lines.append(f"  - {suggestion}")
                lines.append("")

        return "\n".join(lines)

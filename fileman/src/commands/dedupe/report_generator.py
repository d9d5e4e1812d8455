"""
CSV report generator for dedupe results.

Generates CSV report with:
- Header statistics (comments)
- Columns: group_id, hash, file_path, size_bytes, size_mb, action
- UTF-8 encoding (accents in filenames)
"""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import TextIO

import structlog

from fileman.src.commands.dedupe.models import DedupeReport
from fileman.src.core.fs_utils import format_bytes

logger = structlog.get_logger(__name__)


class ReportGenerator:
    """
    Generate a CSV report from a DedupeReport.

    One row per member of every duplicate group; the keeper row has action
    "keep", every other row "delete".
    """

    CSV_COLUMNS = [
        "group_id",
        "hash",
        "file_path",
        "size_bytes",
        "size_mb",
        "action",
    ]

    def generate_csv(self, report: DedupeReport, output_path: Path) -> Path:
        """
        Write the CSV report file.

        Args:
            report: Result of a dedupe run
            output_path: Where to save the CSV file

        Returns:
            Path to generated CSV file
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", newline="", encoding="utf-8") as f:
            self._write(f, report)

        logger.info(
            "dedupe_report_generated",
            output_path=str(output_path),
            groups=len(report.groups),
        )

        return output_path

    def generate_csv_string(self, report: DedupeReport) -> str:
        """Return the CSV report as a string."""
        output = io.StringIO()
        self._write(output, report)
        return output.getvalue()

    def _write(self, f: TextIO, report: DedupeReport) -> None:
        self._write_header_stats(f, report)

        writer = csv.DictWriter(f, fieldnames=self.CSV_COLUMNS)
        writer.writeheader()

        for group_id, group in enumerate(report.groups, start=1):
            for entry in group.members:
                writer.writerow(
                    {
                        "group_id": group_id,
                        "hash": group.digest,
                        "file_path": str(entry.path),
                        "size_bytes": entry.size_bytes,
                        "size_mb": round(entry.size_bytes / (1024 * 1024), 2),
                        "action": group.action_for(entry).value,
                    }
                )

    @staticmethod
    def _write_header_stats(f: TextIO, report: DedupeReport) -> None:
        """Write header statistics as CSV comments."""
        f.write(f"# Scan Date: {report.scan_date.strftime('%Y-%m-%d %H:%M:%S')}\n")
        f.write(f"# Directory: {report.root_dir}\n")
        f.write(f"# Total Files Scanned: {report.total_files:,}\n")
        f.write(f"# Duplicate Groups: {report.duplicate_groups:,}\n")
        f.write(f"# Total Duplicates: {report.duplicate_files:,}\n")
        f.write(f"# Space Reclaimable: {format_bytes(report.space_reclaimable_bytes)}\n")
        f.write(f"# Hash Failures: {report.hash_failure_count}\n")

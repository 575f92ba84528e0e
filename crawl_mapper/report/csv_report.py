"""crawl_mapper.report.csv_report: CSV export of every processed page."""

from __future__ import annotations

import csv
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from crawl_mapper import __version__
from crawl_mapper.aggregator import CrawlReport

CSV_HEADER = ("Index", "URL", "Status", "Contains Query")


def render_csv(
    report: CrawlReport,
    output_path: Union[Path, str],
    *,
    generated_at: Optional[datetime] = None,
) -> Path:
    """Write a commented metadata block followed by one row per processed page.

    Rows are quoted and numbered from 1 in sitemap order; the status column is
    ``MATCH_FOUND`` or ``NO_MATCH``.
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    generated_at = generated_at or datetime.now(timezone.utc)

    metadata = [
        "# CrawlMapper Export",
        f"# Tool: CrawlMapper v{__version__}",
        f"# Generated: {generated_at.isoformat()}",
        f"# Sitemap: {report.sitemap_url}",
        f'# Query: "{report.query}"',
        f"# Total Pages: {report.total_pages}",
        f"# Found Pages: {report.found_pages}",
    ]
    if report.truncated:
        metadata.append(
            f"# Truncated: first {report.max_urls_to_process} of {report.total_urls_found} URLs"
        )
    if report.timed_out:
        metadata.append("# Timed out: partial results")

    with output.open("w", encoding="utf-8", newline="") as f:
        f.write("\n".join(metadata) + "\n")
        writer = csv.writer(f, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        for position, result in enumerate(report.results, start=1):
            writer.writerow(
                (
                    position,
                    result.url,
                    "MATCH_FOUND" if result.found else "NO_MATCH",
                    "YES" if result.found else "NO",
                )
            )
    return output

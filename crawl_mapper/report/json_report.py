# crawl_mapper/report/json_report.py

"""
JSON report for CrawlMapper.

Serializes a CrawlReport to a file.
"""
import json
from pathlib import Path

from crawl_mapper.aggregator import CrawlReport


def render_json(report: CrawlReport, output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Save *report* as JSON at *output_path*.

    :param report: CrawlReport of a finished crawl
    :param output_path: target JSON file
    :param pretty: indent with two spaces
    :return: Path of the written file

    Example:
    ```python
    from crawl_mapper.report.json_report import render_json
    report_path = render_json(report, 'reports/report.json')
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(report.as_dict(), f, ensure_ascii=False, indent=2 if pretty else None)

    return output

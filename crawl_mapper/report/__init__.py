"""crawl_mapper.report: JSON, CSV and HTML report writers used by the CLI."""

from crawl_mapper.report.csv_report import render_csv
from crawl_mapper.report.html_report import render_html
from crawl_mapper.report.json_report import render_json

__all__ = ["render_json", "render_csv", "render_html"]

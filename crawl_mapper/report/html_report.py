"""crawl_mapper.report.html_report: HTML report rendered with Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

from jinja2 import Environment, FileSystemLoader, PackageLoader, select_autoescape

from crawl_mapper.aggregator import CrawlReport

TEMPLATE_NAME = "report.html.j2"


def render_html(
    report: CrawlReport,
    output_path: Union[Path, str],
    template_dir: Optional[Union[Path, str]] = None,
) -> Path:
    """Render the HTML report from a template and save it at *output_path*.

    Args:
        report: CrawlReport of a finished crawl.
        output_path: target HTML file.
        template_dir: directory holding ``report.html.j2``; the template bundled
            with the package is used when omitted.

    Returns:
        Path of the saved HTML file.

    Example:
    ```python
    from crawl_mapper.report.html_report import render_html
    html_path = render_html(report, 'reports/report.html')
    ```
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    loader = (
        FileSystemLoader(str(template_dir))
        if template_dir is not None
        else PackageLoader("crawl_mapper.report", "templates")
    )
    env = Environment(loader=loader, autoescape=select_autoescape(["html", "xml", "j2"]))
    template = env.get_template(TEMPLATE_NAME)

    context: dict[str, Any] = {
        "report": report,
        "results": report.results,
        "matching_urls": report.matching_urls,
    }

    output_path.write_text(template.render(**context), encoding="utf-8")
    return output_path

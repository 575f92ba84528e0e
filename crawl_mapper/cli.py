#!/usr/bin/env python3
"""
Command-line entry point for CrawlMapper.

Commands:
  search SITE QUERY   Search every sitemap page of SITE for QUERY
  config              Show the effective configuration
  serve               Run the HTTP API (POST /api/search, GET /api/health)

Common options:
  --config PATH       YAML/JSON config (default: configs/default.yaml if present)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (console only when omitted)
  --log-format FORMAT Logging format string

search options:
  --batch-size, --per-url-timeout, --budget, --max-urls, --max-batches, --delay
                      Override the matching config values
  --json PATH         Save the JSON report
  --csv PATH          Save the CSV export
  --html PATH         Save the HTML report
  --format text|json  What to print on stdout
  --pretty            Indent JSON output

Exit codes: 0 success, 1 crawl or config failure, 2 sitemap not available.

Example:
  crawl-mapper search example.com fillout --batch-size 10 --csv results.csv
"""
import asyncio
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from crawl_mapper import __version__
from crawl_mapper.config import load_config
from crawl_mapper.crawler.models import BatchProgress
from crawl_mapper.engine import crawl_and_search
from crawl_mapper.exceptions import SitemapUnavailable
from crawl_mapper.logger import DEFAULT_FORMAT, configure
from crawl_mapper.report import render_csv, render_html, render_json
from crawl_mapper.server.app import run_server

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])

EXIT_FAILURE = 1
EXIT_SITEMAP_UNAVAILABLE = 2


def print_error(message: str, code: int = EXIT_FAILURE):
    click.secho(message, fg='red', err=True)
    sys.exit(code)


def echo_progress(event: BatchProgress) -> None:
    click.echo(
        f'Batch {event.batch_number}: {event.urls_processed}/{event.urls_total} URLs, '
        f'{event.found_so_far} matches ({event.remaining_budget:.1f} s left)',
        err=True,
    )


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='CrawlMapper, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to a YAML or JSON configuration file.'
)
@click.option(
    '--log-level', 'log_level',
    default='WARNING', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Log file path (console only when omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Logging format string'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """CrawlMapper: find sitemap pages that mention a search term."""
    configure(level=log_level, log_file=log_file, log_format=log_format)
    try:
        cfg = load_config(config_path)
    except (OSError, ValueError, TypeError, ValidationError) as e:
        print_error(f'Could not load configuration: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('search', context_settings=CONTEXT_SETTINGS)
@click.argument('site')
@click.argument('query')
@click.option('--batch-size', type=click.IntRange(min=1), default=None, help='URLs fetched concurrently')
@click.option('--per-url-timeout', type=click.FloatRange(min=0, min_open=True), default=None,
              help='Timeout per page (seconds)')
@click.option('--budget', 'total_budget', type=click.FloatRange(min=0, min_open=True), default=None,
              help='Total time budget (seconds)')
@click.option('--max-urls', 'max_urls_to_process', type=click.IntRange(min=1), default=None,
              help='Process at most this many sitemap URLs')
@click.option('--max-batches', type=click.IntRange(min=1), default=None, help='Process at most this many batches')
@click.option('--delay', 'inter_batch_delay', type=click.FloatRange(min=0), default=None,
              help='Pause between batches (seconds)')
@click.option(
    '--json', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save the JSON report to a file'
)
@click.option(
    '--csv', 'csv_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save the CSV export to a file'
)
@click.option(
    '--html', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save the HTML report to a file'
)
@click.option('--format', 'output_format', type=click.Choice(['text', 'json']), default='text',
              show_default=True, help='Output printed on stdout')
@click.option('--pretty', is_flag=True, help='Indent JSON output')
@click.pass_context
def search(ctx, site, query, batch_size, per_url_timeout, total_budget, max_urls_to_process,
           max_batches, inter_batch_delay, json_output, csv_output, html_output, output_format, pretty):
    """Search every page listed in SITE's sitemap for QUERY."""
    try:
        cfg = ctx.obj['config'].with_overrides(
            batch_size=batch_size,
            per_url_timeout=per_url_timeout,
            total_budget=total_budget,
            max_urls_to_process=max_urls_to_process,
            max_batches=max_batches,
            inter_batch_delay=inter_batch_delay,
        )
    except ValidationError as e:
        print_error(f'Invalid options: {e}')

    progress = echo_progress if output_format == 'text' else None
    try:
        report = asyncio.run(crawl_and_search(site, query, cfg, progress=progress))
    except SitemapUnavailable as e:
        print_error(
            f'{e}\nPlease check that the website exists and has a sitemap.xml file.',
            EXIT_SITEMAP_UNAVAILABLE,
        )
    except Exception as e:
        print_error(f'Crawl failed: {e}')

    if output_format == 'json':
        click.echo(report.json(pretty=pretty))
    else:
        click.echo(f'Sitemap: {report.sitemap_url}')
        click.echo(f'Pages processed: {report.total_pages} of {report.total_urls_found}')
        click.echo(f'Pages containing "{query}": {report.found_pages}')
        if report.truncated:
            click.echo(f'Only the first {report.max_urls_to_process} sitemap URLs were considered.')
        if report.timed_out:
            click.echo('Time budget exhausted: results are partial.')
        if report.matching_urls:
            for number, url in enumerate(report.matching_urls, start=1):
                click.echo(f'{number}. {url}')
        else:
            click.echo('No URLs found containing the search term.')

    for output, writer, label in (
        (json_output, render_json, 'JSON'),
        (csv_output, render_csv, 'CSV'),
        (html_output, render_html, 'HTML'),
    ):
        if output is None:
            continue
        try:
            saved = writer(report, output)
        except Exception as e:
            print_error(f'Could not save {label} report: {e}')
        click.echo(f'{label} report: {saved}', err=True)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the effective configuration as JSON."""
    click.echo(ctx.obj['config'].model_dump_json(indent=2))


@cli.command('serve', context_settings=CONTEXT_SETTINGS)
@click.option('--host', default='localhost', show_default=True)
@click.option('--port', default=3000, show_default=True, type=int)
@click.pass_context
def serve(ctx, host, port):
    """Run the HTTP API."""
    run_server(ctx.obj['config'], host=host, port=port)


if __name__ == "__main__":
    cli()

# === FILE: page_crawler/cli.py ===
#!/usr/bin/env python3
"""
Command-line entry point of the PageCrawler.

Commands:
  crawl     Run a crawl and print the final summary
  config    Show the effective configuration

Common options:
  --config PATH       YAML/JSON config (default: configs/default.yaml if present)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stdout only when omitted)
  --log-format FORMAT Logging format string

crawl options:
  --seed URL          Start page, repeatable (overrides seed_urls)
  --limit INT         Cap on distinct visited pages (overrides max_pages)
  --concurrency INT   Fetches in flight at once (overrides concurrency)
  --json PATH         Also export the result as JSON
  --crawl-timeout SEC Abort the crawl after SEC seconds

Also:
  --version, -v       Show the PageCrawler version

Example:
  page-crawler crawl --seed https://example.com/ --limit 100 --json crawl.json
"""
import asyncio
import json
import sys
from pathlib import Path

import click

from page_crawler import __version__
from page_crawler.config import load_config
from page_crawler.engine import start_crawl
from page_crawler.errors import CrawlerError
from page_crawler.logger import init_logging
from page_crawler.report import render_json, render_summary

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='PageCrawler, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to a YAML or JSON config file.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Log file (stdout when omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Logging format string'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """PageCrawler command group."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Failed to load configuration: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.option('--seed', '-s', 'seeds', multiple=True, help='Start URL (repeatable)')
@click.option('--limit', '-l', 'limit', type=click.IntRange(min=1), default=None,
              help='Cap on distinct visited pages (override max_pages)')
@click.option('--concurrency', 'concurrency', type=click.IntRange(min=1), default=None,
              help='Fetches in flight at once')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save the result as JSON'
)
@click.option(
    '--crawl-timeout', 'crawl_timeout',
    type=float,
    default=None,
    help='Timeout for the whole crawl (seconds)'
)
@click.pass_context
def crawl(ctx, seeds, limit, concurrency, json_output, crawl_timeout):
    """Run a crawl and print the summary."""
    overrides = {}
    if seeds:
        overrides['seed_urls'] = list(seeds)
    if limit is not None:
        overrides['max_pages'] = limit
    if concurrency is not None:
        overrides['concurrency'] = concurrency
    try:
        cfg = ctx.obj['config'].model_validate(
            {**ctx.obj['config'].model_dump(), **overrides}
        )
    except Exception as e:
        print_error(f'Invalid option: {e}')

    click.echo(f'Starting crawl from: {", ".join(cfg.seed_urls)}')
    try:
        if crawl_timeout:
            result = asyncio.run(
                asyncio.wait_for(start_crawl(cfg), timeout=crawl_timeout)
            )
        else:
            result = asyncio.run(start_crawl(cfg))
    except asyncio.TimeoutError:
        print_error(f'Crawl did not finish within {crawl_timeout} seconds')
    except CrawlerError as e:
        print_error(f'Crawl aborted: {e}')
    except Exception as e:
        print_error(f'Crawl failed: {e}')

    click.echo(render_summary(result))

    if json_output:
        try:
            saved = render_json(result, json_output)
            click.echo(f'JSON report: {saved}')
        except Exception as e:
            print_error(f'Failed to save JSON: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the effective configuration as JSON."""
    data = ctx.obj['config'].model_dump()
    if data.get('mongodb_uri'):
        data['mongodb_uri'] = '***'
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    cli()

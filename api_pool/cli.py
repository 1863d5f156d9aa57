#!/usr/bin/env python3
# === FILE: api_pool/cli.py ===
"""
Command line entry point for APIPool.

Commands:
  run       Fetch every endpoint concurrently and print the results
  config    Show the effective configuration

Common options:
  --config PATH       YAML/JSON config (default: configs/default.yaml if present)
  --log-file PATH     Audit log file (overrides log_file from the config)
  --verbose           Echo log lines to stdout as well

Options of the run command:
  --timeout SEC       Per-request timeout (overrides the config)
  --max-concurrency N Cap on in-flight requests
  --json PATH         Save a JSON report of the run

Example:
  api-pool --config configs/default.yaml run https://api.example.com/a --json run.json
"""
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from api_pool import __version__
from api_pool.config import load_config
from api_pool.errors import TransportInitError
from api_pool.logger import configure
from api_pool.pool import APIPool
from api_pool.report.json_report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='APIPool, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to the YAML/JSON config file.'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Audit log file (overrides the config).'
)
@click.option('--verbose', is_flag=True, help='Echo log lines to stdout.')
@click.pass_context
def cli(ctx, config_path, log_file, verbose):
    """APIPool command group."""
    try:
        cfg = load_config(config_path)
    except (OSError, ValueError, TypeError, ValidationError) as e:
        print_error(f'Failed to load configuration: {e}')
    if log_file is not None:
        cfg = cfg.model_copy(update={'log_file': log_file})
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg
    ctx.obj['verbose'] = verbose


@cli.command('run', context_settings=CONTEXT_SETTINGS)
@click.argument('urls', nargs=-1)
@click.option('--timeout', 'timeout', type=click.FloatRange(min=0, min_open=True), default=None,
              help='Per-request timeout in seconds.')
@click.option('--max-concurrency', 'max_concurrency', type=click.IntRange(min=1), default=None,
              help='Cap on in-flight requests.')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Save a JSON report to this file.'
)
@click.pass_context
def run(ctx, urls, timeout, max_concurrency, json_output):
    """Fetch all endpoints and print one line per endpoint."""
    cfg = ctx.obj['config']
    overrides = {}
    if timeout is not None:
        overrides['timeout'] = timeout
    if max_concurrency is not None:
        overrides['max_concurrency'] = max_concurrency
    if urls:
        overrides['endpoints'] = list(cfg.endpoints) + list(urls)
    if overrides:
        cfg = cfg.model_copy(update=overrides)

    logger = configure(log_file=cfg.log_file, echo=ctx.obj['verbose'])
    pool = APIPool(cfg, logger=logger)
    if not pool.get_endpoints():
        print_error('No valid endpoints to fetch')

    try:
        results = pool.run()
    except TransportInitError as e:
        print_error(f'Could not start fetching: {e}')

    if json_output:
        try:
            saved = render_json(results, json_output)
            click.echo(f'JSON report: {saved}')
        except OSError as e:
            print_error(f'Failed to save JSON report: {e}')

    if any(outcome.is_error for outcome in results.values()):
        ctx.exit(2)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the current configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()

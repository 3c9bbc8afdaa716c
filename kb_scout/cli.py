# === FILE: kb_scout/cli.py ===
#!/usr/bin/env python3
"""
Command-line entry point for KBScout.

Commands:
  crawl     Run one crawl pass and print a JSON summary
  search    Crawl, then print the matches for QUERY as JSON
  config    Show the effective configuration
  serve     Start the HTTP service with the daily crawl schedule

Common options:
  --config PATH       YAML/JSON config (default: configs/default.yaml, else built-in defaults)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...); overrides log_level
  --log-file PATH     Rotating log file; overrides log_file
  --log-format FORMAT Logging format string; overrides log_format

Example:
  kb-scout --log-level DEBUG crawl --section Condeco --pretty
"""
import asyncio
import json
import sys
from pathlib import Path

import click
from aiohttp import web

from kb_scout import __version__
from kb_scout.assistant import Assistant, OpenAICompletion
from kb_scout.config import KnowledgeConfig, load_config
from kb_scout.engine import Engine
from kb_scout.errors import PassFailure
from kb_scout.logger import LEVELS, configure_from
from kb_scout.web import create_app

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])


def print_error(message: str):
    click.secho(message, fg="red", err=True)
    sys.exit(1)


def build_engine(config: KnowledgeConfig) -> Engine:
    return Engine(config)


def _dump(data, pretty: bool) -> str:
    return json.dumps(data, ensure_ascii=False, indent=2 if pretty else None)


def _run_pass(engine: Engine, section_names):
    sections = None
    if section_names:
        try:
            sections = engine.config.select_sections(list(section_names))
        except ValueError as e:
            print_error(str(e))
    try:
        return asyncio.run(engine.crawl(sections))
    except PassFailure as e:
        print_error(f"Crawl failed: {e}")


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, "--version", "-v", message="KBScout, version %(version)s")
@click.option(
    "--config", "-c", "config_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to a YAML or JSON config file.",
)
@click.option(
    "--log-level", "log_level",
    default=None,
    type=click.Choice(LEVELS, case_sensitive=False),
    help="Logging level (default: log_level from the config)",
)
@click.option(
    "--log-file", "log_file",
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help="Rotating log file (default: log_file from the config, else stdout only)",
)
@click.option(
    "--log-format", "log_format",
    default=None,
    help="Logging format string (default: log_format from the config)",
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """KBScout command group."""
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f"Failed to load configuration: {e}")
    configure_from(cfg, level=log_level, log_file=log_file, log_format=log_format)
    ctx.ensure_object(dict)
    ctx.obj["config"] = cfg


@cli.command("crawl", context_settings=CONTEXT_SETTINGS)
@click.option("--section", "-s", "sections", multiple=True, help="Only crawl this seed section (repeatable).")
@click.option("--pretty", is_flag=True, help="Indent JSON output")
@click.pass_context
def crawl(ctx, sections, pretty):
    """Run one crawl pass and print a summary."""
    engine = build_engine(ctx.obj["config"])
    report = _run_pass(engine, sections)
    summary = report.as_dict()
    summary["stats"] = engine.stats()
    click.echo(_dump(summary, pretty))


@cli.command("search", context_settings=CONTEXT_SETTINGS)
@click.argument("query")
@click.option("--limit", "-l", type=int, default=None, help="Max results (default: search_limit)")
@click.option("--section", "-s", "sections", multiple=True, help="Only crawl this seed section (repeatable).")
@click.option("--pretty", is_flag=True, help="Indent JSON output")
@click.pass_context
def search(ctx, query, limit, sections, pretty):
    """Crawl, then search the fresh index for QUERY."""
    engine = build_engine(ctx.obj["config"])
    _run_pass(engine, sections)
    results = engine.search(query, limit)
    click.echo(_dump({"results": [hit.as_dict() for hit in results]}, pretty))


@cli.command("config", context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the effective configuration as JSON."""
    cfg = ctx.obj["config"]
    click.echo(cfg.model_dump_json(indent=2))


@cli.command("serve", context_settings=CONTEXT_SETTINGS)
@click.option("--host", default=None, help="Bind address (default: config host)")
@click.option("--port", "-p", type=int, default=None, help="Port (default: config port)")
@click.pass_context
def serve(ctx, host, port):
    """Serve the HTTP API; the crawl scheduler runs alongside it."""
    cfg = ctx.obj["config"]
    engine = build_engine(cfg)
    app = create_app(engine, Assistant(engine, OpenAICompletion(cfg)))
    click.echo(f"Server running on port {port or cfg.port}")
    web.run_app(app, host=host or cfg.host, port=port or cfg.port, print=None)


if __name__ == "__main__":
    cli()

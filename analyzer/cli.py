"""Command-line interface for the gaming logs analyzer."""

import json
import logging
from pathlib import Path
from typing import List, Optional

import click
from pydantic import ValidationError

from analyzer.core.decoder import DecodeError
from analyzer.core.pipeline import AnalysisResult, analyze_entries
from analyzer.models import LogEntry
from analyzer.sources.files import (
    LogFileError,
    extract_date_from_filename,
    find_json_files,
    read_log_entries,
    read_many,
)
from analyzer.sources.loki import (
    LOKI_CONFIG_FILE,
    LokiClient,
    LokiError,
    fetch_to_directory,
    generate_time_ranges,
    load_loki_config,
)
from analyzer.visualizers.text_report import render_daily_report, render_report
from common.config import AppConfig, LokiConfig, load_config

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _load_app_config(ctx: click.Context) -> AppConfig:
    try:
        return load_config(env_file=ctx.obj.get("env_file"))
    except ValidationError as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e


def _resolve_loki_config(cfg: AppConfig, config_file: Optional[str]) -> Optional[LokiConfig]:
    """``loki-config.json`` (or ``--loki-config``) wins over LOKI_* env vars."""
    path = Path(config_file) if config_file else Path(LOKI_CONFIG_FILE)
    if path.exists():
        return load_loki_config(path)
    if config_file:
        raise LokiError(f"loki config file not found: {path}")
    return cfg.loki if cfg.loki.enabled else None


def _fetch(loki_cfg: LokiConfig, resources_dir: str, days: int, chunk_hours: int) -> List[Path]:
    click.echo("Fetching logs from Loki...")
    client = LokiClient(loki_cfg)
    ranges = generate_time_ranges(days=days, chunk_hours=chunk_hours)
    written = fetch_to_directory(client, ranges, resources_dir)
    click.echo(f"Saved {len(written)} log windows to {resources_dir}")
    return written


def _apply_overrides(cfg: AppConfig, timezone_name: Optional[str], skip_invalid: Optional[bool]) -> AppConfig:
    updates = {}
    if timezone_name is not None:
        updates["timezone"] = timezone_name
    if skip_invalid is not None:
        updates["skip_invalid"] = skip_invalid
    if not updates:
        return cfg
    try:
        analysis = type(cfg.analysis).model_validate({**cfg.analysis.model_dump(), **updates})
    except ValidationError as e:
        raise click.ClickException(f"Invalid option: {e}") from e
    return cfg.model_copy(update={"analysis": analysis})


def _run_analysis(entries: List[LogEntry], cfg: AppConfig, currency: Optional[str]) -> AnalysisResult:
    try:
        return analyze_entries(entries, config=cfg, currency=currency)
    except DecodeError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.option("--env-file", type=click.Path(dir_okay=False), default=None, help="Load settings from this .env file")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    show_default=True,
)
@click.pass_context
def cli(ctx: click.Context, env_file: Optional[str], log_level: str) -> None:
    """Gaming logs analyzer - bet/win reconciliation and fraud triage."""
    logging.basicConfig(level=getattr(logging, log_level.upper()), format=LOG_FORMAT)
    ctx.ensure_object(dict)
    ctx.obj["env_file"] = env_file


@cli.command()
@click.option("--resources-dir", "-r", default=None, help="Directory of saved log windows (*.json)")
@click.option("--fetch/--no-fetch", default=None, help="Fetch from Loki first (default: when Loki is configured)")
@click.option("--loki-config", type=click.Path(dir_okay=False), default=None, help="Path to loki-config.json")
@click.option("--days", type=int, default=7, show_default=True, help="Days to fetch when --fetch is on")
@click.option("--format", "output_format", type=click.Choice(["text", "json", "html"]), default="text", show_default=True)
@click.option("--output", "-o", default=None, help="Write the report here instead of stdout (required for html)")
@click.option("--currency", default=None, help="Currency label to display (default: from logs, else config)")
@click.option("--timezone", "timezone_name", default=None, help="IANA zone for hour buckets (default: local)")
@click.option("--skip-invalid/--fail-fast", default=None, help="Skip malformed lines instead of aborting")
@click.option("--top-players", type=int, default=None, help="Players listed in the text report")
@click.option("--csv-dir", default=None, help="Also write players/games/hourly/suspicious CSV tables here")
@click.option("--metrics-file", default=None, help="Also write Prometheus textfile metrics here")
@click.pass_context
def analyze(
    ctx: click.Context,
    resources_dir: Optional[str],
    fetch: Optional[bool],
    loki_config: Optional[str],
    days: int,
    output_format: str,
    output: Optional[str],
    currency: Optional[str],
    timezone_name: Optional[str],
    skip_invalid: Optional[bool],
    top_players: Optional[int],
    csv_dir: Optional[str],
    metrics_file: Optional[str],
) -> None:
    """Analyze every log file in the resources directory as one stream."""
    cfg = _apply_overrides(_load_app_config(ctx), timezone_name, skip_invalid)
    resources_dir = resources_dir or cfg.analysis.resources_dir

    if fetch is not False:
        try:
            loki_cfg = _resolve_loki_config(cfg, loki_config)
        except LokiError as e:
            if fetch:
                raise click.ClickException(str(e)) from e
            loki_cfg = None
            logger.warning("Ignoring Loki configuration: %s", e)
        if loki_cfg is not None:
            _fetch(loki_cfg, resources_dir, days=days, chunk_hours=4)
        elif fetch:
            raise click.ClickException("Loki is not configured (set LOKI_URL or provide loki-config.json)")

    files = find_json_files(resources_dir)
    if not files:
        raise click.ClickException(f"no JSON files found in {resources_dir}")
    click.echo(f"Found {len(files)} JSON files to analyze:", err=True)
    for i, f in enumerate(files, start=1):
        click.echo(f"   {i}. {f}", err=True)

    entries = read_many(files)
    result = _run_analysis(entries, cfg, currency)

    if output_format == "html":
        if not output:
            raise click.ClickException("--output is required for html reports")
        from analyzer.visualizers.html_report import HtmlReportGenerator

        HtmlReportGenerator().generate_html(result, output)
        click.echo(f"Report saved: {output}", err=True)
    else:
        if output_format == "json":
            from analyzer.exports import result_to_dict

            text = json.dumps(result_to_dict(result), indent=2) + "\n"
        else:
            text = render_report(result, top_players=top_players or cfg.report.top_players)
        if output:
            Path(output).parent.mkdir(parents=True, exist_ok=True)
            Path(output).write_text(text, encoding="utf-8")
            click.echo(f"Report saved: {output}", err=True)
        else:
            click.echo(text, nl=False)

    if csv_dir:
        from analyzer.exports import write_csv

        write_csv(result.report, csv_dir)
        click.echo(f"CSV tables saved: {csv_dir}", err=True)
    if metrics_file:
        from analyzer.metrics import write_metrics_textfile

        write_metrics_textfile(result, metrics_file)
        click.echo(f"Metrics saved: {metrics_file}", err=True)


@cli.command()
@click.option("--resources-dir", "-r", default=None, help="Directory of saved log windows (*.json)")
@click.option("--currency", default=None, help="Currency label to display")
@click.option("--timezone", "timezone_name", default=None, help="IANA zone for hour buckets (default: local)")
@click.option("--skip-invalid/--fail-fast", default=None, help="Skip malformed lines instead of aborting")
@click.pass_context
def daily(
    ctx: click.Context,
    resources_dir: Optional[str],
    currency: Optional[str],
    timezone_name: Optional[str],
    skip_invalid: Optional[bool],
) -> None:
    """One report per resources file (files are named by day, e.g. 25.12.2025.json)."""
    cfg = _apply_overrides(_load_app_config(ctx), timezone_name, skip_invalid)
    resources_dir = resources_dir or cfg.analysis.resources_dir
    files = find_json_files(resources_dir)
    if not files:
        raise click.ClickException(f"no JSON files found in {resources_dir}")
    for path in files:
        try:
            entries = read_log_entries(path)
        except LogFileError as e:
            logger.warning("Failed to read %s: %s", path, e)
            continue
        result = _run_analysis(entries, cfg, currency)
        click.echo(render_daily_report(extract_date_from_filename(path), result), nl=False)


@cli.command()
@click.option("--resources-dir", "-r", default=None, help="Where to save the fetched windows")
@click.option("--loki-config", type=click.Path(dir_okay=False), default=None, help="Path to loki-config.json")
@click.option("--days", type=int, default=7, show_default=True)
@click.option("--chunk-hours", type=int, default=4, show_default=True, help="Window size; must divide 24")
@click.pass_context
def fetch(ctx: click.Context, resources_dir: Optional[str], loki_config: Optional[str], days: int, chunk_hours: int) -> None:
    """Fetch bet/win logs from Loki into the resources directory."""
    cfg = _load_app_config(ctx)
    resources_dir = resources_dir or cfg.analysis.resources_dir
    try:
        loki_cfg = _resolve_loki_config(cfg, loki_config)
    except LokiError as e:
        raise click.ClickException(str(e)) from e
    if loki_cfg is None:
        raise click.ClickException("Loki is not configured (set LOKI_URL or provide loki-config.json)")
    try:
        _fetch(loki_cfg, resources_dir, days=days, chunk_hours=chunk_hours)
    except ValueError as e:
        raise click.ClickException(str(e)) from e


@cli.command()
@click.option("--output", "-o", default="resources/seed.json", show_default=True, help="Output resources file")
@click.option("--seed", type=int, default=42, show_default=True)
@click.option("--players", type=int, default=20, show_default=True)
@click.option("--games", type=int, default=3, show_default=True)
@click.option("--rounds", type=int, default=500, show_default=True)
@click.option("--duplicate-rate", type=float, default=0.0, show_default=True)
@click.option("--lucky-players", type=int, default=0, show_default=True, help="Players with inflated RTP")
@click.option("--currency", default="NGN", show_default=True)
def seed(
    output: str,
    seed: int,
    players: int,
    games: int,
    rounds: int,
    duplicate_rate: float,
    lucky_players: int,
    currency: str,
) -> None:
    """Write a deterministic synthetic log file for demos and tests."""
    from common.seed_logs import generate_seed_entries

    entries = generate_seed_entries(
        seed=seed,
        n_players=players,
        n_games=games,
        n_rounds=rounds,
        duplicate_rate=duplicate_rate,
        lucky_players=lucky_players,
        currency=currency,
    )
    path = Path(output)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(entries, indent=2), encoding="utf-8")
    click.echo(f"Wrote {len(entries)} log entries to {path}")


if __name__ == "__main__":
    cli()

# finsignal.py
# Command-line front end for the financial signal extraction engine.
# - Receipt scan (scan): .txt as recognized text, images through OCR
# - Transaction categorization (classify)
# - Outlier check and next-period forecast (anomaly, forecast)
# - Currency conversion through the rate cache (convert)
#
# Examples:
#   python finsignal.py scan data/samples/starbucks.txt --json
#   python finsignal.py classify "Lunch at KFC" -12.50
#   python finsignal.py anomaly 1000 100 100 100 100 100
#   python finsignal.py forecast 100 200 300 --window 3
#   python finsignal.py convert 100 USD PKR

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Tuple

import click

from analytics.engine import build_engine
from categorizer.service import build_classifier
from config.loader import DEFAULT_CONFIG, load_config
from fin_core.errors import ConfigError
from fin_utils.logging_setup import setup_logging
from ocr.gateway import build_gateway
from parser.extractor import build_parser
from pipeline.scan import read_source_text, scan_text
from rates.cache import build_rate_cache
from rates.formatting import format_currency

LOGGER = logging.getLogger("finsignal")

# Negative amounts ("-12.50") must not be read as options.
NUMERIC_ARGS = {"ignore_unknown_options": True}


def _load(config_path: Optional[str]) -> dict:
    if config_path:
        return load_config(config_path)
    if DEFAULT_CONFIG.exists():
        return load_config(DEFAULT_CONFIG)
    LOGGER.info("No config.toml at %s; using built-in defaults.", DEFAULT_CONFIG)
    return {}


@click.group()
@click.option("--config", "config_path", default=None, help="Path to config.toml.")
@click.option("--quiet", is_flag=True, help="Only warnings and errors.")
@click.option("--verbose", is_flag=True, help="Debug logging.")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str], quiet: bool, verbose: bool) -> None:
    """Financial signal extraction: receipts, categories, trends, rates."""
    try:
        cfg = _load(config_path)
    except ConfigError as e:
        click.echo(f"[error] {e}", err=True)
        ctx.exit(3)
    level = cfg.get("logging", {}).get("level", "INFO")
    if quiet:
        level = "WARNING"
    if verbose:
        level = "DEBUG"
    setup_logging(level)
    ctx.obj = cfg


@cli.command("scan")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, readable=True))
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of text.")
@click.pass_obj
def scan_cmd(cfg: dict, path: str, as_json: bool) -> None:
    """Extract receipt fields from a .txt or image file."""
    try:
        raw_text = read_source_text(Path(path), build_gateway(cfg))
    except ValueError as e:
        raise click.UsageError(str(e))

    result = scan_text(
        raw_text, parser=build_parser(cfg), classifier=build_classifier(cfg)
    )
    if as_json:
        click.echo(json.dumps(result.as_dict(), ensure_ascii=True))
        return

    r = result.receipt
    click.echo("-" * 60)
    click.echo(f"Merchant   : {r.merchant}")
    click.echo(f"Date       : {r.date}")
    click.echo(f"Amount     : {r.amount:.2f}")
    click.echo(f"Category   : {r.category}")
    click.echo(f"Items      : {', '.join(r.items) if r.items else 'N/A'}")
    click.echo(f"Confidence : {r.confidence}")


@cli.command("classify", context_settings=NUMERIC_ARGS)
@click.argument("description")
@click.argument("amount", type=float)
@click.pass_obj
def classify_cmd(cfg: dict, description: str, amount: float) -> None:
    """Categorize a transaction (negative AMOUNT = expense)."""
    pred = build_classifier(cfg).classify(description, amount)
    click.echo(f"{pred.category} ({pred.confidence:.2f})")


@cli.command("anomaly", context_settings=NUMERIC_ARGS)
@click.argument("amount", type=float)
@click.argument("history", nargs=-1, type=float)
@click.pass_obj
def anomaly_cmd(cfg: dict, amount: float, history: Tuple[float, ...]) -> None:
    """Is AMOUNT an outlier against the HISTORY values?"""
    flagged = build_engine(cfg).detect_anomaly(amount, list(history))
    click.echo("anomaly" if flagged else "normal")


@cli.command("forecast", context_settings=NUMERIC_ARGS)
@click.argument("history", nargs=-1, type=float)
@click.option("--window", type=int, default=None, help="Periods to average.")
@click.pass_obj
def forecast_cmd(cfg: dict, history: Tuple[float, ...], window: Optional[int]) -> None:
    """Estimate the next period from HISTORY (oldest first)."""
    value = build_engine(cfg).forecast_next_period(list(history), window=window)
    click.echo(f"{value:.2f}")


@cli.command("convert", context_settings=NUMERIC_ARGS)
@click.argument("amount", type=float)
@click.argument("from_currency")
@click.argument("to_currency")
@click.pass_obj
def convert_cmd(cfg: dict, amount: float, from_currency: str, to_currency: str) -> None:
    """Convert AMOUNT between currencies (best effort)."""
    value = build_rate_cache(cfg).convert(amount, from_currency, to_currency)
    click.echo(format_currency(value, to_currency.upper()))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()

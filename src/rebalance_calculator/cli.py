"""Command-line entry point: preview rebalance recommendations and manage targets."""

import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

import typer
import yaml
from pydantic import TypeAdapter, ValidationError

from app_config import get_config, load_config
from .calculator import RebalanceCalculator
from .exceptions import InvalidTargetsError, UnknownStrategyError
from .holdings import Holding, aggregate_holdings
from .logger import configure_root_logger
from .models import AllocationData, AllocationTarget, RebalanceOptions, RebalanceResult, TradeAction
from .targets import JsonFileTargetStore, remove_target, upsert_target

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="rebalance-calculator",
    help="Calculate the trades needed to move a portfolio to its target allocation.",
    no_args_is_help=True,
)
targets_app = typer.Typer(name="targets", help="Show and edit saved target allocations.")
app.add_typer(targets_app)


@app.callback()
def main(
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        envvar="REBALANCER_CONFIG",
        help="YAML configuration file.",
    ),
) -> None:
    """Load configuration and set up logging before any command."""
    if config_path is not None:
        try:
            load_config(config_path)
        except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(code=1)
    configure_root_logger(get_config().logging, stream=sys.stderr)


def _read_document(path: Path) -> Any:
    """Read a JSON or YAML file; JSON is tried first since YAML rejects tab indentation"""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            content = f.read()
        try:
            return json.loads(content)
        except json.JSONDecodeError:
            return yaml.safe_load(content)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        typer.echo(f"Error: cannot read {path}: {e}", err=True)
        raise typer.Exit(code=1)


def _parse(adapter: TypeAdapter, data: Any, path: Path):
    try:
        return adapter.validate_python(data if data is not None else [])
    except ValidationError as e:
        typer.echo(f"Error: invalid data in {path}:\n{e}", err=True)
        raise typer.Exit(code=1)


def _target_store() -> JsonFileTargetStore:
    storage = get_config().storage
    return JsonFileTargetStore(storage.targets_file_path, key=storage.targets_storage_key)


def _print_result(result: RebalanceResult) -> None:
    currency = result.metadata.base_currency
    typer.echo(
        f"Portfolio value: {result.metadata.total_portfolio_value:,.2f} {currency} "
        f"(strategy: {result.metadata.strategy_used})"
    )

    for rec in result.recommendations:
        if rec.action == TradeAction.HOLD:
            amount = "-"
        else:
            amount = f"{abs(rec.delta_value):,.2f}"
        typer.echo(
            f"  {rec.action.value:<4}  {rec.asset_class:<30} {amount:>14}  "
            f"({rec.current_percent:.2f}% -> {rec.target_percent:.2f}%)"
        )

    summary = result.summary
    typer.echo(
        f"Buys: {summary.total_buy_amount:,.2f}  Sells: {summary.total_sell_amount:,.2f}  "
        f"Net cash flow: {summary.net_cash_flow:,.2f}  Trades: {summary.trade_count}"
    )
    if summary.is_balanced:
        typer.echo("Portfolio is balanced.")

    for warning in result.warnings:
        typer.echo(f"Warning [{warning.type.value}]: {warning.message}")


@app.command()
def calculate(
    allocations_path: Path = typer.Argument(help="JSON/YAML list of current allocations (or holdings)."),
    targets_path: Optional[Path] = typer.Option(
        None,
        "--targets",
        "-t",
        help="JSON/YAML list of targets. Defaults to the saved targets.",
    ),
    holdings: bool = typer.Option(
        False,
        "--holdings",
        help="Treat the input file as raw holdings and aggregate them first.",
    ),
    strategy: Optional[str] = typer.Option(None, "--strategy", "-s", help="Registered strategy name."),
    minimum_trade_size: Optional[float] = typer.Option(
        None, "--minimum-trade-size", min=0, help="Hold trades smaller than this amount."
    ),
    tolerance_percent: Optional[float] = typer.Option(
        None, "--tolerance-percent", min=0, help="Hold assets within this many points of target."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the full result as JSON."),
) -> None:
    """Print rebalance recommendations without executing anything."""
    raw = _read_document(allocations_path)
    if holdings:
        allocations = aggregate_holdings(_parse(TypeAdapter(List[Holding]), raw, allocations_path))
    else:
        allocations = _parse(TypeAdapter(List[AllocationData]), raw, allocations_path)

    if targets_path is not None:
        targets = _parse(TypeAdapter(List[AllocationTarget]), _read_document(targets_path), targets_path)
    else:
        targets = _target_store().load()

    if not targets:
        typer.echo("No target allocations set; nothing to recommend.")
        return

    options = RebalanceOptions(
        minimum_trade_size=minimum_trade_size,
        tolerance_percent=tolerance_percent,
        strategy=strategy
    )

    try:
        result = RebalanceCalculator().calculate(allocations, targets, options)
    except UnknownStrategyError as e:
        typer.echo(f"Error: {e}. Available: {', '.join(e.available)}", err=True)
        raise typer.Exit(code=2)

    if as_json:
        typer.echo(result.model_dump_json(by_alias=True, indent=2))
    else:
        _print_result(result)


@app.command()
def strategies() -> None:
    """List registered rebalance strategies."""
    calculator = RebalanceCalculator()
    for name in calculator.get_available_strategies():
        typer.echo(f"{name}: {calculator.get_strategy_description(name)}")


@targets_app.command("show")
def show_targets() -> None:
    """Print the saved target allocations."""
    targets = _target_store().load()
    if not targets:
        typer.echo("No target allocations set.")
        return
    for target in targets:
        typer.echo(f"  {target.asset_class:<30} {target.target:>6.2f}%")
    typer.echo(f"Total: {sum(t.target for t in targets):.2f}%")


@targets_app.command("set")
def set_target(
    asset_class: str = typer.Argument(help="Asset class, exactly as it appears in the allocations."),
    target: float = typer.Argument(min=0, max=100, help="Target percent, 0-100."),
    force: bool = typer.Option(False, "--force", help="Save even if targets do not sum to 100."),
) -> None:
    """Add or update one target."""
    store = _target_store()
    updated = upsert_target(store.load(), asset_class, target)
    _save_targets(store, updated, force)


@targets_app.command("remove")
def remove_target_command(
    asset_class: str = typer.Argument(help="Asset class to remove."),
    force: bool = typer.Option(False, "--force", help="Save even if targets do not sum to 100."),
) -> None:
    """Remove one target."""
    store = _target_store()
    _save_targets(store, remove_target(store.load(), asset_class), force)


@targets_app.command("clear")
def clear_targets() -> None:
    """Remove all saved targets."""
    _target_store().clear()
    typer.echo("Cleared target allocations.")


def _save_targets(store: JsonFileTargetStore, targets: List[AllocationTarget], force: bool) -> None:
    try:
        store.save(targets)
    except InvalidTargetsError as e:
        if not force:
            typer.echo(f"Error: {e}. Use --force to save anyway.", err=True)
            raise typer.Exit(code=1)
        logger.warning(f"Saving targets despite validation issues: {e}")
        store.save_unchecked(targets)
    typer.echo(f"Saved {len(targets)} target allocations ({sum(t.target for t in targets):.2f}% total).")


if __name__ == "__main__":
    app()

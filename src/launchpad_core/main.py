import json
import sys
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional, Tuple

import click
from loguru import logger

from launchpad_core.common.enums import PricingModelType
from launchpad_core.common.exceptions import InvalidCurveParametersError
from launchpad_core.config import SimulationConfig, load_config, merge_overrides
from launchpad_core.curves.concentrated import ConcentratedLiquidityCurve
from launchpad_core.curves.constant_product import ConstantProductCurve
from launchpad_core.reporting.formatters import format_price, format_token_amount
from launchpad_core.reporting.reporters import get_reporter
from launchpad_core.scenarios import run_scenarios
from launchpad_core.validation.common_validator import CommonValidator


class DecimalParamType(click.ParamType):
    name = "decimal"

    def convert(self, value, param, ctx):
        if isinstance(value, Decimal):
            return value
        try:
            return Decimal(str(value))
        except InvalidOperation:
            self.fail(f"{value!r} is not a valid number", param, ctx)


DECIMAL = DecimalParamType()

FORMAT_OPTION = click.option(
    "--format", "report_format",
    type=click.Choice(["console", "json", "csv"], case_sensitive=False),
    default=None,
    help="Report format (defaults to the config value).",
)


def _configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=str(level).upper())


def _config(ctx: click.Context, overrides: Optional[Dict[str, Any]] = None) -> SimulationConfig:
    try:
        return merge_overrides(ctx.obj["config"], overrides)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


def _buys(buy: Tuple[Decimal, ...]) -> Optional[list]:
    return list(buy) if buy else None


@click.group(help="Pricing simulations for token launches.")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), default=None,
              help="JSON config file (defaults to $LAUNCHPAD_CONFIG or ./launchpad.json).")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str], log_level: Optional[str]) -> None:
    try:
        config = load_config(config_path)
    except (FileNotFoundError, ValueError) as e:
        raise click.ClickException(str(e)) from e
    _configure_logging(log_level or config.log_level)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@cli.command(name="concentrated", help="Simulate buys against a single-sided concentrated position.")
@click.option("--supply", type=DECIMAL, default=None, help="Total supply in tokens.")
@click.option("--fdv", type=DECIMAL, default=None, help="FDV in ETH.")
@click.option("--range", "price_range", type=DECIMAL, default=None, help="Upper/lower price ratio.")
@click.option("--fee-pips", type=int, default=None, help="Pool fee in hundredths of a bip.")
@click.option("--buy", type=DECIMAL, multiple=True, help="ETH amount per buy, in order. Repeatable.")
@click.option("--stop-on-out-of-range/--skip-out-of-range", default=None)
@FORMAT_OPTION
@click.pass_context
def concentrated_cmd(ctx, supply, fdv, price_range, fee_pips, buy, stop_on_out_of_range, report_format) -> None:
    config = _config(ctx, {
        "total_supply": supply,
        "fdv_eth": fdv,
        "price_range_multiplier": price_range,
        "lp_fee_pips": fee_pips,
        "buy_amounts": _buys(buy),
        "stop_on_out_of_range": stop_on_out_of_range,
        "report_format": report_format,
    })
    try:
        curve = ConcentratedLiquidityCurve(config.curve_parameters(), **config.curve_options())
    except InvalidCurveParametersError as e:
        raise click.ClickException(str(e)) from e

    label = f"FDV: {config.fdv_eth} ETH | Range: {config.price_range_multiplier}x"
    result = curve.simulate_sequence(
        config.buy_amounts, stop_on_out_of_range=config.stop_on_out_of_range, label=label
    )
    click.echo(get_reporter(config.report_format).render(result))


@cli.command(name="constant-product", help="Simulate buys against a legacy x*y=k launch pool.")
@click.option("--supply", type=DECIMAL, default=None, help="Total supply in tokens.")
@click.option("--fdv", type=DECIMAL, default=None, help="FDV in ETH.")
@click.option("--deposit", type=DECIMAL, required=True, help="Creator's ETH deposit.")
@click.option("--buy", type=DECIMAL, multiple=True, help="ETH amount per buy, in order. Repeatable.")
@FORMAT_OPTION
@click.pass_context
def constant_product_cmd(ctx, supply, fdv, deposit, buy, report_format) -> None:
    config = _config(ctx, {
        "total_supply": supply,
        "fdv_eth": fdv,
        "buy_amounts": _buys(buy),
        "report_format": report_format,
    })
    try:
        curve = ConstantProductCurve(config.fdv_eth, deposit, config.total_supply)
    except InvalidCurveParametersError as e:
        raise click.ClickException(str(e)) from e

    label = f"FDV={config.fdv_eth}ETH, Deposit={deposit}ETH"
    result = curve.simulate_sequence(config.buy_amounts, label=label)
    click.echo(get_reporter(config.report_format).render(result))


@cli.command(name="scenarios", help="Run the sample scenario grid.")
@click.option(
    "--model",
    type=click.Choice(["all", "concentrated", "constant-product"], case_sensitive=False),
    default="all",
    show_default=True,
)
@FORMAT_OPTION
@click.pass_context
def scenarios_cmd(ctx, model, report_format) -> None:
    config = _config(ctx, {"report_format": report_format})
    model_type = None if model == "all" else PricingModelType.from_str(model)
    results = run_scenarios(model_type, stop_on_out_of_range=config.stop_on_out_of_range)
    click.echo(get_reporter(config.report_format).render_many(results))


@cli.command(name="status", help="Show price bounds, liquidity and composition of a fresh position.")
@click.option("--supply", type=DECIMAL, default=None)
@click.option("--fdv", type=DECIMAL, default=None)
@click.option("--range", "price_range", type=DECIMAL, default=None)
@click.pass_context
def status_cmd(ctx, supply, fdv, price_range) -> None:
    config = _config(ctx, {"total_supply": supply, "fdv_eth": fdv, "price_range_multiplier": price_range})
    try:
        curve = ConcentratedLiquidityCurve(config.curve_parameters(), **config.curve_options())
    except InvalidCurveParametersError as e:
        raise click.ClickException(str(e)) from e

    tokens, eth = curve.position_composition()
    click.echo(f"Price range: {format_price(curve.bounds.price_lower)} - "
               f"{format_price(curve.bounds.price_upper)} ETH/token")
    click.echo(f"Liquidity L: {format_price(curve.liquidity)}")
    click.echo(f"sqrtPriceX96: {curve.sqrt_price_x96()}")
    click.echo(f"Position: {format_token_amount(tokens)} tokens / {format_price(eth)} ETH")
    click.echo(f"ETH to sell out: {format_price(curve.max_eth_in())}")


@cli.command(name="validate", help="Run parameter, boundary and scenario checks for a model.")
@click.option(
    "--model",
    type=click.Choice(["concentrated", "constant-product"], case_sensitive=False),
    default="concentrated",
    show_default=True,
)
@click.option("--deposit", type=DECIMAL, default=None, help="Creator's ETH deposit (constant-product only).")
@click.pass_context
def validate_cmd(ctx, model, deposit) -> None:
    config = _config(ctx)
    try:
        if PricingModelType.from_str(model) == PricingModelType.CONCENTRATED:
            curve = ConcentratedLiquidityCurve(config.curve_parameters(), **config.curve_options())
        else:
            if deposit is None:
                raise click.BadParameter("--deposit is required for the constant-product model.")
            curve = ConstantProductCurve(config.fdv_eth, deposit, config.total_supply)
    except InvalidCurveParametersError as e:
        raise click.ClickException(str(e)) from e

    results = CommonValidator.run_all_validations(curve)
    click.echo(json.dumps(results, indent=2, default=str))
    if not results["valid"]:
        ctx.exit(1)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()

# Command line entry point for the Kite rebalancer
import json
import click

from app_config import AppConfig, load_config
from broker_connector_base import BrokerError, CalculateRebalanceResult
from .client import KiteClient
from .logger import configure_logging
from .rebalancer import KiteRebalancer


def _build_rebalancer(config: AppConfig, access_token) -> KiteRebalancer:
    try:
        client = KiteClient(config=config)
        client.connect(access_token)
    except BrokerError as e:
        raise click.ClickException(str(e))
    return KiteRebalancer(client, config=config)


def _calculate(config: AppConfig, access_token, target_value) -> tuple:
    rebalancer = _build_rebalancer(config, access_token)
    result = rebalancer.calculate_rebalance(target_value)
    if not result.success:
        raise click.ClickException(result.error or "Rebalance calculation failed")
    for warning in result.warnings:
        click.echo(f"Warning: {warning}", err=True)
    return rebalancer, result


def _echo_summary(result: CalculateRebalanceResult, as_json: bool):
    allocation = result.plan.allocation
    if as_json:
        click.echo(json.dumps(allocation.model_dump(mode='json'), indent=2))
        return
    click.echo(f"Target value:      {allocation.target_value:,.2f}")
    click.echo(f"Max current value: {allocation.max_current_value:,.2f}")
    click.echo(f"Total buy amount:  {allocation.total_buy_amount:,.2f}")
    click.echo(f"Orders:            {len(result.plan.orders)}")


@click.group()
@click.option('--config', 'config_path', type=click.Path(dir_okay=False), envvar='CONFIG_PATH',
              default=None, help='Path to config.yaml')
@click.option('--access-token', envvar='KITE_ACCESS_TOKEN', default=None,
              help='Kite session access token from the login flow')
@click.pass_context
def cli(ctx, config_path, access_token):
    """Kite equal-value rebalancer"""
    try:
        config = load_config(config_path)
    except (FileNotFoundError, ValueError) as e:
        raise click.ClickException(str(e))
    configure_logging(config.logging)
    ctx.obj = {'config': config, 'access_token': access_token}


@cli.command()
@click.option('--target-value', type=float, default=None,
              help='Target value per holding; defaults to the largest current value')
@click.option('--json', 'as_json', is_flag=True, help='Print allocation records as JSON')
@click.pass_obj
def preview(obj, target_value, as_json):
    """Calculate buy orders without placing them"""
    _, result = _calculate(obj['config'], obj['access_token'], target_value)
    _echo_summary(result, as_json)


@cli.command()
@click.option('--target-value', type=float, default=None,
              help='Target value per holding; defaults to the largest current value')
@click.option('--yes', is_flag=True, help='Place orders without asking for confirmation')
@click.pass_context
def execute(ctx, target_value, yes):
    """Calculate buy orders and place them"""
    obj = ctx.obj
    rebalancer, result = _calculate(obj['config'], obj['access_token'], target_value)
    _echo_summary(result, as_json=False)

    if not result.plan.orders:
        click.echo("Nothing to execute")
        return

    if not yes:
        click.confirm(f"Place {len(result.plan.orders)} orders "
                      f"for {result.plan.allocation.total_buy_amount:,.2f}?", abort=True)

    report = rebalancer.execute_orders(result.plan)
    for executed in report.executed:
        click.echo(f"Placed {executed.result.order_id}: {executed.order.transaction_type} "
                   f"{executed.order.quantity} {executed.order.trading_symbol}")
    for failed in report.failed:
        click.echo(f"Failed: {failed.order.transaction_type} {failed.order.quantity} "
                   f"{failed.order.trading_symbol}: {failed.error}", err=True)

    if report.failed:
        ctx.exit(1)


def main():
    cli()


if __name__ == '__main__':
    main()

#!/usr/bin/env python3
"""
Tumble Slot Management CLI

Usage:
    python -m tumble_be.manage --help
    python -m tumble_be.manage simulate --spins 100000 --bet 10 --balance 10000
    python -m tumble_be.manage simulate --spins 20000 --bet 1 --balance 100 --bonus --seed 42
    python -m tumble_be.manage runserver --port 5000
"""

import json
import logging
import sys

import click

from .utils.slot_tester import SlotTester


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.pass_context
def cli(ctx, verbose):
    """Tumble Slot CLI - simulation and server tools."""
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING, stream=sys.stderr)


@cli.command()
@click.option('--spins', type=click.IntRange(min=1), default=10000, show_default=True, help='Number of rounds to simulate.')
@click.option('--bet', type=click.FloatRange(min=0, min_open=True), default=1.0, show_default=True, help='Bet per round.')
@click.option('--balance', type=click.FloatRange(min=0), default=1000.0, show_default=True, help='Balance reported for every round.')
@click.option('--bonus', is_flag=True, help='Simulate bonus (free spin) rounds.')
@click.option('--seed', type=int, default=None, help='Seed for a reproducible run.')
@click.option('--max-tumbles', type=click.IntRange(min=0), default=0, help='Abort rounds after this many tumbles (0 = unbounded).')
@click.option('--json', 'as_json', is_flag=True, help='Print the summary as JSON.')
@click.pass_context
def simulate(ctx, spins, bet, balance, bonus, seed, max_tumbles, as_json):
    """Run a Monte Carlo simulation and print RTP statistics."""
    tester = SlotTester(
        num_spins=spins,
        bet_amount=bet,
        balance=balance,
        is_bonus=bonus,
        seed=seed,
        max_tumble_steps=max_tumbles or None,
    )
    progress_every = max(1, spins // 10) if ctx.obj.get('verbose') else None
    summary = tester.run_simulation(progress_every=progress_every)

    if as_json:
        click.echo(json.dumps(summary, indent=2, ensure_ascii=False))
    else:
        click.echo(tester.format_summary())


@cli.command()
@click.option('--host', default='127.0.0.1', show_default=True)
@click.option('--port', type=int, default=5000, show_default=True)
def runserver(host, port):
    """Run the development server."""
    from .app import create_app # Imported here so simulate never triggers config validation

    app = create_app()
    app.run(host=host, port=port, debug=app.debug)


if __name__ == '__main__':
    cli(obj={})

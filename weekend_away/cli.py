#!/usr/bin/env python3
"""
Weekend Away CLI - Main entry point for the weekend-away command
"""

import asyncio
import logging

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from . import __version__, ensure_data_dir

console = Console()

DEFAULT_CITY = "Sydney, New South Wales, Australia"


def _setup_logging(verbose: int):
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
    )


@click.group(invoke_without_command=True)
@click.option('--version', '-V', is_flag=True, help='Show version')
@click.pass_context
def main(ctx, version):
    """
    Weekend Away - the two most exciting events in your city.

    \b
    Examples:
        weekend-away recommend                       # Sydney, today
        weekend-away recommend --when tomorrow
        weekend-away recommend --when weekend
        weekend-away recommend --city "Melbourne, Victoria, Australia" --when week
    """
    if version:
        click.echo(f"Weekend Away v{__version__}")
        return
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@main.command()
@click.option('--city', default=DEFAULT_CITY, show_default=True, help='City, as "City, State, Country"')
@click.option('--when', 'when',
              type=click.Choice(['today', 'tomorrow', 'week', 'weekend', 'next-weekend'], case_sensitive=False),
              default='today', show_default=True, help='Timeframe to search')
@click.option('--date', 'target_date', default=None, help='Target date (YYYY-MM-DD), defaults from --when')
@click.option('--provider', default=None, help='Completion provider (openai, ollama)')
@click.option('--model', default=None, help='Model identifier')
@click.option('--temperature', type=float, default=None, help='Sampling temperature')
@click.option('--max-iterations', type=int, default=None, help='Turn budget for the agent')
@click.option('--verbose', '-v', count=True, help='Log more (-v info, -vv debug)')
def recommend(city, when, target_date, provider, model, temperature, max_iterations, verbose):
    """Recommend the two most exciting events."""
    from .config import AgentRunConfig, load_config
    from .core.agent import run_agent
    from .providers import get_provider
    from .utils.dates import target_date_for, timeframe_key_for

    _setup_logging(verbose)
    ensure_data_dir()

    settings = load_config()
    try:
        run_config = AgentRunConfig.from_config(settings).with_overrides(
            model=model, temperature=temperature, max_iterations=max_iterations,
        )
    except ValueError as e:
        raise click.BadParameter(str(e))

    provider_name = provider or settings.get("provider", "openai")
    provider_cfg = (settings.get("providers", {}) or {}).get(provider_name, {}) or {}
    try:
        llm = get_provider(provider_name, base_url=provider_cfg.get("base_url"))
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--provider")
    if not llm.is_configured():
        console.print(f"[yellow]{provider_name} is not configured.[/yellow]\n")
        console.print(llm.get_config_help())
        raise SystemExit(1)
    if not model and not (settings.get("agent", {}) or {}).get("model"):
        run_config = run_config.with_overrides(model=llm.model)

    timeframe_key = timeframe_key_for(when)
    target_date = target_date or target_date_for(when)
    city_display = city.split(",")[0]

    console.print(f"Looking for exciting events in [bold]{city_display}[/bold] for '{when}'...")

    def on_progress(text: str):
        console.print(f"  [dim]•[/dim] {text}")

    answer = asyncio.run(run_agent(
        city, timeframe_key, target_date, on_progress,
        provider=llm, config=run_config,
    ))

    console.print()
    console.print(Panel(
        answer,
        title=f"Top Event Suggestions for {city_display} ({when})",
        border_style="cyan",
    ))


if __name__ == '__main__':
    main()

#!/usr/bin/env python3
"""
macro-memory CLI

Developer command-line interface over a SQLite-emulated content host.

Usage:
    macromem start                   # Ensure the store and run propagation
    macromem units                   # List content units and their markers
    macromem save NAME FILE          # Upload a script as a content unit
    macromem get KEY                 # Read a key (--scope / --global)
    macromem set KEY VALUE           # Write a key
    macromem rm KEY                  # Remove a key
    macromem dump                    # Dump a scope or the whole store
"""

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Awaitable, Callable

import aiofiles
import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.logging import RichHandler

from .bootstrap import BootstrapTemplate
from .config import Config, load_config
from .errors import MacroMemoryError
from .host import SQLiteHost
from .runtime import MemoryRuntime

console = Console()


def setup_logging(verbose: bool = False, level_name: str = 'INFO'):
    """Configure logging with rich output."""
    level = logging.DEBUG if verbose else getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=False)]
    )


def run_on_host(config: Config, work: Callable[[MemoryRuntime], Awaitable[Any]]) -> Any:
    """Open the host database, run ``work`` against a runtime, close the host."""
    async def run():
        async with SQLiteHost(config.host_db) as host:
            return await work(MemoryRuntime(host, config))

    try:
        return asyncio.run(run())
    except MacroMemoryError as e:
        console.print(f"[red]✗ {e}[/red]")
        sys.exit(1)


def parse_value(raw: str) -> Any:
    """Parse a CLI value as JSON, falling back to the plain string."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def scope_options(func):
    """--scope / --global options shared by the key commands."""
    func = click.option('--global', 'use_global', is_flag=True,
                        help='Use the global namespace')(func)
    func = click.option('--scope', '-s', default=None,
                        help='Scope name (default: the CLI identity)')(func)
    return func


@click.group()
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose output')
@click.option('--db', default=None, help='Host database file')
@click.option('--config', 'config_path', type=click.Path(), default=None,
              help='JSON config file')
@click.pass_context
def cli(ctx, verbose, db, config_path):
    """macro-memory - durable key-value storage on a content-unit host."""
    config = load_config(Path(config_path) if config_path else None)
    if db:
        config.host_db = Path(db)

    setup_logging(verbose, config.log_level)
    ctx.ensure_object(dict)
    ctx.obj['config'] = config


@cli.command()
@click.pass_context
def start(ctx):
    """Ensure the store exists and run one propagation pass."""
    config = ctx.obj['config']

    async def work(runtime: MemoryRuntime):
        created = await runtime.ensure_store()
        result = await runtime.propagate()
        return created, result

    created, result = run_on_host(config, work)

    lines = [
        "[bold green]Memory Store Ready[/bold green]\n",
        f"Storage unit: [cyan]{config.storage_unit_name}[/cyan]"
        f"{' [yellow](created)[/yellow]' if created else ''}",
    ]
    if result is not None:
        lines.append(f"Policy: [yellow]{result.policy.value}[/yellow]")
        lines.append(f"Patched: [green]{', '.join(result.patched) or '-'}[/green]")
        if result.failed:
            lines.append(f"Failed: [red]{', '.join(result.failed)}[/red]")
    else:
        lines.append("[red]Propagation did not run[/red]")

    console.print(Panel.fit("\n".join(lines), title="Startup"))


@cli.command()
@click.pass_context
def units(ctx):
    """List content units with their bootstrap markers."""
    config = ctx.obj['config']

    async def work(runtime: MemoryRuntime):
        return await runtime.host.get(with_content=True)

    unit_list = run_on_host(config, work)

    if not unit_list:
        console.print("[yellow]No content units[/yellow]")
        return

    template = BootstrapTemplate(config.host_module, config.self_unit_name)
    protected = {config.self_unit_name, config.storage_unit_name}

    table = Table(title="Content Units")
    table.add_column("Name", style="cyan")
    table.add_column("Active", justify="center")
    table.add_column("Host import", justify="center")
    table.add_column("Store import", justify="center")
    table.add_column("Identity", justify="center")

    def mark(flag: bool) -> str:
        return "[green]✓[/green]" if flag else "[red]✗[/red]"

    for unit in unit_list:
        content = unit.content or ''
        if unit.name in protected:
            table.add_row(unit.name, mark(unit.active), "-", "-", "-")
            continue
        table.add_row(
            unit.name,
            mark(unit.active),
            mark(template.has_host_import(content)),
            mark(template.has_store_import(content)),
            mark(template.has_identity(content)),
        )

    console.print(table)


@cli.command()
@click.argument('name')
@click.argument('file_path', type=click.Path(exists=True))
@click.option('--inactive', is_flag=True, help='Store the unit as inactive')
@click.pass_context
def save(ctx, name, file_path, inactive):
    """Upload a script file as a content unit."""
    config = ctx.obj['config']

    async def work(runtime: MemoryRuntime):
        async with aiofiles.open(file_path, 'r', encoding='utf-8') as f:
            text = await f.read()
        await runtime.host.save(name, text)
        if inactive:
            await runtime.host.set_active(name, False)
        return len(text)

    size = run_on_host(config, work)
    console.print(f"[green]✓ Saved {name} ({size} chars)[/green]")


@cli.command()
@click.argument('key')
@scope_options
@click.pass_context
def get(ctx, key, scope, use_global):
    """Read a key."""
    config = ctx.obj['config']

    async def work(runtime: MemoryRuntime):
        if use_global:
            return await runtime.engine.read_global(key)
        return await runtime.engine.read(key, scope=scope)

    value = run_on_host(config, work)
    console.print_json(data=value)


@cli.command('set')
@click.argument('key')
@click.argument('value')
@scope_options
@click.pass_context
def set_key(ctx, key, value, scope, use_global):
    """Write a key. VALUE is parsed as JSON when possible."""
    config = ctx.obj['config']
    parsed = parse_value(value)

    async def work(runtime: MemoryRuntime):
        if use_global:
            return await runtime.engine.write_global(key, parsed)
        return await runtime.engine.write(key, parsed, scope=scope)

    run_on_host(config, work)
    console.print(f"[green]✓ {key} = {json.dumps(parsed)}[/green]")


@cli.command('rm')
@click.argument('key')
@scope_options
@click.pass_context
def remove_key(ctx, key, scope, use_global):
    """Remove a key."""
    config = ctx.obj['config']

    async def work(runtime: MemoryRuntime):
        if use_global:
            return await runtime.engine.remove_global(key)
        return await runtime.engine.remove(key, scope=scope)

    run_on_host(config, work)
    console.print(f"[yellow]Removed {key}[/yellow]")


@cli.command()
@scope_options
@click.pass_context
def dump(ctx, scope, use_global):
    """Dump one scope, or the whole store with --global."""
    config = ctx.obj['config']

    async def work(runtime: MemoryRuntime):
        if use_global:
            return await runtime.engine.print_global()
        return await runtime.engine.print(scope=scope)

    document = run_on_host(config, work)
    console.print_json(data=document)


if __name__ == "__main__":
    cli()

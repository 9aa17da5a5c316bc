import sys

import click
from rich import box
from rich.markup import escape
from rich.table import Table

from ...registry.errors import CacheError
from ..cli_utils import CLIContext, console, pass_cli_context


@click.group()
def cache():
    """Inspect or clear the local registry cache."""
    pass


@cache.command("clear")
@click.option("--ref", "-r", help="Only clear the entry for this ref")
@pass_cli_context
def clear_cache(cli: CLIContext, ref: str | None):
    """Delete cached registry indexes."""
    registry_cache = cli.cache()
    try:
        if ref:
            registry_cache.clear_ref(ref)
            console.print(f"[green]✓[/green] Cleared cache for {escape(ref)}")
        else:
            registry_cache.clear()
            console.print("[green]✓[/green] Cleared registry cache")
    except CacheError as e:
        console.print(f"[red]✗ {escape(str(e))}[/red]", highlight=False, soft_wrap=True)
        sys.exit(1)


@cache.command("list")
@pass_cli_context
def list_cache(cli: CLIContext):
    """Show cached registry indexes and whether they are still fresh."""
    registry_cache = cli.cache()
    entries = registry_cache.entries()

    if not entries:
        console.print("[yellow]Cache is empty.[/yellow]")
        return

    table = Table(title=f"Cached refs ({len(entries)})", box=box.ROUNDED, title_style="bold cyan")
    table.add_column("Ref", style="cyan")
    table.add_column("Skills", justify="right")
    table.add_column("Fetched", style="dim")
    table.add_column("Fresh", justify="center")

    for entry in entries:
        table.add_row(
            entry.ref,
            str(len(entry.data.skills)),
            entry.fetched_at.isoformat(timespec="seconds"),
            "✓" if registry_cache.is_fresh(entry) else "expired",
        )

    console.print(table)
    console.print(f"\n[dim]Cache directory: {registry_cache.cache_dir}[/dim]")
